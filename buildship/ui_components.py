"""
BuildShip - UI Components
Standardized command headers
"""

from rich.console import Console
from rich.markup import escape

BRAND = "buildship"

# Color scheme
BRAND_COLOR = "color(214)"
SUCCESS_COLOR = "green"
WARNING_COLOR = "yellow"
ERROR_COLOR = "red"


def show_header(
    title: str,
    subtitle: str = None,
    details: dict = None,
    console: Console = None,
):
    """
    Display a standardized command header.

    Args:
        title: Main title (e.g., "Package & Deploy")
        subtitle: Optional subtitle line
        details: Additional key-value pairs to display
        console: Rich Console instance (creates new if None)

    Example:
        show_header(
            title="Package & Deploy",
            details={"Source": "dist", "Target": "deploy@example.com:22"}
        )
    """
    if console is None:
        console = Console()

    prefix = f" [bold {BRAND_COLOR}]{BRAND}[/bold {BRAND_COLOR}] [dim]›[/dim]"

    console.print(f"{prefix} [bold white]{escape(title)}[/bold white]")

    if subtitle:
        console.print(f"{prefix} [dim]{escape(subtitle)}[/dim]")

    if details:
        for key, value in details.items():
            console.print(f"{prefix} {escape(str(key))}: [cyan]{escape(str(value))}[/cyan]")

    # Single blank line after header
    console.print()
