"""
Stage Observers

Each pipeline stage (packaging, deployment) reports its outcome to one
observer. Observers are fire-and-forget: their own exceptions propagate to
the caller untouched.
"""

from typing import Callable, Optional, Protocol, runtime_checkable


@runtime_checkable
class StageObserver(Protocol):
    """Receives the terminal outcome of one pipeline stage."""

    def on_success(self) -> None: ...

    def on_error(self, error: Exception) -> None: ...


class NullObserver:
    """Observer that ignores every notification."""

    def on_success(self) -> None:
        pass

    def on_error(self, error: Exception) -> None:
        pass


class CallbackObserver:
    """Adapts a pair of optional callables to the StageObserver interface."""

    def __init__(
        self,
        on_success: Optional[Callable[[], None]] = None,
        on_error: Optional[Callable[[Exception], None]] = None,
    ):
        self._on_success = on_success
        self._on_error = on_error

    def on_success(self) -> None:
        if self._on_success:
            self._on_success()

    def on_error(self, error: Exception) -> None:
        if self._on_error:
            self._on_error(error)

    def __repr__(self) -> str:
        return (
            f"CallbackObserver(on_success={self._on_success is not None}, "
            f"on_error={self._on_error is not None})"
        )
