"""Archive service for packaging build output."""

import asyncio
import os
import zipfile
from pathlib import Path
from typing import Iterator, Optional, Tuple, Union

from buildship.constants import ARCHIVE_COMPRESSION_LEVEL
from buildship.exceptions import ArchiveError
from buildship.logger import DeployLogger
from buildship.models.results import ArchiveResult


class ArchiveBuilder:
    """Builds a deflate-compressed ZIP archive from a build directory."""

    def __init__(
        self,
        logger: Optional[DeployLogger] = None,
        compression_level: int = ARCHIVE_COMPRESSION_LEVEL,
    ):
        """
        Initialize archive builder.

        Args:
            logger: Logger receiving progress and size events
            compression_level: zlib level (9 = maximum effort)
        """
        self.logger = logger or DeployLogger(quiet=True)
        self.compression_level = compression_level

    async def build(self, source_dir: Union[str, Path], archive_name: str) -> ArchiveResult:
        """
        Archive every entry under source_dir into source_dir/archive_name.

        An existing archive at that path is replaced, never appended to, and
        is itself left out of the walk.

        Args:
            source_dir: Build output directory
            archive_name: File name of the archive inside source_dir

        Returns:
            ArchiveResult with the resolved path, byte size and entry count

        Raises:
            ArchiveError: If the directory cannot be read or the archive written
        """
        source = Path(source_dir)
        archive_path = source / archive_name

        self.logger.log(f"Packaging {source} into {archive_path}", source_dir=str(source))
        result = await asyncio.to_thread(self._write_archive, source, archive_path)

        self.logger.success(
            f"Archive created: {result.size_bytes} bytes",
            size_bytes=result.size_bytes,
            entries=result.entry_count,
        )
        self.logger.log(f"Archive path: {result.path}", path=str(result.path))
        return result

    def _write_archive(self, source: Path, archive_path: Path) -> ArchiveResult:
        if not source.is_dir():
            raise ArchiveError(
                f"Source directory not found: {source}",
                context="Run the build before packaging",
            )

        entry_count = 0
        try:
            with zipfile.ZipFile(
                archive_path,
                "w",
                compression=zipfile.ZIP_DEFLATED,
                compresslevel=self.compression_level,
                # Pre-1980 mtimes (SOURCE_DATE_EPOCH=0) are clamped to 1980
                strict_timestamps=False,
            ) as archive:
                for path, arcname in self.iter_entries(source, archive_path):
                    archive.write(path, arcname)
                    entry_count += 1
            size = archive_path.stat().st_size
        except (OSError, ValueError, zipfile.BadZipFile, zipfile.LargeZipFile) as e:
            archive_path.unlink(missing_ok=True)
            raise ArchiveError(
                f"Failed to write archive {archive_path}", context=str(e)
            ) from e

        return ArchiveResult(
            path=archive_path.resolve(), size_bytes=size, entry_count=entry_count
        )

    @staticmethod
    def iter_entries(source: Path, archive_path: Path) -> Iterator[Tuple[Path, str]]:
        """
        Yield (path, archive name) pairs in a stable order.

        Walk errors are raised rather than skipped so a half-read tree never
        turns into a silently incomplete archive.
        """
        excluded = os.path.abspath(archive_path)

        def on_error(error: OSError):
            raise error

        for root, dirnames, filenames in os.walk(source, onerror=on_error):
            dirnames.sort()
            root_path = Path(root)
            for dirname in dirnames:
                path = root_path / dirname
                yield path, path.relative_to(source).as_posix() + "/"
            for filename in sorted(filenames):
                path = root_path / filename
                if os.path.abspath(path) == excluded:
                    continue
                yield path, path.relative_to(source).as_posix()
