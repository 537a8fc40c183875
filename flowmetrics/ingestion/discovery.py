"""File discovery for the ingestion module.

This module finds the source files of a project. Directory entries are
visited in name order and directories are recursed into where they are
encountered, so the resulting order is deterministic and depth-first.
"""

import os
from pathlib import Path

import structlog

from ..parser import BaseParser
from .models import DiscoveryConfig, FileInfo

logger = structlog.get_logger(__name__)


class FileDiscovery:
    """Discovers source files under a root directory.

    Attributes:
        config: Discovery configuration (extensions and exclusions).
    """

    def __init__(self, config: DiscoveryConfig | None = None) -> None:
        """Initialize the FileDiscovery.

        Args:
            config: Discovery configuration. Uses defaults if not provided.
        """
        self.config = config or DiscoveryConfig()
        logger.debug("FileDiscovery initialized", config=self.config.model_dump())

    def discover(self, root: str | Path) -> list[FileInfo]:
        """Discover all source files under a root directory.

        Excluded and hidden entries are skipped, files and directories
        alike. Directories that cannot be read are skipped silently.
        Symbolic links are not followed.

        Args:
            root: Root directory to walk.

        Returns:
            FileInfo for every matching file, in depth-first name order.
        """
        root_path = Path(root) if isinstance(root, str) else root

        if not root_path.exists():
            logger.error("Root path does not exist", root=str(root_path))
            return []

        if not root_path.is_dir():
            logger.error("Root path is not a directory", root=str(root_path))
            return []

        files: list[FileInfo] = []
        self._walk(root_path, root_path, files)

        logger.info("File discovery complete", root=str(root_path), files=len(files))
        return files

    def _walk(self, directory: Path, root: Path, files: list[FileInfo]) -> None:
        try:
            with os.scandir(directory) as iterator:
                entries = sorted(iterator, key=lambda entry: entry.name)
        except OSError as e:
            logger.debug("Skipping unreadable directory", directory=str(directory), error=str(e))
            return

        for entry in entries:
            if self.config.is_excluded(entry.name):
                continue

            try:
                is_dir = entry.is_dir(follow_symlinks=False)
                is_file = not is_dir and entry.is_file(follow_symlinks=False)
            except OSError as e:
                logger.debug("Skipping unreadable entry", entry=entry.path, error=str(e))
                continue

            path = directory / entry.name
            if is_dir:
                self._walk(path, root, files)
            elif is_file and path.suffix in self.config.extensions:
                files.append(self._file_info(path, root, entry))

    def _file_info(self, path: Path, root: Path, entry: os.DirEntry) -> FileInfo:
        try:
            size = entry.stat(follow_symlinks=False).st_size
        except OSError:
            size = 0

        return FileInfo(
            path=str(path),
            relative_path=path.relative_to(root).as_posix(),
            language=BaseParser.detect_language(path),
            size=size,
        )
