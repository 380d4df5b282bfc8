"""
Discovery of image files across several directories.

The index keeps at most one path per basename (when deduplication is on,
the first directory in the configured order wins) and orders the paths by
basename instead of full path, so files from different directories that
share a naming scheme end up interleaved.
"""

import logging
import os
from collections.abc import Callable, Iterator

from imageset import utils
from imageset.config import DatasetConfig
from imageset.constants import LOGGER_NAME
from imageset.exceptions import StructuralConfigError

logger = logging.getLogger(LOGGER_NAME)


class PathIndex:
    """Lazily built, cached list of absolute image paths

    Parameters
    ----------
    config : DatasetConfig
        Read when the index is built. The directories, extension and
        deduplication flag in use at that moment are kept as a snapshot

    list_files : Callable, default=utils.list_files
        Returns the file names of a directory
    """

    def __init__(
        self,
        config: DatasetConfig,
        list_files: Callable[[str], list[str]] = utils.list_files,
    ):
        self.config = config
        self.list_files = list_files
        self._paths: tuple[str, ...] | None = None
        self._built_from: tuple[tuple[str, ...], str, bool] | None = None
        self.ignored_duplicates = 0

    @property
    def is_built(self) -> bool:
        return self._paths is not None

    @property
    def is_stale(self) -> bool:
        """True if the config changed since the cached index was built"""
        return self.is_built and self._built_from != self.config.discovery_key()

    @property
    def paths(self) -> tuple[str, ...]:
        """Sorted paths, building the index on first access"""
        if self._paths is None:
            self.build()
        return self._paths

    def invalidate(self) -> None:
        """Drops the cached paths, the next access rescans the directories"""
        self._paths = None
        self._built_from = None
        self.ignored_duplicates = 0

    def build(self) -> tuple[str, ...]:
        """Scans the configured directories and caches the sorted paths

        Returns
        -------
        Absolute file paths sorted by basename

        Raises
        ------
        StructuralConfigError
            If no directory is configured, or if a directory is missing or
            holds no file ending with the configured extension. Nothing is
            cached in that case
        """
        self.invalidate()
        key = self.config.discovery_key()
        directories, extension, dedup = key
        if not directories:
            raise StructuralConfigError(None, extension)

        files = []
        seen = set()
        ignored = 0

        for directory in directories:
            if not os.path.isdir(directory):
                raise StructuralConfigError(directory, extension, "does not exist")

            contains_images = False
            for name in self.list_files(directory):
                if not name.endswith(extension):
                    continue
                contains_images = True

                basename = os.path.basename(name)
                if dedup and basename in seen:
                    ignored += 1
                    continue
                files.append(os.path.abspath(os.path.join(directory, name)))
                seen.add(basename)

            if not contains_images:
                raise StructuralConfigError(directory, extension)

        files.sort(key=os.path.basename)

        self._paths = tuple(files)
        self._built_from = key
        self.ignored_duplicates = ignored
        logger.info(
            "Found %d filepaths in %d directories. Ignored %d filepaths because of duplicates.",
            len(files),
            len(directories),
            ignored,
        )
        return self._paths

    def __len__(self) -> int:
        return len(self.paths)

    def __iter__(self) -> Iterator[str]:
        return iter(self.paths)

    def __getitem__(self, index):
        return self.paths[index]
