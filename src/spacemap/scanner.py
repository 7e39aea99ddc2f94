"""Directory size aggregation for spacemap."""

import logging
import os
import shutil
from typing import Callable, Protocol

from spacemap.cache import SizeCache
from spacemap.errors import RootUnreadableError, ScanCancelledError
from spacemap.models import DiskUsage, ScanResult
from spacemap.paths import default_case_sensitive, normalize_path, parent_path, path_key

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int], None]


class CancelToken(Protocol):
    """Anything with an is_set() method, e.g. threading.Event."""

    def is_set(self) -> bool: ...


def _check_cancel(cancel: CancelToken | None, root: str) -> None:
    if cancel is not None and cancel.is_set():
        raise ScanCancelledError(root)


def discover_directories(root: str, cancel: CancelToken | None = None) -> list[str]:
    """
    Collect every directory reachable from root, root first.

    Uses an explicit stack so deep trees cannot exhaust the interpreter's
    recursion limit. Symlinked directories are not followed. A directory
    whose entries cannot be listed stays in the result with no children.

    Args:
        root: Normalized root directory
        cancel: Optional cancellation token checked before each directory

    Returns:
        List of directory paths in discovery order

    Raises:
        RootUnreadableError: If root itself cannot be listed
        ScanCancelledError: If cancel is set during the walk
    """
    directories: list[str] = []
    stack = [root]

    while stack:
        _check_cancel(cancel, root)
        current = stack.pop()
        directories.append(current)
        try:
            with os.scandir(current) as entries:
                for entry in entries:
                    try:
                        if entry.is_dir(follow_symlinks=False):
                            stack.append(entry.path)
                    except (PermissionError, OSError):
                        continue
        except (PermissionError, OSError) as e:
            if current == root:
                raise RootUnreadableError(root, e.strerror or str(e)) from e
            logger.debug("Skipping children of %s: %s", current, e)

    return directories


def get_direct_size(path: str) -> int:
    """
    Sum the sizes of the files directly inside a directory.

    Subdirectories are not descended into. Files whose metadata cannot be
    read count as zero.
    """
    total = 0
    try:
        with os.scandir(path) as entries:
            for entry in entries:
                try:
                    if entry.is_file(follow_symlinks=False):
                        total += entry.stat(follow_symlinks=False).st_size
                except (PermissionError, OSError):
                    continue
    except (PermissionError, OSError) as e:
        logger.debug("Cannot list files in %s: %s", path, e)
    return total


def aggregate_sizes(directories: list[str], direct_sizes: dict[str, int]) -> dict[str, int]:
    """
    Roll direct sizes up into aggregate sizes.

    Directories are visited longest path first, so every child is added to
    its parent before the parent is added to its own parent. Parents outside
    the discovered set (the root's parent) are never credited.

    Args:
        directories: Discovered directory paths
        direct_sizes: Bytes of files directly inside each directory

    Returns:
        Aggregate bytes per directory
    """
    totals = {directory: direct_sizes.get(directory, 0) for directory in directories}
    for directory in sorted(directories, key=len, reverse=True):
        parent = parent_path(directory)
        if parent is None or parent not in totals:
            continue
        totals[parent] += totals[directory]
    return totals


class DirectoryAggregator:
    """Walks a directory tree and computes aggregate sizes, with caching."""

    def __init__(
        self,
        cache: SizeCache | None = None,
        case_sensitive: bool | None = None,
        strict_root: bool = True,
    ) -> None:
        self.cache = cache if cache is not None else SizeCache()
        self.case_sensitive = (
            default_case_sensitive() if case_sensitive is None else case_sensitive
        )
        self.strict_root = strict_root

    @classmethod
    def from_settings(cls, settings, cache: SizeCache | None = None) -> "DirectoryAggregator":
        """Build an aggregator from a Settings object."""
        return cls(
            cache=cache,
            case_sensitive=settings.case_sensitive,
            strict_root=settings.strict_root,
        )

    def cache_key(self, root: str) -> str:
        return path_key(root, self.case_sensitive)

    def scan(
        self,
        root: str,
        progress: ProgressCallback | None = None,
        cancel: CancelToken | None = None,
    ) -> ScanResult:
        """
        Compute the aggregate size of every directory under root.

        A cached result for the same root is returned without touching the
        filesystem. Failures below the root are logged and counted as zero.

        Args:
            root: Directory to scan (may contain ~)
            progress: Optional callback(percent) called after each directory
            cancel: Optional token; when set the scan stops

        Returns:
            ScanResult owned by the caller

        Raises:
            RootUnreadableError: If root cannot be listed and strict_root is set
            ScanCancelledError: If cancel is set before the scan finishes
        """
        root_path = normalize_path(root)
        key = self.cache_key(root_path)

        cached = self.cache.get(key)
        if cached is not None:
            logger.debug("Cache hit for %s", root_path)
            if progress:
                progress(100)
            return cached

        try:
            directories = discover_directories(root_path, cancel)
        except RootUnreadableError:
            if self.strict_root:
                raise
            logger.warning("Cannot read %s, reporting it as empty", root_path)
            return ScanResult(
                root=root_path,
                sizes={root_path: 0},
                case_sensitive=self.case_sensitive,
            )

        logger.debug("Discovered %d directories under %s", len(directories), root_path)

        total_dirs = len(directories)
        direct_sizes: dict[str, int] = {}
        if total_dirs == 0 and progress:
            progress(100)
        for i, directory in enumerate(directories):
            _check_cancel(cancel, root_path)
            direct_sizes[directory] = get_direct_size(directory)
            if progress:
                progress((i + 1) * 100 // total_dirs)

        sizes = aggregate_sizes(directories, direct_sizes)
        sizes.setdefault(root_path, 0)

        result = ScanResult(root=root_path, sizes=sizes, case_sensitive=self.case_sensitive)
        self.cache.put(key, result)
        logger.info(
            "Scanned %s: %d directories, %d bytes",
            root_path,
            result.directory_count,
            result.total_bytes,
        )
        return result

    def clear_cache(self, root: str | None = None) -> None:
        """Evict the cached result for root, or every result when root is empty."""
        if not root:
            self.cache.clear()
            return
        self.cache.evict(self.cache_key(root))


def get_disk_usage(path: str = "/") -> DiskUsage:
    """
    Get capacity of the volume holding path.

    Args:
        path: Any path on the volume (default: /)

    Returns:
        DiskUsage with total, used, and free bytes
    """
    usage = shutil.disk_usage(normalize_path(path))
    return DiskUsage(
        total_bytes=usage.total,
        used_bytes=usage.used,
        free_bytes=usage.free,
        mount_point=normalize_path(path),
    )
