"""Path normalization and path keys."""

import os
import sys
from pathlib import Path

_SEPARATORS = os.sep + (os.altsep or "")


def expand_path(path: str) -> Path:
    """Expand ~ and environment variables in path."""
    return Path(os.path.expanduser(os.path.expandvars(path)))


def default_case_sensitive() -> bool:
    """Whether path comparison is case-sensitive on this platform."""
    return sys.platform not in ("win32", "darwin")


def normalize_path(path: str | os.PathLike | None) -> str:
    """
    Normalize a path to its absolute form without trailing separators.

    Symlinks are not resolved. A filesystem root keeps its separator
    ("/" stays "/", "C:\\" stays "C:\\").

    Args:
        path: Path to normalize; ~ and environment variables are kept literally

    Returns:
        Normalized absolute path string
    """
    if path is None:
        return ""
    raw = os.fspath(path)
    if not raw.strip():
        return raw
    full = os.path.abspath(raw)
    drive, rest = os.path.splitdrive(full)
    rest = rest.rstrip(_SEPARATORS)
    if not rest:
        return drive + os.sep
    return drive + rest


def path_key(path: str | os.PathLike | None, case_sensitive: bool | None = None) -> str:
    """
    Comparison-ready identity for a directory.

    Args:
        path: Path to convert
        case_sensitive: Comparison policy; None uses the platform default

    Returns:
        Normalized path, case-folded unless comparison is case-sensitive
    """
    if case_sensitive is None:
        case_sensitive = default_case_sensitive()
    normalized = normalize_path(path)
    return normalized if case_sensitive else normalized.casefold()


def parent_path(path: str) -> str | None:
    """Parent directory of a normalized path, or None at a filesystem root."""
    parent = os.path.dirname(path)
    if not parent or parent == path:
        return None
    return parent


def display_name(path: str) -> str:
    """Last component of a path, or the path itself for a filesystem root."""
    return os.path.basename(path) or path


def is_inside(path: str, root: str, case_sensitive: bool | None = None) -> bool:
    """Whether path equals root or lies somewhere below it."""
    path_cmp = path_key(path, case_sensitive)
    root_cmp = path_key(root, case_sensitive)
    if path_cmp == root_cmp:
        return True
    prefix = root_cmp if root_cmp.endswith(tuple(_SEPARATORS)) else root_cmp + os.sep
    return path_cmp.startswith(prefix)
