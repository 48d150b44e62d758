"""Pure path helpers.

None of these touch the filesystem; they only build paths from a root
and a list of segments.
"""

import re
from pathlib import Path
from typing import Iterable, Tuple, Union

OBJECT_ID_RE = re.compile(r'[0-9a-f]{40}')
OBJECT_PREFIX_RE = re.compile(r'[0-9a-f]{4,40}')


def repo_path(root: Union[str, Path], *segments: str) -> Path:
    """
    Join segments onto a root.

    Example: repo_path(git_dir, 'refs', 'heads') -> git_dir/refs/heads

    Args:
        root: Base directory
        *segments: Path components to append in order

    Returns:
        Path: The joined path
    """
    return Path(root).joinpath(*segments)


def repo_paths(root: Union[str, Path], entries: Iterable[str]) -> Tuple[Path, ...]:
    """Join each slash-separated entry onto root."""
    return tuple(repo_path(root, *entry.split('/')) for entry in entries)


def is_object_id(value: str) -> bool:
    """Return True if value is a full 40-character lowercase hex id."""
    return bool(OBJECT_ID_RE.fullmatch(value))


def is_object_prefix(value: str) -> bool:
    """Return True if value can be used as an abbreviated object id."""
    return bool(OBJECT_PREFIX_RE.fullmatch(value))


def split_object_id(object_id: str) -> Tuple[str, str]:
    """
    Split an object id into its fan-out directory and file name.

    Objects are stored in subdirectories named by the first 2 characters
    of the id, with the remaining 38 characters as the filename.

    Args:
        object_id: 40-character hex id

    Returns:
        Tuple of (directory, filename)
    """
    return object_id[:2], object_id[2:]
