"""Repository discovery."""

import logging
from pathlib import Path
from typing import Union

from .errors import RepositoryNotFound

logger = logging.getLogger(__name__)

DEFAULT_MARKER = '.git'


def locate(start_dir: Union[str, Path] = '.', marker: str = DEFAULT_MARKER) -> Path:
    """
    Find the nearest repository root at or above start_dir.

    Probes start_dir and then each parent up to and including the
    filesystem root for an immediate child directory named marker.
    A file of that name does not count.

    Args:
        start_dir: Directory to start from
        marker: Name of the metadata directory

    Returns:
        Path: Absolute path of the first matching directory

    Raises:
        RepositoryNotFound: If the filesystem root is reached without a
            match; carries the last probed path
    """
    current = Path(start_dir).resolve()

    while True:
        logger.debug("Probing %s for %s", current, marker)
        if (current / marker).is_dir():
            return current

        # Reached filesystem root
        if current == current.parent:
            raise RepositoryNotFound(current)

        current = current.parent
