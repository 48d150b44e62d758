"""Utilities module for common helper functions.

This module contains:
- Path manipulation (root + segments joining, object id splitting)
"""

from kit.utils.paths import repo_path, repo_paths, split_object_id, is_object_id, is_object_prefix

__all__ = [
    'repo_path', 'repo_paths', 'split_object_id', 'is_object_id', 'is_object_prefix',
]
