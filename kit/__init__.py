"""Kit - a minimal Git-compatible object store and repository layer."""

__version__ = '0.1.0'

from kit.core.repository import Repository
from kit.core.locator import locate
from kit.core.objects import KitObject, Blob

__all__ = [
    'Repository',
    'locate',
    'KitObject',
    'Blob',
]
