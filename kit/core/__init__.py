"""Core functionality for Kit.

This module contains:
- Kit objects (Blob) and the type-tag registry
- The loose object codec (framing, compression, hashing)
- Repository creation, validation and discovery
- Configuration management
- The error taxonomy

For path helpers, see kit.utils
"""

from kit.core.errors import (KitError, NotFound, RepositoryNotFound, ObjectNotFound,
                             AlreadyExists, WrongShape, IoFailure, ConfigInvalid,
                             ObjectIdInvalid, ObjectMalformed, ObjectUnsupported)
from kit.core.objects import KitObject, Blob, OBJECT_TYPES, build_object
from kit.core.codec import ObjectHeader, frame, parse_header, encode, decode
from kit.core.repository import Repository
from kit.core.locator import locate
from kit.core.hash import hash_object
from kit.core.config import Config, check_core

__all__ = [
    'KitError',
    'NotFound',
    'RepositoryNotFound',
    'ObjectNotFound',
    'AlreadyExists',
    'WrongShape',
    'IoFailure',
    'ConfigInvalid',
    'ObjectIdInvalid',
    'ObjectMalformed',
    'ObjectUnsupported',
    'KitObject',
    'Blob',
    'OBJECT_TYPES',
    'build_object',
    'ObjectHeader',
    'frame',
    'parse_header',
    'encode',
    'decode',
    'Repository',
    'locate',
    'hash_object',
    'Config',
    'check_core',
]
