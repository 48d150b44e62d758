"""Loose object codec.

A loose object on disk is the zlib-compressed form of

    <type> SPACE <decimal size> NUL <payload>

The object id is the SHA-1 of the uncompressed framed bytes. The codec
knows nothing about object types beyond the tag string; dispatching a
decoded tag to an object class happens in kit.core.objects.
"""

import zlib
from pathlib import Path
from typing import NamedTuple, Optional, Tuple, Union

from .errors import ObjectMalformed
from .hash import hash_object


class ObjectHeader(NamedTuple):
    """Parsed `<type> <size>` header of a framed object."""

    type_tag: str
    declared_size: int


def frame(type_tag: str, payload: bytes) -> bytes:
    """
    Prepend the `<type> <size>\\0` header to a payload.

    Args:
        type_tag: Object type (e.g. 'blob')
        payload: Raw object content

    Returns:
        bytes: Framed, uncompressed object
    """
    return f"{type_tag} {len(payload)}\0".encode() + payload


def parse_header(
    raw: bytes,
    path: Optional[Union[str, Path]] = None,
    object_id: Optional[str] = None,
) -> Tuple[ObjectHeader, bytes]:
    """
    Split a framed object into its header and payload.

    The type tag is everything before the first space, decoded leniently
    (invalid UTF-8 is replaced, never rejected). The size is the run of
    ASCII digits between that space and the first NUL after it, and must
    match the payload length exactly.

    Args:
        raw: Decompressed object bytes
        path: Source path, for error context
        object_id: Object id, for error context

    Returns:
        Tuple of (ObjectHeader, payload)

    Raises:
        ObjectMalformed: On a missing delimiter, a bad size field, or a
            size that disagrees with the payload length
    """
    space_index = raw.find(b' ')
    if space_index < 0:
        raise ObjectMalformed("missing SPACE in header", path, object_id)

    nul_index = raw.find(b'\0', space_index + 1)
    if nul_index < 0:
        raise ObjectMalformed("missing NUL in header", path, object_id)

    type_tag = raw[:space_index].decode('utf-8', errors='replace')

    size_field = raw[space_index + 1:nul_index]
    if not size_field or not size_field.isdigit():
        raise ObjectMalformed(
            f"unparsable object size {size_field!r}", path, object_id
        )
    declared_size = int(size_field)

    payload = raw[nul_index + 1:]
    if declared_size != len(payload):
        raise ObjectMalformed(
            f"size mismatch: header declares {declared_size}, payload is {len(payload)}",
            path,
            object_id,
        )

    return ObjectHeader(type_tag, declared_size), payload


def encode(type_tag: str, payload: bytes) -> Tuple[str, bytes]:
    """
    Frame and compress an object.

    Args:
        type_tag: Object type
        payload: Raw object content

    Returns:
        Tuple of (object id, compressed bytes). The id is computed over
        the uncompressed framed bytes.
    """
    framed = frame(type_tag, payload)
    return hash_object(framed), zlib.compress(framed)


def decode(
    compressed: bytes,
    path: Optional[Union[str, Path]] = None,
    object_id: Optional[str] = None,
) -> Tuple[ObjectHeader, bytes]:
    """
    Decompress and unframe a stored object.

    Loose objects are small enough to inflate in one shot.

    Args:
        compressed: Bytes as read from disk
        path: Source path, for error context
        object_id: Object id, for error context

    Returns:
        Tuple of (ObjectHeader, payload)

    Raises:
        ObjectMalformed: If inflation or header parsing fails
    """
    try:
        raw = zlib.decompress(compressed)
    except zlib.error as e:
        raise ObjectMalformed(f"decompression failed: {e}", path, object_id) from e

    return parse_header(raw, path, object_id)
