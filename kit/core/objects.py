"""Kit objects.

Stored objects form a closed set of variants keyed by type tag. Only
blobs exist today; further variants are added by subclassing KitObject
and registering the class in OBJECT_TYPES.
"""

from abc import ABC, abstractmethod
from typing import Dict, Optional, Type

from .codec import ObjectHeader, frame
from .errors import ObjectUnsupported
from .hash import hash_object


class KitObject(ABC):
    """Base class for all Kit objects."""

    type_tag: str = ''

    def __init__(self):
        self._hash: Optional[str] = None

    @abstractmethod
    def serialize(self) -> bytes:
        """
        Serialize object to bytes.

        Returns:
            bytes: Serialized object data (without header)
        """
        pass

    @abstractmethod
    def deserialize(self, data: bytes) -> None:
        """
        Deserialize object from bytes.

        Args:
            data: Serialized object data (without header)
        """
        pass

    @property
    def type(self) -> str:
        """Object type tag (e.g. 'blob')."""
        return self.type_tag

    def compute_hash(self) -> str:
        """
        Compute and cache object id.

        Objects are hashed with a header containing the type and size.
        Format: <type> <size>\\0<content>

        Returns:
            str: 40-character SHA-1 hash
        """
        if self._hash is None:
            self._hash = hash_object(frame(self.type, self.serialize()))
        return self._hash

    @property
    def hash(self) -> str:
        """Object id."""
        return self.compute_hash()


class Blob(KitObject):
    """
    Represents file content.

    A blob stores the raw content of a file without any metadata
    like filename or permissions.
    """

    type_tag = 'blob'

    def __init__(self, data: Optional[bytes] = None):
        """
        Initialize a blob.

        Args:
            data: File content as bytes
        """
        super().__init__()
        self.data = data or b''

    def serialize(self) -> bytes:
        return self.data

    def deserialize(self, data: bytes) -> None:
        self.data = data
        self._hash = None

    @classmethod
    def from_file(cls, filepath: str) -> 'Blob':
        """
        Create blob from file.

        Args:
            filepath: Path to file

        Returns:
            Blob: New blob containing file content
        """
        with open(filepath, 'rb') as f:
            return cls(f.read())

    def __repr__(self) -> str:
        """String representation of blob."""
        return f"Blob(hash={self.hash[:7]}, size={len(self.data)})"


OBJECT_TYPES: Dict[str, Type[KitObject]] = {
    Blob.type_tag: Blob,
}


def build_object(header: ObjectHeader, payload: bytes, object_id: Optional[str] = None) -> KitObject:
    """
    Turn a decoded header and payload into a concrete object.

    Args:
        header: Parsed object header
        payload: Object content following the header
        object_id: Id the object was read under, for error context

    Returns:
        KitObject: Instance of the class registered for the type tag

    Raises:
        ObjectUnsupported: If no class is registered for the type tag
    """
    cls = OBJECT_TYPES.get(header.type_tag)
    if cls is None:
        raise ObjectUnsupported(header.type_tag, object_id)

    obj = cls()
    obj.deserialize(payload)
    return obj
