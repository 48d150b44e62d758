"""Error types raised by the Kit core.

Every failure in the core is raised as a subclass of KitError carrying
enough context to render a precise message. The core never prints or
exits; presentation belongs to the CLI.
"""

from pathlib import Path
from typing import Optional, Union

PathLike = Union[str, Path]


class KitError(Exception):
    """Base class for all Kit errors."""


class NotFound(KitError):
    """A required path does not exist."""

    def __init__(self, path: PathLike, message: Optional[str] = None):
        self.path = Path(path)
        super().__init__(message or f"[{self.path}] does not exist")


class RepositoryNotFound(NotFound):
    """No repository was found walking up from a start directory."""

    def __init__(self, path: PathLike):
        super().__init__(path, f"No repository found (last probed [{Path(path)}])")


class ObjectNotFound(NotFound):
    """No loose object matches the given id or prefix."""

    def __init__(self, object_id: str, path: Optional[PathLike] = None):
        self.object_id = object_id
        super().__init__(path or object_id, f"Object {object_id} not found")


class AlreadyExists(KitError):
    """The target path of a create operation already exists."""

    def __init__(self, path: PathLike):
        self.path = Path(path)
        super().__init__(f"[{self.path}] already exists")


class WrongShape(KitError):
    """A path exists but is the wrong kind of filesystem entry."""

    def __init__(self, path: PathLike, expected: str):
        self.path = Path(path)
        self.expected = expected
        super().__init__(f"[{self.path}] is not a {expected}")


class IoFailure(KitError):
    """
    An OS-level error wrapped with the operation that triggered it.

    The original OSError is chained as __cause__.
    """

    def __init__(
        self,
        operation: str,
        path: Optional[PathLike] = None,
        object_id: Optional[str] = None,
        reason: Optional[str] = None,
    ):
        self.operation = operation
        self.path = Path(path) if path is not None else None
        self.object_id = object_id
        self.reason = reason

        message = operation
        if object_id:
            message += f" [{object_id}]"
        if self.path is not None:
            message += f" at [{self.path}]"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class ConfigInvalid(KitError):
    """
    The repository config is unparsable or violates a required value.

    Attributes:
        key: Offending section or key (None for a parse failure)
        expected: Value that was required, if any
        actual: Value that was found (None when the key is missing)
        path: Config file path, when known
    """

    def __init__(
        self,
        key: Optional[str],
        expected: Optional[str] = None,
        actual: Optional[str] = None,
        path: Optional[PathLike] = None,
        reason: Optional[str] = None,
    ):
        self.key = key
        self.expected = expected
        self.actual = actual
        self.path = Path(path) if path is not None else None

        if reason is None:
            if actual is None and expected is None:
                reason = f"missing [{key}]"
            elif actual is None:
                reason = f"missing [{key}], expected [{expected}]"
            else:
                reason = f"unexpected value for [{key}], expected [{expected}], got [{actual}]"

        where = f" in [{self.path}]" if self.path is not None else ""
        super().__init__(f"Invalid config{where}: {reason}")


class ObjectIdInvalid(KitError):
    """A caller-supplied object id or prefix is not usable."""

    def __init__(self, object_id: str, reason: str = "not a 40-character lowercase hex id"):
        self.object_id = object_id
        self.reason = reason
        super().__init__(f"Invalid object id [{object_id}]: {reason}")


class ObjectMalformed(KitError):
    """A stored object could not be decoded."""

    def __init__(
        self,
        reason: str,
        path: Optional[PathLike] = None,
        object_id: Optional[str] = None,
    ):
        self.reason = reason
        self.path = Path(path) if path is not None else None
        self.object_id = object_id

        where = ""
        if object_id:
            where = f" [{object_id}]"
        elif self.path is not None:
            where = f" at [{self.path}]"
        super().__init__(f"Malformed object{where}: {reason}")


class ObjectUnsupported(KitError):
    """A stored object has a type tag with no registered object class."""

    def __init__(self, type_tag: str, object_id: Optional[str] = None):
        self.type_tag = type_tag
        self.object_id = object_id
        where = f" [{object_id}]" if object_id else ""
        super().__init__(f"Unsupported object type {type_tag!r}{where}")
