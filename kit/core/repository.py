"""Repository management for Kit."""

import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Iterator, Optional, Union

from kit.utils.paths import (is_object_id, is_object_prefix, repo_path,
                             repo_paths, split_object_id)
from . import codec
from .config import DEFAULT_CORE, Config, Sections, check_core
from .errors import (AlreadyExists, IoFailure, NotFound, ObjectIdInvalid,
                     ObjectNotFound, WrongShape)
from .locator import DEFAULT_MARKER, locate
from .objects import Blob, KitObject, build_object

logger = logging.getLogger(__name__)

DESCRIPTION = "Unnamed repository; edit this file 'description' to name the repository.\n"
HEAD_CONTENT = "ref: refs/heads/master\n"

# Created by create(), in order
SKELETON_DIRS = ('branches', 'objects', 'refs', 'refs/tags', 'refs/heads')

# Checked by validate(), in order
REQUIRED_DIRS = ('branches', 'objects', 'refs/tags', 'refs/heads')
REQUIRED_FILES = ('description', 'HEAD')

# Loose objects are immutable once written, as in Git
OBJECT_FILE_MODE = 0o444


def _ensure_dir(path: Path) -> None:
    if not path.exists():
        raise NotFound(path, f"Directory [{path}] does not exist")
    if not path.is_dir():
        raise WrongShape(path, 'directory')


def _ensure_file(path: Path) -> None:
    if not path.exists():
        raise NotFound(path, f"File [{path}] does not exist")
    if not path.is_file():
        raise WrongShape(path, 'file')


def _first_missing_ancestor(path: Path) -> Path:
    """Return the top-most directory that mkdir(parents=True) would create."""
    created = path
    while not created.parent.exists() and created.parent != created:
        created = created.parent
    return created


class Repository:
    """
    Represents a Kit repository.

    A repository is a work tree with a metadata directory (.git by
    default) holding the object database, refs and config. Handles are
    normally obtained through create(), open() or find_repository(),
    all of which validate the on-disk shape.
    """

    def __init__(self, path: Union[str, Path] = '.', marker: str = DEFAULT_MARKER):
        """
        Build a handle without touching the filesystem.

        Args:
            path: Path to repository root (defaults to current directory)
            marker: Name of the metadata directory
        """
        self.work_tree = Path(path).resolve()
        self.marker = marker
        self.git_dir = repo_path(self.work_tree, marker)
        self.objects_dir = repo_path(self.git_dir, 'objects')
        self.refs_dir = repo_path(self.git_dir, 'refs')
        self.heads_dir = repo_path(self.refs_dir, 'heads')
        self.tags_dir = repo_path(self.refs_dir, 'tags')
        self.head_file = repo_path(self.git_dir, 'HEAD')
        self.description_file = repo_path(self.git_dir, 'description')
        self.config_file = repo_path(self.git_dir, 'config')

    @property
    def config_store(self) -> Config:
        """Config reader/writer for this repository."""
        return Config(self.config_file)

    @property
    def config(self) -> Sections:
        """Repository config sections, re-read on every access."""
        return self.config_store.load()

    @classmethod
    def create(cls, path: Union[str, Path], marker: str = DEFAULT_MARKER) -> 'Repository':
        """
        Create a new repository at a path that does not exist yet.

        Creates this structure:
        <path>/
        └── .git/
            ├── branches/
            ├── objects/       # Object database
            ├── refs/
            │   ├── heads/     # Branch references
            │   └── tags/      # Tag references
            ├── description
            ├── HEAD           # ref: refs/heads/master
            └── config         # [core] format version 0

        If any step fails, every directory this call created (the work
        tree and any missing parents) is removed again before the error
        propagates.

        Args:
            path: Work tree to create
            marker: Name of the metadata directory

        Returns:
            Repository: Validated handle

        Raises:
            AlreadyExists: If path already exists; nothing is modified
            IoFailure: If a filesystem step fails
        """
        repo = cls(path, marker)
        work_tree = repo.work_tree

        if work_tree.exists() or work_tree.is_symlink():
            raise AlreadyExists(work_tree)

        created_root = _first_missing_ancestor(work_tree)
        try:
            try:
                work_tree.mkdir(parents=True)
            except OSError as e:
                raise IoFailure("Error while creating work tree", work_tree, reason=e.strerror) from e

            repo._write_skeleton()
            repo.validate()
        except Exception:
            # mkdir may have created missing parents before failing on the leaf
            if created_root.exists():
                logger.debug("Creating %s failed, removing %s", work_tree, created_root)
                try:
                    shutil.rmtree(created_root)
                except OSError as cleanup_error:
                    logger.warning("Could not remove partial repository %s: %s",
                                   created_root, cleanup_error)
            raise

        logger.debug("Created repository in %s", repo.git_dir)
        return repo

    def _write_skeleton(self) -> None:
        for directory in (self.git_dir,) + repo_paths(self.git_dir, SKELETON_DIRS):
            try:
                directory.mkdir()
            except OSError as e:
                raise IoFailure("Error while creating directory", directory, reason=e.strerror) from e

        for path, content in ((self.description_file, DESCRIPTION), (self.head_file, HEAD_CONTENT)):
            try:
                path.write_text(content, encoding='utf-8')
            except OSError as e:
                raise IoFailure(f"Error while writing {path.name}", path, reason=e.strerror) from e

        self.config_store.write({'core': dict(DEFAULT_CORE)})

    @classmethod
    def open(cls, path: Union[str, Path] = '.', marker: str = DEFAULT_MARKER) -> 'Repository':
        """
        Open an existing repository and validate it.

        Args:
            path: Work tree of the repository
            marker: Name of the metadata directory

        Returns:
            Repository: Validated handle
        """
        repo = cls(path, marker)
        repo.validate()
        logger.debug("Opened repository %s", repo.work_tree)
        return repo

    @classmethod
    def find_repository(cls, path: Union[str, Path] = '.', marker: str = DEFAULT_MARKER) -> 'Repository':
        """
        Find and open the repository containing path.

        Searches from the given path upwards until it finds a metadata
        directory or reaches the filesystem root.

        Args:
            path: Starting path for search
            marker: Name of the metadata directory

        Returns:
            Repository: Validated handle

        Raises:
            RepositoryNotFound: If no ancestor holds a metadata directory
        """
        return cls.open(locate(path, marker), marker)

    def validate(self) -> None:
        """
        Check the on-disk shape and config of the repository.

        Checks run in a fixed order and the first violation is raised:
        work tree, required directories, required files, then config.

        Raises:
            NotFound: If a required path is missing
            WrongShape: If a required path is the wrong kind of entry
            ConfigInvalid: If config is unparsable or has wrong [core] values
        """
        _ensure_dir(self.work_tree)

        for directory in repo_paths(self.git_dir, REQUIRED_DIRS):
            _ensure_dir(directory)

        for path in repo_paths(self.git_dir, REQUIRED_FILES):
            _ensure_file(path)

        _ensure_file(self.config_file)
        check_core(self.config, self.config_file)

    def object_path(self, object_id: str) -> Path:
        """
        Get filesystem path for an object.

        Example: ab/cdef0123456789... for id abcdef0123456789...

        Args:
            object_id: 40-character SHA-1 hash

        Returns:
            Path: Full path to object file

        Raises:
            ObjectIdInvalid: If object_id is not 40 lowercase hex characters
        """
        if not is_object_id(object_id):
            raise ObjectIdInvalid(object_id)
        return repo_path(self.objects_dir, *split_object_id(object_id))

    def object_exists(self, object_id: str) -> bool:
        """Check if a loose object exists in the repository."""
        return self.object_path(object_id).is_file()

    def read_object(self, object_id: str) -> KitObject:
        """
        Read object from repository.

        Args:
            object_id: 40-character SHA-1 hash

        Returns:
            KitObject: Decoded object (currently always a Blob)

        Raises:
            ObjectIdInvalid: If object_id is malformed
            IoFailure: If the object file cannot be read
            ObjectMalformed: If the stored bytes do not decode
            ObjectUnsupported: If the type tag has no object class
        """
        path = self.object_path(object_id)

        try:
            compressed = path.read_bytes()
        except OSError as e:
            raise IoFailure("Error while reading object", path, object_id, e.strerror) from e

        header, payload = codec.decode(compressed, path, object_id)
        return build_object(header, payload, object_id)

    def write_object(self, obj: KitObject) -> str:
        """
        Write object to repository.

        Objects are stored compressed with zlib. The format is:
        <type> <size>\\0<content>

        The file is written under a temporary name and renamed into
        place, so readers never observe a partially written object.

        Args:
            obj: Object to write

        Returns:
            str: Object id

        Raises:
            IoFailure: If the object cannot be stored
        """
        object_id, compressed = codec.encode(obj.type, obj.serialize())
        path = self.object_path(object_id)

        # Same id means same content
        if path.exists():
            logger.debug("Object %s already in store, skipped", object_id[:8])
            return object_id

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=path.parent, prefix='tmp_obj_')
        except OSError as e:
            raise IoFailure("Error while writing object", path, object_id, e.strerror) from e

        try:
            with os.fdopen(fd, 'wb') as f:
                f.write(compressed)
            os.chmod(tmp_path, OBJECT_FILE_MODE)
            os.replace(tmp_path, path)
        except OSError as e:
            try:
                os.unlink(tmp_path)
            except FileNotFoundError:
                pass
            raise IoFailure("Error while writing object", path, object_id, e.strerror) from e

        logger.debug("Stored object %s (%d bytes)", object_id[:8], len(compressed))
        return object_id

    def hash_object(self, data: bytes, write: bool = False) -> str:
        """
        Compute the blob id for data, optionally storing it.

        Args:
            data: Blob content
            write: If True, also write the blob to the object store

        Returns:
            str: Object id
        """
        blob = Blob(data)
        if write:
            return self.write_object(blob)
        return blob.hash

    def iter_object_ids(self) -> Iterator[str]:
        """Yield the ids of all loose objects, in sorted order."""
        if not self.objects_dir.is_dir():
            return
        for subdir in sorted(self.objects_dir.iterdir()):
            if not subdir.is_dir() or len(subdir.name) != 2:
                continue
            for obj_file in sorted(subdir.iterdir()):
                object_id = subdir.name + obj_file.name
                if is_object_id(object_id):
                    yield object_id

    def resolve_object_id(self, prefix: str) -> str:
        """
        Expand an abbreviated object id.

        Args:
            prefix: At least 4 lowercase hex characters

        Returns:
            str: The single matching full object id

        Raises:
            ObjectIdInvalid: If prefix is malformed or ambiguous
            ObjectNotFound: If no stored object matches
        """
        if not is_object_prefix(prefix):
            raise ObjectIdInvalid(prefix, "not a hex prefix of at least 4 characters")

        if is_object_id(prefix):
            if not self.object_exists(prefix):
                raise ObjectNotFound(prefix, self.object_path(prefix))
            return prefix

        subdir = repo_path(self.objects_dir, prefix[:2])
        matches = []
        if subdir.is_dir():
            for obj_file in subdir.iterdir():
                object_id = prefix[:2] + obj_file.name
                if is_object_id(object_id) and object_id.startswith(prefix):
                    matches.append(object_id)

        if not matches:
            raise ObjectNotFound(prefix)
        if len(matches) > 1:
            raise ObjectIdInvalid(prefix, f"ambiguous, matches {len(matches)} objects")
        return matches[0]

    def __repr__(self) -> str:
        """String representation of repository."""
        return f"Repository(path={self.work_tree})"
