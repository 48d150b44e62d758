"""Shared pytest fixtures for Kit tests."""

import zlib

import pytest
import tempfile
import shutil
from pathlib import Path
from kit.core.repository import Repository
from kit.core.objects import Blob


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    tmpdir = tempfile.mkdtemp()
    yield Path(tmpdir).resolve()
    shutil.rmtree(tmpdir, ignore_errors=True)


@pytest.fixture
def repo(temp_dir):
    """Create an initialized repository."""
    return Repository.create(temp_dir / 'repo')


@pytest.fixture
def sample_blob():
    """Create a sample blob object."""
    return Blob(b"Hello, World!\n")


@pytest.fixture
def write_raw_object():
    """
    Store raw bytes at the path for an object id, bypassing the codec.

    Lets tests plant corrupt or unsupported objects.
    """
    def write(repo, object_id, raw, compress=True):
        path = repo.object_path(object_id)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(zlib.compress(raw) if compress else raw)
        return path
    return write
