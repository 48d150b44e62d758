"""Repository creation, opening and validation tests."""

import shutil
from pathlib import Path

import pytest
from kit.core.config import Config
from kit.core.errors import (AlreadyExists, ConfigInvalid, IoFailure, NotFound,
                             WrongShape)
from kit.core.repository import Repository


def test_create_builds_skeleton(temp_dir):
    """Test create makes the full directory and file structure."""
    repo = Repository.create(temp_dir / 'r')

    git_dir = temp_dir / 'r' / '.git'
    assert repo.git_dir == git_dir
    for name in ['branches', 'objects', 'refs', 'refs/tags', 'refs/heads']:
        assert (git_dir / name).is_dir()
    for name in ['description', 'HEAD', 'config']:
        assert (git_dir / name).is_file()


def test_create_head_and_config(temp_dir):
    """Test HEAD points to master and core config has the defaults."""
    repo = Repository.create(temp_dir / 'r')

    assert (temp_dir / 'r' / '.git' / 'HEAD').read_text() == 'ref: refs/heads/master\n'
    assert repo.config['core'] == {
        'repositoryformatversion': '0',
        'filemode': 'false',
        'bare': 'false',
    }
    assert repo.config_store.get('core', 'bare') == 'false'


def test_create_description(temp_dir):
    repo = Repository.create(temp_dir / 'r')
    assert repo.description_file.read_text().startswith('Unnamed repository;')


def test_create_writes_metadata_files_as_utf8(temp_dir):
    repo = Repository.create(temp_dir / 'r')

    assert repo.head_file.read_bytes() == b'ref: refs/heads/master\n'
    assert repo.description_file.read_bytes() == (
        b"Unnamed repository; edit this file 'description' to name the repository.\n"
    )


def test_create_makes_missing_parents(temp_dir):
    repo = Repository.create(temp_dir / 'a' / 'b' / 'r')
    assert repo.work_tree == temp_dir / 'a' / 'b' / 'r'


def test_created_repository_opens(temp_dir):
    """Test every created repository passes validation on open."""
    Repository.create(temp_dir / 'r')
    repo = Repository.open(temp_dir / 'r')
    repo.validate()
    assert repo.work_tree == temp_dir / 'r'


def test_create_existing_path_fails_without_changes(temp_dir):
    """Test create refuses an existing path and leaves it untouched."""
    target = temp_dir / 'existing'
    target.mkdir()
    (target / 'keep.txt').write_text('data')

    with pytest.raises(AlreadyExists) as exc_info:
        Repository.create(target)

    assert exc_info.value.path == target
    assert sorted(p.name for p in target.iterdir()) == ['keep.txt']


def test_create_existing_file_fails(temp_dir):
    target = temp_dir / 'file'
    target.write_text('x')

    with pytest.raises(AlreadyExists):
        Repository.create(target)
    assert target.read_text() == 'x'


def test_create_twice_fails(temp_dir):
    Repository.create(temp_dir / 'r')
    with pytest.raises(AlreadyExists):
        Repository.create(temp_dir / 'r')


def test_create_rolls_back_on_failure(temp_dir, monkeypatch):
    """Test a failing step removes everything create made."""
    def fail_write(self, sections):
        raise IoFailure("Error while writing config", self.path)

    monkeypatch.setattr(Config, 'write', fail_write)

    with pytest.raises(IoFailure):
        Repository.create(temp_dir / 'parent' / 'r')

    assert not (temp_dir / 'parent').exists()
    assert list(temp_dir.iterdir()) == []


def test_create_removes_parents_when_worktree_mkdir_fails(temp_dir, monkeypatch):
    """Test parents made before a failing work tree mkdir are removed."""
    target = temp_dir / 'parent' / 'r'
    original_mkdir = Path.mkdir

    def fail_on_worktree(self, mode=0o777, parents=False, exist_ok=False):
        if self == target:
            original_mkdir(self.parent, parents=True, exist_ok=True)
            raise PermissionError(13, 'Permission denied', str(self))
        return original_mkdir(self, mode, parents, exist_ok)

    monkeypatch.setattr(Path, 'mkdir', fail_on_worktree)

    with pytest.raises(IoFailure) as exc_info:
        Repository.create(target)

    assert exc_info.value.path == target
    assert not (temp_dir / 'parent').exists()
    assert list(temp_dir.iterdir()) == []


def test_create_worktree_mkdir_failure_without_new_parents(temp_dir, monkeypatch):
    target = temp_dir / 'r'

    def fail(self, mode=0o777, parents=False, exist_ok=False):
        raise PermissionError(13, 'Permission denied', str(self))

    monkeypatch.setattr(Path, 'mkdir', fail)

    with pytest.raises(IoFailure):
        Repository.create(target)

    assert temp_dir.exists()
    assert not target.exists()


def test_open_nonexistent_fails_before_config_io(temp_dir, monkeypatch):
    """Test open on a missing path fails with NotFound without reading config."""
    def fail_load(self):
        raise AssertionError("config should not be read")

    monkeypatch.setattr(Config, 'load', fail_load)

    with pytest.raises(NotFound) as exc_info:
        Repository.open(temp_dir / 'missing')
    assert exc_info.value.path == temp_dir / 'missing'


def test_open_file_as_worktree(temp_dir):
    (temp_dir / 'file').write_text('x')
    with pytest.raises(WrongShape) as exc_info:
        Repository.open(temp_dir / 'file')
    assert exc_info.value.expected == 'directory'


def test_open_plain_directory(temp_dir):
    with pytest.raises(NotFound) as exc_info:
        Repository.open(temp_dir)
    assert exc_info.value.path == temp_dir / '.git' / 'branches'


@pytest.mark.parametrize('name', ['branches', 'objects', 'refs/tags', 'refs/heads'])
def test_validate_missing_directory(repo, name):
    shutil.rmtree(repo.git_dir / name)

    with pytest.raises(NotFound) as exc_info:
        repo.validate()
    assert exc_info.value.path == repo.git_dir / name


def test_validate_directory_replaced_by_file(repo):
    shutil.rmtree(repo.objects_dir)
    repo.objects_dir.write_text('not a dir')

    with pytest.raises(WrongShape) as exc_info:
        repo.validate()
    assert exc_info.value.path == repo.objects_dir
    assert exc_info.value.expected == 'directory'


@pytest.mark.parametrize('name', ['description', 'HEAD', 'config'])
def test_validate_missing_file(repo, name):
    (repo.git_dir / name).unlink()

    with pytest.raises(NotFound) as exc_info:
        repo.validate()
    assert exc_info.value.path == repo.git_dir / name


def test_validate_file_replaced_by_directory(repo):
    repo.head_file.unlink()
    repo.head_file.mkdir()

    with pytest.raises(WrongShape) as exc_info:
        repo.validate()
    assert exc_info.value.path == repo.head_file
    assert exc_info.value.expected == 'file'


def test_validate_fails_fast_in_order(repo):
    """Test directories are checked before files."""
    shutil.rmtree(repo.tags_dir)
    repo.head_file.unlink()

    with pytest.raises(NotFound) as exc_info:
        repo.validate()
    assert exc_info.value.path == repo.tags_dir


def test_validate_wrong_format_version(repo):
    """Test an unsupported repositoryformatversion is named in the error."""
    repo.config_store.write({'core': {
        'repositoryformatversion': '1',
        'filemode': 'false',
        'bare': 'false',
    }})

    with pytest.raises(ConfigInvalid) as exc_info:
        Repository.open(repo.work_tree)

    error = exc_info.value
    assert error.key == 'repositoryformatversion'
    assert error.expected == '0'
    assert error.actual == '1'
    assert 'repositoryformatversion' in str(error)


@pytest.mark.parametrize('key,value', [('filemode', 'true'), ('bare', 'true'), ('bare', 'False')])
def test_validate_wrong_flag(repo, key, value):
    core = dict(repo.config['core'])
    core[key] = value
    repo.config_store.write({'core': core})

    with pytest.raises(ConfigInvalid) as exc_info:
        repo.validate()
    assert exc_info.value.key == key
    assert exc_info.value.actual == value


def test_validate_missing_key(repo):
    repo.config_store.write({'core': {'repositoryformatversion': '0', 'filemode': 'false'}})

    with pytest.raises(ConfigInvalid) as exc_info:
        repo.validate()
    assert exc_info.value.key == 'bare'
    assert exc_info.value.actual is None


def test_validate_missing_core_section(repo):
    repo.config_store.write({'user': {'name': 'Test User'}})

    with pytest.raises(ConfigInvalid) as exc_info:
        repo.validate()
    assert exc_info.value.key == 'core'


def test_validate_unparsable_config(repo):
    repo.config_file.write_text('repositoryformatversion = 0\n')

    with pytest.raises(ConfigInvalid) as exc_info:
        repo.validate()
    assert exc_info.value.key is None


def test_validate_accepts_git_style_config(repo):
    """Test tab-indented config as written by Git is accepted."""
    repo.config_file.write_text(
        '[core]\n'
        '\trepositoryformatversion = 0\n'
        '\tfilemode = false\n'
        '\tbare = false\n'
        '\tlogallrefupdates = true\n'
        '[remote "origin"]\n'
        '\turl = https://example.com/%20repo.git\n'
    )
    repo.validate()


def test_find_repository_in_subdirectory(repo):
    """Test finding repo from nested directory."""
    subdir = repo.work_tree / 'subdir' / 'nested'
    subdir.mkdir(parents=True)

    found = Repository.find_repository(subdir)
    assert found.work_tree == repo.work_tree


def test_repr(repo):
    assert repr(repo) == f"Repository(path={repo.work_tree})"
