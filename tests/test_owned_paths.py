"""Tests for listing the paths an account owns."""

import pytest

from codeowners.account import Account
from codeowners.errors import InvalidInputError
from codeowners.in_memory_accounts import InMemoryAccountDirectory
from codeowners.in_memory_storage import InMemoryStorage
from codeowners.load_config import load_config
from codeowners.owned_paths import get_owned_paths
from codeowners.owners_engine import CodeOwnersEngine

PATHS = ["/foo/a.txt", "/b.txt", "/foo/c.txt", "/foo/a.txt"]


@pytest.fixture
def engine(storage: InMemoryStorage, directory: InMemoryAccountDirectory) -> CodeOwnersEngine:
    storage.commit("p", "main", {"/OWNERS": "admin@example.com\n", "/foo/OWNERS": "user@example.com\n"})
    return CodeOwnersEngine(storage, directory, load_config())


def test_owned_paths(engine: CodeOwnersEngine, directory: InMemoryAccountDirectory) -> None:
    """Verify owned paths are deduplicated and sorted."""
    admin, user, other = (directory.accounts[i] for i in (1, 2, 4))
    assert get_owned_paths(engine, "p", "main", admin, PATHS) == ["/b.txt", "/foo/a.txt", "/foo/c.txt"]
    assert get_owned_paths(engine, "p", "main", user, PATHS) == ["/foo/a.txt", "/foo/c.txt"]
    assert get_owned_paths(engine, "p", "main", other, PATHS) == []


def test_owned_paths_pagination(engine: CodeOwnersEngine, directory: InMemoryAccountDirectory) -> None:
    """Verify start and limit apply to the owned paths."""
    admin = directory.accounts[1]
    assert get_owned_paths(engine, "p", "main", admin, PATHS, start=1, limit=1) == ["/foo/a.txt"]
    with pytest.raises(InvalidInputError):
        get_owned_paths(engine, "p", "main", admin, PATHS, limit=0)


def test_inactive_account_owns_nothing(engine: CodeOwnersEngine) -> None:
    """Verify inactive accounts own no paths."""
    retired = Account(1, "admin@example.com", active=False)
    assert get_owned_paths(engine, "p", "main", retired, PATHS) == []
