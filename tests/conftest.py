"""Shared fixtures: an empty storage and a small account directory."""

import pytest

from codeowners.account import Account
from codeowners.in_memory_accounts import InMemoryAccountDirectory
from codeowners.in_memory_storage import InMemoryStorage

ADMIN_ID = 1
USER_ID = 2
USER2_ID = 3
OTHER_ID = 4


@pytest.fixture
def storage() -> InMemoryStorage:
    """Empty in-memory storage."""
    return InMemoryStorage()


@pytest.fixture
def directory() -> InMemoryAccountDirectory:
    """Directory with admin (1), user (2), user2 (3) and other (4) at example.com."""
    directory = InMemoryAccountDirectory()
    for account_id, name in enumerate(["admin", "user", "user2", "other"], start=ADMIN_ID):
        directory.add_account(Account(account_id, f"{name}@example.com", name.title()))
    return directory
