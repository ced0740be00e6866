"""Tests for explaining whether an email owns a path."""

import pytest

from codeowners.account import Account, ActingUser
from codeowners.errors import InvalidInputError
from codeowners.in_memory_accounts import InMemoryAccountDirectory
from codeowners.in_memory_storage import InMemoryStorage
from codeowners.load_config import load_config
from codeowners.owner_check import check_code_owner
from codeowners.owners_engine import CodeOwnersEngine


@pytest.fixture
def engine(storage: InMemoryStorage, directory: InMemoryAccountDirectory) -> CodeOwnersEngine:
    storage.commit(
        "p",
        "main",
        {
            "/OWNERS": "admin@example.com\n",
            "/foo/OWNERS": "user@example.com #{NEVER_SUGGEST}\n",
            "/open/OWNERS": "*\n",
        },
    )
    return CodeOwnersEngine(storage, directory, load_config())


def test_owner(engine: CodeOwnersEngine) -> None:
    """Verify an owner is reported with its declaring file and a trace."""
    result = check_code_owner(engine, "p", "main", "/foo/x.txt", "admin@example.com")

    assert result.is_code_owner
    assert result.is_resolvable
    assert not result.owned_by_all_users
    assert result.declaration_paths == ("/OWNERS",)
    assert result.reason is None
    assert "evaluating code owner config p:main:/foo/OWNERS" in result.debug_logs
    assert "resolved email admin@example.com to account 1" in result.debug_logs


def test_owner_annotations(engine: CodeOwnersEngine) -> None:
    """Verify annotations of the owner are reported."""
    result = check_code_owner(engine, "p", "main", "/foo/x.txt", "user@example.com")
    assert result.is_code_owner
    assert result.annotations == ("NEVER_SUGGEST",)


def test_resolvable_non_owner(engine: CodeOwnersEngine) -> None:
    """Verify a resolvable account that owns nothing is not a code owner."""
    result = check_code_owner(engine, "p", "main", "/foo/x.txt", "other@example.com")
    assert not result.is_code_owner
    assert result.is_resolvable
    assert result.declaration_paths == ()


def test_all_users(engine: CodeOwnersEngine) -> None:
    """Verify every resolvable account owns a path owned by all users."""
    other = check_code_owner(engine, "p", "main", "/open/x.txt", "other@example.com")
    assert other.is_code_owner
    assert other.owned_by_all_users

    wildcard = check_code_owner(engine, "p", "main", "/open/x.txt", "*")
    assert wildcard.is_code_owner
    assert not check_code_owner(engine, "p", "main", "/foo/x.txt", "*").is_code_owner


@pytest.mark.parametrize(
    ("email", "reason"),
    [
        ("ghost@example.com", "no account with this email exists"),
        ("twin@example.com", "email is ambiguous"),
    ],
)
def test_unresolvable(
    engine: CodeOwnersEngine, directory: InMemoryAccountDirectory, email: str, reason: str
) -> None:
    """Verify the resolver's reason is reported for unresolvable emails."""
    directory.add_account(Account(10, "twin@example.com"))
    directory.add_account(Account(11, "twin2@example.com", secondary_emails=("twin@example.com",)))
    result = check_code_owner(engine, "p", "main", "/foo/x.txt", email)

    assert not result.is_code_owner
    assert not result.is_resolvable
    assert result.reason == reason


def test_visibility_of_acting_user(
    engine: CodeOwnersEngine, directory: InMemoryAccountDirectory
) -> None:
    """Verify a hidden owner is not an owner for users who cannot see it."""
    directory.hidden_accounts.add(1)
    result = check_code_owner(
        engine, "p", "main", "/x.txt", "admin@example.com", acting_user=ActingUser(4, "Other")
    )
    assert not result.is_code_owner
    assert result.reason == "account 1 is not visible to user Other"


def test_email_required(engine: CodeOwnersEngine) -> None:
    with pytest.raises(InvalidInputError):
        check_code_owner(engine, "p", "main", "/x.txt", "")
