"""Tests for resolving owner emails to visible, active accounts."""

from unittest.mock import MagicMock

import pytest

from codeowners.account import Account, AccountMatch, ActingUser
from codeowners.debug_trace import DebugTrace
from codeowners.in_memory_accounts import InMemoryAccountDirectory
from codeowners.owner_resolver import OwnerResolver

ADMIN, USER, OTHER = 1, 2, 4


def test_wildcard_is_always_resolvable(directory: InMemoryAccountDirectory) -> None:
    """Verify the all-users wildcard needs no account."""
    resolution = OwnerResolver(directory, None).resolve("*")
    assert resolution.owned_by_all_users
    assert resolution.resolvable
    assert resolution.account is None
    assert resolution.reason == "all users wildcard is always resolvable"


def test_resolves_preferred_email(directory: InMemoryAccountDirectory) -> None:
    """Verify a visible active account is resolved."""
    trace = DebugTrace()
    resolution = OwnerResolver(directory, ActingUser(OTHER), trace=trace).resolve(
        "admin@example.com"
    )
    assert resolution.account is directory.accounts[ADMIN]
    assert "resolved email admin@example.com to account 1" in trace.entries


def test_unknown_email(directory: InMemoryAccountDirectory) -> None:
    """Verify emails without an account are unresolvable."""
    trace = DebugTrace()
    resolution = OwnerResolver(directory, None, trace=trace).resolve("ghost@example.com")
    assert not resolution.resolvable
    assert resolution.reason == "no account with this email exists"
    assert (
        "cannot resolve code owner email ghost@example.com: no account with this email exists"
        in trace.entries
    )


def test_ambiguous_email(directory: InMemoryAccountDirectory) -> None:
    """Verify an email shared by two accounts is unresolvable."""
    directory.add_account(Account(10, "twin@example.com"))
    directory.add_account(Account(11, "other-twin@example.com", secondary_emails=("twin@example.com",)))
    assert OwnerResolver(directory, None).resolve("twin@example.com").reason == "email is ambiguous"


def test_inactive_account(directory: InMemoryAccountDirectory) -> None:
    """Verify inactive accounts are never owners."""
    directory.add_account(Account(10, "retired@example.com", active=False))
    resolution = OwnerResolver(directory, None).resolve("retired@example.com")
    assert resolution.account is None
    assert resolution.reason == "account 10 is inactive"


@pytest.mark.parametrize(
    ("email", "reason"),
    [
        ("admin@example.com", "resolved"),
        ("admin@EXAMPLE.org", "resolved"),
        ("user@other.net", "domain other.net of email user@other.net is not allowed"),
    ],
)
def test_allowed_domains(directory: InMemoryAccountDirectory, email: str, reason: str) -> None:
    """Verify the domain allow-list is case-insensitive."""
    directory.add_account(Account(10, "admin@EXAMPLE.org"))
    directory.add_account(Account(11, "user@other.net"))
    resolver = OwnerResolver(directory, None, ["example.com", "example.org"])
    assert resolver.resolve(email).reason == reason


def test_email_without_domain(directory: InMemoryAccountDirectory) -> None:
    """Verify an email without '@' fails the domain check."""
    directory.add_account(Account(10, "localpart"))
    resolver = OwnerResolver(directory, None, ["example.com"])
    assert resolver.resolve("localpart").reason == "email localpart has no domain"


def test_hidden_account(directory: InMemoryAccountDirectory) -> None:
    """Verify hidden accounts resolve only for themselves and global viewers."""
    directory.hidden_accounts.add(ADMIN)
    directory.global_viewers.add(USER)
    other = ActingUser(OTHER, "Other")

    hidden = OwnerResolver(directory, other).resolve("admin@example.com")
    assert hidden.reason == "account 1 is not visible to user Other"

    assert OwnerResolver(directory, ActingUser(ADMIN)).resolve("admin@example.com").resolvable
    assert OwnerResolver(directory, ActingUser(USER)).resolve("admin@example.com").resolvable
    assert OwnerResolver(directory, None).resolve("admin@example.com").resolvable


def test_secondary_email_visibility(directory: InMemoryAccountDirectory) -> None:
    """Verify secondary emails resolve only for users allowed to see them."""
    directory.add_account(Account(10, "main@example.com", secondary_emails=("alias@example.com",)))
    directory.secondary_email_viewers.add(USER)

    denied = OwnerResolver(directory, ActingUser(OTHER, "Other")).resolve("alias@example.com")
    assert denied.reason == (
        "account 10 is referenced by secondary email but user Other cannot see secondary emails"
    )
    assert OwnerResolver(directory, ActingUser(USER)).resolve("alias@example.com").resolvable
    assert OwnerResolver(directory, ActingUser(10)).resolve("alias@example.com").resolvable


def test_lookup_failure(directory: InMemoryAccountDirectory) -> None:
    """Verify directory failures make the email unresolvable instead of raising."""
    directory.unavailable = True
    resolution = OwnerResolver(directory, None).resolve("admin@example.com")
    assert resolution.reason == "account lookup failed: account directory is unavailable"


def test_results_are_cached(directory: InMemoryAccountDirectory) -> None:
    """Verify every email is looked up once per resolver."""
    resolver = OwnerResolver(directory, None)
    first = resolver.resolve("admin@example.com")
    directory.unavailable = True
    assert resolver.resolve("admin@example.com") is first


def test_lookup_once_per_email() -> None:
    """Verify the directory is consulted once per email and resolver."""
    account = Account(7, "seven@example.com")
    directory = MagicMock()
    directory.lookup_by_email.return_value = [AccountMatch(account)]
    resolver = OwnerResolver(directory, None)

    resolver.resolve("seven@example.com")
    resolver.resolve("seven@example.com")

    directory.lookup_by_email.assert_called_once_with("seven@example.com")
    directory.can_see.assert_not_called()
