"""Ports for the collaborators the engine consumes."""

from collections.abc import Sequence
from typing import Protocol

from codeowners.account import Account, AccountMatch, ActingUser


class DeclarationStorage(Protocol):
    """Read access to versioned file content."""

    def project_exists(self, project: str) -> bool:
        ...

    def can_read_project(self, project: str, user: ActingUser | None) -> bool:
        ...

    def list_branches(self, project: str) -> Sequence[str]:
        ...

    def resolve_revision(self, project: str, branch: str, revision: str | None = None) -> str | None:
        """Return the given revision, or the branch head when ``revision`` is None.

        Returns None when the branch does not exist; raises UnknownRevisionError
        for an explicit revision that is unknown.
        """
        ...

    def read_file(self, project: str, branch: str, file_path: str, revision: str) -> bytes | None:
        """Return the file content, or None if the file does not exist.

        Raises StorageUnavailableError when the storage cannot be read.
        """
        ...

    def list_files(self, project: str, branch: str, revision: str) -> Sequence[str]:
        ...


class AccountDirectory(Protocol):
    """Account lookup, visibility and group membership."""

    def lookup_by_email(self, email: str) -> Sequence[AccountMatch]:
        """Raises AccountLookupError when the directory is unavailable."""
        ...

    def can_see(self, user: ActingUser, account: Account) -> bool:
        ...

    def can_view_secondary_emails(self, user: ActingUser) -> bool:
        ...

    def is_member(self, account_id: int, group: str) -> bool:
        ...

    def project_owners(self, project: str) -> Sequence[Account]:
        ...


class ReviewState(Protocol):
    """Reviewers and votes of a change."""

    def list_reviewers(self, change_number: int) -> Sequence[int]:
        ...

    def list_votes(self, change_number: int, label: str) -> dict[int, int]:
        ...
