"""Data model for the change under review."""

from dataclasses import dataclass

from codeowners.account import ActingUser


@dataclass(frozen=True)
class Change:
    """A change with its destination, authors and touched paths."""

    number: int
    project: str
    branch: str
    revision: str | None
    owner: ActingUser
    uploader: ActingUser
    changed_paths: tuple[str, ...] = ()
