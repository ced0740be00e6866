"""Outcome of an import that could not be resolved."""

from dataclasses import dataclass
from enum import Enum

from codeowners.declaration import DeclarationKey, ImportReference


class UnresolvedReason(Enum):
    """Why an import target could not be loaded."""

    NOT_FOUND = "not-found"
    PROJECT_NOT_FOUND = "project-not-found"
    PROJECT_UNREADABLE = "project-unreadable"
    PARSE_ERROR = "parse-error"


@dataclass(frozen=True)
class UnresolvedImport:
    """An import reference that did not yield a declaration."""

    importing_key: DeclarationKey
    target_key: DeclarationKey
    reference: ImportReference
    reason: UnresolvedReason
    message: str

    def describe(self) -> str:
        return f"{self.target_key} cannot be resolved: {self.message}"
