"""Immutable data model of a parsed ownership declaration."""

from dataclasses import dataclass
from enum import Enum

ALL_USERS_WILDCARD = "*"


@dataclass(frozen=True)
class DeclarationKey:
    """Identifies one declaration file: project, branch and folder."""

    project: str
    branch: str
    folder_path: str  # absolute, always ends with "/"
    file_name: str

    def __post_init__(self) -> None:
        if not self.folder_path.startswith("/") or not self.folder_path.endswith("/"):
            raise ValueError(f"folder path must be absolute and end with '/': {self.folder_path}")

    @property
    def file_path(self) -> str:
        return self.folder_path + self.file_name

    def __str__(self) -> str:
        return f"{self.project}:{self.branch}:{self.file_path}"


class ImportMode(Enum):
    """Which owner sets of an imported declaration are taken over."""

    ALL = "ALL"
    PER_FILE_GLOBAL_SETS_ONLY = "PER_FILE_GLOBAL_SETS_ONLY"

    @property
    def imports_per_file_sets(self) -> bool:
        return self is ImportMode.ALL


@dataclass(frozen=True)
class ImportReference:
    """Reference from one declaration to another.

    ``project`` and ``branch`` default to the importing declaration's own when
    unset. ``file_path`` may be relative to the importing declaration's folder.
    """

    mode: ImportMode
    file_path: str
    project: str | None = None
    branch: str | None = None

    def __str__(self) -> str:
        prefix = ""
        if self.project:
            prefix = f"{self.project}:"
            if self.branch:
                prefix += f"{self.branch}:"
        return prefix + self.file_path


@dataclass(frozen=True)
class OwnerSet:
    """A group of owners, optionally scoped by path expressions."""

    path_expressions: tuple[str, ...] = ()
    owners: tuple[str, ...] = ()
    annotations: tuple[tuple[str, str], ...] = ()  # (owner reference, annotation key)
    ignore_global_and_parent_owners: bool = False
    ignore_global_owners: bool = False
    imports: tuple[ImportReference, ...] = ()

    @property
    def is_global(self) -> bool:
        return not self.path_expressions

    def annotations_for(self, owner: str) -> set[str]:
        """Return the annotation keys attached to one owner reference."""
        return {key for ref, key in self.annotations if ref == owner}


@dataclass(frozen=True)
class OwnershipDeclaration:
    """Parsed ownership rules of one folder at one revision."""

    key: DeclarationKey
    revision: str | None = None
    ignore_parent_owners: bool = False
    owner_sets: tuple[OwnerSet, ...] = ()
    imports: tuple[ImportReference, ...] = ()

    @property
    def global_owner_sets(self) -> tuple[OwnerSet, ...]:
        return tuple(s for s in self.owner_sets if s.is_global)

    @property
    def per_file_owner_sets(self) -> tuple[OwnerSet, ...]:
        return tuple(s for s in self.owner_sets if not s.is_global)
