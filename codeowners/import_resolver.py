"""Resolution of imports between declarations.

Imports are processed with a worklist. A seen-set keyed by the target
declaration key guarantees that every declaration is descended into at most
once, so import cycles such as ``A -> B -> A`` terminate.
"""

import logging
import posixpath
from collections import deque
from dataclasses import dataclass, field

from codeowners.account import ActingUser
from codeowners.collaborators import DeclarationStorage
from codeowners.debug_trace import DebugTrace
from codeowners.declaration import (
    DeclarationKey,
    ImportMode,
    ImportReference,
    OwnerSet,
    OwnershipDeclaration,
)
from codeowners.declaration_loader import DeclarationLoader
from codeowners.errors import StorageUnavailableError
from codeowners.glob_matcher import matches_any
from codeowners.paths import folder_of, resolve_import_path
from codeowners.unresolved_import import UnresolvedImport, UnresolvedReason

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "code owner config does not exist"


@dataclass(frozen=True)
class SourcedOwnerSet:
    """An owner set together with the declaration it was declared in."""

    owner_set: OwnerSet
    source: DeclarationKey
    revision: str | None


@dataclass(frozen=True)
class PendingImport:
    importing_key: DeclarationKey
    importing_revision: str | None
    reference: ImportReference
    mode: ImportMode
    depth: int
    label: str


@dataclass
class ImportResolution:
    """Owner sets taken over from imported declarations."""

    owner_sets: list[SourcedOwnerSet] = field(default_factory=list)
    ignore_parent_owners: bool = False
    unresolved: list[UnresolvedImport] = field(default_factory=list)


class ImportResolver:
    """Loads import targets for one resolution pass."""

    def __init__(
        self,
        storage: DeclarationStorage,
        loader: DeclarationLoader,
        acting_user: ActingUser | None,
        trace: DebugTrace,
    ) -> None:
        self.storage = storage
        self.loader = loader
        self.acting_user = acting_user
        self.trace = trace
        # Branch heads are pinned on first use so that all imports from one
        # branch see the same revision during the pass.
        self._revisions: dict[tuple[str, str], str | None] = {}

    @staticmethod
    def target_key(importing_key: DeclarationKey, reference: ImportReference) -> DeclarationKey:
        project = reference.project or importing_key.project
        branch = reference.branch or importing_key.branch
        path = resolve_import_path(importing_key.folder_path, reference.file_path)
        return DeclarationKey(project, branch, folder_of(path), posixpath.basename(path))

    def _pinned_revision(self, project: str, branch: str) -> str | None:
        key = (project, branch)
        if key not in self._revisions:
            self._revisions[key] = self.storage.resolve_revision(project, branch)
        return self._revisions[key]

    def load_target(
        self,
        importing_key: DeclarationKey,
        importing_revision: str | None,
        reference: ImportReference,
    ) -> OwnershipDeclaration | UnresolvedImport:
        """Load the declaration an import points to, or explain why it cannot be loaded."""
        target = self.target_key(importing_key, reference)

        def unresolved(reason: UnresolvedReason, message: str) -> UnresolvedImport:
            return UnresolvedImport(importing_key, target, reference, reason, message)

        try:
            if (target.project, target.branch) == (importing_key.project, importing_key.branch):
                revision = importing_revision
            else:
                if not self.storage.project_exists(target.project):
                    return unresolved(
                        UnresolvedReason.PROJECT_NOT_FOUND, f"project {target.project} not found"
                    )
                if not self.storage.can_read_project(target.project, self.acting_user):
                    return unresolved(
                        UnresolvedReason.PROJECT_UNREADABLE,
                        f"state of project {target.project} doesn't permit read",
                    )
                revision = self._pinned_revision(target.project, target.branch)
            if revision is None:
                return unresolved(UnresolvedReason.NOT_FOUND, NOT_FOUND_MESSAGE)
            loaded = self.loader.load(target, revision)
        except StorageUnavailableError as e:
            logger.warning("Cannot read import target %s: %s", target, e)
            return unresolved(
                UnresolvedReason.PROJECT_UNREADABLE, f"failed to read code owner config: {e}"
            )
        if loaded.errors:
            return unresolved(
                UnresolvedReason.PARSE_ERROR,
                "code owner config is invalid: " + "; ".join(loaded.errors),
            )
        if loaded.declaration is None:
            return unresolved(UnresolvedReason.NOT_FOUND, NOT_FOUND_MESSAGE)
        return loaded.declaration

    def resolve(
        self,
        pending: list[PendingImport],
        relative_path: str,
        seen: set[DeclarationKey],
    ) -> ImportResolution:
        """Resolve imports transitively.

        ``relative_path`` is the queried path relative to the folder of the
        declaration that started the resolution; it selects which per-file
        owner sets of declarations imported with mode ALL apply.
        """
        resolution = ImportResolution()
        queue = deque(pending)
        while queue:
            item = queue.popleft()
            target = self.target_key(item.importing_key, item.reference)
            indent = "  " * item.depth
            self.trace.add(
                "%s* %s (%s, import mode = %s)", indent, target, item.label, item.mode.value
            )
            if target in seen:
                self.trace.add("%s  already imported, skipping", indent)
                continue
            seen.add(target)

            result = self.load_target(item.importing_key, item.importing_revision, item.reference)
            if isinstance(result, UnresolvedImport):
                self.trace.add("%s  cannot be resolved: %s", indent, result.message)
                resolution.unresolved.append(result)
                continue

            if item.mode is ImportMode.ALL and result.ignore_parent_owners:
                self.trace.add("%s  imported flag to ignore parent code owners", indent)
                resolution.ignore_parent_owners = True
            for owner_set in result.owner_sets:
                if owner_set.is_global or (
                    item.mode.imports_per_file_sets
                    and matches_any(owner_set.path_expressions, relative_path)
                ):
                    resolution.owner_sets.append(SourcedOwnerSet(owner_set, target, result.revision))
            for reference in result.imports:
                mode = reference.mode if item.mode is ImportMode.ALL else item.mode
                queue.append(
                    PendingImport(target, result.revision, reference, mode, item.depth + 1, item.label)
                )
        return resolution
