"""Resolves the owners of paths: hierarchy walk, imports, identities and fallback tiers."""

import logging
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any

from codeowners.account import Account, ActingUser
from codeowners.annotations import is_supported
from codeowners.backend import get_backend
from codeowners.cancellation import ResolutionGuard
from codeowners.collaborators import AccountDirectory, DeclarationStorage
from codeowners.consistency_issue import ConsistencyIssue
from codeowners.content_cache import ContentCache
from codeowners.debug_trace import DebugTrace
from codeowners.declaration_hierarchy import DeclarationHierarchy, HierarchyResult
from codeowners.declaration_loader import DeclarationLoader
from codeowners.errors import InvalidInputError, UnknownRevisionError
from codeowners.import_resolver import ImportResolver
from codeowners.load_config import load_config
from codeowners.owner_resolver import EmailResolution, OwnerResolver
from codeowners.owner_set_evaluator import OwnerSetEvaluator, RawOwner
from codeowners.paths import require_absolute_path
from codeowners.project_config import project_config
from codeowners.resolved_owner import OwnerProvenance, ResolvedOwner
from codeowners.unresolved_import import UnresolvedImport

logger = logging.getLogger(__name__)

GLOBAL_OWNERS_SOURCE = "<global owners>"
PROJECT_OWNERS_SOURCE = "<project owners>"


@dataclass
class PathOwners:
    """Owners of one path, ordered by distance and then by declaration order."""

    path: str
    max_distance: int
    owners: list[ResolvedOwner] = field(default_factory=list)
    owned_by_all_users: bool = False
    has_declared_owners: bool = False
    parents_ignored: bool = False
    unresolved_emails: list[EmailResolution] = field(default_factory=list)
    unresolved_imports: list[UnresolvedImport] = field(default_factory=list)
    issues: list[ConsistencyIssue] = field(default_factory=list)
    debug_logs: tuple[str, ...] = ()

    @property
    def owner_ids(self) -> list[int]:
        return [owner.account_id for owner in self.owners]

    def is_owned_by(self, account: Account) -> bool:
        if not account.active:
            return False
        return self.owned_by_all_users or account.account_id in self.owner_ids


@dataclass
class ResolutionPass:
    """Components sharing the memo tables and trace of one resolution pass."""

    settings: dict[str, Any]
    trace: DebugTrace
    loader: DeclarationLoader
    imports: ImportResolver
    evaluator: OwnerSetEvaluator
    hierarchy: DeclarationHierarchy
    owners: OwnerResolver


class CodeOwnersEngine:
    """Facade over storage, account directory and configuration."""

    def __init__(
        self,
        storage: DeclarationStorage,
        directory: AccountDirectory,
        config: dict[str, Any] | None = None,
    ) -> None:
        self.storage = storage
        self.directory = directory
        self.config = config if config is not None else load_config()
        self.content_cache = ContentCache(storage)
        project_config(self.config, "")
        for project in self.config.get("projects") or {}:
            project_config(self.config, project)

    def settings(self, project: str) -> dict[str, Any]:
        return project_config(self.config, project)

    def new_pass(
        self,
        project: str,
        acting_user: ActingUser | None,
        debug: bool = False,
        guard: ResolutionGuard | None = None,
    ) -> ResolutionPass:
        settings = self.settings(project)
        trace = DebugTrace(enabled=debug)
        loader = DeclarationLoader(
            self.content_cache, get_backend(settings["backend"]), settings["file_name"], guard
        )
        imports = ImportResolver(self.storage, loader, acting_user, trace)
        evaluator = OwnerSetEvaluator(imports, trace)
        hierarchy = DeclarationHierarchy(
            self.storage, loader, evaluator, trace, settings["default_owners_branch"]
        )
        owners = OwnerResolver(
            self.directory, acting_user, settings["allowed_email_domains"], trace
        )
        return ResolutionPass(settings, trace, loader, imports, evaluator, hierarchy, owners)

    def validate_query(self, project: str, branch: str, revision: str | None = None) -> str:
        """Check the query target and return the concrete revision to read."""
        if not project:
            raise InvalidInputError("project is required")
        if not branch:
            raise InvalidInputError("branch is required")
        if not self.storage.project_exists(project):
            raise InvalidInputError(f"project {project} not found")
        resolved = self.storage.resolve_revision(project, branch, revision)
        if resolved is None:
            raise UnknownRevisionError(f"branch {branch} not found in project {project}")
        return resolved

    def get_owners(
        self,
        project: str,
        branch: str,
        path: str,
        revision: str | None = None,
        acting_user: ActingUser | None = None,
        debug: bool = False,
        guard: ResolutionGuard | None = None,
    ) -> PathOwners:
        """Return the owners of a path.

        Visibility is evaluated for ``acting_user``; pass None to skip it.
        """
        path = require_absolute_path(path)
        revision = self.validate_query(project, branch, revision)
        return self.owners_at_revision(project, branch, revision, path, acting_user, debug, guard)

    def resolve_many(
        self,
        project: str,
        branch: str,
        paths: Sequence[str],
        revision: str | None = None,
        acting_user: ActingUser | None = None,
        debug: bool = False,
        guard: ResolutionGuard | None = None,
        max_workers: int = 4,
    ) -> list[PathOwners]:
        """Resolve many paths concurrently; results keep the order of ``paths``."""
        checked = [require_absolute_path(path) for path in paths]
        revision = self.validate_query(project, branch, revision)

        def resolve(path: str) -> PathOwners:
            return self.owners_at_revision(
                project, branch, revision, path, acting_user, debug, guard
            )

        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            return list(executor.map(resolve, checked))

    def owners_at_revision(
        self,
        project: str,
        branch: str,
        revision: str,
        path: str,
        acting_user: ActingUser | None = None,
        debug: bool = False,
        guard: ResolutionGuard | None = None,
    ) -> PathOwners:
        """Resolve the owners of an already validated path in a fresh pass."""
        resolution_pass = self.new_pass(project, acting_user, debug, guard)
        walk = resolution_pass.hierarchy.walk(project, branch, revision, path)
        return self.collect_owners(resolution_pass, project, walk)

    def collect_owners(
        self, resolution_pass: ResolutionPass, project: str, walk: HierarchyResult
    ) -> PathOwners:
        """Resolve the raw owners of a walk, then add global and fallback owners."""
        settings = resolution_pass.settings
        trace = resolution_pass.trace
        result = PathOwners(
            walk.path,
            walk.max_distance,
            parents_ignored=walk.parents_ignored,
            issues=list(walk.issues),
        )
        raw_owners = []
        for contribution in walk.contributions:
            raw_owners.extend(contribution.raw_owners())
            result.unresolved_imports.extend(contribution.unresolved_imports)
        # Unresolved imports block fallback owners.
        result.has_declared_owners = bool(raw_owners or result.unresolved_imports)

        if not walk.terminal and settings["global_owners"]:
            trace.add("adding global code owners %s", settings["global_owners"])
            raw_owners.extend(
                RawOwner(email, frozenset(), GLOBAL_OWNERS_SOURCE, walk.max_distance + 1)
                for email in settings["global_owners"]
            )
        if not result.has_declared_owners and not walk.parents_ignored:
            raw_owners.extend(self._fallback_owners(settings, project, walk, result, trace))

        found: dict[int, ResolvedOwner] = {}
        unresolved: dict[str, EmailResolution] = {}
        for raw in raw_owners:
            resolution = resolution_pass.owners.resolve(raw.email)
            if resolution.owned_by_all_users:
                result.owned_by_all_users = True
            elif resolution.account is None:
                unresolved.setdefault(raw.email, resolution)
            else:
                _add_owner(found, resolution.account, raw, trace)

        result.owners = sorted(found.values(), key=lambda owner: owner.distance)
        result.unresolved_emails = list(unresolved.values())
        result.debug_logs = trace.entries
        logger.debug(
            "Resolved %d owners for %s (all users: %s)",
            len(result.owners),
            walk.path,
            result.owned_by_all_users,
        )
        return result

    def _fallback_owners(
        self,
        settings: dict[str, Any],
        project: str,
        walk: HierarchyResult,
        result: PathOwners,
        trace: DebugTrace,
    ) -> list[RawOwner]:
        fallback = settings["fallback_owners"]
        if fallback == "ALL_USERS":
            trace.add("no code owners defined, falling back to all users")
            result.owned_by_all_users = True
        elif fallback == "PROJECT_OWNERS":
            trace.add("no code owners defined, falling back to project owners")
            return [
                RawOwner(account.preferred_email, frozenset(), PROJECT_OWNERS_SOURCE, walk.max_distance + 1)
                for account in self.directory.project_owners(project)
            ]
        return []


def _add_owner(
    found: dict[int, ResolvedOwner], account: Account, raw: RawOwner, trace: DebugTrace
) -> None:
    annotations = frozenset(a for a in raw.annotations if is_supported(a))
    for dropped in sorted(raw.annotations - annotations):
        trace.add("dropping unsupported annotation %s for email %s", dropped, raw.email)
    provenance = OwnerProvenance(raw.declaration_path, annotations)
    existing = found.get(account.account_id)
    if existing is None:
        found[account.account_id] = ResolvedOwner(account, raw.distance, (provenance,))
    elif provenance not in existing.provenances:
        found[account.account_id] = ResolvedOwner(
            account, min(existing.distance, raw.distance), existing.provenances + (provenance,)
        )
