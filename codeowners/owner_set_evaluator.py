"""Determines which owner sets of a declaration apply to a path."""

from collections.abc import Iterator
from dataclasses import dataclass

from codeowners.debug_trace import DebugTrace
from codeowners.declaration import ALL_USERS_WILDCARD, DeclarationKey, OwnershipDeclaration
from codeowners.glob_matcher import matches_any
from codeowners.import_resolver import ImportResolver, PendingImport, SourcedOwnerSet
from codeowners.paths import relative_to
from codeowners.unresolved_import import UnresolvedImport


@dataclass(frozen=True)
class RawOwner:
    """An owner reference as written in a declaration, before identity resolution."""

    email: str
    annotations: frozenset[str]
    declaration_path: str
    distance: int


@dataclass(frozen=True)
class DeclarationContribution:
    """What one folder's declaration contributes for a path.

    ``ignore_parent_owners`` stops the walk at this folder. ``terminal`` is set
    when a matching per-file set ignores global and parent owners; it also
    suppresses the default, global and fallback tiers.
    """

    key: DeclarationKey
    distance: int
    owner_sets: tuple[SourcedOwnerSet, ...]
    ignore_parent_owners: bool = False
    terminal: bool = False
    unresolved_imports: tuple[UnresolvedImport, ...] = ()

    def raw_owners(self) -> Iterator[RawOwner]:
        """Yield owner references in declaration order.

        Annotations attached to the all-users wildcard apply to every owner.
        """
        wildcard_annotations: set[str] = set()
        for sourced in self.owner_sets:
            wildcard_annotations |= sourced.owner_set.annotations_for(ALL_USERS_WILDCARD)
        for sourced in self.owner_sets:
            for email in sourced.owner_set.owners:
                annotations = sourced.owner_set.annotations_for(email) | wildcard_annotations
                yield RawOwner(email, frozenset(annotations), sourced.source.file_path, self.distance)


class OwnerSetEvaluator:
    """Evaluates one declaration, including its imports, for one path."""

    def __init__(self, resolver: ImportResolver, trace: DebugTrace) -> None:
        self.resolver = resolver
        self.trace = trace

    def evaluate(
        self, declaration: OwnershipDeclaration, path: str, distance: int
    ) -> DeclarationContribution:
        key = declaration.key
        relative_path = relative_to(key.folder_path, path)

        owner_sets = []
        for owner_set in declaration.owner_sets:
            if owner_set.is_global:
                owner_sets.append(SourcedOwnerSet(owner_set, key, declaration.revision))
            elif matches_any(owner_set.path_expressions, relative_path):
                self.trace.add(
                    "per-file code owner set with path expressions %s matches",
                    list(owner_set.path_expressions),
                )
                owner_sets.append(SourcedOwnerSet(owner_set, key, declaration.revision))
            else:
                self.trace.add(
                    "per-file code owner set with path expressions %s does not match",
                    list(owner_set.path_expressions),
                )

        if declaration.imports:
            self.trace.add("resolving imports of %s", key)
        global_imports = self.resolver.resolve(
            [
                PendingImport(key, declaration.revision, reference, reference.mode, 1, "global import")
                for reference in declaration.imports
            ],
            relative_path,
            {key},
        )
        owner_sets.extend(global_imports.owner_sets)
        ignore_parent = declaration.ignore_parent_owners or global_imports.ignore_parent_owners

        per_file_sets = [s for s in owner_sets if not s.owner_set.is_global]
        terminal = any(s.owner_set.ignore_global_and_parent_owners for s in per_file_sets)
        if terminal:
            self.trace.add(
                "found matching per-file code owner set that ignores global and parent code owners"
            )
            owner_sets = per_file_sets
            ignore_parent = True
        elif any(s.owner_set.ignore_global_owners for s in per_file_sets):
            self.trace.add("found matching per-file code owner set that ignores global code owners")
            owner_sets = per_file_sets

        per_file_pending = [
            PendingImport(
                s.source,
                s.revision,
                reference,
                reference.mode,
                1,
                f"per-file import, path expressions = {list(s.owner_set.path_expressions)}",
            )
            for s in per_file_sets
            for reference in s.owner_set.imports
        ]
        per_file_imports = self.resolver.resolve(per_file_pending, relative_path, {key})
        owner_sets.extend(per_file_imports.owner_sets)

        return DeclarationContribution(
            key=key,
            distance=distance,
            owner_sets=tuple(owner_sets),
            ignore_parent_owners=ignore_parent,
            terminal=terminal,
            unresolved_imports=tuple(global_imports.unresolved + per_file_imports.unresolved),
        )
