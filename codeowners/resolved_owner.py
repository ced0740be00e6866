"""Resolved owners and where they were found."""

from dataclasses import dataclass

from codeowners.account import Account
from codeowners.annotations import NEVER_SUGGEST


@dataclass(frozen=True)
class OwnerProvenance:
    """One declaration through which an owner was found."""

    declaration_path: str
    annotations: frozenset[str] = frozenset()


@dataclass(frozen=True)
class ResolvedOwner:
    """A concrete account that owns a path."""

    account: Account
    distance: int
    provenances: tuple[OwnerProvenance, ...] = ()

    @property
    def account_id(self) -> int:
        return self.account.account_id

    @property
    def annotations(self) -> frozenset[str]:
        keys: set[str] = set()
        for provenance in self.provenances:
            keys |= provenance.annotations
        return frozenset(keys)

    @property
    def declaration_paths(self) -> tuple[str, ...]:
        return tuple(dict.fromkeys(p.declaration_path for p in self.provenances))

    @property
    def never_suggest(self) -> bool:
        """True when every provenance marks the owner as never to be suggested."""
        return bool(self.provenances) and all(
            NEVER_SUGGEST in p.annotations for p in self.provenances
        )
