"""Scoring and deterministic ordering of owners for suggestions."""

import hashlib
from collections.abc import Iterable

from codeowners.resolved_owner import ResolvedOwner


def distance_score(distance: int, max_distance: int) -> float:
    """Score in [0, 1]; owners in the closest folder score highest, global owners 0."""
    return max(0.0, 1.0 - distance / (max_distance + 1))


def tie_break_key(seed: str | int, account_id: int) -> str:
    """Stable pseudo-random key; equal inputs always give the same order."""
    return hashlib.sha256(f"{seed}:{account_id}".encode()).hexdigest()


def rank_owners(
    owners: Iterable[ResolvedOwner], reviewers: set[int], seed: str | int
) -> list[ResolvedOwner]:
    """Order owners: current reviewers first, then by distance, then by tie-break key."""
    return sorted(
        owners,
        key=lambda owner: (
            owner.account_id not in reviewers,
            owner.distance,
            tie_break_key(seed, owner.account_id),
        ),
    )
