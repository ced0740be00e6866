"""Ranked reviewer suggestions for a path of a change."""

from dataclasses import dataclass

from codeowners.account import Account, ActingUser
from codeowners.annotations import NEVER_SUGGEST
from codeowners.change import Change
from codeowners.collaborators import ReviewState
from codeowners.debug_trace import DebugTrace
from codeowners.errors import InvalidInputError
from codeowners.owner_scoring import distance_score, rank_owners
from codeowners.owners_engine import CodeOwnersEngine
from codeowners.paths import require_absolute_path


@dataclass(frozen=True)
class Suggestion:
    account: Account
    distance: int
    score: float
    is_reviewer: bool
    annotations: frozenset[str]


@dataclass
class SuggestionResult:
    path: str
    suggestions: list[Suggestion]
    owned_by_all_users: bool
    debug_logs: tuple[str, ...] = ()


def suggest_owners(
    engine: CodeOwnersEngine,
    change: Change,
    path: str,
    requester: ActingUser | None = None,
    review_state: ReviewState | None = None,
    limit: int | None = None,
    seed: str | int | None = None,
    debug: bool = False,
) -> SuggestionResult:
    """Suggest owners of ``path`` as reviewers for ``change``.

    The change owner, the requester and members of the service accounts group
    are never suggested. Owners annotated with NEVER_SUGGEST are left out
    unless nobody else would remain.
    """
    if limit is not None and limit <= 0:
        raise InvalidInputError(f"limit must be positive: {limit}")
    path = require_absolute_path(path)
    revision = engine.validate_query(change.project, change.branch, change.revision)
    settings = engine.settings(change.project)
    limit = limit or settings["max_suggestions"]

    owners = engine.owners_at_revision(
        change.project, change.branch, revision, path, acting_user=requester, debug=debug
    )
    trace = DebugTrace(enabled=debug)
    excluded = {change.owner.account_id}
    if requester is not None:
        excluded.add(requester.account_id)
    service_group = settings["service_accounts_group"]

    candidates = []
    for owner in owners.owners:
        if owner.account_id in excluded:
            trace.add("filtering out %s: change owner or requester", owner.account_id)
        elif service_group and engine.directory.is_member(owner.account_id, service_group):
            trace.add("filtering out %s: member of %s", owner.account_id, service_group)
        else:
            candidates.append(owner)

    suggestable = [owner for owner in candidates if not owner.never_suggest]
    if candidates and not suggestable:
        trace.add("all code owners are annotated with %s, ignoring the annotation", NEVER_SUGGEST)
        suggestable = candidates
    else:
        for owner in candidates:
            if owner.never_suggest:
                trace.add("filtering out %s: annotated with %s", owner.account_id, NEVER_SUGGEST)

    reviewers = set(review_state.list_reviewers(change.number)) if review_state else set()
    ranked = rank_owners(suggestable, reviewers, change.number if seed is None else seed)
    suggestions = [
        Suggestion(
            account=owner.account,
            distance=owner.distance,
            score=distance_score(owner.distance, owners.max_distance),
            is_reviewer=owner.account_id in reviewers,
            annotations=owner.annotations,
        )
        for owner in ranked[:limit]
    ]
    return SuggestionResult(
        path, suggestions, owners.owned_by_all_users, owners.debug_logs + trace.entries
    )
