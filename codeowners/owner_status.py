"""Approval status of the paths touched by a change."""

import itertools
import logging
from dataclasses import dataclass
from enum import Enum

from codeowners.change import Change
from codeowners.collaborators import ReviewState
from codeowners.owners_engine import CodeOwnersEngine, PathOwners
from codeowners.pagination import check_pagination, paginate
from codeowners.paths import require_absolute_path

logger = logging.getLogger(__name__)


class OwnerStatus(Enum):
    INSUFFICIENT_REVIEWERS = "INSUFFICIENT_REVIEWERS"
    PENDING = "PENDING"
    APPROVED = "APPROVED"


@dataclass(frozen=True)
class PathStatus:
    path: str
    status: OwnerStatus
    reason: str | None = None


def get_path_statuses(
    engine: CodeOwnersEngine,
    change: Change,
    review_state: ReviewState,
    start: int = 0,
    limit: int | None = None,
) -> list[PathStatus]:
    """Compute the status of every changed path, sorted by path and paginated.

    Owners are resolved with the uploader's visibility.
    """
    check_pagination(start, limit)
    paths = sorted({require_absolute_path(p) for p in change.changed_paths})
    revision = engine.validate_query(change.project, change.branch, change.revision)

    settings = engine.settings(change.project)
    label = settings["required_approval"]["label"]
    required_value = settings["required_approval"]["value"]
    reviewers = set(review_state.list_reviewers(change.number))
    votes = review_state.list_votes(change.number, label)
    approvers = sorted(account_id for account_id, value in votes.items() if value >= required_value)

    statuses = []
    for path in paginate(paths, start, limit):
        owners = engine.owners_at_revision(
            change.project, change.branch, revision, path, acting_user=change.uploader
        )
        status = path_status(
            owners, change, reviewers, approvers, settings["enable_implicit_approvals"]
        )
        logger.debug("Status of %s in change %d: %s", path, change.number, status.status.name)
        statuses.append(status)
    return statuses


def path_status(
    owners: PathOwners,
    change: Change,
    reviewers: set[int],
    approvers: list[int],
    implicit_approvals: bool = False,
) -> PathStatus:
    """Classify one path; owner tiers are checked closest first."""
    uploader = change.uploader
    if implicit_approvals and uploader.account_id is not None:
        if owners.owned_by_all_users or uploader.account_id in owners.owner_ids:
            return PathStatus(
                owners.path,
                OwnerStatus.APPROVED,
                f"implicitly approved by the patch set uploader {uploader}",
            )

    pending_reason = None
    for _, group in itertools.groupby(owners.owners, key=lambda owner: owner.distance):
        tier = list(group)
        for owner in tier:
            if owner.account_id in approvers:
                return PathStatus(owners.path, OwnerStatus.APPROVED, f"approved by {owner.account}")
        if pending_reason is None:
            for owner in tier:
                if owner.account_id in reviewers:
                    pending_reason = f"{owner.account} who is a code owner is a reviewer"
                    break

    if owners.owned_by_all_users:
        if approvers:
            return PathStatus(
                owners.path, OwnerStatus.APPROVED, f"approved by account {approvers[0]}"
            )
        if pending_reason is None and reviewers:
            pending_reason = f"account {min(reviewers)} who is a code owner is a reviewer"

    if pending_reason is not None:
        return PathStatus(owners.path, OwnerStatus.PENDING, pending_reason)
    return PathStatus(owners.path, OwnerStatus.INSUFFICIENT_REVIEWERS)
