"""Lists which of a set of paths an account owns."""

from collections.abc import Sequence

from codeowners.account import Account, ActingUser
from codeowners.owners_engine import CodeOwnersEngine
from codeowners.pagination import check_pagination, paginate
from codeowners.paths import require_absolute_path


def get_owned_paths(
    engine: CodeOwnersEngine,
    project: str,
    branch: str,
    account: Account,
    paths: Sequence[str],
    revision: str | None = None,
    acting_user: ActingUser | None = None,
    start: int = 0,
    limit: int | None = None,
) -> list[str]:
    """Return the sorted paths owned by ``account``, paginated with start/limit."""
    check_pagination(start, limit)
    checked = sorted({require_absolute_path(p) for p in paths})
    revision = engine.validate_query(project, branch, revision)
    results = engine.resolve_many(project, branch, checked, revision, acting_user)
    owned = [owners.path for owners in results if owners.is_owned_by(account)]
    return paginate(owned, start, limit)
