"""Explains whether an email is an owner of a path."""

from dataclasses import dataclass

from codeowners.account import ActingUser
from codeowners.errors import InvalidInputError
from codeowners.owners_engine import CodeOwnersEngine
from codeowners.paths import require_absolute_path


@dataclass(frozen=True)
class OwnerCheckResult:
    email: str
    path: str
    is_code_owner: bool
    is_resolvable: bool
    owned_by_all_users: bool
    declaration_paths: tuple[str, ...] = ()
    annotations: tuple[str, ...] = ()
    reason: str | None = None
    debug_logs: tuple[str, ...] = ()


def check_code_owner(
    engine: CodeOwnersEngine,
    project: str,
    branch: str,
    path: str,
    email: str,
    acting_user: ActingUser | None = None,
    revision: str | None = None,
) -> OwnerCheckResult:
    """Check ownership of ``email`` for ``path`` with the visibility of ``acting_user``.

    The result always carries the full trace of the resolution.
    """
    if not email:
        raise InvalidInputError("email is required")
    path = require_absolute_path(path)
    revision = engine.validate_query(project, branch, revision)

    resolution_pass = engine.new_pass(project, acting_user, debug=True)
    walk = resolution_pass.hierarchy.walk(project, branch, revision, path)
    owners = engine.collect_owners(resolution_pass, project, walk)
    resolution = resolution_pass.owners.resolve(email)

    if resolution.owned_by_all_users:
        is_code_owner = owners.owned_by_all_users
        owner = None
    elif resolution.account is not None:
        owner = next((o for o in owners.owners if o.account_id == resolution.account.account_id), None)
        is_code_owner = owner is not None or owners.owned_by_all_users
    else:
        owner = None
        is_code_owner = False

    return OwnerCheckResult(
        email=email,
        path=path,
        is_code_owner=is_code_owner,
        is_resolvable=resolution.resolvable,
        owned_by_all_users=owners.owned_by_all_users,
        declaration_paths=owner.declaration_paths if owner else (),
        annotations=tuple(sorted(owner.annotations)) if owner else (),
        reason=None if resolution.resolvable else resolution.reason,
        debug_logs=resolution_pass.trace.entries,
    )
