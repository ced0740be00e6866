"""Consistency check of all declaration files of a project."""

import logging
import posixpath
from collections.abc import Sequence

from codeowners.account import ActingUser
from codeowners.consistency_issue import ConsistencyIssue, Severity, invalid_file_issue
from codeowners.declaration import ALL_USERS_WILDCARD, DeclarationKey
from codeowners.errors import InvalidInputError
from codeowners.owners_engine import CodeOwnersEngine, ResolutionPass
from codeowners.paths import folder_of
from codeowners.unresolved_import import UnresolvedImport

logger = logging.getLogger(__name__)


def check_consistency(
    engine: CodeOwnersEngine,
    project: str,
    acting_user: ActingUser,
    branches: Sequence[str] | None = None,
    min_severity: Severity = Severity.WARNING,
) -> dict[str, dict[str, list[ConsistencyIssue]]]:
    """Check every declaration file of the given branches (default: all branches).

    Returns ``{branch: {file path: [issues]}}``; files without issues map to an
    empty list. Emails are resolved with the visibility of ``acting_user``.
    """
    if not project or not engine.storage.project_exists(project):
        raise InvalidInputError(f"project {project} not found")
    if branches is None:
        branches = engine.storage.list_branches(project)
    revisions = {branch: engine.validate_query(project, branch) for branch in branches}

    report: dict[str, dict[str, list[ConsistencyIssue]]] = {}
    for branch, revision in revisions.items():
        resolution_pass = engine.new_pass(project, acting_user)
        file_name = resolution_pass.loader.file_name
        files = [
            f
            for f in engine.storage.list_files(project, branch, revision)
            if posixpath.basename(f) == file_name
        ]
        report[branch] = {}
        for file_path in files:
            issues = check_declaration_file(
                resolution_pass, project, branch, revision, file_path, acting_user
            )
            report[branch][file_path] = [i for i in issues if i.severity >= min_severity]
        logger.info("Checked %d code owner config files in %s:%s", len(files), project, branch)
    return report


def check_declaration_file(
    resolution_pass: ResolutionPass,
    project: str,
    branch: str,
    revision: str,
    file_path: str,
    acting_user: ActingUser,
) -> list[ConsistencyIssue]:
    """Return the issues of one declaration file."""
    key = DeclarationKey(project, branch, folder_of(file_path), posixpath.basename(file_path))
    loaded = resolution_pass.loader.load(key, revision)
    if loaded.errors:
        return [invalid_file_issue(file_path, message) for message in loaded.errors]
    declaration = loaded.declaration
    if declaration is None:
        return []

    issues = []
    references = list(declaration.imports)
    for owner_set in declaration.owner_sets:
        references.extend(owner_set.imports)
    for reference in dict.fromkeys(references):
        target = resolution_pass.imports.load_target(key, revision, reference)
        if isinstance(target, UnresolvedImport):
            issues.append(ConsistencyIssue.error(file_path, target.describe()))

    emails = dict.fromkeys(
        email
        for owner_set in declaration.owner_sets
        for email in owner_set.owners
        if email != ALL_USERS_WILDCARD
    )
    for email in emails:
        resolution = resolution_pass.owners.resolve(email)
        if not resolution.resolvable:
            issues.append(
                ConsistencyIssue.error(
                    file_path,
                    f"code owner email '{email}' in '{file_path}' cannot be resolved"
                    f" for {acting_user}: {resolution.reason}",
                )
            )
    return issues
