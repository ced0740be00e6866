"""Command-line interface for inspecting the code owners of a checked-out tree."""

import argparse
import logging
from collections.abc import Sequence
from pathlib import Path

from codeowners.account import ActingUser
from codeowners.collaborators import AccountDirectory
from codeowners.compute_config_hash import compute_config_hash
from codeowners.consistency_checker import check_consistency
from codeowners.consistency_issue import Severity
from codeowners.errors import AccountLookupError, CodeOwnersError
from codeowners.filesystem_storage import FilesystemStorage
from codeowners.in_memory_accounts import InMemoryAccountDirectory
from codeowners.load_config import load_config
from codeowners.owner_check import check_code_owner
from codeowners.owners_engine import CodeOwnersEngine
from codeowners.yaml_accounts import load_account_directory

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Resolve and check code owners of a checked-out source tree."
    )
    parser.add_argument("--root", default=".", help="Checked-out tree of the branch")
    parser.add_argument("--project", default="local", help="Project name")
    parser.add_argument("--branch", default="refs/heads/main", help="Branch name")
    parser.add_argument(
        "--default-owners-root",
        help="Checked-out tree of the branch holding the default code owners",
    )
    parser.add_argument("--config", help="Path to configuration file")
    parser.add_argument("--accounts", help="YAML file describing accounts and groups")
    parser.add_argument("--user", help="Email of the user on whose behalf visibility is checked")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)
    owners = subparsers.add_parser("owners", help="Print the owners of a path")
    owners.add_argument("path")
    owners.add_argument("--debug", action="store_true", help="Print the resolution trace")

    check = subparsers.add_parser("check", help="Check all code owner config files")
    check.add_argument(
        "--min-severity",
        choices=[s.name for s in Severity],
        default=Severity.WARNING.name,
        help="Only report issues of at least this severity",
    )

    check_owner = subparsers.add_parser("check-owner", help="Explain whether an email owns a path")
    check_owner.add_argument("email")
    check_owner.add_argument("path")
    return parser


def acting_user_for(directory: AccountDirectory, email: str | None) -> ActingUser | None:
    """Map the ``--user`` email to an acting user; unknown emails act without an account."""
    if not email:
        return None
    try:
        matches = directory.lookup_by_email(email)
    except AccountLookupError as e:
        raise SystemExit(f"cannot look up user {email}: {e}") from e
    if len(matches) == 1:
        return ActingUser.of(matches[0].account)
    logger.warning("User %s does not map to exactly one account", email)
    return ActingUser(None, email)


def main(argv: Sequence[str] | None = None) -> int:
    """Run the command-line interface."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    config = load_config(args.config)
    branch_roots = {args.branch: Path(args.root)}
    if args.default_owners_root:
        branch_roots[config["default_owners_branch"]] = Path(args.default_owners_root)
    storage = FilesystemStorage(args.project, branch_roots)

    try:
        directory = (
            load_account_directory(args.accounts) if args.accounts else InMemoryAccountDirectory()
        )
        engine = CodeOwnersEngine(storage, directory, config)
        acting_user = acting_user_for(directory, args.user)
        if args.command == "owners":
            return _print_owners(engine, args, acting_user)
        if args.command == "check":
            return _print_check(engine, args, acting_user, compute_config_hash(config, args.project))
        return _print_owner_check(engine, args, acting_user)
    except CodeOwnersError as e:
        raise SystemExit(f"error: {e}") from e


def _print_owners(engine: CodeOwnersEngine, args: argparse.Namespace, user: ActingUser | None) -> int:
    result = engine.get_owners(args.project, args.branch, args.path, acting_user=user, debug=args.debug)
    if result.owned_by_all_users:
        print("*")
    for owner in result.owners:
        annotations = ",".join(sorted(owner.annotations))
        print(f"{owner.account.preferred_email}\t{owner.distance}\t{annotations}".rstrip())
    for unresolved in result.unresolved_emails:
        print(f"# unresolved: {unresolved.email}: {unresolved.reason}")
    for entry in result.debug_logs:
        print(f"# {entry}")
    return 0


def _print_check(
    engine: CodeOwnersEngine, args: argparse.Namespace, user: ActingUser | None, config_hash: str
) -> int:
    report = check_consistency(
        engine,
        args.project,
        user or ActingUser(None),
        [args.branch],
        Severity[args.min_severity],
    )
    print(f"# config {config_hash[:12]}")
    failed = False
    for branch, files in report.items():
        for file_path, issues in files.items():
            for issue in issues:
                print(f"{branch}:{file_path}: {issue.severity.name}: {issue.message}")
                failed = failed or issue.severity >= Severity.ERROR
    return 1 if failed else 0


def _print_owner_check(
    engine: CodeOwnersEngine, args: argparse.Namespace, user: ActingUser | None
) -> int:
    result = check_code_owner(engine, args.project, args.branch, args.path, args.email, user)
    print(f"is_code_owner: {str(result.is_code_owner).lower()}")
    print(f"is_resolvable: {str(result.is_resolvable).lower()}")
    print(f"owned_by_all_users: {str(result.owned_by_all_users).lower()}")
    if result.reason:
        print(f"reason: {result.reason}")
    for declaration_path in result.declaration_paths:
        print(f"declared in: {declaration_path}")
    for entry in result.debug_logs:
        print(f"# {entry}")
    return 0
