"""Load an account directory from a YAML file."""

import logging
from pathlib import Path
from typing import Any

import yaml

from codeowners.account import Account
from codeowners.errors import ConfigurationError
from codeowners.in_memory_accounts import InMemoryAccountDirectory

logger = logging.getLogger(__name__)


def load_account_directory(path: str | Path) -> InMemoryAccountDirectory:
    """Build a directory from a YAML document.

    Expected shape::

        accounts:
          - id: 1
            email: admin@example.com
            name: Admin
            secondary_emails: [root@example.com]
            active: true
            hidden: false
        groups:
          Service Users: [5]
        secondary_email_viewers: [1]
        global_viewers: [1]
        project_owners:
          my/project: [1]
    """
    data: dict[str, Any] = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    directory = InMemoryAccountDirectory()
    for entry in data.get("accounts", []):
        try:
            account = Account(
                account_id=int(entry["id"]),
                preferred_email=str(entry["email"]),
                display_name=str(entry.get("name", "")),
                secondary_emails=tuple(entry.get("secondary_emails", [])),
                active=bool(entry.get("active", True)),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ConfigurationError(f"invalid account entry {entry!r} in {path}: {e}") from e
        directory.add_account(account)
        if entry.get("hidden", False):
            directory.hidden_accounts.add(account.account_id)
    for group, members in (data.get("groups") or {}).items():
        for account_id in members:
            directory.add_to_group(group, int(account_id))
    directory.secondary_email_viewers.update(int(i) for i in data.get("secondary_email_viewers", []))
    directory.global_viewers.update(int(i) for i in data.get("global_viewers", []))
    for project, owner_ids in (data.get("project_owners") or {}).items():
        directory.owners_by_project[project].extend(int(i) for i in owner_ids)
    logger.info("Loaded %d accounts from %s", len(directory.accounts), path)
    return directory
