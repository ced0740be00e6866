"""Tests for loading an account directory from YAML."""

from pathlib import Path

import pytest

from codeowners.account import ActingUser
from codeowners.errors import ConfigurationError
from codeowners.yaml_accounts import load_account_directory

DIRECTORY = """\
accounts:
  - id: 1
    email: admin@example.com
    name: Admin
    secondary_emails: [root@example.com]
  - id: 2
    email: bot@example.com
    hidden: true
  - id: 3
    email: retired@example.com
    active: false
groups:
  Service Users: [2]
secondary_email_viewers: [1]
global_viewers: [1]
project_owners:
  my/project: [1]
"""


def test_load_account_directory(tmp_path: Path) -> None:
    """Verify accounts, groups and visibility rules are loaded."""
    path = tmp_path / "accounts.yaml"
    path.write_text(DIRECTORY, encoding="utf-8")
    directory = load_account_directory(path)

    (match,) = directory.lookup_by_email("root@example.com")
    assert match.account.account_id == 1
    assert match.secondary
    assert directory.is_member(2, "Service Users")
    assert not directory.accounts[3].active
    assert [a.account_id for a in directory.project_owners("my/project")] == [1]

    bot = directory.accounts[2]
    assert directory.can_see(ActingUser(1), bot)
    assert not directory.can_see(ActingUser(3), bot)
    assert directory.can_view_secondary_emails(ActingUser(1))


def test_empty_file(tmp_path: Path) -> None:
    path = tmp_path / "accounts.yaml"
    path.write_text("", encoding="utf-8")
    assert load_account_directory(path).accounts == {}


def test_invalid_account_entry(tmp_path: Path) -> None:
    """Verify entries without an email are rejected."""
    path = tmp_path / "accounts.yaml"
    path.write_text("accounts:\n  - id: 1\n", encoding="utf-8")
    with pytest.raises(ConfigurationError, match="invalid account entry"):
        load_account_directory(path)
