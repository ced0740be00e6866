"""Tests for the command-line interface."""

from pathlib import Path

import pytest

from codeowners.cli import main

ACCOUNTS = """\
accounts:
  - id: 1
    email: admin@example.com
    name: Admin
  - id: 2
    email: user@example.com
    name: User
"""


@pytest.fixture
def repo(tmp_path: Path) -> Path:
    """Checked-out tree with a root and a nested declaration."""
    root = tmp_path / "repo"
    (root / "foo").mkdir(parents=True)
    (root / "OWNERS").write_text("admin@example.com\n", encoding="utf-8")
    (root / "foo" / "OWNERS").write_text(
        "user@example.com #{NEVER_SUGGEST}\nghost@example.com\n", encoding="utf-8"
    )
    (root / "foo" / "x.txt").write_text("x\n", encoding="utf-8")
    return root


@pytest.fixture
def accounts(tmp_path: Path) -> Path:
    path = tmp_path / "accounts.yaml"
    path.write_text(ACCOUNTS, encoding="utf-8")
    return path


def run(repo: Path, accounts: Path, *args: str) -> int:
    return main(["--root", str(repo), "--accounts", str(accounts), *args])


def test_owners(repo: Path, accounts: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Verify owners are printed with distance and annotations."""
    assert run(repo, accounts, "owners", "/foo/x.txt") == 0
    assert capsys.readouterr().out.splitlines() == [
        "user@example.com\t1\tNEVER_SUGGEST",
        "admin@example.com\t2",
        "# unresolved: ghost@example.com: no account with this email exists",
    ]


def test_owners_debug(repo: Path, accounts: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Verify --debug appends the resolution trace."""
    assert run(repo, accounts, "owners", "/foo/x.txt", "--debug") == 0
    assert "# inspecting folder /foo/" in capsys.readouterr().out.splitlines()


def test_check_reports_errors(repo: Path, accounts: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Verify check prints issues and fails on errors."""
    assert run(repo, accounts, "--user", "admin@example.com", "check") == 1
    lines = capsys.readouterr().out.splitlines()
    assert lines[0].startswith("# config ")
    assert lines[1:] == [
        "refs/heads/main:/foo/OWNERS: ERROR: code owner email 'ghost@example.com'"
        " in '/foo/OWNERS' cannot be resolved for Admin: no account with this email exists"
    ]


def test_check_min_severity(repo: Path, accounts: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Verify issues below the minimum severity are not reported."""
    assert run(repo, accounts, "check", "--min-severity", "FATAL") == 0
    assert len(capsys.readouterr().out.splitlines()) == 1


def test_check_owner(repo: Path, accounts: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Verify check-owner explains the ownership."""
    assert run(repo, accounts, "check-owner", "admin@example.com", "/foo/x.txt") == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines[:3] == ["is_code_owner: true", "is_resolvable: true", "owned_by_all_users: false"]
    assert "declared in: /OWNERS" in lines


def test_config_file(tmp_path: Path, accounts: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Verify configuration files are applied."""
    root = tmp_path / "bare"
    root.mkdir()
    config = tmp_path / "config.yaml"
    config.write_text("fallback_owners: ALL_USERS\n", encoding="utf-8")

    assert run(root, accounts, "--config", str(config), "owners", "/a.txt") == 0
    assert capsys.readouterr().out.splitlines() == ["*"]


def test_default_owners_root(tmp_path: Path, repo: Path, accounts: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Verify the default declaration is read from its own tree."""
    defaults = tmp_path / "defaults"
    defaults.mkdir()
    (defaults / "OWNERS").write_text("user@example.com\n", encoding="utf-8")

    assert run(repo, accounts, "--default-owners-root", str(defaults), "owners", "/b.txt") == 0
    assert capsys.readouterr().out.splitlines() == ["admin@example.com\t1", "user@example.com\t1"]


def test_invalid_path(repo: Path, accounts: Path) -> None:
    """Verify engine errors exit with a message instead of a traceback."""
    with pytest.raises(SystemExit, match="error: path must be absolute: relative.txt"):
        run(repo, accounts, "owners", "relative.txt")
