"""Tests for configuration loading, merging and per-project settings."""

from pathlib import Path

import pytest
import yaml

from codeowners.compute_config_hash import compute_config_hash
from codeowners.deep_merge import deep_merge
from codeowners.errors import ConfigurationError
from codeowners.load_config import DEFAULT_CONFIG, load_config
from codeowners.project_config import project_config


def test_deep_merge_scalars() -> None:
    """Verify scalar replacement in deep merge."""
    merged = deep_merge({"a": 1, "b": 2}, {"b": 3, "c": 4})
    assert merged == {"a": 1, "b": 3, "c": 4}


def test_deep_merge_nested() -> None:
    """Verify recursive merging of dictionaries."""
    base = {"required_approval": {"label": "Code-Review", "value": 1}}
    update = {"required_approval": {"value": 2}}
    merged = deep_merge(base, update)
    assert merged == {"required_approval": {"label": "Code-Review", "value": 2}}


def test_deep_merge_arrays_replace() -> None:
    """Verify that arrays are replaced by default."""
    merged = deep_merge({"allowed_email_domains": ["a.com"]}, {"allowed_email_domains": ["b.com"]})
    assert merged == {"allowed_email_domains": ["b.com"]}


def test_deep_merge_global_owners_additive() -> None:
    """Verify that the global owners list is merged additively."""
    merged = deep_merge(
        {"global_owners": ["bot@example.com", "admin@example.com"]},
        {"global_owners": ["admin@example.com", "lead@example.com"]},
    )
    assert merged["global_owners"] == ["admin@example.com", "bot@example.com", "lead@example.com"]


def test_compute_config_hash_stability() -> None:
    """Verify that config hash is stable regardless of key order."""
    config1 = {"b": 2, "a": 1, "nested": {"y": 2, "x": 1}}
    config2 = {"a": 1, "b": 2, "nested": {"x": 1, "y": 2}}
    assert compute_config_hash(config1) == compute_config_hash(config2)
    assert compute_config_hash(config1) != compute_config_hash({"a": 1})


def test_compute_config_hash_per_project() -> None:
    """Verify a project's fingerprint ignores overrides of other projects."""
    config = load_config(None)
    before = compute_config_hash(config, "p")
    config["projects"] = {"q": {"fallback_owners": "ALL_USERS"}}
    assert compute_config_hash(config, "p") == before
    assert compute_config_hash(config, "q") != before


def test_load_config_defaults() -> None:
    """Verify that default config is loaded when no path is provided."""
    config = load_config(None)
    assert config["backend"] == "find-owners"
    assert config["fallback_owners"] == "NONE"
    assert config == DEFAULT_CONFIG
    assert config is not DEFAULT_CONFIG


def test_load_config_does_not_mutate_defaults(tmp_path: Path) -> None:
    """Verify that loading a user config leaves the defaults untouched."""
    config_file = tmp_path / "config.yml"
    config_file.write_text(yaml.dump({"required_approval": {"value": 2}}))

    loaded = load_config(str(config_file))
    val_2 = 2
    assert loaded["required_approval"]["value"] == val_2
    assert DEFAULT_CONFIG["required_approval"]["value"] == 1


def test_load_config_with_file(tmp_path: Path) -> None:
    """Verify that user config correctly overrides defaults."""
    config_file = tmp_path / "config.yml"
    config_data = {"backend": "yaml", "max_suggestions": 3, "global_owners": ["bot@example.com"]}
    config_file.write_text(yaml.dump(config_data))

    loaded = load_config(str(config_file))
    val_3 = 3
    assert loaded["backend"] == "yaml"
    assert loaded["max_suggestions"] == val_3
    assert loaded["global_owners"] == ["bot@example.com"]
    assert loaded["default_owners_branch"] == "refs/meta/config"  # Default


def test_load_config_missing_file(tmp_path: Path) -> None:
    """Verify that a missing config file falls back to defaults."""
    assert load_config(str(tmp_path / "absent.yml")) == DEFAULT_CONFIG


def test_project_config_applies_overrides() -> None:
    """Verify that per-project overrides are merged over the global section."""
    config = load_config(None)
    config["global_owners"] = ["admin@example.com"]
    config["projects"] = {
        "infra": {"fallback_owners": "PROJECT_OWNERS", "global_owners": ["ops@example.com"]}
    }

    infra = project_config(config, "infra")
    assert infra["fallback_owners"] == "PROJECT_OWNERS"
    assert infra["global_owners"] == ["admin@example.com", "ops@example.com"]
    assert "projects" not in infra

    other = project_config(config, "other")
    assert other["fallback_owners"] == "NONE"
    assert other["global_owners"] == ["admin@example.com"]


@pytest.mark.parametrize(
    ("key", "value"),
    [
        ("backend", "proto"),
        ("fallback_owners", "EVERYONE"),
        ("global_owners", "admin@example.com"),
        ("max_suggestions", 0),
        ("required_approval", {"label": "Code-Review"}),
    ],
)
def test_project_config_rejects_invalid_values(key: str, value: object) -> None:
    """Verify that invalid configuration values raise ConfigurationError."""
    config = load_config(None)
    config[key] = value
    with pytest.raises(ConfigurationError):
        project_config(config, "any")
