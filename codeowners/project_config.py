"""Per-project view of the configuration and its validation."""

from typing import Any

from codeowners.backend import BACKENDS
from codeowners.deep_merge import deep_merge
from codeowners.errors import ConfigurationError

FALLBACK_OWNERS = ("NONE", "ALL_USERS", "PROJECT_OWNERS")


def project_config(config: dict[str, Any], project: str) -> dict[str, Any]:
    """Return the settings of a project: its overrides merged over the global section."""
    base = {k: v for k, v in config.items() if k != "projects"}
    overrides = (config.get("projects") or {}).get(project) or {}
    return validate_config(deep_merge(base, overrides))


def validate_config(config: dict[str, Any]) -> dict[str, Any]:
    """Check value types and enumerations; raise ConfigurationError if invalid."""
    if config.get("backend") not in BACKENDS:
        raise ConfigurationError(
            f"unknown backend '{config.get('backend')}', expected one of {sorted(BACKENDS)}"
        )
    if config.get("fallback_owners") not in FALLBACK_OWNERS:
        raise ConfigurationError(
            f"invalid fallback_owners '{config.get('fallback_owners')}',"
            f" expected one of {list(FALLBACK_OWNERS)}"
        )
    for key in ("global_owners", "allowed_email_domains"):
        value = config.get(key)
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            raise ConfigurationError(f"'{key}' must be a list of strings")
    max_suggestions = config.get("max_suggestions")
    if not isinstance(max_suggestions, int) or max_suggestions <= 0:
        raise ConfigurationError("'max_suggestions' must be a positive integer")
    required = config.get("required_approval")
    if (
        not isinstance(required, dict)
        or not isinstance(required.get("label"), str)
        or not isinstance(required.get("value"), int)
    ):
        raise ConfigurationError("'required_approval' needs a string 'label' and an int 'value'")
    return config
