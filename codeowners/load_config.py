"""Logic for loading and merging configuration files."""

import copy
from pathlib import Path
from typing import Any

import yaml

from codeowners.deep_merge import deep_merge

DEFAULT_CONFIG: dict[str, Any] = {
    "backend": "find-owners",
    "file_name": None,
    "default_owners_branch": "refs/meta/config",
    "global_owners": [],
    "fallback_owners": "NONE",
    "allowed_email_domains": [],
    "service_accounts_group": "Service Users",
    "enable_implicit_approvals": False,
    "required_approval": {
        "label": "Code-Review",
        "value": 1,
    },
    "max_suggestions": 10,
    "projects": {},
}


def load_config(path: str | None = None) -> dict[str, Any]:
    """Load configuration from a YAML file and merge it with defaults."""
    config = copy.deepcopy(DEFAULT_CONFIG)
    if path:
        p = Path(path)
        if p.exists():
            user_config = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
            config = deep_merge(config, user_config)
    return config
