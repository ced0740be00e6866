"""Fingerprint of the settings a resolution ran with."""

import hashlib
import json
from typing import Any

from codeowners.project_config import project_config


def compute_config_hash(config: dict[str, Any], project: str | None = None) -> str:
    """Return a SHA-256 fingerprint of the configuration.

    With ``project``, only the settings effective for that project are hashed,
    so overrides of other projects leave the fingerprint unchanged.
    """
    settings = project_config(config, project) if project is not None else config
    canonical = json.dumps(settings, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()
