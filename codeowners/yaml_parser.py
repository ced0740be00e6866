"""Parser and formatter for the structured ``OWNERS.yaml`` grammar.

Example::

    ignore_parent_owners: false
    imports:
      - file: /common/OWNERS.yaml
        mode: ALL
    owner_sets:
      - owners:
          - jane@example.com
          - email: john@example.com
            annotations: [NEVER_SUGGEST]
      - path_expressions: ["*.md"]
        ignore_global_and_parent_owners: true
        owners: [docs@example.com]
        imports:
          - project: other
            branch: refs/heads/main
            file: /docs/OWNERS.yaml
"""

import logging
from typing import Any

import yaml

from codeowners.declaration import (
    DeclarationKey,
    ImportMode,
    ImportReference,
    OwnerSet,
    OwnershipDeclaration,
)
from codeowners.errors import DeclarationParseError

logger = logging.getLogger(__name__)

FILE_NAME = "OWNERS.yaml"

_TOP_LEVEL_KEYS = {"ignore_parent_owners", "imports", "owner_sets"}
_OWNER_SET_KEYS = {
    "path_expressions",
    "owners",
    "ignore_global_and_parent_owners",
    "ignore_global_owners",
    "imports",
}
_IMPORT_KEYS = {"file", "project", "branch", "mode"}


class _Validator:
    def __init__(self) -> None:
        self.errors: list[str] = []

    def flag(self, data: dict[str, Any], name: str, where: str) -> bool:
        value = data.get(name, False)
        if not isinstance(value, bool):
            self.errors.append(f"{where}: '{name}' must be a boolean")
            return False
        return value

    def sequence(self, value: Any, where: str) -> list[Any]:
        if value is None:
            return []
        if not isinstance(value, list):
            self.errors.append(f"{where}: expected a list")
            return []
        return value

    def string_list(self, value: Any, where: str) -> list[str]:
        if value is None:
            return []
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            self.errors.append(f"{where}: expected a list of strings")
            return []
        return value

    def import_reference(self, data: Any, where: str, default_mode: ImportMode) -> ImportReference | None:
        if not isinstance(data, dict):
            self.errors.append(f"{where}: import must be a mapping")
            return None
        unknown = sorted(set(data) - _IMPORT_KEYS)
        if unknown:
            self.errors.append(f"{where}: unknown keys {unknown}")
        file_path = data.get("file")
        if not isinstance(file_path, str) or not file_path:
            self.errors.append(f"{where}: 'file' is required")
            return None
        try:
            mode = ImportMode(data.get("mode", default_mode.value))
        except ValueError:
            self.errors.append(f"{where}: unknown import mode {data.get('mode')}")
            return None
        project = data.get("project")
        branch = data.get("branch")
        if branch and not project:
            self.errors.append(f"{where}: 'project' is required if 'branch' is specified")
            return None
        return ImportReference(mode, file_path, project, branch)

    def owners(self, value: Any, where: str) -> tuple[list[str], list[tuple[str, str]]]:
        emails: list[str] = []
        annotations: list[tuple[str, str]] = []
        if value is None:
            return emails, annotations
        if not isinstance(value, list):
            self.errors.append(f"{where}: 'owners' must be a list")
            return emails, annotations
        for i, entry in enumerate(value):
            if isinstance(entry, str):
                email, keys = entry, []
            elif isinstance(entry, dict) and isinstance(entry.get("email"), str):
                email = entry["email"]
                keys = self.string_list(entry.get("annotations"), f"{where}[{i}]")
            else:
                self.errors.append(f"{where}[{i}]: owner must be an email or a mapping with 'email'")
                continue
            if email not in emails:
                emails.append(email)
            annotations.extend((email, key) for key in keys if (email, key) not in annotations)
        return emails, annotations

    def owner_set(self, data: Any, where: str) -> OwnerSet | None:
        if not isinstance(data, dict):
            self.errors.append(f"{where}: owner set must be a mapping")
            return None
        unknown = sorted(set(data) - _OWNER_SET_KEYS)
        if unknown:
            self.errors.append(f"{where}: unknown keys {unknown}")
        globs = self.string_list(data.get("path_expressions"), f"{where}.path_expressions")
        emails, annotations = self.owners(data.get("owners"), f"{where}.owners")
        imports = []
        for i, entry in enumerate(self.sequence(data.get("imports"), f"{where}.imports")):
            reference = self.import_reference(
                entry, f"{where}.imports[{i}]", ImportMode.PER_FILE_GLOBAL_SETS_ONLY
            )
            if reference is None:
                continue
            if not globs:
                self.errors.append(f"{where}.imports[{i}]: imports of an owner set require path expressions")
            elif reference.mode is ImportMode.ALL:
                self.errors.append(
                    f"{where}.imports[{i}]: import mode ALL is unsupported for per-file import"
                )
            else:
                imports.append(reference)
        return OwnerSet(
            path_expressions=tuple(dict.fromkeys(globs)),
            owners=tuple(emails),
            annotations=tuple(annotations),
            ignore_global_and_parent_owners=self.flag(data, "ignore_global_and_parent_owners", where),
            ignore_global_owners=self.flag(data, "ignore_global_owners", where),
            imports=tuple(imports),
        )


def _is_empty(owner_set: OwnerSet) -> bool:
    return not (
        owner_set.owners
        or owner_set.imports
        or owner_set.ignore_global_and_parent_owners
        or owner_set.ignore_global_owners
    )


def parse(
    content: bytes | str, key: DeclarationKey, revision: str | None = None
) -> OwnershipDeclaration:
    """Parse ``OWNERS.yaml`` content; raises DeclarationParseError on invalid input.

    Owner sets that define nothing are dropped.
    """
    try:
        data = yaml.safe_load(content) or {}
    except yaml.YAMLError as e:
        raise DeclarationParseError([f"invalid YAML: {e}".replace("\n", " ")]) from e
    if not isinstance(data, dict):
        raise DeclarationParseError(["top level must be a mapping"])

    validator = _Validator()
    unknown = sorted(set(data) - _TOP_LEVEL_KEYS)
    if unknown:
        validator.errors.append(f"unknown keys {unknown}")
    ignore_parent = validator.flag(data, "ignore_parent_owners", "declaration")
    imports = []
    for i, entry in enumerate(validator.sequence(data.get("imports"), "imports")):
        reference = validator.import_reference(entry, f"imports[{i}]", ImportMode.ALL)
        if reference is not None:
            imports.append(reference)
    owner_sets = []
    for i, entry in enumerate(validator.sequence(data.get("owner_sets"), "owner_sets")):
        owner_set = validator.owner_set(entry, f"owner_sets[{i}]")
        if owner_set is not None and not _is_empty(owner_set):
            owner_sets.append(owner_set)
    if validator.errors:
        raise DeclarationParseError(validator.errors)

    logger.debug("Parsed %s: %d owner sets, %d imports", key, len(owner_sets), len(imports))
    return OwnershipDeclaration(
        key=key,
        revision=revision,
        ignore_parent_owners=ignore_parent,
        owner_sets=tuple(owner_sets),
        imports=tuple(imports),
    )


def _import_as_dict(reference: ImportReference) -> dict[str, Any]:
    data: dict[str, Any] = {}
    if reference.project:
        data["project"] = reference.project
    if reference.branch:
        data["branch"] = reference.branch
    data["file"] = reference.file_path
    data["mode"] = reference.mode.value
    return data


def format_declaration(declaration: OwnershipDeclaration) -> str:
    """Render a declaration as ``OWNERS.yaml`` text."""
    data: dict[str, Any] = {}
    if declaration.ignore_parent_owners:
        data["ignore_parent_owners"] = True
    if declaration.imports:
        data["imports"] = [_import_as_dict(r) for r in declaration.imports]
    owner_sets = []
    for owner_set in declaration.owner_sets:
        entry: dict[str, Any] = {}
        if owner_set.path_expressions:
            entry["path_expressions"] = list(owner_set.path_expressions)
        if owner_set.ignore_global_and_parent_owners:
            entry["ignore_global_and_parent_owners"] = True
        if owner_set.ignore_global_owners:
            entry["ignore_global_owners"] = True
        owners: list[Any] = []
        for email in owner_set.owners:
            keys = sorted(owner_set.annotations_for(email))
            owners.append({"email": email, "annotations": keys} if keys else email)
        if owners:
            entry["owners"] = owners
        if owner_set.imports:
            entry["imports"] = [_import_as_dict(r) for r in owner_set.imports]
        owner_sets.append(entry)
    if owner_sets:
        data["owner_sets"] = owner_sets
    return yaml.safe_dump(data, sort_keys=False, default_flow_style=False)


class YamlBackend:
    """Backend for the ``OWNERS.yaml`` grammar."""

    name = "yaml"
    file_name = FILE_NAME

    def parse(
        self, content: bytes | str, key: DeclarationKey, revision: str | None = None
    ) -> OwnershipDeclaration:
        return parse(content, key, revision)

    def format_declaration(self, declaration: OwnershipDeclaration) -> str:
        return format_declaration(declaration)
