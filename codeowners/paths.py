"""Helpers for absolute, slash-separated repository paths."""

import posixpath

from codeowners.errors import InvalidInputError


def normalize_path(path: str) -> str:
    """Collapse ``.``/``..`` segments and duplicate slashes of an absolute path."""
    normalized = posixpath.normpath(path)
    if normalized.startswith("//"):
        normalized = "/" + normalized.lstrip("/")
    return normalized


def require_absolute_path(path: str | None) -> str:
    """Validate a caller-supplied file path and return it normalized."""
    if not path:
        raise InvalidInputError("path is required")
    if not path.startswith("/"):
        raise InvalidInputError(f"path must be absolute: {path}")
    normalized = normalize_path(path)
    if normalized == "/":
        raise InvalidInputError(f"path must denote a file: {path}")
    return normalized


def folder_of(file_path: str) -> str:
    """Return the folder of a file path, ending with ``/``."""
    folder = posixpath.dirname(file_path)
    return folder if folder.endswith("/") else folder + "/"


def parent_folders(path: str) -> list[str]:
    """Return the ancestor folders of a path, closest first, down to ``/``."""
    folders = []
    folder = folder_of(path)
    while True:
        folders.append(folder)
        if folder == "/":
            return folders
        folder = folder_of(folder.rstrip("/"))


def segment_count(path: str) -> int:
    """Number of non-empty segments; ``/`` has none, ``/a/b.txt`` has two."""
    return len([s for s in path.split("/") if s])


def relative_to(folder: str, path: str) -> str:
    """Return ``path`` relative to ``folder`` (which must be an ancestor)."""
    if not path.startswith(folder):
        raise ValueError(f"{path} is not located under {folder}")
    return path[len(folder) :]


def resolve_import_path(importing_folder: str, file_path: str) -> str:
    """Resolve an import target path against the importing declaration's folder."""
    if file_path.startswith("/"):
        return normalize_path(file_path)
    return normalize_path(posixpath.join(importing_folder, file_path))
