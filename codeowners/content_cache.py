"""Revision-scoped, read-through cache of declaration file content."""

from codeowners.collaborators import DeclarationStorage


class ContentCache:
    """Caches file reads by (project, branch, file path, revision).

    Entries are written once and never change, since content at a revision is
    immutable; concurrent resolutions may share one instance.
    """

    def __init__(self, storage: DeclarationStorage) -> None:
        self.storage = storage
        self._entries: dict[tuple[str, str, str, str], bytes | None] = {}

    def read(self, project: str, branch: str, file_path: str, revision: str) -> bytes | None:
        key = (project, branch, file_path, revision)
        if key in self._entries:
            return self._entries[key]
        content = self.storage.read_file(project, branch, file_path, revision)
        return self._entries.setdefault(key, content)

    def __len__(self) -> int:
        return len(self._entries)
