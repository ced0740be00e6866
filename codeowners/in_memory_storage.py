"""Versioned storage kept in memory, used by tests and embedders."""

import hashlib
import itertools
from collections.abc import Mapping

from codeowners.account import ActingUser
from codeowners.errors import StorageUnavailableError, UnknownRevisionError


class InMemoryStorage:
    """Projects with branches whose heads are immutable file snapshots."""

    def __init__(self) -> None:
        self._branches: dict[str, dict[str, list[str]]] = {}
        self._snapshots: dict[str, dict[str, bytes]] = {}
        self._counter = itertools.count(1)
        self.unreadable_projects: set[str] = set()
        self.unavailable_projects: set[str] = set()
        self.reads: list[tuple[str, str, str, str]] = []

    def add_project(self, project: str) -> None:
        self._branches.setdefault(project, {})

    def commit(
        self, project: str, branch: str, files: Mapping[str, str | bytes | None]
    ) -> str:
        """Create a new head revision; a None value deletes the file."""
        history = self._branches.setdefault(project, {}).setdefault(branch, [])
        snapshot = dict(self._snapshots[history[-1]]) if history else {}
        for path, content in files.items():
            if content is None:
                snapshot.pop(path, None)
            else:
                snapshot[path] = content.encode("utf-8") if isinstance(content, str) else content
        seed = f"{project}:{branch}:{next(self._counter)}"
        revision = hashlib.sha1(seed.encode("utf-8")).hexdigest()
        self._snapshots[revision] = snapshot
        history.append(revision)
        return revision

    def project_exists(self, project: str) -> bool:
        return project in self._branches

    def can_read_project(self, project: str, user: ActingUser | None) -> bool:
        return project not in self.unreadable_projects

    def list_branches(self, project: str) -> list[str]:
        return sorted(self._branches.get(project, {}))

    def resolve_revision(self, project: str, branch: str, revision: str | None = None) -> str | None:
        history = self._branches.get(project, {}).get(branch)
        if revision is None:
            return history[-1] if history else None
        if not history or revision not in history:
            raise UnknownRevisionError(
                f"revision {revision} not found in {project}:{branch}"
            )
        return revision

    def read_file(self, project: str, branch: str, file_path: str, revision: str) -> bytes | None:
        if project in self.unavailable_projects:
            raise StorageUnavailableError(f"storage of project {project} is unavailable")
        self.reads.append((project, branch, file_path, revision))
        try:
            snapshot = self._snapshots[revision]
        except KeyError:
            raise UnknownRevisionError(f"unknown revision {revision}") from None
        return snapshot.get(file_path)

    def list_files(self, project: str, branch: str, revision: str) -> list[str]:
        if project in self.unavailable_projects:
            raise StorageUnavailableError(f"storage of project {project} is unavailable")
        return sorted(self._snapshots[revision])
