"""Storage backed by checked-out directory trees, one per branch."""

import logging
from pathlib import Path

from codeowners.account import ActingUser
from codeowners.errors import StorageUnavailableError, UnknownRevisionError

logger = logging.getLogger(__name__)

WORKTREE_REVISION = "WORKTREE"

SKIPPED_DIRS = {".git", ".hg", ".svn", "__pycache__", ".venv", "node_modules"}


class FilesystemStorage:
    """Serves one project whose branches are directories on disk.

    Every branch has exactly one revision, ``WORKTREE``, i.e. the current
    content of its directory.
    """

    def __init__(self, project: str, branch_roots: dict[str, Path]) -> None:
        self.project = project
        self.branch_roots = {branch: Path(root) for branch, root in branch_roots.items()}

    def project_exists(self, project: str) -> bool:
        return project == self.project

    def can_read_project(self, project: str, user: ActingUser | None) -> bool:
        return project == self.project

    def list_branches(self, project: str) -> list[str]:
        if project != self.project:
            return []
        return sorted(b for b, root in self.branch_roots.items() if root.is_dir())

    def resolve_revision(self, project: str, branch: str, revision: str | None = None) -> str | None:
        root = self.branch_roots.get(branch) if project == self.project else None
        if root is None or not root.is_dir():
            if revision is None:
                return None
            raise UnknownRevisionError(f"branch {branch} not found in project {project}")
        if revision not in (None, WORKTREE_REVISION):
            raise UnknownRevisionError(f"revision {revision} not found in {project}:{branch}")
        return WORKTREE_REVISION

    def _root(self, project: str, branch: str) -> Path:
        root = self.branch_roots.get(branch) if project == self.project else None
        if root is None:
            raise UnknownRevisionError(f"branch {branch} not found in project {project}")
        return root

    def read_file(self, project: str, branch: str, file_path: str, revision: str) -> bytes | None:
        path = self._root(project, branch) / file_path.lstrip("/")
        try:
            return path.read_bytes()
        except (FileNotFoundError, IsADirectoryError):
            return None
        except OSError as e:
            raise StorageUnavailableError(f"cannot read {path}: {e}") from e

    def list_files(self, project: str, branch: str, revision: str) -> list[str]:
        root = self._root(project, branch)
        files = []
        try:
            for path in root.rglob("*"):
                relative = path.relative_to(root)
                if any(part in SKIPPED_DIRS for part in relative.parts):
                    continue
                if path.is_file():
                    files.append("/" + relative.as_posix())
        except OSError as e:
            raise StorageUnavailableError(f"cannot list {root}: {e}") from e
        logger.debug("Listed %d files under %s", len(files), root)
        return sorted(files)
