"""Loads and parses declarations with a per-pass memo table."""

import logging
from dataclasses import dataclass

from codeowners.backend import Backend
from codeowners.cancellation import ResolutionGuard
from codeowners.content_cache import ContentCache
from codeowners.declaration import DeclarationKey, OwnershipDeclaration
from codeowners.errors import DeclarationParseError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoadedDeclaration:
    """Result of loading one declaration file at one revision."""

    key: DeclarationKey
    revision: str
    declaration: OwnershipDeclaration | None
    errors: tuple[str, ...] = ()

    @property
    def exists(self) -> bool:
        return self.declaration is not None or bool(self.errors)


class DeclarationLoader:
    """Loads declarations for one resolution pass.

    Every (key, revision) is read and parsed at most once per loader; a new
    loader is created for every pass so that nothing leaks across revisions.
    """

    def __init__(
        self,
        cache: ContentCache,
        backend: Backend,
        file_name: str | None = None,
        guard: ResolutionGuard | None = None,
    ) -> None:
        self.cache = cache
        self.backend = backend
        self.file_name = file_name or backend.file_name
        self.guard = guard or ResolutionGuard()
        self._memo: dict[tuple[DeclarationKey, str], LoadedDeclaration] = {}

    def key_for_folder(self, project: str, branch: str, folder_path: str) -> DeclarationKey:
        return DeclarationKey(project, branch, folder_path, self.file_name)

    def load(self, key: DeclarationKey, revision: str) -> LoadedDeclaration:
        """Load the declaration; StorageUnavailableError propagates to the caller."""
        memo_key = (key, revision)
        if memo_key in self._memo:
            return self._memo[memo_key]
        self.guard.check()
        content = self.cache.read(key.project, key.branch, key.file_path, revision)
        if content is None:
            loaded = LoadedDeclaration(key, revision, None)
        else:
            try:
                loaded = LoadedDeclaration(key, revision, self.backend.parse(content, key, revision))
            except DeclarationParseError as e:
                logger.info("Invalid declaration %s: %s", key, e)
                loaded = LoadedDeclaration(key, revision, None, tuple(e.messages))
        self._memo[memo_key] = loaded
        return loaded

