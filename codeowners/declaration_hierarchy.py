"""Walks the folder hierarchy of a path and collects declaration contributions."""

from dataclasses import dataclass, field

from codeowners.collaborators import DeclarationStorage
from codeowners.consistency_issue import ConsistencyIssue, invalid_file_issue
from codeowners.debug_trace import DebugTrace
from codeowners.declaration import DeclarationKey
from codeowners.declaration_loader import DeclarationLoader, LoadedDeclaration
from codeowners.owner_set_evaluator import DeclarationContribution, OwnerSetEvaluator
from codeowners.paths import parent_folders, segment_count


@dataclass
class HierarchyResult:
    """Contributions for one path, closest folder first."""

    path: str
    max_distance: int
    contributions: list[DeclarationContribution] = field(default_factory=list)
    issues: list[ConsistencyIssue] = field(default_factory=list)
    parents_ignored: bool = False
    terminal: bool = False


class DeclarationHierarchy:
    """Visits the declaration of every ancestor folder, then the default declaration."""

    def __init__(
        self,
        storage: DeclarationStorage,
        loader: DeclarationLoader,
        evaluator: OwnerSetEvaluator,
        trace: DebugTrace,
        default_owners_branch: str | None,
    ) -> None:
        self.storage = storage
        self.loader = loader
        self.evaluator = evaluator
        self.trace = trace
        self.default_owners_branch = default_owners_branch

    def walk(self, project: str, branch: str, revision: str, path: str) -> HierarchyResult:
        result = HierarchyResult(path, segment_count(path))
        for folder in parent_folders(path):
            key = self.loader.key_for_folder(project, branch, folder)
            self.trace.add("inspecting folder %s", folder)
            if not self._visit(self.loader.load(key, revision), result, segment_count(folder)):
                continue
            if result.contributions[-1].ignore_parent_owners:
                result.parents_ignored = True
                result.terminal = result.contributions[-1].terminal
                self.trace.add("parent code owners are ignored")
                return result

        self._visit_default(project, branch, result)
        return result

    def _visit(self, loaded: LoadedDeclaration, result: HierarchyResult, depth: int) -> bool:
        """Evaluate a loaded declaration; return False if it contributes nothing."""
        key: DeclarationKey = loaded.key
        if loaded.errors:
            self.trace.add("code owner config %s is invalid and is ignored", key.file_path)
            for message in loaded.errors:
                result.issues.append(invalid_file_issue(key.file_path, message))
            return False
        if loaded.declaration is None:
            self.trace.add("no code owner config found in %s", key.folder_path)
            return False
        self.trace.add("evaluating code owner config %s", key)
        result.contributions.append(
            self.evaluator.evaluate(loaded.declaration, result.path, result.max_distance - depth)
        )
        return True

    def _visit_default(self, project: str, branch: str, result: HierarchyResult) -> None:
        default_branch = self.default_owners_branch
        if not default_branch or default_branch == branch:
            return
        revision = self.storage.resolve_revision(project, default_branch)
        if revision is None:
            self.trace.add("no default code owners: branch %s does not exist", default_branch)
            return
        self.trace.add("inspecting default code owners in %s", default_branch)
        key = self.loader.key_for_folder(project, default_branch, "/")
        if self._visit(self.loader.load(key, revision), result, 0):
            result.terminal = result.contributions[-1].terminal
