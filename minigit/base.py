import logging
import os
import time
from collections import deque
from typing import Callable, Iterable, Iterator

from . import data
from . import index
from . import types
from .config import Config
from .errors import BranchNotFound, CommitNotFound, DuplicateBranch
from .merge import MergeResult, merge_file_lists

logger = logging.getLogger(__name__)

ROOT_MESSAGE = 'Initial commit'


def make_commit_id(message: str, now: float) -> types.CommitID:
    return f'{message}-{int(now)}'


def iter_commits_and_parents(commits: Iterable[types.Commit]) -> Iterator[types.Commit]:
    """Walk the graph from `commits`, yielding every reachable commit once.

    First parents are followed depth-first; merged-in parents are queued.
    """
    commits = deque(commits)
    visited = set()

    while commits:
        commit_ = commits.popleft()
        if commit_ is None or commit_ in visited:
            continue
        visited.add(commit_)
        yield commit_

        commits.extendleft(commit_.parents[:1])
        commits.extend(commit_.parents[1:])


def first_parent_chain(commit_: types.Commit | None) -> Iterator[types.Commit]:
    while commit_ is not None:
        yield commit_
        commit_ = commit_.parents[0] if commit_.parents else None


class Repository:
    """One working directory, its snapshot store and its in-memory commit graph.

    The graph is not persisted: only the snapshot folders outlive the process.
    """

    def __init__(self, config: Config | None = None, clock: Callable[[], float] = time.time) -> None:
        self.config = config or Config()
        self.clock = clock
        self.index = index.CommitIndex(self.config.index_buckets)
        self.last_report: types.SnapshotReport | None = None
        self._branches: dict[str, types.Branch] = {}
        self._current: types.Branch | None = None
        self._tracked: dict[types.Path, types.FileVersion] = {}

    @property
    def root(self) -> str:
        return self.config.root

    @property
    def store_path(self) -> str:
        return self.config.store_path

    def init(self) -> types.Commit:
        data.init(self.store_path)
        self.index = index.CommitIndex(self.config.index_buckets)
        root_commit = self.create_commit(ROOT_MESSAGE, (), ())

        branch = types.Branch(name=self.config.default_branch, head=root_commit)
        self._branches = {branch.name: branch}
        self._current = branch
        self._tracked = {}
        logger.info('Repository initialized in %s (branch: %s)', self.root, branch.name)
        return root_commit

    # -- Commits --

    def create_commit(self, message: str, parents: Iterable[types.Commit],
                      files: types.Snapshot | Iterable[types.FileVersion]) -> types.Commit:
        now = self.clock()
        commit_ = types.Commit(
            id=make_commit_id(message, now),
            message=message,
            timestamp=time.ctime(now),
            files=types.freeze_snapshot(files),
            parents=tuple(parents),
        )
        if self.index.find(commit_.id) is not None:
            logger.warning('Commit id %s already exists, the older commit is shadowed', commit_.id)
        self.index.insert(commit_)
        return commit_

    def commit(self, message: str) -> types.Commit:
        branch = self.current_branch
        commit_ = self.create_commit(message, [branch.head], self._tracked)
        self.last_report = data.save_snapshot(self.root, self.store_path, commit_)
        branch.head = commit_
        logger.info('Commit created: %s', commit_.id)
        return commit_

    def find_commit(self, commit_id: types.CommitID) -> types.Commit | None:
        return self.index.find(commit_id)

    def find(self, commit_id: types.CommitID) -> types.Commit:
        commit_ = self.index.find(commit_id)
        if commit_ is None:
            raise CommitNotFound(commit_id)
        return commit_

    def snapshot_dir(self, commit_id: types.CommitID) -> str:
        return data.snapshot_dir(self.store_path, commit_id)

    # -- Tracked files --

    def track(self, filename: types.Path, source_path: types.Path | None = None) -> types.FileVersion:
        filename = os.path.normpath(filename).replace('\\', '/')
        file_version = types.FileVersion(filename=filename, source_path=source_path)
        # Most recently tracked first
        others = {path: f for path, f in self._tracked.items() if path != filename}
        self._tracked = {filename: file_version, **others}
        logger.info("Tracked file '%s'", filename)
        return file_version

    @property
    def tracked(self) -> types.Snapshot:
        return types.freeze_snapshot(self._tracked)

    def _reset_tracked(self, commit_: types.Commit, keep_stored: bool = False) -> None:
        self._tracked = {path: types.FileVersion(filename=path) for path in commit_.files}
        if keep_stored:
            # Files absent from the working directory keep reading from the store
            stored = self._stored_files(commit_)
            for path in self._tracked:
                if not os.path.exists(os.path.join(self.root, path)):
                    self._tracked[path] = stored[path]

    # -- Branches --

    @property
    def current_branch(self) -> types.Branch:
        assert self._current is not None, 'Repository is not initialized'
        return self._current

    @property
    def head(self) -> types.Commit:
        return self.current_branch.head

    @property
    def branches(self) -> list[types.Branch]:
        return list(self._branches.values())

    def get_branch(self, name: str) -> types.Branch:
        try:
            return self._branches[name]
        except KeyError:
            raise BranchNotFound(name) from None

    def create_branch(self, name: str) -> types.Branch:
        if name in self._branches:
            raise DuplicateBranch(name)
        branch = types.Branch(name=name, head=self.head)
        self._branches[name] = branch
        logger.info("Branch '%s' created at commit %s", name, branch.head.id)
        return branch

    def checkout(self, name: str) -> types.SnapshotReport:
        branch = self.get_branch(name)
        self._current = branch
        self._reset_tracked(branch.head)
        logger.info("Switched to branch '%s'", name)
        self.last_report = data.restore_snapshot(self.root, self.store_path, branch.head)
        return self.last_report

    # -- Merge --

    def merge_branches(self, name1: str, name2: str, message: str) -> MergeResult:
        """Merge the heads of `name1` and `name2` into a new commit on the current branch.

        On a filename present in both heads, `name1`'s file wins. The
        result goes to whichever branch is current, not necessarily
        `name1`.
        """
        head1 = self.get_branch(name1).head
        head2 = self.get_branch(name2).head

        files, conflicts = merge_file_lists(self._stored_files(head1), self._stored_files(head2))
        commit_ = self.create_commit(message, (head1, head2), files)
        self.last_report = data.save_snapshot(self.root, self.store_path, commit_)

        self.current_branch.head = commit_
        self._reset_tracked(commit_, keep_stored=True)
        logger.info("Merged '%s' and '%s' into new commit %s", name1, name2, commit_.id)
        return MergeResult(commit=commit_, conflicts=tuple(conflicts), report=self.last_report)

    merge = merge_branches

    def _stored_files(self, commit_: types.Commit) -> dict[types.Path, types.FileVersion]:
        # Merged content comes from the parent's snapshot, not the working directory
        return {
            path: types.FileVersion(
                filename=path,
                source_path=os.path.join(self.config.store_dir, commit_.id, path))
            for path in commit_.files
        }

    # -- History --

    def log(self, commit_: types.Commit | None = None) -> list[types.Commit]:
        return list(iter_commits_and_parents([commit_ or self.head]))

    def history(self, branch_name: str) -> list[types.Commit]:
        return list(first_parent_chain(self.get_branch(branch_name).head))

    def branch_graph(self) -> list[tuple[types.Branch, list[types.Commit]]]:
        return [(branch, list(first_parent_chain(branch.head))) for branch in self.branches]
