"""
Exception types raised by the minigit core.

Lookup failures are raised to the caller and leave the repository
unchanged. Per-file snapshot I/O failures are never raised: they are
collected in a SnapshotReport instead.
"""


class MinigitError(Exception):
    """Base class for all minigit specific errors."""


class BranchNotFound(MinigitError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f'Branch not found: {name}')


class DuplicateBranch(MinigitError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f'Branch already exists: {name}')


class CommitNotFound(MinigitError):
    def __init__(self, commit_id: str) -> None:
        self.commit_id = commit_id
        super().__init__(f'Commit not found: {commit_id}')
