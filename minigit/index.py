from typing import Iterator

from . import types
from .config import DEFAULT_INDEX_BUCKETS


def bucket_of(commit_id: types.CommitID, buckets: int = DEFAULT_INDEX_BUCKETS) -> int:
    h = 0
    for ch in commit_id.encode():
        h = (h * 31 + ch) & 0xFFFFFFFF  # unsigned 32-bit wraparound
    return h % buckets


class CommitIndex:
    """Chained hash table from commit id to Commit.

    New commits go to the front of their chain, so a lookup returns the
    most recently inserted commit with a given id. Older commits with the
    same id stay in the chain but can no longer be found by id.
    """

    def __init__(self, buckets: int = DEFAULT_INDEX_BUCKETS) -> None:
        assert buckets > 0, 'An index needs at least one bucket'
        self.buckets = buckets
        self._table: list[list[types.Commit]] = [[] for _ in range(buckets)]
        self._size = 0

    def insert(self, commit_: types.Commit) -> None:
        self._table[bucket_of(commit_.id, self.buckets)].insert(0, commit_)
        self._size += 1

    def find(self, commit_id: types.CommitID) -> types.Commit | None:
        for commit_ in self._table[bucket_of(commit_id, self.buckets)]:
            if commit_.id == commit_id:
                return commit_
        return None

    def chain(self, commit_id: types.CommitID) -> list[types.Commit]:
        return list(self._table[bucket_of(commit_id, self.buckets)])

    def __contains__(self, commit_id: types.CommitID) -> bool:
        return self.find(commit_id) is not None

    def __len__(self) -> int:
        return self._size

    def __iter__(self) -> Iterator[types.Commit]:
        for chain in self._table:
            yield from chain
