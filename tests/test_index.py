"""Tests for the chained commit index."""

import pytest

from minigit.index import CommitIndex, bucket_of
from minigit.types import Commit


def make(commit_id):
    return Commit(id=commit_id, message=commit_id, timestamp='now')


class TestBucketOf:
    def test_deterministic(self):
        assert bucket_of('first-1700000000') == bucket_of('first-1700000000')

    def test_in_range(self):
        for commit_id in ('', 'a', 'merge-1', 'x' * 500):
            assert 0 <= bucket_of(commit_id, 7) < 7

    def test_polynomial_hash(self):
        # h = h * 31 + byte
        assert bucket_of('ab', 101) == (ord('a') * 31 + ord('b')) % 101

    def test_wraps_at_32_bits(self):
        h = 0
        for ch in 'a long commit message-1700000000':
            h = (h * 31 + ord(ch)) % 2 ** 32
        assert bucket_of('a long commit message-1700000000', 101) == h % 101


class TestCommitIndex:
    def test_insert_and_find(self):
        index = CommitIndex()
        c = make('first-1')
        index.insert(c)
        assert index.find('first-1') is c
        assert 'first-1' in index

    def test_find_missing(self):
        index = CommitIndex()
        index.insert(make('first-1'))
        assert index.find('first-2') is None
        assert 'first-2' not in index

    def test_same_bucket_chaining(self):
        index = CommitIndex(buckets=1)
        commits = [make(f'c-{i}') for i in range(5)]
        for c in commits:
            index.insert(c)
        for c in commits:
            assert index.find(c.id) is c
        assert index.chain('c-0') == list(reversed(commits))

    def test_duplicate_id_returns_latest(self):
        index = CommitIndex()
        older, newer = make('same-1'), make('same-1')
        index.insert(older)
        index.insert(newer)
        assert index.find('same-1') is newer
        assert len(index) == 2
        assert older in list(index)

    def test_len_and_iter(self):
        index = CommitIndex(buckets=3)
        commits = [make(f'c-{i}') for i in range(10)]
        for c in commits:
            index.insert(c)
        assert len(index) == 10
        assert set(map(id, index)) == set(map(id, commits))

    def test_rejects_zero_buckets(self):
        with pytest.raises(AssertionError):
            CommitIndex(buckets=0)
