"""Tests for the first-wins merge of file lists."""

import logging

import pytest

from minigit.merge import compare_snapshots, merge_file_lists
from minigit.types import FileVersion, freeze_snapshot


def snapshot(*files):
    return freeze_snapshot(files)


class TestCompareSnapshots:
    def test_aligns_entries(self):
        x, y_a = FileVersion('x'), FileVersion('y', 'a/y')
        y_b, z = FileVersion('y', 'b/y'), FileVersion('z')
        rows = list(compare_snapshots(snapshot(x, y_a), snapshot(y_b, z)))
        assert rows == [('x', x, None), ('y', y_a, y_b), ('z', None, z)]


class TestMergeFileLists:
    def test_union_with_first_wins(self):
        y_from_a = FileVersion('y', source_path='a/y')
        y_from_b = FileVersion('y', source_path='b/y')
        a = snapshot(FileVersion('x'), y_from_a)
        b = snapshot(y_from_b, FileVersion('z'))

        merged, conflicts = merge_file_lists(a, b)

        assert set(merged) == {'x', 'y', 'z'}
        assert merged['y'] is y_from_a
        assert len(conflicts) == 1
        assert conflicts[0].filename == 'y'
        assert conflicts[0].kept is y_from_a
        assert conflicts[0].discarded is y_from_b

    def test_order_keeps_first_then_new_names(self):
        a = snapshot(FileVersion('c'), FileVersion('a'))
        b = snapshot(FileVersion('b'), FileVersion('a'), FileVersion('d'))
        merged, _ = merge_file_lists(a, b)
        assert list(merged) == ['c', 'a', 'b', 'd']

    def test_disjoint_has_no_conflicts(self):
        merged, conflicts = merge_file_lists(snapshot(FileVersion('a')), snapshot(FileVersion('b')))
        assert list(merged) == ['a', 'b']
        assert conflicts == []

    def test_empty_sides(self):
        merged, conflicts = merge_file_lists(snapshot(), snapshot(FileVersion('b')))
        assert list(merged) == ['b']
        merged, conflicts = merge_file_lists(snapshot(FileVersion('a')), snapshot())
        assert list(merged) == ['a']
        assert conflicts == []

    def test_every_shared_name_is_a_conflict(self):
        a = snapshot(FileVersion('a'), FileVersion('b'), FileVersion('c'))
        b = snapshot(FileVersion('c'), FileVersion('a'))
        _, conflicts = merge_file_lists(a, b)
        assert [c.filename for c in conflicts] == ['a', 'c']

    def test_result_is_read_only(self):
        merged, _ = merge_file_lists(snapshot(FileVersion('a')), snapshot())
        with pytest.raises(TypeError):
            merged['b'] = FileVersion('b')  # type: ignore[index]

    def test_conflicts_are_logged(self, caplog):
        with caplog.at_level(logging.WARNING, logger='minigit.merge'):
            merge_file_lists(snapshot(FileVersion('y')), snapshot(FileVersion('y')))
        assert "Conflict in 'y'" in caplog.text
