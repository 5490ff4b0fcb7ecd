import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Iterable
from typing_extensions import Unpack

from . import types

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MergeConflict:
    """A filename present on both sides of a merge.

    Always resolved by keeping the first side's entry.
    """

    filename: types.Path
    kept: types.FileVersion
    discarded: types.FileVersion


@dataclass(frozen=True)
class MergeResult:
    commit: types.Commit
    conflicts: tuple[MergeConflict, ...] = ()
    report: types.SnapshotReport | None = None

    @property
    def conflicting_files(self) -> list[types.Path]:
        return [c.filename for c in self.conflicts]


def compare_snapshots(*snapshots: types.Snapshot) -> Iterable[
    tuple[types.Path, Unpack[tuple[types.FileVersion | None, ...]]]]:
    """Yield each filename with its entry in every snapshot (None where absent).

    Filenames come in first-seen order: all of the first snapshot, then
    the new names of the second, and so on.
    """
    entries = defaultdict(lambda: [None] * len(snapshots))
    for i, snapshot in enumerate(snapshots):
        for path, file_version in snapshot.items():
            entries[path][i] = file_version

    for path, versions in entries.items():
        yield path, *versions


def merge_file_lists(files_a: types.Snapshot, files_b: types.Snapshot) -> tuple[
    types.Snapshot, list[MergeConflict]]:
    merged = []
    conflicts = []
    for path, f_a, f_b in compare_snapshots(files_a, files_b):
        if f_a is not None and f_b is not None:
            logger.warning("Conflict in '%s', keeping version from first branch", path)
            conflicts.append(MergeConflict(filename=path, kept=f_a, discarded=f_b))
        merged.append(f_a if f_a is not None else f_b)

    return types.freeze_snapshot(merged), conflicts
