from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, Mapping, NamedTuple, TypeAlias

Path: TypeAlias = str  # a path relative to the repository root
CommitID: TypeAlias = str  # "<message>-<unix time>", not a content hash


class FileVersion(NamedTuple):
    filename: Path
    source_path: Path | None = None  # where to read content from, if not `filename`

    @property
    def source(self) -> Path:
        return self.source_path or self.filename


Snapshot: TypeAlias = Mapping[Path, FileVersion]


def freeze_snapshot(files: Snapshot | Iterable[FileVersion] = ()) -> Snapshot:
    """Copy `files` into a new read-only snapshot, keeping their order."""
    if isinstance(files, Mapping):
        files = files.values()
    return MappingProxyType({f.filename: f for f in files})


@dataclass(frozen=True, eq=False)
class Commit:
    """A sealed node of the commit graph.

    Commits compare by identity: two commits may share an id when the
    same message is committed twice within one second.
    """

    id: CommitID
    message: str
    timestamp: str
    files: Snapshot = field(default_factory=freeze_snapshot)
    parents: tuple['Commit', ...] = ()

    @property
    def parent_count(self) -> int:
        return len(self.parents)

    @property
    def is_merge(self) -> bool:
        return len(self.parents) > 1

    def __repr__(self):
        return f'Commit(id={self.id!r}, parents={[p.id for p in self.parents]!r})'


@dataclass(eq=False)
class Branch:
    name: str
    head: Commit


class SkippedFile(NamedTuple):
    filename: Path
    reason: str


@dataclass
class SnapshotReport:
    """Outcome of copying a commit's files into or out of the store."""

    commit_id: CommitID
    copied: list[Path] = field(default_factory=list)
    skipped: list[SkippedFile] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.skipped

    @property
    def count(self) -> int:
        return len(self.copied)
