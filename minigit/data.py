import logging
import os

from . import types
from .types import SkippedFile, SnapshotReport

logger = logging.getLogger(__name__)


def init(store_path: str) -> None:
    os.makedirs(store_path, exist_ok=True)


def snapshot_dir(store_path: str, commit_id: types.CommitID) -> str:
    return os.path.join(store_path, commit_id)


def save_snapshot(root: str, store_path: str, commit_: types.Commit) -> SnapshotReport:
    """Copy every file of `commit_` from the working directory into its commit folder.

    A file that cannot be read or written is skipped and recorded in the
    returned report; the remaining files are still copied.
    """
    report = SnapshotReport(commit_.id)
    if not _is_safe(commit_.id):
        _skip_all(report, commit_, f'commit id {commit_.id!r} escapes the store')
        return report

    folder = snapshot_dir(store_path, commit_.id)
    try:
        os.makedirs(folder, exist_ok=True)
    except OSError as e:
        _skip_all(report, commit_, f'cannot create {folder}: {e}')
        return report

    for f in commit_.files.values():
        if not _is_safe(f.filename):
            _skip(report, f.filename, 'path escapes the repository')
            continue
        _copy(report, f.filename,
              src=os.path.join(root, f.source),
              dst=os.path.join(folder, f.filename))

    logger.info('Saved %d file(s) for commit %s', report.count, commit_.id)
    return report


def restore_snapshot(root: str, store_path: str, commit_: types.Commit) -> SnapshotReport:
    """Copy every file of `commit_` from its commit folder back into the working directory."""
    report = SnapshotReport(commit_.id)
    if not _is_safe(commit_.id):
        _skip_all(report, commit_, f'commit id {commit_.id!r} escapes the store')
        return report

    folder = snapshot_dir(store_path, commit_.id)
    for f in commit_.files.values():
        if not _is_safe(f.filename):
            _skip(report, f.filename, 'path escapes the repository')
            continue
        _copy(report, f.filename,
              src=os.path.join(folder, f.filename),
              dst=os.path.join(root, f.filename))

    logger.info('Restored %d file(s) from commit %s', report.count, commit_.id)
    return report


def _copy(report: SnapshotReport, filename: types.Path, src: str, dst: str) -> None:
    # Read before opening the destination so a missing source never truncates it
    try:
        with open(src, 'rb') as f:
            content = f.read()
        os.makedirs(os.path.dirname(dst) or '.', exist_ok=True)
        with open(dst, 'wb') as out:
            out.write(content)
    except OSError as e:
        _skip(report, filename, f'{e.strerror or e}: {e.filename or src}')
        return
    logger.debug('Copied %s -> %s', src, dst)
    report.copied.append(filename)


def _skip(report: SnapshotReport, filename: types.Path, reason: str) -> None:
    logger.warning('Skipping %s: %s', filename, reason)
    report.skipped.append(SkippedFile(filename=filename, reason=reason))


def _skip_all(report: SnapshotReport, commit_: types.Commit, reason: str) -> None:
    for f in commit_.files.values():
        _skip(report, f.filename, reason)


def _is_safe(path: str) -> bool:
    parts = path.replace('\\', '/').split('/')
    return bool(path) and not os.path.isabs(path) and '..' not in parts
