"""
Configuration for a minigit repository.

The CLI constructs a Config instance and passes it to the Repository,
so several repositories can live in one process without shared state.
"""

import os
from dataclasses import dataclass

DEFAULT_STORE_DIR = '.minigit'
DEFAULT_BRANCH = 'master'
DEFAULT_INDEX_BUCKETS = 101


@dataclass
class Config:
    root: str = '.'
    store_dir: str = DEFAULT_STORE_DIR
    default_branch: str = DEFAULT_BRANCH
    index_buckets: int = DEFAULT_INDEX_BUCKETS
    verbosity: int = 0

    @property
    def store_path(self) -> str:
        return os.path.join(self.root, self.store_dir)
