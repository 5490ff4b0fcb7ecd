import pytest

from minigit.base import Repository
from minigit.config import Config


class FakeClock:
    """A clock that only moves when told to."""

    def __init__(self, now: float = 1_700_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def tick(self, seconds: float = 1.0) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def repo(tmp_path, clock):
    repo_ = Repository(Config(root=str(tmp_path)), clock=clock)
    repo_.init()
    return repo_


@pytest.fixture
def workdir(tmp_path):
    """Read and write files relative to the repository root."""

    class WorkDir:
        root = tmp_path

        def write(self, name, content):
            path = tmp_path / name
            path.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, str):
                content = content.encode()
            path.write_bytes(content)

        def read(self, name):
            return (tmp_path / name).read_bytes()

        def exists(self, name):
            return (tmp_path / name).exists()

        def remove(self, name):
            (tmp_path / name).unlink()

    return WorkDir()
