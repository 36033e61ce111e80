import pytest
import tempfile
from pathlib import Path
from git import Repo

from commitcheck.rules import RuleSet


@pytest.fixture
def default_rules():
    return RuleSet()


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep COMMIT_CHECK_* variables from the outer environment out of tests."""
    import os

    for name in list(os.environ):
        if name.startswith("COMMIT_CHECK_"):
            monkeypatch.delenv(name)
    yield


def _commit(repo: Repo, root: Path, name: str, message: str):
    (root / name).write_text(message)
    repo.index.add([name])
    return repo.index.commit(message)


@pytest.fixture
def temp_git_repo():
    """Create a temporary git repository with a base commit on a main branch
    and three commits on a feature branch."""
    with tempfile.TemporaryDirectory() as tmp_dir:
        root = Path(tmp_dir)
        repo = Repo.init(tmp_dir)

        _commit(repo, root, "base.txt", "chore: initial commit")
        repo.create_head("base")

        _commit(repo, root, "login.txt", "feat: add login")
        _commit(repo, root, "db.txt", "fix(db): resolve timeout\n\nRetry the connection once.")
        _commit(repo, root, "README.md", "Update readme")

        yield tmp_dir


@pytest.fixture
def temp_git_repo_with_merge():
    """Create a temporary git repository whose history contains a merge commit."""
    with tempfile.TemporaryDirectory() as tmp_dir:
        root = Path(tmp_dir)
        repo = Repo.init(tmp_dir)

        base = _commit(repo, root, "base.txt", "chore: initial commit")
        repo.create_head("base")
        left = _commit(repo, root, "left.txt", "feat: add left side")

        (root / "right.txt").write_text("right")
        repo.index.add(["right.txt"])
        right = repo.index.commit("feat: add right side", parent_commits=(base,), head=False)

        repo.index.commit("Merge branch 'right'", parent_commits=(left, right))

        yield tmp_dir
