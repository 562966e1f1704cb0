"""
Pytest configuration and shared fixtures.
"""

import os
import shutil
import subprocess
from pathlib import Path
from unittest.mock import Mock

import pytest

from src.git_file_history.data_models import Commit

HISTORY_ENV_VARS = [
    "RENAME_THRESHOLD",
    "COPY_THRESHOLD",
    "ENABLE_HTML_DIFF",
    "HTML_RENDERER",
    "OUTPUT_DIR",
    "TRAVERSAL_DIRECTION",
    "MATCH_POLICY",
    "CONTENT_EXTENSION",
    "GIT_FILE_HISTORY_REPO",
]

requires_git = pytest.mark.skipif(
    shutil.which("git") is None, reason="git executable not available"
)


def make_commit(sha: str, timestamp: int = 1700000000, parents=("p",), **kwargs):
    """Build a Commit with sensible defaults."""
    defaults = {
        "author_name": "Jane Doe",
        "author_email": "jane@example.com",
        "message": f"Commit {sha}",
        "date_human": "2023-11-14 22:13:20",
    }
    defaults.update(kwargs)
    return Commit(sha=sha, parents=tuple(parents), timestamp=timestamp, **defaults)


@pytest.fixture(autouse=True)
def clean_history_env(monkeypatch):
    """Keep the developer's environment out of configuration tests."""
    for name in HISTORY_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def sample_commits():
    """Three commits, oldest first; the first one is a root commit."""
    return [
        make_commit("c1" * 20, timestamp=1700000000, parents=(), message="Initial"),
        make_commit("c2" * 20, timestamp=1700000100, parents=("c1" * 20,)),
        make_commit("c3" * 20, timestamp=1700000200, parents=("c2" * 20,)),
    ]


@pytest.fixture
def mock_source():
    """Revision source mock answering like a working tree with one file."""
    source = Mock()
    source.ensure_work_tree.return_value = None
    source.repo_relative_path.side_effect = lambda path: path
    source.list_commits.return_value = []
    source.get_path_status.return_value = []
    source.get_content.return_value = b"# Notes\n"
    source.get_patch.return_value = (
        "commit abc\n\ndiff --git a/notes.md b/notes.md\n+# Notes\n"
    )
    return source


class GitRepoBuilder:
    """Creates commits with fixed authors and dates in a scratch repository."""

    def __init__(self, path: Path):
        self.path = path
        self.commit_count = 0
        self.git("init", "-q")
        self.git("config", "user.name", "Jane Doe")
        self.git("config", "user.email", "jane@example.com")
        self.git("config", "commit.gpgsign", "false")

    def git(self, *args: str, env: dict | None = None) -> str:
        result = subprocess.run(
            ["git", *args],
            cwd=self.path,
            check=True,
            capture_output=True,
            text=True,
            env=env,
        )
        return result.stdout

    def write(self, relative: str, text: str) -> None:
        target = self.path / relative
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(text, encoding="utf-8")
        self.git("add", relative)

    def move(self, source: str, destination: str) -> None:
        self.git("mv", source, destination)

    def commit(self, message: str) -> str:
        """Commit staged changes one minute after the previous commit."""
        self.commit_count += 1
        date = f"2024-01-01T00:{self.commit_count:02d}:00+0000"
        env = dict(os.environ, GIT_AUTHOR_DATE=date, GIT_COMMITTER_DATE=date)
        self.git("commit", "-q", "-m", message, env=env)
        return self.git("rev-parse", "HEAD").strip()


@pytest.fixture
def git_repo(tmp_path, monkeypatch):
    """Empty git repository; git lookups never escape tmp_path."""
    monkeypatch.setenv("GIT_CEILING_DIRECTORIES", str(tmp_path))
    repo_dir = tmp_path / "repo"
    repo_dir.mkdir()
    return GitRepoBuilder(repo_dir)


LINES = "".join(f"line {i}\n" for i in range(1, 21))


@pytest.fixture
def renamed_repo(git_repo):
    """old.md created (C1), renamed to new.md with an edit (C2), edited (C3)."""
    git_repo.write("old.md", LINES)
    c1 = git_repo.commit("Add old.md")
    git_repo.move("old.md", "new.md")
    git_repo.write("new.md", LINES + "line 21\n")
    c2 = git_repo.commit("Rename old.md to new.md")
    git_repo.write("new.md", LINES + "line 21\nline 22\n")
    c3 = git_repo.commit("Extend new.md")
    return git_repo, [c1, c2, c3]
