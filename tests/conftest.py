"""Pytest configuration and fixtures."""

from __future__ import annotations

import shutil
import subprocess
import tempfile
from pathlib import Path

import pytest


class GitRepo:
    """A throwaway git repository driven through the git CLI."""

    def __init__(self, path: Path):
        self.path = path

    def git(self, *args: str) -> str:
        result = subprocess.run(
            [
                "git",
                "-c",
                "user.name=Test User",
                "-c",
                "user.email=test@test.com",
                "-c",
                "commit.gpgsign=false",
                *args,
            ],
            cwd=self.path,
            capture_output=True,
            text=True,
            check=True,
        )
        return result.stdout

    def write(self, name: str, content: str = "content") -> Path:
        file_path = self.path / name
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(content)
        return file_path

    def commit(self, name: str, content: str = "content") -> Path:
        """Write a file and commit it."""
        file_path = self.write(name, content)
        self.git("add", name)
        self.git("commit", "-m", f"Add {name}")
        return file_path


@pytest.fixture(autouse=True)
def isolated_config(tmp_path_factory, monkeypatch):
    """Never read the developer's real config file."""
    config_home = tmp_path_factory.mktemp("xdg")
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_home))
    monkeypatch.setenv("SAFE_RM_CONFIG", str(config_home / "missing.toml"))
    yield config_home


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        # Canonical form, /tmp is a symlink on macOS
        yield Path(tmpdir).resolve()


@pytest.fixture
def project(temp_dir: Path):
    """A plain (non-git) project directory with an outside sibling."""
    project = temp_dir / "project"
    project.mkdir()
    (project / "main.py").write_text("print('hello')")

    src = project / "src"
    src.mkdir()
    (src / "lib.py").write_text("x = 1")

    outside = temp_dir / "outside"
    outside.mkdir()
    (outside / "secret.txt").write_text("do not delete")

    yield project


@pytest.fixture
def git_repo(temp_dir: Path):
    """An initialized repository with one committed file and an ignore file."""
    if shutil.which("git") is None:
        pytest.skip("git is not installed")

    repo = GitRepo(temp_dir / "repo")
    repo.path.mkdir()
    repo.git("init")
    repo.commit(".gitignore", "build/\n*.log\n")
    repo.commit("clean.txt", "clean content")
    yield repo


@pytest.fixture
def strict_config_file(temp_dir: Path):
    """Config file that restricts deletion to clean or ignored files."""
    config_file = temp_dir / "strict.toml"
    config_file.write_text("allow_project_deletion = false\n")
    yield config_file
