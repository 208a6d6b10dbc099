"""Tests for path resolution and containment."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from safe_rm.errors import PathResolutionError
from safe_rm.safety.paths import (
    PathKind,
    PathResolver,
    expand_user,
    is_contained,
    is_target_contained,
)


class TestExpandUser:
    """Tests for tilde expansion."""

    def test_bare_tilde(self, monkeypatch, temp_dir: Path):
        monkeypatch.setenv("HOME", str(temp_dir))
        assert expand_user("~") == str(temp_dir)

    def test_tilde_prefix(self, monkeypatch, temp_dir: Path):
        monkeypatch.setenv("HOME", str(temp_dir))
        assert expand_user("~/notes.txt") == str(temp_dir / "notes.txt")

    def test_tilde_elsewhere_untouched(self):
        assert expand_user("docs/~draft") == "docs/~draft"
        assert expand_user("/abs/path") == "/abs/path"


class TestIsContained:
    """Tests for segment-wise containment."""

    def test_boundary_contains_itself(self):
        assert is_contained(Path("/proj"), Path("/proj"))

    def test_descendant(self):
        assert is_contained(Path("/proj/src/deep/file.py"), Path("/proj"))

    def test_sibling_with_shared_prefix(self):
        """A string prefix is not a path prefix."""
        assert not is_contained(Path("/proj2/file"), Path("/proj"))
        assert not is_contained(Path("/project"), Path("/proj"))

    def test_parent_is_outside(self):
        assert not is_contained(Path("/"), Path("/proj"))
        assert not is_contained(Path("/etc/passwd"), Path("/proj"))


class TestPathResolver:
    """Tests for PathResolver.resolve."""

    def test_relative_file(self, project: Path):
        target = PathResolver(project).resolve("main.py")

        assert target.kind is PathKind.FILE
        assert target.resolved == project / "main.py"
        assert target.exists
        assert not target.is_dir

    def test_directory(self, project: Path):
        target = PathResolver(project).resolve("src")

        assert target.kind is PathKind.DIRECTORY
        assert target.is_dir

    def test_dotdot_collapses_inside(self, project: Path):
        target = PathResolver(project / "src").resolve("../main.py")
        assert target.resolved == project / "main.py"

    def test_traversal_escapes_project(self, project: Path):
        target = PathResolver(project).resolve("../outside/secret.txt")

        assert target.resolved == project.parent / "outside" / "secret.txt"
        assert not is_target_contained(target, project)

    def test_missing_leaf_resolves_against_parent(self, project: Path):
        target = PathResolver(project).resolve("src/new_file.py")

        assert target.kind is PathKind.MISSING
        assert not target.exists
        assert target.resolved == project / "src" / "new_file.py"
        assert is_target_contained(target, project)

    def test_missing_ancestors(self, project: Path):
        target = PathResolver(project).resolve("a/b/c.txt")

        assert target.kind is PathKind.MISSING
        assert target.resolved == project / "a" / "b" / "c.txt"

    def test_absolute_path_ignores_base(self, project: Path):
        absolute = project / "main.py"
        target = PathResolver(Path("/")).resolve(str(absolute))
        assert target.resolved == absolute

    def test_tilde_path(self, monkeypatch, project: Path):
        monkeypatch.setenv("HOME", str(project))
        target = PathResolver(Path("/")).resolve("~/main.py")
        assert target.resolved == project / "main.py"

    def test_trailing_slash_on_file(self, project: Path):
        target = PathResolver(project).resolve("main.py/")
        assert target.not_a_directory

    def test_file_used_as_directory(self, project: Path):
        target = PathResolver(project).resolve("main.py/child")

        assert target.not_a_directory
        assert not target.exists

    def test_trailing_slash_on_directory(self, project: Path):
        target = PathResolver(project).resolve("src/")

        assert target.is_dir
        assert not target.not_a_directory

    def test_symlink_inside_project(self, project: Path):
        (project / "link.py").symlink_to(project / "main.py")

        target = PathResolver(project).resolve("link.py")

        assert target.kind is PathKind.SYMLINK
        assert target.resolved == project / "link.py"
        assert target.link_target == project / "main.py"
        assert is_target_contained(target, project)

    def test_symlink_pointing_outside(self, project: Path):
        outside = project.parent / "outside" / "secret.txt"
        (project / "escape").symlink_to(outside)

        target = PathResolver(project).resolve("escape")

        assert target.resolved == project / "escape"
        assert target.link_target == outside
        assert not is_target_contained(target, project)

    def test_symlinked_directory_is_not_a_directory_kind(self, project: Path):
        (project / "src_link").symlink_to(project / "src")

        target = PathResolver(project).resolve("src_link")

        assert target.kind is PathKind.SYMLINK
        assert not target.is_dir

    def test_trailing_slash_follows_directory_symlink(self, project: Path):
        (project / "src_link").symlink_to(project / "src")

        target = PathResolver(project).resolve("src_link/")

        assert target.kind is PathKind.DIRECTORY
        assert target.is_dir
        assert target.resolved == project / "src"
        assert target.link_target is None

    def test_trailing_slash_on_file_symlink(self, project: Path):
        (project / "link.py").symlink_to(project / "main.py")

        target = PathResolver(project).resolve("link.py/")

        assert target.not_a_directory

    def test_dangling_symlink(self, project: Path):
        (project / "dangling").symlink_to(project / "nowhere")

        target = PathResolver(project).resolve("dangling")

        assert target.kind is PathKind.SYMLINK
        assert target.exists
        assert target.link_target == project / "nowhere"

    def test_unreadable_ancestor_raises(self, project: Path, monkeypatch):
        blocked = project / "src" / "lib.py"
        real_lstat = os.lstat

        def fake_lstat(path, *args, **kwargs):
            if Path(path) == blocked:
                raise PermissionError(13, "Permission denied")
            return real_lstat(path, *args, **kwargs)

        with monkeypatch.context() as m, pytest.raises(PathResolutionError) as excinfo:
            m.setattr(os, "lstat", fake_lstat)
            PathResolver(project).resolve("src/lib.py")

        assert excinfo.value.path == blocked
        assert "Permission denied" in str(excinfo.value)
