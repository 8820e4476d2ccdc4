"""Tests for end-of-session file change capture."""

import os
import time

import pytest


def _touch(root, rel, age=0):
    path = root / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("x", encoding="utf-8")
    if age:
        stamp = time.time() - age
        os.utime(path, (stamp, stamp))
    return path


@pytest.fixture
def no_git(monkeypatch):
    """Pretend the project is not a git checkout."""
    monkeypatch.setattr("mindhooks.file_changes.git_changed_files", lambda work_dir: [])
    monkeypatch.setattr("mindhooks.file_changes.git_diff_stat", lambda work_dir: "")


class TestRecentlyModified:

    def test_extension_and_age_filter(self, tmp_path):
        from mindhooks.file_changes import recently_modified_files

        _touch(tmp_path, "src/app.py")
        _touch(tmp_path, "src/old.py", age=2 * 3600)
        _touch(tmp_path, "image.png")
        _touch(tmp_path, "README.md")

        assert recently_modified_files(tmp_path) == ["README.md", "src/app.py"]

    def test_skip_dirs(self, tmp_path):
        from mindhooks.file_changes import recently_modified_files

        _touch(tmp_path, "node_modules/pkg/index.js")
        _touch(tmp_path, ".git/hooks/x.py")
        _touch(tmp_path, "build/out.js")
        _touch(tmp_path, "lib/keep.ts")

        assert recently_modified_files(tmp_path) == ["lib/keep.ts"]

    def test_depth_limit(self, tmp_path):
        from mindhooks.file_changes import recently_modified_files

        _touch(tmp_path, "a/b/c/d/level5.py")
        _touch(tmp_path, "a/b/c/d/e/level6.py")

        assert recently_modified_files(tmp_path) == ["a/b/c/d/level5.py"]

    def test_cap(self, tmp_path):
        from mindhooks.file_changes import RECENT_MAX_FILES, recently_modified_files

        for i in range(RECENT_MAX_FILES + 10):
            _touch(tmp_path, f"m{i:03d}.py")
        assert len(recently_modified_files(tmp_path)) == RECENT_MAX_FILES


class TestCapture:

    def test_summary_and_important_files(self, mind, fake_store, tmp_path, no_git):
        from mindhooks.file_changes import capture_file_changes

        _touch(tmp_path, "README.md")
        _touch(tmp_path, "src/app.py")

        files = capture_file_changes(mind, tmp_path)
        assert files == ["README.md", "src/app.py"]
        assert len(fake_store.frames) == 2

        summary, readme = fake_store.frames
        assert summary["title"] == "[refactor] Session edits: 2 file(s) modified"
        assert summary["tags"] == ["refactor", "FileChanges"]
        assert summary["metadata"]["fileCount"] == 2
        assert summary["metadata"]["captureMethod"] == "git-diff-plus-recent"
        assert "- src/app.py" in summary["text"]

        assert readme["title"] == "[refactor] Modified README.md"
        assert readme["metadata"]["fileName"] == "README.md"
        assert readme["tags"] == ["refactor", "FileEdit"]

    def test_git_files_merged_first(self, mind, fake_store, tmp_path, monkeypatch):
        import mindhooks.file_changes as fc

        _touch(tmp_path, "src/app.py")
        monkeypatch.setattr(fc, "git_changed_files", lambda work_dir: ["src/app.py", "pyproject.toml"])
        monkeypatch.setattr(fc, "git_diff_stat", lambda work_dir: " 2 files changed")

        files = fc.capture_file_changes(mind, tmp_path)
        assert files == ["src/app.py", "pyproject.toml"]
        assert "## Git Changes Summary" in fake_store.frames[0]["text"]
        assert fake_store.frames[1]["title"] == "[refactor] Modified pyproject.toml"

    def test_nothing_changed(self, mind, fake_store, tmp_path, no_git):
        from mindhooks.file_changes import capture_file_changes

        assert capture_file_changes(mind, tmp_path) == []
        assert fake_store.frames == []

    def test_git_unavailable(self, tmp_path, monkeypatch):
        import subprocess

        from mindhooks.file_changes import git_changed_files

        def missing(*args, **kwargs):
            raise FileNotFoundError("git")

        monkeypatch.setattr(subprocess, "run", missing)
        assert git_changed_files(tmp_path) == []


class TestReport:

    def test_changes_report(self):
        from mindhooks.file_changes import changes_report

        assert changes_report(["a.py"]) == "## Files Modified This Session\n\n- a.py"
        report = changes_report(["a.py", "b.py"], " 2 files changed")
        assert report.endswith("## Git Changes Summary\n```\n 2 files changed\n```")
