"""Tests for the mindhooks command-line interface."""

import sys

import pytest


def _run(monkeypatch, *argv):
    from mindhooks.cli import main

    monkeypatch.setattr(sys, "argv", ["mindhooks", *argv])
    main()


@pytest.fixture
def project(tmp_path, monkeypatch):
    monkeypatch.setenv("CLAUDE_PROJECT_DIR", str(tmp_path))
    return tmp_path


class TestCli:

    def test_version(self, monkeypatch, capsys):
        from mindhooks import __version__

        _run(monkeypatch, "version")
        assert f"mindhooks version {__version__}" in capsys.readouterr().out

    def test_no_command_prints_help(self, monkeypatch, capsys):
        with pytest.raises(SystemExit) as exc:
            _run(monkeypatch)
        assert exc.value.code == 0
        assert "usage: mindhooks" in capsys.readouterr().out

    def test_recent_empty(self, project, monkeypatch, capsys):
        _run(monkeypatch, "recent")
        assert capsys.readouterr().out.strip() == "No memories yet."

    def test_recent_lists_memories(self, project, monkeypatch, capsys):
        from mindhooks.config import MindConfig
        from mindhooks.mind import Mind
        from mindhooks.models import ObservationType

        mind = Mind.open(MindConfig(), "s1", project=project)
        for i in range(3):
            mind.remember(ObservationType.DISCOVERY, f"Read f{i}.py (1 lines)", "x", tool="Read")

        _run(monkeypatch, "recent", "--limit", "2")
        lines = capsys.readouterr().out.strip().split("\n")
        assert len(lines) == 2
        assert lines[0].endswith("[discovery] Read f2.py (1 lines) (Read)")

    def test_status(self, project, monkeypatch, capsys):
        from mindhooks.config import MindConfig
        from mindhooks.mind import Mind
        from mindhooks.models import ObservationType

        mind = Mind.open(MindConfig(), "s1", project=project)
        mind.remember(ObservationType.BUGFIX, "Edited parser.py", "x", tool="Edit")

        _run(monkeypatch, "status")
        out = capsys.readouterr().out
        assert "Memories: 1" in out
        assert "Sessions: 1" in out
        assert "bugfix" in out
        assert "Budget: " in out

    def test_errors_exit_nonzero(self, project, monkeypatch, capsys):
        import mindhooks.mind as mind_module

        def broken(*args, **kwargs):
            raise RuntimeError("disk on fire")

        monkeypatch.setattr(mind_module.Mind, "open", broken)
        with pytest.raises(SystemExit) as exc:
            _run(monkeypatch, "status")
        assert exc.value.code == 1
        assert "Error: disk on fire" in capsys.readouterr().err
