"""Tests for shared hook utilities."""

import io
import json
import os


class TestEnvelope:

    def test_read_hook_input(self):
        from mindhooks.hook_lib import read_hook_input

        assert read_hook_input(io.StringIO('{"tool_name": "Read"}')) == {"tool_name": "Read"}
        assert read_hook_input(io.StringIO("   \n")) == {}
        assert read_hook_input(io.StringIO("[1, 2]")) == {}

    def test_write_output(self):
        from mindhooks.hook_lib import CONTINUE, write_output

        stream = io.StringIO()
        write_output(CONTINUE, stream)
        assert json.loads(stream.getvalue()) == {"continue": True}
        assert stream.getvalue().endswith("\n")

    def test_project_dir(self, monkeypatch, tmp_path):
        from mindhooks.hook_lib import project_dir

        monkeypatch.chdir(tmp_path)
        assert project_dir({}) == os.getcwd()
        assert project_dir({"cwd": "/work/app"}) == "/work/app"
        monkeypatch.setenv("CLAUDE_PROJECT_DIR", "/env/project")
        assert project_dir({"cwd": "/work/app"}) == "/env/project"


class TestSessionId:

    def test_envelope_first(self, monkeypatch):
        from mindhooks.hook_lib import get_session_id

        monkeypatch.setenv("CLAUDE_SESSION_ID", "from-env")
        assert get_session_id({"session_id": "from-envelope"}) == "from-envelope"
        assert get_session_id({}) == "from-env"

    def test_generated(self):
        from mindhooks.hook_lib import get_session_id

        first = get_session_id({})
        assert len(first) == 16
        assert get_session_id(None) != first


class TestDebugChannel:

    def test_silent_by_default(self, capsys):
        from mindhooks.hook_lib import debug

        debug("hidden")
        assert capsys.readouterr().err == ""

    def test_enabled(self, capsys):
        from mindhooks.hook_lib import debug, enable_debug

        enable_debug(True)
        debug("shown")
        assert capsys.readouterr().err == "[mindhooks] shown\n"

    def test_env_enables(self, monkeypatch, capsys):
        from mindhooks.hook_lib import debug, debug_enabled

        monkeypatch.setenv("MINDHOOKS_DEBUG", "1")
        assert debug_enabled()
        debug("via env")
        assert "via env" in capsys.readouterr().err

    def test_warn_always_printed(self, capsys):
        from mindhooks.hook_lib import warn

        warn("bad config")
        assert capsys.readouterr().err == "[mindhooks] WARN: bad config\n"


class TestTokenCounting:

    def test_empty(self):
        from mindhooks.hook_lib import count_tokens

        assert count_tokens("") == 0
        assert count_tokens(None) == 0

    def test_counts_positive(self):
        from mindhooks.hook_lib import count_tokens

        assert count_tokens("def main():\n    return 42") > 0

    def test_fallback_heuristic(self, monkeypatch):
        import mindhooks.hook_lib as hook_lib
        from mindhooks.compat import LazyLoader

        def broken():
            raise RuntimeError("no network")

        monkeypatch.setattr(hook_lib, "_encoding", LazyLoader(broken))
        assert hook_lib.count_tokens("abcdefghi") == 3
        assert hook_lib.tokenizer_name() == "heuristic"


class TestLazyLoader:

    def test_loads_once(self):
        from mindhooks.compat import LazyLoader

        calls = []
        loader = LazyLoader(lambda: calls.append(1) or "value")
        assert loader.get() == "value"
        assert loader.get() == "value"
        assert calls == [1]
        assert loader.is_available()

    def test_failure_is_remembered(self):
        from mindhooks.compat import LazyLoader

        calls = []

        def factory():
            calls.append(1)
            raise ValueError("boom")

        loader = LazyLoader(factory)
        assert loader.get() is None
        assert loader.get() is None
        assert calls == [1]
        assert not loader.is_available()
        assert isinstance(loader.error, ValueError)

    def test_reset(self):
        from mindhooks.compat import LazyLoader

        calls = []
        loader = LazyLoader(lambda: calls.append(1) or len(calls))
        loader.get()
        loader.reset()
        assert loader.get() == 2
