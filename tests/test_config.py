"""Tests for per-project configuration loading."""

import json


def _write_config(project, data):
    path = project / ".claude" / "mindhooks.json"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(data if isinstance(data, str) else json.dumps(data), encoding="utf-8")
    return path


class TestLoadConfig:

    def test_defaults_without_file(self, tmp_path):
        from mindhooks.config import MindConfig, load_config

        config = load_config(tmp_path)
        assert config == MindConfig()
        assert config.memory_path == ".claude/mind.db"
        assert config.max_context_observations == 20
        assert config.max_context_tokens == 2000
        assert config.auto_compress is True
        assert config.min_confidence == 0.6
        assert config.debug is False

    def test_camel_case_keys(self, tmp_path):
        from mindhooks.config import load_config

        _write_config(tmp_path, {
            "memoryPath": "mem/project.db",
            "maxContextObservations": 5,
            "maxContextTokens": 500,
            "autoCompress": False,
        })
        config = load_config(tmp_path)
        assert config.memory_path == "mem/project.db"
        assert config.max_context_observations == 5
        assert config.max_context_tokens == 500
        assert config.auto_compress is False

    def test_snake_case_and_unknown_keys(self, tmp_path):
        from mindhooks.config import load_config

        _write_config(tmp_path, {"max_context_tokens": 750, "theme": "dark"})
        assert load_config(tmp_path).max_context_tokens == 750

    def test_invalid_json_warns(self, tmp_path, capsys):
        from mindhooks.config import MindConfig, load_config

        _write_config(tmp_path, "{broken")
        assert load_config(tmp_path) == MindConfig()
        err = capsys.readouterr().err
        assert "[mindhooks] WARN: could not read" in err
        assert "using defaults" in err

    def test_non_object_json(self, tmp_path, capsys):
        from mindhooks.config import MindConfig, load_config

        _write_config(tmp_path, "[1, 2]")
        assert load_config(tmp_path) == MindConfig()
        assert "expected a JSON object" in capsys.readouterr().err

    def test_mistyped_values_ignored(self, tmp_path, capsys):
        from mindhooks.config import load_config

        _write_config(tmp_path, {"autoCompress": "no", "maxContextTokens": "lots", "maxContextObservations": "7"})
        config = load_config(tmp_path)
        assert config.auto_compress is True
        assert config.max_context_tokens == 2000
        assert config.max_context_observations == 7
        err = capsys.readouterr().err
        assert "autoCompress" in err
        assert "maxContextTokens" in err

    def test_debug_env(self, tmp_path, monkeypatch):
        from mindhooks.config import load_config

        monkeypatch.setenv("MINDHOOKS_DEBUG", "1")
        assert load_config(tmp_path).debug is True


class TestConfigFromDict:

    def test_min_confidence_accepted(self):
        from mindhooks.config import config_from_dict

        assert config_from_dict({"minConfidence": 0.9}).min_confidence == 0.9

    def test_empty(self):
        from mindhooks.config import MindConfig, config_from_dict

        assert config_from_dict({}) == MindConfig()
