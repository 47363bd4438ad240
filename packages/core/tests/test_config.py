"""Tests for configuration loading and validation."""

import pytest

from prdigest_core.config import DEFAULT_CONFIG, ReviewConfig, load_config, load_prompt
from prdigest_core.errors import ConfigError
from prdigest_core.prompts import DEFAULT_PROMPT


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in ("CUSTOM_PROMPT", "MAX_CHANGES", "MAX_FILES"):
        monkeypatch.delenv(name, raising=False)


def test_defaults_applied_when_no_config_file(tmp_path):
    config = load_config(config_path=str(tmp_path / "nonexistent.yml"))
    assert config["model"] == "openai"
    assert config["max_changes"] == 1000
    assert config["max_files"] == 10
    assert config["mode"] == "commits"
    assert config["stream"] is False
    assert config["oversized_policy"] == "report"
    assert config["prompt"] is None


def test_config_file_overrides_defaults(tmp_path):
    cfg = tmp_path / ".prdigest.yml"
    cfg.write_text("model: anthropic\nmax_changes: 500\nmode: files\n")
    config = load_config(config_path=str(cfg))
    assert config["model"] == "anthropic"
    assert config["max_changes"] == 500
    assert config["mode"] == "files"


def test_empty_config_file_uses_defaults(tmp_path):
    cfg = tmp_path / ".prdigest.yml"
    cfg.write_text("")
    config = load_config(config_path=str(cfg))
    assert config["max_files"] == 10


def test_non_mapping_config_file_rejected(tmp_path):
    cfg = tmp_path / ".prdigest.yml"
    cfg.write_text("- just\n- a list\n")
    with pytest.raises(ConfigError):
        load_config(config_path=str(cfg))


def test_env_overrides_config_file(tmp_path, monkeypatch):
    cfg = tmp_path / ".prdigest.yml"
    cfg.write_text("max_changes: 500\n")
    monkeypatch.setenv("MAX_CHANGES", "200")
    monkeypatch.setenv("MAX_FILES", "3")
    monkeypatch.setenv("CUSTOM_PROMPT", "Review for security only.")
    config = load_config(config_path=str(cfg))
    assert config["max_changes"] == 200
    assert config["max_files"] == 3
    assert config["prompt"] == "Review for security only."


def test_non_integer_env_rejected(tmp_path, monkeypatch):
    monkeypatch.setenv("MAX_CHANGES", "lots")
    with pytest.raises(ConfigError, match="MAX_CHANGES"):
        load_config(config_path=str(tmp_path / "none.yml"))


def test_cli_overrides_config_file(tmp_path):
    cfg = tmp_path / ".prdigest.yml"
    cfg.write_text("model: anthropic\n")
    config = load_config(config_path=str(cfg), cli_overrides={"model": "openai"})
    assert config["model"] == "openai"


def test_none_cli_overrides_ignored(tmp_path):
    cfg = tmp_path / ".prdigest.yml"
    cfg.write_text("model: anthropic\n")
    config = load_config(config_path=str(cfg), cli_overrides={"model": None})
    assert config["model"] == "anthropic"


def test_credentials_read_from_env(tmp_path, monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "oai")
    monkeypatch.setenv("GITHUB_TOKEN", "gh")
    config = load_config(config_path=str(tmp_path / "none.yml"))
    assert config["openai_api_key"] == "oai"
    assert config["github_token"] == "gh"


class TestLoadPrompt:
    def test_builtin_default(self):
        assert load_prompt({}) == DEFAULT_PROMPT
        assert "Security considerations" in DEFAULT_PROMPT

    def test_inline_prompt_wins(self, tmp_path):
        prompt_file = tmp_path / "prompt.md"
        prompt_file.write_text("from file")
        assert load_prompt({"prompt": "inline", "prompt_file": str(prompt_file)}) == "inline"

    def test_prompt_file(self, tmp_path):
        prompt_file = tmp_path / "prompt.md"
        prompt_file.write_text("# Custom\n- Rule 1")
        assert load_prompt({"prompt_file": str(prompt_file)}) == "# Custom\n- Rule 1"

    def test_missing_prompt_file_raises(self):
        with pytest.raises(FileNotFoundError):
            load_prompt({"prompt_file": "/nonexistent/prompt.md"})


class TestReviewConfig:
    def test_from_defaults(self):
        config = ReviewConfig.from_dict(dict(DEFAULT_CONFIG))
        assert config.max_changes == 1000
        assert config.max_files == 10
        assert config.prompt == DEFAULT_PROMPT
        assert config.request_timeout is None

    def test_is_immutable(self):
        config = ReviewConfig.from_dict(dict(DEFAULT_CONFIG))
        with pytest.raises(AttributeError):
            config.max_changes = 5

    @pytest.mark.parametrize(
        "key,value",
        [
            ("mode", "lines"),
            ("model", "gemini"),
            ("oversized_policy", "ignore"),
            ("summary_prompt", "none"),
            ("max_changes", 0),
            ("max_files", "ten"),
            ("max_files", True),
            ("request_timeout", -1),
            ("request_timeout", "soon"),
            ("stream", "false"),
            ("stream", 1),
        ],
    )
    def test_invalid_values_rejected(self, key, value):
        with pytest.raises(ConfigError):
            ReviewConfig.from_dict({**DEFAULT_CONFIG, key: value})

    def test_quoted_stream_value_from_yaml_rejected(self, tmp_path):
        cfg = tmp_path / ".prdigest.yml"
        cfg.write_text('stream: "false"\n')
        with pytest.raises(ConfigError, match="stream must be true or false"):
            ReviewConfig.from_dict(load_config(config_path=str(cfg)))

    def test_unquoted_stream_value_from_yaml_accepted(self, tmp_path):
        cfg = tmp_path / ".prdigest.yml"
        cfg.write_text("stream: true\n")
        assert ReviewConfig.from_dict(load_config(config_path=str(cfg))).stream is True

    def test_bad_timeout_keeps_original_cause(self):
        with pytest.raises(ConfigError) as exc_info:
            ReviewConfig.from_dict({**DEFAULT_CONFIG, "request_timeout": "soon"})
        assert isinstance(exc_info.value.__cause__, ValueError)

    def test_request_timeout_coerced_to_float(self):
        config = ReviewConfig.from_dict({**DEFAULT_CONFIG, "request_timeout": "30"})
        assert config.request_timeout == 30.0
