"""Tests for configuration loading and validation."""

import json
from pathlib import Path

import pytest
import yaml

from llmdoc.utils.config import (
    DEFAULT_EXCLUDE,
    DEFAULT_INCLUDE,
    DEFAULT_PROMPT,
    AppConfig,
    ConfigError,
    LLMConfig,
    LoggingConfig,
    SubfolderConfig,
    find_config_file,
    load_config,
    validate_config,
)


def _raw(**overrides) -> dict:
    raw = {"llm": {"provider": "anthropic", "model": "claude-sonnet-4-20250514"}}
    raw.update(overrides)
    return raw


class TestDefaults:
    """Tests for config dataclass defaults."""

    def test_app_config(self) -> None:
        config = AppConfig()
        assert isinstance(config.llm, LLMConfig)
        assert isinstance(config.logging, LoggingConfig)
        assert config.include == DEFAULT_INCLUDE
        assert config.exclude == DEFAULT_EXCLUDE
        assert config.output_dir == "docs/"
        assert config.subfolders == []

    def test_default_lists_are_copies(self) -> None:
        config = AppConfig()
        config.include.append("**/*.js")
        assert "**/*.js" not in DEFAULT_INCLUDE

    def test_subfolder(self) -> None:
        subfolder = SubfolderConfig(path="src/api")
        assert subfolder.include_imports is True
        assert subfolder.import_depth == 2
        assert subfolder.additional_files == []

    @pytest.mark.parametrize(
        "output_dir,expected",
        [("docs/", "docs"), ("docs", "docs"), ("out/api/", "out/api"), ("/", ".")],
    )
    def test_output_dir_path(self, output_dir: str, expected: str) -> None:
        assert AppConfig(output_dir=output_dir).output_dir_path == expected


class TestValidateConfig:
    """Tests for validate_config."""

    def test_minimal(self) -> None:
        config = validate_config(_raw())
        assert config.llm.provider == "anthropic"
        assert config.prompt == DEFAULT_PROMPT
        assert config.include == DEFAULT_INCLUDE
        assert config.output_dir == "docs/"

    def test_full(self) -> None:
        config = validate_config(
            {
                "llm": {
                    "provider": "openai",
                    "model": "gpt-4o",
                    "api_key": "sk-test",
                    "base_url": "https://proxy.example.com/v1",
                    "temperature": 0.5,
                    "max_tokens": 2048,
                },
                "prompt": "Document this.",
                "include": ["src/**/*.ts"],
                "exclude": [],
                "output_dir": "reference/",
                "subfolders": [
                    {
                        "path": "src/api",
                        "prompt": "API docs",
                        "import_depth": 3,
                        "include_imports": False,
                        "additional_files": ["src/types/*.ts"],
                    }
                ],
                "logging": {"level": "DEBUG"},
            }
        )
        assert config.llm.base_url == "https://proxy.example.com/v1"
        assert config.llm.max_tokens == 2048
        assert config.prompt == "Document this."
        assert config.exclude == []
        assert config.output_dir == "reference/"
        assert config.logging.level == "DEBUG"
        subfolder = config.subfolders[0]
        assert subfolder.import_depth == 3
        assert subfolder.include_imports is False
        assert subfolder.additional_files == ["src/types/*.ts"]

    def test_missing_llm_section(self) -> None:
        with pytest.raises(ConfigError, match="llm section is required"):
            validate_config({"prompt": "x"})

    def test_top_level_not_mapping(self) -> None:
        with pytest.raises(ConfigError):
            validate_config(["llm"])

    @pytest.mark.parametrize("provider", ["openai", "anthropic", "google-genai"])
    def test_valid_providers(self, provider: str) -> None:
        config = validate_config({"llm": {"provider": provider, "model": "m"}})
        assert config.llm.provider == provider

    def test_unknown_provider(self) -> None:
        with pytest.raises(ConfigError, match="llm.provider"):
            validate_config({"llm": {"provider": "cohere", "model": "m"}})

    def test_missing_model(self) -> None:
        with pytest.raises(ConfigError, match="llm.model"):
            validate_config({"llm": {"provider": "openai"}})

    @pytest.mark.parametrize("temperature", [-0.1, 2.5, "hot", True])
    def test_bad_temperature(self, temperature) -> None:
        with pytest.raises(ConfigError, match="temperature"):
            validate_config({"llm": {"provider": "openai", "model": "m", "temperature": temperature}})

    @pytest.mark.parametrize("max_tokens", [0, -5, 1.5, "many"])
    def test_bad_max_tokens(self, max_tokens) -> None:
        with pytest.raises(ConfigError, match="max_tokens"):
            validate_config({"llm": {"provider": "openai", "model": "m", "max_tokens": max_tokens}})

    def test_bad_base_url(self) -> None:
        with pytest.raises(ConfigError, match="base_url"):
            validate_config(
                {"llm": {"provider": "openai", "model": "m", "base_url": "not a url"}}
            )

    @pytest.mark.parametrize("depth", [-1, 6, "2", 1.5])
    def test_bad_import_depth(self, depth) -> None:
        with pytest.raises(ConfigError, match="import_depth"):
            validate_config(_raw(subfolders=[{"path": "src", "import_depth": depth}]))

    @pytest.mark.parametrize("depth", [0, 5])
    def test_import_depth_bounds(self, depth: int) -> None:
        config = validate_config(_raw(subfolders=[{"path": "src", "import_depth": depth}]))
        assert config.subfolders[0].import_depth == depth

    def test_subfolder_requires_path(self) -> None:
        with pytest.raises(ConfigError, match=r"subfolders\[0\]\.path"):
            validate_config(_raw(subfolders=[{"prompt": "x"}]))

    def test_duplicate_subfolder_paths(self) -> None:
        with pytest.raises(ConfigError, match="duplicate subfolder path"):
            validate_config(_raw(subfolders=[{"path": "src"}, {"path": "src"}]))

    def test_include_must_be_strings(self) -> None:
        with pytest.raises(ConfigError, match="include"):
            validate_config(_raw(include=["**/*.ts", 3]))

    def test_subfolders_must_be_list(self) -> None:
        with pytest.raises(ConfigError, match="subfolders must be a list"):
            validate_config(_raw(subfolders={"path": "src"}))


class TestFindConfigFile:
    """Tests for find_config_file."""

    def test_none_when_missing(self, tmp_path: Path) -> None:
        assert find_config_file(tmp_path) is None

    def test_yaml_preferred(self, tmp_path: Path) -> None:
        (tmp_path / "llmdoc.config.json").write_text("{}")
        (tmp_path / "llmdoc.config.yaml").write_text("")
        assert find_config_file(tmp_path).name == "llmdoc.config.yaml"

    def test_custom_path(self, tmp_path: Path) -> None:
        (tmp_path / "custom.yaml").write_text("")
        assert find_config_file(tmp_path, "custom.yaml").name == "custom.yaml"


class TestLoadConfig:
    """Tests for the load_config function."""

    def test_load_yaml(self, tmp_path: Path) -> None:
        with open(tmp_path / "llmdoc.config.yaml", "w") as f:
            yaml.dump(_raw(output_dir="api-docs/"), f)

        config = load_config(tmp_path)
        assert config.llm.model == "claude-sonnet-4-20250514"
        assert config.output_dir == "api-docs/"

    def test_load_json(self, tmp_path: Path) -> None:
        (tmp_path / "llmdoc.config.json").write_text(
            json.dumps({"llm": {"provider": "openai", "model": "gpt-4o"}})
        )
        assert load_config(tmp_path).llm.provider == "openai"

    def test_load_custom_path(self, tmp_path: Path) -> None:
        with open(tmp_path / "other.yml", "w") as f:
            yaml.dump(_raw(), f)
        assert isinstance(load_config(tmp_path, "other.yml"), AppConfig)

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="No config file found"):
            load_config(tmp_path)

    def test_missing_custom_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="nope.yaml"):
            load_config(tmp_path, "nope.yaml")

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        (tmp_path / "llmdoc.config.yaml").write_text("llm: [unclosed\n")
        with pytest.raises(ConfigError, match="Failed to load config file"):
            load_config(tmp_path)

    def test_invalid_json(self, tmp_path: Path) -> None:
        (tmp_path / "llmdoc.config.json").write_text("{not json")
        with pytest.raises(ConfigError, match="Failed to load config file"):
            load_config(tmp_path)

    def test_empty_file(self, tmp_path: Path) -> None:
        (tmp_path / "llmdoc.config.yaml").write_text("")
        with pytest.raises(ConfigError, match="top level must be a mapping"):
            load_config(tmp_path)
