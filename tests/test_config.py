"""Tests for config loading, validation and CLI overrides."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from e2egen.config import build_config, load_config, resolve_api_key
from e2egen.schemas.config import GeneratorConfig


class TestGeneratorConfig:
    """Test the GeneratorConfig Pydantic model directly."""

    def test_defaults(self) -> None:
        cfg = GeneratorConfig()
        assert cfg.output_dir == "./playwright-tests"
        assert cfg.include_patterns == ["src/**/*.{js,jsx,ts,tsx}"]
        assert cfg.exclude_patterns == ["**/*.test.{js,jsx,ts,tsx}", "**/node_modules/**"]
        assert cfg.max_tokens_per_request == 8000
        assert cfg.model == "gpt-4o"
        assert cfg.max_files == 30
        assert cfg.save_raw_responses is False

    def test_requires_include_pattern(self) -> None:
        with pytest.raises(ValidationError, match="include pattern"):
            GeneratorConfig(include_patterns=[])

    @pytest.mark.parametrize("field", ["max_tokens_per_request", "max_files"])
    def test_positive_ints(self, field: str) -> None:
        with pytest.raises(ValidationError, match="positive"):
            GeneratorConfig(**{field: 0})

    def test_max_files_capped_at_thirty(self) -> None:
        assert GeneratorConfig(max_files=30).max_files == 30
        with pytest.raises(ValidationError, match="less than or equal to 30"):
            GeneratorConfig(max_files=31)

    def test_api_key_never_dumped(self) -> None:
        cfg = GeneratorConfig(api_key="sk-secret")
        assert "api_key" not in cfg.model_dump()
        assert "sk-secret" not in repr(cfg)


class TestLoadConfig:

    def test_load_valid(self, tmp_config: Path) -> None:
        cfg = load_config(tmp_config)
        assert cfg.include_patterns == ["src/**/*.jsx"]
        assert cfg.max_tokens_per_request == 4000
        assert cfg.output_dir.endswith("tests-out")

    def test_null_list_uses_default(self, tmp_config: Path) -> None:
        # exclude_patterns: (no items) loads as None
        assert load_config(tmp_config).exclude_patterns == GeneratorConfig().exclude_patterns

    def test_empty_items_stripped(self, tmp_path: Path) -> None:
        f = tmp_path / "c.yml"
        f.write_text('include_patterns:\n  - "src/**/*.js"\n  - ""\n')
        assert load_config(f).include_patterns == ["src/**/*.js"]

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.yml")

    def test_not_a_mapping(self, tmp_path: Path) -> None:
        f = tmp_path / "c.yml"
        f.write_text("- just\n- a list\n")
        with pytest.raises(ValueError, match="mapping"):
            load_config(f)

    def test_invalid_values(self, tmp_path: Path) -> None:
        f = tmp_path / "c.yml"
        f.write_text("max_files: -1\n")
        with pytest.raises(ValidationError):
            load_config(f)


class TestBuildConfig:

    def test_overrides_win(self, tmp_config: Path) -> None:
        cfg = build_config(load_config(tmp_config), model="gpt-4o-mini", max_tokens_per_request=None)
        assert cfg.model == "gpt-4o-mini"
        assert cfg.max_tokens_per_request == 4000

    def test_empty_list_override_ignored(self) -> None:
        cfg = build_config(None, include_patterns=[])
        assert cfg.include_patterns == GeneratorConfig().include_patterns

    def test_api_key_carried_over(self) -> None:
        cfg = build_config(GeneratorConfig(api_key="sk-file"), output_dir="out")
        assert cfg.api_key == "sk-file"
        assert cfg.output_dir == "out"

    def test_api_key_override(self) -> None:
        cfg = build_config(GeneratorConfig(api_key="sk-file"), api_key="sk-flag")
        assert cfg.api_key == "sk-flag"


class TestResolveApiKey:

    def test_config_first(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("OPENAI_API_KEY", "sk-env")
        assert resolve_api_key(GeneratorConfig(api_key="sk-cfg")) == "sk-cfg"

    def test_environment_fallback(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("OPENAI_API_KEY", "sk-env")
        assert resolve_api_key(GeneratorConfig()) == "sk-env"
