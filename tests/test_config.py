"""Tests for config loading, validation, and env var overrides."""

from pathlib import Path

import pytest

from cartographer.config.defaults import DEFAULT_TOML
from cartographer.config.loader import (
    ConfigError,
    find_config_file,
    load_config,
    resolve_cache_dir,
    resolve_output_path,
)


class TestConfigLoading:
    def test_default_config(self, tmp_path: Path):
        cfg = load_config(tmp_path)
        assert cfg.output.path == ".ai/context-map.md"
        assert cfg.tiers.batch_size == 15
        assert cfg.llm.provider == "anthropic"
        assert cfg.llm.max_concurrent == 5
        assert cfg.llm.rpm_limit == 50
        assert "package-lock.json" in cfg.tiers.skip_patterns

    def test_custom_toml(self, tmp_path: Path):
        (tmp_path / ".cartographer.toml").write_text(
            'version = "1.0"\n'
            "[tiers]\n"
            'key_entry_points = ["src/main.py"]\n'
            "batch_size = 20\n"
            "[llm]\n"
            'provider = "openai"\n'
            "rpm_limit = 0\n"
        )
        cfg = load_config(tmp_path)
        assert cfg.tiers.key_entry_points == ["src/main.py"]
        assert cfg.tiers.batch_size == 20
        assert cfg.llm.provider == "openai"
        assert cfg.llm.rpm_limit == 0

    def test_ai_dir_location(self, tmp_path: Path):
        (tmp_path / ".ai").mkdir()
        (tmp_path / ".ai" / "cartographer.toml").write_text('[output]\npath = "MAP.md"\n')
        assert find_config_file(tmp_path) == tmp_path / ".ai" / "cartographer.toml"
        assert load_config(tmp_path).output.path == "MAP.md"

    def test_unknown_keys_ignored(self, tmp_path: Path):
        (tmp_path / ".cartographer.toml").write_text("[llm]\ntemperature = 0.2\n")
        assert load_config(tmp_path).llm.provider == "anthropic"

    def test_config_override_path(self, tmp_path: Path):
        custom = tmp_path / "custom.toml"
        custom.write_text("[tiers]\nbatch_size = 3\n")
        cfg = load_config(tmp_path, config_override=str(custom))
        assert cfg.tiers.batch_size == 3

    def test_missing_override_raises(self, tmp_path: Path):
        with pytest.raises(ConfigError):
            load_config(tmp_path, config_override="/nonexistent/config.toml")

    def test_invalid_toml_raises(self, tmp_path: Path):
        (tmp_path / ".cartographer.toml").write_text("this is not valid [toml")
        with pytest.raises(ConfigError):
            load_config(tmp_path)

    def test_starter_template_loads(self, tmp_path: Path):
        (tmp_path / ".cartographer.toml").write_text(DEFAULT_TOML)
        cfg = load_config(tmp_path)
        assert cfg.tiers.batch_size == 15
        assert cfg.cache.dir == ".ai/.cache"

    def test_resolved_paths(self, tmp_path: Path):
        cfg = load_config(tmp_path)
        assert resolve_output_path(tmp_path, cfg) == (tmp_path / ".ai/context-map.md").resolve()
        assert resolve_cache_dir(tmp_path, cfg) == (tmp_path / ".ai/.cache").resolve()


class TestValidation:
    def test_unknown_provider(self, tmp_path: Path):
        (tmp_path / ".cartographer.toml").write_text('[llm]\nprovider = "gemini"\n')
        with pytest.raises(ConfigError, match="provider"):
            load_config(tmp_path)

    def test_zero_batch_size(self, tmp_path: Path):
        (tmp_path / ".cartographer.toml").write_text("[tiers]\nbatch_size = 0\n")
        with pytest.raises(ConfigError, match="batch_size"):
            load_config(tmp_path)

    def test_negative_rpm_limit(self, tmp_path: Path):
        (tmp_path / ".cartographer.toml").write_text("[llm]\nrpm_limit = -1\n")
        with pytest.raises(ConfigError, match="rpm_limit"):
            load_config(tmp_path)

    def test_patterns_must_be_list(self, tmp_path: Path):
        (tmp_path / ".cartographer.toml").write_text('[tiers]\nskip_patterns = "*.lock"\n')
        with pytest.raises(ConfigError, match="skip_patterns"):
            load_config(tmp_path)

    def test_section_must_be_table(self, tmp_path: Path):
        (tmp_path / ".cartographer.toml").write_text('llm = "anthropic"\n')
        with pytest.raises(ConfigError):
            load_config(tmp_path)


class TestEnvVarOverrides:
    def test_provider_override(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("CARTOGRAPHER_PROVIDER", "openai")
        assert load_config(tmp_path).llm.provider == "openai"

    def test_output_override(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("CARTOGRAPHER_OUTPUT", "docs/MAP.md")
        assert load_config(tmp_path).output.path == "docs/MAP.md"

    def test_numeric_overrides(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("CARTOGRAPHER_BATCH_SIZE", "8")
        monkeypatch.setenv("CARTOGRAPHER_MAX_CONCURRENT", "2")
        monkeypatch.setenv("CARTOGRAPHER_RPM_LIMIT", "0")
        cfg = load_config(tmp_path)
        assert cfg.tiers.batch_size == 8
        assert cfg.llm.max_concurrent == 2
        assert cfg.llm.rpm_limit == 0

    def test_env_beats_file(self, tmp_path: Path, monkeypatch):
        (tmp_path / ".cartographer.toml").write_text("[tiers]\nbatch_size = 20\n")
        monkeypatch.setenv("CARTOGRAPHER_BATCH_SIZE", "5")
        assert load_config(tmp_path).tiers.batch_size == 5

    def test_invalid_int_raises(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("CARTOGRAPHER_BATCH_SIZE", "lots")
        with pytest.raises(ConfigError):
            load_config(tmp_path)
