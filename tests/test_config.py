"""Tests for config loading and validation."""

import pytest

from paperwise.config import (
    AnalysisConfig,
    AppConfig,
    CacheConfig,
    LLMConfig,
    SchedulerConfig,
    load_config,
)
from paperwise.models.analysis import Audience, Domain, Formality


class TestConfig:
    def test_defaults(self):
        config = AppConfig()
        assert config.llm.model == "claude-haiku-4-5-20251001"
        assert config.scheduler.debounce_seconds == 2.5
        assert config.scheduler.max_wait_seconds == 3.0
        assert config.scheduler.min_text_length == 20
        assert config.scheduler.max_text_length == 10_000
        assert config.document.block_separator == "\n"
        assert config.cache.ttl_days == 7

    def test_load_config_defaults(self, tmp_path):
        """Loading from non-existent path returns defaults."""
        config = load_config(tmp_path / "nonexistent.yaml")
        assert config == AppConfig()

    def test_load_empty_file(self, tmp_path):
        yaml_path = tmp_path / "config.yaml"
        yaml_path.write_text("")
        assert load_config(yaml_path) == AppConfig()

    def test_load_config_from_yaml(self, tmp_path):
        yaml_path = tmp_path / "config.yaml"
        yaml_path.write_text(
            "llm:\n  model: test-model\n"
            "scheduler:\n  debounce_seconds: 1.0\n  max_wait_seconds: 2.0\n"
            "analysis:\n  formality: formal\n  domain: academic\n"
            "document:\n  block_separator: \"\\n\\n\"\n"
        )
        config = load_config(yaml_path)
        assert config.llm.model == "test-model"
        assert config.scheduler.debounce_seconds == 1.0
        assert config.document.block_separator == "\n\n"
        # Defaults for unspecified
        assert config.scheduler.min_text_length == 20
        assert config.cache.enabled is True

    def test_analysis_settings(self):
        settings = AnalysisConfig(formality="formal", audience="expert", domain="email").settings()
        assert settings.formality == Formality.FORMAL
        assert settings.audience == Audience.EXPERT
        assert settings.domain == Domain.EMAIL

    def test_cache_resolved_path(self):
        cache = CacheConfig(db_path="~/test.db")
        resolved = cache.resolved_db_path
        assert "~" not in str(resolved)

    def test_frozen_config(self):
        config = LLMConfig()
        with pytest.raises(AttributeError):
            config.model = "changed"


class TestConfigValidation:
    def test_invalid_timeout(self, tmp_path):
        """timeout of 0 (below minimum of 1) raises ValueError."""
        yaml = tmp_path / "bad.yaml"
        yaml.write_text("llm:\n  timeout: 0\n")
        with pytest.raises(ValueError, match="timeout"):
            load_config(yaml)

    def test_invalid_max_retries(self):
        with pytest.raises(ValueError, match="max_retries"):
            LLMConfig(max_retries=99)

    def test_invalid_ttl_days(self, tmp_path):
        """ttl_days above 365 raises ValueError."""
        yaml = tmp_path / "bad.yaml"
        yaml.write_text("cache:\n  ttl_days: 999\n")
        with pytest.raises(ValueError, match="ttl_days"):
            load_config(yaml)

    def test_max_wait_below_debounce(self):
        with pytest.raises(ValueError, match="max_wait_seconds"):
            SchedulerConfig(debounce_seconds=3.0, max_wait_seconds=1.0)

    def test_max_text_below_min_text(self):
        with pytest.raises(ValueError, match="max_text_length"):
            SchedulerConfig(min_text_length=50, max_text_length=10)

    def test_unknown_formality(self, tmp_path):
        yaml = tmp_path / "bad.yaml"
        yaml.write_text("analysis:\n  formality: sarcastic\n")
        with pytest.raises(ValueError, match="formality"):
            load_config(yaml)

    def test_unknown_key_rejected(self):
        with pytest.raises(TypeError):
            LLMConfig(haiku_model="x")
