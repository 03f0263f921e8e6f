"""Application configuration loaded from config.yaml."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml

from paperwise.models.analysis import AnalysisSettings


def _check_range(name: str, value: float, lo: float, hi: float) -> None:
    if not lo <= value <= hi:
        raise ValueError(f"{name} must be between {lo} and {hi}, got {value}")


@dataclass(frozen=True)
class LLMConfig:
    model: str = "claude-haiku-4-5-20251001"
    max_retries: int = 3
    timeout: int = 60
    temperature: float = 0.3
    max_tokens: int = 4096

    def __post_init__(self) -> None:
        _check_range("max_retries", self.max_retries, 1, 10)
        _check_range("timeout", self.timeout, 1, 600)
        _check_range("temperature", self.temperature, 0.0, 1.0)
        _check_range("max_tokens", self.max_tokens, 256, 64000)


@dataclass(frozen=True)
class SchedulerConfig:
    debounce_seconds: float = 2.5
    max_wait_seconds: float = 3.0
    min_text_length: int = 20
    max_text_length: int = 10_000

    def __post_init__(self) -> None:
        _check_range("debounce_seconds", self.debounce_seconds, 0.0, 60.0)
        _check_range("max_wait_seconds", self.max_wait_seconds, self.debounce_seconds, 300.0)
        _check_range("min_text_length", self.min_text_length, 0, 10_000)
        _check_range("max_text_length", self.max_text_length, max(self.min_text_length, 1), 1_000_000)


@dataclass(frozen=True)
class AnalysisConfig:
    formality: str = "neutral"
    audience: str = "general"
    domain: str = "general"

    def __post_init__(self) -> None:
        # raises ValueError naming the offending option
        self.settings()

    def settings(self) -> AnalysisSettings:
        try:
            return AnalysisSettings(formality=self.formality, audience=self.audience, domain=self.domain)
        except ValueError as e:
            raise ValueError(f"invalid analysis settings (formality/audience/domain): {e}") from None


@dataclass(frozen=True)
class DocumentConfig:
    block_separator: str = "\n"


@dataclass(frozen=True)
class CacheConfig:
    enabled: bool = True
    ttl_days: int = 7
    db_path: str = "~/.paperwise/analysis_cache.db"

    def __post_init__(self) -> None:
        _check_range("ttl_days", self.ttl_days, 0, 365)

    @property
    def resolved_db_path(self) -> Path:
        return Path(self.db_path).expanduser()


@dataclass(frozen=True)
class AppConfig:
    llm: LLMConfig = field(default_factory=LLMConfig)
    scheduler: SchedulerConfig = field(default_factory=SchedulerConfig)
    analysis: AnalysisConfig = field(default_factory=AnalysisConfig)
    document: DocumentConfig = field(default_factory=DocumentConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load config from YAML file, falling back to defaults."""
    if path is None:
        candidates = [
            Path.cwd() / "config.yaml",
            Path.home() / ".paperwise" / "config.yaml",
        ]
        for c in candidates:
            if c.exists():
                path = c
                break

    raw: dict = {}
    if path is not None:
        p = Path(path)
        if p.exists():
            raw = yaml.safe_load(p.read_text()) or {}

    return AppConfig(
        llm=LLMConfig(**raw.get("llm", {})),
        scheduler=SchedulerConfig(**raw.get("scheduler", {})),
        analysis=AnalysisConfig(**raw.get("analysis", {})),
        document=DocumentConfig(**raw.get("document", {})),
        cache=CacheConfig(**raw.get("cache", {})),
    )
