"""Pydantic models for analysis requests and status."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict


class Formality(str, Enum):
    CASUAL = "casual"
    NEUTRAL = "neutral"
    FORMAL = "formal"


class Audience(str, Enum):
    GENERAL = "general"
    KNOWLEDGEABLE = "knowledgeable"
    EXPERT = "expert"


class Domain(str, Enum):
    ACADEMIC = "academic"
    BUSINESS = "business"
    GENERAL = "general"
    EMAIL = "email"
    CASUAL = "casual"
    CREATIVE = "creative"


class AnalysisSettings(BaseModel):
    """Options forwarded to the analysis engine; they only shape what it returns."""

    formality: Formality = Formality.NEUTRAL
    audience: Audience = Audience.GENERAL
    domain: Domain = Domain.GENERAL

    model_config = ConfigDict(frozen=True)


class AnalysisStatus(str, Enum):
    IDLE = "idle"
    ANALYZING = "analyzing"
    COMPLETE = "complete"
    ERROR = "error"


class AnalysisSnapshot(BaseModel):
    """The exact text sent for analysis, tagged with the generation it was taken at."""

    source_text: str
    generation: int

    model_config = ConfigDict(frozen=True)
