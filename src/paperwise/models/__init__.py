"""Data models for the suggestion engine."""

from paperwise.models.analysis import (
    AnalysisSettings,
    AnalysisSnapshot,
    AnalysisStatus,
    Audience,
    Domain,
    Formality,
)
from paperwise.models.edit import AppliedEdit, Edit
from paperwise.models.highlight import Highlight
from paperwise.models.position import NativePosition
from paperwise.models.suggestion import Category, EngineSuggestion, Suggestion

__all__ = [
    "AnalysisSettings",
    "AnalysisSnapshot",
    "AnalysisStatus",
    "AppliedEdit",
    "Audience",
    "Category",
    "Domain",
    "Edit",
    "EngineSuggestion",
    "Formality",
    "Highlight",
    "NativePosition",
    "Suggestion",
]
