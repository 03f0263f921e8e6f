"""Keeps AI writing suggestions anchored to a live rich-text document."""

from paperwise.document import NativePosition, OffsetIndex, RichDocument
from paperwise.engine import (
    AnalysisScheduler,
    DecorationRenderer,
    EditorSession,
    SuggestionStore,
    reconcile,
)
from paperwise.models import (
    AnalysisSettings,
    AnalysisStatus,
    AppliedEdit,
    Category,
    Edit,
    Highlight,
    Suggestion,
)

__all__ = [
    "AnalysisScheduler",
    "AnalysisSettings",
    "AnalysisStatus",
    "AppliedEdit",
    "Category",
    "DecorationRenderer",
    "Edit",
    "EditorSession",
    "Highlight",
    "NativePosition",
    "OffsetIndex",
    "RichDocument",
    "Suggestion",
    "SuggestionStore",
    "reconcile",
]
