"""Suggestion reconciliation engine."""

from paperwise.engine.reconciler import reconcile
from paperwise.engine.renderer import DecorationRenderer
from paperwise.engine.scheduler import AnalysisScheduler, SchedulerState
from paperwise.engine.session import EditorSession
from paperwise.engine.store import SuggestionStore

__all__ = [
    "AnalysisScheduler",
    "DecorationRenderer",
    "EditorSession",
    "SchedulerState",
    "SuggestionStore",
    "reconcile",
]
