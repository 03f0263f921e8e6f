"""Editor session: wires document, store, renderer and scheduler together."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

from paperwise.config import AppConfig
from paperwise.document.model import RichDocument
from paperwise.engine.renderer import DecorationRenderer
from paperwise.engine.scheduler import AnalysisScheduler, AnalyzeFn
from paperwise.engine.store import SuggestionStore
from paperwise.models.analysis import AnalysisStatus
from paperwise.models.edit import AppliedEdit, Edit
from paperwise.models.highlight import Highlight
from paperwise.models.position import NativePosition

logger = logging.getLogger(__name__)


class EditorSession:
    """Host-side glue for one open document.

    Every content change goes through :meth:`edit` or :meth:`accept`, which
    reconcile the store before the scheduler hears about the new text.
    """

    def __init__(
        self,
        document: RichDocument,
        analyze: AnalyzeFn,
        *,
        config: AppConfig | None = None,
        on_activated: Callable[[str], None] | None = None,
        on_preview: Callable[[str | None], None] | None = None,
        on_status: Callable[[AnalysisStatus], None] | None = None,
    ):
        config = config or AppConfig()
        self.document = document
        self.store = SuggestionStore()
        self.renderer = DecorationRenderer(on_activated=on_activated, on_preview=on_preview)
        self.scheduler = AnalysisScheduler(
            analyze,
            self.store,
            config.analysis.settings(),
            debounce_seconds=config.scheduler.debounce_seconds,
            max_wait_seconds=config.scheduler.max_wait_seconds,
            min_text_length=config.scheduler.min_text_length,
            max_text_length=config.scheduler.max_text_length,
            on_status=on_status,
        )
        self.selected_id: str | None = None

    @property
    def text(self) -> str:
        return self.document.text

    @property
    def status(self) -> AnalysisStatus:
        return self.scheduler.status

    def request_analysis(self) -> None:
        """Queue analysis of the current text, e.g. when the document is first opened."""
        self.scheduler.document_changed(self.document.text)

    # -- content changes ----------------------------------------------------

    def edit(self, start: int, end: int, text: str) -> Edit:
        """Apply a user edit to the document and keep suggestions in place."""
        edit = self.document.replace(start, end, text)
        self.store.reconcile_after_edit(edit)
        self.scheduler.document_changed(self.document.text)
        return edit

    def accept(self, suggestion_id: str) -> AppliedEdit | None:
        """Apply a suggestion's replacement. Unknown ids are a no-op returning ``None``."""
        applied = self._accept_one(suggestion_id)
        if applied is not None:
            self._after_accept([suggestion_id])
        return applied

    def accept_many(self, suggestion_ids: Iterable[str]) -> list[AppliedEdit]:
        ids = list(dict.fromkeys(suggestion_ids))
        targets = [s for s in (self.store.by_id(i) for i in ids) if s is not None]
        # last in the document first, so earlier offsets stay valid
        targets.sort(key=lambda s: s.start, reverse=True)
        applied = [a for a in (self._accept_one(s.id) for s in targets) if a is not None]
        if applied:
            self._after_accept(ids)
        return applied

    def _accept_one(self, suggestion_id: str) -> AppliedEdit | None:
        suggestion = self.store.by_id(suggestion_id)
        if suggestion is None:
            logger.debug("Accept of unknown suggestion %s ignored", suggestion_id)
            return None
        try:
            self.document.replace(suggestion.start, suggestion.end, suggestion.replacement_text)
        except ValueError as e:
            # e.g. a range crossing a block boundary; the document is unchanged
            logger.warning("Could not apply suggestion %s: %s", suggestion_id, e)
            self.store.dismiss(suggestion_id)
            return None
        return self.store.accept(suggestion_id)

    def accept_all(self) -> list[AppliedEdit]:
        return self.accept_many(s.id for s in self.store.list())

    def _after_accept(self, ids: list[str]) -> None:
        if self.selected_id in ids:
            self.selected_id = None
        self.scheduler.document_changed(self.document.text, schedule=False)

    def dismiss(self, suggestion_id: str) -> bool:
        if self.selected_id == suggestion_id:
            self.selected_id = None
        return self.store.dismiss(suggestion_id)

    def dismiss_many(self, suggestion_ids: Iterable[str]) -> int:
        ids = list(suggestion_ids)
        if self.selected_id in ids:
            self.selected_id = None
        return self.store.dismiss_many(ids)

    # -- rendering ----------------------------------------------------------

    def highlights(self) -> list[Highlight]:
        return self.renderer.render(self.store.list(), self.document.index(), self.selected_id)

    def click(self, position: NativePosition) -> str | None:
        self.highlights()
        suggestion_id = self.renderer.click(position)
        self.selected_id = suggestion_id
        return suggestion_id

    def hover(self, position: NativePosition | None) -> str | None:
        self.highlights()
        return self.renderer.hover(position)
