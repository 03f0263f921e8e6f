"""Projects pending suggestions onto the live document as inline highlights."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

from paperwise.document.offset_index import OffsetIndex
from paperwise.errors import OffsetError
from paperwise.models.highlight import Highlight
from paperwise.models.position import NativePosition
from paperwise.models.suggestion import Suggestion

logger = logging.getLogger(__name__)


def css_class_for(suggestion: Suggestion, selected: bool = False) -> str:
    css = f"suggestion suggestion-{suggestion.category.value}"
    return f"{css} suggestion-selected" if selected else css


class DecorationRenderer:
    """Derives a disposable highlight list and dispatches click/hover back to the host.

    The renderer only reads suggestions; accept/dismiss decisions belong to
    whoever handles ``on_activated``.
    """

    def __init__(
        self,
        on_activated: Callable[[str], None] | None = None,
        on_preview: Callable[[str | None], None] | None = None,
    ):
        self.on_activated = on_activated
        self.on_preview = on_preview
        self._highlights: list[Highlight] = []
        self._index: OffsetIndex | None = None
        self._hovered: str | None = None

    @property
    def highlights(self) -> list[Highlight]:
        return list(self._highlights)

    def render(
        self,
        suggestions: Iterable[Suggestion],
        offset_index: OffsetIndex,
        selected_id: str | None = None,
    ) -> list[Highlight]:
        highlights: list[Highlight] = []
        for s in sorted(suggestions, key=lambda s: (s.start, s.length)):
            if highlights and s.start < highlights[-1].flat_end:
                logger.debug("Skipping overlapping suggestion %s at [%d, %d)", s.id, s.start, s.end)
                continue
            try:
                start = offset_index.to_native_position(s.start, bias="right")
                end = offset_index.to_native_position(s.end, bias="left")
            except OffsetError as e:
                # stale range; SuggestionStore.prune removes it
                logger.debug("Skipping suggestion %s: %s", s.id, e)
                continue
            highlights.append(
                Highlight(
                    suggestion_id=s.id,
                    category=s.category,
                    start=start,
                    end=end,
                    flat_start=s.start,
                    flat_end=s.end,
                    css_class=css_class_for(s, selected=s.id == selected_id),
                )
            )

        self._highlights = highlights
        self._index = offset_index
        if self._hovered is not None and all(h.suggestion_id != self._hovered for h in highlights):
            self._hovered = None
        return list(highlights)

    def hit_test(self, position: NativePosition) -> str | None:
        """Id of the suggestion whose highlight covers ``position``, if any."""
        if self._index is None:
            return None
        try:
            offset = self._index.to_flat_offset(position)
        except OffsetError:
            return None
        for h in self._highlights:
            if h.covers(offset):
                return h.suggestion_id
            if h.flat_start > offset:
                break
        return None

    def click(self, position: NativePosition) -> str | None:
        suggestion_id = self.hit_test(position)
        if suggestion_id is not None and self.on_activated is not None:
            self.on_activated(suggestion_id)
        return suggestion_id

    def hover(self, position: NativePosition | None) -> str | None:
        """Report the hovered suggestion; ``None`` leaves the current highlight."""
        suggestion_id = self.hit_test(position) if position is not None else None
        if suggestion_id != self._hovered:
            self._hovered = suggestion_id
            if self.on_preview is not None:
                self.on_preview(suggestion_id)
        return suggestion_id
