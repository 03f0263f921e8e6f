"""Suggestion store, the single source of truth for pending suggestions."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from pydantic import ValidationError

from paperwise.engine.reconciler import reconcile
from paperwise.errors import SuggestionNotFound
from paperwise.models.edit import AppliedEdit, Edit
from paperwise.models.suggestion import EngineSuggestion, Suggestion

logger = logging.getLogger(__name__)


class SuggestionStore:
    """Pending suggestions, ordered by start, unique by id, pairwise non-overlapping.

    Every method runs to completion without suspending, so callers on a
    single event loop never observe a half-applied update.
    """

    def __init__(self, suggestions: Iterable[Suggestion] = ()):
        self._items: list[Suggestion] = []
        for s in sorted(suggestions, key=lambda s: (s.start, s.length)):
            if any(s.overlaps(o.start, o.end) for o in self._items):
                raise ValueError(f"Suggestion {s.id} overlaps an existing suggestion")
            self._items.append(s)

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, suggestion_id: object) -> bool:
        return any(s.id == suggestion_id for s in self._items)

    def __iter__(self):
        return iter(list(self._items))

    def list(self) -> list[Suggestion]:
        """Snapshot ordered by start."""
        return list(self._items)

    def by_id(self, suggestion_id: str) -> Suggestion | None:
        for s in self._items:
            if s.id == suggestion_id:
                return s
        return None

    # -- merge --------------------------------------------------------------

    def merge(
        self,
        new_suggestions: Iterable[EngineSuggestion | dict],
        analysis_text: str,
    ) -> list[Suggestion]:
        """Locate engine output in ``analysis_text`` and add what does not conflict.

        ``analysis_text`` must be the text the live document holds right now;
        the scheduler guarantees this by discarding stale results.  Returns
        the suggestions that were added.
        """
        entries = _validate(new_suggestions)
        candidates = _locate(entries, analysis_text)

        # earliest start first, then the most specific (shortest) range
        candidates.sort(key=lambda s: (s.start, s.length))
        occupied = list(self._items)
        added: list[Suggestion] = []
        for candidate in candidates:
            if any(candidate.overlaps(o.start, o.end) for o in occupied):
                logger.debug(
                    "Dropping %s suggestion %r at [%d, %d): overlaps a pending suggestion",
                    candidate.category.value, candidate.original_text, candidate.start, candidate.end,
                )
                continue
            occupied.append(candidate)
            added.append(candidate)

        if added:
            self._items = sorted(self._items + added, key=lambda s: s.start)
        logger.info(
            "Merged %d of %d engine suggestion(s); %d pending",
            len(added), len(entries), len(self._items),
        )
        return added

    # -- user actions -------------------------------------------------------

    def accept(self, suggestion_id: str) -> AppliedEdit:
        """Remove the suggestion and shift the rest as if its replacement had been applied.

        The caller is responsible for applying the returned edit to the document.
        """
        target = self.by_id(suggestion_id)
        if target is None:
            raise SuggestionNotFound(suggestion_id)

        applied = AppliedEdit(
            start=target.start,
            end=target.end,
            inserted_length=len(target.replacement_text),
            text=target.replacement_text,
            suggestion_id=target.id,
        )
        remaining = [s for s in self._items if s.id != suggestion_id]
        self._items = reconcile(remaining, applied)
        logger.debug("Accepted %s at [%d, %d)", suggestion_id, applied.start, applied.end)
        return applied

    def accept_many(self, suggestion_ids: Iterable[str]) -> list[AppliedEdit]:
        """Accept several suggestions, last in the document first.

        Each returned edit is expressed against the document as it stands after
        the previous edits in the list have been applied. Unknown ids are skipped.
        """
        targets = [s for s in (self.by_id(i) for i in dict.fromkeys(suggestion_ids)) if s is not None]
        targets.sort(key=lambda s: s.start, reverse=True)
        return [self.accept(s.id) for s in targets]

    def dismiss(self, suggestion_id: str) -> bool:
        """Remove a suggestion without touching offsets.

        Returns ``False`` when the id is unknown, so a repeated dismiss is a no-op.
        """
        before = len(self._items)
        self._items = [s for s in self._items if s.id != suggestion_id]
        if len(self._items) == before:
            logger.debug("Dismiss of unknown suggestion %s ignored", suggestion_id)
            return False
        return True

    def dismiss_many(self, suggestion_ids: Iterable[str]) -> int:
        return sum(1 for i in dict.fromkeys(suggestion_ids) if self.dismiss(i))

    def clear(self) -> int:
        count = len(self._items)
        self._items = []
        return count

    # -- document changes ---------------------------------------------------

    def reconcile_after_edit(self, edit: Edit) -> None:
        self._items = reconcile(self._items, edit)

    def verify(self, text: str) -> list[str]:
        """Ids of suggestions whose range no longer holds their original text."""
        return [s.id for s in self._items if text[s.start : s.end] != s.original_text]

    def prune(self, text: str) -> int:
        stale = set(self.verify(text))
        if stale:
            logger.warning("Pruning %d suggestion(s) that no longer match the document", len(stale))
            self._items = [s for s in self._items if s.id not in stale]
        return len(stale)


def _validate(raw: Iterable[EngineSuggestion | dict]) -> list[EngineSuggestion]:
    entries = []
    for item in raw:
        if isinstance(item, EngineSuggestion):
            entries.append(item)
            continue
        if not isinstance(item, dict):
            logger.debug("Dropping malformed engine suggestion: %r", item)
            continue
        try:
            entries.append(EngineSuggestion.model_validate(item))
        except ValidationError as e:
            logger.debug("Dropping malformed engine suggestion %r: %s", item, e.errors())
    return entries


def _locate(entries: list[EngineSuggestion], text: str) -> list[Suggestion]:
    """Find each entry's original text, scanning forward from the previous match."""
    located: list[Suggestion] = []
    cursor = 0
    for entry in entries:
        needle = entry.original_text
        start = text.find(needle, cursor)
        if start == -1:
            logger.debug("Engine suggestion %r not found in analyzed text", needle)
            continue
        located.append(Suggestion.located(entry, start))
        cursor = start + len(needle)
    return located
