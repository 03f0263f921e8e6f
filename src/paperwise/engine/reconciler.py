"""Offset reconciliation of pending suggestions against a document edit."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from paperwise.models.edit import Edit
from paperwise.models.suggestion import Suggestion

logger = logging.getLogger(__name__)


def reconcile(suggestions: Iterable[Suggestion], edit: Edit) -> list[Suggestion]:
    """Return the suggestions that survive ``edit``, with offsets moved to the new text.

    A suggestion entirely before the edit is kept as is; one entirely after it
    is shifted by the edit's delta; any other suggestion touches the edited
    range and is dropped, since its original text can no longer be trusted.
    Input order is preserved.
    """
    delta = edit.delta
    survivors: list[Suggestion] = []
    dropped = 0
    for s in suggestions:
        if s.end <= edit.start:
            survivors.append(s)
        elif s.start >= edit.end:
            survivors.append(s.shifted(delta) if delta else s)
        else:
            dropped += 1
    if dropped:
        logger.debug(
            "Edit [%d, %d)+%d invalidated %d suggestion(s)",
            edit.start, edit.end, edit.inserted_length, dropped,
        )
    return survivors
