"""Native document addressing."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class NativePosition:
    """Address of a character inside the document tree.

    ``path`` is the child-index path from the root to a node; ``offset`` is the
    character offset inside that node when it is a text node.
    """

    path: tuple[int, ...]
    offset: int = 0
