"""Bidirectional mapping between flat character offsets and native positions.

The analysis engine and the suggestion store speak flat offsets into the
document's flattened text: the text of every text block, in document order,
joined by a block separator.  The editor speaks native positions (a node
path plus an offset inside a text node).  This module is the only place
that walks document structure.

Boundary policy:

* An offset shared by two runs resolves to the start of the following run
  with ``bias="right"`` and to the end of the preceding run with
  ``bias="left"``.  Highlights use right for their start and left for their end.
* Offsets strictly inside a multi-character separator round to the nearest
  run in the direction of the bias.
* A native position on a non-text node rounds toward the start of the
  enclosing text run, i.e. to that node's flat start.
"""

from __future__ import annotations

import logging
from bisect import bisect_right
from dataclasses import dataclass

from paperwise.document.model import DocNode
from paperwise.errors import InvalidPosition, OutOfRange
from paperwise.models.position import NativePosition

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TextRun:
    """A text node's span in the flattened text.

    Empty text blocks are represented by a zero-width anchor whose path is
    the block itself.
    """

    start: int
    end: int
    path: tuple[int, ...]
    block_path: tuple[int, ...]
    is_anchor: bool = False

    @property
    def length(self) -> int:
        return self.end - self.start


class OffsetIndex:
    """Snapshot index over a document tree. Rebuild it after every mutation."""

    def __init__(self, root: DocNode, block_separator: str = "\n", *, version: int = 0):
        self.block_separator = block_separator
        self.version = version
        self.runs: list[TextRun] = []
        self._block_starts: list[int] = []
        self._node_starts: dict[tuple[int, ...], int] = {}
        self._text_runs: dict[tuple[int, ...], TextRun] = {}
        self._parts: list[str] = []
        self._offset = 0

        self._walk(root, ())

        self.text = "".join(self._parts)
        self._starts = [r.start for r in self.runs]
        logger.debug(
            "Indexed %d runs over %d blocks (%d chars)",
            len(self.runs), len(self._block_starts), len(self.text),
        )

    def __len__(self) -> int:
        return len(self.text)

    # -- build --------------------------------------------------------------

    def _emit(self, text: str) -> None:
        self._parts.append(text)
        self._offset += len(text)

    def _walk(self, node: DocNode, path: tuple[int, ...]) -> None:
        if node.is_textblock:
            self._walk_textblock(node, path)
            return

        blocks_before = len(self._block_starts)
        for i, child in enumerate(node.children):
            self._walk(child, path + (i,))
        if len(self._block_starts) > blocks_before:
            self._node_starts[path] = self._block_starts[blocks_before]
        # containers without any text block (rules, block images) get no flat location

    def _walk_textblock(self, node: DocNode, path: tuple[int, ...]) -> None:
        if self._block_starts:
            self._emit(self.block_separator)
        self._block_starts.append(self._offset)
        self._node_starts[path] = self._offset

        has_runs = False
        for i, child in enumerate(node.children):
            child_path = path + (i,)
            self._node_starts[child_path] = self._offset
            if child.is_text:
                text = child.text or ""
                run = TextRun(self._offset, self._offset + len(text), child_path, path)
                self.runs.append(run)
                self._text_runs[child_path] = run
                self._emit(text)
                has_runs = True
        if not has_runs:
            self.runs.append(TextRun(self._offset, self._offset, path, path, is_anchor=True))

    # -- flat -> native -----------------------------------------------------

    def run_at(self, offset: int, bias: str = "right") -> TextRun:
        """Return the run that ``offset`` resolves to under the given bias."""
        if bias not in ("left", "right"):
            raise ValueError(f"bias must be 'left' or 'right', got {bias!r}")
        if offset < 0 or offset > len(self.text) or not self.runs:
            raise OutOfRange(offset, len(self.text))

        idx = bisect_right(self._starts, offset)
        touching = []
        j = idx - 1
        while j >= 0 and self.runs[j].end >= offset:
            touching.append(self.runs[j])
            j -= 1
        if touching:
            # collected back to front
            return touching[0] if bias == "right" else touching[-1]

        # strictly inside a separator
        if bias == "right" and idx < len(self.runs):
            return self.runs[idx]
        return self.runs[idx - 1]

    def to_native_position(self, offset: int, bias: str = "right") -> NativePosition:
        run = self.run_at(offset, bias)
        if run.is_anchor:
            return NativePosition(run.path, 0)
        local = min(max(offset - run.start, 0), run.length)
        return NativePosition(run.path, local)

    def runs_between(self, first: TextRun, last: TextRun) -> list[TextRun]:
        """Runs strictly after ``first`` and strictly before ``last``."""
        lo = self.runs.index(first)
        hi = self.runs.index(last)
        return self.runs[lo + 1 : hi]

    # -- native -> flat -----------------------------------------------------

    def to_flat_offset(self, position: NativePosition) -> int:
        path = tuple(position.path)
        start = self._node_starts.get(path)
        if start is None:
            raise InvalidPosition(f"Position {position} does not address text content")

        run = self._text_runs.get(path)
        if run is None:
            return start
        if position.offset < 0 or position.offset > run.length:
            raise InvalidPosition(
                f"Offset {position.offset} outside text node {path} of length {run.length}"
            )
        return start + position.offset
