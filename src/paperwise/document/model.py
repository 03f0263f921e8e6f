"""Host-side rich-text document tree.

The tree is small: every node has a ``type``, text nodes carry
``text``, and everything else carries ``children``.  It can be built from
plain text, from ProseMirror/TipTap JSON, or from a ``.docx`` file, which
covers the shapes an editor surface hands us.

Only :class:`~paperwise.document.offset_index.OffsetIndex` walks this tree;
the engine itself speaks flat offsets.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import IO, Any

from paperwise.errors import InvalidPosition, OutOfRange
from paperwise.models.edit import AppliedEdit, Edit

logger = logging.getLogger(__name__)

TEXT = "text"

# Blocks that hold inline content even when empty.
TEXT_BLOCK_TYPES = frozenset({"paragraph", "heading", "code_block", "codeBlock"})


@dataclass
class DocNode:
    type: str
    text: str | None = None
    children: list[DocNode] = field(default_factory=list)
    attrs: dict[str, Any] = field(default_factory=dict)

    @property
    def is_text(self) -> bool:
        return self.type == TEXT

    @property
    def is_textblock(self) -> bool:
        return self.type in TEXT_BLOCK_TYPES or any(c.is_text for c in self.children)

    def text_content(self) -> str:
        if self.is_text:
            return self.text or ""
        return "".join(c.text_content() for c in self.children)


class RichDocument:
    """A mutable document with a cached offset index."""

    def __init__(self, root: DocNode | None = None, block_separator: str = "\n"):
        self.root = root if root is not None else DocNode("doc")
        self.block_separator = block_separator
        self.version = 0
        self._index = None

    # -- construction -------------------------------------------------------

    @classmethod
    def from_text(cls, text: str, block_separator: str = "\n") -> RichDocument:
        """One paragraph per line; blank lines become empty paragraphs."""
        lines = text.split(block_separator) if block_separator else [text]
        root = DocNode("doc", children=[_paragraph(line) for line in lines])
        return cls(root, block_separator=block_separator)

    @classmethod
    def from_prosemirror(cls, data: dict, block_separator: str = "\n") -> RichDocument:
        """Build from ProseMirror / TipTap ``editor.getJSON()`` output."""
        if data.get("type") != "doc":
            raise ValueError(f"Expected a 'doc' node, got {data.get('type')!r}")
        return cls(_node_from_json(data), block_separator=block_separator)

    @classmethod
    def from_docx(cls, source: str | Path | IO[bytes], block_separator: str = "\n") -> RichDocument:
        """Load body paragraphs and tables (in order) from a Word document."""
        from docx import Document

        if isinstance(source, Path):
            source = str(source)
        doc = Document(source)
        root = DocNode("doc", children=[_docx_block(item) for item in _iter_docx_blocks(doc)])
        logger.debug("Loaded docx with %d top-level blocks", len(root.children))
        return cls(root, block_separator=block_separator)

    def to_prosemirror(self) -> dict:
        return _node_to_json(self.root)

    # -- access -------------------------------------------------------------

    def index(self):
        """Return the offset index for the current content, rebuilding it after edits."""
        from paperwise.document.offset_index import OffsetIndex

        if self._index is None or self._index.version != self.version:
            self._index = OffsetIndex(self.root, self.block_separator, version=self.version)
        return self._index

    @property
    def text(self) -> str:
        return self.index().text

    def __len__(self) -> int:
        return len(self.text)

    def node_at(self, path: tuple[int, ...]) -> DocNode:
        node = self.root
        for i in path:
            if i < 0 or i >= len(node.children):
                raise InvalidPosition(f"No node at path {path}")
            node = node.children[i]
        return node

    # -- mutation -----------------------------------------------------------

    def replace(self, start: int, end: int, text: str) -> Edit:
        """Replace flat offsets [start, end) with ``text`` inside a single text block.

        Edits crossing a block boundary would have to join blocks, which is a
        structural change; they raise ``ValueError``.
        """
        index = self.index()
        if start < 0 or end > len(index.text):
            raise OutOfRange(start if start < 0 else end, len(index.text))
        if end < start:
            raise ValueError(f"end ({end}) must not precede start ({start})")

        first = index.run_at(start, bias="right")
        last = index.run_at(end, bias="left") if end > start else first
        if first.block_path != last.block_path:
            raise ValueError(f"Edit [{start}, {end}) spans more than one text block")
        if start < first.start or end > last.end:
            raise ValueError(f"Edit [{start}, {end}) starts or ends inside a block separator")

        block = self.node_at(first.block_path)
        if first.is_anchor:
            if text:
                block.children.append(DocNode(TEXT, text=text))
        elif first.path == last.path:
            node = self.node_at(first.path)
            old = node.text or ""
            node.text = old[: start - first.start] + text + old[end - first.start :]
        else:
            head = self.node_at(first.path)
            head.text = (head.text or "")[: start - first.start] + text
            for run in index.runs_between(first, last):
                self.node_at(run.path).text = ""
            tail = self.node_at(last.path)
            tail.text = (tail.text or "")[end - last.start :]

        block.children = [c for c in block.children if not (c.is_text and not c.text)]
        self.version += 1
        return Edit.replacing(start, end, text)

    def apply(self, edit: AppliedEdit) -> Edit:
        """Perform the text surgery for an edit produced by accepting a suggestion."""
        return self.replace(edit.start, edit.end, edit.text)


def _paragraph(line: str) -> DocNode:
    return DocNode("paragraph", children=[DocNode(TEXT, text=line)] if line else [])


def _node_from_json(data: dict) -> DocNode:
    node_type = data.get("type")
    if not isinstance(node_type, str):
        raise ValueError(f"Node without a type: {data!r}")
    if node_type == TEXT:
        marks = data.get("marks")
        return DocNode(TEXT, text=data.get("text", ""), attrs={"marks": list(marks)} if marks else {})
    return DocNode(
        node_type,
        children=[_node_from_json(c) for c in data.get("content", [])],
        attrs=dict(data.get("attrs") or {}),
    )


def _node_to_json(node: DocNode) -> dict:
    if node.is_text:
        text_json = {"type": TEXT, "text": node.text or ""}
        if node.attrs.get("marks"):
            text_json["marks"] = list(node.attrs["marks"])
        return text_json
    out: dict[str, Any] = {"type": node.type}
    if node.attrs:
        out["attrs"] = dict(node.attrs)
    if node.children:
        out["content"] = [_node_to_json(c) for c in node.children]
    return out


def _docx_block(item) -> DocNode:
    from docx.text.paragraph import Paragraph

    if isinstance(item, Paragraph):
        style_name = (item.style.name if item.style is not None else "") or ""
        node_type = "heading" if style_name.startswith(("Heading", "Title")) else "paragraph"
        runs = [DocNode(TEXT, text=part.text) for part in item.iter_inner_content() if part.text]
        return DocNode(node_type, children=runs, attrs={"style": style_name} if style_name else {})

    table = DocNode("table")
    for row in item.rows:
        row_node = DocNode("table_row")
        seen = set()
        for cell in row.cells:
            # merged cells repeat the same <w:tc>
            if id(cell._tc) in seen:
                continue
            seen.add(id(cell._tc))
            row_node.children.append(
                DocNode("table_cell", children=[_docx_block(c) for c in _iter_docx_blocks(cell)])
            )
        table.children.append(row_node)
    return table


def _iter_docx_blocks(parent):
    """Yield the paragraphs and tables of a document body or table cell in XML order."""
    from docx.document import Document as DocumentObject
    from docx.oxml.ns import qn
    from docx.table import Table
    from docx.text.paragraph import Paragraph

    parent_elm = parent.element.body if isinstance(parent, DocumentObject) else parent._tc
    for child in parent_elm.iterchildren():
        if child.tag == qn("w:p"):
            yield Paragraph(child, parent)
        elif child.tag == qn("w:tbl"):
            yield Table(child, parent)
