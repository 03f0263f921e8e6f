"""Document tree and offset index."""

from paperwise.document.model import DocNode, RichDocument
from paperwise.document.offset_index import OffsetIndex, TextRun
from paperwise.models.position import NativePosition

__all__ = ["DocNode", "NativePosition", "OffsetIndex", "RichDocument", "TextRun"]
