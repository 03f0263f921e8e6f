"""Pydantic model for rendered suggestion highlights."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from paperwise.models.position import NativePosition
from paperwise.models.suggestion import Category


class Highlight(BaseModel):
    """A disposable inline decoration over the live document."""

    suggestion_id: str
    category: Category
    start: NativePosition
    end: NativePosition
    flat_start: int
    flat_end: int
    css_class: str

    model_config = ConfigDict(frozen=True)

    def covers(self, offset: int) -> bool:
        return self.flat_start <= offset < self.flat_end
