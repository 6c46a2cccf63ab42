# note_scout/crawler/models.py
"""
Data models for the NoteScout crawler.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator


class Page(BaseModel):
    """One team document. ``content`` stays None until a download succeeds."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    title: str = ""
    lastchange_at: str = Field(alias="lastchangeAt")
    content: Optional[str] = None

    @field_validator("title", mode="before")
    def _null_title(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("lastchange_at", mode="before")
    def _timestamp_as_str(cls, v: Any) -> Any:
        # the overview API sends epoch millis as a number
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(int(v)) if float(v).is_integer() else str(v)
        return v

    def to_record(self) -> Dict[str, Any]:
        """Snapshot/index representation with the wire field names."""
        return self.model_dump(by_alias=True)


PageCollection = List[Page]

PAGE_LIST: TypeAdapter[List[Page]] = TypeAdapter(List[Page])


def index_by_id(pages: PageCollection) -> Dict[str, Page]:
    """Map id → page; on duplicate ids the later entry wins."""
    return {page.id: page for page in pages}


__all__ = ["Page", "PageCollection", "PAGE_LIST", "index_by_id"]
