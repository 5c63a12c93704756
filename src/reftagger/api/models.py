"""Pydantic models for API."""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class HealthModel(BaseModel):
    """Health check response."""

    status: str
    version: str
    canons: List[str]


class TagRequest(BaseModel):
    """HTML to tag, with optional per-request overrides."""

    html: str = Field(..., description="HTML document or fragment")
    versions: Optional[List[str]] = Field(
        None, description="Translation priority list (overrides settings)"
    )
    exclude: Optional[List[str]] = Field(
        None, description="Extra selectors whose text is not tagged"
    )


class TagResponse(BaseModel):
    html: str = Field(..., description="Tagged HTML")
    tagged: int = Field(..., description="Number of annotations inserted")


class UntagRequest(BaseModel):
    html: str = Field(..., description="Previously tagged HTML")


class UntagResponse(BaseModel):
    html: str = Field(..., description="HTML with annotations removed")
    removed: int = Field(..., description="Number of annotations removed")


class CitationsRequest(BaseModel):
    text: str = Field(..., description="Plain text to scan")
    versions: Optional[List[str]] = Field(
        None, description="Translation priority list (overrides settings)"
    )


class CitationModel(BaseModel):
    """A located citation with its resolved version."""

    type: str = Field(..., description="Canon: quran or bible")
    book: Optional[str] = Field(None, description="Bible book slug")
    chapter: int
    verses: str = Field(..., description="Verse specification, e.g. '1-3,5'")
    text: str = Field(..., description="Matched text")
    order: int = Field(..., description="Offset of the match in the text")
    version: Optional[str] = Field(
        None, description="Resolved translation, null when none covers it"
    )
    permalink: str


class ExcerptRequest(BaseModel):
    """Citation fields as carried by an annotation."""

    type: str = Field(..., description="Canon: quran or bible")
    book: Optional[str] = None
    chapter: int
    verses: str = Field(..., description="Verse specification, e.g. '1-3,5'")
    version: Optional[str] = Field(
        None, description="Resolved translation from the annotation"
    )
    text: str = ""


class PreviewModel(BaseModel):
    """Settled verse preview."""

    reference: str
    permalink: str
    state: str = Field(..., description="ready, not_found or failed")
    html: Optional[str] = Field(None, description="Rendered excerpt")
    message: Optional[str] = None
    version: Optional[str] = None
    canon_name: Optional[str] = None
    chapter_name: Optional[str] = None
    direction: Optional[str] = None
    language: Optional[str] = None
    theme: str = ""
    share: Dict[str, str] = Field(default_factory=dict)
