"""API route definitions."""

from __future__ import annotations

import copy
from typing import List

from bs4 import BeautifulSoup
from fastapi import APIRouter, Depends, HTTPException

# Keep typing imports in namespace for Pydantic annotation evaluation
__typing_imports__ = (List,)

from reftagger.api.models import (
    CitationModel,
    CitationsRequest,
    ExcerptRequest,
    HealthModel,
    PreviewModel,
    TagRequest,
    TagResponse,
    UntagRequest,
    UntagResponse,
)
from reftagger.canons.base import Citation
from reftagger.canons.verses import VerseSpecError
from reftagger.config import Settings
from reftagger.engine.fetch import GraphQLClient
from reftagger.engine.preview import PreviewController
from reftagger.tagging.annotator import PARSER, Reftagger

router = APIRouter()
settings = Settings()


def get_settings() -> Settings:
    # Copy so per-request overrides never leak into the shared settings
    return copy.deepcopy(settings)


def get_client(current: Settings = Depends(get_settings)) -> GraphQLClient:
    return GraphQLClient(current.endpoint, timeout=current.fetch_timeout)


@router.get("/health", response_model=HealthModel)
async def health_check():
    """Health check endpoint."""
    return HealthModel(status="ok", version="0.1.0", canons=["quran", "bible"])


@router.post("/tag", response_model=TagResponse)
async def tag_html(request: TagRequest, current: Settings = Depends(get_settings)):
    """Tag every citation in an HTML document."""
    if request.versions is not None:
        current.versions = request.versions
    if request.exclude:
        current.exclude = current.exclude + request.exclude

    tagger = Reftagger(current)
    document = BeautifulSoup(request.html, PARSER)
    tagged = tagger.tag(document)

    return TagResponse(html=str(document), tagged=tagged)


@router.post("/untag", response_model=UntagResponse)
async def untag_html(request: UntagRequest, current: Settings = Depends(get_settings)):
    """Remove annotations from previously tagged HTML."""
    tagger = Reftagger(current)
    document = BeautifulSoup(request.html, PARSER)
    removed = tagger.destroy(document)
    return UntagResponse(html=str(document), removed=removed)


@router.post("/citations", response_model=List[CitationModel])
async def list_citations(
    request: CitationsRequest, current: Settings = Depends(get_settings)
):
    """Find and resolve the citations in a block of text."""
    if request.versions is not None:
        current.versions = request.versions

    tagger = Reftagger(current)
    citations = sorted(tagger.find_citations(request.text), key=lambda c: c.order)

    return [
        CitationModel(
            type=c.type,
            book=c.book,
            chapter=c.chapter,
            verses=c.verse_spec,
            text=c.text,
            order=c.order,
            version=c.version,
            permalink=tagger.source(c.type).permalink(c),
        )
        for c in citations
    ]


@router.post("/excerpt", response_model=PreviewModel)
async def excerpt(
    request: ExcerptRequest,
    current: Settings = Depends(get_settings),
    client: GraphQLClient = Depends(get_client),
):
    """Fetch and render the excerpt for an annotated citation.

    The version is taken as given (the resolution made when the citation
    was tagged); a null version is sent as-is.
    """
    attrs = {
        "data-type": request.type,
        "data-chapter": str(request.chapter),
        "data-verses": request.verses,
        "data-text": request.text,
    }
    if request.book:
        attrs["data-book"] = request.book
    if request.version:
        attrs["data-version"] = request.version

    tagger = Reftagger(current)
    if request.type not in tagger.sources:
        raise HTTPException(status_code=400, detail=f"Unknown canon: {request.type}")

    try:
        citation = Citation.from_attributes(attrs)
    except VerseSpecError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if citation.type == "bible" and not citation.book:
        raise HTTPException(status_code=400, detail="Bible citations need a book")
    if not citation.text:
        label = citation.book or citation.type
        citation.text = f"{label} {citation.chapter}:{citation.verse_spec}"

    controller = PreviewController(tagger.sources, client, current)
    preview = await controller.open(citation)

    payload = preview.to_dict()
    payload.pop("token")
    return PreviewModel(**payload)
