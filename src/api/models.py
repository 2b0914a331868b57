"""Pydantic request/response schemas for the Interview Analysis API."""

from __future__ import annotations

from pydantic import BaseModel


class AnalyzeRequest(BaseModel):
    """Request body for the /api/analyze endpoint."""

    transcript: str


class AttributeSpeakersRequest(BaseModel):
    """Request body for the /api/attribute-speakers endpoint."""

    transcript: str


class AttributeSpeakersResponse(BaseModel):
    """Labelled transcript (or the input, if labelling failed)."""

    transcript: str
