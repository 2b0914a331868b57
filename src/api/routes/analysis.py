"""Analysis endpoints: full transcript analysis and speaker attribution."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException

from src.analysis.models import AggregateResult
from src.analysis.pipeline import analyze_transcript
from src.analysis.speakers import attribute_speakers
from src.api.models import AnalyzeRequest, AttributeSpeakersRequest, AttributeSpeakersResponse
from src.llm.client import LLMClient, get_llm_client
from src.pipeline_config import AnalysisConfig

router = APIRouter()


def get_analysis_config() -> AnalysisConfig:
    return AnalysisConfig.from_settings()


@router.post("/api/analyze", response_model=AggregateResult)
def analyze(
    body: AnalyzeRequest,
    client: Annotated[LLMClient, Depends(get_llm_client)],
    config: Annotated[AnalysisConfig, Depends(get_analysis_config)],
) -> AggregateResult:
    """Analyze an interview transcript of any length.

    Upstream LLM failures never fail the request; they only leave sections
    of the result empty.
    """
    if not body.transcript.strip():
        raise HTTPException(status_code=400, detail="Transcript is empty")
    return analyze_transcript(body.transcript, client, config)


@router.post("/api/attribute-speakers", response_model=AttributeSpeakersResponse)
def label_speakers(
    body: AttributeSpeakersRequest,
    client: Annotated[LLMClient, Depends(get_llm_client)],
    config: Annotated[AnalysisConfig, Depends(get_analysis_config)],
) -> AttributeSpeakersResponse:
    """Label each transcript line as interviewer or candidate."""
    if not body.transcript.strip():
        raise HTTPException(status_code=400, detail="Transcript is empty")
    return AttributeSpeakersResponse(transcript=attribute_speakers(body.transcript, client, config))
