"""Pipeline configuration: strategy enums and AnalysisConfig dataclass."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from src.config import Settings, settings


class OversizedLinePolicy(str, Enum):
    """How the chunker treats a single line longer than the chunk size."""

    KEEP = "keep"
    SPLIT = "split"


@dataclass(frozen=True)
class ModelProfile:
    """Model and output budget used for one analysis call."""

    model: str
    max_tokens: int


@dataclass(frozen=True)
class AnalysisConfig:
    """Immutable configuration for the transcript analysis pipeline.

    Defaults mirror the production behaviour: transcripts longer than
    15000 characters are split into 10000-character chunks that are
    analyzed one at a time with a one second pause between calls.
    """

    chunk_threshold: int = 15000
    chunk_size: int = 10000
    inter_call_delay_seconds: float = 1.0
    call_timeout_seconds: float | None = 120.0
    temperature: float = 0.3
    single_chunk_model: str = "claude-3-5-haiku-latest"
    multi_chunk_model: str = "claude-sonnet-4-20250514"
    single_chunk_max_tokens: int = 2000
    multi_chunk_max_tokens: int = 4000
    speaker_max_tokens: int = 8000
    attribute_speakers: bool = True
    apply_rubric: bool = True
    oversized_line_policy: OversizedLinePolicy = OversizedLinePolicy.KEEP

    @classmethod
    def from_settings(cls, source: Settings | None = None) -> AnalysisConfig:
        """Build a config from application settings (env / .env)."""
        s = source or settings
        return cls(
            chunk_threshold=s.chunk_threshold,
            chunk_size=s.chunk_size,
            inter_call_delay_seconds=s.inter_call_delay_seconds,
            call_timeout_seconds=s.llm_timeout_seconds,
            temperature=s.llm_temperature,
            single_chunk_model=s.single_chunk_model,
            multi_chunk_model=s.multi_chunk_model,
            single_chunk_max_tokens=s.single_chunk_max_tokens,
            multi_chunk_max_tokens=s.multi_chunk_max_tokens,
            speaker_max_tokens=s.speaker_max_tokens,
            attribute_speakers=s.attribute_speakers,
            apply_rubric=s.apply_rubric,
            oversized_line_policy=OversizedLinePolicy(s.oversized_line_policy),
        )

    def profile_for(self, total: int) -> ModelProfile:
        """Pick the model profile for an analysis split into *total* chunks.

        Multi-chunk runs use the larger model with a bigger output budget.
        """
        if total > 1:
            return ModelProfile(self.multi_chunk_model, self.multi_chunk_max_tokens)
        return ModelProfile(self.single_chunk_model, self.single_chunk_max_tokens)
