"""Pydantic schemas for payloads coming from the inference collaborators."""

from framecoach.schemas.inference import (
    InferenceResult,
    ReferenceAnalysis,
)

__all__ = [
    "InferenceResult",
    "ReferenceAnalysis",
]
