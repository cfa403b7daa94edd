"""
Evaluation engine.

COMPONENTS:
1. build_reference: ReferenceAnalysis -> immutable ReferenceData
2. SequentialGuide: one directive per frame, checked stage by stage
3. EvaluationSession: gates + guide + stabilizers for one reference/live pairing
"""

from framecoach.engine.reference_builder import build_reference, resolve_focal_length
from framecoach.engine.result import EvaluationResult
from framecoach.engine.sequential_guide import SequentialGuide
from framecoach.engine.session import EvaluationSession

__all__ = [
    "build_reference",
    "resolve_focal_length",
    "EvaluationResult",
    "SequentialGuide",
    "EvaluationSession",
]
