"""
FrameCoach - composition coaching against a reference photo.

Compares a live camera subject (pose keypoints from an external model) with
an analyzed reference photo and produces one stabilized directive per frame,
plus a "hold still" progress that reaches 1.0 when the shot is ready.
"""

from framecoach.config import Settings, configure_logging, get_settings
from framecoach.engine import EvaluationResult, EvaluationSession, build_reference
from framecoach.schemas import InferenceResult, ReferenceAnalysis

__version__ = "0.1.0"

__all__ = [
    "Settings",
    "configure_logging",
    "get_settings",
    "EvaluationResult",
    "EvaluationSession",
    "build_reference",
    "InferenceResult",
    "ReferenceAnalysis",
]
