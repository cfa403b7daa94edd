"""
Composition gates.

GATES (priority order):
0. AspectRatioGate: camera ratio must match the reference (binary)
1. FramingGate: shot type and subject size, with 3-frame hysteresis
2. PositionGate: keypoint alignment, rule-of-thirds fallback
3. LensDistanceGate: focal length and pinhole distance estimate
4. PoseGate: body-part angle comparison

User-facing feedback is ordered aspect -> framing -> position -> pose ->
lens/distance (see models.gate.FEEDBACK_PRIORITY).
"""

from framecoach.gates.base import Gate, GateContext, GateSettings, PureGate, StatefulGate
from framecoach.gates.aspect_ratio import AspectRatioGate
from framecoach.gates.framing import FramingGate
from framecoach.gates.position import PositionGate
from framecoach.gates.lens_distance import LensDistanceGate, LensDistanceState
from framecoach.gates.pose import PoseGate
from framecoach.gates.orchestrator import GateOrchestrator, create_default_gates

__all__ = [
    "Gate",
    "GateContext",
    "GateSettings",
    "PureGate",
    "StatefulGate",
    "AspectRatioGate",
    "FramingGate",
    "PositionGate",
    "LensDistanceGate",
    "LensDistanceState",
    "PoseGate",
    "GateOrchestrator",
    "create_default_gates",
]
