"""Synthetic keypoints, payloads and gate contexts for the tests."""

from typing import Dict, List, Optional, Tuple

from framecoach.gates.base import GateContext, GateSettings
from framecoach.models.keypoints import Keypoint
from framecoach.models.live import LiveMetrics, PoseComparison
from framecoach.models.reference import UNSET, Baseline
from framecoach.schemas.inference import ReferenceAnalysis

PORTRAIT = (1080.0, 1920.0)  # 16:9 portrait
LANDSCAPE_4_3 = (1440.0, 1080.0)

# Standing subject, centered, feet visible (COCO body order)
FULL_BODY: Dict[int, Tuple[float, float]] = {
    0: (0.50, 0.15),   # nose
    1: (0.48, 0.13),   # eyes
    2: (0.52, 0.13),
    3: (0.46, 0.14),   # ears
    4: (0.54, 0.14),
    5: (0.42, 0.25),   # shoulders (width 0.16)
    6: (0.58, 0.25),
    7: (0.40, 0.40),   # elbows
    8: (0.60, 0.40),
    9: (0.39, 0.52),   # wrists
    10: (0.61, 0.52),
    11: (0.45, 0.55),  # hips
    12: (0.55, 0.55),
    13: (0.45, 0.72),  # knees
    14: (0.55, 0.72),
    15: (0.45, 0.88),  # ankles
    16: (0.55, 0.88),
}

BUST_VISIBLE = range(0, 7)  # Head and shoulders only

# Elbows and wrists raised and spread above the head
ARMS_UP: Dict[int, Tuple[float, float]] = {
    7: (0.33, 0.12),
    8: (0.67, 0.12),
    9: (0.30, 0.02),
    10: (0.70, 0.02),
}


def body_keypoints(
    dx: float = 0.0,
    dy: float = 0.0,
    visible=range(0, 17),
    confidence: float = 0.9
) -> Tuple[Keypoint, ...]:
    """17 keypoints of FULL_BODY shifted by (dx, dy); hidden points get confidence 0."""
    return tuple(
        Keypoint(x=x + dx, y=y + dy, confidence=confidence if i in visible else 0.0)
        for i, (x, y) in sorted(FULL_BODY.items())
    )


def arms_up_keypoints(confidence: float = 0.9) -> Tuple[Keypoint, ...]:
    """FULL_BODY with ARMS_UP applied; head, torso and legs stay put."""
    points = {**FULL_BODY, **ARMS_UP}
    return tuple(Keypoint(x=x, y=y, confidence=confidence) for _, (x, y) in sorted(points.items()))


def keypoints_payload(keypoints) -> Tuple[List[List[float]], List[float]]:
    return [[kp.x, kp.y] for kp in keypoints], [kp.confidence for kp in keypoints]


def live_metrics(
    keypoints=None,
    image_size=PORTRAIT,
    camera_is_front: bool = False,
    accuracy: Optional[float] = 0.95,
    bbox=None
) -> LiveMetrics:
    comparison = PoseComparison(overall_accuracy=accuracy) if accuracy is not None else None
    return LiveMetrics(
        keypoints=body_keypoints() if keypoints is None else tuple(keypoints),
        image_size=image_size,
        bbox=bbox,
        camera_is_front=camera_is_front,
        pose_comparison=comparison,
    )


def reference_analysis(
    keypoints=None,
    image_size=PORTRAIT,
    exif_focal_length_35mm: Optional[int] = 24,
    **kwargs
) -> ReferenceAnalysis:
    points, confidences = keypoints_payload(body_keypoints() if keypoints is None else keypoints)
    return ReferenceAnalysis(
        keypoints=points,
        confidences=confidences,
        image_width=image_size[0],
        image_height=image_size[1],
        exif_focal_length_35mm=exif_focal_length_35mm,
        **kwargs,
    )


def context_for(live: LiveMetrics, reference=None, timestamp: float = 0.0, **settings) -> GateContext:
    state = Baseline(reference) if reference is not None else UNSET
    return GateContext(
        live=live,
        reference_state=state,
        settings=GateSettings(**settings),
        timestamp=timestamp,
    )
