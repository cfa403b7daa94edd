"""Build an immutable ReferenceData from a reference photo analysis."""

import logging
from typing import Optional, Sequence

from framecoach.cv.distance_estimator import estimate_distance
from framecoach.cv.lens_config import DeviceLensConfig
from framecoach.models.camera import BodyType
from framecoach.models.keypoints import Keypoint, KeypointIndex, confident_point, keypoints_from_arrays
from framecoach.models.reference import FocalLengthInfo, FocalLengthSource, ReferenceData
from framecoach.models.shot_type import ShotType, keypoint_bbox
from framecoach.schemas.inference import ReferenceAnalysis

logger = logging.getLogger(__name__)

FALLBACK_FOCAL_CONFIDENCE = 0.5  # Focal length resolved from the zoom factor only


def resolve_focal_length(
    analysis: ReferenceAnalysis,
    lens_config: DeviceLensConfig
) -> Optional[FocalLengthInfo]:
    """EXIF first, then the depth model estimate, then the zoom factor."""
    if analysis.exif_focal_length_35mm is not None:
        return FocalLengthInfo(analysis.exif_focal_length_35mm, FocalLengthSource.EXIF, 1.0)
    if analysis.depth_estimated_focal_length is not None:
        return FocalLengthInfo(
            analysis.depth_estimated_focal_length,
            FocalLengthSource.DEPTH_ESTIMATE,
            analysis.depth_focal_confidence,
        )
    if analysis.zoom_factor is not None:
        return FocalLengthInfo(
            lens_config.focal_length(analysis.zoom_factor),
            FocalLengthSource.FALLBACK,
            FALLBACK_FOCAL_CONFIDENCE,
        )
    return None


def shoulder_ratio(keypoints: Sequence[Keypoint], confidence_threshold: float = 0.3) -> Optional[float]:
    """Shoulder width as a fraction of the image width."""
    left = confident_point(keypoints, KeypointIndex.LEFT_SHOULDER, confidence_threshold)
    right = confident_point(keypoints, KeypointIndex.RIGHT_SHOULDER, confidence_threshold)
    if left is None or right is None:
        return None
    width = abs(left.x - right.x)
    return width if width > 0 else None


def build_reference(
    analysis: ReferenceAnalysis,
    lens_config: Optional[DeviceLensConfig] = None,
    body_type: BodyType = BodyType.MEDIUM,
    confidence_threshold: float = 0.3
) -> ReferenceData:
    """
    Turn a validated reference analysis into ReferenceData.

    Args:
        analysis: Keypoints, bbox, image size and focal length hints
        lens_config: Lens table used when only the zoom factor is known
        body_type: Assumed subject build for the distance estimate
        confidence_threshold: Minimum keypoint confidence

    Returns:
        ReferenceData; the shot type defaults to MEDIUM_SHOT when nobody
        can be classified
    """
    lens_config = lens_config or DeviceLensConfig()
    keypoints = tuple(keypoints_from_arrays(analysis.keypoints, analysis.confidences))
    bbox = analysis.bounding_box or keypoint_bbox(keypoints, confidence_threshold)

    shot_type = ShotType.classify(keypoints, bbox, confidence_threshold)
    if shot_type is None:
        logger.warning("No subject found in the reference, assuming a medium shot")
        shot_type = ShotType.MEDIUM_SHOT

    focal_length = resolve_focal_length(analysis, lens_config)
    ratio = shoulder_ratio(keypoints, confidence_threshold)

    distance = None
    if ratio is not None and focal_length is not None:
        distance = estimate_distance(
            ratio, 1.0, focal_length.focal_length_35mm, body_type.shoulder_width_m
        )

    reference = ReferenceData(
        bbox=bbox,
        image_size=(analysis.image_width, analysis.image_height),
        aspect_ratio=analysis.resolved_aspect_ratio,
        keypoints=keypoints,
        shot_type=shot_type,
        focal_length=focal_length,
        shoulder_ratio=ratio,
        estimated_distance=distance,
        compression_index=analysis.compression_index,
        zoom_factor=analysis.zoom_factor,
    )
    focal_text = (
        f"{focal_length.focal_length_35mm}mm ({focal_length.source.value})"
        if focal_length is not None else "unknown"
    )
    distance_text = f"{distance:.1f}m" if distance is not None else "unknown"
    logger.info(
        f"Reference built: {shot_type.display_name}, {reference.aspect_ratio.display_name}, "
        f"focal {focal_text}, distance {distance_text}"
    )
    return reference
