"""
Pinhole-model subject distance estimation.

    distance_m = real_width_m * focal_mm / width_on_sensor_mm
    width_on_sensor_mm = (shoulder_px / image_px) * SENSOR_REFERENCE_WIDTH_MM

The sensor constant approximates the horizontal width of a 35mm-equivalent
frame, so focal lengths must be 35mm-equivalent too.
"""

import logging
from typing import Optional

logger = logging.getLogger(__name__)

SENSOR_REFERENCE_WIDTH_MM = 34.6
MIN_SHOULDER_RATIO = 0.01  # Shoulders narrower than 1% of the frame are noise
MIN_DISTANCE_M = 0.3
MAX_DISTANCE_M = 30.0
DEFAULT_SHOULDER_WIDTH_M = 0.40


def estimate_distance(
    shoulder_pixel_width: float,
    image_width: float,
    focal_length_mm: float,
    real_shoulder_width_m: float = DEFAULT_SHOULDER_WIDTH_M
) -> Optional[float]:
    """
    Estimate camera-to-subject distance.

    Args:
        shoulder_pixel_width: Shoulder width in pixels (or normalized, if
            image_width is 1.0)
        image_width: Image width in the same unit
        focal_length_mm: 35mm-equivalent focal length
        real_shoulder_width_m: Assumed physical shoulder width

    Returns:
        Distance in meters, or None for degenerate input or an implausible
        result outside (0.3, 30) m.
    """
    if (
        shoulder_pixel_width <= 0
        or image_width <= 0
        or focal_length_mm <= 0
        or real_shoulder_width_m <= 0
    ):
        return None

    ratio = shoulder_pixel_width / image_width
    if ratio <= MIN_SHOULDER_RATIO:
        return None

    width_on_sensor_mm = ratio * SENSOR_REFERENCE_WIDTH_MM
    distance = real_shoulder_width_m * focal_length_mm / width_on_sensor_mm

    if not (MIN_DISTANCE_M < distance < MAX_DISTANCE_M):
        logger.debug(f"Distance {distance:.2f}m outside plausible range, dropped")
        return None
    return distance


def shoulder_ratio_for_distance(
    distance_m: float,
    focal_length_mm: float,
    real_shoulder_width_m: float = DEFAULT_SHOULDER_WIDTH_M
) -> Optional[float]:
    """Inverse model: shoulder/image width ratio expected at `distance_m`."""
    if distance_m <= 0 or focal_length_mm <= 0 or real_shoulder_width_m <= 0:
        return None
    return real_shoulder_width_m * focal_length_mm / (distance_m * SENSOR_REFERENCE_WIDTH_MM)
