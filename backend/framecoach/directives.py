"""
Shared directive vocabulary.

Every user-facing instruction uses the same step phrases and the same camera
move convention, whether it comes from a gate or from the sequential guide:

- Horizontal: the camera moves toward the side the subject is offset to
  (mirrored for the front camera, whose preview is flipped)
- Vertical: a subject sitting lower than in the reference means tilt down
- Step magnitudes: "a little" < "half a step" < "one step" < "two steps"
"""

A_LITTLE = "a little"
HALF_STEP = "half a step"
ONE_STEP = "one step"
TWO_STEPS = "two steps"

MAX_TILT_DEGREES = 15


def step_phrase_for_level_distance(levels: int) -> str:
    """Step phrase for a shot-type level difference."""
    levels = abs(levels)
    if levels <= 1:
        return A_LITTLE
    if levels == 2:
        return HALF_STEP
    if levels <= 4:
        return ONE_STEP
    return TWO_STEPS


def step_phrase_for_size(diff: float) -> str:
    """Step phrase for a relative person-height difference."""
    if diff < 0.15:
        return A_LITTLE
    if diff < 0.30:
        return HALF_STEP
    if diff < 0.50:
        return ONE_STEP
    return TWO_STEPS


def step_phrase_for_offset(diff: float) -> str:
    """Step phrase for a normalized horizontal offset."""
    if diff < 0.10:
        return A_LITTLE
    if diff < 0.20:
        return HALF_STEP
    return ONE_STEP


def tilt_angle(percent: float) -> int:
    """Camera tilt in degrees for a vertical offset given in percent."""
    if percent < 5:
        return 2
    if percent < 10:
        return 5
    if percent < 15:
        return 8
    if percent < 20:
        return 10
    return min(MAX_TILT_DEGREES, int(percent * 0.5))


def horizontal_direction(offset_x: float, camera_is_front: bool) -> str:
    """'right' or 'left' camera move for a live-minus-reference X offset."""
    if camera_is_front:
        offset_x = -offset_x
    return "right" if offset_x > 0 else "left"


def vertical_direction(offset_y: float) -> str:
    """'down' or 'up' tilt for a live-minus-reference Y offset."""
    return "down" if offset_y > 0 else "up"


def format_zoom(zoom: float) -> str:
    return f"{zoom:.1f}x"
