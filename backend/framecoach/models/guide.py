"""Sequential guide directives."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from framecoach.directives import format_zoom


class GuideType(Enum):
    """One user-facing directive."""
    IDLE = "idle"  # No reference set
    ENTER_FRAME = "enter_frame"  # Nobody in frame
    MOVE_FORWARD = "move_forward"  # Subject too small
    MOVE_BACKWARD = "move_backward"  # Subject too large
    MOVE_LEFT = "move_left"
    MOVE_RIGHT = "move_right"
    TILT_UP = "tilt_up"
    TILT_DOWN = "tilt_down"
    ZOOM_IN = "zoom_in"
    ZOOM_OUT = "zoom_out"
    ADJUST_POSE = "adjust_pose"
    PERFECT = "perfect"


class FeedbackStage(Enum):
    """Stage of the one-thing-at-a-time flow a directive belongs to."""
    IDLE = "idle"
    FRAME_ENTRY = "frame_entry"
    SHOT_TYPE = "shot_type"
    POSITION = "position"
    ZOOM = "zoom"
    POSE = "pose"
    PERFECT = "perfect"

    @property
    def display_name(self) -> str:
        return self.value.replace("_", " ")


@dataclass(frozen=True)
class SimpleGuideResult:
    """Single directive produced by the sequential guide."""
    guide: GuideType
    magnitude: str  # "a little", "half a step", ...
    progress: float  # Overall progress 0.0 - 1.0
    debug_info: str
    shot_type_match: bool
    current_shot_type: str
    target_shot_type: str
    feedback_stage: FeedbackStage
    tilt_angle: Optional[int] = None
    position_percent: Optional[int] = None
    current_zoom: Optional[float] = None
    target_zoom: Optional[float] = None

    @property
    def is_perfect(self) -> bool:
        return self.guide == GuideType.PERFECT

    @property
    def display_message(self) -> str:
        guide = self.guide
        if guide == GuideType.IDLE:
            return "Set a reference photo"
        if guide == GuideType.ENTER_FRAME:
            return "Step into the frame"
        if guide == GuideType.MOVE_FORWARD:
            return f"Move forward {self.magnitude}".strip()
        if guide == GuideType.MOVE_BACKWARD:
            return f"Move back {self.magnitude}".strip()
        if guide in (GuideType.MOVE_LEFT, GuideType.MOVE_RIGHT):
            side = "left" if guide == GuideType.MOVE_LEFT else "right"
            return f"Move camera {side} {self.magnitude}".strip()
        if guide in (GuideType.TILT_UP, GuideType.TILT_DOWN):
            side = "up" if guide == GuideType.TILT_UP else "down"
            if self.tilt_angle is not None:
                return f"Tilt camera {side} {self.tilt_angle}°"
            return f"Tilt camera {side}"
        if guide in (GuideType.ZOOM_IN, GuideType.ZOOM_OUT):
            action = "Zoom in" if guide == GuideType.ZOOM_IN else "Zoom out"
            if self.current_zoom is not None and self.target_zoom is not None:
                return f"{action} ({format_zoom(self.current_zoom)} → {format_zoom(self.target_zoom)})"
            return action
        if guide == GuideType.ADJUST_POSE:
            return "Adjust your pose"
        return "Perfect composition! Hold still"
