"""Application configuration."""

import logging
from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Coaching settings loaded from environment variables (FRAMECOACH_*)."""

    model_config = SettingsConfigDict(
        env_prefix="FRAMECOACH_",
        env_file=".env",
        extra="ignore",
    )

    # Application
    app_name: str = "FrameCoach"
    debug: bool = False

    # Device / subject
    device_identifier: str = "generic"  # Model identifier, e.g. "iPhone16,1"
    body_type: str = "medium"  # "small", "medium" or "large"

    # Keypoints
    keypoint_confidence_threshold: float = 0.3
    shoulder_smoothing_alpha: float = 0.3  # EMA alpha for shoulder keypoints

    # Shot-type / guide hysteresis
    shot_type_stability_frames: int = 3  # Raw shot type must repeat 3 times
    guide_stability_repeats: int = 2
    guide_force_change_seconds: float = 1.0

    # Guidance debouncer (lens/distance feedback)
    debounce_min_interval_seconds: float = 0.5
    debounce_distance_change_ratio: float = 0.25  # 25% relative change
    debounce_focal_change_mm: float = 5.0
    debounce_refresh_repeats: int = 5
    debounce_refresh_seconds: float = 2.0

    # Temporal lock
    lock_duration_seconds: float = 0.5

    # Adaptive difficulty
    difficulty_stuck_seconds: float = 5.0
    difficulty_relaxed_multiplier: float = 1.2
    difficulty_min_threshold: float = 0.5

    # Active feedback display
    feedback_min_display_seconds: float = 2.0
    feedback_resolved_display_seconds: float = 1.5

    # Sequential guide tolerances
    guide_size_tolerance: float = 0.20  # 20% person height difference
    guide_position_tolerance_x: float = 0.08
    guide_position_tolerance_y: float = 0.08
    guide_zoom_tolerance: float = 0.15
    guide_pose_threshold: float = 0.70
    guide_min_person_height: float = 0.05

    # Optional log level override ("DEBUG", "INFO", ...)
    log_level: Optional[str] = None


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def configure_logging(settings: Optional[Settings] = None) -> None:
    """Configure root logging the same way for every entry point."""
    settings = settings or get_settings()
    if settings.log_level:
        level = getattr(logging, settings.log_level.upper(), logging.INFO)
    else:
        level = logging.DEBUG if settings.debug else logging.INFO

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
