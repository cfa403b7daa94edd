"""
Device lens configuration: display zoom <-> 35mm-equivalent focal length.

Each phone model has a few physical lenses (e.g. 0.5x, 1x, 2x, 3x). A zoom
between two lenses is digital zoom on the nearest lower physical lens, so
its focal length is that lens's focal length scaled by the zoom ratio.

This is the only place zoom factors are converted to focal lengths; the
lens/distance gate and the sequential guide both go through it.
"""

import logging
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)

# Model identifier -> {display zoom: 35mm-equivalent focal length (mm)}
LENS_TABLES: Dict[str, Dict[float, int]] = {
    # iPhone 16 series
    "iPhone17,1": {0.5: 13, 1.0: 24, 2.0: 48, 5.0: 120},  # 16 Pro
    "iPhone17,2": {0.5: 13, 1.0: 24, 2.0: 48, 5.0: 120},  # 16 Pro Max
    "iPhone17,3": {0.5: 13, 1.0: 26, 2.0: 52},  # 16
    "iPhone17,4": {0.5: 13, 1.0: 26, 2.0: 52},  # 16 Plus

    # iPhone 15 series
    "iPhone16,1": {0.5: 13, 1.0: 24, 2.0: 48, 3.0: 77},  # 15 Pro
    "iPhone16,2": {0.5: 13, 1.0: 24, 2.0: 48, 5.0: 120},  # 15 Pro Max
    "iPhone15,4": {0.5: 13, 1.0: 26, 2.0: 52},  # 15
    "iPhone15,5": {0.5: 13, 1.0: 26, 2.0: 52},  # 15 Plus

    # iPhone 14 series
    "iPhone15,2": {0.5: 13, 1.0: 24, 2.0: 48, 3.0: 77},  # 14 Pro
    "iPhone15,3": {0.5: 13, 1.0: 24, 2.0: 48, 3.0: 77},  # 14 Pro Max
    "iPhone14,7": {0.5: 13, 1.0: 26},  # 14
    "iPhone14,8": {0.5: 13, 1.0: 26},  # 14 Plus

    # iPhone 13 series
    "iPhone14,2": {0.5: 13, 1.0: 26, 3.0: 77},  # 13 Pro
    "iPhone14,3": {0.5: 13, 1.0: 26, 3.0: 77},  # 13 Pro Max
    "iPhone14,5": {0.5: 13, 1.0: 26},  # 13
    "iPhone14,4": {0.5: 13, 1.0: 26},  # 13 mini

    # iPhone 12 series
    "iPhone13,3": {0.5: 13, 1.0: 26, 2.5: 65},  # 12 Pro
    "iPhone13,4": {0.5: 13, 1.0: 26, 2.5: 65},  # 12 Pro Max
    "iPhone13,2": {0.5: 13, 1.0: 26},  # 12
    "iPhone13,1": {0.5: 13, 1.0: 26},  # 12 mini

    # iPhone 11 series
    "iPhone12,3": {0.5: 13, 1.0: 26, 2.0: 52},  # 11 Pro
    "iPhone12,5": {0.5: 13, 1.0: 26, 2.0: 52},  # 11 Pro Max
    "iPhone12,1": {0.5: 13, 1.0: 26},  # 11

    # iPhone SE
    "iPhone14,6": {1.0: 26},  # SE 3rd gen
    "iPhone12,8": {1.0: 28},  # SE 2nd gen
}

DEFAULT_LENS_TABLE: Dict[float, int] = {0.5: 13, 1.0: 24, 2.0: 48}

# Anchor used when the zoom is below every physical lens
BASE_ZOOM = 1.0
BASE_FOCAL_MM = 24


class DeviceLensConfig:
    """Focal-length resolver for one device model."""

    def __init__(
        self,
        device_identifier: str = "generic",
        table: Optional[Dict[float, int]] = None
    ):
        """
        Args:
            device_identifier: Model identifier used to look up the lens table
            table: Explicit lens table, overrides the lookup
        """
        self.device_identifier = device_identifier
        if table is not None:
            self.table = dict(table)
        elif device_identifier in LENS_TABLES:
            self.table = dict(LENS_TABLES[device_identifier])
        else:
            logger.info(f"No lens table for {device_identifier!r}, using default")
            self.table = dict(DEFAULT_LENS_TABLE)

        if not self.table:
            raise ValueError("Lens table must contain at least one lens")

    @property
    def available_physical_zooms(self) -> List[float]:
        return sorted(self.table)

    def is_physical_lens(self, zoom: float) -> bool:
        return zoom in self.table

    def focal_length(self, zoom: float) -> int:
        """35mm-equivalent focal length (mm) for a display zoom factor."""
        exact = self.table.get(zoom)
        if exact is not None:
            return exact

        base_zoom, base_mm = BASE_ZOOM, self.table.get(BASE_ZOOM, BASE_FOCAL_MM)
        for lens_zoom in self.available_physical_zooms:
            if lens_zoom <= zoom:
                base_zoom, base_mm = lens_zoom, self.table[lens_zoom]

        return int(round(base_mm * (zoom / base_zoom)))

    def zoom_for_focal_length(self, focal_mm: float) -> float:
        """Display zoom factor that produces `focal_mm` on this device."""
        if focal_mm <= 0:
            raise ValueError(f"Focal length must be positive, got {focal_mm}")

        lenses = sorted(self.table.items(), key=lambda item: item[1])
        base_zoom, base_mm = lenses[0]
        for lens_zoom, lens_mm in lenses:
            if lens_mm <= focal_mm:
                base_zoom, base_mm = lens_zoom, lens_mm

        return base_zoom * (focal_mm / base_mm)
