"""Camera aspect ratios and subject body types."""

from enum import Enum
from typing import List


class AspectRatio(Enum):
    """Supported capture aspect ratios (long side : short side)."""
    RATIO_16_9 = "16:9"
    RATIO_4_3 = "4:3"
    RATIO_1_1 = "1:1"

    @property
    def ratio(self) -> float:
        long_side, short_side = self.value.split(":")
        return float(long_side) / float(short_side)

    @property
    def display_name(self) -> str:
        return self.value

    @classmethod
    def detect(cls, width: float, height: float) -> "AspectRatio":
        """Nearest supported ratio for an image size, ignoring orientation."""
        if width <= 0 or height <= 0:
            return cls.RATIO_4_3
        ratio = max(width, height) / min(width, height)
        return min(cls, key=lambda candidate: abs(candidate.ratio - ratio))

    @classmethod
    def all(cls) -> List["AspectRatio"]:
        return list(cls)


class BodyType(Enum):
    """Assumed real shoulder width of the subject, in meters."""
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"

    @property
    def shoulder_width_m(self) -> float:
        return {
            BodyType.SMALL: 0.34,
            BodyType.MEDIUM: 0.40,
            BodyType.LARGE: 0.46,
        }[self]

    @classmethod
    def from_name(cls, name: str) -> "BodyType":
        try:
            return cls(name.lower())
        except ValueError:
            raise ValueError(f"Unknown body type: {name!r}") from None
