"""
Geometry helpers operating on keypoints that come from an external pose model.

COMPONENTS:
1. BodyStructure: centroid, top anchor and lowest visible tier of a body
2. distance_estimator: pinhole model, shoulder width -> camera distance
3. DeviceLensConfig: zoom factor <-> 35mm-equivalent focal length
4. KeypointSmoother: confidence-weighted EMA for shoulder keypoints
5. pose_similarity: bbox-normalized keypoint similarity in [0, 1]
"""

from framecoach.cv.body_structure import BodyStructure
from framecoach.cv.distance_estimator import estimate_distance, shoulder_ratio_for_distance
from framecoach.cv.lens_config import DeviceLensConfig
from framecoach.cv.keypoint_smoother import KeypointSmoother, SmoothedShoulders
from framecoach.cv.pose_similarity import pose_similarity

__all__ = [
    "BodyStructure",
    "estimate_distance",
    "shoulder_ratio_for_distance",
    "DeviceLensConfig",
    "KeypointSmoother",
    "SmoothedShoulders",
    "pose_similarity",
]
