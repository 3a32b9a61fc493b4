"""
pose_utils.py - Keypoint containers, visibility checks and joint geometry.
"""
import math
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

import numpy as np

# MoveNet / COCO body joints, in detector output order.
KEYPOINT_NAMES = [
    "nose", "left_eye", "right_eye", "left_ear", "right_ear",
    "left_shoulder", "right_shoulder", "left_elbow", "right_elbow",
    "left_wrist", "right_wrist", "left_hip", "right_hip",
    "left_knee", "right_knee", "left_ankle", "right_ankle"
]


@dataclass(frozen=True)
class Keypoint:
    """A single detected body joint."""
    name: str
    x: float
    y: float
    score: Optional[float] = None  # Detector confidence in [0, 1]


@dataclass
class PoseFrame:
    """All keypoints detected for one person at one instant."""
    keypoints: List[Keypoint] = field(default_factory=list)
    timestamp: Optional[float] = None  # Capture time in seconds (time.time() scale)

    def get(self, name: str) -> Optional[Keypoint]:
        for keypoint in self.keypoints:
            if keypoint.name == name:
                return keypoint
        return None

    def names(self) -> List[str]:
        return [keypoint.name for keypoint in self.keypoints]


# --- Visibility ---
def is_keypoint_visible(keypoint: Optional[Keypoint], confidence_threshold: float = 0.2) -> bool:
    """True if the keypoint exists and carries a score at or above the threshold."""
    return (
        keypoint is not None
        and keypoint.score is not None
        and keypoint.score >= confidence_threshold
    )


def minimum_visible_keypoints(required_count: int, min_visible_fraction: float = 0.7) -> int:
    # Rounded first so that 0.7 * 10 (7.000000000000001) stays 7.
    return math.ceil(round(required_count * min_visible_fraction, 9))


def validate_keypoints(
    pose: Optional[PoseFrame],
    required_keypoints: Iterable[str],
    confidence_threshold: float = 0.2,
    min_visible_fraction: float = 0.7
) -> bool:
    """
    Decide whether a pose shows enough of the body to be analyzed.

    Args:
        pose: Detected pose for the current frame
        required_keypoints: Joint names the exercise depends on
        confidence_threshold: Minimum score for a keypoint to count as visible
        min_visible_fraction: Fraction of the required joints that must be visible

    Returns:
        True if at least ceil(min_visible_fraction * len(required_keypoints))
        of the required joints are confidently visible
    """
    if pose is None or not pose.keypoints:
        return False
    required = list(required_keypoints)
    visible = [name for name in required if is_keypoint_visible(pose.get(name), confidence_threshold)]
    return len(visible) >= minimum_visible_keypoints(len(required), min_visible_fraction)


# --- Math & Geometry Utilities ---
def calculate_angle(
    a: Optional[Keypoint],
    b: Optional[Keypoint],
    c: Optional[Keypoint],
    confidence_threshold: float = 0.2
) -> Optional[float]:
    """
    Calculate the interior angle at b formed by the points a-b-c.

    Point ordering convention:
    - a: First point (e.g., shoulder for elbow angle)
    - b: Middle point (e.g., elbow for elbow angle)
    - c: Last point (e.g., wrist for elbow angle)

    The result does not depend on the order of a and c.

    Args:
        a: First keypoint
        b: Vertex keypoint - angle is calculated here
        c: Last keypoint
        confidence_threshold: Minimum score required on all three points

    Returns:
        Angle in degrees in [0, 180], or None if any point is missing, not confident or not finite
    """
    if not all(is_keypoint_visible(point, confidence_threshold) for point in (a, b, c)):
        return None
    if not all(math.isfinite(value) for point in (a, b, c) for value in (point.x, point.y)):
        return None
    radians = np.arctan2(c.y - b.y, c.x - b.x) - np.arctan2(a.y - b.y, a.x - b.x)
    angle = abs(float(np.degrees(radians)))
    if angle > 180.0:
        angle = 360.0 - angle
    return angle


# --- Adapters ---
def pose_from_landmarks(landmarks: Dict[str, List[float]], timestamp: Optional[float] = None) -> PoseFrame:
    """
    Build a PoseFrame from a landmark dict of the form {name: [x, y, z, visibility]}.

    This is the layout MediaPipe-style detectors produce; z is dropped and
    visibility becomes the keypoint score.
    """
    keypoints = []
    for name, values in landmarks.items():
        if len(values) < 2:
            raise ValueError(f"Landmark '{name}' needs at least x and y, got {list(values)}")
        score = float(values[3]) if len(values) > 3 else None
        keypoints.append(Keypoint(name=name, x=float(values[0]), y=float(values[1]), score=score))
    return PoseFrame(keypoints=keypoints, timestamp=timestamp)


def pose_from_dict(data: Dict[str, Any]) -> PoseFrame:
    """Build a PoseFrame from {"timestamp": float, "keypoints": [{"name", "x", "y", "score"}]}."""
    if not isinstance(data, dict):
        raise ValueError(f"Pose record must be a JSON object, got {type(data).__name__}")
    try:
        timestamp = data.get("timestamp")
        if timestamp is not None:
            timestamp = float(timestamp)
        keypoints = [
            Keypoint(
                name=str(item["name"]),
                x=float(item["x"]),
                y=float(item["y"]),
                score=float(item["score"]) if item.get("score") is not None else None
            )
            for item in data["keypoints"]
        ]
    except KeyError as e:
        raise ValueError(f"Pose record is missing field {e}") from e
    except (TypeError, ValueError) as e:
        raise ValueError(f"Malformed pose record: {e}") from e
    return PoseFrame(keypoints=keypoints, timestamp=timestamp)
