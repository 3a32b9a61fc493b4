from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Mapping, Optional, Tuple

from .pose_utils import PoseFrame, calculate_angle, validate_keypoints

AngleSet = Dict[str, Optional[float]]  # None means "could not be computed this frame"

INVALID_POSE_FEEDBACK = "Please ensure your full body is visible"


class RepPhase(Enum):
    """Discrete body states an exercise frame can be classified into."""
    UP = "up"
    DOWN = "down"
    TRANSITION = "transition"  # Lunges: between the two depth limits
    CORRECT = "correct"        # Plank: elbows within range
    INCORRECT = "incorrect"    # Plank: elbows outside range


@dataclass(frozen=True)
class AngleRange:
    """Target range for a named joint angle, in degrees."""
    min: float
    max: float

    def __post_init__(self):
        if not self.min < self.max:
            raise ValueError(f"Angle range min ({self.min}) must be below max ({self.max})")

    def contains(self, angle: float) -> bool:
        return self.min <= angle <= self.max


@dataclass(frozen=True)
class ExerciseDefinition:
    """Static description of one exercise type."""
    id: str
    name: str
    required_keypoints: Tuple[str, ...]
    target_angles: Dict[str, AngleRange]
    rep_definition: Tuple[str, str]  # (from_state, to_state)
    points_per_completion: int
    penalties: Dict[str, int] = field(default_factory=dict)
    description: str = ""
    instructions: str = ""
    tips: str = ""

    def __post_init__(self):
        if not self.required_keypoints:
            raise ValueError(f"Exercise '{self.id}' needs at least one required keypoint")
        if len(self.rep_definition) != 2:
            raise ValueError(f"Exercise '{self.id}' rep definition must be a (from_state, to_state) pair")
        if self.points_per_completion < 0:
            raise ValueError(f"Exercise '{self.id}' cannot award negative points")


@dataclass(frozen=True)
class PipelineConfig:
    """Thresholds shared by validation, classification and rep debouncing."""
    keypoint_confidence: float = 0.2    # Minimum score for a keypoint to count as visible
    angle_confidence: float = 0.2       # Minimum score on each point of an angle triple
    min_visible_fraction: float = 0.7   # Share of required keypoints that must be visible
    classification_margin: float = 10.0  # Degrees inside the target range for up/down
    confidence_increment: float = 1.5
    confidence_cap: float = 1.5
    min_pose_interval: float = 0.25     # Seconds
    accuracy_gate: int = 40             # Frames at or below this never move the state machine
    feedback_accuracy_threshold: int = 50
    min_rep_accuracy: int = 60          # Floor applied to accuracy when scoring a rep
    posture_angles: bool = False        # Also extract back/hip angles for posture checks

    def __post_init__(self):
        if self.confidence_cap < 0 or self.confidence_increment < 0:
            raise ValueError("Confidence cap and increment must be non-negative")
        if not 0.0 < self.min_visible_fraction <= 1.0:
            raise ValueError("min_visible_fraction must be in (0, 1]")
        if self.min_pose_interval < 0:
            raise ValueError("min_pose_interval must be non-negative")

    @property
    def acceptance_threshold(self) -> float:
        return self.confidence_cap - self.confidence_increment


@dataclass
class ClassificationResult:
    """Per-frame output of an exercise analyzer."""
    state: Optional[RepPhase] = None
    feedback: str = ""
    accuracy: int = 100
    is_valid_pose: bool = True
    angles: AngleSet = field(default_factory=dict)

    def penalize(self, amount: int, feedback: Optional[str] = None) -> None:
        self.accuracy = max(0, self.accuracy - amount)
        if feedback is not None:
            self.feedback = feedback


# --- Analyzer Registry ---
EXERCISE_ANALYZER_REGISTRY = {}

def register_exercise_analyzer(exercise_id):
    def decorator(cls):
        EXERCISE_ANALYZER_REGISTRY[exercise_id] = cls
        cls.exercise_id = exercise_id
        return cls
    return decorator


def create_exercise_analyzer(
    exercise_id: str,
    definitions: Mapping[str, ExerciseDefinition],
    config: Optional[PipelineConfig] = None
) -> "BaseExerciseAnalyzer":
    """Instantiate the registered analyzer for an exercise id."""
    analyzer_cls = EXERCISE_ANALYZER_REGISTRY.get(exercise_id)
    if analyzer_cls is None:
        raise ValueError(f"Unsupported exercise type: {exercise_id}")
    if exercise_id not in definitions:
        raise ValueError(f"No definition configured for exercise type: {exercise_id}")
    return analyzer_cls(definitions[exercise_id], config)


class BaseExerciseAnalyzer(ABC):
    """Base class for exercise analysis implementations."""

    exercise_id: str = ""
    # angle name -> (first point, vertex, last point)
    ANGLE_DEFINITIONS: Dict[str, Tuple[str, str, str]] = {}
    # Extra angles only extracted when PipelineConfig.posture_angles is set
    POSTURE_ANGLE_DEFINITIONS: Dict[str, Tuple[str, str, str]] = {}

    def __init__(self, definition: ExerciseDefinition, config: Optional[PipelineConfig] = None):
        """
        Initialize the analyzer for one exercise definition.

        Args:
            definition: Exercise definition, referenced for the analyzer's lifetime
            config: Pipeline thresholds (defaults used when omitted)
        """
        self.definition = definition
        self.config = config if config is not None else PipelineConfig()

    def get_exercise_name(self) -> str:
        return self.definition.id

    def get_required_landmarks(self) -> List[str]:
        return list(self.definition.required_keypoints)

    def get_required_angles(self) -> List[str]:
        return list(self._angle_definitions())

    def _angle_definitions(self) -> Dict[str, Tuple[str, str, str]]:
        definitions = dict(self.ANGLE_DEFINITIONS)
        if self.config.posture_angles:
            definitions.update(self.POSTURE_ANGLE_DEFINITIONS)
        return definitions

    def validate_pose(self, pose: Optional[PoseFrame]) -> bool:
        return validate_keypoints(
            pose,
            self.definition.required_keypoints,
            self.config.keypoint_confidence,
            self.config.min_visible_fraction
        )

    def extract_angles(self, pose: PoseFrame) -> AngleSet:
        """
        Compute the exercise's named joint angles for one pose.

        Any angle whose three keypoints are not all confidently detected is
        reported as None; no default is substituted.
        """
        angles = {}
        for angle_name, (first, vertex, last) in self._angle_definitions().items():
            angles[angle_name] = calculate_angle(
                pose.get(first),
                pose.get(vertex),
                pose.get(last),
                self.config.angle_confidence
            )
        return angles

    @abstractmethod
    def classify(self, angles: AngleSet) -> ClassificationResult:
        """
        Map a set of named angles to a body state, feedback and accuracy.

        Args:
            angles: Named joint angles for the current frame

        Returns:
            ClassificationResult; state is None when no classification is possible
        """
        pass

    def analyze_pose(self, pose: Optional[PoseFrame]) -> ClassificationResult:
        """Validate, extract angles and classify a single frame."""
        if not self.validate_pose(pose):
            return ClassificationResult(
                state=None,
                feedback=INVALID_POSE_FEEDBACK,
                accuracy=0,
                is_valid_pose=False
            )
        return self.classify(self.extract_angles(pose))

    # --- Helpers for subclasses ---
    @staticmethod
    def _first_present(angles: AngleSet, *names: str) -> Optional[float]:
        for name in names:
            if angles.get(name) is not None:
                return angles[name]
        return None

    def _target(self, range_name: str) -> AngleRange:
        return self.definition.target_angles[range_name]

    def _penalty(self, key: str, default: int) -> int:
        return self.definition.penalties.get(key, default)

    def _is_outside_target(self, angles: AngleSet, angle_name: str) -> bool:
        """True if the angle is present, has a target range and falls outside it."""
        angle = angles.get(angle_name)
        if angle is None or angle_name not in self.definition.target_angles:
            return False
        return not self._target(angle_name).contains(angle)


class ThresholdPhaseAnalyzer(BaseExerciseAnalyzer):
    """
    Up/down classifier shared by exercises driven by one primary joint.

    The primary angle is the first present of PRIMARY_ANGLES. Below
    target.min + margin the frame is DOWN, above target.max - margin it is UP,
    and in between no state is produced. A present POSTURE_ANGLE outside its
    own range overrides the feedback and costs accuracy.
    """

    PRIMARY_ANGLES: Tuple[str, ...] = ()
    TARGET_RANGE: str = ""
    POSTURE_ANGLE: Optional[str] = None
    POSTURE_PENALTY = 20
    DOWN_FEEDBACK = ""
    UP_FEEDBACK = ""
    POSTURE_FEEDBACK = "Try to keep your back straight"

    def classify(self, angles: AngleSet) -> ClassificationResult:
        result = ClassificationResult(angles=dict(angles))
        primary = self._first_present(angles, *self.PRIMARY_ANGLES)
        if primary is None:
            return result

        target = self._target(self.TARGET_RANGE)
        margin = self.config.classification_margin
        if primary < target.min + margin:
            result.state = RepPhase.DOWN
            result.feedback = self.DOWN_FEEDBACK
        elif primary > target.max - margin:
            result.state = RepPhase.UP
            result.feedback = self.UP_FEEDBACK

        if self.POSTURE_ANGLE and self._is_outside_target(angles, self.POSTURE_ANGLE):
            result.penalize(self._penalty("posture", self.POSTURE_PENALTY), self.POSTURE_FEEDBACK)
        return result
