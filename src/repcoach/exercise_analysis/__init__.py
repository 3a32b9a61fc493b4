"""
Exercise analysis package: keypoint validation, joint angles and per-exercise classification.
"""

from .base_analyzer import (
    EXERCISE_ANALYZER_REGISTRY,
    AngleRange,
    BaseExerciseAnalyzer,
    ClassificationResult,
    ExerciseDefinition,
    PipelineConfig,
    RepPhase,
    create_exercise_analyzer,
)
from .pushup_analyzer import PushupAnalyzer
from .squat_analyzer import SquatAnalyzer
from .lunge_analyzer import LungeAnalyzer
from .plank_analyzer import PlankAnalyzer
from .config_utils import ConfigError, load_exercise_config
from .pose_utils import Keypoint, PoseFrame, calculate_angle, validate_keypoints

__all__ = [
    'EXERCISE_ANALYZER_REGISTRY',
    'AngleRange',
    'BaseExerciseAnalyzer',
    'ClassificationResult',
    'ExerciseDefinition',
    'PipelineConfig',
    'RepPhase',
    'create_exercise_analyzer',
    'PushupAnalyzer',
    'SquatAnalyzer',
    'LungeAnalyzer',
    'PlankAnalyzer',
    'ConfigError',
    'load_exercise_config',
    'Keypoint',
    'PoseFrame',
    'calculate_angle',
    'validate_keypoints'
]
