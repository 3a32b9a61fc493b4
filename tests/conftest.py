# Shared fixtures and pose builders for the rep coach tests

import math
import os
import sys

import pytest

# Add the src directory to path so the tests run without an install
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from repcoach.exercise_analysis.base_analyzer import ClassificationResult, PipelineConfig, RepPhase
from repcoach.exercise_analysis.config_utils import load_exercise_config
from repcoach.exercise_analysis.pose_utils import Keypoint, PoseFrame

ARM_TRIPLES = {
    "left": ("left_shoulder", "left_elbow", "left_wrist"),
    "right": ("right_shoulder", "right_elbow", "right_wrist"),
}
LEG_TRIPLES = {
    "left": ("left_hip", "left_knee", "left_ankle"),
    "right": ("right_hip", "right_knee", "right_ankle"),
}


def joint_keypoints(names, angle, origin=(0.0, 0.0), score=0.9):
    """Three keypoints whose interior angle at the middle one is `angle` degrees."""
    first, vertex, last = names
    ox, oy = origin
    radians = math.radians(angle)
    return [
        Keypoint(first, ox + 1.0, oy, score),
        Keypoint(vertex, ox, oy, score),
        Keypoint(last, ox + math.cos(radians), oy + math.sin(radians), score),
    ]


def make_pose(joints, extra=(), score=0.9, timestamp=None):
    """
    Build a pose from {(first, vertex, last): angle}; each triple gets its own origin.
    `extra` adds keypoints by name at arbitrary positions.
    """
    keypoints = []
    for index, (names, angle) in enumerate(joints.items()):
        keypoints.extend(joint_keypoints(names, angle, origin=(index * 5.0, 0.0), score=score))
    for index, name in enumerate(extra):
        keypoints.append(Keypoint(name, 20.0 + index, 3.0, score))
    return PoseFrame(keypoints=keypoints, timestamp=timestamp)


def arms_pose(angle, timestamp=None, extra=(), score=0.9):
    return make_pose({ARM_TRIPLES["left"]: angle, ARM_TRIPLES["right"]: angle}, extra, score, timestamp)


def legs_pose(left_angle, right_angle=None, timestamp=None, score=0.9):
    right_angle = left_angle if right_angle is None else right_angle
    return make_pose({LEG_TRIPLES["left"]: left_angle, LEG_TRIPLES["right"]: right_angle}, (), score, timestamp)


def classified(state, accuracy=80, feedback="ok", is_valid_pose=True):
    phase = RepPhase(state) if isinstance(state, str) else state
    return ClassificationResult(state=phase, feedback=feedback, accuracy=accuracy, is_valid_pose=is_valid_pose)


@pytest.fixture(scope="session")
def exercise_config():
    return load_exercise_config()


@pytest.fixture
def pipeline_config():
    return PipelineConfig()


@pytest.fixture
def definitions(exercise_config):
    return exercise_config[1]
