# Unit tests for exercise_analysis/pose_utils.py

import pytest

from repcoach.exercise_analysis.pose_utils import (
    Keypoint,
    PoseFrame,
    calculate_angle,
    minimum_visible_keypoints,
    pose_from_dict,
    pose_from_landmarks,
    validate_keypoints,
)

from conftest import joint_keypoints


class TestCalculateAngle:
    """Interior angle at the vertex keypoint"""

    @pytest.mark.parametrize("expected", [0.0, 30.0, 90.0, 135.0, 179.0])
    def test_known_angles(self, expected):
        a, b, c = joint_keypoints(("a", "b", "c"), expected)
        assert calculate_angle(a, b, c) == pytest.approx(expected, abs=1e-6)

    def test_straight_line_is_180(self):
        a = Keypoint("a", -1.0, 0.0, 0.9)
        b = Keypoint("b", 0.0, 0.0, 0.9)
        c = Keypoint("c", 1.0, 0.0, 0.9)
        assert calculate_angle(a, b, c) == pytest.approx(180.0)

    @pytest.mark.parametrize("points", [
        ((0.3, 0.9), (0.5, 0.5), (0.9, 0.2)),
        ((-2.0, -1.0), (0.0, 0.0), (-1.5, 2.5)),
        ((10.0, 3.0), (4.0, 4.0), (-3.0, -8.0)),
        ((0.0, -1.0), (0.0, 0.0), (-0.01, -1.0)),
    ])
    def test_symmetric_under_endpoint_swap(self, points):
        a, b, c = [Keypoint(name, x, y, 0.8) for name, (x, y) in zip("abc", points)]
        forward = calculate_angle(a, b, c)
        backward = calculate_angle(c, b, a)
        assert forward == pytest.approx(backward)
        assert 0.0 <= forward <= 180.0

    def test_reflex_angle_folds_into_range(self):
        # atan2 difference here is about 320 degrees before folding
        a = Keypoint("a", -1.0, -0.36, 0.9)
        b = Keypoint("b", 0.0, 0.0, 0.9)
        c = Keypoint("c", -1.0, 0.36, 0.9)
        angle = calculate_angle(a, b, c)
        assert 0.0 <= angle <= 180.0
        assert angle == pytest.approx(39.6, abs=0.1)

    def test_low_confidence_point_is_absent(self):
        a, b, c = joint_keypoints(("a", "b", "c"), 90.0)
        weak = Keypoint(b.name, b.x, b.y, 0.1)
        assert calculate_angle(a, weak, c) is None

    def test_missing_score_is_absent(self):
        a, b, c = joint_keypoints(("a", "b", "c"), 90.0)
        assert calculate_angle(a, b, Keypoint(c.name, c.x, c.y, None)) is None

    def test_missing_point_is_absent(self):
        a, b, _ = joint_keypoints(("a", "b", "c"), 90.0)
        assert calculate_angle(a, b, None) is None

    @pytest.mark.parametrize("bad", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_coordinate_is_absent(self, bad):
        a = Keypoint("a", bad, 0.0, 0.9)
        b = Keypoint("b", 0.0, 0.0, 0.9)
        c = Keypoint("c", 1.0, 1.0, 0.9)
        assert calculate_angle(a, b, c) is None
        assert calculate_angle(c, b, a) is None

    def test_threshold_is_inclusive(self):
        a, b, c = joint_keypoints(("a", "b", "c"), 45.0, score=0.2)
        assert calculate_angle(a, b, c, confidence_threshold=0.2) == pytest.approx(45.0)
        assert calculate_angle(a, b, c, confidence_threshold=0.25) is None


class TestValidateKeypoints:
    """Share of required joints that must be visible"""

    REQUIRED = ["k%d" % i for i in range(10)]

    def _pose(self, confident, total=10):
        keypoints = [
            Keypoint("k%d" % i, float(i), 0.0, 0.9 if i < confident else 0.1)
            for i in range(total)
        ]
        return PoseFrame(keypoints=keypoints)

    def test_seven_of_ten_is_valid(self):
        assert validate_keypoints(self._pose(7), self.REQUIRED) is True

    def test_six_of_ten_is_invalid(self):
        assert validate_keypoints(self._pose(6), self.REQUIRED) is False

    def test_absent_keypoints_do_not_count(self):
        pose = PoseFrame(keypoints=[Keypoint("k%d" % i, 0.0, 0.0, 0.9) for i in range(6)])
        assert validate_keypoints(pose, self.REQUIRED) is False

    def test_empty_or_missing_pose(self):
        assert validate_keypoints(None, self.REQUIRED) is False
        assert validate_keypoints(PoseFrame(), self.REQUIRED) is False

    @pytest.mark.parametrize("required_count, expected", [(10, 7), (6, 5), (3, 3), (1, 1), (20, 14)])
    def test_minimum_rounds_up(self, required_count, expected):
        assert minimum_visible_keypoints(required_count, 0.7) == expected

    def test_six_required_needs_five(self):
        required = self.REQUIRED[:6]
        assert validate_keypoints(self._pose(5, total=6), required) is True
        assert validate_keypoints(self._pose(4, total=6), required) is False


class TestAdapters:
    """Conversions from detector output into PoseFrame"""

    def test_pose_from_landmarks_uses_visibility_as_score(self):
        pose = pose_from_landmarks({"left_elbow": [0.4, 0.6, -0.1, 0.85]}, timestamp=3.0)
        keypoint = pose.get("left_elbow")
        assert keypoint == Keypoint("left_elbow", 0.4, 0.6, 0.85)
        assert pose.timestamp == 3.0

    def test_pose_from_landmarks_without_visibility(self):
        pose = pose_from_landmarks({"nose": [0.5, 0.1]})
        assert pose.get("nose").score is None

    def test_pose_from_dict(self):
        pose = pose_from_dict({
            "timestamp": 1.25,
            "keypoints": [{"name": "left_knee", "x": 1, "y": 2, "score": 0.7}]
        })
        assert pose.timestamp == 1.25
        assert pose.get("left_knee") == Keypoint("left_knee", 1.0, 2.0, 0.7)
        assert pose.get("right_knee") is None

    def test_pose_from_dict_missing_field(self):
        with pytest.raises(ValueError, match="missing field"):
            pose_from_dict({"keypoints": [{"name": "nose", "x": 1}]})

    def test_pose_from_landmarks_too_short(self):
        with pytest.raises(ValueError, match="at least x and y"):
            pose_from_landmarks({"nose": [0.5]})

    @pytest.mark.parametrize("record", [
        {"timestamp": [1], "keypoints": []},
        {"timestamp": "soon", "keypoints": []},
        {"keypoints": [["nose", 1, 2]]},
        [1, 2, 3],
    ])
    def test_pose_from_dict_malformed(self, record):
        with pytest.raises(ValueError):
            pose_from_dict(record)
