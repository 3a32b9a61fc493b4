from .base_analyzer import ThresholdPhaseAnalyzer, register_exercise_analyzer


@register_exercise_analyzer("pushup")
class PushupAnalyzer(ThresholdPhaseAnalyzer):
    """Push-up: elbow flexion drives the phase, back alignment costs accuracy."""

    ANGLE_DEFINITIONS = {
        "leftElbow": ("left_shoulder", "left_elbow", "left_wrist"),
        "rightElbow": ("right_shoulder", "right_elbow", "right_wrist"),
    }
    POSTURE_ANGLE_DEFINITIONS = {
        "back": ("left_shoulder", "left_hip", "left_ankle"),
    }

    PRIMARY_ANGLES = ("leftElbow", "rightElbow")
    TARGET_RANGE = "elbow"
    POSTURE_ANGLE = "back"
    DOWN_FEEDBACK = "Good, now push up"
    UP_FEEDBACK = "Good, now go down slowly"
