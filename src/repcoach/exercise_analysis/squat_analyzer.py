from .base_analyzer import ThresholdPhaseAnalyzer, register_exercise_analyzer


@register_exercise_analyzer("squat")
class SquatAnalyzer(ThresholdPhaseAnalyzer):
    """Squat: knee flexion drives the phase, hip angle costs accuracy."""

    ANGLE_DEFINITIONS = {
        "leftKnee": ("left_hip", "left_knee", "left_ankle"),
        "rightKnee": ("right_hip", "right_knee", "right_ankle"),
    }
    POSTURE_ANGLE_DEFINITIONS = {
        "hip": ("left_shoulder", "left_hip", "left_knee"),
    }

    PRIMARY_ANGLES = ("leftKnee", "rightKnee")
    TARGET_RANGE = "knee"
    POSTURE_ANGLE = "hip"
    DOWN_FEEDBACK = "Good depth, now stand up"
    UP_FEEDBACK = "Good, now squat down"
