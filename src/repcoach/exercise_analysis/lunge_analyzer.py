from .base_analyzer import AngleSet, BaseExerciseAnalyzer, ClassificationResult, RepPhase, register_exercise_analyzer


@register_exercise_analyzer("lunges")
class LungeAnalyzer(BaseExerciseAnalyzer):
    """Lunges: both knees are checked against their own depth range."""

    ANGLE_DEFINITIONS = {
        "frontKnee": ("left_hip", "left_knee", "left_ankle"),
        "backKnee": ("right_hip", "right_knee", "right_ankle"),
    }

    SHALLOW_PENALTY = 15

    def classify(self, angles: AngleSet) -> ClassificationResult:
        result = ClassificationResult(angles=dict(angles))
        front_knee = angles.get("frontKnee")
        back_knee = angles.get("backKnee")
        # Both legs are needed to tell depth from a half-step
        if front_knee is None or back_knee is None:
            return result

        front_range = self._target("frontKnee")
        back_range = self._target("backKnee")
        if front_knee < front_range.min or back_knee < back_range.min:
            result.state = RepPhase.DOWN
            result.feedback = "Good depth! Push back up"
        elif front_knee > front_range.max or back_knee > back_range.max:
            result.state = RepPhase.UP
            result.penalize(self._penalty("shallow", self.SHALLOW_PENALTY), "Lunge deeper")
        else:
            result.state = RepPhase.TRANSITION
            result.feedback = "Good form! Keep going"
        return result
