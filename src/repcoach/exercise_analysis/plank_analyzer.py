from .base_analyzer import AngleSet, BaseExerciseAnalyzer, ClassificationResult, RepPhase, register_exercise_analyzer


@register_exercise_analyzer("plank")
class PlankAnalyzer(BaseExerciseAnalyzer):
    """
    Plank: a held position, so frames are only ever CORRECT or INCORRECT.

    Neither state takes part in rep counting; a plank is scored on the
    accuracy it holds.
    """

    ANGLE_DEFINITIONS = {
        "leftElbow": ("left_shoulder", "left_elbow", "left_wrist"),
        "rightElbow": ("right_shoulder", "right_elbow", "right_wrist"),
    }

    OFF_RANGE_PENALTY = 15

    def classify(self, angles: AngleSet) -> ClassificationResult:
        result = ClassificationResult(angles=dict(angles))
        elbow = self._first_present(angles, "leftElbow", "rightElbow")
        if elbow is None:
            return result

        target = self._target("elbow")
        penalty = self._penalty("off_range", self.OFF_RANGE_PENALTY)
        if elbow < target.min:
            result.state = RepPhase.INCORRECT
            result.penalize(penalty, "Raise your body slightly")
        elif elbow > target.max:
            result.state = RepPhase.INCORRECT
            result.penalize(penalty, "Lower your body slightly")
        else:
            result.state = RepPhase.CORRECT
            result.feedback = "Great plank form! Keep holding"
        return result
