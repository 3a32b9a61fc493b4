"""
rep_debouncer.py - Turns jittery per-frame states into validated transitions and reps.

The session is an immutable SessionState value; advance_session_state returns
the next value and never mutates its input.
"""
from dataclasses import dataclass, replace
from typing import Optional, Tuple

from ..exercise_analysis.base_analyzer import ClassificationResult, PipelineConfig, RepPhase

IMPROVE_FORM_FEEDBACK = "Improve your form to count reps"


@dataclass(frozen=True)
class SessionState:
    """Running state of one exercise attempt."""
    rep_count: int = 0
    score: int = 0
    last_accuracy: int = 0
    last_feedback: str = ""
    last_validated_state: Optional[RepPhase] = None
    state_confidence: float = 0.0
    last_valid_pose_timestamp: float = 0.0  # Seconds; refreshed only when a rep is counted
    completed: bool = False


def new_session_state(start_time: float) -> SessionState:
    return SessionState(last_valid_pose_timestamp=start_time)


def _counts_towards_state(result: ClassificationResult, config: PipelineConfig) -> bool:
    return (
        result.state is not None
        and result.is_valid_pose
        and result.accuracy > config.accuracy_gate
    )


def advance_session_state(
    state: SessionState,
    result: ClassificationResult,
    timestamp: float,
    config: PipelineConfig
) -> Tuple[SessionState, bool]:
    """
    Fold one classified frame into the session.

    A frame moves the state machine only if it has a state, a valid pose and
    accuracy above the gate. Repeating the validated state builds confidence
    (capped); a different state is accepted once confidence reaches
    cap - increment or min_pose_interval has passed since the last counted
    rep. An accepted UP after DOWN counts one rep and rescores the session.

    Args:
        state: Current session state
        result: Classification of the current frame
        timestamp: Frame capture time in seconds
        config: Pipeline thresholds

    Returns:
        Tuple of (next session state, whether a rep was counted on this frame)
    """
    rep_counted = False
    rep_count = state.rep_count
    score = state.score
    last_state = state.last_validated_state
    confidence = state.state_confidence
    last_timestamp = state.last_valid_pose_timestamp

    if _counts_towards_state(result, config):
        interval_passed = (timestamp - last_timestamp) > config.min_pose_interval
        if result.state == last_state:
            confidence = min(confidence + config.confidence_increment, config.confidence_cap)
        elif interval_passed:
            confidence = 0.0

        if result.state != last_state and (confidence >= config.acceptance_threshold or interval_passed):
            if result.state == RepPhase.UP and last_state == RepPhase.DOWN:
                rep_count += 1
                score = rep_count * max(result.accuracy, config.min_rep_accuracy)
                last_timestamp = timestamp
                rep_counted = True
            last_state = result.state
    else:
        confidence = 0.0

    if result.accuracy <= config.feedback_accuracy_threshold:
        feedback = IMPROVE_FORM_FEEDBACK
    else:
        feedback = result.feedback

    next_state = replace(
        state,
        rep_count=rep_count,
        score=score,
        last_accuracy=result.accuracy,
        last_feedback=feedback,
        last_validated_state=last_state,
        state_confidence=confidence,
        last_valid_pose_timestamp=last_timestamp
    )
    return next_state, rep_counted


def latch_completion(state: SessionState, target_reps: Optional[int]) -> Tuple[SessionState, bool]:
    """Mark the session completed the first time it reaches target_reps."""
    if target_reps is None or state.completed or state.rep_count < target_reps:
        return state, False
    return replace(state, completed=True), True
