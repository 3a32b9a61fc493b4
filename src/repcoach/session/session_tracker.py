import time
from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..exercise_analysis.base_analyzer import ClassificationResult, ExerciseDefinition, PipelineConfig
from .rep_debouncer import SessionState, advance_session_state, latch_completion, new_session_state


@dataclass(frozen=True)
class SessionStats:
    count: int
    accuracy: int
    score: int
    feedback: str


@dataclass(frozen=True)
class CompletionReport:
    """What the host reports upward when a challenge target is reached."""
    completed_reps: int
    accuracy: int
    score: int
    points: int

    def as_payload(self) -> Dict[str, Any]:
        return {
            "completedReps": self.completed_reps,
            "accuracy": self.accuracy,
            "score": self.score,
            "points": self.points
        }


@dataclass(frozen=True)
class SessionSummary:
    """Record of a free-practice attempt, produced when the user ends it."""
    exercise_type: str
    reps: int
    accuracy: int
    score: int

    def as_payload(self) -> Dict[str, Any]:
        return {
            "exerciseType": self.exercise_type,
            "reps": self.reps,
            "accuracy": self.accuracy,
            "score": self.score
        }


@dataclass(frozen=True)
class FrameUpdate:
    result: ClassificationResult
    state: SessionState
    rep_counted: bool = False
    just_completed: bool = False


class SessionTracker:
    """Owns the SessionState of one exercise attempt."""

    def __init__(
        self,
        definition: ExerciseDefinition,
        config: Optional[PipelineConfig] = None,
        target_reps: Optional[int] = None,
        start_time: Optional[float] = None
    ):
        """
        Start tracking an attempt.

        Args:
            definition: Exercise being performed
            config: Pipeline thresholds (defaults used when omitted)
            target_reps: Challenge target; None for free practice, which never completes
            start_time: Session start in seconds; time.time() when omitted
        """
        if target_reps is not None and target_reps <= 0:
            raise ValueError(f"target_reps must be positive, got {target_reps}")
        self.definition = definition
        self.config = config if config is not None else PipelineConfig()
        self._target_reps = target_reps
        self._state = new_session_state(time.time() if start_time is None else start_time)
        self._completion_report = None

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def target_reps(self) -> Optional[int]:
        return self._target_reps

    @property
    def is_challenge(self) -> bool:
        return self._target_reps is not None

    def reset(self, start_time: Optional[float] = None) -> None:
        self._state = new_session_state(time.time() if start_time is None else start_time)
        self._completion_report = None

    def update(self, result: ClassificationResult, timestamp: Optional[float] = None) -> FrameUpdate:
        """Fold one classified frame into the session and latch completion."""
        if timestamp is None:
            timestamp = time.time()
        state, rep_counted = advance_session_state(self._state, result, timestamp, self.config)
        state, just_completed = latch_completion(state, self._target_reps)
        self._state = state
        if just_completed:
            self._completion_report = CompletionReport(
                completed_reps=state.rep_count,
                accuracy=state.last_accuracy,
                score=state.score,
                points=self.definition.points_per_completion
            )
        return FrameUpdate(result=result, state=state, rep_counted=rep_counted, just_completed=just_completed)

    def current_stats(self) -> SessionStats:
        return SessionStats(
            count=self._state.rep_count,
            accuracy=self._state.last_accuracy,
            score=self._state.score,
            feedback=self._state.last_feedback
        )

    def is_complete(self) -> bool:
        return self._state.completed

    def completion_report(self) -> Optional[CompletionReport]:
        """Stats as they stood on the frame the target was reached; None until then."""
        return self._completion_report

    def session_summary(self) -> SessionSummary:
        return SessionSummary(
            exercise_type=self.definition.id,
            reps=self._state.rep_count,
            accuracy=self._state.last_accuracy,
            score=self._state.score
        )
