import logging
import time
from typing import Dict, Optional

from .exercise_analysis.base_analyzer import (
    ClassificationResult,
    ExerciseDefinition,
    PipelineConfig,
    create_exercise_analyzer,
)
from .exercise_analysis.config_utils import load_exercise_config
from .exercise_analysis.pose_utils import PoseFrame
from .session.session_tracker import CompletionReport, FrameUpdate, SessionStats, SessionSummary, SessionTracker

# --- Logger Setup ---
logger = logging.getLogger("RepTrainer")
if not logger.hasHandlers():
    handler = logging.StreamHandler()
    formatter = logging.Formatter('%(asctime)s %(levelname)s %(message)s')
    handler.setFormatter(formatter)
    logger.addHandler(handler)
logger.setLevel(logging.INFO)


class VirtualRepTrainer:
    """Main class for the rep coach: runs every pose frame of one exercise attempt through the pipeline."""

    def __init__(
        self,
        exercise_type: str = "pushup",
        target_reps: Optional[int] = None,
        config: Optional[PipelineConfig] = None,
        definitions: Optional[Dict[str, ExerciseDefinition]] = None,
        config_path: Optional[str] = None,
        start_time: Optional[float] = None
    ):
        """
        Initialize the trainer.

        Args:
            exercise_type: Exercise id (pushup, squat, lunges or plank)
            target_reps: Challenge target; None for free practice
            config: Pipeline thresholds; read from the config file when omitted
            definitions: Exercise table; read from the config file when omitted
            config_path: Alternative JSON config to read
            start_time: Session start in seconds; time.time() when omitted
        """
        if config is None or definitions is None:
            loaded_config, loaded_definitions = load_exercise_config(config_path)
            config = config if config is not None else loaded_config
            definitions = definitions if definitions is not None else loaded_definitions
        self.config = config
        self.definitions = definitions
        self.target_reps = target_reps
        self.exercise_analyzer = None
        self.session = None
        self.select_exercise(exercise_type, start_time)

    @property
    def exercise_type(self) -> str:
        return self.exercise_analyzer.get_exercise_name()

    @property
    def definition(self) -> ExerciseDefinition:
        return self.exercise_analyzer.definition

    def select_exercise(self, exercise_type: str, start_time: Optional[float] = None) -> None:
        """Switch to another exercise; the running session is discarded."""
        self.exercise_analyzer = create_exercise_analyzer(exercise_type, self.definitions, self.config)
        self.session = SessionTracker(
            self.exercise_analyzer.definition,
            self.config,
            target_reps=self.target_reps,
            start_time=start_time
        )
        logger.info(f"Exercise set to {exercise_type}" + (f" (target {self.target_reps} reps)" if self.target_reps else ""))

    def analyze_pose(self, pose: Optional[PoseFrame]) -> ClassificationResult:
        """Validate, extract angles and classify one frame without touching the session."""
        return self.exercise_analyzer.analyze_pose(pose)

    def process_pose(self, pose: PoseFrame) -> FrameUpdate:
        """
        Process a single pose frame.

        Args:
            pose: Detected pose; stamped with the current time if it has no timestamp

        Returns:
            FrameUpdate with the frame's classification and the new session state
        """
        timestamp = pose.timestamp if pose.timestamp is not None else time.time()
        result = self.analyze_pose(pose)
        update = self.session.update(result, timestamp)

        state_name = result.state.value if result.state is not None else "none"
        logger.debug(
            f"[FRAME] t={timestamp:.3f} state={state_name} accuracy={result.accuracy} "
            f"angles={result.angles} confidence={update.state.state_confidence:.2f}"
        )
        if not result.is_valid_pose:
            logger.debug("[FRAME] Not enough keypoints visible, frame skipped")
        if update.rep_counted:
            logger.info(f"[REP] {self.exercise_type}: {update.state.rep_count} (score {update.state.score})")
        if update.just_completed:
            logger.info(f"[DONE] {self.exercise_type} target of {self.target_reps} reps reached")
        return update

    def current_stats(self) -> SessionStats:
        return self.session.current_stats()

    def is_complete(self) -> bool:
        return self.session.is_complete()

    def completion_report(self) -> Optional[CompletionReport]:
        return self.session.completion_report()

    def session_summary(self) -> SessionSummary:
        return self.session.session_summary()
