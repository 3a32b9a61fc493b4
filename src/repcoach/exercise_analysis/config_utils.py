import dataclasses
import json
import logging
import os
from typing import Any, Dict, Optional, Tuple

from .base_analyzer import AngleRange, ExerciseDefinition, PipelineConfig

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = os.path.join(os.path.dirname(__file__), "exercise_config.json")


class ConfigError(ValueError):
    """Raised when the exercise config file is malformed."""


def _require_mapping(value: Any, key: str) -> None:
    if not isinstance(value, dict):
        raise ConfigError(f"Config section '{key}' must be a JSON object, got {type(value).__name__}")


def load_config_file(config_path: Optional[str] = None) -> Dict[str, Any]:
    """Load the raw exercise config from a JSON file."""
    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH
    with open(config_path, "r") as f:
        try:
            return json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in {config_path}: {e}") from e


def parse_pipeline_config(raw: Dict[str, Any]) -> PipelineConfig:
    _require_mapping(raw, "pipeline")
    known = {f.name for f in dataclasses.fields(PipelineConfig)}
    unknown = set(raw) - known
    if unknown:
        logger.warning(f"Ignoring unknown pipeline settings: {', '.join(sorted(unknown))}")
    try:
        return PipelineConfig(**{k: v for k, v in raw.items() if k in known})
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid pipeline settings: {e}") from e


def parse_exercise_definition(exercise_id: str, raw: Dict[str, Any]) -> ExerciseDefinition:
    _require_mapping(raw, f"exercises.{exercise_id}")
    _require_mapping(raw.get("target_angles", {}), f"exercises.{exercise_id}.target_angles")
    _require_mapping(raw.get("penalties", {}), f"exercises.{exercise_id}.penalties")
    try:
        target_angles = {
            angle_name: AngleRange(min=float(limits["min"]), max=float(limits["max"]))
            for angle_name, limits in raw["target_angles"].items()
        }
        return ExerciseDefinition(
            id=exercise_id,
            name=raw.get("name", exercise_id),
            required_keypoints=tuple(raw["required_keypoints"]),
            target_angles=target_angles,
            rep_definition=tuple(raw["rep_definition"]),
            points_per_completion=int(raw["points"]),
            penalties={k: int(v) for k, v in raw.get("penalties", {}).items()},
            description=raw.get("description", ""),
            instructions=raw.get("instructions", ""),
            tips=raw.get("tips", "")
        )
    except KeyError as e:
        raise ConfigError(f"Exercise '{exercise_id}' is missing key {e}") from e
    except (AttributeError, TypeError, ValueError) as e:
        raise ConfigError(f"Invalid definition for exercise '{exercise_id}': {e}") from e


def load_exercise_config(config_path: Optional[str] = None) -> Tuple[PipelineConfig, Dict[str, ExerciseDefinition]]:
    """
    Load pipeline thresholds and exercise definitions.

    Args:
        config_path: JSON config to read; the bundled exercise_config.json when None

    Returns:
        Tuple of (pipeline config, {exercise id: definition})
    """
    raw = load_config_file(config_path)
    _require_mapping(raw, "top level")
    if "pipeline" not in raw:
        logger.warning("No pipeline section in exercise config, using default thresholds")
    pipeline = parse_pipeline_config(raw.get("pipeline", {}))
    exercises = raw.get("exercises")
    if not exercises:
        raise ConfigError("Exercise config defines no exercises")
    _require_mapping(exercises, "exercises")
    definitions = {
        exercise_id: parse_exercise_definition(exercise_id, entry)
        for exercise_id, entry in exercises.items()
    }
    return pipeline, definitions
