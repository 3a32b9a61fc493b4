import argparse
import json
import logging
import sys
from typing import List, Optional

from .exercise_analysis.base_analyzer import EXERCISE_ANALYZER_REGISTRY
from .exercise_analysis.pose_utils import PoseFrame, pose_from_dict
from .trainer import VirtualRepTrainer


def read_pose_trace(trace_path: str) -> List[PoseFrame]:
    """
    Read a recorded keypoint trace.

    Each non-empty line is one JSON object:
    {"timestamp": 12.5, "keypoints": [{"name": "left_elbow", "x": 0.4, "y": 0.6, "score": 0.9}, ...]}
    """
    frames = []
    with open(trace_path, "r") as f:
        for line_number, line in enumerate(f, start=1):
            line = line.strip()
            if not line:
                continue
            try:
                frames.append(pose_from_dict(json.loads(line)))
            except ValueError as e:
                # json.JSONDecodeError is a ValueError too
                raise ValueError(f"{trace_path}, line {line_number}: {e}") from e
    return frames


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Virtual Rep Coach - replay a keypoint trace")
    parser.add_argument(
        "--exercise",
        type=str,
        default="pushup",
        choices=sorted(EXERCISE_ANALYZER_REGISTRY),
        help="Type of exercise to analyze"
    )
    parser.add_argument('--trace', type=str, required=True, help='Path to the JSON Lines keypoint trace')
    parser.add_argument('--target-reps', type=int, default=None, help='Challenge mode: reps needed to complete')
    parser.add_argument('--config', type=str, default=None, help='Alternative exercise config JSON')
    parser.add_argument('--verbose', action='store_true', help='Log every frame')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for trace replay."""
    args = build_parser().parse_args(argv)
    if args.verbose:
        logging.getLogger("RepTrainer").setLevel(logging.DEBUG)

    try:
        frames = read_pose_trace(args.trace)
        start_time = frames[0].timestamp if frames else None
        trainer = VirtualRepTrainer(
            exercise_type=args.exercise,
            target_reps=args.target_reps,
            config_path=args.config,
            start_time=start_time
        )
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    for pose in frames:
        trainer.process_pose(pose)
    report = trainer.completion_report()

    stats = trainer.current_stats()
    print(f"Exercise: {trainer.definition.name}")
    print(f"Frames: {len(frames)}")
    print(f"Reps: {stats.count}")
    print(f"Accuracy: {stats.accuracy}%")
    print(f"Score: {stats.score}")
    if stats.feedback:
        print(f"Feedback: {stats.feedback}")
    if report is not None:
        print(f"Challenge complete: {json.dumps(report.as_payload())}")
    else:
        print(f"Summary: {json.dumps(trainer.session_summary().as_payload())}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
