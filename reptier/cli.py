"""Command-line interface.

Usage:
- `reptier replay --exercise squat.json --frames session.jsonl` replays a
  recorded pose stream through a workout session and prints the report.
- `reptier tier --exercise squat.json --reps 12` classifies a rep count.
"""

from __future__ import annotations

import argparse
import json
import logging
import math
import sys
from pathlib import Path
from typing import List, Optional

from reptier.config import SessionConfig
from reptier.grading.tiers import get_tier_info
from reptier.io.exercises import ExerciseDefinitionError, load_exercise
from reptier.session import EARLY_EXIT_WARNING, WorkoutSession
from reptier.vision.cache import RecordingError, load_pose_frames, recording_duration

logger = logging.getLogger(__name__)


def eprint(*args: object) -> None:
    print(*args, file=sys.stderr)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="reptier",
        description="Count reps and grade skill tiers from pose landmarks.",
    )
    p.add_argument("-v", "--verbose", action="store_true", help="Log rep and phase events")
    sub = p.add_subparsers(dest="command", required=True)

    replay = sub.add_parser("replay", help="Replay a recorded pose stream through a workout session.")
    replay.add_argument("--exercise", required=True, help="Exercise definition JSON file")
    replay.add_argument("--frames", required=True, help="Pose recording (JSONL, one frame per line)")
    replay.add_argument("--workout-seconds", type=float, default=None,
                        help="Full workout length; shorter recordings count as an early exit "
                             "(default: $REPTIER_WORKOUT_SECONDS or 60)")
    replay.add_argument("--visibility-floor", type=float, default=None,
                        help="Minimum landmark visibility (default: $REPTIER_VISIBILITY_FLOOR or 0.8)")
    replay.add_argument("--json", action="store_true", help="Print the report as JSON")

    tier = sub.add_parser("tier", help="Classify a rep count into the exercise's tiers.")
    tier.add_argument("--exercise", required=True, help="Exercise definition JSON file")
    tier.add_argument("--reps", type=int, required=True, help="Rep count to classify")
    tier.add_argument("--json", action="store_true", help="Print the tier info as JSON")

    return p.parse_args(argv)


def validate_args(args: argparse.Namespace) -> None:
    if not Path(args.exercise).expanduser().exists():
        raise FileNotFoundError(f"Exercise file not found: {args.exercise}")

    if args.command == "replay":
        if not Path(args.frames).expanduser().exists():
            raise FileNotFoundError(f"Recording not found: {args.frames}")
        if args.workout_seconds is not None and (
            math.isnan(args.workout_seconds) or args.workout_seconds <= 0
        ):
            raise ValueError("--workout-seconds must be positive.")
        if args.visibility_floor is not None and not 0.0 <= args.visibility_floor <= 1.0:
            raise ValueError("--visibility-floor must be between 0 and 1.")
    elif args.reps < 0:
        raise ValueError("--reps must be >= 0.")


def build_config(args: argparse.Namespace) -> SessionConfig:
    """Environment defaults, overridden by any flags given on the command line."""
    env = SessionConfig.from_env()
    return SessionConfig(
        visibility_floor=env.visibility_floor if args.visibility_floor is None else args.visibility_floor,
        workout_seconds=env.workout_seconds if args.workout_seconds is None else args.workout_seconds,
    )


def is_early_exit(duration: float, workout_seconds: float) -> bool:
    """Shorter than the workout, allowing for float error in summed frame intervals."""
    return duration < workout_seconds and not math.isclose(duration, workout_seconds, rel_tol=1e-6)


def run_replay(args: argparse.Namespace) -> int:
    exercise = load_exercise(Path(args.exercise).expanduser())
    config = build_config(args)
    frames = list(load_pose_frames(Path(args.frames).expanduser()))
    logger.info("Replaying %d frames for %s", len(frames), exercise.name)

    session = WorkoutSession(exercise, config)
    session.start()
    for frame in frames:
        session.process_frame(frame.named_landmarks())

    duration = recording_duration(frames)
    report = session.finish(duration, early_exit=is_early_exit(duration, config.workout_seconds))
    if report is None:
        eprint(EARLY_EXIT_WARNING)
        print(f"Reps counted: {session.rep_count} in {duration:.1f}s")
        return 0

    if args.json:
        print(json.dumps(report.as_dict(), indent=2))
    else:
        print(f"Exercise: {report.exercise_name}")
        print(f"Reps: {report.total_reps} in {report.duration:.1f}s")
        if report.tier_name is not None:
            print(f"Tier: {report.tier_name}")
    return 0


def run_tier(args: argparse.Namespace) -> int:
    exercise = load_exercise(Path(args.exercise).expanduser())
    info = get_tier_info(args.reps, exercise.tiers)
    if args.json:
        print(json.dumps(info.as_dict(), indent=2))
    else:
        upper = "+" if info.tier_max_reps is None else f"-{info.tier_max_reps}"
        print(f"{info.current_tier_name} ({info.tier_min_reps}{upper}): {info.progress_in_tier:.0%}")
    return 0


def run(args: argparse.Namespace) -> int:
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s | %(name)s | %(message)s",
    )
    try:
        validate_args(args)
        if args.command == "replay":
            return run_replay(args)
        return run_tier(args)
    except (ExerciseDefinitionError, RecordingError, FileNotFoundError, ValueError) as ex:
        eprint(f"Error: {ex}")
        return 2


def run_cli(argv: Optional[List[str]] = None) -> int:
    return run(parse_args(argv))


def main() -> None:
    raise SystemExit(run_cli())


if __name__ == "__main__":
    main()
