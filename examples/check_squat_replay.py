"""Sanity check: replay a synthetic squat recording through a workout session."""

import math
import sys
from pathlib import Path

# Allow running this script directly without installing the package.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from reptier.config import Landmark  # noqa: E402
from reptier.io.exercises import load_exercise  # noqa: E402
from reptier.session import WorkoutSession  # noqa: E402
from reptier.vision.cache import PoseFrame, recording_duration  # noqa: E402

FPS = 30.0
REPS = 20
SECONDS_PER_REP = 3.0


def synthetic_frames():
    """Left leg sweeping between straight (180) and bent (~80) knee angles."""
    total = int(REPS * SECONDS_PER_REP * FPS)
    for i in range(total):
        t = i / FPS
        knee_angle = math.radians(130 + 50 * math.cos(2 * math.pi * t / SECONDS_PER_REP))
        knee = (0.5, 0.6)
        ankle = (0.5, 0.8)
        # Hip sits 0.2 from the knee, rotated to the current knee angle.
        hip = (knee[0] - 0.2 * math.sin(knee_angle), knee[1] + 0.2 * math.cos(knee_angle))
        landmarks = [Landmark(0.0, 0.0, visibility=0.0) for _ in range(33)]
        landmarks[23] = Landmark(*hip, visibility=0.95)
        landmarks[25] = Landmark(*knee, visibility=0.95)
        landmarks[27] = Landmark(*ankle, visibility=0.95)
        yield PoseFrame(frame_index=i, timestamp=t, landmarks=landmarks)


def run_examples() -> None:
    exercise = load_exercise(Path(__file__).with_name("squat.json"))
    session = WorkoutSession(exercise)
    session.start()

    frames = list(synthetic_frames())
    for frame in frames:
        result = session.process_frame(frame.named_landmarks())
        if result.rep_completed:
            print(f"t={frame.timestamp:5.1f}s rep {result.rep_count} tier={result.tier.current_tier_name}")

    duration = recording_duration(frames)
    assert abs(duration - REPS * SECONDS_PER_REP) < 1e-6, f"recording covers {duration}s"
    report = session.finish(duration)
    print(report.as_dict())
    assert report.total_reps == REPS, f"expected {REPS} reps, got {report.total_reps}"
    print("Replay checks passed.")


if __name__ == "__main__":
    run_examples()
