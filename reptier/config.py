"""Shared configuration and data models used across the rep-tracking pipeline."""

from __future__ import annotations

import math
import os
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

VISIBILITY_FLOOR = 0.8
WORKOUT_SECONDS = 60.0


@dataclass(frozen=True)
class Landmark:
    """Single pose landmark in normalized image coordinates.

    Attributes:
        x: Horizontal position, typically in [0, 1].
        y: Vertical position, typically in [0, 1].
        z: Depth estimate; ignored by the angle computations.
        visibility: Estimator confidence in [0, 1], or None when the
            estimator does not report one.
    """

    x: float
    y: float
    z: float = 0.0
    visibility: Optional[float] = None


class Phase(str, Enum):
    """Movement phase a checkpoint belongs to."""
    UP = "up"
    DOWN = "down"


@dataclass(frozen=True)
class Checkpoint:
    """Angle rule evaluated at ``keypoint2`` during one movement phase.

    The rule holds when the angle formed by keypoint1-keypoint2-keypoint3 is
    within ``tolerance`` degrees of ``target_angle``.
    """

    keypoint1: str
    keypoint2: str
    keypoint3: str
    target_angle: float
    tolerance: float
    phase: Phase

    @property
    def keypoints(self) -> Tuple[str, str, str]:
        return (self.keypoint1, self.keypoint2, self.keypoint3)


@dataclass(frozen=True)
class ExerciseTier:
    """Skill tier covering ``[min_reps, max_reps]``; ``max_reps=None`` is unbounded."""

    name: str
    min_reps: int
    max_reps: Optional[int] = None

    def contains(self, reps: int) -> bool:
        return reps >= self.min_reps and (self.max_reps is None or reps <= self.max_reps)


@dataclass(frozen=True)
class Exercise:
    """Exercise definition as handed over by the backend.

    Only ``checkpoints`` and ``tiers`` drive the computation; the remaining
    fields are carried along for reports.
    """

    name: str
    checkpoints: Tuple[Checkpoint, ...] = ()
    tiers: Tuple[ExerciseTier, ...] = ()
    description: str = ""
    target_muscles: Tuple[str, ...] = ()
    instructions: Tuple[str, ...] = ()
    difficulty: Optional[str] = None
    exercise_id: Optional[str] = None


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {raw!r}") from exc


@dataclass(frozen=True)
class SessionConfig:
    """Tunables for a workout session.

    Attributes:
        visibility_floor: Minimum landmark visibility for a checkpoint to be
            evaluated. Landmarks without a visibility score always pass.
        workout_seconds: Full workout length; shorter sessions count as an
            early exit.
    """

    visibility_floor: float = VISIBILITY_FLOOR
    workout_seconds: float = WORKOUT_SECONDS

    def __post_init__(self) -> None:
        if not 0.0 <= self.visibility_floor <= 1.0:
            raise ValueError("visibility_floor must be within [0, 1]")
        if not math.isfinite(self.workout_seconds) or self.workout_seconds <= 0:
            raise ValueError("workout_seconds must be a positive, finite number")

    @classmethod
    def from_env(cls) -> "SessionConfig":
        """Build a config from ``REPTIER_*`` environment variables."""
        return cls(
            visibility_floor=_env_float("REPTIER_VISIBILITY_FLOOR", VISIBILITY_FLOOR),
            workout_seconds=_env_float("REPTIER_WORKOUT_SECONDS", WORKOUT_SECONDS),
        )
