"""Workout session: rep counting, live feedback and tiering for one exercise.

The host feeds one pose frame per tick from its own frame loop. Nothing here
blocks or performs I/O; calls on one session must be serialized.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional

from reptier.config import Exercise, Landmark, SessionConfig
from reptier.grading.tiers import TierInfo, get_tier_info
from reptier.quality.failures import FormCheck, evaluate_form, frame_feedback
from reptier.repdetect.baseline import RepCounter

logger = logging.getLogger(__name__)

EARLY_EXIT_WARNING = (
    "Workout ended early! Your fitness test results will not be saved due to incomplete duration."
)
START_FEEDBACK = "Workout started! Do your first rep."


@dataclass(frozen=True)
class FrameResult:
    """Everything the presentation layer needs after one frame."""

    rep_count: int
    rep_completed: bool
    feedback: str
    form: FormCheck
    tier: Optional[TierInfo] = None


@dataclass(frozen=True)
class WorkoutReport:
    """Summary of a completed workout, ready to hand to persistence."""

    exercise_name: str
    duration: float
    total_reps: int
    tier_name: Optional[str]
    tier_min_reps: Optional[int]
    tier_max_reps: Optional[int]
    completed_at: datetime

    def as_dict(self) -> Dict[str, Any]:
        return {
            "exerciseName": self.exercise_name,
            "duration": self.duration,
            "totalReps": self.total_reps,
            "tierName": self.tier_name,
            "tierMinReps": self.tier_min_reps,
            "tierMaxReps": self.tier_max_reps,
            "completedAt": self.completed_at.isoformat(),
        }


class WorkoutSession:
    """One workout for one exercise; calls on a session must be serialized by the caller."""

    def __init__(self, exercise: Exercise, config: SessionConfig = SessionConfig()) -> None:
        self.exercise = exercise
        self.config = config
        self.counter = RepCounter(exercise.checkpoints, visibility_floor=config.visibility_floor)
        self.active = False
        self.feedback = ""
        self.tier: Optional[TierInfo] = None

    @property
    def rep_count(self) -> int:
        return self.counter.rep_count

    def _refresh_tier(self) -> None:
        if self.exercise.tiers:
            self.tier = get_tier_info(self.counter.rep_count, self.exercise.tiers)

    def start(self) -> None:
        """Begin (or restart) the workout from zero reps."""
        self.counter.reset()
        self.active = True
        self.feedback = START_FEEDBACK
        self.tier = None
        self._refresh_tier()
        logger.info("Workout started: %s", self.exercise.name)

    def process_frame(self, frame: Mapping[str, Landmark]) -> Optional[FrameResult]:
        """Run one pose frame through form checks and rep detection.

        Returns None, without touching any state, when the session is not
        active (before ``start`` or after ``finish``).
        """
        if not self.active:
            return None

        form = evaluate_form(frame, self.exercise.checkpoints, self.config.visibility_floor)
        previous = self.counter.rep_count
        reps = self.counter.detect_rep(frame)
        rep_completed = reps != previous

        self.feedback = frame_feedback(form, rep_completed)
        self._refresh_tier()
        return FrameResult(
            rep_count=reps,
            rep_completed=rep_completed,
            feedback=self.feedback,
            form=form,
            tier=self.tier,
        )

    def finish(self, duration: float, early_exit: bool = False) -> Optional[WorkoutReport]:
        """Stop the workout.

        Args:
            duration: Elapsed workout time in seconds.
            early_exit: The user stopped before the full workout length; no
                report is produced in that case.
        """
        self.active = False
        if early_exit:
            logger.warning(EARLY_EXIT_WARNING)
            self.feedback = EARLY_EXIT_WARNING
            return None

        tier = self.tier
        report = WorkoutReport(
            exercise_name=self.exercise.name or "Unknown",
            duration=duration,
            total_reps=self.counter.rep_count,
            tier_name=tier.current_tier_name if tier else None,
            tier_min_reps=tier.tier_min_reps if tier else None,
            tier_max_reps=tier.tier_max_reps if tier else None,
            completed_at=datetime.now(timezone.utc),
        )
        logger.info(
            "Workout finished: %s, %d reps, tier=%s", report.exercise_name, report.total_reps, report.tier_name
        )
        return report
