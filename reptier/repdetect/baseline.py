"""Checkpoint-driven rep detection.

A rep is a down phase followed by an up phase. A phase is reached on the
first frame where every checkpoint of that phase holds; there is no smoothing
or hysteresis beyond the two phase flags, so a single noisy frame is enough
to trigger a transition.

Transitions per frame, evaluated in this order (the second only when the
first did not fire):

1. not in down phase and all down checkpoints hold -> enter down, clear up.
2. in down phase, not in up phase, all up checkpoints hold -> enter up,
   leave down, count one rep.

A phase without checkpoints always holds.
"""

from __future__ import annotations

import logging
from typing import Mapping, Sequence, Tuple

from reptier.config import VISIBILITY_FLOOR, Checkpoint, Landmark, Phase
from reptier.signals.kinematics import checkpoint_satisfied

logger = logging.getLogger(__name__)


class RepCounter:
    """Counts reps for one exercise within one workout session.

    Not thread-safe: ``detect_rep`` mutates the phase flags in place, so calls
    on one instance must be serialized by the caller.
    """

    def __init__(
        self,
        checkpoints: Sequence[Checkpoint],
        visibility_floor: float = VISIBILITY_FLOOR,
    ) -> None:
        self._checkpoints: Tuple[Checkpoint, ...] = tuple(checkpoints)
        self._down = tuple(cp for cp in self._checkpoints if cp.phase == Phase.DOWN)
        self._up = tuple(cp for cp in self._checkpoints if cp.phase == Phase.UP)
        self.visibility_floor = visibility_floor
        self.reset()

    @property
    def checkpoints(self) -> Tuple[Checkpoint, ...]:
        return self._checkpoints

    @property
    def in_down_phase(self) -> bool:
        return self._in_down_phase

    @property
    def in_up_phase(self) -> bool:
        return self._in_up_phase

    @property
    def rep_count(self) -> int:
        return self._rep_count

    def get_rep_count(self) -> int:
        return self._rep_count

    def reset(self) -> None:
        """Start a fresh rep cycle; the checkpoint set is kept."""
        self._in_down_phase = False
        self._in_up_phase = False
        self._rep_count = 0

    def _phase_met(self, checkpoints: Tuple[Checkpoint, ...], frame: Mapping[str, Landmark]) -> bool:
        return all(checkpoint_satisfied(cp, frame, self.visibility_floor) for cp in checkpoints)

    def detect_rep(self, frame: Mapping[str, Landmark]) -> int:
        """Advance the state machine with one pose frame and return the rep count.

        Args:
            frame: Mapping from landmark name (e.g. ``left_elbow``) to
                :class:`~reptier.config.Landmark`. Missing or low-visibility
                landmarks make the checkpoints using them fail for this frame.
        """
        if not self._in_down_phase and self._phase_met(self._down, frame):
            self._in_down_phase = True
            self._in_up_phase = False
            logger.debug("Entered down phase (reps=%d)", self._rep_count)
        elif self._in_down_phase and not self._in_up_phase and self._phase_met(self._up, frame):
            self._in_up_phase = True
            self._in_down_phase = False
            self._rep_count += 1
            logger.info("Rep %d completed", self._rep_count)

        return self._rep_count
