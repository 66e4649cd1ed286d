"""Per-frame form checks and the live feedback shown during a workout.

Every checkpoint of the exercise is inspected on every frame, regardless of
the phase the lifter is in. Occluded joints and out-of-tolerance angles are
flagged so an overlay can highlight them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Mapping, Sequence, Tuple

from reptier.config import VISIBILITY_FLOOR, Checkpoint, Landmark
from reptier.signals.kinematics import checkpoint_angle
from reptier.vision.keypoints import skeleton_connections

MSG_NOT_VISIBLE = "Ensure full body is visible!"
MSG_GREAT_REP = "Great Rep!"
MSG_GOOD_FORM = "Good form!"
MSG_ADJUST = "Adjust your position."
MSG_TOO_SHALLOW = "Too shallow at {joint}! Angle: {angle:.0f}°"
MSG_TOO_DEEP = "Too deep/overextended at {joint}! Angle: {angle:.0f}°"


@dataclass(frozen=True)
class FormCheck:
    """Outcome of checking one frame against all checkpoints.

    Attributes:
        form_correct: True when every checkpoint could be measured and held.
        message: Feedback for the most relevant problem, empty when none.
        flagged_joints: Landmark names to highlight, in first-seen order.
        flagged_connections: Bone segments to highlight, in first-seen order.
    """

    form_correct: bool
    message: str = ""
    flagged_joints: Tuple[str, ...] = ()
    flagged_connections: Tuple[Tuple[str, str], ...] = ()


def _flag(items: List, *new) -> None:
    for item in new:
        if item not in items:
            items.append(item)


def evaluate_form(
    frame: Mapping[str, Landmark],
    checkpoints: Sequence[Checkpoint],
    visibility_floor: float = VISIBILITY_FLOOR,
) -> FormCheck:
    """Check ``frame`` against ``checkpoints``.

    A visibility problem only sets the message when nothing was reported yet;
    an angle problem always replaces it, so the last failing angle wins.
    """
    form_correct = True
    message = ""
    joints: List[str] = []
    connections: List[Tuple[str, str]] = []

    for checkpoint in checkpoints:
        angle = checkpoint_angle(checkpoint, frame, visibility_floor)
        if angle is None:
            form_correct = False
            if not message:
                message = MSG_NOT_VISIBLE
            _flag(joints, *checkpoint.keypoints)
            continue

        if abs(angle - checkpoint.target_angle) <= checkpoint.tolerance:
            continue

        form_correct = False
        template = MSG_TOO_SHALLOW if angle < checkpoint.target_angle else MSG_TOO_DEEP
        message = template.format(joint=checkpoint.keypoint2, angle=angle)
        _flag(connections, *skeleton_connections(checkpoint))
        _flag(joints, *checkpoint.keypoints)

    return FormCheck(
        form_correct=form_correct,
        message=message,
        flagged_joints=tuple(joints),
        flagged_connections=tuple(connections),
    )


def frame_feedback(form: FormCheck, rep_completed: bool) -> str:
    """Pick the feedback line to display for a processed frame."""
    if rep_completed:
        return MSG_GREAT_REP
    if form.form_correct and not form.message:
        return MSG_GOOD_FORM
    if form.message:
        return form.message
    return MSG_ADJUST
