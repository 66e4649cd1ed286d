"""Landmark vocabulary shared with the pose estimator.

Pose estimators (MediaPipe Pose / BlazePose) emit landmarks as an
index-ordered list. Exercise checkpoints refer to landmarks by name, so each
frame is converted into a name-keyed mapping before rep detection.
"""

from __future__ import annotations

from typing import Dict, Sequence, Tuple

from reptier.config import Checkpoint, Landmark

# BlazePose indices for the joints exercise checkpoints can reference.
LANDMARK_INDEX: Dict[str, int] = {
    "left_shoulder": 11,
    "right_shoulder": 12,
    "left_elbow": 13,
    "right_elbow": 14,
    "left_wrist": 15,
    "right_wrist": 16,
    "left_hip": 23,
    "right_hip": 24,
    "left_knee": 25,
    "right_knee": 26,
    "left_ankle": 27,
    "right_ankle": 28,
}

LANDMARK_NAMES: Dict[int, str] = {index: name for name, index in LANDMARK_INDEX.items()}


def frame_from_landmarks(landmarks: Sequence[Landmark]) -> Dict[str, Landmark]:
    """Map an index-ordered landmark list to the named tracked joints.

    Joints whose index lies past the end of ``landmarks`` are left out, which
    downstream code treats the same as an occluded joint.
    """
    return {
        name: landmarks[index]
        for name, index in LANDMARK_INDEX.items()
        if index < len(landmarks)
    }


def skeleton_connections(checkpoint: Checkpoint) -> Tuple[Tuple[str, str], Tuple[str, str]]:
    """Return the two bone segments meeting at the checkpoint's vertex."""
    return (
        (checkpoint.keypoint1, checkpoint.keypoint2),
        (checkpoint.keypoint2, checkpoint.keypoint3),
    )
