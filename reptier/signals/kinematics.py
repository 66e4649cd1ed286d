"""Joint-angle signals computed from pose landmarks.

Angles are measured in the image (x, y) plane; the depth estimate ``z`` is
too noisy from a single camera to be useful and is ignored.
"""

from __future__ import annotations

from typing import Mapping, Optional

import numpy as np

from reptier.config import VISIBILITY_FLOOR, Checkpoint, Landmark


def angle_between(p1: Landmark, p2: Landmark, p3: Landmark) -> float:
    """Return the included angle at ``p2`` formed by p1-p2-p3, in degrees.

    Returns 0.0 when either segment has zero length (coincident points).
    """
    v1 = np.array([p1.x - p2.x, p1.y - p2.y], dtype=float)
    v2 = np.array([p3.x - p2.x, p3.y - p2.y], dtype=float)

    norm1 = np.linalg.norm(v1)
    norm2 = np.linalg.norm(v2)
    if norm1 == 0 or norm2 == 0:
        return 0.0

    # Clip to absorb float drift outside arccos' domain.
    cosang = np.clip(np.dot(v1, v2) / (norm1 * norm2), -1.0, 1.0)
    return float(np.degrees(np.arccos(cosang)))


def is_visible(landmark: Landmark, visibility_floor: float = VISIBILITY_FLOOR) -> bool:
    """A landmark without a visibility score is treated as visible."""
    return landmark.visibility is None or landmark.visibility >= visibility_floor


def checkpoint_angle(
    checkpoint: Checkpoint,
    frame: Mapping[str, Landmark],
    visibility_floor: float = VISIBILITY_FLOOR,
) -> Optional[float]:
    """Angle for ``checkpoint`` in ``frame``, or None if it cannot be measured.

    A checkpoint cannot be measured when any of its three landmarks is missing
    from the frame or falls below ``visibility_floor``.
    """
    points = [frame.get(name) for name in checkpoint.keypoints]
    if any(p is None or not is_visible(p, visibility_floor) for p in points):
        return None
    return angle_between(*points)


def checkpoint_satisfied(
    checkpoint: Checkpoint,
    frame: Mapping[str, Landmark],
    visibility_floor: float = VISIBILITY_FLOOR,
) -> bool:
    angle = checkpoint_angle(checkpoint, frame, visibility_floor)
    if angle is None:
        return False
    return abs(angle - checkpoint.target_angle) <= checkpoint.tolerance
