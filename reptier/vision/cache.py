"""On-disk recordings of pose-estimator output.

A recording is a JSONL file with one pose frame per line, so a workout can be
replayed offline through the rep counter without a camera or pose model.
Each line is validated on load; a bad coordinate is reported with its line
number instead of surfacing later inside the angle maths.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Sequence

import numpy as np
from pydantic import BaseModel, Field, ValidationError

from reptier.config import Landmark
from reptier.vision.keypoints import frame_from_landmarks


class RecordingError(ValueError):
    """Raised when a recording line cannot be decoded into a pose frame."""


@dataclass(frozen=True)
class PoseFrame:
    """Pose data for a single frame, landmarks in estimator index order."""

    frame_index: int
    timestamp: float
    landmarks: List[Landmark]
    score: float | None = None

    def named_landmarks(self) -> Dict[str, Landmark]:
        return frame_from_landmarks(self.landmarks)


class LandmarkRecord(BaseModel):
    x: float = Field(..., allow_inf_nan=False)
    y: float = Field(..., allow_inf_nan=False)
    z: float = Field(0.0, allow_inf_nan=False)
    visibility: Optional[float] = Field(None, ge=0.0, le=1.0)


class FrameRecord(BaseModel):
    """One JSONL line of a recording."""

    frame_index: int = Field(..., ge=0)
    timestamp: float = Field(..., ge=0.0, allow_inf_nan=False, description="Seconds since recording start.")
    score: Optional[float] = None
    landmarks: List[LandmarkRecord] = Field(default_factory=list)

    @classmethod
    def from_frame(cls, frame: PoseFrame) -> "FrameRecord":
        return cls(
            frame_index=frame.frame_index,
            timestamp=frame.timestamp,
            score=frame.score,
            landmarks=[LandmarkRecord(x=lm.x, y=lm.y, z=lm.z, visibility=lm.visibility) for lm in frame.landmarks],
        )

    def to_frame(self) -> PoseFrame:
        return PoseFrame(
            frame_index=self.frame_index,
            timestamp=self.timestamp,
            landmarks=[Landmark(lm.x, lm.y, lm.z, lm.visibility) for lm in self.landmarks],
            score=self.score,
        )


def save_pose_frames(
    recording: Path, frames: Iterable[PoseFrame], *, overwrite: bool = True
) -> Path:
    """Write pose frames to a JSONL recording, creating parent directories.

    Raises:
        FileExistsError: ``recording`` exists and ``overwrite`` is False.
    """
    if recording.exists() and not overwrite:
        raise FileExistsError(f"Recording already exists: {recording}")
    recording.parent.mkdir(parents=True, exist_ok=True)

    lines = (FrameRecord.from_frame(frame).model_dump_json() + "\n" for frame in frames)
    with recording.open("w", encoding="utf-8") as fh:
        fh.writelines(lines)
    return recording


def load_pose_frames(recording: Path) -> Iterator[PoseFrame]:
    """Read pose frames from a JSONL recording, skipping blank lines."""
    with recording.open("r", encoding="utf-8") as fh:
        for line_no, line in enumerate(fh, start=1):
            if not line.strip():
                continue
            try:
                record = FrameRecord.model_validate_json(line)
            except ValidationError as exc:
                raise RecordingError(f"{recording}:{line_no}: invalid pose frame ({exc})") from exc
            yield record.to_frame()


def recording_duration(frames: Sequence[PoseFrame]) -> float:
    """Seconds covered by ``frames``, counting the last frame's own interval.

    The interval is the median spacing between consecutive timestamps, so
    1800 frames at 30 fps cover 60 s. Fewer than two frames cover 0.0.
    """
    if len(frames) < 2:
        return 0.0
    timestamps = np.array([frame.timestamp for frame in frames], dtype=float)
    interval = float(np.median(np.diff(timestamps)))
    return float(timestamps[-1] - timestamps[0]) + interval
