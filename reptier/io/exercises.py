"""Exercise definition parsing.

Definitions come from the workout backend as JSON with camelCase keys
(``targetAngle``, ``minReps`` ...). They are validated with Pydantic and
converted into the frozen dataclasses of :mod:`reptier.config`.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from reptier.config import Checkpoint, Exercise, ExerciseTier, Phase

logger = logging.getLogger(__name__)


class ExerciseDefinitionError(ValueError):
    """Raised when an exercise definition is missing or invalid."""


class CheckpointSchema(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    keypoint1: str = Field(..., min_length=1)
    keypoint2: str = Field(..., min_length=1, description="Vertex of the measured angle.")
    keypoint3: str = Field(..., min_length=1)
    target_angle: float = Field(..., alias="targetAngle", description="Target angle in degrees.")
    tolerance: float = Field(..., ge=0, description="Allowed deviation in degrees.")
    phase: Phase

    def to_checkpoint(self) -> Checkpoint:
        return Checkpoint(
            keypoint1=self.keypoint1,
            keypoint2=self.keypoint2,
            keypoint3=self.keypoint3,
            target_angle=self.target_angle,
            tolerance=self.tolerance,
            phase=self.phase,
        )


class TierSchema(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., min_length=1)
    min_reps: int = Field(..., alias="minReps", ge=0)
    max_reps: Optional[int] = Field(None, alias="maxReps", description="None for the highest tier.")

    @model_validator(mode="after")
    def range_not_inverted(self) -> "TierSchema":
        if self.max_reps is not None and self.max_reps < self.min_reps:
            raise ValueError(f"tier {self.name!r}: maxReps must be >= minReps")
        return self

    def to_tier(self) -> ExerciseTier:
        return ExerciseTier(name=self.name, min_reps=self.min_reps, max_reps=self.max_reps)


class ExerciseSchema(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    exercise_id: Optional[str] = Field(None, alias="_id")
    name: str = Field(..., min_length=1)
    description: Optional[str] = ""
    target_muscles: List[str] = Field(default_factory=list, alias="targetMuscles")
    checkpoints: List[CheckpointSchema] = Field(default_factory=list)
    instructions: List[str] = Field(default_factory=list)
    difficulty: Optional[str] = None
    tiers: List[TierSchema] = Field(default_factory=list)

    @field_validator("description")
    @classmethod
    def description_not_null(cls, v: Optional[str]) -> str:
        return v or ""

    def to_exercise(self) -> Exercise:
        return Exercise(
            name=self.name,
            checkpoints=tuple(cp.to_checkpoint() for cp in self.checkpoints),
            tiers=tuple(tier.to_tier() for tier in self.tiers),
            description=self.description or "",
            target_muscles=tuple(self.target_muscles),
            instructions=tuple(self.instructions),
            difficulty=self.difficulty,
            exercise_id=self.exercise_id,
        )


def _warn_on_suspect_definition(exercise: Exercise) -> None:
    """Log tier gaps and empty checkpoint sets; the core never checks them."""
    ordered = sorted(exercise.tiers, key=lambda tier: tier.min_reps)
    for lower, upper in zip(ordered, ordered[1:]):
        if lower.max_reps is None:
            logger.warning(
                "%s: unbounded tier %r is followed by tier %r", exercise.name, lower.name, upper.name
            )
        elif upper.min_reps != lower.max_reps + 1:
            logger.warning(
                "%s: tiers %r and %r do not meet (%d..%d then %d..)",
                exercise.name, lower.name, upper.name, lower.min_reps, lower.max_reps, upper.min_reps,
            )
    if ordered and ordered[-1].max_reps is not None:
        logger.warning("%s: highest tier %r is bounded", exercise.name, ordered[-1].name)
    if not exercise.checkpoints:
        logger.warning("%s: no checkpoints defined; every frame completes a phase", exercise.name)


def parse_exercise(data: Union[str, bytes, Mapping[str, Any]]) -> Exercise:
    """Validate one exercise definition given as JSON text or a decoded mapping."""
    try:
        if isinstance(data, (str, bytes)):
            schema = ExerciseSchema.model_validate_json(data)
        else:
            schema = ExerciseSchema.model_validate(data)
    except ValidationError as exc:
        raise ExerciseDefinitionError(f"Invalid exercise definition: {exc}") from exc

    exercise = schema.to_exercise()
    _warn_on_suspect_definition(exercise)
    return exercise


def _read_json(path: Path) -> Any:
    try:
        return json.loads(Path(path).read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise ExerciseDefinitionError(f"Exercise file not found: {path}") from exc
    except json.JSONDecodeError as exc:
        raise ExerciseDefinitionError(f"Invalid JSON in {path}: {exc}") from exc


def load_exercise(path: Path) -> Exercise:
    """Load a single exercise definition from a JSON file."""
    data = _read_json(path)
    if not isinstance(data, Mapping):
        raise ExerciseDefinitionError(f"{path}: expected a JSON object")
    return parse_exercise(data)


def load_catalog(path: Path) -> Dict[str, Exercise]:
    """Load a JSON list of exercise definitions keyed by exercise name."""
    data = _read_json(path)
    if not isinstance(data, Sequence) or isinstance(data, str):
        raise ExerciseDefinitionError(f"{path}: expected a JSON list of exercises")

    catalog: Dict[str, Exercise] = {}
    for entry in data:
        if not isinstance(entry, Mapping):
            raise ExerciseDefinitionError(f"{path}: every catalog entry must be a JSON object")
        exercise = parse_exercise(entry)
        if exercise.name in catalog:
            raise ExerciseDefinitionError(f"{path}: duplicate exercise name {exercise.name!r}")
        catalog[exercise.name] = exercise
    return catalog
