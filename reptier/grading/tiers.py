"""Skill-tier classification from a rep count."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Union

from reptier.config import ExerciseTier


@dataclass(frozen=True)
class TierInfo:
    """Tier matched for a rep count and the progress made inside it.

    Attributes:
        current_tier_name: Name of the matched tier, or ``"N/A"``.
        tier_min_reps: Lower bound of the matched tier.
        tier_max_reps: Upper bound, None for the unbounded top tier.
        progress_in_tier: Fraction of the tier range covered, in [0, 1].
    """

    current_tier_name: str
    tier_min_reps: int
    tier_max_reps: Optional[int]
    progress_in_tier: float

    def as_dict(self) -> Dict[str, Union[str, int, float, None]]:
        return {
            "currentTierName": self.current_tier_name,
            "tierMinReps": self.tier_min_reps,
            "tierMaxReps": self.tier_max_reps,
            "progressInTier": self.progress_in_tier,
        }


NOT_AVAILABLE = TierInfo(
    current_tier_name="N/A",
    tier_min_reps=0,
    tier_max_reps=0,
    progress_in_tier=0.0,
)


def _progress(reps: int, tier: ExerciseTier) -> float:
    if tier.max_reps is None:
        return 1.0
    tier_range = tier.max_reps - tier.min_reps
    if tier_range <= 0:
        return 1.0
    return min(1.0, max(0.0, (reps - tier.min_reps) / tier_range))


def get_tier_info(current_reps: int, tiers: Sequence[ExerciseTier]) -> TierInfo:
    """Classify ``current_reps`` into one of ``tiers``.

    Tiers are sorted by ``min_reps`` and the first one whose range contains
    the count wins. Gaps or overlaps in the definitions are not detected.
    A non-negative count below the lowest tier is reported as the lowest
    tier; anything else unmatched (including an empty tier list) yields
    :data:`NOT_AVAILABLE`.
    """
    sorted_tiers = sorted(tiers, key=lambda tier: tier.min_reps)

    current = next((tier for tier in sorted_tiers if tier.contains(current_reps)), None)
    if current is None:
        if sorted_tiers and 0 <= current_reps < sorted_tiers[0].min_reps:
            current = sorted_tiers[0]
        else:
            return NOT_AVAILABLE

    return TierInfo(
        current_tier_name=current.name,
        tier_min_reps=current.min_reps,
        tier_max_reps=current.max_reps,
        progress_in_tier=_progress(current_reps, current),
    )


def classify_history(rep_counts: Iterable[int], tiers: Sequence[ExerciseTier]) -> List[TierInfo]:
    """Tier each past session's rep count, in the order given."""
    return [get_tier_info(reps, tiers) for reps in rep_counts]
