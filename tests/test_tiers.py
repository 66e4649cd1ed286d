import unittest

from reptier.config import ExerciseTier
from reptier.grading import tiers

TWO_TIERS = [
    ExerciseTier("Beginner", 0, 9),
    ExerciseTier("Elite", 10, None),
]

FIVE_TIERS = [
    ExerciseTier("Beginner", 0, 4),
    ExerciseTier("Developing", 5, 9),
    ExerciseTier("Competent", 10, 14),
    ExerciseTier("Proficient", 15, 19),
    ExerciseTier("Elite", 20, None),
]


class GetTierInfoTests(unittest.TestCase):
    def test_zero_reps_is_bottom_of_first_tier(self) -> None:
        info = tiers.get_tier_info(0, TWO_TIERS)
        self.assertEqual(info, tiers.TierInfo("Beginner", 0, 9, 0.0))

    def test_top_of_bounded_tier_is_full_progress(self) -> None:
        info = tiers.get_tier_info(9, TWO_TIERS)
        self.assertEqual(info.current_tier_name, "Beginner")
        self.assertEqual(info.progress_in_tier, 1.0)

    def test_unbounded_tier_is_always_full_progress(self) -> None:
        self.assertEqual(tiers.get_tier_info(15, TWO_TIERS), tiers.TierInfo("Elite", 10, None, 1.0))
        self.assertEqual(tiers.get_tier_info(10, TWO_TIERS).progress_in_tier, 1.0)

    def test_empty_tiers_return_sentinel(self) -> None:
        info = tiers.get_tier_info(5, [])
        self.assertIs(info, tiers.NOT_AVAILABLE)
        self.assertEqual(info.as_dict(), {
            "currentTierName": "N/A",
            "tierMinReps": 0,
            "tierMaxReps": 0,
            "progressInTier": 0.0,
        })

    def test_progress_inside_tier(self) -> None:
        info = tiers.get_tier_info(12, FIVE_TIERS)
        self.assertEqual(info.current_tier_name, "Competent")
        self.assertAlmostEqual(info.progress_in_tier, 0.5)

    def test_unsorted_input_is_sorted(self) -> None:
        shuffled = [FIVE_TIERS[3], FIVE_TIERS[0], FIVE_TIERS[4], FIVE_TIERS[2], FIVE_TIERS[1]]
        self.assertEqual(tiers.get_tier_info(7, shuffled).current_tier_name, "Developing")
        self.assertEqual(tiers.get_tier_info(25, shuffled).current_tier_name, "Elite")

    def test_below_lowest_tier_reports_lowest(self) -> None:
        raised = [ExerciseTier("Intermediate", 5, 9), ExerciseTier("Advanced", 10, None)]
        info = tiers.get_tier_info(2, raised)
        self.assertEqual(info.current_tier_name, "Intermediate")
        self.assertEqual(info.progress_in_tier, 0.0)

    def test_negative_reps_return_sentinel(self) -> None:
        self.assertIs(tiers.get_tier_info(-1, TWO_TIERS), tiers.NOT_AVAILABLE)

    def test_gap_between_tiers_returns_sentinel(self) -> None:
        gapped = [ExerciseTier("Low", 0, 4), ExerciseTier("High", 8, None)]
        self.assertIs(tiers.get_tier_info(6, gapped), tiers.NOT_AVAILABLE)

    def test_overlapping_tiers_pick_first_by_min_reps(self) -> None:
        overlapping = [ExerciseTier("Wide", 0, 20), ExerciseTier("Narrow", 5, 10)]
        self.assertEqual(tiers.get_tier_info(7, overlapping).current_tier_name, "Wide")

    def test_singleton_tier_is_full_progress(self) -> None:
        singleton = [ExerciseTier("One", 1, 1), ExerciseTier("More", 2, None)]
        self.assertEqual(tiers.get_tier_info(1, singleton).progress_in_tier, 1.0)

    def test_above_bounded_top_tier_returns_sentinel(self) -> None:
        bounded = [ExerciseTier("Only", 0, 5)]
        self.assertIs(tiers.get_tier_info(6, bounded), tiers.NOT_AVAILABLE)

    def test_does_not_mutate_input(self) -> None:
        shuffled = [FIVE_TIERS[4], FIVE_TIERS[0]]
        tiers.get_tier_info(3, shuffled)
        self.assertEqual(shuffled, [FIVE_TIERS[4], FIVE_TIERS[0]])


class ClassifyHistoryTests(unittest.TestCase):
    def test_classifies_each_session_in_order(self) -> None:
        history = tiers.classify_history([3, 12, 22], FIVE_TIERS)
        self.assertEqual(
            [info.current_tier_name for info in history],
            ["Beginner", "Competent", "Elite"],
        )

    def test_empty_history(self) -> None:
        self.assertEqual(tiers.classify_history([], FIVE_TIERS), [])


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
