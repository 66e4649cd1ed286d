import unittest

from reptier.config import Checkpoint, Landmark, Phase
from reptier.signals import kinematics


def lm(x: float, y: float, visibility=None) -> Landmark:
    return Landmark(x=x, y=y, z=0.0, visibility=visibility)


ELBOW_UP = Checkpoint(
    keypoint1="left_shoulder",
    keypoint2="left_elbow",
    keypoint3="left_wrist",
    target_angle=90.0,
    tolerance=10.0,
    phase=Phase.UP,
)


class AngleBetweenTests(unittest.TestCase):
    def test_right_angle(self) -> None:
        angle = kinematics.angle_between(lm(1, 0), lm(0, 0), lm(0, 1))
        self.assertAlmostEqual(angle, 90.0, delta=1e-6)

    def test_straight_line_is_180(self) -> None:
        angle = kinematics.angle_between(lm(0.2, 0.5), lm(0.5, 0.5), lm(0.8, 0.5))
        self.assertAlmostEqual(angle, 180.0, delta=1e-6)

    def test_zero_length_segment_returns_zero(self) -> None:
        p = lm(0.3, 0.4)
        self.assertEqual(kinematics.angle_between(p, p, lm(0.9, 0.1)), 0.0)
        self.assertEqual(kinematics.angle_between(lm(0.9, 0.1), p, p), 0.0)

    def test_symmetric_in_outer_points(self) -> None:
        p1, p2, p3 = lm(0.12, 0.87), lm(0.45, 0.33), lm(0.91, 0.58)
        self.assertEqual(
            kinematics.angle_between(p1, p2, p3),
            kinematics.angle_between(p3, p2, p1),
        )

    def test_depth_is_ignored(self) -> None:
        flat = kinematics.angle_between(lm(1, 0), lm(0, 0), lm(0, 1))
        deep = kinematics.angle_between(
            Landmark(1, 0, 5.0), Landmark(0, 0, -3.0), Landmark(0, 1, 0.7)
        )
        self.assertAlmostEqual(flat, deep)

    def test_collinear_same_direction_does_not_produce_nan(self) -> None:
        angle = kinematics.angle_between(lm(0.1, 0.1), lm(0.0, 0.0), lm(0.3, 0.3))
        self.assertAlmostEqual(angle, 0.0, delta=1e-4)


class CheckpointSatisfiedTests(unittest.TestCase):
    def frame(self, **visibility):
        return {
            "left_shoulder": lm(1, 0, visibility.get("shoulder")),
            "left_elbow": lm(0, 0, visibility.get("elbow")),
            "left_wrist": lm(0, 1, visibility.get("wrist")),
        }

    def test_within_tolerance(self) -> None:
        self.assertTrue(kinematics.checkpoint_satisfied(ELBOW_UP, self.frame()))

    def test_outside_tolerance(self) -> None:
        checkpoint = Checkpoint("left_shoulder", "left_elbow", "left_wrist", 160.0, 10.0, Phase.DOWN)
        self.assertFalse(kinematics.checkpoint_satisfied(checkpoint, self.frame()))

    def test_tolerance_bound_is_inclusive(self) -> None:
        frame = self.frame()
        angle = kinematics.angle_between(*(frame[name] for name in ELBOW_UP.keypoints))
        checkpoint = Checkpoint(
            "left_shoulder", "left_elbow", "left_wrist", angle - 10.0, 10.0, Phase.UP
        )
        self.assertTrue(kinematics.checkpoint_satisfied(checkpoint, frame))

    def test_missing_landmark(self) -> None:
        frame = self.frame()
        del frame["left_wrist"]
        self.assertFalse(kinematics.checkpoint_satisfied(ELBOW_UP, frame))
        self.assertIsNone(kinematics.checkpoint_angle(ELBOW_UP, frame))

    def test_low_visibility(self) -> None:
        self.assertFalse(kinematics.checkpoint_satisfied(ELBOW_UP, self.frame(elbow=0.79)))

    def test_zero_visibility_is_not_treated_as_absent(self) -> None:
        self.assertFalse(kinematics.checkpoint_satisfied(ELBOW_UP, self.frame(wrist=0.0)))

    def test_visibility_at_floor_passes(self) -> None:
        frame = self.frame(shoulder=0.8, elbow=0.95, wrist=1.0)
        self.assertTrue(kinematics.checkpoint_satisfied(ELBOW_UP, frame))

    def test_custom_visibility_floor(self) -> None:
        frame = self.frame(elbow=0.5)
        self.assertTrue(kinematics.checkpoint_satisfied(ELBOW_UP, frame, visibility_floor=0.4))


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
