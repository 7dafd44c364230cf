"""Unit tests for karma rank tiers."""

import unittest

from app.fmv.karma import KARMA_WEIGHT_STEP, karma_weight, resolve_karma_rank


class KarmaRankTests(unittest.TestCase):
    def test_tier_boundaries_are_inclusive_lower_bounds(self) -> None:
        expectations = [
            (0, "Newbie", 1),
            (10, "Newbie", 1),
            (11, "Regular", 2),
            (50, "Regular", 2),
            (51, "Trusted", 3),
            (100, "Trusted", 3),
            (101, "Expert", 4),
            (499, "Expert", 4),
            (500, "Legend", 5),
            (10_000, "Legend", 5),
        ]
        for score, title, level in expectations:
            with self.subTest(score=score):
                rank = resolve_karma_rank(score)
                self.assertEqual(rank.title, title)
                self.assertEqual(rank.level, level)

    def test_negative_and_missing_scores_clamp_to_newbie(self) -> None:
        self.assertEqual(resolve_karma_rank(-25).title, "Newbie")
        self.assertEqual(resolve_karma_rank(None).level, 1)

    def test_weight_policy_adds_one_step_per_tier(self) -> None:
        self.assertEqual(KARMA_WEIGHT_STEP, 0.1)
        self.assertAlmostEqual(karma_weight(1), 1.0)
        self.assertAlmostEqual(karma_weight(3), 1.2)
        self.assertAlmostEqual(karma_weight(5), 1.4)
        self.assertAlmostEqual(karma_weight(0), 1.0)


if __name__ == "__main__":
    unittest.main()
