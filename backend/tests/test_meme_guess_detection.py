"""Unit tests for meme guess (outlier) detection policy."""

import unittest
from decimal import Decimal

from app.fmv.outliers import OUTLIER_MAX_RATIO, OUTLIER_MIN_RATIO, is_outlier


class MemeGuessDetectionTests(unittest.TestCase):
    def test_policy_band_is_twenty_to_five_hundred_percent(self) -> None:
        self.assertEqual(OUTLIER_MIN_RATIO, 0.2)
        self.assertEqual(OUTLIER_MAX_RATIO, 5.0)

    def test_missing_or_non_positive_reference_never_flags(self) -> None:
        self.assertFalse(is_outlier(1, None))
        self.assertFalse(is_outlier(1, 0))
        self.assertFalse(is_outlier(10_000_000, -5))

    def test_one_euro_guess_on_assessed_property_is_flagged(self) -> None:
        self.assertTrue(is_outlier(1, 400_000))

    def test_band_edges_are_not_outliers(self) -> None:
        self.assertFalse(is_outlier(80_000, 400_000))
        self.assertFalse(is_outlier(2_000_000, 400_000))
        self.assertTrue(is_outlier(79_999, 400_000))
        self.assertTrue(is_outlier(2_000_001, 400_000))

    def test_accepts_decimal_inputs_and_custom_band(self) -> None:
        self.assertFalse(is_outlier(Decimal("350000.00"), Decimal("400000.00")))
        self.assertTrue(is_outlier(350_000, 400_000, min_ratio=0.9, max_ratio=1.1))


if __name__ == "__main__":
    unittest.main()
