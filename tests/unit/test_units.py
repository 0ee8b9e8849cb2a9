"""
Unit tests for pair_swap/units.py

Verifies exact decimal <-> base unit conversion and the display formatting
buckets.
"""

import unittest

from pair_swap.units import (
    format_display_balance,
    from_base_units,
    is_positive_amount,
    resolve_decimals,
    strip_trailing_zeros,
    to_base_units,
    truncate_decimals,
)


class TestToBaseUnits(unittest.TestCase):
    def test_pads_fraction(self):
        self.assertEqual(to_base_units("1.5", 18), 1_500_000_000_000_000_000)
        self.assertEqual(to_base_units("3.", 2), 300)

    def test_missing_integer_part(self):
        self.assertEqual(to_base_units(".25", 6), 250_000)

    def test_truncates_excess_fraction(self):
        """Digits beyond the token's decimals are dropped, not rounded."""
        self.assertEqual(to_base_units("1.1234569", 6), 1_123_456)

    def test_zero_decimals(self):
        self.assertEqual(to_base_units("12.9", 0), 12)

    def test_empty_and_transient_values_are_zero(self):
        for decimals in (0, 6, 18):
            self.assertEqual(to_base_units("", decimals), 0)
            self.assertEqual(to_base_units(".", decimals), 0)
            self.assertEqual(to_base_units("0", decimals), 0)
            self.assertEqual(to_base_units(None, decimals), 0)

    def test_malformed_values_are_zero(self):
        self.assertEqual(to_base_units("abc", 18), 0)
        self.assertEqual(to_base_units("1.2.3", 18), 0)
        self.assertEqual(to_base_units("-1", 18), 0)

    def test_large_values_stay_exact(self):
        value = "123456789012345678901234567890.123456789012345678"
        self.assertEqual(
            to_base_units(value, 18),
            123456789012345678901234567890123456789012345678,
        )


class TestFromBaseUnits(unittest.TestCase):
    def test_strips_trailing_zeros(self):
        self.assertEqual(from_base_units(1_500_000, 6), "1.5")
        self.assertEqual(from_base_units(10**18, 18), "1")

    def test_zero(self):
        self.assertEqual(from_base_units(0, 18), "0")

    def test_smallest_unit(self):
        self.assertEqual(from_base_units(1, 18), "0.000000000000000001")

    def test_zero_decimals(self):
        self.assertEqual(from_base_units(5, 0), "5")

    def test_negative_amount_raises(self):
        with self.assertRaises(ValueError):
            from_base_units(-1, 18)

    def test_round_trip_preserves_value(self):
        for decimals in range(19):
            values = ["7", "999999999999"]
            if decimals > 0:
                values += [
                    "0." + "0" * (decimals - 1) + "1",
                    "1." + "9" * decimals,
                    "5." + "5" * decimals,
                ]
            for value in values:
                with self.subTest(value=value, decimals=decimals):
                    self.assertEqual(
                        from_base_units(to_base_units(value, decimals), decimals),
                        value,
                    )

    def test_known_values(self):
        self.assertEqual(from_base_units(1_500_000, 6), "1.5")
        self.assertEqual(to_base_units("1000000.000000000000000001", 18), 10**24 + 1)
        self.assertEqual(to_base_units("7.25", 2), 725)


class TestStringHelpers(unittest.TestCase):
    def test_truncate_decimals(self):
        self.assertEqual(truncate_decimals("1.123456789", 8), "1.12345678")
        self.assertEqual(truncate_decimals("1.5", 8), "1.5")
        self.assertEqual(truncate_decimals("1.99", 0), "1")
        self.assertEqual(truncate_decimals(".99", 0), "0")
        self.assertEqual(truncate_decimals("100", 2), "100")

    def test_strip_trailing_zeros(self):
        self.assertEqual(strip_trailing_zeros("1.500"), "1.5")
        self.assertEqual(strip_trailing_zeros("2.0"), "2")
        self.assertEqual(strip_trailing_zeros("100"), "100")
        self.assertEqual(strip_trailing_zeros("0.000"), "0")

    def test_is_positive_amount(self):
        self.assertTrue(is_positive_amount("0.1"))
        self.assertTrue(is_positive_amount("1."))
        self.assertFalse(is_positive_amount("0.0"))
        self.assertFalse(is_positive_amount("."))
        self.assertFalse(is_positive_amount(""))
        self.assertFalse(is_positive_amount(None))
        self.assertFalse(is_positive_amount("abc"))


class TestResolveDecimals(unittest.TestCase):
    def test_unknown_falls_back_to_default(self):
        self.assertEqual(resolve_decimals(None), 18)
        self.assertEqual(resolve_decimals(None, default=6), 6)

    def test_real_zero_is_kept(self):
        self.assertEqual(resolve_decimals(0), 0)

    def test_string_is_parsed(self):
        self.assertEqual(resolve_decimals("6"), 6)


class TestFormatDisplayBalance(unittest.TestCase):
    def test_tiny_values_use_eight_places(self):
        self.assertEqual(format_display_balance("0.000123456789"), "0.00012346")

    def test_below_one_uses_six_places(self):
        self.assertEqual(format_display_balance("0.5"), "0.500000")

    def test_below_thousand_uses_four_places(self):
        self.assertEqual(format_display_balance("12.34567"), "12.3457")

    def test_large_values_are_grouped(self):
        self.assertEqual(format_display_balance("1234567.891"), "1,234,567.89")
        self.assertEqual(format_display_balance("1000"), "1,000")

    def test_unparseable_values(self):
        self.assertEqual(format_display_balance(None), "0.00")
        self.assertEqual(format_display_balance("abc"), "0.00")
        self.assertEqual(format_display_balance("NaN"), "0.00")


if __name__ == "__main__":
    unittest.main()
