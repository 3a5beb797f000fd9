# Copyright (C) 2026 Alex Stoyanov
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License along with this program.
# If not, see <https://www.gnu.org/licenses/>.

import math
import unittest

from qrpress.core.errors import ValidationError
from qrpress.render.units import parse_dimension, to_pixels, validate_dimensions


class TestToPixels(unittest.TestCase):
    def test_inches_scale_by_dpi(self) -> None:
        self.assertEqual(to_pixels(1, "in", 300), 300)
        self.assertEqual(to_pixels(4, "in", 150), 600)
        self.assertEqual(to_pixels(8.5, "in", 72), 612)

    def test_millimetres_convert_through_inches(self) -> None:
        self.assertAlmostEqual(to_pixels(25.4, "mm", 300), 300)
        self.assertAlmostEqual(to_pixels(210, "mm", 150), 210 / 25.4 * 150)

    def test_unknown_unit_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            to_pixels(1, "cm", 300)


class TestValidateDimensions(unittest.TestCase):
    def test_accepts_numbers_and_numeric_text(self) -> None:
        self.assertEqual(validate_dimensions("4", " 6.5 ", 150), (4.0, 6.5))
        self.assertEqual(validate_dimensions(4, 6, 300), (4.0, 6.0))

    def test_rejects_bad_values(self) -> None:
        cases = (
            (0, 6),
            (-1, 6),
            ("abc", 6),
            ("", 6),
            (None, 6),
            (math.nan, 6),
            (math.inf, 6),
            (True, 6),
            (4, 0),
        )
        for width, height in cases:
            with self.subTest(width=width, height=height):
                with self.assertRaises(ValidationError):
                    validate_dimensions(width, height, 150)

    def test_rejects_non_positive_dpi(self) -> None:
        for dpi in (0, -72, "300", None):
            with self.subTest(dpi=dpi):
                with self.assertRaises(ValidationError):
                    validate_dimensions(4, 6, dpi)

    def test_parse_dimension_names_the_field(self) -> None:
        with self.assertRaises(ValidationError) as ctx:
            parse_dimension("wide", label="custom width")
        self.assertIn("custom width", str(ctx.exception))


if __name__ == "__main__":
    unittest.main()
