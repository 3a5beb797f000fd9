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

import unittest

from qrpress.core.errors import ValidationError
from qrpress.core.models import QR_CODES_PER_PAGE_OPTIONS, ResolvedGeometry
from qrpress.render.geometry import (
    grid_dimensions,
    grid_layout,
    qr_canvas_side,
    resolve_geometry,
    round_half_up,
)
from tests.test_support import make_options


class TestResolveGeometry(unittest.TestCase):
    def test_registry_geometry(self) -> None:
        geometry = resolve_geometry(make_options(page_size="A4", dpi=150))
        self.assertEqual((geometry.page_width_px, geometry.page_height_px), (1240, 1754))
        self.assertEqual(geometry.source, "registry")
        self.assertEqual(geometry.orientation, "portrait")
        self.assertEqual(geometry.requested_size, "A4")

    def test_custom_geometry_in_inches(self) -> None:
        geometry = resolve_geometry(
            make_options(
                enable_custom_layout=True,
                custom_width="4",
                custom_height="6",
                size_unit="in",
                dpi=150,
            )
        )
        self.assertEqual((geometry.page_width_px, geometry.page_height_px), (600, 900))
        self.assertEqual(geometry.orientation, "portrait")
        self.assertEqual(geometry.source, "custom")

    def test_custom_geometry_landscape_in_mm(self) -> None:
        geometry = resolve_geometry(
            make_options(
                enable_custom_layout=True,
                custom_width=297,
                custom_height=210,
                size_unit="mm",
                dpi=300,
            )
        )
        self.assertEqual(geometry.page_width_px, round_half_up(297 / 25.4 * 300))
        self.assertEqual(geometry.page_height_px, round_half_up(210 / 25.4 * 300))
        self.assertEqual(geometry.orientation, "landscape")

    def test_custom_layout_requires_dimensions(self) -> None:
        with self.assertRaises(ValidationError):
            resolve_geometry(make_options(enable_custom_layout=True, custom_width="4"))

    def test_custom_dimensions_ignored_when_disabled(self) -> None:
        geometry = resolve_geometry(
            make_options(custom_width="4", custom_height="6", page_size="A6", dpi=72)
        )
        self.assertEqual((geometry.page_width_px, geometry.page_height_px), (298, 420))

    def test_unmapped_size_uses_flagged_fallback(self) -> None:
        geometry = resolve_geometry(make_options(page_size="A0", dpi=150))
        self.assertTrue(geometry.is_fallback)
        self.assertEqual((geometry.page_width_px, geometry.page_height_px), (2480, 3508))
        self.assertEqual(geometry.dpi, 150)
        self.assertEqual(geometry.page_dpi, 300)
        self.assertEqual(geometry.document_dpi, 300)
        self.assertEqual(geometry.requested_size, "A0")

    def test_fallback_grid_keeps_requested_dpi_scale(self) -> None:
        geometry = resolve_geometry(make_options(page_size="A0", dpi=72))
        layout = grid_layout(geometry, 2, 2)
        self.assertAlmostEqual(layout.h_spacing, 10 * 72 / 300)
        self.assertAlmostEqual(layout.v_spacing, 45 * 72 / 300)


class TestGridDimensions(unittest.TestCase):
    def test_known_packings(self) -> None:
        expected = {
            2: (1, 2),
            4: (2, 2),
            6: (2, 3),
            8: (2, 4),
            12: (3, 4),
            15: (3, 5),
            20: (4, 5),
            24: (4, 6),
            30: (5, 6),
        }
        for count, packing in expected.items():
            with self.subTest(count=count):
                self.assertEqual(grid_dimensions(count), packing)

    def test_packing_covers_count_without_a_spare_column(self) -> None:
        for count in (*QR_CODES_PER_PAGE_OPTIONS, 1, 3, 5, 7, 10, 50, 99):
            with self.subTest(count=count):
                cols, rows = grid_dimensions(count)
                self.assertGreaterEqual(cols * rows, count)
                self.assertLess(cols * rows - count, cols)
                self.assertLessEqual(cols, rows)

    def test_rejects_non_positive(self) -> None:
        for count in (0, -4):
            with self.subTest(count=count):
                with self.assertRaises(ValidationError):
                    grid_dimensions(count)


class TestGridLayout(unittest.TestCase):
    def test_two_by_two_on_a4_at_150(self) -> None:
        geometry = ResolvedGeometry(page_width_px=1240, page_height_px=1754, dpi=150)
        layout = grid_layout(geometry, 2, 2)
        self.assertAlmostEqual(layout.cell_size, 607.5)
        self.assertAlmostEqual(layout.start_x, 10.0)
        self.assertAlmostEqual(layout.start_y, 253.25)
        self.assertEqual(layout.capacity, 4)
        x, y = layout.cell_origin(3)
        self.assertAlmostEqual(x, 622.5)
        self.assertAlmostEqual(y, 883.25)

    def test_block_is_horizontally_centred(self) -> None:
        geometry = ResolvedGeometry(page_width_px=2480, page_height_px=3508, dpi=300)
        layout = grid_layout(geometry, 3, 4)
        grid_w = 3 * layout.cell_size + 2 * layout.h_spacing
        self.assertAlmostEqual(layout.start_x * 2 + grid_w, 2480)

    def test_page_too_small_for_grid(self) -> None:
        geometry = ResolvedGeometry(page_width_px=20, page_height_px=20, dpi=300)
        with self.assertRaises(ValidationError):
            grid_layout(geometry, 5, 6)


class TestCanvasSide(unittest.TestCase):
    def test_canvas_side_scales_with_dpi(self) -> None:
        self.assertEqual(qr_canvas_side(72), 288)
        self.assertEqual(qr_canvas_side(150), 600)
        self.assertEqual(qr_canvas_side(300), 1200)
        self.assertEqual(qr_canvas_side(1200), 2400)

    def test_round_half_up(self) -> None:
        self.assertEqual(round_half_up(2.5), 3)
        self.assertEqual(round_half_up(0.5), 1)
        self.assertEqual(round_half_up(66.666), 67)
        self.assertEqual(round_half_up(86.8), 87)


if __name__ == "__main__":
    unittest.main()
