#!/usr/bin/env python3
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

from __future__ import annotations

import math
from dataclasses import dataclass

from ..core.errors import ValidationError
from ..core.models import PDFGenerationOptions, ResolvedGeometry
from .page_sizes import FALLBACK_DPI, lookup_page_size
from .units import to_pixels, validate_dimensions

# Reference page the percentage-based layouts were tuned against (A4 at 300 DPI).
REFERENCE_SIDE_PX = 2480
REFERENCE_LONG_SIDE_PX = 3508
REFERENCE_DPI = 300

QR_CANVAS_BASE_PX = 1200
QR_CANVAS_MAX_PX = 2400

# Grid spacing at the reference DPI; scaled linearly with dpi / 300.
GRID_MARGIN_X_PX = 20.0
GRID_MARGIN_TOP_PX = 20.0
GRID_MARGIN_BOTTOM_PX = 40.0
GRID_SPACING_H_PX = 10.0
GRID_SPACING_V_PX = 45.0


@dataclass(frozen=True)
class GridLayout:
    cols: int
    rows: int
    cell_size: float
    start_x: float
    start_y: float
    h_spacing: float
    v_spacing: float

    @property
    def capacity(self) -> int:
        return self.cols * self.rows

    def cell_origin(self, slot: int) -> tuple[float, float]:
        row, col = divmod(slot, self.cols)
        x = self.start_x + col * (self.cell_size + self.h_spacing)
        y = self.start_y + row * (self.cell_size + self.v_spacing)
        return x, y


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def dpi_scale(dpi: int) -> float:
    return dpi / REFERENCE_DPI


def resolve_geometry(options: PDFGenerationOptions) -> ResolvedGeometry:
    """Resolve the page size in pixels from custom dimensions or the registry."""
    if options.enable_custom_layout:
        width, height = validate_dimensions(
            options.custom_width, options.custom_height, options.dpi
        )
        width_px = round_half_up(to_pixels(width, options.size_unit, options.dpi))
        height_px = round_half_up(to_pixels(height, options.size_unit, options.dpi))
        if width_px <= 0 or height_px <= 0:
            raise ValidationError("custom dimensions are too small for the selected DPI")
        return ResolvedGeometry(
            page_width_px=width_px,
            page_height_px=height_px,
            dpi=options.dpi,
            source="custom",
        )

    lookup = lookup_page_size(options.page_size, options.dpi)
    return ResolvedGeometry(
        page_width_px=lookup.width_px,
        page_height_px=lookup.height_px,
        dpi=options.dpi,
        source="fallback" if lookup.fallback else "registry",
        requested_size=options.page_size,
        # The fallback pixels describe A4 at its own DPI.
        page_dpi=FALLBACK_DPI if lookup.fallback else None,
    )


def grid_dimensions(per_page: int) -> tuple[int, int]:
    """Return a near-square (cols, rows) packing with capacity >= per_page."""
    if per_page <= 0:
        raise ValidationError("qr codes per page must be a positive integer")
    cols = int(math.isqrt(per_page))
    rows = math.ceil(per_page / cols)
    if cols * rows < per_page:
        cols += 1
        if cols * rows < per_page:
            rows += 1
    return cols, rows


def grid_layout(geometry: ResolvedGeometry, cols: int, rows: int) -> GridLayout:
    scale = dpi_scale(geometry.dpi)
    margin_x = GRID_MARGIN_X_PX * scale
    margin_top = GRID_MARGIN_TOP_PX * scale
    margin_bottom = GRID_MARGIN_BOTTOM_PX * scale
    h_spacing = GRID_SPACING_H_PX * scale
    v_spacing = GRID_SPACING_V_PX * scale

    available_w = geometry.page_width_px - 2 * margin_x
    available_h = geometry.page_height_px - margin_top - margin_bottom

    cell_w = (available_w - (cols - 1) * h_spacing) / cols
    cell_h = (available_h - (rows - 1) * v_spacing) / rows
    cell_size = min(cell_w, cell_h)
    if cell_size <= 0:
        raise ValidationError("page too small for the requested grid")

    grid_w = cols * cell_size + (cols - 1) * h_spacing
    grid_h = rows * cell_size + (rows - 1) * v_spacing
    return GridLayout(
        cols=cols,
        rows=rows,
        cell_size=cell_size,
        start_x=(geometry.page_width_px - grid_w) / 2,
        start_y=margin_top + (available_h - grid_h) / 2,
        h_spacing=h_spacing,
        v_spacing=v_spacing,
    )


def qr_canvas_side(dpi: int) -> int:
    """Raster side used for each QR image; grows with DPI up to a hard cap."""
    return int(min(QR_CANVAS_BASE_PX * dpi_scale(dpi), QR_CANVAS_MAX_PX))


__all__ = [
    "GridLayout",
    "REFERENCE_SIDE_PX",
    "dpi_scale",
    "grid_dimensions",
    "grid_layout",
    "qr_canvas_side",
    "resolve_geometry",
    "round_half_up",
]
