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
from dataclasses import dataclass, field
from datetime import datetime
from typing import Final, Protocol, Sequence

from ..core.errors import UnknownStyleError, ValidationError
from ..core.models import (
    STYLE_GRID,
    STYLE_MINIMAL,
    STYLE_STANDARD,
    PDFGenerationOptions,
    QRCodeRecord,
    ResolvedGeometry,
)
from .geometry import (
    REFERENCE_LONG_SIDE_PX,
    REFERENCE_SIDE_PX,
    dpi_scale,
    grid_dimensions,
    grid_layout,
    round_half_up,
)
from .text import long_date, short_date
from .types import LineItem, PagePlan, QrItem, TextItem

DEFAULT_BRAND: Final = "FlashQR"
DEFAULT_THANK_YOU: Final = "Thank you for using our service!"
SCAN_HINT: Final = "Scan me with your smartphone camera."

# Standard style proportions, relative to the shorter page side.
STANDARD_MARGIN_RATIO = 0.07
STANDARD_QR_RATIO = 0.63
STANDARD_HEADING_RATIO = 0.12
STANDARD_URL_RATIO = 0.07
STANDARD_HELPER_RATIO = 0.055
STANDARD_HELPER_MIN_PX = 9
STANDARD_FOOTER_OFFSET = 1.2
STANDARD_FOOTER_INSET_PX = 5

MINIMAL_QR_RATIO = 0.70


@dataclass(frozen=True)
class LayoutContext:
    collection_name: str = ""
    generated_at: datetime = field(default_factory=datetime.now)
    brand: str = DEFAULT_BRAND
    thank_you_message: str = DEFAULT_THANK_YOU


class LayoutStrategy(Protocol):
    style: str

    def plan(
        self,
        records: Sequence[QRCodeRecord],
        geometry: ResolvedGeometry,
        options: PDFGenerationOptions,
        context: LayoutContext,
    ) -> list[PagePlan]: ...


@dataclass(frozen=True)
class StandardLayout:
    """Cover page followed by one branded page per record."""

    style: str = STYLE_STANDARD

    def plan(
        self,
        records: Sequence[QRCodeRecord],
        geometry: ResolvedGeometry,
        options: PDFGenerationOptions,
        context: LayoutContext,
    ) -> list[PagePlan]:
        pages = [self.cover_page(geometry, context)]
        for index, record in enumerate(records):
            if not record.has_url:
                continue
            pages.append(self.record_page(index, record, geometry, context))
        return pages

    def cover_page(self, geometry: ResolvedGeometry, context: LayoutContext) -> PagePlan:
        width = geometry.page_width_px
        height = geometry.page_height_px
        scale = geometry.min_side / REFERENCE_SIDE_PX

        lines = (
            (context.collection_name, max(24.0, 48 * scale), "#333333"),
            (f"Downloaded on: {long_date(context.generated_at)}", max(12.0, 24 * scale), "#777777"),
            (context.thank_you_message, max(16.0, 32 * scale), "#333333"),
        )
        line_spacing = 20 * scale
        block_height = sum(size for _text, size, _color in lines)
        block_height += line_spacing * (len(lines) - 1)

        items: list[TextItem] = []
        y = (height - block_height) / 2
        for text, size, color in lines:
            items.append(
                TextItem(
                    text=text,
                    x=width / 2,
                    y=y + size * 0.75,
                    font_size=size,
                    color=color,
                    align="center",
                )
            )
            y += size + line_spacing
        return PagePlan(kind="cover", items=tuple(items))

    def record_page(
        self,
        index: int,
        record: QRCodeRecord,
        geometry: ResolvedGeometry,
        context: LayoutContext,
    ) -> PagePlan:
        width = geometry.page_width_px
        height = geometry.page_height_px
        short_side = geometry.min_side
        margin = round_half_up(STANDARD_MARGIN_RATIO * short_side)
        qr_block = round_half_up(STANDARD_QR_RATIO * short_side)
        heading_size = round_half_up(qr_block * STANDARD_HEADING_RATIO)
        url_size = round_half_up(qr_block * STANDARD_URL_RATIO)
        helper_size = max(STANDARD_HELPER_MIN_PX, round_half_up(qr_block * STANDARD_HELPER_RATIO))

        items: list[TextItem | QrItem] = []
        y = float(margin + heading_size)
        if record.name:
            items.append(
                TextItem(
                    text=record.name,
                    x=width / 2,
                    y=y,
                    font_size=heading_size,
                    color="#212121",
                    bold=True,
                    align="center",
                )
            )

        y += margin
        items.append(QrItem(record_index=index, x=(width - qr_block) / 2, y=y, size=qr_block))

        y += qr_block + margin / 2
        items.append(
            TextItem(
                text=SCAN_HINT,
                x=width / 2,
                y=y,
                font_size=helper_size,
                color="#6b7280",
                align="center",
            )
        )

        y += helper_size + margin / 4
        items.append(
            TextItem(
                text=record.url,
                x=width / 2,
                y=y,
                font_size=url_size,
                color="#009688",
                align="center",
            )
        )

        footer_y = height - margin * STANDARD_FOOTER_OFFSET
        if record.created_at is not None:
            items.append(
                TextItem(
                    text=f"Created: {short_date(record.created_at)}",
                    x=margin + STANDARD_FOOTER_INSET_PX,
                    y=footer_y,
                    font_size=helper_size,
                    color="#bdbdbd",
                )
            )
        items.append(
            TextItem(
                text=f"© {context.generated_at.year} {context.brand}",
                x=width - margin - STANDARD_FOOTER_INSET_PX,
                y=footer_y,
                font_size=helper_size,
                color="#bdbdbd",
                align="right",
            )
        )
        return PagePlan(kind="record", items=tuple(items), slots=1, record_indices=(index,))


@dataclass(frozen=True)
class MinimalLayout:
    """One centred QR per page with an optional name underneath."""

    style: str = STYLE_MINIMAL

    def plan(
        self,
        records: Sequence[QRCodeRecord],
        geometry: ResolvedGeometry,
        options: PDFGenerationOptions,
        context: LayoutContext,
    ) -> list[PagePlan]:
        pages = [
            self.record_page(index, record, geometry, options)
            for index, record in enumerate(records)
            if record.has_url
        ]
        if not pages:
            raise ValidationError("none of the QR codes has a URL to export")
        return pages

    def record_page(
        self,
        index: int,
        record: QRCodeRecord,
        geometry: ResolvedGeometry,
        options: PDFGenerationOptions,
    ) -> PagePlan:
        width = geometry.page_width_px
        height = geometry.page_height_px
        size = geometry.min_side * MINIMAL_QR_RATIO
        x = (width - size) / 2
        y = (height - size) / 2
        items: list[TextItem | QrItem] = [QrItem(record_index=index, x=x, y=y, size=size)]

        if options.show_name and record.name:
            scale = dpi_scale(geometry.dpi) * (min(width, REFERENCE_LONG_SIDE_PX) / REFERENCE_SIDE_PX)
            font_size = max(8.0, 18 * scale)
            margin_top = max(15.0, 30 * scale)
            items.append(
                TextItem(
                    text=record.name,
                    x=width / 2,
                    y=y + size + margin_top,
                    font_size=font_size,
                    color="#333333",
                    align="center",
                )
            )
        return PagePlan(kind="record", items=tuple(items), slots=1, record_indices=(index,))


@dataclass(frozen=True)
class GridLayoutStrategy:
    """Row-major grid of ``qr_codes_per_page`` cells per page.

    A record without a URL still takes its cell, leaving a visible gap.
    """

    style: str = STYLE_GRID

    def plan(
        self,
        records: Sequence[QRCodeRecord],
        geometry: ResolvedGeometry,
        options: PDFGenerationOptions,
        context: LayoutContext,
    ) -> list[PagePlan]:
        per_page = options.qr_codes_per_page
        cols, rows = grid_dimensions(per_page)
        grid = grid_layout(geometry, cols, rows)
        scale = dpi_scale(geometry.dpi)
        name_size = max(8.0, 20 * scale)
        name_margin = max(9.0, 18 * scale)
        cut_width = max(0.25, 0.5 * scale)

        pages: list[PagePlan] = []
        total_pages = math.ceil(len(records) / per_page)
        for page_idx in range(total_pages):
            start = page_idx * per_page
            indices = tuple(range(start, min(start + per_page, len(records))))
            items: list[TextItem | QrItem | LineItem] = []
            for slot, index in enumerate(indices):
                record = records[index]
                if not record.has_url:
                    continue
                x, y = grid.cell_origin(slot)
                cell = grid.cell_size
                items.append(QrItem(record_index=index, x=x, y=y, size=cell))
                if options.show_name and record.name:
                    items.append(
                        TextItem(
                            text=record.name,
                            x=x + cell / 2,
                            y=y + cell + name_margin,
                            font_size=name_size,
                            color="#333333",
                            align="center",
                        )
                    )
                if options.add_cut_lines:
                    items.extend(_cut_guides(x, y, cell, cut_width))
            pages.append(
                PagePlan(kind="grid", items=tuple(items), slots=per_page, record_indices=indices)
            )
        return pages


def _cut_guides(x: float, y: float, size: float, width: float) -> list[LineItem]:
    right = x + size
    bottom = y + size
    return [
        LineItem(x, y, right, y, width),
        LineItem(x, y, x, bottom, width),
        LineItem(right, y, right, bottom, width),
        LineItem(x, bottom, right, bottom, width),
    ]


LAYOUTS: Final[dict[str, LayoutStrategy]] = {
    STYLE_STANDARD: StandardLayout(),
    STYLE_MINIMAL: MinimalLayout(),
    STYLE_GRID: GridLayoutStrategy(),
}


def resolve_layout(style: object) -> LayoutStrategy:
    key = style.strip().lower() if isinstance(style, str) else style
    layout = LAYOUTS.get(key) if isinstance(key, str) else None
    if layout is None:
        raise UnknownStyleError(style)
    return layout


__all__ = [
    "DEFAULT_BRAND",
    "DEFAULT_THANK_YOU",
    "GridLayoutStrategy",
    "LAYOUTS",
    "LayoutContext",
    "LayoutStrategy",
    "MinimalLayout",
    "SCAN_HINT",
    "StandardLayout",
    "resolve_layout",
]
