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

from dataclasses import dataclass
from typing import Final

FALLBACK_DPI: Final = 300
FALLBACK_PAGE_SIZE: Final = "A4"
FALLBACK_SIZE_PX: Final[tuple[int, int]] = (2480, 3508)

_DPI_SIZE_MAP: Final[dict[int, dict[str, tuple[int, int]]]] = {
    72: {
        "A4": (595, 842),
        "A5": (420, 595),
        "A6": (298, 420),
    },
    150: {
        "A4": (1240, 1754),
        "A5": (877, 1240),
        "A6": (620, 877),
    },
    300: {
        "A4": (2480, 3508),
        "A5": (1754, 2480),
        "A6": (1240, 1754),
    },
}


@dataclass(frozen=True)
class PageSizeLookup:
    width_px: int
    height_px: int
    fallback: bool = False

    @property
    def size(self) -> tuple[int, int]:
        return self.width_px, self.height_px


def size_in_pixels(page_size: str, dpi: int) -> tuple[int, int] | None:
    """Return the mapped pixel size, or ``None`` when the pair is not in the table."""
    sizes = _DPI_SIZE_MAP.get(dpi)
    if sizes is None:
        return None
    return sizes.get(page_size.strip().upper())


def lookup_page_size(page_size: str, dpi: int) -> PageSizeLookup:
    """Resolve a page size, falling back to A4 at 300 DPI with the flag set."""
    mapped = size_in_pixels(page_size, dpi)
    if mapped is None:
        width, height = FALLBACK_SIZE_PX
        return PageSizeLookup(width_px=width, height_px=height, fallback=True)
    return PageSizeLookup(width_px=mapped[0], height_px=mapped[1])


def registered_sizes() -> list[tuple[int, str, int, int]]:
    rows: list[tuple[int, str, int, int]] = []
    for dpi in sorted(_DPI_SIZE_MAP):
        for size, (width, height) in _DPI_SIZE_MAP[dpi].items():
            rows.append((dpi, size, width, height))
    return rows


__all__ = [
    "FALLBACK_DPI",
    "FALLBACK_PAGE_SIZE",
    "FALLBACK_SIZE_PX",
    "PageSizeLookup",
    "lookup_page_size",
    "registered_sizes",
    "size_in_pixels",
]
