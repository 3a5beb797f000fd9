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

from dataclasses import dataclass, field
from typing import Literal, Union

TextAlign = Literal["left", "center", "right"]
PageKind = Literal["cover", "record", "grid"]


@dataclass(frozen=True)
class TextItem:
    """A single text line; ``y`` is the baseline, ``x`` the anchor for ``align``."""

    text: str
    x: float
    y: float
    font_size: float
    color: str = "#333333"
    bold: bool = False
    align: TextAlign = "left"


@dataclass(frozen=True)
class QrItem:
    record_index: int
    x: float
    y: float
    size: float


@dataclass(frozen=True)
class LineItem:
    x1: float
    y1: float
    x2: float
    y2: float
    width: float
    color: str = "#cccccc"


PageItem = Union[TextItem, QrItem, LineItem]


@dataclass(frozen=True)
class PagePlan:
    kind: PageKind
    items: tuple[PageItem, ...] = ()
    slots: int = 0
    record_indices: tuple[int, ...] = field(default_factory=tuple)

    @property
    def qr_items(self) -> tuple[QrItem, ...]:
        return tuple(item for item in self.items if isinstance(item, QrItem))

    @property
    def text_items(self) -> tuple[TextItem, ...]:
        return tuple(item for item in self.items if isinstance(item, TextItem))

    @property
    def line_items(self) -> tuple[LineItem, ...]:
        return tuple(item for item in self.items if isinstance(item, LineItem))

    @property
    def empty_slots(self) -> int:
        return max(0, self.slots - len(self.qr_items))
