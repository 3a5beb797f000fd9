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
from datetime import datetime
from typing import Final, Literal

ExportStyle = Literal["standard", "minimal", "grid"]
PageSize = Literal["A0", "A1", "A2", "A3", "A4", "A5", "A6"]
SizeUnit = Literal["in", "mm"]
ErrorCorrectionLevel = Literal["L", "M", "Q", "H"]
Orientation = Literal["portrait", "landscape"]
GeometrySource = Literal["registry", "custom", "fallback"]
OutcomeStatus = Literal["completed", "cancelled"]

STYLE_STANDARD: Final = "standard"
STYLE_MINIMAL: Final = "minimal"
STYLE_GRID: Final = "grid"
EXPORT_STYLES: Final[tuple[str, ...]] = (STYLE_STANDARD, STYLE_MINIMAL, STYLE_GRID)

PAGE_SIZES: Final[tuple[str, ...]] = ("A0", "A1", "A2", "A3", "A4", "A5", "A6")
COLLECTION_PAGE_SIZES: Final[tuple[str, ...]] = ("A4", "A5", "A6")
DPI_OPTIONS: Final[tuple[int, ...]] = (72, 150, 300)
SIZE_UNITS: Final[tuple[str, ...]] = ("in", "mm")
ERROR_CORRECTION_LEVELS: Final[tuple[str, ...]] = ("L", "M", "Q", "H")
QR_CODES_PER_PAGE_OPTIONS: Final[tuple[int, ...]] = (2, 4, 6, 8, 12, 15, 20, 24, 30)

DEFAULT_DPI: Final = 150
DEFAULT_PAGE_SIZE: Final = "A4"
DEFAULT_QR_CODES_PER_PAGE: Final = 4


@dataclass(frozen=True)
class QRCodeRecord:
    name: str
    url: str
    color: str = "#000000"
    background_color: str | None = "#ffffff"
    logo_data_url: str | None = None
    error_correction_level: str = "L"
    created_at: datetime | None = None
    container_background_color: str | None = None

    @property
    def has_url(self) -> bool:
        return bool(self.url and self.url.strip())


@dataclass(frozen=True)
class PDFGenerationOptions:
    export_style: str = STYLE_STANDARD
    page_size: str = DEFAULT_PAGE_SIZE
    dpi: int = DEFAULT_DPI
    size_unit: str = "in"
    custom_width: str | float | None = None
    custom_height: str | float | None = None
    enable_custom_layout: bool = False
    qr_codes_per_page: int = DEFAULT_QR_CODES_PER_PAGE
    show_name: bool = True
    add_cut_lines: bool = False
    # Accepted for compatibility with saved option sets; layout ignores it.
    auto_layout_optimization: bool = True


@dataclass(frozen=True)
class ResolvedGeometry:
    page_width_px: int
    page_height_px: int
    dpi: int
    source: GeometrySource = "registry"
    requested_size: str | None = None
    # Set when the page pixels belong to another DPI than the layout (registry fallback).
    page_dpi: int | None = None

    @property
    def orientation(self) -> Orientation:
        return "landscape" if self.page_width_px > self.page_height_px else "portrait"

    @property
    def min_side(self) -> int:
        return min(self.page_width_px, self.page_height_px)

    @property
    def is_fallback(self) -> bool:
        return self.source == "fallback"

    @property
    def document_dpi(self) -> int:
        return self.page_dpi or self.dpi


@dataclass(frozen=True)
class GenerationProgress:
    completed_steps: int
    total_steps: int
    percent: int


@dataclass(frozen=True)
class GeneratedDocument:
    blob: bytes
    page_count: int
    geometry: ResolvedGeometry


@dataclass(frozen=True)
class ExportOutcome:
    status: OutcomeStatus
    progress: GenerationProgress
    document: GeneratedDocument | None = None
    suggested_file_name: str | None = None
    warnings: tuple[str, ...] = field(default_factory=tuple)

    @property
    def cancelled(self) -> bool:
        return self.status == "cancelled"


__all__ = [
    "COLLECTION_PAGE_SIZES",
    "DEFAULT_DPI",
    "DEFAULT_PAGE_SIZE",
    "DEFAULT_QR_CODES_PER_PAGE",
    "DPI_OPTIONS",
    "ERROR_CORRECTION_LEVELS",
    "EXPORT_STYLES",
    "ErrorCorrectionLevel",
    "ExportOutcome",
    "ExportStyle",
    "GeneratedDocument",
    "GenerationProgress",
    "GeometrySource",
    "Orientation",
    "OutcomeStatus",
    "PAGE_SIZES",
    "PDFGenerationOptions",
    "PageSize",
    "QRCodeRecord",
    "QR_CODES_PER_PAGE_OPTIONS",
    "ResolvedGeometry",
    "SIZE_UNITS",
    "STYLE_GRID",
    "STYLE_MINIMAL",
    "STYLE_STANDARD",
    "SizeUnit",
]
