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

from collections.abc import Callable, Generator, Sequence
from dataclasses import dataclass, field
from datetime import timezone

from fpdf import FPDF
from PIL import Image, ImageColor

from ..core.errors import RenderError
from ..core.models import (
    GeneratedDocument,
    GenerationProgress,
    PDFGenerationOptions,
    QRCodeRecord,
    ResolvedGeometry,
)
from ..core.validation import require_records, validate_options
from .canvas import QrCanvasRenderer
from .geometry import qr_canvas_side, resolve_geometry
from .layouts import LayoutContext, resolve_layout
from .progress import ProgressController
from .text import pdf_safe_text
from .types import LineItem, PagePlan, QrItem, TextItem

PDF_FONT_FAMILY = "helvetica"
PDF_CREATOR = "qrpress"
POINTS_PER_INCH = 72.0

PageHook = Callable[[GenerationProgress], None]
AssemblySteps = Generator[GenerationProgress, None, GeneratedDocument]


@dataclass(frozen=True)
class PreparedExport:
    """Everything decided before the first page is drawn."""

    records: tuple[QRCodeRecord, ...]
    options: PDFGenerationOptions
    geometry: ResolvedGeometry
    context: LayoutContext
    plans: tuple[PagePlan, ...]

    @property
    def units(self) -> int:
        return len(self.plans)


@dataclass
class PdfAssembler:
    """Turns layout plans into a single PDF document with fpdf2.

    The document uses one user unit per page pixel, so layout coordinates are
    passed straight through while the page keeps its physical size.
    """

    renderer: QrCanvasRenderer = field(default_factory=QrCanvasRenderer)

    def prepare(
        self,
        records: Sequence[QRCodeRecord] | None,
        options: PDFGenerationOptions,
        context: LayoutContext,
    ) -> PreparedExport:
        checked = tuple(require_records(records))
        layout = resolve_layout(options.export_style)
        validate_options(options)
        geometry = resolve_geometry(options)
        plans = tuple(layout.plan(checked, geometry, options, context))
        return PreparedExport(
            records=checked,
            options=options,
            geometry=geometry,
            context=context,
            plans=plans,
        )

    def steps(self, prepared: PreparedExport, progress: ProgressController) -> AssemblySteps:
        """Yield after setup and after every page; return the finished document."""
        progress.checkpoint()
        pdf = _new_document(prepared.geometry, prepared.context)
        yield progress.advance()

        side = qr_canvas_side(prepared.geometry.dpi)
        for plan in prepared.plans:
            progress.checkpoint()
            self._paint_page(pdf, plan, prepared, side)
            yield progress.advance()

        progress.checkpoint()
        blob = bytes(pdf.output())
        snapshot = progress.advance()
        yield snapshot
        return GeneratedDocument(
            blob=blob,
            page_count=len(prepared.plans),
            geometry=prepared.geometry,
        )

    def assemble(
        self,
        prepared: PreparedExport,
        progress: ProgressController,
        *,
        on_page: PageHook | None = None,
    ) -> GeneratedDocument:
        steps = self.steps(prepared, progress)
        while True:
            try:
                snapshot = next(steps)
            except StopIteration as stop:
                return stop.value
            if on_page is not None:
                on_page(snapshot)

    def _paint_page(
        self,
        pdf: FPDF,
        plan: PagePlan,
        prepared: PreparedExport,
        side: int,
    ) -> None:
        geometry = prepared.geometry
        pdf.add_page()
        pdf.set_fill_color(255, 255, 255)
        pdf.rect(0, 0, geometry.page_width_px, geometry.page_height_px, style="F")
        for item in plan.items:
            if isinstance(item, QrItem):
                image = self.renderer.render(prepared.records[item.record_index], side)
                _draw_image(pdf, image, item)
            elif isinstance(item, TextItem):
                _draw_text(pdf, item, geometry.document_dpi)
            elif isinstance(item, LineItem):
                _draw_line(pdf, item)


def _new_document(geometry: ResolvedGeometry, context: LayoutContext) -> FPDF:
    width = geometry.page_width_px
    height = geometry.page_height_px
    pdf = FPDF(
        orientation="L" if width > height else "P",
        unit=POINTS_PER_INCH / geometry.document_dpi,
        format=(min(width, height), max(width, height)),
    )
    pdf.set_auto_page_break(False)
    pdf.set_margins(0, 0, 0)
    pdf.set_creator(PDF_CREATOR)
    if context.collection_name:
        pdf.set_title(pdf_safe_text(context.collection_name))
    created = context.generated_at
    if created.tzinfo is None:
        created = created.replace(tzinfo=timezone.utc)
    pdf.set_creation_date(created)
    return pdf


def _rgb(value: str) -> tuple[int, int, int]:
    try:
        rgb = ImageColor.getrgb(value)
    except ValueError as exc:
        raise RenderError(f"invalid color {value!r}") from exc
    return int(rgb[0]), int(rgb[1]), int(rgb[2])


def _draw_text(pdf: FPDF, item: TextItem, dpi: int) -> None:
    text = pdf_safe_text(item.text)
    if not text:
        return
    size_pt = item.font_size * POINTS_PER_INCH / dpi
    pdf.set_font(PDF_FONT_FAMILY, style="B" if item.bold else "", size=size_pt)
    pdf.set_text_color(*_rgb(item.color))
    x = item.x
    if item.align == "center":
        x -= pdf.get_string_width(text) / 2
    elif item.align == "right":
        x -= pdf.get_string_width(text)
    pdf.text(x, item.y, text)


def _draw_image(pdf: FPDF, image: Image.Image, item: QrItem) -> None:
    pdf.image(image, x=item.x, y=item.y, w=item.size, h=item.size)


def _draw_line(pdf: FPDF, item: LineItem) -> None:
    pdf.set_draw_color(*_rgb(item.color))
    pdf.set_line_width(item.width)
    pdf.line(item.x1, item.y1, item.x2, item.y2)


__all__ = [
    "AssemblySteps",
    "PageHook",
    "PdfAssembler",
    "PreparedExport",
]
