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

import asyncio
import threading
from collections.abc import Callable, Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime

from .core.errors import EngineBusyError, GenerationCancelled
from .core.models import (
    ExportOutcome,
    GeneratedDocument,
    GenerationProgress,
    PDFGenerationOptions,
    QRCodeRecord,
)
from .render.layouts import DEFAULT_BRAND, DEFAULT_THANK_YOU, LayoutContext
from .render.page_sizes import FALLBACK_DPI, FALLBACK_PAGE_SIZE
from .render.pdf_render import PageHook, PdfAssembler, PreparedExport
from .render.progress import (
    AbortSignalLike,
    ProgressCallback,
    ProgressController,
    total_steps_for,
)
from .render.text import suggested_file_name


class AbortSignal:
    """Thread-safe cancellation flag shared between a host and a running export."""

    def __init__(self) -> None:
        self._event = threading.Event()

    @property
    def aborted(self) -> bool:
        return self._event.is_set()

    def abort(self) -> None:
        self._event.set()


@dataclass(frozen=True)
class _AnySignal:
    signals: tuple[AbortSignalLike, ...]

    @property
    def aborted(self) -> bool:
        return any(signal.aborted for signal in self.signals)


class ExportEngine:
    """Single-flight front door to PDF generation.

    One engine runs at most one export at a time. ``generate`` drives the page
    generator on the calling thread; ``generate_async`` drives the same generator
    and hands control back to the event loop between pages.
    """

    def __init__(
        self,
        assembler: PdfAssembler | None = None,
        *,
        brand: str = DEFAULT_BRAND,
        thank_you_message: str = DEFAULT_THANK_YOU,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._assembler = assembler or PdfAssembler()
        self._brand = brand
        self._thank_you_message = thank_you_message
        self._clock = clock
        self._lock = threading.Lock()
        self._active: AbortSignal | None = None

    @property
    def busy(self) -> bool:
        return self._lock.locked()

    def cancel(self) -> bool:
        """Ask the in-flight export to stop at its next checkpoint."""
        active = self._active
        if active is None:
            return False
        active.abort()
        return True

    def generate(
        self,
        records: Sequence[QRCodeRecord] | None,
        options: PDFGenerationOptions,
        *,
        collection_name: str = "",
        on_progress: ProgressCallback | None = None,
        abort_signal: AbortSignalLike | None = None,
        on_page: PageHook | None = None,
    ) -> ExportOutcome:
        with self._claim(abort_signal) as signal:
            prepared = self._prepare(records, options, collection_name)
            progress = self._controller(prepared, on_progress, signal)
            try:
                document = self._assembler.assemble(prepared, progress, on_page=on_page)
            except GenerationCancelled:
                return _cancelled(progress)
            return self._completed(prepared, progress.snapshot, document)

    async def generate_async(
        self,
        records: Sequence[QRCodeRecord] | None,
        options: PDFGenerationOptions,
        *,
        collection_name: str = "",
        on_progress: ProgressCallback | None = None,
        abort_signal: AbortSignalLike | None = None,
    ) -> ExportOutcome:
        with self._claim(abort_signal) as signal:
            prepared = self._prepare(records, options, collection_name)
            progress = self._controller(prepared, on_progress, signal)
            steps = self._assembler.steps(prepared, progress)
            try:
                while True:
                    try:
                        next(steps)
                    except StopIteration as stop:
                        document: GeneratedDocument = stop.value
                        break
                    await asyncio.sleep(0)
            except GenerationCancelled:
                return _cancelled(progress)
            return self._completed(prepared, progress.snapshot, document)

    @contextmanager
    def _claim(self, abort_signal: AbortSignalLike | None) -> Iterator[AbortSignalLike]:
        if not self._lock.acquire(blocking=False):
            raise EngineBusyError("an export is already in progress")
        run_signal = AbortSignal()
        self._active = run_signal
        try:
            if abort_signal is None:
                yield run_signal
            else:
                yield _AnySignal((run_signal, abort_signal))
        finally:
            self._active = None
            self._lock.release()

    def _prepare(
        self,
        records: Sequence[QRCodeRecord] | None,
        options: PDFGenerationOptions,
        collection_name: str,
    ) -> PreparedExport:
        context = LayoutContext(
            collection_name=collection_name,
            generated_at=self._clock(),
            brand=self._brand,
            thank_you_message=self._thank_you_message,
        )
        return self._assembler.prepare(records, options, context)

    @staticmethod
    def _controller(
        prepared: PreparedExport,
        on_progress: ProgressCallback | None,
        signal: AbortSignalLike,
    ) -> ProgressController:
        return ProgressController(
            total_steps_for(prepared.units),
            on_progress=on_progress,
            abort_signal=signal,
        )

    @staticmethod
    def _completed(
        prepared: PreparedExport,
        progress: GenerationProgress,
        document: GeneratedDocument,
    ) -> ExportOutcome:
        return ExportOutcome(
            status="completed",
            progress=progress,
            document=document,
            suggested_file_name=suggested_file_name(prepared.context.collection_name),
            warnings=_geometry_warnings(prepared),
        )


def _cancelled(progress: ProgressController) -> ExportOutcome:
    return ExportOutcome(status="cancelled", progress=progress.reset())


def _geometry_warnings(prepared: PreparedExport) -> tuple[str, ...]:
    geometry = prepared.geometry
    if not geometry.is_fallback:
        return ()
    return (
        f"page size {geometry.requested_size} is not available at {prepared.options.dpi} DPI; "
        f"using {FALLBACK_PAGE_SIZE} at {FALLBACK_DPI} DPI instead",
    )


__all__ = [
    "AbortSignal",
    "ExportEngine",
]
