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

import concurrent.futures
from collections.abc import Sequence
from dataclasses import replace
from pathlib import Path

import typer

from ...config import AppConfig, load_app_config
from ...core.models import ExportOutcome, PDFGenerationOptions, QRCodeRecord
from ...engine import AbortSignal, ExportEngine
from ..core.common import _ctx_value, _run_cli
from ..core.log import _warn
from ..io.records import load_records
from ..ui import build_kv_table, configure_ui, console, console_err, progress

EXIT_CANCELLED = 130

_EXPORT_HELP = (
    "Export a QR code collection to a PDF.\n\n"
    "Examples:\n"
    "  qrpress export codes.json\n"
    "  qrpress export codes.csv --style grid --per-page 12 --cut-lines\n"
    "  qrpress export codes.json --style minimal --width 4 --height 6 --unit in -o cards.pdf\n"
)


def register(app: typer.Typer) -> None:
    app.command(help=_EXPORT_HELP)(export)


def export(
    ctx: typer.Context,
    records: Path = typer.Argument(..., help="JSON or CSV file with the QR codes."),
    output: Path | None = typer.Option(
        None,
        "--output",
        "-o",
        help="Output PDF path or directory (defaults to collection_<name>.pdf).",
        rich_help_panel="Outputs",
    ),
    name: str | None = typer.Option(
        None,
        "--name",
        help="Collection name (defaults to the name in the file, then the file name).",
        rich_help_panel="Inputs",
    ),
    style: str | None = typer.Option(
        None,
        "--style",
        "-s",
        help="Layout style: standard, minimal or grid.",
        rich_help_panel="Layout",
    ),
    page_size: str | None = typer.Option(
        None,
        "--page-size",
        help="Page size (A4, A5, A6).",
        rich_help_panel="Layout",
    ),
    dpi: int | None = typer.Option(
        None,
        "--dpi",
        help="Resolution: 72, 150 or 300.",
        rich_help_panel="Layout",
    ),
    unit: str | None = typer.Option(
        None,
        "--unit",
        help="Unit for --width/--height: in or mm.",
        rich_help_panel="Custom size",
    ),
    width: float | None = typer.Option(
        None,
        "--width",
        help="Custom page width; enables the custom layout together with --height.",
        rich_help_panel="Custom size",
    ),
    height: float | None = typer.Option(
        None,
        "--height",
        help="Custom page height.",
        rich_help_panel="Custom size",
    ),
    per_page: int | None = typer.Option(
        None,
        "--per-page",
        help="QR codes per page for the grid style.",
        rich_help_panel="Layout",
    ),
    show_name: bool | None = typer.Option(
        None,
        "--show-name/--hide-name",
        help="Print each QR code's name under it (minimal and grid).",
        rich_help_panel="Layout",
    ),
    cut_lines: bool | None = typer.Option(
        None,
        "--cut-lines/--no-cut-lines",
        help="Draw cut guides around grid cells.",
        rich_help_panel="Layout",
    ),
) -> None:
    debug_value = bool(_ctx_value(ctx, "debug"))

    def _run() -> int:
        config = load_app_config(_ctx_value(ctx, "config"))
        quiet_value = bool(_ctx_value(ctx, "quiet")) or config.ui.quiet
        if config.ui.no_color or config.ui.no_animations:
            configure_ui(
                no_color=bool(_ctx_value(ctx, "no_color")) or config.ui.no_color,
                no_animations=bool(_ctx_value(ctx, "no_animations")) or config.ui.no_animations,
            )
        record_set = load_records(records, collection_name=name)
        options = _build_options(
            config.export,
            style=style,
            page_size=page_size,
            dpi=dpi,
            unit=unit,
            width=width,
            height=height,
            per_page=per_page,
            show_name=show_name,
            cut_lines=cut_lines,
        )
        engine = _build_engine(config)
        outcome = _generate(
            engine,
            record_set.records,
            options,
            collection_name=record_set.collection_name,
            quiet=quiet_value,
        )
        if outcome.cancelled:
            console_err.print("Export cancelled; no file written.")
            return EXIT_CANCELLED
        for warning in outcome.warnings:
            _warn(warning, quiet=quiet_value)

        document = outcome.document
        if document is None:
            raise RuntimeError("export finished without a document")
        output_path = _resolve_output(output, outcome.suggested_file_name or "collection.pdf")
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_bytes(document.blob)
        if not quiet_value:
            geometry = document.geometry
            console.print(
                build_kv_table(
                    [
                        ("Output", str(output_path)),
                        ("Style", options.export_style),
                        ("Pages", str(document.page_count)),
                        ("Page", f"{geometry.page_width_px}x{geometry.page_height_px}px"),
                        ("DPI", str(geometry.dpi)),
                    ],
                    title="Export complete",
                )
            )
        return 0

    _run_cli(_run, debug=debug_value)


def _build_options(
    base: PDFGenerationOptions,
    *,
    style: str | None,
    page_size: str | None,
    dpi: int | None,
    unit: str | None,
    width: float | None,
    height: float | None,
    per_page: int | None,
    show_name: bool | None,
    cut_lines: bool | None,
) -> PDFGenerationOptions:
    changes: dict[str, object] = {}
    if style is not None:
        changes["export_style"] = style.strip().lower()
    if page_size is not None:
        changes["page_size"] = page_size.strip().upper()
    if dpi is not None:
        changes["dpi"] = dpi
    if unit is not None:
        changes["size_unit"] = unit.strip().lower()
    if width is not None or height is not None:
        changes["custom_width"] = width
        changes["custom_height"] = height
        changes["enable_custom_layout"] = True
    if per_page is not None:
        changes["qr_codes_per_page"] = per_page
    if show_name is not None:
        changes["show_name"] = show_name
    if cut_lines is not None:
        changes["add_cut_lines"] = cut_lines
    return replace(base, **changes)


def _build_engine(config: AppConfig) -> ExportEngine:
    return ExportEngine(
        brand=config.branding.name,
        thank_you_message=config.branding.thank_you_message,
    )


def _generate(
    engine: ExportEngine,
    records: Sequence[QRCodeRecord],
    options: PDFGenerationOptions,
    *,
    collection_name: str,
    quiet: bool,
) -> ExportOutcome:
    # Generation runs off the main thread so Ctrl-C can cancel it between pages.
    # An abort raised before the run claims the engine still cancels it.
    abort_signal = AbortSignal()
    with progress(quiet=quiet) as progress_bar:
        task_id = None
        if progress_bar is not None:
            task_id = progress_bar.add_task("Generating PDF...", total=100)

        def on_progress(percent: int) -> None:
            if progress_bar is not None and task_id is not None:
                progress_bar.update(task_id, completed=percent)

        with concurrent.futures.ThreadPoolExecutor(max_workers=1) as executor:
            future = executor.submit(
                engine.generate,
                records,
                options,
                collection_name=collection_name,
                on_progress=on_progress,
                abort_signal=abort_signal,
            )
            try:
                return future.result()
            except KeyboardInterrupt:
                abort_signal.abort()
                return future.result()


def _resolve_output(output: Path | None, file_name: str) -> Path:
    if output is None:
        return Path.cwd() / file_name
    if output.is_dir():
        return output / file_name
    return output
