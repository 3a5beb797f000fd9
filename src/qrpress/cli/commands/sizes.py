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

import typer

from ...render.page_sizes import registered_sizes
from ..core.common import _ctx_value, _run_cli
from ..ui import build_page_size_table, console


def register(app: typer.Typer) -> None:
    app.command("page-sizes", help="List the page sizes available per DPI.")(page_sizes)


def page_sizes(
    ctx: typer.Context,
    dpi: int | None = typer.Option(
        None,
        "--dpi",
        help="Only show sizes for this DPI.",
    ),
) -> None:
    debug_value = bool(_ctx_value(ctx, "debug"))

    def _run() -> None:
        rows = registered_sizes()
        if dpi is not None:
            rows = [row for row in rows if row[0] == dpi]
            if not rows:
                raise ValueError(f"no page sizes registered for {dpi} DPI")
        console.print(build_page_size_table(rows))

    _run_cli(_run, debug=debug_value)
