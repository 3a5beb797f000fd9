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

import io
from typing import Any

import segno
from PIL import Image, ImageColor

_TRANSPARENT = (0, 0, 0, 0)


def color_to_rgba(
    value: object,
    fallback: tuple[int, int, int, int],
) -> tuple[int, int, int, int]:
    normalized = _normalize_color_value(value)
    if normalized is None:
        return fallback
    if isinstance(normalized, str):
        if normalized.lower() in ("none", "transparent"):
            return _TRANSPARENT
        rgb = ImageColor.getcolor(normalized, "RGBA")
        if isinstance(rgb, int):
            return (rgb, rgb, rgb, 255)
        return (int(rgb[0]), int(rgb[1]), int(rgb[2]), int(rgb[3]))
    if isinstance(normalized, (tuple, list)):
        if len(normalized) == 3:
            return (int(normalized[0]), int(normalized[1]), int(normalized[2]), 255)
        if len(normalized) == 4:
            return (
                int(normalized[0]),
                int(normalized[1]),
                int(normalized[2]),
                int(normalized[3]),
            )
    return fallback


def make_qr(data: str, *, error: str = "L") -> Any:
    # Micro QR and error boosting would make the output depend on payload length.
    return segno.make(
        data,
        error=error,
        micro=False,
        boost_error=False,
    )


def rasterize_qr(
    data: str,
    error: str,
    dark: str | None,
    light: str | None,
    size: int,
) -> Image.Image:
    """Render a QR matrix into an RGBA image of exactly ``size`` x ``size`` pixels.

    The matrix is drawn without a quiet zone at the largest whole-module scale that
    fits, then resampled with nearest-neighbour so module edges stay crisp.
    """
    if size <= 0:
        raise ValueError("QR size must be positive")
    qr = make_qr(data, error=error)
    modules, _ = qr.symbol_size(scale=1, border=0)
    scale = max(1, size // modules)

    dark_rgba = color_to_rgba(dark, (0, 0, 0, 255))
    light_rgba = color_to_rgba(light, _TRANSPARENT)
    buf = io.BytesIO()
    # segno expects None rather than a zero-alpha tuple for a transparent background.
    light_value = None if light_rgba[3] == 0 else light_rgba
    qr.save(buf, kind="png", scale=scale, border=0, dark=dark_rgba, light=light_value)
    buf.seek(0)
    with Image.open(buf) as raw:
        image = raw.convert("RGBA")
    if image.size != (size, size):
        image = image.resize((size, size), Image.Resampling.NEAREST)
    return image


def _normalize_color_value(value: object) -> object | None:
    if value is None:
        return None
    if isinstance(value, str):
        return value.strip()
    return value


__all__ = [
    "color_to_rgba",
    "make_qr",
    "rasterize_qr",
]
