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

import base64
import binascii
import io
import urllib.parse
from collections.abc import Callable
from dataclasses import dataclass

from PIL import Image, ImageDraw

from ..core.errors import RenderError
from ..core.models import QRCodeRecord
from ..qr.codec import color_to_rgba, rasterize_qr

QrRasterizer = Callable[[str, str, str | None, str | None, int], Image.Image]
ImageDecoder = Callable[[str], Image.Image]

CANVAS_PADDING_PX = 10
LOGO_RATIO = 0.20
LOGO_BACKDROP_PADDING_RATIO = 0.10
_MASK_SUPERSAMPLE = 4
_WHITE = (255, 255, 255, 255)
_TRANSPARENT = (0, 0, 0, 0)


def decode_data_url(data_url: str) -> Image.Image:
    """Decode a ``data:`` URL into an RGBA image."""
    header, sep, payload = data_url.partition(",")
    if not sep or not header.lower().startswith("data:"):
        raise ValueError("logo must be a data: URL")
    if header.lower().endswith(";base64"):
        try:
            raw = base64.b64decode(payload, validate=True)
        except binascii.Error as exc:
            raise ValueError("logo data URL is not valid base64") from exc
    else:
        raw = urllib.parse.unquote_to_bytes(payload)
    try:
        with Image.open(io.BytesIO(raw)) as image:
            image.load()
            return image.convert("RGBA")
    except Image.DecompressionBombError as exc:
        raise ValueError(f"logo image is too large: {exc}") from exc


@dataclass(frozen=True)
class QrCanvasRenderer:
    """Rasterize one record: container fill, padded QR matrix, optional round logo.

    Both collaborators are injectable so hosts can swap the QR backend or the image
    decoder without touching layout code.
    """

    rasterize: QrRasterizer = rasterize_qr
    decode_image: ImageDecoder = decode_data_url

    def render(self, record: QRCodeRecord, side: int) -> Image.Image:
        if side <= 2 * CANVAS_PADDING_PX:
            raise RenderError(f"canvas side {side}px is too small for a QR code")
        if not record.has_url:
            raise RenderError(f"QR code {record.name!r} has no URL")

        container_color = record.container_background_color or record.background_color
        try:
            container_rgba = color_to_rgba(container_color, _TRANSPARENT)
        except ValueError as exc:
            raise RenderError(f"invalid background color for {record.name!r}: {exc}") from exc
        canvas = Image.new("RGBA", (side, side), container_rgba)

        inner = side - 2 * CANVAS_PADDING_PX
        try:
            matrix = self.rasterize(
                record.url,
                record.error_correction_level or "L",
                record.color or "#000000",
                record.background_color,
                inner,
            )
        except (ValueError, TypeError, OSError) as exc:
            raise RenderError(f"failed to generate QR code for {record.name!r}: {exc}") from exc
        matrix = matrix.convert("RGBA")
        if matrix.size != (inner, inner):
            matrix = matrix.resize((inner, inner), Image.Resampling.NEAREST)
        canvas.alpha_composite(matrix, (CANVAS_PADDING_PX, CANVAS_PADDING_PX))

        if record.logo_data_url:
            self._draw_logo(canvas, record, inner)
        return canvas

    def _draw_logo(self, canvas: Image.Image, record: QRCodeRecord, inner: int) -> None:
        try:
            logo = self.decode_image(record.logo_data_url or "")
        except (ValueError, OSError) as exc:
            raise RenderError(f"failed to load logo for {record.name!r}: {exc}") from exc

        logo_size = inner * LOGO_RATIO
        radius = logo_size / 2
        backdrop_radius = radius + logo_size * LOGO_BACKDROP_PADDING_RATIO
        center = CANVAS_PADDING_PX + inner / 2

        draw = ImageDraw.Draw(canvas)
        draw.ellipse(
            (
                center - backdrop_radius,
                center - backdrop_radius,
                center + backdrop_radius,
                center + backdrop_radius,
            ),
            fill=_WHITE,
        )

        logo_px = max(1, round(logo_size))
        scaled = logo.convert("RGBA").resize((logo_px, logo_px), Image.Resampling.LANCZOS)
        mask = _circle_mask(logo_px)
        alpha = scaled.getchannel("A")
        clipped_alpha = Image.composite(alpha, Image.new("L", alpha.size, 0), mask)
        scaled.putalpha(clipped_alpha)
        origin = round(center - logo_px / 2)
        canvas.alpha_composite(scaled, (origin, origin))


def _circle_mask(size: int) -> Image.Image:
    big = size * _MASK_SUPERSAMPLE
    mask = Image.new("L", (big, big), 0)
    ImageDraw.Draw(mask).ellipse((0, 0, big - 1, big - 1), fill=255)
    return mask.resize((size, size), Image.Resampling.LANCZOS)


__all__ = [
    "CANVAS_PADDING_PX",
    "ImageDecoder",
    "LOGO_RATIO",
    "QrCanvasRenderer",
    "QrRasterizer",
    "decode_data_url",
]
