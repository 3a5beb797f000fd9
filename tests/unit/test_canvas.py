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

import base64
import struct
import unittest
import zlib

from PIL import Image

from qrpress.core.errors import RenderError
from qrpress.render.canvas import CANVAS_PADDING_PX, QrCanvasRenderer, decode_data_url
from tests.test_support import make_record, png_data_url, solid_rasterizer


def _png_chunk(kind: bytes, data: bytes) -> bytes:
    return struct.pack(">I", len(data)) + kind + data + struct.pack(">I", zlib.crc32(kind + data))


def _oversized_png_data_url(side: int = 30000) -> str:
    """PNG whose header declares a side x side image; no pixel data follows."""
    header = struct.pack(">IIBBBBB", side, side, 8, 2, 0, 0, 0)
    raw = (
        b"\x89PNG\r\n\x1a\n"
        + _png_chunk(b"IHDR", header)
        + _png_chunk(b"IDAT", b"")
        + _png_chunk(b"IEND", b"")
    )
    return "data:image/png;base64," + base64.b64encode(raw).decode("ascii")


class TestQrCanvasRenderer(unittest.TestCase):
    def test_padding_shows_container_color(self) -> None:
        renderer = QrCanvasRenderer(rasterize=solid_rasterizer)
        image = renderer.render(make_record(container_background_color="#ff0000"), 120)
        self.assertEqual(image.size, (120, 120))
        self.assertEqual(image.getpixel((0, 0)), (255, 0, 0, 255))
        self.assertEqual(image.getpixel((CANVAS_PADDING_PX, CANVAS_PADDING_PX)), (0, 0, 0, 255))
        self.assertEqual(image.getpixel((119 - CANVAS_PADDING_PX, 60)), (0, 0, 0, 255))
        self.assertEqual(image.getpixel((120 - CANVAS_PADDING_PX, 60)), (255, 0, 0, 255))

    def test_container_defaults_to_background_color(self) -> None:
        renderer = QrCanvasRenderer(rasterize=solid_rasterizer)
        image = renderer.render(make_record(background_color="#00ff00"), 60)
        self.assertEqual(image.getpixel((2, 2)), (0, 255, 0, 255))

    def test_container_transparent_without_colors(self) -> None:
        renderer = QrCanvasRenderer(rasterize=solid_rasterizer)
        image = renderer.render(make_record(background_color=None), 60)
        self.assertEqual(image.getpixel((2, 2))[3], 0)

    def test_rasterizer_receives_record_settings(self) -> None:
        calls = []

        def rasterize(data, error, dark, light, size):
            calls.append((data, error, dark, light, size))
            return Image.new("RGBA", (size, size), (0, 0, 0, 255))

        record = make_record(color="#112233", background_color="#fafafa", error_correction_level="Q")
        QrCanvasRenderer(rasterize=rasterize).render(record, 200)
        self.assertEqual(calls, [(record.url, "Q", "#112233", "#fafafa", 180)])

    def test_real_rasterizer(self) -> None:
        image = QrCanvasRenderer().render(make_record(), 120)
        self.assertEqual(image.size, (120, 120))
        self.assertEqual(image.getpixel((CANVAS_PADDING_PX, CANVAS_PADDING_PX)), (0, 0, 0, 255))

    def test_logo_is_centred_on_white_backdrop(self) -> None:
        renderer = QrCanvasRenderer(rasterize=solid_rasterizer)
        image = renderer.render(make_record(logo_data_url=png_data_url()), 220)
        # inner 200, logo 40 centred at 110, backdrop radius 24.
        self.assertEqual(image.getpixel((110, 110)), (255, 0, 0, 255))
        self.assertEqual(image.getpixel((132, 110)), (255, 255, 255, 255))
        self.assertEqual(image.getpixel((140, 110)), (0, 0, 0, 255))

    def test_logo_corners_are_clipped(self) -> None:
        renderer = QrCanvasRenderer(rasterize=solid_rasterizer)
        image = renderer.render(make_record(logo_data_url=png_data_url()), 220)
        self.assertNotEqual(image.getpixel((91, 91)), (255, 0, 0, 255))

    def test_errors_become_render_errors(self) -> None:
        def broken(*_args):
            raise ValueError("data too large")

        def bad_decoder(_url):
            raise ValueError("bad image")

        cases = (
            (QrCanvasRenderer(rasterize=broken), make_record(), 100),
            (QrCanvasRenderer(rasterize=solid_rasterizer), make_record(url=""), 100),
            (QrCanvasRenderer(rasterize=solid_rasterizer), make_record(), 20),
            (
                QrCanvasRenderer(rasterize=solid_rasterizer, decode_image=bad_decoder),
                make_record(logo_data_url="data:image/png;base64,AAAA"),
                100,
            ),
            (
                QrCanvasRenderer(rasterize=solid_rasterizer),
                make_record(background_color="nope"),
                100,
            ),
            (
                QrCanvasRenderer(rasterize=solid_rasterizer),
                make_record(logo_data_url=_oversized_png_data_url()),
                100,
            ),
        )
        for renderer, record, side in cases:
            with self.subTest(record=record, side=side):
                with self.assertRaises(RenderError):
                    renderer.render(record, side)


class TestDecodeDataUrl(unittest.TestCase):
    def test_base64_png(self) -> None:
        image = decode_data_url(png_data_url(size=5))
        self.assertEqual(image.size, (5, 5))
        self.assertEqual(image.mode, "RGBA")

    def test_rejects_other_urls(self) -> None:
        for value in ("https://example.com/logo.png", "data:image/png;base64,@@@"):
            with self.subTest(value=value):
                with self.assertRaises(ValueError):
                    decode_data_url(value)

    def test_oversized_image_is_rejected(self) -> None:
        with self.assertRaises(ValueError) as ctx:
            decode_data_url(_oversized_png_data_url())
        self.assertIn("too large", str(ctx.exception))


if __name__ == "__main__":
    unittest.main()
