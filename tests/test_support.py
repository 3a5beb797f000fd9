from __future__ import annotations

import base64
import io
from datetime import datetime

from PIL import Image

from qrpress.core.models import PDFGenerationOptions, QRCodeRecord
from qrpress.engine import ExportEngine
from qrpress.render.canvas import QrCanvasRenderer
from qrpress.render.pdf_render import PdfAssembler

# =============================================================================
# Test Constants
# =============================================================================

FIXED_NOW = datetime(2026, 10, 19, 12, 0)
TEST_URL = "https://example.com/menu"


# =============================================================================
# Builders
# =============================================================================


def make_record(
    name: str = "Menu",
    url: str = TEST_URL,
    **kwargs: object,
) -> QRCodeRecord:
    return QRCodeRecord(name=name, url=url, **kwargs)  # type: ignore[arg-type]


def make_records(count: int, *, prefix: str = "Code") -> list[QRCodeRecord]:
    return [make_record(f"{prefix} {idx + 1}", f"{TEST_URL}/{idx + 1}") for idx in range(count)]


def make_options(**kwargs: object) -> PDFGenerationOptions:
    return PDFGenerationOptions(**kwargs)  # type: ignore[arg-type]


def solid_rasterizer(
    data: str,
    error: str,
    dark: str | None,
    light: str | None,
    size: int,
) -> Image.Image:
    """Stand-in QR backend: a flat dark square of the requested size."""
    return Image.new("RGBA", (size, size), (0, 0, 0, 255))


def stub_assembler() -> PdfAssembler:
    return PdfAssembler(renderer=QrCanvasRenderer(rasterize=solid_rasterizer))


def stub_engine(**kwargs: object) -> ExportEngine:
    return ExportEngine(stub_assembler(), clock=lambda: FIXED_NOW, **kwargs)  # type: ignore[arg-type]


def png_data_url(color: tuple[int, int, int, int] = (255, 0, 0, 255), size: int = 8) -> str:
    buf = io.BytesIO()
    Image.new("RGBA", (size, size), color).save(buf, format="PNG")
    return "data:image/png;base64," + base64.b64encode(buf.getvalue()).decode("ascii")
