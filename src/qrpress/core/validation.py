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

import math
from collections.abc import Mapping, Sequence
from datetime import date, datetime, timezone
from typing import Any

from .errors import ValidationError
from .models import (
    DPI_OPTIONS,
    ERROR_CORRECTION_LEVELS,
    PAGE_SIZES,
    SIZE_UNITS,
    PDFGenerationOptions,
    QRCodeRecord,
)

_RECORD_ALIASES: dict[str, tuple[str, ...]] = {
    "name": ("name", "title"),
    "url": ("url", "targetUrl", "target_url"),
    "color": ("color", "dark"),
    "background_color": ("background_color", "backgroundColor", "light"),
    "logo_data_url": ("logo_data_url", "logoDataUrl"),
    "error_correction_level": ("error_correction_level", "errorCorrectionLevel"),
    "created_at": ("created_at", "createdAt"),
    "container_background_color": (
        "container_background_color",
        "containerBackgroundColor",
    ),
}

_OPTION_ALIASES: dict[str, tuple[str, ...]] = {
    "export_style": ("export_style", "exportStyle", "selectedExportStyle", "style"),
    "page_size": ("page_size", "pageSize", "selectedSize"),
    "dpi": ("dpi",),
    "size_unit": ("size_unit", "sizeUnit"),
    "custom_width": ("custom_width", "customWidth"),
    "custom_height": ("custom_height", "customHeight"),
    "enable_custom_layout": ("enable_custom_layout", "enableCustomLayout"),
    "qr_codes_per_page": ("qr_codes_per_page", "qrCodesPerPage"),
    "show_name": ("show_name", "showName", "showQrCodeName"),
    "add_cut_lines": ("add_cut_lines", "addCutLines", "addCutLineGuides"),
    "auto_layout_optimization": ("auto_layout_optimization", "autoLayoutOptimization"),
}


def require_list(value: object, min_length: int, *, label: str) -> list[Any] | tuple[Any, ...]:
    """Validate that value is a list/tuple with at least min_length elements."""
    if not isinstance(value, (list, tuple)):
        raise ValidationError(f"{label} must be a list")
    if len(value) < min_length:
        raise ValidationError(f"{label} must contain at least {min_length} item(s)")
    return value


def require_dict(value: object, *, label: str) -> Mapping[str, Any]:
    """Validate that value is a mapping."""
    if not isinstance(value, Mapping):
        raise ValidationError(f"{label} must be an object")
    return value


def require_records(records: object) -> list[QRCodeRecord]:
    if records is None:
        raise ValidationError("no QR codes available for export")
    if isinstance(records, (str, bytes)) or not isinstance(records, Sequence):
        raise ValidationError("records must be a sequence of QR code records")
    if not records:
        raise ValidationError("no QR codes available for export")
    result: list[QRCodeRecord] = []
    for idx, record in enumerate(records):
        if not isinstance(record, QRCodeRecord):
            raise ValidationError(f"records[{idx}] must be a QRCodeRecord")
        result.append(record)
    return result


def validate_options(options: PDFGenerationOptions) -> PDFGenerationOptions:
    """Check option values that do not depend on the export style."""
    if isinstance(options.dpi, bool) or not isinstance(options.dpi, int):
        raise ValidationError("dpi must be an integer")
    if options.dpi not in DPI_OPTIONS:
        allowed = ", ".join(str(value) for value in DPI_OPTIONS)
        raise ValidationError(f"dpi must be one of {allowed}")
    if options.page_size not in PAGE_SIZES:
        raise ValidationError(f"unsupported page size: {options.page_size}")
    if options.size_unit not in SIZE_UNITS:
        raise ValidationError("size unit must be 'in' or 'mm'")
    per_page = options.qr_codes_per_page
    if isinstance(per_page, bool) or not isinstance(per_page, int) or per_page <= 0:
        raise ValidationError("qr codes per page must be a positive integer")
    return options


def record_from_mapping(data: object, *, label: str = "record") -> QRCodeRecord:
    mapping = require_dict(data, label=label)
    values = _collect(mapping, _RECORD_ALIASES)

    name = _optional_str(values.get("name"), field=f"{label}.name") or ""
    url = _optional_str(values.get("url"), field=f"{label}.url") or ""
    level = (_optional_str(values.get("error_correction_level"), field=f"{label}.level") or "L")
    level = level.upper()
    if level not in ERROR_CORRECTION_LEVELS:
        raise ValidationError(f"{label}.errorCorrectionLevel must be one of L, M, Q, H")

    return QRCodeRecord(
        name=name,
        url=url,
        color=_optional_str(values.get("color"), field=f"{label}.color") or "#000000",
        background_color=_optional_color(values.get("background_color"), default="#ffffff"),
        logo_data_url=_optional_str(values.get("logo_data_url"), field=f"{label}.logo") or None,
        error_correction_level=level,
        created_at=parse_timestamp(values.get("created_at"), field=f"{label}.createdAt"),
        container_background_color=_optional_color(
            values.get("container_background_color"), default=None
        ),
    )


def options_from_mapping(
    data: Mapping[str, Any],
    *,
    base: PDFGenerationOptions | None = None,
) -> PDFGenerationOptions:
    """Build options from a plain mapping, keeping ``base`` values for absent keys."""
    values = _collect(require_dict(data, label="options"), _OPTION_ALIASES)
    current = base or PDFGenerationOptions()
    kwargs: dict[str, Any] = {}
    if "export_style" in values:
        kwargs["export_style"] = str(values["export_style"]).strip().lower()
    if "page_size" in values:
        kwargs["page_size"] = str(values["page_size"]).strip().upper()
    if "dpi" in values:
        kwargs["dpi"] = parse_int(values["dpi"], field="dpi")
    if "size_unit" in values:
        kwargs["size_unit"] = str(values["size_unit"]).strip().lower()
    for key in ("custom_width", "custom_height"):
        if key in values:
            value = values[key]
            kwargs[key] = None if value is None or value == "" else value
    if "qr_codes_per_page" in values:
        kwargs["qr_codes_per_page"] = parse_int(
            values["qr_codes_per_page"], field="qr_codes_per_page"
        )
    for key in ("enable_custom_layout", "show_name", "add_cut_lines", "auto_layout_optimization"):
        if key in values:
            kwargs[key] = parse_bool(values[key], field=key)
    fields = {
        "export_style": current.export_style,
        "page_size": current.page_size,
        "dpi": current.dpi,
        "size_unit": current.size_unit,
        "custom_width": current.custom_width,
        "custom_height": current.custom_height,
        "enable_custom_layout": current.enable_custom_layout,
        "qr_codes_per_page": current.qr_codes_per_page,
        "show_name": current.show_name,
        "add_cut_lines": current.add_cut_lines,
        "auto_layout_optimization": current.auto_layout_optimization,
    }
    fields.update(kwargs)
    return PDFGenerationOptions(**fields)


def parse_timestamp(value: object, *, field: str) -> datetime | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, datetime.min.time())
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be a timestamp")
    if isinstance(value, (int, float)):
        if not math.isfinite(value):
            raise ValidationError(f"{field} must be a timestamp")
        # Millisecond epoch values come straight from browser clients.
        seconds = value / 1000 if abs(value) > 1e11 else value
        return datetime.fromtimestamp(seconds, tz=timezone.utc)
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            return datetime.fromisoformat(text)
        except ValueError as exc:
            raise ValidationError(f"{field} must be an ISO 8601 timestamp") from exc
    raise ValidationError(f"{field} must be a timestamp")


def parse_int(value: object, *, field: str) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be an integer")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not value.is_integer():
            raise ValidationError(f"{field} must be an integer")
        return int(value)
    if isinstance(value, str):
        text = value.strip()
        try:
            return int(text)
        except ValueError as exc:
            raise ValidationError(f"{field} must be an integer") from exc
    raise ValidationError(f"{field} must be an integer")


def parse_bool(value: object, *, field: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in {"1", "true", "yes", "on"}:
            return True
        if normalized in {"0", "false", "no", "off", ""}:
            return False
    raise ValidationError(f"{field} must be a boolean")


def _collect(mapping: Mapping[str, Any], aliases: dict[str, tuple[str, ...]]) -> dict[str, Any]:
    values: dict[str, Any] = {}
    for key, names in aliases.items():
        for name in names:
            if name in mapping:
                values[key] = mapping[name]
                break
    return values


def _optional_str(value: object, *, field: str) -> str | None:
    if value is None:
        return None
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    raise ValidationError(f"{field} must be a string")


def _optional_color(value: object, *, default: str | None) -> str | None:
    if value is None:
        return default
    if not isinstance(value, str):
        raise ValidationError("colors must be strings")
    text = value.strip()
    if not text:
        return default
    if text.lower() in ("none", "transparent"):
        return None
    return text


__all__ = [
    "options_from_mapping",
    "parse_bool",
    "parse_int",
    "parse_timestamp",
    "record_from_mapping",
    "require_dict",
    "require_list",
    "require_records",
    "validate_options",
]
