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

from ..core.errors import ValidationError

MM_PER_INCH = 25.4


def to_pixels(value: float, unit: str, dpi: float) -> float:
    if unit == "mm":
        return (value / MM_PER_INCH) * dpi
    if unit == "in":
        return value * dpi
    raise ValidationError(f"unsupported size unit: {unit}")


def parse_dimension(value: object, *, label: str) -> float:
    """Parse a dimension typed into a form field (``"8.5"``) or given as a number."""
    if isinstance(value, bool) or value is None:
        raise ValidationError(f"invalid {label}: enter a positive number")
    if isinstance(value, (int, float)):
        parsed = float(value)
    elif isinstance(value, str):
        try:
            parsed = float(value.strip())
        except ValueError as exc:
            raise ValidationError(f"invalid {label}: enter a positive number") from exc
    else:
        raise ValidationError(f"invalid {label}: enter a positive number")
    if not math.isfinite(parsed) or parsed <= 0:
        raise ValidationError(f"invalid {label}: enter a positive number")
    return parsed


def validate_dimensions(width: object, height: object, dpi: object) -> tuple[float, float]:
    """Validate custom page dimensions and return them as floats."""
    width_value = parse_dimension(width, label="custom width")
    height_value = parse_dimension(height, label="custom height")
    if isinstance(dpi, bool) or not isinstance(dpi, (int, float)) or dpi <= 0:
        raise ValidationError("invalid DPI: enter a positive number")
    return width_value, height_value


__all__ = [
    "MM_PER_INCH",
    "parse_dimension",
    "to_pixels",
    "validate_dimensions",
]
