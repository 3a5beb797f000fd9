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

import re
from datetime import datetime

_MONTHS = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)
_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9]")


def long_date(value: datetime) -> str:
    return f"{_MONTHS[value.month - 1]} {value.day}, {value.year}"


def short_date(value: datetime) -> str:
    return f"{value.month}/{value.day}/{value.year}"


def suggested_file_name(collection_name: str) -> str:
    return f"collection_{_UNSAFE_FILENAME_CHARS.sub('_', collection_name)}.pdf"


def pdf_safe_text(text: str) -> str:
    """Core PDF fonts only cover Latin-1; anything else is replaced with '?'."""
    return text.encode("latin-1", "replace").decode("latin-1")


__all__ = [
    "long_date",
    "pdf_safe_text",
    "short_date",
    "suggested_file_name",
]
