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

import csv
import json
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from ...core.errors import ValidationError
from ...core.models import QRCodeRecord
from ...core.validation import record_from_mapping, require_list

_COLLECTION_KEYS = ("qr_codes", "qrCodes", "records", "items")
_NAME_KEYS = ("name", "collection_name", "collectionName")


@dataclass(frozen=True)
class RecordSet:
    collection_name: str
    records: tuple[QRCodeRecord, ...]


def load_records(path: str | Path, *, collection_name: str | None = None) -> RecordSet:
    """Load QR records from a JSON or CSV file.

    JSON may be a bare list of records or a collection object carrying its own
    name next to the list. CSV needs a header row; empty cells count as unset.
    The collection name falls back to the file stem.
    """
    file_path = Path(path)
    suffix = file_path.suffix.lower()
    if suffix == ".csv":
        name, items = None, _read_csv(file_path)
    elif suffix == ".json":
        name, items = _read_json(file_path)
    else:
        raise ValidationError(f"unsupported records file type: {file_path.suffix or '(none)'}")

    records = tuple(
        record_from_mapping(item, label=f"{file_path.name}[{idx}]")
        for idx, item in enumerate(items)
    )
    return RecordSet(
        collection_name=collection_name or name or file_path.stem,
        records=records,
    )


def _read_json(path: Path) -> tuple[str | None, list[Any]]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValidationError(f"{path.name} is not valid JSON: {exc}") from exc
    if isinstance(data, Mapping):
        name = _first_str(data, _NAME_KEYS)
        for key in _COLLECTION_KEYS:
            if key in data:
                return name, list(require_list(data[key], 0, label=f"{path.name}.{key}"))
        raise ValidationError(f"{path.name} has no list of QR codes")
    return None, list(require_list(data, 0, label=path.name))


def _read_csv(path: Path) -> list[dict[str, Any]]:
    with path.open("r", encoding="utf-8-sig", newline="") as handle:
        reader = csv.DictReader(handle)
        if not reader.fieldnames:
            raise ValidationError(f"{path.name} is missing a header row")
        return [
            {key.strip(): value for key, value in row.items() if key and value not in (None, "")}
            for row in reader
        ]


def _first_str(data: Mapping[str, Any], keys: tuple[str, ...]) -> str | None:
    for key in keys:
        value = data.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


__all__ = ["RecordSet", "load_records"]
