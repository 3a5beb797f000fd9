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

import tomllib
from dataclasses import dataclass, field
from pathlib import Path

from ..core.models import EXPORT_STYLES, PDFGenerationOptions
from ..core.validation import options_from_mapping, parse_bool, validate_options
from ..render.layouts import DEFAULT_BRAND, DEFAULT_THANK_YOU
from .installer import resolve_config_path


@dataclass(frozen=True)
class BrandingDefaults:
    name: str = DEFAULT_BRAND
    thank_you_message: str = DEFAULT_THANK_YOU


@dataclass(frozen=True)
class UiDefaults:
    quiet: bool = False
    no_color: bool = False
    no_animations: bool = False


@dataclass(frozen=True)
class AppConfig:
    path: Path | None = None
    export: PDFGenerationOptions = field(default_factory=PDFGenerationOptions)
    branding: BrandingDefaults = field(default_factory=BrandingDefaults)
    ui: UiDefaults = field(default_factory=UiDefaults)


def load_app_config(path: str | Path | None = None) -> AppConfig:
    config_path = resolve_config_path(path)
    data = _load_toml(config_path)
    return AppConfig(
        path=config_path,
        export=_parse_export_defaults(_get_dict(data, "export")),
        branding=_parse_branding_defaults(_get_dict(data, "branding")),
        ui=_parse_ui_defaults(_get_dict(data, "ui")),
    )


def _parse_export_defaults(cfg: dict[str, object]) -> PDFGenerationOptions:
    try:
        options = validate_options(options_from_mapping(cfg))
    except ValueError as exc:
        raise ValueError(f"export: {exc}") from exc
    if options.export_style not in EXPORT_STYLES:
        raise ValueError(f"export.style must be one of {', '.join(EXPORT_STYLES)}")
    return options


def _parse_branding_defaults(cfg: dict[str, object]) -> BrandingDefaults:
    return BrandingDefaults(
        name=_parse_str(cfg.get("name"), field="branding.name", default=DEFAULT_BRAND),
        thank_you_message=_parse_str(
            cfg.get("thank_you_message"),
            field="branding.thank_you_message",
            default=DEFAULT_THANK_YOU,
        ),
    )


def _parse_ui_defaults(cfg: dict[str, object]) -> UiDefaults:
    return UiDefaults(
        quiet=_parse_bool(cfg.get("quiet"), field="ui.quiet", default=False),
        no_color=_parse_bool(cfg.get("no_color"), field="ui.no_color", default=False),
        no_animations=_parse_bool(
            cfg.get("no_animations"),
            field="ui.no_animations",
            default=False,
        ),
    )


def _load_toml(path: Path) -> dict[str, object]:
    with path.open("rb") as handle:
        return tomllib.load(handle)


def _get_dict(data: dict[str, object], key: str) -> dict[str, object]:
    value = data.get(key)
    if isinstance(value, dict):
        return value
    return {}


def _parse_str(value: object, *, field: str, default: str) -> str:
    if value is None:
        return default
    if not isinstance(value, str):
        raise ValueError(f"{field} must be a string")
    normalized = value.strip()
    return normalized or default


def _parse_bool(value: object, *, field: str, default: bool) -> bool:
    if value is None:
        return default
    return parse_bool(value, field=field)
