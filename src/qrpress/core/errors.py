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


class ValidationError(ValueError):
    """Input rejected before any page work started."""


class UnknownStyleError(ValueError):
    """The requested export style has no layout strategy."""

    def __init__(self, style: object) -> None:
        super().__init__(f"unknown export style: {style!r}")
        self.style = style


class RenderError(RuntimeError):
    """A QR matrix or logo could not be rasterized; the document is discarded."""


class EngineBusyError(RuntimeError):
    """A generation is already in flight on this engine instance."""


class GenerationCancelled(Exception):
    """Raised at a checkpoint once the abort signal is observed.

    Never escapes the engine: it is turned into a cancelled outcome.
    """


__all__ = [
    "EngineBusyError",
    "GenerationCancelled",
    "RenderError",
    "UnknownStyleError",
    "ValidationError",
]
