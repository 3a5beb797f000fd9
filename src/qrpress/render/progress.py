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

from collections.abc import Callable
from typing import Protocol

from ..core.errors import GenerationCancelled
from ..core.models import GenerationProgress
from .geometry import round_half_up

SETUP_STEPS = 1
FINALIZE_STEPS = 1

ProgressCallback = Callable[[int], None]


class AbortSignalLike(Protocol):
    @property
    def aborted(self) -> bool: ...


def total_steps_for(units: int) -> int:
    """Setup and finalize each count as one step around the page units."""
    return SETUP_STEPS + max(0, units) + FINALIZE_STEPS


class ProgressController:
    """Step accounting plus cooperative cancellation for one generation run."""

    def __init__(
        self,
        total_steps: int,
        *,
        on_progress: ProgressCallback | None = None,
        abort_signal: AbortSignalLike | None = None,
    ) -> None:
        if total_steps <= 0:
            raise ValueError("total_steps must be positive")
        self._total = total_steps
        self._completed = 0
        self._percent = 0
        self._on_progress = on_progress
        self._abort_signal = abort_signal

    @property
    def snapshot(self) -> GenerationProgress:
        return GenerationProgress(
            completed_steps=self._completed,
            total_steps=self._total,
            percent=self._percent,
        )

    @property
    def aborted(self) -> bool:
        return bool(self._abort_signal is not None and self._abort_signal.aborted)

    def checkpoint(self) -> None:
        """Call before starting a unit of work; raises once the run was aborted."""
        if self.aborted:
            raise GenerationCancelled()

    def advance(self, steps: int = 1) -> GenerationProgress:
        self._completed = min(self._total, self._completed + steps)
        percent = round_half_up(self._completed / self._total * 100)
        percent = max(self._percent, min(100, percent))
        if percent != self._percent:
            self._percent = percent
            if self._on_progress is not None:
                self._on_progress(percent)
        return self.snapshot

    def reset(self) -> GenerationProgress:
        """Zero the visible progress after a cancelled run."""
        self._completed = 0
        self._percent = 0
        return self.snapshot


__all__ = [
    "AbortSignalLike",
    "FINALIZE_STEPS",
    "ProgressCallback",
    "ProgressController",
    "SETUP_STEPS",
    "total_steps_for",
]
