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

"""Run exports in a worker process and talk to it with plain-dict messages.

The host submits a request, then reads ``progress`` messages until one terminal
message arrives: ``result``, ``cancelled`` or ``error``. Cancellation is a shared
event the worker polls at every page checkpoint.
"""

from __future__ import annotations

import concurrent.futures
import multiprocessing
import queue
from collections.abc import Callable, Iterator, Sequence
from dataclasses import asdict
from typing import Any, Final, Protocol

from .core.errors import EngineBusyError, RenderError, UnknownStyleError, ValidationError
from .core.models import (
    ExportOutcome,
    GeneratedDocument,
    GenerationProgress,
    PDFGenerationOptions,
    QRCodeRecord,
    ResolvedGeometry,
)
from .core.validation import options_from_mapping, record_from_mapping, require_list
from .engine import ExportEngine
from .render.layouts import DEFAULT_BRAND, DEFAULT_THANK_YOU
from .render.progress import ProgressCallback

MSG_PROGRESS: Final = "progress"
MSG_RESULT: Final = "result"
MSG_CANCELLED: Final = "cancelled"
MSG_ERROR: Final = "error"
TERMINAL_MESSAGES: Final = frozenset({MSG_RESULT, MSG_CANCELLED, MSG_ERROR})

_POLL_INTERVAL_S = 0.1

Message = dict[str, Any]


class MessageQueue(Protocol):
    def put(self, item: Message) -> None: ...

    def get(self, block: bool = True, timeout: float | None = None) -> Message: ...


class EventLike(Protocol):
    def set(self) -> None: ...

    def is_set(self) -> bool: ...


ChannelFactory = Callable[[], tuple[MessageQueue, EventLike]]


class _EventSignal:
    def __init__(self, event: EventLike) -> None:
        self._event = event

    @property
    def aborted(self) -> bool:
        return self._event.is_set()


def build_request(
    records: Sequence[QRCodeRecord],
    options: PDFGenerationOptions,
    *,
    collection_name: str = "",
    brand: str = DEFAULT_BRAND,
    thank_you_message: str = DEFAULT_THANK_YOU,
) -> Message:
    return {
        "records": [_record_payload(record) for record in records],
        "options": asdict(options),
        "collection_name": collection_name,
        "brand": brand,
        "thank_you_message": thank_you_message,
    }


def _record_payload(record: QRCodeRecord) -> Message:
    payload = asdict(record)
    # An unset light color means transparent, not the white default.
    if payload["background_color"] is None:
        payload["background_color"] = "transparent"
    return payload


def run_export_job(request: Message, messages: MessageQueue, abort_event: EventLike) -> None:
    """Worker entry point. Every outcome, including failures, ends in one terminal message."""
    try:
        raw_records = require_list(request.get("records"), 1, label="records")
        records = [
            record_from_mapping(item, label=f"records[{idx}]")
            for idx, item in enumerate(raw_records)
        ]
        options = options_from_mapping(request.get("options") or {})
        engine = ExportEngine(
            brand=str(request.get("brand") or DEFAULT_BRAND),
            thank_you_message=str(request.get("thank_you_message") or DEFAULT_THANK_YOU),
        )

        def report(percent: int) -> None:
            messages.put({"type": MSG_PROGRESS, "percent": percent})

        outcome = engine.generate(
            records,
            options,
            collection_name=str(request.get("collection_name") or ""),
            on_progress=report,
            abort_signal=_EventSignal(abort_event),
        )
    except Exception as exc:  # noqa: BLE001 - reported to the host as an error message
        messages.put(_error_message(exc))
        return

    progress = asdict(outcome.progress)
    if outcome.cancelled or outcome.document is None:
        messages.put({"type": MSG_CANCELLED, "progress": progress})
        return
    document = outcome.document
    messages.put(
        {
            "type": MSG_RESULT,
            "blob": document.blob,
            "page_count": document.page_count,
            "geometry": asdict(document.geometry),
            "file_name": outcome.suggested_file_name,
            "warnings": list(outcome.warnings),
            "progress": progress,
        }
    )


def _error_message(exc: BaseException) -> Message:
    message: Message = {"type": MSG_ERROR, "error": type(exc).__name__, "message": str(exc)}
    if isinstance(exc, UnknownStyleError):
        message["style"] = exc.style
    return message


def outcome_from_message(message: Message) -> ExportOutcome:
    """Turn a terminal message back into an outcome, re-raising worker errors."""
    kind = message.get("type")
    if kind == MSG_RESULT:
        geometry = ResolvedGeometry(**message["geometry"])
        return ExportOutcome(
            status="completed",
            progress=GenerationProgress(**message["progress"]),
            document=GeneratedDocument(
                blob=message["blob"],
                page_count=int(message["page_count"]),
                geometry=geometry,
            ),
            suggested_file_name=message.get("file_name"),
            warnings=tuple(message.get("warnings") or ()),
        )
    if kind == MSG_CANCELLED:
        return ExportOutcome(status="cancelled", progress=GenerationProgress(**message["progress"]))
    if kind == MSG_ERROR:
        raise _error_from_message(message)
    raise ValueError(f"not a terminal worker message: {kind!r}")


def _error_from_message(message: Message) -> Exception:
    name = message.get("error")
    text = str(message.get("message") or "export failed in worker")
    if name == "ValidationError":
        return ValidationError(text)
    if name == "UnknownStyleError":
        return UnknownStyleError(message.get("style"))
    if name == "RenderError":
        return RenderError(text)
    return RuntimeError(f"{name}: {text}")


class WorkerExportJob:
    def __init__(
        self,
        future: concurrent.futures.Future[None],
        messages: MessageQueue,
        abort_event: EventLike,
    ) -> None:
        self._future = future
        self._messages = messages
        self._abort_event = abort_event
        self._terminal: Message | None = None

    @property
    def done(self) -> bool:
        return self._terminal is not None or self._future.done()

    def cancel(self) -> None:
        self._abort_event.set()

    def messages(self) -> Iterator[Message]:
        """Yield messages in arrival order, ending with the terminal one."""
        while self._terminal is None:
            try:
                message = self._messages.get(timeout=_POLL_INTERVAL_S)
            except queue.Empty:
                if self._future.done():
                    self._raise_lost_worker()
                continue
            if message.get("type") in TERMINAL_MESSAGES:
                self._terminal = message
            yield message

    def result(self, on_progress: ProgressCallback | None = None) -> ExportOutcome:
        for message in self.messages():
            if message.get("type") == MSG_PROGRESS and on_progress is not None:
                on_progress(int(message["percent"]))
        if self._terminal is None:
            raise RuntimeError("export worker ended without a terminal message")
        return outcome_from_message(self._terminal)

    def _raise_lost_worker(self) -> None:
        # A late terminal message may still be queued.
        try:
            message = self._messages.get(timeout=_POLL_INTERVAL_S)
        except queue.Empty:
            pass
        else:
            self._messages.put(message)
            return
        exc = self._future.exception()
        if exc is not None:
            raise RuntimeError(f"export worker failed: {exc}") from exc
        raise RuntimeError("export worker exited without a result")


class WorkerExportClient:
    """Submit exports to an executor; one job in flight at a time."""

    def __init__(
        self,
        executor: concurrent.futures.Executor | None = None,
        *,
        channels: ChannelFactory | None = None,
    ) -> None:
        self._executor = executor
        self._owns_executor = executor is None
        self._channels = channels
        self._manager: Any = None
        self._job: WorkerExportJob | None = None

    def submit(
        self,
        records: Sequence[QRCodeRecord],
        options: PDFGenerationOptions,
        *,
        collection_name: str = "",
        brand: str = DEFAULT_BRAND,
        thank_you_message: str = DEFAULT_THANK_YOU,
    ) -> WorkerExportJob:
        if self._job is not None and not self._job.done:
            raise EngineBusyError("an export is already in progress")
        messages, abort_event = self._open_channels()
        request = build_request(
            records,
            options,
            collection_name=collection_name,
            brand=brand,
            thank_you_message=thank_you_message,
        )
        future = self._get_executor().submit(run_export_job, request, messages, abort_event)
        self._job = WorkerExportJob(future, messages, abort_event)
        return self._job

    def cancel(self) -> bool:
        if self._job is None or self._job.done:
            return False
        self._job.cancel()
        return True

    def close(self) -> None:
        if self._owns_executor and self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None
        if self._manager is not None:
            self._manager.shutdown()
            self._manager = None

    def __enter__(self) -> WorkerExportClient:
        return self

    def __exit__(self, *_exc: object) -> None:
        self.close()

    def _get_executor(self) -> concurrent.futures.Executor:
        if self._executor is None:
            self._executor = concurrent.futures.ProcessPoolExecutor(max_workers=1)
        return self._executor

    def _open_channels(self) -> tuple[MessageQueue, EventLike]:
        if self._channels is not None:
            return self._channels()
        if self._manager is None:
            self._manager = multiprocessing.Manager()
        return self._manager.Queue(), self._manager.Event()


__all__ = [
    "MSG_CANCELLED",
    "MSG_ERROR",
    "MSG_PROGRESS",
    "MSG_RESULT",
    "WorkerExportClient",
    "WorkerExportJob",
    "build_request",
    "outcome_from_message",
    "run_export_job",
]
