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

import asyncio
import unittest

from qrpress.core.errors import EngineBusyError, UnknownStyleError, ValidationError
from qrpress.engine import AbortSignal, ExportEngine
from tests.test_support import make_options, make_records, stub_engine


class TestExportEngine(unittest.TestCase):
    def test_completed_outcome(self) -> None:
        seen: list[int] = []
        engine = stub_engine()
        outcome = engine.generate(
            make_records(2),
            make_options(export_style="standard", dpi=72),
            collection_name="My Codes!",
            on_progress=seen.append,
        )
        self.assertEqual(outcome.status, "completed")
        self.assertFalse(outcome.cancelled)
        self.assertIsNotNone(outcome.document)
        self.assertEqual(outcome.document.page_count, 3)
        self.assertEqual(outcome.suggested_file_name, "collection_My_Codes_.pdf")
        self.assertEqual(outcome.progress.percent, 100)
        self.assertEqual(outcome.warnings, ())
        self.assertEqual(seen, sorted(seen))
        self.assertEqual(seen[-1], 100)
        self.assertFalse(engine.busy)

    def test_empty_records_rejected(self) -> None:
        for records in ([], None):
            with self.subTest(records=records):
                with self.assertRaises(ValidationError):
                    stub_engine().generate(records, make_options())

    def test_unknown_style_rejected(self) -> None:
        with self.assertRaises(UnknownStyleError):
            stub_engine().generate(make_records(1), make_options(export_style="poster"))

    def test_cancel_after_second_page(self) -> None:
        signal = AbortSignal()
        seen: list[int] = []

        def on_page(snapshot) -> None:
            # setup + two pages
            if snapshot.completed_steps == 3:
                signal.abort()

        outcome = stub_engine().generate(
            make_records(10),
            make_options(export_style="minimal", dpi=72),
            on_progress=seen.append,
            abort_signal=signal,
            on_page=on_page,
        )
        self.assertTrue(outcome.cancelled)
        self.assertIsNone(outcome.document)
        self.assertIsNone(outcome.suggested_file_name)
        self.assertEqual(outcome.progress.percent, 0)
        self.assertEqual(seen, [8, 17, 25])

    def test_engine_cancel_stops_in_flight_run(self) -> None:
        engine = stub_engine()
        calls: list[bool] = []

        def on_page(_snapshot) -> None:
            calls.append(engine.cancel())

        outcome = engine.generate(
            make_records(4), make_options(export_style="minimal", dpi=72), on_page=on_page
        )
        self.assertTrue(outcome.cancelled)
        self.assertEqual(calls, [True])
        self.assertFalse(engine.cancel())

    def test_second_request_while_busy(self) -> None:
        engine = stub_engine()
        errors: list[Exception] = []

        def on_page(_snapshot) -> None:
            self.assertTrue(engine.busy)
            try:
                engine.generate(make_records(1), make_options(dpi=72))
            except EngineBusyError as exc:
                errors.append(exc)

        outcome = engine.generate(
            make_records(2), make_options(export_style="minimal", dpi=72), on_page=on_page
        )
        self.assertEqual(outcome.status, "completed")
        self.assertEqual(len(errors), 4)
        # The lock is released once the first run finishes.
        self.assertEqual(
            engine.generate(make_records(1), make_options(dpi=72)).status, "completed"
        )

    def test_validation_error_releases_engine(self) -> None:
        engine = stub_engine()
        with self.assertRaises(ValidationError):
            engine.generate([], make_options())
        self.assertFalse(engine.busy)

    def test_fallback_page_size_warns(self) -> None:
        outcome = stub_engine().generate(
            make_records(1), make_options(export_style="minimal", page_size="A0", dpi=72)
        )
        self.assertEqual(outcome.status, "completed")
        self.assertEqual(len(outcome.warnings), 1)
        self.assertIn("A0", outcome.warnings[0])
        self.assertEqual(outcome.document.geometry.page_width_px, 2480)

    def test_branding_reaches_the_document(self) -> None:
        engine = stub_engine(brand="Acme", thank_you_message="Cheers!")
        outcome = engine.generate(make_records(1), make_options(dpi=72), collection_name="Bar")
        self.assertEqual(outcome.status, "completed")

    def test_default_engine_builds_its_own_assembler(self) -> None:
        engine = ExportEngine()
        outcome = engine.generate(
            make_records(1), make_options(export_style="minimal", dpi=72), collection_name="x"
        )
        self.assertEqual(outcome.document.page_count, 1)


class TestExportEngineAsync(unittest.TestCase):
    def test_generate_async_completes(self) -> None:
        engine = stub_engine()
        outcome = asyncio.run(
            engine.generate_async(make_records(3), make_options(export_style="grid", dpi=72))
        )
        self.assertEqual(outcome.status, "completed")
        self.assertEqual(outcome.document.page_count, 1)

    def test_generate_async_yields_to_the_loop(self) -> None:
        engine = stub_engine()
        ticks: list[int] = []

        async def ticker() -> None:
            while True:
                ticks.append(1)
                await asyncio.sleep(0)

        async def run():
            task = asyncio.create_task(ticker())
            try:
                return await engine.generate_async(
                    make_records(5), make_options(export_style="minimal", dpi=72)
                )
            finally:
                task.cancel()

        outcome = asyncio.run(run())
        self.assertEqual(outcome.status, "completed")
        self.assertGreaterEqual(len(ticks), 5)

    def test_generate_async_cancel(self) -> None:
        engine = stub_engine()

        def on_progress(percent: int) -> None:
            if percent >= 25:
                engine.cancel()

        outcome = asyncio.run(
            engine.generate_async(
                make_records(6),
                make_options(export_style="minimal", dpi=72),
                on_progress=on_progress,
            )
        )
        self.assertTrue(outcome.cancelled)
        self.assertEqual(outcome.progress.percent, 0)
        self.assertFalse(engine.busy)


if __name__ == "__main__":
    unittest.main()
