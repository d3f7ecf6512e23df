import io
import os
import sqlite3
import tempfile
import unittest
from contextlib import closing
from datetime import datetime, timezone

from rich.console import Console

from shopgen import storage
from shopgen.generator import generate_dataset, order_total, write_dataset
from shopgen.loader import ingest
from shopgen.reporter import NO_RESULTS, run_report

NOW = datetime(2026, 1, 1, tzinfo=timezone.utc)


def _console() -> Console:
    return Console(file=io.StringIO(), width=200, color_system=None)


class TestReporter(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.data_dir = os.path.join(self.tmp.name, "data")
        self.db_path = os.path.join(self.tmp.name, "ecommerce.db")

    def tearDown(self):
        self.tmp.cleanup()

    def test_end_to_end_small_dataset(self):
        data = generate_dataset(3, 2, 2, seed=21, now=NOW)
        self.assertEqual(len(data.orders), 2)
        self.assertEqual(len(data.payments), 2)
        self.assertTrue(2 <= len(data.order_items) <= 10)

        write_dataset(data, self.data_dir)
        ingest(self.data_dir, self.db_path)

        with closing(storage.connect(self.db_path)) as conn:
            self.assertEqual(conn.execute("SELECT COUNT(*) FROM orders").fetchone()[0], 2)

        console = _console()
        rows = run_report(self.db_path, console)

        self.assertGreaterEqual(len(rows), 1)
        self.assertEqual(len(rows), len(data.order_items))
        for row in rows:
            items = [i for i in data.order_items if i.order_id == row.order_id]
            self.assertEqual(row.total_amount, order_total(items))

        dates = [row.order_date for row in rows]
        self.assertEqual(dates, sorted(dates, reverse=True))

        output = console.file.getvalue()
        self.assertIn("product_name", output)
        self.assertNotIn(NO_RESULTS, output)

    def test_empty_store_reports_no_results(self):
        with closing(storage.connect(self.db_path)) as conn:
            storage.create_schema(conn)

        console = _console()
        rows = run_report(self.db_path, console)

        self.assertEqual(rows, [])
        self.assertIn(NO_RESULTS, console.file.getvalue())

    def test_report_does_not_write(self):
        write_dataset(generate_dataset(2, 2, 3, seed=1, now=NOW), self.data_dir)
        ingest(self.data_dir, self.db_path)
        before = os.path.getmtime(self.db_path)

        run_report(self.db_path, _console())

        self.assertEqual(os.path.getmtime(self.db_path), before)

    def test_missing_store_fails(self):
        with self.assertRaises(sqlite3.OperationalError):
            run_report(os.path.join(self.tmp.name, "missing.db"), _console())

    def test_store_without_schema_fails(self):
        with closing(storage.connect(self.db_path)):
            pass
        with self.assertRaises(sqlite3.OperationalError):
            run_report(self.db_path, _console())


if __name__ == "__main__":
    unittest.main()
