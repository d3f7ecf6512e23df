import logging
import sqlite3
from contextlib import closing
from pathlib import Path
from typing import NamedTuple, Optional, Sequence, Union

from rich.console import Console
from rich.table import Table

from shopgen import storage

logger = logging.getLogger("shopgen.reporter")

REPORT_QUERY = """
SELECT
    u.id AS user_id,
    u.name AS user_name,
    o.id AS order_id,
    o.order_date,
    p.name AS product_name,
    oi.quantity,
    oi.item_price,
    o.total_amount
FROM orders o
JOIN users u ON o.user_id = u.id
JOIN order_items oi ON oi.order_id = o.id
JOIN products p ON p.id = oi.product_id
ORDER BY o.order_date DESC
"""

NO_RESULTS = "No results found."
NUMERIC_COLUMNS = {"user_id", "order_id", "quantity", "item_price", "total_amount"}


class ReportRow(NamedTuple):
    user_id: int
    user_name: str
    order_id: int
    order_date: str
    product_name: str
    quantity: int
    item_price: float
    total_amount: float


def fetch_report(conn: sqlite3.Connection) -> list[ReportRow]:
    return [ReportRow(*row) for row in conn.execute(REPORT_QUERY).fetchall()]


def render_report(rows: Sequence[ReportRow], console: Console) -> None:
    if not rows:
        console.print(NO_RESULTS)
        return

    table = Table(title="Order lines", show_lines=False)
    for name in ReportRow._fields:
        table.add_column(name, justify="right" if name in NUMERIC_COLUMNS else "left")
    for row in rows:
        table.add_row(
            str(row.user_id),
            row.user_name,
            str(row.order_id),
            row.order_date,
            row.product_name,
            str(row.quantity),
            f"{row.item_price:.2f}",
            f"{row.total_amount:.2f}",
        )
    console.print(table)


def run_report(db_path: Union[str, Path], console: Optional[Console] = None) -> list[ReportRow]:
    """Query the store read-only and print the result table."""
    console = console or Console()
    with closing(storage.connect(db_path, read_only=True)) as conn:
        rows = fetch_report(conn)
    logger.debug("Report returned %d rows", len(rows))
    render_report(rows, console)
    return rows
