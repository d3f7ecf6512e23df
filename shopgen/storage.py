import logging
import sqlite3
from pathlib import Path
from typing import Iterable, Sequence, Union

from shopgen.models import Dataset

logger = logging.getLogger("shopgen.storage")

CREATE_SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS users (
    id INTEGER PRIMARY KEY,
    name TEXT,
    email TEXT,
    created_at TEXT
);

CREATE TABLE IF NOT EXISTS products (
    id INTEGER PRIMARY KEY,
    name TEXT,
    category TEXT,
    price REAL
);

CREATE TABLE IF NOT EXISTS orders (
    id INTEGER PRIMARY KEY,
    user_id INTEGER,
    order_date TEXT,
    total_amount REAL,
    FOREIGN KEY(user_id) REFERENCES users(id)
);

CREATE TABLE IF NOT EXISTS order_items (
    id INTEGER PRIMARY KEY,
    order_id INTEGER,
    product_id INTEGER,
    quantity INTEGER,
    item_price REAL,
    FOREIGN KEY(order_id) REFERENCES orders(id),
    FOREIGN KEY(product_id) REFERENCES products(id)
);

CREATE TABLE IF NOT EXISTS payments (
    id INTEGER PRIMARY KEY,
    order_id INTEGER,
    payment_method TEXT,
    payment_status TEXT,
    payment_date TEXT,
    FOREIGN KEY(order_id) REFERENCES orders(id)
);
"""

TABLES = ("users", "products", "orders", "order_items", "payments")


def connect(db_path: Union[str, Path], read_only: bool = False) -> sqlite3.Connection:
    """
    Open the store with foreign keys enforced.
    In SQLite, foreign key enforcement is OFF by default.
    Read-only connections fail if the file does not exist yet.
    """
    if read_only:
        uri = Path(db_path).resolve().as_uri() + "?mode=ro"
        conn = sqlite3.connect(uri, uri=True)
    else:
        conn = sqlite3.connect(str(db_path))
    conn.execute("PRAGMA foreign_keys = ON;")
    return conn


def create_schema(conn: sqlite3.Connection) -> None:
    conn.executescript(CREATE_SCHEMA_SQL)
    conn.commit()
    logger.debug("Schema ready (%s)", ", ".join(TABLES))


def insert_rows(
    conn: sqlite3.Connection,
    table: str,
    columns: Sequence[str],
    rows: Iterable[Sequence],
) -> int:
    """
    Insert rows one at a time, in the order given.

    Each statement finishes before the next one is issued, so a child row
    only ever sees parents inserted before it.
    """
    placeholders = ",".join("?" for _ in columns)
    sql = f"INSERT INTO {table} ({','.join(columns)}) VALUES ({placeholders})"

    count = 0
    cur = conn.cursor()
    try:
        for row in rows:
            cur.execute(sql, tuple(row))
            count += 1
        conn.commit()
    finally:
        cur.close()

    logger.info("Inserted %d rows into %s", count, table)
    return count


def insert_dataset(conn: sqlite3.Connection, dataset: Dataset) -> dict[str, int]:
    counts = {}
    for model, records in dataset.collections():
        counts[model.TABLE] = insert_rows(
            conn, model.TABLE, model.columns(), (r.as_row() for r in records)
        )
    return counts


def fetch_table(conn: sqlite3.Connection, model) -> list:
    """Read a whole table back into model records, ordered by id."""
    columns = model.columns()
    cur = conn.execute(f"SELECT {', '.join(columns)} FROM {model.TABLE} ORDER BY id")
    return [model(*row) for row in cur.fetchall()]


def table_counts(conn: sqlite3.Connection) -> dict[str, int]:
    counts = {}
    for table in TABLES:
        counts[table] = conn.execute(f"SELECT COUNT(*) FROM {table}").fetchone()[0]
    return counts


def foreign_key_violations(conn: sqlite3.Connection) -> list[tuple]:
    # rows of (table, rowid, parent, fkid)
    return conn.execute("PRAGMA foreign_key_check;").fetchall()
