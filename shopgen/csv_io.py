import csv
from pathlib import Path
from typing import Iterable, Sequence, Union

# One file per table, all in the same data directory.
ENTITY_FILES = {
    "users": "users.csv",
    "products": "products.csv",
    "orders": "orders.csv",
    "order_items": "order_items.csv",
    "payments": "payments.csv",
}


def write_csv(path: Union[str, Path], columns: Sequence[str], rows: Iterable[Sequence]) -> int:
    """
    Write a header row plus one line per record.

    Text containing a comma (or a quote) is wrapped in double quotes with
    inner quotes doubled; numbers go out bare.
    """
    count = 0
    with open(path, "w", newline="", encoding="utf-8") as f:
        w = csv.writer(f, lineterminator="\n", quoting=csv.QUOTE_MINIMAL)
        w.writerow(columns)
        for row in rows:
            w.writerow(row)
            count += 1
    return count


def read_csv(path: Union[str, Path], columns: Sequence[str]) -> list[dict[str, str]]:
    with open(path, newline="", encoding="utf-8") as f:
        r = csv.reader(f)
        header = next(r, None)
        if header is None:
            return []
        if tuple(header) != tuple(columns):
            raise ValueError(
                f"{path}: unexpected header {header!r}, expected {list(columns)!r}"
            )
        records = []
        for line_no, values in enumerate(r, start=2):
            if not values:
                continue
            if len(values) != len(columns):
                raise ValueError(
                    f"{path}:{line_no}: expected {len(columns)} fields, got {len(values)}"
                )
            records.append(dict(zip(columns, values)))
        return records
