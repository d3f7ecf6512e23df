import logging
from contextlib import closing
from pathlib import Path
from typing import Union

from shopgen import storage
from shopgen.csv_io import ENTITY_FILES, read_csv
from shopgen.models import ENTITY_TYPES, Dataset

logger = logging.getLogger("shopgen.loader")


def read_dataset(data_dir: Union[str, Path]) -> Dataset:
    """Parse the five CSV files in data_dir into typed records."""
    data_dir = Path(data_dir)
    collections = {}
    for model in ENTITY_TYPES:
        path = data_dir / ENTITY_FILES[model.TABLE]
        rows = read_csv(path, model.columns())
        collections[model.TABLE] = [model.from_csv_row(row) for row in rows]
        logger.debug("Read %d rows from %s", len(rows), path)
    return Dataset(**collections)


def ingest(data_dir: Union[str, Path], db_path: Union[str, Path]) -> dict[str, int]:
    """
    Load every CSV in data_dir into the store at db_path.

    Tables are created if missing, then filled parent first. Each table is
    committed on its own; a failure part way leaves earlier tables loaded.
    """
    dataset = read_dataset(data_dir)

    with closing(storage.connect(db_path)) as conn:
        storage.create_schema(conn)
        counts = storage.insert_dataset(conn, dataset)

        violations = storage.foreign_key_violations(conn)
        for table, rowid, parent, _ in violations:
            logger.warning("FK violation: %s row %s has no parent in %s", table, rowid, parent)

        for table, total in storage.table_counts(conn).items():
            logger.info("%s: %d rows", table, total)

    logger.info("Ingestion completed.")
    return counts
