# Entry points (no flags; configure with SHOPGEN_* environment variables):
#   shopgen-generate   -> CSV files in ./data
#   shopgen-ingest     -> ./ecommerce.db
#   shopgen-query      -> report table


import logging
import sqlite3
import sys
from typing import Optional

from shopgen.config import AppConfig
from shopgen.generator import generate_dataset, write_dataset
from shopgen.loader import ingest
from shopgen.logging_setup import console, setup_logging
from shopgen.reporter import run_report

logger = logging.getLogger("shopgen.cli")


def _config() -> Optional[AppConfig]:
    try:
        cfg = AppConfig.from_env()
    except ValueError as exc:
        setup_logging()
        logger.error("Invalid configuration: %s", exc)
        return None
    setup_logging(cfg.log_level)
    return cfg


def generate_main() -> int:
    cfg = _config()
    if cfg is None:
        return 1
    try:
        dataset = generate_dataset(
            cfg.num_users, cfg.num_products, cfg.num_orders, seed=cfg.seed
        )
        write_dataset(dataset, cfg.data_dir)
    except (OSError, ValueError) as exc:
        logger.error("Generation failed: %s", exc)
        return 1
    logger.info("Synthetic CSV data generated in %s", cfg.data_dir)
    return 0


def ingest_main() -> int:
    cfg = _config()
    if cfg is None:
        return 1
    try:
        ingest(cfg.data_dir, cfg.db_path)
    except sqlite3.Error as exc:
        # constraint violations end the stage with exit 1; tables committed so far stay
        logger.error("Error during ingestion: %s", exc)
        return 1
    except (OSError, ValueError) as exc:
        logger.error("Could not read input data: %s", exc)
        return 1
    return 0


def query_main() -> int:
    cfg = _config()
    if cfg is None:
        return 1
    try:
        run_report(cfg.db_path, console)
    except sqlite3.Error as exc:
        logger.error("Query failed: %s", exc)
        return 1
    return 0


STAGES = {
    "generate": generate_main,
    "ingest": ingest_main,
    "query": query_main,
}


def main(argv=None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    if len(argv) != 1 or argv[0] not in STAGES:
        print(f"usage: python -m shopgen.cli {{{','.join(STAGES)}}}", file=sys.stderr)
        return 2
    return STAGES[argv[0]]()


if __name__ == "__main__":
    raise SystemExit(main())
