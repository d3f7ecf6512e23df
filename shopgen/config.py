import os
from dataclasses import dataclass
from typing import Mapping, Optional

# Data generation parameters
NUM_USERS = 50
NUM_PRODUCTS = 25
NUM_ORDERS = 120

DATA_DIR = "data"
DB_FILENAME = "ecommerce.db"

ENV_PREFIX = "SHOPGEN_"


def _int_env(env: Mapping[str, str], name: str, default: Optional[int]) -> Optional[int]:
    raw = env.get(ENV_PREFIX + name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{ENV_PREFIX}{name} must be an integer, got {raw!r}") from None


@dataclass(frozen=True)
class AppConfig:
    data_dir: str = DATA_DIR
    db_path: str = DB_FILENAME
    num_users: int = NUM_USERS
    num_products: int = NUM_PRODUCTS
    num_orders: int = NUM_ORDERS
    seed: Optional[int] = None  # None = fresh data every run
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "AppConfig":
        env = os.environ if environ is None else environ
        return cls(
            data_dir=env.get(ENV_PREFIX + "DATA_DIR", DATA_DIR),
            db_path=env.get(ENV_PREFIX + "DB_PATH", DB_FILENAME),
            num_users=_int_env(env, "NUM_USERS", NUM_USERS),
            num_products=_int_env(env, "NUM_PRODUCTS", NUM_PRODUCTS),
            num_orders=_int_env(env, "NUM_ORDERS", NUM_ORDERS),
            seed=_int_env(env, "SEED", None),
            log_level=env.get(ENV_PREFIX + "LOG_LEVEL", "INFO").upper(),
        )
