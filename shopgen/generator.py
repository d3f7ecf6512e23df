import itertools
import logging
import random
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Iterable, Optional, Sequence, Union

from faker import Faker

from shopgen.csv_io import ENTITY_FILES, write_csv
from shopgen.models import (
    CATEGORIES,
    PAYMENT_METHODS,
    PAYMENT_STATUSES,
    Dataset,
    Order,
    OrderDraft,
    OrderItem,
    Payment,
    Product,
    User,
    format_timestamp,
    parse_timestamp,
    round_currency,
)

logger = logging.getLogger("shopgen.generator")

# Product price range, realistic
PRICE_MIN = 5.0
PRICE_MAX = 500.0

ITEMS_PER_ORDER = (1, 5)
QUANTITY_RANGE = (1, 5)
USER_HISTORY_DAYS = 2 * 365

PRODUCT_SUFFIXES = ["Pro", "X", "Plus", "Mini", "Max", "Series"]


def _truncate_ms(dt: datetime) -> datetime:
    return dt.replace(microsecond=dt.microsecond - dt.microsecond % 1000)


class GenerationContext:
    """
    Everything one generation pass draws from: the random source, the
    Faker instance, the fixed "now" and a running id counter per entity.
    """

    def __init__(self, seed: Optional[int] = None, now: Optional[datetime] = None):
        self.seed = seed
        self.rng = random.Random(seed)
        self.fake = Faker()
        if seed is not None:
            self.fake.seed_instance(seed)
        now = now or datetime.now(timezone.utc)
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        self.now = _truncate_ms(now.astimezone(timezone.utc))
        self._counters: dict[str, itertools.count] = {}

    def next_id(self, kind: str) -> int:
        counter = self._counters.setdefault(kind, itertools.count(1))
        return next(counter)

    def timestamp_between(self, start: datetime, end: Optional[datetime] = None) -> str:
        """Uniform timestamp in [start, end]; end defaults to now."""
        end = end or self.now
        span = max((end - start).total_seconds(), 0.0)
        picked = _truncate_ms(start + timedelta(seconds=self.rng.uniform(0, span)))
        # float error must not push us past either bound
        picked = min(max(picked, start), end)
        return format_timestamp(picked)


def generate_users(ctx: GenerationContext, count: int) -> list[User]:
    earliest = ctx.now - timedelta(days=USER_HISTORY_DAYS)
    users = []
    for _ in range(count):
        users.append(
            User(
                id=ctx.next_id("users"),
                name=ctx.fake.name(),
                email=ctx.fake.email(),
                created_at=ctx.timestamp_between(earliest),
            )
        )
    return users


def generate_products(ctx: GenerationContext, count: int) -> list[Product]:
    products = []
    for _ in range(count):
        name = (
            f"{ctx.fake.word().capitalize()} "
            f"{ctx.rng.choice(PRODUCT_SUFFIXES)} {ctx.rng.randint(100, 999)}"
        )
        products.append(
            Product(
                id=ctx.next_id("products"),
                name=name,
                category=ctx.rng.choice(CATEGORIES),
                price=round_currency(ctx.rng.uniform(PRICE_MIN, PRICE_MAX)),
            )
        )
    return products


def draft_orders(ctx: GenerationContext, users: Sequence[User], count: int) -> list[OrderDraft]:
    drafts = []
    for _ in range(count):
        user = ctx.rng.choice(users)
        drafts.append(
            OrderDraft(
                id=ctx.next_id("orders"),
                user_id=user.id,
                order_date=ctx.timestamp_between(parse_timestamp(user.created_at)),
            )
        )
    return drafts


def order_total(items: Iterable[OrderItem]) -> float:
    """Sum of line totals, rounded to cents after every addition."""
    total = 0.0
    for item in items:
        total = round_currency(total + item.line_total)
    return total


def generate_order_items(
    ctx: GenerationContext,
    drafts: Sequence[OrderDraft],
    products: Sequence[Product],
) -> tuple[list[Order], list[OrderItem]]:
    orders: list[Order] = []
    order_items: list[OrderItem] = []
    for draft in drafts:
        item_count = ctx.rng.randint(*ITEMS_PER_ORDER)
        running_total = 0.0
        for _ in range(item_count):
            product = ctx.rng.choice(products)
            item = OrderItem(
                id=ctx.next_id("order_items"),
                order_id=draft.id,
                product_id=product.id,
                quantity=ctx.rng.randint(*QUANTITY_RANGE),
                item_price=product.price,  # locked to the current product price
            )
            running_total = round_currency(running_total + item.line_total)
            order_items.append(item)
        orders.append(draft.finalize(running_total))
    return orders, order_items


def generate_payments(ctx: GenerationContext, orders: Sequence[Order]) -> list[Payment]:
    payments = []
    for order in orders:
        payments.append(
            Payment(
                id=ctx.next_id("payments"),
                order_id=order.id,
                payment_method=ctx.rng.choice(PAYMENT_METHODS),
                payment_status=ctx.rng.choice(PAYMENT_STATUSES),
                payment_date=ctx.timestamp_between(parse_timestamp(order.order_date)),
            )
        )
    return payments


def generate_dataset(
    num_users: int,
    num_products: int,
    num_orders: int,
    seed: Optional[int] = None,
    now: Optional[datetime] = None,
) -> Dataset:
    """
    Generates the five collections with valid PK/FK links:
      users, products
      orders (user_id -> users.id)
      order_items (order_id -> orders.id, product_id -> products.id)
      payments (order_id -> orders.id)

    Output is repeatable for the same seed, counts and now.
    """
    if num_users <= 0:
        raise ValueError("num_users must be > 0")
    if num_products <= 0:
        raise ValueError("num_products must be > 0")
    if num_orders < 0:
        raise ValueError("num_orders must be >= 0")

    ctx = GenerationContext(seed=seed, now=now)
    users = generate_users(ctx, num_users)
    products = generate_products(ctx, num_products)
    drafts = draft_orders(ctx, users, num_orders)
    orders, order_items = generate_order_items(ctx, drafts, products)
    payments = generate_payments(ctx, orders)

    logger.info(
        "Generated users=%d products=%d orders=%d order_items=%d payments=%d (seed=%s)",
        len(users), len(products), len(orders), len(order_items), len(payments), ctx.seed,
    )
    return Dataset(
        users=users,
        products=products,
        orders=orders,
        order_items=order_items,
        payments=payments,
    )


def write_dataset(dataset: Dataset, data_dir: Union[str, Path]) -> list[Path]:
    data_dir = Path(data_dir)
    data_dir.mkdir(parents=True, exist_ok=True)

    written = []
    for model, records in dataset.collections():
        path = data_dir / ENTITY_FILES[model.TABLE]
        write_csv(path, model.columns(), (r.as_row() for r in records))
        logger.debug("Wrote %d rows to %s", len(records), path)
        written.append(path)
    return written
