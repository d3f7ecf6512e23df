"""
Record types for the synthetic store.

Tables:
 - users
 - products
 - orders       (total_amount derived from order_items)
 - order_items  (item_price is a snapshot of products.price)
 - payments     (exactly one per order)

Timestamps are kept as ISO-8601 UTC strings, e.g. 2025-03-01T12:34:56.789Z.
"""

from dataclasses import dataclass, fields
from datetime import datetime, timezone
from typing import Mapping, get_type_hints

# Fixed vocabularies (nominal)
CATEGORIES = ("Electronics", "Home", "Toys", "Books", "Fashion", "Sports")
PAYMENT_METHODS = ("card", "paypal", "bank_transfer", "apple_pay", "google_pay")
PAYMENT_STATUSES = ("paid", "pending", "failed", "refunded")


def format_timestamp(dt: datetime) -> str:
    dt = dt.astimezone(timezone.utc)
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def round_currency(value: float) -> float:
    return round(value, 2)


class _Record:
    """Column helpers shared by the entity dataclasses."""

    TABLE = ""

    @classmethod
    def columns(cls) -> tuple[str, ...]:
        return tuple(f.name for f in fields(cls))

    @classmethod
    def from_csv_row(cls, row: Mapping[str, str]):
        # int/float columns are coerced, everything else stays text
        hints = get_type_hints(cls)
        values = {}
        for f in fields(cls):
            raw = row[f.name]
            kind = hints[f.name]
            if kind is int:
                values[f.name] = int(raw)
            elif kind is float:
                values[f.name] = float(raw)
            else:
                values[f.name] = raw
        return cls(**values)

    def as_row(self) -> tuple:
        return tuple(getattr(self, name) for name in self.columns())


@dataclass(frozen=True)
class User(_Record):
    TABLE = "users"

    id: int
    name: str
    email: str
    created_at: str


@dataclass(frozen=True)
class Product(_Record):
    TABLE = "products"

    id: int
    name: str
    category: str
    price: float


@dataclass(frozen=True)
class OrderDraft:
    """An order before its items are known; finalized into an Order."""

    id: int
    user_id: int
    order_date: str

    def finalize(self, total_amount: float) -> "Order":
        return Order(
            id=self.id,
            user_id=self.user_id,
            order_date=self.order_date,
            total_amount=total_amount,
        )


@dataclass(frozen=True)
class Order(_Record):
    TABLE = "orders"

    id: int
    user_id: int
    order_date: str
    total_amount: float


@dataclass(frozen=True)
class OrderItem(_Record):
    TABLE = "order_items"

    id: int
    order_id: int
    product_id: int
    quantity: int
    item_price: float

    @property
    def line_total(self) -> float:
        return round_currency(self.item_price * self.quantity)


@dataclass(frozen=True)
class Payment(_Record):
    TABLE = "payments"

    id: int
    order_id: int
    payment_method: str
    payment_status: str
    payment_date: str


# Dependency order: parents always come before children.
ENTITY_TYPES = (User, Product, Order, OrderItem, Payment)


@dataclass(frozen=True)
class Dataset:
    users: list[User]
    products: list[Product]
    orders: list[Order]
    order_items: list[OrderItem]
    payments: list[Payment]

    def collections(self) -> list[tuple[type, list]]:
        """(entity type, records) pairs in dependency order."""
        return [
            (User, self.users),
            (Product, self.products),
            (Order, self.orders),
            (OrderItem, self.order_items),
            (Payment, self.payments),
        ]

    @classmethod
    def empty(cls) -> "Dataset":
        return cls(users=[], products=[], orders=[], order_items=[], payments=[])
