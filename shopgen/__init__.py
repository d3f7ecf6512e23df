"""
shopgen - synthetic e-commerce fixtures.

generate -> CSV files (users, products, orders, order_items, payments)
ingest   -> SQLite store with foreign keys enforced
query    -> order-line report joined across the tables
"""

__version__ = "0.1.0"
