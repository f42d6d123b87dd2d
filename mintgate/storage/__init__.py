"""Storage layer for sale state."""

from .sale_db import MEMORY_PATH, SaleStore, open_sale_store

__all__ = [
    "MEMORY_PATH",
    "SaleStore",
    "open_sale_store",
]
