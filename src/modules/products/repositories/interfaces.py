"""Product repository interface.

Besides CRUD, the contract exposes the two primitives the order ledger is
built on: a row lock and an atomic stock adjustment.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Optional

from modules.core.repositories.interfaces import ILockingRepository

if TYPE_CHECKING:
    from modules.products.models import Product


class IProductRepository(ILockingRepository["Product"]):
    """Repository contract for products."""

    @abstractmethod
    def adjust_stock(self, product: Product, delta: int) -> Product:
        """Atomically add *delta* (negative to decrement) to ``stock``.

        The caller must hold the row lock and must have checked that the
        result stays non-negative.  *product* is refreshed in place.
        """

    @abstractmethod
    def get_for_release(self, id: str) -> Optional[Product]:
        """Lock a product row for returning stock to it.

        Unlike ``get_for_update`` this also finds soft-deleted products, so
        units released from an order land back on their row.  ``None`` only
        when the row is gone.
        """
