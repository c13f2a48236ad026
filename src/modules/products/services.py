"""Product service layer.

Catalogue CRUD.  Price changes are allowed at any time (existing order
items keep their ``price_at_order``); stock is only written here once, as
the opening balance of a new product.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional

import structlog
from django.db import transaction

from modules.products.exceptions import ProductNotFound
from modules.products.models import Product

if TYPE_CHECKING:
    from modules.products.dtos import CreateProductDTO, UpdateProductDTO
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class ProductService:
    def __init__(self, repository: IProductRepository) -> None:
        self._repo = repository

    @transaction.atomic
    def create_product(self, dto: CreateProductDTO) -> Product:
        product = Product(
            name=dto.name,
            description=dto.description,
            price=dto.price,
            stock=dto.stock,
            image_url=dto.image_url,
        )
        product = self._repo.save(product)
        logger.info("product.created", product_id=str(product.id), stock=product.stock)
        return product

    @transaction.atomic
    def update_product(self, id: str, dto: UpdateProductDTO) -> Product:
        """Apply the non-``None`` catalogue fields of *dto*.

        The row is locked so a concurrent stock movement is not overwritten.

        Raises:
            ProductNotFound: no live product with this id.
        """
        product = self._repo.get_for_update(id)
        if not product:
            raise ProductNotFound(f"Product {id} not found.")

        fields = [
            field
            for field in ("name", "price", "description", "image_url")
            if getattr(dto, field) is not None
        ]
        for field in fields:
            setattr(product, field, getattr(dto, field))

        product = self._repo.save(product)
        logger.info("product.updated", product_id=str(id), fields=fields)
        return product

    @transaction.atomic
    def delete_product(self, id: str) -> None:
        """Soft-delete a product.

        Order items that still reference it stay untouched, and stock released
        from them still lands on the row.
        """
        if not self._repo.delete(id):
            raise ProductNotFound(f"Product {id} not found.")

    def list_products(self, filters: Optional[Dict[str, Any]] = None) -> List[Product]:
        return self._repo.list(filters)

    def get_product(self, id: str) -> Product:
        product = self._repo.get_by_id(id)
        if not product:
            raise ProductNotFound(f"Product {id} not found.")
        return product
