"""Order DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer (DRF Serializers)
and the Service layer.  DTOs are immutable (``frozen=True``).

Quantities are only type-checked here; the ``>= 1`` rule belongs to the
stock ledger, which raises ``InvalidQuantity`` for every caller alike.
Likewise ``UpdateOrderDTO.status`` is a plain string validated by the
service (``InvalidStatus``).

- ``CreateOrderItemDTO``: one line of a new order.
- ``CreateOrderDTO``: customer plus at least one line.
- ``AddOrderItemDTO``: a new line on an existing order.
- ``UpdateOrderItemDTO``: the new quantity of a line.
- ``UpdateOrderDTO``: customer and/or status of an order.
"""

from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, StrictInt, field_validator


class CreateOrderItemDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    product_id: UUID
    quantity: StrictInt


class CreateOrderDTO(BaseModel):
    """Duplicate products are allowed: each line reserves stock on its own,
    in input order."""

    model_config = ConfigDict(frozen=True)

    customer_id: UUID
    items: List[CreateOrderItemDTO]

    @field_validator("items")
    @classmethod
    def items_must_not_be_empty(
        cls, v: List[CreateOrderItemDTO]
    ) -> List[CreateOrderItemDTO]:
        if not v:
            raise ValueError("Order must have at least one item.")
        return v


class AddOrderItemDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    order_id: UUID
    product_id: UUID
    quantity: StrictInt


class UpdateOrderItemDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    quantity: StrictInt


class UpdateOrderDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    customer_id: Optional[UUID] = None
    status: Optional[str] = None
