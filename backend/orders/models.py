# module backend.orders.models
"""
Modèles (pydantic) des commandes.
- Attributs Python en snake_case, JSON en camelCase (orderId, shippingInfo, paymentStatus...)
  tel qu'attendu par le front existant.
- Order.to_row()/from_row() pour la table 'orders' (colonnes snake_case).
"""
from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Any, Dict, List, Optional, Union
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, computed_field
from pydantic.alias_generators import to_camel

# Montants finis uniquement: 1e309 (inf) ou NaN sont refusés dès la validation
Amount = Union[int, Annotated[float, Field(allow_inf_nan=False)]]


def new_order_id() -> str:
    return f"ORD-{uuid4().hex[:12].upper()}"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PaymentStatus(str, Enum):
    UNPAID = "UNPAID"
    PAID = "PAID"
    FAILED = "FAILED"


class OrderState(str, Enum):
    CREATED = "CREATED"
    AUTHORITY_ISSUED = "AUTHORITY_ISSUED"
    PAID = "PAID"
    FAILED = "FAILED"


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class OrderItem(CamelModel):
    """Ligne de commande telle qu'envoyée par le panier (id, name, price, quantity)."""

    id: Union[str, int]
    name: Optional[str] = None
    price: Amount = Field(ge=0)
    quantity: int = Field(ge=1)


class CreateOrderRequest(CamelModel):
    shipping_info: Dict[str, Any]
    products: List[OrderItem] = Field(min_length=1)
    amount: Amount = Field(gt=0)


class RequestPaymentBody(CamelModel):
    order_id: str = Field(min_length=1)


class VerifyPaymentBody(CamelModel):
    authority: str = Field(min_length=1)
    order_id: str = Field(min_length=1)


class Order(CamelModel):
    id: Optional[str] = None
    order_id: str = Field(default_factory=new_order_id)
    user_id: Optional[str] = None
    shipping_info: Dict[str, Any]
    products: List[OrderItem]
    subtotal: Amount
    shipping_cost: Amount
    amount: Amount
    payment_authority: Optional[str] = None
    payment_status: PaymentStatus = PaymentStatus.UNPAID
    payment_ref_id: Optional[str] = None
    created_at: datetime = Field(default_factory=_utcnow)
    version: int = 0

    @computed_field
    @property
    def state(self) -> OrderState:
        if self.payment_status == PaymentStatus.PAID:
            return OrderState.PAID
        if self.payment_status == PaymentStatus.FAILED:
            return OrderState.FAILED
        if self.payment_authority:
            return OrderState.AUTHORITY_ISSUED
        return OrderState.CREATED

    @property
    def is_paid(self) -> bool:
        return self.payment_status == PaymentStatus.PAID

    def to_public(self) -> Dict[str, Any]:
        """Représentation JSON (camelCase) renvoyée aux clients."""
        return self.model_dump(mode="json", by_alias=True)

    def to_row(self) -> Dict[str, Any]:
        """Ligne de la table 'orders' (snake_case, sans champs calculés)."""
        return self.model_dump(mode="json", exclude={"state"})

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Order":
        return cls.model_validate(row)
