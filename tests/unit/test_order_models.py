import pytest
from pydantic import ValidationError as PydanticValidationError

from backend.orders.models import CreateOrderRequest, Order, OrderItem, OrderState, PaymentStatus


def _order(**kw):
    return Order(
        shipping_info={},
        products=[OrderItem(id=1, price=10, quantity=1)],
        subtotal=10,
        shipping_cost=50000,
        amount=50010,
        **kw,
    )


def test_public_json_uses_camel_case():
    data = _order(payment_authority="A1").to_public()
    for key in ("orderId", "shippingInfo", "shippingCost", "paymentAuthority", "paymentStatus", "paymentRefId", "createdAt"):
        assert key in data
    assert data["paymentStatus"] == "UNPAID"
    assert data["state"] == "AUTHORITY_ISSUED"


@pytest.mark.parametrize(
    "status, authority, state",
    [
        (PaymentStatus.UNPAID, None, OrderState.CREATED),
        (PaymentStatus.UNPAID, "A1", OrderState.AUTHORITY_ISSUED),
        (PaymentStatus.PAID, "A1", OrderState.PAID),
        (PaymentStatus.FAILED, "A1", OrderState.FAILED),
    ],
)
def test_derived_state(status, authority, state):
    assert _order(payment_status=status, payment_authority=authority).state == state


def test_row_roundtrip_keeps_snake_case():
    order = _order()
    row = order.to_row()
    assert "order_id" in row and "state" not in row
    assert Order.from_row(row).order_id == order.order_id


@pytest.mark.parametrize(
    "override",
    [
        {"products": []},
        {"products": [{"id": "p", "price": 10, "quantity": 0}]},
        {"products": [{"id": "p", "price": -1, "quantity": 1}]},
        {"amount": 0},
        {"amount": float("inf")},
        {"amount": float("nan")},
        {"products": [{"id": "p", "price": float("inf"), "quantity": 1}]},
    ],
)
def test_create_order_request_rejects_bad_carts(override):
    body = {"shippingInfo": {"a": 1}, "products": [{"id": "p", "price": 10, "quantity": 1}], "amount": 50010}
    body.update(override)
    with pytest.raises(PydanticValidationError):
        CreateOrderRequest.model_validate(body)


def test_create_order_request_requires_shipping_info():
    with pytest.raises(PydanticValidationError):
        CreateOrderRequest.model_validate({"products": [{"id": "p", "price": 10, "quantity": 1}], "amount": 10})
