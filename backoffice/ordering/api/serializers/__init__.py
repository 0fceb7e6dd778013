from .order_serializers import (
    CreateOrderRequestSerializer,
    OrderLineRequestSerializer,
    OrderLineSerializer,
    OrderSerializer,
    UpdateOrderRequestSerializer,
)

__all__ = [
    "OrderSerializer",
    "OrderLineSerializer",
    "OrderLineRequestSerializer",
    "CreateOrderRequestSerializer",
    "UpdateOrderRequestSerializer",
]
