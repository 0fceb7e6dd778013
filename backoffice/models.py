from backoffice.catalog.domain.models import Product
from backoffice.clients.domain.models import Client
from backoffice.ordering.domain.models import Order, OrderLine


__all__ = [
    "Product",
    "Client",
    "Order",
    "OrderLine",
]
