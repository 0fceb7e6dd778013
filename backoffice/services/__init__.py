"""
Back-office Service Layer

This package contains the business logic of the back-office, organized into
domain services that return ServiceResult instead of raising for expected
failures.

Services:
- InventoryService: Product lookups, stock reservation and release
- ClientService: Seller-owned client registry
- OrderService: Order placement and lifecycle
- ReportingService: Top clients and top sellers rankings

Usage:
    from infrastructure.container import container

    result = container.order_service().place_order(seller, client_id, [(product_id, 2)])

    if result.ok:
        order = result.value
    else:
        error = result.error
"""

from .authorization import authorize
from .base import BaseService, ErrorCodes, ServiceResult, forward_err, service_err, service_ok
from .client_service import ClientService
from .inventory_service import InventoryService
from .order_service import OrderService
from .reporting_service import ReportingService

__all__ = [
    # Base classes
    "BaseService",
    "ServiceResult",
    # Helper functions
    "service_ok",
    "service_err",
    "forward_err",
    "authorize",
    # Error codes
    "ErrorCodes",
    # Services
    "InventoryService",
    "ClientService",
    "OrderService",
    "ReportingService",
]
