"""
InventoryService - Stock Management

Handles product lookups, stock reservations and stock releases.
A reservation is one guarded UPDATE evaluated by the database, so concurrent
callers can never drive stock below zero or sell the same units twice.
"""

import logging
from typing import Iterable, List, Sequence, Tuple

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import F, Q, QuerySet
from django.utils import timezone

from backoffice.infra.observability.metrics import stock_released_units, stock_reservation_failures
from backoffice.models import Product

from .base import BaseService, ErrorCodes, ServiceResult, forward_err, service_err, service_ok

logger = logging.getLogger(__name__)

Line = Tuple[str, int]


def is_positive_quantity(quantity) -> bool:
    return isinstance(quantity, int) and not isinstance(quantity, bool) and quantity > 0


class InventoryService(BaseService):
    """
    Service for reading the shared catalog and managing product stock.
    """

    def __init__(self, search_limit: int = None):
        super().__init__()
        self.search_limit = search_limit or getattr(settings, "CATALOG_SEARCH_LIMIT", 10)

    def get_product(self, product_id: str) -> ServiceResult[Product]:
        """
        Get a single product.

        Returns:
            ServiceResult with the Product, or ``product_not_found``
        """
        try:
            return service_ok(Product.objects.get(pk=product_id))
        except (Product.DoesNotExist, ValidationError, ValueError):
            return service_err(ErrorCodes.PRODUCT_NOT_FOUND, f"Product {product_id} not found")
        except Exception as e:
            self.logger.error(f"Error getting product {product_id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

    def list_products(self) -> ServiceResult[QuerySet]:
        """List the whole catalog, ordered by name."""
        try:
            return service_ok(Product.objects.all())
        except Exception as e:
            self.logger.error(f"Error listing products: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

    @BaseService.log_performance
    def search_products(self, text: str, limit: int = None) -> ServiceResult[List[Product]]:
        """
        Case-insensitive search over product name and description.

        Args:
            text: Search text (required, surrounding whitespace ignored)
            limit: Maximum number of products (default: CATALOG_SEARCH_LIMIT)
        """
        text = (text or "").strip()
        if not text:
            return service_err(ErrorCodes.VALIDATION_ERROR, "Search text is required")

        limit = limit or self.search_limit

        try:
            products = list(
                Product.objects.filter(Q(name__icontains=text) | Q(description__icontains=text))[:limit]
            )
            self.logger.info(f"Product search '{text}' returned {len(products)} results")
            return service_ok(products)
        except Exception as e:
            self.logger.error(f"Error searching products for '{text}': {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

    @BaseService.log_performance
    def reserve_stock(self, product_id: str, quantity: int) -> ServiceResult[dict]:
        """
        Atomically check and decrement stock for one product.

        The decrement is a single ``UPDATE ... WHERE stock_quantity >= quantity``;
        the number of affected rows tells whether the reservation happened.

        Args:
            product_id: UUID of the product
            quantity: Quantity to reserve (positive)

        Returns:
            ServiceResult with reservation details, or one of
            ``invalid_quantity``, ``product_not_found``, ``insufficient_stock``
            (with ``product``, ``requested`` and ``available`` in ``error_data``)
        """
        if not is_positive_quantity(quantity):
            return service_err(ErrorCodes.INVALID_QUANTITY, "Quantity must be a positive integer")

        try:
            with transaction.atomic():
                updated = Product.objects.filter(pk=product_id, stock_quantity__gte=quantity).update(
                    stock_quantity=F("stock_quantity") - quantity
                )
                product = Product.objects.filter(pk=product_id).only("id", "name", "stock_quantity").first()
        except (ValidationError, ValueError):
            product = None
            updated = 0
        except Exception as e:
            stock_reservation_failures.labels(reason="error").inc()
            self.logger.error(f"Error reserving stock for product {product_id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

        if product is None:
            stock_reservation_failures.labels(reason="not_found").inc()
            return service_err(ErrorCodes.PRODUCT_NOT_FOUND, f"Product {product_id} not found")

        if not updated:
            stock_reservation_failures.labels(reason="insufficient_stock").inc()
            return service_err(
                ErrorCodes.INSUFFICIENT_STOCK,
                f"The article {product.name} exceeds the available stock. "
                f"Available: {product.stock_quantity}, Requested: {quantity}",
                error_data={
                    "product": product.name,
                    "product_id": str(product.id),
                    "requested": quantity,
                    "available": product.stock_quantity,
                },
            )

        self.logger.info(
            f"Stock reserved: product={product.name}, quantity={quantity}, new_stock={product.stock_quantity}"
        )

        return service_ok(
            {
                "product_id": str(product.id),
                "product_name": product.name,
                "quantity_reserved": quantity,
                "new_stock": product.stock_quantity,
                "reserved_at": timezone.now().isoformat(),
            }
        )

    @BaseService.log_performance
    def reserve_lines(self, lines: Sequence[Line]) -> ServiceResult[List[dict]]:
        """
        Reserve every ``(product_id, quantity)`` line, in order, all-or-nothing.

        All reservations run in one transaction. The first failing line rolls
        back every reservation already applied by this call and its error is
        returned unchanged.

        Example:
            >>> result = inventory_service.reserve_lines([(p1, 2), (p2, 1)])
            >>> if not result.ok and result.error == ErrorCodes.INSUFFICIENT_STOCK:
            ...     print(result.error_data["available"])
        """
        reservations = []

        with transaction.atomic():
            for product_id, quantity in lines:
                result = self.reserve_stock(product_id, quantity)
                if not result.ok:
                    transaction.set_rollback(True)
                    if reservations:
                        self.logger.info(f"Rolled back {len(reservations)} reservation(s) after '{result.error}'")
                    return forward_err(result)
                reservations.append(result.value)

        return service_ok(reservations)

    @BaseService.log_performance
    def release_stock(self, product_id: str, quantity: int, reason: str = "order_cancelled") -> ServiceResult[dict]:
        """
        Return units to stock (the compensating side of ``reserve_stock``).

        Args:
            product_id: UUID of the product
            quantity: Quantity to release
            reason: Reason for release (for audit logging)
        """
        if not is_positive_quantity(quantity):
            return service_err(ErrorCodes.INVALID_QUANTITY, "Quantity must be a positive integer")

        try:
            with transaction.atomic():
                updated = Product.objects.filter(pk=product_id).update(stock_quantity=F("stock_quantity") + quantity)
                if not updated:
                    return service_err(ErrorCodes.PRODUCT_NOT_FOUND, f"Product {product_id} not found")
                product = Product.objects.only("id", "name", "stock_quantity").get(pk=product_id)
        except (ValidationError, ValueError):
            return service_err(ErrorCodes.PRODUCT_NOT_FOUND, f"Product {product_id} not found")
        except Exception as e:
            self.logger.error(f"Error releasing stock for product {product_id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

        stock_released_units.inc(quantity)
        self.logger.info(
            f"Stock released: product={product.name}, quantity={quantity}, "
            f"reason={reason}, new_stock={product.stock_quantity}"
        )

        return service_ok(
            {
                "product_id": str(product.id),
                "product_name": product.name,
                "quantity_released": quantity,
                "new_stock": product.stock_quantity,
                "reason": reason,
                "released_at": timezone.now().isoformat(),
            }
        )

    def release_lines(self, lines: Iterable[Line], reason: str = "order_cancelled") -> ServiceResult[List[dict]]:
        """Release every line in one transaction; any failure releases nothing."""
        releases = []

        with transaction.atomic():
            for product_id, quantity in lines:
                result = self.release_stock(product_id, quantity, reason=reason)
                if not result.ok:
                    transaction.set_rollback(True)
                    return forward_err(result)
                releases.append(result.value)

        return service_ok(releases)

    def get_stock_level(self, product_id: str) -> ServiceResult[int]:
        """
        Get current stock quantity for a product.

        Example:
            >>> result = inventory_service.get_stock_level(product_id)
            >>> if result.ok:
            ...     print(f"Stock: {result.value}")
        """
        return self.get_product(product_id).map(lambda product: product.stock_quantity)
