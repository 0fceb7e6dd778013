"""
OrderService - Order Placement and Lifecycle

Validates and commits orders against the client registry (ownership) and the
catalog (stock). A multi-line order reserves all of its lines or none of them.
"""

import logging
import uuid
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, List, Optional, Tuple

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.db import transaction

from authentication.infra.observability.tracing import add_span_attributes, get_tracer
from backoffice.infra.observability.metrics import order_value, orders_placed_total, orders_updated_total
from backoffice.models import Order, OrderLine, Product

from .authorization import authorize
from .base import BaseService, ErrorCodes, ServiceResult, forward_err, service_err, service_ok
from .client_service import ClientService
from .inventory_service import InventoryService, is_positive_quantity

User = get_user_model()
logger = logging.getLogger(__name__)

Line = Tuple[str, int]

VALID_STATES = frozenset(choice[0] for choice in Order.STATE_CHOICES)


class OrderService(BaseService):
    """
    Service for placing, reading, updating and deleting a seller's orders.
    """

    def __init__(self, inventory_service: InventoryService = None, client_service: ClientService = None):
        """
        Initialize OrderService.

        Args:
            inventory_service: Service for stock management (injected)
            client_service: Service for client lookups (injected)
        """
        super().__init__()
        self.inventory_service = inventory_service or InventoryService()
        self.client_service = client_service or ClientService()
        self.tracer = get_tracer(__name__)

    # ------------------------------------------------------------------
    # Input normalisation
    # ------------------------------------------------------------------

    def _normalize_lines(self, lines: Optional[Iterable[Any]]) -> ServiceResult[List[Line]]:
        """Accept ``(product_id, quantity)`` pairs or ``{"product_id", "quantity"}`` dicts."""
        if not lines:
            return service_err(ErrorCodes.VALIDATION_ERROR, "An order needs at least one line")

        normalized = []
        for index, line in enumerate(lines):
            if isinstance(line, dict):
                product_id = line.get("product_id") or line.get("product")
                quantity = line.get("quantity")
            else:
                try:
                    product_id, quantity = line
                except (TypeError, ValueError):
                    return service_err(
                        ErrorCodes.VALIDATION_ERROR,
                        f"Line {index} must be a (product_id, quantity) pair",
                        error_data={"line": index},
                    )

            if not product_id:
                return service_err(
                    ErrorCodes.VALIDATION_ERROR, f"Line {index}: product is required", error_data={"line": index}
                )
            if not is_positive_quantity(quantity):
                return service_err(
                    ErrorCodes.INVALID_QUANTITY,
                    f"Line {index}: quantity must be a positive integer",
                    error_data={"line": index},
                )

            try:
                canonical_id = str(uuid.UUID(str(product_id)))
            except ValueError:
                return service_err(
                    ErrorCodes.PRODUCT_NOT_FOUND,
                    f"Product {product_id} not found",
                    error_data={"line": index, "product_id": str(product_id)},
                )

            normalized.append((canonical_id, quantity))

        return service_ok(normalized)

    def _check_products_exist(self, lines: List[Line]) -> ServiceResult[None]:
        """Catalog check for lines that are stored without reserving stock."""
        product_ids = {product_id for product_id, _ in lines}
        found = {str(pk) for pk in Product.objects.filter(pk__in=product_ids).values_list("pk", flat=True)}

        for product_id, _ in lines:
            if product_id not in found:
                return service_err(
                    ErrorCodes.PRODUCT_NOT_FOUND,
                    f"Product {product_id} not found",
                    error_data={"product_id": product_id},
                )

        return service_ok()

    def _normalize_total(self, total: Any) -> ServiceResult[Optional[Decimal]]:
        if total is None:
            return service_ok(None)

        try:
            value = Decimal(str(total))
        except (InvalidOperation, ValueError):
            return service_err(ErrorCodes.VALIDATION_ERROR, f"Invalid order total: {total}")

        if not value.is_finite() or value < 0:
            return service_err(ErrorCodes.VALIDATION_ERROR, "Order total must be a non-negative amount")

        return service_ok(value.quantize(Decimal("0.01")))

    def _validate_state(self, state: Optional[str]) -> ServiceResult[Optional[str]]:
        if state is None or state in VALID_STATES:
            return service_ok(state)
        return service_err(
            ErrorCodes.INVALID_ORDER_STATE,
            f"Unknown order state '{state}'. Expected one of: {', '.join(sorted(VALID_STATES))}",
        )

    def _compute_total(self, lines: List[Line]) -> Decimal:
        products = {
            str(pk): product for pk, product in Product.objects.in_bulk([product_id for product_id, _ in lines]).items()
        }
        total = Decimal("0.00")
        for product_id, quantity in lines:
            total += products[product_id].price * quantity
        return total.quantize(Decimal("0.01"))

    def _replace_lines(self, order: Order, lines: List[Line]) -> None:
        order.lines.all().delete()
        OrderLine.objects.bulk_create(
            [
                OrderLine(order=order, product_id=product_id, quantity=quantity, position=position)
                for position, (product_id, quantity) in enumerate(lines)
            ]
        )

    def _resolve_order(self, order_id: str) -> ServiceResult[Order]:
        try:
            order = Order.objects.select_related("seller", "client").prefetch_related("lines__product").get(pk=order_id)
            return service_ok(order)
        except (Order.DoesNotExist, ValidationError, ValueError):
            return service_err(ErrorCodes.ORDER_NOT_FOUND, "The order doesn't exist.")
        except Exception as e:
            self.logger.error(f"Error resolving order {order_id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

    def _resolve_owned_client(self, client_id: str, caller: User) -> ServiceResult:
        client_result = self.client_service.resolve_client(client_id)
        if not client_result.ok:
            return client_result

        allowed = authorize(client_result.value.seller_id, caller.id, resource="client")
        if not allowed.ok:
            return forward_err(allowed)

        return client_result

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    @BaseService.log_performance
    def place_order(
        self,
        caller: User,
        client_id: str,
        lines: Iterable[Any],
        total: Any = None,
        state: str = Order.STATE_PENDING,
    ) -> ServiceResult[Order]:
        """
        Validate and commit a new order for one of the caller's clients.

        Steps:
            1. Validate lines, total and state
            2. Resolve the client (``client_not_found``)
            3. Check the caller owns the client (``permission_denied``)
            4. Reserve every line in the given order, all-or-nothing
               (``insufficient_stock`` / ``product_not_found``)
            5. Persist the order and its lines

        Args:
            caller: Authenticated seller; becomes ``order.seller``
            client_id: Client the order is for
            lines: Ordered ``(product_id, quantity)`` pairs
            total: Order total; when omitted, the sum of price * quantity
            state: Initial state label (default: pending)

        Returns:
            ServiceResult with the persisted Order
        """
        with self.tracer.start_as_current_span("order_place") as span:
            add_span_attributes(span, seller_id=caller.id, client_id=client_id)

            if not client_id:
                orders_placed_total.labels(status="rejected").inc()
                return service_err(ErrorCodes.VALIDATION_ERROR, "client_id is required")

            lines_result = self._normalize_lines(lines)
            if not lines_result.ok:
                orders_placed_total.labels(status="rejected").inc()
                return lines_result
            normalized = lines_result.value

            total_result = self._normalize_total(total)
            if not total_result.ok:
                orders_placed_total.labels(status="rejected").inc()
                return total_result

            state_result = self._validate_state(state or Order.STATE_PENDING)
            if not state_result.ok:
                orders_placed_total.labels(status="rejected").inc()
                return state_result
            state = state_result.value

            client_result = self._resolve_owned_client(client_id, caller)
            if not client_result.ok:
                orders_placed_total.labels(status="rejected").inc()
                return client_result
            client = client_result.value

            try:
                with transaction.atomic():
                    if state != Order.STATE_CANCELLED:
                        with self.tracer.start_as_current_span("reserve_inventory"):
                            reserve_result = self.inventory_service.reserve_lines(normalized)
                        if not reserve_result.ok:
                            transaction.set_rollback(True)
                            orders_placed_total.labels(status="insufficient_stock").inc()
                            return forward_err(reserve_result)
                    else:
                        catalog_result = self._check_products_exist(normalized)
                        if not catalog_result.ok:
                            transaction.set_rollback(True)
                            orders_placed_total.labels(status="rejected").inc()
                            return catalog_result

                    order_total = total_result.value
                    if order_total is None:
                        order_total = self._compute_total(normalized)

                    with self.tracer.start_as_current_span("save_order"):
                        order = Order.objects.create(seller=caller, client=client, total=order_total, state=state)
                        self._replace_lines(order, normalized)

            except Exception as e:
                self.logger.error(f"Error placing order for seller {caller.id}: {e}", exc_info=True)
                span.record_exception(e)
                orders_placed_total.labels(status="failure").inc()
                return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

            orders_placed_total.labels(status="success").inc()
            order_value.observe(float(order.total))
            add_span_attributes(span, order_id=order.id, order_total=order.total)

            self.logger.info(
                f"Placed order {order.id} for seller {caller.id}: {len(normalized)} lines, total {order.total}"
            )

            return self._resolve_order(order.id)

    @BaseService.log_performance
    def update_order(
        self,
        order_id: str,
        caller: User,
        client_id: Optional[str] = None,
        lines: Optional[Iterable[Any]] = None,
        state: Optional[str] = None,
        total: Any = None,
    ) -> ServiceResult[Order]:
        """
        Update an order's client, lines, state and/or total (owner only).

        New lines are reserved against current stock, all-or-nothing, without
        first returning the stock held by the previous lines. Moving into
        ``cancelled`` returns the order's stock; moving out of it reserves the
        lines again. Any failure leaves the order and stock untouched.

        Returns:
            ServiceResult with the updated Order, or ``order_not_found``,
            ``client_not_found``, ``permission_denied``, ``insufficient_stock``,
            ``validation_error``, ``invalid_quantity``, ``invalid_order_state``
        """
        with self.tracer.start_as_current_span("order_update") as span:
            add_span_attributes(span, seller_id=caller.id, order_id=order_id)

            order_result = self._resolve_order(order_id)
            if not order_result.ok:
                orders_updated_total.labels(status="rejected").inc()
                return order_result

            allowed = authorize(order_result.value.seller_id, caller.id, resource="order")
            if not allowed.ok:
                orders_updated_total.labels(status="rejected").inc()
                return forward_err(allowed)

            new_client = None
            if client_id is not None:
                client_result = self._resolve_owned_client(client_id, caller)
                if not client_result.ok:
                    orders_updated_total.labels(status="rejected").inc()
                    return client_result
                new_client = client_result.value

            new_lines = None
            if lines is not None:
                lines_result = self._normalize_lines(lines)
                if not lines_result.ok:
                    orders_updated_total.labels(status="rejected").inc()
                    return lines_result
                new_lines = lines_result.value

            total_result = self._normalize_total(total)
            if not total_result.ok:
                orders_updated_total.labels(status="rejected").inc()
                return total_result

            state_result = self._validate_state(state)
            if not state_result.ok:
                orders_updated_total.labels(status="rejected").inc()
                return state_result

            try:
                with transaction.atomic():
                    # Re-read under lock so concurrent updates see each other's state
                    order = Order.objects.select_for_update().get(pk=order_result.value.pk)
                    current_lines = order.line_items()

                    new_state = state_result.value or order.state
                    was_holding = order.holds_stock
                    will_hold = new_state != Order.STATE_CANCELLED

                    if new_lines is not None and not will_hold:
                        catalog_result = self._check_products_exist(new_lines)
                        if not catalog_result.ok:
                            transaction.set_rollback(True)
                            orders_updated_total.labels(status="rejected").inc()
                            return catalog_result

                    stock_result = None
                    if will_hold and new_lines is not None:
                        stock_result = self.inventory_service.reserve_lines(new_lines)
                    elif will_hold and not was_holding:
                        stock_result = self.inventory_service.reserve_lines(current_lines)
                    elif was_holding and not will_hold:
                        stock_result = self.inventory_service.release_lines(current_lines, reason="order_cancelled")

                    if stock_result is not None and not stock_result.ok:
                        transaction.set_rollback(True)
                        orders_updated_total.labels(status=stock_result.error).inc()
                        return forward_err(stock_result)

                    if new_client is not None:
                        order.client = new_client
                    if new_lines is not None:
                        self._replace_lines(order, new_lines)

                    order_total = total_result.value
                    if order_total is None and new_lines is not None:
                        order_total = self._compute_total(new_lines)
                    if order_total is not None:
                        order.total = order_total

                    order.state = new_state
                    order.save()

            except Exception as e:
                self.logger.error(f"Error updating order {order_id}: {e}", exc_info=True)
                span.record_exception(e)
                orders_updated_total.labels(status="failure").inc()
                return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

            orders_updated_total.labels(status="success").inc()
            self.logger.info(f"Updated order {order.id} for seller {caller.id}: state={order.state}")

            return self._resolve_order(order.id)

    @BaseService.log_performance
    def delete_order(self, order_id: str, caller: User) -> ServiceResult[str]:
        """
        Hard-delete an order (owner only). Reserved stock is not returned.
        """
        order_result = self._resolve_order(order_id)
        if not order_result.ok:
            return order_result

        allowed = authorize(order_result.value.seller_id, caller.id, resource="order")
        if not allowed.ok:
            return forward_err(allowed)

        try:
            order_result.value.delete()
        except Exception as e:
            self.logger.error(f"Error deleting order {order_id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

        self.logger.info(f"Deleted order {order_id} for seller {caller.id}")
        return service_ok("The order has been deleted.")

    @BaseService.log_performance
    def get_order(self, order_id: str, caller: User) -> ServiceResult[Order]:
        """
        Get order details (owner only).

        Example:
            >>> result = order_service.get_order(order_id, seller)
            >>> if result.ok:
            ...     order = result.value
        """
        order_result = self._resolve_order(order_id)
        if not order_result.ok:
            return order_result

        allowed = authorize(order_result.value.seller_id, caller.id, resource="order")
        if not allowed.ok:
            return forward_err(allowed)

        return order_result

    @BaseService.log_performance
    def list_orders(self, caller: User, state: Optional[str] = None) -> ServiceResult[List[Order]]:
        """
        List the caller's orders, newest first, optionally by state.
        """
        state_result = self._validate_state(state or None)
        if not state_result.ok:
            return state_result

        try:
            queryset = (
                Order.objects.filter(seller=caller).select_related("seller", "client").prefetch_related("lines__product")
            )
            if state:
                queryset = queryset.filter(state=state)

            orders = list(queryset)
            self.logger.info(f"Listed {len(orders)} orders for seller {caller.id} (state={state or 'any'})")
            return service_ok(orders)

        except Exception as e:
            self.logger.error(f"Error listing orders for seller {caller.id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

    def list_all_orders(self, state: Optional[str] = None) -> ServiceResult[List[Order]]:
        """List every order (administrative, unscoped)."""
        state_result = self._validate_state(state or None)
        if not state_result.ok:
            return state_result

        try:
            queryset = Order.objects.select_related("seller", "client").prefetch_related("lines__product")
            if state:
                queryset = queryset.filter(state=state)
            return service_ok(list(queryset))
        except Exception as e:
            self.logger.error(f"Error listing all orders: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))
