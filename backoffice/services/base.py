"""
Base classes and utilities for the service layer.

This module provides the ServiceResult pattern (inspired by Rust's Result type)
and BaseService class for all back-office services.
"""

import logging
import time
from dataclasses import dataclass
from functools import wraps
from typing import Any, Callable, Dict, Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass
class ServiceResult(Generic[T]):
    """
    A result type that encapsulates success or failure from service operations.

    Inspired by Rust's Result<T, E> type, this provides a clean way to handle
    service operation outcomes without exceptions for expected failures.

    Attributes:
        ok: True if operation succeeded, False otherwise
        value: The success value (present if ok=True)
        error: Error code (present if ok=False)
        error_detail: Human-readable error message (present if ok=False)
        error_data: Structured error payload, e.g. the product, requested and
            available quantities of an ``insufficient_stock`` failure

    Examples:
        >>> result = service_ok(order)
        >>> if result.ok:
        ...     return Response({"order": result.value}, 201)

        >>> result = service_err("client_not_found", "Client 123 does not exist")
        >>> print(result.error)  # "client_not_found"
    """

    ok: bool
    value: Optional[T] = None
    error: Optional[str] = None
    error_detail: Optional[str] = None
    error_data: Optional[Dict[str, Any]] = None

    def map(self, func: Callable[[T], Any]) -> "ServiceResult":
        """
        Transform the success value if ok=True, otherwise pass through error.

        Args:
            func: Function to apply to the value

        Returns:
            ServiceResult with transformed value or original error
        """
        if self.ok:
            try:
                return service_ok(func(self.value))
            except Exception as e:
                return service_err("transformation_error", str(e))
        return self

    def flat_map(self, func: Callable[[T], "ServiceResult"]) -> "ServiceResult":
        """
        Chain service operations that return ServiceResult.

        Args:
            func: Function that takes value and returns ServiceResult

        Returns:
            Result from func if ok=True, otherwise original error
        """
        if self.ok:
            return func(self.value)
        return self

    def to_dict(self) -> dict:
        """
        Convert to dictionary for JSON serialization.

        Returns:
            Dictionary with 'success' and either 'data' or 'error'
        """
        if self.ok:
            return {"success": True, "data": self.value}
        error = {"code": self.error, "message": self.error_detail}
        if self.error_data:
            error.update(self.error_data)
        return {"success": False, "error": error}


def service_ok(value: T = None) -> ServiceResult[T]:
    """
    Create a successful ServiceResult.

    Args:
        value: The success value

    Returns:
        ServiceResult with ok=True and the value
    """
    return ServiceResult(ok=True, value=value)


def service_err(error: str, error_detail: str = "", error_data: Optional[Dict[str, Any]] = None) -> ServiceResult:
    """
    Create a failed ServiceResult.

    Args:
        error: Error code (e.g., "order_not_found", "insufficient_stock")
        error_detail: Human-readable error message
        error_data: Optional structured details about the failure

    Returns:
        ServiceResult with ok=False and error information

    Example:
        >>> return service_err("client_not_found", f"Client {client_id} does not exist")
    """
    return ServiceResult(ok=False, error=error, error_detail=error_detail or error, error_data=error_data)


def forward_err(result: ServiceResult) -> ServiceResult:
    """Re-wrap a failed result so it can be returned with a different value type."""
    return service_err(result.error, result.error_detail, result.error_data)


class BaseService:
    """
    Base class for all services providing common functionality.

    Provides:
    - Logging with class name
    - Performance timing decorator

    Usage:
        class ClientService(BaseService):
            @BaseService.log_performance
            def get_client(self, client_id, caller):
                self.logger.info(f"Fetching client {client_id}")
    """

    def __init__(self):
        """Initialize base service with logger."""
        self.logger = logging.getLogger(self.__class__.__module__ + "." + self.__class__.__name__)

    @staticmethod
    def log_performance(func: Callable) -> Callable:
        """
        Decorator to log performance of service methods.

        Logs execution time and the error code of failed results.

        Example:
            @BaseService.log_performance
            def expensive_operation(self):
                ...
        """

        @wraps(func)
        def wrapper(self, *args, **kwargs):
            start_time = time.time()
            method_name = f"{self.__class__.__name__}.{func.__name__}"

            try:
                self.logger.debug(f"{method_name} started")
                result = func(self, *args, **kwargs)
                elapsed_time = (time.time() - start_time) * 1000  # Convert to ms

                # Log based on result type
                if isinstance(result, ServiceResult):
                    if result.ok:
                        self.logger.info(f"{method_name} completed successfully in {elapsed_time:.2f}ms")
                    else:
                        self.logger.warning(
                            f"{method_name} failed with error '{result.error}' in {elapsed_time:.2f}ms"
                        )
                else:
                    self.logger.info(f"{method_name} completed in {elapsed_time:.2f}ms")

                return result

            except Exception as e:
                elapsed_time = (time.time() - start_time) * 1000
                self.logger.error(
                    f"{method_name} raised exception after {elapsed_time:.2f}ms: {str(e)}",
                    exc_info=True,
                )
                raise

        return wrapper


# Common error codes for back-office services
class ErrorCodes:
    """Standard error codes used across back-office services."""

    # Product errors
    PRODUCT_NOT_FOUND = "product_not_found"

    # Client errors
    CLIENT_NOT_FOUND = "client_not_found"
    CLIENT_ALREADY_EXISTS = "client_already_exists"
    CLIENT_HAS_ORDERS = "client_has_orders"

    # Order errors
    ORDER_NOT_FOUND = "order_not_found"
    INVALID_ORDER_STATE = "invalid_order_state"

    # Inventory errors
    INSUFFICIENT_STOCK = "insufficient_stock"
    INVALID_QUANTITY = "invalid_quantity"

    # Permission errors
    PERMISSION_DENIED = "permission_denied"

    # Validation errors
    VALIDATION_ERROR = "validation_error"

    # Internal errors
    INTERNAL_ERROR = "internal_error"

    NOT_FOUND_CODES = frozenset({PRODUCT_NOT_FOUND, CLIENT_NOT_FOUND, ORDER_NOT_FOUND})
