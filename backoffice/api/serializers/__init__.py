# Back-office API Serializers

# Import response serializers for API documentation
from .response_serializers import (
    ErrorResponseSerializer,
    InsufficientStockResponseSerializer,
    SuccessResponseSerializer,
    TopClientResponseSerializer,
    TopSellerResponseSerializer,
)


__all__ = [
    # Response serializers for documentation
    "ErrorResponseSerializer",
    "InsufficientStockResponseSerializer",
    "SuccessResponseSerializer",
    "TopClientResponseSerializer",
    "TopSellerResponseSerializer",
]
