"""
Response Serializers for Back-office API Documentation

These serializers define the structure of API responses for OpenAPI schema generation.
They are NOT used for data validation, only for documentation in Swagger.
"""

from rest_framework import serializers

# ===== Common Response Serializers =====


class ErrorResponseSerializer(serializers.Serializer):
    """Standard error response"""

    detail = serializers.CharField(help_text="Human-readable error message")
    code = serializers.CharField(help_text="Error code identifier (e.g. insufficient_stock)")


class InsufficientStockResponseSerializer(ErrorResponseSerializer):
    """Error response for an order line that exceeds the available stock"""

    product = serializers.CharField(help_text="Name of the product that ran short")
    product_id = serializers.UUIDField(help_text="Product UUID")
    requested = serializers.IntegerField(help_text="Quantity requested by the line")
    available = serializers.IntegerField(help_text="Quantity in stock when the line was checked")


class SuccessResponseSerializer(serializers.Serializer):
    """Generic success response"""

    message = serializers.CharField(help_text="Success message")


# ===== Report Response Serializers =====


class TopClientResponseSerializer(serializers.Serializer):
    """One entry of the top clients ranking"""

    client_id = serializers.UUIDField()
    first_name = serializers.CharField()
    last_name = serializers.CharField()
    company = serializers.CharField(allow_blank=True)
    email = serializers.EmailField()
    total = serializers.DecimalField(max_digits=14, decimal_places=2, help_text="Sum of completed order totals")


class TopSellerResponseSerializer(serializers.Serializer):
    """One entry of the top sellers ranking"""

    seller_id = serializers.UUIDField()
    name = serializers.CharField(allow_blank=True)
    last_name = serializers.CharField(allow_blank=True)
    email = serializers.EmailField()
    total = serializers.DecimalField(max_digits=14, decimal_places=2, help_text="Sum of completed order totals")
