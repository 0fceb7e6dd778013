from rest_framework import serializers

from backoffice.ordering.domain.models.order import Order, OrderLine


class OrderLineSerializer(serializers.ModelSerializer):
    product_name = serializers.CharField(source="product.name", read_only=True)
    unit_price = serializers.DecimalField(source="product.price", max_digits=10, decimal_places=2, read_only=True)

    class Meta:
        model = OrderLine
        fields = ["product", "product_name", "unit_price", "quantity", "position"]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    seller = serializers.UUIDField(source="seller_id", read_only=True)
    client = serializers.UUIDField(source="client_id", read_only=True)
    client_name = serializers.CharField(source="client.full_name", read_only=True)
    lines = OrderLineSerializer(many=True, read_only=True)

    class Meta:
        model = Order
        fields = ["id", "seller", "client", "client_name", "total", "state", "lines", "created_at", "updated_at"]
        read_only_fields = fields


# ===== Request Serializers (documentation only) =====


class OrderLineRequestSerializer(serializers.Serializer):
    product_id = serializers.UUIDField(help_text="Product UUID")
    quantity = serializers.IntegerField(min_value=1, help_text="Units to reserve")


class CreateOrderRequestSerializer(serializers.Serializer):
    """Request body for placing an order"""

    client_id = serializers.UUIDField(help_text="Client the order is for (must be owned by the caller)")
    lines = OrderLineRequestSerializer(many=True, help_text="Order lines, reserved in the given order")
    total = serializers.DecimalField(
        max_digits=12,
        decimal_places=2,
        required=False,
        help_text="Order total (default: sum of price * quantity)",
    )
    state = serializers.ChoiceField(choices=Order.STATE_CHOICES, default=Order.STATE_PENDING)


class UpdateOrderRequestSerializer(serializers.Serializer):
    """Request body for updating an order; every field is optional"""

    client_id = serializers.UUIDField(required=False, help_text="New client (must be owned by the caller)")
    lines = OrderLineRequestSerializer(many=True, required=False, help_text="Replacement lines")
    total = serializers.DecimalField(max_digits=12, decimal_places=2, required=False)
    state = serializers.ChoiceField(choices=Order.STATE_CHOICES, required=False)
