from rest_framework import serializers

from backoffice.catalog.domain.models.catalog import Product


class ProductSerializer(serializers.ModelSerializer):
    """Read-only catalog entry with its current stock."""

    is_in_stock = serializers.SerializerMethodField()

    class Meta:
        model = Product
        fields = ["id", "name", "description", "price", "stock_quantity", "is_in_stock", "created_at", "updated_at"]
        read_only_fields = fields

    def get_is_in_stock(self, obj):
        return obj.stock_quantity > 0


class ProductSearchQuerySerializer(serializers.Serializer):
    text = serializers.CharField(help_text="Text matched against product name and description")
    limit = serializers.IntegerField(min_value=1, max_value=100, required=False, help_text="Maximum results")
