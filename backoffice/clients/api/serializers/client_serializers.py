from rest_framework import serializers

from backoffice.clients.domain.models.client import Client


class ClientSerializer(serializers.ModelSerializer):
    seller = serializers.UUIDField(source="seller_id", read_only=True)

    class Meta:
        model = Client
        fields = ["id", "first_name", "last_name", "company", "email", "phone", "seller", "created_at", "updated_at"]
        read_only_fields = fields


class ClientWriteRequestSerializer(serializers.Serializer):
    """Request body for creating or updating a client (documentation only)"""

    first_name = serializers.CharField(max_length=100)
    last_name = serializers.CharField(max_length=100)
    email = serializers.EmailField(help_text="Unique across all clients (case-insensitive)")
    company = serializers.CharField(max_length=200, required=False, allow_blank=True)
    phone = serializers.CharField(max_length=30, required=False, allow_blank=True)
