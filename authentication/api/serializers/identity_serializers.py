from rest_framework import serializers


class CallerIdentitySerializer(serializers.Serializer):
    """Identity claims resolved from the bearer token."""

    seller_id = serializers.CharField(help_text="Seller id (token subject)")
    name = serializers.CharField(allow_blank=True)
    last_name = serializers.CharField(allow_blank=True)
    email = serializers.EmailField(allow_blank=True)
