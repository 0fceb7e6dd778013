from .client_serializers import ClientSerializer, ClientWriteRequestSerializer

__all__ = ["ClientSerializer", "ClientWriteRequestSerializer"]
