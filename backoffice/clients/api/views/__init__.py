from .client_views import ClientViewSet

__all__ = ["ClientViewSet"]
