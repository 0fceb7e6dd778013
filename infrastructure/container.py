"""
Dependency Injection Container
================================

Simple service locator for the identity provider and the back-office domain
services. Services are built lazily and cached for the life of the process.

Usage:
    from infrastructure.container import container

    orders = container.order_service()
    identity = container.identity_provider().resolve(token)
"""

import logging
from typing import Optional

from django.conf import settings

logger = logging.getLogger(__name__)


class ServiceContainer:
    """
    Service container for the identity provider and domain services.

    Implements lazy initialization and caching of service instances.
    Singleton pattern.
    """

    _instance: Optional["ServiceContainer"] = None
    _initialized: bool = False

    def __new__(cls):
        """Ensure only one instance exists (singleton pattern)."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        """Initialize container (only once)."""
        if not self._initialized:
            self._identity_provider = None

            # Domain Services
            self._inventory_service = None
            self._client_service = None
            self._order_service = None
            self._reporting_service = None

            self._initialized = True
            logger.info("Service container initialized")

    def identity_provider(self):
        """
        Get the bearer token identity provider.

        Built from ``settings.SELLERDESK_AUTH`` on first use.
        """
        if self._identity_provider is None:
            from authentication.domain.identity import TokenIdentityProvider

            self._identity_provider = TokenIdentityProvider.from_config(settings.SELLERDESK_AUTH)
            logger.debug(f"Created identity provider ({self._identity_provider.algorithm})")
        return self._identity_provider

    def inventory_service(self):
        """Get InventoryService instance."""
        if self._inventory_service is None:
            from backoffice.services import InventoryService

            self._inventory_service = InventoryService()
            logger.debug("Created InventoryService")
        return self._inventory_service

    def client_service(self):
        """Get ClientService instance."""
        if self._client_service is None:
            from backoffice.services import ClientService

            self._client_service = ClientService()
            logger.debug("Created ClientService")
        return self._client_service

    def order_service(self):
        """Get OrderService instance."""
        if self._order_service is None:
            from backoffice.services import OrderService

            # OrderService depends on InventoryService and ClientService
            self._order_service = OrderService(
                inventory_service=self.inventory_service(),
                client_service=self.client_service(),
            )
            logger.debug("Created OrderService")
        return self._order_service

    def reporting_service(self):
        """Get ReportingService instance."""
        if self._reporting_service is None:
            from backoffice.services import ReportingService

            self._reporting_service = ReportingService(
                top_sellers_limit=getattr(settings, "REPORTING_TOP_SELLERS_LIMIT", 3)
            )
            logger.debug("Created ReportingService")
        return self._reporting_service

    def reset(self):
        """
        Reset all cached service instances.

        Useful for testing or when the auth configuration changes.
        """
        self._identity_provider = None
        self._inventory_service = None
        self._client_service = None
        self._order_service = None
        self._reporting_service = None
        logger.info("Service container reset")


# Global singleton instance
container = ServiceContainer()
