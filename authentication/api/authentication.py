"""
DRF authentication backed by the bearer-token identity provider.
"""

import logging

from django.core.exceptions import ValidationError
from rest_framework.authentication import BaseAuthentication, get_authorization_header
from rest_framework.exceptions import AuthenticationFailed

from authentication.domain.identity import Unauthenticated
from authentication.infra.observability.metrics import authentication_failed, authentication_total
from authentication.models import Seller
from infrastructure.container import container

logger = logging.getLogger(__name__)


class SellerTokenAuthentication(BaseAuthentication):
    """
    Authenticates ``Authorization: Bearer <token>`` requests.

    On success ``request.user`` is the ``Seller`` and ``request.auth`` the
    resolved ``CallerIdentity``. Requests without a bearer header are left
    anonymous so the permission layer answers with 401.
    """

    keyword = "Bearer"

    def authenticate(self, request):
        header = get_authorization_header(request).split()

        if not header or header[0].lower() != self.keyword.lower().encode():
            return None

        if len(header) != 2:
            authentication_failed.labels(reason="malformed_header").inc()
            raise AuthenticationFailed("Invalid Authorization header. Expected 'Bearer <token>'.")

        try:
            token = header[1].decode()
        except UnicodeError:
            authentication_failed.labels(reason="malformed_header").inc()
            raise AuthenticationFailed("Invalid Authorization header. Token contains invalid characters.")

        try:
            identity = container.identity_provider().resolve(token)
        except Unauthenticated as e:
            authentication_total.labels(status="failed").inc()
            authentication_failed.labels(reason="invalid_token").inc()
            raise AuthenticationFailed(str(e))

        try:
            seller = Seller.objects.filter(pk=identity.seller_id, is_active=True).first()
        except (ValidationError, ValueError):
            seller = None

        if seller is None:
            authentication_total.labels(status="failed").inc()
            authentication_failed.labels(reason="unknown_seller").inc()
            logger.info(f"Token for unknown or inactive seller {identity.seller_id}")
            raise AuthenticationFailed("Seller not found or inactive.")

        authentication_total.labels(status="success").inc()
        return (seller, identity)

    def authenticate_header(self, request):
        return f'{self.keyword} realm="api"'
