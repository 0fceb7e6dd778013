"""
Identity Context

Resolves an opaque bearer credential into the caller identity used by every
seller-scoped operation. Credentials are issued elsewhere; this module only
verifies them.
"""

import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Dict, Optional, Union

from rest_framework_simplejwt.backends import TokenBackend
from rest_framework_simplejwt.exceptions import TokenBackendError

logger = logging.getLogger(__name__)


class Unauthenticated(Exception):
    """Missing, malformed, expired or otherwise invalid credential."""


@dataclass(frozen=True)
class CallerIdentity:
    """Identity claims carried by a verified credential."""

    seller_id: str
    name: str = ""
    last_name: str = ""
    email: str = ""

    def to_dict(self) -> Dict[str, str]:
        return {
            "seller_id": self.seller_id,
            "name": self.name,
            "last_name": self.last_name,
            "email": self.email,
        }


class TokenIdentityProvider:
    """
    Verifies signed JWT credentials with an explicitly supplied key.

    The provider owns its configuration; nothing is read from process-wide
    state after construction, so tests and multiple tenants of the process can
    hold independent providers.

    Args:
        signing_key: Shared secret (HMAC) or private key used by the issuer
        algorithm: JWT algorithm (default: HS256)
        verifying_key: Public key for asymmetric algorithms
        leeway: Allowed clock skew when checking ``exp``/``nbf``
        seller_id_claim: Claim carrying the seller id

    Example:
        >>> provider = TokenIdentityProvider(signing_key=settings.SELLERDESK_AUTH["SIGNING_KEY"])
        >>> identity = provider.resolve(token)
        >>> identity.seller_id
        '5d3c...'
    """

    def __init__(
        self,
        signing_key: str,
        algorithm: str = "HS256",
        verifying_key: str = "",
        leeway: Union[int, timedelta] = 0,
        seller_id_claim: str = "user_id",
    ):
        if not signing_key:
            raise ValueError("TokenIdentityProvider requires a signing key")

        self.algorithm = algorithm
        self.seller_id_claim = seller_id_claim
        self._backend = TokenBackend(
            algorithm,
            signing_key=signing_key,
            verifying_key=verifying_key,
            leeway=leeway,
        )

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "TokenIdentityProvider":
        """Build a provider from a ``SELLERDESK_AUTH``-shaped dict."""
        return cls(
            signing_key=config.get("SIGNING_KEY", ""),
            algorithm=config.get("ALGORITHM", "HS256"),
            verifying_key=config.get("VERIFYING_KEY", ""),
            leeway=config.get("LEEWAY", 0),
            seller_id_claim=config.get("SELLER_ID_CLAIM", "user_id"),
        )

    def resolve(self, token: Optional[str]) -> CallerIdentity:
        """
        Verify ``token`` and return the caller identity.

        Raises:
            Unauthenticated: token missing, badly signed, expired or without a seller id
        """
        if not token:
            raise Unauthenticated("Authentication credentials were not provided.")

        try:
            payload = self._backend.decode(token, verify=True)
        except TokenBackendError as e:
            logger.info(f"Rejected bearer token: {e}")
            raise Unauthenticated("Token is invalid or expired") from e

        seller_id = payload.get(self.seller_id_claim)
        if not seller_id:
            raise Unauthenticated("Token contained no recognizable seller identification")

        return CallerIdentity(
            seller_id=str(seller_id),
            name=payload.get("first_name", "") or "",
            last_name=payload.get("last_name", "") or "",
            email=payload.get("email", "") or "",
        )
