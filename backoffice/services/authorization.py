"""
Ownership guard for seller-scoped resources.

Clients and orders belong to exactly one seller. Every read or mutation of
either goes through ``authorize`` first; a mismatch is reported as
``permission_denied`` and never as a missing resource.
"""

import logging
from typing import Any

from backoffice.infra.observability.metrics import authorization_denials

from .base import ErrorCodes, ServiceResult, service_err, service_ok

logger = logging.getLogger(__name__)


def authorize(resource_owner_id: Any, caller_id: Any, resource: str = "resource") -> ServiceResult[None]:
    """
    Allow the call only when the caller owns the resource.

    Ids are compared as strings so UUID instances and their text form match.

    Args:
        resource_owner_id: Seller id stored on the resource
        caller_id: Seller id of the authenticated caller
        resource: Resource kind, used for logging and metrics only

    Returns:
        ServiceResult ok with no value, or a ``permission_denied`` failure
    """
    if resource_owner_id is not None and caller_id is not None and str(resource_owner_id) == str(caller_id):
        return service_ok()

    authorization_denials.labels(resource=resource).inc()
    logger.info(f"Denied {resource} access: owner={resource_owner_id}, caller={caller_id}")
    return service_err(ErrorCodes.PERMISSION_DENIED, "You do not have access to this information.")
