"""
ClientService - Client Registry

Handles creation, retrieval, update and deletion of a seller's clients.
Every read or mutation of an existing client is ownership-checked; the owning
seller is fixed at creation.
"""

import logging
from typing import Any, Dict, Optional

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from django.db.models import QuerySet, RestrictedError

from backoffice.models import Client

from .authorization import authorize
from .base import BaseService, ErrorCodes, ServiceResult, forward_err, service_err, service_ok

User = get_user_model()
logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("first_name", "last_name", "company", "email", "phone")
REQUIRED_FIELDS = ("first_name", "last_name", "email")


class ClientService(BaseService):
    """
    Service for managing clients owned by sellers.
    """

    def _clean_input(self, data: Dict[str, Any], partial: bool) -> ServiceResult[Dict[str, Any]]:
        data = dict(data or {})

        if "seller" in data:
            return service_err(ErrorCodes.VALIDATION_ERROR, "The owning seller of a client cannot be set or changed")

        unknown = sorted(set(data) - set(EDITABLE_FIELDS))
        if unknown:
            return service_err(
                ErrorCodes.VALIDATION_ERROR,
                f"Unknown client fields: {', '.join(unknown)}",
                error_data={"fields": unknown},
            )

        if not partial:
            missing = [field for field in REQUIRED_FIELDS if not str(data.get(field) or "").strip()]
            if missing:
                return service_err(
                    ErrorCodes.VALIDATION_ERROR,
                    f"Missing required client fields: {', '.join(missing)}",
                    error_data={"fields": missing},
                )

        non_text = sorted(key for key, value in data.items() if value is not None and not isinstance(value, str))
        if non_text:
            return service_err(
                ErrorCodes.VALIDATION_ERROR,
                f"Client fields must be text: {', '.join(non_text)}",
                error_data={"fields": non_text},
            )

        cleaned = {key: value.strip() if isinstance(value, str) else value for key, value in data.items()}
        if cleaned.get("email"):
            cleaned["email"] = cleaned["email"].lower()

        return service_ok(cleaned)

    def _email_taken(self, email: str, exclude_id=None) -> bool:
        queryset = Client.objects.filter(email__iexact=email)
        if exclude_id is not None:
            queryset = queryset.exclude(pk=exclude_id)
        return queryset.exists()

    def resolve_client(self, client_id: str) -> ServiceResult[Client]:
        """
        Look a client up by id without any ownership check.

        Only for collaborators that run ``authorize`` themselves.
        """
        try:
            return service_ok(Client.objects.select_related("seller").get(pk=client_id))
        except (Client.DoesNotExist, ValidationError, ValueError):
            return service_err(ErrorCodes.CLIENT_NOT_FOUND, f"Client {client_id} not found")
        except Exception as e:
            self.logger.error(f"Error resolving client {client_id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

    @BaseService.log_performance
    def create_client(self, caller: User, data: Dict[str, Any]) -> ServiceResult[Client]:
        """
        Register a new client owned by ``caller``.

        Args:
            caller: Authenticated seller
            data: first_name, last_name, email (required), company, phone

        Returns:
            ServiceResult with the new Client, or ``validation_error`` /
            ``client_already_exists``
        """
        cleaned_result = self._clean_input(data, partial=False)
        if not cleaned_result.ok:
            return cleaned_result
        cleaned = cleaned_result.value

        if self._email_taken(cleaned["email"]):
            return service_err(ErrorCodes.CLIENT_ALREADY_EXISTS, "Client already registered.")

        client = Client(seller=caller, **cleaned)

        try:
            client.full_clean(exclude=["seller"], validate_unique=False)
        except ValidationError as e:
            return service_err(ErrorCodes.VALIDATION_ERROR, "Invalid client data", error_data=e.message_dict)

        try:
            with transaction.atomic():
                client.save()
        except IntegrityError:
            # Lost a race against a concurrent registration of the same email
            return service_err(ErrorCodes.CLIENT_ALREADY_EXISTS, "Client already registered.")
        except Exception as e:
            self.logger.error(f"Error creating client for seller {caller.id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

        self.logger.info(f"Created client {client.id} for seller {caller.id}")
        return service_ok(client)

    @BaseService.log_performance
    def get_client(self, client_id: str, caller: User) -> ServiceResult[Client]:
        """
        Get a client (owner only).

        Returns:
            ServiceResult with the Client, ``client_not_found`` or ``permission_denied``
        """
        result = self.resolve_client(client_id)
        if not result.ok:
            return result

        allowed = authorize(result.value.seller_id, caller.id, resource="client")
        if not allowed.ok:
            return forward_err(allowed)

        return result

    @BaseService.log_performance
    def update_client(self, client_id: str, caller: User, data: Dict[str, Any]) -> ServiceResult[Client]:
        """
        Update contact fields of a client (owner only). ``seller`` is immutable.
        """
        client_result = self.get_client(client_id, caller)
        if not client_result.ok:
            return client_result
        client = client_result.value

        cleaned_result = self._clean_input(data, partial=True)
        if not cleaned_result.ok:
            return cleaned_result
        cleaned = cleaned_result.value

        if "email" in cleaned and self._email_taken(cleaned["email"], exclude_id=client.pk):
            return service_err(ErrorCodes.CLIENT_ALREADY_EXISTS, "Another client already uses this email.")

        for field, value in cleaned.items():
            setattr(client, field, value)

        try:
            client.full_clean(exclude=["seller"], validate_unique=False)
        except ValidationError as e:
            return service_err(ErrorCodes.VALIDATION_ERROR, "Invalid client data", error_data=e.message_dict)

        try:
            with transaction.atomic():
                client.save()
        except IntegrityError:
            return service_err(ErrorCodes.CLIENT_ALREADY_EXISTS, "Another client already uses this email.")
        except Exception as e:
            self.logger.error(f"Error updating client {client_id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

        self.logger.info(f"Updated client {client.id}: fields={sorted(cleaned)}")
        return service_ok(client)

    @BaseService.log_performance
    def delete_client(self, client_id: str, caller: User) -> ServiceResult[str]:
        """
        Hard-delete a client (owner only). Clients with orders are kept.
        """
        client_result = self.get_client(client_id, caller)
        if not client_result.ok:
            return client_result
        client = client_result.value

        if client.orders.exists():
            return service_err(
                ErrorCodes.CLIENT_HAS_ORDERS, "The client has orders. Delete its orders before deleting the client."
            )

        try:
            client.delete()
        except RestrictedError:
            return service_err(
                ErrorCodes.CLIENT_HAS_ORDERS, "The client has orders. Delete its orders before deleting the client."
            )
        except Exception as e:
            self.logger.error(f"Error deleting client {client_id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

        self.logger.info(f"Deleted client {client_id} for seller {caller.id}")
        return service_ok("Client deleted.")

    def list_seller_clients(self, caller: User) -> ServiceResult[QuerySet]:
        """List the clients owned by ``caller``, newest first."""
        try:
            return service_ok(Client.objects.filter(seller=caller))
        except Exception as e:
            self.logger.error(f"Error listing clients for seller {caller.id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

    def list_clients(self, seller_id: Optional[str] = None) -> ServiceResult[QuerySet]:
        """
        List every client (administrative, unscoped).

        Args:
            seller_id: Optional filter by owning seller
        """
        try:
            queryset = Client.objects.select_related("seller")
            if seller_id:
                queryset = queryset.filter(seller_id=seller_id)
            return service_ok(queryset)
        except (ValidationError, ValueError):
            return service_err(ErrorCodes.VALIDATION_ERROR, f"Invalid seller id {seller_id}")
        except Exception as e:
            self.logger.error(f"Error listing clients: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))
