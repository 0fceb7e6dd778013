"""
ReportingService - Sales Rankings

Aggregates the totals of completed orders per client and per seller.
Rankings are sorted by accumulated total (descending, ties by id) before any
limit is applied, so a limited ranking is always the true top of the list.
"""

import logging
from decimal import Decimal
from typing import Dict, List

from django.contrib.auth import get_user_model
from django.db.models import Sum

from backoffice.models import Client, Order

from .base import BaseService, ErrorCodes, ServiceResult, service_err, service_ok

User = get_user_model()
logger = logging.getLogger(__name__)

DEFAULT_TOP_SELLERS_LIMIT = 3


class ReportingService(BaseService):
    """
    Service for the top-clients and top-sellers reports.
    """

    def __init__(self, top_sellers_limit: int = DEFAULT_TOP_SELLERS_LIMIT):
        super().__init__()
        self.top_sellers_limit = top_sellers_limit

    def _completed_totals(self, group_by: str):
        return (
            Order.objects.filter(state=Order.STATE_COMPLETED)
            .values(group_by)
            .annotate(total=Sum("total"))
            .order_by("-total", group_by)
        )

    @BaseService.log_performance
    def top_clients(self) -> ServiceResult[List[Dict]]:
        """
        Rank every client with at least one completed order.

        Returns:
            ServiceResult with a list of
            ``{"client_id", "first_name", "last_name", "company", "email", "total"}``
            sorted by total descending
        """
        try:
            rows = list(self._completed_totals("client"))
            clients = Client.objects.in_bulk([row["client"] for row in rows])

            ranking = []
            for row in rows:
                client = clients[row["client"]]
                ranking.append(
                    {
                        "client_id": str(client.id),
                        "first_name": client.first_name,
                        "last_name": client.last_name,
                        "company": client.company,
                        "email": client.email,
                        "total": row["total"] or Decimal("0.00"),
                    }
                )

            self.logger.info(f"Top clients report: {len(ranking)} clients")
            return service_ok(ranking)

        except Exception as e:
            self.logger.error(f"Error building top clients report: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

    @BaseService.log_performance
    def top_sellers(self, limit: int = None) -> ServiceResult[List[Dict]]:
        """
        Rank sellers by the total of their completed orders.

        Args:
            limit: Number of sellers to return (default: ``top_sellers_limit``)

        Returns:
            ServiceResult with at most ``limit`` entries of
            ``{"seller_id", "name", "last_name", "email", "total"}``
        """
        limit = self.top_sellers_limit if limit is None else limit
        if not isinstance(limit, int) or isinstance(limit, bool) or limit < 1:
            return service_err(ErrorCodes.VALIDATION_ERROR, "Limit must be a positive integer")

        try:
            rows = list(self._completed_totals("seller")[:limit])
            sellers = User.objects.in_bulk([row["seller"] for row in rows])

            ranking = []
            for row in rows:
                seller = sellers[row["seller"]]
                ranking.append(
                    {
                        "seller_id": str(seller.id),
                        "name": seller.first_name,
                        "last_name": seller.last_name,
                        "email": seller.email,
                        "total": row["total"] or Decimal("0.00"),
                    }
                )

            self.logger.info(f"Top sellers report: {len(ranking)} sellers (limit {limit})")
            return service_ok(ranking)

        except Exception as e:
            self.logger.error(f"Error building top sellers report: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))
