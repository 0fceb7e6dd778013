from .errors import error_response, invalid_input_response, status_for_error
from .prometheus_metrics import backoffice_prometheus_metrics
from .report_views import TopClientsView, TopSellersView

__all__ = [
    "error_response",
    "invalid_input_response",
    "status_for_error",
    "backoffice_prometheus_metrics",
    "TopClientsView",
    "TopSellersView",
]
