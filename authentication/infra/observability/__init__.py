"""
Observability Infrastructure

OpenTelemetry tracing and Prometheus metrics shared by the authentication and
back-office apps.
"""

from .metrics import authentication_failed, authentication_total
from .tracing import add_span_attributes, get_tracer, setup_tracing

__all__ = [
    "setup_tracing",
    "get_tracer",
    "add_span_attributes",
    "authentication_total",
    "authentication_failed",
]
