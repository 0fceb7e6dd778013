"""
Prometheus Metrics

Defines the Prometheus metrics for bearer-token authentication.
"""

from prometheus_client import Counter


authentication_total = Counter("auth_token_authentication_total", "Bearer token authentications", ["status"])
"""
Bearer token authentication counter.
Labels: status (success/failed)

Example:
    authentication_total.labels(status='success').inc()
"""

authentication_failed = Counter("auth_token_authentication_failed", "Failed bearer token authentications", ["reason"])
"""
Failed authentications counter.
Labels: reason (invalid_token, unknown_seller, malformed_header)

Example:
    authentication_failed.labels(reason='invalid_token').inc()
"""
