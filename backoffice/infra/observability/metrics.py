from prometheus_client import Counter, Histogram


# Order Metrics
orders_placed_total = Counter("backoffice_orders_placed_total", "Total orders placed", ["status"])
orders_updated_total = Counter("backoffice_orders_updated_total", "Total order updates", ["status"])
order_value = Histogram(
    "backoffice_order_value",
    "Order value distribution",
    buckets=[10, 50, 100, 200, 500, 1000, 2000, 5000, float("inf")],
)

# Stock Metrics
stock_reservation_failures = Counter(
    "backoffice_stock_reservation_failure", "Stock reservation failures", ["reason"]
)
stock_released_units = Counter("backoffice_stock_released_units", "Units returned to stock by cancellations")

# Authorization Metrics
authorization_denials = Counter(
    "backoffice_authorization_denials_total", "Ownership checks that denied access", ["resource"]
)
