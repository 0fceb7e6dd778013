from django.urls import include, path
from rest_framework.routers import DefaultRouter

from backoffice.api.views import TopClientsView, TopSellersView, backoffice_prometheus_metrics
from backoffice.catalog.api.views import ProductViewSet
from backoffice.clients.api.views import ClientViewSet
from backoffice.ordering.api.views import OrderViewSet

# Create the main router
router = DefaultRouter()
router.register(r"products", ProductViewSet, basename="product")
router.register(r"clients", ClientViewSet, basename="client")
router.register(r"orders", OrderViewSet, basename="order")

app_name = "backoffice"

urlpatterns = [
    # Main API routes
    path("", include(router.urls)),
    # Reports
    path("reports/top-clients/", TopClientsView.as_view(), name="report-top-clients"),
    path("reports/top-sellers/", TopSellersView.as_view(), name="report-top-sellers"),
    # Prometheus metrics endpoint
    path("metrics/", backoffice_prometheus_metrics, name="backoffice-metrics"),
]
