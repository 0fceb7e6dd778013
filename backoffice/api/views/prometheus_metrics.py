from django.http import HttpResponse
from prometheus_client import CONTENT_TYPE_LATEST, REGISTRY, generate_latest
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny


@api_view(["GET"])
@permission_classes([AllowAny])
def backoffice_prometheus_metrics(request):
    """
    Prometheus exposition of the process registry.

    ``?name[]=<sample>`` (repeatable) restricts the output to those samples,
    the same filter prometheus_client's own HTTP exporter accepts.
    """
    names = request.query_params.getlist("name[]")
    registry = REGISTRY.restricted_registry(names) if names else REGISTRY
    return HttpResponse(generate_latest(registry), content_type=CONTENT_TYPE_LATEST)
