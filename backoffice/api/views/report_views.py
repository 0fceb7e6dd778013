from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from backoffice.api.serializers import (
    ErrorResponseSerializer,
    TopClientResponseSerializer,
    TopSellerResponseSerializer,
)
from infrastructure.container import container

from .errors import error_response


class TopClientsView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="reports_top_clients",
        summary="Rank clients by completed order totals",
        description="""
        **What it receives:**
        - Authentication token

        **What it returns:**
        - Every client with at least one completed order
        - Sorted by accumulated total, highest first (no limit)
        """,
        responses={
            200: OpenApiResponse(response=TopClientResponseSerializer(many=True), description="Ranking computed"),
            401: OpenApiResponse(response=ErrorResponseSerializer, description="Missing or invalid credential"),
            500: OpenApiResponse(response=ErrorResponseSerializer, description="Internal server error"),
        },
        tags=["Back-office - Reports"],
    )
    def get(self, request):
        result = container.reporting_service().top_clients()

        if not result.ok:
            return error_response(result)

        return Response(TopClientResponseSerializer(result.value, many=True).data, status=status.HTTP_200_OK)


class TopSellersView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="reports_top_sellers",
        summary="Top sellers by completed order totals",
        description="""
        **What it receives:**
        - Authentication token

        **What it returns:**
        - The three sellers with the highest accumulated completed totals
        - Sorted highest first; the ranking is sorted before it is cut
        """,
        responses={
            200: OpenApiResponse(response=TopSellerResponseSerializer(many=True), description="Ranking computed"),
            401: OpenApiResponse(response=ErrorResponseSerializer, description="Missing or invalid credential"),
            500: OpenApiResponse(response=ErrorResponseSerializer, description="Internal server error"),
        },
        tags=["Back-office - Reports"],
    )
    def get(self, request):
        result = container.reporting_service().top_sellers()

        if not result.ok:
            return error_response(result)

        return Response(TopSellerResponseSerializer(result.value, many=True).data, status=status.HTTP_200_OK)
