
from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from backoffice.api.serializers import ErrorResponseSerializer
from backoffice.api.views import error_response, invalid_input_response
from backoffice.catalog.api.serializers import ProductSearchQuerySerializer, ProductSerializer
from backoffice.services import InventoryService
from infrastructure.container import container



class ProductViewSet(viewsets.ViewSet):
    """
    Read-only access to the shared catalog. Stock only changes through orders.
    """

    permission_classes = [IsAuthenticated]

    def get_service(self) -> InventoryService:
        return container.inventory_service()

    @extend_schema(
        operation_id="products_list",
        summary="List the catalog",
        description="""
        **What it receives:**
        - Authentication token

        **What it returns:**
        - Every product with price and current stock, ordered by name
        """,
        responses={
            200: OpenApiResponse(response=ProductSerializer(many=True), description="Products retrieved"),
            500: OpenApiResponse(response=ErrorResponseSerializer, description="Internal server error"),
        },
        tags=["Back-office - Products"],
    )
    def list(self, request):
        result = self.get_service().list_products()

        if not result.ok:
            return error_response(result)

        return Response(ProductSerializer(result.value, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="products_retrieve",
        summary="Get product details",
        description="""
        **What it receives:**
        - `id` (UUID in URL): Product to retrieve

        **What it returns:**
        - Product details including current stock
        """,
        responses={
            200: OpenApiResponse(response=ProductSerializer, description="Product retrieved"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Product not found"),
        },
        tags=["Back-office - Products"],
    )
    def retrieve(self, request, pk=None):
        result = self.get_service().get_product(pk)

        if not result.ok:
            return error_response(result)

        return Response(ProductSerializer(result.value).data, status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="products_search",
        summary="Search products by text",
        description="""
        **What it receives:**
        - `text` (query param): Matched case-insensitively against name and description
        - `limit` (query param, optional): Maximum results (default: 10)

        **What it returns:**
        - Matching products ordered by name
        """,
        parameters=[
            OpenApiParameter(name="text", type=str, required=True, description="Search text"),
            OpenApiParameter(name="limit", type=int, description="Maximum results (default: 10)"),
        ],
        responses={
            200: OpenApiResponse(response=ProductSerializer(many=True), description="Search results"),
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Missing search text"),
        },
        tags=["Back-office - Products"],
    )
    @action(detail=False, methods=["get"])
    def search(self, request):
        query = ProductSearchQuerySerializer(data=request.query_params)
        if not query.is_valid():
            return invalid_input_response(query.errors)

        result = self.get_service().search_products(
            query.validated_data["text"], limit=query.validated_data.get("limit")
        )

        if not result.ok:
            return error_response(result)

        return Response(ProductSerializer(result.value, many=True).data, status=status.HTTP_200_OK)
