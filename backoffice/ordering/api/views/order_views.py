from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAdminUser, IsAuthenticated
from rest_framework.response import Response

from backoffice.api.serializers import (
    ErrorResponseSerializer,
    InsufficientStockResponseSerializer,
    SuccessResponseSerializer,
)
from backoffice.api.views import error_response
from backoffice.ordering.api.serializers import (
    CreateOrderRequestSerializer,
    OrderSerializer,
    UpdateOrderRequestSerializer,
)
from backoffice.services import OrderService
from infrastructure.container import container


class OrderViewSet(viewsets.ViewSet):
    permission_classes = [IsAuthenticated]

    def get_service(self) -> OrderService:
        return container.order_service()

    def get_permissions(self):
        if self.action == "all":
            return [IsAuthenticated(), IsAdminUser()]
        return super().get_permissions()

    @extend_schema(
        operation_id="orders_list",
        summary="List my orders",
        description="""
        **What it receives:**
        - Authentication token
        - Optional state filter (query param)

        **What it returns:**
        - Orders placed by the caller, newest first
        """,
        parameters=[
            OpenApiParameter(name="state", type=str, description="Filter by state (pending, completed, cancelled)"),
        ],
        responses={
            200: OpenApiResponse(response=OrderSerializer(many=True), description="Orders retrieved successfully"),
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Unknown state"),
            500: OpenApiResponse(response=ErrorResponseSerializer, description="Internal server error"),
        },
        tags=["Back-office - Orders"],
    )
    def list(self, request):
        result = self.get_service().list_orders(request.user, state=request.query_params.get("state"))

        if not result.ok:
            return error_response(result)

        return Response(OrderSerializer(result.value, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="orders_list_all",
        summary="List every order (staff only)",
        description="""
        **What it receives:**
        - Authentication token of a staff account
        - Optional state filter (query param)

        **What it returns:**
        - Orders of every seller, newest first
        """,
        parameters=[
            OpenApiParameter(name="state", type=str, description="Filter by state (pending, completed, cancelled)"),
        ],
        responses={
            200: OpenApiResponse(response=OrderSerializer(many=True), description="Orders retrieved successfully"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Caller is not staff"),
        },
        tags=["Back-office - Orders"],
    )
    @action(detail=False, methods=["get"])
    def all(self, request):
        result = self.get_service().list_all_orders(state=request.query_params.get("state"))

        if not result.ok:
            return error_response(result)

        return Response(OrderSerializer(result.value, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="orders_retrieve",
        summary="Get order details",
        description="""
        **What it receives:**
        - `id` (UUID in URL): Order to retrieve
        - Authentication token (must be the seller who placed it)

        **What it returns:**
        - Order with its lines in insertion order
        """,
        responses={
            200: OpenApiResponse(response=OrderSerializer, description="Order retrieved successfully"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Not order owner"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Order not found"),
        },
        tags=["Back-office - Orders"],
    )
    def retrieve(self, request, pk=None):
        result = self.get_service().get_order(pk, request.user)

        if not result.ok:
            return error_response(result)

        return Response(OrderSerializer(result.value).data, status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="orders_create",
        summary="Place an order",
        description="""
        **What it receives:**
        - `client_id` (UUID): One of the caller's clients
        - `lines` (list): `product_id` and `quantity` per line
        - `total` (decimal, optional): Defaults to the sum of price * quantity
        - `state` (string, optional): Defaults to pending
        - Authentication token

        **What it returns:**
        - Created order; stock for every line is reserved, or nothing is
        """,
        request=CreateOrderRequestSerializer,
        responses={
            201: OpenApiResponse(response=OrderSerializer, description="Order created successfully"),
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Validation error"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Client belongs to another seller"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Client or product not found"),
            409: OpenApiResponse(response=InsufficientStockResponseSerializer, description="Insufficient stock"),
        },
        tags=["Back-office - Orders"],
    )
    def create(self, request):
        result = self.get_service().place_order(
            request.user,
            request.data.get("client_id"),
            request.data.get("lines"),
            total=request.data.get("total"),
            state=request.data.get("state"),
        )

        if not result.ok:
            return error_response(result)

        return Response(OrderSerializer(result.value).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        operation_id="orders_partial_update",
        summary="Update an order",
        description="""
        **What it receives:**
        - `id` (UUID in URL): Order to update
        - Any of `client_id`, `lines`, `state`, `total`
        - Authentication token (must own the order and the new client)

        **What it returns:**
        - The updated order
        - New lines are reserved against current stock, all-or-nothing
        - Cancelling returns the order's stock; un-cancelling reserves it again
        """,
        request=UpdateOrderRequestSerializer,
        responses={
            200: OpenApiResponse(response=OrderSerializer, description="Order updated successfully"),
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Validation error"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Not order or client owner"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Order, client or product not found"),
            409: OpenApiResponse(response=InsufficientStockResponseSerializer, description="Insufficient stock"),
        },
        tags=["Back-office - Orders"],
    )
    def partial_update(self, request, pk=None):
        result = self.get_service().update_order(
            pk,
            request.user,
            client_id=request.data.get("client_id"),
            lines=request.data.get("lines"),
            state=request.data.get("state"),
            total=request.data.get("total"),
        )

        if not result.ok:
            return error_response(result)

        return Response(OrderSerializer(result.value).data, status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="orders_destroy",
        summary="Delete an order",
        description="""
        **What it receives:**
        - `id` (UUID in URL): Order to delete
        - Authentication token (must be the seller who placed it)

        **What it returns:**
        - Confirmation message; reserved stock is not returned
        """,
        responses={
            200: OpenApiResponse(response=SuccessResponseSerializer, description="Order deleted"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Not order owner"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Order not found"),
        },
        tags=["Back-office - Orders"],
    )
    def destroy(self, request, pk=None):
        result = self.get_service().delete_order(pk, request.user)

        if not result.ok:
            return error_response(result)

        return Response({"message": result.value}, status=status.HTTP_200_OK)
