from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAdminUser, IsAuthenticated
from rest_framework.response import Response

from backoffice.api.serializers import ErrorResponseSerializer, SuccessResponseSerializer
from backoffice.api.views import error_response
from backoffice.clients.api.serializers import ClientSerializer, ClientWriteRequestSerializer
from backoffice.services import ClientService
from infrastructure.container import container


def _request_fields(request) -> dict:
    return {key: value for key, value in request.data.items()}


class ClientViewSet(viewsets.ViewSet):
    """
    Clients owned by the authenticated seller.
    """

    permission_classes = [IsAuthenticated]

    def get_service(self) -> ClientService:
        return container.client_service()

    def get_permissions(self):
        if self.action == "all":
            return [IsAuthenticated(), IsAdminUser()]
        return super().get_permissions()

    @extend_schema(
        operation_id="clients_list",
        summary="List my clients",
        description="""
        **What it receives:**
        - Authentication token

        **What it returns:**
        - Clients owned by the caller, newest first
        """,
        responses={
            200: OpenApiResponse(response=ClientSerializer(many=True), description="Clients retrieved"),
            500: OpenApiResponse(response=ErrorResponseSerializer, description="Internal server error"),
        },
        tags=["Back-office - Clients"],
    )
    def list(self, request):
        result = self.get_service().list_seller_clients(request.user)

        if not result.ok:
            return error_response(result)

        return Response(ClientSerializer(result.value, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="clients_list_all",
        summary="List every client (staff only)",
        description="""
        **What it receives:**
        - Authentication token of a staff account
        - `seller` (query param, optional): Only clients of this seller

        **What it returns:**
        - Clients of every seller, newest first
        """,
        parameters=[OpenApiParameter(name="seller", type=str, description="Filter by owning seller id")],
        responses={
            200: OpenApiResponse(response=ClientSerializer(many=True), description="Clients retrieved"),
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Invalid seller id"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Caller is not staff"),
        },
        tags=["Back-office - Clients"],
    )
    @action(detail=False, methods=["get"])
    def all(self, request):
        result = self.get_service().list_clients(seller_id=request.query_params.get("seller"))

        if not result.ok:
            return error_response(result)

        return Response(ClientSerializer(result.value, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="clients_create",
        summary="Register a client",
        description="""
        **What it receives:**
        - `first_name`, `last_name`, `email` (required)
        - `company`, `phone` (optional)
        - Authentication token; the caller becomes the owning seller

        **What it returns:**
        - The created client
        """,
        request=ClientWriteRequestSerializer,
        responses={
            201: OpenApiResponse(response=ClientSerializer, description="Client created"),
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Validation error"),
            409: OpenApiResponse(response=ErrorResponseSerializer, description="Email already registered"),
        },
        tags=["Back-office - Clients"],
    )
    def create(self, request):
        result = self.get_service().create_client(request.user, _request_fields(request))

        if not result.ok:
            return error_response(result)

        return Response(ClientSerializer(result.value).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        operation_id="clients_retrieve",
        summary="Get client details",
        description="""
        **What it receives:**
        - `id` (UUID in URL): Client to retrieve
        - Authentication token (must be the owning seller)
        """,
        responses={
            200: OpenApiResponse(response=ClientSerializer, description="Client retrieved"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Client belongs to another seller"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Client not found"),
        },
        tags=["Back-office - Clients"],
    )
    def retrieve(self, request, pk=None):
        result = self.get_service().get_client(pk, request.user)

        if not result.ok:
            return error_response(result)

        return Response(ClientSerializer(result.value).data, status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="clients_partial_update",
        summary="Update client contact details",
        description="""
        **What it receives:**
        - `id` (UUID in URL): Client to update
        - Any of `first_name`, `last_name`, `email`, `company`, `phone`
        - Authentication token (must be the owning seller)

        **What it returns:**
        - The updated client; the owning seller never changes
        """,
        request=ClientWriteRequestSerializer(partial=True),
        responses={
            200: OpenApiResponse(response=ClientSerializer, description="Client updated"),
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Validation error"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Client belongs to another seller"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Client not found"),
            409: OpenApiResponse(response=ErrorResponseSerializer, description="Email already registered"),
        },
        tags=["Back-office - Clients"],
    )
    def partial_update(self, request, pk=None):
        result = self.get_service().update_client(pk, request.user, _request_fields(request))

        if not result.ok:
            return error_response(result)

        return Response(ClientSerializer(result.value).data, status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="clients_destroy",
        summary="Delete a client",
        description="""
        **What it receives:**
        - `id` (UUID in URL): Client to delete
        - Authentication token (must be the owning seller)

        **What it returns:**
        - Confirmation message; clients with orders cannot be deleted
        """,
        responses={
            200: OpenApiResponse(response=SuccessResponseSerializer, description="Client deleted"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Client belongs to another seller"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Client not found"),
            409: OpenApiResponse(response=ErrorResponseSerializer, description="Client has orders"),
        },
        tags=["Back-office - Clients"],
    )
    def destroy(self, request, pk=None):
        result = self.get_service().delete_client(pk, request.user)

        if not result.ok:
            return error_response(result)

        return Response({"message": result.value}, status=status.HTTP_200_OK)
