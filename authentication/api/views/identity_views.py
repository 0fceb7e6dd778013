from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from authentication.api.serializers import CallerIdentitySerializer


class CurrentIdentityView(APIView):
    """
    Return the identity carried by the caller's bearer token.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="auth_me",
        summary="Resolve the current caller identity",
        description="""
        **What it receives:**
        - Authentication token (Bearer)

        **What it returns:**
        - `seller_id`, `name`, `last_name`, `email` as carried by the token
        """,
        responses={
            200: OpenApiResponse(response=CallerIdentitySerializer, description="Identity resolved"),
            401: OpenApiResponse(description="Missing or invalid credential"),
        },
        tags=["Authentication"],
    )
    def get(self, request):
        identity = request.auth
        return Response(CallerIdentitySerializer(identity.to_dict()).data, status=status.HTTP_200_OK)
