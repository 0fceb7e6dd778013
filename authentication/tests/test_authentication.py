import pytest
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from backoffice.tests.factories import SellerFactory, bearer_token
from infrastructure.container import container


@pytest.mark.integration
class SellerTokenAuthenticationTest(TestCase):
    def setUp(self):
        container.reset()
        self.client = APIClient()
        self.seller = SellerFactory(first_name="Rita", last_name="Costa")
        self.url = reverse("authentication:me")

    def test_missing_credential_is_401(self):
        response = self.client.get(self.url)

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertIn("Bearer", response["WWW-Authenticate"])

    def test_invalid_token_is_401(self):
        self.client.credentials(HTTP_AUTHORIZATION="Bearer not-a-token")

        response = self.client.get(self.url)

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_malformed_header_is_401(self):
        self.client.credentials(HTTP_AUTHORIZATION="Bearer")

        response = self.client.get(self.url)

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_token_for_inactive_seller_is_401(self):
        self.seller.is_active = False
        self.seller.save()
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {bearer_token(self.seller)}")

        response = self.client.get(self.url)

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_valid_token_resolves_identity(self):
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {bearer_token(self.seller)}")

        response = self.client.get(self.url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["seller_id"], str(self.seller.id))
        self.assertEqual(response.data["name"], "Rita")
        self.assertEqual(response.data["last_name"], "Costa")
        self.assertEqual(response.data["email"], self.seller.email)
