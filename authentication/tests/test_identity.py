from datetime import timedelta

import pytest
from django.conf import settings
from rest_framework_simplejwt.backends import TokenBackend

from authentication.domain.identity import CallerIdentity, TokenIdentityProvider, Unauthenticated

SIGNING_KEY = "identity-tests-signing-key-long-enough-for-hs256"


def encode(payload, key=SIGNING_KEY):
    return TokenBackend("HS256", signing_key=key).encode(payload)


@pytest.mark.unit
class TestTokenIdentityProvider:
    def setup_method(self):
        self.provider = TokenIdentityProvider(signing_key=SIGNING_KEY)

    def test_resolves_identity_claims(self):
        token = encode({"user_id": "abc-123", "first_name": "Rita", "last_name": "Costa", "email": "rita@example.com"})

        identity = self.provider.resolve(token)

        assert identity == CallerIdentity(
            seller_id="abc-123", name="Rita", last_name="Costa", email="rita@example.com"
        )

    def test_missing_optional_claims_default_to_empty(self):
        identity = self.provider.resolve(encode({"user_id": 7}))

        assert identity.to_dict() == {"seller_id": "7", "name": "", "last_name": "", "email": ""}

    @pytest.mark.parametrize("token", [None, "", "not.a.jwt", "garbage"])
    def test_malformed_tokens_are_unauthenticated(self, token):
        with pytest.raises(Unauthenticated):
            self.provider.resolve(token)

    def test_wrong_signature_is_unauthenticated(self):
        token = encode({"user_id": "abc"}, key="another-signing-key-that-is-also-long-enough")

        with pytest.raises(Unauthenticated):
            self.provider.resolve(token)

    def test_expired_token_is_unauthenticated(self):
        token = encode({"user_id": "abc", "exp": 1})

        with pytest.raises(Unauthenticated):
            self.provider.resolve(token)

    def test_token_without_seller_claim_is_unauthenticated(self):
        with pytest.raises(Unauthenticated):
            self.provider.resolve(encode({"email": "nobody@example.com"}))

    def test_custom_seller_claim(self):
        provider = TokenIdentityProvider(signing_key=SIGNING_KEY, seller_id_claim="sub", leeway=timedelta(seconds=5))

        assert provider.resolve(encode({"sub": "seller-9"})).seller_id == "seller-9"

    def test_requires_signing_key(self):
        with pytest.raises(ValueError):
            TokenIdentityProvider(signing_key="")

    def test_from_config(self):
        provider = TokenIdentityProvider.from_config(settings.SELLERDESK_AUTH)

        assert provider.algorithm == "HS256"
        token = encode({"user_id": "x"}, key=settings.SELLERDESK_AUTH["SIGNING_KEY"])
        assert provider.resolve(token).seller_id == "x"
