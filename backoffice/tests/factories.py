import random
import uuid
from decimal import Decimal

import factory
from django.conf import settings
from django.contrib.auth import get_user_model
from faker import Faker
from rest_framework_simplejwt.backends import TokenBackend

from backoffice.models import Client, Order, OrderLine, Product

User = get_user_model()
fake = Faker()


class SellerFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = User

    id = factory.LazyFunction(uuid.uuid4)
    username = factory.Sequence(lambda n: f"seller_{n}")
    email = factory.Sequence(lambda n: f"seller_{n}@example.com")
    first_name = factory.Faker("first_name")
    last_name = factory.Faker("last_name")
    password = factory.PostGenerationMethodCall("set_password", "defaultpassword")
    is_active = True


class StaffSellerFactory(SellerFactory):
    is_staff = True
    username = factory.Sequence(lambda n: f"staff_{n}")
    email = factory.Sequence(lambda n: f"staff_{n}@example.com")


class ProductFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = Product

    id = factory.LazyFunction(uuid.uuid4)
    name = factory.Sequence(lambda n: f"Product {n}")
    description = factory.Faker("sentence", nb_words=10)
    price = factory.LazyFunction(lambda: Decimal(f"{random.randint(10, 500)}.00"))
    stock_quantity = 10


class ClientFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = Client

    id = factory.LazyFunction(uuid.uuid4)
    first_name = factory.Faker("first_name")
    last_name = factory.Faker("last_name")
    company = factory.Faker("company")
    email = factory.Sequence(lambda n: f"client_{n}@example.com")
    phone = factory.LazyFunction(lambda: fake.numerify("+351 9## ### ###"))
    seller = factory.SubFactory(SellerFactory)


class OrderFactory(factory.django.DjangoModelFactory):
    """Order row only; no stock is reserved. Use OrderService for real placement."""

    class Meta:
        model = Order

    id = factory.LazyFunction(uuid.uuid4)
    seller = factory.SubFactory(SellerFactory)
    client = factory.LazyAttribute(lambda o: ClientFactory(seller=o.seller))
    total = Decimal("100.00")
    state = Order.STATE_PENDING


class OrderLineFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = OrderLine

    order = factory.SubFactory(OrderFactory)
    product = factory.SubFactory(ProductFactory)
    quantity = 1
    position = factory.Sequence(lambda n: n)


def bearer_token(seller, **claims) -> str:
    """Signed access token for ``seller`` carrying the identity claims."""
    payload = {
        "user_id": str(seller.id),
        "first_name": seller.first_name,
        "last_name": seller.last_name,
        "email": seller.email,
    }
    payload.update(claims)
    auth = settings.SELLERDESK_AUTH
    return TokenBackend(auth.get("ALGORITHM", "HS256"), signing_key=auth["SIGNING_KEY"]).encode(payload)
