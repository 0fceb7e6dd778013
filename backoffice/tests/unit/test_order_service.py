import threading
import uuid
from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal
from unittest.mock import MagicMock

import pytest
from django.db import connection

from backoffice.models import Order, OrderLine, Product
from backoffice.services import ClientService, ErrorCodes, InventoryService, OrderService, service_err
from backoffice.tests.factories import ClientFactory, ProductFactory, SellerFactory


def stock_of(product):
    return Product.objects.get(pk=product.pk).stock_quantity


@pytest.mark.unit
@pytest.mark.django_db
class TestPlaceOrder:
    def setup_method(self):
        self.service = OrderService()

    def test_place_order_reserves_and_persists(self):
        seller = SellerFactory()
        client = ClientFactory(seller=seller)
        chair = ProductFactory(price=Decimal("25.00"), stock_quantity=10)
        table = ProductFactory(price=Decimal("100.00"), stock_quantity=2)

        result = self.service.place_order(seller, str(client.id), [(str(chair.id), 4), (str(table.id), 1)])

        assert result.ok
        order = result.value
        assert order.seller_id == seller.id
        assert order.client_id == client.id
        assert order.state == Order.STATE_PENDING
        assert order.total == Decimal("200.00")
        assert order.line_items() == [(chair.id, 4), (table.id, 1)]
        assert stock_of(chair) == 6
        assert stock_of(table) == 1

    def test_place_order_with_explicit_total_and_state(self):
        seller = SellerFactory()
        client = ClientFactory(seller=seller)
        product = ProductFactory(stock_quantity=5)

        result = self.service.place_order(
            seller,
            str(client.id),
            [{"product_id": str(product.id), "quantity": 1}],
            total="42.5",
            state=Order.STATE_COMPLETED,
        )

        assert result.ok
        assert result.value.total == Decimal("42.50")
        assert result.value.state == Order.STATE_COMPLETED

    def test_insufficient_stock_writes_nothing(self):
        seller = SellerFactory()
        client = ClientFactory(seller=seller)
        chair = ProductFactory(stock_quantity=10)
        table = ProductFactory(name="Table", stock_quantity=1)

        result = self.service.place_order(seller, str(client.id), [(str(chair.id), 3), (str(table.id), 2)])

        assert not result.ok
        assert result.error == ErrorCodes.INSUFFICIENT_STOCK
        assert result.error_data["product"] == "Table"
        assert result.error_data["requested"] == 2
        assert result.error_data["available"] == 1
        assert Order.objects.count() == 0
        assert OrderLine.objects.count() == 0
        assert stock_of(chair) == 10
        assert stock_of(table) == 1

    def test_client_of_another_seller_is_forbidden(self):
        seller = SellerFactory()
        foreign_client = ClientFactory()
        product = ProductFactory(stock_quantity=5)

        result = self.service.place_order(seller, str(foreign_client.id), [(str(product.id), 1)])

        assert not result.ok
        assert result.error == ErrorCodes.PERMISSION_DENIED
        assert Order.objects.count() == 0
        assert stock_of(product) == 5

    def test_missing_client_is_not_found(self):
        product = ProductFactory(stock_quantity=5)

        result = self.service.place_order(SellerFactory(), str(uuid.uuid4()), [(str(product.id), 1)])

        assert not result.ok
        assert result.error == ErrorCodes.CLIENT_NOT_FOUND

    def test_unknown_product_rolls_back_earlier_lines(self):
        seller = SellerFactory()
        client = ClientFactory(seller=seller)
        product = ProductFactory(stock_quantity=5)

        result = self.service.place_order(seller, str(client.id), [(str(product.id), 2), (str(uuid.uuid4()), 1)])

        assert not result.ok
        assert result.error == ErrorCodes.PRODUCT_NOT_FOUND
        assert stock_of(product) == 5
        assert Order.objects.count() == 0

    @pytest.mark.parametrize("spelling", [str.upper, lambda value: value.replace("-", "")])
    def test_product_id_spelling_is_canonicalized(self, spelling):
        seller = SellerFactory()
        client = ClientFactory(seller=seller)
        product = ProductFactory(price=Decimal("12.50"), stock_quantity=5)

        result = self.service.place_order(seller, str(client.id), [(spelling(str(product.id)), 2)])

        assert result.ok
        assert result.value.total == Decimal("25.00")
        assert result.value.line_items() == [(product.id, 2)]
        assert stock_of(product) == 3

    def test_malformed_product_id_is_not_found(self):
        seller = SellerFactory()
        client = ClientFactory(seller=seller)

        result = self.service.place_order(seller, str(client.id), [("not-a-uuid", 1)])

        assert not result.ok
        assert result.error == ErrorCodes.PRODUCT_NOT_FOUND
        assert Order.objects.count() == 0

    @pytest.mark.parametrize("total", [None, "5"])
    def test_cancelled_placement_checks_catalog(self, total):
        seller = SellerFactory()
        client = ClientFactory(seller=seller)
        product = ProductFactory(stock_quantity=5)

        result = self.service.place_order(
            seller,
            str(client.id),
            [(str(product.id), 1), (str(uuid.uuid4()), 1)],
            total=total,
            state=Order.STATE_CANCELLED,
        )

        assert not result.ok
        assert result.error == ErrorCodes.PRODUCT_NOT_FOUND
        assert Order.objects.count() == 0
        assert OrderLine.objects.count() == 0
        assert stock_of(product) == 5

    def test_cancelled_placement_reserves_nothing(self):
        seller = SellerFactory()
        client = ClientFactory(seller=seller)
        product = ProductFactory(price=Decimal("4.00"), stock_quantity=1)

        result = self.service.place_order(seller, str(client.id), [(str(product.id), 3)], state=Order.STATE_CANCELLED)

        assert result.ok
        assert result.value.total == Decimal("12.00")
        assert stock_of(product) == 1

    @pytest.mark.parametrize("lines", [[], None, [("abc",)], [(None, 1)]])
    def test_malformed_lines_are_validation_errors(self, lines):
        seller = SellerFactory()
        client = ClientFactory(seller=seller)

        result = self.service.place_order(seller, str(client.id), lines)

        assert not result.ok
        assert result.error == ErrorCodes.VALIDATION_ERROR

    @pytest.mark.parametrize("quantity", [0, -3])
    def test_non_positive_quantity(self, quantity):
        seller = SellerFactory()
        client = ClientFactory(seller=seller)
        product = ProductFactory(stock_quantity=5)

        result = self.service.place_order(seller, str(client.id), [(str(product.id), quantity)])

        assert not result.ok
        assert result.error == ErrorCodes.INVALID_QUANTITY
        assert stock_of(product) == 5

    def test_negative_total_is_rejected(self):
        seller = SellerFactory()
        client = ClientFactory(seller=seller)
        product = ProductFactory(stock_quantity=5)

        result = self.service.place_order(seller, str(client.id), [(str(product.id), 1)], total="-1")

        assert not result.ok
        assert result.error == ErrorCodes.VALIDATION_ERROR

    def test_unknown_state_is_rejected(self):
        seller = SellerFactory()
        client = ClientFactory(seller=seller)
        product = ProductFactory(stock_quantity=5)

        result = self.service.place_order(seller, str(client.id), [(str(product.id), 1)], state="shipped")

        assert not result.ok
        assert result.error == ErrorCodes.INVALID_ORDER_STATE
        assert stock_of(product) == 5


@pytest.mark.unit
@pytest.mark.django_db
class TestUpdateOrder:
    def setup_method(self):
        self.service = OrderService()
        self.seller = SellerFactory()
        self.client = ClientFactory(seller=self.seller)
        self.chair = ProductFactory(price=Decimal("10.00"), stock_quantity=10)
        self.table = ProductFactory(price=Decimal("50.00"), stock_quantity=5)
        self.order = self.service.place_order(self.seller, str(self.client.id), [(str(self.chair.id), 2)]).value

    def test_update_by_another_seller_is_forbidden_and_untouched(self):
        intruder = SellerFactory()

        result = self.service.update_order(str(self.order.id), intruder, state=Order.STATE_COMPLETED, total="1")

        assert not result.ok
        assert result.error == ErrorCodes.PERMISSION_DENIED
        order = Order.objects.get(pk=self.order.pk)
        assert order.state == Order.STATE_PENDING
        assert order.total == Decimal("20.00")

    def test_update_missing_order_is_not_found(self):
        result = self.service.update_order(str(uuid.uuid4()), self.seller, state=Order.STATE_COMPLETED)

        assert not result.ok
        assert result.error == ErrorCodes.ORDER_NOT_FOUND

    def test_update_to_foreign_client_is_forbidden(self):
        foreign_client = ClientFactory()

        result = self.service.update_order(str(self.order.id), self.seller, client_id=str(foreign_client.id))

        assert not result.ok
        assert result.error == ErrorCodes.PERMISSION_DENIED
        assert Order.objects.get(pk=self.order.pk).client_id == self.client.id

    def test_update_state_and_total(self):
        result = self.service.update_order(
            str(self.order.id), self.seller, state=Order.STATE_COMPLETED, total=Decimal("99.90")
        )

        assert result.ok
        assert result.value.state == Order.STATE_COMPLETED
        assert result.value.total == Decimal("99.90")
        assert stock_of(self.chair) == 8

    def test_new_lines_reserve_without_returning_old_stock(self):
        result = self.service.update_order(str(self.order.id), self.seller, lines=[(str(self.chair.id), 3)])

        assert result.ok
        assert result.value.line_items() == [(self.chair.id, 3)]
        assert result.value.total == Decimal("30.00")
        # 10 - 2 (placement) - 3 (update)
        assert stock_of(self.chair) == 5

    def test_new_lines_insufficient_stock_leaves_order_untouched(self):
        result = self.service.update_order(
            str(self.order.id),
            self.seller,
            lines=[(str(self.chair.id), 1), (str(self.table.id), 6)],
            state=Order.STATE_COMPLETED,
        )

        assert not result.ok
        assert result.error == ErrorCodes.INSUFFICIENT_STOCK
        order = Order.objects.get(pk=self.order.pk)
        assert order.state == Order.STATE_PENDING
        assert order.line_items() == [(self.chair.id, 2)]
        assert stock_of(self.chair) == 8
        assert stock_of(self.table) == 5

    def test_cancel_releases_stock(self):
        result = self.service.update_order(str(self.order.id), self.seller, state=Order.STATE_CANCELLED)

        assert result.ok
        assert stock_of(self.chair) == 10

    def test_uncancel_reserves_again(self):
        self.service.update_order(str(self.order.id), self.seller, state=Order.STATE_CANCELLED)

        result = self.service.update_order(str(self.order.id), self.seller, state=Order.STATE_PENDING)

        assert result.ok
        assert stock_of(self.chair) == 8

    def test_lines_on_cancelled_order_check_catalog(self):
        self.service.update_order(str(self.order.id), self.seller, state=Order.STATE_CANCELLED)

        result = self.service.update_order(str(self.order.id), self.seller, lines=[(str(uuid.uuid4()), 1)], total="5")

        assert not result.ok
        assert result.error == ErrorCodes.PRODUCT_NOT_FOUND
        order = Order.objects.get(pk=self.order.pk)
        assert order.line_items() == [(self.chair.id, 2)]
        assert order.total == Decimal("20.00")

    def test_lines_with_move_to_cancelled_check_catalog(self):
        result = self.service.update_order(
            str(self.order.id), self.seller, lines=[(str(uuid.uuid4()), 1)], state=Order.STATE_CANCELLED
        )

        assert not result.ok
        assert result.error == ErrorCodes.PRODUCT_NOT_FOUND
        order = Order.objects.get(pk=self.order.pk)
        assert order.state == Order.STATE_PENDING
        assert order.line_items() == [(self.chair.id, 2)]
        assert stock_of(self.chair) == 8

    def test_lines_with_move_to_cancelled_keeps_stock_released(self):
        result = self.service.update_order(
            str(self.order.id), self.seller, lines=[(str(self.table.id).upper(), 1)], state=Order.STATE_CANCELLED
        )

        assert result.ok
        assert result.value.line_items() == [(self.table.id, 1)]
        assert result.value.total == Decimal("50.00")
        assert stock_of(self.chair) == 10
        assert stock_of(self.table) == 5

    def test_uncancel_without_stock_fails(self):
        self.service.update_order(str(self.order.id), self.seller, state=Order.STATE_CANCELLED)
        Product.objects.filter(pk=self.chair.pk).update(stock_quantity=1)

        result = self.service.update_order(str(self.order.id), self.seller, state=Order.STATE_COMPLETED)

        assert not result.ok
        assert result.error == ErrorCodes.INSUFFICIENT_STOCK
        assert Order.objects.get(pk=self.order.pk).state == Order.STATE_CANCELLED
        assert stock_of(self.chair) == 1


@pytest.mark.unit
@pytest.mark.django_db
class TestOrderQueries:
    def setup_method(self):
        self.service = OrderService()
        self.seller = SellerFactory()
        self.client = ClientFactory(seller=self.seller)
        self.product = ProductFactory(stock_quantity=100)

    def place(self, seller=None, client=None, state=Order.STATE_PENDING):
        return self.service.place_order(
            seller or self.seller, str((client or self.client).id), [(str(self.product.id), 1)], state=state
        ).value

    def test_get_order_owner_only(self):
        order = self.place()

        assert self.service.get_order(str(order.id), self.seller).ok
        denied = self.service.get_order(str(order.id), SellerFactory())
        assert denied.error == ErrorCodes.PERMISSION_DENIED

    def test_delete_order_does_not_restock(self):
        order = self.place()

        result = self.service.delete_order(str(order.id), self.seller)

        assert result.ok
        assert not Order.objects.filter(pk=order.pk).exists()
        assert stock_of(self.product) == 99

    def test_delete_order_of_another_seller_is_forbidden(self):
        order = self.place()

        result = self.service.delete_order(str(order.id), SellerFactory())

        assert result.error == ErrorCodes.PERMISSION_DENIED
        assert Order.objects.filter(pk=order.pk).exists()

    def test_list_orders_scoped_and_filtered(self):
        other_seller = SellerFactory()
        pending = self.place()
        completed = self.place(state=Order.STATE_COMPLETED)
        self.place(seller=other_seller, client=ClientFactory(seller=other_seller))

        all_mine = self.service.list_orders(self.seller)
        only_completed = self.service.list_orders(self.seller, state=Order.STATE_COMPLETED)

        assert {o.id for o in all_mine.value} == {pending.id, completed.id}
        assert [o.id for o in only_completed.value] == [completed.id]

    def test_list_orders_unknown_state(self):
        result = self.service.list_orders(self.seller, state="shipped")

        assert result.error == ErrorCodes.INVALID_ORDER_STATE

    def test_list_all_orders(self):
        other_seller = SellerFactory()
        self.place()
        self.place(seller=other_seller, client=ClientFactory(seller=other_seller))

        assert len(self.service.list_all_orders().value) == 2


@pytest.mark.unit
@pytest.mark.django_db
class TestOrderServiceCollaborators:
    def setup_method(self):
        self.inventory = MagicMock(spec=InventoryService)
        self.service = OrderService(inventory_service=self.inventory, client_service=ClientService())

    def test_forbidden_client_never_touches_stock(self):
        foreign_client = ClientFactory()

        result = self.service.place_order(SellerFactory(), str(foreign_client.id), [(str(uuid.uuid4()), 1)])

        assert result.error == ErrorCodes.PERMISSION_DENIED
        self.inventory.reserve_lines.assert_not_called()

    def test_reservation_failure_is_forwarded(self):
        seller = SellerFactory()
        client = ClientFactory(seller=seller)
        self.inventory.reserve_lines.return_value = service_err(
            ErrorCodes.INSUFFICIENT_STOCK, "short", error_data={"product": "Lamp", "requested": 2, "available": 1}
        )

        result = self.service.place_order(seller, str(client.id), [(str(uuid.uuid4()), 2)])

        assert result.error == ErrorCodes.INSUFFICIENT_STOCK
        assert result.error_data["product"] == "Lamp"
        assert Order.objects.count() == 0

    def test_cancelled_order_is_placed_without_reserving(self):
        seller = SellerFactory()
        client = ClientFactory(seller=seller)
        product = ProductFactory(price=Decimal("5.00"))

        result = self.service.place_order(
            seller, str(client.id), [(str(product.id), 2)], state=Order.STATE_CANCELLED
        )

        assert result.ok
        assert result.value.total == Decimal("10.00")
        self.inventory.reserve_lines.assert_not_called()


@pytest.mark.unit
@pytest.mark.django_db(transaction=True)
def test_concurrent_orders_cannot_oversell():
    seller = SellerFactory()
    client = ClientFactory(seller=seller)
    lamp = ProductFactory(name="Desk Lamp", stock_quantity=10)
    service = OrderService()
    start = threading.Barrier(2)

    def place(quantity):
        try:
            start.wait(timeout=10)
            return service.place_order(seller, str(client.id), [(str(lamp.id), quantity)])
        finally:
            connection.close()

    with ThreadPoolExecutor(max_workers=2) as pool:
        results = dict(zip((6, 7), pool.map(place, (6, 7))))

    winners = [quantity for quantity, result in results.items() if result.ok]
    assert len(winners) == 1
    loser = results[13 - winners[0]]
    assert loser.error == ErrorCodes.INSUFFICIENT_STOCK
    assert loser.error_data["product"] == "Desk Lamp"
    assert loser.error_data["requested"] == 13 - winners[0]
    assert stock_of(lamp) == 10 - winners[0]
    assert Order.objects.count() == 1
