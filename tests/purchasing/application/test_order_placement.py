"""Application tests for checkout via domain.process()."""

import pytest
from protean import current_domain
from protean.exceptions import ValidationError
from purchasing.cart.cart import CartStatus
from purchasing.cart.store import CartStore
from purchasing.catalog.product import Product
from purchasing.order.order import Order
from purchasing.order.placement import PlaceOrder
from purchasing.order.store import OrderStore


def _place_order(cart, **overrides):
    fields = {
        "cart_id": str(cart.id),
        "customer_id": "cust-001",
        "shipping_name": "Jo Doe",
        "shipping_address": "1 Main St, Springfield",
    }
    fields.update(overrides)
    return current_domain.process(PlaceOrder(**fields), asynchronous=False)


@pytest.fixture()
def cart(add_product, add_cart):
    add_product("prod-001", stock=10)
    add_product("prod-002", price=25.0)
    return add_cart(("prod-001", 2, "normal"), ("prod-002", 1, "normal"), customer_id="cust-001")


class TestPlaceOrder:
    def test_returns_persisted_order(self, cart):
        order_id = _place_order(cart)

        order = OrderStore().load(order_id)
        assert order.status == 1
        assert str(order.customer_id) == "cust-001"
        assert len(order.items) == 2
        assert order.subtotal == 30.0
        assert order.revision == 0

    def test_new_order_gets_order_date_only(self, cart):
        order = OrderStore().load(_place_order(cart))

        assert order.order_date is not None
        assert order.payment_date is None
        assert order.commit_date is None

    def test_order_placed_as_shipped_is_committed(self, cart):
        order = OrderStore().load(_place_order(cart, initial_status="shipped"))

        assert order.commit_date == order.order_date
        assert [s.shipping_commit_date for s in order.shippings] == [order.commit_date]

    def test_order_placed_as_paid_gets_payment_date(self, cart):
        order = OrderStore().load(_place_order(cart, initial_status="payment_completed"))

        assert order.payment_date == order.order_date
        assert order.commit_date is None

    def test_stock_is_taken(self, cart):
        _place_order(cart)

        assert current_domain.repository_for(Product).get("prod-001").stock == 8

    def test_cart_is_converted(self, cart):
        _place_order(cart)

        assert CartStore().load(cart.id).status == CartStatus.CONVERTED.value


class TestRejectedOrder:
    def test_stock_shortfall_persists_nothing(self, add_product, add_cart):
        add_product("prod-001", stock=1)
        cart = add_cart(("prod-001", 3, "normal"), customer_id="cust-001")

        with pytest.raises(ValidationError) as exc_info:
            _place_order(cart)

        assert "stock" in exc_info.value.messages
        assert current_domain.repository_for(Order)._dao.query.all().items == []
        assert CartStore().load(cart.id).status == CartStatus.ACTIVE.value

    def test_every_problem_is_reported(self, add_product, add_cart):
        add_product("prod-001", stock=1)
        add_product("prod-002", sale_limit=1)
        cart = add_cart(("prod-001", 3, "normal"), ("prod-002", 2, "normal"), customer_id="cust-001")

        with pytest.raises(ValidationError) as exc_info:
            _place_order(cart)

        assert set(exc_info.value.messages) == {"stock", "sale_limit"}

    def test_hidden_product_is_rejected(self, add_product, add_cart):
        add_product("prod-001", visible=False)
        cart = add_cart(("prod-001", 1, "normal"), customer_id="cust-001")

        with pytest.raises(ValidationError) as exc_info:
            _place_order(cart)

        assert "product" in exc_info.value.messages

    def test_cart_of_another_customer(self, cart):
        with pytest.raises(ValidationError):
            _place_order(cart, customer_id="cust-999")

    def test_unknown_initial_status(self, cart):
        with pytest.raises(ValidationError) as exc_info:
            _place_order(cart, initial_status="teleported")

        assert "initial_status" in exc_info.value.messages

    def test_last_unit_can_only_be_ordered_once(self, add_product, add_cart):
        add_product("prod-001", stock=1)
        first = add_cart(("prod-001", 1, "normal"), customer_id="cust-001")
        second = add_cart(("prod-001", 1, "normal"), customer_id="cust-001")

        _place_order(first)
        with pytest.raises(ValidationError) as exc_info:
            _place_order(second)

        assert "stock" in exc_info.value.messages
        assert current_domain.repository_for(Product).get("prod-001").stock == 0
        assert len(current_domain.repository_for(Order)._dao.query.all().items) == 1
