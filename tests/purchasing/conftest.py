from datetime import UTC, datetime

import pytest
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def purchasing_bed():
    from purchasing.domain import purchasing

    bed = DomainFixture(purchasing)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(purchasing_bed):
    with purchasing_bed.domain_context():
        yield


@pytest.fixture()
def statuses():
    from purchasing.order.status import DEFAULT_ORDER_STATUSES, OrderStatusTable

    return OrderStatusTable(codes=dict(DEFAULT_ORDER_STATUSES))


class FrozenClock:
    """Returns the same instant until moved forward."""

    def __init__(self, now=None):
        self.now = now or datetime(2024, 5, 1, 9, 30, tzinfo=UTC)

    def __call__(self):
        return self.now

    def advance(self, delta):
        self.now = self.now + delta


@pytest.fixture()
def clock():
    return FrozenClock()


@pytest.fixture()
def add_product():
    """Factory that stores a product in the catalog."""
    from protean import current_domain
    from purchasing.catalog.product import Product

    def _add(product_id, **overrides):
        fields = {"id": product_id, "name": f"Product {product_id}", "price": 10.0}
        fields.update(overrides)
        product = Product(**fields)
        current_domain.repository_for(Product).add(product)
        return product

    return _add


@pytest.fixture()
def add_cart():
    """Factory that stores an active cart holding ``(product_id, quantity, sale_type)`` lines."""
    from purchasing.cart.cart import Cart
    from purchasing.cart.store import CartStore

    def _add(*lines, customer_id=None, session_id=None, unit_price=10.0):
        cart = Cart.create(customer_id=customer_id, session_id=session_id)
        for product_id, quantity, sale_type in lines:
            cart.add_item(product_id, f"Product {product_id}", quantity, unit_price, sale_type)
        return CartStore().save(cart)

    return _add
