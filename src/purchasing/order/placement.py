"""Order placement: command and handler.

Turns an active cart into a new order. The order runs through every phase of
the order flow before anything is saved; on validation errors nothing is
persisted and the cart stays active.
"""

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, String

from purchasing.cart.store import CartStore
from purchasing.domain import purchasing
from purchasing.flow.actors import Customer
from purchasing.flow.context import Channel, PurchaseContext
from purchasing.flow.flows import order_purchase_flow
from purchasing.order.order import Order
from purchasing.order.status import NEW, order_statuses
from purchasing.order.store import OrderStore

logger = structlog.get_logger(__name__)


@purchasing.command(part_of="Order")
class PlaceOrder:
    """Check out a cart as a new order."""

    cart_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    shipping_name = String(required=True, max_length=255)
    shipping_address = String(required=True, max_length=500)
    initial_status = String(max_length=50, default=NEW)


@purchasing.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        carts = CartStore()
        cart = carts.load(command.cart_id)
        if str(cart.customer_id or "") != str(command.customer_id):
            raise ValidationError({"cart_id": ["Cart does not belong to this customer"]})

        statuses = order_statuses()
        initial_status = command.initial_status or NEW
        if initial_status not in statuses.codes:
            raise ValidationError({"initial_status": [f"Unknown order status: {initial_status}"]})

        order = Order.create(
            status=statuses.code(initial_status),
            customer_id=command.customer_id,
            items_data=[
                {
                    "product_id": item.product_id,
                    "product_name": item.product_name,
                    "quantity": item.quantity,
                    "unit_price": item.unit_price,
                    "sale_type": item.sale_type,
                }
                for item in cart.items
            ],
            shippings_data=[{"name": command.shipping_name, "address": command.shipping_address}],
        )

        context = PurchaseContext.for_holder(order, Customer(customer_id=str(command.customer_id)), Channel.FRONT)
        result = order_purchase_flow().execute(order, context)
        if not result.success:
            logger.info("Order rejected", cart_id=str(cart.id), errors=result.error_messages())
            raise ValidationError(result.error_messages())
        if result.warnings:
            logger.info("Order placed with warnings", warnings=[w.message for w in result.warnings])

        order.record_placement()
        OrderStore().save(order)

        cart.convert_to_order(order.id)
        carts.save(cart)

        logger.info("Order placed", order_id=str(order.id), cart_id=str(cart.id))
        return str(order.id)
