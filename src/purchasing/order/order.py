"""Order aggregate (CQRS): the item holder committed at checkout and edited in the back office.

An order owns its line items and its shippings. Shippings are plain child
entities; anything that needs the order works from the aggregate root.

Dates are only ever set by the purchase flow (see
``purchasing.flow.processors.update_date``), which stamps them on genuine
status transitions.
"""

from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String

from purchasing.domain import purchasing
from purchasing.order.events import OrderPlaced, OrderStatusChanged


@purchasing.entity(part_of="Order")
class OrderItem:
    """A product line on an order, priced at the moment it was added."""

    product_id = Identifier(required=True)
    product_name = String(max_length=255)
    quantity = Integer(required=True, min_value=1)
    unit_price = Float(required=True, min_value=0.0)
    sale_type = String(max_length=50, default="normal")

    @property
    def line_total(self):
        return self.unit_price * self.quantity


@purchasing.entity(part_of="Order")
class Shipping:
    """One delivery destination of an order, with its own shipping-commit date."""

    name = String(max_length=255)
    address = String(max_length=500)
    shipping_commit_date = DateTime()


@purchasing.aggregate
class Order:
    customer_id = Identifier()
    status = Integer(required=True)
    items = HasMany(OrderItem)
    shippings = HasMany(Shipping)
    subtotal = Float(default=0.0)
    order_date = DateTime()
    payment_date = DateTime()
    commit_date = DateTime()
    revision = Integer(default=0)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, status, items_data, customer_id=None, shippings_data=None):
        """Build an order that has not been persisted yet.

        Args:
            status: Configured status code the order starts in.
            items_data: List of dicts with product_id, product_name, quantity,
                        unit_price and optionally sale_type.
            customer_id: The ordering customer, if any.
            shippings_data: List of dicts with name and address.
        """
        now = datetime.now(UTC)
        order = cls(customer_id=customer_id, status=status, created_at=now, updated_at=now)
        for item in items_data:
            order.add_items(OrderItem(**item))
        for shipping in shippings_data or []:
            order.add_shippings(Shipping(**shipping))
        order.recalculate_subtotal()
        return order

    # -------------------------------------------------------------------
    # Mutations used by triggers and processors
    # -------------------------------------------------------------------
    def recalculate_subtotal(self):
        self.subtotal = sum(item.line_total for item in self.items)

    def change_status(self, new_status, changed_by=None):
        """Move the order to another configured status code."""
        if new_status is None:
            raise ValidationError({"status": ["Status is required"]})
        if new_status == self.status:
            return

        previous_status = self.status
        self.status = new_status
        self.updated_at = datetime.now(UTC)

        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                previous_status=previous_status,
                new_status=new_status,
                changed_by=changed_by,
            )
        )

    def stamp_order_date(self, at):
        self.order_date = at

    def mark_paid(self, at):
        self.payment_date = at

    def mark_committed(self, at):
        """Record the shipping commit on the order and on every shipping, at one instant."""
        self.commit_date = at
        for shipping in self.shippings:
            shipping.shipping_commit_date = at

    def record_placement(self):
        self.raise_(
            OrderPlaced(
                order_id=str(self.id),
                customer_id=str(self.customer_id) if self.customer_id else None,
                status=self.status,
                order_date=self.order_date,
            )
        )
