"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Identifier, Integer

from purchasing.domain import purchasing


@purchasing.event(part_of="Order")
class OrderPlaced:
    """A new order passed the purchase flow and was committed."""

    __version__ = 1

    order_id = Identifier(required=True)
    customer_id = Identifier()
    status = Integer(required=True)
    order_date = DateTime(required=True)


@purchasing.event(part_of="Order")
class OrderStatusChanged:
    """The status of an existing order was changed from the back office."""

    __version__ = 1

    order_id = Identifier(required=True)
    previous_status = Integer(required=True)
    new_status = Integer(required=True)
    changed_by = Identifier()
