"""Domain events for the Cart aggregate."""

from protean.fields import Identifier, Integer, String, Text

from purchasing.domain import purchasing


@purchasing.event(part_of="Cart")
class CartItemAdded:
    """A product was added to the cart."""

    __version__ = 1

    cart_id = Identifier(required=True)
    item_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True)


@purchasing.event(part_of="Cart")
class CartsMerged:
    """Another cart's items were folded into this cart."""

    __version__ = 1

    cart_id = Identifier(required=True)
    source_cart_id = Identifier(required=True)
    source_session_id = String()
    items_merged_count = Integer(required=True)


@purchasing.event(part_of="Cart")
class CartConverted:
    """The cart was turned into an order at checkout."""

    __version__ = 1

    cart_id = Identifier(required=True)
    order_id = Identifier(required=True)
    customer_id = Identifier()
    items = Text(required=True)  # JSON: list of {product_id, quantity}
