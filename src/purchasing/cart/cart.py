"""Cart aggregate (CQRS): the item holder a customer fills before checkout.

A cart only holds lines of a single sale type. Guest carts are identified by
session; once the customer logs in their carts are consolidated (see
``purchasing.cart.consolidation``) and end up with one cart per sale type.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String

from purchasing.cart.events import CartConverted, CartItemAdded, CartsMerged
from purchasing.domain import purchasing


class CartStatus(Enum):
    ACTIVE = "Active"
    CONVERTED = "Converted"


@purchasing.entity(part_of="Cart")
class CartItem:
    product_id = Identifier(required=True)
    product_name = String(max_length=255)
    quantity = Integer(required=True, min_value=1)
    unit_price = Float(required=True, min_value=0.0)
    sale_type = String(required=True, max_length=50)
    added_at = DateTime()


@purchasing.aggregate
class Cart:
    customer_id = Identifier()  # Nullable for guest carts
    session_id = String(max_length=255)  # For guest cart identification
    sale_type = String(max_length=50)  # Unset while the cart is empty
    items = HasMany(CartItem)
    status = String(choices=CartStatus, default=CartStatus.ACTIVE.value)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, customer_id=None, session_id=None):
        now = datetime.now(UTC)
        return cls(
            customer_id=customer_id,
            session_id=session_id,
            status=CartStatus.ACTIVE.value,
            created_at=now,
            updated_at=now,
        )

    # -------------------------------------------------------------------
    # Item management
    # -------------------------------------------------------------------
    def _assert_active(self, action):
        if CartStatus(self.status) != CartStatus.ACTIVE:
            raise ValidationError({"status": [f"{action} is only possible on an active cart"]})

    def accepts(self, sale_type):
        return not self.items or self.sale_type is None or self.sale_type == sale_type

    def add_item(self, product_id, product_name, quantity, unit_price, sale_type):
        """Add a line, or increase the quantity of the line for the same product."""
        self._assert_active("Adding items")
        if not self.accepts(sale_type):
            raise ValidationError(
                {"sale_type": [f"Items of sale type {sale_type} cannot join a {self.sale_type} cart"]}
            )

        now = datetime.now(UTC)
        existing = next((i for i in self.items if str(i.product_id) == str(product_id)), None)
        if existing:
            existing.quantity += quantity
            item_id = str(existing.id)
        else:
            item = CartItem(
                product_id=product_id,
                product_name=product_name,
                quantity=quantity,
                unit_price=unit_price,
                sale_type=sale_type,
                added_at=now,
            )
            self.add_items(item)
            item_id = str(item.id)

        self.sale_type = sale_type
        self.updated_at = now

        self.raise_(
            CartItemAdded(
                cart_id=str(self.id),
                item_id=item_id,
                product_id=str(product_id),
                quantity=quantity,
            )
        )

    # -------------------------------------------------------------------
    # Consolidation
    # -------------------------------------------------------------------
    def absorb(self, other):
        """Fold every line of ``other`` into this cart.

        Lines for a product already in this cart add up; the rest are copied.
        ``other`` is left untouched; discarding it is up to the caller.
        """
        self._assert_active("Merging")
        if other.items and not self.accepts(other.sale_type):
            raise ValidationError(
                {"sale_type": [f"A {other.sale_type} cart cannot be merged into a {self.sale_type} cart"]}
            )

        now = datetime.now(UTC)
        items_merged = 0
        for line in other.items:
            existing = next((i for i in self.items if str(i.product_id) == str(line.product_id)), None)
            if existing:
                existing.quantity += line.quantity
            else:
                self.add_items(
                    CartItem(
                        product_id=line.product_id,
                        product_name=line.product_name,
                        quantity=line.quantity,
                        unit_price=line.unit_price,
                        sale_type=line.sale_type,
                        added_at=line.added_at or now,
                    )
                )
            items_merged += 1

        if other.sale_type:
            self.sale_type = other.sale_type
        if other.customer_id and not self.customer_id:
            self.customer_id = other.customer_id
        self.updated_at = now

        self.raise_(
            CartsMerged(
                cart_id=str(self.id),
                source_cart_id=str(other.id),
                source_session_id=other.session_id or "",
                items_merged_count=items_merged,
            )
        )

    def claim(self, customer_id):
        """Attach a guest cart to the customer who just logged in."""
        self.customer_id = customer_id
        self.updated_at = datetime.now(UTC)

    # -------------------------------------------------------------------
    # Cart lifecycle
    # -------------------------------------------------------------------
    def convert_to_order(self, order_id):
        """Mark cart as converted to an order."""
        self._assert_active("Conversion")
        if not self.items:
            raise ValidationError({"cart": ["Cannot convert an empty cart"]})

        items_snapshot = [{"product_id": str(item.product_id), "quantity": item.quantity} for item in self.items]

        self.status = CartStatus.CONVERTED.value
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartConverted(
                cart_id=str(self.id),
                order_id=str(order_id),
                customer_id=str(self.customer_id) if self.customer_id else None,
                items=json.dumps(items_snapshot),
            )
        )

