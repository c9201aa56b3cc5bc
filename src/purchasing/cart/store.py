"""Cart persistence used by checkout and login consolidation."""

from datetime import UTC, datetime

import structlog
from protean.utils.globals import current_domain

from purchasing.cart.cart import Cart, CartStatus

logger = structlog.get_logger(__name__)

_EPOCH = datetime.min.replace(tzinfo=UTC)


class CartStore:
    @property
    def repository(self):
        return current_domain.repository_for(Cart)

    def load(self, cart_id) -> Cart:
        return self.repository.get(cart_id)

    def _active(self, **filters) -> list[Cart]:
        found = self.repository._dao.query.filter(status=CartStatus.ACTIVE.value, **filters).all().items
        carts = [self.repository.get(cart.id) for cart in found]
        return sorted(carts, key=lambda cart: cart.created_at or _EPOCH)

    def list_carts_for(self, customer_id) -> list[Cart]:
        """Active carts already attached to the customer, oldest first."""
        return self._active(customer_id=str(customer_id))

    def list_session_carts(self, session_id) -> list[Cart]:
        """Active guest carts opened in the given session, oldest first."""
        return [cart for cart in self._active(session_id=session_id) if not cart.customer_id]

    def save(self, cart: Cart) -> Cart:
        self.repository.add(cart)
        return cart

    def save_all(self, carts) -> None:
        for cart in carts:
            self.save(cart)

    def discard(self, cart: Cart) -> None:
        if cart.state_.is_persisted:
            self.repository._dao.delete(cart)
            logger.debug("Cart discarded", cart_id=str(cart.id))
