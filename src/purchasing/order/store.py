"""Order persistence: load, staleness check and save.

The purchase flow never persists. Triggers load an order here, run the flow,
and hand the order back. ``revision`` is the staleness token: it goes up by
one on every save of an existing order, and a save is refused when the stored
revision no longer matches the one the caller started from.
"""

import structlog
from protean.exceptions import ExpectedVersionError
from protean.utils.globals import current_domain

from purchasing.flow.exceptions import ConcurrencyConflict
from purchasing.order.order import Order

logger = structlog.get_logger(__name__)


class OrderStore:
    @property
    def repository(self):
        return current_domain.repository_for(Order)

    def load(self, order_id) -> Order:
        return self.repository.get(order_id)

    def ensure_current(self, order: Order, expected_revision: int | None = None) -> None:
        """Raise ``ConcurrencyConflict`` if the stored order moved on since ``expected_revision``."""
        if not order.state_.is_persisted:
            return

        expected = order.revision if expected_revision is None else expected_revision
        stored = self.repository.get(order.id).revision
        if stored != expected:
            logger.warning(
                "Stale order rejected",
                order_id=str(order.id),
                expected_revision=expected,
                stored_revision=stored,
            )
            raise ConcurrencyConflict(
                f"Order {order.id} was modified concurrently",
                aggregate_id=str(order.id),
                expected_revision=expected,
                actual_revision=stored,
            )

    def save(self, order: Order, expected_revision: int | None = None) -> Order:
        if order.state_.is_persisted:
            self.ensure_current(order, expected_revision)
            order.revision = (order.revision if expected_revision is None else expected_revision) + 1

        try:
            self.repository.add(order)
        except ExpectedVersionError as exc:
            raise ConcurrencyConflict(str(exc), aggregate_id=str(order.id)) from exc

        logger.debug("Order saved", order_id=str(order.id), revision=order.revision)
        return order
