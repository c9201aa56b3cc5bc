"""Order date stamping.

New orders always get an order date. Shipping-commit and payment dates are
only stamped when the order enters the shipped or payment-completed status;
saving an order again without a status change leaves every date alone.
"""

from collections.abc import Callable
from datetime import UTC, datetime

from purchasing.flow.context import PurchaseContext
from purchasing.order.status import PAYMENT_COMPLETED, SHIPPED, OrderStatusTable


def _utcnow():
    return datetime.now(UTC)


class UpdateDateProcessor:
    def __init__(self, statuses: OrderStatusTable, clock: Callable[[], datetime] = _utcnow) -> None:
        self.statuses = statuses
        self.clock = clock

    def process(self, order, context: PurchaseContext):
        now = self.clock()
        shipped = self.statuses.is_(order.status, SHIPPED)
        payment_completed = self.statuses.is_(order.status, PAYMENT_COMPLETED)

        if context.is_new:
            if shipped:
                order.mark_committed(now)
            elif payment_completed:
                order.mark_paid(now)
            order.stamp_order_date(now)
            return None

        transitioned = order.status != context.origin.status
        if shipped:
            if transitioned:
                order.mark_committed(now)
        elif payment_completed:
            # An earlier commit date survives a move back from shipped.
            if transitioned:
                order.mark_paid(now)
        return None
