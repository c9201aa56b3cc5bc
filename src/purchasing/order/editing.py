"""Back-office order edit: command and handler.

The order is snapshotted before the edit is applied, so the flow can tell a
genuine status transition from a plain re-save. The staleness check runs
between prepare and commit.
"""

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, Integer, String

from purchasing.domain import purchasing
from purchasing.flow.actors import Staff
from purchasing.flow.context import Channel, PurchaseContext
from purchasing.flow.flow import PREPARE, VALIDATE
from purchasing.flow.flows import order_purchase_flow
from purchasing.order.order import Order
from purchasing.order.status import order_statuses
from purchasing.order.store import OrderStore

logger = structlog.get_logger(__name__)


@purchasing.command(part_of="Order")
class EditOrder:
    """Change an existing order's status from the back office."""

    order_id = Identifier(required=True)
    member_id = Identifier(required=True)
    status = String(required=True, max_length=50)
    expected_revision = Integer()


@purchasing.command_handler(part_of=Order)
class EditOrderHandler:
    @handle(EditOrder)
    def edit_order(self, command):
        store = OrderStore()
        order = store.load(command.order_id)

        statuses = order_statuses()
        if command.status not in statuses.codes:
            raise ValidationError({"status": [f"Unknown order status: {command.status}"]})

        context = PurchaseContext.for_holder(order, Staff(member_id=str(command.member_id)), Channel.BACK)
        order.change_status(statuses.code(command.status), changed_by=str(command.member_id))

        flow = order_purchase_flow()
        result = flow.execute(order, context, phases=(VALIDATE, PREPARE))
        if not result.success:
            raise ValidationError(result.error_messages())

        store.ensure_current(order, command.expected_revision)

        committed = flow.commit(order, context)
        if not committed.success:
            raise ValidationError(committed.error_messages())

        store.save(order, command.expected_revision)
        logger.info(
            "Order edited",
            order_id=str(order.id),
            status=command.status,
            revision=order.revision,
        )
        return order.revision
