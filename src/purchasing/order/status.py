"""Order status codes.

Statuses are numeric codes assigned per deployment. Code always asks the table
what a code means ("is this the shipped status?") instead of comparing against
literal numbers.
"""

from functools import cache

from pydantic import BaseModel, ConfigDict, field_validator

from purchasing.domain import purchasing
from purchasing.flow.exceptions import FlowFault

NEW = "new"
PAY_WAIT = "pay_wait"
CANCELLED = "cancelled"
BACK_ORDER = "back_order"
SHIPPED = "shipped"
PAYMENT_COMPLETED = "payment_completed"
PENDING = "pending"
PROCESSING = "processing"

DEFAULT_ORDER_STATUSES = {
    NEW: 1,
    PAY_WAIT: 2,
    CANCELLED: 3,
    BACK_ORDER: 4,
    SHIPPED: 5,
    PAYMENT_COMPLETED: 6,
    PENDING: 7,
    PROCESSING: 8,
}


class OrderStatusTable(BaseModel):
    model_config = ConfigDict(frozen=True)

    codes: dict[str, int]

    @field_validator("codes")
    @classmethod
    def codes_must_be_unique(cls, value):
        if len(set(value.values())) != len(value):
            raise ValueError("Each order status must map to a distinct code")
        return value

    def code(self, name: str) -> int:
        try:
            return self.codes[name]
        except KeyError:
            raise FlowFault(f"Order status '{name}' is not configured") from None

    def is_(self, code: int | None, name: str) -> bool:
        return code is not None and code == self.code(name)

    def name_of(self, code: int | None) -> str | None:
        return next((name for name, value in self.codes.items() if value == code), None)


def load_status_table(domain) -> OrderStatusTable:
    """Build the table from the ``order_statuses`` custom setting, over the defaults."""
    configured = domain.config.get("custom", {}).get("order_statuses") or {}
    return OrderStatusTable(codes={**DEFAULT_ORDER_STATUSES, **configured})


@cache
def order_statuses() -> OrderStatusTable:
    return load_status_table(purchasing)
