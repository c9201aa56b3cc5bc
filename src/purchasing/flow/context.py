"""Purchase context: what was true before the flow ran, and who is running it."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict

from purchasing.flow.actors import Actor, Customer, Staff


class FlowType(Enum):
    NEW = "New"
    EDIT = "Edit"


class Channel(Enum):
    FRONT = "Front"
    BACK = "Back"


class ItemSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str | None = None
    product_id: str | None = None
    quantity: int = 0
    unit_price: float | None = None


class ShippingSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str | None = None
    shipping_commit_date: datetime | None = None


class HolderSnapshot(BaseModel):
    """Read-only copy of an item holder taken before a flow mutates it.

    Works for both carts and orders; fields a holder does not have stay None.
    """

    model_config = ConfigDict(frozen=True)

    id: str | None = None
    status: int | str | None = None
    order_date: datetime | None = None
    payment_date: datetime | None = None
    commit_date: datetime | None = None
    items: tuple[ItemSnapshot, ...] = ()
    shippings: tuple[ShippingSnapshot, ...] = ()

    @classmethod
    def capture(cls, holder) -> "HolderSnapshot":
        return cls(
            id=_str_or_none(holder.id),
            status=getattr(holder, "status", None),
            order_date=getattr(holder, "order_date", None),
            payment_date=getattr(holder, "payment_date", None),
            commit_date=getattr(holder, "commit_date", None),
            items=tuple(
                ItemSnapshot(
                    id=_str_or_none(item.id),
                    product_id=_str_or_none(item.product_id),
                    quantity=item.quantity,
                    unit_price=item.unit_price,
                )
                for item in holder.items
            ),
            shippings=tuple(
                ShippingSnapshot(
                    id=_str_or_none(shipping.id),
                    shipping_commit_date=shipping.shipping_commit_date,
                )
                for shipping in getattr(holder, "shippings", None) or []
            ),
        )


def _str_or_none(value):
    return str(value) if value is not None else None


@dataclass(frozen=True)
class PurchaseContext:
    """Built once per flow invocation and discarded afterwards.

    ``flow_type`` is decided when the context is built: a holder that has
    never been persisted is NEW, anything loaded from a store is an EDIT.
    """

    origin: HolderSnapshot
    actor: Actor | None = None
    flow_type: FlowType = FlowType.NEW
    channel: Channel = Channel.FRONT

    @classmethod
    def for_holder(cls, holder, actor: Actor | None = None, channel: Channel | None = None) -> "PurchaseContext":
        """Snapshot ``holder`` as the origin. Call this before mutating the holder."""
        if channel is None:
            match actor:
                case Staff():
                    channel = Channel.BACK
                case _:
                    channel = Channel.FRONT
        return cls(
            origin=HolderSnapshot.capture(holder),
            actor=actor,
            flow_type=FlowType.EDIT if holder.state_.is_persisted else FlowType.NEW,
            channel=channel,
        )

    @property
    def is_new(self) -> bool:
        return self.flow_type is FlowType.NEW

    @property
    def customer_id(self) -> str | None:
        match self.actor:
            case Customer(customer_id=customer_id):
                return customer_id
            case _:
                return None
