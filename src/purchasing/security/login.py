"""Login bridge: what happens right after someone authenticates.

Staff members get their login date recorded, outside any purchase flow.
Customers get their carts consolidated: persisted carts and the carts of the
current session are merged, every resulting cart is validated against the
cart flow, and the merged set is saved whatever validation said.

The bridge does not own the session. It reports ``carts_divided`` and the
caller decides how to show it.
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime

import structlog
from protean.utils.globals import current_domain

from purchasing.cart.cart import Cart
from purchasing.cart.consolidation import CartConsolidationService
from purchasing.cart.store import CartStore
from purchasing.flow.actors import Actor, Customer, Staff
from purchasing.flow.context import PurchaseContext
from purchasing.flow.exceptions import FlowFault
from purchasing.flow.flow import PurchaseFlow
from purchasing.flow.flows import cart_purchase_flow
from purchasing.flow.result import ProcessingResult
from purchasing.staff.member import Member

logger = structlog.get_logger(__name__)


def _utcnow():
    return datetime.now(UTC)


@dataclass(frozen=True)
class LoginEvent:
    actor: Actor
    session_id: str | None = None


@dataclass(frozen=True)
class LoginOutcome:
    carts: tuple[Cart, ...] = ()
    results: Mapping[str, ProcessingResult] = field(default_factory=dict)
    faults: Mapping[str, FlowFault] = field(default_factory=dict)
    carts_divided: bool = False


class LoginEventBridge:
    def __init__(
        self,
        cart_flow: PurchaseFlow | None = None,
        cart_store: CartStore | None = None,
        consolidation: CartConsolidationService | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.cart_flow = cart_flow or cart_purchase_flow()
        self.cart_store = cart_store or CartStore()
        self.consolidation = consolidation or CartConsolidationService()
        self.clock = clock

    def on_interactive_login(self, event: LoginEvent) -> LoginOutcome:
        match event.actor:
            case Staff(member_id=member_id):
                self._record_staff_login(member_id)
                return LoginOutcome()
            case Customer(customer_id=customer_id):
                return self._consolidate_carts(event.actor, customer_id, event.session_id)
            case _:
                raise TypeError(f"Unsupported actor: {event.actor!r}")

    def _record_staff_login(self, member_id) -> None:
        """Best effort: a failure here is logged and never blocks the login."""
        try:
            repo = current_domain.repository_for(Member)
            member = repo.get(member_id)
            member.record_login(self.clock())
            repo.add(member)
        except Exception:
            logger.exception("Could not record staff login date", member_id=str(member_id))
            return

        logger.info("Staff login recorded", member_id=str(member_id))

    def _consolidate_carts(self, actor: Customer, customer_id, session_id) -> LoginOutcome:
        persisted = self.cart_store.list_carts_for(customer_id)
        session_carts = self.cart_store.list_session_carts(session_id) if session_id else []
        merged = self.consolidation.merge(customer_id, persisted, session_carts)

        results: dict[str, ProcessingResult] = {}
        faults: dict[str, FlowFault] = {}
        for cart in merged.carts:
            context = PurchaseContext.for_holder(cart, actor)
            try:
                results[str(cart.id)] = self.cart_flow.validate(cart, context)
            except FlowFault as fault:
                logger.exception("Cart validation aborted", cart_id=str(cart.id))
                faults[str(cart.id)] = fault

        self.cart_store.save_all(merged.carts)
        for cart in merged.discarded:
            self.cart_store.discard(cart)

        if merged.divided:
            logger.info("Carts could not be fully merged", customer_id=str(customer_id), carts=len(merged.carts))

        return LoginOutcome(
            carts=tuple(merged.carts),
            results=results,
            faults=faults,
            carts_divided=merged.divided,
        )
