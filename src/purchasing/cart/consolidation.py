"""Cart consolidation: folds a customer's carts into the fewest carts possible.

Carts are compatible when they hold the same sale type (an empty cart is
compatible with anything). Every compatible cart is absorbed into the first
cart of its kind; whatever cannot be merged stays as a separate cart.
"""

from dataclasses import dataclass, field

import structlog

from purchasing.cart.cart import Cart

logger = structlog.get_logger(__name__)


@dataclass
class MergeOutcome:
    carts: list[Cart] = field(default_factory=list)
    discarded: list[Cart] = field(default_factory=list)

    @property
    def divided(self) -> bool:
        return len(self.carts) > 1


class CartConsolidationService:
    def merge(self, customer_id, persisted_carts, session_carts) -> MergeOutcome:
        """Merge the customer's persisted carts with the carts of the current session.

        Persisted carts come first, so they survive as merge targets and
        session lines are folded into them.
        """
        outcome = MergeOutcome()
        seen = set()

        for cart in [*persisted_carts, *session_carts]:
            if str(cart.id) in seen:
                continue
            seen.add(str(cart.id))

            if str(cart.customer_id or "") != str(customer_id):
                cart.claim(customer_id)

            if not cart.items:
                if outcome.carts:
                    outcome.discarded.append(cart)
                else:
                    outcome.carts.append(cart)
                continue

            target = next((kept for kept in outcome.carts if kept.accepts(cart.sale_type)), None)
            if target is None:
                outcome.carts.append(cart)
            else:
                target.absorb(cart)
                outcome.discarded.append(cart)

        logger.info(
            "Carts consolidated",
            customer_id=str(customer_id),
            carts=len(outcome.carts),
            discarded=len(outcome.discarded),
        )
        return outcome
