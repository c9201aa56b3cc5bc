"""The purchase flows, with their processors in the order they run.

Flows are assembled once; handlers and the login bridge share the same
instances.
"""

from functools import cache

from purchasing.catalog.product import ProductCatalog
from purchasing.flow.flow import COMMIT, PREPARE, VALIDATE, PurchaseFlow
from purchasing.flow.processors.availability import ProductAvailabilityValidator
from purchasing.flow.processors.holder import EmptyHolderValidator, SubtotalProcessor
from purchasing.flow.processors.pricing import PriceChangeValidator
from purchasing.flow.processors.sale_limit import SaleLimitValidator
from purchasing.flow.processors.stock import StockReductionProcessor, StockValidator
from purchasing.flow.processors.update_date import UpdateDateProcessor
from purchasing.order.status import order_statuses


@cache
def order_purchase_flow() -> PurchaseFlow:
    """Checkout and back-office order edits."""
    catalog = ProductCatalog()
    return PurchaseFlow(
        "order",
        {
            VALIDATE: [
                EmptyHolderValidator(),
                ProductAvailabilityValidator(catalog, against_origin=True),
                StockValidator(catalog, against_origin=True),
                SaleLimitValidator(catalog, against_origin=True),
            ],
            PREPARE: [SubtotalProcessor()],
            COMMIT: [UpdateDateProcessor(order_statuses()), StockReductionProcessor(catalog)],
        },
    )


@cache
def cart_purchase_flow() -> PurchaseFlow:
    """Cart checks; lines are corrected in place and reported as warnings."""
    catalog = ProductCatalog()
    return PurchaseFlow(
        "cart",
        {
            VALIDATE: [
                ProductAvailabilityValidator(catalog, remove=True),
                PriceChangeValidator(catalog),
                StockValidator(catalog, clamp=True),
                SaleLimitValidator(catalog, clamp=True),
            ],
        },
    )
