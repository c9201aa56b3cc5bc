"""Stock check."""

from protean.exceptions import ValidationError

from purchasing.flow.processors.lines import added_quantity
from purchasing.flow.result import ProcessResult


class StockValidator:
    """Compares each line's quantity with the product's stock.

    In clamping mode a line is reduced to what is left, or removed when nothing
    is; otherwise a shortfall is an error. With ``against_origin`` only the
    quantity added since the origin counts, since an order being edited already
    holds its stock. Products with unlimited stock and products missing from
    the catalog are skipped.
    """

    def __init__(self, catalog, clamp: bool = False, against_origin: bool = False) -> None:
        self.catalog = catalog
        self.clamp = clamp
        self.against_origin = against_origin

    def _requested(self, item, context):
        return added_quantity(item, context) if self.against_origin else item.quantity

    def process(self, holder, context):
        errors, warnings = [], []
        for item in list(holder.items):
            product = self.catalog.find(item.product_id)
            if product is None or product.unlimited_stock or self._requested(item, context) <= product.stock:
                continue

            if not self.clamp:
                errors.append(f"Only {product.stock} of {product.name} left in stock")
            elif product.stock == 0:
                holder.remove_items(item)
                warnings.append(f"{product.name} is out of stock and was removed")
            else:
                item.quantity = product.stock
                warnings.append(f"{product.name} was reduced to the {product.stock} left in stock")

        if errors:
            raise ValidationError({"stock": errors})
        if warnings:
            return ProcessResult.warn(*warnings)
        return None


class StockReductionProcessor:
    """Takes the quantity a holder added since its origin out of stock.

    On a new holder that is every line; on an edit only the difference, and
    lines that shrank or were removed put their units back. Every line is
    checked before any stock moves, so a shortfall leaves the catalog as it
    was.
    """

    def __init__(self, catalog) -> None:
        self.catalog = catalog

    def _changes(self, holder, context):
        changes: dict[str, int] = {}
        for item in holder.items:
            product_id = str(item.product_id)
            changes[product_id] = changes.get(product_id, 0) + added_quantity(item, context)

        if not context.is_new:
            kept = {str(item.id) for item in holder.items}
            for line in context.origin.items:
                if line.id not in kept:
                    changes[line.product_id] = changes.get(line.product_id, 0) - line.quantity

        return {product_id: quantity for product_id, quantity in changes.items() if quantity}

    def process(self, holder, context):
        changes = self._changes(holder, context)

        errors = []
        for product_id, quantity in changes.items():
            product = self.catalog.find(product_id)
            if product is None or product.unlimited_stock or quantity <= product.stock:
                continue
            errors.append(f"Only {product.stock} of {product.name} left in stock")
        if errors:
            raise ValidationError({"stock": errors})

        for product_id, quantity in changes.items():
            if self.catalog.find(product_id) is not None:
                self.catalog.take_stock(product_id, quantity)
        return None
