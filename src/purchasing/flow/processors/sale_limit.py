"""Per-line sale limit check."""

from protean.exceptions import ValidationError

from purchasing.flow.processors.lines import added_quantity
from purchasing.flow.result import ProcessResult


class SaleLimitValidator:
    def __init__(self, catalog, clamp: bool = False, against_origin: bool = False) -> None:
        self.catalog = catalog
        self.clamp = clamp
        self.against_origin = against_origin

    def _requested(self, item, context):
        return added_quantity(item, context) if self.against_origin else item.quantity

    def process(self, holder, context):
        errors, warnings = [], []
        for item in holder.items:
            product = self.catalog.find(item.product_id)
            if product is None or product.sale_limit is None or self._requested(item, context) <= 0:
                continue
            if item.quantity <= product.sale_limit:
                continue

            if self.clamp:
                item.quantity = product.sale_limit
                warnings.append(f"{product.name} is limited to {product.sale_limit} per purchase")
            else:
                errors.append(f"{product.name} cannot be bought more than {product.sale_limit} at a time")

        if errors:
            raise ValidationError({"sale_limit": errors})
        if warnings:
            return ProcessResult.warn(*warnings)
        return None
