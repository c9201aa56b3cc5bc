"""Product availability check."""

from protean.exceptions import ValidationError

from purchasing.flow.processors.lines import added_quantity
from purchasing.flow.result import ProcessResult


class ProductAvailabilityValidator:
    """Flags lines whose product was deleted or hidden from sale.

    With ``remove=True`` (cart flows) such lines are dropped and reported as
    warnings; otherwise they are errors. With ``against_origin`` a line the
    holder already had, at no more than its original quantity, is not checked.
    """

    def __init__(self, catalog, remove: bool = False, against_origin: bool = False) -> None:
        self.catalog = catalog
        self.remove = remove
        self.against_origin = against_origin

    def process(self, holder, context):
        errors, warnings = [], []
        for item in list(holder.items):
            if self.against_origin and added_quantity(item, context) <= 0:
                continue

            product = self.catalog.find(item.product_id)
            if product is not None and product.visible:
                continue

            label = item.product_name or str(item.product_id)
            if self.remove:
                holder.remove_items(item)
                warnings.append(f"{label} is no longer available and was removed")
            else:
                errors.append(f"{label} is no longer available")

        if errors:
            raise ValidationError({"product": errors})
        if warnings:
            return ProcessResult.warn(*warnings)
        return None
