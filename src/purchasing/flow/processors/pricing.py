"""Price drift check for carts."""

from purchasing.flow.result import ProcessResult


class PriceChangeValidator:
    """Re-prices lines whose product price changed since they were added."""

    def __init__(self, catalog) -> None:
        self.catalog = catalog

    def process(self, holder, context):
        warnings = []
        for item in holder.items:
            product = self.catalog.find(item.product_id)
            if product is None or item.unit_price == product.price:
                continue

            warnings.append(f"The price of {product.name} changed from {item.unit_price:.2f} to {product.price:.2f}")
            item.unit_price = product.price

        if warnings:
            return ProcessResult.warn(*warnings)
        return None
