"""Product aggregate and the read-side lookup the purchase flow checks lines against."""

from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Boolean, Float, Integer, String
from protean.utils.globals import current_domain

from purchasing.domain import purchasing

DEFAULT_SALE_TYPE = "normal"


@purchasing.aggregate
class Product:
    name = String(required=True, max_length=255)
    price = Float(required=True, min_value=0.0)
    stock = Integer(min_value=0)  # None means unlimited
    sale_limit = Integer(min_value=1)  # None means no per-line limit
    sale_type = String(max_length=50, default=DEFAULT_SALE_TYPE)
    visible = Boolean(default=True)

    @property
    def unlimited_stock(self):
        return self.stock is None

    def take_stock(self, quantity):
        """Take ``quantity`` units out of stock. A negative quantity puts units back."""
        if self.unlimited_stock:
            return
        if quantity > self.stock:
            raise ValidationError({"stock": [f"Only {self.stock} of {self.name} left in stock"]})
        self.stock -= quantity


class ProductCatalog:
    """Looks products up by id and keeps their stock.

    A product that does not exist comes back from ``find`` as None.
    """

    def find(self, product_id):
        try:
            return current_domain.repository_for(Product).get(str(product_id))
        except ObjectNotFoundError:
            return None

    def take_stock(self, product_id, quantity):
        repository = current_domain.repository_for(Product)
        product = repository.get(str(product_id))
        product.take_stock(quantity)
        repository.add(product)
        return product
