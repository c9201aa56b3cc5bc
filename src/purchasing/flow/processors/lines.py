"""Line helpers shared by the catalog-backed processors."""


def added_quantity(item, context) -> int:
    """Quantity of ``item`` that the holder did not already hold before this flow.

    A new holder held nothing. On an edit, the origin line with the same id is
    subtracted, so an order that already reserved its lines is not checked
    again for them.
    """
    if context.is_new:
        return item.quantity
    held = next((line.quantity for line in context.origin.items if line.id == str(item.id)), 0)
    return item.quantity - held
