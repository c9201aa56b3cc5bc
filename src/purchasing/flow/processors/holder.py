"""Processors that look at the holder as a whole."""

from protean.exceptions import ValidationError


class EmptyHolderValidator:
    """Rejects a holder with no line items."""

    def process(self, holder, context):
        if not holder.items:
            raise ValidationError({"items": ["There are no items to purchase"]})


class SubtotalProcessor:
    def process(self, holder, context):
        holder.recalculate_subtotal()
