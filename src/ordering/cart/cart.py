"""Cart lines — product/quantity entries prior to order commitment.

A cart line carries the catalogue price and the product's own percentage
discount as they were when the line was added. Fields are not constrained
here; the pricing calculator rejects negative prices and quantities
below one with ``InvalidCartLine``.
"""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict

_HUNDRED = Decimal(100)


class CartLine(BaseModel):
    """One product and quantity in the shopping cart."""

    model_config = ConfigDict(frozen=True)

    product_id: str
    name: str = ""
    image: str = ""
    unit_price: Decimal
    discount_percent: Decimal | None = None
    quantity: int = 1

    @property
    def effective_unit_price(self) -> Decimal:
        """Unit price after the product's own percentage discount."""
        if self.discount_percent:
            return self.unit_price * (1 - self.discount_percent / _HUNDRED)
        return self.unit_price

    @property
    def line_total(self) -> Decimal:
        return self.effective_unit_price * self.quantity
