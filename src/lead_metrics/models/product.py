"""Product detail model with derived presentation fields."""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Optional

from pydantic import BaseModel, Field, model_validator

CENTS = Decimal("0.01")
PLACEHOLDER_IMAGE_URL = "https://via.placeholder.com/400x300?text=No+Image"


def to_money(value: Decimal) -> Decimal:
    """Quantize to two decimal places, rounding half up."""
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def format_money(value: Decimal) -> str:
    return f"${to_money(value):,.2f}"


class ImageRef(BaseModel):
    """Reference to one product image."""

    url: str
    filename: Optional[str] = None


class ProductDetail(BaseModel):
    """Presentation-ready product record. Margin fields are derived, never stored."""

    record_id: str
    name: str = "N/A"
    description: Optional[str] = None
    cost_price: Decimal = Field(default=Decimal("0.00"), ge=0)
    selling_price: Decimal = Field(default=Decimal("0.00"), ge=0)
    profit_per_sale: Decimal = Decimal("0.00")
    images: list[ImageRef] = Field(default_factory=list)

    @property
    def margin_percent(self) -> Optional[Decimal]:
        """Profit as a percentage of selling price; None when nothing is charged or it overflows."""
        if not self.selling_price:
            return None
        try:
            return to_money(self.profit_per_sale / self.selling_price * 100)
        except InvalidOperation:
            return None

    @property
    def primary_image(self) -> Optional[ImageRef]:
        return self.images[0] if self.images else None

    def formatted(self) -> dict[str, str]:
        """Money fields as display strings, e.g. {'cost_price': '$12.50'}."""
        return {
            "cost_price": format_money(self.cost_price),
            "selling_price": format_money(self.selling_price),
            "profit_per_sale": format_money(self.profit_per_sale),
        }


class ProductView(BaseModel):
    """View state over a ProductDetail: which image is shown as primary."""

    product: ProductDetail
    selected: int = Field(default=0, ge=0)

    @model_validator(mode="after")
    def _selected_in_range(self) -> "ProductView":
        count = len(self.product.images)
        if self.selected and self.selected >= count:
            raise ValueError(f"Image index {self.selected} out of range ({count} images)")
        return self

    def select(self, index: int) -> "ProductView":
        """Return a view with another image as primary. Never re-fetches."""
        if index < 0 or index >= len(self.product.images):
            raise IndexError(
                f"Image index {index} out of range ({len(self.product.images)} images)"
            )
        return self.model_copy(update={"selected": index})

    @property
    def main_image_url(self) -> str:
        if not self.product.images:
            return PLACEHOLDER_IMAGE_URL
        return self.product.images[self.selected].url
