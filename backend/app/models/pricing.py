from typing import Dict, List, Literal, Union

from pydantic import Field

from app.models.canvas import CamelModel, PrintMethod, PrintSize


class FlatRule(CamelModel):
    """Single price per size bucket, regardless of quantity (transfer methods)."""

    kind: Literal["flat"] = "flat"
    price: int = Field(..., ge=0)


class TieredRule(CamelModel):
    """Base price up to `base_quantity` pieces, then a fixed price per extra piece."""

    kind: Literal["tiered"] = "tiered"
    base_price: int = Field(..., ge=0)
    base_quantity: int = Field(..., ge=0)
    additional_price_per_piece: int = Field(..., ge=0)


PricingRule = Union[FlatRule, TieredRule]


class MethodPricing(CamelModel):
    method: PrintMethod
    sizes: Dict[PrintSize, PricingRule]


class PricingConfig(CamelModel):
    methods: Dict[PrintMethod, MethodPricing]

    def rule_for(self, method: PrintMethod, size: PrintSize) -> PricingRule:
        return self.methods[method].sizes[size]


class DimensionsMm(CamelModel):
    width: float
    height: float


class ObjectPricing(CamelModel):
    object_id: str
    object_type: str
    print_method: PrintMethod
    print_size: PrintSize
    size_label: str = ""
    dimensions_mm: DimensionsMm
    color_count: int = 0
    price: float = 0
    clamped: bool = False


class SidePricing(CamelModel):
    side_id: str
    side_name: str
    has_objects: bool
    additional_price: int = 0
    objects: List[ObjectPricing] = Field(default_factory=list)


class PricingSummary(CamelModel):
    side_pricing: List[SidePricing] = Field(default_factory=list)
    total_additional_price: int = 0
    quantity: int = 1
