import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, List, Mapping, Optional

from app.models.canvas import CanvasObject, CanvasSnapshot, PrintMethod, PrintSize, ProductSide
from app.models.pricing import (
    DimensionsMm,
    FlatRule,
    ObjectPricing,
    PricingConfig,
    PricingRule,
    PricingSummary,
    SidePricing,
)
from app.services.colors import PRINT_SIZE_LABELS, display_name, object_color_count, short_name
from app.services.measurement import (
    DEFAULT_PRINT_METHOD,
    assign_print_size,
    bounding_size_mm,
    is_user_object,
    normalize_print_method,
    pixel_to_mm_ratio,
)
from app.services.pricing_config import load_pricing_config

logger = logging.getLogger(__name__)


@dataclass
class PricedObject:
    """A user object resolved for pricing: id, method and physical size are always set."""

    object_id: str
    object_type: str
    print_method: PrintMethod
    width_mm: float
    height_mm: float
    color_count: int = 0


def round_price(value: float) -> int:
    """Round half-up to a whole currency unit."""
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def resolve_print_method(obj: CanvasObject, object_id: str,
                         assignments: Optional[Mapping[str, str]] = None) -> PrintMethod:
    stored = obj.data.print_method if obj.data is not None else None
    if not stored and assignments:
        stored = assignments.get(object_id)

    method = normalize_print_method(stored)
    if method is None:
        if stored:
            logger.warning("Unknown print method %r on object %s; using %s",
                           stored, object_id, DEFAULT_PRINT_METHOD.value)
        return DEFAULT_PRINT_METHOD
    return method


def enumerate_side_objects(side: ProductSide, canvas: Optional[CanvasSnapshot],
                           assignments: Optional[Mapping[str, str]] = None) -> List[PricedObject]:
    """Eligible objects of one side, measured and with a resolved print method."""
    if canvas is None:
        return []

    ratio = pixel_to_mm_ratio(side, canvas)
    priced = []
    for index, obj in enumerate(canvas.objects):
        if not is_user_object(obj):
            continue
        object_id = (obj.data.object_id if obj.data is not None else None) or f"{side.id}-{index}"
        width_mm, height_mm = bounding_size_mm(obj, ratio)
        priced.append(PricedObject(
            object_id=object_id,
            object_type=obj.type,
            print_method=resolve_print_method(obj, object_id, assignments),
            width_mm=width_mm,
            height_mm=height_mm,
            color_count=object_color_count(obj),
        ))
    return priced


class PriceEngine:
    """Print pricing for canvas designs.

    Stateless apart from the pricing table, which is checked for completeness
    when the engine is built. Inputs are never mutated.
    """

    def __init__(self, config: Optional[PricingConfig] = None):
        self.config = config or load_pricing_config()

    def rule_price(self, rule: PricingRule, quantity: int) -> float:
        if isinstance(rule, FlatRule):
            return max(0, rule.price)
        if quantity <= rule.base_quantity:
            return max(0, rule.base_price)
        extra = quantity - rule.base_quantity
        return max(0, rule.base_price + extra * rule.additional_price_per_piece)

    def price_object(self, obj: PricedObject, quantity: int = 1) -> ObjectPricing:
        size, clamped = assign_print_size(obj.width_mm, obj.height_mm)
        if clamped:
            logger.debug("Object %s (%.1fx%.1fmm) exceeds A3; pricing as A3",
                         obj.object_id, obj.width_mm, obj.height_mm)
        rule = self.config.rule_for(obj.print_method, size)
        return ObjectPricing(
            object_id=obj.object_id,
            object_type=obj.object_type,
            print_method=obj.print_method,
            print_size=size,
            size_label=PRINT_SIZE_LABELS[size],
            dimensions_mm=DimensionsMm(width=obj.width_mm, height=obj.height_mm),
            color_count=obj.color_count,
            price=self.rule_price(rule, quantity),
            clamped=clamped,
        )

    def _price_side(self, side: ProductSide, canvas: Optional[CanvasSnapshot], quantity: int,
                    assignments: Optional[Mapping[str, str]]) -> tuple:
        objects = [self.price_object(o, quantity)
                   for o in enumerate_side_objects(side, canvas, assignments)]
        if not objects:
            return SidePricing(side_id=side.id, side_name=side.name, has_objects=False), 0.0

        raw_total = max(0.0, sum(o.price for o in objects))
        return SidePricing(
            side_id=side.id,
            side_name=side.name,
            has_objects=True,
            additional_price=round_price(raw_total),
            objects=objects,
        ), raw_total

    def calculate(self, sides: List[ProductSide], canvases: Mapping[str, CanvasSnapshot],
                  quantity: int = 1,
                  assignments: Optional[Mapping[str, str]] = None) -> PricingSummary:
        """Price every side and total them.

        `assignments` maps object ids to print methods chosen outside the
        object's own metadata. Sides without a canvas get an empty entry.
        """
        side_pricing = []
        grand_total = 0.0
        for side in sides:
            entry, raw_total = self._price_side(side, canvases.get(side.id), quantity, assignments)
            side_pricing.append(entry)
            grand_total += raw_total

        summary = PricingSummary(
            side_pricing=side_pricing,
            total_additional_price=round_price(max(0.0, grand_total)),
            quantity=quantity,
        )
        logger.info("Priced %d sides qty=%s total=%s", len(sides), quantity,
                    summary.total_additional_price)
        return summary

    def method_table(self) -> List[Dict[str, object]]:
        return [
            {
                "method": method.value,
                "display_name": display_name(method.value),
                "short_name": short_name(method.value),
                "kind": "flat" if isinstance(entry.sizes[PrintSize.SIZE_10X10], FlatRule) else "tiered",
            }
            for method, entry in self.config.methods.items()
        ]
