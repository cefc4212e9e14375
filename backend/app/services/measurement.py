"""Pixel to millimeter measurement for canvas objects.

Everything here is best-effort: missing product dimensions or geometry fall
back to defaults instead of raising, since the numbers only feed a cost
estimate and the size-bucket choice.
"""
import logging
import math
from typing import Dict, Iterable, List, Optional, Tuple

from app.models.canvas import (
    BACKGROUND_IMAGE_ID,
    PRINT_SIZE_MM,
    CanvasObject,
    CanvasSnapshot,
    PrintMethod,
    PrintSize,
    ProductSide,
)

logger = logging.getLogger(__name__)

FALLBACK_PIXEL_TO_MM_RATIO = 0.25
DEFAULT_PRINT_METHOD = PrintMethod.DTF

# stored method names -> current methods; "printing" predates the dtf/dtg split
LEGACY_METHOD_MAP: Dict[str, PrintMethod] = {
    "printing": PrintMethod.DTF,
    **{m.value: m for m in PrintMethod},
}


def normalize_print_method(method: Optional[str]) -> Optional[PrintMethod]:
    """Map a stored print method name to a PrintMethod, or None if unrecognized."""
    if isinstance(method, PrintMethod):
        return method
    if not method:
        return None
    return LEGACY_METHOD_MAP.get(method.strip().lower())


def _finite(value: Optional[float], default: float) -> float:
    if value is None or not math.isfinite(value):
        return default
    return value


def _positive(value: Optional[float]) -> bool:
    return value is not None and math.isfinite(value) and value > 0


def pixel_to_mm_ratio(side: ProductSide, canvas: Optional[CanvasSnapshot] = None) -> float:
    """Millimeters per canvas pixel for a side.

    Uses the product width against the scaled mockup image first, then the
    print area's real width against its pixel width, then the fixed fallback.
    """
    dims = side.real_life_dimensions
    if dims is not None:
        scaled_width = canvas.scaled_image_width if canvas is not None else None
        if _positive(dims.product_width_mm) and _positive(scaled_width):
            return dims.product_width_mm / scaled_width
        if _positive(dims.print_area_width_mm) and _positive(side.print_area.width):
            return dims.print_area_width_mm / side.print_area.width

    logger.debug("Side %s has no usable real-world width; using fallback ratio", side.id)
    return FALLBACK_PIXEL_TO_MM_RATIO


def px_to_mm(pixels: float, ratio: float) -> float:
    return pixels * ratio


def mm_to_px(mm: float, ratio: float) -> float:
    if not _positive(ratio):
        ratio = FALLBACK_PIXEL_TO_MM_RATIO
    return mm / ratio


def bounding_size_px(obj: CanvasObject) -> Tuple[float, float]:
    """Axis-aligned bounding box (width, height) of an object in canvas pixels.

    Stroke is included when the object has one, scale is applied, and rotated
    objects take the box of the rotated rectangle.
    """
    stroke = _finite(obj.stroke_width, 0) if obj.stroke else 0
    scale_x = _finite(obj.scale_x, 1)
    scale_y = _finite(obj.scale_y, 1)
    width = max(0.0, (_finite(obj.width, 0) + stroke) * abs(scale_x))
    height = max(0.0, (_finite(obj.height, 0) + stroke) * abs(scale_y))

    angle = math.radians(_finite(obj.angle, 0))
    if angle == 0:
        return width, height
    cos_a = abs(math.cos(angle))
    sin_a = abs(math.sin(angle))
    return width * cos_a + height * sin_a, width * sin_a + height * cos_a


def bounding_size_mm(obj: CanvasObject, ratio: float) -> Tuple[float, float]:
    width_px, height_px = bounding_size_px(obj)
    return px_to_mm(width_px, ratio), px_to_mm(height_px, ratio)


def is_user_object(obj: CanvasObject) -> bool:
    """False for non-exportable helpers and the product mockup image."""
    if obj.exclude_from_export:
        return False
    if obj.data is not None and obj.data.id == BACKGROUND_IMAGE_ID:
        return False
    return True


def user_objects(objects: Iterable[CanvasObject]) -> List[CanvasObject]:
    return [obj for obj in objects if is_user_object(obj)]


def _fits(width_mm: float, height_mm: float, size: PrintSize) -> bool:
    short_edge, long_edge = PRINT_SIZE_MM[size]
    small, large = sorted((width_mm, height_mm))
    return small <= short_edge and large <= long_edge


def assign_print_size(width_mm: float, height_mm: float) -> Tuple[PrintSize, bool]:
    """Smallest bucket containing the box (rotation allowed).

    Returns (size, clamped); clamped is True when the box exceeds A3 and was
    priced as A3 anyway.
    """
    for size in PrintSize:
        if _fits(width_mm, height_mm, size):
            return size, False
    return PrintSize.A3, True
