import logging
import math
import re
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from app.models.canvas import CanvasObject, CanvasSnapshot, PrintMethod, PrintSize
from app.services.measurement import normalize_print_method, user_objects
from app.utils.image_colors import data_url_palette

logger = logging.getLogger(__name__)

HEX_RE = re.compile(r"^#([0-9a-f]{3}|[0-9a-f]{6})$", re.I)
RGB_RE = re.compile(r"^rgb\s*\((\d+),\s*(\d+),\s*(\d+)\)$", re.I)

# distance threshold at sensitivity 100
MAX_MERGE_DISTANCE = 120
DEFAULT_SENSITIVITY = 30

METHOD_DISPLAY_NAMES: Dict[PrintMethod, str] = {
    PrintMethod.DTF: "DTF 전사",
    PrintMethod.DTG: "DTG 전사",
    PrintMethod.SCREEN_PRINTING: "나염",
    PrintMethod.EMBROIDERY: "자수",
    PrintMethod.APPLIQUE: "아플리케",
}

METHOD_SHORT_NAMES: Dict[PrintMethod, str] = {
    PrintMethod.DTF: "DTF",
    PrintMethod.DTG: "DTG",
    PrintMethod.SCREEN_PRINTING: "나염",
    PrintMethod.EMBROIDERY: "자수",
    PrintMethod.APPLIQUE: "아플리케",
}

PRINT_SIZE_LABELS: Dict[PrintSize, str] = {
    PrintSize.SIZE_10X10: "10x10cm",
    PrintSize.A4: "A4",
    PrintSize.A3: "A3",
}


def normalize_hex_color(value: Optional[str]) -> Optional[str]:
    """`#abc`, `#aabbcc` or `rgb(r, g, b)` -> lower-case `#rrggbb`; None otherwise."""
    if not isinstance(value, str):
        return None
    trimmed = value.strip()
    if HEX_RE.match(trimmed):
        if len(trimmed) == 4:
            return "#" + "".join(c * 2 for c in trimmed[1:]).lower()
        return trimmed.lower()

    m = RGB_RE.match(trimmed)
    if not m:
        return None
    r, g, b = (max(0, min(255, int(v))) for v in m.groups())
    return f"#{r:02x}{g:02x}{b:02x}"


def hex_to_rgb(value: str) -> Optional[Tuple[int, int, int]]:
    normalized = normalize_hex_color(value)
    if normalized is None:
        return None
    n = int(normalized[1:], 16)
    return (n >> 16) & 255, (n >> 8) & 255, n & 255


def color_distance(a: str, b: str) -> float:
    rgb_a = hex_to_rgb(a)
    rgb_b = hex_to_rgb(b)
    if rgb_a is None or rgb_b is None:
        return math.inf
    return math.sqrt(sum((x - y) ** 2 for x, y in zip(rgb_a, rgb_b)))


def merge_colors(colors: Iterable[str], sensitivity: float = DEFAULT_SENSITIVITY) -> List[str]:
    """Collapse near-identical colors; higher sensitivity merges more aggressively."""
    threshold = (max(0, min(100, sensitivity)) / 100) * MAX_MERGE_DISTANCE
    merged: List[str] = []
    for color in colors:
        if not any(color_distance(kept, color) <= threshold for kept in merged):
            merged.append(color)
    return merged


def paint_colors(paint: Any) -> List[str]:
    """Colors of a fill or stroke: a plain color string, or the stops of a gradient."""
    if isinstance(paint, dict):
        stops = paint.get("colorStops")
        if not isinstance(stops, list):
            return []
        values = [stop.get("color") for stop in stops if isinstance(stop, dict)]
    else:
        values = [paint]
    return [c for c in (normalize_hex_color(v) for v in values) if c]


def object_colors(obj: CanvasObject) -> List[str]:
    """Print colors of one canvas object: fill/stroke, or the palette of an embedded image."""
    colors = paint_colors(obj.fill) + paint_colors(obj.stroke)
    if obj.type == "image" and obj.src:
        colors.extend(data_url_palette(obj.src))
    return colors


def object_color_count(obj: CanvasObject, sensitivity: float = DEFAULT_SENSITIVITY) -> int:
    return len(merge_colors(object_colors(obj), sensitivity))


def canvas_colors(
    canvases: Mapping[str, CanvasSnapshot], sensitivity: float = DEFAULT_SENSITIVITY
) -> Dict[str, object]:
    """Distinct colors used across every side's user objects.

    Garment layer colors are reported per side under `garmentColors`; they are
    the product's own colors and never count as print colors.
    """
    colors: List[str] = []
    garment_colors: Dict[str, Dict[str, str]] = {}
    for side_id, canvas in canvases.items():
        for obj in user_objects(canvas.objects):
            colors.extend(object_colors(obj))
        layers = {layer: normalize_hex_color(value) for layer, value in canvas.layer_colors.items()}
        layers = {layer: color for layer, color in layers.items() if color}
        if layers:
            garment_colors[side_id] = layers

    merged = merge_colors(colors, sensitivity)
    return {"colors": merged, "count": len(merged), "garmentColors": garment_colors}


def recommend_print_method(color_count: int, size: Optional[PrintSize] = None) -> Dict[str, str]:
    # TODO: recommend screen_printing for bulk orders with few colors once quantity is passed in
    if color_count >= 4:
        return {
            "recommended": PrintMethod.DTF.value,
            "reason": "4가지 이상의 색상은 전사 방식을 추천합니다",
        }
    return {
        "recommended": PrintMethod.DTF.value,
        "reason": "소량 주문에는 전사 방식이 적합합니다",
    }


def display_name(method: str) -> str:
    normalized = normalize_print_method(method)
    return METHOD_DISPLAY_NAMES[normalized] if normalized else method


def short_name(method: str) -> str:
    normalized = normalize_print_method(method)
    return METHOD_SHORT_NAMES[normalized] if normalized else method
