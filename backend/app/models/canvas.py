import math
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

BACKGROUND_IMAGE_ID = "background-product-image"


class PrintMethod(str, Enum):
    DTF = "dtf"
    DTG = "dtg"
    SCREEN_PRINTING = "screen_printing"
    EMBROIDERY = "embroidery"
    APPLIQUE = "applique"


class PrintSize(str, Enum):
    """Print-size buckets, smallest first. Values are the labels stored on designs."""

    SIZE_10X10 = "10x10"
    A4 = "A4"
    A3 = "A3"


# (short edge, long edge) in millimeters
PRINT_SIZE_MM: Dict[PrintSize, tuple] = {
    PrintSize.SIZE_10X10: (100.0, 100.0),
    PrintSize.A4: (210.0, 297.0),
    PrintSize.A3: (297.0, 420.0),
}


class CamelModel(BaseModel):
    # UI payloads are camelCase; python callers may use field names
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Rect(CamelModel):
    x: float = 0
    y: float = 0
    width: float = 0
    height: float = 0


class RealLifeDimensions(CamelModel):
    print_area_width_mm: Optional[float] = None
    print_area_height_mm: Optional[float] = None
    product_width_mm: Optional[float] = None


class ProductSide(CamelModel):
    """One printable face of a product (front, back, sleeve...)."""

    id: str
    name: str
    image_url: Optional[str] = None
    print_area: Rect = Field(default_factory=Rect)
    real_life_dimensions: Optional[RealLifeDimensions] = None


def _as_text(value: Any) -> Optional[str]:
    if value is None or isinstance(value, (dict, list)):
        return None
    return str(value)


def _as_number(value: Any) -> Optional[float]:
    # unparseable or non-finite geometry is treated as missing
    if isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


class ObjectData(CamelModel):
    """Free-form metadata the designer attaches to canvas objects.

    Ids and `print_method` are coerced to strings here; legacy and unknown
    methods are resolved when objects are enumerated for pricing.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    id: Optional[str] = None
    object_id: Optional[str] = None
    print_method: Optional[str] = None

    @field_validator("id", "object_id", "print_method", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> Optional[str]:
        return _as_text(value)


class CanvasObject(CamelModel):
    """A canvas object as serialized by the design tool.

    Malformed fields degrade to defaults instead of failing the request:
    `fill`/`stroke` may be gradient or pattern objects, and geometry may be
    missing or non-numeric.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    type: str = "object"
    left: Optional[float] = 0
    top: Optional[float] = 0
    width: Optional[float] = 0
    height: Optional[float] = 0
    scale_x: Optional[float] = 1
    scale_y: Optional[float] = 1
    angle: Optional[float] = 0
    fill: Optional[Any] = None
    stroke: Optional[Any] = None
    stroke_width: Optional[float] = 0
    exclude_from_export: bool = False
    text: Optional[str] = None
    src: Optional[str] = None
    data: Optional[ObjectData] = None

    @field_validator("left", "top", "width", "height", "scale_x", "scale_y", "angle",
                     "stroke_width", mode="before")
    @classmethod
    def _coerce_number(cls, value: Any) -> Optional[float]:
        return _as_number(value)

    @field_validator("type", mode="before")
    @classmethod
    def _coerce_type(cls, value: Any) -> str:
        return _as_text(value) or "object"

    @field_validator("text", "src", mode="before")
    @classmethod
    def _coerce_optional_text(cls, value: Any) -> Optional[str]:
        return _as_text(value)

    @field_validator("exclude_from_export", mode="before")
    @classmethod
    def _coerce_flag(cls, value: Any) -> bool:
        return value if isinstance(value, bool) else bool(value)

    @field_validator("data", mode="before")
    @classmethod
    def _coerce_data(cls, value: Any) -> Any:
        return value if isinstance(value, (dict, ObjectData)) else None


class CanvasSnapshot(CamelModel):
    """Caller-owned state of a single side's canvas at the time of the call."""

    objects: List[CanvasObject] = Field(default_factory=list)
    scaled_image_width: Optional[float] = None
    # garment layer id -> color chosen for that layer; unreadable values are ignored on read
    layer_colors: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("scaled_image_width", mode="before")
    @classmethod
    def _coerce_width(cls, value: Any) -> Optional[float]:
        return _as_number(value)

    @field_validator("layer_colors", mode="before")
    @classmethod
    def _coerce_layer_colors(cls, value: Any) -> Dict[Any, Any]:
        return value if isinstance(value, dict) else {}
