import logging
from functools import lru_cache
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends
from pydantic import Field

from app.models.canvas import CamelModel, CanvasSnapshot, PrintSize, ProductSide
from app.models.pricing import PricingConfig, PricingSummary
from app.services.colors import DEFAULT_SENSITIVITY, canvas_colors, recommend_print_method
from app.services.pricing import PriceEngine

logger = logging.getLogger(__name__)
router = APIRouter()


@lru_cache(maxsize=1)
def get_price_engine() -> PriceEngine:
    # raises PricingConfigError on an incomplete table; main.py calls this at startup
    return PriceEngine()


class CalculateRequest(CamelModel):
    sides: List[ProductSide]
    canvases: Dict[str, CanvasSnapshot] = Field(default_factory=dict)
    quantity: int = Field(1, ge=1)
    # object id -> print method chosen in the designer
    print_methods: Dict[str, str] = Field(default_factory=dict)


class ColorsRequest(CamelModel):
    canvases: Dict[str, CanvasSnapshot] = Field(default_factory=dict)
    sensitivity: float = Field(DEFAULT_SENSITIVITY, ge=0, le=100)


class RecommendRequest(CamelModel):
    color_count: int = Field(..., ge=0)
    size: Optional[PrintSize] = None


@router.post("/calculate", response_model=PricingSummary)
async def calculate(req: CalculateRequest, engine: PriceEngine = Depends(get_price_engine)):
    """Price every side of a design for the given order quantity."""
    logger.debug("Pricing request sides=%s canvases=%s qty=%s",
                 [s.id for s in req.sides], list(req.canvases), req.quantity)
    return engine.calculate(req.sides, req.canvases, req.quantity, req.print_methods)


@router.get("/config", response_model=PricingConfig)
async def pricing_config(engine: PriceEngine = Depends(get_price_engine)):
    return engine.config


@router.get("/methods")
async def methods(engine: PriceEngine = Depends(get_price_engine)) -> List[Dict[str, Any]]:
    return engine.method_table()


@router.post("/colors")
async def colors(req: ColorsRequest) -> Dict[str, Any]:
    return canvas_colors(req.canvases, req.sensitivity)


@router.post("/recommend")
async def recommend(req: RecommendRequest) -> Dict[str, str]:
    return recommend_print_method(req.color_count, req.size)
