import json
import logging
import os
from typing import Any, Dict, Optional

from pydantic import ValidationError

from app.models.canvas import PrintMethod, PrintSize
from app.models.pricing import PricingConfig

logger = logging.getLogger(__name__)

PRICING_CONFIG_PATH = os.getenv("PRICING_CONFIG_PATH")


def _tiered(base_price: int, per_piece: int) -> Dict[str, Any]:
    return {
        "kind": "tiered",
        "base_price": base_price,
        "base_quantity": 100,
        "additional_price_per_piece": per_piece,
    }


_BULK_SIZES = {
    "10x10": _tiered(60000, 600),
    "A4": _tiered(80000, 800),
    "A3": _tiered(100000, 1000),
}

# Prices in KRW
DEFAULT_PRINT_PRICING: Dict[str, Any] = {
    "methods": {
        "dtf": {
            "method": "dtf",
            "sizes": {
                "10x10": {"kind": "flat", "price": 4000},
                "A4": {"kind": "flat", "price": 5000},
                "A3": {"kind": "flat", "price": 7000},
            },
        },
        "dtg": {
            "method": "dtg",
            "sizes": {
                "10x10": {"kind": "flat", "price": 6000},
                "A4": {"kind": "flat", "price": 7000},
                "A3": {"kind": "flat", "price": 9000},
            },
        },
        "screen_printing": {"method": "screen_printing", "sizes": dict(_BULK_SIZES)},
        "embroidery": {"method": "embroidery", "sizes": dict(_BULK_SIZES)},
        "applique": {"method": "applique", "sizes": dict(_BULK_SIZES)},
    }
}


class PricingConfigError(ValueError):
    """The pricing table is unreadable, malformed, or not total over method x size."""


def build_pricing_config(raw: Dict[str, Any]) -> PricingConfig:
    """Validate a raw pricing table and make sure every method/size pair has a rule."""
    try:
        config = PricingConfig.model_validate(raw)
    except ValidationError as e:
        raise PricingConfigError(f"invalid pricing config: {e}") from e

    missing = []
    for method in PrintMethod:
        entry = config.methods.get(method)
        if entry is None:
            missing.append(method.value)
            continue
        if entry.method != method:
            raise PricingConfigError(
                f"pricing entry for {method.value} declares method {entry.method.value}"
            )
        for size in PrintSize:
            if size not in entry.sizes:
                missing.append(f"{method.value}/{size.value}")

    if missing:
        raise PricingConfigError("pricing config missing entries: " + ", ".join(missing))
    return config


def load_pricing_config(path: Optional[str] = None) -> PricingConfig:
    """Load the pricing table from `path` (or PRICING_CONFIG_PATH), else the defaults."""
    path = path or PRICING_CONFIG_PATH
    if not path:
        return build_pricing_config(DEFAULT_PRINT_PRICING)

    try:
        with open(path, "r", encoding="utf-8") as fh:
            raw = json.load(fh)
    except (OSError, json.JSONDecodeError) as e:
        raise PricingConfigError(f"cannot read pricing config {path}: {e}") from e

    config = build_pricing_config(raw)
    logger.info("Loaded pricing config from %s", path)
    return config
