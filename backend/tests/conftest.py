"""Shared test fixtures."""

from __future__ import annotations

import base64
from io import BytesIO

import pytest
from PIL import Image

from app.models.canvas import CanvasObject, CanvasSnapshot, ProductSide
from app.services.pricing import PriceEngine


def make_side(side_id: str = "front", name: str = "앞면", product_width_mm=None,
              print_area_width_mm=None, print_area_px: float = 400) -> ProductSide:
    dims = None
    if product_width_mm is not None or print_area_width_mm is not None:
        dims = {"product_width_mm": product_width_mm, "print_area_width_mm": print_area_width_mm}
    return ProductSide.model_validate({
        "id": side_id,
        "name": name,
        "print_area": {"x": 0, "y": 0, "width": print_area_px, "height": print_area_px},
        "real_life_dimensions": dims,
    })


def make_object(width: float, height: float, object_id: str = "obj-1", print_method=None,
                type: str = "rect", **extra) -> CanvasObject:
    data = {"objectId": object_id}
    if print_method is not None:
        data["printMethod"] = print_method
    payload = {"type": type, "left": 10, "top": 10, "width": width, "height": height, "data": data}
    payload.update(extra)
    return CanvasObject.model_validate(payload)


def background_image() -> CanvasObject:
    return CanvasObject.model_validate({
        "type": "image", "width": 2000, "height": 2400,
        "data": {"id": "background-product-image"},
    })


def png_data_url(colors) -> str:
    """A small PNG split into vertical bands of the given RGB colors."""
    img = Image.new("RGBA", (10 * len(colors), 10), (0, 0, 0, 0))
    for i, color in enumerate(colors):
        img.paste(Image.new("RGBA", (10, 10), color + (255,)), (10 * i, 0))
    buf = BytesIO()
    img.save(buf, format="PNG")
    return "data:image/png;base64," + base64.b64encode(buf.getvalue()).decode("ascii")


@pytest.fixture
def engine() -> PriceEngine:
    return PriceEngine()


@pytest.fixture
def front_side() -> ProductSide:
    # 500mm product over a 2000px mockup -> 0.25mm per pixel
    return make_side("front", "앞면", product_width_mm=500)


@pytest.fixture
def back_side() -> ProductSide:
    return make_side("back", "뒷면", product_width_mm=500)


@pytest.fixture
def front_canvas() -> CanvasSnapshot:
    return CanvasSnapshot(
        scaled_image_width=2000,
        objects=[
            background_image(),
            make_object(200, 100, "text-1", "embroidery", type="i-text", text="HELLO", fill="#000000"),
        ],
    )


@pytest.fixture
def sqlite_db(tmp_path, monkeypatch):
    from sqlmodel import SQLModel

    from app.db import session as db_session
    from app.models.quote import DesignQuote  # noqa: F401  registers the table

    monkeypatch.setattr(db_session, "DATABASE_URL", f"sqlite:///{tmp_path / 'quotes.db'}")
    SQLModel.metadata.create_all(db_session.get_engine())
    yield
