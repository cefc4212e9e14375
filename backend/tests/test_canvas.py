"""Tests for lenient parsing of design-tool payloads."""

import math

from app.models.canvas import CanvasObject, CanvasSnapshot


def test_gradient_paint_and_numeric_ids_are_accepted():
    obj = CanvasObject.model_validate({
        "type": "rect",
        "fill": {"type": "linear", "colorStops": [{"offset": 0, "color": "#ff0000"}]},
        "stroke": {"source": "pattern.png"},
        "data": {"id": 7, "objectId": 12, "printMethod": 3},
    })
    assert obj.fill["type"] == "linear"
    assert obj.data.id == "7"
    assert obj.data.object_id == "12"
    assert obj.data.print_method == "3"


def test_malformed_geometry_is_treated_as_missing():
    obj = CanvasObject.model_validate({
        "type": None,
        "width": "abc",
        "height": "40",
        "angle": math.inf,
        "scaleX": True,
        "text": {"runs": []},
        "data": "not-a-dict",
    })
    assert obj.type == "object"
    assert obj.width is None
    assert obj.height == 40
    assert obj.angle is None
    assert obj.scale_x is None
    assert obj.text is None
    assert obj.data is None


def test_snapshot_tolerates_odd_layer_colors_and_width():
    snapshot = CanvasSnapshot.model_validate({"scaledImageWidth": "wide", "layerColors": ["#fff"]})
    assert snapshot.scaled_image_width is None
    assert snapshot.layer_colors == {}
