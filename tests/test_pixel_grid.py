import json

import pytest

from pixelporter.models.pixel_grid import PixelGrid


def test_wire_shape_and_key_order():
    grid = PixelGrid(height=1, width=2, pixels=[[1, 2, 3], [4, 5, 6]])
    assert list(grid.to_dict()) == ["Height", "Width", "Pixels"]
    assert grid.to_json() == '{"Height":1,"Width":2,"Pixels":[[1,2,3],[4,5,6]]}'


def test_pretty_json_parses_the_same():
    grid = PixelGrid(height=1, width=1, pixels=[[9, 9, 9]])
    assert json.loads(grid.to_json(indent=2)) == json.loads(grid.to_json())


@pytest.mark.parametrize(
    "height,width,pixels",
    [(2, 2, [[0, 0, 0]] * 3), (0, 1, []), (1, 1, [])],
)
def test_shape_mismatch_rejected(height, width, pixels):
    with pytest.raises(ValueError):
        PixelGrid(height=height, width=width, pixels=pixels)
