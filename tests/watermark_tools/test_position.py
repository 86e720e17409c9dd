import logging

import numpy as np
import pytest

from watermark_tools import position
from watermark_tools.constants import Placement
from watermark_tools.surface import Surface

from .utils import solid

logger = logging.getLogger(__name__)

RED = (255, 0, 0, 255)


@pytest.fixture
def target() -> Surface:
    surface = Surface(100, 50)
    surface.draw_image(solid((100, 50), (255, 255, 255, 255)))
    return surface


@pytest.fixture
def mark() -> Surface:
    surface = Surface(20, 20)
    surface.draw_image(solid((20, 20), RED))
    return surface


def _bbox(surface: Surface, color: tuple) -> tuple:
    ys, xs = np.nonzero((surface.numpy() == color).all(axis=2))
    return (xs.min(), ys.min(), xs.max() + 1, ys.max() + 1)


@pytest.mark.parametrize(
    "placement, expected",
    [
        (Placement.LOWER_RIGHT, (70, 20, 90, 40)),
        (Placement.UPPER_RIGHT, (70, 10, 90, 30)),
        (Placement.LOWER_LEFT, (10, 20, 30, 40)),
        (Placement.UPPER_LEFT, (10, 10, 30, 30)),
        (Placement.CENTER, (40, 15, 60, 35)),
    ],
)
def test_image_placement(
    target: Surface, mark: Surface, placement: Placement, expected: tuple
) -> None:
    draw = position.image.PLACEMENTS[placement]()
    assert draw(target, mark) is target
    assert _bbox(target, RED) == expected


def test_image_alpha(target: Surface, mark: Surface) -> None:
    position.image.upper_left(0.5)(target, mark)
    r, g, b, a = target.getpixel((10, 10))
    assert a == 255
    assert r == 255
    assert 126 <= g <= 129


def test_image_alpha_defaults_to_opaque(target: Surface, mark: Surface) -> None:
    position.image.upper_left(0)(target, mark)
    assert target.getpixel((10, 10)) == RED


def _painted(surface: Surface) -> tuple:
    ys, xs = np.nonzero(surface.numpy()[..., 3])
    return (xs.min(), ys.min(), xs.max() + 1, ys.max() + 1)


@pytest.mark.parametrize(
    "placement",
    [
        Placement.LOWER_RIGHT,
        Placement.UPPER_RIGHT,
        Placement.LOWER_LEFT,
        Placement.UPPER_LEFT,
        Placement.CENTER,
    ],
)
def test_text_placement(placement: Placement) -> None:
    target = Surface(200, 60)
    draw = position.text.PLACEMENTS[placement]("Hello", None, RED, size=16)
    assert draw(target) is target
    left, top, right, bottom = _painted(target)
    if placement in (Placement.LOWER_LEFT, Placement.UPPER_LEFT):
        assert 9 <= left < 20
    if placement in (Placement.LOWER_RIGHT, Placement.UPPER_RIGHT):
        assert 175 < right <= 192
    if placement in (Placement.LOWER_RIGHT, Placement.LOWER_LEFT):
        assert bottom <= 55
        assert top > 30
    if placement in (Placement.UPPER_RIGHT, Placement.UPPER_LEFT):
        assert top < 20
    if placement == Placement.CENTER:
        assert abs((left + right) / 2 - 100) <= 3
        assert abs((top + bottom) / 2 - 30) <= 5


def test_text_explicit_baseline() -> None:
    target = Surface(200, 100)
    position.text.upper_left("Hello", None, RED, 1.0, y=80, size=16)(target)
    left, top, right, bottom = _painted(target)
    assert top > 55
    assert bottom <= 85


def test_text_alpha() -> None:
    target = Surface(200, 60)
    position.text.center("Hello", None, RED, 0.5, size=24)(target)
    assert 0 < target.numpy()[..., 3].max() <= 128
