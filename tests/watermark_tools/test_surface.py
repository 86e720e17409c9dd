import logging

import numpy as np
import pytest
from PIL import Image

from watermark_tools.surface import Surface, apply_alpha, load_font

from .utils import solid

logger = logging.getLogger(__name__)


@pytest.fixture
def surface() -> Surface:
    surface = Surface(4, 3)
    surface.draw_image(solid((4, 3), (255, 0, 0, 255)))
    return surface


def test_new() -> None:
    surface = Surface()
    assert surface.size == (1, 1)
    assert surface.image.mode == "RGBA"
    assert not surface.numpy().any()


def test_clear_keeps_size(surface: Surface) -> None:
    assert surface.numpy().any()
    surface.clear()
    assert surface.size == (4, 3)
    assert not surface.numpy().any()


def test_resize_discards_content(surface: Surface) -> None:
    surface.resize(8, 2)
    assert (surface.width, surface.height) == (8, 2)
    assert not surface.numpy().any()


def test_draw_image_offset_is_clipped() -> None:
    surface = Surface(4, 4)
    surface.draw_image(solid((4, 4), (0, 0, 255, 255)), -2, -2)
    alpha = surface.numpy()[..., 3]
    assert (alpha[:2, :2] == 255).all()
    assert not alpha[2:, :].any()
    assert not alpha[:, 2:].any()


def test_draw_surface(surface: Surface) -> None:
    target = Surface(4, 3)
    target.draw_image(surface, 1, 0)
    assert target.getpixel((0, 0)) == (0, 0, 0, 0)
    assert target.getpixel((1, 0)) == (255, 0, 0, 255)


def test_draw_image_alpha() -> None:
    surface = Surface(2, 2)
    surface.draw_image(solid((2, 2), (255, 0, 0, 255)), alpha=0.5)
    r, g, b, a = surface.getpixel((0, 0))
    assert r == 255
    assert a in (127, 128)


@pytest.mark.parametrize(
    "alpha, expected",
    [
        (1.0, 200),
        (0.5, 100),
        (0.0, 0),
    ],
)
def test_apply_alpha(alpha: float, expected: int) -> None:
    image = apply_alpha(solid((2, 2), (1, 2, 3, 200)), alpha)
    assert image.getpixel((1, 1)) == (1, 2, 3, expected)


def test_fill_text() -> None:
    surface = Surface(80, 30)
    surface.fill_text("Hello", 5, 20, fill=(255, 255, 255, 255))
    alpha = surface.numpy()[..., 3]
    assert alpha.any()
    assert surface.measure_text("Hello") > 0


def test_topil_is_a_copy(surface: Surface) -> None:
    image = surface.topil()
    surface.clear()
    assert isinstance(image, Image.Image)
    assert np.asarray(image)[..., 3].all()


def test_load_font() -> None:
    font = load_font()
    assert load_font(font) is font
    assert load_font(None, 24) is not None
