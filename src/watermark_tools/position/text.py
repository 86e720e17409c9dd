"""
Text watermark placement.

Text helpers take the text, a font (Pillow font object, path to a font file,
or ``None`` for Pillow's default font), a fill color and an alpha. ``y`` sets
the baseline explicitly for the corner placements, since the default baseline
is only an estimate: ``height - 10`` for the lower corners and ``20`` for the
upper ones. :py:func:`center` centers the text on both axes.
"""

import logging
from typing import Any, Callable, Optional

from watermark_tools.constants import MARGIN, TEXT_TOP, Placement
from watermark_tools.registry import new_registry
from watermark_tools.surface import Surface, load_font

logger = logging.getLogger(__name__)

PLACEMENTS, register = new_registry(attribute="placement")

Coordinate = Callable[[Surface, float], float]


def at_position(
    x: Coordinate,
    y: Coordinate,
    text: str,
    font: Any = None,
    fill: Any = "black",
    alpha: float = 1.0,
    size: Optional[float] = None,
    anchor: str = "ls",
) -> Callable[[Surface], Surface]:
    """
    Return a draw strategy writing ``text`` at the coordinates computed by
    ``x`` and ``y`` from the target surface and the text width.
    """
    alpha = alpha or 1.0
    font = load_font(font, size)

    def draw(target: Surface) -> Surface:
        width = target.measure_text(text, font)
        target.fill_text(
            text,
            x(target, width),
            y(target, width),
            font=font,
            fill=fill,
            alpha=alpha,
            anchor=anchor,
        )
        return target

    return draw


@register(Placement.LOWER_RIGHT)
def lower_right(
    text: str,
    font: Any = None,
    fill: Any = "black",
    alpha: float = 1.0,
    y: Optional[float] = None,
    size: Optional[float] = None,
) -> Callable[[Surface], Surface]:
    """Write text in the lower right corner of the target."""
    return at_position(
        lambda target, width: target.width - (width + MARGIN),
        lambda target, width: y or (target.height - MARGIN),
        text,
        font,
        fill,
        alpha,
        size,
    )


@register(Placement.LOWER_LEFT)
def lower_left(
    text: str,
    font: Any = None,
    fill: Any = "black",
    alpha: float = 1.0,
    y: Optional[float] = None,
    size: Optional[float] = None,
) -> Callable[[Surface], Surface]:
    """Write text in the lower left corner of the target."""
    return at_position(
        lambda target, width: MARGIN,
        lambda target, width: y or (target.height - MARGIN),
        text,
        font,
        fill,
        alpha,
        size,
    )


@register(Placement.UPPER_RIGHT)
def upper_right(
    text: str,
    font: Any = None,
    fill: Any = "black",
    alpha: float = 1.0,
    y: Optional[float] = None,
    size: Optional[float] = None,
) -> Callable[[Surface], Surface]:
    """Write text in the upper right corner of the target."""
    return at_position(
        lambda target, width: target.width - (width + MARGIN),
        lambda target, width: y or TEXT_TOP,
        text,
        font,
        fill,
        alpha,
        size,
    )


@register(Placement.UPPER_LEFT)
def upper_left(
    text: str,
    font: Any = None,
    fill: Any = "black",
    alpha: float = 1.0,
    y: Optional[float] = None,
    size: Optional[float] = None,
) -> Callable[[Surface], Surface]:
    """Write text in the upper left corner of the target."""
    return at_position(
        lambda target, width: MARGIN,
        lambda target, width: y or TEXT_TOP,
        text,
        font,
        fill,
        alpha,
        size,
    )


@register(Placement.CENTER)
def center(
    text: str,
    font: Any = None,
    fill: Any = "black",
    alpha: float = 1.0,
    y: Optional[float] = None,
    size: Optional[float] = None,
) -> Callable[[Surface], Surface]:
    """
    Write text in the center of the target. ``y`` is accepted for signature
    compatibility with the corner helpers and ignored.
    """
    return at_position(
        lambda target, width: target.width / 2,
        lambda target, width: target.height / 2,
        text,
        font,
        fill,
        alpha,
        size,
        anchor="mm",
    )
