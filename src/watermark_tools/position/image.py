"""
Image watermark placement.
"""

import logging
from typing import Callable

from watermark_tools.constants import MARGIN, Placement
from watermark_tools.registry import new_registry
from watermark_tools.surface import Surface

logger = logging.getLogger(__name__)

PLACEMENTS, register = new_registry(attribute="placement")

Coordinate = Callable[[Surface, Surface], float]


def at_position(
    x: Coordinate, y: Coordinate, alpha: float = 1.0
) -> Callable[[Surface, Surface], Surface]:
    """
    Return a draw strategy placing the watermark at the coordinates computed
    by ``x`` and ``y`` from the target and watermark surfaces.
    """
    alpha = alpha or 1.0

    def draw(target: Surface, watermark: Surface) -> Surface:
        target.draw_image(watermark, x(target, watermark), y(target, watermark), alpha)
        return target

    return draw


@register(Placement.LOWER_RIGHT)
def lower_right(alpha: float = 1.0) -> Callable[[Surface, Surface], Surface]:
    """Place the watermark in the lower right corner of the target."""
    return at_position(
        lambda target, mark: target.width - (mark.width + MARGIN),
        lambda target, mark: target.height - (mark.height + MARGIN),
        alpha,
    )


@register(Placement.UPPER_RIGHT)
def upper_right(alpha: float = 1.0) -> Callable[[Surface, Surface], Surface]:
    """Place the watermark in the upper right corner of the target."""
    return at_position(
        lambda target, mark: target.width - (mark.width + MARGIN),
        lambda target, mark: MARGIN,
        alpha,
    )


@register(Placement.LOWER_LEFT)
def lower_left(alpha: float = 1.0) -> Callable[[Surface, Surface], Surface]:
    """Place the watermark in the lower left corner of the target."""
    return at_position(
        lambda target, mark: MARGIN,
        lambda target, mark: target.height - (mark.height + MARGIN),
        alpha,
    )


@register(Placement.UPPER_LEFT)
def upper_left(alpha: float = 1.0) -> Callable[[Surface, Surface], Surface]:
    """Place the watermark in the upper left corner of the target."""
    return at_position(lambda target, mark: MARGIN, lambda target, mark: MARGIN, alpha)


@register(Placement.CENTER)
def center(alpha: float = 1.0) -> Callable[[Surface, Surface], Surface]:
    """Place the watermark in the center of the target."""
    return at_position(
        lambda target, mark: (target.width - mark.width) / 2,
        lambda target, mark: (target.height - mark.height) / 2,
        alpha,
    )
