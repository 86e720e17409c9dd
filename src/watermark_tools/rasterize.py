"""
Conversion of decoded images to pooled surfaces.
"""

import logging
from typing import Iterable

from PIL import Image

from watermark_tools.pool import SurfacePool
from watermark_tools.surface import Surface

logger = logging.getLogger(__name__)


def to_surface(image: Image.Image, pool: SurfacePool) -> Surface:
    """
    Check out a surface from ``pool``, size it to ``image`` and paint the
    image at the origin.
    """
    rgba = image.convert("RGBA")
    surface = pool.pop()
    surface.resize(rgba.width, rgba.height)
    surface.image.paste(rgba, (0, 0))
    return surface


def map_to_surfaces(images: Iterable[Image.Image], pool: SurfacePool) -> list[Surface]:
    """
    Convert each image to a surface, in order. Surfaces already checked out
    are released when a conversion fails.
    """
    surfaces: list[Surface] = []
    try:
        for image in images:
            surfaces.append(to_surface(image, pool))
    except BaseException:
        for surface in surfaces:
            pool.release(surface)
        raise
    logger.debug("Rasterized %d image(s)", len(surfaces))
    return surfaces
