"""
Drawing surface module.

A :py:class:`Surface` is a mutable rectangular drawing target backed by a
Pillow ``RGBA`` image. Surfaces are normally checked out from a
:py:class:`~watermark_tools.pool.SurfacePool` rather than created directly,
and are handed to draw strategies, which paint watermarks onto them.

Example usage::

    from watermark_tools.surface import Surface

    surface = Surface(100, 50)
    surface.draw_image(mark, 10, 10, alpha=0.5)
    surface.fill_text("(c) 2024", 10, 40, fill="white")
    surface.topil().save("out.png")
"""

import logging
import os
from typing import Any, Optional, Union

import numpy as np
from PIL import Image, ImageDraw, ImageFont

logger = logging.getLogger(__name__)

TRANSPARENT = (0, 0, 0, 0)

FontLike = Union[ImageFont.ImageFont, ImageFont.FreeTypeFont, str, os.PathLike, None]


def load_font(font: FontLike = None, size: Optional[float] = None) -> Any:
    """
    Resolve a font argument to a Pillow font object.

    :param font: Pillow font object, path to a TrueType/OpenType file, or
        ``None`` for Pillow's default font.
    :param size: Font size in pixels, ignored for font objects.
    """
    if font is None:
        if size is None:
            return ImageFont.load_default()
        return ImageFont.load_default(size)
    if isinstance(font, (str, os.PathLike)):
        return ImageFont.truetype(os.fspath(font), int(size or 16))
    return font


def apply_alpha(image: Image.Image, alpha: float) -> Image.Image:
    """Scale the alpha channel of an RGBA image by ``alpha``."""
    if alpha >= 1.0:
        return image
    data = np.asarray(image, dtype=np.float32).copy()
    data[..., 3] *= max(alpha, 0.0)
    return Image.fromarray(np.round(data).astype(np.uint8))


class Surface:
    """
    Rectangular RGBA drawing target.

    Resizing is destructive: :py:meth:`resize` discards the previous content.
    :py:meth:`clear` erases the content and keeps the size.
    """

    def __init__(self, width: int = 1, height: int = 1):
        self._image = Image.new("RGBA", (width, height), TRANSPARENT)

    @property
    def width(self) -> int:
        """Width in pixels."""
        return self._image.width

    @property
    def height(self) -> int:
        """Height in pixels."""
        return self._image.height

    @property
    def size(self) -> tuple[int, int]:
        """(width, height) tuple."""
        return self._image.size

    @property
    def image(self) -> Image.Image:
        """The backing Pillow image. Drawing on it draws on the surface."""
        return self._image

    @property
    def context(self) -> ImageDraw.ImageDraw:
        """
        Pillow drawing context for free-form drawing on the surface.

        The context becomes stale after :py:meth:`resize`.
        """
        return ImageDraw.Draw(self._image)

    def resize(self, width: int, height: int) -> "Surface":
        """Set the surface size, discarding the current content."""
        self._image = Image.new("RGBA", (width, height), TRANSPARENT)
        return self

    def clear(self) -> None:
        """Erase the content, keeping the size."""
        self._image.paste(TRANSPARENT, (0, 0, self.width, self.height))

    def draw_image(
        self,
        source: Union["Surface", Image.Image],
        x: float = 0,
        y: float = 0,
        alpha: float = 1.0,
    ) -> None:
        """
        Composite ``source`` over the surface with its top-left corner at
        (``x``, ``y``). Parts outside the surface are clipped.

        :param source: Surface or Pillow image to draw.
        :param alpha: Global opacity in the range [0.0, 1.0].
        """
        if isinstance(source, Surface):
            source = source.image
        overlay = apply_alpha(source.convert("RGBA"), alpha)
        layer = Image.new("RGBA", self.size, TRANSPARENT)
        layer.paste(overlay, (int(x), int(y)))
        self._image.alpha_composite(layer)

    def measure_text(self, text: str, font: Any = None) -> float:
        """Return the advance width of ``text`` in pixels."""
        return self.context.textlength(text, font=load_font(font))

    def fill_text(
        self,
        text: str,
        x: float,
        y: float,
        font: Any = None,
        fill: Any = "black",
        alpha: float = 1.0,
        anchor: str = "ls",
    ) -> None:
        """
        Write ``text`` at (``x``, ``y``).

        The default anchor ``"ls"`` puts (``x``, ``y``) on the left end of
        the text baseline. See Pillow's text anchor documentation for other
        values.
        """
        layer = Image.new("RGBA", self.size, TRANSPARENT)
        ImageDraw.Draw(layer).text(
            (x, y), text, fill=fill, font=load_font(font), anchor=anchor
        )
        self._image.alpha_composite(apply_alpha(layer, alpha))

    def getpixel(self, xy: tuple[int, int]) -> tuple[int, ...]:
        return self._image.getpixel(xy)

    def numpy(self) -> np.ndarray:
        """Return a copy of the pixels as an (height, width, 4) uint8 array."""
        return np.array(self._image)

    def topil(self) -> Image.Image:
        """Return a copy of the content as a Pillow image."""
        return self._image.copy()

    def __repr__(self) -> str:
        return "%s(width=%d, height=%d)" % (
            self.__class__.__name__,
            self.width,
            self.height,
        )
