"""
Placement helpers.

Each helper returns a draw strategy for
:py:meth:`~watermark_tools.pipeline.Pipeline.data_url` and friends:

- :py:mod:`watermark_tools.position.image`: strategies taking
  ``(target, watermark)`` surfaces and drawing the watermark over the target.
- :py:mod:`watermark_tools.position.text`: strategies taking a single
  ``target`` surface and writing text on it.

Both return the target surface, so the composed result is the first
resource. Corner placements keep a :py:data:`~watermark_tools.constants.MARGIN`
pixel distance from the edges.

Example usage::

    from watermark_tools import position, watermark

    watermark(["photo.jpg", "logo.png"]).image(position.image.upper_left(0.5))
    watermark(["photo.jpg"]).image(
        position.text.center("DRAFT", "DejaVuSans.ttf", "red", 0.4, size=48)
    )
"""

from watermark_tools.position import image, text

__all__ = ["image", "text"]
