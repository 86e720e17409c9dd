"""
watermark-tools: Python package for compositing watermarks onto images.

Resources (URLs, paths, open files or Pillow images) are loaded
concurrently, painted onto pooled drawing surfaces, combined by a draw
strategy and serialized to a data URL, a blob or an image.

Basic usage::

    import asyncio
    from watermark_tools import position, watermark

    async def main():
        image = await watermark(["photo.jpg", "logo.png"]).image(
            position.image.lower_right(0.5)
        )
        image.save("marked.png")

    asyncio.run(main())

Architecture:

- :py:mod:`watermark_tools.pipeline`: Chainable pipeline (primary interface)
- :py:mod:`watermark_tools.loader`: Concurrent, order-preserving resource loading
- :py:mod:`watermark_tools.pool`: Reusable surface pool
- :py:mod:`watermark_tools.position`: Image and text placement strategies
- :py:mod:`watermark_tools.serialization`: Data URL, blob and image conversion
"""

from watermark_tools import position
from watermark_tools.loader import AggregateLoadFailure, ImageRequest, LoadFailure
from watermark_tools.pipeline import Options, Pipeline, watermark
from watermark_tools.pool import SurfacePool, destroy
from watermark_tools.resources import (
    ImageResource,
    LocalHandle,
    RemoteReference,
    UnsupportedResourceType,
)
from watermark_tools.serialization import Blob, SerializationFailure
from watermark_tools.surface import Surface
from watermark_tools.version import __version__

__all__ = [
    "AggregateLoadFailure",
    "Blob",
    "ImageRequest",
    "ImageResource",
    "LoadFailure",
    "LocalHandle",
    "Options",
    "Pipeline",
    "RemoteReference",
    "SerializationFailure",
    "Surface",
    "SurfacePool",
    "UnsupportedResourceType",
    "__version__",
    "destroy",
    "position",
    "watermark",
]
