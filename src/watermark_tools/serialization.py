"""
Serialization between surfaces, data URLs, blobs and images.
"""

import base64
import binascii
import io
import logging
import re
from typing import TYPE_CHECKING

from attrs import define, field
from PIL import Image, UnidentifiedImageError

from watermark_tools.constants import DEFAULT_FORMAT

if TYPE_CHECKING:
    from watermark_tools.surface import Surface

logger = logging.getLogger(__name__)

DATA_URL = re.compile(r"^data:([^;,]+);base64,(.*)$", re.DOTALL)


class SerializationFailure(ValueError):
    """Raised when a surface, data URL or blob cannot be converted."""


@define(frozen=True)
class Blob:
    """
    Binary object with a MIME type.

    .. py:attribute:: data

        Encoded bytes.

    .. py:attribute:: mime_type

        MIME type of ``data``, e.g. ``image/png``.
    """

    data: bytes = field(repr=lambda value: "<%d bytes>" % len(value))
    mime_type: str = field(default="application/octet-stream")

    @property
    def size(self) -> int:
        return len(self.data)

    def to_data_url(self) -> str:
        return "data:%s;base64,%s" % (
            self.mime_type,
            base64.b64encode(self.data).decode("ascii"),
        )

    def open(self) -> Image.Image:
        """Decode the blob as an image."""
        return decode_image(self.data)


def decode_image(data: bytes) -> Image.Image:
    """Decode encoded image bytes into a fully loaded Pillow image."""
    try:
        image = Image.open(io.BytesIO(data))
        image.load()
    except (UnidentifiedImageError, OSError, SyntaxError) as e:
        raise SerializationFailure(f"Cannot decode image: {e}") from e
    return image


def to_data_url(surface: "Surface", format: str = DEFAULT_FORMAT) -> str:
    """
    Encode the surface content as a base64 data URL.

    :param format: Pillow format name, e.g. ``PNG`` or ``WEBP``.
    """
    format = {"JPG": "JPEG"}.get(format.upper(), format)
    image = surface.image
    if format.upper() in ("JPEG", "BMP"):
        image = image.convert("RGB")
    with io.BytesIO() as f:
        try:
            image.save(f, format=format)
        except (KeyError, ValueError, OSError) as e:
            raise SerializationFailure(
                f"Cannot encode surface as {format}: {e}"
            ) from e
        data = f.getvalue()
    mime_type = Image.MIME.get(format.upper(), "image/%s" % format.lower())
    logger.debug("Encoded %r as %s (%d bytes)", surface, mime_type, len(data))
    return Blob(data, mime_type).to_data_url()


def split_data_url(data_url: str) -> tuple[str, str]:
    """Split a base64 data URL into (mime_type, payload)."""
    match = DATA_URL.match(data_url)
    if match is None:
        raise SerializationFailure("Not a base64 data URL: %.40r" % data_url)
    return match.group(1), match.group(2)


def data_url_to_blob(data_url: str) -> Blob:
    """Decode a base64 data URL, preserving its MIME type."""
    mime_type, payload = split_data_url(data_url)
    try:
        data = base64.b64decode(payload, validate=True)
    except binascii.Error as e:
        raise SerializationFailure(f"Invalid base64 payload: {e}") from e
    return Blob(data, mime_type)


def data_url_to_image(data_url: str) -> Image.Image:
    """Decode a base64 data URL into an image."""
    return data_url_to_blob(data_url).open()
