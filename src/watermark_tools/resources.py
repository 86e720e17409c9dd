"""
Resource descriptors.

A resource is one input of a watermark pipeline. Each descriptor class carries
a :py:class:`~watermark_tools.constants.ResourceKind` tag that the loader
switches on:

- :py:class:`RemoteReference`: a URL (``http``, ``https`` or ``data``) or a
  filesystem path.
- :py:class:`LocalHandle`: an open binary file-like object.
- :py:class:`ImageResource`: an already decoded Pillow image.

Raw values are converted with :py:func:`as_resource`, which is applied to
every input of :py:func:`~watermark_tools.pipeline.watermark`, so callers may
mix descriptors with strings, paths, file objects and images::

    watermark(["photo.jpg", open("logo.png", "rb"), Image.new("RGBA", (8, 8))])
"""

import logging
import os
from typing import Any, BinaryIO, ClassVar, Iterable, Optional, Union

from attrs import define, field
from PIL import Image

from watermark_tools.constants import ResourceKind
from watermark_tools.serialization import Blob

logger = logging.getLogger(__name__)


class UnsupportedResourceType(TypeError):
    """Raised for a value that matches none of the resource kinds."""


@define(frozen=True)
class RemoteReference:
    """
    Reference to an image by locator.

    .. py:attribute:: locator

        ``http://`` or ``https://`` URL, ``data:`` URL, or filesystem path.
    """

    kind: ClassVar[ResourceKind] = ResourceKind.REMOTE

    locator: str = field(converter=os.fspath)


@define(frozen=True)
class LocalHandle:
    """
    Open binary file-like object holding encoded image bytes.

    .. py:attribute:: fp

        Object with a ``read()`` method returning bytes.

    .. py:attribute:: name

        Optional display name, taken from ``fp.name`` when omitted.
    """

    kind: ClassVar[ResourceKind] = ResourceKind.LOCAL

    fp: BinaryIO = field(eq=False)
    name: Optional[str] = field(default=None)

    def __attrs_post_init__(self) -> None:
        if self.name is None:
            name = getattr(self.fp, "name", None)
            if isinstance(name, str):
                object.__setattr__(self, "name", name)


@define(frozen=True)
class ImageResource:
    """
    Already decoded image. Loading it is a no-op.
    """

    kind: ClassVar[ResourceKind] = ResourceKind.IMAGE

    image: Image.Image = field(eq=False)


Resource = Union[RemoteReference, LocalHandle, ImageResource]

RESOURCE_TYPES = (RemoteReference, LocalHandle, ImageResource)


def as_resource(value: Any) -> Resource:
    """
    Convert ``value`` to a resource descriptor.

    :raise UnsupportedResourceType: if ``value`` has no matching kind.
    """
    if isinstance(value, RESOURCE_TYPES):
        return value
    if isinstance(value, (str, os.PathLike)):
        return RemoteReference(value)
    if isinstance(value, Image.Image):
        return ImageResource(value)
    if isinstance(value, Blob):
        return RemoteReference(value.to_data_url())
    if callable(getattr(value, "read", None)):
        return LocalHandle(value)
    raise UnsupportedResourceType(
        f"Unsupported resource type: {type(value).__name__}"
    )


def as_resources(values: Iterable[Any]) -> list[Resource]:
    """Convert every item of ``values`` with :py:func:`as_resource`."""
    if isinstance(values, (str, bytes, os.PathLike)):
        raise UnsupportedResourceType(
            f"Expected a sequence of resources, got {type(values).__name__}"
        )
    return [as_resource(value) for value in values]


def describe(resource: Resource) -> str:
    """Short human-readable label for log and error messages."""
    if isinstance(resource, RemoteReference):
        locator = resource.locator
        if locator.startswith("data:"):
            return locator[: locator.find(",") + 1] + "..."
        return locator
    if isinstance(resource, LocalHandle):
        return resource.name or repr(resource.fp)
    return "<%s image %dx%d>" % (
        resource.image.mode,
        resource.image.width,
        resource.image.height,
    )
