"""
Resource loader.

:py:func:`load` resolves an ordered list of resources into decoded Pillow
images. Every resource is scheduled as its own task before any of them is
awaited, and the result keeps the input order no matter which load finishes
first.

Loading is fail-fast: the first failing resource cancels the loads still in
flight and raises :py:class:`AggregateLoadFailure`. No partial list is ever
returned. Fetches running in a worker thread cannot be interrupted; their
result is discarded when they finish.

Example usage::

    import asyncio
    from watermark_tools.loader import load

    def init(request):
        request.headers["Authorization"] = "Bearer ..."

    images = asyncio.run(load(["https://example.com/a.jpg", "b.png"], init))
"""

import asyncio
import logging
import os
from typing import Any, Callable, Iterable, Optional

import requests
from attrs import define, field
from PIL import Image

from watermark_tools.constants import DEFAULT_TIMEOUT, ResourceKind
from watermark_tools.registry import new_registry
from watermark_tools.resources import (
    ImageResource,
    LocalHandle,
    RemoteReference,
    Resource,
    as_resources,
    describe,
)
from watermark_tools.serialization import data_url_to_blob, decode_image

logger = logging.getLogger(__name__)

LOADERS, register = new_registry(attribute="kind")

Initializer = Callable[["ImageRequest"], Any]


class LoadFailure(OSError):
    """
    Raised when a resource cannot be fetched or decoded.

    .. py:attribute:: resource

        The resource that failed.
    """

    def __init__(self, message: str, resource: Optional[Resource] = None):
        super().__init__(message)
        self.resource = resource


class AggregateLoadFailure(LoadFailure):
    """
    Raised by :py:func:`load` when any resource fails.

    .. py:attribute:: failure

        The first failure, normally a :py:class:`LoadFailure`.
    """

    def __init__(self, failure: BaseException):
        super().__init__(
            "Failed to load resource: %s" % failure,
            resource=getattr(failure, "resource", None),
        )
        self.failure = failure


@define
class ImageRequest:
    """
    Mutable request for a remote resource.

    The initializer passed to :py:func:`load` receives this object before the
    fetch starts and may change headers, cookies or the timeout.
    """

    url: str
    headers: dict[str, str] = field(factory=dict)
    cookies: dict[str, str] = field(factory=dict)
    timeout: float = field(default=DEFAULT_TIMEOUT)


def noop(request: ImageRequest) -> None:
    pass


async def load(
    resources: Iterable[Any], initializer: Optional[Initializer] = None
) -> list[Image.Image]:
    """
    Load resources concurrently, preserving order.

    :param resources: Resource descriptors or raw values accepted by
        :py:func:`~watermark_tools.resources.as_resource`.
    :param initializer: Called with the :py:class:`ImageRequest` of every
        remote resource before it is fetched. Not called for file handles or
        images.
    :return: List of images in input order.
    :raise UnsupportedResourceType: for an unrecognized value, before any
        load starts.
    :raise AggregateLoadFailure: when any resource fails.
    """
    items = as_resources(resources)
    initializer = initializer or noop
    tasks = [
        asyncio.ensure_future(_load_one(resource, initializer)) for resource in items
    ]
    if not tasks:
        return []

    try:
        await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
    finally:
        pending = [task for task in tasks if not task.done()]
        for task in pending:
            task.cancel()
        if pending:
            logger.debug("Cancelled %d pending load(s)", len(pending))
            await asyncio.gather(*pending, return_exceptions=True)

    # Retrieve every exception so none is reported as unhandled.
    failures = [task.exception() for task in tasks if not task.cancelled()]
    failure = next((error for error in failures if error is not None), None)
    if failure is not None:
        raise AggregateLoadFailure(failure) from failure

    logger.debug("Loaded %d resource(s)", len(tasks))
    return [task.result() for task in tasks]


async def _load_one(resource: Resource, initializer: Initializer) -> Image.Image:
    loader = LOADERS[resource.kind]
    logger.debug("Loading %s", describe(resource))
    try:
        return await loader(resource, initializer)
    except LoadFailure:
        raise
    except (OSError, ValueError, requests.RequestException) as e:
        raise LoadFailure(
            "%s: %s" % (describe(resource), e), resource=resource
        ) from e


@register(ResourceKind.REMOTE)
async def load_remote(
    resource: RemoteReference, initializer: Initializer
) -> Image.Image:
    request = ImageRequest(resource.locator)
    initializer(request)
    if request.url.startswith("data:"):
        return data_url_to_blob(request.url).open()
    if request.url.startswith(("http://", "https://")):
        data = await asyncio.to_thread(fetch, request)
    else:
        data = await asyncio.to_thread(_read_path, request.url)
    return decode_image(data)


@register(ResourceKind.LOCAL)
async def load_local(resource: LocalHandle, initializer: Initializer) -> Image.Image:
    data = await asyncio.to_thread(resource.fp.read)
    if not isinstance(data, bytes):
        raise LoadFailure(
            "%s: expected bytes, got %s" % (describe(resource), type(data).__name__),
            resource=resource,
        )
    return decode_image(data)


@register(ResourceKind.IMAGE)
async def load_image(resource: ImageResource, initializer: Initializer) -> Image.Image:
    return resource.image


def fetch(request: ImageRequest) -> bytes:
    """Fetch the body of an HTTP(S) request."""
    response = requests.get(
        request.url,
        headers=request.headers,
        cookies=request.cookies,
        timeout=request.timeout,
    )
    response.raise_for_status()
    return response.content


def _read_path(path: str) -> bytes:
    with open(os.path.expanduser(path), "rb") as f:
        return f.read()
