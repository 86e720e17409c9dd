"""
Composition pipeline.

:py:func:`watermark` starts loading a list of resources and returns a
:py:class:`Pipeline`. A pipeline wraps an :py:class:`asyncio.Task`; every
chain method returns a *new* pipeline whose task awaits the previous one, so
a pipeline is never modified after it is created and can be branched freely.

Example usage::

    import asyncio
    from watermark_tools import watermark, position

    async def main():
        url = await watermark(["photo.jpg", "logo.png"]).data_url(
            position.image.lower_right(0.5)
        )
        marked = await watermark(["photo.jpg"]).image(
            position.text.lower_left("(c) 2024", None, "white", 0.8)
        )

    asyncio.run(main())

Pipelines must be created inside a running event loop since loading starts
right away. Failures propagate through every derived pipeline: awaiting any
of them raises the original exception, and no further work is done.

The draw strategy receives one surface per resource, in resource order, and
returns the composed surface. Source surfaces are released to the pool once
the composed surface is serialized. The composed surface itself is not
released; a strategy that draws into an extra surface taken from the pool is
responsible for returning it.
"""

import asyncio
import inspect
import logging
from typing import Any, Callable, Generator, Iterable, Optional, Union

from attrs import define, evolve, field
from attrs.validators import ge, instance_of, is_callable, optional
from PIL import Image

from watermark_tools.constants import DEFAULT_FORMAT
from watermark_tools.loader import Initializer, load, noop
from watermark_tools.pool import SurfacePool, shared
from watermark_tools.rasterize import map_to_surfaces
from watermark_tools.resources import as_resources
from watermark_tools.serialization import (
    data_url_to_blob,
    data_url_to_image,
    to_data_url,
)
from watermark_tools.surface import Surface

logger = logging.getLogger(__name__)

DrawStrategy = Callable[..., Surface]


@define(frozen=True)
class Options:
    """
    Pipeline configuration.

    .. py:attribute:: initializer

        Called with the :py:class:`~watermark_tools.loader.ImageRequest` of
        every remote resource before it is fetched.

    .. py:attribute:: pool_size

        Size limit of a private pool for this pipeline. Ignored if ``pool``
        is given.

    .. py:attribute:: pool

        Surface pool to draw from. Defaults to the shared pool.
    """

    initializer: Optional[Initializer] = field(
        default=noop, validator=optional(is_callable())
    )
    pool_size: Optional[int] = field(default=None, validator=optional(ge(0)))
    pool: Optional[SurfacePool] = field(
        default=None, validator=optional(instance_of(SurfacePool))
    )

    def surface_pool(self) -> SurfacePool:
        return self.pool if self.pool is not None else shared


def merge_options(options: Union[Options, dict, None] = None) -> Options:
    """
    Build an :py:class:`Options` from ``None``, a dict or an existing
    record. A private pool is created when only ``pool_size`` is given.
    """
    if options is None:
        opts = Options()
    elif isinstance(options, Options):
        opts = options
    elif isinstance(options, dict):
        opts = Options(**options)
    else:
        raise TypeError(f"Expected Options or dict, got {type(options).__name__}")
    if opts.initializer is None:
        opts = evolve(opts, initializer=noop)
    if opts.pool is None and opts.pool_size is not None:
        opts = evolve(opts, pool=SurfacePool(max_size=opts.pool_size))
    return opts


@define(frozen=True)
class DrawResult:
    """Composed surface paired with the source surfaces it was drawn from."""

    surface: Surface
    sources: tuple[Surface, ...]


def compose(draw: DrawStrategy, sources: Iterable[Surface]) -> DrawResult:
    """Apply the draw strategy to the source surfaces."""
    sources = tuple(sources)
    surface = draw(*sources)
    if not isinstance(surface, Surface):
        raise TypeError(
            f"Draw strategy must return a Surface, got {type(surface).__name__}"
        )
    return DrawResult(surface, sources)


def release(result: DrawResult, pool: SurfacePool, format: str = DEFAULT_FORMAT) -> str:
    """
    Serialize the composed surface, then return the sources to ``pool``.
    """
    try:
        return to_data_url(result.surface, format)
    finally:
        for source in result.sources:
            pool.release(source)


def _as_list(value: Any) -> list:
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


class Pipeline:
    """
    Chainable, immutable watermark workflow.

    :param resources: Resources the pipeline was created from.
    :param options: :py:class:`Options`, a dict of its fields, or ``None``.
    :param pending: Awaitable producing the pipeline value. When omitted,
        ``resources`` are loaded.
    """

    def __init__(
        self,
        resources: Iterable[Any],
        options: Union[Options, dict, None] = None,
        pending: Optional[Any] = None,
    ):
        self._resources = tuple(as_resources(resources))
        self._options = merge_options(options)
        if pending is None:
            pending = load(self._resources, self._options.initializer)
        if asyncio.isfuture(pending):
            self._task = pending
        else:
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                if inspect.iscoroutine(pending):
                    pending.close()
                raise RuntimeError(
                    "Pipeline must be created inside a running event loop"
                ) from None
            self._task = loop.create_task(pending)

    @property
    def resources(self) -> tuple:
        return self._resources

    @property
    def options(self) -> Options:
        return self._options

    def _derive(self, pending: Any) -> "Pipeline":
        return Pipeline(self._resources, self._options, pending)

    def data_url(self, draw: DrawStrategy, format: str = DEFAULT_FORMAT) -> "Pipeline":
        """
        Compose the loaded images with ``draw`` and resolve to a data URL.

        :param draw: Called with one surface per image, in resource order.
        :param format: Pillow encoder used for the data URL.
        """
        return self._derive(self._data_url(draw, format))

    async def _data_url(self, draw: DrawStrategy, format: str) -> str:
        images = await self._images()
        pool = self._options.surface_pool()
        sources = map_to_surfaces(images, pool)
        try:
            result = compose(draw, sources)
        except BaseException:
            for source in sources:
                pool.release(source)
            raise
        data_url = release(result, pool, format)
        logger.debug("Composed %d surface(s), pool has %d", len(sources), len(pool))
        return data_url

    async def _images(self) -> list[Image.Image]:
        value = await self._task
        if isinstance(value, list) and all(
            isinstance(item, Image.Image) for item in value
        ):
            return value
        return await load(_as_list(value), self._options.initializer)

    def load(
        self, resources: Iterable[Any], initializer: Optional[Initializer] = None
    ) -> "Pipeline":
        """
        Append resources. The current value comes first, followed by the new
        resources, all resolved to images.
        """
        extra = as_resources(resources)
        return self._derive(self._extend(extra, initializer))

    async def _extend(
        self, resources: list, initializer: Optional[Initializer]
    ) -> list[Image.Image]:
        value = await self._task
        return await load(_as_list(value) + resources, initializer)

    def render(self) -> "Pipeline":
        """
        Resolve the current value again as a list of images. A data URL
        produced by :py:meth:`data_url` becomes a single image.
        """
        return self._derive(self._render())

    async def _render(self) -> list[Image.Image]:
        value = await self._task
        return await load(_as_list(value))

    def blob(self, draw: DrawStrategy, format: str = DEFAULT_FORMAT) -> "Pipeline":
        """Like :py:meth:`data_url`, resolving to a :py:class:`~watermark_tools.serialization.Blob`."""
        return self.data_url(draw, format).then(data_url_to_blob)

    def image(self, draw: DrawStrategy, format: str = DEFAULT_FORMAT) -> "Pipeline":
        """Like :py:meth:`data_url`, resolving to a Pillow image."""
        return self.data_url(draw, format).then(data_url_to_image)

    def then(
        self,
        on_success: Optional[Callable[[Any], Any]] = None,
        on_failure: Optional[Callable[[Exception], Any]] = None,
    ) -> "Pipeline":
        """
        Chain continuations. ``on_success`` receives the value and
        ``on_failure`` the exception; either may be a coroutine function.
        Without ``on_failure`` the exception propagates.
        """
        return self._derive(self._then(on_success, on_failure))

    async def _then(
        self,
        on_success: Optional[Callable[[Any], Any]],
        on_failure: Optional[Callable[[Exception], Any]],
    ) -> Any:
        try:
            value = await self._task
        except Exception as e:
            if on_failure is None:
                raise
            result = on_failure(e)
        else:
            result = on_success(value) if on_success is not None else value
        if inspect.isawaitable(result):
            result = await result
        return result

    async def resolve(self) -> Any:
        """Wait for and return the pipeline value."""
        return await self._task

    def done(self) -> bool:
        """Whether the pipeline value is settled."""
        return self._task.done()

    def __await__(self) -> Generator[Any, None, Any]:
        return self._task.__await__()

    def __repr__(self) -> str:
        state = "done" if self.done() else "pending"
        return "%s(resources=%d, %s)" % (
            self.__class__.__name__,
            len(self._resources),
            state,
        )


def watermark(
    resources: Iterable[Any], options: Union[Options, dict, None] = None
) -> Pipeline:
    """
    Start loading ``resources`` and return a :py:class:`Pipeline`.

    :param resources: URLs, paths, file objects, Pillow images or resource
        descriptors.
    :param options: :py:class:`Options` or a dict of its fields.
    """
    return Pipeline(resources, options)
