"""
Surface pool module.

:py:class:`SurfacePool` keeps a collection of reusable
:py:class:`~watermark_tools.surface.Surface` objects so that repeated
compositions do not allocate a new pixel buffer for every resource.

The pool only tracks *available* surfaces. A surface returned by
:py:meth:`SurfacePool.pop` belongs to the caller until it is handed back with
:py:meth:`SurfacePool.release`; the pool does not remember checked-out
surfaces, so releasing the same surface twice puts it in the pool twice.
Callers must not do that.

The module-level :py:data:`shared` pool is used by every pipeline that is not
given its own pool. Call :py:func:`destroy` to drop its surfaces, e.g. at
application shutdown or in test teardown.

Example usage::

    from watermark_tools.pool import SurfacePool

    pool = SurfacePool()
    surface = pool.pop()      # allocates, pool.length == 0
    surface.resize(64, 64)
    pool.release(surface)     # cleared, pool.length == 1
    pool.clear()              # pool.length == 0
"""

import logging
import threading
from typing import Optional

from watermark_tools.surface import Surface

logger = logging.getLogger(__name__)


class SurfacePool:
    """
    Pool of reusable surfaces.

    :param max_size: Maximum number of available surfaces kept by the pool.
        Surfaces released into a full pool are dropped. ``None`` means the
        pool grows without bound.
    """

    def __init__(self, max_size: Optional[int] = None):
        if max_size is not None and max_size < 0:
            raise ValueError(f"max_size must be non-negative, got {max_size}")
        self._max_size = max_size
        self._surfaces: list[Surface] = []
        self._lock = threading.Lock()

    @property
    def max_size(self) -> Optional[int]:
        return self._max_size

    @property
    def length(self) -> int:
        """Number of surfaces available for checkout."""
        return len(self._surfaces)

    def __len__(self) -> int:
        return self.length

    @property
    def elements(self) -> tuple[Surface, ...]:
        """Snapshot of the available surfaces."""
        return tuple(self._surfaces)

    def pop(self) -> Surface:
        """
        Check out a surface, allocating a new one when none is available.
        """
        with self._lock:
            if self._surfaces:
                return self._surfaces.pop()
        logger.debug("Allocating a new surface")
        return Surface()

    def release(self, surface: Surface) -> None:
        """
        Clear ``surface`` and return it to the pool.

        The surface keeps its size. Releasing a surface that is already in
        the pool is not allowed.
        """
        surface.clear()
        with self._lock:
            if self._max_size is not None and len(self._surfaces) >= self._max_size:
                logger.warning("Pool is full, dropping %r", surface)
                return
            self._surfaces.append(surface)

    def clear(self) -> None:
        """Drop every available surface."""
        with self._lock:
            count = len(self._surfaces)
            self._surfaces.clear()
        logger.debug("Dropped %d surface(s)", count)

    def __repr__(self) -> str:
        return "%s(length=%d, max_size=%s)" % (
            self.__class__.__name__,
            self.length,
            self._max_size,
        )


#: Process-wide pool used by default.
shared = SurfacePool()


def destroy() -> None:
    """Empty the shared pool."""
    shared.clear()
