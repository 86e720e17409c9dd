import logging
import threading

import pytest

from watermark_tools import pool as pool_module
from watermark_tools.pool import SurfacePool, destroy, shared
from watermark_tools.surface import Surface

from .utils import solid

logger = logging.getLogger(__name__)


def test_pop_allocates(pool: SurfacePool) -> None:
    assert pool.length == 0
    surface = pool.pop()
    assert isinstance(surface, Surface)
    assert pool.length == 0
    assert len(pool) == 0


def test_pop_returns_distinct_surfaces(pool: SurfacePool) -> None:
    first = pool.pop()
    second = pool.pop()
    assert first is not second


def test_release_reuses(pool: SurfacePool) -> None:
    surface = pool.pop()
    pool.release(surface)
    assert pool.length == 1
    assert pool.elements == (surface,)
    assert pool.pop() is surface
    assert pool.length == 0


def test_release_clears_content(pool: SurfacePool) -> None:
    surface = pool.pop()
    surface.resize(6, 5)
    surface.draw_image(solid((6, 5), (10, 20, 30, 255)))
    pool.release(surface)
    assert surface.size == (6, 5)
    assert not surface.numpy().any()


def test_clear(pool: SurfacePool) -> None:
    surfaces = [pool.pop() for _ in range(3)]
    for surface in surfaces:
        pool.release(surface)
    assert pool.length == 3
    pool.clear()
    assert pool.length == 0
    assert pool.elements == ()
    assert pool.pop() not in surfaces


def test_clear_ignores_checked_out(pool: SurfacePool) -> None:
    surface = pool.pop()
    surface.resize(2, 2)
    pool.clear()
    assert surface.size == (2, 2)
    pool.release(surface)
    assert pool.length == 1


def test_max_size(caplog: pytest.LogCaptureFixture) -> None:
    pool = SurfacePool(max_size=1)
    first, second = pool.pop(), pool.pop()
    pool.release(first)
    with caplog.at_level(logging.WARNING, logger="watermark_tools.pool"):
        pool.release(second)
    assert "Pool is full" in caplog.text
    assert pool.length == 1
    assert pool.elements == (first,)


def test_invalid_max_size() -> None:
    with pytest.raises(ValueError):
        SurfacePool(max_size=-1)


def test_concurrent_checkouts_are_exclusive(pool: SurfacePool) -> None:
    for _ in range(8):
        pool.release(pool.pop())
    checked_out: list = []
    duplicates: list = []
    lock = threading.Lock()

    def worker() -> None:
        for _ in range(50):
            surface = pool.pop()
            with lock:
                if any(surface is other for other in checked_out):
                    duplicates.append(surface)
                checked_out.append(surface)
            with lock:
                checked_out.remove(surface)
            pool.release(surface)

    threads = [threading.Thread(target=worker) for _ in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    assert duplicates == []
    assert len({id(surface) for surface in pool.elements}) == pool.length


def test_destroy_then_pop() -> None:
    shared.release(shared.pop())
    assert shared.length == 1
    destroy()
    assert shared.length == 0
    surface = shared.pop()
    assert isinstance(surface, Surface)
    assert shared.length == 0
    assert pool_module.shared is shared
