"""Pytest fixtures for watermark_tools tests."""

import logging
from pathlib import Path
from typing import Callable, Iterator

import pytest
from PIL import Image

from watermark_tools import pool as pool_module
from watermark_tools.pool import SurfacePool

logging.basicConfig(level=logging.DEBUG)


@pytest.fixture(autouse=True)
def clean_shared_pool() -> Iterator[None]:
    yield
    pool_module.destroy()


@pytest.fixture
def pool() -> SurfacePool:
    return SurfacePool()


@pytest.fixture
def image_file(tmp_path: Path) -> Callable[..., str]:
    """Factory writing an image to a PNG file and returning its path."""
    counter = iter(range(1000))

    def factory(image: Image.Image, name: str = "") -> str:
        path = tmp_path / (name or "image-%d.png" % next(counter))
        image.save(path)
        return str(path)

    return factory
