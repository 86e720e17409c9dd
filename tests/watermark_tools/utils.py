import asyncio
import io
from typing import Any, Awaitable

import numpy as np
from PIL import Image


def run(coro: Awaitable[Any]) -> Any:
    """Run a coroutine in a fresh event loop."""
    return asyncio.run(coro)  # type: ignore[arg-type]


def solid(size: tuple[int, int], color: tuple[int, ...]) -> Image.Image:
    return Image.new("RGBA", size, color)


def noise(size: tuple[int, int], seed: int = 0) -> Image.Image:
    """Opaque RGBA image with random colors."""
    rng = np.random.default_rng(seed)
    data = rng.integers(0, 256, (size[1], size[0], 4), dtype=np.uint8)
    data[..., 3] = 255
    return Image.fromarray(data)


def encode(image: Image.Image, format: str = "PNG") -> bytes:
    with io.BytesIO() as f:
        image.save(f, format=format)
        return f.getvalue()
