import logging
import sys
from pathlib import Path
from typing import Callable

import pytest
from PIL import Image

from watermark_tools.__main__ import main

from .utils import noise, solid

logger = logging.getLogger(__name__)


@pytest.mark.parametrize(
    "argv",
    [
        ["-h"],
        ["--version"],
        ["image", "-h"],
        ["text", "-h"],
    ],
)
def test_main_exits(argv: list) -> None:
    with pytest.raises(SystemExit):
        main(argv)
        sys.exit()


@pytest.mark.parametrize(
    "extra",
    [
        [],
        ["--position", "center", "--alpha", "0.5"],
        ["--verbose"],
    ],
)
def test_main_image(
    extra: list, image_file: Callable[..., str], tmp_path: Path
) -> None:
    base = image_file(noise((64, 32)))
    mark = image_file(solid((8, 8), (255, 0, 0, 255)))
    output = tmp_path / "output.png"

    assert main(["image", base, mark, str(output)] + extra) is None
    with Image.open(output) as image:
        assert image.size == (64, 32)


def test_main_text_jpeg(image_file: Callable[..., str], tmp_path: Path) -> None:
    base = image_file(noise((64, 32)))
    output = tmp_path / "output.jpg"

    argv = ["text", base, "hi", str(output), "--position", "upper-left"]
    argv += ["--fill", "red"]
    assert main(argv) is None
    with Image.open(output) as image:
        assert image.format == "JPEG"
        assert image.size == (64, 32)


def test_main_missing_input(tmp_path: Path) -> None:
    output = tmp_path / "output.png"
    argv = ["text", str(tmp_path / "missing.png"), "hi", str(output)]
    assert main(argv) == 1
    assert not output.exists()
