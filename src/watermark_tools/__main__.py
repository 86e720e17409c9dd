import argparse
import asyncio
import logging
from typing import Optional

from watermark_tools import position, watermark
from watermark_tools.constants import Placement
from watermark_tools.loader import LoadFailure
from watermark_tools.serialization import SerializationFailure
from watermark_tools.version import __version__

logger = logging.getLogger(__name__)

PLACEMENT_CHOICES = [placement.value for placement in Placement]


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="watermark-tools command line utility."
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Be more verbose.")
    parser.add_argument("--version", action="version", version=__version__)

    subparsers = parser.add_subparsers(dest="command", required=True)

    image_parser = subparsers.add_parser("image", help="Overlay an image watermark")
    image_parser.add_argument("input_file", help="Base image (path or URL)")
    image_parser.add_argument("watermark_file", help="Watermark image (path or URL)")
    image_parser.add_argument("output_file", help="Output image file")
    image_parser.add_argument(
        "--position", choices=PLACEMENT_CHOICES, default=Placement.LOWER_RIGHT.value
    )
    image_parser.add_argument("--alpha", type=float, default=1.0)

    text_parser = subparsers.add_parser("text", help="Write a text watermark")
    text_parser.add_argument("input_file", help="Base image (path or URL)")
    text_parser.add_argument("text", help="Text to write")
    text_parser.add_argument("output_file", help="Output image file")
    text_parser.add_argument(
        "--position", choices=PLACEMENT_CHOICES, default=Placement.LOWER_RIGHT.value
    )
    text_parser.add_argument("--font", default=None, help="TrueType font file")
    text_parser.add_argument("--size", type=float, default=None, help="Font size")
    text_parser.add_argument("--fill", default="black", help="Text color")
    text_parser.add_argument("--alpha", type=float, default=1.0)

    return parser.parse_args(argv)


async def run(args: argparse.Namespace) -> None:
    placement = Placement(args.position)
    if args.command == "image":
        draw = position.image.PLACEMENTS[placement](args.alpha)
        resources = [args.input_file, args.watermark_file]
    else:
        draw = position.text.PLACEMENTS[placement](
            args.text, args.font, args.fill, args.alpha, size=args.size
        )
        resources = [args.input_file]
    image = await watermark(resources).image(draw)
    if args.output_file.lower().endswith((".jpg", ".jpeg")):
        image = image.convert("RGB")
    image.save(args.output_file)
    logger.info("Saved %s", args.output_file)


def main(argv: Optional[list[str]] = None) -> Optional[int]:
    args = parse_args(argv)

    logging.basicConfig(level=logging.WARNING)
    if args.verbose:
        logging.getLogger("watermark_tools").setLevel(logging.DEBUG)
    else:
        logger.setLevel(logging.INFO)

    try:
        asyncio.run(run(args))
    except (LoadFailure, SerializationFailure) as e:
        logger.error(str(e))
        return 1
    return None


if __name__ == "__main__":
    main()
