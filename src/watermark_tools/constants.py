"""
Various constants for watermark_tools
"""

from enum import Enum


class ResourceKind(Enum):
    """
    Resource kind, used as the loader dispatch tag.
    """

    REMOTE = "remote"
    LOCAL = "local"
    IMAGE = "image"


class Placement(str, Enum):
    """
    Watermark placement on the target surface.
    """

    LOWER_RIGHT = "lower-right"
    UPPER_RIGHT = "upper-right"
    LOWER_LEFT = "lower-left"
    UPPER_LEFT = "upper-left"
    CENTER = "center"


#: Distance in pixels between a corner watermark and the target edges.
MARGIN = 10

#: Baseline of upper corner text when no explicit ``y`` is given.
TEXT_TOP = 20

#: Seconds to wait for a remote resource.
DEFAULT_TIMEOUT = 30.0

#: Encoder used for data URLs.
DEFAULT_FORMAT = "PNG"
