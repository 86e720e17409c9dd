"""
Tag-keyed lookup tables.

The loader keys its coroutines by
:py:class:`~watermark_tools.constants.ResourceKind` and the placement helpers
key their factories by :py:class:`~watermark_tools.constants.Placement`.
"""

from typing import Any, Callable, Optional, Tuple, TypeVar

T = TypeVar("T")


def new_registry(attribute: Optional[str] = None) -> Tuple[dict, Callable]:
    """
    Return a lookup table and a decorator adding entries to it.

    :param attribute: When set, each decorated object gets its key stored
        under this attribute name.
    :raise ValueError: from the decorator factory for a key already present.
    """
    table: dict = {}

    def register(key: Any) -> Callable[[Callable[..., T]], Callable[..., T]]:
        if key in table:
            raise ValueError(f"Duplicate registry key: {key!r}")

        def add(obj: Callable[..., T]) -> Callable[..., T]:
            table[key] = obj
            if attribute:
                setattr(obj, attribute, key)
            return obj

        return add

    return table, register
