# File: modelgql/utils.py
"""
ModelGQL - Utility Functions & Helpers
========================================
Identifier transformations and timing helpers shared by the naming deriver,
the visitors and the template generator.

All string-conversion functions are decorated with ``@lru_cache(maxsize=None)``:
the same handful of model names is converted many times per transform.
"""

from __future__ import annotations

import functools
import logging
import time
from typing import List, Optional

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("modelgql.utils")


# ---------------------------------------------------------------------------
# Cached string transformation functions
# ---------------------------------------------------------------------------


@functools.lru_cache(maxsize=None)
def to_camel_case(pascal_case: str) -> str:
    """
    Convert a PascalCase identifier to camelCase by lowering its first letter.

    Only the first character changes; the rest is kept verbatim so that
    concatenated type names stay recognisable.

    Examples:
        >>> to_camel_case("PostBlogId")
        'postBlogId'
        >>> to_camel_case("HTTPRoute")
        'hTTPRoute'
    """
    if not pascal_case:
        return ""
    return pascal_case[:1].lower() + pascal_case[1:]


@functools.lru_cache(maxsize=None)
def to_pascal_case(name: str) -> str:
    """Upper-case the first letter of *name*, keeping the rest verbatim."""
    if not name:
        return ""
    return name[:1].upper() + name[1:]


@functools.lru_cache(maxsize=None)
def to_plural(singular: str) -> str:
    """
    Naive pluralisation: append ``s``.

    ``Category`` becomes ``Categorys`` and ``Person`` becomes ``Persons``.
    Generated operation names (``listCategorys``) depend on this exact rule,
    so it must not be "improved" without changing every consumer.
    """
    if not singular:
        return ""
    return f"{singular}s"


# ---------------------------------------------------------------------------
# Timer context manager
# ---------------------------------------------------------------------------


class Timer:
    """
    Context-manager timer for profiling transform steps.

    Usage:
        with Timer("backfill") as t:
            ...
        print(t.elapsed)
    """

    __slots__ = ("label", "start_time", "end_time", "elapsed")

    def __init__(self, label: str = "operation") -> None:
        self.label: str = label
        self.start_time: float = 0.0
        self.end_time: float = 0.0
        self.elapsed: float = 0.0

    def __enter__(self) -> "Timer":
        self.start_time = time.perf_counter()
        return self

    def __exit__(
        self,
        exc_type: Optional[type],
        exc_val: Optional[BaseException],
        exc_tb: Optional[object],
    ) -> None:
        self.end_time = time.perf_counter()
        self.elapsed = self.end_time - self.start_time
        logger.debug("Timer [%s]: %.4f seconds", self.label, self.elapsed)

    def __repr__(self) -> str:
        return f"<Timer {self.label}: {self.elapsed:.4f}s>"


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "to_camel_case",
    "to_pascal_case",
    "to_plural",
    "Timer",
]

logger.debug("modelgql.utils loaded: %d public symbols.", len(__all__))
