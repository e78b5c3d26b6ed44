"""
utils/timing.py
---------------
Wall-clock timing helper used around database round trips.
"""

import time
from contextlib import contextmanager
from typing import Iterator

from utils.logger import get_logger

logger = get_logger(__name__)


@contextmanager
def time_track(name: str) -> Iterator[None]:
    """
    Log how long the wrapped block took, tagged with `name`.

    The line is written whether the block returns or raises.

    Usage:
        with time_track("get_all_personalities"):
            ...
    """
    start = time.perf_counter()
    try:
        yield
    finally:
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info(f"{name} took {elapsed_ms:.3f}ms")
