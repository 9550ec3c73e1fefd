"""Common type aliases and enumerations."""

from enum import StrEnum, auto
from typing import Any, Callable, Tuple

TileID = int

# Resolved identity of a fetched resource (canonical URL).
Identity = str

# Bound image handle; the default fetcher produces ``PIL.Image.Image``.
Resource = Any

Offset = Tuple[float, float]
OffsetSource = Callable[[], Offset]


class FetchStatus(StrEnum):
    """Terminal status of one fetch attempt."""

    LOADED = auto()
    FAILED = auto()
    ABORTED = auto()


class TilePhase(StrEnum):
    """Lifecycle phase derived from a tile's ``discovered`` / ``loaded`` flags."""

    IDLE = auto()
    LOADING = auto()
    LOADED = auto()
