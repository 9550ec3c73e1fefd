"""Fetch messages.

Systems never perform I/O. They describe the fetches to start or cancel as
``FetchRequest`` / ``FetchCancel`` values on the state, and the fetcher reports
back with ``FetchOutcome`` values that are fed into the next step.
"""

from dataclasses import dataclass, field
from typing import Optional

from masonry_canvas.types import FetchStatus, Identity, Resource, TileID


@dataclass(frozen=True)
class FetchRequest:
    tile_id: TileID
    token: int
    url: str


@dataclass(frozen=True)
class FetchCancel:
    tile_id: TileID
    token: int


@dataclass(frozen=True)
class FetchOutcome:
    """Result of one fetch attempt.

    Attributes:
        tile_id: Tile the attempt was issued for.
        token: Tile token at issue time.
        status: Loaded, failed or aborted.
        identity: Canonical identity of the resolved resource (loaded only).
        resource: Decoded resource handle (loaded only).
    """

    tile_id: TileID
    token: int
    status: FetchStatus
    identity: Optional[Identity] = None
    resource: Resource = field(default=None, compare=False, repr=False)
