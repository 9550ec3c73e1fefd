"""Per-tile runtime state.

One ``TileState`` per partition rectangle, keyed by tile id (the rectangle's
index in generation order). ``token`` is the tile's generation counter: it is
bumped for every fetch issued and every cancellation, and a fetch outcome is
only honored while its token still matches.
"""

from dataclasses import dataclass
from typing import Optional

from masonry_canvas.types import Identity, TilePhase


@dataclass(frozen=True)
class TileState:
    """Lifecycle and fade state of one tile.

    Attributes:
        discovered: Viewport touched the tile and a fetch is issued or in flight.
        loaded: A resource is bound; terminal for this tile.
        opacity: Current fade value in ``[0, 1]``.
        token: Generation of the current fetch attempt.
        attempt: Pool offset; advanced when a fetched image was a duplicate.
        identity: Resolved identity of the bound resource, once loaded.
    """

    discovered: bool = False
    loaded: bool = False
    opacity: float = 0.0
    token: int = 0
    attempt: int = 0
    identity: Optional[Identity] = None

    @property
    def phase(self) -> TilePhase:
        if self.loaded:
            return TilePhase.LOADED
        if self.discovered:
            return TilePhase.LOADING
        return TilePhase.IDLE
