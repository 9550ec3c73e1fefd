"""Core immutable ``CanvasState`` dataclass.

A ``CanvasState`` is the full snapshot of one canvas session at a single
frame. Systems are pure functions that take a previous state (plus fetch
outcomes) and return a new one; nothing is mutated in place.

Design notes:

* Geometry (``grid``, ``rect``) is fixed when the state is built and never
  changes; only per-tile runtime state (``tile``) evolves. Re-initialization
  after a resize builds a brand new state.
* ``identities`` is the dedupe set: resolved identities already bound to some
  tile. It lives and dies with the state, so a fresh grid starts empty.
* ``requests``, ``cancellations`` and ``bound`` are per-frame effect stores.
  :func:`masonry_canvas.step.step` clears them at the start of every frame;
  the session reads them afterwards and performs the actual I/O.
* Open handles (decoded images, futures) never live here; see
  :class:`masonry_canvas.session.Session`.
"""

from dataclasses import dataclass
from typing import Any, Iterable, Optional, Sequence

from pyrsistent import PMap, PSet, PVector, pmap, pset, pvector

from masonry_canvas.components import (
    FetchCancel,
    FetchRequest,
    GridSpec,
    Rect,
    TileState,
    Viewport,
)
from masonry_canvas.types import Identity, TileID


@dataclass(frozen=True)
class CanvasState:
    """Immutable canvas snapshot.

    Attributes:
        grid (GridSpec): Unit grid the partition was generated from.
        viewport (Viewport): Viewport size and current pan offset.
        pool (tuple[str, ...]): Resource URLs tiles select from.
        rect (PMap[TileID, Rect]): Tile rectangles in grid units.
        tile (PMap[TileID, TileState]): Per-tile lifecycle and fade state.
        visible (PSet[TileID]): Tiles intersecting the viewport this frame.
        identities (PSet[Identity]): Resolved identities already bound.
        requests (PVector[FetchRequest]): Fetches to start after this frame.
        cancellations (PVector[FetchCancel]): Fetches to cancel after this frame.
        bound (PMap[TileID, int]): Tiles that committed a resource this frame,
            mapped to the token of the winning attempt.
        fade_step (float): Opacity change per frame.
        max_duplicate_retries (int | None): Re-selection cap after duplicates.
        frame (int): Frame counter (0-based).
        seed (int | None): Seed the partition was generated with.
    """

    grid: GridSpec
    viewport: Viewport
    pool: tuple[str, ...]

    rect: PMap[TileID, Rect] = pmap()
    tile: PMap[TileID, TileState] = pmap()
    visible: PSet[TileID] = pset()
    identities: PSet[Identity] = pset()

    ## Per-frame effects
    requests: PVector[FetchRequest] = pvector()
    cancellations: PVector[FetchCancel] = pvector()
    bound: PMap[TileID, int] = pmap()

    fade_step: float = 0.01
    max_duplicate_retries: Optional[int] = None
    frame: int = 0
    seed: Optional[int] = None

    @property
    def description(self) -> PMap[str, Any]:
        """Compact summary of tile phases, useful for logging and debugging."""
        loading = sum(1 for t in self.tile.values() if t.discovered and not t.loaded)
        loaded = sum(1 for t in self.tile.values() if t.loaded)
        return pmap(
            {
                "frame": self.frame,
                "tiles": len(self.rect),
                "visible": len(self.visible),
                "loading": loading,
                "loaded": loaded,
                "identities": len(self.identities),
            }
        )


def make_state(
    grid: GridSpec,
    rects: Sequence[Rect],
    viewport: Viewport,
    pool: Iterable[str],
    fade_step: float = 0.01,
    max_duplicate_retries: Optional[int] = None,
    seed: Optional[int] = None,
    first_token: int = 0,
) -> CanvasState:
    """Build the initial state for a freshly generated partition.

    Tile ids are the rectangles' indices in ``rects``. Every tile starts at
    ``first_token``; a session rebuilding its grid passes the highest token
    it already handed out, so attempts from the old grid never match a new tile.
    """
    if fade_step <= 0:
        raise ValueError(f"fade_step must be positive, got {fade_step}")
    pool = tuple(pool)
    if not pool:
        raise ValueError("Resource pool is empty")
    return CanvasState(
        grid=grid,
        viewport=viewport,
        pool=pool,
        rect=pmap({tile_id: rect for tile_id, rect in enumerate(rects)}),
        tile=pmap(
            {tile_id: TileState(token=first_token) for tile_id in range(len(rects))}
        ),
        fade_step=fade_step,
        max_duplicate_retries=max_duplicate_retries,
        seed=seed,
    )
