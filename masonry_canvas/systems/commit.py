"""Fetch commit system.

Applies the outcomes reported by the fetcher since the previous frame. This is
the only place a fetch may change tile state or the dedupe set, and it runs on
the tick thread, so the dedupe check-and-insert is atomic.

An outcome is honored only if its token is the tile's current token and the
tile is still discovered and not yet loaded; anything else is a superseded
attempt and is dropped.
"""

import logging
from dataclasses import replace
from typing import Iterable

from masonry_canvas.components import FetchOutcome, FetchRequest, TileState
from masonry_canvas.pool import select_url
from masonry_canvas.state import CanvasState
from masonry_canvas.types import FetchStatus

log = logging.getLogger(__name__)


def is_current(tile: TileState, outcome: FetchOutcome) -> bool:
    return tile.discovered and not tile.loaded and outcome.token == tile.token


def _retry_duplicate(state: CanvasState, outcome: FetchOutcome) -> CanvasState:
    tile = state.tile[outcome.tile_id]
    attempt = tile.attempt + 1
    limit = state.max_duplicate_retries
    if limit is not None and attempt > limit:
        log.warning(
            "Tile %d: giving up after %d duplicate images", outcome.tile_id, limit
        )
        return replace(
            state, tile=state.tile.set(outcome.tile_id, replace(tile, attempt=attempt))
        )
    token = tile.token + 1
    url = select_url(state.pool, outcome.tile_id, attempt)
    log.debug(
        "Tile %d: %s already shown, retrying with %s",
        outcome.tile_id, outcome.identity, url,
    )
    return replace(
        state,
        tile=state.tile.set(outcome.tile_id, replace(tile, attempt=attempt, token=token)),
        requests=state.requests.append(FetchRequest(outcome.tile_id, token, url)),
    )


def commit_outcome(state: CanvasState, outcome: FetchOutcome) -> CanvasState:
    """Apply a single fetch outcome."""
    tile = state.tile.get(outcome.tile_id)
    if tile is None or not is_current(tile, outcome):
        return state

    if outcome.status == FetchStatus.ABORTED:
        return state
    if outcome.status == FetchStatus.FAILED:
        # Tile stays discovered and never fades in during this visible episode.
        log.warning("Tile %d: fetch failed, leaving it empty", outcome.tile_id)
        return state
    if outcome.status != FetchStatus.LOADED:
        raise ValueError(f"Unknown fetch status: {outcome.status}")
    if outcome.identity is None:
        raise ValueError(f"Loaded outcome for tile {outcome.tile_id} has no identity")

    if outcome.identity in state.identities:
        return _retry_duplicate(state, outcome)

    return replace(
        state,
        identities=state.identities.add(outcome.identity),
        tile=state.tile.set(
            outcome.tile_id, replace(tile, loaded=True, identity=outcome.identity)
        ),
        bound=state.bound.set(outcome.tile_id, outcome.token),
    )


def commit_system(state: CanvasState, outcomes: Iterable[FetchOutcome]) -> CanvasState:
    for outcome in outcomes:
        state = commit_outcome(state, outcome)
    return state
