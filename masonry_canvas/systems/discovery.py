"""Discovery system: issue and cancel fetches as tiles enter and leave view.

Per tile, driven by ``state.visible``:

* idle and visible: mark discovered and request the tile's pool entry.
* discovered but not loaded, and no longer visible: un-discover and cancel the
  in-flight attempt. The token is bumped so a late completion of the
  cancelled attempt cannot commit.
* loaded: terminal, nothing is fetched again.
"""

import logging
from dataclasses import replace

from pyrsistent import pvector

from masonry_canvas.components import FetchCancel, FetchRequest
from masonry_canvas.pool import select_url
from masonry_canvas.state import CanvasState

log = logging.getLogger(__name__)


def discovery_system(state: CanvasState) -> CanvasState:
    state_tile = state.tile
    requests = state.requests
    cancellations = state.cancellations

    for tile_id, tile in state.tile.items():
        if tile.loaded:
            continue
        visible = tile_id in state.visible
        if visible and not tile.discovered:
            token = tile.token + 1
            url = select_url(state.pool, tile_id, tile.attempt)
            state_tile = state_tile.set(
                tile_id, replace(tile, discovered=True, token=token)
            )
            requests = requests.append(FetchRequest(tile_id, token, url))
        elif not visible and tile.discovered:
            state_tile = state_tile.set(
                tile_id, replace(tile, discovered=False, token=tile.token + 1)
            )
            # A duplicate retry committed earlier this frame is never started.
            pending = pvector(r for r in requests if r.tile_id != tile_id)
            if len(pending) == len(requests):
                cancellations = cancellations.append(FetchCancel(tile_id, tile.token))
            requests = pending
            log.debug("Tile %d left view before loading; cancelling", tile_id)

    return replace(
        state, tile=state_tile, requests=requests, cancellations=cancellations
    )
