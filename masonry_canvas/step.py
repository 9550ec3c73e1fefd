"""Frame reducer.

Wires the lifecycle systems together for a single animation frame. The
exported :func:`step` is pure: it returns a new
:class:`masonry_canvas.state.CanvasState` whose ``requests``,
``cancellations`` and ``bound`` stores describe the I/O the caller must
perform.

Ordering:

1. Per-frame effect stores are cleared.
2. ``commit_system`` applies fetch outcomes that arrived since the last frame
   (they completed "between" frames, against last frame's tile state).
3. The viewport is updated and ``visibility_system`` recomputes the visible set.
4. ``discovery_system`` issues fetches for newly visible tiles and cancels
   fetches for tiles that left view before loading.
5. ``opacity_system`` advances the fade of every tile.
6. The frame counter is bumped.
"""

from dataclasses import replace
from typing import Iterable, Optional

from pyrsistent import pmap, pvector

from masonry_canvas.components import FetchOutcome, Viewport
from masonry_canvas.state import CanvasState
from masonry_canvas.systems.commit import commit_system
from masonry_canvas.systems.discovery import discovery_system
from masonry_canvas.systems.opacity import opacity_system
from masonry_canvas.systems.visibility import visibility_system
from masonry_canvas.types import Offset


def step(
    state: CanvasState,
    outcomes: Iterable[FetchOutcome] = (),
    offset: Optional[Offset] = None,
) -> CanvasState:
    """Advance the canvas by one frame.

    Args:
        state (CanvasState): Previous immutable snapshot.
        outcomes (Iterable[FetchOutcome]): Fetch results reported since the
            previous frame, in completion order.
        offset (Offset | None): New viewport offset ``(dx, dy)`` in pixels.
            ``None`` keeps the current one.

    Returns:
        CanvasState: Next snapshot with this frame's fetch effects attached.
    """
    state = replace(state, requests=pvector(), cancellations=pvector(), bound=pmap())

    state = commit_system(state, outcomes)
    if offset is not None:
        state = replace(state, viewport=_moved(state.viewport, offset))
    state = visibility_system(state)
    state = discovery_system(state)
    state = opacity_system(state)

    return replace(state, frame=state.frame + 1)


def _moved(viewport: Viewport, offset: Offset) -> Viewport:
    dx, dy = offset
    return replace(viewport, offset_x=float(dx), offset_y=float(dy))
