"""Component aggregates.

Re-exports the immutable value types stored in
:class:`masonry_canvas.state.CanvasState`: grid geometry (:class:`GridSpec`,
:class:`Rect`), per-tile runtime state (:class:`TileState`), the viewport and
the fetch messages exchanged with the fetcher. State changes are expressed by
building new instances (``dataclasses.replace``), never by mutation.
"""

from .fetch import FetchCancel, FetchOutcome, FetchRequest
from .grid import GridSpec, Rect
from .tile import TileState
from .viewport import Viewport

__all__ = [
    "FetchCancel",
    "FetchOutcome",
    "FetchRequest",
    "GridSpec",
    "Rect",
    "TileState",
    "Viewport",
]
