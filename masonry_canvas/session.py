"""Canvas session: the mutable shell around the pure frame reducer.

A :class:`Session` owns everything that cannot live in an immutable
:class:`masonry_canvas.state.CanvasState`: the fetcher, the decoded resources
bound to tiles, the pan input and the RNG used to generate the partition.

Lifecycle::

    session = Session(1280, 720, CanvasConfig(seed=7))
    while running:
        state = session.tick()          # once per animation frame
        frame = renderer.render(state, session.resources)
    session.close()

``resize`` tears the session down (cancelling every in-flight fetch) and
regenerates grid, tiles, dedupe set and bindings from scratch. Hosts that
receive bursts of resize events should route them through
:class:`ResizeDebouncer`.
"""

import logging
import random
import threading
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from masonry_canvas.components import FetchOutcome, Viewport
from masonry_canvas.config import CanvasConfig
from masonry_canvas.fetch import Fetcher, ResourceFetcher
from masonry_canvas.input import PanInput
from masonry_canvas.layout import (
    Centering,
    PixelRect,
    centering_for_viewport,
    grid_spec_for_viewport,
    tile_geometry,
)
from masonry_canvas.partition import generate_rects
from masonry_canvas.pool import DEFAULT_POOL
from masonry_canvas.state import CanvasState, make_state
from masonry_canvas.step import step
from masonry_canvas.types import Offset, OffsetSource, Resource, TileID

log = logging.getLogger(__name__)


class Session:
    """One canvas lifetime between (re)initializations.

    Arguments:
        width: Viewport width in pixels.
        height: Viewport height in pixels.
        config: Canvas tunables; ``config.seed`` seeds the partition.
        fetcher: Network capability. Defaults to a :class:`ResourceFetcher`.
        pool: Resource URLs tiles select from.
        offset_source: Live viewport offset reader. Defaults to the session's
            own :class:`PanInput`.
    """

    def __init__(
        self,
        width: int,
        height: int,
        config: CanvasConfig = CanvasConfig(),
        fetcher: Optional[Fetcher] = None,
        pool: Sequence[str] = DEFAULT_POOL,
        offset_source: Optional[OffsetSource] = None,
    ) -> None:
        self.config = config
        self.pool = tuple(pool)
        if fetcher is None:
            fetcher = ResourceFetcher(
                max_workers=config.max_workers, timeout=config.fetch_timeout
            )
        self.fetcher: Fetcher = fetcher
        self.offset_source = offset_source
        self._lock = threading.RLock()
        self._active = False
        # Highest token issued by any previous grid of this session.
        self._token_floor = 0
        self.state: CanvasState
        self.centering: Centering
        self.pan: PanInput
        self.resources: Dict[TileID, Resource] = {}
        self._init(width, height)

    # ---- lifecycle ----

    def _init(self, width: int, height: int) -> None:
        config = self.config
        spec = grid_spec_for_viewport(width, height, config)
        rects = generate_rects(spec, random.Random(config.seed))
        self.centering = centering_for_viewport(width, height, spec)
        self.pan = PanInput(self.centering, config.padding, config.pan_smoothing)
        viewport = Viewport(
            width=width,
            height=height,
            offset_x=-self.centering.center_x,
            offset_y=-self.centering.center_y,
        )
        self.state = make_state(
            spec,
            rects,
            viewport,
            self.pool,
            fade_step=config.fade_step,
            max_duplicate_retries=config.max_duplicate_retries,
            seed=config.seed,
            first_token=self._token_floor,
        )
        self.resources = {}
        self._active = True
        log.info(
            "Canvas %dx%d: %dx%d grid, %d tiles",
            width, height, spec.columns, spec.rows, len(rects),
        )

    @property
    def active(self) -> bool:
        return self._active

    def teardown(self) -> None:
        """Cancel all in-flight fetches and stop accepting ticks. Idempotent."""
        with self._lock:
            if not self._active:
                return
            self._active = False
            self._token_floor = max(
                [self._token_floor, *(t.token for t in self.state.tile.values())]
            )
            for tile_id, tile in self.state.tile.items():
                if tile.discovered and not tile.loaded:
                    self.fetcher.cancel(tile_id, tile.token)
            self.fetcher.cancel_all()
            # Anything still queued belongs to the discarded grid.
            self.fetcher.drain()

    def resize(self, width: int, height: int) -> None:
        with self._lock:
            self.teardown()
            self._init(width, height)

    def close(self) -> None:
        with self._lock:
            self.teardown()
            self.fetcher.shutdown()

    # ---- per frame ----

    def tick(self, offset: Optional[Offset] = None) -> CanvasState:
        """Run one frame: commit finished fetches, re-evaluate tiles, dispatch I/O."""
        with self._lock:
            if not self._active:
                raise RuntimeError("Session has been torn down")
            if offset is None:
                source = self.offset_source or self.pan.viewport_offset
                offset = source()

            outcomes = self.fetcher.drain()
            self.state = step(self.state, outcomes, offset)
            self._bind(outcomes)
            for cancel in self.state.cancellations:
                self.fetcher.cancel(cancel.tile_id, cancel.token)
            for request in self.state.requests:
                self.fetcher.submit(request)
            return self.state

    def _bind(self, outcomes: List[FetchOutcome]) -> None:
        if not self.state.bound:
            return
        by_attempt: Mapping[Tuple[TileID, int], FetchOutcome] = {
            (o.tile_id, o.token): o for o in outcomes
        }
        for tile_id, token in self.state.bound.items():
            self.resources[tile_id] = by_attempt[(tile_id, token)].resource
            log.debug("Tile %d bound %s", tile_id, self.state.tile[tile_id].identity)

    # ---- read side ----

    def opacity(self, tile_id: TileID) -> float:
        return self.state.tile[tile_id].opacity

    def resource(self, tile_id: TileID) -> Optional[Resource]:
        return self.resources.get(tile_id)

    def geometry(self) -> List[Tuple[TileID, PixelRect]]:
        """Pixel layout of every tile, for laying out visual elements once."""
        cell_size = self.state.grid.cell_size
        return [
            (tile_id, tile_geometry(rect, cell_size, self.config.padding))
            for tile_id, rect in sorted(self.state.rect.items())
        ]


class ResizeDebouncer:
    """Collapse bursts of resize events into a single ``Session.resize``.

    Each call restarts a ``threading.Timer``; only the last size seen within
    ``delay`` seconds is applied.
    """

    def __init__(self, session: Session, delay: Optional[float] = None) -> None:
        self.session = session
        self.delay = session.config.resize_debounce if delay is None else delay
        self._lock = threading.Lock()
        self._timer: Optional[threading.Timer] = None
        self._pending: Optional[Tuple[int, int]] = None

    def __call__(self, width: int, height: int) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._pending = (width, height)
            self._timer = threading.Timer(self.delay, self.flush)
            self._timer.daemon = True
            self._timer.start()

    @property
    def pending(self) -> bool:
        return self._pending is not None

    def flush(self) -> None:
        """Apply the pending resize now, if any."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            size, self._pending = self._pending, None
        if size is not None:
            self.session.resize(*size)

    def cancel(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._timer = None
            self._pending = None
