"""Canvas configuration.

A single frozen dataclass collects every tunable. Derive variants with
``dataclasses.replace`` rather than mutating.
"""

from dataclasses import dataclass
from typing import Optional


DEFAULT_CELL_SIZE = 50
DEFAULT_MIN_UNITS = 3
DEFAULT_PADDING = 20
DEFAULT_GRID_SCALE = 3
DEFAULT_FADE_STEP = 0.01


@dataclass(frozen=True)
class CanvasConfig:
    """Tunables for one canvas session.

    Attributes:
        cell_size: Pixel size of one grid unit.
        min_units: Minimum tile side in grid units.
        padding: Pixels trimmed from the right / bottom of each tile (gutter).
        grid_scale: Grid extent as a multiple of the viewport, per axis.
        fade_step: Opacity change per frame.
        pan_smoothing: Fraction of the remaining pan distance covered per frame.
        resize_debounce: Seconds of quiet before a resize re-initializes.
        max_workers: Concurrent fetch workers.
        fetch_timeout: Per request timeout in seconds (``None`` waits forever).
        max_duplicate_retries: Cap on re-selections after duplicate images;
            ``None`` retries without bound.
        seed: Seed for the partition RNG; ``None`` draws from system entropy.
    """

    cell_size: int = DEFAULT_CELL_SIZE
    min_units: int = DEFAULT_MIN_UNITS
    padding: int = DEFAULT_PADDING
    grid_scale: int = DEFAULT_GRID_SCALE
    fade_step: float = DEFAULT_FADE_STEP
    pan_smoothing: float = 0.2
    resize_debounce: float = 0.2
    max_workers: int = 8
    fetch_timeout: Optional[float] = 15.0
    max_duplicate_retries: Optional[int] = None
    seed: Optional[int] = None
