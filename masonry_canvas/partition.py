"""Masonry partition generator.

Carves a ``columns x rows`` unit grid into disjoint rectangles by repeated
binary splits along the longer side. Regions wait in a FIFO queue; a region
whose long side is at most ``2 * min_units`` cannot host two children of at
least ``min_units`` and is emitted as a finished tile.

The only source of randomness is the ``rng`` argument, so a seeded
``random.Random`` reproduces the same partition:

>>> import random
>>> spec = GridSpec(cell_size=50, columns=4, rows=4, min_units=2)
>>> generate_rects(spec, random.Random(0))
[Rect(x=0, y=0, w=4, h=4)]
"""

import logging
import random
from collections import deque
from dataclasses import replace
from typing import Iterable, List, Optional

from masonry_canvas.components import GridSpec, Rect
from masonry_canvas.errors import GridSpecError

log = logging.getLogger(__name__)


def validate_grid_spec(spec: GridSpec) -> None:
    """Raise ``GridSpecError`` if ``spec`` cannot produce well-formed tiles."""
    if spec.cell_size <= 0:
        raise GridSpecError(f"cell_size must be positive, got {spec.cell_size}")
    if spec.min_units <= 0:
        raise GridSpecError(f"min_units must be positive, got {spec.min_units}")
    if spec.columns < spec.min_units or spec.rows < spec.min_units:
        raise GridSpecError(
            f"Grid {spec.columns}x{spec.rows} is smaller than min_units={spec.min_units}"
        )


def split_rect(rect: Rect, min_units: int, rng: random.Random) -> Optional[tuple[Rect, Rect]]:
    """Split ``rect`` across its long side, or return None if it is a leaf.

    Ties (``w == h``) cut by height.
    """
    cut_vertical = rect.w > rect.h
    long_side = rect.w if cut_vertical else rect.h
    if min_units <= 0 or long_side <= min_units * 2:
        return None
    k = rng.randint(min_units, long_side - min_units)
    if cut_vertical:
        return replace(rect, w=k), replace(rect, x=rect.x + k, w=rect.w - k)
    return replace(rect, h=k), replace(rect, y=rect.y + k, h=rect.h - k)


def generate_rects(
    spec: GridSpec, rng: Optional[random.Random] = None, validate: bool = True
) -> List[Rect]:
    """Partition the grid described by ``spec``.

    Args:
        spec (GridSpec): Grid extent and minimum tile side.
        rng (random.Random | None): Random source for split offsets. A fresh
            unseeded generator is used when omitted.
        validate (bool): Reject degenerate specs with ``GridSpecError``. When
            disabled a degenerate spec yields the whole grid as one tile.

    Returns:
        List[Rect]: Tiles in the order they were finalized.
    """
    if validate:
        validate_grid_spec(spec)
    if rng is None:
        rng = random.Random()

    pending: deque[Rect] = deque([Rect(0, 0, spec.columns, spec.rows)])
    rects: List[Rect] = []
    while pending:
        region = pending.popleft()
        children = split_rect(region, spec.min_units, rng)
        if children is None:
            rects.append(region)
        else:
            pending.extend(children)

    log.debug(
        "Partitioned %dx%d grid (min %d) into %d tiles",
        spec.columns, spec.rows, spec.min_units, len(rects),
    )
    return rects


def rects_cover_grid(rects: Iterable[Rect], columns: int, rows: int) -> bool:
    """Return True if ``rects`` tile ``[0, columns) x [0, rows)`` exactly once."""
    covered = [[0] * columns for _ in range(rows)]
    for rect in rects:
        if rect.x < 0 or rect.y < 0 or rect.x + rect.w > columns or rect.y + rect.h > rows:
            return False
        for y in range(rect.y, rect.y + rect.h):
            for x in range(rect.x, rect.x + rect.w):
                covered[y][x] += 1
    return all(count == 1 for row in covered for count in row)
