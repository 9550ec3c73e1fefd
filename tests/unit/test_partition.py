import random
from typing import List, Tuple

import pytest

from masonry_canvas.components import GridSpec, Rect
from masonry_canvas.config import CanvasConfig
from masonry_canvas.errors import GridSpecError
from masonry_canvas.layout import grid_spec_for_viewport
from masonry_canvas.partition import (
    generate_rects,
    rects_cover_grid,
    split_rect,
    validate_grid_spec,
)


class ScriptedRandom(random.Random):
    """Random source returning a fixed sequence from ``randint``."""

    def __init__(self, values: List[int]) -> None:
        super().__init__(0)
        self.values = list(values)
        self.calls: List[Tuple[int, int]] = []

    def randint(self, a: int, b: int) -> int:
        self.calls.append((a, b))
        return self.values.pop(0)


@pytest.mark.parametrize(
    "columns,rows,min_units",
    [(30, 20, 3), (18, 18, 3), (9, 40, 2), (12, 5, 1), (7, 7, 3)],
)
@pytest.mark.parametrize("seed", range(10))
def test_partition_is_disjoint_cover_with_min_sides(
    columns: int, rows: int, min_units: int, seed: int
) -> None:
    spec = GridSpec(cell_size=50, columns=columns, rows=rows, min_units=min_units)
    rects = generate_rects(spec, random.Random(seed))

    assert rects_cover_grid(rects, columns, rows)
    for a_idx, a in enumerate(rects):
        assert a.w >= min_units and a.h >= min_units
        for b in rects[a_idx + 1 :]:
            assert not a.overlaps(b)
    assert sum(r.area for r in rects) == columns * rows


def test_leaves_cannot_be_split_further() -> None:
    spec = GridSpec(cell_size=50, columns=40, rows=25, min_units=3)
    for rect in generate_rects(spec, random.Random(5)):
        long_side = rect.w if rect.w > rect.h else rect.h
        assert long_side <= 2 * spec.min_units


def test_square_grid_at_twice_min_is_a_single_tile() -> None:
    spec = GridSpec(cell_size=50, columns=4, rows=4, min_units=2)
    assert generate_rects(spec, random.Random(1)) == [Rect(0, 0, 4, 4)]


def test_wide_grid_only_cuts_vertically() -> None:
    spec = GridSpec(cell_size=50, columns=8, rows=2, min_units=1)
    rects = generate_rects(spec, random.Random(3))

    assert all(r.h == 2 and r.y == 0 for r in rects)
    assert all(r.w <= 2 for r in rects)
    assert rects_cover_grid(rects, 8, 2)


def test_scripted_splits_give_exact_fifo_order() -> None:
    rng = ScriptedRandom([2, 3, 1])
    spec = GridSpec(cell_size=10, columns=6, rows=2, min_units=1)

    rects = generate_rects(spec, rng)

    assert rng.calls == [(1, 5), (1, 3), (1, 2)]
    assert rects == [
        Rect(0, 0, 2, 2),
        Rect(5, 0, 1, 2),
        Rect(2, 0, 1, 2),
        Rect(3, 0, 2, 2),
    ]


def test_tie_cuts_by_height() -> None:
    rng = ScriptedRandom([2])
    first, second = split_rect(Rect(0, 0, 5, 5), 2, rng)  # type: ignore[misc]
    assert first == Rect(0, 0, 5, 2)
    assert second == Rect(0, 2, 5, 3)


def test_split_offsets_stay_within_min_bounds() -> None:
    rng = ScriptedRandom([3])
    split_rect(Rect(0, 0, 9, 2), 3, rng)
    assert rng.calls == [(3, 6)]


def test_same_seed_reproduces_partition() -> None:
    spec = GridSpec(cell_size=50, columns=60, rows=36, min_units=3)
    assert generate_rects(spec, random.Random(42)) == generate_rects(
        spec, random.Random(42)
    )


def test_different_seeds_usually_differ() -> None:
    spec = GridSpec(cell_size=50, columns=60, rows=36, min_units=3)
    layouts = {tuple(generate_rects(spec, random.Random(seed))) for seed in range(5)}
    assert len(layouts) > 1


@pytest.mark.parametrize(
    "spec",
    [
        GridSpec(cell_size=50, columns=10, rows=10, min_units=0),
        GridSpec(cell_size=50, columns=10, rows=10, min_units=-2),
        GridSpec(cell_size=50, columns=2, rows=10, min_units=3),
        GridSpec(cell_size=50, columns=10, rows=2, min_units=3),
        GridSpec(cell_size=0, columns=10, rows=10, min_units=3),
    ],
)
def test_degenerate_specs_are_rejected(spec: GridSpec) -> None:
    with pytest.raises(GridSpecError):
        validate_grid_spec(spec)
    with pytest.raises(ValueError):
        generate_rects(spec, random.Random(0))


@pytest.mark.parametrize("cell_size", [0, -50])
def test_non_positive_cell_size_is_rejected_before_sizing(cell_size: int) -> None:
    with pytest.raises(GridSpecError):
        grid_spec_for_viewport(100, 100, CanvasConfig(cell_size=cell_size))


@pytest.mark.parametrize("min_units", [0, -1, 5])
def test_unvalidated_degenerate_spec_yields_single_tile(min_units: int) -> None:
    spec = GridSpec(cell_size=50, columns=4, rows=3, min_units=min_units)
    assert generate_rects(spec, random.Random(0), validate=False) == [Rect(0, 0, 4, 3)]


def test_cover_check_detects_gaps_and_overlaps() -> None:
    assert rects_cover_grid([Rect(0, 0, 2, 2), Rect(2, 0, 2, 2)], 4, 2)
    assert not rects_cover_grid([Rect(0, 0, 2, 2)], 4, 2)
    assert not rects_cover_grid([Rect(0, 0, 3, 2), Rect(2, 0, 2, 2)], 4, 2)
    assert not rects_cover_grid([Rect(0, 0, 5, 2)], 4, 2)
