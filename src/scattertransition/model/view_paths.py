"""
View Path Transforms
====================
Functions that insert intermediate views into a path over the scatter plot matrix.

Every view is a cell (x index, y index) of the matrix spanned by the given
dimensions. A transform walks the path and adds views between adjacent cells,
e.g. so that a rotation transition (which can only swap out one dimension at a
time) can follow it.
"""
from __future__ import annotations

import logging
from typing import Callable, Sequence

from scattertransition.model.data import Dimension
from scattertransition.model.view import ScatterView

logger = logging.getLogger(__name__)

PathTransform = Callable[[Sequence[ScatterView], Sequence[Dimension]], list[ScatterView]]

MAX_STAIR_MOVES = 1000


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


def _cells(
    prev: ScatterView,
    item: ScatterView,
    names: list[str],
) -> tuple[int, int, int, int]:
    """Matrix indices (x, y, prev_x, prev_y) of two adjacent views."""
    try:
        return (
            names.index(item.x.name),
            names.index(item.y.name),
            names.index(prev.x.name),
            names.index(prev.y.name),
        )
    except ValueError:
        raise ValueError(f"View path {prev} -> {item} uses a dimension outside of {names}.") from None


def straight(path: Sequence[ScatterView], dimensions: Sequence[Dimension] = ()) -> list[ScatterView]:
    return list(path)


def manhattan(path: Sequence[ScatterView], dimensions: Sequence[Dimension]) -> list[ScatterView]:
    """Inserts a corner view wherever both axes change at once."""
    names = [dim.name for dim in dimensions]
    result: list[ScatterView] = []
    prev = None
    for item in path:
        if prev is not None:
            x, y, prev_x, prev_y = _cells(prev, item, names)
            if x != prev_x and y != prev_y:
                # if possible, don't cross the diagonal by picking a corner
                # on the same side as (x, y)
                corner_x, corner_y = x, prev_y
                found = False
                for cx in (x, prev_x):
                    for cy in (y, prev_y):
                        if (cx, cy) in ((prev_x, prev_y), (x, y)):
                            continue
                        side_a = x > y and prev_x > prev_y and cx > cy
                        side_b = x < y and prev_x < prev_y and cx < cy
                        if side_a or side_b:
                            corner_x, corner_y = cx, cy
                            found = True
                            break
                    if found:
                        break
                result.append(ScatterView(dimensions[corner_x], dimensions[corner_y]))
        result.append(item)
        prev = item
    return result


def _diagonal_biased(
    path: Sequence[ScatterView],
    dimensions: Sequence[Dimension],
    at_start: bool,
) -> list[ScatterView]:
    names = [dim.name for dim in dimensions]
    result: list[ScatterView] = []
    prev = None
    for item in path:
        if prev is not None:
            x, y, prev_x, prev_y = _cells(prev, item, names)
            dx = x - prev_x
            dy = y - prev_y

            # only moves with a partial diagonal component (like _/)
            if dx and dy and abs(dx) != abs(dy):
                if abs(dx) > abs(dy):
                    diag_x, diag_y = _sign(dx) * abs(dy), dy
                else:
                    diag_x, diag_y = dx, _sign(dy) * abs(dx)

                if at_start:
                    cell = (prev_x + diag_x, prev_y + diag_y)
                else:
                    cell = (x - diag_x, y - diag_y)
                result.append(ScatterView(dimensions[cell[0]], dimensions[cell[1]]))
        result.append(item)
        prev = item
    return result


def diagonal_start(path: Sequence[ScatterView], dimensions: Sequence[Dimension]) -> list[ScatterView]:
    """Moves diagonally first, then straight."""
    return _diagonal_biased(path, dimensions, at_start=True)


def diagonal_end(path: Sequence[ScatterView], dimensions: Sequence[Dimension]) -> list[ScatterView]:
    """Moves straight first, then diagonally."""
    return _diagonal_biased(path, dimensions, at_start=False)


def diagonal_stairs(path: Sequence[ScatterView], dimensions: Sequence[Dimension]) -> list[ScatterView]:
    """Alternates single horizontal and vertical steps toward the next view."""
    names = [dim.name for dim in dimensions]
    result: list[ScatterView] = []
    prev = None
    for item in path:
        if prev is not None:
            x, y, prev_x, prev_y = _cells(prev, item, names)

            # 0: horizontal, 1: vertical
            orientation = 0 if abs(x - prev_x) > abs(y - prev_y) else 1
            cursor = [prev_x, prev_y]
            target = (x, y)
            moves = 0
            while cursor[0] != x or cursor[1] != y:
                current = cursor[orientation]
                possible = []
                if current > 0:
                    possible.append(-1)
                if current < len(names) - 1:
                    possible.append(1)
                if not possible:
                    break

                move = possible[0]
                for candidate in possible:
                    if abs(target[orientation] - (current + candidate)) < abs(target[orientation] - (current + move)):
                        move = candidate
                cursor[orientation] += move

                # the target view itself is appended below
                if cursor[0] == x and cursor[1] == y:
                    break
                result.append(ScatterView(dimensions[cursor[0]], dimensions[cursor[1]]))

                orientation ^= 1
                moves += 1
                if moves > MAX_STAIR_MOVES:
                    logger.warning(f"Stopped stair path from {prev} to {item} after {MAX_STAIR_MOVES} moves")
                    break
        result.append(item)
        prev = item
    return result


PATH_TRANSFORMS: dict[str, PathTransform] = {
    "straight": straight,
    "manhattan": manhattan,
    "diagonal_start": diagonal_start,
    "diagonal_end": diagonal_end,
    "diagonal_stairs": diagonal_stairs,
}
