"""
Point-expression reader.

A point expression is one or more ``*``-separated cells. Each cell is either
a literal coordinate, ``[x, y]`` / ``(x, y)``, or a ranged box

    (x1,x2,y1,y2[,z1,z2])^[cx,cy[,cz]]

which expands to every integer offset in the inclusive box, added to the
anchor ``[cx, cy[, cz]]``.
"""
from typing import FrozenSet, List

import numpy as np

from levelz.data_model import Coordinate2D, Coordinate3D, Dimension
from levelz.errors import MalformedPointError

CELL_SEPARATOR = '*'
RANGE_SEPARATOR = '^'


def split_tokens(text, sep) -> List[str]:
    """str.split with trailing empty segments dropped."""
    parts = text.split(sep)
    while parts and not parts[-1]:
        parts.pop()
    return parts


def is_ranged(cell):
    return cell.startswith('(') and cell.endswith(']')


def _numbers(text, strip_chars, expected, convert, what, cell):
    s = ''.join(c for c in text if c not in strip_chars and not c.isspace())
    parts = split_tokens(s, ',')
    if len(parts) != expected:
        raise MalformedPointError(
            f"Expected {expected} {what} in point expression, got {len(parts)}: {cell}")
    try:
        return [convert(p) for p in parts]
    except ValueError as e:
        raise MalformedPointError(f"Invalid LevelZ point expression: {cell}") from e


def expand_range(cell, coordinate_cls):
    """Expand one ranged cell into a list of coordinates."""
    n = coordinate_cls.n_axes
    parts = split_tokens(cell, RANGE_SEPARATOR)
    if len(parts) != 2:
        raise MalformedPointError(f"Invalid LevelZ point expression: {cell}")

    bounds = _numbers(parts[0], '()', 2 * n, int, 'bounds', cell)
    anchor = _numbers(parts[1], '[]', n, float, 'anchor components', cell)

    axes = [np.arange(min(lo, hi), max(lo, hi) + 1)
            for lo, hi in zip(bounds[0::2], bounds[1::2])]
    offsets = np.stack(np.meshgrid(*axes, indexing='ij'), axis=-1).reshape(-1, n)
    points = offsets + np.asarray(anchor, dtype=np.float64)
    return [coordinate_cls(*row) for row in points.tolist()]


def read_points(expr, dimension: Dimension) -> FrozenSet:
    """Parse a point expression into a set of coordinates of ``dimension``."""
    coordinate_cls = dimension.coordinate_cls
    points = set()
    for raw in split_tokens(expr, CELL_SEPARATOR):
        cell = raw.strip()
        if not cell:
            continue
        if is_ranged(cell):
            points.update(expand_range(cell, coordinate_cls))
        else:
            points.add(coordinate_cls.from_string(cell))
    return frozenset(points)


def read_2d_points(expr) -> FrozenSet[Coordinate2D]:
    return read_points(expr, Dimension.TWO)


def read_3d_points(expr) -> FrozenSet[Coordinate3D]:
    return read_points(expr, Dimension.THREE)
