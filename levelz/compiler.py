"""
Compiler: converts a parsed Level into JAX arrays (positions + block ids)
that can be batched, jitted, or rasterised into an occupancy grid.
"""
import warnings
from dataclasses import dataclass
from typing import Tuple

import jax.numpy as jnp
import numpy as np

from levelz.data_model import Block, Dimension, Level
from levelz.state import LevelArrays


@dataclass
class CompiledLevel:
    arrays: LevelArrays
    blocks: Tuple[Block, ...]   # block_id → Block, in order of first appearance
    dimension: Dimension
    origin: Tuple[int, ...]     # lowest integer cell of the bounding box
    extent: Tuple[int, ...]     # box size per axis (0s for an empty level)
    level: Level

    @property
    def n_objects(self):
        return int(self.arrays.block_ids.shape[0])

    def block_id(self, name: str) -> int:
        for i, b in enumerate(self.blocks):
            if b.name == name:
                return i
        raise KeyError(f"Unknown block name: {name}")

    def occupancy_grid(self):
        """Dense int32 grid of ``block_id + 1`` per cell (0 = empty).

        Shape is ``extent``; index ``[i, j(, k)]`` is the cell at
        ``origin + (i, j(, k))``. The grid is allocated densely over the
        whole bounding box, so sparse levels with far-apart objects (e.g.
        ``[0, 0]`` and ``[1e6, 1e6]``) need memory for every cell between
        them. Use ``arrays.positions`` directly for such levels.
        """
        grid = jnp.zeros(self.extent, dtype=jnp.int32)
        if self.n_objects == 0:
            return grid
        cells = _cells(self.arrays.positions) - jnp.asarray(self.origin, dtype=jnp.int32)
        index = tuple(cells[:, axis] for axis in range(cells.shape[1]))
        return grid.at[index].set(self.arrays.block_ids + 1)


def _cells(positions):
    return jnp.floor(positions).astype(jnp.int32)


def _sort_key(obj):
    return obj.coordinate.as_tuple() + (obj.block.name,)


def compile_level(level: Level) -> CompiledLevel:
    """
    Compile a Level into a CompiledLevel.

    Objects are ordered by coordinate so the arrays are reproducible
    regardless of set iteration order.
    """
    n_axes = level.dimension.coordinate_cls.n_axes
    objects = sorted(level.objects, key=_sort_key)

    blocks = []
    block_index = {}
    block_ids = []
    for obj in objects:
        if obj.block not in block_index:
            block_index[obj.block] = len(blocks)
            blocks.append(obj.block)
        block_ids.append(block_index[obj.block])

    positions = np.array([obj.coordinate.as_tuple() for obj in objects],
                         dtype=np.float64).reshape(len(objects), n_axes)

    if len(objects):
        cells = np.floor(positions).astype(np.int64)
        if np.any(cells != positions):
            warnings.warn("Level has non-integral positions; "
                          "they are floored in the occupancy grid")
        origin = tuple(int(v) for v in cells.min(axis=0))
        extent = tuple(int(v) for v in cells.max(axis=0) - cells.min(axis=0) + 1)
    else:
        origin = (0,) * n_axes
        extent = (0,) * n_axes

    arrays = LevelArrays(
        positions=jnp.asarray(positions, dtype=jnp.float32),
        block_ids=jnp.asarray(block_ids, dtype=jnp.int32),
        spawn=jnp.asarray(level.spawn.as_tuple(), dtype=jnp.float32),
    )
    return CompiledLevel(
        arrays=arrays,
        blocks=tuple(blocks),
        dimension=level.dimension,
        origin=origin,
        extent=extent,
        level=level,
    )
