import jax
import jax.numpy as jnp
import numpy as np
import pytest

from levelz.compiler import compile_level
from levelz.data_model import Block, Dimension
from levelz.parser import parse_level
from conftest import make_document


def _compile(*body, **kwargs):
    return compile_level(parse_level(make_document(*body, **kwargs), seed=0))


def test_compile_2d():
    compiled = _compile('stone:[0,0]*[2,1]', 'dirt:[1,0]')
    assert compiled.dimension is Dimension.TWO
    assert compiled.n_objects == 3
    assert compiled.blocks == (Block('stone'), Block('dirt'))
    assert compiled.arrays.positions.shape == (3, 2)
    assert compiled.arrays.positions.dtype == jnp.float32
    # sorted by coordinate: (0,0) stone, (1,0) dirt, (2,1) stone
    np.testing.assert_array_equal(compiled.arrays.block_ids, [0, 1, 0])
    np.testing.assert_array_equal(compiled.arrays.positions, [[0, 0], [1, 0], [2, 1]])
    assert compiled.origin == (0, 0)
    assert compiled.extent == (3, 2)


def test_blocks_with_differently_typed_values_get_own_ids():
    compiled = _compile('a<x=true>:[0,0]', 'a<x=1>:[1,0]')
    assert compiled.blocks == (Block('a', {'x': True}), Block('a', {'x': 1}))
    np.testing.assert_array_equal(compiled.arrays.block_ids, [0, 1])


def test_occupancy_grid_2d():
    compiled = _compile('stone:[0,0]*[2,1]', 'dirt:[1,0]')
    grid = compiled.occupancy_grid()
    assert grid.shape == (3, 2)
    assert grid.dtype == jnp.int32
    np.testing.assert_array_equal(grid, [[1, 0], [2, 0], [0, 1]])


def test_occupancy_grid_offset_origin():
    compiled = _compile('stone:(0,1,0,0)^[-3,5]')
    assert compiled.origin == (-3, 5)
    assert compiled.extent == (2, 1)
    np.testing.assert_array_equal(compiled.occupancy_grid(), [[1], [1]])


def test_extent_spans_bounding_box_not_object_count():
    compiled = _compile('stone:[0,0]', 'dirt:[100000,0]')
    assert compiled.n_objects == 2
    assert compiled.extent == (100001, 1)


def test_compile_3d_with_spawn():
    compiled = _compile('stone:(0,1,0,1,0,1)^[0,0,0]', type_code=3, spawn='[4, 5, 6]')
    assert compiled.arrays.positions.shape == (8, 3)
    np.testing.assert_array_equal(compiled.arrays.spawn, [4, 5, 6])
    assert compiled.occupancy_grid().sum() == 8


def test_compile_empty_level():
    compiled = _compile(type_code=3)
    assert compiled.n_objects == 0
    assert compiled.blocks == ()
    assert compiled.arrays.positions.shape == (0, 3)
    assert compiled.extent == (0, 0, 0)
    assert compiled.occupancy_grid().shape == (0, 0, 0)


def test_block_id_lookup():
    compiled = _compile('stone:[0,0]', 'grass<wet=true>:[1,0]')
    assert compiled.block_id('grass') == 1
    with pytest.raises(KeyError):
        compiled.block_id('lava')


def test_non_integral_positions_warn():
    with pytest.warns(UserWarning, match='non-integral'):
        compiled = _compile('stone:[0.5,0]*[1,0]')
    np.testing.assert_array_equal(compiled.occupancy_grid(), [[1], [1]])


def test_compiled_arrays_jit():
    compiled = _compile('stone:(0,2,0,0)^[0,0]', 'dirt:[0,1]')
    count_stone = jax.jit(lambda a: (a.block_ids == 0).sum())
    assert int(count_stone(compiled.arrays)) == 3
