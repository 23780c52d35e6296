import pytest

from levelz.data_model import Coordinate2D, Coordinate3D, Dimension
from levelz.errors import MalformedPointError, ParseError
from levelz.points import (
    expand_range, is_ranged, read_2d_points, read_3d_points, read_points, split_tokens,
)


def test_split_tokens_drops_trailing_empties():
    assert split_tokens('a*b**', '*') == ['a', 'b']
    assert split_tokens('*a', '*') == ['', 'a']
    assert split_tokens('', '*') == []


def test_is_ranged():
    assert is_ranged('(0,1,0,1)^[5,5]')
    assert not is_ranged('(5,5)')
    assert not is_ranged('[5,5]')


def test_ranged_2d_expansion():
    points = read_2d_points('(0,1,0,1)^[5,5]')
    assert points == {
        Coordinate2D(5, 5), Coordinate2D(5, 6),
        Coordinate2D(6, 5), Coordinate2D(6, 6),
    }


def test_ranged_duplicates_collapse():
    points = read_2d_points('(0,1,0,1)^[5,5]*[5,5]*(6,6)*(1,0,1,0)^[5,5]')
    assert len(points) == 4


def test_ranged_bounds_any_order():
    assert read_2d_points('(2,0,1,-1)^[0,0]') == read_2d_points('(0,2,-1,1)^[0,0]')
    assert len(read_2d_points('(2,0,1,-1)^[0,0]')) == 9


def test_ranged_fractional_anchor():
    assert read_2d_points('(0,1,0,0)^[0.5,2]') == {
        Coordinate2D(0.5, 2), Coordinate2D(1.5, 2),
    }


def test_ranged_3d_expansion():
    points = read_3d_points('(0,1,0,1,0,1)^[10,0,-1]')
    assert len(points) == 8
    assert Coordinate3D(10, 0, -1) in points
    assert Coordinate3D(11, 1, 0) in points
    assert all(isinstance(p, Coordinate3D) for p in points)


def test_expand_range_single_cell():
    assert expand_range('(0,0,0,0)^[3,4]', Coordinate2D) == [Coordinate2D(3, 4)]


def test_literal_points_and_trailing_separator():
    points = read_points('[1,2]*(3,4)*', Dimension.TWO)
    assert points == {Coordinate2D(1, 2), Coordinate2D(3, 4)}


def test_blank_cells_skipped():
    assert read_2d_points(' * [1,2] *  ') == {Coordinate2D(1, 2)}


def test_literal_3d():
    assert read_3d_points('[1,2,3]') == {Coordinate3D(1, 2, 3)}


@pytest.mark.parametrize('expr', [
    '[a,2]',
    '(0,1,0)^[0,0]',         # too few bounds
    '(0,1,0,1)^[0]',         # too few anchor components
    '(0,1,0,1)[0,0]',        # no ^
    '(0.5,1,0,1)^[0,0]',     # bounds must be integers
    '(0,1,0,1)^[x,0]',
])
def test_malformed_2d(expr):
    with pytest.raises(MalformedPointError):
        read_2d_points(expr)


def test_malformed_3d_wrong_arity():
    with pytest.raises(MalformedPointError):
        read_3d_points('[1,2]')
    with pytest.raises(MalformedPointError):
        read_3d_points('(0,1,0,1)^[0,0,0]')


def test_malformed_point_is_parse_error():
    with pytest.raises(ParseError):
        read_2d_points('(0,1,0,1)^[0]')
