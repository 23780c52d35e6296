import enum
from dataclasses import astuple, dataclass, field
from types import MappingProxyType
from typing import FrozenSet, Mapping, Optional, Union

from levelz.errors import MalformedPointError

# Document sentinels
HEADER_END = '---'          # separates the header section from the body
END = 'end'                 # stops body parsing (case-insensitive)
HEADER_MARKER = '@'         # every header line starts with this

DEFAULT_LINE_SEPARATOR = '\n'
DEFAULT_SCROLL = 'none'     # 2D levels without an @scroll header
SPAWN_DEFAULT = 'default'   # @spawn value replaced by the dimension's origin

# Checked in this order; the first missing one is reported.
REQUIRED_HEADERS = ('type', 'spawn')

# Declared @type codes start here; Dimension members are indexed by (code - 2).
DIMENSION_CODE_OFFSET = 2


def _format_component(v):
    return str(int(v)) if float(v).is_integer() else repr(float(v))


def _split_components(text, n_axes):
    """Strip one pair of () or [] brackets and split on commas."""
    s = ''.join(text.split())
    if len(s) >= 2 and (s[0], s[-1]) in (('(', ')'), ('[', ']')):
        s = s[1:-1]
    else:
        raise MalformedPointError(f"Invalid LevelZ Coordinate: {text}")
    parts = s.split(',')
    if len(parts) != n_axes:
        raise MalformedPointError(
            f"Expected {n_axes} components in coordinate, got {len(parts)}: {text}")
    try:
        return [float(p) for p in parts]
    except ValueError as e:
        raise MalformedPointError(f"Invalid LevelZ Coordinate: {text}") from e


# ── Coordinates ───────────────────────────────────────────────────────

@dataclass(frozen=True)
class Coordinate2D:
    x: float
    y: float

    n_axes = 2

    def __post_init__(self):
        object.__setattr__(self, 'x', float(self.x))
        object.__setattr__(self, 'y', float(self.y))

    @classmethod
    def from_string(cls, text):
        """Parse ``[x, y]`` or ``(x, y)``."""
        return cls(*_split_components(text, cls.n_axes))

    def as_tuple(self):
        return astuple(self)

    def __str__(self):
        return f"[{_format_component(self.x)}, {_format_component(self.y)}]"


@dataclass(frozen=True)
class Coordinate3D:
    x: float
    y: float
    z: float

    n_axes = 3

    def __post_init__(self):
        object.__setattr__(self, 'x', float(self.x))
        object.__setattr__(self, 'y', float(self.y))
        object.__setattr__(self, 'z', float(self.z))

    @classmethod
    def from_string(cls, text):
        """Parse ``[x, y, z]`` or ``(x, y, z)``."""
        return cls(*_split_components(text, cls.n_axes))

    def as_tuple(self):
        return astuple(self)

    def __str__(self):
        return (f"[{_format_component(self.x)}, {_format_component(self.y)}, "
                f"{_format_component(self.z)}]")


Coordinate = Union[Coordinate2D, Coordinate3D]


# ── Dimension ─────────────────────────────────────────────────────────

class Dimension(enum.Enum):
    TWO = (2, Coordinate2D)
    THREE = (3, Coordinate3D)

    def __init__(self, code, coordinate_cls):
        self.code = code
        self.coordinate_cls = coordinate_cls

    @property
    def is_2d(self):
        return self.coordinate_cls is Coordinate2D

    @property
    def default_coordinate(self):
        return self.coordinate_cls(*([0.0] * self.coordinate_cls.n_axes))

    @classmethod
    def from_code(cls, code):
        """Resolve a declared ``@type`` code. Raises IndexError when out of range."""
        index = code - DIMENSION_CODE_OFFSET
        members = list(cls)
        if index < 0 or index >= len(members):
            raise IndexError(f"No dimension for type code {code}")
        return members[index]


# ── Blocks and level objects ──────────────────────────────────────────

Scalar = Union[bool, int, float, str]


@dataclass(frozen=True)
class Block:
    name: str
    properties: Mapping[str, Scalar] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, 'properties', MappingProxyType(dict(self.properties)))

    def _key(self):
        # value type is part of identity: true, 1 and 1.0 are different values
        return self.name, frozenset((k, type(v), v) for k, v in self.properties.items())

    def __eq__(self, other):
        if not isinstance(other, Block):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self):
        return hash(self._key())

    def __str__(self):
        if not self.properties:
            return self.name
        props = ','.join(f"{k}={v}" for k, v in self.properties.items())
        return f"{self.name}<{props}>"


@dataclass(frozen=True)
class LevelObject:
    block: Block
    coordinate: Coordinate


# ── Level ─────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Level:
    """A parsed LevelZ document.

    One type covers both 2D and 3D levels; ``dimension`` decides which
    coordinate class the objects (and the spawn point) use.
    """
    headers: Mapping[str, str]
    objects: FrozenSet[LevelObject]
    dimension: Dimension

    def __post_init__(self):
        object.__setattr__(self, 'headers', MappingProxyType(dict(self.headers)))

    def __hash__(self):
        return hash((frozenset(self.headers.items()), self.objects, self.dimension))

    @property
    def is_2d(self):
        return self.dimension.is_2d

    @property
    def spawn(self):
        """Spawn coordinate. Validated here, not at parse time."""
        return self.dimension.coordinate_cls.from_string(self.headers['spawn'])

    @property
    def scroll(self) -> Optional[str]:
        return self.headers.get('scroll')

    def block_at(self, coordinate) -> Optional[Block]:
        for obj in self.objects:
            if obj.coordinate == coordinate:
                return obj.block
        return None

    def coordinates(self):
        return frozenset(obj.coordinate for obj in self.objects)
