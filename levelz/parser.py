"""
LevelZ text parser.
Reads a LevelZ document (header, ``---``, body, optional ``end``) and
produces a Level.
"""
import math
import re
import warnings
from typing import Dict, List, Tuple

from levelz.data_model import (
    HEADER_END, END, HEADER_MARKER, DEFAULT_LINE_SEPARATOR, DEFAULT_SCROLL,
    SPAWN_DEFAULT, REQUIRED_HEADERS,
    Block, Dimension, Level, LevelObject,
)
from levelz.errors import ParseError, MissingHeaderError
from levelz.points import read_points, split_tokens
from levelz.rng import make_random_source, roll

_HEADER_DESCRIPTIONS = {
    'type': 'Dimension Type',
    'spawn': 'Level Spawnpoint',
}

_HEADER_SPLIT = re.compile(r'\s+')


def _strip_whitespace(text):
    return ''.join(text.split())


# ── Value parser ──────────────────────────────────────────────────────

def parse_value(token):
    """Interpret a property value as bool, int, float, or (fallback) str."""
    lowered = token.lower()
    if lowered == 'true':
        return True
    if lowered == 'false':
        return False
    if '_' in token:  # int() and float() accept digit separators
        return token
    try:
        return int(token)
    except ValueError:
        pass
    try:
        value = float(token)
    except ValueError:
        return token
    # nan/inf stay strings
    return value if math.isfinite(value) else token


# ── Document & headers ────────────────────────────────────────────────

def split_document(lines) -> Tuple[List[str], List[str]]:
    """Split lines at the first ``---`` into (header lines, body lines).

    Without a separator the whole document is treated as body.
    """
    lines = list(lines)
    for i, line in enumerate(lines):
        if line == HEADER_END:
            return lines[:i], lines[i + 1:]
    return [], lines


def read_headers(lines) -> Dict[str, str]:
    """Parse ``@key value`` lines into a dict and check required keys."""
    headers = {}
    for line in lines:
        if not line.strip():
            continue
        if not line.startswith(HEADER_MARKER):
            raise ParseError(f"Invalid LevelZ Header: {line}")
        parts = _HEADER_SPLIT.split(line, maxsplit=1)
        if len(parts) < 2:
            raise ParseError(f"Invalid LevelZ Header: {line}")
        headers[parts[0][len(HEADER_MARKER):]] = parts[1]

    for key in REQUIRED_HEADERS:
        if key not in headers:
            raise MissingHeaderError(
                f"Missing {_HEADER_DESCRIPTIONS[key]} ({HEADER_MARKER}{key})",
                header=key)
    return headers


def resolve_dimension(type_value) -> Dimension:
    try:
        return Dimension.from_code(int(type_value))
    except (ValueError, IndexError) as e:
        raise ParseError(f"Invalid LevelZ Dimension Type: {type_value}") from e


# ── Blocks ────────────────────────────────────────────────────────────

def read_raw_block(token) -> Block:
    """Parse ``name`` or ``name<k=v,...>`` into a Block."""
    if not token:
        raise ParseError(f"Invalid LevelZ Block: {token}")

    cleaned = ''.join(c for c in token if c != '>' and not c.isspace())
    parts = split_tokens(cleaned, '<')
    name = parts[0].strip() if parts else ''
    if not name:
        raise ParseError(f"Invalid LevelZ Block: {token}")
    if len(parts) < 2:
        return Block(name, {})

    properties = {}
    for entry in split_tokens(parts[1], ','):
        kv = split_tokens(entry, '=')
        if len(kv) < 2:
            raise ParseError(f"Invalid LevelZ Block: {token}")
        properties[kv[0]] = parse_value(kv[1])
    return Block(name, properties)


def _split_alternatives(body) -> List[str]:
    """Split the inside of ``{...}`` on commas outside ``<...>`` lists."""
    fragments = []
    depth = 0
    current = []
    for c in body:
        if c == '<':
            depth += 1
        elif c == '>':
            depth = max(depth - 1, 0)
        if c == ',' and depth == 0:
            fragments.append(''.join(current))
            current = []
        else:
            current.append(c)
    fragments.append(''.join(current))
    while fragments and not fragments[-1]:
        fragments.pop()
    return fragments


def _parse_weight(text):
    try:
        weight = float(text)
    except ValueError:
        return None
    # nan/inf never count as explicit weights
    return weight if math.isfinite(weight) else None


def read_block_weights(token) -> Dict[str, float]:
    """Map each alternative of a ``{...}`` block set to its probability.

    Alternatives without a ``weight=`` prefix share ``1 / len(alternatives)``.
    """
    fragments = _split_alternatives(token[1:-1])
    fallback = 1.0 / len(fragments) if fragments else 0.0
    weights = {}
    for fragment in fragments:
        head, sep, rest = fragment.partition('=')
        weight = _parse_weight(head) if sep else None
        if weight is None:
            weights[fragment] = fallback
        else:
            weights[rest] = weight
    return weights


def is_block_set(token):
    return token.startswith('{') and token.endswith('}')


def read_block(token, rng) -> Block:
    """Parse a block token, resolving ``{...}`` alternatives with ``rng``."""
    token = _strip_whitespace(token)
    if not is_block_set(token):
        return read_raw_block(token)

    choice = roll(read_block_weights(token), rng)
    if choice is None:
        raise ParseError(f"No LevelZ Block selected from: {token}")
    return read_raw_block(choice)


# ── Lines ─────────────────────────────────────────────────────────────

def read_line(line, dimension: Dimension, rng):
    """Parse ``block:points`` into (Block, frozenset of coordinates)."""
    stripped = _strip_whitespace(line)
    block_token, sep, points = stripped.partition(':')
    if not sep or not block_token or not points:
        raise ParseError(f"Invalid LevelZ Line: {line}")
    return read_block(block_token, rng), read_points(points, dimension)


def read_2d_line(line, rng):
    return read_line(line, Dimension.TWO, rng)


def read_3d_line(line, rng):
    return read_line(line, Dimension.THREE, rng)


# ── Main entry points ─────────────────────────────────────────────────

def _place(occupants, block, coordinate):
    previous = occupants.pop(coordinate, None)
    if previous is not None and previous.block != block:
        warnings.warn(f"{previous.block} at {coordinate} replaced by {block}")
    occupants[coordinate] = LevelObject(block, coordinate)


def parse_lines(lines, seed=None) -> Level:
    """
    Parse LevelZ lines into a Level.

    Args:
        lines: iterable of text lines
        seed: random seed or source for ``{...}`` block alternatives
            (see levelz.rng.make_random_source)

    Returns:
        Level

    Raises:
        ParseError: on the first malformed header, line, block, or point
    """
    rng = make_random_source(seed)
    header_lines, body_lines = split_document(lines)
    headers = read_headers(header_lines)
    dimension = resolve_dimension(headers['type'])

    if headers['spawn'] == SPAWN_DEFAULT:
        headers['spawn'] = str(dimension.default_coordinate)
    if dimension.is_2d:
        headers.setdefault('scroll', DEFAULT_SCROLL)

    # coordinate -> LevelObject; a later line replaces an earlier occupant
    occupants = {}
    for line in body_lines:
        content = line.strip()
        if not content:
            continue
        if content.lower() == END:
            break
        block, coordinates = read_line(content, dimension, rng)
        for coordinate in coordinates:
            _place(occupants, block, coordinate)

    return Level(headers=headers, objects=frozenset(occupants.values()),
                 dimension=dimension)


def parse_level(text, seed=None, line_separator=DEFAULT_LINE_SEPARATOR) -> Level:
    """Parse a LevelZ document held in a single string."""
    return parse_lines(text.split(line_separator), seed)


def parse_level_file(path, seed=None) -> Level:
    """Read and parse a LevelZ file (UTF-8, any line ending)."""
    with open(path, encoding='utf-8') as f:
        text = f.read()
    return parse_lines(text.splitlines(), seed)
