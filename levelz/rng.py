"""
Random sources and weighted selection for LevelZ block alternatives.

A parse draws from exactly one source, in body-line order, so a fixed seed
(and a fixed document) always resolves weighted blocks the same way.
"""
import math
from typing import Dict, Optional, Protocol, TypeVar

import jax
import jax.numpy as jnp
import numpy as np

from levelz.errors import ParseError

T = TypeVar('T')


class RandomSource(Protocol):
    def random(self) -> float:  # uniform in [0.0, 1.0)
        ...


class JaxRandomSource:
    """Draws uniforms from a JAX PRNG key, splitting it on every draw.

    Lets a level be resolved from the same keys used elsewhere, e.g.
    ``jax.random.split(jax.random.PRNGKey(0), n)`` for n level variants.
    """

    def __init__(self, key):
        self.key = key

    def random(self):
        self.key, subkey = jax.random.split(self.key)
        return float(jax.random.uniform(subkey, dtype=jnp.float32))


def _is_prng_key(seed):
    if isinstance(seed, jax.Array):
        if jnp.issubdtype(seed.dtype, jax.dtypes.prng_key):
            return True
        # raw uint32[2] keys from jax.random.PRNGKey
        return seed.dtype == jnp.uint32 and seed.shape == (2,)
    return False


def make_random_source(seed=None):
    """Build a random source from a seed.

    Args:
        seed: None (fresh entropy), an int, a JAX PRNG key, or any object
            with a ``random()`` method (used as is).

    Returns:
        an object satisfying RandomSource
    """
    if seed is None or isinstance(seed, (int, np.integer)):
        return np.random.default_rng(seed)
    if _is_prng_key(seed):
        return JaxRandomSource(seed)
    if callable(getattr(seed, 'random', None)):
        return seed
    raise TypeError(f"Unsupported seed type: {type(seed).__name__}")


def roll(weights: Dict[T, float], rng) -> Optional[T]:
    """Pick one key of ``weights`` with probability equal to its weight.

    Candidates are walked in insertion order; the first whose cumulative
    weight reaches the draw wins. Returns None when the draw lands past the
    total (or the mapping is empty).

    Raises:
        ParseError: if the weights sum to more than 1.0 (checked before drawing)
    """
    total = math.fsum(weights.values())
    if total > 1.0:
        raise ParseError(f"LevelZ Block Probabilities exceeded 1.0, found {total}")

    r = rng.random()
    seen = []
    for candidate, weight in weights.items():
        seen.append(weight)
        if r <= math.fsum(seen):
            return candidate
    return None
