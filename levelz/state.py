import jax.numpy as jnp
import flax.struct


@flax.struct.dataclass
class LevelArrays:
    positions: jnp.ndarray   # [n_objects, n_axes] float32
    block_ids: jnp.ndarray   # [n_objects] int32, index into CompiledLevel.blocks
    spawn: jnp.ndarray       # [n_axes] float32
