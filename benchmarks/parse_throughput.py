"""
Benchmark: measure LevelZ parse throughput.
Generates a large document (literal points, ranged boxes, and weighted
block sets) and times parse + compile.
"""
import time

import jax
from levelz.parser import parse_level
from levelz.compiler import compile_level


def make_document(n_lines, dimension=2):
    if dimension == 2:
        header = ["@type 2", "@spawn default", "---"]
        body = []
        for i in range(n_lines):
            if i % 3 == 0:
                body.append(f"stone<hardness={i % 5}>: [{i}, 0] * [{i}, 1]")
            elif i % 3 == 1:
                body.append(f"{{0.25=dirt, 0.75=grass<wet=true>}}: (0, 0, 0, 3)^[{i}, 2]")
            else:
                body.append(f"{{water, lava<hot=true>}}: [{i}, 6]")
    else:
        header = ["@type 3", "@spawn default", "---"]
        body = [f"stone: (0, 1, 0, 1, 0, 1)^[{2 * i}, 0, 0]" for i in range(n_lines)]
    return "\n".join(header + body + ["end"])


def benchmark(n_lines, dimension=2, repeats=5):
    print(f"\n{'='*60}")
    print(f"  {dimension}D  |  {n_lines} body lines  |  {repeats} repeats")
    print(f"{'='*60}")

    text = make_document(n_lines, dimension)

    t0 = time.time()
    for i in range(repeats):
        level = parse_level(text, seed=i)
    elapsed = time.time() - t0
    print(f"  {len(level.objects):,} objects per level")
    print(f"  Parse: {elapsed / repeats * 1000:.1f} ms/level "
          f"({n_lines * repeats / elapsed:,.0f} lines/sec)")

    t0 = time.time()
    compiled = compile_level(level)
    jax.block_until_ready(compiled.arrays.positions)
    print(f"  Compile: {(time.time() - t0) * 1000:.1f} ms")

    t0 = time.time()
    grid = compiled.occupancy_grid()
    jax.block_until_ready(grid)
    print(f"  Occupancy grid {tuple(grid.shape)}: {(time.time() - t0) * 1000:.1f} ms")


if __name__ == '__main__':
    for n in (1_000, 10_000):
        benchmark(n, dimension=2)
    benchmark(2_000, dimension=3)
