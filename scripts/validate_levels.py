#!/usr/bin/env python
"""
Standalone CLI validation script for LevelZ files.

Parses every given file (or every *.lvlz file under a directory), reports
the dimension and object count of each level, and the error for any file
that fails to parse. Exits with status 1 if any file fails.

Usage:
    python scripts/validate_levels.py levels/                # every *.lvlz under levels/
    python scripts/validate_levels.py a.lvlz b.lvlz         # specific files
    python scripts/validate_levels.py levels/ --seed 7      # fixed seed for {...} blocks
    python scripts/validate_levels.py levels/ --json out/   # also write out/results.json
"""

import argparse
import json
import os
import sys
import time

from levelz.errors import ParseError
from levelz.parser import parse_level_file

LEVEL_EXTENSION = ".lvlz"


# ── File discovery ───────────────────────────────────────────────────────────


def _collect_paths(targets):
    """Expand directories into their *.lvlz files (sorted); keep files as given."""
    paths = []
    for target in targets:
        if os.path.isdir(target):
            for root, _, files in os.walk(target):
                for name in sorted(files):
                    if name.endswith(LEVEL_EXTENSION):
                        paths.append(os.path.join(root, name))
        else:
            paths.append(target)
    return paths


# ── Per-file validation ─────────────────────────────────────────────────────


def validate_file(path, seed=0):
    """Parse one level file.

    Returns:
        dict with keys: status ('ok' | 'parse_error' | 'io_error'),
        dimension, n_objects, n_blocks, error, timing_s
    """
    result = {
        "status": "ok",
        "dimension": None,
        "n_objects": 0,
        "n_blocks": 0,
        "error": None,
        "timing_s": 0.0,
    }
    t0 = time.time()
    try:
        level = parse_level_file(path, seed=seed)
        result["dimension"] = level.dimension.code
        result["n_objects"] = len(level.objects)
        result["n_blocks"] = len({obj.block for obj in level.objects})
    except ParseError as e:
        result["status"] = "parse_error"
        result["error"] = f"{type(e).__name__}: {e}"
    except OSError as e:
        result["status"] = "io_error"
        result["error"] = str(e)
    result["timing_s"] = round(time.time() - t0, 4)
    return result


# ── Output ───────────────────────────────────────────────────────────────────


def write_results(all_results, output_dir):
    os.makedirs(output_dir, exist_ok=True)
    summary = {
        "total_files": len(all_results),
        "ok": sum(1 for r in all_results.values() if r["status"] == "ok"),
        "failed": sum(1 for r in all_results.values() if r["status"] != "ok"),
    }
    results_path = os.path.join(output_dir, "results.json")
    with open(results_path, "w") as f:
        json.dump({"summary": summary, "per_file": all_results}, f, indent=2)
    print(f"  Wrote {results_path}")


def print_summary(all_results):
    print("\n" + "=" * 70)
    print("LEVELZ VALIDATION SUMMARY")
    print("=" * 70)

    status_icons = {
        "ok": "[OK]     ",
        "parse_error": "[FAIL]   ",
        "io_error": "[ERROR]  ",
    }

    for path, result in all_results.items():
        icon = status_icons.get(result["status"], "[?]      ")
        if result["status"] == "ok":
            detail = (f"{result['dimension']}D, {result['n_objects']} objects, "
                      f"{result['n_blocks']} blocks")
        else:
            detail = result["error"]
        print(f"  {icon} {path}")
        print(f"           {detail}")

    total = len(all_results)
    ok = sum(1 for r in all_results.values() if r["status"] == "ok")
    print()
    print(f"  Total: {total} files | OK: {ok} | Failed: {total - ok}")
    print("=" * 70)


# ── Main ─────────────────────────────────────────────────────────────────────


def main(argv=None):
    parser = argparse.ArgumentParser(description="Validate LevelZ level files")
    parser.add_argument(
        "targets", nargs="+",
        help="Level files or directories containing *.lvlz files",
    )
    parser.add_argument(
        "--seed", type=int, default=0,
        help="Random seed for weighted block alternatives (default: 0)",
    )
    parser.add_argument(
        "--json", type=str, default=None, metavar="OUTPUT_DIR",
        help="Also write results.json to this directory",
    )
    args = parser.parse_args(argv)

    paths = _collect_paths(args.targets)
    if not paths:
        print(f"ERROR: no {LEVEL_EXTENSION} files found in {args.targets}")
        return 1

    all_results = {}
    for path in paths:
        all_results[path] = validate_file(path, seed=args.seed)

    if args.json:
        write_results(all_results, args.json)
    print_summary(all_results)

    return 0 if all(r["status"] == "ok" for r in all_results.values()) else 1


if __name__ == "__main__":
    sys.exit(main())
