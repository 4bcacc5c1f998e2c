#!/usr/bin/env python3
"""Demo: generate a planet from a preset and print per-face statistics.

Usage
-----
    python scripts/demo_planet.py --preset earthlike --resolution 32
    python scripts/demo_planet.py --preset ridged_world --seed 7 --biomes 0 0.4 0.8

Available presets: earthlike, ridged_world, smooth_moon
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path

# Ensure src/ is on the path when run as a script
ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT / "src"))

from planetmesh import PRESETS, LatitudeBiomeLookup, PlanetGenerator
from planetmesh.logging_config import setup_logging


def main() -> None:
    parser = argparse.ArgumentParser(description="Generate a cube-sphere planet demo")
    parser.add_argument("--preset", choices=sorted(PRESETS), default="earthlike", help="Planet preset")
    parser.add_argument("--resolution", type=int, default=24, help="Vertices per face side")
    parser.add_argument("--seed", type=int, default=None, help="Override the preset seed")
    parser.add_argument("--workers", type=int, default=None, help="Face worker threads (1 = serial)")
    parser.add_argument(
        "--biomes",
        type=float,
        nargs="+",
        default=None,
        help="Latitude band start heights (0 = south pole, 1 = north pole)",
    )
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args()

    setup_logging(logging.DEBUG if args.verbose else logging.INFO)

    settings = PRESETS[args.preset].with_overrides(resolution=args.resolution)
    if args.seed is not None:
        settings = replace(settings, shape=replace(settings.shape, seed=args.seed))

    lookup = LatitudeBiomeLookup(args.biomes, blend_amount=0.1) if args.biomes else None

    print(f"Generating {args.preset} (resolution={settings.resolution}, seed={settings.shape.seed})…")
    planet = PlanetGenerator(settings, lookup).generate(args.workers)

    rng = planet.elevation_range
    print(f"Elevation range: [{rng.min:.4f}, {rng.max:.4f}]")
    for face in planet:
        radii = (face.vertices ** 2).sum(axis=1) ** 0.5
        print(
            f"  {face.direction.value}: {face.vertex_count} vertices, "
            f"radius {radii.min():.4f}..{radii.max():.4f}, "
            f"biome {face.uvs[:, 0].min():.2f}..{face.uvs[:, 0].max():.2f}"
        )
    for stage, seconds in planet.elapsed.items():
        print(f"  {stage:<7} {seconds:.3f}s")

    errors = planet.validate()
    if errors:
        raise SystemExit("\n".join(errors))
    print("Seams consistent.")


if __name__ == "__main__":
    main()
