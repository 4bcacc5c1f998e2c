"""planetmesh command-line interface."""

from __future__ import annotations

import argparse
import json
import logging
from typing import List, Optional

from .errors import ConfigurationError
from .io import load_settings, save_settings
from .logging_config import setup_logging
from .settings import PRESETS, PlanetSettings


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Procedural cube-sphere planet meshes")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    parser.add_argument("--log-file", dest="log_file")
    sub = parser.add_subparsers(dest="command", required=True)

    validate = sub.add_parser("validate", help="Validate a settings file")
    validate.add_argument("--in", dest="input_path", required=True)

    preset = sub.add_parser("preset", help="Write a preset settings file")
    preset.add_argument("--name", choices=sorted(PRESETS), required=True)
    preset.add_argument("--out", dest="output_path", required=True)

    generate = sub.add_parser("generate", help="Generate a planet and print a summary")
    source = generate.add_mutually_exclusive_group(required=True)
    source.add_argument("--in", dest="input_path")
    source.add_argument("--preset", choices=sorted(PRESETS))
    generate.add_argument("--resolution", type=int)
    generate.add_argument("--normalize-factor", dest="normalize_factor", type=float)
    generate.add_argument("--workers", type=int)
    generate.add_argument("--json", dest="as_json", action="store_true",
                          help="Print the summary as JSON")

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.WARNING, args.log_file)

    try:
        if args.command == "validate":
            load_settings(args.input_path)
            print("OK")

        elif args.command == "preset":
            out = save_settings(PRESETS[args.name], args.output_path)
            print(f"Saved {out}")

        elif args.command == "generate":
            _cmd_generate(args)
    except ConfigurationError as exc:
        for problem in exc.problems:
            print(problem)
        raise SystemExit(1)


def _cmd_generate(args) -> None:
    from .planet import generate_planet

    settings: PlanetSettings
    if args.input_path:
        settings = load_settings(args.input_path)
    else:
        settings = PRESETS[args.preset]
    settings = settings.with_overrides(
        resolution=args.resolution,
        normalize_factor=args.normalize_factor,
    )

    planet = generate_planet(settings, workers=args.workers)
    summary = {
        "resolution": settings.resolution,
        "faces": len(planet),
        "vertices": planet.vertex_count,
        "triangles": planet.triangle_count,
        "elevation_min": planet.elevation_range.min,
        "elevation_max": planet.elevation_range.max,
        "errors": planet.validate(),
    }
    if args.as_json:
        print(json.dumps(summary, indent=2))
        return
    print(f"Faces:     {summary['faces']}")
    print(f"Vertices:  {summary['vertices']}")
    print(f"Triangles: {summary['triangles']}")
    print(f"Elevation: [{summary['elevation_min']:.4f}, {summary['elevation_max']:.4f}]")
    if summary["errors"]:
        for error in summary["errors"]:
            print(error)
        raise SystemExit(1)


if __name__ == "__main__":
    main()
