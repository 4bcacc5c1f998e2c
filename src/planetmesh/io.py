"""Settings JSON I/O, validated with ``jsonschema``."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Union

import jsonschema

from .errors import ConfigurationError
from .settings import MAX_LAYERS, MIN_LAYERS, PlanetSettings

PathLike = Union[str, Path]

_NUMBER = {"type": "number"}

SETTINGS_SCHEMA: Dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "planetmesh settings",
    "type": "object",
    "additionalProperties": False,
    "required": ["shape"],
    "properties": {
        "resolution": {"type": "integer", "minimum": 2},
        "normalize_factor": {"type": "number", "minimum": 0, "maximum": 1},
        "shape": {
            "type": "object",
            "additionalProperties": False,
            "required": ["layers"],
            "properties": {
                "radius": {"type": "number", "exclusiveMinimum": 0},
                "seed": {"type": "integer"},
                "layers": {
                    "type": "array",
                    "minItems": 1,
                    "items": {"$ref": "#/definitions/layer"},
                },
            },
        },
    },
    "definitions": {
        "layer": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "kind": {"enum": ["simple", "ridged"]},
                "enabled": {"type": "boolean"},
                "use_first_layer_as_mask": {"type": "boolean"},
                "weight_multiplier": _NUMBER,
                "params": {
                    "type": "object",
                    "additionalProperties": False,
                    "properties": {
                        "strength": _NUMBER,
                        "num_layers": {
                            "type": "integer",
                            "minimum": MIN_LAYERS,
                            "maximum": MAX_LAYERS,
                        },
                        "base_roughness": _NUMBER,
                        "roughness": _NUMBER,
                        "persistence": _NUMBER,
                        "center": {
                            "type": "array",
                            "items": _NUMBER,
                            "minItems": 3,
                            "maxItems": 3,
                        },
                        "min_value": _NUMBER,
                        "max_value": _NUMBER,
                    },
                },
            },
        },
    },
}


def validate_settings_dict(data: Dict[str, Any]) -> List[str]:
    """Schema errors for a settings dict (empty = valid)."""
    validator = jsonschema.Draft7Validator(SETTINGS_SCHEMA)
    errors: List[str] = []
    for error in sorted(validator.iter_errors(data), key=lambda e: [str(p) for p in e.absolute_path]):
        where = "/".join(str(p) for p in error.absolute_path) or "<root>"
        errors.append(f"{where}: {error.message}")
    return errors


def settings_from_dict(data: Dict[str, Any]) -> PlanetSettings:
    """Validate *data* against the schema and the settings rules.

    Raises
    ------
    ConfigurationError
        Listing every problem found.
    """
    errors = validate_settings_dict(data)
    if errors:
        raise ConfigurationError(errors)
    settings = PlanetSettings.from_dict(data)
    settings.require_valid()
    return settings


def load_settings(path: PathLike) -> PlanetSettings:
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"{path}: invalid JSON ({exc})") from exc
    return settings_from_dict(data)


def save_settings(settings: PlanetSettings, path: PathLike, indent: int = 2) -> Path:
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(json.dumps(settings.to_dict(), indent=indent), encoding="utf-8")
    return out
