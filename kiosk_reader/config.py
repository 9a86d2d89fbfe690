"""
Extraction settings.

The matcher threshold and the price substitution table were tuned against
one kiosk font at one capture resolution. They are exposed here so they can
be re-tuned from a YAML file instead of being edited in code.
"""

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Tuple, Union

import yaml


DEFAULT_MAX_DISTANCE = 0.5  # Normalized Levenshtein distance
DEFAULT_ANCHOR_PHRASE = "your inventories"

# Letters commonly read in place of digits on the price line
DEFAULT_PRICE_SUBSTITUTIONS: Tuple[Tuple[str, str], ...] = (
    ("l", "1"),
    ("s", "5"),
)


@dataclass(frozen=True)
class ExtractionConfig:
    """Tunable constants for location and listing extraction."""
    max_distance: float = DEFAULT_MAX_DISTANCE
    anchor_phrase: str = DEFAULT_ANCHOR_PHRASE
    price_substitutions: Tuple[Tuple[str, str], ...] = DEFAULT_PRICE_SUBSTITUTIONS

    def __post_init__(self):
        if not 0.0 <= self.max_distance <= 1.0:
            raise ValueError(f"max_distance must be within [0, 1], got {self.max_distance}")
        if not self.anchor_phrase:
            raise ValueError("anchor_phrase must not be empty")

        # Price text is lowercased before substitution
        object.__setattr__(self, "price_substitutions", tuple(
            (source.lower(), target) for source, target in self.price_substitutions
        ))


DEFAULT_CONFIG = ExtractionConfig()


def _parse_substitutions(value: Any) -> Tuple[Tuple[str, str], ...]:
    if isinstance(value, dict):
        pairs = list(value.items())
    elif isinstance(value, (list, tuple)):
        pairs = []
        for item in value:
            if not isinstance(item, (list, tuple)) or len(item) != 2:
                raise ValueError(f"Invalid substitution entry: {item!r}")
            pairs.append(tuple(item))
    else:
        raise ValueError(f"price_substitutions must be a mapping or a list of pairs, got {value!r}")

    for source, target in pairs:
        # YAML reads an unquoted 1 or 5 as an int
        if not all(isinstance(v, (str, int)) and not isinstance(v, bool) for v in (source, target)):
            raise ValueError(f"Invalid substitution entry: {source!r} -> {target!r}")

    return tuple((str(source), str(target)) for source, target in pairs)


def _check_scalar(key: str, value: Any) -> Any:
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        raise ValueError(f"{key} must be a string or a number, got {value!r}")
    return value


def config_from_dict(data: Dict[str, Any]) -> ExtractionConfig:
    """Build a config from a plain mapping, ignoring unknown keys."""
    known = {f.name for f in fields(ExtractionConfig)}
    kwargs = {key: value for key, value in data.items() if key in known}

    if "max_distance" in kwargs:
        kwargs["max_distance"] = float(_check_scalar("max_distance", kwargs["max_distance"]))
    if "anchor_phrase" in kwargs:
        kwargs["anchor_phrase"] = str(_check_scalar("anchor_phrase", kwargs["anchor_phrase"]))
    if "price_substitutions" in kwargs:
        kwargs["price_substitutions"] = _parse_substitutions(kwargs["price_substitutions"])

    return ExtractionConfig(**kwargs)


def load_config(path: Union[str, Path]) -> ExtractionConfig:
    """
    Load extraction settings from a YAML file.

    Example:
        max_distance: 0.4
        anchor_phrase: your inventories
        price_substitutions:
          l: "1"
          s: "5"
    """
    with open(path, 'r') as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping")

    return config_from_dict(data)
