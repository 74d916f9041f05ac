from __future__ import annotations

from dataclasses import dataclass
import json
from pathlib import Path
import tomllib
from typing import Any

from eventline.errors import ConfigError, StyleError
from eventline.style import DEFAULT_STYLE, TimelineStyle, validate_style


DATASET_KEYS = ("data", "metrics", "snapshots", "events")


@dataclass(frozen=True)
class ChartOptions:
    height: int | None = None
    width: int | None = None
    style: TimelineStyle = DEFAULT_STYLE


def load_dataset(path: str | Path) -> dict[str, Any]:
    """Read a JSON dataset with `data`, `metrics`, `snapshots` and optional `events` keys."""

    p = Path(path)
    try:
        raw = json.loads(p.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigError(f"cannot read dataset {p}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigError(f"dataset {p} is not valid JSON: {exc}") from exc
    if not isinstance(raw, dict):
        raise ConfigError(f"dataset {p} must be a JSON object")
    unknown = sorted(set(raw) - set(DATASET_KEYS))
    if unknown:
        raise ConfigError(f"dataset {p} has unknown keys: {', '.join(unknown)}")
    for key in ("data", "metrics", "snapshots"):
        if key not in raw:
            raise ConfigError(f"dataset {p} is missing `{key}`")
    return {key: raw.get(key) for key in DATASET_KEYS}


def load_options(path: str | Path) -> ChartOptions:
    """Read chart options from TOML: `[timeline]` height/width and `[style]` token overrides."""

    p = Path(path)
    try:
        with p.open("rb") as fh:
            raw = tomllib.load(fh)
    except OSError as exc:
        raise ConfigError(f"cannot read options {p}: {exc}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"options {p} are not valid TOML: {exc}") from exc

    section = raw.get("timeline", {})
    if not isinstance(section, dict):
        raise ConfigError("`[timeline]` must be a table")
    height = _optional_positive_int(section, "height")
    width = _optional_positive_int(section, "width")
    overrides = raw.get("style", {})
    if not isinstance(overrides, dict):
        raise ConfigError("`[style]` must be a table")
    try:
        style = validate_style(overrides)
    except StyleError as exc:
        raise ConfigError(f"options {p}: {exc}") from exc
    return ChartOptions(height=height, width=width, style=style)


def _optional_positive_int(section: dict[str, Any], key: str) -> int | None:
    value = section.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ConfigError(f"`timeline.{key}` must be a positive integer")
    return value
