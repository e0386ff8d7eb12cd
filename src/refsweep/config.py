"""Configuration helpers for refsweep runs.

Reads the optional ``.refsweep.json`` project file and validates it with
Pydantic models.

Example:
    >>> from pathlib import Path
    >>> load_config(Path("missing-refsweep.json")).remote
    'origin'
"""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import ValidationError

from . import log as sweep_log
from .errors import InvalidConfigError
from .models import SweepConfig

CONFIG_FILENAME = ".refsweep.json"


def config_path(start: Path | None = None) -> Path:
    return (start or Path.cwd()) / CONFIG_FILENAME


def load_json(path: Path) -> dict | None:
    """Load a JSON object from ``path`` if the file exists."""
    if not path.exists():
        return None
    with path.open("r", encoding="utf-8") as fh:
        try:
            payload = json.load(fh)
        except json.JSONDecodeError as exc:
            raise InvalidConfigError(f"invalid config at {path}: {exc}") from exc
    if not isinstance(payload, dict):
        raise InvalidConfigError(f"invalid config at {path}: expected a JSON object")
    return payload


def parse_config(payload: dict, source: Path | str | None = None) -> SweepConfig:
    try:
        return SweepConfig.model_validate(payload)
    except ValidationError as exc:
        location = f" at {source}" if source else ""
        raise InvalidConfigError(f"invalid config{location}:\n{exc}") from exc


def load_config(path: Path | None = None) -> SweepConfig:
    """Load the project config, falling back to defaults when absent."""
    resolved = path or config_path()
    payload = load_json(resolved)
    if payload is None:
        return SweepConfig()
    sweep_log.debug(f"[config] loaded {resolved}")
    return parse_config(payload, source=resolved)


def issues_path(config: SweepConfig, start: Path | None = None) -> Path:
    """Resolve the tracker export path relative to the working directory."""
    path = Path(config.issues_file).expanduser()
    if path.is_absolute():
        return path
    return (start or Path.cwd()) / path
