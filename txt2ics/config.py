# txt2ics/config.py
from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .errors import ConfigError
from .render import DEFAULT_PRODID

DEFAULT_CONFIG: Dict[str, Any] = {
    "prodid": DEFAULT_PRODID,
    "calendar_name": None,
    "out": None,        # None or "-" writes to stdout
    "report": None,
}

CONFIG_FILE_CANDIDATES = ["txt2ics.yaml", "txt2ics.yml"]

ENV_OVERRIDES = {
    "TXT2ICS_PRODID": "prodid",
    "TXT2ICS_CALNAME": "calendar_name",
}


def find_config(path: Optional[Path] = None) -> Optional[Path]:
    if path is not None:
        return path
    env = os.environ.get("TXT2ICS_CONFIG")
    if env:
        return Path(env)
    return next((Path(c) for c in CONFIG_FILE_CANDIDATES if os.path.isfile(c)), None)


def read_config_file(path: Path) -> Dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except OSError as e:
        raise ConfigError(f"cannot read config {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid YAML in {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config {path} must be a mapping, got {type(data).__name__}")
    unknown = sorted(set(data) - set(DEFAULT_CONFIG))
    if unknown:
        raise ConfigError(f"unknown config keys in {path}: {', '.join(unknown)}")
    return data


def load_config(path: Optional[Path] = None, **overrides: Any) -> Dict[str, Any]:
    """
    Defaults, then the YAML file, then TXT2ICS_* environment variables,
    then keyword overrides (CLI flags). None-valued overrides are ignored.
    """
    config = dict(DEFAULT_CONFIG)
    found = find_config(path)
    if found is not None:
        config.update(read_config_file(found))
    for var, key in ENV_OVERRIDES.items():
        value = os.environ.get(var)
        if value:
            config[key] = value
    config.update({k: v for k, v in overrides.items() if v is not None})
    return config
