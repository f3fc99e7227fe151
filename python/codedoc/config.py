"""
Configuration for highlight passes.

Precedence, highest first:
1) explicit overrides (CLI flags)
2) CODEDOC_* environment variables
3) JSON config file (explicit path or CODEDOC_CONFIG)
4) built-in defaults
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

import structlog
from pydantic import BaseModel, Field

from codedoc.parser.chars import BEGIN_SYMBOL, END_SYMBOL
from codedoc.parser.instance import InstanceDefaults
from codedoc.style.format import DEFAULT_FORMATTERS
from codedoc.style.themes import DEFAULT_THEME

logger = structlog.get_logger(__name__)

ENV_PREFIX = "CODEDOC_"
ENV_CONFIG_PATH = "CODEDOC_CONFIG"
ENV_DEFAULTS_PREFIX = "CODEDOC_DEFAULT_"


class Settings(BaseModel):
    begin_symbol: str = Field(BEGIN_SYMBOL, min_length=1)
    end_symbol: str = Field(END_SYMBOL, min_length=1)
    interval_seconds: float = Field(2.0, gt=0, allow_inf_nan=False)
    region_language: str = "java"
    region_theme: str = DEFAULT_THEME
    region_shortcuts: bool = True
    segment_id: Optional[str] = None
    log_level: str = "INFO"
    defaults: InstanceDefaults = Field(default_factory=InstanceDefaults)
    formatters: Dict[str, List[str]] = Field(default_factory=lambda: {k: list(v) for k, v in DEFAULT_FORMATTERS.items()})


def _read_config_file(path: Path) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a JSON object")
    return data


def _from_environ(environ: Mapping[str, str]) -> Dict[str, Any]:
    data: Dict[str, Any] = {}
    for name in Settings.model_fields:
        if name in ("defaults", "formatters"):
            continue
        key = ENV_PREFIX + name.upper()
        if key in environ:
            data[name] = environ[key]

    defaults = {}
    for name in InstanceDefaults.model_fields:
        key = ENV_DEFAULTS_PREFIX + name.upper()
        if key in environ:
            defaults[name] = environ[key]
    if defaults:
        data["defaults"] = defaults

    if ENV_PREFIX + "FORMATTERS" in environ:
        data["formatters"] = json.loads(environ[ENV_PREFIX + "FORMATTERS"])
    return data


def _merge(base: Dict[str, Any], extra: Dict[str, Any]) -> Dict[str, Any]:
    merged = dict(base)
    for key, value in extra.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_settings(
    path: Optional[Union[str, Path]] = None,
    overrides: Optional[Dict[str, Any]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Settings:
    """Builds Settings from the config file, environment and explicit overrides."""
    environ = os.environ if environ is None else environ
    data: Dict[str, Any] = {}

    raw_path = path or environ.get(ENV_CONFIG_PATH)
    if raw_path:
        config_path = Path(raw_path).expanduser()
        data = _read_config_file(config_path)
        logger.debug("Loaded config file", path=str(config_path))

    data = _merge(data, _from_environ(environ))
    if overrides:
        data = _merge(data, {k: v for k, v in overrides.items() if v is not None})

    return Settings.model_validate(data)
