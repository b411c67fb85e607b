"""Configuration loading, defaults, and CLI override resolution for UWX."""

from __future__ import annotations

import re
from copy import deepcopy
from pathlib import Path
from typing import Any, Optional

import yaml

from uwx.models import FilterConfig

DEFAULT_CONFIG_NAME = "uwx.yaml"

DEFAULT_CONFIG: dict[str, Any] = {
    "filters": {
        "min_length": 1,
        "max_length": 25,
        "alpha_num_only": False,
        "substring": "",
        "pattern": "",
    },
    "outputs": {
        "paths": "",
        "params": "",
    },
}


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = deepcopy(value)
    return merged


def build_default_config() -> dict[str, Any]:
    return deepcopy(DEFAULT_CONFIG)


def write_default_config(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.safe_dump(build_default_config(), sort_keys=False), encoding="utf-8")


def load_config(path: Path) -> dict[str, Any]:
    if not path.exists():
        return build_default_config()
    loaded = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(loaded, dict):
        raise ValueError(f"Config file '{path}' must contain a mapping")
    for section in ("filters", "outputs"):
        value = loaded.get(section)
        if value is None:
            loaded.pop(section, None)
        elif not isinstance(value, dict):
            raise ValueError(f"Config section '{section}' in '{path}' must be a mapping")
    return _deep_merge(DEFAULT_CONFIG, loaded)


def _pick(cli_value: Any, file_value: Any) -> Any:
    return file_value if cli_value is None else cli_value


def compile_pattern(pattern: str) -> Optional[re.Pattern[str]]:
    """Compile a token regex; an empty pattern means no pattern filter."""
    if not pattern:
        return None
    try:
        return re.compile(pattern)
    except re.error as exc:
        raise ValueError(f"invalid regex {pattern!r}: {exc}") from exc


def resolve_filter_config(
    config: dict[str, Any],
    min_length: Optional[int] = None,
    max_length: Optional[int] = None,
    alpha_num_only: Optional[bool] = None,
    substring: Optional[str] = None,
    pattern: Optional[str] = None,
) -> FilterConfig:
    filters = config.get("filters") or {}

    resolved_min = int(_pick(min_length, filters.get("min_length", 1)))
    resolved_max = int(_pick(max_length, filters.get("max_length", 25)))
    if resolved_min < 0:
        raise ValueError("min length must be >= 0")
    if resolved_min > resolved_max:
        raise ValueError(f"min length ({resolved_min}) cannot be greater than max length ({resolved_max})")

    return FilterConfig(
        min_length=resolved_min,
        max_length=resolved_max,
        alpha_num_only=bool(_pick(alpha_num_only, filters.get("alpha_num_only", False))),
        substring=str(_pick(substring, filters.get("substring", "")) or ""),
        pattern=compile_pattern(str(_pick(pattern, filters.get("pattern", "")) or "")),
    )


def resolve_outputs(
    config: dict[str, Any],
    paths: Optional[str] = None,
    params: Optional[str] = None,
) -> dict[str, str]:
    outputs = config.get("outputs") or {}
    return {
        "paths": str(_pick(paths, outputs.get("paths", "")) or ""),
        "params": str(_pick(params, outputs.get("params", "")) or ""),
    }
