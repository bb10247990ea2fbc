from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

_ANALYSIS_CONFIG_CACHE: dict[str, Any] | None = None
_ANALYSIS_CONFIG_PATH = Path(__file__).resolve().parents[2] / "config" / "analysis.yaml"


def get_analysis_config() -> dict[str, Any]:
    """Load analysis tunables from repo-level config/analysis.yaml and cache them."""
    global _ANALYSIS_CONFIG_CACHE

    if _ANALYSIS_CONFIG_CACHE is not None:
        return _ANALYSIS_CONFIG_CACHE

    if not _ANALYSIS_CONFIG_PATH.exists():
        raise RuntimeError(
            f"Analysis config not found at '{_ANALYSIS_CONFIG_PATH}'. "
            "Expected file: config/analysis.yaml"
        )

    try:
        raw = _ANALYSIS_CONFIG_PATH.read_text(encoding="utf-8")
    except OSError as exc:
        raise RuntimeError(
            f"Failed to read analysis config '{_ANALYSIS_CONFIG_PATH}': {exc}"
        ) from exc

    try:
        parsed = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise RuntimeError(
            f"Invalid YAML in analysis config '{_ANALYSIS_CONFIG_PATH}': {exc}"
        ) from exc

    if not isinstance(parsed, dict):
        raise RuntimeError(
            f"Invalid analysis config '{_ANALYSIS_CONFIG_PATH}': expected a top-level mapping."
        )

    _ANALYSIS_CONFIG_CACHE = parsed
    return _ANALYSIS_CONFIG_CACHE


def get_analysis_value(path: str, default: Any = None) -> Any:
    """Get nested config value using dot path notation, e.g. 'fallback.score_floor'."""
    if not path:
        return default

    current: Any = get_analysis_config()
    for key in path.split("."):
        if not isinstance(current, dict):
            return default
        if key not in current:
            return default
        current = current[key]
    return current
