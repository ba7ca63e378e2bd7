"""Configuration loading for genpreview (.genpreview.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from . import constants

CONFIG_FILENAME = ".genpreview.yml"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class ExtractionConfig:
    """Quality gate thresholds and document shell settings."""

    min_body_chars: int = constants.MIN_BODY_CHARS
    max_placeholder_ratio: float = constants.MAX_PLACEHOLDER_RATIO
    min_visible_text_chars: int = constants.MIN_VISIBLE_TEXT_CHARS
    max_fallback_copy: int = constants.MAX_FALLBACK_COPY
    stylesheet_url: str = constants.UTILITY_STYLESHEET_URL


@dataclass
class RoutingConfig:
    """Directory-routing convention used to discover pages."""

    roots: List[str] = field(default_factory=lambda: list(constants.ROUTE_ROOTS))
    entry_filenames: List[str] = field(default_factory=lambda: list(constants.ENTRY_FILENAMES))
    shared_stylesheets: List[str] = field(
        default_factory=lambda: list(constants.SHARED_STYLESHEET_NAMES)
    )


@dataclass
class PreviewConfig:
    """Represents the high-level settings defined in .genpreview.yml."""

    root: Path
    extraction: ExtractionConfig = field(default_factory=ExtractionConfig)
    routing: RoutingConfig = field(default_factory=RoutingConfig)
    workers: Optional[int] = None


def load_config(config_path: Path) -> PreviewConfig:
    """Load configuration from disk, falling back to defaults when absent."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return PreviewConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    extraction = ExtractionConfig()
    extraction_data = _as_dict(data.get("extraction"))
    if extraction_data:
        min_body = _as_int(extraction_data.get("min_body_chars"))
        if min_body is not None and min_body >= 0:
            extraction.min_body_chars = min_body
        ratio = _as_float(extraction_data.get("max_placeholder_ratio"))
        if ratio is not None and 0.0 <= ratio <= 1.0:
            extraction.max_placeholder_ratio = ratio
        min_text = _as_int(extraction_data.get("min_visible_text_chars"))
        if min_text is not None and min_text >= 0:
            extraction.min_visible_text_chars = min_text
        copy_limit = _as_int(extraction_data.get("max_fallback_copy"))
        if copy_limit is not None and copy_limit > 0:
            extraction.max_fallback_copy = copy_limit
        stylesheet = _as_str(extraction_data.get("stylesheet_url"))
        if stylesheet:
            extraction.stylesheet_url = stylesheet

    routing = RoutingConfig()
    routing_data = _as_dict(data.get("routing"))
    if routing_data:
        roots = _as_str_list(routing_data.get("roots"))
        if roots:
            routing.roots = [root_dir.strip("/") for root_dir in roots]
        entries = _as_str_list(routing_data.get("entry_filenames"))
        if entries:
            routing.entry_filenames = entries
        stylesheets = _as_str_list(routing_data.get("shared_stylesheets"))
        if stylesheets:
            routing.shared_stylesheets = stylesheets

    workers = _as_int(data.get("workers"))
    if workers is not None and workers < 1:
        workers = None

    return PreviewConfig(root=root, extraction=extraction, routing=routing, workers=workers)


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


__all__ = ["ConfigError", "ExtractionConfig", "PreviewConfig", "RoutingConfig", "load_config"]
