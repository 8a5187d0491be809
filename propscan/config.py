"""Configuration loading for propscan (.propscan.yml)."""

from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

import yaml

from .classifier import ErrorPolicy
from .locator import DEFAULT_COMPONENT_MARKERS
from .models import SIMPLE_KINDS

CONFIG_FILENAME = ".propscan.yml"
DEFAULT_CACHE_PATH = ".propscan/cache.json"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class CacheConfig:
    """Result cache settings."""

    enabled: bool = True
    path: str = DEFAULT_CACHE_PATH


@dataclass
class PropScanConfig:
    """Represents the settings defined in .propscan.yml."""

    root: Path
    error_policy: ErrorPolicy = ErrorPolicy.LENIENT
    component_markers: List[str] = field(default_factory=lambda: list(DEFAULT_COMPONENT_MARKERS))
    known_symbols: Dict[str, str] = field(default_factory=dict)
    exclude_paths: List[str] = field(default_factory=list)
    cache: CacheConfig = field(default_factory=CacheConfig)

    @property
    def cache_path(self) -> Path:
        return self.root / self.cache.path

    def signature(self) -> str:
        """Digest of every setting that changes extraction output."""
        payload = {
            "error_policy": self.error_policy.value,
            "component_markers": sorted(self.component_markers),
            "known_symbols": dict(sorted(self.known_symbols.items())),
        }
        encoded = json.dumps(payload, sort_keys=True).encode("utf-8")
        return hashlib.sha256(encoded).hexdigest()


def load_config(config_path: Path) -> PropScanConfig:
    """Load configuration from disk."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return PropScanConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    config = PropScanConfig(root=root)

    policy = _as_str(data.get("error_policy"))
    if policy is not None:
        try:
            config.error_policy = ErrorPolicy(policy.lower())
        except ValueError:
            allowed = ", ".join(p.value for p in ErrorPolicy)
            raise ConfigError(f"Unknown error_policy '{policy}' (expected one of: {allowed})") from None

    if "component_markers" in data:
        markers = _as_str_list(data.get("component_markers"))
        if not markers:
            raise ConfigError("component_markers must name at least one base type")
        config.component_markers = markers

    config.known_symbols = _known_symbols(_as_dict(data.get("known_symbols")))
    config.exclude_paths = _as_str_list(data.get("exclude_paths"))

    cache_data = _as_dict(data.get("cache"))
    if cache_data:
        enabled = _as_bool(cache_data.get("enabled"))
        config.cache = CacheConfig(
            enabled=True if enabled is None else enabled,
            path=_as_str(cache_data.get("path")) or DEFAULT_CACHE_PATH,
        )

    return config


def _known_symbols(raw: Mapping[str, Any]) -> Dict[str, str]:
    symbols: Dict[str, str] = {}
    for name, kind in raw.items():
        kind_str = _as_str(kind)
        if kind_str not in SIMPLE_KINDS:
            allowed = ", ".join(SIMPLE_KINDS)
            raise ConfigError(
                f"known_symbols entry '{name}' has unknown kind '{kind}' (expected one of: {allowed})"
            )
        symbols[str(name)] = kind_str
    return symbols


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Any:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Cannot read {path}: {exc}") from exc
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return {} if loaded is None else loaded


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


__all__ = [
    "CONFIG_FILENAME",
    "CacheConfig",
    "ConfigError",
    "PropScanConfig",
    "load_config",
]
