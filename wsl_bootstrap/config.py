from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from .catalog import APPS, DISTRIBUTION, FEATURES, TASK_NAME, WSL_DEFAULT_VERSION, AppCatalogEntry, FeatureDescriptor
from .errors import ConfigError
from .lib.env import PATHS


@dataclass(frozen=True)
class ProvisionConfig:
    raw: Dict[str, Any] = field(default_factory=dict)

    @property
    def features(self) -> Tuple[FeatureDescriptor, ...]:
        items = self.raw.get("features")
        if items is None:
            return FEATURES
        if not isinstance(items, list):
            raise ConfigError("features must be a list")
        out: List[FeatureDescriptor] = []
        for item in items:
            if isinstance(item, str):
                out.append(FeatureDescriptor(item, item))
            elif isinstance(item, dict) and item.get("id"):
                out.append(FeatureDescriptor(str(item["id"]), str(item.get("label") or item["id"])))
            else:
                raise ConfigError(f"Invalid feature entry: {item!r}")
        return tuple(out)

    @property
    def apps(self) -> Tuple[AppCatalogEntry, ...]:
        items = self.raw.get("apps")
        if items is None:
            return APPS
        if not isinstance(items, list) or not all(isinstance(i, str) and i.strip() for i in items):
            raise ConfigError("apps must be a list of winget package ids")
        return tuple(AppCatalogEntry(i.strip()) for i in items)

    @property
    def distribution(self) -> str:
        return str(self.raw.get("distribution") or DISTRIBUTION)

    @property
    def wsl_default_version(self) -> int:
        return self._int("wsl_default_version", WSL_DEFAULT_VERSION)

    @property
    def task_name(self) -> str:
        return str(self.raw.get("task_name") or TASK_NAME)

    @property
    def restart_delay_seconds(self) -> int:
        return self._int("restart_delay_seconds", 10)

    @property
    def install_log(self) -> str:
        return str(self.raw.get("install_log") or PATHS.install_log_default)

    @property
    def abort_on_error(self) -> bool:
        return bool(self.raw.get("abort_on_error", False))

    @property
    def dry_run(self) -> bool:
        return bool(self.raw.get("dry_run", False))

    @property
    def min_os_major(self) -> int:
        return self._min_os("major", 10)

    @property
    def min_os_build(self) -> int:
        return self._min_os("build", 19041)

    def _min_os(self, key: str, default: int) -> int:
        min_os = self.raw.get("min_os") or {}
        if not isinstance(min_os, dict):
            raise ConfigError("min_os must be a mapping with major/build")
        try:
            return int(min_os.get(key, default))
        except (TypeError, ValueError) as e:
            raise ConfigError(f"min_os.{key} must be an integer") from e

    def _int(self, key: str, default: int) -> int:
        value = self.raw.get(key, default)
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigError(f"{key} must be an integer, got {value!r}")
        return value

    def validate(self) -> "ProvisionConfig":
        """Read every setting once so a bad value fails before anything is changed."""
        self.features
        self.apps
        self.wsl_default_version
        self.restart_delay_seconds
        self.min_os_major
        self.min_os_build
        return self

    def with_overrides(self, **overrides: Any) -> "ProvisionConfig":
        raw = dict(self.raw)
        raw.update({k: v for k, v in overrides.items() if v is not None})
        return ProvisionConfig(raw=raw).validate()


def load_config(path: Optional[str]) -> ProvisionConfig:
    """Load a YAML config; no path means built-in defaults."""

    if not path:
        return ProvisionConfig()

    p = Path(path)
    if not p.exists():
        raise ConfigError(f"Config file not found: {path}")
    if p.suffix.lower() not in {".yaml", ".yml"}:
        raise ConfigError("config must be YAML")

    try:
        import yaml  # type: ignore
    except Exception as e:
        raise RuntimeError("PyYAML is required to read the config file") from e

    try:
        raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    if not isinstance(raw, dict):
        raise ConfigError("config must contain a mapping/object")

    return ProvisionConfig(raw=raw).validate()
