"""Configuration loading for bazelide (.bazelide.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Sequence, Tuple

import yaml

CONFIG_FILENAME = ".bazelide.yml"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


class IncludeAnchor(str, Enum):
    """How relative include directories are anchored in editor configuration."""

    EXECROOT = "execroot"
    WORKSPACE = "workspace"


@dataclass(frozen=True)
class Settings:
    """Immutable configuration snapshot passed to every operation."""

    executable_path: str = "bazel"
    package_excludes: Tuple[str, ...] = field(default_factory=tuple)
    raw_label_display: bool = False
    auto_detect_tasks: bool = True
    include_anchor: IncludeAnchor = IncludeAnchor.EXECROOT
    confirm_overwrite: bool = False
    java_compliance: str = "1.8"
    descriptor_marker: str = ".bazelide-descriptor"

    def with_overrides(self, **changes: Any) -> "Settings":
        """Return a copy with the non-None overrides applied."""
        applied = {key: value for key, value in changes.items() if value is not None}
        return replace(self, **applied) if applied else self


def load_config(config_path: Path) -> Settings:
    """Load settings from a workspace directory or an explicit file."""
    config_file = _resolve_config_path(config_path)
    if not config_file.exists():
        return Settings()

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    defaults = Settings()
    bazel_data = _as_dict(data.get("bazel"))
    display_data = _as_dict(data.get("display"))
    tasks_data = _as_dict(data.get("tasks"))
    cpp_data = _as_dict(data.get("cpp"))
    java_data = _as_dict(data.get("java"))
    descriptor_data = _as_dict(data.get("descriptors"))

    anchor_name = _as_str(cpp_data.get("include_anchor"))
    include_anchor = defaults.include_anchor
    if anchor_name is not None:
        try:
            include_anchor = IncludeAnchor(anchor_name.strip().lower())
        except ValueError as exc:
            choices = ", ".join(anchor.value for anchor in IncludeAnchor)
            raise ConfigError(
                f"cpp.include_anchor must be one of {choices}, got {anchor_name!r}"
            ) from exc

    return Settings(
        executable_path=_as_str(bazel_data.get("executable_path")) or defaults.executable_path,
        package_excludes=tuple(_as_str_list(bazel_data.get("package_excludes"))),
        raw_label_display=_bool_or(display_data.get("raw_labels"), defaults.raw_label_display),
        auto_detect_tasks=_bool_or(tasks_data.get("auto_detect"), defaults.auto_detect_tasks),
        include_anchor=include_anchor,
        confirm_overwrite=_bool_or(cpp_data.get("confirm_overwrite"), defaults.confirm_overwrite),
        java_compliance=_as_str(java_data.get("compliance")) or defaults.java_compliance,
        descriptor_marker=_as_str(descriptor_data.get("marker")) or defaults.descriptor_marker,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Any:
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


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "on", "1"}:
            return True
        if lowered in {"false", "no", "off", "0"}:
            return False
    return None


def _bool_or(value: Any, default: bool) -> bool:
    parsed = _as_bool(value)
    return default if parsed is None else parsed


def _as_str_list(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


__all__ = ["CONFIG_FILENAME", "ConfigError", "IncludeAnchor", "Settings", "load_config"]
