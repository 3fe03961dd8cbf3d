from __future__ import annotations

from typing import Any, Dict, Optional


def _with_overrides(
    base: Dict[str, Any],
    overrides: Optional[Dict[str, Any]] = None,
    **kwargs: Any,
) -> Dict[str, Any]:
    out = dict(base)
    if overrides:
        out.update(overrides)
    if kwargs:
        out.update(kwargs)
    return out


def build_config_v1(*, overrides: Optional[Dict[str, Any]] = None, **kwargs: Any) -> Dict[str, Any]:
    return _with_overrides({"config_version": 1}, overrides, **kwargs)


def build_linker_section(*, overrides: Optional[Dict[str, Any]] = None, **kwargs: Any) -> Dict[str, Any]:
    return _with_overrides({"device_id_prefix": "android", "finalize_max_attempts": 31}, overrides, **kwargs)


def build_logging_section(log_dir: str, *, overrides: Optional[Dict[str, Any]] = None, **kwargs: Any) -> Dict[str, Any]:
    return _with_overrides({"log_dir": log_dir, "level": "INFO", "events_path": ""}, overrides, **kwargs)
