from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from brightness_ctl.paths import default_config_path
from brightness_ctl.system.backlight import BACKLIGHT_DIR

log = logging.getLogger(__name__)

DEFAULT_ICON = "display-brightness-symbolic"


class ConfigError(ValueError):
    pass


def _expect(cfg: dict[str, Any], key: str, kind: type | tuple[type, ...], what: str) -> None:
    if key in cfg and cfg[key] is not None and not isinstance(cfg[key], kind):
        raise ConfigError(f"{key} must be {what}")


def defaults() -> dict[str, Any]:
    return {
        "backlight_dir": str(BACKLIGHT_DIR),
        "controller": None,
        "notifications": {"enabled": True, "icon": DEFAULT_ICON, "timeout_ms": -1},
    }


def load(path: str | Path | None = None) -> dict[str, Any]:
    """Load, validate and normalize the config file.

    Without an explicit ``path`` the per-user file is used if it exists, else
    the defaults. An explicit ``path`` must exist.
    """

    if path is None:
        p = default_config_path()
        if not p.is_file():
            log.debug("No config file at %s, using defaults", p)
            return normalize({})
    else:
        p = Path(path)

    try:
        text = p.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Failed to read config {p}: {e}") from e
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {p}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError("Top-level config must be a mapping")
    log.debug("Loaded config from %s", p)
    validate(data)
    return normalize(data)


def validate(cfg: dict[str, Any]) -> None:
    _expect(cfg, "backlight_dir", str, "a string")
    _expect(cfg, "controller", str, "a string")
    _expect(cfg, "notifications", dict, "a mapping")

    notifications = cfg.get("notifications") or {}
    _expect(notifications, "enabled", bool, "a boolean")
    _expect(notifications, "icon", str, "a string")
    timeout = notifications.get("timeout_ms")
    if timeout is not None and (
        isinstance(timeout, bool) or not isinstance(timeout, int) or timeout < -1
    ):
        raise ConfigError("notifications.timeout_ms must be an integer >= -1")


def normalize(cfg: dict[str, Any]) -> dict[str, Any]:
    out = defaults()

    backlight_dir = str(cfg.get("backlight_dir") or "").strip()
    if backlight_dir:
        out["backlight_dir"] = backlight_dir

    controller = str(cfg.get("controller") or "").strip()
    if controller:
        out["controller"] = controller

    notifications = cfg.get("notifications") or {}
    if notifications.get("enabled") is not None:
        out["notifications"]["enabled"] = bool(notifications["enabled"])
    icon = str(notifications.get("icon") or "").strip()
    if icon:
        out["notifications"]["icon"] = icon
    if notifications.get("timeout_ms") is not None:
        out["notifications"]["timeout_ms"] = int(notifications["timeout_ms"])

    return out
