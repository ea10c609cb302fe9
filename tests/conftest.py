from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

import pytest


def make_device(root: Path, name: str, brightness: str | None, max_brightness: str | None) -> Path:
    dev = root / name
    dev.mkdir(parents=True)
    if brightness is not None:
        (dev / "brightness").write_text(brightness, encoding="utf-8")
    if max_brightness is not None:
        (dev / "max_brightness").write_text(max_brightness, encoding="utf-8")
    return dev


@pytest.fixture
def backlight_root(tmp_path: Path) -> Path:
    root = tmp_path / "backlight"
    root.mkdir()
    return root


@pytest.fixture
def device(backlight_root: Path) -> Callable[..., Path]:
    def factory(
        name: str = "fake0", brightness: str | None = "128", max_brightness: str | None = "255"
    ) -> Path:
        return make_device(backlight_root, name, brightness, max_brightness)

    return factory


@pytest.fixture(autouse=True)
def _isolate(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    # Keep the user's config and log settings out of the tests.
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg-config"))
    monkeypatch.delenv("BRIGHTNESS_CTL_LOG", raising=False)
    yield
    logger = logging.getLogger("brightness_ctl")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
