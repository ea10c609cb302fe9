from __future__ import annotations

import compileall
import importlib
from pathlib import Path


def test_compileall_src() -> None:
    src = Path(__file__).resolve().parents[1] / "src"
    ok = compileall.compile_dir(str(src), quiet=1)
    assert ok


def test_import_packages() -> None:
    importlib.import_module("brightness_ctl")
    importlib.import_module("brightness_ctl.cli")
    importlib.import_module("brightness_ctl.config")
    importlib.import_module("brightness_ctl.controller")
    importlib.import_module("brightness_ctl.notify")
    importlib.import_module("brightness_ctl.system.backlight")
