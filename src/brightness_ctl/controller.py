from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import BinaryIO

from brightness_ctl.errors import (
    CannotOpenBrightnessFile,
    InvalidBrightnessValue,
    InvalidMaxBrightness,
    NoSuchController,
    NoWorkingController,
    OpenError,
    WriteError,
)
from brightness_ctl.system.backlight import BACKLIGHT_DIR, BacklightDevice, list_devices

log = logging.getLogger(__name__)


def clamp(value: int, lo: int, hi: int) -> int:
    return max(lo, min(value, hi))


def percentage_to_raw(percentage: float, max_brightness: int) -> int:
    """Convert a percentage to a raw device value in ``[0, max_brightness]``.

    Out of range percentages clamp silently. NaN maps to zero.
    """

    scaled = percentage / 100.0 * max_brightness
    if math.isnan(scaled):
        return 0
    # Bound before rounding so infinities do not overflow int().
    scaled = max(-1.0, min(scaled, max_brightness + 1.0))
    return clamp(round(scaled), 0, max_brightness)


def raw_to_percentage(raw: int, max_brightness: int) -> float:
    return raw / max_brightness * 100.0


def _parse_uint(data: bytes) -> int:
    text = data.decode("utf-8").strip()
    digits = text[1:] if text.startswith("+") else text
    if not (digits.isascii() and digits.isdigit()):
        raise ValueError(f"invalid digit found in {text!r}")
    return int(digits)


def _read_uint(path: Path, fh: BinaryIO, error: type[OpenError], logger: logging.Logger) -> int:
    try:
        data = fh.read()
    except OSError as e:
        logger.error("Failed to read from %s: %s", path, e)
        raise error(f"Failed to read from {path}: {e}") from e
    try:
        return _parse_uint(data)
    except UnicodeDecodeError as e:
        logger.error("Invalid UTF-8 in %s: %s", path, e)
        raise error(f"Invalid UTF-8 in {path}: {e}") from e
    except ValueError as e:
        logger.error("Failed to parse %s: %s", path, e)
        raise error(f"Failed to parse {path}: {e}") from e


def _read_max(path: Path, logger: logging.Logger) -> int:
    try:
        fh = open(path, "rb")
    except OSError as e:
        logger.error("Failed to open %s: %s", path, e)
        raise InvalidMaxBrightness(f"Failed to open {path}: {e}") from e
    with fh:
        value = _read_uint(path, fh, InvalidMaxBrightness, logger)
    if value == 0:
        logger.error("Maximum brightness in %s is zero", path)
        raise InvalidMaxBrightness(f"Maximum brightness in {path} is zero")
    return value


class Controller:
    """An open backlight device.

    The brightness file stays open for reading and writing until ``close()``.
    ``value`` caches the raw brightness from the last read or write and is the
    source for ``get_percentage()``; the device is never re-read after a write.
    """

    def __init__(
        self,
        fh: BinaryIO,
        value: int,
        max_brightness: int,
        path: Path,
        logger: logging.Logger | None = None,
    ):
        self._file = fh
        self.value = value
        self.max = max_brightness
        self.path = path
        self._log = logger or log

    def __repr__(self) -> str:
        return f"Controller(path={str(self.path)!r}, value={self.value}, max={self.max})"

    def __enter__(self) -> Controller:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    @classmethod
    def open(cls, path: str | Path, logger: logging.Logger | None = None) -> Controller:
        logger = logger or log
        device = BacklightDevice(Path(path))
        logger.debug("Opening controller with path: %s", device.sysfs_dir)

        try:
            # "r+b" neither creates nor truncates the file.
            fh = open(device.brightness, "r+b", buffering=0)
        except OSError as e:
            logger.error("Failed to open %s for reading and writing: %s", device.brightness, e)
            raise CannotOpenBrightnessFile(
                f"Failed to open {device.brightness} for reading and writing: {e}"
            ) from e

        try:
            value = _read_uint(device.brightness, fh, InvalidBrightnessValue, logger)
            max_value = _read_max(device.max_brightness, logger)
        except OpenError:
            fh.close()
            raise

        if value > max_value:
            logger.warning(
                "Brightness %d in %s exceeds maximum %d, treating it as %d",
                value,
                device.brightness,
                max_value,
                max_value,
            )
            value = max_value

        return cls(fh, value, max_value, device.brightness, logger=logger)

    @classmethod
    def open_by_name(
        cls,
        name: str,
        root: str | Path = BACKLIGHT_DIR,
        logger: logging.Logger | None = None,
    ) -> Controller:
        logger = logger or log
        # Only plain entry names; "../x" or "a/b" would escape the device root.
        if name in ("", ".", "..") or "/" in name or "\0" in name:
            logger.error("Invalid controller name: %r", name)
            raise NoSuchController(f"Invalid controller name: {name!r}")

        path = Path(root) / name
        if not path.is_dir():
            logger.error("No such controller: %s", path)
            raise NoSuchController(f"No such controller: {path}")
        return cls.open(path, logger=logger)

    @classmethod
    def open_first(
        cls, root: str | Path = BACKLIGHT_DIR, logger: logging.Logger | None = None
    ) -> Controller:
        """Open the first device in directory order that opens successfully."""

        logger = logger or log
        for path in list_devices(root, logger=logger):
            try:
                ctl = cls.open(path, logger=logger)
            except OpenError as e:
                logger.debug("Skipping controller %s: %s", path, e)
                continue
            logger.debug("Using controller at %s", path)
            return ctl

        logger.error("Failed to find any working controller in %s", root)
        raise NoWorkingController(f"Failed to find any working controller in {root}")

    def get_percentage(self) -> float:
        return raw_to_percentage(self.value, self.max)

    def set_percentage(self, value: float) -> None:
        raw = percentage_to_raw(value, self.max)
        # The cache is updated before the write, even if the write fails.
        self.value = raw
        self._log.debug("Writing raw brightness %d/%d to %s", raw, self.max, self.path)
        try:
            self._file.seek(0)
            self._file.write(str(raw).encode("ascii"))
            self._file.truncate()
        except OSError as e:
            self._log.error("Failed to write to %s: %s", self.path, e)
            raise WriteError(f"Failed to write to {self.path}: {e}") from e

    def close(self) -> None:
        self._file.close()
