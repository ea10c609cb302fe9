from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

from brightness_ctl.errors import EnumerationError
from brightness_ctl.logs import TRACE

BACKLIGHT_DIR = Path("/sys/class/backlight")

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class BacklightDevice:
    sysfs_dir: Path

    @property
    def name(self) -> str:
        return self.sysfs_dir.name

    @property
    def brightness(self) -> Path:
        return self.sysfs_dir / "brightness"

    @property
    def max_brightness(self) -> Path:
        return self.sysfs_dir / "max_brightness"


def list_devices(
    root: str | Path = BACKLIGHT_DIR, logger: logging.Logger | None = None
) -> Iterator[Path]:
    """Return a lazy iterator over the device directories below ``root``.

    The directory is opened immediately so a missing or unreadable root raises
    ``EnumerationError`` here rather than on first iteration. Entries come out
    in directory order, which is filesystem defined and not sorted.
    """

    logger = logger or log
    root = Path(root)
    try:
        it = os.scandir(root)
    except OSError as e:
        logger.error("Failed to open directory %s: %s", root, e)
        raise EnumerationError(f"Failed to open directory {root}: {e}") from e
    return _iter_entries(it, root, logger)


def _iter_entries(it: os.ScandirIterator, root: Path, logger: logging.Logger) -> Iterator[Path]:
    with it:
        while True:
            try:
                entry = next(it)
            except StopIteration:
                return
            except OSError as e:
                # The directory stream is unusable after a read error; keep what was listed.
                logger.error("Failed to read entry of %s: %s", root, e)
                return

            # Backlight entries are symlinks into /sys/devices; stat follows them.
            try:
                entry.stat()
            except OSError as e:
                logger.warning("Entry %s of %s is not readable: %s", entry.name, root, e)
            logger.log(TRACE, "Found backlight entry %s", entry.path)
            yield Path(entry.path)
