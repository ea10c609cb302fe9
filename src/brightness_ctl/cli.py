from __future__ import annotations

import argparse
import logging
from typing import Any

from brightness_ctl import __version__
from brightness_ctl.config import ConfigError, load
from brightness_ctl.controller import Controller
from brightness_ctl.errors import BrightnessError
from brightness_ctl.logs import level_from_env, log_level, setup_logging
from brightness_ctl.notify import DesktopNotifier, Notify, disabled
from brightness_ctl.system.backlight import list_devices

log = logging.getLogger(__name__)


def _global_options(ap: argparse.ArgumentParser, prefix: str = "") -> None:
    # Registered on the main parser and on every subcommand so they may appear
    # on either side of the command; subcommand values use prefixed dests.
    ap.add_argument(
        "-v",
        "--verbose",
        dest=f"{prefix}verbose",
        action="count",
        default=0,
        help="Show more log messages.",
    )
    ap.add_argument(
        "-q",
        "--quiet",
        dest=f"{prefix}quiet",
        action="count",
        default=0,
        help="Show less log messages.",
    )
    ap.add_argument(
        "-c",
        "--controller",
        dest=f"{prefix}controller",
        metavar="NAME",
        help="The backlight controller to use. Defaults to the first available controller.",
    )


def _build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="brightness-ctl", description="Set or get the brightness of your display."
    )
    ap.add_argument("--version", action="version", version=__version__)
    ap.add_argument("--config", metavar="PATH", help="Read settings from this YAML file.")
    ap.add_argument(
        "--backlight-dir", metavar="DIR", help="Directory containing the backlight controllers."
    )
    ap.add_argument("--no-notify", action="store_true", help="Do not show a desktop notification.")
    _global_options(ap)

    sub = ap.add_subparsers(dest="cmd", required=True, metavar="COMMAND")

    for name, help_text, value_help in (
        (
            "up",
            "Increase the screen brightness with the given percentage.",
            "The percentage to increase the screen brightness with.",
        ),
        (
            "down",
            "Decrease the screen brightness with the given percentage.",
            "The percentage to decrease the screen brightness with.",
        ),
        (
            "set",
            "Set the screen brightness to the given percentage.",
            "The percentage to set the screen brightness to.",
        ),
    ):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("value", metavar="VALUE", type=float, help=value_help)
        _global_options(p, prefix="sub_")

    p = sub.add_parser("get", help="Print the current screen brightness as a percentage.")
    _global_options(p, prefix="sub_")
    p = sub.add_parser("list-controllers", help="Print a list of screen brightness controllers.")
    _global_options(p, prefix="sub_")

    return ap


def resolve_target(cmd: str, current: float, value: float) -> float:
    if cmd == "up":
        return current + value
    if cmd == "down":
        return current - value
    if cmd == "set":
        return value
    raise ValueError(f"not a write command: {cmd}")


def _notifier(args: argparse.Namespace, cfg: dict[str, Any], notify: Notify | None) -> Notify:
    notifications = cfg["notifications"]
    if args.no_notify or not notifications["enabled"]:
        return disabled
    if notify is not None:
        return notify
    return DesktopNotifier(icon=notifications["icon"], timeout_ms=notifications["timeout_ms"])


def _run(args: argparse.Namespace, cfg: dict[str, Any], notify: Notify | None) -> None:
    root = args.backlight_dir or cfg["backlight_dir"]

    if args.cmd == "list-controllers":
        for path in list_devices(root):
            print(path.name)
        return

    name = args.sub_controller or args.controller or cfg["controller"]
    if name:
        ctl = Controller.open_by_name(name, root)
    else:
        ctl = Controller.open_first(root)

    with ctl:
        brightness = ctl.get_percentage()
        if args.cmd == "get":
            print(f"{brightness:.0f}")
            return

        ctl.set_percentage(resolve_target(args.cmd, brightness, args.value))
        brightness = ctl.get_percentage()

    log.debug("Screen brightness is now %.1f%%", brightness)
    _notifier(args, cfg, notify)(brightness)


def main(argv: list[str] | None = None, notify: Notify | None = None) -> int:
    args = _build_parser().parse_args(argv)
    verbose = args.verbose + args.sub_verbose
    quiet = args.quiet + args.sub_quiet
    setup_logging(level_from_env(log_level(verbose, quiet)))

    try:
        cfg = load(args.config)
    except ConfigError as e:
        log.error("%s", e)
        return 1

    try:
        _run(args, cfg, notify)
    except BrightnessError:
        # Already logged with its context where it was raised.
        return 1
    return 0
