from __future__ import annotations


class BrightnessError(RuntimeError):
    pass


class EnumerationError(BrightnessError):
    pass


class OpenError(BrightnessError):
    pass


class CannotOpenBrightnessFile(OpenError):
    pass


class InvalidBrightnessValue(OpenError):
    pass


class InvalidMaxBrightness(OpenError):
    pass


class NoWorkingController(OpenError):
    pass


class NoSuchController(OpenError):
    """The requested controller name does not refer to a device directory."""


class WriteError(BrightnessError):
    pass
