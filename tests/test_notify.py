from __future__ import annotations

import logging

import pytest

from brightness_ctl import notify
from brightness_ctl.notify import DesktopNotifier, disabled, hints, summary


def test_summary_rounds() -> None:
    assert summary(59.6) == "Screen brightness: 60%"
    assert summary(0.0) == "Screen brightness: 0%"


def test_value_hint_is_int32() -> None:
    h = hints(60.4)
    assert list(h) == ["value"]
    assert h["value"].signature == "i"
    assert h["value"].value == 60


def test_disabled_notifier_succeeds() -> None:
    assert disabled(42.0) is True


def test_notifier_failure_is_logged_not_raised(
    monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    async def fail(self, percentage: float) -> None:
        raise OSError(2, "No such file or directory")

    monkeypatch.setattr(DesktopNotifier, "_send", fail)
    with caplog.at_level(logging.ERROR, logger="brightness_ctl"):
        assert DesktopNotifier()(50.0) is False
    assert "Failed to show notification" in caplog.text


def test_notifier_sends_notify_call(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[tuple] = []

    class FakeInterface:
        async def call_notify(self, *args):
            calls.append(args)
            return 1

    class FakeObject:
        def get_interface(self, name: str) -> FakeInterface:
            assert name == notify.BUS
            return FakeInterface()

    class FakeBus:
        disconnected = False

        async def connect(self) -> FakeBus:
            return self

        async def introspect(self, bus: str, path: str) -> object:
            assert (bus, path) == (notify.BUS, notify.OBJ)
            return object()

        def get_proxy_object(self, bus: str, path: str, introspection: object) -> FakeObject:
            return FakeObject()

        def disconnect(self) -> None:
            FakeBus.disconnected = True

    monkeypatch.setattr(notify, "MessageBus", FakeBus)

    assert DesktopNotifier(icon="my-icon", timeout_ms=1500)(59.8) is True
    assert FakeBus.disconnected

    app, replaces, icon, text, body, actions, hint, timeout = calls[0]
    assert app == "brightness-ctl"
    assert replaces == notify.NOTIFICATION_ID
    assert icon == "my-icon"
    assert text == "Screen brightness: 60%"
    assert body == ""
    assert actions == []
    assert hint["value"].value == 60
    assert timeout == 1500
