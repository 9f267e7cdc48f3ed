"""Pytest configuration. Puts `src/` on sys.path so tests run without an install."""
import logging
import sys
from pathlib import Path

import pytest

SRC = Path(__file__).resolve().parents[1] / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from playmetrics.analytics.store import EventStore  # noqa: E402


class FakeClock:
    def __init__(self, start: int = 1_700_000_000_000, step: int = 1000) -> None:
        self.now = start
        self.step = step

    def __call__(self) -> int:
        value = self.now
        self.now += self.step
        return value


class RecordingChannel:
    """Instrumented channel: counts calls and optionally raises."""

    def __init__(self, name, calls, *, eligible=True, fail=False, durable=False):
        self.name = name
        self._calls = calls
        self.eligible = eligible
        self.fail = fail
        self.durable = durable
        self.payloads = []

    def is_eligible(self):
        return self.eligible

    def attempt(self, payload):
        self._calls.append(self.name)
        self.payloads.append(payload)
        if self.fail:
            raise RuntimeError(f"{self.name} boom")


class FakeWebview:
    def __init__(self, fail=False):
        self.messages = []
        self.fail = fail

    def post_message(self, serialized):
        if self.fail:
            raise RuntimeError("webview closed")
        self.messages.append(serialized)


class FakeParent:
    def __init__(self, fail=False):
        self.messages = []
        self.fail = fail

    def post_message(self, payload, target_origin):
        if self.fail:
            raise RuntimeError("frame detached")
        self.messages.append((payload, target_origin))


class FakeBridge:
    def __init__(self, fail=False):
        self.reports = []
        self.fail = fail

    def send_analytics(self, payload):
        if self.fail:
            raise RuntimeError("bridge rejected")
        self.reports.append(payload)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    return EventStore(clock=clock)


@pytest.fixture
def calls():
    return []


@pytest.fixture(autouse=True)
def _restore_package_log_level():
    yield
    logging.getLogger("playmetrics").setLevel(logging.NOTSET)
