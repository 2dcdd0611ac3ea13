"""Pytest configuration and fixtures for Hue temperature tests."""

import pytest
from pathlib import Path

from core.config import CredentialStore
from core.scheduler import Scheduler
from core.widget import WidgetController
from models.responses import classify_registration_response, parse_sensors
from models.types import Credentials


class ManualClock:
    """Clock for sched.scheduler: sleeping just moves time forward."""

    def __init__(self):
        self.now = 0.0

    def time(self) -> float:
        return self.now

    def sleep(self, seconds: float):
        self.now += seconds


class FakeBridge:
    """Scripted stand-in for BridgeClient, usable as its client_factory.

    Replies are consumed in order; the last one repeats. A reply that is an
    exception instance is raised instead of returned.
    """

    def __init__(self):
        self.register_replies = []
        self.sensor_replies = []
        self.register_calls = 0
        self.sensor_calls = 0
        self.close_calls = 0
        self.addresses = []
        self.device_types = []
        self.usernames = []
        self.on_register = None
        self.on_get_sensors = None

    def __call__(self, bridge_address):
        self.addresses.append(bridge_address)
        return self

    @staticmethod
    def _next(replies):
        reply = replies.pop(0) if len(replies) > 1 else replies[0]
        if isinstance(reply, Exception):
            raise reply
        return reply

    def register(self, device_type):
        self.register_calls += 1
        self.device_types.append(device_type)
        if self.on_register:
            self.on_register()
        return classify_registration_response(self._next(self.register_replies))

    def get_sensors(self, username):
        self.sensor_calls += 1
        self.usernames.append(username)
        if self.on_get_sensors:
            self.on_get_sensors()
        return parse_sensors(self._next(self.sensor_replies))

    def close(self):
        self.close_calls += 1


def outdoor_sensors(temperature=2150, name="Outdoor sensor"):
    """Sensor listing with one outdoor temperature sensor."""
    return {
        "1": {"type": "ZLLTemperature", "name": name, "state": {"temperature": temperature}},
    }


@pytest.fixture
def project_root():
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def scheduler(clock):
    return Scheduler(clock.time, clock.sleep)


@pytest.fixture
def config_path(tmp_path):
    return tmp_path / 'hue' / 'config.json'


@pytest.fixture
def store(config_path):
    return CredentialStore(config_path)


@pytest.fixture
def credentials():
    return Credentials(bridge_address='192.168.1.20', username='abc123')


@pytest.fixture
def bridge():
    return FakeBridge()


@pytest.fixture
def notifications():
    return []


@pytest.fixture
def widget(store, scheduler, bridge, notifications):
    """WidgetController wired to the fake bridge and manual clock."""
    return WidgetController(
        store,
        scheduler,
        client_factory=bridge,
        discover=lambda: '192.168.1.20',
        notify=notifications.append,
    )
