"""Type definitions for the Hue temperature client.

This module provides the dataclasses, enums and TypedDicts shared between the
bridge lifecycle code in core/ and the CLI commands.
"""

import ipaddress
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import TypedDict


class DiscoveredBridge(TypedDict):
    """Bridge information from the Philips discovery service."""
    id: str
    internalipaddress: str


def is_ipv4_address(value: str) -> bool:
    """Check that value is an IPv4 literal such as '192.168.1.20'."""
    try:
        ipaddress.IPv4Address(value)
    except (ipaddress.AddressValueError, ValueError):
        return False
    return True


@dataclass(frozen=True)
class Credentials:
    """Bridge address and the bridge-issued username token."""
    bridge_address: str
    username: str

    def to_config(self) -> dict:
        """Serialise to the persisted 'hueConfig' shape."""
        return {'bridgeIp': self.bridge_address, 'username': self.username}

    @classmethod
    def from_config(cls, data) -> 'Credentials | None':
        """Build credentials from a 'hueConfig' dict.

        Returns None unless the username is a non-empty string and bridgeIp is
        an IPv4 literal, so a partially written or hand-edited config never
        yields half a credential.
        """
        if not isinstance(data, dict):
            return None

        bridge_ip = data.get('bridgeIp')
        username = data.get('username')

        if not (isinstance(bridge_ip, str) and isinstance(username, str) and username):
            return None
        if not is_ipv4_address(bridge_ip):
            return None
        return cls(bridge_address=bridge_ip, username=username)


class ConnectionState(Enum):
    """Binary bridge health signal."""
    CONNECTED = 'connected'
    DISCONNECTED = 'disconnected'


class PairingStep(Enum):
    """Steps of the link button handshake."""
    INPUT = 'input'
    AWAITING_BUTTON_PRESS = 'awaiting_button_press'
    SUCCESS = 'success'
    TIMED_OUT = 'timed_out'
    HARD_ERROR = 'hard_error'

    @property
    def is_terminal(self) -> bool:
        return self in (PairingStep.SUCCESS, PairingStep.TIMED_OUT, PairingStep.HARD_ERROR)


@dataclass(frozen=True)
class PairingState:
    """One state emitted by the pairing coordinator."""
    step: PairingStep
    attempts_made: int = 0
    username: str | None = None
    error: str | None = None


@dataclass
class PairingSession:
    """A single run of the pairing handshake against one bridge address."""
    session_id: int
    bridge_address: str
    device_type: str
    max_attempts: int
    attempts_made: int = 0
    state: PairingState = field(default_factory=lambda: PairingState(PairingStep.INPUT))
    history: list[PairingState] = field(default_factory=list)


@dataclass(frozen=True)
class SensorReading:
    """Raw sensor record as listed by the bridge."""
    id: str
    type: str
    name: str
    temperature_raw: int | None


@dataclass(frozen=True)
class TemperatureReading:
    """Decoded temperature ready for display."""
    temperature_celsius: float
    observed_at: datetime
    sensor_name: str


@dataclass(frozen=True)
class Notification:
    """User-visible message handed to the presentation layer."""
    title: str
    description: str
    destructive: bool = False
