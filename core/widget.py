"""WidgetController: the surface the presentation layer talks to.

It owns the credential store, the pairing coordinator and the telemetry
poller, and exposes what a display needs:

- connection_state, reading, is_loading, needs_setup
- refresh(), begin_setup(), discover(), pair(), complete_setup(), teardown()

Errors are reported as Notification values through the notify callback.
"""

import logging
from typing import Callable

from core import discovery
from core.bridge import BridgeClient
from core.config import CredentialStore, POLL_INTERVAL_SECONDS
from core.connection import ConnectionTracker
from core.errors import HueTemperatureError, NoCredentials, NoSensorFound
from core.pairing import PairingCoordinator
from core.poller import TelemetryPoller
from core.scheduler import Scheduler
from models.types import (
    ConnectionState,
    Credentials,
    Notification,
    PairingSession,
    PairingState,
    PairingStep,
    TemperatureReading,
)

logger = logging.getLogger(__name__)


class WidgetController:
    """Wires the bridge lifecycle components together."""

    def __init__(self, store: CredentialStore, scheduler: Scheduler | None = None,
                 client_factory: Callable[[str], BridgeClient] = BridgeClient,
                 discover: Callable[[], str | None] = discovery.first_bridge_address,
                 notify: Callable[[Notification], None] | None = None,
                 on_reading: Callable[[TemperatureReading], None] | None = None,
                 on_pairing_state: Callable[[PairingSession, PairingState], None] | None = None,
                 interval: float = POLL_INTERVAL_SECONDS):
        self.store = store
        self.scheduler = scheduler or Scheduler()
        self.notify = notify
        self.on_reading = on_reading
        self.on_pairing_state = on_pairing_state
        self._discover = discover

        self.tracker = ConnectionTracker()
        self.poller = TelemetryPoller(
            self.scheduler,
            tracker=self.tracker,
            client_factory=client_factory,
            on_reading=self._handle_reading,
            on_error=self._handle_poll_error,
            interval=interval,
        )
        self.pairing = PairingCoordinator(
            store,
            self.scheduler,
            tracker=self.tracker,
            client_factory=client_factory,
            on_state=self._handle_pairing_state,
        )
        self.credentials: Credentials | None = None

    @property
    def connection_state(self) -> ConnectionState:
        return self.tracker.state

    @property
    def reading(self) -> TemperatureReading | None:
        return self.poller.reading

    @property
    def is_loading(self) -> bool:
        return self.poller.is_loading

    @property
    def needs_setup(self) -> bool:
        return self.credentials is None

    def _notify(self, title: str, description: str, destructive: bool = True):
        if self.notify:
            self.notify(Notification(title, description, destructive))

    def init(self) -> bool:
        """Load saved credentials and start polling if there are any.

        Returns:
            True if the poller was started, False if setup is required
        """
        self.credentials = self.store.load()
        if self.credentials is None:
            logger.info("No saved credentials, setup required")
            return False
        self.poller.start(self.credentials)
        return True

    def refresh(self) -> TemperatureReading | None:
        """Poll right now (skipped if a poll is already running).

        Between begin_setup() and complete_setup() the saved credentials are
        kept but the poller is stopped, so nothing is fetched.
        """
        try:
            return self.poller.poll_once()
        except NoCredentials:
            if self.credentials is None:
                self._notify("Setup Required", "Connect to your Philips Hue Bridge first")
            else:
                logger.info("Refresh ignored while setup is in progress")
                self._notify("Polling Paused", "Finish bridge setup to resume temperature updates")
            return None

    def begin_setup(self):
        """Leave the display: stop polling and reset any pairing session."""
        self.poller.stop()
        self.pairing.cancel()

    def discover(self) -> str | None:
        """Look up a bridge address, suggesting manual entry on failure."""
        try:
            address = self._discover()
        except HueTemperatureError as e:
            logger.warning("Bridge discovery failed: %s", e)
            self._notify("Discovery Failed", "Please enter your bridge IP manually")
            return None

        if address:
            self._notify("Bridge Found", f"Found Hue Bridge at {address}", destructive=False)
        else:
            self._notify("No Bridge Found", "Please enter your bridge IP manually")
        return address

    def pair(self, bridge_address: str) -> PairingSession | None:
        """Start the link button handshake against bridge_address."""
        try:
            return self.pairing.start_pairing(bridge_address)
        except ValueError as e:
            self._notify("Bridge IP Required", str(e))
            return None

    def complete_setup(self) -> bool:
        """Return to the display after pairing and start polling."""
        self.pairing.cancel()
        return self.init()

    def teardown(self):
        self.poller.stop()
        self.pairing.cancel()

    def _handle_reading(self, reading: TemperatureReading):
        if self.on_reading:
            self.on_reading(reading)

    def _handle_poll_error(self, error: HueTemperatureError):
        if isinstance(error, NoSensorFound):
            self._notify("No Sensor Found", str(error))
        else:
            self._notify("Connection Error", f"Failed to fetch temperature from Hue sensor: {error}")

    def _handle_pairing_state(self, session: PairingSession, state: PairingState):
        if state.step is PairingStep.SUCCESS:
            self.credentials = Credentials(session.bridge_address, state.username)
            self._notify("Connected Successfully",
                         f"Paired with Hue Bridge at {session.bridge_address}", destructive=False)
        elif state.step is PairingStep.TIMED_OUT:
            self._notify("Pairing Timeout",
                         "Please try again and press the bridge button within 30 seconds")
        elif state.step is PairingStep.HARD_ERROR:
            self._notify("Connection Failed", state.error or "Failed to connect to Hue Bridge")

        if self.on_pairing_state:
            self.on_pairing_state(session, state)
