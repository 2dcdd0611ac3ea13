"""Link button pairing handshake.

PairingCoordinator drives one PairingSession at a time:

    INPUT -> AWAITING_BUTTON_PRESS -> SUCCESS | TIMED_OUT | HARD_ERROR

Each registration attempt runs as a scheduler continuation tagged with its
session id. Starting a new session or calling cancel() bumps the id, so a
continuation that was already queued for an older session does nothing.
"""

import itertools
import logging
from typing import Callable

from core.bridge import BridgeClient
from core.config import CredentialStore, DEVICE_TYPE, PAIRING_MAX_ATTEMPTS, PAIRING_RETRY_DELAY
from core.connection import ConnectionTracker
from core.errors import PairingNotReady, PairingRejected, ProtocolError, TransportError
from core.scheduler import ScheduledTask, Scheduler
from models.responses import expect_username
from models.types import Credentials, PairingSession, PairingState, PairingStep, is_ipv4_address

logger = logging.getLogger(__name__)


class PairingCoordinator:
    """Obtains a bridge username through the physical button press."""

    def __init__(self, store: CredentialStore, scheduler: Scheduler,
                 tracker: ConnectionTracker | None = None,
                 client_factory: Callable[[str], BridgeClient] = BridgeClient,
                 on_state: Callable[[PairingSession, PairingState], None] | None = None,
                 device_type: str = DEVICE_TYPE,
                 max_attempts: int = PAIRING_MAX_ATTEMPTS,
                 retry_delay: float = PAIRING_RETRY_DELAY):
        self.store = store
        self.scheduler = scheduler
        self.tracker = tracker or ConnectionTracker()
        self.client_factory = client_factory
        self.on_state = on_state
        self.device_type = device_type
        self.max_attempts = max_attempts
        self.retry_delay = retry_delay

        self.state = PairingState(PairingStep.INPUT)
        self.session: PairingSession | None = None
        self._session_ids = itertools.count(1)
        self._task: ScheduledTask | None = None
        self._client: BridgeClient | None = None

    def _is_live(self, session_id: int) -> bool:
        return self.session is not None and self.session.session_id == session_id

    def _emit(self, session: PairingSession, state: PairingState):
        session.state = state
        session.history.append(state)
        self.state = state
        logger.debug("Pairing session %d: %s (attempt %d/%d)",
                     session.session_id, state.step.value, state.attempts_made, session.max_attempts)
        if self.on_state:
            self.on_state(session, state)

    def _release_client(self):
        if self._client is not None:
            self._client.close()
            self._client = None

    def _finish(self, session: PairingSession, step: PairingStep,
                username: str | None = None, error: str | None = None):
        self.session = None
        self._task = None
        self._release_client()
        self._emit(session, PairingState(step, session.attempts_made, username, error))

    def start_pairing(self, bridge_address: str) -> PairingSession:
        """Begin a new handshake against bridge_address.

        Any session already in flight is invalidated first and attempt
        counting starts from zero. The first registration request is queued
        on the scheduler immediately.

        Raises:
            ValueError: If bridge_address is blank or not an IPv4 address
        """
        address = (bridge_address or '').strip()
        if not address:
            raise ValueError("Bridge IP address is required")
        if not is_ipv4_address(address):
            raise ValueError(f"Not a valid IPv4 address: {address}")

        self.cancel()

        session = PairingSession(
            session_id=next(self._session_ids),
            bridge_address=address,
            device_type=self.device_type,
            max_attempts=self.max_attempts,
        )
        self.session = session
        self._client = self.client_factory(address)
        logger.info("Starting pairing session %d with bridge %s", session.session_id, address)

        self._task = self.scheduler.call_later(0, self._attempt, session.session_id)
        self._emit(session, PairingState(PairingStep.AWAITING_BUTTON_PRESS))
        return session

    def cancel(self):
        """Invalidate the live session, if any, and return to INPUT."""
        if self._task is not None:
            self._task.cancel()
            self._task = None
        if self.session is not None:
            logger.info("Cancelled pairing session %d", self.session.session_id)
        self._release_client()
        self.session = None
        self.state = PairingState(PairingStep.INPUT)

    def _attempt(self, session_id: int):
        if not self._is_live(session_id):
            logger.debug("Ignoring stale pairing attempt for session %d", session_id)
            return

        session = self.session
        client = self._client
        self._task = None

        try:
            username = expect_username(client.register(session.device_type))
        except PairingNotReady:
            if not self._is_live(session_id):
                return
            # The bridge answered, it just hasn't seen the button yet
            self.tracker.record_success()
            session.attempts_made += 1
            if session.attempts_made < session.max_attempts:
                self._task = self.scheduler.call_later(self.retry_delay, self._attempt, session_id)
                self._emit(session, PairingState(PairingStep.AWAITING_BUTTON_PRESS, session.attempts_made))
            else:
                self._finish(session, PairingStep.TIMED_OUT,
                             error=f"Link button not pressed after {session.max_attempts} attempts")
            return
        except (TransportError, ProtocolError, PairingRejected) as e:
            if not self._is_live(session_id):
                return
            logger.warning("Pairing with %s failed: %s", session.bridge_address, e)
            self.tracker.record_failure()
            session.attempts_made += 1
            self._finish(session, PairingStep.HARD_ERROR, error=str(e))
            return

        if not self._is_live(session_id):
            return

        self.tracker.record_success()
        session.attempts_made += 1
        try:
            self.store.save(Credentials(session.bridge_address, username))
        except OSError as e:
            self._finish(session, PairingStep.HARD_ERROR,
                         error=f"Paired, but failed to save credentials: {e}")
            return
        self._finish(session, PairingStep.SUCCESS, username=username)
