"""BridgeClient for the Hue Bridge local v1 API.

Covers the two calls this client needs: registering a new username via the
link button (POST /api) and listing sensors (GET /api/<username>/sensors).
Transport failures and bad responses are raised as TransportError and
ProtocolError; interpreting the payload is left to models.responses.
"""

import logging

import requests

from core.config import REQUEST_TIMEOUT
from core.errors import ProtocolError, TransportError
from models.responses import RegistrationResponse, classify_registration_response, parse_sensors
from models.types import SensorReading

logger = logging.getLogger(__name__)


class BridgeClient:
    """Manages HTTP requests to one Philips Hue Bridge."""

    def __init__(self, bridge_address: str, session: requests.Session | None = None,
                 timeout: float = REQUEST_TIMEOUT):
        """Initialise BridgeClient.

        Args:
            bridge_address: Bridge IP address
            session: Optional shared requests session
            timeout: Per-request timeout in seconds
        """
        self.bridge_address = bridge_address
        self.base_url = f"http://{bridge_address}/api"
        self._owns_session = session is None
        self.session = session or requests.Session()
        self.timeout = timeout

    def close(self):
        """Close the HTTP session if this client created it."""
        if self._owns_session:
            self.session.close()

    def _request(self, method: str, endpoint: str = '', data: dict | None = None):
        """Make a request to the bridge and return the decoded JSON body."""
        url = f"{self.base_url}{endpoint}"
        logger.debug("%s %s", method, url)

        try:
            if method == 'GET':
                response = self.session.get(url, timeout=self.timeout)
            elif method == 'POST':
                response = self.session.post(url, json=data, timeout=self.timeout)
            else:
                raise ValueError(f"Unsupported method: {method}")
        except requests.exceptions.RequestException as e:
            raise TransportError(f"Could not reach bridge at {self.bridge_address}: {e}") from e

        if not response.ok:
            raise ProtocolError(f"Bridge returned HTTP {response.status_code} for {endpoint or '/'}")

        try:
            return response.json()
        except ValueError as e:
            raise ProtocolError(f"Bridge returned malformed JSON: {e}") from e

    def register(self, device_type: str) -> RegistrationResponse:
        """Ask the bridge for a new username (one link button attempt)."""
        payload = self._request('POST', '', {'devicetype': device_type})
        return classify_registration_response(payload)

    def get_sensors(self, username: str) -> list[SensorReading]:
        """List all sensors known to the bridge."""
        payload = self._request('GET', f'/{username}/sensors')
        return parse_sensors(payload)
