"""Bridge discovery through the Philips cloud discovery service.

first_bridge_address() makes a single attempt and returns the first bridge
address, or None when the service knows no bridge; lookup failures are raised.
discover() folds both cases into None so the caller can fall back to manual
entry.
"""

import logging

import requests

from core.config import DISCOVERY_URL, REQUEST_TIMEOUT
from core.errors import HueTemperatureError, ProtocolError, TransportError
from models.types import DiscoveredBridge

logger = logging.getLogger(__name__)


def discover_bridges(session: requests.Session | None = None,
                     url: str = DISCOVERY_URL) -> list[DiscoveredBridge]:
    """Fetch the bridges registered for this network.

    Returns:
        Bridge records in the order the service returned them

    Raises:
        TransportError: If the discovery host can't be reached
        ProtocolError: On a non-2xx status or an unexpected body
    """
    http = session or requests
    try:
        response = http.get(url, timeout=REQUEST_TIMEOUT)
    except requests.exceptions.RequestException as e:
        raise TransportError(f"Bridge discovery failed: {e}") from e

    if response.status_code == 429:
        raise ProtocolError("Philips discovery service rate limit reached")
    if not response.ok:
        raise ProtocolError(f"Discovery service returned HTTP {response.status_code}")

    try:
        bridges = response.json()
    except ValueError as e:
        raise ProtocolError(f"Failed to parse discovery response: {e}") from e

    if not isinstance(bridges, list):
        raise ProtocolError("Discovery response is not a list")

    return [b for b in bridges if isinstance(b, dict) and b.get('internalipaddress')]


def first_bridge_address(session: requests.Session | None = None,
                         url: str = DISCOVERY_URL) -> str | None:
    """Return the first discovered bridge address, or None if the list is empty.

    Raises:
        TransportError: If the discovery host can't be reached
        ProtocolError: On a non-2xx status or an unexpected body
    """
    bridges = discover_bridges(session, url)
    if not bridges:
        logger.info("Discovery service returned no bridges")
        return None

    address = bridges[0]['internalipaddress']
    logger.info("Discovered bridge at %s", address)
    return address


def discover(session: requests.Session | None = None, url: str = DISCOVERY_URL) -> str | None:
    """Return the first discovered bridge address, or None if not found."""
    try:
        return first_bridge_address(session, url)
    except HueTemperatureError as e:
        logger.warning("%s", e)
        return None
