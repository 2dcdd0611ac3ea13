"""Periodic outdoor temperature polling.

TelemetryPoller fetches the sensor list from a paired bridge right away on
start() and then every POLL_INTERVAL_SECONDS, turning each reply into a
TemperatureReading. At most one request is in flight: a tick or manual
refresh arriving while a poll is running is skipped, not queued.
"""

import itertools
import logging
from datetime import datetime
from typing import Callable

from core.bridge import BridgeClient
from core.config import POLL_INTERVAL_SECONDS
from core.connection import ConnectionTracker
from core.errors import HueTemperatureError, NoCredentials, NoSensorFound, ProtocolError, TransportError
from core.scheduler import ScheduledTask, Scheduler
from models.responses import to_temperature_reading
from models.types import Credentials, TemperatureReading

logger = logging.getLogger(__name__)


class TelemetryPoller:
    """Polls one bridge for the outdoor temperature sensor."""

    def __init__(self, scheduler: Scheduler, tracker: ConnectionTracker | None = None,
                 client_factory: Callable[[str], BridgeClient] = BridgeClient,
                 on_reading: Callable[[TemperatureReading], None] | None = None,
                 on_error: Callable[[HueTemperatureError], None] | None = None,
                 interval: float = POLL_INTERVAL_SECONDS,
                 clock: Callable[[], datetime] = datetime.now):
        self.scheduler = scheduler
        self.tracker = tracker or ConnectionTracker()
        self.client_factory = client_factory
        self.on_reading = on_reading
        self.on_error = on_error
        self.interval = interval
        self.clock = clock

        self.credentials: Credentials | None = None
        self.reading: TemperatureReading | None = None
        self.is_loading = False
        self._client: BridgeClient | None = None
        self._generations = itertools.count(1)
        self._generation = 0
        self._task: ScheduledTask | None = None

    @property
    def running(self) -> bool:
        return self.credentials is not None

    def start(self, credentials: Credentials | None):
        """Start polling: one poll now, then one every interval seconds.

        Raises:
            NoCredentials: If credentials is None
        """
        if credentials is None:
            raise NoCredentials("No paired bridge; run setup first")

        self.stop()
        self.credentials = credentials
        self._client = self.client_factory(credentials.bridge_address)
        self._generation = next(self._generations)
        logger.info("Polling bridge %s every %ss", credentials.bridge_address, self.interval)
        self._task = self.scheduler.call_later(0, self._tick, self._generation)

    def stop(self):
        """Stop polling. The last reading is kept."""
        if self._task is not None:
            self._task.cancel()
            self._task = None
        if self.credentials is not None:
            logger.info("Stopped polling bridge %s", self.credentials.bridge_address)
        self._generation = next(self._generations)
        self.credentials = None
        if self._client is not None:
            self._client.close()
            self._client = None

    def _tick(self, generation: int):
        if generation != self._generation:
            logger.debug("Ignoring stale poll tick")
            return

        # The tick that started the running poll has already queued the next one
        if self.is_loading:
            logger.debug("Poll already in flight, skipping tick")
            return

        # Fixed rate: the next tick is queued before this poll runs
        if self._task is not None:
            self._task.cancel()
        self._task = self.scheduler.call_later(self.interval, self._tick, generation)
        self.poll_once()

    def poll_once(self) -> TemperatureReading | None:
        """Fetch and decode the outdoor temperature once.

        Returns:
            The new reading, or None if the poll failed or was skipped

        Raises:
            NoCredentials: If the poller hasn't been started
        """
        if self.credentials is None:
            raise NoCredentials("No paired bridge; run setup first")

        if self.is_loading:
            logger.debug("Poll already in flight, ignoring request")
            return None

        generation = self._generation
        credentials = self.credentials
        self.is_loading = True
        try:
            sensors = self._client.get_sensors(credentials.username)
            reading = to_temperature_reading(sensors, self.clock())
        except (TransportError, ProtocolError, NoSensorFound) as e:
            if generation != self._generation:
                return None
            logger.warning("Failed to fetch temperature from %s: %s", credentials.bridge_address, e)
            self.tracker.record_failure()
            if self.on_error:
                self.on_error(e)
            return None
        finally:
            self.is_loading = False

        if generation != self._generation:
            logger.debug("Discarding reading from a stopped poller")
            return None

        self.reading = reading
        logger.debug("%s: %.2f°C", reading.sensor_name, reading.temperature_celsius)
        self.tracker.record_success()
        if self.on_reading:
            self.on_reading(reading)
        return reading
