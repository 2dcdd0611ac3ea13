"""Connection health derived from the latest bridge call."""

import logging
from typing import Callable

from models.types import ConnectionState

logger = logging.getLogger(__name__)


class ConnectionTracker:
    """Connected iff the most recent poll or pairing network call succeeded.

    Every observation overwrites the previous state; there is no debouncing.
    """

    def __init__(self, on_change: Callable[[ConnectionState], None] | None = None):
        self.state = ConnectionState.DISCONNECTED
        self.on_change = on_change

    @property
    def is_connected(self) -> bool:
        return self.state is ConnectionState.CONNECTED

    def observe(self, succeeded: bool):
        previous = self.state
        self.state = ConnectionState.CONNECTED if succeeded else ConnectionState.DISCONNECTED
        if previous is not self.state:
            logger.debug("Connection state %s -> %s", previous.value, self.state.value)
        if self.on_change:
            self.on_change(self.state)

    def record_success(self):
        self.observe(True)

    def record_failure(self):
        self.observe(False)
