"""Configuration and credential persistence.

This module handles:
- Settings constants (endpoints, timeouts, pairing and polling cadence)
- Locating the config file (~/.hue_temperature/config.json)
- CredentialStore: loading/saving the paired bridge under the 'hueConfig' key
"""

import json
import logging
import os
import tempfile
from pathlib import Path

from models.types import Credentials

logger = logging.getLogger(__name__)

# Configuration file paths
CONFIG_FILE = Path.home() / '.hue_temperature' / 'config.json'
CONFIG_ENV_VAR = 'HUE_TEMPERATURE_CONFIG'
CONFIG_KEY = 'hueConfig'

# Bridge API settings
DISCOVERY_URL = 'https://discovery.meethue.com/'
DEVICE_TYPE = 'hue_temperature_widget#widget'
REQUEST_TIMEOUT = 5

# Pairing: 30 attempts one second apart gives the user 30 seconds
PAIRING_MAX_ATTEMPTS = 30
PAIRING_RETRY_DELAY = 1.0

POLL_INTERVAL_SECONDS = 30


def get_config_file() -> Path:
    """Return the config file path, honouring HUE_TEMPERATURE_CONFIG."""
    override = os.getenv(CONFIG_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return CONFIG_FILE


def load_config(path: Path) -> dict:
    """Load the whole config file.

    Returns:
        Parsed dict, or an empty dict if the file is missing or unreadable
    """
    if not path.exists():
        return {}

    try:
        with open(path, 'r') as f:
            config = json.load(f)
    except (json.JSONDecodeError, IOError) as e:
        logger.warning("Failed to load config from %s: %s", path, e)
        return {}

    if not isinstance(config, dict):
        logger.warning("Ignoring config at %s: top level is not an object", path)
        return {}
    return config


def save_config(path: Path, config: dict):
    """Atomically replace the config file.

    The JSON is written to a temporary file in the same directory and moved
    into place with os.replace, so a reader sees either the old or the new
    file, never a partial one. Permissions are 600 (user read/write only).

    Raises:
        OSError: If the directory can't be created or the file can't be written
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f'.{path.name}.', suffix='.tmp')
    try:
        with os.fdopen(fd, 'w') as f:
            json.dump(config, f, indent=2)
        os.chmod(tmp_name, 0o600)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


class CredentialStore:
    """Durable home of the paired bridge credentials."""

    def __init__(self, path: Path | None = None):
        self.path = path if path is not None else get_config_file()

    def load(self) -> Credentials | None:
        """Return the saved credentials, or None when absent or incomplete."""
        config = load_config(self.path)
        credentials = Credentials.from_config(config.get(CONFIG_KEY))
        if credentials is None and CONFIG_KEY in config:
            logger.warning("Ignoring incomplete %s entry in %s", CONFIG_KEY, self.path)
        return credentials

    def save(self, credentials: Credentials):
        """Persist credentials, keeping any other keys already in the file."""
        config = load_config(self.path)
        config[CONFIG_KEY] = credentials.to_config()
        save_config(self.path, config)
        logger.info("Saved credentials for bridge %s to %s", credentials.bridge_address, self.path)
