"""Tests for configuration and the credential store in core/config.py

All file access goes to pytest's tmp_path; the real ~/.hue_temperature is
never touched.
"""

import json
import os
import stat
from pathlib import Path
from unittest.mock import patch

import pytest

from core.config import (
    CONFIG_FILE,
    CONFIG_KEY,
    PAIRING_MAX_ATTEMPTS,
    PAIRING_RETRY_DELAY,
    POLL_INTERVAL_SECONDS,
    CredentialStore,
    get_config_file,
    load_config,
    save_config,
)
from models.types import Credentials


class TestConstants:
    """Test that constants are properly defined."""

    def test_config_file_path(self):
        assert isinstance(CONFIG_FILE, Path)
        assert CONFIG_FILE.name == 'config.json'
        assert '.hue_temperature' in str(CONFIG_FILE)

    def test_cadence(self):
        assert PAIRING_MAX_ATTEMPTS == 30
        assert PAIRING_RETRY_DELAY == 1.0
        assert POLL_INTERVAL_SECONDS == 30

    def test_env_override(self, tmp_path):
        target = tmp_path / 'custom.json'
        with patch.dict(os.environ, {'HUE_TEMPERATURE_CONFIG': str(target)}):
            assert get_config_file() == target

    def test_default_without_env(self):
        with patch.dict(os.environ, {}, clear=True):
            assert get_config_file() == CONFIG_FILE


class TestLoadSaveConfig:
    """Test raw config file handling."""

    def test_missing_file(self, config_path):
        assert load_config(config_path) == {}

    def test_corrupt_file(self, config_path):
        config_path.parent.mkdir(parents=True)
        config_path.write_text('{not json')
        assert load_config(config_path) == {}

    def test_non_object_file(self, config_path):
        config_path.parent.mkdir(parents=True)
        config_path.write_text('[1, 2]')
        assert load_config(config_path) == {}

    def test_save_creates_directory(self, config_path):
        save_config(config_path, {'a': 1})
        assert json.loads(config_path.read_text()) == {'a': 1}

    def test_save_sets_private_permissions(self, config_path):
        save_config(config_path, {'a': 1})
        mode = stat.S_IMODE(config_path.stat().st_mode)
        assert mode == 0o600

    def test_save_leaves_no_temp_files(self, config_path):
        save_config(config_path, {'a': 1})
        save_config(config_path, {'a': 2})
        assert [p.name for p in config_path.parent.iterdir()] == ['config.json']

    def test_failed_write_keeps_old_file(self, config_path):
        """A failing write must not leave a half-written config behind."""
        save_config(config_path, {'a': 1})

        with patch('core.config.json.dump', side_effect=TypeError('boom')):
            with pytest.raises(TypeError):
                save_config(config_path, {'a': 2})

        assert json.loads(config_path.read_text()) == {'a': 1}
        assert [p.name for p in config_path.parent.iterdir()] == ['config.json']


class TestCredentialStore:
    """Test credential persistence."""

    def test_load_absent(self, store):
        assert store.load() is None

    def test_round_trip(self, store, credentials):
        store.save(credentials)
        assert store.load() == credentials

    def test_saved_shape(self, store, credentials, config_path):
        store.save(credentials)
        data = json.loads(config_path.read_text())
        assert data[CONFIG_KEY] == {'bridgeIp': '192.168.1.20', 'username': 'abc123'}

    def test_overwrite(self, store, credentials):
        store.save(credentials)
        replacement = Credentials('192.168.1.30', 'xyz789')
        store.save(replacement)
        assert store.load() == replacement

    def test_preserves_other_keys(self, store, credentials, config_path):
        save_config(config_path, {'other': {'keep': True}})
        store.save(credentials)
        assert json.loads(config_path.read_text())['other'] == {'keep': True}

    @pytest.mark.parametrize('entry', [
        {'bridgeIp': '192.168.1.20'},
        {'username': 'abc123'},
        {'bridgeIp': '', 'username': 'abc123'},
        {'bridgeIp': 42, 'username': 'abc123'},
        {'bridgeIp': 'bridge.local', 'username': 'abc123'},
        {'bridgeIp': '192.168.1', 'username': 'abc123'},
        'not-a-dict',
    ])
    def test_partial_credentials_are_absent(self, store, config_path, entry):
        save_config(config_path, {CONFIG_KEY: entry})
        assert store.load() is None

    def test_default_path_from_env(self, tmp_path):
        target = tmp_path / 'env.json'
        with patch.dict(os.environ, {'HUE_TEMPERATURE_CONFIG': str(target)}):
            assert CredentialStore().path == target
