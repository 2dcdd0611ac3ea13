"""
Tests for the CLI commands.

Commands get a WidgetController wired to the fake bridge and manual clock
by patching build_widget in the command module.
"""

from unittest.mock import patch

import pytest
from click.testing import CliRunner

from conftest import outdoor_sensors
from commands.helpers import print_notification
from commands.setup import discover_command, help_command, pair_command, configure_command, setup_command
from commands.temperature import show_command, watch_command
from core.errors import TransportError
from core.widget import WidgetController
from hue_temperature import cli

NOT_PRESSED = [{"error": {"type": 101, "description": "link button not pressed"}}]


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def make_widget(store, scheduler, bridge):
    """Factory with build_widget's signature returning a test widget."""
    def factory(ctx, interval=30, **callbacks):
        callbacks.setdefault('discover', lambda: '192.168.1.20')
        callbacks.setdefault('notify', print_notification)
        return WidgetController(store, scheduler, client_factory=bridge, interval=interval, **callbacks)
    return factory


def invoke(runner, command, args, config_path, **kwargs):
    return runner.invoke(command, args, obj={'config_path': str(config_path)}, **kwargs)


class TestShowCommand:

    def test_show_reading(self, runner, make_widget, store, credentials, bridge, config_path):
        store.save(credentials)
        bridge.sensor_replies = [outdoor_sensors(2150)]

        with patch('commands.temperature.build_widget', side_effect=make_widget):
            result = invoke(runner, show_command, [], config_path)

        assert result.exit_code == 0
        assert '21.5°C' in result.output
        assert 'LIVE' in result.output
        assert 'Outdoor sensor' in result.output

    def test_show_without_config(self, runner, config_path):
        result = invoke(runner, show_command, [], config_path)

        assert result.exit_code == 1
        assert 'Setup Required' in result.output

    def test_show_connection_error(self, runner, make_widget, store, credentials, bridge, config_path):
        store.save(credentials)
        bridge.sensor_replies = [TransportError('no route to host')]

        with patch('commands.temperature.build_widget', side_effect=make_widget):
            result = invoke(runner, show_command, [], config_path)

        assert result.exit_code == 1
        assert 'Connection Error' in result.output
        assert 'OFFLINE' in result.output


class TestWatchCommand:

    def test_watch_until_interrupted(self, runner, make_widget, store, credentials, bridge, config_path):
        store.save(credentials)
        bridge.sensor_replies = [outdoor_sensors(2150), TransportError('down')]

        def stop_after_three_polls():
            if bridge.sensor_calls == 3:
                raise KeyboardInterrupt

        bridge.on_get_sensors = stop_after_three_polls

        with patch('commands.temperature.build_widget', side_effect=make_widget):
            result = invoke(runner, watch_command, ['--interval', '5'], config_path)

        assert result.exit_code == 0
        assert 'LIVE' in result.output
        assert 'Connection Error' in result.output
        assert 'Last reading' in result.output
        assert 'Monitoring stopped' in result.output

    def test_watch_without_config(self, runner, config_path):
        result = invoke(runner, watch_command, [], config_path)
        assert result.exit_code == 1


class TestPairCommand:

    def test_pair_success(self, runner, make_widget, store, bridge, config_path):
        bridge.register_replies = [NOT_PRESSED, NOT_PRESSED, [{"success": {"username": "abc123"}}]]

        with patch('commands.setup.build_widget', side_effect=make_widget):
            result = invoke(runner, pair_command, ['192.168.1.20'], config_path)

        assert result.exit_code == 0
        assert 'LINK BUTTON' in result.output
        assert 'Configuration saved' in result.output
        assert store.load().username == 'abc123'

    def test_pair_uses_discovery(self, runner, make_widget, store, bridge, config_path):
        bridge.register_replies = [[{"success": {"username": "abc123"}}]]

        with patch('commands.setup.build_widget', side_effect=make_widget):
            result = invoke(runner, pair_command, [], config_path)

        assert result.exit_code == 0
        assert bridge.addresses == ['192.168.1.20']

    def test_pair_rejected(self, runner, make_widget, store, bridge, config_path):
        bridge.register_replies = [[{"error": {"type": 1, "description": "unauthorized"}}]]

        with patch('commands.setup.build_widget', side_effect=make_widget):
            result = invoke(runner, pair_command, ['192.168.1.20'], config_path)

        assert result.exit_code == 1
        assert 'unauthorized' in result.output
        assert bridge.register_calls == 1
        assert store.load() is None

    def test_pair_blank_address(self, runner, make_widget, bridge, config_path):
        def no_discovery(ctx, **callbacks):
            return make_widget(ctx, discover=lambda: None, **callbacks)

        with patch('commands.setup.build_widget', side_effect=no_discovery):
            result = invoke(runner, pair_command, [], config_path, input='\n')

        assert result.exit_code == 1
        assert 'Bridge IP Required' in result.output
        assert bridge.register_calls == 0


class TestConfigureCommand:

    def test_configure_then_reads(self, runner, make_widget, store, bridge, config_path):
        bridge.register_replies = [[{"success": {"username": "abc123"}}]]
        bridge.sensor_replies = [outdoor_sensors(850)]

        with patch('commands.setup.build_widget', side_effect=make_widget):
            result = invoke(runner, configure_command, [], config_path, input='y\n')

        assert result.exit_code == 0
        assert store.load().username == 'abc123'
        assert '8.5°C' in result.output

    def test_configure_keeps_existing(self, runner, make_widget, store, credentials, bridge, config_path):
        store.save(credentials)

        with patch('commands.setup.build_widget', side_effect=make_widget):
            result = invoke(runner, configure_command, [], config_path, input='n\n')

        assert result.exit_code == 0
        assert 'already configured' in result.output
        assert bridge.register_calls == 0


class TestSetupAndDiscover:

    def test_setup_not_configured(self, runner, config_path):
        result = invoke(runner, setup_command, [], config_path)
        assert result.exit_code == 1
        assert 'Not configured' in result.output

    def test_setup_tests_connection(self, runner, make_widget, store, credentials, bridge, config_path):
        store.save(credentials)
        bridge.sensor_replies = [outdoor_sensors(2150)]

        with patch('commands.setup.build_widget', side_effect=make_widget):
            result = invoke(runner, setup_command, [], config_path)

        assert result.exit_code == 0
        assert '192.168.1.20' in result.output
        assert '21.5°C' in result.output

    def test_discover_found(self, runner, make_widget, config_path):
        with patch('commands.setup.build_widget', side_effect=make_widget):
            result = invoke(runner, discover_command, [], config_path)

        assert result.exit_code == 0
        assert '192.168.1.20' in result.output

    def test_discover_not_found(self, runner, make_widget, config_path):
        def no_discovery(ctx, **callbacks):
            return make_widget(ctx, discover=lambda: None, **callbacks)

        with patch('commands.setup.build_widget', side_effect=no_discovery):
            result = invoke(runner, discover_command, [], config_path)

        assert result.exit_code == 1
        assert 'enter your bridge IP manually' in result.output


class TestGroup:

    def test_help_command(self, runner):
        result = runner.invoke(help_command)
        assert result.exit_code == 0
        assert 'configure' in result.output
        assert 'watch' in result.output

    def test_typo_suggestion(self, runner):
        result = runner.invoke(cli, ['wach'])
        assert result.exit_code != 0
        assert 'watch' in result.output

    def test_group_help_lists_commands(self, runner):
        result = runner.invoke(cli, ['--help'])
        assert result.exit_code == 0
        for name in ('configure', 'discover', 'pair', 'setup', 'show', 'watch'):
            assert name in result.output
