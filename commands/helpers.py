"""
Shared helpers for the CLI commands.

Builds WidgetController instances bound to the CLI's config path and prints
notifications, readings and pairing progress.
"""

from pathlib import Path

import click

from core.config import CredentialStore, PAIRING_MAX_ATTEMPTS, POLL_INTERVAL_SECONDS
from core.widget import WidgetController
from models.types import Notification, PairingSession, PairingState, PairingStep, TemperatureReading
from models.utils import format_connection, format_temperature, format_updated


def get_store(ctx: click.Context) -> CredentialStore:
    """Credential store for the --config path given to the group (if any)."""
    config_path = (ctx.obj or {}).get('config_path')
    return CredentialStore(Path(config_path) if config_path else None)


def print_notification(notification: Notification):
    """Echo a notification, errors to stderr in red."""
    if notification.destructive:
        click.secho(f"✗ {notification.title}: {notification.description}", fg='red', err=True)
    else:
        click.secho(f"✓ {notification.title}: {notification.description}", fg='green')


def print_reading(widget: WidgetController, reading: TemperatureReading | None = None):
    """Print the current (or given) reading with its connection label."""
    reading = reading or widget.reading
    status = format_connection(widget.connection_state)
    colour = 'green' if status == 'LIVE' else 'red'

    if reading is None:
        label = 'LOADING...' if widget.is_loading else 'NO DATA'
        click.echo(f"{click.style(status, fg=colour, bold=True)}  {format_temperature(None)}  {label}")
        return

    click.echo(
        f"{click.style(status, fg=colour, bold=True)}  "
        f"{click.style(format_temperature(reading), fg='cyan', bold=True)}  "
        f"{reading.sensor_name}  ({format_updated(reading)})"
    )


def print_pairing_state(session: PairingSession, state: PairingState):
    """Show pairing progress while the handshake runs."""
    if state.step is PairingStep.AWAITING_BUTTON_PRESS:
        if state.attempts_made == 0:
            click.echo()
            click.secho("╔═══════════════════════════════════════════════════════╗", fg='yellow', bold=True)
            click.secho("║  Press the LINK BUTTON on your Hue Bridge now         ║", fg='yellow', bold=True)
            click.secho(f"║  You have {session.max_attempts} seconds to complete this step         ║", fg='yellow', bold=True)
            click.secho("╚═══════════════════════════════════════════════════════╝", fg='yellow', bold=True)
            click.echo()
        else:
            click.echo(f"\rWaiting for button press... ({state.attempts_made}/{session.max_attempts})", nl=False)
    elif state.step.is_terminal and state.attempts_made > 0:
        click.echo()


def build_widget(ctx: click.Context, interval: float = POLL_INTERVAL_SECONDS, **callbacks) -> WidgetController:
    """Create a WidgetController wired to the CLI output helpers."""
    callbacks.setdefault('notify', print_notification)
    return WidgetController(get_store(ctx), interval=interval, **callbacks)


def run_pairing(widget: WidgetController, bridge_ip: str) -> bool:
    """Run the pairing handshake to completion.

    Returns:
        True if a username was obtained and saved
    """
    session = widget.pair(bridge_ip)
    if session is None:
        return False

    click.echo(f"Connecting to bridge at {session.bridge_address} "
               f"(up to {PAIRING_MAX_ATTEMPTS} attempts)...")
    try:
        widget.scheduler.run()
    except KeyboardInterrupt:
        widget.teardown()
        click.echo("\nPairing cancelled.", err=True)
        return False

    return session.state.step is PairingStep.SUCCESS
