"""
Temperature commands.

show polls the bridge once; watch keeps polling until interrupted.
"""

import click

from commands.helpers import build_widget, print_notification, print_reading
from core.config import POLL_INTERVAL_SECONDS
from models.types import Notification


def _setup_required(ctx: click.Context):
    print_notification(Notification("Setup Required",
                                    "Connect to your Philips Hue Bridge to display outdoor temperature",
                                    destructive=True))
    click.echo("Run 'configure' to discover and pair with your bridge.", err=True)
    ctx.exit(1)


@click.command(name='show')
@click.pass_context
def show_command(ctx):
    """Fetch the outdoor temperature once and print it."""
    widget = build_widget(ctx)
    if not widget.init():
        _setup_required(ctx)

    # The first poll is due immediately
    widget.scheduler.run_pending()
    widget.teardown()

    print_reading(widget)
    if widget.reading is None:
        ctx.exit(1)


@click.command(name='watch')
@click.option('--interval', '-n', type=click.FloatRange(min=1), default=POLL_INTERVAL_SECONDS,
              show_default=True, help='Seconds between polls')
@click.pass_context
def watch_command(ctx, interval: float):
    """Poll the outdoor temperature continuously (Ctrl+C to stop).

    A failed poll marks the display OFFLINE but keeps showing the last good
    reading.
    """
    widget = None

    def on_error(notification: Notification):
        print_notification(notification)
        if widget is not None and widget.reading is not None:
            click.echo("  Last reading: ", nl=False)
            print_reading(widget)

    widget = build_widget(
        ctx,
        interval=interval,
        notify=on_error,
        on_reading=lambda reading: print_reading(widget, reading),
    )
    if not widget.init():
        _setup_required(ctx)

    click.echo(f"Watching outdoor temperature every {interval:g}s... (Press Ctrl+C to stop)\n")
    try:
        widget.scheduler.run()
    except KeyboardInterrupt:
        click.echo("\n\nMonitoring stopped.")
    finally:
        widget.teardown()
