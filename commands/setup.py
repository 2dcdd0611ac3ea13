"""
Setup and help commands for the Hue temperature CLI.

Contains the custom Click group class for coloured help output and typo
suggestions, plus bridge discovery and pairing commands.
"""

from dataclasses import dataclass

import click

from commands.helpers import build_widget, get_store, print_pairing_state, print_reading, run_pairing
from models.utils import similarity_score


@dataclass(frozen=True)
class CommandSection:
    """Represents a section in the help command."""
    name: str
    commands: list[tuple[str, str]]


class ColouredGroup(click.Group):
    """Custom Group class that adds colour to help output and suggests similar commands."""

    def resolve_command(self, ctx, args):
        """Resolve command with suggestions for typos."""
        try:
            return super().resolve_command(ctx, args)
        except click.UsageError as e:
            if 'No such command' in str(e):
                cmd_name = args[0] if args else ''
                suggestions = self._get_suggestions(ctx, cmd_name)

                if suggestions:
                    error_msg = f"Error: No such command '{cmd_name}'.\n\n"
                    error_msg += click.style("Did you mean one of these?\n", fg='yellow')
                    for suggestion in suggestions:
                        error_msg += click.style(f"  • {suggestion}\n", fg='green')
                    raise click.UsageError(error_msg)
            raise

    def _get_suggestions(self, ctx, cmd_name, max_suggestions=3):
        """Get command suggestions based on similarity."""
        if not cmd_name:
            return []

        suggestions = []
        for command in self.list_commands(ctx):
            cmd_obj = self.get_command(ctx, command)
            if cmd_obj and not cmd_obj.hidden:
                score = similarity_score(cmd_name, command)
                if score > 0:
                    suggestions.append((score, command))

        suggestions.sort(reverse=True, key=lambda x: x[0])
        return [cmd for score, cmd in suggestions[:max_suggestions]]

    def format_commands(self, ctx, formatter):
        """Format commands with colour."""
        commands = []
        for subcommand in self.list_commands(ctx):
            cmd = self.get_command(ctx, subcommand)
            if cmd is None or cmd.hidden:
                continue
            commands.append((subcommand, cmd.get_short_help_str(limit=500)))

        if commands:
            formatter.write_paragraph()
            formatter.write_text(click.style('Commands:', fg='yellow', bold=True))

            max_len = max(max(len(cmd[0]) for cmd in commands), 12)

            with formatter.indentation():
                for subcommand, help_text in commands:
                    formatter.write_text(
                        click.style(subcommand.ljust(max_len), fg='green') + '  ' +
                        click.style(help_text, fg='white', dim=True)
                    )


COMMAND_SECTIONS = [
    CommandSection(
        name="SETUP",
        commands=[
            ("configure", "Discover and pair with your Hue Bridge"),
            ("discover", "Look up the bridge address on your network"),
            ("pair [bridge_ip]", "Press-the-button pairing with a bridge"),
            ("setup", "Show saved bridge and test the connection"),
        ]
    ),
    CommandSection(
        name="TEMPERATURE",
        commands=[
            ("show", "Fetch the outdoor temperature once"),
            ("watch", "Poll every 30 seconds until Ctrl+C"),
            ("watch -n <seconds>", "Poll at a custom interval"),
        ]
    ),
]


@click.command(name='help')
def help_command():
    """Display help and common commands."""
    click.echo()
    click.secho("Hue Outdoor Temperature - Quick Reference", fg='cyan', bold=True)
    click.echo()

    for section in COMMAND_SECTIONS:
        click.secho(section.name, fg='yellow', bold=True)
        for cmd, desc in section.commands:
            click.echo("  ", nl=False)
            click.secho(cmd, fg='green', nl=False)
            click.echo(" " * (24 - len(cmd)) + "  " + desc)
        click.echo()

    click.secho("For detailed help on any command:", fg='cyan')
    click.echo(f"  hue-temperature {click.style('<command> -h', fg='white', bold=True)}")
    click.echo()


@click.command(name='discover')
@click.pass_context
def discover_command(ctx):
    """Find your Hue Bridge via the Philips discovery service."""
    widget = build_widget(ctx)
    if widget.discover() is None:
        click.echo("You can find your bridge IP in your router's DHCP client list,", err=True)
        click.echo("or in the Hue app: Settings → Hue Bridges → (i).", err=True)
        ctx.exit(1)


@click.command(name='pair')
@click.argument('bridge_ip', required=False)
@click.pass_context
def pair_command(ctx, bridge_ip: str | None):
    """Pair with a bridge by pressing its link button.

    Without BRIDGE_IP the bridge is discovered automatically, falling back to
    a prompt if discovery finds nothing.
    """
    widget = build_widget(ctx, on_pairing_state=print_pairing_state)

    if not bridge_ip:
        bridge_ip = widget.discover() or click.prompt("Bridge IP address", default='', show_default=False)

    if not run_pairing(widget, bridge_ip):
        ctx.exit(1)

    click.secho(f"✓ Configuration saved to {widget.store.path}", fg='green')


@click.command(name='configure')
@click.option('--reconfigure', is_flag=True, help='Pair again even if credentials exist')
@click.pass_context
def configure_command(ctx, reconfigure: bool):
    """Interactive bridge discovery and pairing.

    This command helps you:
    - Discover the Hue Bridge on your network (or enter its IP)
    - Create a username via the link button
    - Save it to the local config file
    """
    widget = build_widget(ctx, on_pairing_state=print_pairing_state)

    click.echo()
    click.secho("=== Hue Bridge Configuration ===", fg='cyan', bold=True)
    click.echo()

    if not reconfigure:
        existing = widget.store.load()
        if existing:
            click.echo(f"✓ Credentials already configured for bridge {existing.bridge_address}")
            if not click.confirm("Reconfigure anyway?", default=False):
                click.echo()
                return
            click.echo()

    widget.begin_setup()

    click.echo("Step 1: Discovering Hue bridges...")
    bridge_ip = widget.discover()
    if bridge_ip:
        if not click.confirm(f"Use bridge at {bridge_ip}?", default=True):
            bridge_ip = None
    if not bridge_ip:
        bridge_ip = click.prompt("Bridge IP address", default='', show_default=False)
    click.echo()

    click.echo("Step 2: Creating API credentials...")
    if not run_pairing(widget, bridge_ip):
        click.echo("Please check the bridge IP and try again.", err=True)
        ctx.exit(1)
    click.echo()

    click.secho(f"✓ Configuration saved to {widget.store.path}", fg='green', bold=True)

    if widget.complete_setup():
        widget.scheduler.run_pending()
        widget.teardown()
        print_reading(widget)
    click.echo()


@click.command(name='setup')
@click.pass_context
def setup_command(ctx):
    """Show the saved bridge configuration and test the connection."""
    store = get_store(ctx)

    click.echo()
    click.secho("=== Hue Bridge Configuration ===", fg='cyan', bold=True)
    click.echo()

    credentials = store.load()
    click.echo(f"   Path:        {store.path}")
    if credentials is None:
        click.echo(f"   Status:      {click.style('✗ Not configured', fg='yellow')}")
        click.echo()
        click.echo("Run this command to set up the bridge:")
        click.echo(click.style("  hue-temperature configure", fg='green', bold=True))
        click.echo()
        ctx.exit(1)

    click.echo(f"   Status:      {click.style('✓ Configured', fg='green')}")
    click.echo(f"   Bridge IP:   {credentials.bridge_address}")
    click.echo()

    click.echo(click.style("Connection Test", fg='cyan', bold=True))
    widget = build_widget(ctx)
    widget.init()
    widget.scheduler.run_pending()
    widget.teardown()
    print_reading(widget)
    click.echo()
