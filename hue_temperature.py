#!/usr/bin/env python3
"""
Hue Outdoor Temperature CLI
Pair with a Philips Hue bridge and display the outdoor sensor temperature.
"""

import click

from core.logging_config import setup_logging
from commands.setup import ColouredGroup, help_command, setup_command, configure_command, discover_command, pair_command
from commands.temperature import show_command, watch_command


@click.group(
    cls=ColouredGroup,
    context_settings={
        'help_option_names': ['-h', '--help'],
        'max_content_width': 120
    }
)
@click.version_option(version='0.1.0', prog_name='Hue Temperature')
@click.option('--config', 'config_path', type=click.Path(dir_okay=False), envvar='HUE_TEMPERATURE_CONFIG',
              help='Config file (default: ~/.hue_temperature/config.json)')
@click.option('--verbose', '-v', is_flag=True, help='Show debug logging')
@click.pass_context
def cli(ctx, config_path, verbose):
    """Hue Outdoor Temperature - Show your outdoor sensor's temperature.

Run 'configure' for first-time setup, then 'show' or 'watch'.

Use 'help' for a quick reference of all commands.
Use 'COMMAND -h' or 'COMMAND --help' for detailed help on a specific command."""
    setup_logging('DEBUG' if verbose else 'WARNING')
    ctx.ensure_object(dict)
    ctx.obj['config_path'] = config_path


# Register setup and help commands
cli.add_command(help_command)
cli.add_command(setup_command)
cli.add_command(configure_command)
cli.add_command(discover_command)
cli.add_command(pair_command)

# Register temperature commands
cli.add_command(show_command)
cli.add_command(watch_command)


if __name__ == '__main__':
    cli()
