"""Main CLI entry point for Kit."""

import logging

import click
from colorama import init

from kit import __version__
from kit.cli.output import BANNER
from kit.cli.commands import (init_cmd, check_cmd, rev_parse_cmd, hash_object_cmd,
                              cat_file_cmd, count_objects_cmd)

# Initialize colorama for cross-platform colored output
init(autoreset=True)


class KitGroup(click.Group):
    """Custom Group class to display banner before help."""

    def format_help(self, ctx, formatter):
        """Override to add banner before help text."""
        click.echo(BANNER)
        super().format_help(ctx, formatter)


@click.group(cls=KitGroup)
@click.version_option(version=__version__)
@click.option('-v', '--verbose', is_flag=True, help='Log debug output to stderr')
def cli(verbose):
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format='%(levelname)s %(name)s: %(message)s')


# Register commands
cli.add_command(init_cmd)
cli.add_command(check_cmd)
cli.add_command(rev_parse_cmd)
cli.add_command(hash_object_cmd)
cli.add_command(cat_file_cmd)
cli.add_command(count_objects_cmd)


def main():
    """Main entry point."""
    cli()


if __name__ == '__main__':
    main()
