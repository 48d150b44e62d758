"""Repository discovery and validation commands."""

import click
from kit.core.errors import KitError
from kit.core.locator import locate
from kit.core.repository import Repository
from kit.cli.output import success, error


@click.command('check')
@click.argument('path', default='.')
def check_cmd(path):
    """
    Validate the repository rooted at PATH.

    Verifies the metadata directories and files exist with the right
    shape and that [core] config carries the supported values.

    Examples:
        kit check
        kit check ../other-repo
    """
    try:
        repo = Repository.open(path)
    except KitError as e:
        click.echo(error(str(e)))
        raise click.Abort()

    click.echo(success(f"Repository at {repo.work_tree} is valid"))


@click.command('rev-parse')
@click.option('--show-toplevel', is_flag=True,
              help='Show the root of the enclosing repository')
def rev_parse_cmd(show_toplevel):
    """
    Print the root of the repository containing the current directory.

    Examples:
        kit rev-parse --show-toplevel
    """
    try:
        root = locate('.')
    except KitError as e:
        click.echo(error(str(e)))
        raise click.Abort()

    click.echo(str(root))
