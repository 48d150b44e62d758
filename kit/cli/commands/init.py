"""Initialize a new Kit repository."""

import click
from kit.core.errors import KitError
from kit.core.repository import Repository
from kit.cli.output import success, error, info


@click.command('init')
@click.argument('path')
def init_cmd(path):
    """
    Create a new, empty repository.

    PATH must not exist yet; it is created along with a .git directory
    holding the object database, refs and config.

    Examples:
        kit init my-project
    """
    try:
        repo = Repository.create(path)
    except KitError as e:
        click.echo(error(f"Failed to initialize repository: {e}"))
        raise click.Abort()

    click.echo(success(f"Initialized empty repository in {repo.git_dir}"))
    click.echo(info(f"  {repo.marker}/objects/     - Object database"))
    click.echo(info(f"  {repo.marker}/refs/        - Branch and tag references"))
    click.echo(info(f"  {repo.marker}/HEAD         - Current branch pointer"))
    click.echo(info(f"  {repo.marker}/config       - Repository configuration"))
