"""Object database commands: hash-object, cat-file, count-objects."""

from collections import Counter

import click
from colorama import Fore, Style

from kit.core.errors import KitError
from kit.core.objects import Blob
from kit.core.repository import Repository
from kit.cli.output import error


@click.command('hash-object')
@click.option('-w', '--write', is_flag=True, help='Write the object into the object database')
@click.argument('file', type=click.Path(exists=True, dir_okay=False))
def hash_object_cmd(write, file):
    """
    Compute the blob id of FILE, optionally storing it.

    Examples:
        kit hash-object README.md       # Print id only
        kit hash-object -w README.md    # Store and print id
    """
    try:
        blob = Blob.from_file(file)
    except OSError as e:
        click.echo(error(f"Cannot read {file}: {e.strerror}"))
        raise click.Abort()

    try:
        repo = Repository.find_repository()
        object_id = repo.write_object(blob) if write else blob.hash
    except KitError as e:
        click.echo(error(str(e)))
        raise click.Abort()

    click.echo(object_id)


@click.command('cat-file')
@click.option('-t', '--type', 'show_type', is_flag=True, help='Show object type')
@click.option('-s', '--size', 'show_size', is_flag=True, help='Show object size')
@click.option('-p', '--pretty', is_flag=True, help='Print object content')
@click.argument('object_id')
def cat_file_cmd(show_type, show_size, pretty, object_id):
    """
    Show object content, type, or size.

    OBJECT_ID may be abbreviated to 4 or more characters.

    Examples:
        kit cat-file -t abc123     # Show object type
        kit cat-file -s abc123     # Show object size
        kit cat-file -p abc123     # Print object content
    """
    if [show_type, show_size, pretty].count(True) != 1:
        click.echo(error("Exactly one of -t, -s or -p is required"))
        raise click.Abort()

    try:
        repo = Repository.find_repository()
        full_id = repo.resolve_object_id(object_id.lower())
        obj = repo.read_object(full_id)
    except KitError as e:
        click.echo(error(str(e)))
        raise click.Abort()

    if show_type:
        click.echo(obj.type)
    elif show_size:
        click.echo(len(obj.serialize()))
    else:
        click.echo(obj.serialize(), nl=False)


@click.command('count-objects')
@click.option('-v', '--verbose', is_flag=True, help='Show a per-type breakdown')
def count_objects_cmd(verbose):
    """
    Count loose objects in the repository.

    Examples:
        kit count-objects          # Show object counts
        kit count-objects -v       # Show detailed breakdown
    """
    try:
        repo = Repository.find_repository()
    except KitError as e:
        click.echo(error(str(e)))
        raise click.Abort()

    total_objects = 0
    total_size = 0
    type_counts = Counter()

    for object_id in repo.iter_object_ids():
        total_objects += 1
        total_size += repo.object_path(object_id).stat().st_size

        if verbose:
            try:
                type_counts[repo.read_object(object_id).type] += 1
            except KitError:
                type_counts['unreadable'] += 1

    if verbose:
        click.echo(f"{Fore.CYAN}Object Statistics:{Style.RESET_ALL}")
        for type_tag, count in sorted(type_counts.items()):
            click.echo(f"  {type_tag}: {Fore.YELLOW}{count}{Style.RESET_ALL}")
        click.echo()

    size_kb = total_size / 1024
    click.echo(f"{total_objects} objects, {size_kb:.2f} KB")
