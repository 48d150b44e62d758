"""CLI commands for Kit."""

from kit.cli.commands.init import init_cmd
from kit.cli.commands.check import check_cmd, rev_parse_cmd
from kit.cli.commands.objects import hash_object_cmd, cat_file_cmd, count_objects_cmd

__all__ = ['init_cmd', 'check_cmd', 'rev_parse_cmd', 'hash_object_cmd',
           'cat_file_cmd', 'count_objects_cmd']
