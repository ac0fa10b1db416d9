#!/usr/bin/env python3
"""asyncstatus CLI entrypoint."""

import sys
import argparse
import logging

from asyncstatus.lib.config import load_config
from asyncstatus.commands import add as cmd_add_module
from asyncstatus.commands import edit as cmd_edit_module
from asyncstatus.commands import list as cmd_list_module
from asyncstatus.commands import show as cmd_show_module
from asyncstatus.commands import undo as cmd_undo_module

DATE_HELP = "Date: YYYY-MM-DD, today, yesterday, 'N days ago' (default: today)"

EDIT_EPILOG = """\
Editor detection (in order of preference):
  1. ASYNCSTATUS_EDITOR environment variable
  2. GIT_EDITOR environment variable
  3. VISUAL environment variable
  4. EDITOR environment variable
  5. EDITOR in ~/.config/asyncstatus/config.env
  6. git config core.editor (local, then global)
  7. Git's built-in fallback (typically vi)
  8. System fallbacks: vi, vim, nano

Examples:
  asyncstatus edit                # Edit today's status update
  asyncstatus edit yesterday      # Edit yesterday's status update
  asyncstatus edit "2 days ago"   # Edit status update from 2 days ago
  asyncstatus edit 2024-01-15     # Edit status update for specific date
"""


def get_config(args):
    """Load config and set up logging, exiting on invalid config."""
    try:
        config = load_config()
    except ValueError as e:
        print(f"ERROR: Invalid config: {e}")
        sys.exit(2)

    level = logging.DEBUG if args.verbose else getattr(logging, config.log_level)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")
    return config


def cmd_edit(args):
    config = get_config(args)
    return cmd_edit_module.cmd_edit(args, config)


def cmd_show(args):
    config = get_config(args)
    return cmd_show_module.cmd_show(args, config)


def cmd_list(args):
    config = get_config(args)
    return cmd_list_module.cmd_list(args, config)


def cmd_add(args):
    config = get_config(args)
    return cmd_add_module.cmd_add(args, config)


def cmd_undo(args):
    config = get_config(args)
    return cmd_undo_module.cmd_undo(args, config)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='asyncstatus', description='Daily status updates from the terminal')
    parser.add_argument('--verbose', '-v', action='store_true', help='Show debug logging')
    subparsers = parser.add_subparsers(dest='command', required=True)

    # asyncstatus edit
    p_edit = subparsers.add_parser(
        'edit',
        help='Edit status update items interactively',
        epilog=EDIT_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    p_edit.add_argument('date', nargs='?', help=DATE_HELP)
    p_edit.set_defaults(func=cmd_edit)

    # asyncstatus show
    p_show = subparsers.add_parser('show', help='Show a status update')
    p_show.add_argument('date', nargs='?', help=DATE_HELP)
    p_show.set_defaults(func=cmd_show)

    # asyncstatus list
    p_list = subparsers.add_parser('list', help='List recent status updates')
    p_list.add_argument('days', nargs='?', type=int, default=1, help='Number of days, 1-30 (default: 1, today only)')
    p_list.set_defaults(func=cmd_list)

    # asyncstatus done / progress / blocker
    for kind, help_text in (
        ('done', 'Add a completed task'),
        ('progress', 'Add work in progress'),
        ('blocker', 'Add a blocker'),
    ):
        p_kind = subparsers.add_parser(kind, help=help_text)
        p_kind.add_argument('message', help='Item text')
        p_kind.add_argument('--date', '-d', help=DATE_HELP)
        p_kind.set_defaults(func=cmd_add, kind=kind)

    # asyncstatus undo
    p_undo = subparsers.add_parser('undo', help='Remove the most recently added item')
    p_undo.add_argument('--date', '-d', help=DATE_HELP)
    p_undo.set_defaults(func=cmd_undo)

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    return args.func(args)


if __name__ == '__main__':
    sys.exit(main())
