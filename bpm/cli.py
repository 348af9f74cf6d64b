#!/usr/bin/env python
"""
BPM Command Line Interface

    bpm install repo:package[:version]
    bpm remove package
    bpm update repo:package
    bpm list
    bpm version

The short slash verbs (/i, /r, /u, /l, /v, /h) are accepted as aliases.
"""

import sys
import argparse
import logging
from typing import List, Optional, Tuple

from rich.console import Console
from rich.table import Table

from . import __version__
from .config import load_config
from .exceptions import BpmError, InvalidPackageSpec
from .package import PackageManager

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

logger = logging.getLogger('BPM.cli')
console = Console()

LEGACY_VERBS = {
    '/i': 'install',
    '/r': 'remove',
    '/u': 'update',
    '/l': 'list',
    '/v': 'version',
}

HELP_MENU = """Blur Package Manager | Help Menu
/i = install
 /r = remove
  /u = update
   /l = list installed packages
    /v = shows version
     /h = shows this menu"""


OPTIONS_WITH_VALUE = ('-s', '--store', '-c', '--config')


def command_index(args: List[str]) -> Optional[int]:
    """Index of the command verb, skipping global options and their values"""
    i = 0
    while i < len(args):
        arg = args[i]
        if arg in OPTIONS_WITH_VALUE:
            i += 2
        elif arg.startswith('-'):
            i += 1
        else:
            return i
    return None


def parse_package_arg(arg: str) -> Tuple[str, str, Optional[str]]:
    """Split repo:package[:version]"""
    parts = arg.split(':')
    if len(parts) < 2 or len(parts) > 3 or not parts[0] or not parts[1]:
        raise InvalidPackageSpec(f"Expected repo:package[:version], got {arg!r}")
    version = parts[2] if len(parts) == 3 and parts[2] else None
    return parts[0], parts[1], version


def parse_args(args: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments"""
    parser = argparse.ArgumentParser(
        prog='bpm',
        description='BPM - Blur Package Manager',
    )
    parser.add_argument('-s', '--store', help='Store root directory (overrides config and BPM_STORE)')
    parser.add_argument('-c', '--config', help='Path to a YAML config file')
    parser.add_argument('-d', '--debug', help='Enable debug logging', action='store_true')
    parser.add_argument('--no-progress', help='Do not draw progress bars', action='store_true')
    parser.add_argument('--version', help='Show version and exit', action='store_true')

    subparsers = parser.add_subparsers(dest='command')

    install = subparsers.add_parser('install', help='Install a package and its dependencies')
    install.add_argument('spec', metavar='repo:package[:version]')

    remove = subparsers.add_parser('remove', help='Remove an installed package')
    remove.add_argument('package')

    update = subparsers.add_parser('update', help='Reinstall the latest version of a package')
    update.add_argument('spec', metavar='repo:package')

    subparsers.add_parser('list', help='List installed packages')
    subparsers.add_parser('version', help='Show version')

    args = list(sys.argv[1:] if args is None else args)
    verb = command_index(args)
    if verb is not None:
        args[verb] = LEGACY_VERBS.get(args[verb], args[verb])
    return parser.parse_args(args)


def print_installed(manager: PackageManager) -> None:
    installed = manager.list_installed()
    if not installed:
        console.print("No packages installed.")
        return

    table = Table(title="Installed packages")
    table.add_column("Package")
    table.add_column("Version")
    table.add_column("Repo")
    table.add_column("Binaries")
    for name, record in installed:
        table.add_row(name, record.version, record.repo, "\n".join(record.binaries))
    console.print(table)


def run_command(parsed_args: argparse.Namespace) -> int:
    config = load_config(parsed_args.config, store_root=parsed_args.store)
    if parsed_args.debug:
        logging.getLogger('BPM').setLevel(logging.DEBUG)
    else:
        logging.getLogger('BPM').setLevel(config.log_level)
    if parsed_args.no_progress:
        config.progress = False

    manager = PackageManager(config)

    if parsed_args.command == 'install':
        repo, package, version = parse_package_arg(parsed_args.spec)
        report = manager.install(repo, package, version)
        for key in report.cycles:
            console.print(f"[yellow]Circular dependency detected at {key}[/yellow]")
        console.print(f"Installed {package} successfully!")
    elif parsed_args.command == 'remove':
        report = manager.remove(parsed_args.package)
        if report.removed:
            console.print(f"Removed package {parsed_args.package}")
        else:
            console.print(f"Package {parsed_args.package} is not installed.")
    elif parsed_args.command == 'update':
        repo, package, _ = parse_package_arg(parsed_args.spec)
        manager.update(repo, package)
        console.print(f"Updated {package} successfully!")
    elif parsed_args.command == 'list':
        print_installed(manager)
    return 0


def main(args: Optional[List[str]] = None) -> int:
    """Main entry point for the BPM CLI"""
    args = list(sys.argv[1:] if args is None else args)

    if not args:
        console.print("Usage: bpm install|remove|update|list <repo:package[:version]> | version, /h = help")
        return 1
    verb = command_index(args)
    if verb is not None and args[verb] == '/h':
        console.print(HELP_MENU)
        return 0

    parsed_args = parse_args(args)

    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)

    if parsed_args.version or parsed_args.command == 'version':
        console.print(f"bpm ver: {__version__}")
        return 0
    if parsed_args.command is None:
        console.print("Unknown command. Use install, remove, update, list")
        return 1

    try:
        return run_command(parsed_args)
    except BpmError as e:
        logger.error(str(e))
        return 1

if __name__ == '__main__':
    sys.exit(main())
