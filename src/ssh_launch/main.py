#!/usr/bin/env python3
"""Numbered menu front-end for SSH Launch."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Callable, List, Optional

from tabulate import tabulate

from ssh_launch import __version__
from ssh_launch.config.manager import SettingsManager, default_settings_path
from ssh_launch.exceptions import (
    ConfigNotFound,
    InvalidSelection,
    NoHostsFound,
    SSHLaunchError,
)
from ssh_launch.services.connection_resolver import ConnectionAttempt
from ssh_launch.services.ssh_config_parser import HostRecord
from ssh_launch.session import LaunchSession
from ssh_launch.utils.formatting import or_dash, truncate_string
from ssh_launch.utils.platform_utils import command_exists

logger = logging.getLogger(__name__)

LOG_FILE_NAME = 'ssh-launch.log'


def setup_logging(log_dir: Path, verbose: bool = False) -> None:
    """Send package logs to a file, and to stderr when verbose."""
    package_logger = logging.getLogger('ssh_launch')
    package_logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()
    formatter = logging.Formatter('%(asctime)s %(levelname)s %(name)s: %(message)s')

    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_dir / LOG_FILE_NAME, encoding='utf-8')
        file_handler.setFormatter(formatter)
        package_logger.addHandler(file_handler)
    except OSError as e:
        print(f"Warning: cannot write log file in {log_dir}: {e}", file=sys.stderr)

    if verbose:
        stream_handler = logging.StreamHandler(sys.stderr)
        stream_handler.setFormatter(formatter)
        package_logger.addHandler(stream_handler)


def display_hosts(hosts: List[HostRecord]) -> None:
    """Display hosts in a numbered table."""
    if not hosts:
        print("No hosts found to display.")
        return

    headers = ['#', 'Alias', 'Address', 'User', 'Description']
    table_data = []

    for idx, host in enumerate(hosts, 1):
        table_data.append([
            idx,
            host.alias,
            or_dash(host.remote_address),
            or_dash(host.user),
            truncate_string(host.description, 60),
        ])

    print(tabulate(table_data, headers=headers, tablefmt='grid'))


def select_host(hosts: List[HostRecord], choice: str) -> HostRecord:
    """Map menu input to a host.

    Raises:
        InvalidSelection: If the input is not a number in range.
    """
    choice = choice.strip()
    if not choice.isdecimal():
        raise InvalidSelection(choice, len(hosts))
    idx = int(choice)
    if not 1 <= idx <= len(hosts):
        raise InvalidSelection(choice, len(hosts))
    return hosts[idx - 1]


def _print_attempt(attempt: ConnectionAttempt) -> None:
    if attempt.uses_agent:
        print("Trying keys loaded in ssh-agent...")
    else:
        print(f"Trying key {attempt.identity}...")


def connect_to_host(session: LaunchSession, host: HostRecord) -> None:
    """Connect to a host, reporting recoverable failures."""
    params = session.resolve(host)
    port = f":{params.port}" if params.port != 22 else ""
    print(f"\nConnecting to {host.alias} ({params.destination}{port})...")
    if not params.has_identities:
        print("Note: no SSH key files found; only ssh-agent keys will be tried.")

    attempt = session.ssh_service.connect(params, session.known_hosts_file, _print_attempt)
    print(f"Session to {host.alias} closed ({attempt}).")


def run_menu(session: LaunchSession,
             input_fn: Optional[Callable[[str], str]] = None) -> None:
    """Interactive loop: show hosts, read a choice, connect.

    A failed connection or bad input is reported and the loop continues.
    """
    input_fn = input_fn or input
    while True:
        hosts = session.hosts
        display_hosts(hosts)
        choice = input_fn(f"\nEnter host number (1-{len(hosts)}), R)eload, Q)uit: ").strip()

        if choice.lower() in ('q', 'quit', 'exit'):
            break

        if choice.lower() in ('r', 'reload'):
            try:
                session.reload()
                print("Host list reloaded.")
            except SSHLaunchError as e:
                logger.error("Reload failed: %s", e)
                print(f"Error: {e}")
            continue

        try:
            host = select_host(hosts, choice)
            connect_to_host(session, host)
        except InvalidSelection as e:
            print(e)
        except SSHLaunchError as e:
            logger.error("Connection to host failed: %s", e)
            print(f"Error: {e}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='ssh-launch',
        description='Pick a host from your SSH config and connect to it.',
    )
    parser.add_argument('--settings', type=Path, default=None,
                        help=f'settings file (default: {default_settings_path()})')
    parser.add_argument('--config', default=None,
                        help='SSH config file to read instead of Paths.SSHConfig')
    parser.add_argument('--list', action='store_true',
                        help='print the host table and exit')
    parser.add_argument('--tui', action='store_true',
                        help='use the full-screen host picker')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='debug logging to stderr')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    manager = SettingsManager(args.settings)
    setup_logging(manager.settings_path.parent / 'logs', args.verbose)

    try:
        session = LaunchSession.from_manager(manager, config_path=args.config)

        try:
            session.start()
        except (ConfigNotFound, NoHostsFound) as e:
            logger.error("Startup failed: %s", e)
            print(f"Error: {e}")
            return 1

        if args.list:
            display_hosts(session.hosts)
            return 0

        if not command_exists('ssh'):
            print("Warning: 'ssh' was not found on your PATH.")

        if args.tui:
            from ssh_launch.app import SSHLaunchApp
            SSHLaunchApp(session).run()
        else:
            run_menu(session)

    except (KeyboardInterrupt, EOFError):
        print("\nProgram terminated by user")
        return 130

    return 0


if __name__ == '__main__':
    sys.exit(main())
