#!/usr/bin/env python3
"""
Chat Room Client - Main Entry Point

Connects to a websocket chat server, joins a room and exchanges messages.

Usage:
    python main_client.py [--endpoint URL] [--user-id NAME] [--room-id ROOM] [--gui | --cli]

Modes:
    --gui        Launch with PyQt6 GUI (default)
    --cli        Launch with command-line interface

Settings not given on the command line are read from CHAT_ENDPOINT,
CHAT_USER_ID, CHAT_ROOM_ID and CHAT_OPEN_TIMEOUT.
"""

import sys
import argparse

from client.utils.config import ClientConfig
from client.utils.logger import logger


def run_gui_client(config: ClientConfig) -> int:
    """Run the GUI client."""
    try:
        from client.ui.client_gui import main as gui_main
    except ImportError:
        print("[ERROR] PyQt6 not installed. Install with: pip install PyQt6")
        return 1

    return gui_main(config)


def run_cli_client(config: ClientConfig) -> int:
    """Run the CLI client."""
    import asyncio
    from client.ui.console import run_console_client

    try:
        started = asyncio.run(run_console_client(config))
    except KeyboardInterrupt:
        print("\n[INFO] Interrupted by user")
        return 0
    return 0 if started else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Chat Room Client')
    parser.add_argument('--endpoint', type=str, default=None,
                        help='Chat server websocket URL (default: ws://localhost:8080/chats)')
    parser.add_argument('--user-id', type=str, default=None,
                        help='Sender identity (default: User)')
    parser.add_argument('--room-id', type=str, default=None,
                        help='Room to join (default: room1)')
    parser.add_argument('--open-timeout', type=float, default=None,
                        help='Seconds to wait for the connection to open (default: 10)')
    parser.add_argument('--log-level', type=str, default=None,
                        help='Logging level (default: INFO, or CHAT_LOG_LEVEL)')
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument('--gui', action='store_true',
                      help='Run with the PyQt6 window (default)')
    mode.add_argument('--cli', action='store_true',
                      help='Run in command-line mode')
    return parser


def main(argv=None) -> int:
    """Main entry point."""
    import os

    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        logger.set_level(args.log_level or os.environ.get('CHAT_LOG_LEVEL', 'INFO'))
        config = ClientConfig.from_env(
            endpoint=args.endpoint,
            user_id=args.user_id,
            room_id=args.room_id,
            open_timeout=args.open_timeout,
        )
    except ValueError as e:
        parser.error(str(e))

    # Always use GUI unless --cli is specified
    if args.cli:
        return run_cli_client(config)
    return run_gui_client(config)


if __name__ == "__main__":
    sys.exit(main())
