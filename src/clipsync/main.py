#!/usr/bin/env python3

import argparse
import asyncio
import logging
import sys
from pathlib import Path

import uvicorn

from clipsync.api import create_app
from clipsync.app import ClipSyncApp
from clipsync.config import AppConfig
from clipsync.storage.factory import BACKENDS

logger = logging.getLogger(__name__)


def parse_args(config: AppConfig):
    parser = argparse.ArgumentParser(
        description="ClipSync - capture, classify and organize clipboard items"
    )

    parser.add_argument(
        "-s", "--storage",
        choices=BACKENDS,
        default=config.storage,
        help=f"Local storage backend (default: {config.storage})"
    )

    parser.add_argument(
        "--data-dir",
        type=Path,
        default=config.data_dir,
        help=f"Directory for file storage (default: {config.data_dir})"
    )

    parser.add_argument(
        "--host",
        default=config.api_host,
        help=f"API bind address (default: {config.api_host})"
    )

    parser.add_argument(
        "-p", "--port",
        type=int,
        default=config.api_port,
        help=f"API port (default: {config.api_port})"
    )

    parser.add_argument(
        "--no-api",
        action="store_true",
        default=not config.api_enabled,
        help="Do not serve the HTTP API"
    )

    parser.add_argument(
        "--no-watch",
        action="store_true",
        default=not config.watch_clipboard,
        help="Do not poll the system clipboard"
    )

    parser.add_argument(
        "--auto-save",
        action="store_true",
        help="Turn on autoSaveClipboard before starting"
    )

    parser.add_argument(
        "--shortcut",
        default=config.shortcut,
        help=f"Quick-capture key chord (default: {config.shortcut})"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose debug logging"
    )

    return parser.parse_args()


async def run(app: ClipSyncApp, args) -> None:
    await app.start(watch_clipboard=not args.no_watch)
    if args.auto_save:
        await app.dispatcher.update_settings(autoSaveClipboard=True)

    try:
        if args.no_api:
            print("ClipSync running. Press Ctrl+C to stop")
            await asyncio.Event().wait()
        else:
            server = uvicorn.Server(uvicorn.Config(
                create_app(app),
                host=args.host,
                port=args.port,
                log_level="debug" if args.verbose else "info",
            ))
            await server.serve()
    finally:
        await app.stop()


def main():
    logging.basicConfig(level=logging.INFO, format='%(levelname)s: %(message)s')

    config = AppConfig.from_env()
    args = parse_args(config)

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    config = AppConfig(
        storage=args.storage,
        data_dir=args.data_dir,
        api_enabled=not args.no_api,
        api_host=args.host,
        api_port=args.port,
        watch_clipboard=not args.no_watch,
        shortcut=args.shortcut,
    )

    try:
        app = ClipSyncApp.from_config(config)
    except Exception as e:
        logger.error(f"Could not start ClipSync: {e}")
        sys.exit(1)

    try:
        asyncio.run(run(app, args))
    except KeyboardInterrupt:
        print("\nStopping...")
    except Exception as e:
        logger.error(f"Fatal error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
