"""
Command-line interface.

``wuweather run`` is the long-running service; ``refresh`` does one pass
through the Prefect flow. ``devices``, ``status`` and ``serve`` read the
stored snapshot and never touch the network.
"""

from __future__ import annotations

import argparse
import http.server
import sys
import time
from functools import partial
from pathlib import Path

from wuweather import __version__
from wuweather.config import ConfigSource, configure_logging, get_settings
from wuweather.devices.definitions import INTERFACE_NAME
from wuweather.flows.sync import sync_devices
from wuweather.plugin import WeatherPlugin, load_host
from wuweather.renderers.devices import build_status_page, device_rows
from wuweather.store import DataStore

SITE_DIR = Path("site")

COMMAND_HELP = {
    "info": "Show application info",
    "refresh": "Create missing devices and fetch once",
    "run": "Run the periodic sync until Ctrl+C",
    "devices": "List stored devices and their values",
    "status": "Render the device status page to site/",
    "serve": "Serve the status page locally",
}


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="wuweather",
        description="Keep home-automation weather devices in sync with Weather Underground",
    )
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug mode",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")
    for name, help_text in COMMAND_HELP.items():
        subparsers.add_parser(name, help=help_text)

    serve_parser = subparsers.choices["serve"]
    serve_parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port to serve on (default: api_port from settings)",
    )

    return parser


def cmd_info(_args: argparse.Namespace) -> int:
    """Handle the 'info' command."""
    settings = get_settings()
    print(f"Application: {settings.app_name}")
    print(f"Version: {__version__}")
    print(f"Environment: {settings.app_env}")
    print(f"Debug: {settings.debug}")
    print(f"Station: {settings.station_id or '(not set)'}")
    print(f"API key: {'set' if settings.api_key else '(not set)'}")
    print(f"Unit: {settings.unit}")
    print(f"Refresh interval: {settings.refresh_interval_minutes} min")
    return 0


def cmd_refresh(_args: argparse.Namespace) -> int:
    """Handle the 'refresh' command: one reconcile/fetch/apply pass."""
    result = sync_devices()
    print(f"Done. {result['updated']} of {result['devices']} devices updated.")
    return 0


def cmd_run(args: argparse.Namespace) -> int:
    """Handle the 'run' command: periodic sync until interrupted."""
    settings = get_settings()
    if args.debug:
        settings = settings.model_copy(update={"debug": True})

    plugin = WeatherPlugin(ConfigSource(settings), store=DataStore(settings.data_dir))
    plugin.start()
    print(f"Syncing every {settings.refresh_interval_minutes} min (Ctrl+C to stop)")
    try:
        while True:
            time.sleep(1)
    except KeyboardInterrupt:
        print("\nStopping...")
    finally:
        plugin.shutdown()
    return 0


def cmd_devices(_args: argparse.Namespace) -> int:
    """Handle the 'devices' command."""
    settings = get_settings()
    host = load_host(DataStore(settings.data_dir))
    rows = device_rows(host.snapshot(), INTERFACE_NAME)
    if not rows:
        print("No devices yet. Run 'wuweather refresh' first.")
        return 0

    for row in rows:
        print(f"{row.address:<12} {row.display}")
        for child in row.children:
            print(f"  {child.address:<30} {child.display}")
    return 0


def cmd_status(_args: argparse.Namespace) -> int:
    """Handle the 'status' command: write site/index.html."""
    settings = get_settings()
    host = load_host(DataStore(settings.data_dir))
    html = build_status_page(
        host.snapshot(),
        title="Weather devices",
        station=settings.station_id,
        interface=INTERFACE_NAME,
    )
    SITE_DIR.mkdir(parents=True, exist_ok=True)
    output_path = SITE_DIR / "index.html"
    output_path.write_text(html)
    print(f"Wrote {output_path}")
    return 0


def cmd_serve(args: argparse.Namespace) -> int:
    """Handle the 'serve' command: serve the status page locally."""
    settings = get_settings()
    port = args.port if args.port is not None else settings.api_port

    if not SITE_DIR.exists():
        print("No site directory found. Run 'wuweather status' first.", file=sys.stderr)
        return 1

    handler = partial(http.server.SimpleHTTPRequestHandler, directory=str(SITE_DIR))
    with http.server.HTTPServer(("", port), handler) as server:
        print(f"Device status on http://localhost:{port}/ (Ctrl+C to stop)")
        try:
            server.serve_forever()
        except KeyboardInterrupt:
            print("\nServer stopped.")
    return 0


def main() -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        return 0

    configure_logging(args.debug or get_settings().debug)

    commands = {
        "info": cmd_info,
        "refresh": cmd_refresh,
        "run": cmd_run,
        "devices": cmd_devices,
        "status": cmd_status,
        "serve": cmd_serve,
    }

    handler = commands.get(args.command)
    if handler:
        return handler(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
