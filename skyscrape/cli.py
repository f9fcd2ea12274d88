"""
cli.py
=======
Command-line entry point for the Skyscrape weather API.

Usage:
    skyscrape serve [--host HOST] [--port PORT]
    skyscrape weather <city>
    skyscrape check-selectors
"""

import argparse
import os
import sys

import uvicorn
from rich.console import Console
from rich.table import Table
from rich.theme import Theme

from skyscrape.config import Settings, load_settings
from skyscrape.core import create_monitor, create_pipeline
from skyscrape.exceptions import ConfigurationError, SkyscrapeError
from skyscrape.utils.logging import configure_logfire, setup_local_logging

custom_theme = Theme(
    {
        'info': 'dim cyan',
        'warning': 'magenta',
        'danger': 'bold red',
        'success': 'bold green',
        'step': 'bold blue',
    }
)


def run_serve(settings: Settings, args: argparse.Namespace, console: Console) -> int:
    """Run the API server."""
    from skyscrape.api import create_app

    port = args.port or settings.port
    console.print(f'[step]Server running on port {port}[/step]')
    uvicorn.run(create_app(settings), host=args.host, port=port, log_config=None)
    return 0


def run_weather(settings: Settings, args: argparse.Namespace, console: Console) -> int:
    """Fetch the weather for one city and print it."""
    pipeline = create_pipeline(settings)

    try:
        with console.status(f'[step]Fetching weather for {args.city}...[/step]'):
            record = pipeline.get_weather(args.city)
    except SkyscrapeError as e:
        console.print(f'[danger]{e.code}: {e.message}[/danger]')
        if e.detail:
            console.print(f'[info]{e.detail}[/info]')
        return 1

    table = Table(title=f'Weather for {args.city}')
    table.add_column('Field', style='cyan')
    table.add_column('Value', style='green')
    for key, value in record.to_response().items():
        table.add_row(key, value)
    console.print(table)
    return 0


def run_check_selectors(settings: Settings, args: argparse.Namespace, console: Console) -> int:
    """Run a single selector health check and print the report."""
    monitor = create_monitor(settings)

    with console.status('[step]Checking selectors against the reference page...[/step]'):
        report = monitor.check()

    if report.healthy:
        console.print(f'[success]✓ All selectors matched on {report.url}[/success]')
        return 0

    if report.fetch_error:
        console.print(f'[danger]✗ Could not fetch {report.url}: {report.fetch_error}[/danger]')
    for field_name in report.failed_fields:
        selectors = settings.selectors[field_name]
        console.print(f'  [danger]✗ {field_name}[/danger] [dim]→ "{selectors.fallback}" matched nothing[/dim]')
    return 1


COMMANDS = {
    'serve': run_serve,
    'weather': run_weather,
    'check-selectors': run_check_selectors,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='skyscrape', description='Scrape and serve normalized weather data')
    parser.add_argument('--env-file', type=str, help='Dotenv file to load instead of .env')
    parser.add_argument('--log-level', type=str, help='Logging level (overrides LOG_LEVEL)')
    parser.add_argument('--log-file', action='store_true', help='Also write logs to .skyscrape/logs/')

    subparsers = parser.add_subparsers(dest='command', required=True)

    serve = subparsers.add_parser('serve', help='Run the HTTP API')
    serve.add_argument('--host', type=str, default='0.0.0.0', help='Interface to bind (default: 0.0.0.0)')
    serve.add_argument('--port', type=int, help='Port to listen on (default: PORT or 5000)')

    weather = subparsers.add_parser('weather', help='Fetch the weather for one city')
    weather.add_argument('city', type=str, help='City name, e.g. "São Paulo"')

    subparsers.add_parser('check-selectors', help='Check selectors against the reference city once')

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    console = Console(theme=custom_theme)

    try:
        settings = load_settings(args.env_file)
    except ConfigurationError as e:
        console.print(f'[danger]Error: {e}[/danger]')
        return 1

    setup_local_logging(args.log_level or settings.log_level, log_to_file=args.log_file)
    configure_logfire(os.getenv('LOGFIRE_TOKEN'))

    return COMMANDS[args.command](settings, args, console)


if __name__ == '__main__':
    sys.exit(main())
