"""Command-line interface for pagefetch."""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Callable, Optional

from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn

from . import __version__
from .core import Fetcher, render_batch_report
from .errors import PagefetchError
from .logging_config import setup_logging
from .models.config import PagefetchConfig
from .models.events import EventType, FetchEvent
from .models.request import FetchRequest
from .models.results import FetchSuccess


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for CLI."""
    parser = argparse.ArgumentParser(
        prog="pagefetch",
        description="Fetch web pages and convert them to clean markdown",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Print the main article of a page as markdown
  pagefetch https://example.com/post

  # Keep the whole page and add front matter
  pagefetch https://example.com --no-simplify --metadata

  # Several pages as one report
  pagefetch https://example.com/a https://example.com/b

  # Run as an MCP server on stdio
  pagefetch --serve
        """,
    )

    parser.add_argument(
        "urls",
        nargs="*",
        metavar="URL",
        help="URL(s) to fetch",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "--serve",
        action="store_true",
        help="Run the MCP server (fetch_url, fetch_urls) on stdio",
    )

    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        metavar="FILE",
        help="YAML configuration file",
    )

    # Fetch options
    fetch_group = parser.add_argument_group("fetch options")
    fetch_group.add_argument(
        "--metadata",
        action="store_true",
        help="Prepend page metadata as front matter",
    )
    fetch_group.add_argument(
        "--no-simplify",
        action="store_true",
        help="Convert the whole page instead of the main article",
    )
    fetch_group.add_argument(
        "--timeout",
        type=int,
        default=None,
        metavar="MS",
        help="Request timeout in milliseconds (default: 30000)",
    )

    # Output control
    output_group = parser.add_argument_group("output control")
    output_group.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Verbose output",
    )
    output_group.add_argument(
        "--quiet",
        "-q",
        action="store_true",
        help="Suppress output",
    )

    return parser


def load_config(args: argparse.Namespace) -> PagefetchConfig:
    """Build configuration from an optional YAML file and CLI flags."""
    config = PagefetchConfig.from_yaml_file(args.config) if args.config else PagefetchConfig()

    updates: dict = {}
    if args.timeout is not None:
        updates["default_timeout_ms"] = args.timeout
    if args.verbose:
        updates["log_level"] = "DEBUG"
    elif args.quiet:
        updates["log_level"] = "ERROR"

    if updates:
        config = PagefetchConfig.model_validate({**config.model_dump(), **updates})
    return config


def run_fetcher(args: argparse.Namespace, config: PagefetchConfig) -> int:
    """Fetch the given URLs and print markdown to stdout."""
    # stdout carries the document, status goes to stderr
    console = Console(stderr=True)

    async def run() -> int:
        async with Fetcher(config) as fetcher:
            if args.quiet:
                return await _fetch(fetcher, args, config, console, None)

            with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                console=console,
                transient=True,
            ) as progress:
                task = progress.add_task("Starting...", total=None)

                def on_event(event: FetchEvent) -> None:
                    if event.type == EventType.BATCH_PROGRESS:
                        progress.update(
                            task,
                            description=f"[cyan]Fetching {event.current}/{event.total}: {event.url}",
                        )
                    elif event.type == EventType.FETCH_STARTED:
                        progress.update(task, description=f"[cyan]{event.message}")
                    elif event.type == EventType.EXTRACTION_FALLBACK:
                        progress.update(task, description=f"[yellow]{event.message}")
                    elif event.is_error:
                        console.print(f"[red]Failed:[/red] {event.url} - {event.error}")

                return await _fetch(fetcher, args, config, console, on_event)

    try:
        return asyncio.run(run())
    except PagefetchError as e:
        console.print(f"[red]Error:[/red] {e}")
        return 1


async def _fetch(
    fetcher: Fetcher,
    args: argparse.Namespace,
    config: PagefetchConfig,
    console: Console,
    on_event: Optional[Callable[[FetchEvent], None]],
) -> int:
    include_metadata = args.metadata
    simplify = not args.no_simplify

    if len(args.urls) == 1:
        request = FetchRequest.build(
            url=args.urls[0],
            include_metadata=include_metadata,
            simplify=simplify,
            timeout_ms=config.default_timeout_ms,
        )
        outcome = await fetcher.fetch(request, emit=on_event)
        if isinstance(outcome, FetchSuccess):
            sys.stdout.write(outcome.text)
            return 0
        console.print(f"[red]Error fetching {args.urls[0]}:[/red] {outcome.message}")
        return 1

    batch = await fetcher.fetch_many(
        args.urls,
        include_metadata=include_metadata,
        simplify=simplify,
        timeout_ms=config.default_timeout_ms,
        emit=on_event,
    )
    sys.stdout.write(render_batch_report(batch))
    return 0 if batch.failed == 0 else 1


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)
    console = Console(stderr=True)

    try:
        config = load_config(args)
    except Exception as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        return 1

    setup_logging(
        level=config.log_level,
        log_file=str(config.log_file) if config.log_file else None,
    )

    if args.serve:
        from .server import run_server

        run_server(config)
        return 0

    if not args.urls:
        console.print("[red]Error:[/red] Please provide a URL to fetch (or --serve)")
        return 1

    return run_fetcher(args, config)


if __name__ == "__main__":
    sys.exit(main())
