"""CLI entrypoint for country stats."""

import argparse
import sys
from pathlib import Path
from typing import Any, Dict, List

from countrystats.api.export import export_stats
from countrystats.api.stats_api import get_country_stats
from countrystats.client.fetcher import StatsClient, StatsLoader
from countrystats.config.loader import load_settings
from countrystats.config.settings import Settings
from countrystats.database.sqlite_client import session_context
from countrystats.errors import DataSourceUnavailable
from countrystats.ingestion.file_ingestor import ingest_all_csvs
from countrystats.utils.logging import get_logger, setup_logging
from countrystats.view.formatting import resolve_timezone
from countrystats.view.sorting import SortSpec
from countrystats.view.table import TableView, column_alignments

logger = get_logger(__name__)


def _settings(args: argparse.Namespace) -> Settings:
    return load_settings(Path(args.config) if args.config else None)


def _fetch_records(args: argparse.Namespace, settings: Settings) -> List[Dict[str, Any]]:
    """Rows from a running server (--api-url) or straight from the database."""
    if args.api_url:
        client = StatsClient(args.api_url, timeout_seconds=settings.client.timeout_seconds)
        return client.fetch_rows()
    return get_country_stats(settings.storage.sqlite_path)


def render_table(view: TableView) -> str:
    """Plain-text rendering of the current page with header sort indicator."""
    headers = view.header_labels()
    cells = view.rendered_page()
    aligns = column_alignments()
    widths = [len(h) for h in headers]
    for row in cells:
        for i, value in enumerate(row):
            widths[i] = max(widths[i], len(value))

    def fmt(values: List[str]) -> str:
        parts = []
        for value, width, align in zip(values, widths, aligns):
            parts.append(value.rjust(width) if align == "right" else value.ljust(width))
        return "  ".join(parts).rstrip()

    lines = [fmt(headers), "-" * len(fmt(headers))]
    if not cells:
        lines.append("No data")
    lines.extend(fmt(row) for row in cells)
    page = view.page_view()
    lines.append("")
    lines.append(f"Page {page.page} of {page.page_count}  ({view.status_text()})")
    return "\n".join(lines)


def cmd_load(args: argparse.Namespace) -> None:
    """Load countries and estimate histories from CSV files."""
    settings = _settings(args)
    countries_csv = Path(args.countries or settings.demo.countries_csv)
    speakers_csv = Path(args.speakers or settings.demo.speakers_csv)
    programmers_csv = Path(args.programmers or settings.demo.programmers_csv)

    with session_context(settings.storage.sqlite_path) as session:
        counts = ingest_all_csvs(countries_csv, speakers_csv, programmers_csv, session)

    print(
        f"Loaded {counts['countries']} countries, {counts['english_speakers']} english speaker estimates, "
        f"{counts['programmers']} programmer estimates"
    )
    logger.info(f"Data loaded successfully: {counts}")


def cmd_serve(args: argparse.Namespace) -> None:
    """Run the HTTP server."""
    import uvicorn

    from countrystats.server.app import create_app

    settings = _settings(args)
    host = args.host or settings.server.host
    port = args.port or settings.server.port
    logger.info(f"API listening on http://{host}:{port}")
    uvicorn.run(create_app(settings), host=host, port=port)


def _build_view(args: argparse.Namespace, settings: Settings) -> TableView:
    view = TableView(
        page_size=args.page_size or settings.view.page_size,
        tz=resolve_timezone(settings.view.date_timezone),
    )
    if args.api_url:
        loader = StatsLoader(StatsClient(args.api_url, settings.client.timeout_seconds), view)
        loader.load()
    else:
        try:
            view.set_rows(get_country_stats(settings.storage.sqlite_path))
        except DataSourceUnavailable as e:
            view.set_error(e.user_message)

    view.set_query(args.search or "")
    view.sort = SortSpec(args.sort or view.sort.key, "desc" if args.desc else "asc")
    view.go_to_page(args.page)
    return view


def cmd_table(args: argparse.Namespace) -> None:
    """Print one page of the country stats table."""
    settings = _settings(args)
    options = settings.view.page_size_options
    if args.page_size is not None and args.page_size not in options:
        print(f"Error: --page-size must be one of {', '.join(str(n) for n in options)}")
        sys.exit(1)
    view = _build_view(args, settings)
    if view.error:
        print(f"Error: {view.error}")
        sys.exit(1)
    print(render_table(view))


def cmd_export(args: argparse.Namespace) -> None:
    """Export the filtered, sorted table."""
    settings = _settings(args)
    try:
        records = _fetch_records(args, settings)
    except DataSourceUnavailable as e:
        logger.error(f"Export failed: {e}")
        print(f"Error: {DataSourceUnavailable.user_message}")
        sys.exit(1)

    result = export_stats(
        records,
        format=args.format,
        query=args.search or "",
        sort_key=args.sort or "Country Name",
        direction="desc" if args.desc else "asc",
        out=Path(args.out) if args.out else None,
        tz=resolve_timezone(settings.view.date_timezone),
    )
    print(result)


def cmd_health(args: argparse.Namespace) -> None:
    """Check a running server's health endpoint."""
    settings = _settings(args)
    client = StatsClient(args.api_url or settings.client.api_base_url, settings.client.timeout_seconds)
    if client.health():
        print("OK")
    else:
        print("UNAVAILABLE")
        sys.exit(1)


def _add_view_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--search", type=str, default="", help="Country name search text")
    parser.add_argument("--sort", type=str, default=None, help="Column key to sort by (e.g. 'Population')")
    parser.add_argument("--desc", action="store_true", help="Sort descending")
    parser.add_argument("--api-url", type=str, default=None, help="Read rows from a running server instead of the database")


def main() -> None:
    """Main CLI entrypoint."""
    parser = argparse.ArgumentParser(
        description="Country statistics for english speaking programmers",
    )
    parser.add_argument("--config", type=str, default=None, help="Path to countrystats.config.yaml")
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    load_parser = subparsers.add_parser("load", help="Load countries and estimates from CSV files")
    load_parser.add_argument("--countries", type=str, default=None, help="countries.csv path")
    load_parser.add_argument("--speakers", type=str, default=None, help="english_speakers.csv path")
    load_parser.add_argument("--programmers", type=str, default=None, help="programmers.csv path")
    load_parser.set_defaults(func=cmd_load)

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API server")
    serve_parser.add_argument("--host", type=str, default=None, help="Bind host")
    serve_parser.add_argument("--port", type=int, default=None, help="Bind port")
    serve_parser.set_defaults(func=cmd_serve)

    table_parser = subparsers.add_parser("table", help="Print one page of the stats table")
    _add_view_arguments(table_parser)
    table_parser.add_argument("--page", type=int, default=1, help="Page number (clamped)")
    table_parser.add_argument("--page-size", type=int, default=None, help="Rows per page")
    table_parser.set_defaults(func=cmd_table)

    export_parser = subparsers.add_parser("export", help="Export the filtered, sorted table")
    _add_view_arguments(export_parser)
    export_parser.add_argument("--format", choices=["csv", "json"], default="csv", help="Export format")
    export_parser.add_argument("--out", type=str, default=None, help="Output file or directory (default: stdout)")
    export_parser.set_defaults(func=cmd_export)

    health_parser = subparsers.add_parser("health", help="Check a running server")
    health_parser.add_argument("--api-url", type=str, default=None, help="Server base URL")
    health_parser.set_defaults(func=cmd_health)

    args = parser.parse_args()
    if not hasattr(args, "func"):
        parser.print_help()
        sys.exit(1)

    setup_logging(_settings(args).log_level)
    args.func(args)


if __name__ == "__main__":
    main()
