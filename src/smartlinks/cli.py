"""Command-line interface for smartlinks."""

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.table import Table

from . import __version__
from .core.rewriter import RewriteReport, SmartLinkRewriter
from .document.page import HtmlPage
from .logging_config import setup_logging
from .models.config import SmartLinksConfig


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for CLI."""
    parser = argparse.ArgumentParser(
        prog="smartlinks",
        description="Rewrite the anchors of an HTML page to Linkmate smart links",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Rewrite a saved page, print the result to stdout
  smartlinks post.html --url https://blog.example.com/post --publisher-id 123

  # Request exclusive matches and write to a file
  smartlinks post.html --url https://blog.example.com/post --publisher-id 123 \\
      --exclusive-links -o post.rewritten.html

  # Use a YAML config and only print the report
  smartlinks post.html --url https://blog.example.com/post --config smartlinks.yaml --json
        """,
    )

    parser.add_argument(
        "page",
        type=Path,
        help="HTML file to rewrite ('-' reads stdin)",
    )

    parser.add_argument(
        "--url",
        required=True,
        help="URL the page is published at",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=None,
        help="YAML configuration file",
    )

    # Linkmate settings
    linkmate_group = parser.add_argument_group("linkmate settings")
    linkmate_group.add_argument(
        "--publisher-id",
        type=str,
        default=None,
        help="Publisher identifier",
    )
    linkmate_group.add_argument(
        "--exclusive-links",
        action="store_true",
        help="Request exclusive matches for every link",
    )
    linkmate_group.add_argument(
        "--link-attribute",
        type=str,
        default=None,
        metavar="NAME",
        help="Anchor attribute holding the link (default: href)",
    )
    linkmate_group.add_argument(
        "--selector",
        type=str,
        default=None,
        help="CSS selector for eligible anchors (default: a)",
    )
    linkmate_group.add_argument(
        "--endpoint",
        type=str,
        default=None,
        metavar="TEMPLATE",
        help="API endpoint template containing '.pub_id.'",
    )

    # Network settings
    network_group = parser.add_argument_group("network settings")
    network_group.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Request timeout in seconds",
    )
    network_group.add_argument(
        "--proxy",
        type=str,
        metavar="URL",
        help="Proxy URL",
    )
    network_group.add_argument(
        "--user-agent",
        type=str,
        help="Custom User-Agent string",
    )

    # Output control
    output_group = parser.add_argument_group("output control")
    output_group.add_argument(
        "--output",
        "-o",
        type=Path,
        default=None,
        help="Write rewritten HTML here (default: stdout)",
    )
    output_group.add_argument(
        "--json",
        action="store_true",
        dest="json_report",
        help="Print the rewrite report as JSON instead of the HTML on stdout",
    )
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


def build_config(args: argparse.Namespace) -> SmartLinksConfig:
    """
    Merge the optional YAML file with command-line overrides.

    Raises:
        ValidationError: If the merged configuration is invalid
    """
    data: dict = {}
    if args.config:
        data = SmartLinksConfig.from_yaml_file(args.config).model_dump(exclude_none=True)

    linkmate_kwargs: dict = dict(data.get("linkmate", {}))
    if args.publisher_id is not None:
        linkmate_kwargs["publisher_id"] = args.publisher_id
    if args.exclusive_links:
        linkmate_kwargs["exclusive_links"] = True
    if args.link_attribute:
        linkmate_kwargs["link_attribute"] = args.link_attribute
    if args.selector:
        linkmate_kwargs["link_selector"] = args.selector
    if args.endpoint:
        linkmate_kwargs["endpoint"] = args.endpoint
    data["linkmate"] = linkmate_kwargs

    network_kwargs: dict = dict(data.get("network", {}))
    if args.timeout is not None:
        network_kwargs["timeout"] = args.timeout
    if args.proxy:
        network_kwargs["proxy"] = args.proxy
    if args.user_agent:
        network_kwargs["user_agent"] = args.user_agent
    data["network"] = network_kwargs

    # Log level
    if args.verbose:
        data["log_level"] = "DEBUG"
    elif args.quiet:
        data["log_level"] = "ERROR"

    return SmartLinksConfig.model_validate(data)


def _read_page(path: Path) -> str:
    if str(path) == "-":
        return sys.stdin.read()
    return path.read_text(encoding="utf-8")


def _print_report(console: Console, report: RewriteReport) -> None:
    table = Table(title=f"Rewrote {report.rewritten_count} of {report.anchors_seen} anchors")
    table.add_column("Original")
    table.add_column("Smart link", style="green")
    for original, replacement in report.rewritten:
        table.add_row(original, replacement)
    console.print(table)
    if report.used_stale_response:
        console.print("[yellow]Note:[/yellow] replacements came from a cached response")


def run_rewriter(args: argparse.Namespace) -> int:
    """Run the rewriter with given arguments."""
    console = Console(stderr=True)

    try:
        config = build_config(args)
    except Exception as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        return 1

    setup_logging(config.log_level, log_file=str(config.log_file) if config.log_file else None)

    try:
        page = HtmlPage(_read_page(args.page), url=args.url)
    except (OSError, UnicodeDecodeError) as e:
        console.print(f"[red]Error:[/red] cannot read {args.page}: {e}")
        return 1

    async def run() -> RewriteReport:
        async with SmartLinkRewriter(config) as rewriter:
            return await rewriter.rewrite_page(page)

    try:
        report = asyncio.run(run())
    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        if args.verbose:
            import traceback

            traceback.print_exc()
        return 1

    if args.output:
        args.output.write_text(page.to_html(), encoding="utf-8")
    if args.json_report:
        print(json.dumps(report.to_dict(), indent=2))
    elif not args.output:
        sys.stdout.write(page.to_html())

    if not args.quiet and not args.json_report:
        _print_report(console, report)

    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)
    return run_rewriter(args)


if __name__ == "__main__":
    sys.exit(main())
