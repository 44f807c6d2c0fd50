"""Command-line entry point for webidcrawl."""
import argparse
import asyncio
import sys
from pathlib import Path
from typing import List, Optional
import logfire

from webidcrawl.models.frontier_model import DepthResetPolicy


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="webidcrawl",
        description="Discover WebID profiles carrying an OIDC issuer"
    )
    parser.add_argument("--config", type=Path, help="Path to crawler_config.yaml")
    parser.add_argument("--corpus-dir", type=Path, help="Corpus directory (default: webids)")
    parser.add_argument("--verbose", action="store_true", help="Verbose console logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    crawl = subparsers.add_parser("crawl", help="Crawl the WebID graph")
    crawl.add_argument("seeds", nargs="*", help="Additional seed WebIDs")
    crawl.add_argument("--seed-file", type=Path, help="File with one seed WebID per line")
    crawl.add_argument("--catalog", help="URL or path of a JSON catalog of known WebIDs")
    crawl.add_argument("--max-concurrent", type=int, help="Maximum fetches in flight")
    crawl.add_argument("--max-depth", type=int, help="Depth ceiling for neighbor expansion")
    crawl.add_argument(
        "--depth-policy",
        choices=[policy.value for policy in DepthResetPolicy],
        help="When neighbors restart at depth 0"
    )

    export = subparsers.add_parser("export", help="Write profiles.json and profiles.ttl")
    export.add_argument("--output-dir", type=Path, help="Output directory (default: public)")

    return parser.parse_args(argv)


def build_settings(args: argparse.Namespace):
    """Load settings and apply command-line overrides."""
    from webidcrawl.config.settings import get_settings

    if args.config is not None and not args.config.exists():
        raise ValueError(f"Configuration file not found: {args.config}")
    app_settings = get_settings(args.config)
    if args.corpus_dir:
        app_settings.corpus.directory = args.corpus_dir
    if args.command == "crawl":
        if args.catalog:
            app_settings.catalog.location = args.catalog
        if args.max_concurrent is not None:
            app_settings.crawler.max_concurrent_requests = args.max_concurrent
        if args.max_depth is not None:
            app_settings.crawler.max_depth = args.max_depth
        if args.depth_policy:
            app_settings.crawler.depth_reset_policy = DepthResetPolicy(args.depth_policy)
    elif args.command == "export" and args.output_dir:
        app_settings.export.output_dir = args.output_dir
    return app_settings


def _cancel_pending(loop: asyncio.AbstractEventLoop) -> None:
    pending = asyncio.all_tasks(loop)
    for task in pending:
        task.cancel()
    loop.run_until_complete(asyncio.gather(*pending, return_exceptions=True))


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for the application."""
    args = parse_args(argv)

    from webidcrawl.utils.logging import setup_logging
    try:
        app_settings = build_settings(args)
    except ValueError as e:
        setup_logging(verbose=args.verbose)
        logfire.error("Invalid configuration", error=str(e))
        sys.exit(1)

    setup_logging(min_log_level=app_settings.log_level, verbose=args.verbose or app_settings.debug)

    from webidcrawl.main import CrawlerApp

    app = CrawlerApp(
        settings=app_settings,
        seeds=getattr(args, "seeds", []),
        seed_file=getattr(args, "seed_file", None)
    )
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        if args.command == "export":
            report = loop.run_until_complete(app.export())
            logfire.info(
                "Exported {exported} profiles to {path}",
                exported=report.exported,
                path=str(report.json_path)
            )
        else:
            # The scheduler logs the crawl summary
            loop.run_until_complete(app.run())
    except KeyboardInterrupt:
        _cancel_pending(loop)
        if app.summary is not None:
            logfire.warning("Interrupted, crawled {accepted} WebIDs", accepted=app.summary.accepted)
        sys.exit(130)
    except Exception as e:
        logfire.error("Application error", error=str(e))
        sys.exit(1)
    finally:
        loop.close()


if __name__ == "__main__":
    main()
