"""Command-line entry point for the wallpaper harvester."""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import Sequence

import requests
from playwright.async_api import Error as PlaywrightError

from .config import DEFAULT_USER_AGENT, HarvestConfig
from .crawler import run_harvest
from .models import DownloadSummary

logger = logging.getLogger("wallpaper_harvest.cli")


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description=(
            "Download the best 16:9 (or widescreen) image of every wallpaper "
            "linked from a monthly wallpaper article."
        ),
    )
    parser.add_argument("url", help="Article URL listing the wallpapers")
    parser.add_argument(
        "--output",
        default=".",
        type=Path,
        help="Base directory; images go into a <Month>_<Year> folder below it",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="HTTP timeout in seconds for the page and each image (default: none)",
    )
    parser.add_argument(
        "--user-agent",
        default=DEFAULT_USER_AGENT,
        help="User-Agent header sent with every request",
    )
    parser.add_argument(
        "--render",
        action="store_true",
        help="Render the article with Playwright and use the browser's link list",
    )
    parser.add_argument(
        "--wait",
        type=float,
        default=1.0,
        help="Seconds to wait after network idle before reading a rendered page",
    )
    parser.add_argument(
        "--navigation-timeout",
        type=float,
        default=30.0,
        help="Navigation timeout in seconds when rendering",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Report what would be downloaded without writing anything",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    return parser.parse_args(argv)


def log_summary(summary: DownloadSummary, elapsed: float) -> None:
    if summary.groups == 0:
        logger.warning("No resolution-labelled wallpaper links found")
    elif not (summary.downloaded or summary.skipped_existing or summary.planned):
        logger.warning("No wallpapers were saved")
    logger.info(
        "Finished in %.2fs: %d group(s), %d downloaded (%d 16:9, %d widescreen), "
        "%d skipped, %d failed, %d without a suitable image",
        elapsed,
        summary.groups,
        summary.downloaded,
        summary.downloaded_16x9,
        summary.downloaded_widescreen,
        summary.skipped_existing,
        summary.failed,
        summary.no_candidate,
    )
    if summary.planned:
        logger.info("Dry run: %d image(s) would be downloaded", len(summary.planned))
    if summary.folder is not None:
        logger.info("Output folder: %s", summary.folder)


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )

    config = HarvestConfig(
        output_root=Path(args.output).resolve(),
        request_timeout=args.timeout,
        user_agent=args.user_agent,
        render=args.render,
        wait_after_load=args.wait,
        navigation_timeout=args.navigation_timeout,
        dry_run=args.dry_run,
    )

    overall_start = time.perf_counter()
    try:
        summary = run_harvest(args.url, config)
    except (requests.RequestException, PlaywrightError):
        logger.exception("Failed to load %s", args.url)
        return 1
    except OSError:
        logger.exception("Cannot prepare output folder under %s", config.output_root)
        return 1

    log_summary(summary, time.perf_counter() - overall_start)
    return 0


if __name__ == "__main__":
    sys.exit(main())
