"""MCP server exposing the wallpaper harvester as a tool."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from mcp.server.fastmcp import FastMCP

from .config import HarvestConfig
from .crawler import run_harvest
from .models import DownloadSummary

logger = logging.getLogger("wallpaper_harvest")
logger.setLevel(logging.ERROR)

mcp = FastMCP(name="wallpaper-harvest")


def format_summary(summary: DownloadSummary) -> str:
    lines = [
        f"Folder: {summary.folder}",
        f"Groups: {summary.groups}",
        f"Downloaded: {summary.downloaded} "
        f"(16:9: {summary.downloaded_16x9}, widescreen: {summary.downloaded_widescreen})",
        f"Skipped (already present): {summary.skipped_existing}",
        f"Failed: {summary.failed}",
        f"No suitable image: {summary.no_candidate}",
    ]
    lines.extend(f"- {path.name}" for path in summary.written)
    lines.extend(f"- (planned) {path.name}" for path in summary.planned)
    return "\n".join(lines)


@mcp.tool()
async def harvest(url: str, output: str = ".", dry_run: bool = False) -> str:
    """Download the best wallpaper images linked from an article URL."""

    config = HarvestConfig(
        output_root=Path(output).expanduser().resolve(),
        dry_run=dry_run,
    )
    summary = await asyncio.to_thread(run_harvest, url, config)
    return format_summary(summary)


def main() -> None:
    """Entry point for running the MCP server."""
    logging.basicConfig(level=logging.ERROR)
    mcp.run()


if __name__ == "__main__":
    main()
