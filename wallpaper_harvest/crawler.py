"""High-level orchestration: fetch the article, pick wallpapers, save them."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import List, Optional, Tuple

import requests
from playwright.async_api import Playwright, async_playwright

from .config import HarvestConfig
from .content import harvest_links
from .grouping import group_links
from .images import download_selections
from .models import DownloadSummary, HarvestedLink
from .utils import derive_folder_name

logger = logging.getLogger("wallpaper_harvest")

_BROWSER_ANCHORS_SCRIPT = (
    "anchors => anchors.map(a => [a.href, a.innerText || a.textContent || ''])"
)


def build_session(config: HarvestConfig) -> requests.Session:
    session = requests.Session()
    session.headers["User-Agent"] = config.user_agent
    return session


def fetch_page(
    session: requests.Session,
    url: str,
    config: HarvestConfig,
) -> Tuple[str, str]:
    """GET the article (following redirects) and return its HTML and final URL."""
    logger.info("Loading %s", url)
    resp = session.get(url, timeout=config.request_timeout, allow_redirects=True)
    resp.raise_for_status()
    return resp.text, resp.url


async def render_page(
    playwright: Playwright,
    url: str,
    config: HarvestConfig,
) -> Tuple[str, str, List[HarvestedLink]]:
    """Navigate with Playwright and return HTML, final URL and the page's anchors."""
    browser = await playwright.chromium.launch(headless=True)
    page = await browser.new_page()
    page.set_default_navigation_timeout(config.navigation_timeout * 1000)
    try:
        logger.info("Rendering %s", url)
        await page.goto(url, wait_until="networkidle")
        if config.wait_after_load:
            await page.wait_for_timeout(int(config.wait_after_load * 1000))
        html = await page.content()
        anchors = await page.eval_on_selector_all("a[href]", _BROWSER_ANCHORS_SCRIPT)
        final_url = page.url
    finally:
        await browser.close()
    links = [HarvestedLink(href=href, text=text) for href, text in anchors]
    return html, final_url, links


async def _render(url: str, config: HarvestConfig) -> Tuple[str, str, List[HarvestedLink]]:
    async with async_playwright() as playwright:
        return await render_page(playwright, url, config)


def load_page(
    session: requests.Session,
    url: str,
    config: HarvestConfig,
) -> Tuple[str, str, Optional[List[HarvestedLink]]]:
    """Return HTML, final URL and, when rendered, the browser's link list."""
    if config.render:
        return asyncio.run(_render(url, config))
    html, final_url = fetch_page(session, url, config)
    return html, final_url, None


def build_output_dir(config: HarvestConfig, url: str) -> Path:
    """Return the ``<Month>_<Year>`` folder for ``url``, creating it unless dry-running."""
    output_dir = config.output_root / derive_folder_name(url)
    if not config.dry_run:
        output_dir.mkdir(parents=True, exist_ok=True)
    return output_dir


def run_harvest(
    url: str,
    config: HarvestConfig,
    session: Optional[requests.Session] = None,
) -> DownloadSummary:
    """Run the whole pipeline for one article URL.

    Page fetch and folder creation errors propagate; per-image failures are
    counted in the returned summary.
    """
    owns_session = session is None
    if session is None:
        session = build_session(config)
    try:
        html, final_url, structured = load_page(session, url, config)
        groups = group_links(harvest_links(html, structured), final_url)
        logger.info("Found %d wallpaper group(s) on %s", len(groups), final_url)

        output_dir = build_output_dir(config, url)
        return download_selections(session, groups, output_dir, config)
    finally:
        if owns_session:
            session.close()
