"""Image naming, downloading and validation utilities."""

from __future__ import annotations

import logging
import posixpath
from pathlib import Path
from typing import Dict, Optional
from urllib.parse import unquote, urlparse

import requests
from filetype import guess

from .config import DEFAULT_IMAGE_EXTENSION, IMAGE_EXTENSIONS, HarvestConfig
from .grouping import UNKNOWN_GROUP_KEY
from .models import Classification, DownloadSummary, SelectionResult, WallpaperGroup
from .selection import select_best
from .utils import slugify

logger = logging.getLogger("wallpaper_harvest")


def detect_image_format(data: bytes) -> Optional[str]:
    """Detect image type using filetype; returns lowercase extension."""
    kind = guess(data)
    if kind and kind.mime.startswith("image/"):
        ext = kind.extension.lower()
        if ext == "jpeg":
            return "jpg"
        return ext
    return None


def output_filename(result: SelectionResult, group_key: str, sequence: int) -> str:
    """Name the file after the URL, or synthesize one when the URL has no image name."""
    basename = posixpath.basename(unquote(urlparse(result.chosen.url).path))
    stem, dot, extension = basename.rpartition(".")
    if stem and dot and extension.lower() in IMAGE_EXTENSIONS:
        return basename
    if group_key == UNKNOWN_GROUP_KEY:
        group_id = str(sequence)
    else:
        group_id = slugify(group_key)
    return f"wallpaper_{group_id}_{result.chosen.resolution_name}.{DEFAULT_IMAGE_EXTENSION}"


def download_image(
    session: requests.Session,
    url: str,
    destination: Path,
    timeout: Optional[float] = None,
) -> bool:
    """Fetch ``url`` into ``destination``; failures are logged, not raised."""
    try:
        resp = session.get(url, timeout=timeout)
        resp.raise_for_status()
    except requests.RequestException as exc:
        logger.warning("Failed to fetch image %s: %s", url, exc)
        return False

    data = resp.content
    if detect_image_format(data) is None:
        logger.warning(
            "Skipping %s: response is not an image (Content-Type=%s)",
            url,
            resp.headers.get("Content-Type", ""),
        )
        return False

    # Only complete files may appear under the final name; existing files are skipped.
    partial = destination.with_name(destination.name + ".part")
    try:
        partial.write_bytes(data)
        partial.replace(destination)
    except OSError as exc:
        logger.warning("Failed to write image %s: %s", destination, exc)
        try:
            partial.unlink(missing_ok=True)
        except OSError:
            logger.debug("Could not remove partial file %s", partial)
        return False
    return True


def download_selections(
    session: requests.Session,
    groups: Dict[str, WallpaperGroup],
    folder: Path,
    config: HarvestConfig,
) -> DownloadSummary:
    """Select one image per group and save it into ``folder``."""
    summary = DownloadSummary(folder=folder, groups=len(groups))

    for sequence, group in enumerate(groups.values(), start=1):
        result = select_best(group.links)
        if result is None:
            logger.info("No 16:9 or widescreen image in group %s", group.key)
            summary.no_candidate += 1
            continue

        destination = folder / output_filename(result, group.key, sequence)
        if destination.exists():
            logger.info("Skipping %s: already downloaded", destination.name)
            summary.skipped_existing += 1
            continue

        if config.dry_run:
            logger.info(
                "Would download %s (%s, %s) -> %s",
                result.chosen.url,
                result.chosen.resolution_name,
                result.classification.value,
                destination,
            )
            summary.planned.append(destination)
            continue

        logger.info(
            "Downloading %s (%s, %s)",
            result.chosen.url,
            result.chosen.resolution_name,
            result.classification.value,
        )
        if not download_image(session, result.chosen.url, destination, config.request_timeout):
            summary.failed += 1
            continue

        if result.classification is Classification.SIXTEEN_BY_NINE:
            summary.downloaded_16x9 += 1
        else:
            summary.downloaded_widescreen += 1
        summary.written.append(destination)
        logger.info("Saved %s", destination)
    return summary
