"""Utility helpers for string normalization and folder naming."""

from __future__ import annotations

import calendar
import datetime as dt
import re
from typing import Optional
from urllib.parse import urlparse

SLUG_PATTERN = re.compile(r"[^a-z0-9]+")

_MONTH_NAMES = {
    name.lower()
    for name in list(calendar.month_name[1:]) + list(calendar.month_abbr[1:])
}

# Tried in order; (a) and (b) only accept real month names.
_DATED_PATH_PATTERN = re.compile(r"/\d{4}/\d{2}/[^?#]*-([a-z]+)-(\d{4})", re.IGNORECASE)
_TRAILING_PATTERN = re.compile(r"-([a-z]+)-(\d{4})/?$", re.IGNORECASE)
_GENERIC_PATTERN = re.compile(r"([a-z]+)[-_](\d{4})", re.IGNORECASE)


def slugify(value: str, fallback: str = "wallpaper") -> str:
    """Generate a filesystem-friendly slug using ASCII characters only."""
    normalized = value.encode("ascii", "ignore").decode("ascii")
    normalized = normalized.lower()
    normalized = SLUG_PATTERN.sub("-", normalized).strip("-")
    return normalized or fallback


def _month_folder(month: str, year: str) -> str:
    return f"{month.capitalize()}_{year}"


def derive_folder_name(url: str, today: Optional[dt.date] = None) -> str:
    """Return the ``<Month>_<Year>`` folder name for an article URL."""
    path = urlparse(url).path or url

    match = _DATED_PATH_PATTERN.search(path)
    if match and match.group(1).lower() in _MONTH_NAMES:
        return _month_folder(match.group(1), match.group(2))

    match = _TRAILING_PATTERN.search(path)
    if match and match.group(1).lower() in _MONTH_NAMES:
        return _month_folder(match.group(1), match.group(2))

    match = _GENERIC_PATTERN.search(path)
    if match:
        return _month_folder(match.group(1), match.group(2))

    today = today or dt.date.today()
    return today.strftime("%B_%Y")
