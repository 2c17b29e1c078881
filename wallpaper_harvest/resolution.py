"""Resolution parsing and aspect-ratio classification."""

from __future__ import annotations

import re
from typing import Optional

from .models import ResolutionLabel

RESOLUTION_PATTERN = re.compile(r"(\d+)\s*[xX×]\s*(\d+)")

SIXTEEN_BY_NINE_TOLERANCE = 0.05
WIDESCREEN_MIN_RATIO = 1.33


def parse_resolution(text: str) -> Optional[ResolutionLabel]:
    """Find a ``WxH`` (or ``W×H``) resolution in ``text``.

    Returns ``None`` when the text carries no resolution.
    """
    if not text:
        return None
    match = RESOLUTION_PATTERN.search(text)
    if not match:
        return None
    width = int(match.group(1))
    height = int(match.group(2))
    return ResolutionLabel(width=width, height=height, name=f"{width}x{height}")


def is_sixteen_by_nine(width: int, height: int) -> bool:
    """True when the ratio, rounded to two places, is within tolerance of 16:9."""
    if height == 0:
        return False
    ratio = round(width / height, 2)
    target = round(16 / 9, 2)
    return abs(ratio - target) < SIXTEEN_BY_NINE_TOLERANCE


def is_widescreen(width: int, height: int) -> bool:
    """True for anything wider than 4:3.

    The ratio is rounded to two places so 1024x768 (1.3333) stays out.
    """
    if height == 0:
        return False
    return round(width / height, 2) > WIDESCREEN_MIN_RATIO
