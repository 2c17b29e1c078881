"""Configuration objects and constants for the wallpaper harvester."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; wallpaper-harvest/0.1)"
IMAGE_EXTENSIONS = {"jpg", "jpeg", "png", "webp", "bmp", "gif"}
DEFAULT_IMAGE_EXTENSION = "jpg"


@dataclass
class HarvestConfig:
    """Top-level settings that control fetching, selection and downloads."""

    output_root: Path
    request_timeout: Optional[float] = None
    user_agent: str = DEFAULT_USER_AGENT
    render: bool = False
    wait_after_load: float = 1.0
    navigation_timeout: float = 30.0
    dry_run: bool = False
