"""Data models used throughout the harvesting pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional


@dataclass(frozen=True)
class ResolutionLabel:
    """Pixel resolution parsed from a link label."""

    width: int
    height: int
    name: str


@dataclass(frozen=True)
class HarvestedLink:
    """Raw anchor found on the page: its href and visible label."""

    href: str
    text: str


@dataclass(frozen=True)
class CandidateLink:
    """Absolute image link annotated with the resolution from its label."""

    url: str
    width: int
    height: int
    text: str
    resolution_name: str

    @property
    def pixels(self) -> int:
        return self.width * self.height


@dataclass
class WallpaperGroup:
    """Links believed to be the same wallpaper at different resolutions."""

    key: str
    links: List[CandidateLink] = field(default_factory=list)


class Classification(str, Enum):
    """Aspect tier an image satisfied when it was selected."""

    SIXTEEN_BY_NINE = "16:9"
    WIDESCREEN = "widescreen"


@dataclass(frozen=True)
class SelectionResult:
    """Winning link of a group and the tier it was chosen from."""

    chosen: CandidateLink
    classification: Classification


@dataclass
class DownloadSummary:
    """Counters reported at the end of a run."""

    folder: Optional[Path] = None
    groups: int = 0
    downloaded_16x9: int = 0
    downloaded_widescreen: int = 0
    skipped_existing: int = 0
    failed: int = 0
    no_candidate: int = 0
    written: List[Path] = field(default_factory=list)
    planned: List[Path] = field(default_factory=list)

    @property
    def downloaded(self) -> int:
        return self.downloaded_16x9 + self.downloaded_widescreen
