"""Pick the best image of a wallpaper group."""

from __future__ import annotations

from typing import Callable, List, Optional, Sequence, Tuple

from .models import CandidateLink, Classification, SelectionResult
from .resolution import is_sixteen_by_nine, is_widescreen

SELECTION_TIERS: List[Tuple[Classification, Callable[[int, int], bool]]] = [
    (Classification.SIXTEEN_BY_NINE, is_sixteen_by_nine),
    (Classification.WIDESCREEN, is_widescreen),
]


def _largest(links: Sequence[CandidateLink]) -> CandidateLink:
    # max() keeps the first of equal elements
    return max(links, key=lambda link: link.pixels)


def select_best(links: Sequence[CandidateLink]) -> Optional[SelectionResult]:
    """Return the largest 16:9 link, else the largest widescreen one, else None."""
    for classification, accepts in SELECTION_TIERS:
        matching = [link for link in links if accepts(link.width, link.height)]
        if matching:
            return SelectionResult(chosen=_largest(matching), classification=classification)
    return None
