"""Cluster harvested links into same-wallpaper groups by URL convention."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional, Set
from urllib.parse import unquote, urljoin, urlparse

from .models import CandidateLink, HarvestedLink, WallpaperGroup
from .resolution import parse_resolution

logger = logging.getLogger("wallpaper_harvest")

UNKNOWN_GROUP_KEY = "unknown"


@dataclass(frozen=True)
class GroupingRule:
    """A URL-path pattern and how to turn a match into a group key."""

    name: str
    pattern: re.Pattern[str]
    extract: Callable[[re.Match[str]], str]

    def key_for(self, path: str) -> Optional[str]:
        match = self.pattern.search(path)
        if not match:
            return None
        return self.extract(match) or None


GROUPING_RULES: List[GroupingRule] = [
    GroupingRule(
        name="wallpapers-path",
        pattern=re.compile(r"/wallpapers/[^/]+/([^/]+)/(?:cal|nocal)/", re.IGNORECASE),
        extract=lambda match: match.group(1),
    ),
    GroupingRule(
        name="calendar-filename",
        pattern=re.compile(r"([^/]+?)-(?:nocal|cal)-\d+x\d+\.\w+$", re.IGNORECASE),
        extract=lambda match: match.group(1),
    ),
]


def group_key(url: str, rules: Iterable[GroupingRule] = GROUPING_RULES) -> str:
    """Return the wallpaper identity of ``url``; first matching rule wins."""
    path = unquote(urlparse(url).path)
    for rule in rules:
        key = rule.key_for(path)
        if key:
            return key
    return UNKNOWN_GROUP_KEY


def to_candidate(link: HarvestedLink, base_url: str) -> Optional[CandidateLink]:
    resolution = parse_resolution(link.text)
    if resolution is None:
        return None
    return CandidateLink(
        url=urljoin(base_url, link.href),
        width=resolution.width,
        height=resolution.height,
        text=link.text,
        resolution_name=resolution.name,
    )


def group_links(
    links: Iterable[HarvestedLink],
    base_url: str,
    rules: Iterable[GroupingRule] = GROUPING_RULES,
) -> Dict[str, WallpaperGroup]:
    """Partition links into groups, returned in lexical key order.

    Links whose label no longer parses as a resolution are dropped; a URL
    repeated inside one group is kept once, at its first position.
    """
    rules = list(rules)
    groups: Dict[str, WallpaperGroup] = {}
    seen: Dict[str, Set[str]] = {}
    for link in links:
        candidate = to_candidate(link, base_url)
        if candidate is None:
            logger.debug("Dropping %s: label %r has no resolution", link.href, link.text)
            continue
        key = group_key(candidate.url, rules)
        group = groups.setdefault(key, WallpaperGroup(key=key))
        urls = seen.setdefault(key, set())
        if candidate.url in urls:
            continue
        urls.add(candidate.url)
        group.links.append(candidate)
    return {key: groups[key] for key in sorted(groups)}
