"""Link harvesting from fetched article markup."""

from __future__ import annotations

import html as html_lib
import logging
import re
from typing import Iterable, Iterator, List, Optional

from bs4 import BeautifulSoup
from bs4.exceptions import ParserRejectedMarkup

from .models import HarvestedLink
from .resolution import RESOLUTION_PATTERN

logger = logging.getLogger("wallpaper_harvest")

_ANCHOR_PATTERN = re.compile(r"<a\b([^>]*)>(.*?)</a\s*>", re.IGNORECASE | re.DOTALL)
_HREF_PATTERN = re.compile(
    r"""(?<![\w-])href\s*=\s*(?:"([^"]*)"|'([^']*)'|([^\s"'>]+))""",
    re.IGNORECASE,
)
_TAG_PATTERN = re.compile(r"<[^>]*>")
_IGNORED_SCHEMES = ("javascript:", "mailto:", "data:")


def _normalize_label(text: str) -> str:
    return " ".join(text.split())


def _usable_link(href: str, text: str) -> Optional[HarvestedLink]:
    """Return the link when it has a real target and a resolution label."""
    href = href.strip()
    if not href or href.startswith("#") or href.lower().startswith(_IGNORED_SCHEMES):
        return None
    text = _normalize_label(text)
    if not RESOLUTION_PATTERN.search(text):
        return None
    return HarvestedLink(href=href, text=text)


class LinkSource:
    """Something that can list the resolution-labelled anchors of a page."""

    name = "base"

    def links(self) -> Iterator[HarvestedLink]:
        raise NotImplementedError


class BrowserLinkSource(LinkSource):
    """Anchors as reported by a rendered browser page."""

    name = "browser"

    def __init__(self, anchors: Iterable[HarvestedLink]) -> None:
        self._anchors = list(anchors)

    def links(self) -> Iterator[HarvestedLink]:
        for anchor in self._anchors:
            link = _usable_link(anchor.href, anchor.text)
            if link:
                yield link


class SoupLinkSource(LinkSource):
    """Anchors found by walking the BeautifulSoup DOM."""

    name = "dom"

    def __init__(self, html: str) -> None:
        self._html = html

    def links(self) -> Iterator[HarvestedLink]:
        try:
            soup = BeautifulSoup(self._html, "html.parser")
        except ParserRejectedMarkup as exc:
            logger.debug("DOM parser rejected the page: %s", exc)
            return
        for anchor in soup.find_all("a", href=True):
            link = _usable_link(anchor["href"], anchor.get_text(" ", strip=True))
            if link:
                yield link


class RawTextLinkSource(LinkSource):
    """Anchors found with a plain regular-expression scan of the markup.

    Accepts double-quoted, single-quoted and unquoted ``href`` values with
    other attributes on either side. Unclosed or partial tags are skipped.
    """

    name = "raw"

    def __init__(self, html: str) -> None:
        self._html = html

    def links(self) -> Iterator[HarvestedLink]:
        for match in _ANCHOR_PATTERN.finditer(self._html):
            attributes, inner = match.group(1), match.group(2)
            href_match = _HREF_PATTERN.search(attributes)
            if not href_match:
                continue
            href = next(value for value in href_match.groups() if value is not None)
            label = html_lib.unescape(_TAG_PATTERN.sub(" ", inner))
            link = _usable_link(html_lib.unescape(href), label)
            if link:
                yield link


def build_link_sources(
    html: str,
    structured: Optional[Iterable[HarvestedLink]] = None,
) -> List[LinkSource]:
    """Return link sources in order of preference."""
    sources: List[LinkSource] = []
    if structured is not None:
        sources.append(BrowserLinkSource(structured))
    sources.append(SoupLinkSource(html))
    sources.append(RawTextLinkSource(html))
    return sources


def harvest_links(
    html: str,
    structured: Optional[Iterable[HarvestedLink]] = None,
) -> Iterator[HarvestedLink]:
    """Yield resolution-labelled links from the first source that has any."""
    for source in build_link_sources(html, structured):
        links = source.links()
        first = next(links, None)
        if first is None:
            logger.debug("No resolution links from the %s source", source.name)
            continue
        logger.debug("Harvesting links from the %s source", source.name)
        yield first
        yield from links
        return
