from __future__ import annotations

import pytest
import requests
from fakes import FakeSession, image, page

from wallpaper_harvest import crawler
from wallpaper_harvest.config import HarvestConfig
from wallpaper_harvest.crawler import build_output_dir, fetch_page, run_harvest

ARTICLE_URL = "https://www.example.com/2026/01/desktop-wallpaper-calendars-january-2026/"
SMALL = "https://www.example.com/wallpapers/jan26/jan26-forest/nocal/jan26-forest-nocal-1920x1080.jpg"
LARGE = "https://www.example.com/wallpapers/jan26/jan26-forest/nocal/jan26-forest-nocal-3840x2160.jpg"

ARTICLE = """
<article>
  <h3>Forest</h3>
  <ul>
    <li><a href="/wallpapers/jan26/jan26-forest/nocal/jan26-forest-nocal-1920x1080.jpg">1920x1080</a></li>
    <li><a href="/wallpapers/jan26/jan26-forest/nocal/jan26-forest-nocal-3840x2160.jpg">3840x2160</a></li>
  </ul>
</article>
"""


def _session() -> FakeSession:
    return FakeSession({ARTICLE_URL: page(ARTICLE), SMALL: image(), LARGE: image()})


def test_run_harvest_downloads_largest_and_skips_on_rerun(tmp_path):
    config = HarvestConfig(output_root=tmp_path)

    session = _session()
    first = run_harvest(ARTICLE_URL, config, session=session)

    folder = tmp_path / "January_2026"
    assert first.folder == folder
    assert first.groups == 1
    assert first.downloaded_16x9 == 1
    assert first.skipped_existing == 0
    assert [path.name for path in folder.iterdir()] == ["jan26-forest-nocal-3840x2160.jpg"]
    assert LARGE in session.requested
    assert SMALL not in session.requested

    session = _session()
    second = run_harvest(ARTICLE_URL, config, session=session)

    assert second.downloaded == 0
    assert second.skipped_existing == 1
    assert session.requested == [ARTICLE_URL]
    assert len(list(folder.iterdir())) == 1


def test_run_harvest_uses_final_url_for_relative_links(tmp_path):
    redirected = "https://mirror.example.org/2026/01/desktop-wallpaper-calendars-january-2026/"
    mirrored = LARGE.replace("www.example.com", "mirror.example.org")
    session = FakeSession({ARTICLE_URL: page(ARTICLE, url=redirected), mirrored: image()})

    summary = run_harvest(ARTICLE_URL, HarvestConfig(output_root=tmp_path), session=session)

    assert summary.downloaded == 1
    assert mirrored in session.requested


def test_run_harvest_with_no_wallpapers(tmp_path):
    session = FakeSession({ARTICLE_URL: page("<p>Nothing this month</p>")})
    summary = run_harvest(ARTICLE_URL, HarvestConfig(output_root=tmp_path), session=session)
    assert summary.groups == 0
    assert summary.downloaded == 0


def test_run_harvest_page_failure_propagates(tmp_path):
    with pytest.raises(requests.RequestException):
        run_harvest(ARTICLE_URL, HarvestConfig(output_root=tmp_path), session=FakeSession({}))


def test_run_harvest_closes_its_own_session(tmp_path, monkeypatch):
    session = _session()
    monkeypatch.setattr(crawler, "build_session", lambda config: session)
    run_harvest(ARTICLE_URL, HarvestConfig(output_root=tmp_path))
    assert session.closed


def test_run_harvest_uses_browser_links_when_rendering(tmp_path, monkeypatch):
    from wallpaper_harvest.models import HarvestedLink

    rendered = [HarvestedLink(href=SMALL, text="1920x1080"), HarvestedLink(href="/", text="Home")]

    async def fake_render(url, config):
        return "<html></html>", url, rendered

    monkeypatch.setattr(crawler, "_render", fake_render)
    session = FakeSession({SMALL: image()})
    summary = run_harvest(
        ARTICLE_URL,
        HarvestConfig(output_root=tmp_path, render=True),
        session=session,
    )

    assert summary.downloaded_16x9 == 1
    assert session.requested == [SMALL]


def test_fetch_page_returns_text_and_final_url():
    session = FakeSession({ARTICLE_URL: page("<p>hi</p>")})
    assert fetch_page(session, ARTICLE_URL, HarvestConfig(output_root=".")) == ("<p>hi</p>", ARTICLE_URL)


def test_build_output_dir(tmp_path):
    config = HarvestConfig(output_root=tmp_path / "walls")
    folder = build_output_dir(config, ARTICLE_URL)
    assert folder == tmp_path / "walls" / "January_2026"
    assert folder.is_dir()

    dry = HarvestConfig(output_root=tmp_path / "dry", dry_run=True)
    assert not build_output_dir(dry, ARTICLE_URL).exists()


def test_build_output_dir_failure_propagates(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("not a directory")
    with pytest.raises(OSError):
        build_output_dir(HarvestConfig(output_root=blocker), ARTICLE_URL)
