from __future__ import annotations

import asyncio
from pathlib import Path

from wallpaper_harvest import mcp_server
from wallpaper_harvest.models import DownloadSummary


def test_format_summary():
    folder = Path("/tmp/January_2026")
    summary = DownloadSummary(
        folder=folder,
        groups=3,
        downloaded_16x9=1,
        downloaded_widescreen=1,
        skipped_existing=1,
        written=[folder / "owl.jpg", folder / "lake.png"],
    )
    text = mcp_server.format_summary(summary)
    assert "Groups: 3" in text
    assert "Downloaded: 2 (16:9: 1, widescreen: 1)" in text
    assert "Skipped (already present): 1" in text
    assert "- owl.jpg" in text
    assert "- lake.png" in text


def test_harvest_tool_runs_pipeline(tmp_path, monkeypatch):
    calls = []

    def fake_run_harvest(url, config):
        calls.append((url, config))
        return DownloadSummary(folder=config.output_root / "March_2026", groups=0)

    monkeypatch.setattr(mcp_server, "run_harvest", fake_run_harvest)
    text = asyncio.run(
        mcp_server.harvest("https://example.com/wallpapers-march-2026/", str(tmp_path), dry_run=True)
    )

    assert "Groups: 0" in text
    (url, config), = calls
    assert url == "https://example.com/wallpapers-march-2026/"
    assert config.output_root == tmp_path.resolve()
    assert config.dry_run
