"""Tests for the page-view state machine and presentation surface."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import pytest

from bollard_findr.config import COLOR, CONTINENT, AppConfig
from bollard_findr.page import GalleryPage, PageState


def test_page_starts_loading_and_empty(cfg: AppConfig) -> None:
    page = GalleryPage(cfg)

    assert page.state is PageState.LOADING
    assert page.loading
    assert page.visible() == []
    assert page.options == {"color": [], "continent": [], "side": []}
    assert page.status_text() == "Loading catalog..."


def test_load_publishes_catalog_and_options(cfg: AppConfig) -> None:
    page = GalleryPage(cfg)

    asyncio.run(page.load())

    assert page.state is PageState.READY
    assert page.error is None
    assert len(page.catalog) == 5
    assert page.options["continent"] == ["africa", "asia", "europe"]
    assert page.status_text() == "5 of 5 bollards shown"


def test_failed_load_ends_ready_and_empty(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    page = GalleryPage(AppConfig(catalog_path=str(tmp_path / "missing.json")))

    with caplog.at_level(logging.ERROR, logger="bollard_findr"):
        asyncio.run(page.load())

    assert not page.loading
    assert page.catalog == ()
    assert page.visible() == []
    assert page.options == {"color": [], "continent": [], "side": []}
    assert page.error
    assert page.status_text().startswith("Catalog unavailable")
    assert any("Catalog unavailable" in r.getMessage() for r in caplog.records)


def test_malformed_catalog_is_reported_not_raised(tmp_path: Path) -> None:
    bad = tmp_path / "catalog.json"
    bad.write_text('{"images": [{"src": 3}]}', encoding="utf-8")
    page = GalleryPage(AppConfig(catalog_path=str(bad)))

    asyncio.run(page.load())

    assert page.state is PageState.READY
    assert page.catalog == ()


def test_second_load_does_not_refetch(cfg: AppConfig, catalog_file: Path) -> None:
    page = GalleryPage(cfg)
    asyncio.run(page.load())
    catalog = page.catalog
    catalog_file.write_text('{"images": []}', encoding="utf-8")

    asyncio.run(page.load())

    assert page.catalog is catalog


def test_options_follow_catalog_reference(cfg: AppConfig) -> None:
    page = GalleryPage(cfg, (COLOR,))
    asyncio.run(page.load())
    first = page.options

    assert page.options is first

    page.publish(page.catalog[:1])
    assert page.options is not first
    assert page.options == {"color": ["green", "red", "white"]}


def test_toggle_and_counts(cfg: AppConfig) -> None:
    page = GalleryPage(cfg, (COLOR, CONTINENT))
    asyncio.run(page.load())

    page.toggle("continent", "europe")
    page.toggle("color", "blue")

    assert [x.display_label for x in page.visible()] == ["france", "britain"]
    assert page.counts() == {
        "total": 5,
        "visible": 2,
        "selected": {"color": ["blue"], "continent": ["europe"]},
    }

    page.set_selection("color", None)
    assert page.counts()["visible"] == 3


def test_pages_do_not_share_selection(cfg: AppConfig) -> None:
    a = GalleryPage(cfg)
    b = GalleryPage(cfg)

    a.toggle("color", "red")

    assert b.selection.active() == {}


def test_undecodable_catalog_is_reported_not_raised(tmp_path: Path) -> None:
    bad = tmp_path / "catalog.json"
    bad.write_bytes(b'{"images": [{"src": "a.jpg", "name": "caf\xe9"}]}')
    page = GalleryPage(AppConfig(catalog_path=str(bad)))

    asyncio.run(page.load())

    assert page.state is PageState.READY
    assert page.catalog == ()
    assert page.error
    assert page.options == {"color": [], "continent": [], "side": []}
