"""Shared pytest fixtures."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from bollard_findr.catalog import Catalog, catalog_from_entries
from bollard_findr.config import AppConfig, DEFAULT_DIMENSIONS

ENTRIES = [
    {"src": "/italy.jpg", "alt": "Italy", "name": "italy", "colors": ["red", "white", "green"], "continent": "europe", "side": "right"},
    {"src": "/france.jpg", "alt": "France", "name": "france", "colors": ["blue", "white", "red"], "continent": "europe", "side": "right"},
    {"src": "/britain.jpg", "alt": "Britain", "name": "britain", "colors": ["red", "white", "blue"], "continent": "europe", "side": "left"},
    {"src": "/japan.jpg", "alt": "Japan", "name": "japan", "colors": ["white", "yellow"], "continent": "asia", "side": "left"},
    {"src": "/sa.jpg", "alt": "South Africa", "name": "south africa", "colors": ["black", "white"], "continent": "africa", "side": ["left", "right"]},
]


@pytest.fixture
def entries() -> list:
    return [dict(e) for e in ENTRIES]


@pytest.fixture
def catalog(entries) -> Catalog:
    return catalog_from_entries(entries, DEFAULT_DIMENSIONS)


@pytest.fixture
def catalog_file(tmp_path: Path, entries) -> Path:
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps({"images": entries}), encoding="utf-8")
    return path


@pytest.fixture
def cfg(tmp_path: Path, catalog_file: Path) -> AppConfig:
    return AppConfig(catalog_path=str(catalog_file), image_dir=str(tmp_path / "images"), thumb_width=60, thumb_height=40)
