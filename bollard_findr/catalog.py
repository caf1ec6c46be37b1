from __future__ import annotations

import asyncio
import json
import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, List, Mapping, Sequence, Tuple
from urllib.parse import urlparse

import requests
import yaml

from .config import AppConfig, DEFAULT_DIMENSIONS, FacetDimension, MatchMode

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = (".png", ".jpg", ".jpeg", ".webp")
YAML_SUFFIXES = (".yaml", ".yml")


class _CatalogYamlLoader(yaml.SafeLoader):
    """SafeLoader that keeps plain scalars such as `no`, `on` or `1` as strings."""


# only null keeps its implicit resolver; booleans, numbers and dates stay text
_CatalogYamlLoader.yaml_implicit_resolvers = {
    first: [r for r in resolvers if r[0] == "tag:yaml.org,2002:null"]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


class CatalogError(Exception):
    """The catalog document could not be fetched, decoded or validated."""


@dataclass(frozen=True)
class CatalogItem:
    image_ref: str
    display_label: str
    alt_text: str
    tags: Mapping[str, FrozenSet[str]] = field(default_factory=dict)

    def values(self, dimension: str) -> FrozenSet[str]:
        return self.tags.get(dimension, frozenset())


Catalog = Tuple[CatalogItem, ...]


def is_url(location: str) -> bool:
    return urlparse(location).scheme in ("http", "https")


def _join_url(base: str, *parts: str) -> str:
    segments = [base.rstrip("/")] + [p.strip("/") for p in parts if p and p.strip("/")]
    return "/".join(segments)


def resolve_catalog_location(cfg: AppConfig) -> str:
    if is_url(cfg.catalog_path) or not cfg.asset_prefix:
        return cfg.catalog_path
    if is_url(cfg.asset_prefix):
        return _join_url(cfg.asset_prefix, cfg.catalog_path)
    return os.path.join(cfg.asset_prefix, cfg.catalog_path.lstrip("/"))


def resolve_asset(item: CatalogItem, cfg: AppConfig) -> str:
    """Final location of an item's image. Existence is not checked."""
    ref = item.image_ref
    if is_url(ref):
        return ref
    if is_url(cfg.asset_prefix):
        return _join_url(cfg.asset_prefix, cfg.image_dir, ref)
    parts = [cfg.asset_prefix] if cfg.asset_prefix else []
    if cfg.image_dir:
        # an absolute image_dir would otherwise discard the prefix
        parts.append(cfg.image_dir.lstrip("/") if parts else cfg.image_dir)
    return os.path.join(*parts, ref.lstrip("/"))


def read_catalog_document(location: str, timeout: float = 10.0) -> str:
    if is_url(location):
        resp = requests.get(location, timeout=timeout)
        resp.raise_for_status()
        return resp.text
    with open(location, "r", encoding="utf-8") as f:
        return f.read()


def document_format(location: str) -> str:
    path = urlparse(location).path if is_url(location) else location
    return "yaml" if path.lower().endswith(YAML_SUFFIXES) else "json"


def _normalize_tag(value: Any, where: str) -> FrozenSet[str]:
    if value is None:
        return frozenset()
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple)):
        raise CatalogError(f"{where}: expected a string or a list of strings, got {type(value).__name__}")
    out = set()
    for v in value:
        if not isinstance(v, str):
            raise CatalogError(f"{where}: tag values must be strings, got {type(v).__name__}")
        v = v.strip()
        if v:
            out.add(v)
    return frozenset(out)


def _parse_item(entry: Any, index: int, dimensions: Sequence[FacetDimension]) -> CatalogItem:
    if not isinstance(entry, dict):
        raise CatalogError(f"images[{index}]: expected a mapping")
    for key in ("src", "name"):
        if not isinstance(entry.get(key), str):
            raise CatalogError(f"images[{index}]: missing or invalid '{key}'")
    alt = entry.get("alt")
    if alt is not None and not isinstance(alt, str):
        raise CatalogError(f"images[{index}]: 'alt' must be a string")

    tags = {
        dim.name: _normalize_tag(entry.get(dim.field), f"images[{index}].{dim.field}")
        for dim in dimensions
    }
    return CatalogItem(
        image_ref=entry["src"],
        display_label=entry["name"],
        alt_text=alt if alt is not None else entry["name"],
        tags=tags,
    )


def parse_catalog(
    text: str,
    dimensions: Sequence[FacetDimension] = DEFAULT_DIMENSIONS,
    fmt: str = "json",
) -> Catalog:
    """Decode a catalog document and normalize every entry.

    Tag fields become sets regardless of whether the document spells them as a
    single string or a list; fields the document does not carry become empty
    sets. Any structural problem fails the whole document.
    """
    try:
        data = yaml.load(text, Loader=_CatalogYamlLoader) if fmt == "yaml" else json.loads(text)
    except (ValueError, yaml.YAMLError) as exc:
        raise CatalogError(f"could not decode catalog ({fmt}): {exc}") from exc

    if data is None:
        return ()
    if not isinstance(data, dict):
        raise CatalogError("catalog root must be a mapping")
    images = data.get("images", [])
    if images is None:
        return ()
    if not isinstance(images, list):
        raise CatalogError("'images' must be a list")
    return tuple(_parse_item(entry, i, dimensions) for i, entry in enumerate(images))


def load_catalog(
    location: str,
    dimensions: Sequence[FacetDimension] = DEFAULT_DIMENSIONS,
    timeout: float = 10.0,
) -> Catalog:
    logger.info("Loading catalog from %s", location)
    try:
        text = read_catalog_document(location, timeout=timeout)
    except (requests.RequestException, OSError, UnicodeDecodeError) as exc:
        raise CatalogError(f"could not read catalog at {location}: {exc}") from exc
    catalog = parse_catalog(text, dimensions, document_format(location))
    logger.info("Catalog loaded: %d items", len(catalog))
    return catalog


async def fetch_catalog(
    location: str,
    dimensions: Sequence[FacetDimension] = DEFAULT_DIMENSIONS,
    timeout: float = 10.0,
) -> Catalog:
    return await asyncio.to_thread(load_catalog, location, dimensions, timeout)


def _skeleton_entry(filename: str, dimensions: Sequence[FacetDimension]) -> Dict[str, Any]:
    stem = os.path.splitext(filename)[0]
    entry: Dict[str, Any] = {
        "src": filename,
        "alt": stem.replace("_", " ").title(),
        "name": stem,
    }
    for dim in dimensions:
        entry[dim.field] = [] if dim.mode is MatchMode.ALL else None
    return entry


def rebuild_catalog(
    image_dir: str,
    catalog_json: str,
    dimensions: Sequence[FacetDimension] = DEFAULT_DIMENSIONS,
) -> Catalog:
    """Add an untagged entry for every image in image_dir the catalog lacks.

    Existing entries are written back unchanged, so tags curated by hand survive.
    """
    os.makedirs(image_dir, exist_ok=True)
    images: List[Dict[str, Any]] = []
    if os.path.exists(catalog_json):
        with open(catalog_json, "r", encoding="utf-8") as f:
            data = json.load(f) or {}
        images = list(data.get("images", []))

    known = {os.path.basename(str(x.get("src", ""))) for x in images if isinstance(x, dict)}
    added = 0
    for fn in sorted(os.listdir(image_dir)):
        if fn.lower().endswith(IMAGE_EXTENSIONS) and fn not in known:
            images.append(_skeleton_entry(fn, dimensions))
            added += 1

    parent = os.path.dirname(catalog_json)
    if parent:
        os.makedirs(parent, exist_ok=True)
    with open(catalog_json, "w", encoding="utf-8") as f:
        json.dump({"images": images}, f, indent=2)
    logger.info("Catalog %s rebuilt: %d new, %d total", catalog_json, added, len(images))
    return parse_catalog(json.dumps({"images": images}), dimensions)


def catalog_from_entries(
    entries: Sequence[Mapping[str, Any]],
    dimensions: Sequence[FacetDimension] = DEFAULT_DIMENSIONS,
) -> Catalog:
    return tuple(_parse_item(dict(e), i, dimensions) for i, e in enumerate(entries))
