from __future__ import annotations

import enum
import os
from dataclasses import dataclass, replace
from typing import Tuple


class MatchMode(str, enum.Enum):
    # every selected value must be on the item
    ALL = "all"
    # at least one selected value must be on the item
    ANY = "any"


@dataclass(frozen=True)
class FacetDimension:
    name: str
    field: str
    mode: MatchMode = MatchMode.ALL
    label: str = ""

    @property
    def heading(self) -> str:
        return self.label or self.name.title()


COLOR = FacetDimension("color", "colors", MatchMode.ALL, "Color")
CONTINENT = FacetDimension("continent", "continent", MatchMode.ANY, "Continent")
SIDE = FacetDimension("side", "side", MatchMode.ANY, "Side of road")

DEFAULT_DIMENSIONS: Tuple[FacetDimension, ...] = (COLOR, CONTINENT, SIDE)


@dataclass(frozen=True)
class AppConfig:
    title: str = "Geoguessr Bollard Findr"

    catalog_path: str = "assets/catalog.json"
    image_dir: str = "assets/images"
    # deployment specific prefix, either a directory or a base URL
    asset_prefix: str = ""

    fetch_timeout: float = 10.0

    thumb_width: int = 300
    thumb_height: int = 200

    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ=None) -> "AppConfig":
        env = os.environ if environ is None else environ
        cfg = cls()
        return replace(
            cfg,
            catalog_path=env.get("BOLLARD_CATALOG", cfg.catalog_path),
            asset_prefix=env.get("BOLLARD_ASSET_PREFIX", cfg.asset_prefix),
            log_level=env.get("BOLLARD_LOG_LEVEL", cfg.log_level).upper(),
        )
