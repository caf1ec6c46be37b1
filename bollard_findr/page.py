from __future__ import annotations

import enum
import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence

from .catalog import Catalog, CatalogError, CatalogItem, fetch_catalog, resolve_catalog_location
from .config import AppConfig, DEFAULT_DIMENSIONS, FacetDimension
from .facets import DerivedFacetOptions, FilterSelection, compute_visible, derive_options

logger = logging.getLogger(__name__)


class PageState(str, enum.Enum):
    LOADING = "loading"
    READY = "ready"


class GalleryPage:
    """
    One page view: owns its catalog, selection and derived options.
    The catalog is published once by load(); the page never goes back to LOADING.
    """
    def __init__(self, cfg: Optional[AppConfig] = None, dimensions: Optional[Sequence[FacetDimension]] = None):
        self.cfg = cfg or AppConfig()
        self.dimensions = tuple(dimensions if dimensions is not None else DEFAULT_DIMENSIONS)
        self.state = PageState.LOADING
        self.error: Optional[str] = None
        self.catalog: Catalog = ()
        self.selection = FilterSelection(d.name for d in self.dimensions)

        self._options: DerivedFacetOptions = {}
        self._options_catalog: Optional[Catalog] = None

    @property
    def loading(self) -> bool:
        return self.state is PageState.LOADING

    async def load(self) -> "GalleryPage":
        if not self.loading:
            logger.debug("catalog already loaded for this page, skipping fetch")
            return self

        location = resolve_catalog_location(self.cfg)
        try:
            catalog = await fetch_catalog(location, self.dimensions, self.cfg.fetch_timeout)
        except CatalogError as exc:
            logger.exception("Catalog unavailable (%s); showing an empty gallery", location)
            catalog = ()
            self.error = str(exc)
        self.publish(catalog)
        return self

    def publish(self, catalog: Catalog) -> None:
        self.catalog = tuple(catalog)
        self.state = PageState.READY

    @property
    def options(self) -> DerivedFacetOptions:
        if self._options_catalog is not self.catalog:
            self._options = derive_options(self.catalog, self.dimensions)
            self._options_catalog = self.catalog
        return self._options

    def toggle(self, dimension: str, value: str) -> bool:
        return self.selection.toggle(dimension, value)

    def set_selection(self, dimension: str, values: Iterable[str]) -> None:
        self.selection.set_values(dimension, values or ())

    def visible(self) -> List[CatalogItem]:
        return compute_visible(self.catalog, self.selection, self.dimensions)

    # both accept an already computed visible list to avoid refiltering
    def counts(self, visible: Optional[List[CatalogItem]] = None) -> Dict[str, Any]:
        if visible is None:
            visible = self.visible()
        return {
            "total": len(self.catalog),
            "visible": len(visible),
            "selected": self.selection.as_dict(),
        }

    def status_text(self, visible: Optional[List[CatalogItem]] = None) -> str:
        if self.loading:
            return "Loading catalog..."
        if self.error:
            return f"Catalog unavailable: {self.error}"
        if visible is None:
            visible = self.visible()
        return f"{len(visible)} of {len(self.catalog)} bollards shown"
