"""Facet filtering over a loaded catalog.

Dimensions are data: each :class:`FacetDimension` names the tag it reads and
whether a selection on it means "all of these" (subset) or "any of these"
(membership). Nothing here branches on a particular dimension name.
"""
from __future__ import annotations

import logging
from typing import Dict, FrozenSet, Iterable, List, Mapping, Sequence, Set

from .catalog import Catalog, CatalogItem
from .config import DEFAULT_DIMENSIONS, FacetDimension, MatchMode

logger = logging.getLogger(__name__)

DerivedFacetOptions = Dict[str, List[str]]


def derive_options(
    catalog: Catalog,
    dimensions: Sequence[FacetDimension] = DEFAULT_DIMENSIONS,
) -> DerivedFacetOptions:
    options: DerivedFacetOptions = {}
    for dim in dimensions:
        seen: Set[str] = set()
        for item in catalog:
            seen.update(item.values(dim.name))
        options[dim.name] = sorted(seen)
    return options


class FilterSelection:
    """Selected values per dimension; an empty set means no constraint."""

    def __init__(self, dimensions: Iterable[str] = ()):
        self._selected: Dict[str, Set[str]] = {name: set() for name in dimensions}

    def toggle(self, dimension: str, value: str) -> bool:
        """Flip one value. Returns True when the value is now selected."""
        chosen = self._selected.setdefault(dimension, set())
        if value in chosen:
            chosen.discard(value)
            now_selected = False
        else:
            chosen.add(value)
            now_selected = True
        logger.debug("toggle %s=%s -> %s", dimension, value, now_selected)
        return now_selected

    def set_values(self, dimension: str, values: Iterable[str]) -> None:
        # reconcile through toggle so it stays the only mutation
        wanted = set(values)
        for value in sorted(wanted ^ self.values(dimension)):
            self.toggle(dimension, value)

    def clear(self) -> None:
        for dimension in list(self._selected):
            self.set_values(dimension, ())

    def values(self, dimension: str) -> FrozenSet[str]:
        return frozenset(self._selected.get(dimension, ()))

    def active(self) -> Dict[str, FrozenSet[str]]:
        return {d: frozenset(v) for d, v in self._selected.items() if v}

    def as_dict(self) -> Dict[str, List[str]]:
        return {d: sorted(v) for d, v in self._selected.items()}

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FilterSelection):
            return NotImplemented
        return self.active() == other.active()

    def __repr__(self) -> str:
        return f"FilterSelection({self.as_dict()!r})"


def matches(item: CatalogItem, dimension: str, selected: FrozenSet[str], mode: MatchMode) -> bool:
    if not selected:
        return True
    have = item.values(dimension)
    if mode is MatchMode.ANY:
        return not have.isdisjoint(selected)
    return selected <= have


def compute_visible(
    catalog: Catalog,
    selection: FilterSelection,
    dimensions: Sequence[FacetDimension] = DEFAULT_DIMENSIONS,
) -> List[CatalogItem]:
    modes: Mapping[str, MatchMode] = {d.name: d.mode for d in dimensions}
    active = selection.active()
    if not active:
        return list(catalog)
    return [
        item
        for item in catalog
        if all(matches(item, dim, chosen, modes.get(dim, MatchMode.ALL)) for dim, chosen in active.items())
    ]
