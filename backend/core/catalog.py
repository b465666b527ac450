"""Static catalog of components eligible for a first-pass bonus claim.

The catalog is read once from ``config/catalog.yaml`` and is immutable
afterwards.  Items that do not list their drawings explicitly receive five
generic welds so that a claim can always be drafted.
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any, Iterable

import yaml

from backend.core.errors import CatalogItemNotFoundError
from backend.core.schema import CatalogItem, WeldSpec
from backend.domain import Category

CONFIG_DIR = Path(__file__).resolve().parent.parent / "config"
DEFAULT_CATALOG_PATH = CONFIG_DIR / "catalog.yaml"
GENERIC_WELD_COUNT = 5


def _generic_specs(item_id: str, category: str) -> list[WeldSpec]:
    return [
        WeldSpec(
            id=f"{item_id}-{index}",
            config_name=f"{category}-Standard",
            drawing_no=f"{category}-001",
            weld_no=f"W-{index:02d}",
            weight=100 * index,
        )
        for index in range(1, GENERIC_WELD_COUNT + 1)
    ]


def _specs_from_drawings(item_id: str, drawings: dict[str, Any], config_name: str | None = None) -> list[WeldSpec]:
    specs: list[WeldSpec] = []
    for drawing, welds in drawings.items():
        for weld_no, weight in welds:
            specs.append(
                WeldSpec(
                    id=f"{item_id}-{len(specs) + 1}",
                    config_name=config_name or str(drawing),
                    drawing_no=str(drawing),
                    weld_no=str(weld_no),
                    weight=float(weight),
                )
            )
    return specs


def _specs_from_configurations(item_id: str, configurations: dict[str, Any]) -> list[WeldSpec]:
    specs: list[WeldSpec] = []
    for config_name, drawings in configurations.items():
        for spec in _specs_from_drawings(item_id, drawings, str(config_name)):
            specs.append(spec.model_copy(update={"id": f"{item_id}-{len(specs) + 1}"}))
    return specs


def _build_item(index: int, row: dict[str, Any]) -> CatalogItem:
    item_id = str(row.get("id") or index)
    category = Category(row["category"])
    if row.get("configurations"):
        specs = _specs_from_configurations(item_id, row["configurations"])
    elif row.get("drawings"):
        specs = _specs_from_drawings(item_id, row["drawings"])
    else:
        specs = _generic_specs(item_id, category.value)

    return CatalogItem(
        id=item_id,
        category=category,
        item_name=str(row["name"]),
        base_price=int(row["total"]),
        welder_price=int(row.get("welder") or 0),
        foreman_price=int(row.get("foreman") or 0),
        default_welders=int(row.get("welders") or 0),
        default_foremen=int(row.get("foremen") or 0),
        specs=tuple(specs),
    )


class Catalog:
    """Read-only lookup over the loaded catalog items."""

    def __init__(self, items: Iterable[CatalogItem]) -> None:
        self._items = list(items)
        self._by_id = {item.id: item for item in self._items}

    @classmethod
    def from_yaml(cls, path: Path) -> "Catalog":
        with path.open("r", encoding="utf-8") as fp:
            data = yaml.safe_load(fp) or {}
        rows = data.get("items") or []
        return cls(_build_item(index, row) for index, row in enumerate(rows, start=1))

    def __iter__(self):
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    @property
    def items(self) -> list[CatalogItem]:
        return list(self._items)

    def find(self, item_id: str) -> CatalogItem | None:
        return self._by_id.get(str(item_id))

    def get(self, item_id: str) -> CatalogItem:
        item = self.find(item_id)
        if item is None:
            raise CatalogItemNotFoundError(f"Catalog item {item_id!r} not found")
        return item

    def grouped(self) -> dict[str, list[CatalogItem]]:
        groups: dict[str, list[CatalogItem]] = {}
        for item in self._items:
            groups.setdefault(item.category.value, []).append(item)
        return groups


@lru_cache()
def load_catalog(path: str | None = None) -> Catalog:
    """Return the process-wide catalog, loading it on first use."""

    return Catalog.from_yaml(Path(path) if path else DEFAULT_CATALOG_PATH)
