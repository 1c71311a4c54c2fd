from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import yaml

from backend.app.core.settings import settings


class CatalogLookupError(ValueError):
    """Raised when a make or model has no Pick-n-Pull identifier."""


@dataclass(frozen=True)
class CatalogMake:
    name: str
    id: int
    models: Dict[str, Tuple[str, int]]  # lowered name -> (display name, id)


def build_search_url(
    make_id: int,
    model_id: int,
    zip_code: str,
    distance: int,
    years: Tuple[int, int],
    *,
    base_url: Optional[str] = None,
) -> str:
    base = base_url or settings.picknpull_search_url
    year_min, year_max = years
    return f"{base}?make={make_id}&model={model_id}&distance={distance}&zip={zip_code}&year={year_min}-{year_max}"


class PicknPullCatalog:
    """Name to id lookups for the Pick-n-Pull vehicle search."""

    def __init__(self, makes: List[CatalogMake], *, base_url: Optional[str] = None):
        self._makes = {make.name.lower(): make for make in makes}
        self.base_url = base_url or settings.picknpull_search_url

    @classmethod
    def from_dict(cls, data: dict, *, base_url: Optional[str] = None) -> "PicknPullCatalog":
        makes: List[CatalogMake] = []
        for entry in data.get("makes", []) or []:
            models = {
                model["name"].lower(): (model["name"], int(model["id"]))
                for model in entry.get("models", []) or []
            }
            makes.append(CatalogMake(name=entry["name"], id=int(entry["id"]), models=models))
        return cls(makes, base_url=base_url)

    @classmethod
    def from_yaml(cls, path: Optional[str | Path] = None, *, base_url: Optional[str] = None) -> "PicknPullCatalog":
        catalog_path = Path(path or settings.catalog_path)
        data = yaml.safe_load(catalog_path.read_text(encoding="utf-8")) or {}
        return cls.from_dict(data, base_url=base_url)

    def supported_makes(self) -> List[str]:
        return [make.name for make in self._makes.values()]

    def supported_models(self, make: str) -> List[str]:
        entry = self._makes.get(make.strip().lower())
        if entry is None:
            return []
        return [name for name, _ in entry.models.values()]

    def _make(self, make: str) -> CatalogMake:
        entry = self._makes.get(make.strip().lower())
        if entry is None:
            raise CatalogLookupError(f"Unsupported make: {make}")
        return entry

    def make_id(self, make: str) -> int:
        return self._make(make).id

    def model_id(self, make: str, model: str) -> int:
        entry = self._make(make)
        found = entry.models.get(model.strip().lower())
        if found is None:
            raise CatalogLookupError(f"Unsupported model '{model}' for make '{entry.name}'")
        return found[1]

    def search_url(self, make: str, model: str, zip_code: str, distance: int, years: Tuple[int, int]) -> str:
        return build_search_url(
            self.make_id(make),
            self.model_id(make, model),
            zip_code,
            distance,
            years,
            base_url=self.base_url,
        )


__all__ = ["PicknPullCatalog", "CatalogLookupError", "build_search_url"]
