"""
Boundary data manager.

Owns the five level collections and the search index built over them.
Loading fans out one fetch per level and succeeds only if all five do.
"""

import asyncio
import logging
from typing import Dict, Iterable, List, Optional

from pydantic import BaseModel, ConfigDict

from thaimap.engine.geometry import Bounds, LatLng, feature_bounds, feature_center
from thaimap.engine.models import (
    ADMIN_LEVELS,
    AdminLevel,
    Feature,
    FeatureCollection,
    parse_feature_collection,
)
from thaimap.engine.search import SearchIndex, SearchResult
from thaimap.engine.sources import GeoJSONSource
from thaimap.shared.constants import SEARCH_DEFAULT_LIMIT

logger = logging.getLogger("DataManager")


class DataLoadError(Exception):
    """A boundary collection could not be fetched or parsed."""

    def __init__(self, level: AdminLevel, message: str):
        super().__init__(f"{level.value}: {message}")
        self.level = level


class Statistics(BaseModel):
    model_config = ConfigDict(frozen=True)

    count: int
    total_area: float
    average_area: float


class GeoDataManager:
    def __init__(self, source: Optional[GeoJSONSource] = None, index: Optional[SearchIndex] = None):
        self.source = source
        self.index = index if index is not None else SearchIndex()
        self._data: Dict[AdminLevel, FeatureCollection] = {}

    # ─── Loading ────────────────────────────────────────────

    async def load_all(self) -> None:
        """
        Load all five levels concurrently.

        State is reset first. Every level that loads is kept even when
        another fails; the first failure is then raised as DataLoadError
        and is_data_loaded() stays False. Collections are registered in
        ADMIN_LEVELS order regardless of which fetch finishes first, so
        the search index order is deterministic.
        """
        if self.source is None:
            raise RuntimeError("GeoDataManager has no source configured")

        self._data.clear()
        self.index.clear()

        outcomes = await asyncio.gather(
            *(self._fetch_level(level) for level in ADMIN_LEVELS),
            return_exceptions=True,
        )
        errors = []
        for outcome in outcomes:
            if isinstance(outcome, FeatureCollection):
                self.register_collection(outcome)
            else:
                errors.append(outcome)
        if errors:
            raise errors[0]
        logger.info(f"All {len(ADMIN_LEVELS)} levels loaded ({len(self.index)} search terms)")

    async def _fetch_level(self, level: AdminLevel) -> FeatureCollection:
        logger.info(f"Loading {level.value}")
        try:
            document = await self.source.fetch(level)
            return parse_feature_collection(level, document)
        except Exception as e:
            logger.error(f"Error loading {level.value} data: {e}")
            raise DataLoadError(level, str(e)) from e

    def register_collection(self, collection: FeatureCollection) -> None:
        """Install a parsed collection and index it, replacing any previous one."""
        self._data[collection.level] = collection
        self.index.add_collection(collection)
        logger.info(f"Loaded {collection.level.value}: {len(collection)} features")

    # ─── Accessors ──────────────────────────────────────────

    def get_data(self, level: AdminLevel) -> Optional[FeatureCollection]:
        return self._data.get(level)

    def get_all_data(self) -> Dict[AdminLevel, FeatureCollection]:
        return dict(self._data)

    def get_features(self, level: AdminLevel) -> List[Feature]:
        collection = self._data.get(level)
        return list(collection.features) if collection else []

    def is_data_loaded(self) -> bool:
        return len(self._data) == len(ADMIN_LEVELS)

    def find_feature(self, level: AdminLevel, feature_id: str) -> Optional[Feature]:
        for feature in self.get_features(level):
            if feature.feature_id == feature_id:
                return feature
        return None

    def search(self, query: str, limit: int = SEARCH_DEFAULT_LIMIT) -> List[SearchResult]:
        return self.index.search(query, limit)

    def get_feature_bounds(self, feature: Feature) -> Optional[Bounds]:
        return feature_bounds(feature)

    def get_feature_center(self, feature: Feature) -> Optional[LatLng]:
        return feature_center(feature)

    # ─── Statistics & filtering ─────────────────────────────

    def get_statistics(self, level: AdminLevel) -> Statistics:
        features = self.get_features(level)
        if not features:
            return Statistics(count=0, total_area=0.0, average_area=0.0)
        total = sum(f.properties.area_sqkm for f in features)
        return Statistics(count=len(features), total_area=total, average_area=total / len(features))

    def get_region_list(self, level: AdminLevel) -> List[str]:
        """Sorted distinct region names of a region classification level."""
        if level == AdminLevel.REGION_ROYIN:
            names = {f.properties.reg_royin for f in self.get_features(level)}
        elif level == AdminLevel.REGION_NESDB:
            names = {f.properties.reg_nesdb for f in self.get_features(level)}
        else:
            raise ValueError(f"{level.value} is not a region level")
        return sorted(n for n in names if n)

    def filter_features_by_region(self, level: AdminLevel, region_name: str) -> List[Feature]:
        """Features at any level whose ROYIN or NESDB region equals region_name."""
        return [
            f for f in self.get_features(level)
            if f.properties.reg_royin == region_name or f.properties.reg_nesdb == region_name
        ]

    def filter_by_provinces(self, level: AdminLevel, pro_codes: Iterable[str]) -> List[Feature]:
        """Restrict a level to the given provinces; no codes means no filter."""
        codes = set(pro_codes)
        features = self.get_features(level)
        if not codes:
            return features
        if level.is_region:
            return []
        return [f for f in features if f.properties.pro_code in codes]
