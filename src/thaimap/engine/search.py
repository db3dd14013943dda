"""
Inverted name/code index over loaded boundary collections.

Terms keep insertion order (dict), so exact matches come back in index
order followed by partial (substring) matches in index order.
"""

import logging
from typing import Dict, List

from pydantic import BaseModel, ConfigDict, computed_field, field_serializer

from thaimap.engine.models import AdminLevel, Feature, FeatureCollection
from thaimap.shared.constants import SEARCH_DEFAULT_LIMIT

logger = logging.getLogger("SearchIndex")


class SearchResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    feature: Feature
    level: AdminLevel
    display_name: str

    @computed_field
    @property
    def feature_id(self) -> str:
        return self.feature.feature_id

    @field_serializer("feature")
    def _serialize_feature(self, feature: Feature) -> dict:
        return feature.to_geojson()


def normalize_search_term(term: str) -> str:
    return term.lower().strip()


class SearchIndex:
    def __init__(self):
        self._terms: Dict[str, List[SearchResult]] = {}

    def __len__(self) -> int:
        return len(self._terms)

    def clear(self) -> None:
        self._terms.clear()

    def add_collection(self, collection: FeatureCollection) -> int:
        """Index every name/code term of every feature. Returns entries added."""
        added = 0
        for feature in collection.features:
            added += self.add_feature(feature)
        logger.info(
            f"Indexed {collection.level.value}: {len(collection)} features, "
            f"{added} entries ({len(self._terms)} terms total)"
        )
        return added

    def add_feature(self, feature: Feature) -> int:
        entry = SearchResult(
            feature=feature,
            level=feature.level,
            display_name=feature.display_name,
        )
        added = 0
        for term in feature.search_terms():
            normalized = normalize_search_term(term)
            if not normalized:
                continue
            self._terms.setdefault(normalized, []).append(entry)
            added += 1
        return added

    def search(self, query: str, limit: int = SEARCH_DEFAULT_LIMIT) -> List[SearchResult]:
        """
        Exact term matches first, then substring matches, deduplicated by
        level + properties and capped at `limit`.
        """
        if not query or not query.strip() or limit <= 0:
            return []

        normalized = normalize_search_term(query)
        results: List[SearchResult] = []
        seen = set()

        def _collect(entries: List[SearchResult]) -> None:
            for entry in entries:
                if len(results) >= limit:
                    return
                key = entry.feature.dedup_key()
                if key in seen:
                    continue
                seen.add(key)
                results.append(entry)

        _collect(self._terms.get(normalized, []))

        if len(results) < limit:
            for term, entries in self._terms.items():
                if len(results) >= limit:
                    break
                if term != normalized and normalized in term:
                    _collect(entries)

        return results
