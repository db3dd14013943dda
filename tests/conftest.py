import json
from pathlib import Path

import pytest

from thaimap.engine.data_manager import GeoDataManager
from thaimap.engine.models import ADMIN_LEVELS, AdminLevel, Feature, parse_feature_collection

DATA_DIR = Path(__file__).resolve().parent / "data"


def load_document(level: AdminLevel) -> dict:
    with open(DATA_DIR / f"{level.value}.geojson", encoding="utf-8") as f:
        return json.load(f)


def make_feature(level, properties, coordinates=None, geometry_type="Polygon") -> Feature:
    if coordinates is None:
        coordinates = [[[100.0, 13.0], [101.0, 13.0], [101.0, 14.0], [100.0, 14.0], [100.0, 13.0]]]
    return Feature.from_geojson(
        level,
        {"properties": properties, "geometry": {"type": geometry_type, "coordinates": coordinates}},
    )


class FakeSource:
    """In-memory source; levels listed in `failing` raise on fetch."""

    def __init__(self, documents=None, failing=()):
        self.documents = documents if documents is not None else {lv: load_document(lv) for lv in ADMIN_LEVELS}
        self.failing = set(failing)
        self.calls = []

    async def fetch(self, level):
        self.calls.append(level)
        if level in self.failing:
            raise ConnectionError(f"simulated failure for {level.value}")
        return self.documents[level]


@pytest.fixture
def loaded_manager() -> GeoDataManager:
    manager = GeoDataManager()
    for level in ADMIN_LEVELS:
        manager.register_collection(parse_feature_collection(level, load_document(level)))
    return manager
