"""
Typed boundary data model.

Each AdminLevel has its own strict property model; a Feature carries its
level tag so every property access dispatches on the level rather than
on a loose property bag.
"""

import math
from enum import Enum
from typing import Any, Dict, List, Optional, Type, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from thaimap.shared.constants import UNKNOWN_FEATURE_ID, UNKNOWN_REGION


class AdminLevel(str, Enum):
    PROVINCES = "provinces"
    DISTRICTS = "districts"
    SUBDISTRICTS = "subdistricts"
    REGION_ROYIN = "region_royin"
    REGION_NESDB = "region_nesdb"

    @property
    def is_region(self) -> bool:
        return self in (AdminLevel.REGION_ROYIN, AdminLevel.REGION_NESDB)


ADMIN_LEVELS = tuple(AdminLevel)

LEVEL_LABELS = {
    AdminLevel.PROVINCES: "Provinces (77 จังหวัด)",
    AdminLevel.DISTRICTS: "Districts (928 อำเภอ)",
    AdminLevel.SUBDISTRICTS: "Subdistricts (7,367 ตำบล)",
    AdminLevel.REGION_ROYIN: "Regions ROYIN (7 ภูมิภาค)",
    AdminLevel.REGION_NESDB: "Regions NESDB (6 ภูมิภาค)",
}


class ColorScheme(str, Enum):
    BY_REGION = "by-region"
    BY_AREA = "by-area"
    CUSTOM = "custom"
    MONOCHROME = "monochrome"


COLOR_SCHEME_DESCRIPTIONS = {
    ColorScheme.BY_REGION: ("By Region", "Different colors for each region"),
    ColorScheme.BY_AREA: ("By Area", "Gradient based on area size"),
    ColorScheme.CUSTOM: ("Custom", "Manual color selection"),
    ColorScheme.MONOCHROME: ("Monochrome", "Single color with borders"),
}


def coerce_finite_non_negative(value: Any) -> float:
    """
    Coerce a raw numeric property to a finite, non-negative float.

    Missing, non-numeric, NaN, infinite and negative values all become 0.0.
    Booleans are not numbers here.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(number) or number < 0:
        return 0.0
    return number


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _as_optional_text(value: Any) -> Optional[str]:
    text = _as_text(value)
    return text or None


class BaseProperties(BaseModel):
    """Fields shared by every level; undeclared source properties are kept as extras."""

    model_config = ConfigDict(frozen=True, extra="allow")

    area_sqkm: float = 0.0
    perimeter: float = 0.0
    reg_royin: Optional[str] = None
    reg_nesdb: Optional[str] = None

    @field_validator("area_sqkm", "perimeter", mode="before")
    @classmethod
    def _coerce_measure(cls, v):
        return coerce_finite_non_negative(v)

    @field_validator("reg_royin", "reg_nesdb", mode="before")
    @classmethod
    def _coerce_region(cls, v):
        return _as_optional_text(v)

    @property
    def region_name(self) -> Optional[str]:
        """ROYIN region preferred, NESDB as fallback."""
        return self.reg_royin or self.reg_nesdb


class ProvinceProperties(BaseProperties):
    pro_code: str = ""
    pro_th: str = ""
    pro_en: str = ""

    @field_validator("pro_code", "pro_th", "pro_en", mode="before")
    @classmethod
    def _coerce_text(cls, v):
        return _as_text(v)


class DistrictProperties(ProvinceProperties):
    amp_code: str = ""
    amp_th: str = ""
    amp_en: str = ""

    @field_validator("amp_code", "amp_th", "amp_en", mode="before")
    @classmethod
    def _coerce_district_text(cls, v):
        return _as_text(v)


class SubdistrictProperties(DistrictProperties):
    tam_code: str = ""
    tam_th: str = ""
    tam_en: str = ""

    @field_validator("tam_code", "tam_th", "tam_en", mode="before")
    @classmethod
    def _coerce_subdistrict_text(cls, v):
        return _as_text(v)


class RegionProperties(BaseProperties):
    pass


AdminProperties = Union[
    ProvinceProperties, DistrictProperties, SubdistrictProperties, RegionProperties
]

PROPERTIES_BY_LEVEL: Dict[AdminLevel, Type[BaseProperties]] = {
    AdminLevel.PROVINCES: ProvinceProperties,
    AdminLevel.DISTRICTS: DistrictProperties,
    AdminLevel.SUBDISTRICTS: SubdistrictProperties,
    AdminLevel.REGION_ROYIN: RegionProperties,
    AdminLevel.REGION_NESDB: RegionProperties,
}


def feature_id_for(properties: BaseProperties, level: AdminLevel) -> str:
    """Level-specific key: province/district/subdistrict code or region name."""
    if level == AdminLevel.PROVINCES:
        return getattr(properties, "pro_code", "")
    if level == AdminLevel.DISTRICTS:
        return getattr(properties, "amp_code", "")
    if level == AdminLevel.SUBDISTRICTS:
        return getattr(properties, "tam_code", "")
    if level == AdminLevel.REGION_ROYIN:
        return properties.reg_royin or UNKNOWN_FEATURE_ID
    return properties.reg_nesdb or UNKNOWN_FEATURE_ID


class Geometry(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: str
    coordinates: Any


class Feature(BaseModel):
    """One administrative unit at a given level."""

    model_config = ConfigDict(frozen=True)

    level: AdminLevel
    properties: AdminProperties
    geometry: Geometry

    @classmethod
    def from_geojson(cls, level: AdminLevel, raw: Dict[str, Any]) -> "Feature":
        props_model = PROPERTIES_BY_LEVEL[level]
        return cls(
            level=level,
            properties=props_model.model_validate(raw.get("properties") or {}),
            geometry=Geometry.model_validate(raw.get("geometry")),
        )

    @property
    def feature_id(self) -> str:
        return feature_id_for(self.properties, self.level)

    @property
    def display_name(self) -> str:
        p = self.properties
        if self.level == AdminLevel.PROVINCES:
            return f"{p.pro_th} ({p.pro_en})"
        if self.level == AdminLevel.DISTRICTS:
            return f"{p.amp_th}, {p.pro_th}"
        if self.level == AdminLevel.SUBDISTRICTS:
            return f"{p.tam_th}, {p.amp_th}, {p.pro_th}"
        if self.level == AdminLevel.REGION_ROYIN:
            return p.reg_royin or UNKNOWN_REGION
        return p.reg_nesdb or UNKNOWN_REGION

    def search_terms(self) -> List[str]:
        """Raw searchable strings; ancestors are included so parents surface children."""
        p = self.properties
        if self.level == AdminLevel.PROVINCES:
            terms = [p.pro_th, p.pro_en, p.pro_code]
        elif self.level == AdminLevel.DISTRICTS:
            terms = [p.amp_th, p.amp_en, p.amp_code, p.pro_th, p.pro_en]
        elif self.level == AdminLevel.SUBDISTRICTS:
            terms = [
                p.tam_th, p.tam_en, p.tam_code,
                p.amp_th, p.amp_en,
                p.pro_th, p.pro_en,
            ]
        else:
            terms = [p.reg_royin, p.reg_nesdb]
        return [t for t in terms if t]

    def dedup_key(self) -> str:
        # extras included: two features are the same only if every property matches
        return f"{self.level.value}-{self.properties.model_dump_json()}"

    def to_geojson(self) -> Dict[str, Any]:
        return {
            "type": "Feature",
            "properties": self.properties.model_dump(exclude_unset=True),
            "geometry": self.geometry.model_dump(),
        }


class FeatureCollection(BaseModel):
    model_config = ConfigDict(frozen=True)

    level: AdminLevel
    features: List[Feature] = Field(default_factory=list)

    def __len__(self) -> int:
        return len(self.features)

    def to_geojson(self) -> Dict[str, Any]:
        return {
            "type": "FeatureCollection",
            "name": self.level.value,
            "features": [f.to_geojson() for f in self.features],
        }


def parse_feature_collection(level: AdminLevel, document: Any) -> FeatureCollection:
    """
    Build a typed FeatureCollection from a decoded GeoJSON document.

    Raises ValueError if the document is not a non-empty FeatureCollection;
    pydantic's ValidationError (a ValueError) for malformed features.
    """
    if not isinstance(document, dict) or document.get("type") != "FeatureCollection":
        raise ValueError(f"{level.value}: not a FeatureCollection document")
    raw_features = document.get("features")
    if not isinstance(raw_features, list) or not raw_features:
        raise ValueError(f"{level.value}: FeatureCollection has no features")

    features = [Feature.from_geojson(level, raw) for raw in raw_features]
    return FeatureCollection(level=level, features=features)
