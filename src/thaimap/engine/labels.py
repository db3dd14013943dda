"""
Tooltip and label helpers for the map presentation layer.
"""

from typing import Tuple

from pydantic import BaseModel, ConfigDict, computed_field

from thaimap.engine.models import AdminLevel, Feature
from thaimap.shared.constants import UNKNOWN_REGION

# level -> (label font px, show permanent labels)
LABEL_STYLES = {
    AdminLevel.PROVINCES: (12, True),
    AdminLevel.DISTRICTS: (9, True),
    AdminLevel.SUBDISTRICTS: (7, False),   # ~7,400 labels is too many
    AdminLevel.REGION_ROYIN: (12, True),
    AdminLevel.REGION_NESDB: (12, True),
}


class TooltipData(BaseModel):
    model_config = ConfigDict(frozen=True)

    name_th: str
    name_en: str
    area: float
    perimeter: float
    code: str
    position: Tuple[float, float]

    @computed_field
    @property
    def area_text(self) -> str:
        return format_area(self.area)

    @computed_field
    @property
    def perimeter_text(self) -> str:
        return format_perimeter(self.perimeter)


def label_size(level: AdminLevel) -> int:
    return LABEL_STYLES[level][0]


def should_show_label(level: AdminLevel) -> bool:
    return LABEL_STYLES[level][1]


def label_text(feature: Feature) -> str:
    """Short Thai name used for on-map labels."""
    p = feature.properties
    if feature.level == AdminLevel.PROVINCES:
        return p.pro_th
    if feature.level == AdminLevel.DISTRICTS:
        return p.amp_th
    if feature.level == AdminLevel.SUBDISTRICTS:
        return p.tam_th
    return feature.display_name


def create_tooltip_data(feature: Feature, position: Tuple[float, float]) -> TooltipData:
    p = feature.properties
    level = feature.level

    if level == AdminLevel.PROVINCES:
        name_th, name_en, code = p.pro_th, p.pro_en, p.pro_code
    elif level == AdminLevel.DISTRICTS:
        name_th = f"{p.amp_th}, {p.pro_th}"
        name_en = f"{p.amp_en}, {p.pro_en}"
        code = p.amp_code
    elif level == AdminLevel.SUBDISTRICTS:
        name_th = f"{p.tam_th}, {p.amp_th}"
        name_en = f"{p.tam_en}, {p.amp_en}"
        code = p.tam_code
    elif level == AdminLevel.REGION_ROYIN:
        name_th = name_en = p.reg_royin or UNKNOWN_REGION
        code = "REG-R"
    else:
        name_th = name_en = p.reg_nesdb or UNKNOWN_REGION
        code = "REG-N"

    return TooltipData(
        name_th=name_th,
        name_en=name_en,
        area=p.area_sqkm,
        perimeter=p.perimeter,
        code=code,
        position=position,
    )


def format_area(area: float) -> str:
    if area >= 1000:
        return f"{area / 1000:.1f}K km²"
    return f"{area:.1f} km²"


def format_perimeter(perimeter: float) -> str:
    if perimeter >= 1000:
        return f"{perimeter / 1000:.1f}K km"
    return f"{perimeter:.1f} km"
