"""
Feature fill/stroke styling per color scheme.

MapStyleManager keeps three derived caches (region colors, area range,
custom colors). They are never refreshed implicitly: call
update_region_colors / update_area_range whenever the active level or
scheme changes.
"""

import logging
from typing import Dict, Iterable, Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict

from thaimap.engine.models import AdminLevel, ColorScheme, Feature, feature_id_for
from thaimap.shared.constants import (
    AREA_GRADIENT_DEFAULT,
    AREA_HUE_SPAN,
    AREA_HUE_START,
    BASE_FILL_COLOR,
    BASE_STROKE_COLOR,
    HIGHLIGHT_COLOR,
    REGION_PALETTE,
    SELECTED_COLOR,
)

logger = logging.getLogger("StyleManager")


class LayerStyle(BaseModel):
    model_config = ConfigDict(frozen=True)

    fill_color: str
    fill_opacity: float
    stroke_color: str
    stroke_weight: float
    stroke_opacity: float


BASE_STYLE = LayerStyle(
    fill_color=BASE_FILL_COLOR,
    fill_opacity=0.6,
    stroke_color=BASE_STROKE_COLOR,
    stroke_weight=1,
    stroke_opacity=0.8,
)

# Transient hover/selection overrides; fill color is left untouched.
HIGHLIGHT_OVERRIDES = {"fill_opacity": 0.8, "stroke_weight": 3, "stroke_color": HIGHLIGHT_COLOR, "stroke_opacity": 1}
SELECTED_OVERRIDES = {"fill_opacity": 0.9, "stroke_weight": 4, "stroke_color": SELECTED_COLOR, "stroke_opacity": 1}

# level -> (stroke weight, stroke color, stroke opacity) for boundary outlines
LEVEL_OUTLINES: Dict[AdminLevel, Tuple[float, str, float]] = {
    AdminLevel.PROVINCES: (2, "#000000", 1.0),
    AdminLevel.DISTRICTS: (1.5, "#666666", 0.8),
    AdminLevel.SUBDISTRICTS: (1, "#888888", 0.6),
    AdminLevel.REGION_ROYIN: (2, "#000000", 1.0),
    AdminLevel.REGION_NESDB: (2, "#000000", 1.0),
}


def highlight_style(style: LayerStyle) -> LayerStyle:
    return style.model_copy(update=HIGHLIGHT_OVERRIDES)


def selected_style(style: LayerStyle) -> LayerStyle:
    return style.model_copy(update=SELECTED_OVERRIDES)


def outline_style(level: AdminLevel, fill_color: Optional[str] = None) -> LayerStyle:
    """Boundary outline for a level; unfilled unless a fill color is given."""
    weight, color, opacity = LEVEL_OUTLINES[level]
    return LayerStyle(
        fill_color=fill_color or "#ffffff",
        fill_opacity=0.7 if fill_color else 0.0,
        stroke_color=color,
        stroke_weight=weight,
        stroke_opacity=opacity,
    )


def generate_region_colors(regions: Iterable[str]) -> Dict[str, str]:
    """Assign palette colors by position, cycling after len(REGION_PALETTE)."""
    colors: Dict[str, str] = {}
    for index, region in enumerate(regions):
        colors[region] = REGION_PALETTE[index % len(REGION_PALETTE)]
    return colors


def generate_area_gradient_color(area: float, min_area: float, max_area: float) -> str:
    """Blue (smallest) to warm (largest) HSL gradient."""
    if max_area == min_area:
        return AREA_GRADIENT_DEFAULT
    normalized = (area - min_area) / (max_area - min_area)
    normalized = max(0.0, min(1.0, normalized))
    hue = AREA_HUE_START - normalized * AREA_HUE_SPAN
    return f"hsl({hue:g}, 70%, 50%)"


class MapStyleManager:
    def __init__(self):
        self.region_colors: Dict[str, str] = {}
        self.area_range: Tuple[float, float] = (0.0, 0.0)
        self.custom_colors: Dict[str, str] = {}

    def update_region_colors(self, regions: Sequence[str]) -> None:
        self.region_colors = generate_region_colors(regions)
        logger.debug(f"Region colors refreshed for {len(self.region_colors)} regions")

    def update_area_range(self, features: Iterable[Feature]) -> None:
        areas = [f.properties.area_sqkm for f in features]
        self.area_range = (min(areas), max(areas)) if areas else (0.0, 0.0)

    def set_custom_color(self, feature_id: str, color: str) -> None:
        self.custom_colors[feature_id] = color

    def remove_custom_color(self, feature_id: str) -> bool:
        return self.custom_colors.pop(feature_id, None) is not None

    def clear_custom_colors(self) -> None:
        self.custom_colors.clear()

    def get_feature_style(self, feature: Feature, level: AdminLevel, scheme: ColorScheme) -> LayerStyle:
        base = BASE_STYLE

        if scheme == ColorScheme.BY_REGION:
            region = feature.properties.region_name
            color = self.region_colors.get(region) if region else None
            return base.model_copy(update={"fill_color": color or base.fill_color})

        if scheme == ColorScheme.BY_AREA:
            min_area, max_area = self.area_range
            color = generate_area_gradient_color(feature.properties.area_sqkm, min_area, max_area)
            return base.model_copy(update={"fill_color": color})

        if scheme == ColorScheme.CUSTOM:
            color = self.custom_colors.get(feature_id_for(feature.properties, level))
            return base.model_copy(update={"fill_color": color or base.fill_color})

        return base
