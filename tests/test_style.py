"""
Unit tests for color schemes and the style caches.
"""

import pytest
from pydantic import ValidationError

from conftest import make_feature
from thaimap.engine.models import AdminLevel, ColorScheme
from thaimap.engine.style import (
    BASE_STYLE,
    MapStyleManager,
    generate_area_gradient_color,
    generate_region_colors,
    highlight_style,
    outline_style,
    selected_style,
)


def _province(code, area, royin=None, nesdb=None):
    return make_feature(
        AdminLevel.PROVINCES,
        {"pro_code": code, "area_sqkm": area, "reg_royin": royin, "reg_nesdb": nesdb},
    )


def test_region_colors_cycle_palette():
    regions = [f"r{i}" for i in range(12)]
    colors = generate_region_colors(regions)
    assert colors["r0"] == "#e74c3c"
    assert colors["r1"] == "#3498db"
    assert colors["r9"] == "#95a5a6"
    assert colors["r10"] == colors["r0"]
    assert colors["r11"] == colors["r1"]


def test_region_colors_are_stable():
    regions = ["ภาคเหนือ", "ภาคกลาง", "ภาคใต้"]
    assert generate_region_colors(regions) == generate_region_colors(list(regions))


def test_area_gradient():
    assert generate_area_gradient_color(0, 0, 100) == "hsl(240, 70%, 50%)"
    assert generate_area_gradient_color(50, 0, 100) == "hsl(180, 70%, 50%)"
    assert generate_area_gradient_color(100, 0, 100) == "hsl(120, 70%, 50%)"


def test_area_gradient_degenerate_range():
    assert generate_area_gradient_color(42, 42, 42) == "#3498db"
    assert generate_area_gradient_color(0, 0, 0) == "#3498db"


def test_monochrome_ignores_feature():
    manager = MapStyleManager()
    manager.set_custom_color("10", "#000000")
    style = manager.get_feature_style(_province("10", 5, royin="ภาคกลาง"), AdminLevel.PROVINCES, ColorScheme.MONOCHROME)
    assert style == BASE_STYLE


def test_by_region_uses_cache_and_falls_back():
    manager = MapStyleManager()
    central = _province("10", 5, royin="ภาคกลาง")
    nesdb_only = _province("11", 5, nesdb="กรุงเทพฯและปริมณฑล")

    # stale (empty) cache -> base color
    assert manager.get_feature_style(central, AdminLevel.PROVINCES, ColorScheme.BY_REGION).fill_color == "#3498db"

    manager.update_region_colors(["ภาคกลาง", "ภาคเหนือ", "กรุงเทพฯและปริมณฑล"])
    assert manager.get_feature_style(central, AdminLevel.PROVINCES, ColorScheme.BY_REGION).fill_color == "#e74c3c"
    assert manager.get_feature_style(nesdb_only, AdminLevel.PROVINCES, ColorScheme.BY_REGION).fill_color == "#2ecc71"

    unseen = _province("12", 5, royin="ภาคใต้")
    assert manager.get_feature_style(unseen, AdminLevel.PROVINCES, ColorScheme.BY_REGION).fill_color == "#3498db"


def test_royin_region_preferred_over_nesdb():
    manager = MapStyleManager()
    manager.update_region_colors(["ภาคกลาง", "กรุงเทพฯและปริมณฑล"])
    both = _province("10", 5, royin="ภาคกลาง", nesdb="กรุงเทพฯและปริมณฑล")
    assert manager.get_feature_style(both, AdminLevel.PROVINCES, ColorScheme.BY_REGION).fill_color == "#e74c3c"


def test_by_area_uses_cached_range():
    manager = MapStyleManager()
    features = [_province("1", 0), _province("2", 50), _province("3", "100")]
    manager.update_area_range(features)
    assert manager.area_range == (0.0, 100.0)

    colors = [manager.get_feature_style(f, AdminLevel.PROVINCES, ColorScheme.BY_AREA).fill_color for f in features]
    assert colors == ["hsl(240, 70%, 50%)", "hsl(180, 70%, 50%)", "hsl(120, 70%, 50%)"]


def test_by_area_single_value_dataset():
    manager = MapStyleManager()
    only = _province("1", 77)
    manager.update_area_range([only])
    style = manager.get_feature_style(only, AdminLevel.PROVINCES, ColorScheme.BY_AREA)
    assert style.fill_color == "#3498db"

    manager.update_area_range([])
    assert manager.area_range == (0.0, 0.0)


def test_custom_colors():
    manager = MapStyleManager()
    bangkok = _province("10", 5)
    assert manager.get_feature_style(bangkok, AdminLevel.PROVINCES, ColorScheme.CUSTOM).fill_color == "#3498db"

    manager.set_custom_color("10", "#ff0000")
    assert manager.get_feature_style(bangkok, AdminLevel.PROVINCES, ColorScheme.CUSTOM).fill_color == "#ff0000"

    assert manager.remove_custom_color("10") is True
    assert manager.remove_custom_color("10") is False

    manager.set_custom_color("10", "#00ff00")
    manager.clear_custom_colors()
    assert manager.get_feature_style(bangkok, AdminLevel.PROVINCES, ColorScheme.CUSTOM).fill_color == "#3498db"


def test_custom_colors_keyed_by_level_id():
    manager = MapStyleManager()
    manager.set_custom_color("ภาคเหนือ", "#123456")
    region = make_feature(AdminLevel.REGION_NESDB, {"reg_nesdb": "ภาคเหนือ"})
    assert manager.get_feature_style(region, AdminLevel.REGION_NESDB, ColorScheme.CUSTOM).fill_color == "#123456"

    district = make_feature(AdminLevel.DISTRICTS, {"amp_code": "1001", "pro_code": "10"})
    manager.set_custom_color("1001", "#abcdef")
    assert manager.get_feature_style(district, AdminLevel.DISTRICTS, ColorScheme.CUSTOM).fill_color == "#abcdef"


def test_highlight_and_selected_overrides():
    base = BASE_STYLE
    hover = highlight_style(base)
    assert hover.stroke_weight == 3
    assert hover.stroke_color == "#e74c3c"
    assert hover.fill_color == base.fill_color

    selected = selected_style(base)
    assert selected.stroke_weight == 4
    assert selected.fill_opacity == 0.9
    # overrides never touch the shared base style
    assert BASE_STYLE.stroke_weight == 1


def test_outline_style_per_level():
    assert outline_style(AdminLevel.PROVINCES).stroke_weight == 2
    assert outline_style(AdminLevel.DISTRICTS).stroke_color == "#666666"
    sub = outline_style(AdminLevel.SUBDISTRICTS, fill_color="#ff0000")
    assert sub.stroke_opacity == 0.6
    assert sub.fill_opacity == 0.7
    assert outline_style(AdminLevel.PROVINCES).fill_opacity == 0.0


def test_layer_style_is_immutable():
    with pytest.raises(ValidationError):
        BASE_STYLE.fill_color = "#000000"
    assert highlight_style(BASE_STYLE) is not BASE_STYLE
    assert BASE_STYLE.stroke_weight == 1
    assert highlight_style(BASE_STYLE).model_dump() == {
        "fill_color": "#3498db",
        "fill_opacity": 0.8,
        "stroke_color": "#e74c3c",
        "stroke_weight": 3,
        "stroke_opacity": 1,
    }
