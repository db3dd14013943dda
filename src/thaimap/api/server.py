"""
ThaiMap Boundary API

지도 프론트엔드(표현 계층)에 경계 데이터, 검색, 통계, 스타일을 제공합니다.
코어 객체(GeoDataManager, MapStyleManager)는 app.state에 보관되며,
테스트에서는 create_app()에 직접 주입합니다.
"""

import logging
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from thaimap.engine.data_manager import DataLoadError, GeoDataManager
from thaimap.engine.geometry import (
    calculate_optimal_zoom,
    feature_bounds,
    feature_center,
    feature_centroid,
    is_point_in_thailand,
)
from thaimap.engine.labels import create_tooltip_data, label_size, label_text, should_show_label
from thaimap.engine.models import (
    ADMIN_LEVELS,
    COLOR_SCHEME_DESCRIPTIONS,
    LEVEL_LABELS,
    AdminLevel,
    ColorScheme,
)
from thaimap.engine.sources import FileGeoJSONSource, HttpGeoJSONSource
from thaimap.engine.style import BASE_STYLE, MapStyleManager, highlight_style, outline_style, selected_style
from thaimap.shared.config import settings
from thaimap.shared.constants import (
    DEFAULT_ZOOM,
    MAX_ZOOM,
    MIN_ZOOM,
    SEARCH_DEFAULT_LIMIT,
    SEARCH_MAX_LIMIT,
    THAILAND_BOUNDS,
    THAILAND_CENTER,
)

logger = logging.getLogger("api")


class CustomColorRequest(BaseModel):
    color: str


def build_source():
    if settings.GEOJSON_BASE_URL:
        return HttpGeoJSONSource(settings.GEOJSON_BASE_URL)
    return FileGeoJSONSource(settings.GEOJSON_DIR)


def create_app(
    data_manager: Optional[GeoDataManager] = None,
    style_manager: Optional[MapStyleManager] = None,
    preload: Optional[bool] = None,
) -> FastAPI:
    manager = data_manager or GeoDataManager(build_source())
    styles = style_manager or MapStyleManager()
    should_preload = settings.PRELOAD_DATA if preload is None else preload

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if should_preload and not manager.is_data_loaded():
            try:
                await manager.load_all()
            except DataLoadError as e:
                # 서버는 계속 기동; /health 에서 ready=false 로 노출
                logger.error(f"Boundary data load failed: {e}")
        yield

    app = FastAPI(title="ThaiMap Boundary API", version="1.0.0", lifespan=lifespan)
    app.state.data_manager = manager
    app.state.style_manager = styles

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_routes(app)
    return app


def get_data_manager(request: Request) -> GeoDataManager:
    return request.app.state.data_manager


def get_style_manager(request: Request) -> MapStyleManager:
    return request.app.state.style_manager


def _parse_level(level: str) -> AdminLevel:
    try:
        return AdminLevel(level)
    except ValueError:
        raise HTTPException(status_code=404, detail=f"UNKNOWN_LEVEL: {level}")


def _parse_scheme(scheme: str) -> ColorScheme:
    try:
        return ColorScheme(scheme)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"INVALID_SCHEME: {scheme}")


def _require_loaded(manager: GeoDataManager, level: AdminLevel):
    collection = manager.get_data(level)
    if collection is None:
        raise HTTPException(status_code=404, detail=f"LEVEL_NOT_LOADED: {level.value}")
    return collection


def register_routes(app: FastAPI) -> None:

    @app.get("/health")
    def health_check(manager: GeoDataManager = Depends(get_data_manager)):
        return {"status": "ok", "ready": manager.is_data_loaded()}

    @app.get("/api/v1/map-config")
    def get_map_config():
        return {
            "success": True,
            "data": {
                "center": THAILAND_CENTER,
                "zoom": DEFAULT_ZOOM,
                "min_zoom": MIN_ZOOM,
                "max_zoom": MAX_ZOOM,
                "bounds": THAILAND_BOUNDS,
            },
        }

    @app.get("/api/v1/map-config/coverage")
    def check_coverage(lat: float = Query(...), lng: float = Query(...)):
        if not is_point_in_thailand(lat, lng):
            raise HTTPException(status_code=422, detail="OUT_OF_COVERAGE: Coordinates outside Thai bounds")
        return {"success": True, "data": {"lat": lat, "lng": lng}}

    @app.get("/api/v1/color-schemes")
    def list_color_schemes():
        return {
            "success": True,
            "data": {
                "schemes": [
                    {"id": scheme.value, "name": name, "description": description}
                    for scheme, (name, description) in COLOR_SCHEME_DESCRIPTIONS.items()
                ],
                "highlight": highlight_style(BASE_STYLE).model_dump(),
                "selected": selected_style(BASE_STYLE).model_dump(),
            },
        }

    @app.get("/api/v1/levels")
    def list_levels(manager: GeoDataManager = Depends(get_data_manager)):
        return {
            "success": True,
            "data": [
                {
                    "level": level.value,
                    "label": LEVEL_LABELS[level],
                    "loaded": manager.get_data(level) is not None,
                    "label_size": label_size(level),
                    "show_labels": should_show_label(level),
                    "outline": outline_style(level).model_dump(),
                }
                for level in ADMIN_LEVELS
            ],
        }

    @app.get("/api/v1/levels/{level}")
    def get_collection(
        level: str,
        province: List[str] = Query([]),
        manager: GeoDataManager = Depends(get_data_manager),
    ):
        """레벨 전체 GeoJSON; province=<pro_code> 반복 지정 시 해당 도만"""
        admin_level = _parse_level(level)
        collection = _require_loaded(manager, admin_level)
        if not province:
            return collection.to_geojson()
        features = manager.filter_by_provinces(admin_level, province)
        return {
            "type": "FeatureCollection",
            "name": admin_level.value,
            "features": [f.to_geojson() for f in features],
        }

    @app.get("/api/v1/levels/{level}/statistics")
    def get_statistics(level: str, manager: GeoDataManager = Depends(get_data_manager)):
        stats = manager.get_statistics(_parse_level(level))
        return {"success": True, "data": stats.model_dump()}

    @app.get("/api/v1/levels/{level}/features/{feature_id}")
    def get_feature(
        level: str,
        feature_id: str,
        width: int = Query(800, ge=1),
        height: int = Query(600, ge=1),
        manager: GeoDataManager = Depends(get_data_manager),
    ):
        admin_level = _parse_level(level)
        _require_loaded(manager, admin_level)
        feature = manager.find_feature(admin_level, feature_id)
        if feature is None:
            raise HTTPException(status_code=404, detail=f"FEATURE_NOT_FOUND: {level}/{feature_id}")

        centroid = feature_centroid(feature)
        bounds = feature_bounds(feature)
        return {
            "success": True,
            "data": {
                "feature_id": feature.feature_id,
                "display_name": feature.display_name,
                "label": label_text(feature),
                "bounds": bounds,
                "zoom": calculate_optimal_zoom(bounds, width, height) if bounds else None,
                "center": feature_center(feature),
                "centroid": centroid,
                "tooltip": create_tooltip_data(feature, centroid).model_dump() if centroid else None,
            },
        }

    @app.get("/api/v1/levels/{level}/styles")
    def get_styles(
        level: str,
        scheme: str = Query(ColorScheme.MONOCHROME.value),
        manager: GeoDataManager = Depends(get_data_manager),
        styles: MapStyleManager = Depends(get_style_manager),
    ):
        """현재 레벨 기준으로 캐시를 갱신한 뒤 피처별 스타일 반환"""
        admin_level = _parse_level(level)
        color_scheme = _parse_scheme(scheme)
        features = _require_loaded(manager, admin_level).features

        if color_scheme == ColorScheme.BY_REGION:
            # 팔레트 순서는 지역 분류 레벨 기준 (행정 레벨은 ROYIN)
            region_level = admin_level if admin_level.is_region else AdminLevel.REGION_ROYIN
            styles.update_region_colors(manager.get_region_list(region_level))
        elif color_scheme == ColorScheme.BY_AREA:
            styles.update_area_range(features)

        return {
            "success": True,
            "data": {
                f.feature_id: styles.get_feature_style(f, admin_level, color_scheme).model_dump()
                for f in features
            },
        }

    @app.get("/api/v1/regions/{region_level}")
    def get_region_list(region_level: str, manager: GeoDataManager = Depends(get_data_manager)):
        admin_level = _parse_level(region_level)
        if not admin_level.is_region:
            raise HTTPException(status_code=400, detail=f"NOT_A_REGION_LEVEL: {region_level}")
        return {"success": True, "data": manager.get_region_list(admin_level)}

    @app.get("/api/v1/regions/{name}/features")
    def filter_by_region(
        name: str,
        level: str = Query(AdminLevel.PROVINCES.value),
        manager: GeoDataManager = Depends(get_data_manager),
    ):
        features = manager.filter_features_by_region(_parse_level(level), name)
        return {
            "success": True,
            "data": [f.to_geojson() for f in features],
            "total": len(features),
        }

    @app.get("/api/v1/search")
    def search(
        q: str = Query(""),
        limit: int = Query(SEARCH_DEFAULT_LIMIT, ge=1, le=SEARCH_MAX_LIMIT),
        manager: GeoDataManager = Depends(get_data_manager),
    ):
        results = manager.search(q, limit)
        return {"query": q, "results": [r.model_dump(mode="json") for r in results], "total": len(results)}

    @app.put("/api/v1/custom-colors/{feature_id}")
    def set_custom_color(
        feature_id: str,
        payload: CustomColorRequest,
        styles: MapStyleManager = Depends(get_style_manager),
    ):
        styles.set_custom_color(feature_id, payload.color)
        return {"success": True, "data": styles.custom_colors}

    @app.delete("/api/v1/custom-colors/{feature_id}")
    def remove_custom_color(feature_id: str, styles: MapStyleManager = Depends(get_style_manager)):
        removed = styles.remove_custom_color(feature_id)
        return {"success": removed, "data": styles.custom_colors}

    @app.delete("/api/v1/custom-colors")
    def clear_custom_colors(styles: MapStyleManager = Depends(get_style_manager)):
        styles.clear_custom_colors()
        return {"success": True, "data": {}}


app = create_app()
