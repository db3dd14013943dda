"""
Geometry utilities for boundary features: bounding boxes, bounds-midpoint
centers, shoelace centroids for label placement, and coarse map helpers.

Coordinates follow GeoJSON order ([lng, lat]); everything returned to the
map is in (lat, lng) order.
"""

import math
from numbers import Real
from typing import Any, List, Optional, Sequence, Tuple

from thaimap.engine.models import Feature, Geometry
from thaimap.shared.constants import (
    THAILAND_LAT_RANGE,
    THAILAND_LNG_RANGE,
    WORLD_TILE_PX,
    ZOOM_CAP,
)

LatLng = Tuple[float, float]
Bounds = Tuple[LatLng, LatLng]

# Rings with an absolute shoelace area below this are treated as degenerate.
_AREA_EPSILON = 1e-12


def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def _is_position(value: Any) -> bool:
    return (
        isinstance(value, (list, tuple))
        and len(value) == 2
        and _is_number(value[0])
        and _is_number(value[1])
    )


def flatten_coordinates(coords: Any) -> List[Tuple[float, float]]:
    """
    Flatten arbitrarily nested coordinate arrays into [(lng, lat), ...].
    Descends until an array of exactly two numbers is found.
    """
    result: List[Tuple[float, float]] = []

    def _walk(node: Any) -> None:
        if _is_position(node):
            result.append((float(node[0]), float(node[1])))
        elif isinstance(node, (list, tuple)):
            for child in node:
                _walk(child)

    _walk(coords)
    return result


def geometry_bounds(geometry: Geometry) -> Optional[Bounds]:
    """((minLat, minLng), (maxLat, maxLng)) or None for an empty geometry."""
    points = flatten_coordinates(geometry.coordinates)
    if not points:
        return None
    lngs = [p[0] for p in points]
    lats = [p[1] for p in points]
    return (min(lats), min(lngs)), (max(lats), max(lngs))


def feature_bounds(feature: Feature) -> Optional[Bounds]:
    return geometry_bounds(feature.geometry)


def bounds_center(bounds: Bounds) -> LatLng:
    (min_lat, min_lng), (max_lat, max_lng) = bounds
    return (min_lat + max_lat) / 2, (min_lng + max_lng) / 2


def feature_center(feature: Feature) -> Optional[LatLng]:
    """Midpoint of the bounding box (not the centroid)."""
    bounds = feature_bounds(feature)
    if bounds is None:
        return None
    return bounds_center(bounds)


def _ring_points(ring: Sequence) -> List[Tuple[float, float]]:
    points = [(float(p[0]), float(p[1])) for p in ring if _is_position(p)]
    # Drop the explicit closing vertex; the ring is closed implicitly.
    if len(points) > 1 and points[0] == points[-1]:
        points.pop()
    return points


def ring_signed_area(ring: Sequence) -> float:
    """Shoelace signed area in squared degrees (positive when counter-clockwise)."""
    points = _ring_points(ring)
    if len(points) < 3:
        return 0.0
    total = 0.0
    for i, (x0, y0) in enumerate(points):
        x1, y1 = points[(i + 1) % len(points)]
        total += x0 * y1 - x1 * y0
    return total * 0.5


def ring_centroid(ring: Sequence) -> Optional[LatLng]:
    """
    Shoelace centroid of a single ring, as (lat, lng).
    Returns None for degenerate rings (< 3 vertices or zero area).
    """
    points = _ring_points(ring)
    if len(points) < 3:
        return None

    signed_area = 0.0
    cx = 0.0
    cy = 0.0
    for i, (x0, y0) in enumerate(points):
        x1, y1 = points[(i + 1) % len(points)]
        a = x0 * y1 - x1 * y0
        signed_area += a
        cx += (x0 + x1) * a
        cy += (y0 + y1) * a
    signed_area *= 0.5

    if abs(signed_area) < _AREA_EPSILON:
        return None
    lng = cx / (6 * signed_area)
    lat = cy / (6 * signed_area)
    if not (math.isfinite(lat) and math.isfinite(lng)):
        return None
    return lat, lng


def largest_polygon(polygons: Sequence) -> Optional[Sequence]:
    """Pick the sub-polygon whose outer ring has the largest absolute area."""
    best = None
    best_area = -1.0
    for polygon in polygons:
        if not polygon:
            continue
        area = abs(ring_signed_area(polygon[0]))
        if area > best_area:
            best, best_area = polygon, area
    return best


def feature_centroid(feature: Feature) -> Optional[LatLng]:
    """
    Label anchor for a feature.

    Polygon: centroid of the outer ring. MultiPolygon: centroid of the outer
    ring of the largest sub-polygon. Holes are ignored. Other geometry types
    and degenerate rings fall back to the bounding-box midpoint.
    """
    geometry = feature.geometry
    outer_ring = None
    if geometry.type == "Polygon" and geometry.coordinates:
        outer_ring = geometry.coordinates[0]
    elif geometry.type == "MultiPolygon" and geometry.coordinates:
        polygon = largest_polygon(geometry.coordinates)
        if polygon:
            outer_ring = polygon[0]

    if outer_ring is not None:
        centroid = ring_centroid(outer_ring)
        if centroid is not None:
            return centroid
    return feature_center(feature)


def is_point_in_thailand(lat: float, lng: float) -> bool:
    """Coarse country bounding-box test (not polygon containment)."""
    return (
        THAILAND_LAT_RANGE[0] <= lat <= THAILAND_LAT_RANGE[1]
        and THAILAND_LNG_RANGE[0] <= lng <= THAILAND_LNG_RANGE[1]
    )


def _lat_rad(lat: float) -> float:
    s = math.sin(math.radians(lat))
    rad_x2 = math.log((1 + s) / (1 - s)) / 2
    return max(min(rad_x2, math.pi), -math.pi) / 2


def calculate_optimal_zoom(bounds: Bounds, width_px: int, height_px: int) -> int:
    """
    Largest Web Mercator zoom at which bounds fit a map of the given size.
    Capped at ZOOM_CAP.
    """
    (south, west), (north, east) = bounds

    lat_fraction = (_lat_rad(north) - _lat_rad(south)) / math.pi
    lng_diff = east - west
    lng_fraction = ((lng_diff + 360) if lng_diff < 0 else lng_diff) / 360

    def _zoom(map_px: int, fraction: float) -> int:
        if fraction <= 0:
            return ZOOM_CAP
        return math.floor(math.log(map_px / WORLD_TILE_PX / fraction) / math.log(2))

    return min(_zoom(height_px, lat_fraction), _zoom(width_px, lng_fraction), ZOOM_CAP)
