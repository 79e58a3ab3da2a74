from __future__ import annotations

import logging
import math
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from mapcoords.constructs.bbox import BoundingBox
from mapcoords.constructs.point import PointLike, as_xy
from mapcoords.constructs.viewport import LayoutInsets, MapViewState
from mapcoords.projections.registry import get_registry
from mapcoords.projections.registry_interface import ProjectionRegistryInterface
from mapcoords.utils.crs import LATLON_CRS, XY_CRS, XY_HALF_WORLD
from mapcoords.utils.exceptions import TransformationUnavailable
from mapcoords.utils.geo import transform_point
from mapcoords.viewport.viewport_geometry import get_viewport_geometry

log = logging.getLogger(__name__)

XY_WORLD_WIDTH = 2 * XY_HALF_WORLD

MapStateLike = Union[MapViewState, Mapping[str, Any]]
LayoutLike = Union[LayoutInsets, Mapping[str, Any], None]


def _view_state(map_state: MapStateLike) -> MapViewState:
    if isinstance(map_state, MapViewState):
        return map_state
    return MapViewState.from_dict(map_state)


def _insets(layout: LayoutLike) -> LayoutInsets:
    if isinstance(layout, LayoutInsets):
        return layout
    return LayoutInsets.from_dict(layout or {})


def _is_web_mercator(crs: str, registry: ProjectionRegistryInterface) -> bool:
    definition = registry.resolve(crs)
    return definition is not None and definition.code == XY_CRS


def _closest_copy(lng: float, reference: float) -> float:
    return lng + 360 * round((reference - lng) / 360)


def _to_lon_lat(
    x: float, y: float, crs: str, registry: ProjectionRegistryInterface
) -> Tuple[float, float]:
    # web mercator x beyond the world edge maps to longitudes beyond +/-180
    worlds = 0
    if _is_web_mercator(crs, registry):
        worlds = math.floor((x + XY_HALF_WORLD) / XY_WORLD_WIDTH)
        x -= worlds * XY_WORLD_WIDTH
    p = transform_point([x, y], crs, LATLON_CRS, registry)
    return p.x + worlds * 360, p.y


def _from_lon_lat(
    lon: float, lat: float, crs: str, registry: ProjectionRegistryInterface
) -> Tuple[float, float]:
    worlds = 0
    if _is_web_mercator(crs, registry):
        worlds = math.floor((lon + 180) / 360)
        lon -= worlds * 360
    p = transform_point([lon, lat], LATLON_CRS, crs, registry)
    return p.x + worlds * XY_WORLD_WIDTH, p.y


def _reference_extent(
    view: MapViewState, registry: ProjectionRegistryInterface
) -> BoundingBox:
    """
    The geographic extent the visible area is measured against.

    The map bounds are taken to EPSG:4326 keeping track of the world copy they are on; when
    they cross the antimeridian the wider of the two parts is the reference.
    """
    bounds = view.bounds
    crs = bounds.crs or view.projection
    min_lon, min_lat = _to_lon_lat(bounds.minx, bounds.miny, crs, registry)
    max_lon, max_lat = _to_lon_lat(bounds.maxx, bounds.maxy, crs, registry)
    viewport = get_viewport_geometry([min_lon, min_lat, max_lon, max_lat], LATLON_CRS)
    return viewport.widest_part()


def _target_position(
    coords: PointLike,
    reference: BoundingBox,
    view: MapViewState,
    registry: ProjectionRegistryInterface,
) -> Tuple[float, float]:
    lng, lat = as_xy(coords)
    lng = _closest_copy(lng, reference.center[0])
    return _from_lon_lat(lng, lat, view.projection, registry)


def _check_inside(
    coords: PointLike,
    view: MapViewState,
    insets: LayoutInsets,
    resolution: float,
    registry: ProjectionRegistryInterface,
) -> bool:
    reference = _reference_extent(view, registry)
    minx, miny = _from_lon_lat(reference.minx, reference.miny, view.projection, registry)
    maxx, maxy = _from_lon_lat(reference.maxx, reference.maxy, view.projection, registry)
    x, y = _target_position(coords, reference, view, registry)

    left = minx + insets.left * resolution
    right = maxx - insets.right * resolution
    bottom = miny + insets.bottom * resolution
    top = maxy - insets.top * resolution
    return left <= x <= right and bottom <= y <= top


def is_inside_visible_area(
    coords: PointLike,
    map_state: MapStateLike,
    layout: LayoutLike,
    resolution: float,
    registry: Optional[ProjectionRegistryInterface] = None,
) -> Optional[bool]:
    """
    Check whether a point shows in the part of the map not covered by overlays.

    The visible area is the map extent shrunk, on each side, by the screen space the layout
    covers (``inset * resolution`` map units).

    Args:
        coords: The point, as ``{"lat", "lng"}``
        map_state: The map, as a MapViewState or the application map dict
        layout: The space covered on each side, in pixels
        resolution: Map units per pixel at the current zoom
        registry: The projection registry to use. Defaults to the built-in projections.

    Returns:
        True if the point is visible, False if it is not, None if the map projection cannot
        be resolved
    """
    registry = get_registry(registry)
    try:
        return _check_inside(coords, _view_state(map_state), _insets(layout), resolution, registry)
    except TransformationUnavailable as e:
        log.warning("cannot locate %s on the map: %s", coords, e)
        return None


def center_to_visible_area(
    coords: PointLike,
    map_state: MapStateLike,
    layout: LayoutLike,
    resolution: float,
    registry: Optional[ProjectionRegistryInterface] = None,
) -> Optional[Dict[str, Any]]:
    """
    Compute the map center that brings a point to the middle of the visible area.

    The zoom is kept. The returned longitude is on the world copy closest to the current
    view, so it may lie outside [-180, 180] and the map pans the short way around.

    Args:
        coords: The point, as ``{"lat", "lng"}``
        map_state: The map, as a MapViewState or the application map dict
        layout: The space covered on each side, in pixels
        resolution: Map units per pixel at the current zoom
        registry: The projection registry to use. Defaults to the built-in projections.

    Returns:
        ``{"pos": {"x": lng, "y": lat}, "zoom": zoom, "crs": "EPSG:4326"}``, or None if the
        map projection cannot be resolved

    Examples:
        >>> center = center_to_visible_area(
        ...     {"lat": 36.95, "lng": -79.84},
        ...     {
        ...         "size": {"width": 1581, "height": 946},
        ...         "zoom": 4,
        ...         "projection": "EPSG:3857",
        ...         "bbox": {
        ...             "bounds": {"minx": -9599267, "miny": 3408479, "maxx": -5732165, "maxy": 5722381},
        ...             "crs": "EPSG:3857",
        ...         },
        ...     },
        ...     {"left": 500, "bottom": 250},
        ...     9783,
        ... )
        >>> round(center["pos"]["x"], 2), round(center["pos"]["y"], 2)
        (-101.81, 27.68)
    """
    registry = get_registry(registry)
    view = _view_state(map_state)
    insets = _insets(layout)
    try:
        reference = _reference_extent(view, registry)
        x, y = _target_position(coords, reference, view, registry)
        center_x = x + (insets.right - insets.left) / 2 * resolution
        center_y = y + (insets.top - insets.bottom) / 2 * resolution
        lng, lat = _to_lon_lat(center_x, center_y, view.projection, registry)
    except TransformationUnavailable as e:
        log.warning("cannot center the map on %s: %s", coords, e)
        return None

    return {
        "pos": {"x": _closest_copy(lng, reference.center[0]), "y": lat},
        "zoom": view.zoom,
        "crs": LATLON_CRS,
    }
