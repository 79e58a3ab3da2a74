"""GeoJSON level helpers: reprojection, extents and longitude normalization."""

from __future__ import annotations

import copy
import logging
from typing import Any, Dict, List, Mapping, Optional

from mapcoords.constructs.geometry import (
    Position,
    iter_positions,
    map_coordinates,
    map_geometries,
    map_positions,
)
from mapcoords.projections.registry import get_registry
from mapcoords.projections.registry_interface import ProjectionRegistryInterface
from mapcoords.utils.crs import XY_CRS
from mapcoords.utils.exceptions import TransformationUnavailable
from mapcoords.utils.geo import normalize_lng, transform_point
from mapcoords.utils.keys import BBOX_KEY, CRS_KEY

log = logging.getLogger(__name__)


def reproject_geojson(
    geojson: Dict[str, Any],
    source: Optional[str],
    dest: Optional[str],
    registry: Optional[ProjectionRegistryInterface] = None,
) -> Dict[str, Any]:
    """
    Reproject every coordinate of a GeoJSON object.

    The input is deep copied and never modified. Any geometry, GeometryCollection, Feature
    or FeatureCollection is accepted; ``properties``, ``id`` and every other non coordinate
    member pass through unchanged. A geometry holding a coordinate that cannot be
    reprojected is kept as it was, and so is everything when a CRS cannot be resolved:
    this function never raises for transformation problems.

    Args:
        geojson: The GeoJSON object
        source: The CRS the coordinates are expressed in
        dest: The CRS to reproject to
        registry: The projection registry to use. Defaults to the built-in projections.

    Returns:
        The reprojected copy

    Raises:
        ValueError: If the object has an unknown GeoJSON type

    Examples:
        >>> point = {"type": "Point", "coordinates": [-112.5, 42.2]}
        >>> round(reproject_geojson(point, "EPSG:4326", "EPSG:900913")["coordinates"][0], 2)
        -12523442.71
    """
    registry = get_registry(registry)

    def _position(position: Position) -> Position:
        p = transform_point(position, source, dest, registry)
        return [p.x, p.y] + list(position[2:])

    def _geometry(geometry: Dict[str, Any]) -> Dict[str, Any]:
        try:
            return map_positions(geometry, _position)
        except TransformationUnavailable as e:
            log.warning("keeping %s unprojected: %s", geometry.get("type"), e)
            return copy.deepcopy(geometry)

    return map_geometries(geojson, _geometry)


def get_geojson_extent(geojson: Dict[str, Any]) -> Optional[List[float]]:
    """
    Get the ``[minx, miny, maxx, maxy]`` envelope of every coordinate of a GeoJSON object.

    Returns:
        The extent, or None if the object holds no coordinates

    Examples:
        >>> get_geojson_extent({"type": "LineString", "coordinates": [[102, 0], [105, 1]]})
        [102, 0, 105, 1]
    """
    positions = list(iter_positions(geojson))
    if not positions:
        return None
    xs = [p[0] for p in positions]
    ys = [p[1] for p in positions]
    return [min(xs), min(ys), max(xs), max(ys)]


def check_if_layer_fits_extent_for_projection(
    layer: Mapping[str, Any],
    registry: Optional[ProjectionRegistryInterface] = None,
) -> bool:
    """
    Check that the features of a vector layer lie within the extent of the layer's CRS.

    The layer is a FeatureCollection carrying its CRS as ``layer["bbox"]["crs"]``; layers
    without it are taken to be in EPSG:3857. A layer without coordinates fits.
    """
    registry = get_registry(registry)
    bbox = layer.get(BBOX_KEY)
    crs = (bbox.get(CRS_KEY) if isinstance(bbox, Mapping) else None) or XY_CRS
    minx, miny, maxx, maxy = registry.get_extent_for_projection(crs)["extent"]

    extent = get_geojson_extent(dict(layer))
    if extent is None:
        return True
    return extent[0] >= minx and extent[1] >= miny and extent[2] <= maxx and extent[3] <= maxy


def to_lat_lon_coordinates(geometry: Dict[str, Any]) -> Any:
    """
    Get the coordinates of a geometry with each position in latitude, longitude order.

    Some map widgets take ``[lat, lng]`` positions; the nesting of the coordinates is kept.
    """
    return map_coordinates(geometry, lambda p: [p[1], p[0]] + p[2:])


def normalize_geometry(geometry: Dict[str, Any]) -> Dict[str, Any]:
    """
    Wrap every longitude of a GeoJSON object into [-180, 180).

    Latitudes and the structure are left untouched, and normalizing a normalized geometry
    changes nothing.

    Examples:
        >>> normalize_geometry({"type": "Point", "coordinates": [-210, 2]})
        {'type': 'Point', 'coordinates': [150.0, 2]}
    """
    return map_positions(geometry, lambda p: [normalize_lng(p[0])] + p[1:])


def get_normalized_lat_lon(lat_lng: Mapping[str, float]) -> Dict[str, float]:
    """
    Wrap the longitude of a ``{"lat", "lng"}`` pair; latitudes are not wrapped.
    """
    return {"lat": lat_lng["lat"], "lng": normalize_lng(lat_lng["lng"])}


def get_lon_lat_from_point(point: Mapping[str, Any]) -> List[float]:
    """
    Get ``[lng, lat]`` from a map click event ``{"latlng": {"lat", "lng"}}``.

    The longitude is normalized, since clicks on a wrapped world copy report longitudes
    beyond 180 degrees.
    """
    lat_lng = get_normalized_lat_lon(point["latlng"])
    return [lat_lng["lng"], lat_lng["lat"]]
