from __future__ import annotations

import copy
from enum import Enum
from typing import Any, Callable, Dict, Iterator, List, Optional

from mapcoords.utils.keys import (
    COORDINATES_KEY,
    FEATURES_KEY,
    GEOMETRIES_KEY,
    GEOMETRY_KEY,
    TYPE_KEY,
)

Position = List[float]
PositionFunction = Callable[[Position], Position]


class GeoJSONType(Enum):
    """
    Enumeration of the GeoJSON object types the package understands.

    Every walker in the package dispatches on this enumeration instead of comparing type
    strings, so an object with an unknown ``type`` fails loudly with a ValueError.
    Coordinate-bearing members know how deeply their positions are nested inside
    ``coordinates``: a Point holds a single position (depth 0), a LineString a list of
    positions (depth 1) and so on up to the MultiPolygon (depth 3).

    Examples:
        >>> GeoJSONType("Polygon").depth
        2
        >>> GeoJSONType("Feature").is_geometry
        False
    """

    POINT = "Point"
    MULTI_POINT = "MultiPoint"
    LINE_STRING = "LineString"
    MULTI_LINE_STRING = "MultiLineString"
    POLYGON = "Polygon"
    MULTI_POLYGON = "MultiPolygon"
    GEOMETRY_COLLECTION = "GeometryCollection"
    FEATURE = "Feature"
    FEATURE_COLLECTION = "FeatureCollection"

    @classmethod
    def of(cls, obj: Dict[str, Any]) -> GeoJSONType:
        try:
            return cls(obj[TYPE_KEY])
        except (KeyError, TypeError) as e:
            raise ValueError(f"object has no GeoJSON type: {obj}") from e

    @property
    def depth(self) -> Optional[int]:
        return _DEPTHS.get(self)

    @property
    def is_geometry(self) -> bool:
        return self not in (GeoJSONType.FEATURE, GeoJSONType.FEATURE_COLLECTION)


_DEPTHS = {
    GeoJSONType.POINT: 0,
    GeoJSONType.MULTI_POINT: 1,
    GeoJSONType.LINE_STRING: 1,
    GeoJSONType.MULTI_LINE_STRING: 2,
    GeoJSONType.POLYGON: 2,
    GeoJSONType.MULTI_POLYGON: 3,
}


def _map_coordinates(coordinates: Any, depth: int, fn: PositionFunction) -> Any:
    if depth == 0:
        return fn(list(coordinates))
    return [_map_coordinates(c, depth - 1, fn) for c in coordinates]


def _iter_coordinates(coordinates: Any, depth: int) -> Iterator[Position]:
    if depth == 0:
        yield coordinates
    else:
        for c in coordinates:
            yield from _iter_coordinates(c, depth - 1)


def map_coordinates(geometry: Dict[str, Any], fn: PositionFunction) -> Any:
    """
    Apply a function to every position of a single geometry and return the new coordinates.

    Only the ``coordinates`` member is rebuilt; use ``map_positions`` to get a whole new
    GeoJSON object.

    Raises:
        ValueError: If the geometry is not a coordinate-bearing geometry type
    """
    kind = GeoJSONType.of(geometry)
    if kind.depth is None:
        raise ValueError(f"{kind.value} does not carry coordinates")
    return _map_coordinates(geometry[COORDINATES_KEY], kind.depth, fn)


def map_geometries(
    obj: Dict[str, Any], fn: Callable[[Dict[str, Any]], Dict[str, Any]]
) -> Dict[str, Any]:
    """
    Return a deep copy of a GeoJSON object with ``fn`` applied to every simple geometry.

    Features, FeatureCollections and GeometryCollections are walked; ``fn`` receives each
    coordinate-bearing geometry (Point to MultiPolygon) and returns its replacement. All
    other members (``properties``, ``id``, ``bbox``, foreign members) are deep copied
    unchanged.

    Raises:
        ValueError: If the object, or anything nested in it, has an unknown type
    """
    kind = GeoJSONType.of(obj)
    if kind is GeoJSONType.FEATURE_COLLECTION:
        out = {k: copy.deepcopy(v) for k, v in obj.items() if k != FEATURES_KEY}
        out[FEATURES_KEY] = [map_geometries(f, fn) for f in obj.get(FEATURES_KEY, [])]
        return out
    if kind is GeoJSONType.FEATURE:
        out = {k: copy.deepcopy(v) for k, v in obj.items() if k != GEOMETRY_KEY}
        geometry = obj.get(GEOMETRY_KEY)
        out[GEOMETRY_KEY] = None if geometry is None else map_geometries(geometry, fn)
        return out
    if kind is GeoJSONType.GEOMETRY_COLLECTION:
        out = {k: copy.deepcopy(v) for k, v in obj.items() if k != GEOMETRIES_KEY}
        out[GEOMETRIES_KEY] = [map_geometries(g, fn) for g in obj.get(GEOMETRIES_KEY, [])]
        return out
    return fn(obj)


def map_positions(obj: Dict[str, Any], fn: PositionFunction) -> Dict[str, Any]:
    """
    Return a deep copy of a GeoJSON object with ``fn`` applied to every position.

    Works on any geometry, GeometryCollection, Feature or FeatureCollection. Only the
    positions change; the nesting of ``coordinates`` is preserved.

    Args:
        obj: A GeoJSON object
        fn: A function receiving a position as a list (``[x, y]`` or ``[x, y, z]``) and
            returning the new position

    Returns:
        A new GeoJSON object; the input is not modified

    Raises:
        ValueError: If the object, or anything nested in it, has an unknown type
    """

    def _map(geometry: Dict[str, Any]) -> Dict[str, Any]:
        out = {k: copy.deepcopy(v) for k, v in geometry.items() if k != COORDINATES_KEY}
        out[COORDINATES_KEY] = map_coordinates(geometry, fn)
        return out

    return map_geometries(obj, _map)

def iter_positions(obj: Dict[str, Any]) -> Iterator[Position]:
    """
    Yield every position found at any depth of a GeoJSON object.
    """
    kind = GeoJSONType.of(obj)
    if kind is GeoJSONType.FEATURE_COLLECTION:
        for feature in obj.get(FEATURES_KEY, []):
            yield from iter_positions(feature)
    elif kind is GeoJSONType.FEATURE:
        if obj.get(GEOMETRY_KEY) is not None:
            yield from iter_positions(obj[GEOMETRY_KEY])
    elif kind is GeoJSONType.GEOMETRY_COLLECTION:
        for geometry in obj.get(GEOMETRIES_KEY, []):
            yield from iter_positions(geometry)
    else:
        yield from _iter_coordinates(obj[COORDINATES_KEY], kind.depth)
