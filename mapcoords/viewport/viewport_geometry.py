from __future__ import annotations

import logging
from typing import List, Mapping, Tuple

from mapcoords.constructs.bbox import BBoxLike
from mapcoords.constructs.geometry import GeoJSONType
from mapcoords.constructs.viewport import ViewportGeometry
from mapcoords.utils.crs import LATLON_CRS, XY_CRS, XY_HALF_WORLD, normalize_crs_code
from mapcoords.utils.geo import normalize_lng

log = logging.getLogger(__name__)

Extent = List[float]


def _raw_bounds(bounds: BBoxLike) -> Tuple[float, float, float, float]:
    # corners are read as given: an inverted x range means the box wraps around the world
    if isinstance(bounds, Mapping):
        values = [bounds[k] for k in ("minx", "miny", "maxx", "maxy")]
    else:
        values = list(bounds)[:4]
    minx, miny, maxx, maxy = (float(v) for v in values)
    return minx, miny, maxx, maxy


def _ring(extent: Extent) -> List[List[float]]:
    minx, miny, maxx, maxy = extent
    return [[minx, miny], [minx, maxy], [maxx, maxy], [maxx, miny], [minx, miny]]


def _polygon(extent: Extent, projection: str) -> ViewportGeometry:
    minx, miny, maxx, maxy = extent
    return ViewportGeometry(
        type=GeoJSONType.POLYGON.value,
        radius=0,
        projection=projection,
        coordinates=[_ring(extent)],
        extent=list(extent),
        center=[(minx + maxx) / 2, (miny + maxy) / 2],
    )


def get_viewport_geometry(bounds: BBoxLike, projection: str) -> ViewportGeometry:
    """
    Build the geometry covering the area a map shows.

    In EPSG:4326 the longitudes of the bounds may lie outside [-180, 180], as they do when a
    map is panned across the antimeridian, possibly several worlds away. They are wrapped
    back and a box that then straddles the antimeridian is split at +/-180 into a
    MultiPolygon whose first part is the western one (starting at -180) and the second the
    eastern one (ending at 180). Bounds spanning the whole world give the whole world
    polygon. In Web Mercator (EPSG:3857 and its aliases) a view wider than the world is
    clamped to the world width. In any other projection the bounds are used as they are.

    Args:
        bounds: The map bounds, ``{"minx", "miny", "maxx", "maxy"}`` or a 4 item sequence
        projection: The CRS code of the bounds

    Returns:
        The viewport geometry, with a radius of 0

    Examples:
        >>> viewport = get_viewport_geometry(
        ...     {"minx": -190, "miny": -50, "maxx": -160, "maxy": 60}, "EPSG:4326"
        ... )
        >>> viewport.type, viewport.extent, viewport.center
        ('MultiPolygon', [[-180, -50.0, -160.0, 60.0], [170.0, -50.0, 180, 60.0]], [-175.0, 5.0])
    """
    minx, miny, maxx, maxy = _raw_bounds(bounds)
    code = normalize_crs_code(projection)
    if code == XY_CRS and maxx - minx >= 2 * XY_HALF_WORLD:
        return _polygon([-XY_HALF_WORLD, miny, XY_HALF_WORLD, maxy], projection)
    if code != LATLON_CRS:
        return _polygon([minx, miny, maxx, maxy], projection)

    if maxx - minx >= 360:
        return _polygon([-180, miny, 180, maxy], projection)

    west = normalize_lng(minx)
    east = normalize_lng(maxx)
    if east == -180 and maxx > minx:
        east = 180
    if west <= east:
        return _polygon([west, miny, east, maxy], projection)

    log.debug("splitting viewport %s at the antimeridian", [minx, miny, maxx, maxy])
    extents = [[-180, miny, east, maxy], [west, miny, 180, maxy]]
    return ViewportGeometry(
        type=GeoJSONType.MULTI_POLYGON.value,
        radius=0,
        projection=projection,
        coordinates=[[_ring(e)] for e in extents],
        extent=extents,
        center=[normalize_lng((west + east + 360) / 2), (miny + maxy) / 2],
    )
