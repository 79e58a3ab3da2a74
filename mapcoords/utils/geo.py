from __future__ import annotations

import logging
import math
from decimal import ROUND_CEILING, ROUND_FLOOR, ROUND_HALF_UP, Decimal
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from mapcoords.constructs.bbox import BBoxLike, BoundingBox
from mapcoords.constructs.point import PointLike, ProjectedPoint, as_xy
from mapcoords.projections.registry import get_registry, get_transformer
from mapcoords.projections.registry_interface import ProjectionRegistryInterface
from mapcoords.utils.crs import LATLON_CRS
from mapcoords.utils.exceptions import TransformationUnavailable
from mapcoords.utils.keys import XML_ATTRIBUTES_KEY

log = logging.getLogger(__name__)

Number = Union[float, int, str]

_ROUNDING = {
    "floor": ROUND_FLOOR,
    "ceil": ROUND_CEILING,
    "round": ROUND_HALF_UP,
}


def _sends_poles_to_infinity(
    registry: ProjectionRegistryInterface, source: str, dest: str
) -> bool:
    # recent PROJ releases return a huge but finite northing for the poles
    return registry.resolve(source).is_geographic() and registry.resolve(dest).is_mercator()


def transform_point(
    point: PointLike,
    source: Optional[str],
    dest: Optional[str],
    registry: ProjectionRegistryInterface,
) -> ProjectedPoint:
    """
    Reproject a single point, raising when the transformation is not available.

    This is the strict counterpart of ``reproject``, meant for code that reprojects many
    coordinates and decides itself how to degrade.

    Raises:
        TransformationUnavailable: If either CRS cannot be resolved, the point lies outside
            the domain of the destination projection or the result is not finite
    """
    transformer = get_transformer(registry, source, dest) if source and dest else None
    if transformer is None:
        raise TransformationUnavailable(f"no transformation from {source} to {dest}")

    x, y = as_xy(point)
    if abs(y) >= 90 and _sends_poles_to_infinity(registry, source, dest):
        raise TransformationUnavailable(
            f"latitude {y} cannot be expressed in {dest}, a Mercator projection"
        )
    tx, ty = transformer.transform(x, y)
    if not (math.isfinite(tx) and math.isfinite(ty)):
        raise TransformationUnavailable(
            f"({x}, {y}) cannot be expressed in {dest} when coming from {source}"
        )

    return ProjectedPoint(x=tx, y=ty, srs=dest)


def reproject(
    point: PointLike,
    source: Optional[str],
    dest: Optional[str],
    registry: Optional[ProjectionRegistryInterface] = None,
) -> Optional[ProjectedPoint]:
    """
    Reproject a point from one coordinate reference system to another.

    An empty or missing CRS is an explicit no-op and gives None, as does a CRS the registry
    cannot resolve. Callers treat None as "transformation unavailable".

    Args:
        point: The point, as ``[x, y]``, ``(x, y)`` or ``{"x": .., "y": ..}``
        source: The CRS code the point is expressed in
        dest: The CRS code to reproject to
        registry: The projection registry to use. Defaults to a registry holding the
            built-in projections only.

    Returns:
        The reprojected point tagged with ``dest``, or None

    Examples:
        >>> reproject([45, 13], "EPSG:4326", "EPSG:900913").srs
        'EPSG:900913'
        >>> reproject([45, 13], "", "") is None
        True
    """
    try:
        return transform_point(point, source, dest, get_registry(registry))
    except TransformationUnavailable as e:
        log.debug("reprojection unavailable: %s", e)
        return None


def reproject_bbox(
    bbox: BBoxLike,
    source: Optional[str],
    dest: Optional[str],
    registry: Optional[ProjectionRegistryInterface] = None,
) -> Optional[List[float]]:
    """
    Reproject a bounding box.

    All four corners are reprojected, since an axis aligned box rarely stays axis aligned
    through a projection, and the envelope of the reprojected corners is returned.

    Returns:
        The reprojected ``[minx, miny, maxx, maxy]``, or None if the transformation is not
        available
    """
    registry = get_registry(registry)
    box = BoundingBox.from_any(bbox)
    try:
        corners = [transform_point(c, source, dest, registry) for c in box.corners()]
    except TransformationUnavailable as e:
        log.debug("bbox reprojection unavailable: %s", e)
        return None

    xs = [c.x for c in corners]
    ys = [c.y for c in corners]
    return [min(xs), min(ys), max(xs), max(ys)]


def get_projected_bbox(
    center: PointLike,
    resolution: float,
    rotation: float,
    size: Sequence[float],
) -> BoundingBox:
    """
    Compute the bounding box a map shows, given its center, resolution, rotation and size.

    For a rotated map the envelope of the rotated view rectangle is returned.

    Args:
        center: The map center in map units
        resolution: Map units per pixel
        rotation: The map rotation in radians
        size: The ``[width, height]`` of the map in pixels

    Returns:
        The bounding box, in the map units
    """
    cx, cy = as_xy(center)
    dx = resolution * size[0] / 2
    dy = resolution * size[1] / 2
    cos = math.cos(rotation)
    sin = math.sin(rotation)
    x_cos, x_sin = dx * cos, dx * sin
    y_cos, y_sin = dy * cos, dy * sin

    xs = [cx - x_cos + y_sin, cx - x_cos - y_sin, cx + x_cos - y_sin, cx + x_cos + y_sin]
    ys = [cy - x_sin - y_cos, cy - x_sin + y_cos, cy + x_sin + y_cos, cy + x_sin - y_cos]
    return BoundingBox(minx=min(xs), miny=min(ys), maxx=max(xs), maxy=max(ys))


def calculate_azimuth(
    p1: PointLike,
    p2: PointLike,
    crs: str,
    registry: Optional[ProjectionRegistryInterface] = None,
) -> Optional[float]:
    """
    Calculate the initial bearing from one point to another, in degrees clockwise from north.

    Both points are expressed in ``crs``; they are taken to geographic coordinates before
    computing the bearing.

    Returns:
        The bearing in [0, 360), or None if ``crs`` cannot be resolved

    Examples:
        >>> round(calculate_azimuth([0, 0], [1, 1], "EPSG:900913"), 2)
        45.0
    """
    registry = get_registry(registry)
    try:
        a = transform_point(p1, crs, LATLON_CRS, registry)
        b = transform_point(p2, crs, LATLON_CRS, registry)
    except TransformationUnavailable as e:
        log.debug("azimuth unavailable: %s", e)
        return None

    lon1, lat1 = math.radians(a.x), math.radians(a.y)
    lon2, lat2 = math.radians(b.x), math.radians(b.y)
    d_lon = lon2 - lon1
    y = math.sin(d_lon) * math.cos(lat2)
    x = math.cos(lat1) * math.sin(lat2) - math.sin(lat1) * math.cos(lat2) * math.cos(d_lon)
    return (math.degrees(math.atan2(y, x)) + 360) % 360


def parse_string(value: str) -> Optional[Dict[str, float]]:
    """
    Parse a space separated ``"x y"`` pair, as found in GML and OWS documents.

    Returns:
        ``{"x": x, "y": y}``, or None if either member is not a number

    Examples:
        >>> parse_string("10000 500000")
        {'x': 10000.0, 'y': 500000.0}
        >>> parse_string("AAA00 500000") is None
        True
    """
    parts = value.split()
    if len(parts) < 2:
        return None
    try:
        return {"x": float(parts[0]), "y": float(parts[1])}
    except ValueError:
        return None


def make_bbox_from_ows(lower_corner: Sequence[Number], upper_corner: Sequence[Number]) -> List[float]:
    """
    Build ``[minx, miny, maxx, maxy]`` from the LowerCorner and UpperCorner of an OWS bbox.

    Services do not always respect the corner semantics, so the corners are sorted.
    """
    lower = [float(v) for v in lower_corner]
    upper = [float(v) for v in upper_corner]
    return BoundingBox.from_corners(lower, upper).to_list()


def _record_attributes(record: Mapping[str, Any]) -> Mapping[str, Any]:
    return record.get(XML_ATTRIBUTES_KEY, record)


def _record_srs(attributes: Mapping[str, Any]) -> Optional[str]:
    return attributes.get("SRS") or attributes.get("CRS")


def get_wms_bounding_box(
    records: Optional[Sequence[Mapping[str, Any]]] = None,
    registry: Optional[ProjectionRegistryInterface] = None,
) -> Optional[BoundingBox]:
    """
    Get the geographic bounding box of a layer from its WMS capabilities BoundingBox records.

    Each record holds ``SRS`` (or ``CRS``), ``minx``, ``miny``, ``maxx`` and ``maxy`` as
    strings, either directly or under the ``$`` key XML parsers put attributes in. The
    first record in a projected CRS the registry can resolve is reprojected to EPSG:4326,
    since those boxes are usually tighter than the geographic one servers advertise.
    Without such a record the EPSG:4326 record is used as is.

    Returns:
        The EPSG:4326 bounding box, or None when there are no usable records
    """
    if not records:
        return None

    registry = get_registry(registry)
    geographic = None
    for record in records:
        attributes = _record_attributes(record)
        srs = _record_srs(attributes)
        if registry.resolve(srs) is None:
            continue
        if registry.resolve(srs) == registry.resolve(LATLON_CRS):
            geographic = geographic or attributes
            continue
        extent = reproject_bbox(BoundingBox.from_any(attributes), srs, LATLON_CRS, registry)
        if extent is not None:
            return BoundingBox(*extent, crs=LATLON_CRS)

    if geographic is not None:
        return BoundingBox.from_any(geographic, crs=LATLON_CRS)

    log.debug("no usable bounding box among %d records", len(records))
    return None


def round_coord(
    value: Number,
    rounding: str = "round",
    maximum_fraction_digits: int = 0,
) -> float:
    """
    Round a coordinate value at a number of decimals.

    Args:
        value: The value to round
        rounding: One of "floor", "ceil" or "round" (half up)
        maximum_fraction_digits: The number of decimals to keep

    Returns:
        The rounded value

    Raises:
        ValueError: If the rounding behaviour is unknown

    Examples:
        >>> round_coord(28.55, "floor")
        28.0
        >>> round_coord(28.55, "floor", 2)
        28.55
    """
    if rounding not in _ROUNDING:
        raise ValueError(f"unknown rounding behaviour {rounding}")
    exponent = Decimal(1).scaleb(-maximum_fraction_digits)
    rounded = Decimal(str(value)).quantize(exponent, rounding=_ROUNDING[rounding])
    return float(rounded)


def convert_radian_to_degrees(value: Number) -> float:
    return math.degrees(float(value))


def convert_degrees_to_radian(value: Number) -> float:
    return math.radians(float(value))


def normalize_lng(lng: float) -> float:
    """
    Wrap a longitude into [-180, 180).

    Examples:
        >>> normalize_lng(369)
        9.0
        >>> normalize_lng(-280)
        80.0
    """
    return ((float(lng) + 180) % 360 + 360) % 360 - 180
