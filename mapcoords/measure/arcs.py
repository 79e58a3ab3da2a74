from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

import numpy as np
from pyproj import Geod

from mapcoords.utils.keys import (
    COORDINATES_KEY,
    GEOMETRY_KEY,
    PROPERTIES_KEY,
    TYPE_KEY,
)

log = logging.getLogger(__name__)

WGS84_GEOD = Geod(ellps="WGS84")

# points generated along the geodesic of every segment, end points included
ARC_POINTS = 100

# radius of the sphere circles are drawn on, meters
CIRCLE_EARTH_RADIUS = 6371008.8

# how many of each unit make one radian of arc on that sphere
CIRCLE_UNIT_FACTORS = {
    "degrees": CIRCLE_EARTH_RADIUS / 111325,
    "radians": 1.0,
    "meters": CIRCLE_EARTH_RADIUS,
    "kilometers": CIRCLE_EARTH_RADIUS / 1000,
    "miles": CIRCLE_EARTH_RADIUS / 1609.344,
}


def transform_line_to_arcs(line: Sequence[Sequence[float]]) -> List[List[float]]:
    """
    Densify a polyline into points along the geodesics between its vertices.

    Every segment contributes ``ARC_POINTS`` points (its two end points included) computed
    on the WGS84 ellipsoid. Zero length segments have no arc and contribute nothing.

    Args:
        line: The ``[lon, lat]`` vertices of the line. Any third coordinate is ignored.

    Returns:
        The ``[lon, lat]`` points of the arcs, segment after segment

    Examples:
        >>> len(transform_line_to_arcs([[1, 1], [2, 2]]))
        100
        >>> transform_line_to_arcs([[1, 1], [1, 1]])
        []
    """
    points = []
    for start, end in zip(line, line[1:]):
        lon1, lat1 = start[0], start[1]
        lon2, lat2 = end[0], end[1]
        if lon1 == lon2 and lat1 == lat2:
            continue
        intermediate = WGS84_GEOD.npts(lon1, lat1, lon2, lat2, ARC_POINTS - 2)
        points.append([float(lon1), float(lat1)])
        points.extend([float(lon), float(lat)] for lon, lat in intermediate)
        points.append([float(lon2), float(lat2)])
    return points


def transform_arcs_to_line(points: Sequence[Any], every_n: int = ARC_POINTS) -> List[Any]:
    """
    Thin out a sequence of points, keeping every Nth point and always the last one.

    The default matches the arc density of ``transform_line_to_arcs``, so the arcs of a
    single segment collapse back to its two end points.

    Examples:
        >>> transform_arcs_to_line([[1, 1], [2, 2], [3, 3], [4, 4]], 2)
        [[1, 1], [3, 3], [4, 4]]
    """
    if every_n < 1:
        raise ValueError(f"every_n must be a positive integer but got {every_n}")
    kept = [p for i, p in enumerate(points) if i % every_n == 0]
    if points and (len(points) - 1) % every_n != 0:
        kept.append(points[-1])
    return kept


def get_polygon_from_circle(
    center: Optional[Sequence[float]] = None,
    radius: Optional[float] = None,
    units: str = "degrees",
    steps: int = 100,
) -> Optional[Dict[str, Any]]:
    """
    Approximate a circle with a polygon.

    The vertices are the destinations reached from the center, on a sphere, travelling
    ``radius`` along ``steps`` evenly spaced bearings (counter-clockwise from north). The
    ring is closed, so it holds ``steps + 1`` positions.

    Args:
        center: The ``[lon, lat]`` center of the circle
        radius: The radius, in ``units``
        units: One of "degrees", "radians", "meters", "kilometers" or "miles"
        steps: The number of vertices

    Returns:
        A GeoJSON Feature holding the Polygon, or None if the center or the radius is missing

    Raises:
        ValueError: If the units are unknown

    Examples:
        >>> circle = get_polygon_from_circle([40, 15], 6000, "meters", 50)
        >>> len(circle["geometry"]["coordinates"][0])
        51
    """
    if center is None or radius is None:
        return None
    if units not in CIRCLE_UNIT_FACTORS:
        raise ValueError(
            f"unknown circle units {units}, expected one of {sorted(CIRCLE_UNIT_FACTORS)}"
        )

    distance = radius / CIRCLE_UNIT_FACTORS[units]
    lon1 = np.radians(center[0])
    lat1 = np.radians(center[1])
    bearings = np.radians(np.arange(steps) * -360.0 / steps)

    lat2 = np.arcsin(
        np.sin(lat1) * np.cos(distance) + np.cos(lat1) * np.sin(distance) * np.cos(bearings)
    )
    lon2 = lon1 + np.arctan2(
        np.sin(bearings) * np.sin(distance) * np.cos(lat1),
        np.cos(distance) - np.sin(lat1) * np.sin(lat2),
    )

    ring = np.column_stack([np.degrees(lon2), np.degrees(lat2)]).tolist()
    ring.append(list(ring[0]))
    return {
        TYPE_KEY: "Feature",
        PROPERTIES_KEY: {},
        GEOMETRY_KEY: {TYPE_KEY: "Polygon", COORDINATES_KEY: [ring]},
    }
