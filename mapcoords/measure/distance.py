from __future__ import annotations

import logging
import math
from typing import Callable, Dict, Optional, Sequence

log = logging.getLogger(__name__)

# mean Earth radius used by the spherical formula, meters
EARTH_RADIUS = 6371000.0

# WGS84 ellipsoid
WGS84_A = 6378137.0
WGS84_F = 1 / 298.257223563
WGS84_B = (1 - WGS84_F) * WGS84_A

VINCENTY_TOLERANCE = 1e-12
VINCENTY_MAX_ITERATIONS = 100

LonLat = Sequence[float]


def _haversine_segment(p1: LonLat, p2: LonLat) -> float:
    lat1 = math.radians(p1[1])
    lat2 = math.radians(p2[1])
    d_lat = lat2 - lat1
    d_lon = math.radians(p2[0] - p1[0])

    a = math.sin(d_lat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(d_lon / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS * c


def _vincenty_segment(p1: LonLat, p2: LonLat) -> Optional[float]:
    """
    Vincenty's inverse formula on the WGS84 ellipsoid.

    Returns None when the iteration does not converge, which happens for nearly antipodal
    points.
    """
    L = math.radians(p2[0] - p1[0])
    u1 = math.atan((1 - WGS84_F) * math.tan(math.radians(p1[1])))
    u2 = math.atan((1 - WGS84_F) * math.tan(math.radians(p2[1])))
    sin_u1, cos_u1 = math.sin(u1), math.cos(u1)
    sin_u2, cos_u2 = math.sin(u2), math.cos(u2)

    lam = L
    for _ in range(VINCENTY_MAX_ITERATIONS):
        sin_lam, cos_lam = math.sin(lam), math.cos(lam)
        sin_sigma = math.sqrt(
            (cos_u2 * sin_lam) ** 2 + (cos_u1 * sin_u2 - sin_u1 * cos_u2 * cos_lam) ** 2
        )
        if sin_sigma == 0:
            # coincident points
            return 0.0
        cos_sigma = sin_u1 * sin_u2 + cos_u1 * cos_u2 * cos_lam
        sigma = math.atan2(sin_sigma, cos_sigma)
        sin_alpha = cos_u1 * cos_u2 * sin_lam / sin_sigma
        cos_sq_alpha = 1 - sin_alpha**2
        # equatorial line
        cos_2sigma_m = cos_sigma - 2 * sin_u1 * sin_u2 / cos_sq_alpha if cos_sq_alpha else 0.0
        C = WGS84_F / 16 * cos_sq_alpha * (4 + WGS84_F * (4 - 3 * cos_sq_alpha))
        lam_prev = lam
        lam = L + (1 - C) * WGS84_F * sin_alpha * (
            sigma
            + C * sin_sigma * (cos_2sigma_m + C * cos_sigma * (-1 + 2 * cos_2sigma_m**2))
        )
        if abs(lam - lam_prev) <= VINCENTY_TOLERANCE:
            break
    else:
        log.debug("vincenty did not converge between %s and %s", p1, p2)
        return None

    u_sq = cos_sq_alpha * (WGS84_A**2 - WGS84_B**2) / WGS84_B**2
    A = 1 + u_sq / 16384 * (4096 + u_sq * (-768 + u_sq * (320 - 175 * u_sq)))
    B = u_sq / 1024 * (256 + u_sq * (-128 + u_sq * (74 - 47 * u_sq)))
    delta_sigma = B * sin_sigma * (
        cos_2sigma_m
        + B
        / 4
        * (
            cos_sigma * (-1 + 2 * cos_2sigma_m**2)
            - B / 6 * cos_2sigma_m * (-3 + 4 * sin_sigma**2) * (-3 + 4 * cos_2sigma_m**2)
        )
    )
    return WGS84_B * A * (sigma - delta_sigma)


def haversine(points: Sequence[LonLat]) -> float:
    """
    Calculate the length of a polyline on a sphere with the haversine formula.

    Args:
        points: The ``[lon, lat]`` vertices of the polyline

    Returns:
        The length in meters, rounded to the millimeter

    Examples:
        >>> haversine([[1, 1], [2, 2]])
        157225.432
    """
    total = sum(_haversine_segment(a, b) for a, b in zip(points, points[1:]))
    return round(total, 3)


def vincenty(points: Sequence[LonLat]) -> Optional[float]:
    """
    Calculate the length of a polyline on the WGS84 ellipsoid with Vincenty's formula.

    Args:
        points: The ``[lon, lat]`` vertices of the polyline

    Returns:
        The length in meters, rounded to the millimeter, or None if the formula does not
        converge for one of the segments (use haversine for nearly antipodal points)

    Examples:
        >>> vincenty([[1, 1], [2, 2]])
        156876.149
    """
    total = 0.0
    for a, b in zip(points, points[1:]):
        segment = _vincenty_segment(a, b)
        if segment is None:
            return None
        total += segment
    return round(total, 3)


FORMULAS: Dict[str, Callable[[Sequence[LonLat]], Optional[float]]] = {
    "haversine": haversine,
    "vincenty": vincenty,
}


def calculate_distance(points: Sequence[LonLat], formula: str = "haversine") -> Optional[float]:
    """
    Calculate the length of a polyline with one of the FORMULAS.

    Raises:
        ValueError: If the formula is unknown
    """
    try:
        fn = FORMULAS[formula]
    except KeyError as e:
        raise ValueError(
            f"unknown distance formula {formula}, expected one of {sorted(FORMULAS)}"
        ) from e
    return fn(points)
