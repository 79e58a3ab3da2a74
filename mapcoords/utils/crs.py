"""Coordinate Reference System (CRS) codes and code helpers used throughout mapcoords.

This module defines the CRS codes the package always knows about and the string level
helpers that normalize, alias and parse CRS identifiers:
- LATLON_CRS: WGS84 geographic coordinates (EPSG:4326)
- XY_CRS: Web Mercator projected coordinates (EPSG:3857)
"""

from __future__ import annotations

import re
from typing import Collection, Mapping, Optional, Union

# WGS84 latitude/longitude coordinate system (EPSG:4326)
# Range: latitude [-90, 90], longitude [-180, 180]
LATLON_CRS = "EPSG:4326"

# Web Mercator projected coordinate system (EPSG:3857)
# Coordinates are in meters (easting, northing)
XY_CRS = "EPSG:3857"

# Legacy code for Web Mercator still emitted by many servers
GOOGLE_MERCATOR_CRS = "EPSG:900913"

LATLON_PROJ4 = "+proj=longlat +datum=WGS84 +no_defs"
NAD83_PROJ4 = "+proj=longlat +datum=NAD83 +no_defs"
XY_PROJ4 = (
    "+proj=merc +a=6378137 +b=6378137 +lat_ts=0 +lon_0=0 "
    "+x_0=0 +y_0=0 +k=1 +units=m +no_defs"
)

# Full width of the Web Mercator world, half of it on each side of the origin
XY_HALF_WORLD = 20037508.342789244

# Extents reported for the built-in projections
XY_EXTENT = (-20026376.39, -20048966.10, 20026376.39, 20048966.10)
LATLON_EXTENT = (-180.0, -90.0, 180.0, 90.0)
DEFAULT_EXTENT = XY_EXTENT

LATLON_ALIASES = ("WGS84", "EPSG:WGS84", "OGC:CRS84", "EPSG:OGC:CRS84")
XY_ALIASES = (GOOGLE_MERCATOR_CRS, "EPSG:102100", "EPSG:102113", "GOOGLE")

_NUMERIC_EPSG = re.compile(r"^EPSG:\d{4,6}$")

AllowedSRS = Union[Mapping[str, bool], Collection[str]]


def _allows(allowed: AllowedSRS, srs: str) -> bool:
    if isinstance(allowed, Mapping):
        return bool(allowed.get(srs))
    return srs in allowed


def get_compatible_srs(srs: str, allowed: AllowedSRS) -> str:
    """
    Pick the code to use for a request given the set of codes a service allows.

    The two Web Mercator codes (EPSG:3857 and EPSG:900913) are interchangeable: when the
    requested one is not allowed but its twin is, the twin is returned. In every other case
    the requested code comes back unchanged.

    Args:
        srs: The requested CRS code
        allowed: The codes accepted by the service, either a collection of codes or a
            mapping of code to a truthy flag (as found in capabilities documents)

    Returns:
        The compatible CRS code

    Examples:
        >>> get_compatible_srs("EPSG:900913", {"EPSG:3857": True})
        'EPSG:3857'
        >>> get_compatible_srs("EPSG:3857", {"EPSG:3857", "EPSG:900913"})
        'EPSG:3857'
    """
    if srs == GOOGLE_MERCATOR_CRS and not _allows(allowed, srs) and _allows(allowed, XY_CRS):
        return XY_CRS
    if srs == XY_CRS and not _allows(allowed, srs) and _allows(allowed, GOOGLE_MERCATOR_CRS):
        return GOOGLE_MERCATOR_CRS
    return srs


def normalize_srs(srs: str, allowed: Optional[AllowedSRS] = None) -> str:
    """
    Replace the legacy Web Mercator code with EPSG:3857.

    When a set of allowed codes is given and the normalized code is not in it, the
    compatible code from that set is returned instead.

    Examples:
        >>> normalize_srs("EPSG:900913")
        'EPSG:3857'
        >>> normalize_srs("EPSG:900913", {"EPSG:900913": True})
        'EPSG:900913'
    """
    result = XY_CRS if srs == GOOGLE_MERCATOR_CRS else srs
    if allowed is not None and not _allows(allowed, result):
        return get_compatible_srs(result, allowed)
    return result


def make_numeric_epsg(code: Optional[str]) -> Optional[str]:
    """
    Return the numeric ``EPSG:NNNN`` form of a code.

    WGS84 spellings map to EPSG:4326; codes that are already numeric pass through;
    anything else (including too-short numbers like ``EPSG:84``) gives None.

    Examples:
        >>> make_numeric_epsg("EPSG:WGS84")
        'EPSG:4326'
        >>> make_numeric_epsg("EPSG:84") is None
        True
    """
    if not code:
        return None
    if code in LATLON_ALIASES:
        return LATLON_CRS
    if _NUMERIC_EPSG.match(code):
        return code
    return None


def normalize_crs_code(code: Optional[str]) -> Optional[str]:
    """
    Reduce any supported spelling of a CRS (URN, alias, short code) to ``EPSG:NNNN``.

    Returns None for codes that are not EPSG codes or are malformed.

    Examples:
        >>> normalize_crs_code("urn:ogc:def:crs:EPSG::900913")
        'EPSG:3857'
    """
    if not code:
        return None
    if code.lower().startswith("urn:"):
        code = extract_crs_from_urn(code)
        if code is None:
            return None
    if code in XY_ALIASES:
        return XY_CRS
    return make_numeric_epsg(code)


def extract_crs_from_urn(urn: str) -> Optional[str]:
    """
    Extract a CRS code from an OGC URN of the form ``urn:ogc:def:crs:<auth>:<ver>:<code>``.

    The version segment is optional (it may be empty). When the authority is empty only the
    bare code is returned.

    Args:
        urn: The URN to parse

    Returns:
        ``"<auth>:<code>"``, the bare code, or None when the URN is not a CRS definition

    Examples:
        >>> extract_crs_from_urn("urn:ogc:def:crs:EPSG:6.6:4326")
        'EPSG:4326'
        >>> extract_crs_from_urn("urn:ogc:def:crs:::RGF Lambert93")
        'RGF Lambert93'
        >>> extract_crs_from_urn("urn:lex:eu:council:directive:2010-03-09") is None
        True
    """
    parts = urn.split(":")
    if len(parts) < 6 or [p.lower() for p in parts[:4]] != ["urn", "ogc", "def", "crs"]:
        return None
    authority = parts[4]
    code = parts[-1]
    if not code:
        return None
    return f"{authority}:{code}" if authority else code
