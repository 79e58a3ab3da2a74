from __future__ import annotations

from functools import lru_cache
from typing import NamedTuple, Optional, Tuple

from pyproj import CRS
from pyproj.exceptions import CRSError

Extent = Tuple[float, float, float, float]


@lru_cache(maxsize=256)
def _build_crs(proj4: str) -> CRS:
    return CRS.from_user_input(proj4)


class ProjectionDefinition(NamedTuple):
    """
    An immutable record describing a projection known to a registry.

    Attributes:
        code: The short CRS code this definition is registered under (e.g. 'EPSG:32632')
        proj4: The projection parameters, in any syntax pyproj.CRS accepts (usually a proj4 string)
        units: The units of the projected coordinates ('m', 'degrees', ...)
        extent: The valid extent of the projection in its own coordinates, if known
        world_extent: The valid extent of the projection in EPSG:4326, if known

    Examples:
        >>> utm = ProjectionDefinition(
        ...     code="EPSG:32632",
        ...     proj4="+proj=utm +zone=32 +datum=WGS84 +units=m +no_defs",
        ...     units="m",
        ...     extent=(166021.44, 0.0, 833978.56, 9329005.18),
        ... )
        >>> utm.crs.to_epsg()
        32632
    """

    code: str
    proj4: str
    units: str = "m"
    extent: Optional[Extent] = None
    world_extent: Optional[Extent] = None

    @property
    def crs(self) -> CRS:
        """
        Build the pyproj CRS for this definition.

        Raises:
            ValueError: If pyproj cannot parse the projection parameters
        """
        try:
            return _build_crs(self.proj4)
        except CRSError as e:
            raise ValueError(
                f"Could not parse projection definition for {self.code}: {self.proj4}"
            ) from e

    def is_geographic(self) -> bool:
        return self.crs.is_geographic

    def is_mercator(self) -> bool:
        """Mercator projections send the poles to infinity, so they cannot place them."""
        return "+proj=merc" in self.proj4.split()
