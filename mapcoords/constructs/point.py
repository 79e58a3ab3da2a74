from __future__ import annotations

from typing import Any, Mapping, NamedTuple, Sequence, Tuple, Union

PointLike = Union[Sequence[float], Mapping[str, Any]]


def as_xy(point: PointLike) -> Tuple[float, float]:
    """
    Read an (x, y) pair from any of the point shapes callers pass around.

    Accepts ``[x, y]`` / ``(x, y)`` sequences, ``{"x": .., "y": ..}`` mappings and
    ``{"lng": .., "lat": ..}`` / ``{"lon": .., "lat": ..}`` mappings.

    Raises:
        ValueError: If the point has none of the supported shapes
    """
    if isinstance(point, Mapping):
        if "x" in point and "y" in point:
            return float(point["x"]), float(point["y"])
        if "lat" in point:
            lon = point.get("lng", point.get("lon"))
            if lon is not None:
                return float(lon), float(point["lat"])
        raise ValueError(f"unsupported point mapping: {point}")
    if len(point) < 2:
        raise ValueError(f"a point needs two coordinates but got {point}")
    return float(point[0]), float(point[1])


class ProjectedPoint(NamedTuple):
    """
    A single coordinate tagged with the CRS it is expressed in.

    This is what reprojection returns; points handed to the package are untagged and
    always travel with a separate CRS argument.

    Attributes:
        x: Easting, or longitude for geographic CRS
        y: Northing, or latitude for geographic CRS
        srs: The CRS code the coordinate is expressed in
    """

    x: float
    y: float
    srs: str

    def to_list(self) -> list:
        return [self.x, self.y]
