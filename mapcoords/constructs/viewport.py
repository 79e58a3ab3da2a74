from __future__ import annotations

from typing import Any, Dict, List, Mapping, NamedTuple, Union

from shapely.geometry import MultiPolygon, Polygon, box

from mapcoords.constructs.bbox import BoundingBox
from mapcoords.constructs.geometry import GeoJSONType
from mapcoords.utils.keys import BBOX_KEY, BOUNDS_KEY, CRS_KEY, SIZE_KEY


class ViewportGeometry(NamedTuple):
    """
    The polygon(s) covering the visible extent of a map.

    A viewport that crosses the antimeridian in EPSG:4326 is split at +/-180 into a
    MultiPolygon. The shape of ``extent`` follows the shape of the geometry: a flat
    ``[minx, miny, maxx, maxy]`` list for a Polygon, a list of two such lists for a
    MultiPolygon. Consumers rely on that distinction, so it is kept as is.

    Attributes:
        type: Either "Polygon" or "MultiPolygon"
        radius: Reserved for circular viewports; always 0
        projection: The CRS code the viewport is expressed in
        coordinates: GeoJSON coordinates of the polygon(s), rings counter-clockwise from (minx, miny)
        extent: The extent (Polygon) or the per-part extents (MultiPolygon)
        center: The [x, y] center of the viewport, longitude wrapped into [-180, 180) for EPSG:4326
    """

    type: str
    radius: float
    projection: str
    coordinates: List[Any]
    extent: List[Any]
    center: List[float]

    @property
    def is_split(self) -> bool:
        return GeoJSONType(self.type) is GeoJSONType.MULTI_POLYGON

    def parts(self) -> List[BoundingBox]:
        """
        The extent of every part as a BoundingBox, in the order of ``coordinates``.
        """
        extents = self.extent if self.is_split else [self.extent]
        return [BoundingBox(*e, crs=self.projection) for e in extents]

    def widest_part(self) -> BoundingBox:
        return max(self.parts(), key=lambda b: b.width)

    def to_shape(self) -> Union[Polygon, MultiPolygon]:
        shapes = [box(p.minx, p.miny, p.maxx, p.maxy) for p in self.parts()]
        if self.is_split:
            return MultiPolygon(shapes)
        return shapes[0]

    def to_dict(self) -> Dict[str, Any]:
        return self._asdict()


class LayoutInsets(NamedTuple):
    """
    Screen space, in pixels, covered by overlays on each side of the map.

    Examples:
        >>> LayoutInsets.from_dict({"right": 50, "bottom": 10})
        LayoutInsets(left=0, right=50, top=0, bottom=10)
    """

    left: float = 0
    right: float = 0
    top: float = 0
    bottom: float = 0

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> LayoutInsets:
        return cls(**{k: d.get(k) or 0 for k in cls._fields})


class MapViewState(NamedTuple):
    """
    The part of the application's map state the visible area computations read.

    Attributes:
        width: Map width in pixels
        height: Map height in pixels
        zoom: The current zoom level
        projection: The CRS code of the map
        bounds: The current map bounding box, tagged with its CRS
    """

    width: float
    height: float
    zoom: float
    projection: str
    bounds: BoundingBox

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> MapViewState:
        """
        Build the view state from the application map shape
        ``{size: {width, height}, zoom, projection, bbox: {bounds, crs}}``.
        """
        size = d[SIZE_KEY]
        bbox = d[BBOX_KEY]
        crs = bbox.get(CRS_KEY) or d["projection"]
        return cls(
            width=size["width"],
            height=size["height"],
            zoom=d["zoom"],
            projection=d["projection"],
            bounds=BoundingBox.from_any(bbox[BOUNDS_KEY], crs=crs),
        )
