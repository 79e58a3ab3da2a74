from __future__ import annotations

from typing import Any, Mapping, NamedTuple, Optional, Sequence, Tuple, Union

BBoxLike = Union[Sequence[float], Mapping[str, Any], "BoundingBox"]


class BoundingBox(NamedTuple):
    """
    An axis-aligned bounding box, optionally tagged with its coordinate reference system.

    Boxes built through ``from_corners`` or ``from_any`` are normalized so that
    ``minx <= maxx`` and ``miny <= maxy``; inputs with swapped corners are corrected.

    Attributes:
        minx: The western edge
        miny: The southern edge
        maxx: The eastern edge
        maxy: The northern edge
        crs: The CRS code of the box, if known

    Examples:
        >>> BoundingBox.from_corners((4, 4), (2, 2)).to_list()
        [2, 2, 4, 4]
    """

    minx: float
    miny: float
    maxx: float
    maxy: float
    crs: Optional[str] = None

    @classmethod
    def from_corners(
        cls,
        lower: Sequence[float],
        upper: Sequence[float],
        crs: Optional[str] = None,
    ) -> BoundingBox:
        return cls(
            minx=min(lower[0], upper[0]),
            miny=min(lower[1], upper[1]),
            maxx=max(lower[0], upper[0]),
            maxy=max(lower[1], upper[1]),
            crs=crs,
        )

    @classmethod
    def from_any(cls, bbox: BBoxLike, crs: Optional[str] = None) -> BoundingBox:
        """
        Build a box from a ``[minx, miny, maxx, maxy]`` sequence or a mapping with those keys.

        String values (as found in XML-derived records) are converted to floats.
        """
        if isinstance(bbox, BoundingBox):
            return bbox if crs is None else bbox._replace(crs=crs)
        if isinstance(bbox, Mapping):
            values = [bbox[k] for k in ("minx", "miny", "maxx", "maxy")]
            crs = crs or bbox.get("crs")
        else:
            values = list(bbox)[:4]
        minx, miny, maxx, maxy = (float(v) for v in values)
        return cls.from_corners((minx, miny), (maxx, maxy), crs=crs)

    @property
    def width(self) -> float:
        return self.maxx - self.minx

    @property
    def height(self) -> float:
        return self.maxy - self.miny

    @property
    def center(self) -> Tuple[float, float]:
        return (self.minx + self.maxx) / 2, (self.miny + self.maxy) / 2

    def corners(self) -> list:
        """The four corners, counter-clockwise from the lower-left one."""
        return [
            (self.minx, self.miny),
            (self.maxx, self.miny),
            (self.maxx, self.maxy),
            (self.minx, self.maxy),
        ]

    def to_list(self) -> list:
        return [self.minx, self.miny, self.maxx, self.maxy]

    def to_dict(self) -> dict:
        return {"minx": self.minx, "miny": self.miny, "maxx": self.maxx, "maxy": self.maxy}
