from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any, Dict, Iterable, List, Optional, Set

from pyproj import Transformer

from mapcoords.config import ProjectionsConfig
from mapcoords.constructs.projection import ProjectionDefinition
from mapcoords.projections.registry_interface import ProjectionRegistryInterface
from mapcoords.utils.crs import (
    DEFAULT_EXTENT,
    LATLON_ALIASES,
    LATLON_CRS,
    LATLON_EXTENT,
    LATLON_PROJ4,
    NAD83_PROJ4,
    XY_ALIASES,
    XY_CRS,
    XY_EXTENT,
    XY_PROJ4,
    extract_crs_from_urn,
)

log = logging.getLogger(__name__)

STATIC_DEFINITIONS = (
    ProjectionDefinition(
        code=LATLON_CRS,
        proj4=LATLON_PROJ4,
        units="degrees",
        extent=LATLON_EXTENT,
        world_extent=LATLON_EXTENT,
    ),
    ProjectionDefinition(code="EPSG:4269", proj4=NAD83_PROJ4, units="degrees"),
    ProjectionDefinition(
        code=XY_CRS,
        proj4=XY_PROJ4,
        units="m",
        extent=XY_EXTENT,
        world_extent=LATLON_EXTENT,
    ),
)

STATIC_ALIASES = {
    **{alias: LATLON_CRS for alias in LATLON_ALIASES},
    **{alias: XY_CRS for alias in XY_ALIASES},
}

# Built-in entries reported by get_projections, after any custom ones
_BUILTIN_EXTENTS = (XY_CRS, LATLON_CRS)


@lru_cache(maxsize=128)
def _transformer(source_proj4: str, dest_proj4: str) -> Transformer:
    return Transformer.from_crs(
        ProjectionDefinition("", source_proj4).crs,
        ProjectionDefinition("", dest_proj4).crs,
        always_xy=True,
    )


class ProjectionRegistry(ProjectionRegistryInterface):
    """
    A registry of projection definitions backed by pyproj.

    A new registry always knows EPSG:4326, EPSG:4269 and EPSG:3857, plus the usual aliases
    (EPSG:900913 and friends for Web Mercator, the WGS84/CRS84 spellings for EPSG:4326).
    Custom definitions are added with ``register`` or from configuration with
    ``from_config``.

    Registration is not designed for concurrent writers: callers mutating a registry from
    several threads must serialize the calls themselves. Reads never mutate.

    Args:
        definitions: Extra definitions registered on top of the built-in ones

    Examples:
        >>> registry = ProjectionRegistry()
        >>> registry.resolve("EPSG:900913").code
        'EPSG:3857'
        >>> registry.resolve("EPSG:3004") is None
        True
        >>> registry.register(ProjectionDefinition(
        ...     "EPSG:3004",
        ...     "+proj=tmerc +lat_0=0 +lon_0=15 +k=0.9996 +x_0=2520000 +y_0=0 +ellps=intl +units=m +no_defs",
        ... ))
        >>> registry.resolve("EPSG:3004").code
        'EPSG:3004'
    """

    def __init__(self, definitions: Optional[Iterable[ProjectionDefinition]] = None):
        self._definitions: Dict[str, ProjectionDefinition] = {
            d.code: d for d in STATIC_DEFINITIONS
        }
        self._aliases: Dict[str, str] = dict(STATIC_ALIASES)
        self._custom: List[str] = []

        for definition in definitions or []:
            self.register(definition)

    def __contains__(self, code: object) -> bool:
        return isinstance(code, str) and self.resolve(code) is not None

    @classmethod
    def from_config(cls, config: ProjectionsConfig) -> ProjectionRegistry:
        """
        Build a registry holding the built-in definitions plus every configured one.
        """
        definitions = [
            ProjectionDefinition(
                code=p.code,
                proj4=p.definition,
                units=p.units,
                extent=tuple(p.extent),
                world_extent=tuple(p.world_extent) if p.world_extent else None,
            )
            for p in config.projection_defs
        ]
        return cls(definitions)

    def _canonical_code(self, code: str) -> Optional[str]:
        if code.lower().startswith("urn:"):
            extracted = extract_crs_from_urn(code)
            if extracted is None:
                return None
            code = extracted
        if code in self._definitions:
            return code
        return self._aliases.get(code)

    def resolve(self, code: Optional[str]) -> Optional[ProjectionDefinition]:
        if not code or not isinstance(code, str):
            return None
        canonical = self._canonical_code(code)
        if canonical is None:
            log.debug("no projection registered for %s", code)
            return None
        return self._definitions.get(canonical)

    def list_available(self) -> Set[str]:
        return set(self._definitions) | set(self._aliases)

    def register(self, definition: ProjectionDefinition) -> None:
        # fail before touching the registry if pyproj cannot read the definition
        definition.crs
        self._aliases.pop(definition.code, None)
        self._definitions[definition.code] = definition
        if definition.code not in self._custom:
            self._custom.append(definition.code)
        log.debug("registered projection %s", definition.code)

    def remove(self, code: str) -> None:
        """
        Remove a custom definition. Built-in definitions cannot be removed.

        Raises:
            KeyError: If no custom definition is registered under the code
        """
        if code not in self._custom:
            raise KeyError(f"no custom projection registered as {code}")
        self._custom.remove(code)
        del self._definitions[code]
        builtin = {d.code: d for d in STATIC_DEFINITIONS}
        if code in builtin:
            self._definitions[code] = builtin[code]
        elif code in STATIC_ALIASES:
            self._aliases[code] = STATIC_ALIASES[code]

    def get_projections(self) -> List[Dict[str, Any]]:
        """
        Get ``{"code", "extent"}`` entries for every projection with a known extent.

        Custom definitions come first, in registration order, followed by the built-in
        EPSG:3857 and EPSG:4326 entries.
        """
        projections = []
        for code in self._custom:
            definition = self._definitions[code]
            if definition.extent is not None:
                projections.append({"code": code, "extent": list(definition.extent)})
        for code in _BUILTIN_EXTENTS:
            if code not in self._custom:
                projections.append(
                    {"code": code, "extent": list(self._definitions[code].extent)}
                )
        return projections

    def get_extent_for_projection(self, code: str) -> Dict[str, Any]:
        for projection in self.get_projections():
            if projection["code"] == code:
                return projection
        return {"code": code, "extent": list(DEFAULT_EXTENT)}

    def transformer(self, source: str, dest: str) -> Optional[Transformer]:
        return get_transformer(self, source, dest)


def get_registry(
    registry: Optional[ProjectionRegistryInterface] = None,
) -> ProjectionRegistryInterface:
    """
    Return the given registry, or a new registry holding only the built-in projections.
    """
    return registry if registry is not None else ProjectionRegistry()


def determine_crs(crs: Any, registry: Optional[ProjectionRegistryInterface] = None) -> Any:
    """
    Resolve a CRS given as a string; return anything else unchanged.

    Returns:
        The ProjectionDefinition for a known code, None for an unknown one, or the
        argument itself when it is not a string
    """
    if isinstance(crs, str):
        return get_registry(registry).resolve(crs)
    return crs


def get_transformer(
    registry: ProjectionRegistryInterface, source: str, dest: str
) -> Optional[Transformer]:
    """
    Get a pyproj Transformer (x/y axis order) between two codes known to a registry.

    Transformers are cached on the projection parameters, so registries holding the same
    definitions share them.

    Returns:
        The transformer, or None if either code cannot be resolved
    """
    source_def = registry.resolve(source)
    dest_def = registry.resolve(dest)
    if source_def is None or dest_def is None:
        return None
    return _transformer(source_def.proj4, dest_def.proj4)
