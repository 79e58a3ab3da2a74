from __future__ import annotations

from abc import ABCMeta, abstractmethod
from typing import Any, Dict, Optional, Set

from mapcoords.constructs.projection import ProjectionDefinition


class ProjectionRegistryInterface(metaclass=ABCMeta):
    """
    Abstract base class defining the interface for projection registries.

    Every function in mapcoords that needs projection math or projection metadata takes a
    registry as an argument rather than reading process-wide configuration. Implementations
    map CRS codes to ProjectionDefinition records.

    Subclasses must implement methods for:
    - Resolving a code (or alias, or URN) to a definition
    - Listing the codes they know
    - Looking up the extent of a projection
    - Registering new definitions
    """

    @abstractmethod
    def resolve(self, code: Optional[str]) -> Optional[ProjectionDefinition]:
        """
        Look up the definition registered for a code.

        Args:
            code: A CRS code, alias or OGC URN

        Returns:
            The definition, or None if the code is unknown. An unknown code is not an error.
        """

    @abstractmethod
    def list_available(self) -> Set[str]:
        """
        Get every code (including aliases) the registry can resolve.
        """

    @abstractmethod
    def get_extent_for_projection(self, code: str) -> Dict[str, Any]:
        """
        Get the extent of a projection as ``{"code": code, "extent": [minx, miny, maxx, maxy]}``.

        Falls back to a default whole-world extent when the projection has no known extent.
        """

    @abstractmethod
    def register(self, definition: ProjectionDefinition) -> None:
        """
        Add a definition to the registry, replacing any definition with the same code.
        """
