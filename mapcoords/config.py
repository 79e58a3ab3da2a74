"""Configuration models and helpers for custom projection definitions."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

log = logging.getLogger(__name__)

PROJECTIONS_ENV_VAR = "MAPCOORDS_PROJECTIONS"


class ProjectionDefConfig(BaseModel):
    """A custom projection as configured by the application."""

    model_config = ConfigDict(populate_by_name=True)

    code: str = Field(..., description="CRS code the definition is registered under.")
    definition: str = Field(..., alias="def", description="proj4 style projection parameters.")
    extent: Tuple[float, float, float, float] = Field(
        ..., description="Valid extent in the projection's own coordinates."
    )
    world_extent: Optional[Tuple[float, float, float, float]] = Field(
        default=None, alias="worldExtent", description="Valid extent in EPSG:4326."
    )
    units: str = Field(default="m")

    @field_validator("extent", "world_extent")
    @classmethod
    def validate_extent(cls, value):
        """Reject extents with inverted corners."""
        if value is not None and (value[0] > value[2] or value[1] > value[3]):
            raise ValueError(f"extent corners are inverted: {value}")
        return value


class ProjectionsConfig(BaseModel):
    """Top-level projection configuration."""

    model_config = ConfigDict(populate_by_name=True)

    projection_defs: List[ProjectionDefConfig] = Field(
        default_factory=list, alias="projectionDefs"
    )


def load_projections_config(path: Optional[Union[Path, str]] = None) -> ProjectionsConfig:
    """
    Load the projection configuration from a JSON file.

    When ``path`` is omitted the ``MAPCOORDS_PROJECTIONS`` environment variable is used; when
    neither is set an empty configuration is returned. Keys other than ``projectionDefs``
    (the rest of an application configuration file) are ignored.
    """
    if path is None:
        path = os.environ.get(PROJECTIONS_ENV_VAR)
        if not path:
            return ProjectionsConfig()

    raw = json.loads(Path(path).read_text(encoding="utf-8"))
    config = ProjectionsConfig.model_validate(raw)
    log.debug("loaded %d projection definitions from %s", len(config.projection_defs), path)
    return config
