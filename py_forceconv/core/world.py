"""JSON world snapshot handed over by the province and country import steps."""

import json
from pathlib import Path
from typing import Dict, List, Union

import structlog
from pydantic import BaseModel, Field, ValidationError

from .countries import DestinationCountry
from .exceptions import ConfigurationError
from .provinces import LocationMapping, Province, ProvinceMap

logger = structlog.get_logger()


class WorldSnapshot(BaseModel):
    """Everything the force engine reads from the rest of the conversion."""

    provinces: List[Province] = Field(default_factory=list)
    adjacency: Dict[int, List[int]] = Field(
        default_factory=dict, description="Province id to adjacent province ids"
    )
    location_mapping: Dict[int, List[int]] = Field(
        default_factory=dict, description="Source province id to destination candidates"
    )
    countries: List[DestinationCountry] = Field(default_factory=list)

    def province_map(self) -> ProvinceMap:
        return ProvinceMap(self.provinces, self.adjacency)

    def locations(self) -> LocationMapping:
        return LocationMapping(self.location_mapping)


def load_world(path: Union[str, Path]) -> WorldSnapshot:
    """
    Read a world snapshot from JSON.

    Raises:
        ConfigurationError: If the file cannot be read or is malformed
    """
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
        world = WorldSnapshot.model_validate(data)
    except (OSError, ValueError, ValidationError) as e:
        raise ConfigurationError(
            "Could not load world snapshot", {"path": str(path), "error": str(e)}
        ) from e

    logger.info(
        "World snapshot loaded",
        provinces=len(world.provinces),
        countries=len(world.countries),
    )
    return world
