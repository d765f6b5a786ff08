"""
Destination unit-type catalog.

Unit types are loaded once per run from a JSON document keyed by type name.
Each entry declares the force type of regiments built from it, the practical
(skill) category it trains and an optional list of country tags that are
exclusively allowed to field it.
"""

from __future__ import annotations

import json
from enum import Enum
from pathlib import Path
from typing import Dict, FrozenSet, Iterator, Optional, Union

import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .exceptions import ConfigurationError

logger = structlog.get_logger()

DEFAULT_UNIT_TYPES_FILE = Path(__file__).resolve().parent.parent / "data" / "unit_types.json"


class ForceType(str, Enum):
    """Domain a regiment or force group belongs to."""

    LAND = "land"
    NAVY = "navy"
    AIR = "air"


class UnitType(BaseModel):
    """A destination unit type."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Unit type identifier")
    force_type: ForceType = Field(default=ForceType.LAND, description="Domain of the unit")
    usable_by: FrozenSet[str] = Field(
        default_factory=frozenset,
        description="Country tags allowed to use this type (empty = anyone)",
    )
    practical_bonus: str = Field(default="", description="Practical category trained")
    practical_bonus_factor: float = Field(
        default=1.0, description="Multiplier applied to practical gains"
    )

    @property
    def is_exclusive(self) -> bool:
        return bool(self.usable_by)

    def is_usable_by(self, tag: str) -> bool:
        """Check whether the country with the given tag may field this type."""
        return not self.usable_by or tag in self.usable_by


class UnitTypeCatalog:
    """Lookup of destination unit types by name."""

    def __init__(self, unit_types: Optional[Dict[str, UnitType]] = None):
        self._types: Dict[str, UnitType] = dict(unit_types or {})

    @classmethod
    def from_definitions(cls, definitions: Dict[str, dict]) -> "UnitTypeCatalog":
        """Build a catalog from raw ``{name: attributes}`` definitions."""
        types = {}
        for name, attributes in definitions.items():
            try:
                types[name] = UnitType(name=name, **(attributes or {}))
            except ValidationError as e:
                raise ConfigurationError(
                    "Invalid unit type definition", {"unit_type": name, "error": str(e)}
                ) from e
        return cls(types)

    @classmethod
    def from_file(cls, path: Union[str, Path, None] = None) -> "UnitTypeCatalog":
        """
        Load the catalog from a JSON file.

        Args:
            path: Catalog file, defaults to the bundled unit_types.json

        Raises:
            ConfigurationError: If the file is missing, unreadable or empty
        """
        path = Path(path) if path else DEFAULT_UNIT_TYPES_FILE
        try:
            with open(path, encoding="utf-8") as f:
                definitions = json.load(f)
        except (OSError, ValueError) as e:
            raise ConfigurationError(
                "Could not load unit types", {"path": str(path), "error": str(e)}
            ) from e

        if not isinstance(definitions, dict) or not definitions:
            raise ConfigurationError("No unit types defined", {"path": str(path)})

        catalog = cls.from_definitions(definitions)
        logger.info("Unit types loaded", path=str(path), count=len(catalog))
        return catalog

    def get(self, name: str) -> Optional[UnitType]:
        return self._types.get(name)

    def __getitem__(self, name: str) -> UnitType:
        return self._types[name]

    def __contains__(self, name: object) -> bool:
        return name in self._types

    def __iter__(self) -> Iterator[UnitType]:
        return iter(self._types.values())

    def __len__(self) -> int:
        return len(self._types)
