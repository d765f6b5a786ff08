"""
Source-to-destination unit type mapping.

The mapping file holds one or more named rule sets. Each rule lists the source
unit type names it applies to and, per model tier, the destination unit types
they become. Repeating a destination name inside a rule weights it: a source
type mapped to ``[militia, militia, militia, infantry]`` converts three of
every four regiments to militia.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, List, NamedTuple, Optional, Tuple, Union

import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .exceptions import ConfigurationError
from .unit_types import UnitType, UnitTypeCatalog

logger = structlog.get_logger()

DEFAULT_UNIT_MAPPING_FILE = Path(__file__).resolve().parent.parent / "data" / "unit_mapping.json"
DEFAULT_RULE_SET = "default"
MODEL_TIERS = range(5)


class TypeMappingEntry(NamedTuple):
    """One weighted destination choice for a source unit type."""

    unit_type: UnitType
    model_tier: int


class MappingRule(BaseModel):
    """A single rule as written in the mapping file."""

    model_config = ConfigDict(extra="forbid")

    source: List[str] = Field(default_factory=list, description="Source unit type names")
    tier0: List[str] = Field(default_factory=list)
    tier1: List[str] = Field(default_factory=list)
    tier2: List[str] = Field(default_factory=list)
    tier3: List[str] = Field(default_factory=list)
    tier4: List[str] = Field(default_factory=list)

    def destinations(self) -> List[Tuple[str, int]]:
        """Destination names paired with their model tier, lowest tier first."""
        return [
            (name, tier)
            for tier in MODEL_TIERS
            for name in getattr(self, f"tier{tier}")
        ]


class UnitTypeMapping:
    """Resolves source unit type names to weighted destination entries."""

    def __init__(self, mappings: Optional[Dict[str, Tuple[TypeMappingEntry, ...]]] = None):
        self._mappings: Dict[str, Tuple[TypeMappingEntry, ...]] = dict(mappings or {})

    @classmethod
    def from_file(
        cls,
        catalog: UnitTypeCatalog,
        path: Union[str, Path, None] = None,
        mod: Optional[str] = None,
    ) -> "UnitTypeMapping":
        """
        Load the mapping table from a JSON rule set file.

        Args:
            catalog: Destination unit types the rules refer to
            path: Mapping file, defaults to the bundled unit_mapping.json
            mod: Name of a rule set to prefer over the default one

        Raises:
            ConfigurationError: If the file cannot be read or holds no rule sets
        """
        path = Path(path) if path else DEFAULT_UNIT_MAPPING_FILE
        try:
            with open(path, encoding="utf-8") as f:
                rule_sets = json.load(f)
        except (OSError, ValueError) as e:
            raise ConfigurationError(
                "Could not load unit mappings", {"path": str(path), "error": str(e)}
            ) from e

        if not isinstance(rule_sets, dict) or not rule_sets:
            raise ConfigurationError("No unit mapping definitions loaded", {"path": str(path)})

        rule_set_name = cls.select_rule_set(list(rule_sets), mod)
        logger.info("Using unit mapping rule set", path=str(path), rule_set=rule_set_name)
        return cls.from_rules(rule_sets[rule_set_name], catalog)

    @staticmethod
    def select_rule_set(names: List[str], mod: Optional[str] = None) -> str:
        """Pick the mod's rule set if present, else "default", else the first one."""
        if mod and mod in names:
            return mod
        if DEFAULT_RULE_SET in names:
            return DEFAULT_RULE_SET
        return names[0]

    @classmethod
    def from_rules(cls, rules: List[dict], catalog: UnitTypeCatalog) -> "UnitTypeMapping":
        """Build the table from the rules of a single rule set."""
        if not isinstance(rules, list):
            raise ConfigurationError("Unit mapping rule set must be a list of rules")

        merged: Dict[str, List[TypeMappingEntry]] = {}
        for raw_rule in rules:
            try:
                rule = MappingRule.model_validate(raw_rule)
            except ValidationError as e:
                raise ConfigurationError("Invalid unit mapping rule", {"error": str(e)}) from e

            if not rule.source:
                logger.error("Invalid unit mapping (no source)", rule=raw_rule)
                continue

            entries = []
            for name, tier in rule.destinations():
                unit_type = catalog.get(name)
                if unit_type is None:
                    raise ConfigurationError(
                        "Unit mapping refers to an unknown unit type", {"unit_type": name}
                    )
                entries.append(TypeMappingEntry(unit_type, tier))

            # Rules naming the same source type accumulate
            for source_type in rule.source:
                merged.setdefault(source_type, []).extend(entries)

        mappings = {
            source_type: tuple(sorted(entries, key=lambda entry: entry.model_tier))
            for source_type, entries in merged.items()
        }
        logger.debug("Unit mappings built", source_types=len(mappings))
        return cls(mappings)

    def resolve(self, source_type: str) -> Optional[Tuple[TypeMappingEntry, ...]]:
        """
        Look up the weighted destinations of a source unit type.

        Returns:
            None when the type is unmapped, an empty tuple when it is
            deliberately mapped to nothing
        """
        return self._mappings.get(source_type)

    def source_types(self) -> List[str]:
        return list(self._mappings)

    def __contains__(self, source_type: object) -> bool:
        return source_type in self._mappings

    def __len__(self) -> int:
        return len(self._mappings)
