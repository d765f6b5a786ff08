"""
Regiment conversion.

Each source regiment is looked up in the unit type mapping and converted to at
most one destination regiment. Source types mapped to several destinations are
distributed round-robin: the n-th regiment of a type in a country gets entry
``n mod len(entries)``. Entries restricted to other countries are skipped.
"""

from collections import defaultdict
from typing import Dict, List, Optional, Sequence

import structlog
from pydantic import BaseModel, Field

from .unit_mapping import TypeMappingEntry, UnitTypeMapping
from .unit_types import ForceType, UnitType

logger = structlog.get_logger()


class Regiment(BaseModel):
    """A converted destination regiment."""

    name: str = Field(description="Name carried over from the source regiment")
    unit_type: UnitType = Field(description="Destination unit type")
    model_tier: int = Field(default=0, ge=0, le=4, description="Historical model tier")
    reserve: bool = Field(default=True, description="Regiment starts in reserve")

    @property
    def force_type(self) -> ForceType:
        return self.unit_type.force_type

    @property
    def type_name(self) -> str:
        return self.unit_type.name


class TypeCounters:
    """Round-robin position per source unit type, scoped to one country."""

    def __init__(self):
        self._counts: Dict[str, int] = defaultdict(int)

    def next(self, source_type: str) -> int:
        """Return the current count and advance it."""
        count = self._counts[source_type]
        self._counts[source_type] = count + 1
        return count

    def __getitem__(self, source_type: str) -> int:
        return self._counts[source_type]


class PracticalsAccumulator:
    """Practical (skill) points a country gains from converted regiments."""

    def __init__(self, initial: Optional[Dict[str, float]] = None):
        self._values: Dict[str, float] = defaultdict(float, initial or {})

    def add(self, category: str, amount: float) -> None:
        self._values[category] += amount

    def subtract(self, category: str, amount: float) -> None:
        self._values[category] -= amount

    def get(self, category: str) -> float:
        return self._values.get(category, 0.0)

    def as_dict(self) -> Dict[str, float]:
        return dict(self._values)


class ConversionContext:
    """Mutable per-country state shared by every formation of that country."""

    def __init__(self, tag: str, practicals_scale: float = 1.0):
        self.tag = tag
        self.practicals_scale = practicals_scale
        self.counters = TypeCounters()
        self.practicals = PracticalsAccumulator()
        self.dropped_unmapped = 0
        self.dropped_exclusive = 0

    def practical_gain(self, unit_type: UnitType) -> float:
        return self.practicals_scale * unit_type.practical_bonus_factor


class RegimentConverter:
    """Converts source regiments for one country."""

    def __init__(self, mapping: UnitTypeMapping, context: ConversionContext):
        self.mapping = mapping
        self.context = context

    def convert(self, name: str, source_type: str) -> Optional[Regiment]:
        """
        Convert a single source regiment.

        Args:
            name: Source regiment name
            source_type: Source unit type name

        Returns:
            The converted regiment, or None if it was dropped
        """
        entries = self.mapping.resolve(source_type)
        if entries is None:
            logger.debug(
                "Regiment has unmapped unit type, dropping",
                regiment=name,
                unit_type=source_type,
            )
            self.context.dropped_unmapped += 1
            return None
        if not entries:
            return None

        entry = self._select_entry(source_type, entries)
        if entry is None:
            logger.warning(
                "Regiment is mapped only to unit types exclusive to other countries, dropping",
                regiment=name,
                unit_type=source_type,
                country=self.context.tag,
            )
            self.context.dropped_exclusive += 1
            return None

        regiment = Regiment(name=name, unit_type=entry.unit_type, model_tier=entry.model_tier)
        self.context.practicals.add(
            entry.unit_type.practical_bonus, self.context.practical_gain(entry.unit_type)
        )
        return regiment

    def convert_all(self, source_regiments: Sequence) -> List[Regiment]:
        """Convert a formation's regiments, keeping their order."""
        converted = []
        for source in source_regiments:
            regiment = self.convert(source.name, source.type)
            if regiment is not None:
                converted.append(regiment)
        return converted

    def _select_entry(
        self, source_type: str, entries: Sequence[TypeMappingEntry]
    ) -> Optional[TypeMappingEntry]:
        """
        Pick the next usable entry for this country.

        Scans at most one full cycle starting at the round-robin position.
        Every skipped entry advances the counter as well, so later regiments
        keep the proportional distribution. Returns None when every entry is
        exclusive to other countries.
        """
        start = self.context.counters.next(source_type) % len(entries)
        for offset in range(len(entries)):
            entry = entries[(start + offset) % len(entries)]
            if entry.unit_type.is_usable_by(self.context.tag):
                return entry
            self.context.counters.next(source_type)
        return None
