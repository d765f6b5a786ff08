"""
Force organization.

Builds the destination hierarchy for one converted formation. Navies become a
single fleet. Armies are split by successive passes over the remaining
regiments: air wings, armored units, specialists, infantry divisions with
support, cavalry divisions, and finally single-regiment groups for whatever is
left. Each pass takes regiments out of the remainder handed to the next one;
no regiment is ever dropped.
"""

from typing import Callable, FrozenSet, List, Optional, Sequence, Tuple

import structlog
from pydantic import BaseModel, Field

from .basing import NO_LOCATION, BasingResolver, BasingResult
from .countries import SourceFormation
from .force_groups import ForceGroup
from .regiments import Regiment
from .unit_types import ForceType

logger = structlog.get_logger()

Regiments = Tuple[Regiment, ...]


class OrganizerOptions(BaseModel):
    """Unit type groupings used to build divisions."""

    armored_types: FrozenSet[str] = Field(
        default=frozenset(
            {
                "light_armor_brigade",
                "armor_brigade",
                "armored_car_brigade",
                "tank_destroyer_brigade",
                "motorized_brigade",
            }
        )
    )
    specialist_types: FrozenSet[str] = Field(
        default=frozenset({"bergsjaeger_brigade", "marine_brigade", "police_brigade"})
    )
    line_types: FrozenSet[str] = Field(
        default=frozenset({"infantry_brigade", "militia_brigade"}),
        description="Types forming the core of a standard division",
    )
    support_types: FrozenSet[str] = Field(
        default=frozenset({"anti_air_brigade", "anti_tank_brigade", "artillery_brigade"})
    )
    engineer_types: FrozenSet[str] = Field(default=frozenset({"engineer_brigade"}))
    cavalry_types: FrozenSet[str] = Field(default=frozenset({"cavalry_brigade"}))
    support_slots: int = Field(default=2, description="Support regiments per division")
    max_air_base: int = Field(default=10, description="Highest air base level")
    air_base_per_wing: int = Field(default=2, description="Air base levels per air regiment")


def ordinal_suffix(cardinal: int) -> str:
    """English ordinal suffix: 1st, 2nd, 3rd, 4th, 11th, 12th, 13th, 21st..."""
    if cardinal % 100 - cardinal % 10 == 10:
        return "th"
    return {1: "st", 2: "nd", 3: "rd"}.get(cardinal % 10, "th")


def partition(
    regiments: Regiments, predicate: Callable[[Regiment], bool]
) -> Tuple[Regiments, Regiments]:
    """Split regiments into (matching, remainder), both in input order."""
    taken = tuple(r for r in regiments if predicate(r))
    remainder = tuple(r for r in regiments if not predicate(r))
    return taken, remainder


def take_first(
    regiments: Regiments, type_names: FrozenSet[str]
) -> Tuple[Optional[Regiment], Regiments]:
    """Remove the first regiment of one of the given types."""
    for index, regiment in enumerate(regiments):
        if regiment.type_name in type_names:
            return regiment, regiments[:index] + regiments[index + 1:]
    return None, regiments


def take_up_to(
    regiments: Regiments, type_names: FrozenSet[str], count: int
) -> Tuple[List[Regiment], Regiments]:
    """Remove up to ``count`` regiments of the given types, first come first served."""
    taken = []
    while len(taken) < count:
        regiment, regiments = take_first(regiments, type_names)
        if regiment is None:
            break
        taken.append(regiment)
    return taken, regiments


class ForceOrganizer:
    """Organizes the converted regiments of one country's formations."""

    def __init__(
        self,
        resolver: BasingResolver,
        tag: str,
        options: Optional[OrganizerOptions] = None,
    ):
        self.resolver = resolver
        self.tag = tag
        self.options = options or OrganizerOptions()
        self.air_force_index = 0
        self.leftover_count = 0

    def organize(
        self,
        formation: SourceFormation,
        regiments: Sequence[Regiment],
        basing: BasingResult,
    ) -> ForceGroup:
        """
        Build the force hierarchy of one formation.

        Args:
            formation: Source formation the regiments came from
            regiments: Converted regiments of the formation
            basing: Result of basing the formation

        Returns:
            Top-level group named after the source formation
        """
        army = ForceGroup(
            force_type=ForceType.NAVY if formation.navy else ForceType.LAND,
            name=formation.name,
            location=basing.location,
            production_queue=basing.production_queue,
            at_sea=formation.at_sea if formation.navy else False,
        )

        if formation.navy:
            for regiment in regiments:
                army.add_regiment(regiment)
            return army

        remaining: Regiments = tuple(regiments)
        passes = (
            self._air_pass,
            self._armored_pass,
            self._specialist_pass,
            self._division_pass,
            self._cavalry_pass,
        )
        for grouping_pass in passes:
            groups, remaining = grouping_pass(remaining, basing)
            for group in groups:
                army.add_child(group)

        if remaining:
            logger.warning(
                "Leftover regiments in army, likely too many support units",
                country=self.tag,
                army=formation.name,
                count=len(remaining),
            )
            self.leftover_count += len(remaining)
            for regiment in remaining:
                army.add_child(self._land_group(basing, [regiment]))

        return army

    def _land_group(self, basing: BasingResult, regiments: Sequence[Regiment] = ()) -> ForceGroup:
        return ForceGroup(
            force_type=ForceType.LAND,
            location=basing.location,
            production_queue=basing.production_queue,
            regiments=list(regiments),
        )

    def _air_pass(self, remaining: Regiments, basing: BasingResult):
        air, remaining = partition(remaining, lambda r: r.force_type == ForceType.AIR)
        if not air:
            return [], remaining

        self.air_force_index += 1
        wing = ForceGroup(
            force_type=ForceType.AIR,
            name=f"{self.air_force_index}{ordinal_suffix(self.air_force_index)} Air Force",
            regiments=list(air),
        )

        air_location = NO_LOCATION
        if not basing.production_queue and basing.province is not None:
            air_location = self.resolver.find_air_location(basing.province.id, self.tag)

        air_province = self.resolver.province_map.get(air_location)
        if air_province is None:
            wing.set_production_queue()
        else:
            wing.location = air_location
            air_province.require_air_base(
                min(
                    self.options.max_air_base,
                    air_province.air_base + wing.size() * self.options.air_base_per_wing,
                )
            )
        return [wing], remaining

    def _armored_pass(self, remaining: Regiments, basing: BasingResult):
        armored, remaining = partition(
            remaining, lambda r: r.type_name in self.options.armored_types
        )
        return ([self._land_group(basing, armored)] if armored else []), remaining

    def _specialist_pass(self, remaining: Regiments, basing: BasingResult):
        specialists, remaining = partition(
            remaining, lambda r: r.type_name in self.options.specialist_types
        )
        return ([self._land_group(basing, specialists)] if specialists else []), remaining

    def _division_pass(self, remaining: Regiments, basing: BasingResult):
        options = self.options
        divisions = []
        while True:
            line, remaining = take_up_to(remaining, options.line_types, 2)
            if not line:
                break
            support, remaining = take_up_to(remaining, options.support_types, options.support_slots)
            engineers, remaining = take_up_to(
                remaining, options.engineer_types, options.support_slots - len(support)
            )
            divisions.append(self._land_group(basing, line + support + engineers))
        return divisions, remaining

    def _cavalry_pass(self, remaining: Regiments, basing: BasingResult):
        options = self.options
        divisions = []
        while True:
            cavalry, remaining = take_up_to(remaining, options.cavalry_types, 2)
            if not cavalry:
                break
            if len(cavalry) < 2:
                logger.warning(
                    "Cavalry regiment without a partner, leaving it on its own",
                    country=self.tag,
                    regiment=cavalry[0].name,
                )
                divisions.append(self._land_group(basing, cavalry))
                break
            engineers, remaining = take_up_to(remaining, options.engineer_types, 2)
            divisions.append(self._land_group(basing, cavalry + engineers))
        return divisions, remaining
