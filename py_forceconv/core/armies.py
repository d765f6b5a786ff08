"""
Country-level army conversion.

Runs regiment conversion, basing and organization for every formation of a
country, then attaches the resulting hierarchies and practical gains to the
destination country record. All mutable conversion state (round-robin
counters, practicals, air force numbering) lives for one country only.
"""

from typing import Iterable, List, Optional

import structlog
from pydantic import BaseModel, Field

from .basing import BasingResolver
from .countries import DestinationCountry
from .force_groups import ForceGroup
from .organizer import ForceOrganizer, OrganizerOptions
from .regiments import ConversionContext, RegimentConverter
from .unit_mapping import UnitTypeMapping

logger = structlog.get_logger()


class CountryConversionReport(BaseModel):
    """Summary of one country's army conversion."""

    tag: str
    formations: int = 0
    regiments_converted: int = 0
    dropped_unmapped: int = 0
    dropped_exclusive: int = 0
    production_queue_formations: int = 0
    leftover_regiments: int = 0
    practicals: dict = Field(default_factory=dict)


class ArmyConverter:
    """Converts the formations of destination countries."""

    def __init__(
        self,
        mapping: UnitTypeMapping,
        resolver: BasingResolver,
        practicals_scale: float = 1.0,
        undo_queued_practicals: bool = False,
        options: Optional[OrganizerOptions] = None,
    ):
        self.mapping = mapping
        self.resolver = resolver
        self.practicals_scale = practicals_scale
        self.undo_queued_practicals = undo_queued_practicals
        self.options = options or OrganizerOptions()

    def convert_country(self, country: DestinationCountry) -> CountryConversionReport:
        """Convert every formation of a country and attach the results to it."""
        context = ConversionContext(country.tag, self.practicals_scale)
        converter = RegimentConverter(self.mapping, context)
        organizer = ForceOrganizer(self.resolver, country.tag, self.options)
        report = CountryConversionReport(tag=country.tag)

        for formation in country.formations:
            regiments = converter.convert_all(formation.regiments)
            basing = self.resolver.resolve(formation)
            army = organizer.organize(formation, regiments, basing)

            report.formations += 1
            report.regiments_converted += len(regiments)
            if army.production_queue:
                report.production_queue_formations += 1
            if not army.is_empty():
                country.add_army(army)

        if self.undo_queued_practicals:
            self._undo_queued_practicals(country.armies, context)

        for category, value in context.practicals.as_dict().items():
            country.practicals[category] = country.practicals.get(category, 0.0) + value

        report.dropped_unmapped = context.dropped_unmapped
        report.dropped_exclusive = context.dropped_exclusive
        report.leftover_regiments = organizer.leftover_count
        report.practicals = context.practicals.as_dict()
        logger.info("Country armies converted", **report.model_dump())
        return report

    def convert_all(self, countries: Iterable[DestinationCountry]) -> List[CountryConversionReport]:
        return [self.convert_country(country) for country in countries]

    def _undo_queued_practicals(self, armies: List[ForceGroup], context: ConversionContext) -> None:
        # Queued units award their practicals once they are built
        for army in armies:
            for group in army.iter_groups():
                if not group.production_queue:
                    continue
                for regiment in group.regiments:
                    context.practicals.subtract(
                        regiment.unit_type.practical_bonus,
                        context.practical_gain(regiment.unit_type),
                    )
