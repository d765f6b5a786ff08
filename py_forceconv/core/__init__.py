"""
Military unit conversion and force organization.
"""

from .unit_types import ForceType, UnitType, UnitTypeCatalog
from .unit_mapping import TypeMappingEntry, UnitTypeMapping
from .regiments import Regiment, RegimentConverter, ConversionContext
from .force_groups import ForceGroup
from .basing import BasingResolver, BasingResult, NO_LOCATION, make_selector
from .organizer import ForceOrganizer, OrganizerOptions
from .armies import ArmyConverter, CountryConversionReport

__all__ = ['ForceType', 'UnitType', 'UnitTypeCatalog', 'TypeMappingEntry', 'UnitTypeMapping',
           'Regiment', 'RegimentConverter', 'ConversionContext', 'ForceGroup',
           'BasingResolver', 'BasingResult', 'NO_LOCATION', 'make_selector',
           'ForceOrganizer', 'OrganizerOptions', 'ArmyConverter', 'CountryConversionReport']
