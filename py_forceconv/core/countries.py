"""
Country-level models handed over by the country conversion step.

Source formations arrive as flat regiment lists. Converted force hierarchies
and practical gains are attached back onto the destination country record.
"""

from typing import Dict, List

from pydantic import BaseModel, Field

from .force_groups import ForceGroup


class SourceRegiment(BaseModel):
    """A regiment in the source save."""

    name: str = Field(description="Regiment name")
    type: str = Field(description="Source unit type name")


class SourceFormation(BaseModel):
    """An army or navy in the source save."""

    name: str = Field(description="Formation name")
    navy: bool = Field(default=False, description="Whether this is a navy")
    location: int = Field(description="Source province id the formation sits in")
    at_sea: bool = Field(default=False, description="Navy is in open water")
    regiments: List[SourceRegiment] = Field(default_factory=list)


class DestinationCountry(BaseModel):
    """Destination country record receiving converted forces."""

    tag: str = Field(description="Destination country tag")
    formations: List[SourceFormation] = Field(
        default_factory=list, description="Source formations to convert"
    )
    armies: List[ForceGroup] = Field(default_factory=list)
    practicals: Dict[str, float] = Field(default_factory=dict)

    def add_army(self, army: ForceGroup) -> None:
        self.armies.append(army)
