"""Hierarchical force groups: armies, divisions, air forces and fleets."""

from typing import Iterator, List, Optional

from pydantic import BaseModel, Field

from .regiments import Regiment
from .unit_types import ForceType


class ForceGroup(BaseModel):
    """
    A node of a converted force hierarchy.

    A group either holds regiments directly (divisions, air wings, fleets) or
    child groups (the army built from one source formation). Groups flagged
    ``production_queue`` have no field location and are emitted as build
    queue entries instead.
    """

    force_type: ForceType = Field(default=ForceType.LAND)
    name: str = Field(default="")
    location: Optional[int] = Field(default=None, description="Destination province id")
    production_queue: bool = Field(default=False)
    at_sea: bool = Field(default=False, description="Navy starts in open water")
    regiments: List[Regiment] = Field(default_factory=list)
    children: List["ForceGroup"] = Field(default_factory=list)

    def add_regiment(self, regiment: Regiment) -> None:
        self.regiments.append(regiment)

    def add_child(self, child: "ForceGroup") -> None:
        self.children.append(child)

    def set_production_queue(self) -> None:
        self.production_queue = True
        self.location = None

    def is_empty(self) -> bool:
        return not self.regiments and not self.children

    def size(self) -> int:
        """Number of regiments held directly by this group."""
        return len(self.regiments)

    def iter_regiments(self) -> Iterator[Regiment]:
        """All regiments in this group and its descendants, depth first."""
        yield from self.regiments
        for child in self.children:
            yield from child.iter_regiments()

    def iter_groups(self) -> Iterator["ForceGroup"]:
        yield self
        for child in self.children:
            yield from child.iter_groups()
