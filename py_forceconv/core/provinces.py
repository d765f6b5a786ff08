"""
Destination provinces and the province adjacency graph.

Province records are produced by the province import step; the force engine
only reads ownership and base levels and raises base requirements. The
adjacency graph may reference province ids that have no province record: those
are sea zones outside the imported map.
"""

from typing import Dict, Iterable, Iterator, List, Optional

from pydantic import BaseModel, Field


class Province(BaseModel):
    """A destination province as seen by the force engine."""

    id: int = Field(description="Destination province id")
    owner: Optional[str] = Field(default=None, description="Owner country tag")
    is_land: bool = Field(default=True, description="Whether this is a land province")
    naval_base: int = Field(default=0, description="Naval base level")
    air_base: int = Field(default=0, description="Air base level")
    required_naval_base: int = Field(default=0, description="Naval base level units need")
    required_air_base: int = Field(default=0, description="Air base level units need")

    @property
    def has_naval_base(self) -> bool:
        return self.naval_base > 0

    def require_air_base(self, level: int) -> None:
        """Raise the required air base level, never lowering it."""
        self.required_air_base = max(self.required_air_base, level)

    def require_naval_base(self, level: int) -> None:
        self.required_naval_base = max(self.required_naval_base, level)


class ProvinceMap:
    """Province records plus the adjacency graph between province ids."""

    def __init__(
        self,
        provinces: Iterable[Province] = (),
        adjacency: Optional[Dict[int, List[int]]] = None,
    ):
        self.provinces: Dict[int, Province] = {p.id: p for p in provinces}
        self.adjacency: Dict[int, List[int]] = {
            int(k): [int(to) for to in v] for k, v in (adjacency or {}).items()
        }

    def get(self, province_id: Optional[int]) -> Optional[Province]:
        if province_id is None:
            return None
        return self.provinces.get(province_id)

    def is_known(self, province_id: int) -> bool:
        """Whether the id belongs to an imported province rather than open sea."""
        return province_id in self.provinces

    def neighbors(self, province_id: int) -> List[int]:
        """Adjacent ids; an id without adjacency data has no neighbours."""
        return self.adjacency.get(province_id, [])

    def __iter__(self) -> Iterator[Province]:
        return iter(self.provinces.values())

    def __len__(self) -> int:
        return len(self.provinces)


class LocationMapping:
    """Maps a source location id to its destination province candidates."""

    def __init__(self, mapping: Optional[Dict[int, List[int]]] = None):
        self._mapping: Dict[int, List[int]] = {
            int(k): [int(p) for p in v] for k, v in (mapping or {}).items()
        }

    def candidates(self, source_location: int) -> List[int]:
        return list(self._mapping.get(source_location, []))
