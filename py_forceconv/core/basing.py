"""
Basing of converted formations.

Formations are placed in one of the destination provinces their source
location maps to. Navies need a port or open water: when none of the mapped
provinces has a naval base they are pushed out into an adjacent sea zone.
Air wings search outward from their army for the nearest owned air base.
Formations that cannot be placed go to the production queue.
"""

from abc import ABC, abstractmethod
from collections import deque
from typing import List, NamedTuple, Optional, Sequence

import numpy as np
import structlog

from .countries import SourceFormation
from .provinces import LocationMapping, Province, ProvinceMap

logger = structlog.get_logger()

NO_LOCATION = -1


class BasingResult(NamedTuple):
    """Where a formation ends up."""

    location: Optional[int]
    production_queue: bool
    province: Optional[Province] = None

    @classmethod
    def queued(cls) -> "BasingResult":
        return cls(location=None, production_queue=True)


class CandidateSelector(ABC):
    """Strategy choosing one province among equally valid candidates."""

    @abstractmethod
    def choose(self, candidates: Sequence[int]) -> int:
        pass


class RandomSelector(CandidateSelector):
    """Uniform random choice. Seed it for reproducible runs."""

    def __init__(self, seed: Optional[int] = None):
        self.rng = np.random.default_rng(seed)

    def choose(self, candidates: Sequence[int]) -> int:
        return candidates[int(self.rng.integers(len(candidates)))]


class FirstCandidateSelector(CandidateSelector):
    """Always the first candidate in mapping order."""

    def choose(self, candidates: Sequence[int]) -> int:
        return candidates[0]


def make_selector(strategy: str = "random", seed: Optional[int] = None) -> CandidateSelector:
    """Build a candidate selector by strategy name ("random" or "first")."""
    if strategy == "random":
        return RandomSelector(seed)
    if strategy == "first":
        return FirstCandidateSelector()
    raise ValueError(f"Unknown basing strategy: {strategy}")


class BasingResolver:
    """Chooses destination provinces for formations and air wings."""

    def __init__(
        self,
        province_map: ProvinceMap,
        location_mapping: LocationMapping,
        selector: Optional[CandidateSelector] = None,
    ):
        self.province_map = province_map
        self.location_mapping = location_mapping
        self.selector = selector or RandomSelector()

    def resolve(self, formation: SourceFormation) -> BasingResult:
        """Pick the base of a formation, or queue it when there is none."""
        candidates = self.location_mapping.candidates(formation.location)
        if not candidates:
            logger.warning(
                "Formation assigned to unmapped province, placing units in the production queue",
                formation=formation.name,
                location=formation.location,
            )
            return BasingResult.queued()

        if formation.navy and not formation.at_sea:
            first = self.province_map.get(candidates[0])
            if first is not None and first.is_land:
                candidates = self.port_location_candidates(candidates)
                if not candidates:
                    logger.warning(
                        "Navy has no port or adjacent sea province, placing units in the production queue",
                        formation=formation.name,
                        location=formation.location,
                    )
                    return BasingResult.queued()

        location = self.selector.choose(candidates)
        province = self.province_map.get(location)
        if province is None and not formation.navy:
            logger.warning(
                "Army mapped to a province that was not imported, placing units in the production queue",
                formation=formation.name,
                location=location,
            )
            return BasingResult.queued()
        return BasingResult(location=location, production_queue=False, province=province)

    def port_provinces(self, candidates: Sequence[int]) -> List[int]:
        """Candidates that are known provinces with a naval base."""
        ports = []
        for candidate in candidates:
            province = self.province_map.get(candidate)
            if province is not None and province.has_naval_base:
                ports.append(candidate)
        return ports

    def port_location_candidates(self, candidates: Sequence[int]) -> List[int]:
        """
        Ports among the candidates, falling back to adjacent open sea.

        An adjacency target without a province record is a sea zone outside
        the imported map.
        """
        ports = self.port_provinces(candidates)
        if ports:
            return ports

        sea_zones = []
        for candidate in candidates:
            for neighbor in self.province_map.neighbors(candidate):
                if not self.province_map.is_known(neighbor):
                    sea_zones.append(neighbor)
        return sea_zones

    def find_air_location(self, start: int, owner: str) -> int:
        """
        Breadth-first search for the nearest air base owned by ``owner``.

        Args:
            start: Province id to search from
            owner: Country tag that must own the air base

        Returns:
            Province id of the air base, or NO_LOCATION if the start
            province's component has none
        """
        queue = deque([start])
        visited = {start}
        while queue:
            province_id = queue.popleft()
            province = self.province_map.get(province_id)
            if province is not None and province.owner == owner and province.air_base > 0:
                return province_id

            for neighbor in self.province_map.neighbors(province_id):
                if neighbor not in visited:
                    visited.add(neighbor)
                    queue.append(neighbor)

        return NO_LOCATION
