"""Tests for force organization."""

import pytest

from py_forceconv.core.basing import BasingResolver, BasingResult, FirstCandidateSelector
from py_forceconv.core.countries import SourceFormation
from py_forceconv.core.force_groups import ForceGroup
from py_forceconv.core.organizer import (
    ForceOrganizer,
    ordinal_suffix,
    partition,
    take_first,
    take_up_to,
)
from py_forceconv.core.provinces import LocationMapping, Province, ProvinceMap
from py_forceconv.core.regiments import Regiment
from py_forceconv.core.unit_types import ForceType, UnitType


def regiment(type_name, name=None, force_type=ForceType.LAND):
    return Regiment(
        name=name or type_name,
        unit_type=UnitType(name=type_name, force_type=force_type),
    )


def names(group):
    return [r.name for r in group.regiments]


class TestOrdinalSuffix:
    """Test English ordinal suffixes."""

    @pytest.mark.parametrize("cardinal,suffix", [
        (1, "st"), (2, "nd"), (3, "rd"), (4, "th"), (10, "th"),
        (11, "th"), (12, "th"), (13, "th"), (21, "st"), (22, "nd"),
        (23, "rd"), (101, "st"), (111, "th"), (112, "th"),
    ])
    def test_suffix(self, cardinal, suffix):
        """Test ordinal suffix for a cardinal."""
        assert ordinal_suffix(cardinal) == suffix


class TestPartitionHelpers:
    """Test the pure partition helpers."""

    def setup_method(self):
        """Set up test fixtures."""
        self.regiments = (
            regiment("infantry_brigade", "A"),
            regiment("artillery_brigade", "B"),
            regiment("infantry_brigade", "C"),
        )

    def test_partition(self):
        """Test splitting into matching and remainder."""
        taken, remainder = partition(self.regiments, lambda r: r.type_name == "infantry_brigade")

        assert [r.name for r in taken] == ["A", "C"]
        assert [r.name for r in remainder] == ["B"]

    def test_take_first(self):
        """Test removing the first match without touching the input."""
        taken, remainder = take_first(self.regiments, frozenset({"infantry_brigade"}))

        assert taken.name == "A"
        assert [r.name for r in remainder] == ["B", "C"]
        assert len(self.regiments) == 3

    def test_take_first_no_match(self):
        """Test that no match leaves the remainder unchanged."""
        taken, remainder = take_first(self.regiments, frozenset({"cavalry_brigade"}))

        assert taken is None
        assert remainder == self.regiments

    def test_take_up_to(self):
        """Test taking at most a given count."""
        taken, remainder = take_up_to(self.regiments, frozenset({"infantry_brigade"}), 5)

        assert [r.name for r in taken] == ["A", "C"]
        assert [r.name for r in remainder] == ["B"]


class TestForceOrganizer:
    """Test ForceOrganizer passes."""

    def setup_method(self):
        """Set up test fixtures."""
        self.province_map = ProvinceMap(
            [
                Province(id=1, owner="GER"),
                Province(id=2, owner="GER", air_base=3),
                Province(id=3, owner="GER", air_base=8),
            ],
            {1: [2], 2: [1]},
        )
        self.resolver = BasingResolver(
            self.province_map, LocationMapping({10: [1]}), FirstCandidateSelector()
        )
        self.organizer = ForceOrganizer(self.resolver, "GER")
        self.army = SourceFormation(name="1st Army", location=10)
        self.basing = BasingResult(location=1, production_queue=False,
                                   province=self.province_map.get(1))

    def organize(self, regiments, basing=None, formation=None):
        return self.organizer.organize(formation or self.army, regiments, basing or self.basing)

    def test_navy_single_group(self):
        """Test that navies keep all regiments in one group."""
        fleet = SourceFormation(name="Home Fleet", navy=True, at_sea=True, location=10)
        ships = [regiment("destroyer", f"D{i}", ForceType.NAVY) for i in range(3)]

        group = self.organize(ships, BasingResult(location=100, production_queue=False),
                              formation=fleet)

        assert group.force_type == ForceType.NAVY
        assert group.name == "Home Fleet"
        assert group.location == 100
        assert group.at_sea
        assert names(group) == ["D0", "D1", "D2"]
        assert group.children == []

    def test_top_level_group(self):
        """Test that the root group carries the formation's name and basing."""
        group = self.organize([regiment("infantry_brigade")])

        assert group.name == "1st Army"
        assert group.force_type == ForceType.LAND
        assert group.location == 1
        assert not group.production_queue

    def test_worked_example_division(self):
        """Test 2 infantry + artillery + engineer forming one division."""
        group = self.organize([
            regiment("infantry_brigade", "I1"),
            regiment("infantry_brigade", "I2"),
            regiment("artillery_brigade", "A1"),
            regiment("engineer_brigade", "E1"),
        ])

        assert len(group.children) == 1
        assert names(group.children[0]) == ["I1", "I2", "A1", "E1"]
        assert self.organizer.leftover_count == 0

    def test_division_prefers_support_over_engineers(self):
        """Test that two support regiments leave engineers out."""
        group = self.organize([
            regiment("engineer_brigade", "E1"),
            regiment("infantry_brigade", "I1"),
            regiment("anti_tank_brigade", "T1"),
            regiment("anti_air_brigade", "AA1"),
            regiment("infantry_brigade", "I2"),
        ])

        assert names(group.children[0]) == ["I1", "I2", "T1", "AA1"]
        assert names(group.children[1]) == ["E1"]
        assert self.organizer.leftover_count == 1

    def test_multiple_divisions(self):
        """Test that infantry is split into pairs with their support."""
        group = self.organize(
            [regiment("infantry_brigade", f"I{i}") for i in range(5)]
            + [regiment("artillery_brigade", f"A{i}") for i in range(3)]
            + [regiment("engineer_brigade", "E0")]
        )

        assert [names(c) for c in group.children] == [
            ["I0", "I1", "A0", "A1"],
            ["I2", "I3", "A2", "E0"],
            ["I4"],
        ]

    def test_militia_forms_divisions(self):
        """Test that militia counts as division core."""
        group = self.organize([
            regiment("militia_brigade", "M1"),
            regiment("infantry_brigade", "I1"),
        ])

        assert [names(c) for c in group.children] == [["M1", "I1"]]

    def test_armored_group(self):
        """Test that armored and motorized regiments are grouped together."""
        group = self.organize([
            regiment("armor_brigade", "T1"),
            regiment("infantry_brigade", "I1"),
            regiment("motorized_brigade", "Mot1"),
            regiment("armored_car_brigade", "AC1"),
        ])

        assert [names(c) for c in group.children] == [["T1", "Mot1", "AC1"], ["I1"]]

    def test_specialist_group(self):
        """Test that specialists get their own group, separate from armor."""
        group = self.organize([
            regiment("marine_brigade", "Mar1"),
            regiment("light_armor_brigade", "LT1"),
            regiment("bergsjaeger_brigade", "Mtn1"),
            regiment("police_brigade", "Pol1"),
        ])

        assert [names(c) for c in group.children] == [["LT1"], ["Mar1", "Mtn1", "Pol1"]]

    def test_cavalry_pairs_with_engineers(self):
        """Test that cavalry pairs take up to two engineers."""
        group = self.organize([
            regiment("cavalry_brigade", "C1"),
            regiment("engineer_brigade", "E1"),
            regiment("cavalry_brigade", "C2"),
            regiment("engineer_brigade", "E2"),
            regiment("engineer_brigade", "E3"),
        ])

        assert [names(c) for c in group.children] == [["C1", "C2", "E1", "E2"], ["E3"]]

    def test_three_cavalry(self):
        """Test that an unpaired cavalry regiment ends up on its own."""
        group = self.organize([regiment("cavalry_brigade", f"C{i}") for i in range(3)])

        assert [names(c) for c in group.children] == [["C0", "C1"], ["C2"]]

    def test_leftovers_get_own_groups(self):
        """Test that unconsumed regiments each become a group."""
        group = self.organize([
            regiment("artillery_brigade", "A1"),
            regiment("garrison_brigade", "G1"),
        ])

        assert [names(c) for c in group.children] == [["A1"], ["G1"]]
        assert all(c.location == 1 for c in group.children)
        assert self.organizer.leftover_count == 2

    def test_no_regiment_lost(self):
        """Test that every regiment appears exactly once in the hierarchy."""
        regiments = (
            [regiment("infantry_brigade", f"I{i}") for i in range(3)]
            + [regiment("cavalry_brigade", f"C{i}") for i in range(3)]
            + [regiment("engineer_brigade", f"E{i}") for i in range(4)]
            + [regiment("armor_brigade", "T1"), regiment("police_brigade", "P1")]
            + [regiment("interceptor", "F1", ForceType.AIR)]
        )

        group = self.organize(regiments)

        assert sorted(r.name for r in group.iter_regiments()) == sorted(r.name for r in regiments)

    def test_air_force(self):
        """Test that air regiments form a numbered air force at the nearest air base."""
        group = self.organize([
            regiment("interceptor", "F1", ForceType.AIR),
            regiment("infantry_brigade", "I1"),
            regiment("cas", "F2", ForceType.AIR),
        ])

        wing = group.children[0]
        assert wing.force_type == ForceType.AIR
        assert wing.name == "1st Air Force"
        assert wing.location == 2
        assert names(wing) == ["F1", "F2"]
        assert self.province_map.get(2).required_air_base == 7

    def test_air_base_requirement_capped(self):
        """Test that the required air base never exceeds the maximum level."""
        self.organize(
            [regiment("interceptor", f"F{i}", ForceType.AIR) for i in range(6)]
        )

        assert self.province_map.get(2).required_air_base == 10

    def test_air_force_numbering(self):
        """Test that air forces are numbered per organizer."""
        for _ in range(3):
            group = self.organize([regiment("interceptor", "F1", ForceType.AIR)])

        assert group.children[0].name == "3rd Air Force"

    def test_no_air_force_without_air_units(self):
        """Test that no empty air force is created."""
        group = self.organize([regiment("infantry_brigade")])

        assert all(c.force_type == ForceType.LAND for c in group.children)
        assert self.organizer.air_force_index == 0

    def test_air_force_queued_without_air_base(self):
        """Test that an air force without a reachable air base is queued."""
        organizer = ForceOrganizer(self.resolver, "FRA")
        group = organizer.organize(
            self.army, [regiment("interceptor", "F1", ForceType.AIR)], self.basing
        )

        wing = group.children[0]
        assert wing.production_queue
        assert wing.location is None

    def test_queued_army(self):
        """Test that a queued army queues all of its groups."""
        group = self.organize(
            [
                regiment("interceptor", "F1", ForceType.AIR),
                regiment("infantry_brigade", "I1"),
            ],
            BasingResult.queued(),
        )

        assert group.production_queue
        assert group.location is None
        assert all(c.production_queue for c in group.children)
        assert self.province_map.get(2).required_air_base == 0


class TestForceGroup:
    """Test ForceGroup helpers."""

    def test_hierarchy_helpers(self):
        """Test emptiness, size and traversal."""
        army = ForceGroup(name="1st Army")
        assert army.is_empty()

        division = ForceGroup()
        division.add_regiment(regiment("infantry_brigade", "I1"))
        division.add_regiment(regiment("infantry_brigade", "I2"))
        army.add_child(division)

        assert not army.is_empty()
        assert army.size() == 0
        assert division.size() == 2
        assert [r.name for r in army.iter_regiments()] == ["I1", "I2"]
        assert len(list(army.iter_groups())) == 2

    def test_set_production_queue(self):
        """Test that queuing a group clears its location."""
        group = ForceGroup(location=5)
        group.set_production_queue()

        assert group.production_queue
        assert group.location is None

    def test_serialization(self):
        """Test ForceGroup serialization."""
        army = ForceGroup(name="1st Army", location=3)
        army.add_child(ForceGroup(regiments=[regiment("infantry_brigade", "I1")]))

        data = army.model_dump(mode="json")
        assert data["force_type"] == "land"
        assert data["children"][0]["regiments"][0]["unit_type"]["name"] == "infantry_brigade"
