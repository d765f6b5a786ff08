"""
Convert the armies and navies of a world snapshot.

Usage:
    py-forceconv world.json [-o converted.json] [--mod NAME] [--seed N]

Settings not given on the command line come from FORCECONV_* environment
variables or a .env file.
"""

import argparse
import json
import sys
from typing import List, Optional

import structlog

from .config import Settings
from .core.armies import ArmyConverter
from .core.basing import BasingResolver, make_selector
from .core.exceptions import ConfigurationError
from .core.unit_mapping import UnitTypeMapping
from .core.unit_types import UnitTypeCatalog
from .core.world import WorldSnapshot, load_world
from .utils.logging import configure_logging

logger = structlog.get_logger()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="py-forceconv",
        description="Convert source formations into destination force hierarchies",
    )
    parser.add_argument("world", help="World snapshot JSON file")
    parser.add_argument("-o", "--output", help="Write the result here instead of stdout")
    parser.add_argument("--mod", help="Prefer this unit mapping rule set")
    parser.add_argument("--mapping", help="Unit mapping rule set file")
    parser.add_argument("--unit-types", help="Unit type catalog file")
    parser.add_argument("--strategy", choices=["random", "first"], help="Basing candidate choice")
    parser.add_argument("--seed", type=int, help="Seed for random basing")
    parser.add_argument("--log-level", help="Logging level")
    return parser


def apply_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    """Command line arguments take precedence over environment settings."""
    overrides = {
        "mod": args.mod,
        "unit_mapping_file": args.mapping,
        "unit_types_file": args.unit_types,
        "basing_strategy": args.strategy,
        "basing_seed": args.seed,
        "log_level": args.log_level,
    }
    return settings.model_copy(update={k: v for k, v in overrides.items() if v is not None})


def convert_world(world: WorldSnapshot, settings: Settings) -> dict:
    """Run the force conversion over every country of the snapshot."""
    catalog = UnitTypeCatalog.from_file(settings.unit_types_file)
    mapping = UnitTypeMapping.from_file(catalog, settings.unit_mapping_file, settings.mod)
    province_map = world.province_map()
    resolver = BasingResolver(
        province_map,
        world.locations(),
        make_selector(settings.basing_strategy, settings.basing_seed),
    )
    converter = ArmyConverter(
        mapping,
        resolver,
        practicals_scale=settings.practicals_scale,
        undo_queued_practicals=settings.undo_queued_practicals,
    )
    reports = converter.convert_all(world.countries)

    return {
        "countries": [
            {
                "tag": country.tag,
                "armies": [army.model_dump(mode="json") for army in country.armies],
                "practicals": country.practicals,
            }
            for country in world.countries
        ],
        "required_air_bases": {
            str(p.id): p.required_air_base for p in province_map if p.required_air_base > 0
        },
        "reports": [report.model_dump() for report in reports],
    }


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = apply_overrides(Settings(), args)
    configure_logging(settings.log_level, settings.log_format)

    try:
        world = load_world(args.world)
        result = convert_world(world, settings)
    except ConfigurationError as e:
        logger.error("Conversion aborted", error=str(e))
        return 1

    text = json.dumps(result, indent=2)
    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(text)
        logger.info("Converted forces written", path=args.output)
    else:
        print(text)
    return 0


if __name__ == "__main__":
    sys.exit(main())
