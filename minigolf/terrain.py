"""
Terrain categories and their ball-interaction coefficients.

The table is static: every terrain class the course map can report has exactly
one entry, so a lookup miss means the caller passed something that is not a
`TerrainClass` at all.
"""

from dataclasses import dataclass
from enum import IntEnum
from types import MappingProxyType
from typing import Mapping


class TerrainClass(IntEnum):
    """Tile terrain types. Values are the tile codes stored in course layouts."""
    GRASS = 0
    FAIRWAY = 1
    GREEN = 2
    SAND = 3
    WATER = 4
    ROUGH = 5
    TEE = 6


@dataclass(frozen=True)
class TerrainProperties:
    """How a terrain treats the ball."""
    rolling_friction: float  # velocity multiplier per physics frame (~60/s)
    bounce_factor: float  # share of vertical speed kept on a bounce (0 = absorbs)
    landing_speed_factor: float  # share of horizontal speed kept when flight ends
    can_place_ball: bool

    @property
    def absorbs_bounce(self) -> bool:
        return self.bounce_factor <= 0.0


# Lower friction = ball stops faster. 0.90 ** 60 is ~0.2% of the speed after 1s.
TERRAIN_PROPERTIES: Mapping[TerrainClass, TerrainProperties] = MappingProxyType({
    TerrainClass.GRASS: TerrainProperties(0.88, 0.55, 0.25, True),
    TerrainClass.FAIRWAY: TerrainProperties(0.91, 0.60, 0.35, True),
    TerrainClass.GREEN: TerrainProperties(0.94, 0.65, 0.40, True),
    TerrainClass.SAND: TerrainProperties(0.75, 0.0, 0.0, True),
    TerrainClass.WATER: TerrainProperties(0.0, 0.0, 0.0, False),
    TerrainClass.ROUGH: TerrainProperties(0.82, 0.40, 0.15, True),
    TerrainClass.TEE: TerrainProperties(0.91, 0.60, 0.35, True),
})

# Terrain used for positions off the map.
HAZARD_TERRAIN = TerrainClass.WATER


def properties_of(
        terrain: TerrainClass,
        table: Mapping[TerrainClass, TerrainProperties] = TERRAIN_PROPERTIES
) -> TerrainProperties:
    """
    Look up the coefficients for a terrain class.

    Raises ValueError for a value that is not a terrain class and KeyError when
    a custom table lacks the class.
    """
    return table[TerrainClass(terrain)]


def is_hazard_terrain(
        terrain: TerrainClass,
        table: Mapping[TerrainClass, TerrainProperties] = TERRAIN_PROPERTIES
) -> bool:
    return not properties_of(terrain, table).can_place_ball
