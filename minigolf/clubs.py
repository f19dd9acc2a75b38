"""Club presets and the player's base hit variance."""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import List, Mapping, Optional

from .terrain import TerrainClass


@dataclass(frozen=True)
class TerrainModifier:
    """Adjustment applied when the ball is struck from a given terrain."""
    speed_delta_min: float = 0.0  # fraction, e.g. -0.30 = up to 30% slower
    speed_delta_max: float = 0.0
    accuracy_penalty_degrees: float = 0.0
    spin_angle_delta: float = 0.0  # degrees


NO_MODIFIER = TerrainModifier()


@dataclass(frozen=True)
class Club:
    """A club preset."""
    id: str
    name: str
    min_power: float  # px/s
    max_power: float  # px/s
    loft_degrees: float
    base_spin_angle: float  # degrees of deflection per bounce
    tee_only: bool = False
    terrain_modifiers: Mapping[TerrainClass, Optional[TerrainModifier]] = field(
        default_factory=lambda: MappingProxyType({})
    )

    def __post_init__(self):
        if self.min_power < 0 or self.max_power < self.min_power:
            raise ValueError(
                f"club {self.id!r}: invalid power range [{self.min_power}, {self.max_power}]"
            )

    def modifier_for(self, terrain: Optional[TerrainClass]) -> TerrainModifier:
        """Modifier for striking from `terrain`; the zero modifier when none is defined."""
        if terrain is None:
            return NO_MODIFIER
        return self.terrain_modifiers.get(terrain) or NO_MODIFIER

    def effective_spin_angle(self, terrain: Optional[TerrainClass]) -> float:
        return max(0.0, self.base_spin_angle + self.modifier_for(terrain).spin_angle_delta)

    def power_fraction(self, power: float) -> float:
        """Where `power` sits in the club's range, 0..1."""
        span = self.max_power - self.min_power
        if span <= 0:
            return 1.0
        return min(1.0, max(0.0, (power - self.min_power) / span))


@dataclass(frozen=True)
class PlayerHitParams:
    """Player skill: base speed deviation (fractions) and direction error (+/- degrees)."""
    speed_delta_min: float = -0.10
    speed_delta_max: float = 0.01
    accuracy_degrees: float = 2.0


DEFAULT_HIT_PARAMS = PlayerHitParams()


def _modifiers(sand: TerrainModifier, rough: TerrainModifier) -> Mapping[TerrainClass, Optional[TerrainModifier]]:
    return MappingProxyType({TerrainClass.SAND: sand, TerrainClass.ROUGH: rough})


CLUBS: List[Club] = [
    Club(
        id="driver", name="Driver",
        min_power=200, max_power=600, loft_degrees=12, base_spin_angle=3,
        tee_only=True,
        terrain_modifiers=_modifiers(
            sand=TerrainModifier(-0.30, -0.10, 5.0, -2),
            rough=TerrainModifier(-0.15, -0.05, 2.0, -1),
        ),
    ),
    Club(
        id="wood", name="Wood",
        min_power=150, max_power=500, loft_degrees=20, base_spin_angle=5,
        terrain_modifiers=_modifiers(
            sand=TerrainModifier(-0.25, -0.08, 4.0, -3),
            rough=TerrainModifier(-0.10, -0.03, 1.5, -1),
        ),
    ),
    Club(
        id="iron", name="Iron",
        min_power=80, max_power=400, loft_degrees=35, base_spin_angle=8,
        terrain_modifiers=_modifiers(
            sand=TerrainModifier(-0.15, -0.05, 2.0, -2),
            rough=TerrainModifier(-0.05, -0.01, 0.5, 0),
        ),
    ),
    Club(
        id="sandwedge", name="Sand Wedge",
        min_power=40, max_power=300, loft_degrees=55, base_spin_angle=10,
        terrain_modifiers=_modifiers(
            sand=TerrainModifier(-0.02, 0.00, 0.5, 2),
            rough=TerrainModifier(-0.05, -0.01, 0.5, 0),
        ),
    ),
    Club(
        id="putter", name="Putter",
        min_power=10, max_power=200, loft_degrees=0, base_spin_angle=2,
        terrain_modifiers=_modifiers(
            sand=TerrainModifier(-0.20, -0.10, 3.0, -1),
            rough=TerrainModifier(-0.10, -0.05, 1.5, -1),
        ),
    ),
]

DEFAULT_CLUB_INDEX = 2  # Iron


def club_by_id(club_id: str) -> Club:
    for club in CLUBS:
        if club.id == club_id:
            return club
    raise ValueError(f"unknown club {club_id!r}")
