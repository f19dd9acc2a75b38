"""Hazard and hole-sink classification of ball positions."""

from typing import Mapping, Tuple

import numpy as np

from .course_map import CourseMap
from .terrain import TERRAIN_PROPERTIES, TerrainClass, TerrainProperties, is_hazard_terrain


class HazardDetector:
    """Classifies world positions against the course map and a terrain table."""

    def __init__(
            self,
            course_map: CourseMap,
            terrain_table: Mapping[TerrainClass, TerrainProperties] = TERRAIN_PROPERTIES
    ):
        self.course_map = course_map
        self.terrain_table = terrain_table

    def check_hazard(self, x: float, y: float) -> bool:
        """True when the position is off the map or on terrain the ball cannot rest on."""
        tile_x, tile_y = self.course_map.world_to_tile(x, y)
        terrain = self.course_map.terrain_class_at(tile_x, tile_y)
        if terrain is None:
            return True
        return is_hazard_terrain(terrain, self.terrain_table)

    def is_on(self, x: float, y: float, terrain: TerrainClass) -> bool:
        tile_x, tile_y = self.course_map.world_to_tile(x, y)
        return self.course_map.terrain_class_at(tile_x, tile_y) == terrain

    @staticmethod
    def check_sink(
            position: Tuple[float, float],
            flag_position: Tuple[float, float],
            sink_radius: float
    ) -> bool:
        """True when the ball rests strictly inside the sink radius of the flag."""
        dx = position[0] - flag_position[0]
        dy = position[1] - flag_position[1]
        return bool(np.sqrt(dx ** 2 + dy ** 2) < sink_radius)
