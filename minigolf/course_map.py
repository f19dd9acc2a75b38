"""
Tile grid the physics core queries for terrain and elevation.

World coordinates are isometric screen pixels: a tile is a 64x32 diamond and
the map is shifted so tile (0, 0) sits at the top centre of the layout.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np

from .terrain import TerrainClass

TILE_WIDTH = 64
TILE_HEIGHT = 32
MAP_WIDTH = 32
MAP_HEIGHT = 32
MAP_OFFSET_Y = 50

MIN_ELEVATION = 0
MAX_ELEVATION = 5


@dataclass(frozen=True)
class TileCoord:
    tile_x: int
    tile_y: int


@dataclass
class CourseMap:
    """Terrain and elevation layout of a course, indexed as tiles[tile_y][tile_x]."""
    width: int = MAP_WIDTH
    height: int = MAP_HEIGHT
    tiles: Optional[List[List[TerrainClass]]] = None
    elevations: Optional[List[List[int]]] = None

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"map size must be positive, got {self.width}x{self.height}")
        if self.tiles is None:
            self.tiles = [[TerrainClass.GRASS] * self.width for _ in range(self.height)]
        else:
            self.tiles = [[TerrainClass(t) for t in row] for row in self.tiles]
        if self.elevations is None:
            self.elevations = [[0] * self.width for _ in range(self.height)]
        if len(self.tiles) != self.height or any(len(row) != self.width for row in self.tiles):
            raise ValueError("tile rows do not match the map size")
        if len(self.elevations) != self.height or any(len(row) != self.width for row in self.elevations):
            raise ValueError("elevation rows do not match the map size")

    @classmethod
    def filled(cls, terrain: TerrainClass, width: int = MAP_WIDTH, height: int = MAP_HEIGHT) -> 'CourseMap':
        return cls(width, height, [[terrain] * width for _ in range(height)])

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[int]]) -> 'CourseMap':
        """Build a map from nested tile codes, e.g. a saved layout."""
        if not rows:
            raise ValueError("layout has no rows")
        return cls(len(rows[0]), len(rows), [list(row) for row in rows])

    @property
    def offset_x(self) -> float:
        return self.height * TILE_WIDTH / 2

    @property
    def offset_y(self) -> float:
        return MAP_OFFSET_Y

    def is_in_bounds(self, tile_x: int, tile_y: int) -> bool:
        return 0 <= tile_x < self.width and 0 <= tile_y < self.height

    def world_to_tile(self, world_x: float, world_y: float) -> Tuple[int, int]:
        adjusted_x = world_x - self.offset_x
        adjusted_y = world_y - self.offset_y
        tile_x = int(np.floor(adjusted_y / TILE_HEIGHT + adjusted_x / TILE_WIDTH))
        tile_y = int(np.floor(adjusted_y / TILE_HEIGHT - adjusted_x / TILE_WIDTH))
        return tile_x, tile_y

    def tile_to_world(self, tile_x: int, tile_y: int) -> Tuple[float, float]:
        """Top vertex of the tile diamond."""
        return (
            (tile_x - tile_y) * (TILE_WIDTH / 2) + self.offset_x,
            (tile_x + tile_y) * (TILE_HEIGHT / 2) + self.offset_y
        )

    def tile_center(self, tile_x: int, tile_y: int) -> Tuple[float, float]:
        x, y = self.tile_to_world(tile_x, tile_y)
        return x, y + TILE_HEIGHT / 2

    def terrain_class_at(self, tile_x: int, tile_y: int) -> Optional[TerrainClass]:
        """Terrain of a tile, or None when the tile is off the map."""
        if not self.is_in_bounds(tile_x, tile_y):
            return None
        return self.tiles[tile_y][tile_x]

    def set_terrain(self, tile_x: int, tile_y: int, terrain: TerrainClass):
        if self.is_in_bounds(tile_x, tile_y):
            self.tiles[tile_y][tile_x] = TerrainClass(terrain)

    def fill_rect(self, x0: int, y0: int, x1: int, y1: int, terrain: TerrainClass):
        """Paint the inclusive tile rectangle [x0, x1] x [y0, y1]."""
        for ty in range(max(0, y0), min(self.height - 1, y1) + 1):
            for tx in range(max(0, x0), min(self.width - 1, x1) + 1):
                self.tiles[ty][tx] = TerrainClass(terrain)

    # === Elevation ===

    def elevation_at(self, tile_x: int, tile_y: int) -> int:
        if not self.is_in_bounds(tile_x, tile_y):
            return 0
        return self.elevations[tile_y][tile_x]

    def set_elevation(self, tile_x: int, tile_y: int, elevation: int):
        if self.is_in_bounds(tile_x, tile_y):
            self.elevations[tile_y][tile_x] = int(np.clip(elevation, MIN_ELEVATION, MAX_ELEVATION))

    def slope_at(self, tile_x: int, tile_y: int) -> Tuple[float, float]:
        """
        World-space elevation gradient around a tile.

        Central differences in tile space, projected through the isometric
        transform (world x ~ tile_x - tile_y, world y ~ tile_x + tile_y).
        Positive components point uphill.
        """
        grad_x = (self.elevation_at(tile_x + 1, tile_y) - self.elevation_at(tile_x - 1, tile_y)) / 2
        grad_y = (self.elevation_at(tile_x, tile_y + 1) - self.elevation_at(tile_x, tile_y - 1)) / 2
        return grad_x - grad_y, (grad_x + grad_y) * 0.5
