import pytest

from minigolf.course_map import CourseMap, MAX_ELEVATION, TILE_WIDTH
from minigolf.hazards import HazardDetector
from minigolf.terrain import TerrainClass


class TestCourseMap:
    """Tile grid and isometric projection"""

    @pytest.mark.parametrize("tile", [(0, 0), (16, 16), (3, 27), (31, 31)])
    def test_tile_center_maps_back_to_its_tile(self, fairway_map, tile):
        assert fairway_map.world_to_tile(*fairway_map.tile_center(*tile)) == tile

    def test_moving_east_crosses_tiles_diagonally(self, fairway_map):
        x, y = fairway_map.tile_center(16, 16)
        assert fairway_map.world_to_tile(x + TILE_WIDTH, y) == (17, 15)

    def test_out_of_bounds_has_no_terrain(self, fairway_map):
        assert not fairway_map.is_in_bounds(-1, 0)
        assert fairway_map.terrain_class_at(32, 5) is None
        assert fairway_map.terrain_class_at(5, 5) == TerrainClass.FAIRWAY

    def test_default_map_is_grass(self):
        assert CourseMap().terrain_class_at(0, 0) == TerrainClass.GRASS

    def test_from_rows(self):
        course_map = CourseMap.from_rows([[1, 2, 3], [4, 5, 6]])
        assert (course_map.width, course_map.height) == (3, 2)
        assert course_map.terrain_class_at(1, 1) == TerrainClass.ROUGH

    def test_from_rows_rejects_bad_codes_and_ragged_rows(self):
        with pytest.raises(ValueError):
            CourseMap.from_rows([[1, 9]])
        with pytest.raises(ValueError):
            CourseMap.from_rows([[1, 1], [1]])
        with pytest.raises(ValueError):
            CourseMap.from_rows([])

    def test_fill_rect_clips_to_map(self, fairway_map):
        fairway_map.fill_rect(30, 30, 40, 40, TerrainClass.SAND)
        assert fairway_map.terrain_class_at(31, 31) == TerrainClass.SAND
        assert fairway_map.terrain_class_at(29, 31) == TerrainClass.FAIRWAY

    def test_elevation_is_clamped(self, fairway_map):
        fairway_map.set_elevation(2, 2, 99)
        assert fairway_map.elevation_at(2, 2) == MAX_ELEVATION
        assert fairway_map.elevation_at(-5, 2) == 0

    def test_slope_points_uphill(self, fairway_map):
        fairway_map.set_elevation(17, 16, 2)
        assert fairway_map.slope_at(16, 16) == (1.0, 0.5)
        assert fairway_map.slope_at(5, 5) == (0.0, 0.0)


class TestHazardDetector:
    """Hazard and sink classification"""

    def test_water_and_off_map_are_hazards(self, water_ahead_map):
        detector = HazardDetector(water_ahead_map)
        assert detector.check_hazard(*water_ahead_map.tile_center(20, 10))
        assert not detector.check_hazard(*water_ahead_map.tile_center(16, 16))
        assert detector.check_hazard(-500.0, -500.0)

    def test_sand_is_not_a_hazard(self, fairway_map):
        fairway_map.set_terrain(4, 4, TerrainClass.SAND)
        assert not HazardDetector(fairway_map).check_hazard(*fairway_map.tile_center(4, 4))

    def test_is_on(self, fairway_map):
        fairway_map.set_terrain(4, 4, TerrainClass.TEE)
        detector = HazardDetector(fairway_map)
        assert detector.is_on(*fairway_map.tile_center(4, 4), TerrainClass.TEE)
        assert not detector.is_on(*fairway_map.tile_center(5, 4), TerrainClass.TEE)

    def test_sink_radius_is_exclusive(self):
        assert HazardDetector.check_sink((0.0, 0.0), (6.0, 8.0), 10.01)
        assert not HazardDetector.check_sink((0.0, 0.0), (6.0, 8.0), 10.0)
