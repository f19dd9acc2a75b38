from typing import List, Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from .clubs import CLUBS, club_by_id
from .course_map import CourseMap
from .terrain import TerrainClass
from .trajectory_simulator import (
    LaunchParameters, PhysicsEngine, TrajectoryOptimizer, TrajectoryResult, TrajectorySimulator,
    aim_direction
)

app = FastAPI()


class LayoutRequest(BaseModel):
    tiles: List[List[int]] = Field(..., min_length=1)
    start_x: float
    start_y: float
    club_id: str = "iron"
    spin_direction: int = Field(0, ge=-1, le=1)


class PredictRequest(LayoutRequest):
    direction: float
    power: float = Field(..., ge=0)


class SolveRequest(LayoutRequest):
    target_x: float
    target_y: float


def _build_simulator(tiles: List[List[int]]) -> TrajectorySimulator:
    try:
        course_map = CourseMap.from_rows(tiles)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    return TrajectorySimulator(PhysicsEngine(course_map))


def _resolve_club(club_id: str):
    try:
        return club_by_id(club_id)
    except ValueError as exc:
        raise HTTPException(status_code=404, detail=str(exc))


def _terrain_under(simulator: TrajectorySimulator, x: float, y: float) -> Optional[TerrainClass]:
    course_map = simulator.engine.course_map
    return course_map.terrain_class_at(*course_map.world_to_tile(x, y))


def _serialize(result: TrajectoryResult) -> dict:
    landing = result.landing_point
    return {
        "points": [{"x": p.x, "y": p.y, "z": p.z} for p in result.points],
        "landing": {"x": landing[0], "y": landing[1]} if landing else None,
        "bounces": result.bounces,
        "hazard": result.hazard,
        "truncated": result.truncated,
    }


@app.get("/api/clubs")
async def clubs():
    return [
        {
            "id": club.id,
            "name": club.name,
            "min_power": club.min_power,
            "max_power": club.max_power,
            "loft_degrees": club.loft_degrees,
            "spin_angle": club.base_spin_angle,
            "tee_only": club.tee_only,
        }
        for club in CLUBS
    ]


@app.post("/api/predict")
async def predict(data: PredictRequest):
    simulator = _build_simulator(data.tiles)
    club = _resolve_club(data.club_id)
    terrain = _terrain_under(simulator, data.start_x, data.start_y)

    launch = LaunchParameters(
        position=(data.start_x, data.start_y),
        direction=data.direction,
        power=data.power,
        loft_degrees=club.loft_degrees,
        spin_direction=data.spin_direction,
        spin_angle=club.effective_spin_angle(terrain)
    )
    return {"success": True, **_serialize(simulator.simulate(launch))}


@app.post("/api/solve")
async def solve(data: SolveRequest):
    simulator = _build_simulator(data.tiles)
    club = _resolve_club(data.club_id)
    terrain = _terrain_under(simulator, data.start_x, data.start_y)
    start = (data.start_x, data.start_y)
    target = (data.target_x, data.target_y)

    direction = aim_direction(start, target)
    found = TrajectoryOptimizer(simulator).find_optimal_power(
        start, direction, target, club,
        spin_direction=data.spin_direction,
        spin_angle=club.effective_spin_angle(terrain)
    )
    if found is None:
        return {"success": False, "power": None, "direction": direction}

    power, result = found
    return {
        "success": True,
        "power": power,
        "direction": direction,
        "power_fraction": club.power_fraction(power),
        **_serialize(result),
    }
