"""
Emplacement Fire Logic
=======================
AA guns aim at where the airplane is when they fire and never correct
afterwards. Fire cadence runs on wall-clock seconds.
"""

import math
from typing import Optional

from .components import (
    Position, Velocity, Size, Emplacement, EmplacementRound, center_of
)

ROUND_SIZE = 4.0


def spawn_round(world, x: float, y: float, vx: float, vy: float,
                owner_id: int = -1) -> int:
    """Spawn an AA round with its top-left corner at (x, y)."""
    eid = world.create_entity()
    world.add_component(eid, Position(x, y))
    world.add_component(eid, Size(ROUND_SIZE, ROUND_SIZE))
    world.add_component(eid, Velocity(vx, vy))
    world.add_component(eid, EmplacementRound(owner_id=owner_id))
    return eid


def is_on_screen(pos: Position, size: Size, height: float) -> bool:
    return -size.height < pos.y < height


def fire_ready(gun: Emplacement, now: float) -> bool:
    if gun.last_fire_time is None:
        return True
    return now - gun.last_fire_time > gun.fire_interval


def aim_round(sim, gun_id: int, pos: Position, size: Size) -> Optional[int]:
    """
    Fire one round from the gun's centre toward the airplane's centre.

    Returns None when the airplane is out of engagement range.
    """
    plane_pos = sim.world.get_component(sim.airplane_id, Position)
    plane_size = sim.world.get_component(sim.airplane_id, Size)
    if plane_pos is None or plane_size is None:
        return None

    gx, gy = center_of(pos, size)
    px, py = center_of(plane_pos, plane_size)
    dx = px - gx
    dy = py - gy
    distance = math.hypot(dx, dy)

    if distance > sim.config.engagement_range or distance == 0:
        return None

    speed = sim.config.round_speed
    half = ROUND_SIZE / 2
    return spawn_round(
        sim.world, gx - half, gy - half,
        dx / distance * speed, dy / distance * speed,
        owner_id=gun_id,
    )


def emplacement_fire(sim, gun_id: int, pos: Position, size: Size,
                     gun: Emplacement) -> Optional[int]:
    """
    Let one gun fire if its interval has elapsed.

    The fire timestamp is stamped whenever the gun is on screen and
    ready, even if the airplane turns out to be out of range.
    """
    if gun.destroyed:
        return None
    now = sim.clock.now()
    if not fire_ready(gun, now):
        return None
    if not is_on_screen(pos, size, sim.config.height):
        return None
    round_id = aim_round(sim, gun_id, pos, size)
    gun.last_fire_time = now
    return round_id
