"""
Motion and Lifecycle Systems
=============================
Per-tick movement for every entity kind, and retirement of whatever
has left the playfield. Called in a fixed order by the simulation.
"""

from .components import (
    Position, Velocity, Size, Airplane, GroundTarget,
    Emplacement, EmplacementRound
)
from .emplacements import emplacement_fire
from .projectiles import fire_rocket
from .spawner import target_cadence, emplacement_cadence

AIRPLANE_TOP_MARGIN = 50.0
AIRPLANE_BOTTOM_MARGIN = 10.0
GLOW_STEP = 0.1
ROUND_EXIT_MARGIN = 10.0


def _integrate(pos: Position, vel: Velocity) -> None:
    pos.x += vel.x
    pos.y += vel.y


# =============================================================================
# BACKGROUND
# =============================================================================

def background_system(sim) -> None:
    """Scroll the ground; wrap once a full tile has passed."""
    sim.background_offset += sim.config.background_speed
    if sim.background_offset >= sim.config.background_tile_height:
        sim.background_offset = 0.0


# =============================================================================
# AIRPLANE
# =============================================================================

def airplane_system(sim, controls) -> None:
    """
    Steer the airplane from the held direction flags and fire.

    Each axis is clamped on its own, so pushing into a wall never
    blocks movement along the other axis.
    """
    world = sim.world
    pos = world.get_component(sim.airplane_id, Position)
    size = world.get_component(sim.airplane_id, Size)
    plane = world.get_component(sim.airplane_id, Airplane)
    vel = world.get_component(sim.airplane_id, Velocity)

    vel.x = 0.0
    vel.y = 0.0
    if controls.move_left:
        vel.x -= plane.speed
    if controls.move_right:
        vel.x += plane.speed
    if controls.move_up:
        vel.y -= plane.speed * plane.vertical_factor
    if controls.move_down:
        vel.y += plane.speed * plane.vertical_factor

    _integrate(pos, vel)

    width, height = sim.config.width, sim.config.height
    pos.x = min(max(pos.x, 0.0), width - size.width)
    pos.y = min(max(pos.y, AIRPLANE_TOP_MARGIN),
                height - size.height - AIRPLANE_BOTTOM_MARGIN)

    if controls.fire and sim.can_shoot:
        fire_rocket(sim)


# =============================================================================
# GROUND
# =============================================================================

def ground_target_system(sim) -> None:
    """Spawn on cadence, scroll reactors down, retire past the bottom."""
    target_cadence(sim)

    world = sim.world
    limit = sim.config.height + sim.config.target_size
    for eid, pos, vel, target in world.query(Position, Velocity, GroundTarget):
        _integrate(pos, vel)
        target.glow_phase += GLOW_STEP
        if pos.y > limit:
            world.destroy_entity(eid)


def emplacement_system(sim) -> None:
    """
    Spawn AA guns on cadence, scroll them, let them fire, retire them.

    A gun destroyed by a rocket stays in the world for the rest of that
    tick so the renderer sees the kill, and is dropped here on the next.
    """
    emplacement_cadence(sim)

    world = sim.world
    height = sim.config.height
    for eid, pos, vel, size, gun in world.query(Position, Velocity, Size, Emplacement):
        if gun.destroyed:
            world.destroy_entity(eid)
            continue
        _integrate(pos, vel)
        emplacement_fire(sim, eid, pos, size, gun)
        if pos.y > height + size.height:
            world.destroy_entity(eid)


def round_system(sim) -> None:
    """Fly AA rounds along their fixed heading; drop them off-screen."""
    world = sim.world
    m = ROUND_EXIT_MARGIN
    width, height = sim.config.width, sim.config.height
    for eid, pos, vel, _ in world.query(Position, Velocity, EmplacementRound):
        _integrate(pos, vel)
        if pos.x < -m or pos.x > width + m or pos.y < -m or pos.y > height + m:
            world.destroy_entity(eid)
