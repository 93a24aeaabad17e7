"""
Rocket System
==============
Player rockets: firing with a cooldown, straight-up flight, retirement
above the top edge. Hits are resolved in collisions.py.
"""

from .components import Position, Velocity, Size, Rocket, center_of

ROCKET_WIDTH = 4.0
ROCKET_HEIGHT = 12.0
ROCKET_EXIT_Y = -10.0


def spawn_rocket(world, x: float, y: float, speed: float = 8.0) -> int:
    """Spawn a single rocket with its top-left corner at (x, y)."""
    eid = world.create_entity()
    world.add_component(eid, Position(x, y))
    world.add_component(eid, Size(ROCKET_WIDTH, ROCKET_HEIGHT))
    world.add_component(eid, Velocity(0.0, -speed))
    world.add_component(eid, Rocket())
    return eid


def fire_rocket(sim) -> int:
    """Launch from the airplane's nose and arm the cooldown."""
    pos = sim.world.get_component(sim.airplane_id, Position)
    size = sim.world.get_component(sim.airplane_id, Size)
    cx, _ = center_of(pos, size)
    eid = spawn_rocket(sim.world, cx - ROCKET_WIDTH / 2, pos.y,
                       sim.config.projectile_speed)
    sim.can_shoot = False
    sim.shoot_cooldown = sim.config.shoot_cooldown
    return eid


def rocket_system(world) -> None:
    """Fly rockets upward; drop the ones that left the top edge."""
    for eid, pos, vel, _ in world.query(Position, Velocity, Rocket):
        pos.x += vel.x
        pos.y += vel.y
        if pos.y < ROCKET_EXIT_Y:
            world.destroy_entity(eid)


def cooldown_system(sim) -> None:
    """Tick the shoot cooldown; firing re-enables at zero."""
    if sim.shoot_cooldown > 0:
        sim.shoot_cooldown -= 1
    if sim.shoot_cooldown == 0:
        sim.can_shoot = True
