"""
Explosion System
=================
Blast rings spawned wherever something is hit. Purely cosmetic state,
but owned by the simulation so the renderer only ever reads it.
"""

from .components import Position, Explosion

EXPLOSION_START_RADIUS = 5.0
EXPLOSION_MAX_RADIUS = 60.0
EXPLOSION_GROWTH = 2.0      # radius per tick
EXPLOSION_FADE = 0.02       # opacity per tick
EXPLOSION_MAX_AGE = 50      # ticks


def spawn_explosion(world, x: float, y: float) -> int:
    """Spawn a blast centred on (x, y)."""
    eid = world.create_entity()
    world.add_component(eid, Position(x, y))
    world.add_component(eid, Explosion(
        radius=EXPLOSION_START_RADIUS,
        max_radius=EXPLOSION_MAX_RADIUS,
    ))
    return eid


def explosion_system(world) -> None:
    """Age, grow and fade every blast; retire the spent ones."""
    for eid, blast in world.query(Explosion):
        blast.age += 1
        blast.radius += EXPLOSION_GROWTH
        blast.opacity -= EXPLOSION_FADE
        if blast.age > EXPLOSION_MAX_AGE or blast.opacity <= 0:
            world.destroy_entity(eid)
