"""
Collision Resolver
===================
Rockets against reactors and AA guns, AA rounds against the airplane.
Runs once per tick on post-motion positions and returns a list of event
dicts for the presentation layer.
"""

import logging

from .components import (
    Position, Size, Rocket, GroundTarget, TargetState,
    Emplacement, EmplacementRound, bounding_box, center_of
)
from .explosions import spawn_explosion
from .ledger import HitKind

logger = logging.getLogger(__name__)


def aabb_overlap(a_pos: Position, a_size: Size, b_pos: Position, b_size: Size) -> bool:
    """Strict AABB test: touching edges do not count."""
    a_left, a_top, a_right, a_bottom = bounding_box(a_pos, a_size)
    b_left, b_top, b_right, b_bottom = bounding_box(b_pos, b_size)
    return (a_left < b_right and a_right > b_left and
            a_top < b_bottom and a_bottom > b_top)


def _rocket_vs_targets(sim, rocket_id, r_pos, r_size, events) -> bool:
    """First live reactor in list order takes the hit."""
    world = sim.world
    ledger = sim.ledger
    for target_id, t_pos, t_size, target in world.query(Position, Size, GroundTarget):
        if target.destroyed:
            continue
        if not aabb_overlap(r_pos, r_size, t_pos, t_size):
            continue

        world.destroy_entity(rocket_id)
        cx, cy = center_of(t_pos, t_size)
        spawn_explosion(world, cx, cy)

        if target.state is TargetState.PRISTINE:
            target.state = TargetState.DAMAGED
            ledger.apply_hit(HitKind.TARGET_DAMAGED)
            logger.debug('Reactor damaged! Score: %d', ledger.score)
            events.append({'type': 'target_damaged', 'entity': target_id,
                           'x': cx, 'y': cy})
        else:
            target.state = TargetState.DESTROYED
            ledger.apply_hit(HitKind.TARGET_DESTROYED)
            logger.debug('Reactor destroyed! Score: %d', ledger.score)
            events.append({'type': 'target_destroyed', 'entity': target_id,
                           'x': cx, 'y': cy})
            for hook in sim.on_target_destroyed:
                hook(target_id)
        return True
    return False


def _rocket_vs_emplacements(sim, rocket_id, r_pos, r_size, events) -> bool:
    world = sim.world
    for gun_id, g_pos, g_size, gun in world.query(Position, Size, Emplacement):
        if gun.destroyed:
            continue
        if not aabb_overlap(r_pos, r_size, g_pos, g_size):
            continue

        world.destroy_entity(rocket_id)
        cx, cy = center_of(g_pos, g_size)
        spawn_explosion(world, cx, cy)
        gun.destroyed = True
        sim.ledger.apply_hit(HitKind.EMPLACEMENT_DESTROYED)
        logger.debug('AA gun destroyed! Score: %d', sim.ledger.score)
        events.append({'type': 'emplacement_destroyed', 'entity': gun_id,
                       'x': cx, 'y': cy})
        return True
    return False


def _rounds_vs_airplane(sim, events) -> None:
    """At most one round connects per tick."""
    world = sim.world
    plane_pos = world.get_component(sim.airplane_id, Position)
    plane_size = world.get_component(sim.airplane_id, Size)

    for round_id, b_pos, b_size, _ in reversed(
            world.query_list(Position, Size, EmplacementRound)):
        if not aabb_overlap(b_pos, b_size, plane_pos, plane_size):
            continue

        world.destroy_entity(round_id)
        cx, cy = center_of(plane_pos, plane_size)
        spawn_explosion(world, cx, cy)
        health = sim.ledger.take_damage()
        logger.info('Airplane hit! Health: %d/%d', health, sim.ledger.max_health)
        events.append({'type': 'airplane_hit', 'entity': round_id,
                       'x': cx, 'y': cy, 'health': health})
        if sim.ledger.is_dead:
            events.append({'type': 'airplane_down', 'x': cx, 'y': cy})
        break


def collision_system(sim) -> list:
    """
    Resolve every hit for this tick.

    Rockets are walked newest first. A rocket scores at most once: a
    reactor hit ends its turn before the AA guns are checked.
    """
    events = []
    world = sim.world

    for rocket_id, r_pos, r_size, _ in reversed(world.query_list(Position, Size, Rocket)):
        if _rocket_vs_targets(sim, rocket_id, r_pos, r_size, events):
            continue
        _rocket_vs_emplacements(sim, rocket_id, r_pos, r_size, events)

    _rounds_vs_airplane(sim, events)
    return events
