"""
Spawner
========
Placement of reactors and AA guns by rejection sampling.

Reactors always spawn: if no clear spot turns up within the attempt
budget, the last candidate is used anyway. AA guns are pickier and skip
the cycle instead, trying again on the next cadence.
"""

import logging
import math
from typing import Optional

from .components import (
    Position, Velocity, Size, GroundTarget, Emplacement, Side
)

logger = logging.getLogger(__name__)


# =============================================================================
# PLACEMENT CONSTANTS
# =============================================================================

TARGET_PLACEMENT_ATTEMPTS = 20
TARGET_STARTING_OFFSETS = (0.0, -200.0, -400.0)

EMPLACEMENT_PLACEMENT_ATTEMPTS = 30
EMPLACEMENT_SIDE_MARGIN = 50.0   # inset from the screen edge
EMPLACEMENT_TOP_EXCLUSION = 150.0
EMPLACEMENT_BAND_TRIM = 300.0    # top exclusion + bottom keep-out
EMPLACEMENT_SAFETY_MARGIN = 20.0
EMPLACEMENT_SPACING_FACTOR = 1.2


# =============================================================================
# GROUND TARGETS
# =============================================================================

def _target_too_close(sim, x: float, y: float) -> bool:
    """Check a candidate against every live reactor."""
    size = sim.config.target_size
    min_spacing = sim.config.target_min_spacing
    for _, pos, target in sim.world.query(Position, GroundTarget):
        if target.destroyed:
            continue
        if abs(x - pos.x) < min_spacing and abs(y - pos.y) < size * 2:
            return True
    return False


def spawn_ground_target(sim, explicit_y: Optional[float] = None) -> int:
    """
    Spawn a reactor above the playfield (or at explicit_y).

    Never fails. Returns the new entity ID.
    """
    config = sim.config
    size = config.target_size
    y = explicit_y if explicit_y is not None else -size

    x = 0.0
    for _ in range(TARGET_PLACEMENT_ATTEMPTS):
        x = sim.rng.random() * (config.width - size)
        if not _target_too_close(sim, x, y):
            break

    eid = sim.world.create_entity()
    sim.world.add_component(eid, Position(x, y))
    sim.world.add_component(eid, Size(size, size))
    sim.world.add_component(eid, Velocity(0.0, config.background_speed))
    sim.world.add_component(eid, GroundTarget(
        glow_phase=sim.rng.random() * math.pi * 2,
    ))
    return eid


def initialize_ground_targets(sim) -> list:
    """Stagger the three opening reactors down from the top edge."""
    return [spawn_ground_target(sim, offset) for offset in TARGET_STARTING_OFFSETS]


# =============================================================================
# EMPLACEMENTS
# =============================================================================

def _overlaps_live_target(sim, x: float, y: float, w: float, h: float) -> bool:
    """AABB test against reactors, with the safety margin on the far sides."""
    margin = EMPLACEMENT_SAFETY_MARGIN
    for _, pos, size, target in sim.world.query(Position, Size, GroundTarget):
        if target.destroyed:
            continue
        if (x < pos.x + size.width + margin and
                x + w + margin > pos.x and
                y < pos.y + size.height + margin and
                y + h + margin > pos.y):
            return True
    return False


def _near_live_emplacement(sim, x: float, y: float, min_spacing: float) -> bool:
    for _, pos, gun in sim.world.query(Position, Emplacement):
        if gun.destroyed:
            continue
        if math.hypot(x - pos.x, y - pos.y) < min_spacing:
            return True
    return False


def emplacements_allowed(sim) -> bool:
    """AA guns appear once the run has scored enough."""
    return (sim.config.emplacements_enabled
            and sim.ledger.score >= sim.config.activation_score)


def spawn_emplacement(sim) -> Optional[int]:
    """
    Spawn an AA gun on a random screen edge.

    Returns the entity ID, or None when spawning is not allowed yet or
    no clear position was found.
    """
    if not emplacements_allowed(sim):
        return None

    config = sim.config
    gun_w = gun_h = config.emplacement_size

    side = Side.LEFT if sim.rng.random() < 0.5 else Side.RIGHT
    if side is Side.LEFT:
        x = EMPLACEMENT_SIDE_MARGIN
    else:
        x = config.width - gun_w - EMPLACEMENT_SIDE_MARGIN

    min_spacing = max(gun_w, gun_h) * EMPLACEMENT_SPACING_FACTOR
    band = config.height - gun_h - EMPLACEMENT_BAND_TRIM

    y = None
    for _ in range(EMPLACEMENT_PLACEMENT_ATTEMPTS):
        candidate = sim.rng.random() * band + EMPLACEMENT_TOP_EXCLUSION
        if _overlaps_live_target(sim, x, candidate, gun_w, gun_h):
            continue
        if _near_live_emplacement(sim, x, candidate, min_spacing):
            continue
        y = candidate
        break

    if y is None:
        logger.debug('Could not find suitable position for AA gun, skipping spawn')
        return None

    span = config.fire_interval_max - config.fire_interval_min
    fire_interval = config.fire_interval_min + sim.rng.random() * span

    eid = sim.world.create_entity()
    sim.world.add_component(eid, Position(x, y))
    sim.world.add_component(eid, Size(gun_w, gun_h))
    sim.world.add_component(eid, Velocity(0.0, config.background_speed))
    sim.world.add_component(eid, Emplacement(
        side=side,
        spawn_time=sim.clock.now(),
        fire_interval=fire_interval,
    ))
    logger.debug('AA gun spawned at (%.0f, %.0f) on the %s', x, y, side.value)
    return eid


# =============================================================================
# CADENCE
# =============================================================================

def target_cadence(sim) -> None:
    """Count ticks toward the next reactor."""
    sim.target_spawn_timer += 1
    if sim.target_spawn_timer >= sim.config.ground_target_spawn_interval:
        spawn_ground_target(sim)
        sim.target_spawn_timer = 0


def emplacement_cadence(sim) -> None:
    """Count ticks toward the next AA gun. Idle until guns are active."""
    if not (sim.config.emplacements_enabled and sim.emplacements_active):
        return
    sim.emplacement_spawn_timer += 1
    if sim.emplacement_spawn_timer >= sim.config.emplacement_spawn_interval:
        spawn_emplacement(sim)
        sim.emplacement_spawn_timer = 0
