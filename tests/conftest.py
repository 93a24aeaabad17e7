"""Shared fixtures: seeded config, manual clock, in-memory scores, placement helpers."""

import pytest

from rising_lion.clock import ManualClock
from rising_lion.components import (
    Position, Velocity, Size, GroundTarget, TargetState,
    Emplacement, Side, center_of
)
from rising_lion.config import GameConfig
from rising_lion.emplacements import spawn_round, ROUND_SIZE
from rising_lion.game import Simulation
from rising_lion.leaderboard import MemoryStore
from rising_lion.projectiles import spawn_rocket


@pytest.fixture
def config():
    return GameConfig(seed=1234)


@pytest.fixture
def clock():
    return ManualClock(start=100.0)


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def make_sim(config, clock, store):
    """Build a Simulation; keyword overrides replace config fields."""
    def _make(store=store, clock=clock, **overrides):
        cfg = config
        if overrides:
            cfg = GameConfig(**{**config.to_dict(), **overrides})
        return Simulation(config=cfg, clock=clock, store=store)
    return _make


@pytest.fixture
def sim(make_sim):
    return make_sim()


@pytest.fixture
def playing(sim):
    """A simulation that has just left the title screen."""
    sim.start_game()
    return sim


# --------------------------------------------------------------------------
# Entity placement
# --------------------------------------------------------------------------

@pytest.fixture
def add_target():
    def _add(sim, x, y, state=TargetState.PRISTINE):
        size = sim.config.target_size
        eid = sim.world.create_entity()
        sim.world.add_component(eid, Position(x, y))
        sim.world.add_component(eid, Size(size, size))
        sim.world.add_component(eid, Velocity(0.0, sim.config.background_speed))
        sim.world.add_component(eid, GroundTarget(state=state))
        return eid
    return _add


@pytest.fixture
def add_gun():
    def _add(sim, x, y, side=Side.LEFT, fire_interval=2.0, destroyed=False):
        size = sim.config.emplacement_size
        eid = sim.world.create_entity()
        sim.world.add_component(eid, Position(x, y))
        sim.world.add_component(eid, Size(size, size))
        sim.world.add_component(eid, Velocity(0.0, sim.config.background_speed))
        sim.world.add_component(eid, Emplacement(
            side=side, destroyed=destroyed, fire_interval=fire_interval,
        ))
        return eid
    return _add


@pytest.fixture
def add_rocket():
    def _add(sim, x, y):
        return spawn_rocket(sim.world, x, y, sim.config.projectile_speed)
    return _add


@pytest.fixture
def round_on_plane():
    """Park a motionless AA round on the airplane's centre."""
    def _add(sim):
        pos = sim.world.get_component(sim.airplane_id, Position)
        size = sim.world.get_component(sim.airplane_id, Size)
        cx, cy = center_of(pos, size)
        half = ROUND_SIZE / 2
        return spawn_round(sim.world, cx - half, cy - half, 0.0, 0.0)
    return _add


@pytest.fixture
def crash(round_on_plane):
    """Take the airplane down on the next tick."""
    def _crash(sim):
        sim.ledger.health = 1
        round_on_plane(sim)
        sim.update()
    return _crash


def count(sim, component_type):
    return sum(1 for _ in sim.world.query(component_type))


@pytest.fixture
def counter():
    return count
