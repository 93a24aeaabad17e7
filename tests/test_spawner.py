"""Tests for reactor and AA gun placement."""

import itertools
import random

import pytest

from rising_lion.clock import ManualClock
from rising_lion.components import (
    Position, Size, GroundTarget, TargetState, Emplacement, Side
)
from rising_lion.game import Simulation
from rising_lion.spawner import (
    spawn_ground_target, initialize_ground_targets, spawn_emplacement,
    emplacements_allowed, TARGET_PLACEMENT_ATTEMPTS, EMPLACEMENT_SIDE_MARGIN,
    EMPLACEMENT_TOP_EXCLUSION, EMPLACEMENT_BAND_TRIM
)


def live_targets(sim):
    return [(pos, t) for _, pos, t in sim.world.query(Position, GroundTarget)
            if not t.destroyed]


class TestGroundTargets:
    def test_opening_targets_are_staggered(self, sim):
        ids = initialize_ground_targets(sim)
        ys = [sim.world.get_component(eid, Position).y for eid in ids]
        assert ys == [0.0, -200.0, -400.0]

    def test_default_spawn_sits_above_the_field(self, sim):
        eid = spawn_ground_target(sim)
        pos = sim.world.get_component(eid, Position)
        size = sim.world.get_component(eid, Size)
        assert pos.y == -sim.config.target_size
        assert 0 <= pos.x <= sim.config.width - size.width
        assert size.width == size.height == sim.config.target_size

    def test_spacing_holds_over_many_trials(self, config):
        size = config.target_size
        min_spacing = config.target_min_spacing
        for trial in range(1000):
            sim = Simulation(config=config, clock=ManualClock(),
                             rng=random.Random(trial))
            initialize_ground_targets(sim)
            for (a, _), (b, _) in itertools.combinations(live_targets(sim), 2):
                if abs(a.y - b.y) < size * 2:
                    assert abs(a.x - b.x) >= min_spacing, f'trial {trial}'

    def test_destroyed_targets_do_not_block(self, sim, add_target):
        size = sim.config.target_size
        # Wreckage everywhere across the spawn row
        x = 0.0
        while x < sim.config.width:
            add_target(sim, x, -size, state=TargetState.DESTROYED)
            x += 100

        expected = random.Random(sim.config.seed).random() * (sim.config.width - size)
        eid = spawn_ground_target(sim)
        assert sim.world.get_component(eid, Position).x == expected

    def test_crowded_row_takes_last_candidate(self, sim, add_target):
        size = sim.config.target_size
        # Exclusion zones of these four cover every possible x
        for x in (0.0, 300.0, 600.0, 900.0):
            add_target(sim, x, -size)

        replay = random.Random(sim.config.seed)
        draws = [replay.random() for _ in range(TARGET_PLACEMENT_ATTEMPTS)]
        eid = spawn_ground_target(sim)

        assert sim.world.get_component(eid, Position).x == draws[-1] * (sim.config.width - size)
        assert len(live_targets(sim)) == 5


class TestEmplacementGating:
    def test_no_guns_below_activation_score(self, sim):
        sim.ledger.score = sim.config.activation_score - 1
        assert not emplacements_allowed(sim)
        for _ in range(50):
            assert spawn_emplacement(sim) is None
        assert not list(sim.world.query(Emplacement))

    def test_disabled_edition_never_spawns(self, make_sim):
        sim = make_sim(emplacements_enabled=False)
        sim.ledger.score = 100
        assert spawn_emplacement(sim) is None

    def test_cadence_waits_for_activation(self, playing):
        playing.ledger.score = 9
        for _ in range(playing.config.emplacement_spawn_interval * 2):
            playing.update()
        assert not playing.emplacements_active
        assert not list(playing.world.query(Emplacement))

    def test_cadence_spawns_after_activation(self, playing):
        for eid, _ in playing.world.query(GroundTarget):
            playing.world.destroy_entity(eid)
        playing.world.process_dead_entities()
        playing.ledger.score = 10

        for _ in range(playing.config.emplacement_spawn_interval):
            playing.update()

        assert playing.emplacements_active
        assert len(list(playing.world.query(Emplacement))) == 1


class TestEmplacementPlacement:
    def test_spawns_on_a_screen_edge(self, sim, clock):
        sim.ledger.score = 10
        config = sim.config
        gun_size = config.emplacement_size
        band_bottom = (config.height - gun_size - EMPLACEMENT_BAND_TRIM
                       + EMPLACEMENT_TOP_EXCLUSION)
        for _ in range(20):
            eid = spawn_emplacement(sim)
            if eid is None:
                continue
            pos = sim.world.get_component(eid, Position)
            gun = sim.world.get_component(eid, Emplacement)
            if gun.side is Side.LEFT:
                assert pos.x == EMPLACEMENT_SIDE_MARGIN
            else:
                assert pos.x == config.width - gun_size - EMPLACEMENT_SIDE_MARGIN
            assert EMPLACEMENT_TOP_EXCLUSION <= pos.y < band_bottom
            assert config.fire_interval_min <= gun.fire_interval < config.fire_interval_max
            assert gun.spawn_time == clock.now()
            assert gun.last_fire_time is None

    def test_guns_keep_their_distance(self, sim):
        sim.ledger.score = 10
        for _ in range(40):
            spawn_emplacement(sim)
        guns = [(pos, gun) for _, pos, gun in sim.world.query(Position, Emplacement)]
        min_spacing = sim.config.emplacement_size * 1.2
        for (a, ga), (b, gb) in itertools.combinations(guns, 2):
            if ga.side is gb.side:
                assert abs(a.y - b.y) >= min_spacing

    def test_skips_when_no_clear_spot(self, sim, add_target):
        sim.ledger.score = 10
        size = sim.config.target_size
        right_x = sim.config.width - size
        y = 0.0
        while y < sim.config.height:
            add_target(sim, 0.0, y)
            add_target(sim, right_x, y)
            y += 150

        for _ in range(10):
            assert spawn_emplacement(sim) is None
        assert not list(sim.world.query(Emplacement))

    @pytest.mark.parametrize('seed', [1, 2, 3])
    def test_never_overlaps_live_targets(self, make_sim, add_target, seed):
        sim = make_sim(seed=seed)
        sim.ledger.score = 10
        add_target(sim, 0.0, 300.0)
        add_target(sim, sim.config.width - sim.config.target_size, 200.0)
        for _ in range(10):
            eid = spawn_emplacement(sim)
            if eid is None:
                continue
            g_pos = sim.world.get_component(eid, Position)
            g_size = sim.world.get_component(eid, Size)
            for _, t_pos, t_size, _ in sim.world.query(Position, Size, GroundTarget):
                overlapping = (g_pos.x < t_pos.x + t_size.width and
                               g_pos.x + g_size.width > t_pos.x and
                               g_pos.y < t_pos.y + t_size.height and
                               g_pos.y + g_size.height > t_pos.y)
                assert not overlapping
