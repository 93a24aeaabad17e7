"""
Simulation
===========
The simulation context and the game's phase machine.

`Simulation` owns every entity, the ledger, the spawn and cooldown
timers, the clock and the random source. Systems are plain functions
that take it. The front-end drives it with one `update()` per frame and
the one-shot action methods, and reads it back through `snapshot()`.

Phases:  splash -> playing -> game_over -> splash
         splash <-> top_scores
         game_over -> name_input -> splash   (new high score only)
"""

import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Tuple

from .clock import Clock, SystemClock
from .collisions import collision_system
from .components import (
    Position, Size, Rocket, GroundTarget, Emplacement,
    EmplacementRound, Explosion
)
from .config import GameConfig
from .ecs import World
from .explosions import explosion_system
from .leaderboard import Leaderboard, LeaderboardEntry, LeaderboardStore, NameEntry
from .ledger import Ledger
from .player import InputState, create_airplane
from .projectiles import rocket_system, cooldown_system
from .spawner import initialize_ground_targets
from .systems import (
    background_system, airplane_system, ground_target_system,
    emplacement_system, round_system
)

logger = logging.getLogger(__name__)


class Phase(Enum):
    SPLASH = 'splash'
    PLAYING = 'playing'
    GAME_OVER = 'game_over'
    NAME_INPUT = 'name_input'
    TOP_SCORES = 'top_scores'


# =============================================================================
# SNAPSHOT
# =============================================================================

@dataclass(frozen=True)
class EntityView:
    """Read-only copy of one entity's box and visible state."""
    entity_id: int
    x: float
    y: float
    width: float
    height: float
    state: Optional[str] = None  # target state, or 'destroyed' for guns
    side: Optional[str] = None
    glow_phase: float = 0.0


@dataclass(frozen=True)
class ExplosionView:
    x: float
    y: float
    radius: float
    max_radius: float
    opacity: float


@dataclass(frozen=True)
class Snapshot:
    """Everything a renderer may read between two ticks."""
    phase: Phase
    tick: int
    airplane: EntityView
    rockets: Tuple[EntityView, ...]
    targets: Tuple[EntityView, ...]
    emplacements: Tuple[EntityView, ...]
    rounds: Tuple[EntityView, ...]
    explosions: Tuple[ExplosionView, ...]
    score: int
    hit_count: int
    destroyed_count: int
    emplacement_kills: int
    health: int
    max_health: int
    background_offset: float
    new_high_score: bool
    name_text: str
    leaderboard: Tuple[LeaderboardEntry, ...]
    game_over_remaining: float


def _view(world, eid, **extra) -> EntityView:
    pos = world.get_component(eid, Position)
    size = world.get_component(eid, Size)
    return EntityView(eid, pos.x, pos.y, size.width, size.height, **extra)


# =============================================================================
# SIMULATION
# =============================================================================

class Simulation:
    """Central game state container. Passed through all systems."""

    def __init__(self, config: Optional[GameConfig] = None,
                 clock: Optional[Clock] = None,
                 store: Optional[LeaderboardStore] = None,
                 rng: Optional[random.Random] = None):
        self.config = config if config is not None else GameConfig()
        self.clock = clock if clock is not None else SystemClock()
        self.rng = rng if rng is not None else random.Random(self.config.seed)

        self.world = World()
        self.ledger = Ledger(max_health=self.config.max_health)
        self.leaderboard = Leaderboard(
            store if self.config.leaderboard_enabled else None,
            slots=self.config.high_score_slots,
        )
        self.name_entry = NameEntry(self.config.max_name_length)

        # Called with the reactor's entity ID when it is destroyed
        self.on_target_destroyed: List[Callable[[int], None]] = []

        self.phase = Phase.SPLASH
        self.tick_count = 0
        self.events: list = []
        self.airplane_id = -1
        self._reset_run()

    # -------------------------------------------------------------------------
    # Run state
    # -------------------------------------------------------------------------

    def _reset_run(self) -> None:
        """Return score, health, entities and timers to a fresh run."""
        self.world.clear()
        self.airplane_id = create_airplane(self.world, self.config)
        self.ledger.reset()

        self.background_offset = 0.0
        self.target_spawn_timer = 0
        self.emplacement_spawn_timer = 0
        self.emplacements_active = False
        self.shoot_cooldown = 0
        self.can_shoot = True

        self.game_over_time: Optional[float] = None
        self.new_high_score = False
        self.high_score_check_pending = False
        self.name_entry.clear()
        self.events = []

    def _return_to_splash(self) -> None:
        self.phase = Phase.SPLASH
        self._reset_run()
        if self.leaderboard.available:
            self.leaderboard.refresh()
        logger.info('Game reset complete')

    def _enter_game_over(self) -> None:
        self.phase = Phase.GAME_OVER
        self.game_over_time = self.clock.now()
        self.high_score_check_pending = self.leaderboard.available
        logger.info('Game over! Final score: %d', self.ledger.score)

    # -------------------------------------------------------------------------
    # Boundary tasks
    # -------------------------------------------------------------------------

    def resolve_high_score_check(self) -> Optional[bool]:
        """
        Settle an outstanding high-score check against the leaderboard.

        Runs between ticks, never inside the collision pass. A result
        for a run that already left the game-over screen is dropped.
        Returns the verdict, or None when nothing was pending.
        """
        if not self.high_score_check_pending:
            return None
        self.high_score_check_pending = False
        qualifies = self.ledger.qualifies_for_high_score(
            self.leaderboard.scores(), self.config.high_score_slots
        )
        if self.phase is not Phase.GAME_OVER:
            return qualifies
        self.new_high_score = qualifies
        return qualifies

    # -------------------------------------------------------------------------
    # Tick
    # -------------------------------------------------------------------------

    def update(self, controls: Optional[InputState] = None) -> list:
        """Advance one tick. Returns this tick's collision events."""
        self.tick_count += 1
        self.resolve_high_score_check()

        if self.phase is Phase.GAME_OVER:
            self._update_game_over()
            return []

        if self.phase is not Phase.PLAYING:
            return []

        if controls is None:
            controls = InputState()

        if (self.config.emplacements_enabled and not self.emplacements_active
                and self.ledger.score >= self.config.activation_score):
            self.emplacements_active = True
            logger.info('AA guns enabled! Score: %d', self.ledger.score)

        background_system(self)
        airplane_system(self, controls)
        rocket_system(self.world)
        ground_target_system(self)
        emplacement_system(self)
        round_system(self)
        explosion_system(self.world)

        events = collision_system(self)
        cooldown_system(self)

        if self.ledger.is_dead:
            self._enter_game_over()

        self.world.process_dead_entities()
        self.events = events
        return events

    def _update_game_over(self) -> None:
        if self.new_high_score:
            self.phase = Phase.NAME_INPUT
            self.name_entry.clear()
            logger.info('New high score: %d', self.ledger.score)
            return
        if self.clock.now() - self.game_over_time >= self.config.game_over_duration:
            self._return_to_splash()

    # -------------------------------------------------------------------------
    # One-shot actions
    # -------------------------------------------------------------------------

    def start_game(self) -> bool:
        if self.phase is not Phase.SPLASH:
            return False
        self._reset_run()
        initialize_ground_targets(self)
        self.phase = Phase.PLAYING
        logger.info('Game started')
        return True

    def return_to_menu(self) -> bool:
        """Escape: abandon a run, or leave the top-scores screen."""
        if self.phase is Phase.PLAYING:
            self._return_to_splash()
            return True
        if self.phase is Phase.TOP_SCORES:
            self.phase = Phase.SPLASH
            return True
        return False

    def open_leaderboard(self) -> bool:
        if self.phase is not Phase.SPLASH:
            return False
        self.leaderboard.refresh()
        self.phase = Phase.TOP_SCORES
        return True

    def type_name_char(self, char: str) -> bool:
        if self.phase is not Phase.NAME_INPUT:
            return False
        return self.name_entry.type_char(char)

    def name_backspace(self) -> None:
        if self.phase is Phase.NAME_INPUT:
            self.name_entry.backspace()

    def submit_name(self, text: Optional[str] = None) -> bool:
        """Save the final score under `text` (or the typed name)."""
        if self.phase is not Phase.NAME_INPUT:
            return False
        if text is not None:
            self.name_entry.clear()
            self.name_entry.type_text(text)
        self.leaderboard.submit(self.name_entry.text, self.ledger.score)
        self._return_to_splash()
        return True

    def cancel_name_entry(self) -> bool:
        if self.phase is not Phase.NAME_INPUT:
            return False
        self._return_to_splash()
        return True

    # -------------------------------------------------------------------------
    # Read side
    # -------------------------------------------------------------------------

    def snapshot(self) -> Snapshot:
        world = self.world
        remaining = 0.0
        if self.phase is Phase.GAME_OVER and self.game_over_time is not None:
            elapsed = self.clock.now() - self.game_over_time
            remaining = max(0.0, self.config.game_over_duration - elapsed)

        return Snapshot(
            phase=self.phase,
            tick=self.tick_count,
            airplane=_view(world, self.airplane_id),
            rockets=tuple(_view(world, eid) for eid, _ in world.query(Rocket)),
            targets=tuple(
                _view(world, eid, state=t.state.value, glow_phase=t.glow_phase)
                for eid, t in world.query(GroundTarget)
            ),
            emplacements=tuple(
                _view(world, eid, state='destroyed' if g.destroyed else 'active',
                      side=g.side.value)
                for eid, g in world.query(Emplacement)
            ),
            rounds=tuple(_view(world, eid) for eid, _ in world.query(EmplacementRound)),
            explosions=tuple(
                ExplosionView(pos.x, pos.y, e.radius, e.max_radius, max(0.0, e.opacity))
                for _, pos, e in world.query(Position, Explosion)
            ),
            score=self.ledger.score,
            hit_count=self.ledger.hit_count,
            destroyed_count=self.ledger.destroyed_count,
            emplacement_kills=self.ledger.emplacement_kills,
            health=self.ledger.health,
            max_health=self.ledger.max_health,
            background_offset=self.background_offset,
            new_high_score=self.new_high_score,
            name_text=self.name_entry.text,
            leaderboard=tuple(self.leaderboard.entries),
            game_over_remaining=remaining,
        )
