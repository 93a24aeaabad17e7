"""
Component Definitions
======================
All components are plain dataclasses with no behavior.

Every entity carries a Position and a Size (its axis-aligned bounding
box, origin at the top-left corner). Each entity kind has exactly one
kind component below, which doubles as its tag for queries.
"""

from dataclasses import dataclass
from typing import Optional, Tuple
from enum import Enum


# =============================================================================
# PHYSICS COMPONENTS
# =============================================================================

@dataclass
class Position:
    """Top-left corner in playfield pixels."""
    x: float = 0.0
    y: float = 0.0


@dataclass
class Velocity:
    """Movement velocity in pixels per tick."""
    x: float = 0.0
    y: float = 0.0


@dataclass
class Size:
    """Bounding box extent in pixels."""
    width: float = 1.0
    height: float = 1.0


def bounding_box(pos: Position, size: Size) -> Tuple[float, float, float, float]:
    """Return (left, top, right, bottom)."""
    return pos.x, pos.y, pos.x + size.width, pos.y + size.height


def center_of(pos: Position, size: Size) -> Tuple[float, float]:
    """Return the centre point of a box."""
    return pos.x + size.width / 2, pos.y + size.height / 2


# =============================================================================
# ENTITY KINDS
# =============================================================================

@dataclass
class Airplane:
    """The player's airplane. Health lives on the Ledger."""
    speed: float = 5.0
    vertical_factor: float = 0.7


@dataclass
class Rocket:
    """Player projectile. Moves straight up."""


class TargetState(Enum):
    """Damage state of a ground target."""
    PRISTINE = 'pristine'
    DAMAGED = 'damaged'
    DESTROYED = 'destroyed'


@dataclass
class GroundTarget:
    """A reactor scrolling down with the ground."""
    state: TargetState = TargetState.PRISTINE
    glow_phase: float = 0.0

    @property
    def destroyed(self) -> bool:
        return self.state is TargetState.DESTROYED


class Side(Enum):
    """Screen edge an emplacement sits on."""
    LEFT = 'left'
    RIGHT = 'right'


@dataclass
class Emplacement:
    """Anti-aircraft gun. Fire timing is in wall-clock seconds."""
    side: Side = Side.RIGHT
    destroyed: bool = False
    spawn_time: float = 0.0
    last_fire_time: Optional[float] = None  # None = never fired
    fire_interval: float = 1.5


@dataclass
class EmplacementRound:
    """AA bullet. Velocity is fixed at fire time."""
    owner_id: int = -1


@dataclass
class Explosion:
    """Expanding, fading blast. Position is its centre."""
    radius: float = 5.0
    max_radius: float = 60.0
    opacity: float = 1.0
    age: int = 0
