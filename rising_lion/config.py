"""
Playfield Configuration
========================
Validated game settings. One config covers every edition of the game:
the mobile layout, the AA-gun update and the leaderboard update are
feature toggles instead of separate code paths.
"""

import json
import math
from dataclasses import dataclass, field, fields, asdict
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union


class ConfigError(ValueError):
    """Raised when a configuration cannot produce a playable field."""


# Option names used by the original browser build
CAMEL_CASE_ALIASES: Dict[str, str] = {
    'activationScore': 'activation_score',
    'maxHealth': 'max_health',
    'backgroundSpeed': 'background_speed',
    'projectileSpeed': 'projectile_speed',
    'roundSpeed': 'round_speed',
    'groundTargetSpawnInterval': 'ground_target_spawn_interval',
    'emplacementSpawnInterval': 'emplacement_spawn_interval',
    'fireIntervalMin': 'fire_interval_min',
    'fireIntervalMax': 'fire_interval_max',
    'engagementRange': 'engagement_range',
    'shootCooldown': 'shoot_cooldown',
    'gameOverDuration': 'game_over_duration',
    'highScoreSlots': 'high_score_slots',
    'maxNameLength': 'max_name_length',
    'emplacementsEnabled': 'emplacements_enabled',
    'leaderboardEnabled': 'leaderboard_enabled',
}

# Layout profiles: (target size, airplane w, airplane h, airplane speed)
DESKTOP_PROFILE = (120 * 1.3, 150 * 0.85, 175 * 0.85, 5.0)
MOBILE_PROFILE = (80.0, 100.0, 120.0, 4.0)


@dataclass
class GameConfig:
    """Everything the simulation needs to know about its playfield."""

    width: float = 1200.0
    height: float = 800.0
    activation_score: int = 10
    max_health: int = 5

    # Speeds in pixels per tick
    background_speed: float = 2.0
    projectile_speed: float = 8.0
    round_speed: float = 4.0

    # Cadences in ticks
    ground_target_spawn_interval: int = 120
    emplacement_spawn_interval: int = 180
    shoot_cooldown: int = 15

    # Wall-clock timings in seconds
    fire_interval_min: float = 1.5
    fire_interval_max: float = 3.0
    game_over_duration: float = 3.0

    engagement_range: float = 600.0
    background_tile_height: float = 100.0

    # Edition toggles
    mobile: bool = False
    emplacements_enabled: bool = True
    leaderboard_enabled: bool = True

    high_score_slots: int = 3
    max_name_length: int = 12
    seed: Optional[int] = None

    _profile: Tuple[float, float, float, float] = field(
        init=False, repr=False, compare=False, default=DESKTOP_PROFILE
    )

    def __post_init__(self):
        self._profile = MOBILE_PROFILE if self.mobile else DESKTOP_PROFILE
        self.validate()

    def validate(self) -> None:
        """Refuse settings the simulation cannot run with."""
        for name in ('width', 'height'):
            value = getattr(self, name)
            if not _is_finite(value) or value <= 0:
                raise ConfigError(f'{name} must be a positive number, got {value!r}')

        if self.width < self.target_size or self.height < self.airplane_size[1]:
            raise ConfigError(
                f'playfield {self.width}x{self.height} is smaller than its sprites'
            )

        for name in ('background_speed', 'projectile_speed', 'round_speed',
                     'engagement_range', 'background_tile_height'):
            value = getattr(self, name)
            if not _is_finite(value) or value < 0:
                raise ConfigError(f'{name} must be a finite non-negative number, got {value!r}')

        for name in ('ground_target_spawn_interval', 'emplacement_spawn_interval',
                     'max_health', 'high_score_slots', 'max_name_length'):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
                raise ConfigError(f'{name} must be a positive integer, got {value!r}')

        if not isinstance(self.shoot_cooldown, int) or self.shoot_cooldown < 0:
            raise ConfigError(f'shoot_cooldown must be >= 0, got {self.shoot_cooldown!r}')

        if not isinstance(self.activation_score, int) or self.activation_score < 0:
            raise ConfigError(
                f'activation_score must be >= 0, got {self.activation_score!r}'
            )

        if not _is_finite(self.fire_interval_min) or self.fire_interval_min <= 0:
            raise ConfigError('fire_interval_min must be positive')
        if not _is_finite(self.fire_interval_max) or self.fire_interval_max < self.fire_interval_min:
            raise ConfigError('fire_interval_max must be >= fire_interval_min')
        if not _is_finite(self.game_over_duration) or self.game_over_duration < 0:
            raise ConfigError('game_over_duration must be >= 0')

    # -------------------------------------------------------------------------
    # Derived sizes
    # -------------------------------------------------------------------------

    @property
    def target_size(self) -> float:
        return self._profile[0]

    @property
    def target_min_spacing(self) -> float:
        return self.target_size * 1.5

    @property
    def emplacement_size(self) -> float:
        """AA guns are drawn at three quarters of a reactor."""
        return float(math.floor(self.target_size * 0.75))

    @property
    def airplane_size(self) -> Tuple[float, float]:
        return self._profile[1], self._profile[2]

    @property
    def airplane_speed(self) -> float:
        return self._profile[3]

    def airplane_start(self) -> Tuple[float, float]:
        """Spawn point of the airplane, bottom centre."""
        w, h = self.airplane_size
        if self.mobile:
            return self.width / 2 - w / 2, self.height - 100
        return self.width / 2 - w / 2, self.height - 170

    # -------------------------------------------------------------------------
    # Construction helpers
    # -------------------------------------------------------------------------

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'GameConfig':
        """Build from a mapping of option names (snake_case or camelCase)."""
        known = {f.name for f in fields(cls) if f.init}
        kwargs = {}
        for key, value in data.items():
            name = CAMEL_CASE_ALIASES.get(key, key)
            if name not in known:
                raise ConfigError(f'unknown config option: {key}')
            kwargs[name] = value
        return cls(**kwargs)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data.pop('_profile', None)
        return data


def load_config(path: Union[str, Path]) -> GameConfig:
    """Read a JSON config file."""
    try:
        with open(path, 'r', encoding='utf-8') as fh:
            data = json.load(fh)
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigError(f'cannot read config {path}: {exc}') from exc
    if not isinstance(data, dict):
        raise ConfigError(f'config {path} must hold a JSON object')
    return GameConfig.from_dict(data)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_finite(value: Any) -> bool:
    return _is_number(value) and math.isfinite(value)
