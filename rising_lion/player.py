"""
Player Module
==============
Airplane entity creation and terminal input handling.
"""

from dataclasses import dataclass
from typing import Optional

from .components import Position, Velocity, Size, Airplane


def create_airplane(world, config) -> int:
    """Create the player's airplane at its starting point."""
    entity_id = world.create_entity()
    x, y = config.airplane_start()
    w, h = config.airplane_size

    world.add_component(entity_id, Position(x, y))
    world.add_component(entity_id, Velocity(0.0, 0.0))
    world.add_component(entity_id, Size(w, h))
    world.add_component(entity_id, Airplane(speed=config.airplane_speed))
    return entity_id


@dataclass
class InputState:
    """Level-triggered controls, sampled once per tick."""
    move_left: bool = False
    move_right: bool = False
    move_up: bool = False
    move_down: bool = False
    fire: bool = False


# Actions the terminal front-end turns into Simulation calls
ACTION_START = 'start'
ACTION_MENU = 'menu'
ACTION_LEADERBOARD = 'leaderboard'
ACTION_QUIT = 'quit'
ACTION_SUBMIT = 'submit'
ACTION_CANCEL = 'cancel'
ACTION_BACKSPACE = 'backspace'

MOVE_KEYS = {
    'KEY_LEFT': 'left', 'KEY_RIGHT': 'right', 'KEY_UP': 'up', 'KEY_DOWN': 'down',
    'a': 'left', 'd': 'right', 'w': 'up', 's': 'down',
}


class InputHandler:
    """
    Handles player input with key hold detection.

    Uses frame-based timers to simulate key hold in terminals
    that don't support key-up events.
    """

    def __init__(self, hold_duration: int = 8):
        self.keys_held: dict = {}  # direction/'fire' -> frames remaining
        self.hold_duration = hold_duration
        self._actions: list = []
        self._typed: list = []
        self.text_mode = False  # name entry swallows every key

    def process_key(self, key) -> None:
        """Process a single key press from blessed's inkey()."""
        if key is None or not key:
            return

        name = key.name or ''
        key_str = str(key) if not key.is_sequence else ''

        if self.text_mode:
            if name in ('KEY_ENTER',) or key_str in ('\n', '\r'):
                self._actions.append(ACTION_SUBMIT)
            elif name == 'KEY_ESCAPE':
                self._actions.append(ACTION_CANCEL)
            elif name in ('KEY_BACKSPACE', 'KEY_DELETE') or key_str in ('\x7f', '\b'):
                self._actions.append(ACTION_BACKSPACE)
            elif key_str:
                self._typed.append(key_str)
            return

        lower = key_str.lower()
        direction = MOVE_KEYS.get(name) or MOVE_KEYS.get(lower)
        if direction:
            self.keys_held[direction] = self.hold_duration
        elif lower == ' ':
            self.keys_held['fire'] = self.hold_duration
        elif name == 'KEY_ENTER' or lower in ('\n', '\r'):
            self._actions.append(ACTION_START)
        elif name == 'KEY_ESCAPE':
            self._actions.append(ACTION_MENU)
        elif lower == 't':
            self._actions.append(ACTION_LEADERBOARD)
        elif lower == 'q':
            self._actions.append(ACTION_QUIT)

    def update(self) -> None:
        """Update key hold timers (call once per tick)."""
        expired = []
        for key, frames in self.keys_held.items():
            self.keys_held[key] = frames - 1
            if self.keys_held[key] <= 0:
                expired.append(key)
        for key in expired:
            del self.keys_held[key]

    def release_all(self) -> None:
        self.keys_held.clear()

    def controls(self) -> InputState:
        """Current level-triggered flags."""
        return InputState(
            move_left='left' in self.keys_held,
            move_right='right' in self.keys_held,
            move_up='up' in self.keys_held,
            move_down='down' in self.keys_held,
            fire='fire' in self.keys_held,
        )

    def consume_action(self) -> Optional[str]:
        """Pop the oldest pending one-shot action."""
        if self._actions:
            return self._actions.pop(0)
        return None

    def consume_typed(self) -> list:
        typed = self._typed
        self._typed = []
        return typed
