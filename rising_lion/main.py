#!/usr/bin/env python3
"""
OPERATION RISING LION - Terminal Edition
=========================================
Fly north over scrolling ground, knock out reactors with rockets and
stay clear of the AA flak.

Controls:
    ARROWS/WASD - Fly
    SPACE       - Fire rocket
    ENTER       - Start / save name
    T           - Top scores (from the title screen)
    ESC         - Back to the title screen
    Q           - Quit
"""

import logging
import os
import sys
import time

try:
    from blessed import Terminal
except ImportError:
    print("ERROR: 'blessed' library required. Install with: pip install blessed")
    sys.exit(1)

from .clock import SystemClock
from .config import ConfigError, GameConfig, load_config
from .engine import GameRenderer
from .game import Phase, Simulation
from .leaderboard import JsonFileStore
from .player import (
    InputHandler, ACTION_START, ACTION_MENU, ACTION_LEADERBOARD, ACTION_QUIT,
    ACTION_SUBMIT, ACTION_CANCEL, ACTION_BACKSPACE
)
from .screens import render

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

TARGET_FPS = 60
FRAME_TIME = 1.0 / TARGET_FPS
MIN_WIDTH = 80
MIN_HEIGHT = 24

LOG_FILE = 'rising_lion.log'
DEFAULT_SCORES_FILE = 'rising_lion_scores.json'


# =============================================================================
# SETUP
# =============================================================================

def setup_logging(level=None, filename: str = LOG_FILE) -> None:
    """Send log records to a file; the terminal belongs to the renderer."""
    if level is None:
        level = os.environ.get('RISING_LION_LOG_LEVEL', 'INFO')
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    handler = logging.FileHandler(filename, encoding='utf-8')
    handler.setFormatter(logging.Formatter(
        '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
    ))
    root = logging.getLogger()
    root.setLevel(level)
    root.addHandler(handler)


def build_simulation(environ=None) -> Simulation:
    """Wire config, score file and wall clock from the environment."""
    environ = os.environ if environ is None else environ

    config_path = environ.get('RISING_LION_CONFIG')
    if config_path:
        config = load_config(config_path)
        logger.info('Loaded config from %s', config_path)
    else:
        config = GameConfig()

    store = JsonFileStore(environ.get('RISING_LION_SCORES', DEFAULT_SCORES_FILE))
    return Simulation(config=config, clock=SystemClock(), store=store)


# =============================================================================
# GAME STATE
# =============================================================================

class GameState:
    """Terminal front-end: keys in, frames out."""

    def __init__(self, term: Terminal, sim: Simulation):
        self.term = term
        self.sim = sim
        self.renderer = GameRenderer(term, sim.config.width, sim.config.height)
        self.input_handler = InputHandler()
        self.running = True

    def handle_input(self):
        """Drain all pending input from the terminal."""
        self.input_handler.text_mode = self.sim.phase is Phase.NAME_INPUT

        key = self.term.inkey(timeout=0)
        while key:
            self.input_handler.process_key(key)
            key = self.term.inkey(timeout=0)

        for char in self.input_handler.consume_typed():
            self.sim.type_name_char(char)

        action = self.input_handler.consume_action()
        while action is not None:
            self.apply_action(action)
            action = self.input_handler.consume_action()

    def apply_action(self, action: str):
        sim = self.sim
        if action == ACTION_START:
            if sim.start_game():
                self.input_handler.release_all()
        elif action == ACTION_MENU:
            sim.return_to_menu()
        elif action == ACTION_LEADERBOARD:
            sim.open_leaderboard()
        elif action == ACTION_QUIT:
            self.running = False
        elif action == ACTION_SUBMIT:
            sim.submit_name()
        elif action == ACTION_CANCEL:
            sim.cancel_name_entry()
        elif action == ACTION_BACKSPACE:
            sim.name_backspace()

    def update(self):
        """Run one fixed-timestep tick."""
        self.input_handler.update()
        self.sim.update(self.input_handler.controls())

    def draw(self):
        if (self.term.width, self.term.height) != (self.renderer.width, self.renderer.height):
            self.renderer.resize(self.term.width, self.term.height)
            print(self.term.home + self.term.clear, end='', flush=True)

        output = render(self.renderer, self.sim.snapshot())
        if output:
            print(output, end='', flush=True)


# =============================================================================
# MAIN LOOP
# =============================================================================

MAX_TICKS_PER_FRAME = 4
MAX_FRAME_DELTA = FRAME_TIME * 5


def run_loop(game: GameState):
    """
    Fixed 60 Hz simulation with rendering once per frame. A slow frame is
    caught up with at most MAX_TICKS_PER_FRAME ticks; anything beyond
    that is dropped rather than queued.
    """
    clock = time.perf_counter
    previous = clock()
    backlog = 0.0

    while game.running:
        frame_start = clock()
        backlog += min(frame_start - previous, MAX_FRAME_DELTA)
        previous = frame_start

        game.handle_input()

        for _ in range(MAX_TICKS_PER_FRAME):
            if backlog < FRAME_TIME:
                break
            game.update()
            backlog -= FRAME_TIME

        game.draw()

        idle = FRAME_TIME - (clock() - frame_start)
        if idle > 0.001:
            time.sleep(idle * 0.9)


def main():
    """Console entry point."""
    setup_logging()

    try:
        sim = build_simulation()
    except ConfigError as exc:
        print(f'ERROR: {exc}')
        sys.exit(1)

    term = Terminal()
    if term.width < MIN_WIDTH or term.height < MIN_HEIGHT:
        print(f'Terminal is {term.width}x{term.height}; '
              f'Rising Lion needs at least {MIN_WIDTH}x{MIN_HEIGHT}.')
        sys.exit(1)

    logger.info('Starting Operation Rising Lion (%dx%d field)',
                sim.config.width, sim.config.height)

    with term.fullscreen(), term.cbreak(), term.hidden_cursor():
        game = GameState(term, sim)
        sim.leaderboard.refresh()
        print(term.home + term.clear, end='', flush=True)
        run_loop(game)
        print(term.normal, end='', flush=True)

    logger.info('Exited')


if __name__ == '__main__':
    main()
