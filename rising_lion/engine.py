"""
Terminal Renderer
==================
Maps the playfield (measured in pixels) onto terminal cells and pushes
frames through a diffing screen buffer, so only changed cells are
written.
"""

from dataclasses import dataclass, field
from typing import List, NamedTuple

try:
    from blessed import Terminal
except ImportError:
    raise ImportError("'blessed' library required. Install with: pip install blessed")


# xterm-256 palette indices
NEON_CYAN = 51
NEON_MAGENTA = 201
NEON_YELLOW = 226
NEON_GREEN = 46
NEON_RED = 196
NEON_ORANGE = 208

GRAY_LIGHT = 252
GRAY_MED = 245
GRAY_DARK = 238
GRAY_DARKER = 235

WHITE = 255
DEFAULT_FG = 7

# Status lines below the playfield
HUD_ROWS = 2


class Cell(NamedTuple):
    char: str = ' '
    fg_color: int = DEFAULT_FG


BLANK = Cell()


def _blank_grid(width: int, height: int) -> List[List[Cell]]:
    return [[BLANK] * width for _ in range(height)]


class DoubleBuffer:
    """
    Two cell grids. Drawing fills `back`; present() compares it with
    `front` (what the terminal currently shows), returns the escape
    sequences for the differing cells and then swaps the grids.
    """

    def __init__(self, term: Terminal):
        self.term = term
        self.width = term.width
        self.height = term.height
        self.front = _blank_grid(self.width, self.height)
        self.back = _blank_grid(self.width, self.height)

    def resize(self, width: int, height: int):
        self.width, self.height = width, height
        self.front = _blank_grid(width, height)
        self.back = _blank_grid(width, height)

    def clear_back(self):
        for row in self.back:
            row[:] = [BLANK] * self.width

    def put(self, x: int, y: int, char: str, fg_color: int = DEFAULT_FG):
        if 0 <= y < self.height and 0 <= x < self.width:
            self.back[y][x] = Cell(char or ' ', fg_color)

    def put_string(self, x: int, y: int, text: str, fg_color: int = DEFAULT_FG):
        for offset, char in enumerate(text):
            self.put(x + offset, y, char, fg_color)

    def present(self) -> str:
        term = self.term
        out = []
        for y, (new_row, old_row) in enumerate(zip(self.back, self.front)):
            for x, cell in enumerate(new_row):
                if cell != old_row[x]:
                    out.append(term.move_xy(x, y) + term.normal
                               + term.color(cell.fg_color) + cell.char)
        self.front, self.back = self.back, self.front
        return ''.join(out)


@dataclass
class GameRenderer:
    """
    Terminal renderer for a playfield of `field_width` x `field_height`
    pixels. The bottom HUD_ROWS rows are reserved for the status line.
    """
    term: Terminal
    field_width: float
    field_height: float
    buffer: DoubleBuffer = field(init=False)

    def __post_init__(self):
        self.buffer = DoubleBuffer(self.term)

    @property
    def width(self) -> int:
        return self.buffer.width

    @property
    def height(self) -> int:
        return self.buffer.height

    @property
    def game_height(self) -> int:
        """Rows available to the playfield."""
        return self.buffer.height - HUD_ROWS

    def to_cell(self, px: float, py: float):
        """Map a playfield pixel to a terminal cell."""
        cx = int(px / self.field_width * self.width)
        cy = int(py / self.field_height * self.game_height)
        return cx, cy

    def begin_frame(self):
        self.buffer.clear_back()

    def end_frame(self) -> str:
        return self.buffer.present()

    def put(self, x: int, y: int, char: str, fg_color: int = DEFAULT_FG):
        self.buffer.put(x, y, char, fg_color)

    def put_string(self, x: int, y: int, text: str, fg_color: int = DEFAULT_FG):
        self.buffer.put_string(x, y, text, fg_color)

    def put_centered(self, y: int, text: str, fg_color: int = DEFAULT_FG):
        self.put_string(self.width // 2 - len(text) // 2, y, text, fg_color)

    def fill_box(self, px: float, py: float, pw: float, ph: float,
                 char: str, color: int):
        """Fill the cells covered by a playfield box, clipped to the field."""
        x0, y0 = self.to_cell(px, py)
        x1, y1 = self.to_cell(px + pw, py + ph)
        x1 = max(x1, x0 + 1)
        y1 = max(y1, y0 + 1)
        for cy in range(max(0, y0), min(self.game_height, y1)):
            for cx in range(max(0, x0), min(self.width, x1)):
                self.buffer.put(cx, cy, char, color)

    def resize(self, width: int, height: int):
        self.buffer.resize(width, height)

    def draw_box(self, x: int, y: int, w: int, h: int, color: int = GRAY_DARK,
                 char: str = '#'):
        """Draw a rectangular border in cell coordinates."""
        for i in range(w):
            self.put(x + i, y, char, color)
            self.put(x + i, y + h - 1, char, color)
        for j in range(1, h - 1):
            self.put(x, y + j, char, color)
            self.put(x + w - 1, y + j, char, color)
