"""
Screens
========
One render function per game phase. Each reads a Snapshot and writes
into the renderer's back buffer; none of them touch the simulation.
"""

import math

from .engine import (
    GameRenderer,
    NEON_CYAN, NEON_MAGENTA, NEON_YELLOW, NEON_GREEN, NEON_RED, NEON_ORANGE,
    GRAY_LIGHT, GRAY_MED, GRAY_DARK, GRAY_DARKER, WHITE
)
from .game import Phase, Snapshot

TITLE_ART = [
    r" ___ ___ ___ ___ _  _  ___   _    ___ ___  _  _ ",
    r"| _ \_ _/ __|_ _| \| |/ __| | |  |_ _/ _ \| \| |",
    r"|   /| |\__ \| || .` | (_ | | |__ | | (_) | .` |",
    r"|_|_\___|___/___|_|\_|\___| |____|___\___/|_|\_|",
]

TARGET_GLYPHS = {'pristine': ('R', NEON_GREEN), 'damaged': ('r', NEON_ORANGE),
                 'destroyed': ('.', GRAY_DARK)}


def render_splash(renderer: GameRenderer, snap: Snapshot):
    height = renderer.game_height
    art_y = max(0, height // 2 - 6)
    for i, line in enumerate(TITLE_ART):
        color = NEON_YELLOW if i % 2 == 0 else NEON_ORANGE
        renderer.put_centered(art_y + i, line, color)

    y = art_y + len(TITLE_ART) + 2
    renderer.put_centered(y, 'Destroy the reactors. Dodge the flak.', GRAY_MED)
    if (snap.tick // 30) % 2 == 0:
        renderer.put_centered(y + 2, '[ ENTER - START ]', NEON_GREEN)
    renderer.put_centered(y + 3, '[ T - TOP SCORES ]   [ Q - QUIT ]', NEON_CYAN)

    controls = [
        'ARROWS/WASD - Fly     SPACE - Fire',
        'ESC - Back to menu',
    ]
    for i, line in enumerate(controls):
        renderer.put_centered(y + 5 + i, line, GRAY_DARK)

    renderer.draw_box(0, 0, renderer.width, height, GRAY_DARKER, '.')


def _render_ground(renderer: GameRenderer, snap: Snapshot):
    """Scrolling ground texture, one dotted row per background tile."""
    rows = renderer.game_height
    shift = int(snap.background_offset / 25)
    for cy in range(rows):
        if (cy + shift) % 4 == 0:
            for cx in range(0, renderer.width, 6):
                renderer.put(cx + (cy % 3), cy, '.', GRAY_DARKER)


def render_playing(renderer: GameRenderer, snap: Snapshot):
    _render_ground(renderer, snap)

    for t in snap.targets:
        glyph, color = TARGET_GLYPHS.get(t.state, ('R', NEON_GREEN))
        if t.state == 'pristine' and math.sin(t.glow_phase) > 0.6:
            color = WHITE
        renderer.fill_box(t.x, t.y, t.width, t.height, glyph, color)

    for g in snap.emplacements:
        if g.state == 'destroyed':
            renderer.fill_box(g.x, g.y, g.width, g.height, 'x', GRAY_MED)
        else:
            glyph = '<' if g.side == 'right' else '>'
            renderer.fill_box(g.x, g.y, g.width, g.height, glyph, NEON_RED)

    for r in snap.rockets:
        cx, cy = renderer.to_cell(r.x, r.y)
        renderer.put(cx, cy, '|', NEON_YELLOW)

    for b in snap.rounds:
        cx, cy = renderer.to_cell(b.x, b.y)
        renderer.put(cx, cy, '*', NEON_RED)

    a = snap.airplane
    renderer.fill_box(a.x, a.y, a.width, a.height, 'A', NEON_CYAN)

    for e in snap.explosions:
        cx, cy = renderer.to_cell(e.x, e.y)
        color = NEON_YELLOW if e.opacity > 0.6 else (NEON_ORANGE if e.opacity > 0.3 else GRAY_MED)
        reach = max(1, int(e.radius / renderer.field_width * renderer.width))
        for dx in range(-reach, reach + 1):
            renderer.put(cx + dx, cy, '*' if abs(dx) == reach else '#', color)

    render_hud(renderer, snap)


def render_hud(renderer: GameRenderer, snap: Snapshot):
    ui_y = renderer.game_height
    renderer.put_string(0, ui_y, '=' * renderer.width, GRAY_DARK)
    renderer.put_string(2, ui_y, ' RISING LION ', NEON_YELLOW)

    row = ui_y + 1
    filled = '|' * snap.health + '.' * (snap.max_health - snap.health)
    color = NEON_GREEN if snap.health > snap.max_health * 0.4 else NEON_RED
    renderer.put_string(2, row, 'HEALTH:', GRAY_MED)
    renderer.put_string(10, row, f'[{filled}]', color)

    stats = (f'SCORE:{snap.score}  HITS:{snap.hit_count}  '
             f'DESTROYED:{snap.destroyed_count}  GUNS:{snap.emplacement_kills}')
    renderer.put_string(max(20, renderer.width - len(stats) - 2), row, stats, NEON_YELLOW)


def render_game_over(renderer: GameRenderer, snap: Snapshot):
    height = renderer.game_height
    y = max(0, height // 2 - 3)
    renderer.put_centered(y, 'G A M E   O V E R', NEON_RED)
    renderer.put_centered(y + 2, f'FINAL SCORE: {snap.score}', NEON_YELLOW)
    renderer.put_centered(
        y + 3, f'REACTORS HIT: {snap.hit_count}   DESTROYED: {snap.destroyed_count}',
        GRAY_LIGHT,
    )
    renderer.put_centered(y + 5, f'Returning in {snap.game_over_remaining:.0f}s', GRAY_MED)


def render_top_scores(renderer: GameRenderer, snap: Snapshot):
    height = renderer.game_height
    y = max(0, height // 2 - 5)
    renderer.put_centered(y, 'T O P   S C O R E S', NEON_MAGENTA)
    if not snap.leaderboard:
        renderer.put_centered(y + 3, 'No scores yet', GRAY_MED)
    else:
        medals = [NEON_YELLOW, GRAY_LIGHT, NEON_ORANGE]
        for i, entry in enumerate(snap.leaderboard):
            line = f'{i + 1}. {entry.name:<12} {entry.score:>6}'
            renderer.put_centered(y + 3 + i, line, medals[i % len(medals)])
    renderer.put_centered(y + 8, '[ ESC - BACK ]', NEON_CYAN)


def render_name_input(renderer: GameRenderer, snap: Snapshot):
    height = renderer.game_height
    y = max(0, height // 2 - 4)
    renderer.put_centered(y, 'NEW HIGH SCORE!', NEON_YELLOW)
    renderer.put_centered(y + 1, f'SCORE: {snap.score}', WHITE)
    renderer.put_centered(y + 3, 'Enter your name:', GRAY_MED)
    cursor = '_' if (snap.tick // 30) % 2 == 0 else ' '
    renderer.put_centered(y + 4, f'[ {snap.name_text}{cursor:<1} ]', NEON_CYAN)
    renderer.put_centered(y + 6, '[ ENTER - SAVE ]   [ ESC - SKIP ]', GRAY_DARK)


SCREENS = {
    Phase.SPLASH: render_splash,
    Phase.PLAYING: render_playing,
    Phase.GAME_OVER: render_game_over,
    Phase.TOP_SCORES: render_top_scores,
    Phase.NAME_INPUT: render_name_input,
}


def render(renderer: GameRenderer, snap: Snapshot) -> str:
    """Draw one frame and return the terminal output for it."""
    renderer.begin_frame()
    SCREENS[snap.phase](renderer, snap)
    return renderer.end_frame()
