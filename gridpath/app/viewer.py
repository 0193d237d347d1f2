# gridpath/app/viewer.py
#!/usr/bin/env python3
"""
Grid Pathfinding Sandbox: Paint + Run + Metrics

- Mouse (over the grid):
    [Left]            -> paint obstacle
    [Right]           -> paint weighted terrain (cost 2)
    [Shift]+click     -> clear cell
- Keyboard:
    [S]/[E]           -> place start / end under the cursor
    [ENTER]/[SPACE]   -> run/pause the selected algorithm
    [N]               -> single step
    [TAB]/[ALT]       -> cycle algorithm (BFS -> Dijkstra -> DFS)
    [R]               -> reset the grid
    [+]/[-]           -> steps/sec
    [Q]/[ESC]         -> quit

Config: GRIDPATH_ALGO / GRIDPATH_CELL / GRIDPATH_SIZE / GRIDPATH_LOG
        or --algo= --cell= --size=WxH --log=
"""

# --- bootstrap import path so `from gridpath...` works when run as a script ---
import sys, time
from pathlib import Path
_REPO_ROOT = Path(__file__).resolve().parents[2]
if str(_REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(_REPO_ROOT))
# -------------------------------------------------------------------------

from typing import Callable, Dict, List, Optional, Set, Tuple
import logging
import pygame

from gridpath import config
from gridpath.core.errors import GridPathError
from gridpath.core.session import Session, next_algorithm
from gridpath.core.types import Algorithm, NodeState, StepResult

logger = logging.getLogger(__name__)

# ---------- Layout ----------
PANEL_W = 300            # right band: metrics + buttons
GRID_MARGIN = 16
FONT_NAME = None  # default pygame font

# Colors
GRID_LINE   = ( 60, 64, 72)
EMPTY_FILL  = (235,238,242)
NEON_CYAN_A = (0,150,255,110)

CARD_BG     = (24,28,36,220)
CARD_HI     = (255,255,255,18)
TEXT_LIGHT  = (230,235,240)
TEXT_WARN   = (255,120,110)
TEXT_DIM    = (120,126,136)
ACCENT_GOLD = (255,210,0)

BACKDROP    = ( 28, 31, 38)
PANEL_FILL  = ( 20, 23, 29)
BTN_IDLE    = ( 40, 45, 55)
BTN_HOVER   = ( 52, 58, 70)
BTN_ON      = ( 58, 86,160)
BTN_OFF     = ( 32, 35, 42)

# frame around the grid plate, keyed by viewer state
STATUS_COLORS: Dict[str, Tuple[int, int, int]] = {
    "Idle":    GRID_LINE,
    "Paused":  (120,170,255),
    "Running": (  0,150,255),
    "Done":    (255,230,  0),
    "No path": TEXT_WARN,
}

STATE_COLORS: Dict[NodeState, Tuple[int, ...]] = {
    NodeState.VISITED:  (128,128,128,100),
    NodeState.WEIGHTED: (135,  0,  0),
    NodeState.OBSTACLE: ( 46,139, 87),
    NodeState.PATH:     (255,230,  0),
    NodeState.END:      (220, 50, 47),
    NodeState.START:    (  0,200,220),
}

USAGE = """How to use:
  'S': set a starting node        'E': set an ending node
  'R': restart                    'Enter': run (only after setting start and end)
  'Left Mouse': add obstacle      'Right Mouse': add weighted cell (edge weight 2)
  'Shift' + click: clear cell     'Tab'/'Alt': switch algorithm"""


# ---------- Panel button ----------
class UIButton:
    """Panel button; highlight and availability are polled from the viewer every frame."""

    def __init__(self, label: str, rect: pygame.Rect, callback, *,
                 active: Optional[Callable[[], bool]] = None,
                 enabled: Optional[Callable[[], bool]] = None):
        self.label = label
        self.rect = rect
        self.callback = callback
        self.hover = False
        self._active = active or (lambda: False)
        self._enabled = enabled or (lambda: True)

    @property
    def active(self) -> bool:
        return self._active()

    @property
    def enabled(self) -> bool:
        return self._enabled()

    def draw(self, screen: pygame.Surface, font: pygame.font.Font):
        if not self.enabled:
            bg, fg = BTN_OFF, TEXT_DIM
        elif self.active:
            bg, fg = BTN_ON, TEXT_LIGHT
        elif self.hover:
            bg, fg = BTN_HOVER, TEXT_LIGHT
        else:
            bg, fg = BTN_IDLE, TEXT_LIGHT

        pygame.draw.rect(screen, bg, self.rect, border_radius=6)
        if self.active and self.enabled:
            pygame.draw.rect(screen, ACCENT_GOLD, self.rect, width=2, border_radius=6)
        text = font.render(self.label, True, fg)
        screen.blit(text, text.get_rect(center=self.rect.center))

    def handle_mouse(self, event: pygame.event.Event) -> bool:
        if event.type == pygame.MOUSEMOTION:
            self.hover = self.rect.collidepoint(event.pos)
            return False
        if (event.type == pygame.MOUSEBUTTONDOWN and event.button == 1
                and self.enabled and self.rect.collidepoint(event.pos)):
            self.callback()
            return True
        return False


# ---------- Viewer ----------
class Viewer:
    def __init__(self, session: Session, cell_size: int, algorithm: Algorithm):
        pygame.init()

        self.session = session
        self.cell_size = cell_size
        self.font_small = pygame.font.Font(FONT_NAME, 14)
        self.font = pygame.font.Font(FONT_NAME, 18)
        self.font_big = pygame.font.Font(FONT_NAME, 22)

        grid_px_w = GRID_MARGIN*2 + session.width * cell_size
        grid_px_h = GRID_MARGIN*2 + session.height * cell_size
        win_w = grid_px_w + PANEL_W
        win_h = max(grid_px_h, 560)

        self.screen = pygame.display.set_mode((win_w, win_h))
        pygame.display.set_caption(f"Grid Pathfinding: {algorithm.value}")

        self._buttons: List[UIButton] = []
        self._layout(win_w, win_h)

        self.open_set: Set[int] = set()
        self.running = False
        self.clock = pygame.time.Clock()
        self.steps_per_sec = config.STEPS_PER_SEC
        self.state = "Idle"
        self.message = ""
        self.selected_algo = algorithm
        self._last_step_t = 0.0
        self._last_metrics: dict = {}

    # ---------- layout ----------
    def _layout(self, win_w: int, win_h: int):
        grid_plate_w = self.session.width  * self.cell_size + 2 * GRID_MARGIN
        grid_plate_h = self.session.height * self.cell_size + 2 * GRID_MARGIN
        top_y = max(0, (win_h - grid_plate_h) // 2)

        self.canvas_rect = pygame.Rect(0, top_y, grid_plate_w, grid_plate_h)
        self._grid_origin = (self.canvas_rect.x + GRID_MARGIN,
                             self.canvas_rect.y + GRID_MARGIN)
        self._right_band = pygame.Rect(self.canvas_rect.right, 0,
                                       max(PANEL_W, win_w - self.canvas_rect.right), win_h)
        self._build_buttons()

    def _cell_at(self, pos: Tuple[int, int]) -> Optional[int]:
        ox, oy = self._grid_origin
        col = (pos[0] - ox) // self.cell_size
        row = (pos[1] - oy) // self.cell_size
        if 0 <= col < self.session.width and 0 <= row < self.session.height:
            return self.session.index_of(col, row)
        return None

    def run(self):
        while True:
            self._handle_events()
            self._paint_with_mouse()
            if self.running:
                self._tick_algorithm()
            self._draw()
            self.clock.tick(60)

    # ---------- searching ----------
    def _ensure_started(self) -> bool:
        if self.session.search is not None:
            return True
        try:
            self.session.start(self.selected_algo)
        except GridPathError as ex:
            self.message = str(ex)
            self.state = "Idle"
            self.running = False
            return False
        self.message = ""
        return True

    def _tick_algorithm(self):
        t0 = time.time()
        step_interval = 1.0 / max(1, self.steps_per_sec)
        if t0 - self._last_step_t >= step_interval:
            self._last_step_t = t0
            self._do_step()

    def _do_step(self):
        if not self._ensure_started():
            return
        res: StepResult = self.session.step()
        for c in res.opened: self.open_set.add(c)
        for c in res.closed: self.open_set.discard(c)
        if res.status == "done":
            self.state = "Done"; self.running = False; self.open_set.clear()
        elif res.status == "no_path":
            self.state = "No path"; self.running = False; self.open_set.clear()
        elif res.status in ("running","idle"):
            self.state = "Running" if self.running else "Paused"
        if res.metrics:
            self._last_metrics = res.metrics

    def _toggle_run(self):
        if self.state in ("Done", "No path"):
            self.message = "Press R to reset before running again"
            return
        if not self._ensure_started():
            return
        self.running = not self.running
        self.state = "Running" if self.running else "Paused"

    def _switch_algo(self, algo: Algorithm):
        if self.session.search is not None:
            self.message = "Reset (R) to switch algorithm"
            return
        self.selected_algo = algo
        pygame.display.set_caption(f"Grid Pathfinding: {algo.value}")

    def _reset(self):
        self.running = False
        self.state = "Idle"
        self.message = ""
        self.session.reset()
        self.open_set.clear()
        self._last_metrics = {}

    def _bump_speed(self, dv: int):
        self.steps_per_sec = int(max(1, min(config.MAX_STEPS_PER_SEC, self.steps_per_sec + dv)))

    # ---------- input ----------
    def _paint_with_mouse(self):
        """Held buttons paint every frame, like dragging a brush."""
        if self.session.running:
            return
        left, _, right = pygame.mouse.get_pressed()
        if not (left or right):
            return
        index = self._cell_at(pygame.mouse.get_pos())
        if index is None:
            return
        shift = pygame.key.get_mods() & pygame.KMOD_SHIFT
        if shift:
            self.session.clear_cell(index)
        elif left:
            self.session.set_obstacle(index, True)
        elif right:
            self.session.set_weighted(index, True, config.WEIGHTED_COST)

    def _place_marker(self, key: int):
        if self.session.running:
            return
        index = self._cell_at(pygame.mouse.get_pos())
        if index is None:
            return
        if key == pygame.K_s:
            self.session.set_start(index)
        else:
            self.session.set_end(index)

    def _handle_events(self):
        for e in pygame.event.get():
            if e.type == pygame.QUIT:
                pygame.quit(); sys.exit(0)
            elif e.type == pygame.KEYDOWN:
                if e.key in (pygame.K_ESCAPE, pygame.K_q):
                    pygame.quit(); sys.exit(0)
                elif e.key in (pygame.K_SPACE, pygame.K_RETURN):
                    self._toggle_run()
                elif e.key == pygame.K_r:
                    self._reset()
                elif e.key == pygame.K_n:
                    if not self.session.finished:
                        self._do_step()
                elif e.key in (pygame.K_PLUS, pygame.K_EQUALS):
                    self._bump_speed(+5)
                elif e.key in (pygame.K_MINUS, pygame.K_UNDERSCORE):
                    self._bump_speed(-5)
                elif e.key in (pygame.K_TAB, pygame.K_LALT, pygame.K_RALT):
                    self._switch_algo(next_algorithm(self.selected_algo))
                elif e.key in (pygame.K_s, pygame.K_e):
                    self._place_marker(e.key)
            elif e.type in (pygame.MOUSEMOTION, pygame.MOUSEBUTTONDOWN):
                for b in self._buttons:
                    b.handle_mouse(e)

    # ---------- drawing ----------
    def _draw(self):
        self._draw_backdrop()
        self._draw_grid()
        self._draw_metrics_and_buttons()
        pygame.display.flip()

    def _draw_backdrop(self):
        self.screen.fill(BACKDROP)
        pygame.draw.rect(self.screen, PANEL_FILL, self._right_band)
        frame = STATUS_COLORS.get(self.state, GRID_LINE)
        pygame.draw.rect(self.screen, frame, self.canvas_rect.inflate(-6, -6), width=3, border_radius=8)

    def _draw_grid(self):
        cs = self.cell_size
        ox, oy = self._grid_origin
        width = self.session.width

        shade = pygame.Surface((cs, cs), pygame.SRCALPHA)
        for index in range(self.session.graph.node_count):
            col, row = index % width, index // width
            rect = pygame.Rect(ox + col*cs, oy + row*cs, cs, cs)
            pygame.draw.rect(self.screen, EMPTY_FILL, rect)

            color = STATE_COLORS.get(self.session.state_of(index))
            if color is not None and len(color) == 4:
                shade.fill(color)
                self.screen.blit(shade, rect.topleft)
            elif color is not None:
                pygame.draw.rect(self.screen, color, rect)

            if index in self.open_set:
                shade.fill(NEON_CYAN_A)
                self.screen.blit(shade, rect.topleft)

            pygame.draw.rect(self.screen, GRID_LINE, rect, 1)

    # ---------- buttons + metrics ----------
    def _build_buttons(self):
        self._buttons.clear()
        rb = self._right_band
        x = rb.x + 16
        y = rb.y + 250  # leaves space for metrics card above
        w = max(160, rb.width - 32)
        h = 34
        gap = 8
        idle = lambda: self.session.search is None
        live = lambda: not self.session.finished

        def add(label, cb, rect=None, **flags):
            self._buttons.append(UIButton(label, rect or pygame.Rect(x, y, w, h), cb, **flags))

        add("Run / Pause", self._toggle_run, active=lambda: self.running, enabled=live); y += h + gap
        add("Step Once", self._do_step, enabled=live); y += h + gap
        add("Reset", self._reset); y += h + gap

        half = (w - 8) // 2
        add("Speed −", lambda: self._bump_speed(-5), pygame.Rect(x, y, half, h),
            enabled=lambda: self.steps_per_sec > 1)
        add("Speed +", lambda: self._bump_speed(+5), pygame.Rect(x + half + 8, y, half, h),
            enabled=lambda: self.steps_per_sec < config.MAX_STEPS_PER_SEC)
        y += h + gap

        # algorithm choice is locked once a search exists
        for algo in config.ALGORITHM_CYCLE:
            add(f"Algo: {algo.value}", lambda a=algo: self._switch_algo(a),
                active=lambda a=algo: self.selected_algo is a, enabled=idle)
            y += h + gap

    def _draw_metrics_and_buttons(self):
        rb = self._right_band

        card_h = 230
        card = pygame.Surface((rb.width - 20, card_h), pygame.SRCALPHA)
        pygame.draw.rect(card, CARD_BG, card.get_rect(), border_radius=14)
        hi = pygame.Surface((card.get_width(), 24), pygame.SRCALPHA)
        pygame.draw.rect(hi, CARD_HI, hi.get_rect(), border_radius=14)
        card.blit(hi, (0,0))
        self.screen.blit(card, (rb.x + 10, rb.y + 10))

        x0 = rb.x + 24
        y0 = rb.y + 18

        def line(text, big=False, color=TEXT_LIGHT):
            nonlocal y0
            f = self.font_big if big else self.font
            surf = f.render(text, True, color)
            self.screen.blit(surf, (x0, y0))
            y0 += surf.get_height() + 6

        line("Metrics", big=True, color=ACCENT_GOLD)
        m = self._last_metrics
        line(f"Popped: {m.get('popped', 0)}")
        line(f"Open: {m.get('open_size', 0)}")
        line(f"Closed: {m.get('closed_count', 0)}")
        line(f"Path Len: {m.get('path_len', 0)}")
        if m.get("total_cost") is not None:
            line(f"Total Cost: {m['total_cost']}")
        line("-" * 26)
        line(f"Algo: {self.selected_algo.value}   [{self.state}]")
        line(f"Speed: {self.steps_per_sec} steps/s")
        if self.message:
            surf = self.font_small.render(self.message, True, TEXT_WARN)
            self.screen.blit(surf, (x0, y0))

        for b in self._buttons:
            b.draw(self.screen, self.font)


# ---------- main ----------
def main():
    try:
        config.configure_logging()
        algorithm = config.resolve_algorithm()
        cell_size = config.resolve_cell_size()
        width, height = config.resolve_grid_shape()
    except ValueError as ex:
        print(f"Bad configuration: {ex}")
        sys.exit(2)

    print(USAGE)
    logger.info("Grid %dx%d cells at %d px, algorithm %s", width, height, cell_size, algorithm.value)
    session = Session.build(width, height)
    Viewer(session, cell_size, algorithm).run()

if __name__ == "__main__":
    main()
