from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional, Tuple

try:
    import pygame  # type: ignore
except Exception:
    pygame = None

from config import CELL, GRIDDLE_COLS, GRIDDLE_ROWS, MATCH_DURATION_MS, PATIENCE_MAX, PLATE_CAPACITY
from difficulty_catalog import DEFAULT_CURVE_KEY, DIFFICULTY_FILE, load_difficulty_curve
from takoyaki import CookingLevel, MatchPhase, TakoyakiSession, Tool, Topping
from takoyaki.entities import APPLICABLE_TOPPINGS
from takoyaki.scoring import count_servable

logger = logging.getLogger(__name__)

TOOL_KEYS: List[Tool] = [
    Tool.BATTER,
    Tool.OCTOPUS,
    Tool.STICK,
    Tool.SAUCE,
    Tool.NEGI,
    Tool.KATSUOBUSHI,
    Tool.NORI,
    Tool.SERVE,
]

PLATE_COLS = 2
PLATE_SIZE = 56
GRIDDLE_ORIGIN = (40, 110)
PLATES_ORIGIN = (40 + GRIDDLE_COLS * CELL + 50, 110)
CUSTOMER_PANEL = (PLATES_ORIGIN[0] + PLATE_COLS * PLATE_SIZE + 50, 110, 300, 300)


# ---------------------------------------------------------------------------
# Headless autoplay
# ---------------------------------------------------------------------------


def _griddle_pass(session: TakoyakiSession, now: int) -> None:
    for row, col, cell in session.griddle.positions():
        if not cell.has_batter:
            session.select_tool(Tool.BATTER)
        elif not cell.has_octopus:
            session.select_tool(Tool.OCTOPUS)
        elif cell.is_flipped and cell.cooking_level == CookingLevel.RAW:
            continue
        else:
            session.select_tool(Tool.STICK)
        session.click_cell(row, col, now)


def _dressing_pass(session: TakoyakiSession) -> None:
    customer = session.customer
    need = customer.order.remaining_topping_breakdown.copy() if customer else None

    session.select_tool(Tool.SAUCE)
    for index, item in enumerate(session.plates.items):
        if not item.sauce:
            session.click_plate(index)
        if need is not None and item.topping != Topping.NONE:
            need.add(item.topping, -1)

    if need is None:
        return
    for index, item in enumerate(session.plates.items):
        if not item.sauce or item.topping != Topping.NONE:
            continue
        wanted = next((topping for topping in APPLICABLE_TOPPINGS if need.get(topping) > 0), None)
        if wanted is None:
            need.add(Topping.NONE, -1)
            continue
        session.select_tool(Tool(wanted.value))
        if session.click_plate(index):
            need.add(wanted, -1)


def autoplay_step(session: TakoyakiSession, now: int) -> None:
    """Play one round of inputs the way a tidy player would."""
    if not session.is_running:
        return
    _griddle_pass(session, now)
    _dressing_pass(session)

    customer = session.customer
    if customer is None or not session.plates.items:
        return
    ready = count_servable(session.plates.items)
    if ready >= customer.order.remaining_quantity or session.plates.is_full:
        session.select_tool(Tool.SERVE)
        outcome = session.attempt_serve(now)
        logger.info(outcome.message)


def run_headless(seed: int, step_ms: int, curve: Optional[Dict] = None) -> Dict:
    session = TakoyakiSession(seed=seed, curve=curve)
    now = 0
    session.start_match(now)
    while session.is_running and now <= MATCH_DURATION_MS:
        now += step_ms
        session.update(now)
        autoplay_step(session, now)

    summary = session.summary()
    print(
        f"headless_done t={now / 1000:.1f}s score={summary['score']} level={summary['level']} "
        f"rating[{summary['rating']}]"
        f" customers[served={summary['served_customers']},happy={summary['happy_customers']},"
        f"neutral={summary['neutral_customers']},angry={summary['angry_customers']}]"
        f" items[served={summary['items_served']},correct={summary['items_correct']},"
        f"discarded={summary['items_discarded']}] bonus={summary['happy_bonus']}"
    )
    return summary


# ---------------------------------------------------------------------------
# Graphical view
# ---------------------------------------------------------------------------


class GameUI:
    def __init__(self, session: TakoyakiSession):
        if pygame is None:
            raise RuntimeError("pygame is required for graphical mode. Relaunch with --headless.")
        pygame.init()
        if not pygame.display.get_init():
            raise RuntimeError("Display subsystem is unavailable. Relaunch with --headless.")
        self.session = session
        self.width = CUSTOMER_PANEL[0] + CUSTOMER_PANEL[2] + 40
        self.height = 560
        try:
            self.screen = pygame.display.set_mode((self.width, self.height))
        except pygame.error as exc:
            raise RuntimeError(f"Could not open a window ({exc}). Relaunch with --headless.") from exc
        pygame.display.set_caption("Takoyaki Tycoon")
        self.clock = pygame.time.Clock()
        self.font = pygame.font.SysFont("arial", 22)
        self.small = pygame.font.SysFont("arial", 16)
        self.running = True
        self.notice = "Press Enter to open the shop"

        self.palette = {
            "bg": (34, 24, 20),
            "panel": (58, 42, 34),
            "text": (250, 240, 220),
            "muted": (200, 180, 150),
            "empty": (70, 70, 74),
            "raw": (240, 220, 160),
            "perfect": (214, 150, 70),
            "burnt": (60, 40, 30),
            "plate": (235, 235, 240),
            "sauce": (120, 60, 30),
        }
        self.topping_colors = {
            Topping.NEGI: (90, 170, 80),
            Topping.KATSUOBUSHI: (230, 180, 140),
            Topping.NORI: (30, 70, 40),
        }

    def _now(self) -> int:
        return pygame.time.get_ticks()

    def _cell_rect(self, row: int, col: int) -> "pygame.Rect":
        x0, y0 = GRIDDLE_ORIGIN
        return pygame.Rect(x0 + col * CELL + 4, y0 + row * CELL + 4, CELL - 8, CELL - 8)

    def _plate_rect(self, index: int) -> "pygame.Rect":
        x0, y0 = PLATES_ORIGIN
        row, col = divmod(index, PLATE_COLS)
        return pygame.Rect(x0 + col * PLATE_SIZE + 3, y0 + row * PLATE_SIZE + 3, PLATE_SIZE - 6, PLATE_SIZE - 6)

    def _tool_rect(self, index: int) -> "pygame.Rect":
        return pygame.Rect(40 + index * 96, self.height - 70, 88, 40)

    def _serve(self) -> None:
        outcome = self.session.attempt_serve(self._now())
        self.notice = outcome.message

    def _handle_click(self, pos: Tuple[int, int]) -> None:
        now = self._now()
        for index, tool in enumerate(TOOL_KEYS):
            if self._tool_rect(index).collidepoint(pos):
                self.session.select_tool(tool)
                return
        for row in range(GRIDDLE_ROWS):
            for col in range(GRIDDLE_COLS):
                if self._cell_rect(row, col).collidepoint(pos):
                    if self.session.click_cell(row, col, now) == "plates_full":
                        self.notice = "Plates are full!"
                    return
        for index in range(PLATE_CAPACITY):
            if self._plate_rect(index).collidepoint(pos):
                self.session.click_plate(index)
                return
        if pygame.Rect(*CUSTOMER_PANEL).collidepoint(pos) and self.session.tool == Tool.SERVE:
            self._serve()

    def handle_input(self) -> None:
        for ev in pygame.event.get():
            if ev.type == pygame.QUIT:
                self.running = False
            if ev.type == pygame.KEYDOWN:
                if pygame.K_1 <= ev.key <= pygame.K_8:
                    self.session.select_tool(TOOL_KEYS[ev.key - pygame.K_1])
                elif ev.key == pygame.K_SPACE:
                    self._serve()
                elif ev.key == pygame.K_RETURN and self.session.phase == MatchPhase.NOT_STARTED:
                    self.session.start_match(self._now())
                    self.notice = ""
                elif ev.key == pygame.K_r and self.session.phase == MatchPhase.ENDED:
                    self.session.start_match(self._now())
                    self.notice = ""
            if ev.type == pygame.MOUSEBUTTONDOWN and ev.button == 1:
                self._handle_click(pygame.mouse.get_pos())

    def _blit(self, text: str, pos: Tuple[int, int], *, small: bool = False, color: str = "text") -> None:
        font = self.small if small else self.font
        self.screen.blit(font.render(text, True, self.palette[color]), pos)

    def _draw_griddle(self, snap: Dict) -> None:
        for cell in snap["cells"]:
            rect = self._cell_rect(cell["row"], cell["col"])
            pygame.draw.rect(self.screen, self.palette["panel"], rect, border_radius=12)
            if not cell["has_batter"]:
                pygame.draw.circle(self.screen, self.palette["empty"], rect.center, CELL // 3)
                continue
            pygame.draw.circle(self.screen, self.palette[cell["cooking_level"]], rect.center, CELL // 3)
            if cell["has_octopus"]:
                pygame.draw.circle(self.screen, (200, 70, 90), rect.center, 8)
            if cell["is_flipped"]:
                pygame.draw.arc(self.screen, self.palette["text"], rect.inflate(-20, -20), 0.3, 2.8, 2)

    def _draw_plates(self, snap: Dict) -> None:
        for index in range(PLATE_CAPACITY):
            rect = self._plate_rect(index)
            pygame.draw.rect(self.screen, self.palette["plate"], rect, width=2, border_radius=8)
            if index >= len(snap["plates"]):
                continue
            item = snap["plates"][index]
            pygame.draw.circle(self.screen, self.palette["perfect"], rect.center, PLATE_SIZE // 3)
            if item["sauce"]:
                pygame.draw.circle(self.screen, self.palette["sauce"], rect.center, PLATE_SIZE // 5)
            if item["topping"] != Topping.NONE.value:
                color = self.topping_colors[Topping(item["topping"])]
                pygame.draw.rect(self.screen, color, (rect.centerx - 6, rect.centery - 3, 12, 6))

    def _draw_customer(self, snap: Dict) -> None:
        x, y, w, h = CUSTOMER_PANEL
        pygame.draw.rect(self.screen, self.palette["panel"], (x, y, w, h), border_radius=14)
        customer = snap["customer"]
        if customer is None:
            self._blit("Waiting for a customer...", (x + 16, y + 16), small=True, color="muted")
            return
        self._blit(f"{customer['id']} ({customer['mood']})", (x + 16, y + 12))
        self._blit(customer["message"], (x + 16, y + 44), small=True, color="muted")
        bar = pygame.Rect(x + 16, y + 72, w - 32, 14)
        pygame.draw.rect(self.screen, self.palette["empty"], bar, border_radius=7)
        fill = bar.copy()
        fill.w = int(bar.w * max(0, customer["patience"]) / PATIENCE_MAX)
        pygame.draw.rect(self.screen, self.palette["perfect"], fill, border_radius=7)
        for i, line in enumerate(customer["order_text"].splitlines()):
            self._blit(line, (x + 16, y + 100 + i * 24), small=True)

    def _draw_toolbar(self, snap: Dict) -> None:
        for index, tool in enumerate(TOOL_KEYS):
            rect = self._tool_rect(index)
            selected = tool.value == snap["tool"]
            pygame.draw.rect(self.screen, self.palette["perfect" if selected else "panel"], rect, border_radius=8)
            self._blit(f"{index + 1} {tool.value[:7]}", (rect.x + 6, rect.y + 11), small=True)

    def draw(self) -> None:
        snap = self.session.snapshot(self._now())
        self.screen.fill(self.palette["bg"])
        self._blit(
            f"Score {snap['score']}   Level {snap['level']}   Time {snap['time']}",
            (40, 30),
        )
        self._draw_griddle(snap)
        self._draw_plates(snap)
        self._draw_customer(snap)
        self._draw_toolbar(snap)

        if snap["phase"] == MatchPhase.ENDED.value:
            summary = self.session.summary()
            self.notice = f"{summary['rating']}! Final score {summary['score']}. Press R to play again."
        elif snap["events"] and not self.notice:
            self._blit(snap["events"][-1], (40, self.height - 110), small=True, color="muted")
        if self.notice:
            self._blit(self.notice, (40, self.height - 110), small=True)
        pygame.display.flip()

    def run(self) -> None:
        while self.running:
            self.clock.tick(60)
            self.handle_input()
            self.session.update(self._now())
            self.draw()
        pygame.quit()


def main() -> None:
    parser = argparse.ArgumentParser(description="Takoyaki Tycoon short-order cooking game")
    parser.add_argument("--headless", action="store_true", help="autoplay one match without graphics")
    parser.add_argument("--seed", type=int, default=7, help="random seed for customer orders")
    parser.add_argument("--step-ms", type=int, default=100, help="headless simulated time step (ms)")
    parser.add_argument("--difficulty-file", type=Path, default=DIFFICULTY_FILE, help="difficulty curve catalog")
    parser.add_argument("--difficulty", default=DEFAULT_CURVE_KEY, help="difficulty curve key")
    parser.add_argument("--verbose", action="store_true", help="log engine events")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    curve = load_difficulty_curve(args.difficulty_file, args.difficulty)

    if args.headless:
        run_headless(args.seed, max(1, args.step_ms), curve)
        return

    try:
        ui = GameUI(TakoyakiSession(seed=args.seed, curve=curve))
    except RuntimeError as exc:
        print(f"Startup error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc
    ui.run()


if __name__ == "__main__":
    main()
