#!/usr/bin/env python3
"""
Water Quest — Console Vignette
━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

A tiny RPG-style encounter in the terminal. A water spirit asks you to drink
some water; pick YES or NO with the arrow keys and Enter. HP goes up when
you agree and down (never below 1) when you refuse. Ctrl+C to leave.

Usage:
    water-quest-vignette
    python -m water_quest.vignette
"""
from __future__ import annotations
import logging, os, platform, random, sys, time
from typing import Optional

log = logging.getLogger(__name__)

IS_WIN = platform.system() == "Windows"

# ─── Layout ───────────────────────────────────────────────────
CONSOLE_WIDTH, CONSOLE_HEIGHT = 100, 21
BOX_X, BOX_Y = 6, 10
BOX_W, BOX_H = 90, 10
TEXT_X, TEXT_Y = 14, 12
CHOICE_Y = 17
CHOICE_GAP = 20
_BOX_CX = BOX_X + BOX_W // 2
YES_X = _BOX_CX - CHOICE_GAP // 2 - 1
NO_X = _BOX_CX + CHOICE_GAP // 2 - 1
HEART_OFFSET = -2

HEART = "♥"
TYPE_DELAY = 0.025
RESPONSE_DELAY = 0.030
PAUSE = 1.0

MAX_HP = 20
HEAL = 5

# ─── ANSI ─────────────────────────────────────────────────────
RESET = "\x1b[0m";  WHITE = "\x1b[97m";  RED = "\x1b[91m"
CLEAR = "\x1b[2J\x1b[H";  HIDE_CURSOR = "\x1b[?25l";  SHOW_CURSOR = "\x1b[?25h"

DIALOGUES = [
    "* A little water spirit appears.\n* HEY! DRINK SOME WATER, OKAY?",
    "* A bright flower pops up smiling.\n* THIRSTY? WATER MAKES YOU FEEL GOOD!",
    "* A glowing water drop materializes.\n* DRINK UP! YOU'LL FEEL STRONG!",
    "* A friendly stream flows nearby, calling out.\n* LET'S DRINK WATER!",
    "* A playful raindrop dances in front of you.\n* TIME TO HYDRATE! JUST ONE SIP!",
]
ACCEPTED = "* The water refreshes your SOUL!"
REFUSED = "* The water spirit looks disappointed..."

# Normalized key names returned by read_key()
LEFT, RIGHT, ENTER = "left", "right", "enter"


def apply_choice(hp: int, max_hp: int, accepted: bool) -> int:
    """New HP after a choice: +HEAL capped at max, or -1 floored at 1."""
    if accepted:
        return min(hp + HEAL, max_hp)
    return max(hp - 1, 1)


def toggle(selected: int) -> int:
    return 1 - selected


def border_lines(width: int, height: int) -> list[str]:
    """Rows of a double-line box ``width`` columns wide and ``height`` tall."""
    if width < 2 or height < 2:
        raise ValueError("box must be at least 2x2")
    inner = width - 2
    return (["╔" + "═" * inner + "╗"]
            + ["║" + " " * inner + "║" for _ in range(height - 2)]
            + ["╚" + "═" * inner + "╝"])


def hp_box(hp: int, max_hp: int) -> list[str]:
    label = f"   HP: {hp}/{max_hp}   "
    return ["╔" + "═" * len(label) + "╗", "║" + label + "║", "╚" + "═" * len(label) + "╝"]


def heart_x(selected: int) -> int:
    return (YES_X if selected == 0 else NO_X) + HEART_OFFSET


# ─── Keyboard ─────────────────────────────────────────────────
def read_key() -> Optional[str]:
    """Block for one keypress; return LEFT/RIGHT/ENTER or None for anything else."""
    if IS_WIN:
        import msvcrt
        ch = msvcrt.getwch()
        if ch in ("\x00", "\xe0"):
            return {"K": LEFT, "M": RIGHT}.get(msvcrt.getwch())
        if ch == "\x03":
            raise KeyboardInterrupt
        return ENTER if ch == "\r" else None

    import termios, tty
    fd = sys.stdin.fileno()
    old = termios.tcgetattr(fd)
    try:
        tty.setraw(fd)
        ch = sys.stdin.read(1)
        if ch == "\x03":
            raise KeyboardInterrupt
        if ch == "\x1b":
            seq = sys.stdin.read(2)
            return {"[D": LEFT, "[C": RIGHT}.get(seq)
        return ENTER if ch in ("\r", "\n") else None
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, old)


class Vignette:

    def __init__(self, out=None, rng: Optional[random.Random] = None,
                 max_hp: int = MAX_HP, delay_scale: float = 1.0):
        self.out = out or sys.stdout
        self.rng = rng or random.Random()
        self.max_hp = max_hp
        self.hp = max_hp
        self.selected = 0
        self.delay_scale = delay_scale

    # ━━━ Drawing ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    def _at(self, x: int, y: int, text: str, color: str = WHITE) -> None:
        # ANSI positions are 1-based
        self.out.write(f"\x1b[{y + 1};{x + 1}H{color}{text}{RESET}")

    def _type(self, x: int, y: int, text: str, delay: float) -> None:
        self.out.write(f"\x1b[{y + 1};{x + 1}H{WHITE}")
        for c in text:
            self.out.write(c)
            self.out.flush()
            time.sleep(delay * self.delay_scale)
        self.out.write(RESET)

    def draw_frame(self) -> None:
        self.out.write(CLEAR)
        for i, row in enumerate(hp_box(self.hp, self.max_hp)):
            self._at(6, 2 + i, row)
        for i, row in enumerate(border_lines(BOX_W, BOX_H)):
            self._at(BOX_X, BOX_Y + i, row)
        self.out.flush()

    def draw_choices(self) -> None:
        self._at(YES_X, CHOICE_Y, "YES")
        self._at(NO_X, CHOICE_Y, "NO")
        self._at(heart_x(self.selected), CHOICE_Y, HEART, RED)
        self.out.flush()

    def move_heart(self) -> None:
        self._at(heart_x(self.selected), CHOICE_Y, " ")
        self.selected = toggle(self.selected)
        self._at(heart_x(self.selected), CHOICE_Y, HEART, RED)
        self.out.flush()

    # ━━━ Round ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    def play_round(self, keys=None) -> bool:
        """One encounter. ``keys`` is an iterator of key names (default: keyboard).

        Returns True if the player accepted.
        """
        next_key = (lambda: next(keys)) if keys is not None else read_key
        self.draw_frame()
        text = self.rng.choice(DIALOGUES)
        for i, line in enumerate(text.split("\n")):
            self._type(TEXT_X, TEXT_Y + i, line, TYPE_DELAY)
        self.draw_choices()

        while True:
            key = next_key()
            if key in (LEFT, RIGHT):
                self.move_heart()
            elif key == ENTER:
                break

        accepted = self.selected == 0
        for row in (CHOICE_Y, CHOICE_Y + 1):
            self._at(TEXT_X, row, " " * 70)
        self._type(TEXT_X, CHOICE_Y, ACCEPTED if accepted else REFUSED, RESPONSE_DELAY)
        self.hp = apply_choice(self.hp, self.max_hp, accepted)
        log.debug("Choice %s, HP now %d", "YES" if accepted else "NO", self.hp)
        time.sleep(PAUSE * self.delay_scale)
        return accepted

    def run(self) -> None:
        self.out.write(HIDE_CURSOR)
        if IS_WIN:
            os.system("")  # enables ANSI escapes in the Windows console
        try:
            while True:
                self.play_round()
                time.sleep(PAUSE * self.delay_scale)
        except KeyboardInterrupt:
            pass
        finally:
            self.out.write(CLEAR + SHOW_CURSOR + RESET)
            self.out.flush()


def main() -> None:
    if not sys.stdin.isatty():
        print("Error: the vignette needs an interactive terminal.")
        sys.exit(1)
    if IS_WIN:
        os.system(f"title UNDERTALE & mode con: cols={CONSOLE_WIDTH} lines={CONSOLE_HEIGHT}")
    else:
        sys.stdout.write(f"\x1b]0;UNDERTALE\x07\x1b[8;{CONSOLE_HEIGHT};{CONSOLE_WIDTH}t")
    Vignette().run()


if __name__ == "__main__":
    main()
