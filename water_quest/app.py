#!/usr/bin/env python3
"""
Water Quest — Habit Reminder Tray App
━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

Sits in the system tray and nudges you on fixed daily schedules:
hydration, workout, Russian practice, CTF practice and bedtime.

Features:
  - Toast reminders with a random message per category
  - Log today's workout reps and browse the history with totals
  - "Tests" menu to fire any category on demand
  - Schedule, exercises and file locations editable in the config file

Usage:
    water-quest
    water-quest --test            (poll every 5 seconds)
    water-quest --config my.json
"""
from __future__ import annotations
import argparse, datetime, logging, platform, sys, threading
from typing import Any, Optional

import tkinter as tk
from tkinter import messagebox

import pystray
from tkcalendar import DateEntry

from . import config as cfgmod
from .icon import create_heart
from .instance import InstanceLock
from .log import setup_logging
from .messages import load_messages
from .notify import APP_NAME, Notifier
from .scheduler import ReminderEngine, format_12h, next_reminders
from .workouts import MAX_REPS, WorkoutStore, build_record, default_log_date, format_history

log = logging.getLogger(__name__)

# ─── Platform ────────────────────────────────────────────────
IS_MAC = platform.system() == "Darwin"
IS_WIN = platform.system() == "Windows"
FONT = "Helvetica Neue" if IS_MAC else "Segoe UI" if IS_WIN else "DejaVu Sans"
MONO = "Menlo" if IS_MAC else "Consolas" if IS_WIN else "DejaVu Sans Mono"

# ─── Colours ──────────────────────────────────────────────────
C_BG       = "#111827";  C_CARD     = "#1e293b"
C_ACCENT   = "#f43f5e";  C_ACCENT2  = "#0ea5e9"
C_BTN_PRI  = "#1d4ed8";  C_BTN_SEC  = "#334155"
C_TEXT     = "#f1f5f9";  C_TEXT_DIM = "#94a3b8"

POPUP_DISMISS_MS = 8000


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
class WaterQuestApp:

    def __init__(self, cfg: dict[str, Any]):
        self.root = tk.Tk()
        self.root.withdraw()
        self.root.title(APP_NAME)

        self.config = cfg
        self.schedule = cfgmod.build_schedule(cfg)
        self.store = WorkoutStore(cfg["workouts_file"])
        self.notifier = Notifier(timeout=int(cfg["notification_timeout"]),
                                 fallback=lambda body, attr: self.root.after(0, self._show_popup, body, attr))
        self.engine = ReminderEngine(self.schedule, load_messages(cfgmod.messages_path(cfg)),
                                     self.notifier, interval=cfg["poll_interval"])
        self._popup = None;  self._form_win = None;  self._history_win = None

        threading.Thread(target=self._run_tray, daemon=True).start()
        self._print_schedule()
        self.engine.start()
        self.root.mainloop()

    # ━━━ Fallback popup ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    def _show_popup(self, body: str, attribution: str) -> None:
        """Corner popup used when native toasts are unavailable."""
        if self._popup:
            try:
                self._popup.destroy()
            except tk.TclError:
                pass

        win = tk.Toplevel(self.root)
        win.overrideredirect(True)
        win.attributes("-topmost", True)
        try:
            win.attributes("-alpha", 0.95)
        except tk.TclError:
            pass
        win.configure(bg=C_CARD)

        sw, sh = win.winfo_screenwidth(), win.winfo_screenheight()
        w, h = 420, 130
        win.geometry(f"{w}x{h}+{sw-w-20}+{sh-h-60}")

        f = tk.Frame(win, bg=C_CARD, padx=20, pady=14)
        f.pack(fill="both", expand=True)
        tk.Label(f, text=body, font=(FONT, 12, "bold"), fg=C_TEXT, bg=C_CARD,
                 wraplength=w - 40, justify="left").pack(anchor="w")
        tk.Label(f, text=attribution, font=(FONT, 9), fg=C_TEXT_DIM, bg=C_CARD).pack(anchor="w", pady=(6, 0))
        self._popup = win

        def dismiss():
            try:
                win.destroy()
            except tk.TclError:
                pass
            if self._popup is win:
                self._popup = None
        win.after(POPUP_DISMISS_MS, dismiss)
        win.bind("<Button-1>", lambda e: dismiss())
        for child in f.winfo_children():
            child.bind("<Button-1>", lambda e: dismiss())

    # ━━━ Next Reminder ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    def _show_next_reminder(self) -> None:
        nxt = next_reminders(self.schedule, datetime.datetime.now().time())
        messagebox.showinfo(APP_NAME, "\n".join(f"Next {cat}: {t:%H:%M}" for cat, t in nxt.items()))

    # ━━━ Workout Form ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    def _show_workout_form(self) -> None:
        if self._form_win:
            try: self._form_win.lift();  self._form_win.focus_force();  return
            except tk.TclError: self._form_win = None

        win = tk.Toplevel(self.root)
        win.title("Log Workout")
        win.configure(bg=C_BG)
        win.resizable(False, False)
        self._form_win = win

        def on_close():
            self._form_win = None
            win.destroy()
        win.protocol("WM_DELETE_WINDOW", on_close)

        f = tk.Frame(win, bg=C_BG, padx=20, pady=16)
        f.pack(fill="both", expand=True)

        counts: dict[str, tk.StringVar] = {}
        for row, name in enumerate(self.config["exercises"]):
            tk.Label(f, text=name, font=(FONT, 10), fg=C_TEXT, bg=C_BG, width=16,
                     anchor="w").grid(row=row, column=0, sticky="w", pady=6)
            var = tk.StringVar(value="0")
            tk.Spinbox(f, from_=0, to=MAX_REPS, textvariable=var, width=8,
                       font=(FONT, 10)).grid(row=row, column=1, sticky="w", pady=6)
            counts[name] = var

        row = len(counts)
        tk.Label(f, text="Date:", font=(FONT, 10), fg=C_TEXT, bg=C_BG,
                 anchor="w").grid(row=row, column=0, sticky="w", pady=6)
        cal = DateEntry(f, width=12, background=C_BTN_PRI, foreground=C_TEXT, borderwidth=2,
                        date_pattern="yyyy-mm-dd", font=(FONT, 10))
        cal.set_date(default_log_date())
        cal.grid(row=row, column=1, sticky="w", pady=6)

        err = tk.Label(f, text="", font=(FONT, 9), fg=C_ACCENT, bg=C_BG)
        err.grid(row=row + 1, column=0, columnspan=2, sticky="w")

        def save():
            try:
                record = build_record(cal.get_date(), {name: var.get() for name, var in counts.items()})
            except ValueError as e:
                err.config(text=str(e));  return
            try:
                self.store.save(record)
            except OSError as e:
                log.error("Workout save error: %s", e)
                messagebox.showerror(APP_NAME, f"Could not save workout:\n{e}", parent=win)
                return
            messagebox.showinfo(APP_NAME, "Workout saved successfully!", parent=win)
            on_close()

        tk.Button(f, text="Save", font=(FONT, 10, "bold"), bg=C_BTN_PRI, fg=C_TEXT,
                  relief="flat", padx=24, pady=4, cursor="hand2",
                  command=save).grid(row=row + 2, column=0, columnspan=2, pady=(10, 0))
        self._centre(win)

    # ━━━ Workout History ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    def _show_workout_history(self) -> None:
        records = self.store.load()
        if not records:
            messagebox.showinfo(APP_NAME, "No workout history found!")
            return
        if self._history_win:
            try: self._history_win.destroy()
            except tk.TclError: pass

        win = tk.Toplevel(self.root)
        win.title("Workout History")
        win.geometry("500x400")
        win.configure(bg=C_BG)
        self._history_win = win

        tk.Label(win, text="Workout History", font=(FONT, 15, "bold"),
                 fg=C_ACCENT2, bg=C_BG).pack(pady=(14, 8))

        fr = tk.Frame(win, bg=C_BG)
        fr.pack(fill="both", expand=True, padx=14, pady=(0, 10))
        sb = tk.Scrollbar(fr)
        sb.pack(side="right", fill="y")
        txt = tk.Text(fr, font=(MONO, 10), bg=C_CARD, fg=C_TEXT,
                      relief="flat", padx=12, pady=10, wrap="word", yscrollcommand=sb.set)
        txt.pack(fill="both", expand=True)
        sb.config(command=txt.yview)
        txt.insert("end", format_history(records))
        txt.configure(state="disabled")

        def on_close():
            self._history_win = None
            win.destroy()
        tk.Button(win, text="Close", font=(FONT, 10), bg=C_BTN_SEC, fg=C_TEXT,
                  relief="flat", padx=16, pady=4, cursor="hand2", command=on_close).pack(pady=(0, 12))
        win.protocol("WM_DELETE_WINDOW", on_close)

    def _centre(self, win: tk.Toplevel) -> None:
        win.update_idletasks()
        w, h = win.winfo_width(), win.winfo_height()
        win.geometry(f"+{(win.winfo_screenwidth()-w)//2}+{(win.winfo_screenheight()-h)//2}")

    # ━━━ Startup ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    def _print_schedule(self):
        try:
            print()
            print("  +-----------------------------------------------+")
            print("  |           Water Quest -- Schedule             |")
            print("  +-----------------------------------------------+")
            for cat, times in self.schedule.items():
                ts = ", ".join(format_12h(t) for t in sorted(times))
                print(f"  |  {cat:<10s} {ts}")
            print("  +-----------------------------------------------+")
            print(f"  |  Checking every {self.engine.interval}s")
            print(f"  |  Workouts: {self.config['workouts_file']}")
            print("  +-----------------------------------------------+")
            print()
        except (UnicodeEncodeError, OSError):
            pass  # silently skip on consoles that can't print

    # ━━━ System Tray ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
    def _test_item(self, category: str) -> pystray.MenuItem:
        return pystray.MenuItem(category, lambda icon, item: self.engine.fire(category))

    def _run_tray(self) -> None:
        menu = pystray.Menu(
            pystray.MenuItem("Check Next Reminder",
                lambda icon, item: self.root.after(0, self._show_next_reminder)),
            pystray.MenuItem("Workout", pystray.Menu(
                pystray.MenuItem("Log Today's Workout",
                    lambda icon, item: self.root.after(0, self._show_workout_form)),
                pystray.MenuItem("View History",
                    lambda icon, item: self.root.after(0, self._show_workout_history)),
            )),
            pystray.MenuItem("Tests", pystray.Menu(*[self._test_item(c) for c in self.schedule])),
            pystray.Menu.SEPARATOR,
            pystray.MenuItem("Exit", self._quit),
        )
        self.tray = pystray.Icon("water_quest", create_heart(64), APP_NAME, menu)
        self.tray.run()

    def _quit(self, icon: Optional[Any] = None, item: Optional[Any] = None) -> None:
        self.engine.stop()
        if hasattr(self, "tray"):
            self.tray.stop()
        self.root.after(0, self.root.quit)


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
def _already_running() -> None:
    root = tk.Tk()
    root.withdraw()
    messagebox.showinfo(APP_NAME, "Already running!")
    root.destroy()


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Water Quest habit reminders")
    parser.add_argument("--test", action="store_true", help="Poll every few seconds for testing")
    parser.add_argument("--config", metavar="PATH", help="Config file (default: ~/water_quest_config.json)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args(argv)

    path = cfgmod.config_path(args.config)
    cfg = cfgmod.load_config(path, test_mode=args.test)
    setup_logging(cfg["log_file"], args.verbose)
    cfgmod.ensure_config(path)
    if args.test:
        log.info("TEST MODE: checking every %ss", cfg["poll_interval"])

    with InstanceLock(cfgmod.LOCK_FILE) as held:
        if not held:
            _already_running()
            sys.exit(1)
        WaterQuestApp(cfg)


if __name__ == "__main__":
    main()
