# guit/core/Guit.py
"""guit.core.Guit.py
============================
Guit: the driving loop of the dashboard.

One thread owns the ApplicationState for the whole session. Each iteration
draws a frame, then blocks until a key arrives or the remaining tick time
runs out (a bounded-wait poll through ``stdscr.timeout``), dispatches at most
one key, runs ``on_tick`` when a tick interval has elapsed, and stops once
the state's quit flag is set.
"""

from __future__ import annotations

import curses
import time
from typing import Any, Optional

from guit.core.AppState import ApplicationState
from guit.ui.DrawScreen import DrawScreen
from guit.ui.KeyBinder import KeyBinder
from guit.utils.logging_config import logger


TICK_INTERVAL_MS = 250


## ==================== Guit Class ====================
class Guit:
    """Class Guit
    =========================
    Wires the curses screen, the key binder and the renderer around one
    ApplicationState.

    Attributes:
        stdscr (curses.window): The main curses window.
        state (ApplicationState): The state driven by this loop.
        config (dict): Merged application configuration.
        tick_interval (float): Seconds between two ``on_tick`` calls.
        keybinder (KeyBinder): Key decoding and dispatch.
        drawer (DrawScreen): Renderer.
    """

    def __init__(self, stdscr: Any, state: ApplicationState, config: Optional[dict[str, Any]] = None) -> None:
        self.stdscr = stdscr
        self.state = state
        self.config: dict[str, Any] = config or {}

        tick_ms = self.config.get("settings", {}).get("tick_interval_ms", TICK_INTERVAL_MS)
        try:
            tick_ms = int(tick_ms)
        except (TypeError, ValueError):
            logger.warning("Invalid tick_interval_ms %r; using %d.", tick_ms, TICK_INTERVAL_MS)
            tick_ms = TICK_INTERVAL_MS
        self.tick_interval: float = max(1, tick_ms) / 1000

        self.keybinder = KeyBinder(state, self.config, stdscr)
        self.drawer = DrawScreen(stdscr, self.config)

    def run(self) -> None:
        """Runs until the state asks to quit.

        ``KeyboardInterrupt`` requests a quit; any other unexpected exception
        is logged as critical and ends the loop.
        """
        logger.info("Main loop started.")
        try:
            curses.curs_set(0)
        except curses.error:
            pass
        self.stdscr.keypad(True)

        last_tick = time.monotonic()
        while not self.state.should_quit:
            try:
                self.drawer.draw(self.state)

                remaining = self.tick_interval - (time.monotonic() - last_tick)
                self.stdscr.timeout(max(0, int(remaining * 1000)))
                self._process_key(self.keybinder.get_key_input())

                if time.monotonic() - last_tick >= self.tick_interval:
                    self.state.on_tick()
                    last_tick = time.monotonic()

            except KeyboardInterrupt:
                logger.info("Main loop interrupted by KeyboardInterrupt.")
                self.state.request_quit()
            except Exception as e:
                logger.critical("Unhandled exception in main loop: %s", e, exc_info=True)
                self.state.request_quit()

        logger.info("Main loop finished.")

    def _process_key(self, key: int | str) -> None:
        if key in (curses.ERR, -1):
            return
        if key == curses.KEY_RESIZE:
            curses.update_lines_cols()
            self.stdscr.clear()
            return
        self.keybinder.handle_input(key)
