# guit/ui/DrawScreen.py
"""DrawScreen.py
========================
DrawScreen renders the guit dashboard with the curses library.

The renderer is a pure function of the ApplicationState it is handed: it
reads the lists, cursors and active pane once per frame and never writes to
them. The only thing it keeps between frames is the table of curses
attributes built from the ``[styles]`` configuration.

Layout (percentages of the area above the hot-keys box)::

    +-- Status --+---------- Reflog ----------+
    |    40%     |                            |
    +- Commits --+                            |
    |    40%     |                            |
    +- Branches -+                            |
    |    20%     |                            |
    +----30%-----+------------70%-------------+
    +--------------- Hot-Keys ----------------+
"""

from __future__ import annotations

import curses
import logging
from typing import TYPE_CHECKING, Any, NamedTuple, Optional, Sequence

from wcwidth import wcwidth

from guit.core.PaneRegistry import COMMITS, REFLOG, STATUS, Pane, PaneKind
from guit.core.Records import BranchKind, BranchRecord, CommitRecord, StatusRecord
from guit.utils.utils import hex_to_xterm


if TYPE_CHECKING:
    from guit.core.AppState import ApplicationState


Segment = tuple[str, int]

PANES: tuple[Pane, ...] = (STATUS, COMMITS, Pane.branches(BranchKind.LOCAL), REFLOG)

HOT_KEYS: tuple[tuple[str, str], ...] = (
    ("Q", "quit"),
    ("Up", "move up in the active pane"),
    ("Down", "move down in the active pane"),
    ("TAB", "to change active pane"),
)

MODIFIER_ATTRS: dict[str, str] = {
    "bold": "A_BOLD",
    "italic": "A_ITALIC",
    "underlined": "A_UNDERLINE",
    "reversed": "A_REVERSE",
    "dim": "A_DIM",
}


class Rect(NamedTuple):
    y: int
    x: int
    height: int
    width: int


def compute_layout(height: int, width: int, hotkeys_height: int = 5) -> tuple[dict[PaneKind, Rect], Rect]:
    """Splits the screen into one rectangle per pane plus the hot-keys box."""
    main_h = max(0, height - hotkeys_height)
    left_w = width * 30 // 100
    status_h = main_h * 40 // 100
    commits_h = main_h * 40 // 100
    branches_h = main_h - status_h - commits_h

    panes = {
        PaneKind.STATUS: Rect(0, 0, status_h, left_w),
        PaneKind.COMMITS: Rect(status_h, 0, commits_h, left_w),
        PaneKind.BRANCHES: Rect(status_h + commits_h, 0, branches_h, left_w),
        PaneKind.REFLOG: Rect(0, left_w, main_h, width - left_w),
    }
    return panes, Rect(main_h, 0, height - main_h, width)


def first_visible_row(selected: Optional[int], visible_rows: int) -> int:
    """Index of the first row to draw so that *selected* stays in view."""
    if selected is None or visible_rows <= 0:
        return 0
    return max(0, selected - visible_rows + 1)


def get_initials(name: str) -> str:
    """Upper-cased first letter of every word of *name* ("Ada Lovelace" -> "AL")."""
    return "".join(part[0].upper() for part in name.split() if part)


def truncate_string(s: str, max_width: int) -> str:
    """Return `s` clipped to visual width `max_width`.

    Wide-Unicode characters (e.g. CJK) are accounted for with
    :pyfunc:`wcwidth.wcwidth`; non-printable characters count as one cell.
    """
    result: list[str] = []
    consumed = 0

    for ch in s:
        w = wcwidth(ch)
        if w < 0:
            w = 1
        if consumed + w > max_width:
            break
        result.append(ch)
        consumed += w

    return "".join(result)


def display_width(s: str) -> int:
    """Cells taken by *s*, counted the same way as `truncate_string`."""
    width = 0
    for ch in s:
        w = wcwidth(ch)
        width += 1 if w < 0 else w
    return width


## ================= class DrawScreen ==============================
class DrawScreen:
    """DrawScreen Class
    =========================
    Paints the four panes and the hot-keys box for one ApplicationState.

    Attributes:
        MIN_WINDOW_WIDTH (int): Below this width only a warning line is drawn.
        MIN_WINDOW_HEIGHT (int): Below this height only a warning line is drawn.
        HOTKEYS_HEIGHT (int): Rows taken by the hot-keys box.
        stdscr (curses.window): The main curses window object.
        config (dict): Application configuration; ``[styles]`` is consulted.
        styles (dict[str, int]): Style name -> curses attribute.
    """

    MIN_WINDOW_WIDTH = 40
    MIN_WINDOW_HEIGHT = 12
    HOTKEYS_HEIGHT = 5

    def __init__(self, stdscr: Any, config: dict[str, Any]) -> None:
        self.stdscr = stdscr
        self.config = config
        self.styles: dict[str, int] = {}
        self._init_styles()

    # ---------------------  Styles  -------------------
    def _init_styles(self) -> None:
        """Creates one color pair per configured style.

        Falls back to plain attributes (A_REVERSE for the selection) when the
        terminal has no color support or cannot allocate pairs.
        """
        try:
            curses.start_color()
            curses.use_default_colors()  # allow -1 as the "default background"
        except curses.error:
            pass

        use_color = curses.has_colors() and getattr(curses, "COLORS", 0) >= 8
        if not use_color:
            logging.warning("Terminal has no or limited color support (< 8). Using monochrome attributes.")

        style_specs: dict[str, dict[str, Any]] = self.config.get("styles", {})
        for pair_number, (name, spec) in enumerate(sorted(style_specs.items()), start=1):
            if not isinstance(spec, dict):
                logging.warning("Style %r is not a table; ignored.", name)
                continue
            attr = self._modifier_attr(spec.get("modifiers", []))
            if not use_color:
                self.styles[name] = attr | curses.A_REVERSE if name == "highlighted" else attr
                continue
            fg = self._resolve_color(spec.get("fg"), curses.COLOR_WHITE)
            bg = self._resolve_color(spec.get("bg"), -1)
            try:
                curses.init_pair(pair_number, fg, bg)
                attr |= curses.color_pair(pair_number)
            except (curses.error, ValueError) as exc:
                logging.warning("init_pair failed for style %r (%s)", name, exc)
                if name == "highlighted":
                    attr |= curses.A_REVERSE
            self.styles[name] = attr

        self.styles.setdefault("normal", curses.A_NORMAL)
        self.styles.setdefault("highlighted", curses.A_REVERSE | curses.A_BOLD)
        for name in ("title", "error", "active_border", "hash", "author", "hotkey"):
            self.styles.setdefault(name, self.styles["normal"])

    @staticmethod
    def _modifier_attr(modifiers: Sequence[str]) -> int:
        attr = 0
        for modifier in modifiers or []:
            attr_name = MODIFIER_ATTRS.get(str(modifier).lower())
            if attr_name is None:
                logging.debug("Unknown style modifier %r ignored.", modifier)
                continue
            attr |= getattr(curses, attr_name, 0)
        return attr

    @staticmethod
    def _resolve_color(name: Optional[str], default: int) -> int:
        """Maps a color name (``red``, ``light_blue``, ``#ff8800``) to a curses color index."""
        if not name:
            return default
        s = str(name).strip().lower()
        max_colors = curses.COLORS

        if s.startswith("#"):
            return hex_to_xterm(s) if max_colors >= 256 else default

        bright = False
        for prefix in ("light_", "bright_"):
            if s.startswith(prefix):
                s = s[len(prefix):]
                bright = True

        base = getattr(curses, f"COLOR_{s.upper()}", None)
        if not isinstance(base, int):
            logging.warning("Unknown color %r; using default.", name)
            return default
        if bright and max_colors >= 16:
            return base + 8
        return base

    # ---------------------  Frame  -------------------
    def draw(self, state: "ApplicationState") -> None:
        """Paints one frame for *state*."""
        try:
            height, width = self.stdscr.getmaxyx()
            self.stdscr.erase()

            if height < self.MIN_WINDOW_HEIGHT or width < self.MIN_WINDOW_WIDTH:
                self._show_small_window_error(height, width)
            else:
                pane_rects, hotkeys_rect = compute_layout(height, width, self.HOTKEYS_HEIGHT)
                for pane in PANES:
                    self._draw_pane(state, pane, pane_rects[pane.kind])
                self._draw_hot_keys(hotkeys_rect, state.status_message)

            self._update_display()
        except curses.error as e:
            logging.error(f"Curses error in DrawScreen.draw(): {e}", exc_info=True)
        except Exception:
            logging.exception("Unexpected error in DrawScreen.draw()")

    def _draw_pane(self, state: "ApplicationState", pane: Pane, rect: Rect) -> None:
        active = state.panes.is_active(pane.kind)
        self._draw_box(rect, pane.title, active)

        items = state.list_for(pane)
        rows = [self._row_for(pane.kind, item) for item in items]
        self._draw_list(rect, rows, items.selected)

    def _row_for(self, kind: PaneKind, item: Any) -> list[Segment]:
        normal = self.styles["normal"]
        if kind is PaneKind.STATUS and isinstance(item, StatusRecord):
            return [(item.label, normal)]
        if isinstance(item, CommitRecord):
            author = get_initials(item.author) if kind is PaneKind.COMMITS else item.author
            return [
                (item.short_hash, self.styles["hash"]),
                (" ", normal),
                (author, self.styles["author"]),
                (" ", normal),
                (item.summary, normal),
            ]
        if isinstance(item, BranchRecord):
            return [(item.name, normal)]
        return [(str(item), normal)]

    def _draw_list(self, rect: Rect, rows: list[list[Segment]], selected: Optional[int]) -> None:
        """Draws *rows* inside the box *rect*, scrolled so *selected* is visible."""
        inner_h = rect.height - 2
        inner_w = rect.width - 4  # border plus one cell of padding on each side
        if inner_h <= 0 or inner_w <= 0:
            return

        top = first_visible_row(selected, inner_h)
        for screen_row, index in enumerate(range(top, min(len(rows), top + inner_h))):
            y = rect.y + 1 + screen_row
            x = rect.x + 2
            highlight = self.styles["highlighted"] if index == selected else None
            if highlight is not None:
                self._addstr(y, x, " " * inner_w, highlight)
            self._draw_segments(y, x, inner_w, rows[index], highlight)

    def _draw_segments(self, y: int, x: int, max_width: int, segments: list[Segment], override: Optional[int] = None) -> int:
        """Draws segments left to right, clipping at *max_width* cells. Returns cells used."""
        used = 0
        for text, attr in segments:
            if used >= max_width:
                break
            clipped = truncate_string(text, max_width - used)
            if clipped:
                self._addstr(y, x + used, clipped, attr if override is None else override)
                used += display_width(clipped)
        return used

    def _draw_box(self, rect: Rect, title: str, active: bool) -> None:
        if rect.height < 2 or rect.width < 2:
            return
        border = self.styles["active_border"] if active else self.styles["normal"]
        top, left = rect.y, rect.x
        bottom, right = rect.y + rect.height - 1, rect.x + rect.width - 1
        try:
            self.stdscr.hline(top, left + 1, curses.ACS_HLINE | border, rect.width - 2)
            self.stdscr.hline(bottom, left + 1, curses.ACS_HLINE | border, rect.width - 2)
            self.stdscr.vline(top + 1, left, curses.ACS_VLINE | border, rect.height - 2)
            self.stdscr.vline(top + 1, right, curses.ACS_VLINE | border, rect.height - 2)
        except curses.error:
            pass
        for y, x, ch in (
            (top, left, curses.ACS_ULCORNER),
            (top, right, curses.ACS_URCORNER),
            (bottom, left, curses.ACS_LLCORNER),
            (bottom, right, curses.ACS_LRCORNER),
        ):
            try:
                self.stdscr.addch(y, x, ch, border)
            except curses.error:
                pass  # the bottom-right cell of the screen always raises

        title_attr = border | curses.A_BOLD if active else border
        self._addstr(top, left + 1, truncate_string(title, rect.width - 2), title_attr)

    def _draw_hot_keys(self, rect: Rect, status_message: str) -> None:
        self._draw_box(rect, " Hot-Keys ", active=False)
        self._addstr(rect.y, rect.x + 1, " Hot-Keys ", self.styles["title"])

        inner_h = rect.height - 2
        inner_w = rect.width - 4
        if inner_h <= 0 or inner_w <= 0:
            return

        # Reserve the last inner row for a status notice when there is one.
        rows_for_keys = inner_h - 1 if status_message and inner_h > 1 else inner_h
        row, col = 0, 0
        for key, description in HOT_KEYS:
            chunk = [(key, self.styles["hotkey"]), (f" - {description}", self.styles["normal"])]
            chunk_w = display_width(key) + display_width(description) + 3
            if col and col + chunk_w > inner_w:
                row, col = row + 1, 0
            if row >= rows_for_keys:
                break
            col += self._draw_segments(rect.y + 1 + row, rect.x + 2 + col, inner_w - col, chunk)
            col += 4

        if status_message:
            self._addstr(
                rect.y + inner_h,
                rect.x + 2,
                truncate_string(status_message, inner_w),
                self.styles["error"],
            )

    def _show_small_window_error(self, height: int, width: int) -> None:
        msg = f"Window too small ({width}x{height}). Minimum: {self.MIN_WINDOW_WIDTH}x{self.MIN_WINDOW_HEIGHT}"
        self._addstr(0, 0, truncate_string(msg, max(0, width - 1)), self.styles["error"])

    def _addstr(self, y: int, x: int, text: str, attr: int) -> None:
        try:
            self.stdscr.addstr(y, x, text, attr)
        except curses.error:
            pass  # drawing outside screen

    def _update_display(self) -> None:
        """Flushes the frame with noutrefresh()/doupdate() double-buffering."""
        try:
            self.stdscr.noutrefresh()
            curses.doupdate()
        except curses.error as e:
            logging.error(f"Curses doupdate error: {e}")
