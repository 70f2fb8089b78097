# tests/test_core/test_guit_loop.py
"""Tests for the `Guit` driving loop.
=====================================

The loop is driven with a mocked `stdscr` whose `getch()` replays a scripted
sequence of key codes. The renderer is replaced with a `MagicMock` so that no
terminal is needed; the real `KeyBinder` decodes and dispatches the keys.
"""

import curses
import itertools
from typing import Any
from unittest.mock import MagicMock, patch

import pytest

from guit.core.AppState import ApplicationState
from guit.core.Guit import TICK_INTERVAL_MS, Guit
from guit.core.PaneRegistry import COMMITS, STATUS


@pytest.fixture
def make_guit(mock_stdscr: MagicMock, mock_config: dict[str, Any]):
    """Builds a Guit around *state* with the renderer mocked out."""

    def factory(state: ApplicationState, config: dict[str, Any] | None = None) -> Guit:
        with patch("guit.core.Guit.DrawScreen") as drawer_cls:
            guit = Guit(mock_stdscr, state, mock_config if config is None else config)
        assert guit.drawer is drawer_cls.return_value
        return guit

    return factory


@patch("guit.core.Guit.curses.curs_set")
def test_keys_are_dispatched_until_quit(_curs_set, make_guit, mock_stdscr, app_state) -> None:
    """'j' moves down, TAB switches pane and 'q' ends the loop."""
    mock_stdscr.getch.side_effect = [ord("j"), 9, ord("q")]
    guit = make_guit(app_state)

    guit.run()

    assert app_state.should_quit
    assert app_state.status.selected == 0
    assert app_state.active_pane == COMMITS
    assert guit.drawer.draw.call_count == 3
    guit.drawer.draw.assert_called_with(app_state)
    mock_stdscr.keypad.assert_called_once_with(True)


@patch("guit.core.Guit.curses.curs_set")
def test_arrow_keys_and_vim_keys_are_equivalent(_curs_set, make_guit, mock_stdscr, app_state) -> None:
    mock_stdscr.getch.side_effect = [curses.KEY_DOWN, ord("j"), curses.KEY_UP, ord("k"), ord("k"), ord("q")]
    guit = make_guit(app_state)

    guit.run()

    # 0, 1, 0, then up twice wraps to 4 and lands on 3.
    assert app_state.status.selected == 3
    assert app_state.active_pane == STATUS


@patch("guit.core.Guit.curses.curs_set")
@patch("guit.core.Guit.time")
def test_on_tick_runs_once_per_interval(mock_time, _curs_set, make_guit, mock_stdscr, app_state) -> None:
    """Every monotonic() call advances one second, so each iteration ticks."""
    mock_time.monotonic.side_effect = itertools.count()
    mock_stdscr.getch.side_effect = [curses.ERR, curses.ERR, ord("q")]
    guit = make_guit(app_state)

    with patch.object(app_state, "on_tick") as on_tick:
        guit.run()

    assert on_tick.call_count == 3
    # Tick already overdue: poll without blocking.
    mock_stdscr.timeout.assert_called_with(0)


@patch("guit.core.Guit.curses.curs_set")
def test_poll_timeout_is_bounded_by_tick(_curs_set, make_guit, mock_stdscr, app_state) -> None:
    mock_stdscr.getch.side_effect = [ord("q")]
    guit = make_guit(app_state)

    guit.run()

    (timeout_ms,), _ = mock_stdscr.timeout.call_args
    assert 0 <= timeout_ms <= TICK_INTERVAL_MS


@patch("guit.core.Guit.curses.curs_set")
def test_keyboard_interrupt_requests_quit(_curs_set, make_guit, mock_stdscr, app_state) -> None:
    mock_stdscr.getch.side_effect = KeyboardInterrupt
    guit = make_guit(app_state)

    guit.run()

    assert app_state.should_quit


@patch("guit.core.Guit.curses.curs_set")
def test_unexpected_error_ends_loop(_curs_set, make_guit, mock_stdscr, app_state) -> None:
    guit = make_guit(app_state)
    guit.drawer.draw.side_effect = RuntimeError("boom")

    guit.run()

    assert app_state.should_quit
    guit.drawer.draw.assert_called_once()


@patch("guit.core.Guit.curses.update_lines_cols")
@patch("guit.core.Guit.curses.curs_set")
def test_resize_clears_screen(_curs_set, update_lines_cols, make_guit, mock_stdscr, app_state) -> None:
    mock_stdscr.getch.side_effect = [curses.KEY_RESIZE, ord("q")]
    guit = make_guit(app_state)

    guit.run()

    update_lines_cols.assert_called_once()
    mock_stdscr.clear.assert_called_once()
    assert app_state.status.selected is None


def test_tick_interval_from_config(make_guit, mock_config, app_state) -> None:
    mock_config["settings"]["tick_interval_ms"] = 1000
    assert make_guit(app_state).tick_interval == 1.0

    mock_config["settings"]["tick_interval_ms"] = "fast"
    assert make_guit(app_state).tick_interval == TICK_INTERVAL_MS / 1000
