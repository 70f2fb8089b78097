# guit/ui/KeyBinder.py
"""KeyBinder.py
==================
Description:
-----------------------
The KeyBinder class translates key presses into application-state events for
the guit dashboard.

Key Features:
- Loads and parses keybinding configurations, supporting user overrides.
- Maps key codes to ApplicationState event methods (move up/down/left/right,
  next pane).
- Forwards unbound printable characters to ``ApplicationState.handle_character``.
- Decodes ESC/CSI/SS3 arrow sequences for terminals that do not deliver
  curses key codes.

Main Methods:
1. handle_input: Processes a single key event and dispatches it.
2. _load_keybindings: Loads and parses keybinding configurations.
3. _decode_keystring: Decodes key specification strings or integers into key codes.
4. _setup_action_map: Constructs the mapping from key codes to state methods.
5. get_key_input: Reads a single key or key sequence from the terminal.
"""

from __future__ import annotations

import curses
import logging
import re
from typing import TYPE_CHECKING, Any, Callable, Optional

from wcwidth import wcswidth

from guit.utils.logging_config import KEY_LOGGER

if TYPE_CHECKING:
    from guit.core.AppState import ApplicationState


TAB = 9
ESC = 27


def _action_name(action: Callable[..., Any]) -> str:
    return getattr(action, "__name__", repr(action))


# ==================== KeyBinder Class ====================
class KeyBinder:
    """Class KeyBinder
    ====================
    Owns the key → action table for one ApplicationState.

    Attributes:
        state (ApplicationState): Receiver of the dispatched events.
        config (dict): Application configuration; ``[keybindings]`` is consulted.
        stdscr: The curses window keys are read from.
        keybindings (dict): Action name → list of decoded key codes.
        action_map (dict): Key code → bound state method.
    """
    # Keys do NOT include the leading ESC (0x1B); get_key_input() reads after it.
    ESCAPE_SEQUENCE_MAP: dict[str, str] = {
        "[A": "up", "[B": "down", "[C": "right", "[D": "left",
        "OA": "up", "OB": "down", "OC": "right", "OD": "left",
        "[Z": "shift+tab",
    }

    DEFAULT_KEYBINDINGS: dict[str, list[int | str]] = {
        "move_up": ["up", "k"],
        "move_down": ["down", "j"],
        "move_left": ["left", "h"],
        "move_right": ["right", "l"],
        "next_pane": ["tab"],
    }

    def __init__(self, state: "ApplicationState", config: dict[str, Any], stdscr: Any):
        logging.debug("KeyBinder initialized for state: %s", state)
        self.state = state
        self.config = config
        self.stdscr = stdscr

        self.keybindings = self._load_keybindings()
        self.action_map = self._setup_action_map()

    # ---------------------- Handle Input --------------------
    def handle_input(self, key: str | int) -> bool:
        """Dispatches one key event to the application state.

        A key bound in the action map calls its state method. Otherwise a
        printable character is handed to ``handle_character``. Anything else
        is ignored. Any status notice from the previous key is cleared first.

        Returns:
            bool: True if the key was consumed.
        """
        KEY_LOGGER.debug("key %r", key)
        self.state.clear_status_message()

        try:
            action = self.action_map.get(key)
            if action is not None:
                logging.debug("handle_input: Key %r bound to %s", key, _action_name(action))
                action()
                return True

            char = self._printable_character(key)
            if char:
                self.state.handle_character(char)
                return True

            logging.debug("Unhandled input: %r (type: %s)", key, type(key).__name__)
            return False

        except Exception:
            logging.exception("Input handler error. This should be investigated.")
            return False

    @staticmethod
    def _printable_character(key: str | int) -> str:
        """Returns *key* as a single visible character, or '' if it is not one."""
        if isinstance(key, str):
            char = key if len(key) == 1 else ""
        elif 32 <= key < 127:
            # getch() codes above ASCII are curses special keys or UTF-8 fragments.
            char = chr(key)
        else:
            return ""
        return char if char and wcswidth(char) > 0 else ""

    def _load_keybindings(self) -> dict[str, list[int | str]]:
        """Merges the default bindings with ``[keybindings]`` from the config.

        Each value may be a list of specs, a single spec, or a ``"a|b"`` string.
        An empty value disables the action.
        """
        user_keybindings_config: dict[str, object] = self.config.get("keybindings", {})
        parsed_keybindings: dict[str, list[int | str]] = {}

        for action, default_value_spec in self.DEFAULT_KEYBINDINGS.items():
            spec: object = user_keybindings_config.get(action, default_value_spec)

            if not spec:
                logging.debug("Keybinding for action %r is disabled or empty.", action)
                continue

            specs_to_process: list[Any]
            if isinstance(spec, list):
                specs_to_process = spec
            elif isinstance(spec, str) and "|" in spec:
                specs_to_process = [s.strip() for s in spec.split("|")]
            else:
                specs_to_process = [spec]

            key_codes_for_action: list[int | str] = []
            for key_spec_item in specs_to_process:
                try:
                    key_code = self._decode_keystring(key_spec_item)
                except ValueError as e:
                    logging.error(
                        "Error parsing keybinding item %r for action %r: %s. "
                        "This specific binding for the action will be ignored.",
                        key_spec_item, action, e,
                    )
                    continue
                if key_code not in key_codes_for_action:
                    key_codes_for_action.append(key_code)

            if key_codes_for_action:
                parsed_keybindings[action] = key_codes_for_action
            else:
                logging.warning(
                    "No valid key codes found for action %r after parsing. It will not be bound.",
                    action,
                )

        unknown = set(user_keybindings_config) - set(self.DEFAULT_KEYBINDINGS)
        if unknown:
            logging.warning("Ignoring keybindings for unknown actions: %s", sorted(unknown))

        logging.debug("Loaded keybindings (action -> key codes): %s", parsed_keybindings)
        return parsed_keybindings

    def _decode_keystring(self, key_input: str | int) -> int:
        """Decodes a key specification into a key code.

        Supports integers (returned as-is), named keys ("up", "tab", "esc",
        "f1".."f12", ...), ``ctrl+<letter>`` and single characters.

        Raises:
            ValueError: If the specification cannot be decoded.
        """
        if isinstance(key_input, bool):
            raise ValueError(f"Invalid key_input type: {type(key_input)}. Expected str or int.")
        if isinstance(key_input, int):
            return key_input
        if not isinstance(key_input, str):
            raise ValueError(f"Invalid key_input type: {type(key_input)}. Expected str or int.")

        if len(key_input) == 1:
            return ord(key_input)

        s = key_input.strip().lower()
        if not s:
            raise ValueError("Key string cannot be empty.")

        named_keys_map: dict[str, int] = {
            "up": curses.KEY_UP,
            "down": curses.KEY_DOWN,
            "left": curses.KEY_LEFT,
            "right": curses.KEY_RIGHT,
            "home": curses.KEY_HOME,
            "end": curses.KEY_END,
            "pageup": curses.KEY_PPAGE,
            "pagedown": curses.KEY_NPAGE,
            "shift+tab": curses.KEY_BTAB,
            "tab": TAB,
            "enter": 10,
            "esc": ESC,
            "space": 32,
        }
        named_keys_map.update({f"f{n}": curses.KEY_F0 + n for n in range(1, 13)})

        if s in named_keys_map:
            return named_keys_map[s]

        match = re.fullmatch(r"ctrl\+([a-z])", s)
        if match:
            return ord(match.group(1)) - ord("a") + 1

        raise ValueError(f"Unknown key specification: {key_input!r}")

    def _setup_action_map(self) -> dict[int | str, Callable[..., Any]]:
        """Builds key code → state method from the parsed keybindings."""
        action_to_method_map: dict[str, Callable[..., Any]] = {
            "move_up": self.state.move_selection_up,
            "move_down": self.state.move_selection_down,
            "move_left": self.state.drill_out,
            "move_right": self.state.drill_in,
            "next_pane": self.state.advance_pane,
        }

        final_key_action_map: dict[int | str, Callable[..., Any]] = {}
        for action_name, key_code_list in self.keybindings.items():
            method_callable = action_to_method_map[action_name]
            for key_code in key_code_list:
                previous = final_key_action_map.get(key_code)
                if previous is not None and previous != method_callable:
                    logging.warning(
                        f"Keybinding for action '{action_name}' (key: {key_code}) is overwriting "
                        f"an existing mapping for method '{_action_name(previous)}'."
                    )
                final_key_action_map[key_code] = method_callable

        logging.debug(
            "Final constructed action map: %s",
            {k: _action_name(v) for k, v in final_key_action_map.items()},
        )
        return final_key_action_map

    def get_key_input(self, window: Optional[Any] = None) -> int | str:
        """Reads one key, resolving ESC-prefixed arrow sequences.

        Returns:
            int | str:
            - curses key code (int) for known keys,
            - 27 for a lone ESC or an unknown sequence,
            - curses.ERR when no key arrived within the window timeout,
            - -1 for unexpected exceptions.
        """
        target = window or self.stdscr

        try:
            ch = target.getch()
            if ch != ESC:
                return ch

            seq = ""
            target.nodelay(True)
            try:
                while True:
                    nx = target.getch()
                    if nx == curses.ERR:
                        break
                    if 0 <= nx <= 255:
                        seq += chr(nx)
                    else:
                        seq += f"<{nx}>"
            finally:
                target.nodelay(False)

            if not seq:
                return ESC

            mapped = self.ESCAPE_SEQUENCE_MAP.get(seq)
            if not mapped:
                cleaned = "".join(re.findall(r"[\[O0-9;~A-Za-z]", seq))
                mapped = self.ESCAPE_SEQUENCE_MAP.get(cleaned)

            if mapped:
                code = self._decode_keystring(mapped)
                logging.debug("get_key_input: ESC %r -> %r -> code %r", seq, mapped, code)
                return code

            logging.debug("get_key_input: unknown escape sequence: ESC + %r", seq)
            return ESC

        except curses.error:
            return curses.ERR
        except Exception:
            logging.exception("get_key_input: unexpected error")
            return -1
