# cactus/ui/KeyBinder.py
"""KeyBinder.py
==================
Description:
-----------------------
The KeyBinder class translates terminal key presses into the logical key
events (`KeyEvent`) consumed by the Cactus editor core.

Key Features:
- Loads keybindings for the editor commands (quit, save, find, refresh)
  from the configuration, falling back to built-in defaults.
- Decodes human-readable key specifications ("ctrl+s", "pagedown") into
  curses key codes.
- Reads keys from the terminal, resolving ESC-prefixed sequences that
  curses did not translate itself.
- Everything that is not bound to a command and fits in a byte is passed
  to the core as a character to insert.
"""

import curses
import logging
import re
from typing import TYPE_CHECKING, Optional

from cactus.core.Keys import Key, KeyEvent
from cactus.utils.logging_config import KEY_LOGGER

if TYPE_CHECKING:
    from cactus.core.Cactus import Cactus


# ==================== KeyBinder Class ====================
class KeyBinder:
    """Maps curses key codes to `KeyEvent`s.

    Attributes:
        editor (Cactus): The editor instance (for ``config`` and ``stdscr``).
        config (dict): Editor configuration, including user keybindings.
        stdscr (curses.window): Window keys are read from.
        keybindings (dict): Action name -> list of key codes.
        action_map (dict): Key code -> `KeyEvent` produced for it.
    """

    # Keys do NOT include the leading ESC (0x1B); get_key_input() strips it.
    ESCAPE_SEQUENCE_MAP: dict[str, str] = {
        "[A": "up", "[B": "down", "[C": "right", "[D": "left",
        "OA": "up", "OB": "down", "OC": "right", "OD": "left",
        "[H": "home", "[F": "end", "OH": "home", "OF": "end",
        "[1~": "home", "[7~": "home", "[4~": "end", "[8~": "end",
        "[3~": "delete", "[5~": "pageup", "[6~": "pagedown",
    }

    ACTION_EVENTS: dict[str, KeyEvent] = {
        "quit": KeyEvent(Key.QUIT),
        "save_file": KeyEvent(Key.SAVE),
        "find": KeyEvent(Key.FIND),
        "refresh": KeyEvent(Key.REFRESH),
        "cancel_operation": KeyEvent(Key.ESCAPE),
        "handle_enter": KeyEvent(Key.ENTER),
        "handle_backspace": KeyEvent(Key.BACKSPACE),
        "delete": KeyEvent(Key.DELETE),
        "handle_up": KeyEvent(Key.ARROW_UP),
        "handle_down": KeyEvent(Key.ARROW_DOWN),
        "handle_left": KeyEvent(Key.ARROW_LEFT),
        "handle_right": KeyEvent(Key.ARROW_RIGHT),
        "handle_home": KeyEvent(Key.HOME),
        "handle_end": KeyEvent(Key.END),
        "handle_page_up": KeyEvent(Key.PAGE_UP),
        "handle_page_down": KeyEvent(Key.PAGE_DOWN),
    }

    def __init__(self, editor: "Cactus"):
        logging.debug("KeyBinder initialized with editor: %s", editor)
        self.editor = editor
        self.config = editor.config
        self.stdscr = editor.stdscr

        self.keybindings = self._load_keybindings()
        self.action_map = self._setup_action_map()

    def _load_keybindings(self) -> dict[str, list[int]]:
        """Loads and returns the keybindings configuration for the editor.

        The four editor commands can be rebound from the ``[keybindings]``
        config section; a value may be a single spec, a list of specs or a
        ``|``-separated string. Navigation and editing keys are fixed.

        Returns:
            dict[str, list[int]]: Action name -> key codes that trigger it.
        """
        default_keybindings: dict[str, list[int | str]] = {
            "quit": ["ctrl+q"],
            "save_file": ["ctrl+s"],
            "find": ["ctrl+f"],
            "refresh": ["ctrl+l"],
            "cancel_operation": ["esc"],
            "handle_enter": ["enter", 10, 13],
            "handle_backspace": ["backspace", 8, 127],
            "delete": ["delete"],
            "handle_up": ["up"],
            "handle_down": ["down"],
            "handle_left": ["left"],
            "handle_right": ["right"],
            "handle_home": ["home"],
            "handle_end": ["end"],
            "handle_page_up": ["pageup"],
            "handle_page_down": ["pagedown"],
        }
        configurable = {"quit", "save_file", "find", "refresh"}

        user_keybindings_config: dict[str, object] = self.config.get("keybindings", {})
        parsed_keybindings: dict[str, list[int]] = {}

        for action, default_value_spec in default_keybindings.items():
            spec: object = default_value_spec
            if action in configurable:
                spec = user_keybindings_config.get(action, default_value_spec)

            if not spec:
                logging.debug("Keybinding for action %r is disabled or empty.", action)
                continue

            specs_to_process: list[int | str]
            if isinstance(spec, list):
                specs_to_process = spec
            elif isinstance(spec, str) and "|" in spec:
                specs_to_process = [s.strip() for s in spec.split("|")]
            else:
                specs_to_process = [spec]  # type: ignore[list-item]

            key_codes_for_action: list[int] = []
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

        logging.debug("Loaded and parsed keybindings: %s", parsed_keybindings)
        return parsed_keybindings

    def _decode_keystring(self, key_input: str | int) -> int:
        """Decodes a key specification string or integer into a key code.

        Args:
            key_input: A spec such as ``"ctrl+s"``, ``"pagedown"`` or ``"x"``,
                or an integer key code (returned unchanged).

        Returns:
            int: The resolved key code.

        Raises:
            ValueError: If the key string is empty, unknown or uses an
                unsupported modifier.
        """
        if isinstance(key_input, int):
            return key_input
        if not isinstance(key_input, str):
            raise ValueError(f"Invalid key_input type: {type(key_input)}. Expected str or int.")

        s = key_input.strip().lower()
        if not s:
            raise ValueError("Key string cannot be empty.")

        named_keys_map: dict[str, int] = {
            "left": curses.KEY_LEFT,
            "right": curses.KEY_RIGHT,
            "up": curses.KEY_UP,
            "down": curses.KEY_DOWN,
            "home": curses.KEY_HOME,
            "end": getattr(curses, "KEY_END", curses.KEY_LL),
            "pageup": curses.KEY_PPAGE,
            "pgup": curses.KEY_PPAGE,
            "pagedown": curses.KEY_NPAGE,
            "pgdn": curses.KEY_NPAGE,
            "delete": curses.KEY_DC,
            "del": curses.KEY_DC,
            "backspace": curses.KEY_BACKSPACE,
            "tab": 9,
            "enter": curses.KEY_ENTER,
            "return": curses.KEY_ENTER,
            "space": ord(" "),
            "esc": 27,
            "escape": 27,
        }
        named_keys_map.update(
            {f"f{i}": getattr(curses, f"KEY_F{i}", 264 + i) for i in range(1, 13)}
        )

        if s in named_keys_map:
            return named_keys_map[s]

        parts = s.split("+")
        base_key_str = parts[-1].strip()
        modifiers = {p.strip() for p in parts[:-1]}

        if base_key_str in named_keys_map:
            base_code = named_keys_map[base_key_str]
        elif len(base_key_str) == 1:
            base_code = ord(base_key_str)
        else:
            raise ValueError(f"Unknown base key '{base_key_str}' in '{key_input}'")

        if "ctrl" in modifiers:
            modifiers.remove("ctrl")
            if "a" <= base_key_str <= "z" and len(base_key_str) == 1:
                base_code = ord(base_key_str) - ord("a") + 1
            elif base_key_str == "\\":
                base_code = 28
            elif base_key_str == "]":
                base_code = 29
            elif base_key_str == "/":
                base_code = 31
            else:
                raise ValueError(f"Unsupported Ctrl combination in '{key_input}'")

        if modifiers:
            raise ValueError(f"Unknown or unhandled modifiers {sorted(modifiers)} in '{key_input}'")

        return base_code

    def _setup_action_map(self) -> dict[int, KeyEvent]:
        """Build the key code -> `KeyEvent` table from the parsed keybindings."""
        final_key_action_map: dict[int, KeyEvent] = {}
        for action_name, key_code_list in self.keybindings.items():
            event = self.ACTION_EVENTS.get(action_name)
            if event is None:
                logging.warning(f"Action '{action_name}' in keybindings but no key event. Ignored.")
                continue
            for key_code in key_code_list:
                existing = final_key_action_map.get(key_code)
                if existing is not None and existing != event:
                    logging.warning(
                        f"Keybinding for action '{action_name}' (key: {key_code}) is overwriting "
                        f"an existing mapping for {existing.key.name}."
                    )
                final_key_action_map[key_code] = event
        return final_key_action_map

    def get_key_input(self, window: Optional["curses.window"] = None) -> int:
        """Read a single key or key sequence from the terminal.

        Returns:
            int: The curses key code, 27 for a lone or unknown ESC sequence,
            or ``curses.ERR`` on timeout and curses errors.
        """
        target = window or self.stdscr

        try:
            ch = target.getch()
            if ch != 27:
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
                target.timeout(100)

            if not seq:
                return 27

            mapped = self.ESCAPE_SEQUENCE_MAP.get(seq)
            if not mapped:
                cleaned = "".join(re.findall(r"[\[O0-9;~A-Za-z]", seq))
                mapped = self.ESCAPE_SEQUENCE_MAP.get(cleaned)

            if mapped:
                code = self._decode_keystring(mapped)
                logging.debug("get_key_input: ESC %r -> %r -> code %r", seq, mapped, code)
                return code

            logging.warning("get_key_input: unknown escape sequence: ESC + %r", seq)
            return 27

        except curses.error:
            return curses.ERR

    def translate(self, key_code: int) -> Optional[KeyEvent]:
        """Turn a curses key code into a `KeyEvent`, or None if it means nothing."""
        if key_code == curses.KEY_RESIZE:
            return KeyEvent(Key.RESIZE)
        event = self.action_map.get(key_code)
        if event is not None:
            return event
        if 0 <= key_code <= 255:
            return KeyEvent.char(key_code)
        logging.debug("translate: unbound key code %r ignored", key_code)
        return None

    def read_event(self) -> Optional[KeyEvent]:
        """Read one key from the terminal; None on timeout."""
        key_code = self.get_key_input()
        if key_code == curses.ERR:
            return None
        event = self.translate(key_code)
        KEY_LOGGER.debug("key %r -> %r", key_code, event)
        return event

    def lookup(self, key_spec: str | int) -> Optional[str]:
        """Finds the action name associated with a given key specification.

        Args:
            key_spec: The key string (e.g., "ctrl+s") or integer code.

        Returns:
            The name of the action (e.g., "save_file") or None if not found.
        """
        try:
            decoded_key = self._decode_keystring(key_spec)
        except ValueError:
            return None

        for action_name, key_list in self.keybindings.items():
            if decoded_key in key_list:
                return action_name
        return None
