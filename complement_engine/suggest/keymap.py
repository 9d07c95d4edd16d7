# complement_engine/suggest/keymap.py
"""
Keys that drive an open suggestion list.

Hosts pass every key press to `Keymap.handle` first. It returns True when the
key was used by the list and must not reach the editor.

While the list is open:
 - the select key inserts the highlighted suggestion
 - Up/Down and the additional cycle keys move the highlight
 - Enter and Tab close the list and fall through when they are not the select key
 - Escape closes the list; it reaches the editor only with propagate_esc
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Dict, List, Tuple

from complement_engine.suggest.editor_suggest import EditorSuggest
from complement_engine.utils.config_manager import Settings
from complement_engine.utils.logger_utils import Log


@dataclass(frozen=True)
class SelectSuggestionKey:
    name: str
    keys: Tuple[str, ...]

    _values: ClassVar[Dict[str, "SelectSuggestionKey"]] = {}

    @classmethod
    def register(cls, name: str, keys: Tuple[str, ...]) -> "SelectSuggestionKey":
        inst = cls(name, keys)
        cls._values[name] = inst
        return inst

    @classmethod
    def from_name(cls, name: str) -> "SelectSuggestionKey":
        try:
            return cls._values[name]
        except KeyError:
            raise ValueError(f"Unknown select suggestion key: {name!r}") from None

    @classmethod
    def values(cls) -> List["SelectSuggestionKey"]:
        return list(cls._values.values())


ENTER = SelectSuggestionKey.register("Enter", ("enter",))
TAB = SelectSuggestionKey.register("Tab", ("tab",))
MOD_ENTER = SelectSuggestionKey.register("Ctrl/Cmd+Enter", ("ctrl+enter",))
ALT_ENTER = SelectSuggestionKey.register("Alt+Enter", ("alt+enter",))
SHIFT_ENTER = SelectSuggestionKey.register("Shift+Enter", ("shift+enter",))
SPACE = SelectSuggestionKey.register("Space", ("space",))
SHIFT_SPACE = SelectSuggestionKey.register("Shift+Space", ("shift+space",))
SELECT_NONE = SelectSuggestionKey.register("None", ())


@dataclass(frozen=True)
class CycleThroughSuggestionsKeys:
    name: str
    next_key: str
    previous_key: str

    _values: ClassVar[Dict[str, "CycleThroughSuggestionsKeys"]] = {}

    @classmethod
    def register(cls, name: str, next_key: str, previous_key: str) -> "CycleThroughSuggestionsKeys":
        inst = cls(name, next_key, previous_key)
        cls._values[name] = inst
        return inst

    @classmethod
    def from_name(cls, name: str) -> "CycleThroughSuggestionsKeys":
        try:
            return cls._values[name]
        except KeyError:
            raise ValueError(f"Unknown cycle through suggestions keys: {name!r}") from None

    @classmethod
    def values(cls) -> List["CycleThroughSuggestionsKeys"]:
        return list(cls._values.values())


CYCLE_NONE = CycleThroughSuggestionsKeys.register("None", "", "")
CYCLE_TAB = CycleThroughSuggestionsKeys.register("Tab, Shift+Tab", "tab", "shift+tab")
CYCLE_EMACS = CycleThroughSuggestionsKeys.register("Ctrl/Cmd+N, Ctrl/Cmd+P", "ctrl+n", "ctrl+p")
CYCLE_VIM = CycleThroughSuggestionsKeys.register("Ctrl/Cmd+J, Ctrl/Cmd+K", "ctrl+j", "ctrl+k")

NEXT_KEYS = ("down",)
PREVIOUS_KEYS = ("up",)


class Keymap:

    def __init__(self,
                 select: SelectSuggestionKey = ENTER,
                 cycle: CycleThroughSuggestionsKeys = CYCLE_NONE,
                 propagate_esc: bool = False):
        self.select = select
        self.cycle = cycle
        self.propagate_esc = propagate_esc

    @classmethod
    def from_settings(cls, settings: Settings) -> "Keymap":
        return cls(
            SelectSuggestionKey.from_name(settings.select_suggestion_keys),
            CycleThroughSuggestionsKeys.from_name(settings.additional_cycle_through_suggestions_keys),
            settings.propagate_esc,
        )

    def next_keys(self) -> Tuple[str, ...]:
        return NEXT_KEYS + ((self.cycle.next_key,) if self.cycle.next_key else ())

    def previous_keys(self) -> Tuple[str, ...]:
        return PREVIOUS_KEYS + ((self.cycle.previous_key,) if self.cycle.previous_key else ())

    def handle(self, suggest: EditorSuggest, key: str) -> bool:
        if not suggest.is_open:
            return False

        if key in self.select.keys:
            word = suggest.use_selected_item()
            if word is not None:
                Log.debug(f"accepted: {word.value}")
            return True
        if key in self.next_keys():
            suggest.move_selection(1)
            return True
        if key in self.previous_keys():
            suggest.move_selection(-1)
            return True
        if key == "escape":
            suggest.close()
            return not self.propagate_esc
        if key in ENTER.keys + TAB.keys:
            suggest.close()
            return False
        return False
