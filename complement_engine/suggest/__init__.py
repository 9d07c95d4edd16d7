# complement_engine/suggest/__init__.py
# trigger state machine, debounced querying and insertion

from .auto_complete_suggest import AutoCompleteSuggest
from .buffer import InMemoryWorkspace, TextBuffer
from .debounce import Debouncer
from .editor_suggest import EditorSuggest, EditorSuggestContext, SuggestTriggerInfo
from .keymap import CycleThroughSuggestionsKeys, Keymap, SelectSuggestionKey

__all__ = [
    "AutoCompleteSuggest",
    "InMemoryWorkspace",
    "TextBuffer",
    "Debouncer",
    "EditorSuggest",
    "EditorSuggestContext",
    "SuggestTriggerInfo",
    "Keymap",
    "SelectSuggestionKey",
    "CycleThroughSuggestionsKeys",
]
