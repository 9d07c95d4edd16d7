# complement_engine/suggest/editor_suggest.py
"""
EditorSuggest - the suggest controller contract a host drives.

Subclasses implement the four hooks:
    on_trigger(cursor, editor)  -> SuggestTriggerInfo | None   (sync, per edit)
    get_suggestions(context)    -> list | None                 (async; None = superseded)
    render_suggestion(item)     -> rich Text
    select_suggestion(item)     -> None                        (mutates the editor)

The base class owns the open/close state and the selected row, and offers
`trigger(editor)` which runs the whole trigger -> query -> open cycle. Hosts
call move_selection/use_selected_item from their key handlers instead of
reaching into list internals.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, List, Optional, TypeVar

from rich.text import Text

from complement_engine.core.protocols import EditorPosition, EditorProtocol

T = TypeVar("T")


@dataclass(frozen=True)
class SuggestTriggerInfo:
    start: EditorPosition
    end: EditorPosition
    query: str


@dataclass(frozen=True)
class EditorSuggestContext:
    editor: EditorProtocol
    start: EditorPosition
    end: EditorPosition
    query: str


class EditorSuggest(Generic[T]):

    def __init__(self) -> None:
        self.context: Optional[EditorSuggestContext] = None
        self.is_open = False
        self.suggestions: List[T] = []
        self.selected_item = 0
        # host hook, called whenever the visible list changes
        self.on_update: Optional[Callable[[], None]] = None

    # hooks -------------------------------------------------------------
    def on_trigger(self, cursor: EditorPosition, editor: EditorProtocol) -> Optional[SuggestTriggerInfo]:
        raise NotImplementedError

    async def get_suggestions(self, context: EditorSuggestContext) -> Optional[List[T]]:
        raise NotImplementedError

    def render_suggestion(self, item: T) -> Text:
        raise NotImplementedError

    def select_suggestion(self, item: T) -> None:
        raise NotImplementedError

    # driving -----------------------------------------------------------
    async def trigger(self, editor: EditorProtocol) -> List[T]:
        info = self.on_trigger(editor.get_cursor(), editor)
        if info is None:
            self.close()
            return []

        context = EditorSuggestContext(editor=editor, start=info.start, end=info.end, query=info.query)
        self.context = context
        items = await self.get_suggestions(context)
        if items is None or self.context is not context:
            # a newer trigger owns the panel now
            return []

        if items:
            self.open(items)
        else:
            self.close()
        return items

    def open(self, items: List[T]) -> None:
        self.suggestions = list(items)
        self.selected_item = 0
        self.is_open = True
        self._notify()

    def close(self) -> None:
        self.is_open = False
        self.suggestions = []
        self.selected_item = 0
        self.context = None
        self._notify()

    # selection ---------------------------------------------------------
    def move_selection(self, delta: int) -> None:
        if not self.suggestions:
            return
        self.selected_item = (self.selected_item + delta) % len(self.suggestions)
        self._notify()

    def use_selected_item(self) -> Optional[T]:
        if not self.is_open or not self.suggestions:
            return None
        item = self.suggestions[self.selected_item]
        self.select_suggestion(item)
        return item

    def _notify(self) -> None:
        if self.on_update is not None:
            self.on_update()
