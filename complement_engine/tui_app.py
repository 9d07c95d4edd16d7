# tui_app.py - Complement Engine TUI
# -------------------------------------------------------
# A small Textual editor with the completer attached.
# Features:
#  - Suggestions for the phrase before the cursor while typing
#  - Configurable select and cycle keys, Up / Down move the highlight, Escape closes
#  - Ctrl+T asks for suggestions even when automatic completion is off
#  - Ctrl+E completes from nearby text without the index
#  - Latency readout for the last query
# -------------------------------------------------------

from __future__ import annotations

import argparse
import time
from typing import List, Optional

from rich.text import Text
from textual import events
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal
from textual.reactive import reactive
from textual.widgets import Footer, Header, Static, TextArea

from complement_engine.cli.cli import load_link_targets
from complement_engine.core.protocols import EditorPosition
from complement_engine.core.word import Word
from complement_engine.suggest.auto_complete_suggest import AutoCompleteSuggest
from complement_engine.suggest.keymap import Keymap
from complement_engine.utils.config_manager import Config, Settings


class TextAreaEditor:
    """EditorProtocol over a Textual TextArea. Positions map to (row, column) locations."""

    def __init__(self, area: TextArea):
        self.area = area

    def get_cursor(self) -> EditorPosition:
        row, col = self.area.cursor_location
        return EditorPosition(row, col)

    def set_cursor(self, pos: EditorPosition) -> None:
        self.area.move_cursor((pos.line, pos.ch))

    def get_line(self, line: int) -> str:
        if 0 <= line < self.line_count():
            return self.area.document.get_line(line)
        return ""

    def line_count(self) -> int:
        return self.area.document.line_count

    def get_range(self, start: EditorPosition, end: EditorPosition) -> str:
        return self.area.get_text_range((start.line, start.ch), (end.line, end.ch))

    def replace_range(self, text: str, start: EditorPosition, end: EditorPosition) -> None:
        self.area.replace(text, (start.line, start.ch), (end.line, end.ch))

    def pos_to_offset(self, pos: EditorPosition) -> int:
        return sum(len(self.get_line(i)) + 1 for i in range(pos.line)) + pos.ch

    def offset_to_pos(self, offset: int) -> EditorPosition:
        for i in range(self.line_count()):
            n = len(self.get_line(i))
            if offset <= n:
                return EditorPosition(i, max(offset, 0))
            offset -= n + 1
        last = self.line_count() - 1
        return EditorPosition(last, len(self.get_line(last)))


class TextAreaWorkspace:
    def __init__(self, editor: TextAreaEditor, links=()):
        self.editor = editor
        self.links = list(links)

    def get_current_editor(self):
        return self.editor

    def get_active_file_content(self) -> Optional[str]:
        return self.editor.area.text

    def get_link_targets(self):
        return list(self.links)

    def is_ime_on(self) -> bool:
        # terminals deliver composed text only
        return False


class CompletingTextArea(TextArea):
    """TextArea that offers each key to the suggestion list before editing with it."""

    async def _on_key(self, event: events.Key) -> None:
        if self.app.handle_completion_key(event.key):
            event.prevent_default()
            event.stop()


class SuggestionPanel(Static):
    """
    Right-side suggestion panel.
    Shows the open suggestion list; the selected row is highlighted.
    """
    def update_suggestions(self, suggest: AutoCompleteSuggest):
        if not suggest.is_open:
            self.update(Text("No suggestions", style="dim"))
            return

        out = Text()
        for i, word in enumerate(suggest.suggestions):
            row = suggest.render_suggestion(word)
            if i == suggest.selected_item:
                row.stylize("reverse")
            out.append_text(row)
            out.append("\n")
        self.update(out)


class TypingLatency(Static):
    """Bottom-left readout showing how long the last query took."""
    def set_latency(self, seconds: float):
        ms = round(seconds * 1000)
        self.update(f"[dim]Latency:[/dim] {ms}ms")


# Main Application -----------------------------------------------------------------
class ComplementApp(App):
    """
    Editor on the left, suggestions on the right.
    Text changes refresh the current-file index and run the trigger.
    """
    CSS_PATH = "tui_style.tcss"

    BINDINGS = [
        Binding("ctrl+t", "manual_trigger", "Suggest"),
        Binding("ctrl+e", "predictable_complete", "Predict"),
    ]

    latency = reactive(0.0)

    def __init__(self, settings: Optional[Settings] = None, links=()):
        super().__init__()
        self.settings = settings or Settings()
        self.keymap = Keymap.from_settings(self.settings)
        self.links = list(links)
        self.suggest: Optional[AutoCompleteSuggest] = None
        self.editor: Optional[TextAreaEditor] = None

    # UI --------------------------------------------------------------------
    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal():
            with Container(id="left"):
                yield CompletingTextArea(id="editor")
            with Container(id="right"):
                yield SuggestionPanel(id="suggestions")
        with Horizontal(id="bottom"):
            yield TypingLatency(id="latency")
            yield Static(id="status")
        yield Footer()

    async def on_mount(self) -> None:
        area = self.query_one(TextArea)
        self.editor = TextAreaEditor(area)
        self.suggest = await AutoCompleteSuggest.new(TextAreaWorkspace(self.editor, self.links), self.settings)
        self.suggest.on_update = self._refresh_panel
        self._refresh_panel()
        area.focus()

    async def on_text_area_changed(self, event: TextArea.Changed) -> None:
        self.run_worker(self._refresh_and_trigger(), group="suggest")

    async def _refresh_and_trigger(self) -> None:
        await self.suggest.on_document_modified()
        await self._trigger()

    async def _trigger(self) -> None:
        start = time.perf_counter()
        await self.suggest.trigger(self.editor)
        self.latency = time.perf_counter() - start

    def watch_latency(self, latency):
        self.query_one(TypingLatency).set_latency(latency)

    def _refresh_panel(self) -> None:
        self.query_one(SuggestionPanel).update_suggestions(self.suggest)

    def _status(self, msg: str) -> None:
        self.query_one("#status", Static).update(msg)

    # Keys -------------------------------------------------------------------------
    def handle_completion_key(self, key: str) -> bool:
        """True when the key was used by the suggestion list."""
        if self.suggest is None:
            return False
        selected: Optional[Word] = None
        if self.suggest.is_open and key in self.keymap.select.keys:
            selected = self.suggest.suggestions[self.suggest.selected_item]
        if self.keymap.handle(self.suggest, key):
            if selected is not None:
                self._status(f"[green]Inserted[/green] {selected.value}")
            return True
        if key == "tab" and not self.suggest.is_open:
            # TAB indents while no list is open
            self.editor.area.insert("\t")
            return True
        return False

    # Actions ----------------------------------------------------------------------
    def action_manual_trigger(self) -> None:
        if self.suggest is None:
            return
        self.suggest.run_manually = True
        self.run_worker(self._trigger(), group="suggest")

    def action_predictable_complete(self) -> None:
        if self.suggest is None:
            return
        word = self.suggest.predictable_complete()
        if word is None:
            self._status("[dim]Nothing nearby to complete with[/dim]")
        else:
            self._status(f"[green]Completed[/green] {word}")


def main(argv: Optional[List[str]] = None):
    p = argparse.ArgumentParser(prog="complement-engine-tui")
    p.add_argument("--config", default="config.json")
    p.add_argument("--links", help="directory whose markdown files become link targets")
    args = p.parse_args(argv)
    ComplementApp(Config(args.config).settings(), load_link_targets(args.links)).run()


if __name__ == "__main__":
    main()
