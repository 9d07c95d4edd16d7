"""
cli.py - command line front end for the completer
Features:
- Type text into an in-memory document; suggestions appear for the phrase before the cursor
- Pick a suggestion by number, the completer splices it into the document
- Custom dictionaries, link targets and match strategy from flags or config.json
- Manual trigger and predictable complete as slash commands
- Uses Rich for tables and formatting
"""

import argparse
import asyncio
import logging
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from complement_engine.core.match_strategy import MatchStrategy
from complement_engine.core.protocols import LinkTarget
from complement_engine.core.word import Word
from complement_engine.suggest.auto_complete_suggest import AutoCompleteSuggest
from complement_engine.suggest.buffer import InMemoryWorkspace, TextBuffer
from complement_engine.utils.config_manager import Config, Settings
from complement_engine.utils.logger_utils import Log, setup_logging

# initialise console for rich output
console = Console()


def load_link_targets(root: Optional[str]) -> List[LinkTarget]:
    """Every markdown file under root becomes a link target named after its stem."""
    if not root:
        return []
    base = Path(root)
    if not base.is_dir():
        Log.warning(f"[CLI] link directory not found: {root}")
        return []
    return [
        LinkTarget(title=p.stem, path=str(p.relative_to(base)))
        for p in sorted(base.rglob("*.md"))
    ]


class CLI:
    """Interactive loop: type -> trigger -> pick -> insert."""

    def __init__(self, settings: Settings, links: Optional[List[LinkTarget]] = None):
        self.settings = settings
        self.buffer = TextBuffer("")
        self.workspace = InMemoryWorkspace(self.buffer, links=links or [])
        self.suggest: Optional[AutoCompleteSuggest] = None
        self.running = True

    async def run(self):
        """
        Main interactive loop:
        - Prompts for text, appended at the cursor.
        - Handles commands like /quit, /show.
        - Offers suggestions for the phrase before the cursor.
        """
        self.suggest = await AutoCompleteSuggest.new(self.workspace, self.settings)

        console.rule("[bold magenta]Complement Engine[/bold magenta]")
        console.print("[cyan]Type text; it is appended to the document at the cursor.[/cyan]")
        console.print("Commands: /quit /show /newline /manual /predict /index\n")

        while self.running:
            try:
                fragment = await asyncio.to_thread(Prompt.ask, "[green]Type[/green]", default="")
            except (EOFError, KeyboardInterrupt):
                self._exit()
                break

            if not fragment:
                continue
            if fragment.startswith("/"):
                await self._handle_command(fragment)
                continue

            self.buffer.insert(fragment)
            await self._complete()

    # COMMAND HANDLING -----------------------------------------------------------
    async def _handle_command(self, cmd: str):
        if cmd.startswith("/quit"):
            self._exit()
            return

        if cmd == "/show":
            self._show_document()
            return

        if cmd == "/newline":
            self.buffer.insert("\n")
            await self.suggest.on_document_modified()
            return

        if cmd == "/manual":
            self.suggest.run_manually = True
            await self._complete(refresh=False)
            return

        if cmd == "/predict":
            word = self.suggest.predictable_complete()
            if word is None:
                console.print("[dim](nothing nearby to complete with)[/dim]")
            else:
                console.print(f"[green]Completed:[/green] {word}")
            return

        if cmd == "/index":
            self._show_index()
            return

        console.print(f"[red]Unknown command:[/red] {cmd}")

    # CORE INPUT PROCESSING ---------------------------------------------------------------
    async def _complete(self, refresh: bool = True):
        """Trigger -> display -> user choice -> insert."""
        if refresh:
            await self.suggest.on_document_modified()

        suggestions = await self.suggest.trigger(self.buffer)
        if not suggestions:
            console.print("[dim](no suggestions)[/dim]")
            return

        self._display_suggestions(suggestions)
        chosen = await asyncio.to_thread(Prompt.ask, "Pick # / Enter to skip", default="")
        if not chosen:
            self.suggest.close()
            return

        if chosen.isdigit() and 1 <= int(chosen) <= len(suggestions):
            self.suggest.move_selection(int(chosen) - 1)
            word = self.suggest.use_selected_item()
            console.print(f"[green]Accepted:[/green] {word.value}")
            self._show_document()
            return

        console.print(f"[red]No such suggestion:[/red] {chosen}")
        self.suggest.close()

    # DISPLAY -------------------------------------------------------------------------------
    def _display_suggestions(self, suggestions: List[Word]):
        table = Table(title="Suggestions", box=box.SIMPLE, show_edge=False)
        table.add_column("#", justify="right", style="cyan")
        table.add_column("Word", style="bold")
        table.add_column("Source", justify="left", style="dim")

        for i, w in enumerate(suggestions, 1):
            table.add_row(str(i), self.suggest.render_suggestion(w), self._source_of(w))
        console.print(table)

    def _source_of(self, word: Word) -> str:
        if word.internal_link:
            return "link"
        if word.matched_alias:
            return f"alias: {word.matched_alias}"
        return ""

    def _show_document(self):
        cursor = self.buffer.get_cursor()
        console.print(Panel(
            self.buffer.text or "[dim](empty)[/dim]",
            title="Document",
            subtitle=f"line {cursor.line}, ch {cursor.ch}",
            border_style="cyan",
        ))

    def _show_index(self):
        t = Table(title="Indexed words", box=box.MINIMAL)
        t.add_column("Source", style="cyan")
        t.add_column("Words", justify="right")
        t.add_row("current file", str(self.suggest.current_file_word_provider.size()))
        t.add_row("custom dictionary", str(self.suggest.custom_dictionary_word_provider.size()))
        t.add_row("internal link", str(self.suggest.internal_link_word_provider.size()))
        console.print(t)

    def _exit(self):
        console.rule("[red]Exiting[/red]")
        self.running = False


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="complement-engine", description="Interactive word completion")
    p.add_argument("--config", default="config.json", help="settings file, created when missing")
    p.add_argument("--dictionary", action="append", default=[],
                   help="custom dictionary file (repeatable); enables the dictionary source")
    p.add_argument("--match-strategy", choices=[m.name for m in MatchStrategy.values()],
                   help="override the configured match strategy")
    p.add_argument("--links", help="directory whose markdown files become link targets")
    p.add_argument("--debug", action="store_true", help="show performance logs")
    return p


def settings_from_args(args: argparse.Namespace) -> Settings:
    cfg = Config(args.config)
    overrides = {}
    if args.dictionary:
        overrides["enable_custom_dictionary_complement"] = True
        overrides["custom_dictionary_paths"] = "\n".join(args.dictionary)
    if args.match_strategy:
        overrides["match_strategy"] = args.match_strategy
    if args.debug:
        overrides["show_log_about_performance_in_console"] = True

    settings = cfg.settings()
    if overrides:
        settings = replace(settings, **overrides)
    return settings


def main(argv: Optional[List[str]] = None):
    args = build_parser().parse_args(argv)
    setup_logging(logging.DEBUG if args.debug else logging.INFO)
    settings = settings_from_args(args)
    asyncio.run(CLI(settings, load_link_targets(args.links)).run())


if __name__ == "__main__":
    main()
