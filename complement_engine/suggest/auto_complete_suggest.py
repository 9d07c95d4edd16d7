# complement_engine/suggest/auto_complete_suggest.py
"""
AutoCompleteSuggest - the completer wired to its word sources.

Purpose:
 - Own the three word providers (current file, custom dictionary, internal link)
   and refresh/clear them according to Settings.
 - Decide per edit whether to query (on_trigger), and with which phrase tokens.
 - Run the query through a debouncer; only the most recent request of a burst
   gets an answer, older ones resolve to None.
 - Compute the text to splice in on selection, and the caret position.

Flow:
    host edit -> trigger(editor) -> on_trigger -> get_suggestions (debounced)
              -> MatchStrategy handler per token -> dedup/cut -> open(list)
    user pick -> select_suggestion -> replace_range -> debounced close
"""

from __future__ import annotations

import asyncio
import json
import re
import time
from dataclasses import replace
from typing import Callable, List, Optional

from rich.text import Text

from complement_engine.context.tokenizer import TokenizeStrategy, create_tokenizer
from complement_engine.core.match_strategy import MatchStrategy
from complement_engine.core.protocols import EditorPosition, EditorProtocol, QueryToken, WorkspaceProtocol
from complement_engine.core.word import IndexedWords, Word, uniq_words
from complement_engine.providers import (
    ColumnDelimiter,
    CurrentFileWordProvider,
    CustomDictionaryWordProvider,
    InternalLinkWordProvider,
)
from complement_engine.suggest.debounce import Debouncer, Scheduler
from complement_engine.suggest.editor_suggest import EditorSuggest, EditorSuggestContext, SuggestTriggerInfo
from complement_engine.utils.config_manager import Settings
from complement_engine.utils.logger_utils import Log

# lines around the cursor scanned by predictable_complete
PREDICTABLE_RANGE_LINES = 50
CLOSE_DELAY_EXTRA_MS = 50


def _elapsed_ms(start: float) -> float:
    return (time.perf_counter() - start) * 1000


class AutoCompleteSuggest(EditorSuggest[Word]):

    def __init__(self,
                 workspace: WorkspaceProtocol,
                 settings: Optional[Settings] = None,
                 custom_dictionary_word_provider: Optional[CustomDictionaryWordProvider] = None,
                 scheduler: Optional[Scheduler] = None):
        super().__init__()
        self.workspace = workspace
        self.scheduler = scheduler
        self.custom_dictionary_word_provider = custom_dictionary_word_provider or CustomDictionaryWordProvider([])
        self.run_manually = False
        self.context_start_ch = 0
        self._pending: Optional[asyncio.Future] = None
        self._apply_settings(settings or Settings())

    @classmethod
    async def new(cls, workspace: WorkspaceProtocol, settings: Settings,
                  scheduler: Optional[Scheduler] = None) -> "AutoCompleteSuggest":
        """Build the completer and index every enabled source once."""
        ins = cls(workspace, settings, scheduler=scheduler)
        await ins.refresh_index()
        return ins

    # settings ----------------------------------------------------------
    @property
    def tokenizer_strategy(self) -> TokenizeStrategy:
        return TokenizeStrategy.from_name(self.settings.strategy)

    @property
    def match_strategy(self) -> MatchStrategy:
        return MatchStrategy.from_name(self.settings.match_strategy)

    @property
    def min_number_triggered(self) -> int:
        return self.settings.min_number_of_characters_triggered or self.tokenizer_strategy.trigger_threshold

    @property
    def indexed_words(self) -> IndexedWords:
        return IndexedWords(
            current_file=self.current_file_word_provider.words_by_first_letter,
            custom_dictionary=self.custom_dictionary_word_provider.words_by_first_letter,
            internal_link=self.internal_link_word_provider.words_by_first_letter,
        )

    def _apply_settings(self, settings: Settings) -> None:
        self.settings = settings
        self.custom_dictionary_word_provider.update(
            settings.dictionary_paths(), ColumnDelimiter.from_name(settings.column_delimiter)
        )
        self.tokenizer = create_tokenizer(self.tokenizer_strategy)
        self.current_file_word_provider = CurrentFileWordProvider(self.workspace, self.tokenizer)
        self.internal_link_word_provider = InternalLinkWordProvider(self.workspace)

        chars = settings.first_characters_disable_suggestions
        self._conflict_pattern = re.compile(f"^[{re.escape(chars)}]") if chars else None

        self.debounce_get_suggestions = Debouncer(
            self._get_suggestions_now, settings.delay_milli_seconds,
            leading=True, scheduler=self.scheduler,
        )
        self.debounce_close = Debouncer(
            self.close, settings.delay_milli_seconds + CLOSE_DELAY_EXTRA_MS,
            leading=False, scheduler=self.scheduler,
        )

    async def update_settings(self, settings: Settings) -> None:
        self._apply_settings(settings)
        await self.refresh_index()

    # index refresh -----------------------------------------------------
    async def refresh_index(self) -> None:
        await self.refresh_current_file_tokens()
        await self.refresh_custom_dictionary_tokens()
        self.refresh_internal_link_tokens()

    async def refresh_current_file_tokens(self) -> None:
        start = time.perf_counter()
        if not self.settings.enable_current_file_complement:
            self.current_file_word_provider.clear_words()
            self._show_debug_log("Skip: Index current file tokens", _elapsed_ms(start))
            return

        await self.current_file_word_provider.refresh_words(
            self.settings.only_complement_english_on_current_file_complement
        )
        self._show_debug_log("Index current file tokens", _elapsed_ms(start))

    async def refresh_custom_dictionary_tokens(self) -> None:
        start = time.perf_counter()
        if not self.settings.enable_custom_dictionary_complement:
            self.custom_dictionary_word_provider.clear_words()
            self._show_debug_log("Skip: Index custom dictionary tokens", _elapsed_ms(start))
            return

        await self.custom_dictionary_word_provider.refresh_custom_words()
        self._show_debug_log("Index custom dictionary tokens", _elapsed_ms(start))

    def refresh_internal_link_tokens(self) -> None:
        start = time.perf_counter()
        if not self.settings.enable_internal_link_complement:
            self.internal_link_word_provider.clear_words()
            self._show_debug_log("Skip: Index internal link tokens", _elapsed_ms(start))
            return

        self.internal_link_word_provider.refresh_words()
        self._show_debug_log("Index internal link tokens", _elapsed_ms(start))

    # host events
    async def on_document_modified(self) -> None:
        await self.refresh_current_file_tokens()

    async def on_active_document_changed(self) -> None:
        await self.refresh_current_file_tokens()
        self.refresh_internal_link_tokens()

    # trigger -----------------------------------------------------------
    def on_trigger(self, cursor: EditorPosition, editor: EditorProtocol) -> Optional[SuggestTriggerInfo]:
        # manual mode is single shot, whatever the outcome
        try:
            return self._decide_trigger(cursor, editor)
        finally:
            self.run_manually = False

    def _decide_trigger(self, cursor: EditorPosition, editor: EditorProtocol) -> Optional[SuggestTriggerInfo]:
        start = time.perf_counter()
        s = self.settings

        if not s.complement_automatically and not self.is_open and not self.run_manually:
            self._show_debug_log("Don't show suggestions: automatic completion is off")
            return None

        if s.disable_suggestions_during_ime_on and self.workspace.is_ime_on() and not self.run_manually:
            self._show_debug_log("Don't show suggestions while IME is on")
            return None

        line = editor.get_line(cursor.line)[: cursor.ch]
        if line.startswith("---"):
            self._show_debug_log("Don't show suggestions on front matter or a horizontal rule")
            return None
        if line.startswith("~~~") or line.startswith("```"):
            self._show_debug_log("Don't show suggestions on a code fence")
            return None

        if s.show_log_about_performance_in_console:
            self._show_debug_log(f"[on_trigger] tokens: {self.tokenizer.tokenize(line, True)}")

        tokenized = self.tokenizer.recursive_tokenize(line)
        window = s.max_number_of_words_as_phrase
        current_tokens = tokenized[-window:] if window > 0 else []
        self._show_debug_log(f"[on_trigger] current tokens: {json.dumps(current_tokens, ensure_ascii=False)}")

        current_token = current_tokens[0]["word"] if current_tokens else ""
        if not current_token:
            self._show_debug_log("Don't show suggestions because the current token is empty")
            return None

        last_fragment = line.split(" ")[-1]
        if self._conflict_pattern is not None and self._conflict_pattern.match(last_fragment):
            self._show_debug_log("Don't show suggestions that would conflict with other commands")
            return None

        if len(current_token) == 1 and self.tokenizer.trim_pattern().search(current_token):
            self._show_debug_log("Don't show suggestions because the current token is a trim character")
            return None

        if not self.run_manually:
            if len(current_token) < self.min_number_triggered:
                self._show_debug_log(
                    "Don't show suggestions because the current token is shorter than min_number_triggered"
                )
                return None
            if self.tokenizer.should_ignore(current_token):
                self._show_debug_log("Don't show suggestions because the current token should be ignored")
                return None

        self._show_debug_log("on_trigger", _elapsed_ms(start))

        self.context_start_ch = cursor.ch - len(current_token)
        base = current_tokens[0]["offset"]
        query: List[QueryToken] = [
            {"word": t["word"], "offset": t["offset"] - base} for t in current_tokens
        ]
        return SuggestTriggerInfo(
            start=EditorPosition(line=cursor.line, ch=cursor.ch - len(tokenized[-1]["word"])),
            end=cursor,
            query=json.dumps(query, ensure_ascii=False),
        )

    async def trigger_complete(self) -> List[Word]:
        """Manual invocation: bypasses the automatic/IME/length gates once."""
        editor = self.workspace.get_current_editor()
        if editor is None:
            return []
        self.run_manually = True
        return await self.trigger(editor)

    # query -------------------------------------------------------------
    def _eligible_queries(self, queries: List[QueryToken]) -> List[QueryToken]:
        min_words = self.settings.min_number_of_words_triggered_phrase
        n = len(queries)
        return [
            q for i, q in enumerate(queries)
            if min_words + i - 1 < n
            and len(q["word"]) >= self.min_number_triggered
            and not self.tokenizer.should_ignore(q["word"])
            and not q["word"].endswith(" ")
        ]

    def _get_suggestions_now(self, context: EditorSuggestContext, cb: Callable[[List[Word]], None]) -> None:
        start = time.perf_counter()
        self._show_debug_log(f"[get_suggestions] query: {context.query}")

        max_ = max(0, self.settings.max_number_of_suggestions)
        handler = self.match_strategy.handler
        indexed = self.indexed_words

        words: List[Word] = []
        for q in self._eligible_queries(json.loads(context.query)):
            words.extend(replace(w, offset=q["offset"]) for w in handler(indexed, q["word"], max_))

        cb(uniq_words(words)[:max_])
        self._show_debug_log("Get suggestions", _elapsed_ms(start))

    async def get_suggestions(self, context: EditorSuggestContext) -> Optional[List[Word]]:
        loop = asyncio.get_running_loop()
        fut: asyncio.Future = loop.create_future()
        if self._pending is not None and not self._pending.done():
            # superseded: the debouncer will only answer the newest request
            self._pending.set_result(None)
        self._pending = fut

        def resolve(words: List[Word]) -> None:
            if not fut.done():
                fut.set_result(words)

        self.debounce_get_suggestions(context, resolve)
        return await fut

    # render/select -----------------------------------------------------
    def _link_text(self, word: Word) -> str:
        if self.settings.suggest_internal_link_with_alias and word.matched_alias:
            return f"[[{word.value}|{word.matched_alias}]]"
        return f"[[{word.value}]]"

    def render_suggestion(self, word: Word) -> Text:
        text = self._link_text(word) if word.internal_link else word.value
        delimiter = self.settings.delimiter_to_hide_suggestion
        if delimiter and delimiter in text:
            text = f"{text.split(delimiter)[0]} ..."

        out = Text(text)
        if word.description:
            out.append("\n")
            out.append(word.description, style="dim")
        return out

    def insertion_text(self, word: Word) -> str:
        text = self._link_text(word) if word.internal_link else word.value
        if self.settings.insert_after_completion:
            text = f"{text} "
        if self.settings.delimiter_to_hide_suggestion:
            text = text.replace(self.settings.delimiter_to_hide_suggestion, "", 1)
        return text

    def select_suggestion(self, word: Word) -> None:
        if self.context is None:
            return

        inserted = self.insertion_text(word)
        caret = self.settings.caret_location_symbol_after_complement
        position_to_move = inserted.find(caret) if caret else -1
        if position_to_move != -1:
            inserted = inserted.replace(caret, "", 1)

        editor = self.context.editor
        editor.replace_range(
            inserted,
            EditorPosition(line=self.context.start.line, ch=self.context_start_ch + (word.offset or 0)),
            self.context.end,
        )

        if position_to_move != -1:
            editor.set_cursor(
                editor.offset_to_pos(
                    editor.pos_to_offset(editor.get_cursor()) - len(inserted) + position_to_move
                )
            )

        # close is debounced only; a refresh still in flight must not reopen the list
        self.debounce_close()

    def predictable_complete(self) -> Optional[str]:
        """Complete the current token from nearby text of the same document, without the index."""
        editor = self.workspace.get_current_editor()
        if editor is None:
            return None

        cursor = editor.get_cursor()
        line_before = editor.get_line(cursor.line)[: cursor.ch]
        # nothing to extend right after a separator
        if not line_before or self.tokenizer.trim_pattern().search(line_before[-1]):
            return None
        before = self.tokenizer.tokenize(line_before)
        if not before:
            return None
        current_token = before[-1]

        upper = self.tokenizer.tokenize(
            editor.get_range(EditorPosition(line=max(cursor.line - PREDICTABLE_RANGE_LINES, 0), ch=0), cursor)
        )
        suggestion = next((x for x in list(reversed(upper))[1:] if x.startswith(current_token)), None)
        if suggestion is None:
            lower = self.tokenizer.tokenize(
                editor.get_range(
                    cursor,
                    EditorPosition(
                        line=min(cursor.line + PREDICTABLE_RANGE_LINES, editor.line_count() - 1), ch=0
                    ),
                )
            )
            suggestion = next((x for x in lower if x.startswith(current_token)), None)
        if suggestion is None:
            return None

        editor.replace_range(
            suggestion,
            EditorPosition(line=cursor.line, ch=cursor.ch - len(current_token)),
            cursor,
        )
        self.close()
        self.debounce_close()
        return suggestion

    # debug -------------------------------------------------------------
    def _show_debug_log(self, message: str, msec: Optional[float] = None) -> None:
        if not self.settings.show_log_about_performance_in_console:
            return
        if msec is not None:
            Log.metric(message, round(msec), "[ms]")
        else:
            Log.info(message)
