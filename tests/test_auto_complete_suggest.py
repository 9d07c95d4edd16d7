# tests/test_auto_complete_suggest.py
# trigger decisions, debounced querying and insertion, driven through the in-memory buffer

import asyncio
import json
import logging

import pytest

from complement_engine.core.protocols import EditorPosition, LinkTarget
from complement_engine.core.word import Word
from complement_engine.suggest.auto_complete_suggest import AutoCompleteSuggest
from complement_engine.suggest.buffer import InMemoryWorkspace, TextBuffer
from complement_engine.suggest.editor_suggest import EditorSuggestContext
from complement_engine.utils.config_manager import Settings


def make(clock, text, links=(), ime_on=False, **overrides):
    buf = TextBuffer(text)
    ws = InMemoryWorkspace(buf, links=links, ime_on=ime_on)
    s = asyncio.run(AutoCompleteSuggest.new(ws, Settings(**overrides), scheduler=clock))
    return buf, s


def run_trigger(s, buf, clock):
    out = asyncio.run(s.trigger(buf))
    # close the query window so the next trigger leads again
    clock.advance(s.settings.delay_milli_seconds)
    return out


def values(words):
    return [w.value for w in words]


@pytest.fixture
def dictionary(tmp_path):
    def write(*lines):
        p = tmp_path / "dict.txt"
        p.write_text("\n".join(lines) + "\n", encoding="utf8")
        return str(p)
    return write


# trigger decisions ---------------------------------------------------------

@pytest.mark.parametrize("line", ["---abc", "----", "```pyth", "~~~pyth"])
def test_markers_never_trigger(clock, line):
    buf, s = make(clock, line)
    assert s.on_trigger(buf.get_cursor(), buf) is None
    s.run_manually = True
    assert s.on_trigger(buf.get_cursor(), buf) is None


def test_automatic_off_needs_open_panel_or_manual(clock):
    buf, s = make(clock, "apple\nappl", complement_automatically=False)
    assert s.on_trigger(buf.get_cursor(), buf) is None

    s.run_manually = True
    assert s.on_trigger(buf.get_cursor(), buf) is not None
    assert s.run_manually is False

    s.open([Word("apple")])
    assert s.on_trigger(buf.get_cursor(), buf) is not None


def test_manual_flag_is_cleared_when_suppressed(clock):
    buf, s = make(clock, "---")
    s.run_manually = True
    s.on_trigger(buf.get_cursor(), buf)
    assert s.run_manually is False


def test_ime_gate(clock):
    buf, s = make(clock, "appl", ime_on=True, disable_suggestions_during_ime_on=True)
    assert s.on_trigger(buf.get_cursor(), buf) is None
    s.run_manually = True
    assert s.on_trigger(buf.get_cursor(), buf) is not None


def test_conflicting_first_character(clock):
    buf, s = make(clock, "hello :smile")
    assert s.on_trigger(buf.get_cursor(), buf) is None

    buf, s = make(clock, "hello :smile", first_characters_disable_suggestions="")
    assert s.on_trigger(buf.get_cursor(), buf) is not None


def test_single_trim_character(clock):
    buf, s = make(clock, "(")
    s.run_manually = True
    assert s.on_trigger(buf.get_cursor(), buf) is None


def test_empty_token(clock):
    buf, s = make(clock, "")
    s.run_manually = True
    assert s.on_trigger(buf.get_cursor(), buf) is None


def test_short_token_only_when_manual(clock):
    buf, s = make(clock, "ab")
    assert s.on_trigger(buf.get_cursor(), buf) is None
    s.run_manually = True
    assert s.on_trigger(buf.get_cursor(), buf) is not None


def test_min_characters_setting_overrides_strategy(clock):
    buf, s = make(clock, "ab", min_number_of_characters_triggered=2)
    assert s.min_number_triggered == 2
    assert s.on_trigger(buf.get_cursor(), buf) is not None


def test_english_only_ignores_numbers(clock):
    buf, s = make(clock, "12345", strategy="english-only")
    assert s.on_trigger(buf.get_cursor(), buf) is None


def test_phrase_window_and_offsets(clock):
    buf, s = make(clock, "hello wor")
    info = s.on_trigger(buf.get_cursor(), buf)
    assert json.loads(info.query) == [
        {"word": "hello wor", "offset": 0},
        {"word": "wor", "offset": 6},
    ]
    assert info.start == EditorPosition(0, 6)
    assert info.end == EditorPosition(0, 9)
    assert s.context_start_ch == 0


def test_phrase_window_rebases_offsets(clock):
    buf, s = make(clock, "a b c d", max_number_of_words_as_phrase=2)
    info = s.on_trigger(buf.get_cursor(), buf)
    assert json.loads(info.query) == [{"word": "c d", "offset": 0}, {"word": "d", "offset": 2}]
    assert s.context_start_ch == 4


def test_suppression_is_logged_when_enabled(clock, caplog):
    buf, s = make(clock, "---", show_log_about_performance_in_console=True)
    with caplog.at_level(logging.INFO, logger="complement_engine"):
        s.on_trigger(buf.get_cursor(), buf)
    assert "front matter" in caplog.text


# querying -----------------------------------------------------------------

def test_trigger_opens_with_current_file_words(clock):
    buf, s = make(clock, "apple apricot banana\napr")
    out = run_trigger(s, buf, clock)
    assert values(out) == ["apricot"]
    assert s.is_open
    assert s.context is not None


def test_no_result_closes(clock):
    buf, s = make(clock, "apple\nzzz")
    assert run_trigger(s, buf, clock) == []
    assert not s.is_open


def test_non_positive_max_suggestions_returns_nothing(clock):
    for max_ in (0, -1):
        buf, s = make(clock, "apple apricot banana\napr", max_number_of_suggestions=max_)
        assert run_trigger(s, buf, clock) == []
        assert not s.is_open


def test_tokens_are_queried_independently_with_offsets(clock, dictionary):
    path = dictionary("fo bar", "banana")
    buf, s = make(
        clock, "fo ba",
        enable_current_file_complement=False,
        enable_custom_dictionary_complement=True,
        custom_dictionary_paths=path,
        min_number_of_characters_triggered=2,
    )
    out = run_trigger(s, buf, clock)
    assert [(w.value, w.offset) for w in out] == [("fo bar", 0), ("banana", 3)]


def test_min_words_in_phrase(clock, dictionary):
    path = dictionary("fo bar", "banana")
    buf, s = make(
        clock, "fo ba",
        enable_current_file_complement=False,
        enable_custom_dictionary_complement=True,
        custom_dictionary_paths=path,
        min_number_of_characters_triggered=2,
        min_number_of_words_triggered_phrase=2,
    )
    assert values(run_trigger(s, buf, clock)) == ["fo bar"]


def test_tokens_ending_with_space_are_not_queried(clock):
    buf, s = make(clock, "foo bar\nfoo ")
    assert run_trigger(s, buf, clock) == []


def test_results_are_deduplicated_and_cut(clock):
    buf, s = make(clock, "abc abd abe abf\nab ab", max_number_of_suggestions=2,
                  min_number_of_characters_triggered=2)
    out = run_trigger(s, buf, clock)
    assert len(out) == 2
    assert len({w.value for w in out}) == 2


def test_partial_match_strategy(clock):
    buf, s = make(clock, "New York\nork", match_strategy="partial")
    assert values(run_trigger(s, buf, clock)) == ["York"]


def test_superseded_requests_resolve_to_none(clock):
    buf, s = make(clock, "apple apricot\napr", delay_milli_seconds=100)
    ctx = EditorSuggestContext(
        editor=buf,
        start=EditorPosition(1, 0),
        end=EditorPosition(1, 3),
        query=json.dumps([{"word": "apr", "offset": 0}]),
    )

    async def go():
        first = await s.get_suggestions(ctx)
        second = asyncio.ensure_future(s.get_suggestions(ctx))
        third = asyncio.ensure_future(s.get_suggestions(ctx))
        await asyncio.sleep(0)
        clock.advance(100)
        return first, await second, await third

    first, second, third = asyncio.run(go())
    assert values(first) == ["apricot"]
    assert second is None
    assert values(third) == ["apricot"]


def test_manual_trigger_when_automatic_is_off(clock):
    buf, s = make(clock, "apple apricot\napr", complement_automatically=False)
    assert run_trigger(s, buf, clock) == []
    out = asyncio.run(s.trigger_complete())
    assert values(out) == ["apricot"]
    assert s.run_manually is False


# selection ----------------------------------------------------------------

def test_select_replaces_token_and_appends_space(clock):
    buf, s = make(clock, "apple apricot\napr")
    run_trigger(s, buf, clock)
    s.use_selected_item()
    assert buf.get_line(1) == "apricot "
    assert buf.get_cursor() == EditorPosition(1, 8)


def test_select_uses_token_offset(clock, dictionary):
    path = dictionary("fo bar", "banana")
    buf, s = make(
        clock, "fo ba",
        enable_current_file_complement=False,
        enable_custom_dictionary_complement=True,
        custom_dictionary_paths=path,
        min_number_of_characters_triggered=2,
    )
    run_trigger(s, buf, clock)
    s.move_selection(1)
    s.use_selected_item()
    assert buf.text == "fo banana "


def test_select_internal_link(clock):
    buf, s = make(clock, "see tok", links=[LinkTarget("Tokyo", "cities/Tokyo.md")])
    out = run_trigger(s, buf, clock)
    assert values(out) == ["Tokyo"]
    s.use_selected_item()
    assert buf.text == "see [[Tokyo]] "


def test_select_internal_link_with_alias(clock):
    links = [LinkTarget("Tokyo", aliases=("TYO",))]
    buf, s = make(clock, "tyo", links=links, suggest_internal_link_with_alias=True)
    out = run_trigger(s, buf, clock)
    assert out[0].matched_alias == "TYO"
    s.use_selected_item()
    assert buf.text == "[[Tokyo|TYO]] "


def test_select_strips_hide_delimiter(clock, dictionary):
    path = dictionary("apple|||fruit")
    buf, s = make(
        clock, "appl",
        enable_current_file_complement=False,
        enable_custom_dictionary_complement=True,
        custom_dictionary_paths=path,
        delimiter_to_hide_suggestion="|||",
    )
    out = run_trigger(s, buf, clock)
    assert s.render_suggestion(out[0]).plain == "apple ..."
    s.use_selected_item()
    assert buf.text == "applefruit "


def test_select_moves_cursor_to_caret_marker(clock, dictionary):
    path = dictionary("console.log(<CARET>)")
    buf, s = make(
        clock, "cons",
        enable_current_file_complement=False,
        enable_custom_dictionary_complement=True,
        custom_dictionary_paths=path,
        caret_location_symbol_after_complement="<CARET>",
        insert_after_completion=False,
    )
    run_trigger(s, buf, clock)
    s.use_selected_item()
    assert buf.text == "console.log()"
    assert buf.get_cursor() == EditorPosition(0, 12)


def test_select_closes_after_debounce(clock):
    buf, s = make(clock, "apple apricot\napr")
    run_trigger(s, buf, clock)
    s.use_selected_item()
    assert s.is_open
    clock.advance(49)
    assert s.is_open
    clock.advance(1)
    assert not s.is_open


def test_move_selection_wraps(clock):
    buf, s = make(clock, "apple apricot\nap", min_number_of_characters_triggered=2)
    run_trigger(s, buf, clock)
    s.move_selection(-1)
    assert s.selected_item == 1
    s.move_selection(1)
    assert s.selected_item == 0


def test_render_link_with_description(clock):
    _, s = make(clock, "")
    text = s.render_suggestion(Word("Tokyo", description="cities/Tokyo.md", internal_link=True))
    assert text.plain == "[[Tokyo]]\ncities/Tokyo.md"


# predictable complete ------------------------------------------------------

def test_predictable_complete_prefers_nearest_above(clock):
    buf, s = make(clock, "international interval relations\nthe inter")
    assert s.predictable_complete() == "interval"
    assert buf.get_line(1) == "the interval"
    assert not s.is_open


def test_predictable_complete_falls_back_below(clock):
    buf, s = make(clock, "the inter\ninternet\n")
    buf.set_cursor(EditorPosition(0, 9))
    assert s.predictable_complete() == "internet"
    assert buf.get_line(0) == "the internet"


def test_predictable_complete_without_match(clock):
    buf, s = make(clock, "nothing here\nxyz")
    assert s.predictable_complete() is None
    assert buf.text == "nothing here\nxyz"


def test_predictable_complete_after_separator_leaves_text(clock):
    buf, s = make(clock, "there the ")
    assert s.predictable_complete() is None
    assert buf.text == "there the "

    buf, s = make(clock, "there (")
    assert s.predictable_complete() is None
    assert buf.text == "there ("


# settings ------------------------------------------------------------------

def test_update_settings_clears_disabled_sources(clock):
    buf, s = make(clock, "apple\napr", links=[LinkTarget("Tokyo")])
    assert s.internal_link_word_provider.size() == 1
    assert s.current_file_word_provider.size() == 1

    asyncio.run(s.update_settings(Settings(
        enable_internal_link_complement=False,
        enable_current_file_complement=False,
    )))
    assert s.indexed_words.internal_link == {}
    assert s.indexed_words.current_file == {}


def test_new_applies_settings_once(clock, monkeypatch):
    calls = []
    original = AutoCompleteSuggest._apply_settings

    def counting(self, settings):
        calls.append(settings)
        original(self, settings)

    monkeypatch.setattr(AutoCompleteSuggest, "_apply_settings", counting)
    buf, s = make(clock, "apple\napr")
    assert len(calls) == 1
    assert s.current_file_word_provider.size() == 1


def test_unknown_match_strategy_raises(clock):
    _, s = make(clock, "")
    s.settings = Settings(match_strategy="fuzzy")
    with pytest.raises(ValueError):
        s.match_strategy
