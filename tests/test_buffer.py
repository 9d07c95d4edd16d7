# tests/test_buffer.py
from complement_engine.core.protocols import EditorPosition, EditorProtocol, WorkspaceProtocol
from complement_engine.suggest.buffer import InMemoryWorkspace, TextBuffer


def test_buffer_satisfies_protocols():
    buf = TextBuffer("x")
    assert isinstance(buf, EditorProtocol)
    assert isinstance(InMemoryWorkspace(buf), WorkspaceProtocol)


def test_cursor_defaults_to_end_and_clamps():
    buf = TextBuffer("ab\ncde")
    assert buf.get_cursor() == EditorPosition(1, 3)
    buf.set_cursor(EditorPosition(9, 9))
    assert buf.get_cursor() == EditorPosition(1, 3)
    buf.set_cursor(EditorPosition(-1, -1))
    assert buf.get_cursor() == EditorPosition(0, 0)


def test_offsets_round_trip_across_lines():
    buf = TextBuffer("ab\ncde")
    assert buf.pos_to_offset(EditorPosition(1, 1)) == 4
    assert buf.offset_to_pos(4) == EditorPosition(1, 1)
    assert buf.offset_to_pos(99) == EditorPosition(1, 3)


def test_replace_range_moves_cursor_after_text():
    buf = TextBuffer("hello wor")
    buf.replace_range("world!\nnext", EditorPosition(0, 6), EditorPosition(0, 9))
    assert buf.text == "hello world!\nnext"
    assert buf.get_cursor() == EditorPosition(1, 4)
    assert buf.get_range(EditorPosition(0, 6), EditorPosition(1, 0)) == "world!\n"


def test_workspace_without_editor():
    ws = InMemoryWorkspace()
    assert ws.get_current_editor() is None
    assert ws.get_active_file_content() is None
    assert ws.is_ime_on() is False
