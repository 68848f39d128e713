"""Tests for zeptex.editor -- dispatch and the interactive loop.

The loop tests script keystrokes into a VirtualTerminal and inspect the final
editor state and the frames that were painted.
"""

from __future__ import annotations

from zeptex.buffer import LineBuffer
from zeptex.commands import (
    INSERT_SYNTAX_ERROR,
    NOTHING_TO_APPEND,
    Append,
    CommandError,
    Delete,
    Insert,
    Quit,
    Write,
)
from zeptex.editor import Editor, EditorState, dispatch
from zeptex.viewport import ScrollState, usable_rows

from .virtual_terminal import INTERRUPT, VirtualTerminal

KEY_UP = b"\x1b[A"
KEY_DOWN = b"\x1b[B"


def five_lines() -> EditorState:
    return EditorState(buffer=LineBuffer([f"line {i}" for i in range(1, 6)]))


def run_keys(state: EditorState, keys: bytes, rows: int = 24, columns: int = 80) -> VirtualTerminal:
    term = VirtualTerminal(rows=rows, columns=columns)
    term.send(keys)
    Editor(term, state).run()
    return term


# ---------------------------------------------------------------------------
# dispatch
# ---------------------------------------------------------------------------


class TestDispatchInsert:
    def test_insert_in_middle(self) -> None:
        state = five_lines()
        assert dispatch(state, Insert(3, "hello world"), rows=24) is True
        assert state.buffer.count == 6
        assert state.buffer.line_at(3) == "hello world"

    def test_insert_out_of_range_is_silent(self) -> None:
        state = five_lines()
        assert dispatch(state, Insert(9, "x"), rows=24) is False
        assert state.buffer.count == 5
        assert state.message is None

    def test_insert_scrolls_new_line_into_view(self) -> None:
        state = EditorState(buffer=LineBuffer(["x"] * 60))
        rows = 15
        assert usable_rows(rows) == 10
        dispatch(state, Insert(50, "new"), rows=rows)
        offset = state.scroll.offset
        assert offset < 50 <= offset + 10
        assert 0 <= offset <= state.buffer.count - 10


class TestDispatchAppend:
    def test_append(self) -> None:
        state = five_lines()
        assert dispatch(state, Append(" two spaces"), rows=24) is True
        assert state.buffer.line_at(6) == " two spaces"

    def test_append_follows_the_end(self) -> None:
        state = EditorState(buffer=LineBuffer(["x"] * 30))
        dispatch(state, Append("tail"), rows=15)
        assert state.scroll.offset == 21

    def test_append_to_full_buffer(self) -> None:
        state = EditorState(buffer=LineBuffer(["x"], capacity=1))
        assert dispatch(state, Append("y"), rows=24) is False
        assert state.buffer.lines == ["x"]


class TestDispatchDelete:
    def test_delete(self) -> None:
        state = five_lines()
        assert dispatch(state, Delete(2), rows=24) is True
        assert state.buffer.lines == ["line 1", "line 3", "line 4", "line 5"]

    def test_out_of_range_deletes_are_noops(self) -> None:
        state = five_lines()
        assert dispatch(state, Delete(0), rows=24) is False
        assert dispatch(state, Delete(999), rows=24) is False
        assert state.buffer.count == 5

    def test_delete_pulls_scroll_back(self) -> None:
        state = EditorState(buffer=LineBuffer(["x"] * 12), scroll=ScrollState(offset=2))
        dispatch(state, Delete(12), rows=15)
        assert state.scroll.offset == 1


class TestDispatchWrite:
    def test_bare_write_without_startup_file(self, tmp_path, monkeypatch) -> None:
        monkeypatch.chdir(tmp_path)
        state = five_lines()
        assert dispatch(state, Write(), rows=24) is False
        assert list(tmp_path.iterdir()) == []

    def test_write_to_named_file(self, tmp_path) -> None:
        state = five_lines()
        target = tmp_path / "out.txt"
        assert dispatch(state, Write(str(target)), rows=24) is True
        assert target.read_text().splitlines() == state.buffer.lines

    def test_bare_write_uses_startup_file(self, tmp_path) -> None:
        target = tmp_path / "notes.txt"
        state = five_lines()
        state.filename = str(target)
        dispatch(state, Write(), rows=24)
        assert target.read_text() == "line 1\nline 2\nline 3\nline 4\nline 5\n"

    def test_write_failure_is_silent(self, tmp_path) -> None:
        state = five_lines()
        assert dispatch(state, Write(str(tmp_path / "no" / "such.txt")), rows=24) is False
        assert state.message is None


class TestDispatchOther:
    def test_error_sets_message(self) -> None:
        state = five_lines()
        dispatch(state, CommandError(NOTHING_TO_APPEND), rows=24)
        assert state.message == NOTHING_TO_APPEND
        assert state.buffer.count == 5

    def test_quit_stops(self) -> None:
        state = five_lines()
        dispatch(state, Quit(), rows=24)
        assert state.running is False

    def test_none_is_noop(self) -> None:
        assert dispatch(five_lines(), None, rows=24) is False


# ---------------------------------------------------------------------------
# Editor loop
# ---------------------------------------------------------------------------


class TestEditorLoop:
    def test_initial_frame_then_quit(self) -> None:
        term = run_keys(EditorState(), b"q\r")
        assert len(term.frames) == 2
        assert term.last_frame.endswith(": q")

    def test_insert_command_end_to_end(self) -> None:
        state = five_lines()
        run_keys(state, b"i 3 hello world\rq\r")
        assert state.buffer.count == 6
        assert state.buffer.line_at(3) == "hello world"
        assert state.running is False

    def test_syntax_error_shown_then_cleared(self) -> None:
        state = five_lines()
        term = VirtualTerminal()
        term.send(b"i3 hello\r")
        editor = Editor(term, state)
        editor.redraw()
        while term.pending_input:
            editor.step()
        assert state.buffer.count == 5
        assert term.last_frame.endswith(": " + INSERT_SYNTAX_ERROR)
        assert state.pending.text == ""

        term.send(b"a")
        editor.step()
        assert state.message is None
        assert term.last_frame.endswith(": a")

    def test_append_with_leading_space(self) -> None:
        state = five_lines()
        run_keys(state, b"a  two spaces\rq\r")
        assert state.buffer.line_at(6) == " two spaces"

    def test_bad_deletes_change_nothing(self) -> None:
        state = five_lines()
        run_keys(state, b"d 0\rd 999\rq\r")
        assert state.buffer.count == 5

    def test_write_and_quit(self, tmp_path) -> None:
        target = tmp_path / "out.txt"
        state = five_lines()
        run_keys(state, f"w {target}\rq\r".encode())
        assert target.read_text().count("\n") == 5

    def test_backspace_edits_prompt(self) -> None:
        state = EditorState()
        run_keys(state, b"a helo\x7flo\rq\r")
        assert state.buffer.lines == ["hello"]

    def test_arrow_keys_scroll(self) -> None:
        state = EditorState(buffer=LineBuffer([f"l{i}" for i in range(1, 41)]))
        run_keys(state, KEY_DOWN * 3 + KEY_UP + b"q\r", rows=15)
        assert state.scroll.offset == 2

    def test_scroll_down_stops_at_end(self) -> None:
        state = EditorState(buffer=LineBuffer([f"l{i}" for i in range(1, 13)]))
        run_keys(state, KEY_DOWN * 10 + b"q\r", rows=15)
        assert state.scroll.offset == 2

    def test_pending_text_survives_scrolling(self) -> None:
        state = EditorState(buffer=LineBuffer(["x"] * 40))
        term = run_keys(state, b"d 4" + KEY_DOWN + b"\rq\r", rows=15)
        assert state.buffer.count == 39
        assert any(f.endswith(": d 4") for f in term.frames)

    def test_typed_text_redrawn_after_each_key(self) -> None:
        term = run_keys(EditorState(), b"xy\rq\r")
        prompts = [f.rsplit("\r\n", 1)[-1] for f in term.frames]
        assert prompts[:4] == [": ", ": x", ": xy", ": "]

    def test_input_closed_ends_loop(self) -> None:
        state = five_lines()
        run_keys(state, b"a more")
        assert state.running is False
        assert state.buffer.count == 5


class TestResize:
    def test_resize_redraws_with_pending_text(self) -> None:
        state = EditorState(buffer=LineBuffer(["x"] * 40))
        term = VirtualTerminal(rows=24)
        term.send(b"a hi")
        term.queue_resize(10)
        term.send(b"\rq\r")
        Editor(term, state).run()
        resized = [f for f in term.frames if f.endswith(": a hi")]
        # One frame for the keystroke, one for the resize.
        assert len(resized) == 2
        assert resized[-1].count("\r\n") == 9
        assert state.buffer.line_at(41) == "hi"

    def test_resize_reclamps_scroll(self) -> None:
        state = EditorState(buffer=LineBuffer(["x"] * 30), scroll=ScrollState(offset=25))
        term = VirtualTerminal(rows=10)
        term.queue_resize(40)
        term.send(b"q\r")
        Editor(term, state).run()
        assert state.scroll.offset == 0

    def test_resizes_coalesce(self) -> None:
        state = EditorState()
        term = VirtualTerminal(rows=24)
        editor = Editor(term, state)
        term.simulate_resize(rows=20)
        term.simulate_resize(rows=18)
        assert editor.check_resize() is True
        assert editor.check_resize() is False
        assert len(term.frames) == 1

    def test_resize_keeps_error_message(self) -> None:
        state = five_lines()
        term = VirtualTerminal()
        term.send(b"a\r")
        term.queue_resize(30)
        term.send(b"q\r")
        Editor(term, state).run()
        assert sum(f.endswith(": Invalid append syntax. Use: a <text>") for f in term.frames) == 2

    def test_plain_interrupt_without_resize(self) -> None:
        state = EditorState()
        term = VirtualTerminal()
        term.send([INTERRUPT])
        term.send(b"q\r")
        Editor(term, state).run()
        # Initial frame plus the "q" keystroke; the interruption draws nothing.
        assert len(term.frames) == 2
