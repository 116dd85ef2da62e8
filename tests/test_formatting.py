from prompt_toolkit.buffer import Buffer
from prompt_toolkit.document import Document
from prompt_toolkit.selection import SelectionState

from core.formatting import (
    FormatAction, SHORTCUTS, apply_to_buffer, indent_buffer, parse_action,
)


def make_buffer(text, start=None, end=None):
    buf = Buffer(multiline=True)
    if start is None:
        buf.document = Document(text, cursor_position=len(text))
    else:
        buf.document = Document(text, cursor_position=end)
        buf.selection_state = SelectionState(original_cursor_position=start)
    return buf


def test_placeholder_stays_selected_in_buffer():
    buf = make_buffer("")

    assert apply_to_buffer(buf, FormatAction.BOLD)

    assert buf.text == "**bold text**"
    assert buf.document.selection_range() == (2, 11)


def test_selected_text_is_wrapped_and_selection_cleared():
    buf = make_buffer("hello world", 0, 5)

    apply_to_buffer(buf, FormatAction.CODE)

    assert buf.text == "`hello` world"
    assert buf.selection_state is None
    assert buf.cursor_position == 7


def test_heading_on_current_line():
    buf = make_buffer("intro\ntitle")

    apply_to_buffer(buf, FormatAction.H2)

    assert buf.text == "intro\n## title"


def test_missing_buffer_is_a_no_op():
    assert apply_to_buffer(None, FormatAction.BOLD) is False
    assert indent_buffer(None) is False


def test_tab_indent_on_buffer():
    buf = make_buffer("text")
    buf.cursor_position = 0

    indent_buffer(buf)

    assert buf.text == "  text"


def test_parse_action_names():
    assert parse_action(" H1 ") == FormatAction.H1
    assert parse_action("quote") == FormatAction.QUOTE
    assert parse_action("underline") is None


def test_italic_reachable_without_ctrl_i():
    bound = {action for action in SHORTCUTS.values()}
    assert FormatAction.ITALIC in bound
    assert ('c-i',) not in SHORTCUTS
