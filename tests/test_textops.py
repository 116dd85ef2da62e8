import pytest
from core.textops import Selection, wrap, prefix_lines, indent, line_bounds
from core.formatting import FormatAction, apply_format


def test_scenario_bold_on_empty_body_selects_placeholder():
    """Scenario: empty editor, nothing selected, user presses Bold."""
    edit = apply_format(FormatAction.BOLD, "", Selection(0, 0))

    assert edit.body == "**bold text**"
    assert edit.selection == Selection(2, 11)


def test_scenario_italic_wraps_selected_word():
    """Scenario: 'hello' is selected and the user presses Italic."""
    edit = apply_format(FormatAction.ITALIC, "hello world", Selection(0, 5))

    assert edit.body == "*hello* world"
    assert edit.selection == Selection.cursor(7)


def test_scenario_quote_skips_blank_lines():
    """Scenario: a selection spanning a blank line is turned into a quote."""
    body = "foo\n\nbar"
    edit = apply_format(FormatAction.QUOTE, body, Selection(0, len(body)))

    assert edit.body == "> foo\n\n> bar"
    assert edit.selection == Selection.cursor(2 * len("> "))


@pytest.mark.parametrize("body,sel,before,after", [
    ("abc", (1, 2), "**", "**"),
    ("some text here", (5, 9), "[", "](https://example.com)"),
    ("x", (0, 1), "`", "`"),
])
def test_wrap_keeps_surrounding_text(body, sel, before, after):
    start, end = sel
    edit = wrap(body, Selection(start, end), before, after, "unused")

    assert edit.body == body[:start] + before + body[start:end] + after + body[end:]
    assert edit.selection.is_empty
    assert edit.selection.start == end + len(before) + len(after)


def test_wrap_without_placeholder_leaves_cursor_inside():
    edit = wrap("ab", Selection.cursor(1), "**", "**")

    assert edit.body == "a****b"
    assert edit.selection == Selection.cursor(3)


def test_selection_out_of_range_is_clamped():
    edit = wrap("abc", Selection(2, 99), "*", "*")

    assert edit.body == "ab*c*"


def test_reversed_selection_is_normalized():
    assert Selection(5, 2).clamp("hello world") == Selection(2, 5)


def test_line_bounds_cover_whole_lines():
    body = "first\nsecond line\nthird"
    assert line_bounds(body, Selection(8, 9)) == (6, 17)


def test_prefix_on_cursor_prefixes_current_line_only():
    body = "one\ntwo\nthree"
    edit = prefix_lines(body, Selection.cursor(5), "# ")

    assert edit.body == "one\n# two\nthree"
    assert edit.selection == Selection.cursor(7)


def test_ordered_list_prefix_over_selection():
    body = "alpha\nbeta"
    edit = apply_format(FormatAction.OL, body, Selection(0, len(body)))

    assert edit.body == "1. alpha\n1. beta"
    assert edit.selection == Selection.cursor(2 * len("1. "))


def test_prefix_cursor_counts_only_non_blank_lines():
    body = "intro\n\none\n   \ntwo"
    start = body.index("one")
    edit = prefix_lines(body, Selection(start, len(body)), "- ")

    assert edit.body == "intro\n\n- one\n   \n- two"
    assert edit.selection == Selection.cursor(start + 2 * len("- "))


def test_prefix_over_three_lines_with_blank_middle():
    body = "a\n\nb"
    edit = prefix_lines(body, Selection(0, len(body)), "## ")

    assert edit.body == "## a\n\n## b"
    assert edit.selection == Selection.cursor(6)


def test_link_and_image_defaults():
    link = apply_format(FormatAction.LINK, "", Selection(0, 0))
    image = apply_format(FormatAction.IMAGE, "", Selection(0, 0))

    assert link.body == "[link text](https://example.com)"
    assert link.body[link.selection.start:link.selection.end] == "link text"
    assert image.body == "![image description](https://example.com/image.jpg)"


def test_indent_inserts_two_spaces():
    edit = indent("- item", Selection.cursor(0))

    assert edit.body == "  - item"
    assert edit.selection == Selection.cursor(2)
