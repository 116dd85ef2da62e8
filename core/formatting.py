# Vibe Write
# Copyright (C) 2026 Nomagev
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE. See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program; if not, write to the Free Software
# Foundation, Inc., 51 Franklin Street, Fifth Floor, Boston, MA 02110-1301, USA.

# formatting.py

from enum import Enum

from prompt_toolkit.document import Document
from prompt_toolkit.selection import SelectionState

from core.textops import Selection, indent, prefix_lines, wrap

INDENT_UNIT = "  "


class FormatAction(str, Enum):
    BOLD = 'bold'
    ITALIC = 'italic'
    CODE = 'code'
    H1 = 'h1'
    H2 = 'h2'
    H3 = 'h3'
    UL = 'ul'
    OL = 'ol'
    QUOTE = 'quote'
    LINK = 'link'
    IMAGE = 'image'


# action -> (before, after, placeholder)
WRAP_RULES = {
    FormatAction.BOLD: ("**", "**", "bold text"),
    FormatAction.ITALIC: ("*", "*", "italic text"),
    FormatAction.CODE: ("`", "`", "code"),
    FormatAction.LINK: ("[", "](https://example.com)", "link text"),
    FormatAction.IMAGE: ("![", "](https://example.com/image.jpg)", "image description"),
}

PREFIX_RULES = {
    FormatAction.H1: "# ",
    FormatAction.H2: "## ",
    FormatAction.H3: "### ",
    FormatAction.UL: "- ",
    FormatAction.OL: "1. ",
    FormatAction.QUOTE: "> ",
}

# Ctrl+I arrives as Tab in a terminal, so italic also lives on Ctrl+K / Meta+I.
SHORTCUTS = {
    ('c-b',): FormatAction.BOLD,
    ('c-k',): FormatAction.ITALIC,
    ('escape', 'i'): FormatAction.ITALIC,
    ('c-e',): FormatAction.CODE,
    ('c-q',): FormatAction.QUOTE,
    ('c-l',): FormatAction.UL,
}

TOOLBAR = [
    (FormatAction.BOLD, "B", "Bold (Ctrl+B)"),
    (FormatAction.ITALIC, "I", "Italic (Ctrl+K)"),
    (FormatAction.CODE, "</>", "Inline Code (Ctrl+E)"),
    (FormatAction.H1, "H1", "Heading 1"),
    (FormatAction.H2, "H2", "Heading 2"),
    (FormatAction.H3, "H3", "Heading 3"),
    (FormatAction.UL, "•", "Unordered List (Ctrl+L)"),
    (FormatAction.OL, "1.", "Ordered List"),
    (FormatAction.QUOTE, "❝", "Quote (Ctrl+Q)"),
    (FormatAction.LINK, "🔗", "Insert Link"),
    (FormatAction.IMAGE, "🖼", "Insert Image"),
]


def parse_action(name):
    try:
        return FormatAction(name.strip().lower())
    except ValueError:
        return None


def apply_format(action, body, selection):
    action = FormatAction(action)
    if action in WRAP_RULES:
        before, after, placeholder = WRAP_RULES[action]
        return wrap(body, selection, before, after, placeholder)
    return prefix_lines(body, selection, PREFIX_RULES[action])


def _buffer_selection(buffer):
    start, end = buffer.document.selection_range()
    return Selection(start, end)


def _write_back(buffer, edit):
    sel = edit.selection
    # Setting the document resets selection_state, so restore it afterwards.
    buffer.document = Document(edit.body, cursor_position=sel.end)
    if sel.is_empty:
        buffer.exit_selection()
    else:
        buffer.selection_state = SelectionState(original_cursor_position=sel.start)


def apply_to_buffer(buffer, action):
    """Run a toolbar action against a prompt_toolkit buffer.

    Returns False when there is no buffer to act on.
    """
    if buffer is None:
        return False
    edit = apply_format(action, buffer.text, _buffer_selection(buffer))
    _write_back(buffer, edit)
    return True


def indent_buffer(buffer, unit=INDENT_UNIT):
    if buffer is None:
        return False
    _write_back(buffer, indent(buffer.text, _buffer_selection(buffer), unit))
    return True
