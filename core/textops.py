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

# textops.py
#
# Offset arithmetic behind the editor's formatting commands. Every function
# takes the full body plus a selection and hands back a new body plus a new
# selection; nothing here looks at widgets or buffers.

from typing import NamedTuple


class Selection(NamedTuple):
    start: int
    end: int

    @property
    def is_empty(self) -> bool:
        return self.start == self.end

    @classmethod
    def cursor(cls, pos: int) -> "Selection":
        return cls(pos, pos)

    def clamp(self, body: str) -> "Selection":
        size = len(body)
        start = min(max(0, self.start), size)
        end = min(max(0, self.end), size)
        if start > end:
            start, end = end, start
        return Selection(start, end)


class Edit(NamedTuple):
    body: str
    selection: Selection


def wrap(body: str, selection: Selection, before: str, after: str = "", placeholder: str = "") -> Edit:
    start, end = Selection(*selection).clamp(body)
    selected = body[start:end]
    inner = selected or placeholder
    new_body = body[:start] + before + inner + after + body[end:]

    if selected:
        pos = start + len(before) + len(selected) + len(after)
        return Edit(new_body, Selection.cursor(pos))
    if placeholder:
        # Leave the placeholder highlighted so typing replaces it.
        sel_start = start + len(before)
        return Edit(new_body, Selection(sel_start, sel_start + len(placeholder)))
    return Edit(new_body, Selection.cursor(start + len(before)))


def line_bounds(body: str, selection: Selection):
    """Widen a selection to the full lines it touches."""
    start, end = Selection(*selection).clamp(body)
    line_start = body.rfind('\n', 0, start) + 1
    nl = body.find('\n', end)
    line_end = len(body) if nl == -1 else nl
    return line_start, line_end


def prefix_lines(body: str, selection: Selection, prefix: str) -> Edit:
    start, _ = Selection(*selection).clamp(body)
    line_start, line_end = line_bounds(body, selection)
    lines = body[line_start:line_end].split('\n')

    touched = 0
    out = []
    for line in lines:
        if line.strip() == '':
            out.append(line)
        else:
            out.append(prefix + line)
            touched += 1

    new_body = body[:line_start] + '\n'.join(out) + body[line_end:]
    return Edit(new_body, Selection.cursor(start + len(prefix) * touched))


def indent(body: str, selection: Selection, unit: str = "  ") -> Edit:
    return wrap(body, selection, unit, "", "")
