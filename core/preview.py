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

# preview.py
#
# Markdown -> HTML for the preview panes, plus a small HTML walker that turns
# the result into prompt_toolkit fragments for the terminal.

import re
from html import escape
from html.parser import HTMLParser

import markdown

EMPTY_PLACEHOLDER = "Start writing your blog content..."

MD_EXTENSIONS = [
    "pymdownx.extra",
    "pymdownx.magiclink",
    "pymdownx.tilde",
    "pymdownx.tasklist",
    "pymdownx.highlight",
]

MD_EXTENSION_CONFIGS = {
    "pymdownx.highlight": {"use_pygments": False},
    "pymdownx.tasklist": {"clickable_checkbox": False},
}

SPACED_TAGS = ("h1", "h2", "h3", "h4", "h5", "h6", "p", "ul", "ol")

_PRE_RE = re.compile(r"<pre\b[^>]*>.*?</pre>", re.S)
_CLASS_RE = re.compile(r'\bclass="([^"]*)"')
_EXTERNAL_A_RE = re.compile(r'<a\b(?=[^>]*\bhref="https?://)[^>]*>', re.I)


def _markdown_renderer():
    return markdown.Markdown(
        extensions=MD_EXTENSIONS,
        extension_configs=MD_EXTENSION_CONFIGS,
    )


def _add_class(tag: str, cls: str) -> str:
    m = _CLASS_RE.search(tag)
    if m:
        classes = m.group(1).split()
        if cls in classes:
            return tag
        return tag[:m.start(1)] + " ".join(classes + [cls]) + tag[m.end(1):]
    name_end = re.match(r"<\w+", tag).end()
    return f'{tag[:name_end]} class="{cls}"{tag[name_end:]}'


def _open_tag_re(name):
    return re.compile(rf"<{name}\b[^>]*>")


def _mark_external(tag: str) -> str:
    tag = re.sub(r'\s(target|rel)="[^"]*"', "", tag)
    return tag[:-1].rstrip("/").rstrip() + ' target="_blank" rel="noopener noreferrer">'


def _postprocess_html(html: str) -> str:
    """Apply the preview's block and link rules to rendered HTML."""
    blocks = {}

    def _extract_pre(m):
        key = f"\x00PRE{len(blocks)}\x00"
        pre = m.group(0)
        head_end = pre.index(">") + 1
        blocks[key] = _add_class(pre[:head_end], "md-codeblock") + pre[head_end:]
        return key

    # mask code blocks so inline-code rules and link rules skip them
    html = _PRE_RE.sub(_extract_pre, html)
    html = _open_tag_re("code").sub(lambda m: _add_class(m.group(0), "md-code"), html)
    html = _open_tag_re("blockquote").sub(lambda m: _add_class(m.group(0), "md-quote"), html)
    for name in SPACED_TAGS:
        html = _open_tag_re(name).sub(lambda m: _add_class(m.group(0), "md-spacing"), html)
    html = _EXTERNAL_A_RE.sub(lambda m: _mark_external(m.group(0)), html)

    for k, v in blocks.items():
        html = html.replace(k, v, 1)
    return html


def render_markdown(body):
    text = body or ""
    if not text.strip():
        return f'<p class="md-spacing md-placeholder">{escape(EMPTY_PLACEHOLDER)}</p>'
    return _postprocess_html(_markdown_renderer().convert(text))


def render_preview(title, body, tags=()):
    parts = ['<article class="preview">']
    if title and title.strip():
        parts.append(f'<h1 class="preview-title">{escape(title.strip())}</h1>')
    if tags:
        badges = "".join(f'<span class="badge">{escape(t)}</span>' for t in tags)
        parts.append(f'<div class="preview-tags">{badges}</div>')
    parts.append(render_markdown(body))
    parts.append("</article>")
    return "\n".join(parts)


class _FragmentBuilder(HTMLParser):
    """Walks preview HTML and emits (style, text) pairs."""

    VOID = {"br", "img", "input", "hr"}
    HEADINGS = {"h1", "h2", "h3", "h4", "h5", "h6"}
    INLINE = {
        "strong": "class:md.bold",
        "b": "class:md.bold",
        "em": "class:md.italic",
        "i": "class:md.italic",
        "del": "class:md.strike",
        "s": "class:md.strike",
        "a": "class:md.link",
        "th": "class:md.bold",
    }

    def __init__(self):
        super().__init__(convert_charrefs=True)
        self.fragments = []
        self.stack = []
        self.lists = []
        self.links = []
        self.quote_depth = 0
        self.in_pre = False
        self.at_line_start = True
        self.pending_gap = False

    def _style(self):
        return " ".join(style for _, style in self.stack if style)

    def _newline(self):
        if not self.at_line_start:
            self.fragments.append(("", "\n"))
            self.at_line_start = True

    def _gap(self):
        self._newline()
        if not self.lists:
            self.pending_gap = True

    def _emit(self, text, style=None):
        if not text:
            return
        if self.pending_gap and self.fragments:
            self._newline()
            self.fragments.append(("", "\n"))
        self.pending_gap = False
        style = self._style() if style is None else style
        for piece in re.split(r"(\n)", text):
            if not piece:
                continue
            if piece == "\n":
                self.fragments.append((style, "\n"))
                self.at_line_start = True
                continue
            if self.at_line_start and self.quote_depth:
                self.fragments.append(("class:md.quote", "▌ " * self.quote_depth))
            self.fragments.append((style, piece))
            self.at_line_start = False

    def _void(self, tag, attrs):
        if tag == "br":
            self._emit("\n")
        elif tag == "img":
            self._emit(f"[image: {attrs.get('alt') or ''}]", "class:md.link")
        elif tag == "input" and attrs.get("type") == "checkbox":
            self._emit("[x] " if "checked" in attrs else "[ ] ", "class:md.task")
        elif tag == "hr":
            self._newline()
            self._emit("─" * 40, "class:md.rule")
            self._gap()

    def handle_starttag(self, tag, attrs):
        attrs = dict(attrs)
        if tag in self.VOID:
            self._void(tag, attrs)
            return

        classes = (attrs.get("class") or "").split()
        style = self.INLINE.get(tag, "")
        if tag in self.HEADINGS:
            self._newline()
            style = "class:md.header"
        elif tag in ("p", "div", "table"):
            self._newline()
        elif tag == "pre":
            self._newline()
            self.in_pre = True
            style = "class:md.codeblock"
        elif tag == "code" and not self.in_pre:
            style = "class:md.code"
        elif tag == "blockquote":
            self._newline()
            self.quote_depth += 1
        elif tag == "a":
            self.links.append(attrs.get("href") or "")
        elif tag in ("ul", "ol"):
            self._newline()
            self.lists.append([tag, 0])
        elif tag == "li":
            self._newline()
            kind = self.lists[-1] if self.lists else ["ul", 0]
            kind[1] += 1
            bullet = f"{kind[1]}. " if kind[0] == "ol" else "• "
            if "task-list-item" in classes:
                bullet = ""
            self._emit("  " * max(0, len(self.lists) - 1) + bullet, "")
        elif tag == "tr":
            self._newline()
        elif tag in ("td", "th"):
            self._emit("│ ", "")
        elif tag == "span" and "badge" in classes:
            style = "class:md.tag"

        self.stack.append((tag, style))
        if tag in self.HEADINGS:
            self._emit("#" * int(tag[1]) + " ")
        elif style == "class:md.tag":
            self._emit("#")

    def handle_endtag(self, tag):
        if tag in self.VOID:
            return
        for i in range(len(self.stack) - 1, -1, -1):
            if self.stack[i][0] == tag:
                del self.stack[i:]
                break
        else:
            return

        if tag == "a":
            href = self.links.pop() if self.links else ""
            if href:
                self._emit(f" <{href}>", "class:md.url")
        elif tag == "pre":
            self.in_pre = False
            self._gap()
        elif tag in self.HEADINGS or tag in ("p", "table"):
            self._gap()
        elif tag == "blockquote":
            self.quote_depth = max(0, self.quote_depth - 1)
            self._gap()
        elif tag in ("ul", "ol"):
            if self.lists:
                self.lists.pop()
            self._gap()
        elif tag == "li":
            self._newline()
        elif tag in ("td", "th"):
            self._emit(" ", "")
        elif tag == "tr":
            self._emit("│", "")
            self._newline()
        elif tag == "div":
            self._newline()
        elif tag == "span":
            self._emit(" ", "")

    def handle_data(self, data):
        if not self.in_pre and not data.strip() and "\n" in data:
            return
        self._emit(data)


def to_fragments(html):
    """Render preview HTML as prompt_toolkit (style, text) fragments."""
    builder = _FragmentBuilder()
    builder.feed(html)
    builder.close()
    frags = builder.fragments
    while frags and frags[-1][1] == "\n":
        frags.pop()
    return frags


def plain_text(html):
    return "".join(text for _, text in to_fragments(html))
