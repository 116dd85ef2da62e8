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

import os, time, re, asyncio, logging
from datetime import datetime, timezone
from prompt_toolkit import Application
from prompt_toolkit.enums import EditingMode
from prompt_toolkit.layout import Layout, HSplit, VSplit, Window, ConditionalContainer, DynamicContainer
from prompt_toolkit.layout.controls import FormattedTextControl
from prompt_toolkit.filters import Condition
from prompt_toolkit.widgets import TextArea, Label
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.lexers import Lexer
from prompt_toolkit.document import Document
from prompt_toolkit.styles import Style
from prompt_toolkit.application import get_app, get_app_or_none

from spellchecker import SpellChecker

from core.api import ApiClient
from core.assets import get_banner, match_category, HELP_TEXT, TRANSLATIONS, SORT_LABELS, VERSION
from core.config import resolve_config_dir, config_paths, load_config, configure_logging
from core.drafts import DraftCache
from core.errors import ApiError, ValidationError
from core.formatting import SHORTCUTS, TOOLBAR, apply_to_buffer, indent_buffer, parse_action
from core.listing import ListingController
from core.models import ContentDocument, DocumentStatus, BlogStatus, ListVariant, unique_tags
from core.mutations import ModerationQueue, LikeToggle
from core.notify import Notifier
from core.preview import render_preview, to_fragments
from core.query import SortOrder
from core.session import AuthSession
from core.trending import TrendingFeed, TIME_RANGES, trending_score
from core.validation import validate_draft, validate_publish, validate_delete_confirmation

log = logging.getLogger("vibewrite")

SORT_NAMES = {s.value for s in SortOrder}

# --- Style Definition ---
vibe_style = Style.from_dict({
    # Markdown Styles
    'md.header': 'bold cyan',
    'md.bold': 'bold yellow',
    'md.italic': 'italic green',
    'md.code': 'bg:#333333 #ffffff',
    'md.codeblock': 'bg:#1c1c1c #d0d0d0',
    'md.link': 'underline blue',
    'md.url': 'fg:#5f87ff',
    'md.quote': 'magenta',
    'md.strike': 'fg:#888888 strike',
    'md.list': 'bold cyan',
    'md.task': 'bold green',
    'md.rule': 'fg:#555555',
    'md.tag': 'bg:#005f87 #ffffff',

    # UI elements
    'status-warn': 'bg:#ff0000 #ffffff bold',
    'status-ok': 'bg:#005f00 #ffffff bold',
    'status-bar': 'bg:#222222 #00ff00',
    'status-goal': 'bg:#ffd700 #000000 bold',
    'status-dirty': '#ff0000',
    'prompt-normal': '#00ff00 bold',
    'spell-error': 'ansigray underline',
    'help-text': 'fg:#00ff00 bg:#000000',
    'body': 'fg:#00ff00 bg:#000000',
    'toolbar': 'fg:#888888',
    'preview': 'bg:#000000 #e4e4e4',
    'preview-border': 'fg:#444444',
    'reverse-header': 'reverse bold',
})


# --- Lexer for Spell Checking plus markdown highlighting ---
class MarkdownLexer(Lexer):
    def __init__(self, app):
        self.app = app
        self.md_rules = [
            (r'\*\*.*?\*\*', 'class:md.bold'),
            (r'(?<!\*)\*[^*\s][^*]*\*(?!\*)', 'class:md.italic'),
            (r'~~.*?~~', 'class:md.strike'),
            (r'!?\[.*?\]\(.*?\)', 'class:md.link'),
            (r'`[^`]+`', 'class:md.code'),
        ]
        self.list_marker = re.compile(r'^(\s*)([-*+]|\d+\.)(\s)')

    def lex_document(self, document: Document):
        fenced = self._fenced_lines(document.lines)

        def get_line(lineno):
            line_text = document.lines[lineno]
            line_start_index = document.translate_row_col_to_index(lineno, 0)

            if lineno in fenced: return [('class:md.codeblock', line_text)]
            if line_text.startswith('#'): return [('class:md.header', line_text)]
            if line_text.startswith('>'): return [('class:md.quote', line_text)]

            formatted_line = []
            last_pos = 0
            marker = self.list_marker.match(line_text)
            if marker:
                formatted_line.append(('', marker.group(1)))
                formatted_line.append(('class:md.list', marker.group(2)))
                last_pos = marker.end(2)

            matches = []
            for pattern, style in self.md_rules:
                for m in re.finditer(pattern, line_text):
                    matches.append((m.start(), m.end(), style))
            matches.sort()

            for start, end, style in matches:
                if start < last_pos:
                    continue
                if start > last_pos:
                    self._add_spellchecked_text(formatted_line, line_text[last_pos:start],
                                                line_start_index + last_pos, document.cursor_position)
                formatted_line.append((style, line_text[start:end]))
                last_pos = end

            if last_pos < len(line_text):
                self._add_spellchecked_text(formatted_line, line_text[last_pos:],
                                            line_start_index + last_pos, document.cursor_position)
            return formatted_line
        return get_line

    @staticmethod
    def _fenced_lines(lines):
        inside, fenced = False, set()
        for i, line in enumerate(lines):
            if line.lstrip().startswith('```'):
                fenced.add(i)
                inside = not inside
            elif inside:
                fenced.add(i)
        return fenced

    def _add_spellchecked_text(self, fragments, text, start_index, cursor_pos):
        last_pos = 0
        for match in re.finditer(r'\w+', text):
            word = match.group()
            word_start = start_index + match.start()
            word_end = start_index + match.end()

            if match.start() > last_pos:
                fragments.append(('', text[last_pos:match.start()]))

            is_unknown = word.lower() not in self.app.spell
            is_being_typed = word_start <= cursor_pos <= word_end

            if self.app.show_spelling_errors and is_unknown and not is_being_typed:
                fragments.append(('class:spell-error', word))
            else:
                fragments.append(('', word))

            last_pos = match.end()

        if last_pos < len(text):
            fragments.append(('', text[last_pos:]))


# --- Main Application Class ---
class VibeWriteApp:
    BROWSER_ROWS = 12

    def __init__(self, test_mode=False, config_dir=None, query_string=''):
        self.test_mode = test_mode
        self._load_paths(config_dir)
        self._load_config()
        if not test_mode:
            configure_logging(self.config_dir)

        # State
        self.doc = ContentDocument()
        self.current_post_id = None
        self.last_saved_content = ""
        self.is_warning_mode = False
        self.pending_action = None
        self.show_help = False
        self.show_browser = False
        self.show_preview_pane = False
        self.show_preview_overlay = False
        self.reader = None
        self.browser_variant = ListVariant.LIST
        self.browser_index = 0
        self.start_time = time.time()
        self._preview_key = None
        self._preview_cache = []

        # Dictionary & Spell Checker
        self.show_spelling_errors = False
        if self.test_mode and not os.path.exists(self.custom_dict_path):
            with open(self.custom_dict_path, 'w', encoding='utf-8') as f:
                f.write("")
        self._reload_dictionary()

        # Services
        self.notifier = Notifier(on_change=self._invalidate)
        self.api = ApiClient(self.config['api_base_url'])
        self.session = AuthSession(self.api, self.paths['token'], notify=self.notifier)
        self.drafts = DraftCache(self.paths['draft'])
        self.listing = ListingController(
            self.api, query_string,
            page_size=self.config['page_size'],
            debounce=self.config['search_debounce_ms'] / 1000,
            notify=self.notifier,
            on_change=self._on_listing_change,
        )
        self.trending = TrendingFeed(self.api, notify=self.notifier)
        self.moderation = ModerationQueue(self.api, notify=self.notifier)
        self.likes = LikeToggle(self.api, session=self.session, notify=self.notifier)
        self.is_offline = test_mode

        # UI & Layout
        self._init_ui_components()
        self._init_layout()

        # Input Handling
        self.kb = KeyBindings()
        self.setup_bindings()

        # Final Setup
        self.apply_language(self.lang)
        if self.drafts.exists():
            self.notifier.info(self._t("recovery_found"))
        else:
            self.notifier.info(self._t("ready").format(lang=self.lang.upper()))

    def _load_paths(self, config_dir):
        self.config_dir = resolve_config_dir(config_dir)
        os.makedirs(self.config_dir, exist_ok=True)
        self.paths = config_paths(self.config_dir)
        self.custom_dict_path = self.paths['dictionary']

    def _load_config(self):
        self.config = load_config(self.config_dir)
        self.word_goal = self.config['word_goal']
        self.reading_speed = self.config['reading_speed']
        self.lang = self.config['language'] if self.config['language'] in TRANSLATIONS else 'en'

    def _t(self, key):
        return TRANSLATIONS.get(self.lang, TRANSLATIONS['en'])["ui"][key]

    def _reload_dictionary(self):
        self.spell = SpellChecker(language=self.lang)
        if os.path.exists(self.custom_dict_path):
            self.spell.word_frequency.load_text_file(self.custom_dict_path)

    # --- prompt_toolkit plumbing that also works headless ---
    def _invalidate(self):
        app = get_app_or_none()
        if app is not None and app.is_running:
            app.invalidate()

    def _focus(self, target):
        app = get_app_or_none()
        if app is not None and app.is_running:
            app.layout.focus(target)

    def _exit(self):
        app = get_app_or_none()
        if app is not None and app.is_running:
            app.exit()

    def _spawn(self, coro):
        """Run ``coro`` on the UI loop, or to completion when there is no UI."""
        app = get_app_or_none()
        if app is not None and app.is_running:
            return app.create_background_task(coro)
        return asyncio.run(coro)

    def _init_ui_components(self):
        # UI Fields
        self.header_label = Label(text=lambda: self._t("header"), style='class:reverse-header')

        self.title_field = TextArea(height=1, prompt=lambda: self._t("title"), multiline=False, lexer=MarkdownLexer(self), focus_on_click=True)
        self.tags_field = TextArea(height=1, prompt=lambda: self._t("tags"), multiline=False, focus_on_click=True)
        self.category_field = TextArea(height=1, prompt=lambda: self._t("category"), multiline=False, focus_on_click=True)
        self.toolbar_label = Label(text=" ".join(f"[{icon}]" for _, icon, _ in TOOLBAR), style='class:toolbar')

        self.body_field = TextArea(
            text="",
            scrollbar=True,
            line_numbers=True,
            lexer=MarkdownLexer(self),
            wrap_lines=True,
            focus_on_click=True,
        )
        self.body_field.window.soft_wrap = True
        self.body_buffer = self.body_field.buffer

        self.command_field = TextArea(
            height=1,
            prompt=lambda: self._t("command"),
            style='class:prompt-normal',
            multiline=False,
            accept_handler=self.handle_normal_input,
            focus_on_click=True
        )
        self.warning_field = TextArea(height=1, prompt=self._warning_prompt, style='class:status-warn', multiline=False, accept_handler=self.handle_warning_input, focus_on_click=True)

        # Browser search box, debounced through the listing controller
        self.search_field = TextArea(height=1, prompt=lambda: self._t("search"), multiline=False, focus_on_click=True)
        self.search_field.buffer.on_text_changed += self._on_search_changed

        # Static Text Areas
        self.help_field = TextArea(read_only=True, style='class:help-text')
        self.browser_field = TextArea(read_only=True, style='class:help-text')

        self.preview_window = Window(FormattedTextControl(self.get_preview_fragments), wrap_lines=True, style='class:preview')
        self.overlay_window = Window(FormattedTextControl(self.get_overlay_fragments), wrap_lines=True, style='class:preview')

    def _init_layout(self):
        # Rows
        header_bar = VSplit([
            Label(text=f" v{VERSION} ", style='class:reverse-header'),
            self.header_label,
            Label(text=lambda: f" [F1] {self._t('help_btn')} ", style='class:reverse-header')
        ], height=1)

        status_bar_view = VSplit([Window(), Label(text=self.get_status_text, style='class:status-bar'), Window()], height=1)
        command_view = VSplit([Window(), self.command_field, Window()], height=1)
        warning_view = VSplit([Window(), self.warning_field, Window()], height=1)

        metadata_row = HSplit([
            self.title_field,
            self.tags_field,
            self.category_field,
            self.toolbar_label,
            Window(height=1, char='-')
        ])

        editor_view = HSplit([
            metadata_row,
            VSplit([
                self.body_field,
                ConditionalContainer(
                    content=VSplit([Window(width=1, char='│', style='class:preview-border'), self.preview_window]),
                    filter=Condition(lambda: self.show_preview_pane)
                ),
            ]),
        ])

        browser_view = HSplit([
            ConditionalContainer(
                content=self.search_field,
                filter=Condition(lambda: self.browser_variant in (ListVariant.LIST, ListVariant.GRID))
            ),
            self.browser_field,
        ])

        overlay_view = HSplit([
            Label(text=lambda: self._t("preview_title"), style='class:reverse-header'),
            self.overlay_window,
        ])

        # Main Stack
        main_stack = HSplit([
            ConditionalContainer(content=editor_view, filter=Condition(self.is_editor_visible)),
            ConditionalContainer(content=self.help_field, filter=Condition(lambda: self.show_help)),
            ConditionalContainer(content=browser_view, filter=Condition(lambda: self.show_browser and not self.show_help)),
            ConditionalContainer(content=overlay_view, filter=Condition(lambda: self.show_preview_overlay and not self.show_help)),
        ], width=lambda: 160 if self.show_preview_pane and self.is_editor_visible() else 85)

        # Container Assembly
        self.container = HSplit([
            header_bar,
            # Centered Editor
            VSplit([
                Window(),
                main_stack,
                Window(),
            ]),
            # Command Bar
            DynamicContainer(lambda: warning_view if self.is_warning_mode else command_view),
            status_bar_view,
        ])

    def is_editor_visible(self):
        return not (self.show_help or self.show_browser or self.show_preview_overlay)

    # --- document <-> fields ---
    def _sync_document(self):
        self.doc.title = self.title_field.text
        self.doc.body = self.body_buffer.text
        self.doc.set_tags_from_text(self.tags_field.text)
        self.doc.category = match_category(self.category_field.text)
        return self.doc

    def _fill_fields(self, doc):
        self.doc = doc
        self.title_field.text = doc.title
        self.tags_field.text = ", ".join(doc.tags)
        self.category_field.text = doc.category or ""
        self.body_buffer.text = doc.body

    def get_preview_fragments(self):
        doc = self._sync_document()
        return self._render_cached(doc.title, doc.body, doc.tags)

    def get_overlay_fragments(self):
        if self.reader:
            return self._render_cached(*self.reader)
        return self.get_preview_fragments()

    def _render_cached(self, title, body, tags):
        key = (title, body, tuple(tags))
        if key != self._preview_key:
            self._preview_key = key
            self._preview_cache = to_fragments(render_preview(title, body, tags))
        return self._preview_cache

    def get_status_text(self):
        t = TRANSLATIONS.get(self.lang, TRANSLATIONS['en'])['status']
        dirty = " *" if self.is_dirty() else ""
        doc = self._sync_document()
        word_count = doc.word_count
        result = []

        if word_count >= self.word_goal:
            result.append(('class:status-goal', f" ★ {t['words']}: {word_count}/{self.word_goal} ★ "))
        else:
            result.append(('', f" {t['words']}: {word_count}/{self.word_goal} "))

        result.append(('', " | "))
        result.append(('', f" {doc.read_minutes(self.reading_speed)} {t.get('read', 'read')} "))
        result.append(('', f"| {len(doc.body)} {t['chars']} "))

        elapsed = int(time.time() - self.start_time)
        mins, secs = divmod(elapsed, 60)
        result.append(('', f" | {mins:02d}:{secs:02d} "))

        if dirty:
            result.append(('class:status-dirty', dirty))

        result.append(('', f" | {t['status']}: {self.post_status} "))
        user = self.session.user.display_name if self.session.is_authenticated else self._t("signed_out")
        result.append(('', f"| {user} "))
        if self.notifier.message:
            result.append(('', "| "))
            result.append((self.notifier.style, f" {self.notifier.message} "))

        return result

    @property
    def post_status(self):
        if not self.current_post_id:
            return self._t("new_post")
        if self.doc.status == DocumentStatus.PENDING:
            return self._t("status_pending")
        return self._t("status_draft")

    def is_dirty(self): return self.body_buffer.text.strip() != self.last_saved_content.strip()

    def apply_language(self, lang_code):
        self.lang = lang_code
        t = TRANSLATIONS[self.lang]["ui"]

        if self.show_browser: self.render_browser()
        self.help_field.text = HELP_TEXT.get(self.lang, HELP_TEXT["en"]).strip()
        self._reload_dictionary()
        self.notifier.info(t["lang_feedback"])

    # --- command bar ---
    def handle_normal_input(self, buffer):
        raw = buffer.text.strip()
        buffer.text = ""
        if not raw:
            self._focus(self.body_field); return

        parts = raw.split()
        cmd, args = parts[0].lower(), parts[1:]
        rest = raw[len(parts[0]):].strip()

        if cmd == ':new':
            if self.is_dirty():
                self._ask("new")
            else:
                self.start_new_post()
        elif cmd == ':spa': self.apply_language('es')
        elif cmd == ':eng': self.apply_language('en')
        elif cmd in [':q', ':exit']:
            if not self.is_dirty(): self._exit()
            else: self._ask("quit")
        elif cmd == ':help': self.show_help, self.show_browser = True, False
        elif cmd == ':restore': self.load_recovery()
        elif cmd == ':speed':
            if args and args[0].isdigit() and int(args[0]) > 0:
                self.reading_speed = int(args[0])
                self.notifier.info(self._t("speed_set").format(speed=self.reading_speed))
        elif cmd == ':add':
            self.add_to_dictionary(rest)
        elif cmd == ':fmt':
            action = parse_action(rest)
            if action is None:
                self.notifier.error(self._t("unknown_command").format(cmd=raw))
            else:
                apply_to_buffer(self.body_buffer, action)
                self._focus(self.body_field)
        elif cmd == ':cat':
            category = match_category(rest)
            if category is None:
                self.notifier.error(self._t("category_unknown").format(name=rest))
            else:
                self.category_field.text = category
        elif cmd == ':tag':
            self._sync_document().add_tag(rest)
            self.tags_field.text = ", ".join(self.doc.tags)
        elif cmd == ':untag':
            self._sync_document().remove_tag(rest)
            self.tags_field.text = ", ".join(self.doc.tags)
        elif cmd == ':preview': self.toggle_overlay()
        elif cmd == ':browse':
            variant = ListVariant.GRID if args[:1] == ['grid'] else ListVariant.LIST
            self.open_browser(variant)
        elif cmd == ':search':
            self.search_field.text = rest
            self._listing_call(lambda: self.listing.set_search(rest))
        elif cmd == ':filter-cat':
            category = 'all' if rest.lower() == 'all' else match_category(rest)
            if category is None:
                self.notifier.error(self._t("category_unknown").format(name=rest))
            else:
                self._listing_call(lambda: self.listing.set_category(category))
        elif cmd == ':filter-tag':
            self._listing_call(lambda: self.listing.toggle_tag(rest.lower()))
        elif cmd == ':sort':
            if rest.lower() not in SORT_NAMES:
                self.notifier.error(self._t("unknown_command").format(cmd=raw))
            else:
                self._listing_call(lambda: self.listing.set_sort(rest.lower()))
        elif cmd == ':clear':
            self.search_field.text = ""
            self._listing_call(self.listing.clear_filters)
        elif cmd == ':more':
            self._listing_call(self.listing.load_more)
        elif cmd == ':trending':
            days = int(args[0]) if args and args[0].isdigit() else None
            if days is not None and days not in TIME_RANGES:
                self.notifier.error(self._t("unknown_command").format(cmd=raw))
            else:
                self.open_trending(days)
        elif cmd == ':pending':
            if self._require_admin(): self.open_pending()
        elif cmd == ':manage':
            if self._require_admin(): self.open_manage(args[0].lower() if args else 'all')
        elif cmd == ':approve':
            blog = self._pending_row(args)
            if blog and self._require_admin(): self._moderate(self.moderation.approve(blog.id))
        elif cmd == ':reject':
            blog = self._pending_row(args)
            if blog and self._require_admin():
                self._moderate(self.moderation.reject(blog.id, " ".join(args[1:])))
        elif cmd == ':hide':
            blog = self._row(args)
            if blog and self._require_admin(): self._moderate(self.moderation.toggle_hide(blog.id))
        elif cmd == ':delete':
            blog = self._row(args)
            if blog and self._require_admin(): self._ask(("delete", blog.id))
        elif cmd == ':like':
            blog = self._row(args)
            if blog: self._spawn(self._like(blog))
        elif cmd == ':edit':
            blog = self._row(args)
            if blog: self._spawn(self.fetch_and_load(blog))
        elif cmd == ':login':
            if len(args) < 2:
                self.notifier.error("Please enter your email and password")
            else:
                self._spawn(self.session.login(args[0], " ".join(args[1:])))
        elif cmd == ':register':
            if len(args) < 6:
                self.notifier.error(self._t("register_usage"))
            else:
                username, email, first, last, password, confirm = args[:6]
                data = {"username": username, "email": email, "firstName": first,
                        "lastName": last, "password": password}
                self._spawn(self.session.register(data, confirm))
        elif cmd == ':logout':
            self._spawn(self.session.logout())
        else:
            self.notifier.error(self._t("unknown_command").format(cmd=cmd))

    def handle_warning_input(self, buffer):
        typed = buffer.text.strip()
        buffer.text = ""
        action, self.pending_action = self.pending_action, None
        self.is_warning_mode = False
        if isinstance(action, tuple) and action[0] == "delete":
            try:
                validate_delete_confirmation(typed)
            except ValidationError as e:
                self.notifier.error(e.message)
                self._focus(self.body_field)
                return
            self._moderate(self._delete(action[1]))
            return
        if typed.lower() != 'y':
            self._focus(self.body_field)
            return
        if action == "quit":
            self._exit()
        else:
            self._force_clear_all()

    def _warning_prompt(self):
        if isinstance(self.pending_action, tuple) and self.pending_action[0] == "delete":
            return self._t("delete_prompt")
        return self._t("warning_prompt")

    def _ask(self, action):
        self.is_warning_mode = True
        self.pending_action = action
        self._focus(self.warning_field)

    def _require_admin(self):
        if not self.session.is_authenticated:
            self.notifier.error(self._t("login_required"))
            return False
        if not self.session.is_admin:
            self.notifier.error(self._t("admin_required"))
            return False
        return True

    def _row(self, args):
        rows = self.current_rows()
        if args and args[0].isdigit() and 1 <= int(args[0]) <= len(rows):
            return rows[int(args[0]) - 1]
        self.notifier.error(self._t("bad_row").format(row=args[0] if args else ''))
        return None

    def _pending_row(self, args):
        if self.browser_variant != ListVariant.PENDING:
            self.notifier.error(self._t("pending_only"))
            return None
        return self._row(args)

    # --- editor actions ---
    def start_new_post(self):
        self._fill_fields(ContentDocument())
        self.current_post_id = None
        self.show_preview_overlay = False
        self.reader = None
        self._focus(self.body_field)

    def _force_clear_all(self):
        self.start_new_post()
        self.last_saved_content = ""

    def add_to_dictionary(self, word):
        word = word.strip().lower()
        if not word:
            return False
        with open(self.custom_dict_path, 'a', encoding='utf-8') as f:
            f.write(word + "\n")
        self.spell.word_frequency.load_words([word])
        self.notifier.success(f"'{word}' {self._t('added_to_dict')}")
        self._invalidate()
        return True

    def run_spellcheck(self):
        text = self.body_buffer.text.strip()
        if not text:
            self.notifier.info(self._t("empty_doc"))
            return
        words = re.findall(r'\w+', text.lower())
        misspelled = self.spell.unknown(words)

        if not misspelled:
            self.notifier.success(self._t("no_errors").format(lang=self.lang.upper()))
        else:
            err_list = ', '.join(sorted(misspelled)[:3])
            self.notifier.error(self._t("errors_found").format(count=len(misspelled), list=err_list))

    def toggle_overlay(self):
        self.show_preview_overlay = not self.show_preview_overlay
        self.show_help = False
        if not self.show_preview_overlay:
            self.reader = None
            self._focus(self.body_field)

    def save_post(self, is_draft=True):
        doc = self._sync_document()
        try:
            if is_draft:
                validate_draft(doc)
            else:
                validate_publish(doc)
        except ValidationError as e:
            self.notifier.error(e.message)
            return False

        # the local copy survives whatever happens to the request
        self.drafts.save(doc)

        if self.is_offline:
            self.notifier.error(self._t("save_fail"))
            return False
        if not self.session.is_authenticated:
            self.notifier.error(self._t("login_required"))
            return False
        return self._spawn(self._submit(is_draft))

    def publish_post(self):
        return self.save_post(is_draft=False)

    async def _submit(self, is_draft):
        status = DocumentStatus.DRAFT if is_draft else DocumentStatus.PENDING
        payload = self.doc.to_payload(status)
        sent_body = self.doc.body
        try:
            if self.current_post_id:
                resp = await asyncio.to_thread(self.api.update_blog, self.current_post_id, payload)
            else:
                resp = await asyncio.to_thread(self.api.create_blog, payload)
        except ApiError as e:
            log.warning("Saving post failed: %s", e.message)
            self.notifier.error(self._t("save_error").format(error=e.message))
            return False

        if is_draft:
            blog = resp.get('blog') or {}
            blog_id = blog.get('_id') or blog.get('id')
            if blog_id:
                self.current_post_id = str(blog_id)
            self.doc.status = DocumentStatus.DRAFT
            self.last_saved_content = sent_body
            self.notifier.success(self._t("saved"))
        else:
            self._force_clear_all()
            self.drafts.clear()
            self.notifier.success(self._t("submitted"))
        return True

    async def fetch_and_load(self, blog):
        try:
            data = await asyncio.to_thread(self.api.get_blog, blog.slug or blog.id)
        except ApiError as e:
            log.warning("Could not load %s: %s", blog.id, e.message)
            self.notifier.error(self._t("load_error"))
            return False
        post = data.get('blog') or {}
        doc = ContentDocument(
            title=post.get('title') or blog.title,
            body=post.get('content') or '',
            category=match_category(post.get('category') or blog.category),
        )
        for tag in post.get('tags') or blog.tags:
            doc.add_tag(tag)
        if BlogStatus.parse(post.get('status') or '') == BlogStatus.PENDING:
            doc.status = DocumentStatus.PENDING
        self._fill_fields(doc)
        self.current_post_id = blog.id
        self.last_saved_content = doc.body
        self.show_browser = False
        self._focus(self.body_field)
        return True

    async def open_reader(self, blog):
        try:
            data = await asyncio.to_thread(self.api.get_blog, blog.slug or blog.id)
        except ApiError as e:
            log.warning("Could not open %s: %s", blog.id, e.message)
            self.notifier.error(e.message if e.status is not None else self._t("load_error"))
            return False
        post = data.get('blog') or {}
        self.reader = (post.get('title') or blog.title, post.get('content') or '',
                       unique_tags(post.get('tags') or blog.tags))
        self.show_browser = False
        self.show_preview_overlay = True
        return True

    # --- browser ---
    def _on_search_changed(self, buffer):
        # programmatic resets already match the committed text
        if buffer.text == self.listing.search_text:
            return
        app = get_app_or_none()
        if app is not None and app.is_running:
            self.listing.search_input(buffer.text)

    def _on_listing_change(self):
        if self.show_browser and self.browser_variant in (ListVariant.LIST, ListVariant.GRID):
            self.render_browser()
        self._invalidate()

    def _listing_call(self, action):
        async def runner():
            try:
                result = action()
            except ValueError as e:
                self.notifier.error(str(e))
                return False
            if asyncio.isfuture(result) or asyncio.iscoroutine(result):
                await result
            await self.listing.wait_idle()
            self.render_browser()
            return True
        if self.browser_variant not in (ListVariant.LIST, ListVariant.GRID):
            self.browser_variant = ListVariant.LIST
        self.show_browser, self.show_help = True, False
        return self._spawn(runner())

    def _moderate(self, coro):
        async def runner():
            ok = await coro
            self.render_browser()
            return ok
        return self._spawn(runner())

    async def _delete(self, blog_id):
        ok = await self.moderation.delete(blog_id)
        if ok:
            self.listing.remove_blog(blog_id)
        return ok

    async def _like(self, blog):
        def updated(new):
            self.listing.replace_blog(new)
            self.trending.blogs = [new if b.id == new.id else b for b in self.trending.blogs]
        ok = await self.likes.like(blog, on_updated=updated)
        self.render_browser()
        return ok

    def open_browser(self, variant=ListVariant.LIST):
        self.browser_variant = variant
        self.browser_index = 0
        self.show_browser, self.show_help = True, False
        self.render_browser()
        self._focus(self.search_field)
        return self._listing_call(self.listing.refresh)

    def open_trending(self, days=None):
        self.browser_variant = ListVariant.TRENDING
        self.browser_index = 0
        self.show_browser, self.show_help = True, False
        self.render_browser()

        async def runner():
            await self.trending.load(days)
            self.render_browser()
        return self._spawn(runner())

    def open_pending(self):
        self.browser_variant = ListVariant.PENDING
        self.browser_index = 0
        self.show_browser, self.show_help = True, False
        self.render_browser()
        return self._moderate(self.moderation.load())

    def open_manage(self, status='all'):
        self.browser_variant = ListVariant.MANAGE
        self.browser_index = 0
        self.show_browser, self.show_help = True, False
        self.render_browser()
        return self._moderate(self.moderation.load_all(status))

    def reload_browser(self):
        variant = self.browser_variant
        if variant in (ListVariant.LIST, ListVariant.GRID):
            return self._listing_call(self.listing.refresh)
        elif variant == ListVariant.TRENDING:
            return self.open_trending()
        elif variant == ListVariant.PENDING:
            return self.open_pending()
        elif variant == ListVariant.MANAGE:
            return self.open_manage(self.moderation.manage_filter)
        raise ValueError(f"Unknown list variant: {variant}")

    def current_rows(self):
        variant = self.browser_variant
        if variant in (ListVariant.LIST, ListVariant.GRID):
            return self.listing.blogs
        elif variant == ListVariant.TRENDING:
            return self.trending.blogs
        elif variant == ListVariant.PENDING:
            return self.moderation.pending
        elif variant == ListVariant.MANAGE:
            return self.moderation.managed
        raise ValueError(f"Unknown list variant: {variant}")

    def _browser_state(self):
        variant = self.browser_variant
        if variant in (ListVariant.LIST, ListVariant.GRID):
            return self.listing.is_loading, self.listing.error
        elif variant == ListVariant.TRENDING:
            return self.trending.is_loading, self.trending.error
        elif variant in (ListVariant.PENDING, ListVariant.MANAGE):
            return self.moderation.is_loading, self.moderation.error
        raise ValueError(f"Unknown list variant: {variant}")

    def _browser_heading(self, t):
        variant = self.browser_variant
        if variant in (ListVariant.LIST, ListVariant.GRID):
            sort = SORT_LABELS.get(self.lang, SORT_LABELS['en'])[self.listing.query.sort]
            caption = t["discover"].format(total=self.listing.total, filters=self.listing.active_filter_count, sort=sort)
            return t["browser_title"], caption
        elif variant == ListVariant.TRENDING:
            return t["trending_title"].format(days=self.trending.days), "7 / 14 / 30: :trending N"
        elif variant == ListVariant.PENDING:
            s = self.moderation.stats
            return t["pending_title"], f"pending {s.pending} · published {s.published} · rejected {s.rejected} · users {s.users} · comments {s.comments}"
        elif variant == ListVariant.MANAGE:
            return t["manage_title"].format(status=self.moderation.manage_filter), ":hide N · :delete N"
        raise ValueError(f"Unknown list variant: {variant}")

    def _row_lines(self, i, blog, now):
        """Render one summary; every list variant has its own columns."""
        variant = self.browser_variant
        if variant == ListVariant.LIST:
            status_char = blog.status.value[0].upper()
            return [f"[{status_char}] {blog.title[:42]:<42} ♥{blog.like_count:<4} {blog.views:>6} views"]
        elif variant == ListVariant.GRID:
            tags = " ".join(f"#{tag}" for tag in blog.tags[:4])
            return [
                f"{blog.title[:60]}",
                f"    {blog.author.display_name} · {blog.category or 'General'} · {blog.read_time or 1} min",
                f"    {tags}",
            ]
        elif variant == ListVariant.TRENDING:
            score = trending_score(blog, now)
            return [f"#{i + 1:<3}{blog.title[:46]:<46} ♥{blog.like_count:<4} score {score}"]
        elif variant == ListVariant.PENDING:
            return [f"{blog.title[:38]:<38} {blog.author.display_name[:16]:<16} {blog.category[:14]}"]
        elif variant == ListVariant.MANAGE:
            hidden = "HIDDEN" if blog.is_hidden else ""
            return [f"[{blog.status.value[:4].upper():<4}] {blog.title[:44]:<44} {hidden:<6}"]
        raise ValueError(f"Unknown list variant: {variant}")

    def render_browser(self):
        t = TRANSLATIONS.get(self.lang, TRANSLATIONS['en'])["ui"]
        width = 76
        title, caption = self._browser_heading(t)
        is_loading, error = self._browser_state()
        rows = self.current_rows()
        self.browser_index = max(0, min(self.browser_index, len(rows) - 1))

        lines = [caption, " ╔" + "═"*(width-2) + "╗", f" ║{title.center(width-2)}║", " ╠" + "═"*(width-2) + "╣"]

        if is_loading and not rows:
            lines.append(f" ║{t['fetching'].center(width-2)}║")
        elif error and not rows:
            lines.append(f" ║{t['browser_error'].center(width-2)}║")
        elif not rows:
            lines.append(f" ║{t['browser_empty'].center(width-2)}║")
        else:
            now = datetime.now(timezone.utc)
            start = max(0, min(self.browser_index - self.BROWSER_ROWS // 2, len(rows) - self.BROWSER_ROWS))
            for i, blog in enumerate(rows[start:start + self.BROWSER_ROWS], start):
                prefix = " › " if i == self.browser_index else "   "
                for j, text in enumerate(self._row_lines(i, blog, now)):
                    lead = prefix + f"{i + 1:>3}. " if j == 0 else " " * 8
                    content = f"{lead}{text}"[:width-2].ljust(width-2)
                    lines.append(f" ║{content}║")

        while len(lines) < 16:
            lines.append(" ║" + " "*(width-2) + "║")

        lines.append(" ╚" + "═"*(width-2) + "╝")
        if self.browser_variant in (ListVariant.LIST, ListVariant.GRID) and self.listing.is_loading_more:
            lines.append(t["fetching"].center(width))
        lines.append(t["browser_hint"].center(width))

        self.browser_field.text = "\n".join(lines)

    def move_selection(self, step):
        rows = self.current_rows()
        at_end = self.browser_index >= len(rows) - 1
        self.browser_index = max(0, min(len(rows) - 1, self.browser_index + step))
        self.render_browser()
        # scrolling past the last row asks for the next page
        if step > 0 and at_end and self.browser_variant in (ListVariant.LIST, ListVariant.GRID) \
                and self.listing.has_more:
            self._listing_call(self.listing.load_more)

    def setup_bindings(self):
        kb = self.kb
        in_body = Condition(lambda: get_app().layout.has_focus(self.body_field))
        browsing = Condition(lambda: self.show_browser and not self.show_help and not self.is_warning_mode
                             and not get_app().layout.has_focus(self.command_field))

        @kb.add('f1')
        def _(event): self.show_help = not self.show_help

        @kb.add('f2')
        def _(event): self.show_preview_pane = not self.show_preview_pane

        @kb.add('f3')
        def _(event): self.toggle_overlay()

        @kb.add('c-o')
        def _(event):
            if self.show_browser:
                self.show_browser = False
                event.app.layout.focus(self.body_field)
            else:
                self.open_browser()

        @kb.add('tab', filter=in_body)
        def _(event): indent_buffer(self.body_buffer)

        @kb.add('tab', filter=~in_body)
        def _(event): event.app.layout.focus_next()

        @kb.add('s-tab')
        def _(event): event.app.layout.focus_previous()

        @kb.add('c-d')
        def _(event):
            self.show_spelling_errors = not self.show_spelling_errors
            if self.show_spelling_errors:
                self.run_spellcheck()
            else:
                self.notifier.info(self._t("ready").format(lang=self.lang.upper()))
            event.app.invalidate()

        @kb.add('c-g')
        def _(event): event.app.layout.focus(self.command_field)

        @kb.add('c-s')
        def _(event): self.save_post(is_draft=True)

        @kb.add('c-p')
        def _(event): self.publish_post()

        # Markdown Formatting Hotkeys
        for keys, action in SHORTCUTS.items():
            kb.add(*keys, filter=in_body)(lambda event, action=action: apply_to_buffer(self.body_buffer, action))

        # Navigation
        @kb.add('up', filter=browsing)
        def _(event): self.move_selection(-1)

        @kb.add('down', filter=browsing)
        def _(event): self.move_selection(1)

        @kb.add('f5', filter=browsing)
        def _(event): self.reload_browser()

        @kb.add('enter', filter=browsing)
        def _(event):
            rows = self.current_rows()
            if rows:
                self._spawn(self.open_reader(rows[self.browser_index]))

    # --- crash recovery ---
    def auto_save_recovery(self):
        doc = self._sync_document()
        if not doc.is_empty:
            self.drafts.save(doc)

    def load_recovery(self):
        doc = self.drafts.load()
        if doc is None:
            self.notifier.error(self._t("load_error"))
            return False
        self._fill_fields(doc)
        self.notifier.success(self._t("restored"))
        return True

    async def startup(self):
        if self.test_mode:
            return False
        restored = await self.session.restore()
        if self.session.token and not restored:
            self.notifier.error(self._t("offline"))
        return restored

    def close(self):
        self.listing.close()


def show_loading():
    print("\033[H\033[J" + get_banner())
    time.sleep(1.3)


async def main():
    vibe = VibeWriteApp(query_string=os.environ.get('VIBEWRITE_QUERY', ''))
    app = Application(
        layout=Layout(vibe.container, focused_element=vibe.body_field.buffer),
        key_bindings=vibe.kb,
        full_screen=True,
        style=vibe_style,
        editing_mode=EditingMode.EMACS,
        mouse_support=True
    )

    async def refresh():
        ticks = 0
        while True:
            await asyncio.sleep(0.1)
            app.invalidate()
            ticks += 1
            if ticks >= 600: vibe.auto_save_recovery(); ticks = 0

    app.create_background_task(refresh())
    app.create_background_task(vibe.startup())
    try:
        await app.run_async()
    finally:
        vibe.close()


def run():
    show_loading()
    try: asyncio.run(main())
    except (KeyboardInterrupt, EOFError): pass


if __name__ == "__main__":
    run()
