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

# listing.py
#
# Paginated, filterable blog listing. Owns the query state and the loaded
# summaries, and keeps both in step with the URL query string.

import asyncio
import logging
from enum import Enum

from core.errors import ApiError
from core.models import BlogSummary
from core.query import QueryState, SortOrder, decode, encode, to_api_params

log = logging.getLogger(__name__)

SEARCH_DEBOUNCE = 0.5


class Phase(str, Enum):
    IDLE = 'idle'
    DEBOUNCING = 'debouncing'
    FETCHING = 'fetching'
    SETTLED = 'settled'
    ERROR = 'error'


class Debouncer:
    """Calls ``callback`` once ``delay`` seconds pass without a new trigger."""

    def __init__(self, delay, callback):
        self.delay = delay
        self.callback = callback
        self._handle = None

    @property
    def pending(self):
        return self._handle is not None

    def trigger(self, *args):
        self.cancel()
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self.delay, self._fire, args)

    def _fire(self, args):
        self._handle = None
        self.callback(*args)

    def cancel(self):
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None


class ListingController:
    def __init__(self, api, query_string='', page_size=12, debounce=SEARCH_DEBOUNCE,
                 notify=None, on_change=None):
        self.api = api
        self.notify = notify
        self.on_change = on_change
        self.url_query = (query_string or '').lstrip('?')
        self.query = decode(self.url_query, page_size=page_size)
        self.search_text = self.query.search

        self.blogs = []
        self.available_tags = []
        self.total = 0
        self.pages = 1
        self.phase = Phase.IDLE
        self.is_loading = False
        self.is_loading_more = False
        self.error = None
        self.closed = False

        self._generation = 0
        self._tasks = set()
        self._debouncer = Debouncer(debounce, self._commit_search)

    # --- derived ---
    @property
    def page(self):
        return self.query.page

    @property
    def has_more(self):
        return self.query.page < self.pages

    @property
    def active_filter_count(self):
        return self.query.active_filter_count

    def _changed(self):
        if self.on_change:
            self.on_change()

    def _spawn(self, coro):
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def wait_idle(self):
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    # --- filter mutations ---
    def search_input(self, text):
        self.search_text = text
        self.phase = Phase.DEBOUNCING
        self._debouncer.trigger(text)

    def set_search(self, text):
        """Commit a search right away, skipping the debounce."""
        self._debouncer.cancel()
        self.search_text = text or ''
        return self._commit(search=self.search_text)

    def _commit_search(self, text):
        if not self.closed:
            self._commit(search=text)

    def _commit(self, **changes):
        self.query = self.query.evolve(page=1, **changes)
        self.url_query = encode(self.query, self.url_query)
        self._changed()
        return self._spawn(self.refresh())

    def set_category(self, category):
        category = (category or '').strip()
        if category.lower() == 'all':
            category = ''
        return self._commit(category=category)

    def toggle_tag(self, tag):
        tag = (tag or '').strip()
        tags = list(self.query.tags)
        if tag in tags:
            tags.remove(tag)
        elif tag:
            tags.append(tag)
        return self._commit(tags=tags)

    def set_sort(self, sort):
        return self._commit(sort=SortOrder(sort))

    def clear_filters(self):
        self._debouncer.cancel()
        self.search_text = ''
        self.query = QueryState(page_size=self.query.page_size)
        self.url_query = encode(self.query, self.url_query)
        self._changed()
        return self._spawn(self.refresh())

    # --- fetching ---
    async def refresh(self):
        self._generation += 1
        generation = self._generation
        params = to_api_params(self.query.evolve(page=1))

        self.is_loading = True
        self.error = None
        self.phase = Phase.FETCHING
        self._changed()
        try:
            data = await asyncio.to_thread(self.api.get_blogs, params)
        except ApiError as e:
            if generation != self._generation:
                return False
            log.warning("Failed to load blogs: %s", e.message)
            self.blogs = []
            self.total = 0
            self.pages = 1
            self._fail(e.message)
            self.is_loading = False
            self._changed()
            return False

        if generation != self._generation:
            log.debug("Dropping stale listing response (generation %s)", generation)
            return False
        self._apply(data, page=1, append=False)
        return True

    async def load_more(self):
        if self.is_loading or self.is_loading_more or not self.has_more or self.closed:
            return False
        generation = self._generation
        next_page = self.query.page + 1
        params = to_api_params(self.query.evolve(page=next_page))

        self.is_loading_more = True
        self.phase = Phase.FETCHING
        self._changed()
        try:
            data = await asyncio.to_thread(self.api.get_blogs, params)
        except ApiError as e:
            self.is_loading_more = False
            if generation != self._generation:
                return False
            log.warning("Failed to load page %s: %s", next_page, e.message)
            self._fail(e.message)
            self._changed()
            return False

        self.is_loading_more = False
        if generation != self._generation:
            return False
        self._apply(data, page=next_page, append=True)
        return True

    def _fail(self, message):
        self.error = message
        self.phase = Phase.ERROR
        if self.notify:
            self.notify.error(message)

    def _apply(self, data, page, append):
        incoming = [BlogSummary.from_api(b) for b in data.get('blogs') or []]
        self.blogs = self.blogs + incoming if append else incoming
        total = data.get('total')
        self.total = int(total) if total is not None else len(self.blogs)
        self.pages = max(1, int(data.get('pages') or 1))
        self.query = self.query.evolve(page=page)

        tags = set(self.available_tags)
        for blog in incoming:
            tags.update(blog.tags)
        self.available_tags = sorted(tags)

        self.is_loading = False
        self.error = None
        self.phase = Phase.SETTLED
        self._changed()

    # --- local updates after a confirmed mutation ---
    def replace_blog(self, updated):
        self.blogs = [updated if b.id == updated.id else b for b in self.blogs]
        self._changed()

    def remove_blog(self, blog_id):
        self.blogs = [b for b in self.blogs if b.id != blog_id]
        self._changed()

    def close(self):
        """Tear down: drop the pending search and ignore in-flight results."""
        self.closed = True
        self._debouncer.cancel()
        self._generation += 1
