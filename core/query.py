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

# query.py
#
# Listing filters <-> URL query string. Defaults are never written, and
# parameters that are not filters pass through untouched.

from dataclasses import dataclass, replace
from enum import Enum
from typing import Tuple
from urllib.parse import parse_qsl, unquote_plus, urlencode

from core.models import unique_tags

DEFAULT_PAGE_SIZE = 12
FILTER_KEYS = ('search', 'category', 'tags', 'sort')
ALL_CATEGORIES = 'all'


class SortOrder(str, Enum):
    NEWEST = 'newest'
    OLDEST = 'oldest'
    POPULAR = 'popular'
    TRENDING = 'trending'

    @classmethod
    def parse(cls, value):
        try:
            return cls((value or '').strip().lower())
        except ValueError:
            return cls.NEWEST


@dataclass(frozen=True)
class QueryState:
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE
    search: str = ''
    category: str = ''
    tags: Tuple[str, ...] = ()
    sort: SortOrder = SortOrder.NEWEST

    def __post_init__(self):
        if self.page < 1 or self.page_size < 1:
            raise ValueError("page and page_size must be positive")

    def evolve(self, **changes):
        if 'tags' in changes:
            changes['tags'] = unique_tags(changes['tags'])
        return replace(self, **changes)

    @property
    def active_filter_count(self):
        return sum((
            bool(self.search.strip()),
            bool(self.category),
            bool(self.tags),
            self.sort != SortOrder.NEWEST,
        ))

    def filters_equal(self, other):
        return filter_values(self) == filter_values(other)


def filter_values(state):
    values = {}
    if state.search.strip():
        values['search'] = state.search
    if state.category:
        values['category'] = state.category
    if state.tags:
        values['tags'] = ','.join(state.tags)
    if state.sort != SortOrder.NEWEST:
        values['sort'] = state.sort.value
    return values


def decode(query_string, page_size=DEFAULT_PAGE_SIZE):
    params = {}
    for key, value in parse_qsl((query_string or '').lstrip('?'), keep_blank_values=True):
        params.setdefault(key, value)

    category = params.get('category', '').strip()
    if category.lower() == ALL_CATEGORIES:
        category = ''
    return QueryState(
        page_size=page_size,
        search=params.get('search', ''),
        category=category,
        tags=unique_tags(params.get('tags', '').split(',')),
        sort=SortOrder.parse(params.get('sort')),
    )


def _segment_key(segment):
    return unquote_plus(segment.split('=', 1)[0])


def encode(state, base=''):
    values = filter_values(state)
    out = []
    written = set()
    for segment in (base or '').lstrip('?').split('&'):
        if not segment:
            continue
        key = _segment_key(segment)
        if key not in FILTER_KEYS:
            out.append(segment)
        elif key in values and key not in written:
            # filter already in the URL keeps its slot
            out.append(urlencode({key: values[key]}, safe=','))
            written.add(key)

    for key in FILTER_KEYS:
        if key in values and key not in written:
            out.append(urlencode({key: values[key]}, safe=','))
    return '&'.join(out)


def to_api_params(state):
    params = {'page': state.page, 'limit': state.page_size, 'sort': state.sort.value}
    if state.category:
        params['category'] = state.category
    if state.search.strip():
        params['search'] = state.search.strip()
    if state.tags:
        params['tags'] = ','.join(state.tags)
    return params
