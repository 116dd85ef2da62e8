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

# trending.py

import asyncio
import logging
import math
from datetime import datetime, timezone

from core.errors import ApiError
from core.models import BlogSummary

log = logging.getLogger(__name__)

DAY_MS = 86_400_000
TIME_RANGES = (7, 14, 30)
TRENDING_LIMIT = 20


def age_days(instant, now=None):
    now = now or datetime.now(timezone.utc)
    if instant is None:
        return 1
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    elapsed_ms = (now - instant).total_seconds() * 1000
    return max(1, math.ceil(elapsed_ms / DAY_MS))


def trending_score(blog, now=None):
    """(likes*2 + views + comments*3) / days since published, rounded half up."""
    engagement = blog.like_count * 2 + blog.views + blog.comment_count * 3
    return math.floor(engagement / age_days(blog.effective_instant, now) + 0.5)


class TrendingFeed:
    """Server-ranked trending list. Order is whatever the server returned."""

    def __init__(self, api, notify=None, limit=TRENDING_LIMIT):
        self.api = api
        self.notify = notify
        self.limit = limit
        self.days = TIME_RANGES[0]
        self.blogs = []
        self.is_loading = False
        self.error = None

    async def load(self, days=None):
        if days is not None:
            if days not in TIME_RANGES:
                raise ValueError(f"days must be one of {TIME_RANGES}")
            self.days = days
        self.is_loading = True
        self.error = None
        try:
            data = await asyncio.to_thread(self.api.get_trending_blogs, self.limit, self.days)
            self.blogs = [BlogSummary.from_api(b) for b in data.get('blogs') or []]
        except ApiError as e:
            log.warning("Failed to load trending blogs: %s", e.message)
            self.error = e.message
            self.blogs = []
            if self.notify:
                self.notify.error("Failed to load trending blogs")
        finally:
            self.is_loading = False
        return self.blogs

    def ranked(self, now=None):
        now = now or datetime.now(timezone.utc)
        return [(i + 1, blog, trending_score(blog, now)) for i, blog in enumerate(self.blogs)]
