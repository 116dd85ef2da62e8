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

# mutations.py
#
# Server-confirmed edits to loaded lists: moderation actions and likes.
# Nothing is changed locally until the request has succeeded.

import asyncio
import logging

from core.errors import ApiError, ValidationError
from core.models import BlogSummary, DashboardStats
from core.validation import validate_rejection_reason

log = logging.getLogger(__name__)


class MutationGuard:
    """One request in flight per item id; repeats while busy are ignored."""

    def __init__(self, notify=None):
        self.notify = notify
        self.in_flight = set()

    def is_busy(self, item_id):
        return item_id in self.in_flight

    async def run(self, item_id, request, on_success, success_message, error_message):
        if item_id in self.in_flight:
            log.debug("Ignoring mutation on %s: one is already in flight", item_id)
            return False

        self.in_flight.add(item_id)
        try:
            result = await asyncio.to_thread(request)
        except ApiError as e:
            log.warning("%s (%s): %s", error_message, item_id, e.message)
            if self.notify:
                # a server that answered gets its own words shown
                self.notify.error(e.message if e.status is not None else error_message)
            return False
        finally:
            self.in_flight.discard(item_id)

        on_success(result or {})
        if self.notify:
            message = success_message(result or {}) if callable(success_message) else success_message
            self.notify.success(message)
        return True


class ModerationQueue:
    """Admin view state: dashboard counters, the pending queue and the manage list."""

    def __init__(self, api, notify=None):
        self.api = api
        self.notify = notify
        self.guard = MutationGuard(notify)
        self.stats = DashboardStats()
        self.pending = []
        self.managed = []
        self.manage_filter = 'all'
        self.is_loading = False
        self.error = None

    def is_busy(self, blog_id):
        return self.guard.is_busy(blog_id)

    async def load(self):
        self.is_loading = True
        self.error = None
        try:
            # issued together; either may come back first
            stats_resp, pending_resp = await asyncio.gather(
                asyncio.to_thread(self.api.get_admin_dashboard),
                asyncio.to_thread(self.api.get_pending_blogs, 1, 50),
            )
            if not isinstance(stats_resp.get('stats'), dict):
                raise ApiError("Invalid stats response structure")
        except ApiError as e:
            log.warning("Failed to load dashboard data: %s", e.message)
            self.error = e.message
            self.stats = DashboardStats()
            self.pending = []
            if self.notify:
                self.notify.error(e.message)
            return False
        finally:
            self.is_loading = False

        self.stats = DashboardStats.from_api(stats_resp['stats'])
        self.pending = [BlogSummary.from_api(b) for b in pending_resp.get('blogs') or []]
        return True

    async def load_all(self, status='all'):
        self.manage_filter = status or 'all'
        self.is_loading = True
        try:
            data = await asyncio.to_thread(self.api.get_admin_blogs, 1, 100, self.manage_filter)
        except ApiError as e:
            log.warning("Failed to load all blogs: %s", e.message)
            self.error = e.message
            self.managed = []
            if self.notify:
                self.notify.error(e.message)
            return False
        finally:
            self.is_loading = False
        self.error = None
        self.managed = [BlogSummary.from_api(b) for b in data.get('blogs') or []]
        return True

    def _leave_pending(self, blog_id):
        """Drop a row from the pending queue; True only if it was there."""
        kept = [b for b in self.pending if b.id != blog_id]
        removed = len(kept) != len(self.pending)
        self.pending = kept
        return removed

    async def approve(self, blog_id):
        def applied(_):
            if self._leave_pending(blog_id):
                self.stats.pending = max(0, self.stats.pending - 1)
                self.stats.published += 1

        return await self.guard.run(
            blog_id, lambda: self.api.approve_blog(blog_id), applied,
            "Blog approved successfully!", "Failed to approve blog",
        )

    async def reject(self, blog_id, reason):
        try:
            validate_rejection_reason(reason)
        except ValidationError as e:
            if self.notify:
                self.notify.error(e.message)
            return False

        def applied(_):
            if self._leave_pending(blog_id):
                self.stats.pending = max(0, self.stats.pending - 1)
                self.stats.rejected += 1

        return await self.guard.run(
            blog_id, lambda: self.api.reject_blog(blog_id, reason.strip()), applied,
            "Blog rejected successfully!", "Failed to reject blog",
        )

    async def toggle_hide(self, blog_id):
        def applied(result):
            server = result.get('blog') or {}
            out = []
            for b in self.managed:
                if b.id == blog_id:
                    hidden = bool(server['isHidden']) if 'isHidden' in server else not b.is_hidden
                    b = b.evolve(is_hidden=hidden)
                out.append(b)
            self.managed = out

        return await self.guard.run(
            blog_id, lambda: self.api.toggle_hide_blog(blog_id), applied,
            "Blog visibility toggled successfully!", "Failed to toggle blog visibility",
        )

    async def delete(self, blog_id):
        def applied(_):
            self.managed = [b for b in self.managed if b.id != blog_id]
            self.pending = [b for b in self.pending if b.id != blog_id]

        return await self.guard.run(
            blog_id, lambda: self.api.delete_admin_blog(blog_id), applied,
            "Blog deleted successfully!", "Failed to delete blog",
        )


class LikeToggle:
    def __init__(self, api, session=None, notify=None):
        self.api = api
        self.session = session
        self.notify = notify
        self.guard = MutationGuard(notify)

    async def like(self, blog, on_updated=None):
        if self.session is not None and not self.session.is_authenticated:
            if self.notify:
                self.notify.error("Please log in to like this post")
            return False

        def applied(result):
            count = result.get('likeCount', blog.like_count)
            updated = blog.evolve(like_count=max(0, int(count)), liked=bool(result.get('isLiked')))
            if on_updated:
                on_updated(updated)

        return await self.guard.run(
            blog.id, lambda: self.api.like_blog(blog.id), applied,
            lambda r: "Post liked!" if r.get('isLiked') else "Like removed",
            "Failed to like post",
        )
