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

# api.py
#
# Thin client for the Vibe Write REST API. Every call returns the decoded
# JSON envelope or raises ApiError carrying a message fit for the status bar.

import logging

import requests

from core.errors import ApiError

log = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:5000/api"
GENERIC_FAILURE = "Request failed"


class ApiClient:
    def __init__(self, base_url=DEFAULT_BASE_URL, session=None, timeout=10):
        self.base_url = base_url.rstrip('/')
        self.session = session or requests.Session()
        self.timeout = timeout
        self.token = None

    def set_token(self, token):
        self.token = token or None

    def _headers(self):
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def request(self, method, endpoint, json=None, params=None):
        url = f"{self.base_url}{endpoint}"
        try:
            resp = self.session.request(
                method, url, json=json, params=params,
                headers=self._headers(), timeout=self.timeout,
            )
        except requests.RequestException as exc:
            log.warning("%s %s failed: %s", method, endpoint, exc)
            raise ApiError(GENERIC_FAILURE) from exc

        try:
            data = resp.json()
        except ValueError:
            data = None

        if not resp.ok:
            body = data if isinstance(data, dict) else {}
            message = body.get('message') or f"Request failed with status {resp.status_code}"
            log.warning("%s %s -> %s: %s", method, endpoint, resp.status_code, message)
            raise ApiError(message, status=resp.status_code, errors=body.get('errors'))
        if not isinstance(data, dict):
            log.warning("%s %s returned an unparsable body", method, endpoint)
            raise ApiError(GENERIC_FAILURE, status=resp.status_code)
        if data.get('success') is False:
            raise ApiError(data.get('message') or GENERIC_FAILURE,
                           status=resp.status_code, errors=data.get('errors'))
        return data

    # --- Auth ---
    def register(self, data):
        return self.request('POST', '/auth/register', json=data)

    def login(self, email, password):
        return self.request('POST', '/auth/login', json={'email': email, 'password': password})

    def logout(self):
        return self.request('POST', '/auth/logout')

    def get_profile(self):
        return self.request('GET', '/auth/me')

    def update_profile(self, data):
        return self.request('PUT', '/auth/profile', json=data)

    # --- Blogs ---
    def get_blogs(self, params=None):
        params = {k: v for k, v in (params or {}).items() if v not in (None, '')}
        return self.request('GET', '/blogs', params=params)

    def get_trending_blogs(self, limit=5, days=7):
        return self.request('GET', '/blogs/trending', params={'limit': limit, 'days': days})

    def search_blogs(self, q, page=1, limit=10):
        return self.request('GET', '/blogs/search', params={'q': q, 'page': page, 'limit': limit})

    def get_blog(self, slug):
        return self.request('GET', f'/blogs/{slug}')

    def create_blog(self, data):
        return self.request('POST', '/blogs', json=data)

    def update_blog(self, blog_id, data):
        return self.request('PUT', f'/blogs/{blog_id}', json=data)

    def delete_blog(self, blog_id):
        return self.request('DELETE', f'/blogs/{blog_id}')

    def like_blog(self, blog_id):
        return self.request('POST', f'/blogs/{blog_id}/like')

    def get_blogs_by_user(self, user_id, page=1, limit=10):
        return self.request('GET', f'/blogs/user/{user_id}', params={'page': page, 'limit': limit})

    # --- Comments ---
    def get_comments(self, blog_id, page=1, limit=10, sort='newest'):
        return self.request('GET', f'/comments/blog/{blog_id}',
                            params={'page': page, 'limit': limit, 'sort': sort})

    def create_comment(self, blog_id, content, parent_comment=None):
        payload = {'content': content}
        if parent_comment:
            payload['parentComment'] = parent_comment
        return self.request('POST', f'/comments/blog/{blog_id}', json=payload)

    def get_comment_replies(self, comment_id, page=1, limit=5):
        return self.request('GET', f'/comments/{comment_id}/replies', params={'page': page, 'limit': limit})

    def update_comment(self, comment_id, content):
        return self.request('PUT', f'/comments/{comment_id}', json={'content': content})

    def delete_comment(self, comment_id):
        return self.request('DELETE', f'/comments/{comment_id}')

    def like_comment(self, comment_id):
        return self.request('POST', f'/comments/{comment_id}/like')

    # --- Admin ---
    def get_admin_dashboard(self):
        return self.request('GET', '/admin/dashboard')

    def get_admin_blogs(self, page=1, limit=100, status=None):
        params = {'page': page, 'limit': limit}
        if status and status != 'all':
            params['status'] = status
        return self.request('GET', '/admin/blogs', params=params)

    def get_pending_blogs(self, page=1, limit=50):
        return self.request('GET', '/admin/blogs/pending', params={'page': page, 'limit': limit})

    def approve_blog(self, blog_id):
        return self.request('PUT', f'/admin/blogs/{blog_id}/approve')

    def reject_blog(self, blog_id, reason):
        return self.request('PUT', f'/admin/blogs/{blog_id}/reject', json={'reason': reason})

    def toggle_hide_blog(self, blog_id):
        return self.request('PUT', f'/admin/blogs/{blog_id}/toggle-hide')

    def delete_admin_blog(self, blog_id):
        return self.request('DELETE', f'/admin/blogs/{blog_id}')

    def get_admin_users(self, page=1, limit=10):
        return self.request('GET', '/admin/users', params={'page': page, 'limit': limit})

    # --- Stats ---
    def get_stats(self):
        return self.request('GET', '/stats')
