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

# models.py

import re
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Tuple

EXCERPT_LENGTH = 200


class DocumentStatus(str, Enum):
    DRAFT = 'draft'
    PENDING = 'pending'


class BlogStatus(str, Enum):
    DRAFT = 'draft'
    PENDING = 'pending'
    PUBLISHED = 'published'
    REJECTED = 'rejected'
    HIDDEN = 'hidden'

    @classmethod
    def parse(cls, value):
        try:
            return cls(str(value).lower())
        except ValueError:
            return cls.DRAFT


class ListVariant(str, Enum):
    GRID = 'grid'
    LIST = 'list'
    TRENDING = 'trending'
    PENDING = 'pending'
    MANAGE = 'manage'


def parse_timestamp(value) -> Optional[datetime]:
    if not value:
        return None
    if isinstance(value, datetime):
        stamp = value
    else:
        text = str(value).strip()
        if text.endswith('Z'):
            text = text[:-1] + '+00:00'
        try:
            stamp = datetime.fromisoformat(text)
        except ValueError:
            return None
    if stamp.tzinfo is None:
        stamp = stamp.replace(tzinfo=timezone.utc)
    return stamp


def normalize_tag(tag):
    return (tag or '').strip().lower()


def unique_tags(tags):
    seen = []
    for tag in tags or ():
        tag = (tag or '').strip()
        if tag and tag not in seen:
            seen.append(tag)
    return tuple(seen)


def _count(value):
    try:
        return max(0, int(value or 0))
    except (TypeError, ValueError):
        return 0


@dataclass
class ContentDocument:
    title: str = ''
    body: str = ''
    tags: Tuple[str, ...] = ()
    category: Optional[str] = None
    status: DocumentStatus = DocumentStatus.DRAFT

    def add_tag(self, tag):
        tag = normalize_tag(tag)
        if tag and tag not in self.tags:
            self.tags = self.tags + (tag,)
        return self.tags

    def remove_tag(self, tag):
        tag = normalize_tag(tag)
        self.tags = tuple(t for t in self.tags if t != tag)
        return self.tags

    def set_tags_from_text(self, text):
        self.tags = ()
        for part in (text or '').split(','):
            self.add_tag(part)
        return self.tags

    @property
    def excerpt(self):
        body = self.body.strip()
        if len(body) > EXCERPT_LENGTH:
            return body[:EXCERPT_LENGTH] + '...'
        return body

    @property
    def word_count(self):
        return len(re.findall(r'\S+', self.body))

    def read_minutes(self, speed=225):
        return max(1, round(self.word_count / speed))

    @property
    def is_empty(self):
        return not (self.title.strip() or self.body.strip() or self.tags)

    def to_payload(self, status=None):
        status = DocumentStatus(status or self.status)
        return {
            'title': self.title.strip(),
            'content': self.body.strip(),
            'excerpt': self.excerpt,
            'category': self.category or 'General',
            'tags': list(self.tags),
            'status': status.value,
        }

    def to_cache(self):
        return {
            'title': self.title,
            'content': self.body,
            'tags': list(self.tags),
            'category': self.category or '',
            'status': self.status.value,
        }

    @classmethod
    def from_cache(cls, data):
        doc = cls(title=data.get('title') or '', body=data.get('content') or data.get('body') or '',
                  category=data.get('category') or None)
        for tag in data.get('tags') or ():
            doc.add_tag(tag)
        try:
            doc.status = DocumentStatus(data.get('status') or 'draft')
        except ValueError:
            doc.status = DocumentStatus.DRAFT
        return doc


@dataclass(frozen=True)
class Author:
    id: str
    display_name: str
    avatar: Optional[str] = None
    username: str = ''

    @classmethod
    def from_api(cls, data):
        data = data or {}
        full = f"{data.get('firstName') or ''} {data.get('lastName') or ''}".strip()
        username = data.get('username') or ''
        return cls(
            id=str(data.get('_id') or data.get('id') or ''),
            display_name=full or username or 'Anonymous',
            avatar=data.get('avatar'),
            username=username,
        )

    @property
    def initials(self):
        parts = self.display_name.split()
        return ''.join(p[0] for p in parts[:2]).upper()


@dataclass(frozen=True)
class BlogSummary:
    id: str
    title: str
    slug: str = ''
    excerpt: str = ''
    author: Author = field(default_factory=lambda: Author('', 'Anonymous'))
    category: str = ''
    tags: Tuple[str, ...] = ()
    status: BlogStatus = BlogStatus.PUBLISHED
    like_count: int = 0
    comment_count: int = 0
    views: int = 0
    created_at: Optional[datetime] = None
    published_at: Optional[datetime] = None
    cover_image: Optional[str] = None
    is_hidden: bool = False
    read_time: int = 0
    liked: bool = False

    @classmethod
    def from_api(cls, data):
        return cls(
            id=str(data.get('_id') or data.get('id') or ''),
            title=data.get('title') or '(Untitled)',
            slug=data.get('slug') or '',
            excerpt=data.get('excerpt') or '',
            author=Author.from_api(data.get('author')),
            category=data.get('category') or '',
            tags=unique_tags(data.get('tags')),
            status=BlogStatus.parse(data.get('status') or 'published'),
            like_count=_count(data.get('likeCount')),
            comment_count=_count(data.get('commentCount')),
            views=_count(data.get('views')),
            created_at=parse_timestamp(data.get('createdAt')),
            published_at=parse_timestamp(data.get('publishedAt')),
            cover_image=data.get('coverImage'),
            is_hidden=bool(data.get('isHidden')),
            read_time=_count(data.get('readTime')),
        )

    @property
    def effective_instant(self):
        return self.published_at or self.created_at

    def evolve(self, **changes):
        return replace(self, **changes)


@dataclass
class DashboardStats:
    total: int = 0
    published: int = 0
    pending: int = 0
    rejected: int = 0
    users: int = 0
    comments: int = 0

    @classmethod
    def from_api(cls, stats):
        stats = stats or {}
        blogs = stats.get('blogs') or {}
        return cls(
            total=_count(blogs.get('total')),
            published=_count(blogs.get('published')),
            pending=_count(blogs.get('pending')),
            rejected=_count(blogs.get('rejected')),
            users=_count((stats.get('users') or {}).get('total')),
            comments=_count((stats.get('comments') or {}).get('total')),
        )


@dataclass(frozen=True)
class User:
    id: str
    username: str
    email: str = ''
    first_name: str = ''
    last_name: str = ''
    role: str = 'user'
    avatar: Optional[str] = None

    @classmethod
    def from_api(cls, data):
        data = data or {}
        return cls(
            id=str(data.get('_id') or data.get('id') or ''),
            username=data.get('username') or '',
            email=data.get('email') or '',
            first_name=data.get('firstName') or '',
            last_name=data.get('lastName') or '',
            role=data.get('role') or 'user',
            avatar=data.get('avatar'),
        )

    @property
    def is_admin(self):
        return self.role == 'admin'

    @property
    def display_name(self):
        return f"{self.first_name} {self.last_name}".strip() or self.username
