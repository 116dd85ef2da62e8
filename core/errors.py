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

# errors.py

class VibeWriteError(Exception):
    """Base class for every error the client turns into a notification."""


class ApiError(VibeWriteError):
    """A failed API call.

    ``message`` is what the user sees: the server's own message when it sent
    one, otherwise a generic transport message.
    """

    def __init__(self, message, status=None, errors=()):
        super().__init__(message)
        self.message = message
        self.status = status
        self.errors = tuple(errors or ())

    @property
    def field_errors(self):
        return {e.get('field'): e.get('message') for e in self.errors if isinstance(e, dict)}


class ValidationError(VibeWriteError):
    """Client-side check failed; no request was issued."""

    def __init__(self, message, field=None):
        super().__init__(message)
        self.message = message
        self.field = field
