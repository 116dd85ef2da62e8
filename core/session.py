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

# session.py
#
# The signed-in user and bearer token. One AuthSession is created when the
# app starts and handed to everything that needs to know who is logged in.

import asyncio
import json
import logging
import os

from core.errors import ApiError, ValidationError
from core.models import User
from core.validation import validate_registration

log = logging.getLogger(__name__)


class AuthSession:
    def __init__(self, api, token_path, notify=None):
        self.api = api
        self.token_path = token_path
        self.notify = notify
        self.token = None
        self.user = None

    @property
    def is_authenticated(self):
        return bool(self.token and self.user)

    @property
    def is_admin(self):
        return self.is_authenticated and self.user.is_admin

    def _read_token(self):
        try:
            with open(self.token_path, 'r', encoding='utf-8') as f:
                return (json.load(f) or {}).get('token')
        except FileNotFoundError:
            return None
        except (OSError, json.JSONDecodeError, AttributeError) as e:
            log.warning("Unreadable token file %s: %s", self.token_path, e)
            return None

    def _write_token(self, token):
        with open(self.token_path, 'w', encoding='utf-8') as f:
            json.dump({'token': token}, f)

    def _adopt(self, token, user=None):
        self.token = token
        self.user = user
        self.api.set_token(token)

    def _start(self, data):
        token = data.get('token')
        if not token:
            raise ApiError("Login response did not include a token")
        self._adopt(token, User.from_api(data.get('user')))
        try:
            self._write_token(token)
        except OSError as e:
            log.warning("Could not persist session token: %s", e)

    def _forget(self):
        self._adopt(None)
        try:
            os.remove(self.token_path)
        except FileNotFoundError:
            pass

    def _fail(self, message):
        if self.notify:
            self.notify.error(message)
        return False

    async def restore(self):
        token = self._read_token()
        if not token:
            return False
        self._adopt(token)
        try:
            data = await asyncio.to_thread(self.api.get_profile)
        except ApiError as e:
            if e.status is None:
                # server unreachable: keep the token for the next start
                log.warning("Could not verify stored session: %s", e.message)
                return False
            log.info("Stored token rejected, clearing it: %s", e.message)
            self._forget()
            return False
        self.user = User.from_api(data.get('user'))
        return True

    async def login(self, email, password):
        if not (email or '').strip() or not password:
            return self._fail("Please enter your email and password")
        try:
            data = await asyncio.to_thread(self.api.login, email.strip(), password)
            self._start(data)
        except ApiError as e:
            return self._fail(e.message)
        if self.notify:
            self.notify.success("Login successful!")
        return True

    async def register(self, data, confirm_password):
        try:
            validate_registration(data, confirm_password)
        except ValidationError as e:
            return self._fail(e.message)
        try:
            resp = await asyncio.to_thread(self.api.register, data)
            self._start(resp)
        except ApiError as e:
            return self._fail(e.message)
        if self.notify:
            self.notify.success("Registration successful!")
        return True

    async def logout(self):
        try:
            await asyncio.to_thread(self.api.logout)
        except ApiError as e:
            log.info("Logout request failed, clearing local session anyway: %s", e.message)
        finally:
            self._forget()
        if self.notify:
            self.notify.success("Logged out successfully")
