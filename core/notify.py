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

# notify.py

import logging
import time

log = logging.getLogger(__name__)

SUCCESS = 'success'
ERROR = 'error'
INFO = 'info'


class Notifier:
    """Holds the last transient message shown in the status bar."""

    def __init__(self, on_change=None):
        self.message = ''
        self.level = INFO
        self.at = 0.0
        self.history = []
        self.on_change = on_change

    def _push(self, level, message):
        self.level, self.message, self.at = level, message, time.time()
        self.history.append((level, message))
        del self.history[:-50]
        if self.on_change:
            self.on_change()

    def success(self, message):
        log.info(message)
        self._push(SUCCESS, message)

    def error(self, message):
        log.warning(message)
        self._push(ERROR, message)

    def info(self, message):
        log.debug(message)
        self._push(INFO, message)

    @property
    def style(self):
        return {SUCCESS: 'class:status-ok', ERROR: 'class:status-warn'}.get(self.level, '')
