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

# drafts.py
#
# Local copy of the document being written. Written on every save and by the
# periodic recovery tick, removed once the post is submitted.

import json
import logging
import os
from datetime import datetime, timezone

from core.models import ContentDocument

log = logging.getLogger(__name__)


class DraftCache:
    def __init__(self, path):
        self.path = path

    def exists(self):
        return os.path.exists(self.path)

    def save(self, doc):
        data = doc.to_cache()
        data['updatedAt'] = datetime.now(timezone.utc).isoformat()
        try:
            with open(self.path, 'w', encoding='utf-8') as f:
                json.dump(data, f)
        except OSError as e:
            log.warning("Could not write draft cache %s: %s", self.path, e)
            return False
        return True

    def load(self):
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except FileNotFoundError:
            return None
        except (OSError, json.JSONDecodeError) as e:
            log.warning("Error loading draft cache %s: %s", self.path, e)
            return None
        if not isinstance(data, dict):
            return None
        return ContentDocument.from_cache(data)

    def clear(self):
        try:
            os.remove(self.path)
        except FileNotFoundError:
            pass
