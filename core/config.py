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

# config.py

import json
import logging
import os

log = logging.getLogger(__name__)

BASE_PATH = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

DEFAULTS = {
    "api_base_url": "http://localhost:5000/api",
    "language": "en",
    "word_goal": 500,
    "page_size": 12,
    "search_debounce_ms": 500,
    "reading_speed": 225,
}

CONFIG_FILE = 'config.json'
TOKEN_FILE = 'token.json'
DRAFT_FILE = '.vibewrite_draft.json'
DICTIONARY_FILE = 'custom_dictionary.txt'
LOG_FILE = 'vibewrite.log'


def resolve_config_dir(config_dir=None):
    if config_dir:
        return str(config_dir)
    return os.environ.get('VIBEWRITE_HOME') or os.path.join(BASE_PATH, 'config')


def config_paths(config_dir):
    return {
        'config': os.path.join(config_dir, CONFIG_FILE),
        'token': os.path.join(config_dir, TOKEN_FILE),
        'draft': os.path.join(config_dir, DRAFT_FILE),
        'dictionary': os.path.join(config_dir, DICTIONARY_FILE),
        'log': os.path.join(config_dir, LOG_FILE),
    }


def load_config(config_dir):
    os.makedirs(config_dir, exist_ok=True)
    path = os.path.join(config_dir, CONFIG_FILE)
    if not os.path.exists(path):
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(DEFAULTS, f, indent=2)

    with open(path, 'r', encoding='utf-8') as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError:
            log.warning("Ignoring malformed %s, using defaults", path)
            data = {}

    config = {**DEFAULTS, **(data if isinstance(data, dict) else {})}
    config['api_base_url'] = str(config['api_base_url']).strip()
    for key in ('word_goal', 'page_size', 'search_debounce_ms', 'reading_speed'):
        try:
            config[key] = max(1, int(config[key]))
        except (TypeError, ValueError):
            config[key] = DEFAULTS[key]
    return config


def configure_logging(config_dir, level=logging.INFO):
    """Send logs to a file; the terminal belongs to the full-screen UI."""
    root = logging.getLogger()
    path = os.path.join(config_dir, LOG_FILE)
    if any(getattr(h, 'baseFilename', None) == os.path.abspath(path) for h in root.handlers):
        return
    handler = logging.FileHandler(path, encoding='utf-8')
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    root.addHandler(handler)
    root.setLevel(level)
