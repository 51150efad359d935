"""
Persistent key-value storage for AgroWeather.

A small string-keyed, JSON-valued store backed by diskcache, used for the
notification settings, alert history, unread counter and widget layout.
Values are serialized as JSON so the on-disk records keep the same shape the
mobile client persisted.

Store methods raise on I/O or decode failures; the feature modules catch and
log those and fall back to their documented defaults.
"""
import json
import logging
import os

import diskcache

from config import Config

logger = logging.getLogger(__name__)

# Keys
NOTIFICATION_SETTINGS_KEY = 'notificationSettings'
ALERT_HISTORY_KEY = 'alertHistory'
UNREAD_COUNT_KEY = 'unreadAlertCount'
WIDGETS_KEY = 'weatherWidgets'
ALERT_RULES_KEY = 'alertRules'


class KeyValueStore:
    """
    JSON key-value store on top of a diskcache directory.

    Every value goes through ``json.dumps`` on write and ``json.loads`` on
    read. There is no locking across read-modify-write sequences; callers
    doing append-style updates accept last-writer-wins.
    """

    def __init__(self, directory=None):
        """
        Open (or create) the store.

        Args:
            directory: Cache directory. Defaults to ``Config.STORAGE_DIR``.
        """
        self.directory = directory or Config.STORAGE_DIR
        os.makedirs(self.directory, exist_ok=True)
        self._cache = diskcache.Cache(self.directory)

    def get_item(self, key):
        """Return the decoded value for *key*, or None if absent."""
        raw = self._cache.get(key, default=None)
        if raw is None:
            return None
        return json.loads(raw)

    def set_item(self, key, value):
        """Encode *value* as JSON and store it under *key*."""
        self._cache.set(key, json.dumps(value))

    def remove_item(self, key):
        """Delete *key*. Missing keys are ignored."""
        self._cache.delete(key)

    def keys(self):
        return list(self._cache.iterkeys())

    def clear(self):
        """Remove every key from the store."""
        self._cache.clear()

    def close(self):
        self._cache.close()


_default_store = None


def get_store():
    """Return the process-wide store, opening it on first use."""
    global _default_store
    if _default_store is None:
        _default_store = KeyValueStore()
        logger.info("Key-value store opened at %s", _default_store.directory)
    return _default_store


def set_store(store):
    """Replace the process-wide store (used by the app factory and tests)."""
    global _default_store
    _default_store = store
