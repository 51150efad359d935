"""
Notification system for AgroWeather.

Provides the alert notification lifecycle: per-user alert preferences, a
capped newest-first alert history with read tracking and an unread counter,
and the dispatch channels that deliver an alert to the outside world.

Everything persists through the shared key-value store (storage.get_store).
Store failures never propagate: they are logged and resolved to the
documented default (default settings, empty history, zero count).
"""

import logging
import time
import uuid

import requests

from config import Config
from storage import (
    ALERT_HISTORY_KEY,
    NOTIFICATION_SETTINGS_KEY,
    UNREAD_COUNT_KEY,
    get_store,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

VALID_SEVERITIES = ('high', 'medium', 'low')

DEFAULT_SETTINGS = {
    'enabled': True,
    'extreme_heat': True,
    'freeze_warning': True,
    'high_wind': True,
    'heavy_rain': True,
    'frost': True,
    'humidity': False,
}


def _store(store):
    return store if store is not None else get_store()


def _now_ms():
    return int(time.time() * 1000)


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------

class NotificationSettingsError(ValueError):
    """Raised when a settings update carries a non-boolean value."""


def validate_notification_settings(settings):
    """Check that every known key in *settings* holds a real boolean.

    JSON strings like ``"false"`` are rejected rather than coerced, since
    ``bool("false")`` is True. Unknown keys are ignored here and dropped on save.
    """
    if not isinstance(settings, dict):
        raise NotificationSettingsError("Settings must be an object")
    bad = sorted(k for k, v in settings.items() if k in DEFAULT_SETTINGS and not isinstance(v, bool))
    if bad:
        raise NotificationSettingsError(f"Settings must be true or false: {', '.join(bad)}")


def get_notification_settings(store=None):
    """Return the saved alert settings merged over the defaults.

    A missing record yields the defaults; a partial record (saved by an
    older client) is completed from them. Stored values that are not
    booleans are ignored in favour of the default.
    """
    try:
        saved = _store(store).get_item(NOTIFICATION_SETTINGS_KEY)
    except Exception:
        logger.exception("Failed to load notification settings")
        return dict(DEFAULT_SETTINGS)

    settings = dict(DEFAULT_SETTINGS)
    if isinstance(saved, dict):
        settings.update({k: v for k, v in saved.items() if k in DEFAULT_SETTINGS and isinstance(v, bool)})
    return settings


def save_notification_settings(settings, store=None):
    """Persist *settings*. Unknown keys are dropped. Returns ``True`` on success.

    Raises:
        NotificationSettingsError: a known key holds a non-boolean value.
    """
    validate_notification_settings(settings)
    cleaned = dict(DEFAULT_SETTINGS)
    cleaned.update({k: v for k, v in settings.items() if k in DEFAULT_SETTINGS})
    try:
        _store(store).set_item(NOTIFICATION_SETTINGS_KEY, cleaned)
        logger.info("Saved notification settings (enabled=%s)", cleaned['enabled'])
        return True
    except Exception:
        logger.exception("Failed to save notification settings")
        return False


# ---------------------------------------------------------------------------
# Alert history
# ---------------------------------------------------------------------------

def get_alert_history(store=None):
    """Return the alert history, newest first. Empty list when nothing is stored."""
    try:
        history = _store(store).get_item(ALERT_HISTORY_KEY)
    except Exception:
        logger.exception("Failed to load alert history")
        return []
    return history if isinstance(history, list) else []


def save_alert_to_history(alert, store=None):
    """Prepend *alert* to the history and bump the unread counter.

    The record gets a fresh id, an epoch-millisecond timestamp and
    ``read=False``. The list is trimmed to ``Config.ALERT_HISTORY_LIMIT``,
    oldest entries dropped. This is a plain read-modify-write; two
    concurrent callers can lose one of the records.

    Returns the stored record, or ``None`` if the write failed.
    """
    record = {
        'id': uuid.uuid4().hex,
        'type': alert.get('type'),
        'message': alert.get('message'),
        'severity': alert.get('severity') if alert.get('severity') in VALID_SEVERITIES else 'medium',
        'city': alert.get('city', ''),
        'timestamp': _now_ms(),
        'read': False,
    }
    kv = _store(store)
    try:
        history = get_alert_history(kv)
        history = [record] + history
        kv.set_item(ALERT_HISTORY_KEY, history[:Config.ALERT_HISTORY_LIMIT])
    except Exception:
        logger.exception("Failed to save alert to history")
        return None
    logger.debug("Recorded alert %s (%s) for %s", record['id'], record['type'], record['city'])

    # Counter is best-effort; the record is already stored
    increment_unread_count(kv)
    return record


def mark_alert_as_read(alert_id, store=None):
    """Set ``read`` on the record with *alert_id*. Returns ``True`` if it was found."""
    kv = _store(store)
    try:
        history = get_alert_history(kv)
        found = False
        for record in history:
            if record.get('id') == alert_id:
                if not record.get('read'):
                    record['read'] = True
                    kv.set_item(UNREAD_COUNT_KEY, max(get_unread_count(kv) - 1, 0))
                found = True
        if found:
            kv.set_item(ALERT_HISTORY_KEY, history)
        return found
    except Exception:
        logger.exception("Failed to mark alert %s read", alert_id)
        return False


def mark_all_alerts_read(store=None):
    """Mark every record read and zero the unread counter.

    Returns the number of records that changed.
    """
    kv = _store(store)
    try:
        history = get_alert_history(kv)
        count = 0
        for record in history:
            if not record.get('read'):
                record['read'] = True
                count += 1
        kv.set_item(ALERT_HISTORY_KEY, history)
        kv.set_item(UNREAD_COUNT_KEY, 0)
        logger.info("Marked %d alerts read", count)
        return count
    except Exception:
        logger.exception("Failed to mark all alerts read")
        return 0


def clear_alert_history(store=None):
    """Delete the whole history and the unread counter."""
    kv = _store(store)
    try:
        kv.remove_item(ALERT_HISTORY_KEY)
        kv.remove_item(UNREAD_COUNT_KEY)
        logger.info("Alert history cleared")
        return True
    except Exception:
        logger.exception("Failed to clear alert history")
        return False


def get_unread_count(store=None):
    try:
        count = _store(store).get_item(UNREAD_COUNT_KEY)
    except Exception:
        logger.exception("Failed to load unread alert count")
        return 0
    return count if isinstance(count, int) else 0


def increment_unread_count(store=None):
    """Add one to the unread counter. Returns ``True`` on success."""
    kv = _store(store)
    try:
        kv.set_item(UNREAD_COUNT_KEY, get_unread_count(kv) + 1)
        return True
    except Exception:
        logger.exception("Failed to increment unread alert count")
        return False


def reset_unread_count(store=None):
    try:
        _store(store).set_item(UNREAD_COUNT_KEY, 0)
        return True
    except Exception:
        logger.exception("Failed to reset unread alert count")
        return False


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------

class NotificationDispatcher:
    """Delivers one notification. Subclasses return ``True`` when delivered.

    ``dispatch`` must never raise: delivery is fire-and-forget and a failure
    here cannot stop the alert from being recorded.
    """

    name = 'base'
    available = True

    def dispatch(self, title, body, data=None):
        raise NotImplementedError


class NullDispatcher(NotificationDispatcher):
    """Used when no delivery channel is configured."""

    name = 'null'
    available = False

    def dispatch(self, title, body, data=None):
        logger.warning("Notifications unavailable, skipping: %s", title)
        return False


class PushDispatcher(NotificationDispatcher):
    """Send to a device through the Expo push gateway."""

    name = 'push'

    def __init__(self, token, gateway_url, timeout=10):
        self.token = token
        self.gateway_url = gateway_url
        self.timeout = timeout

    def dispatch(self, title, body, data=None):
        payload = {
            'to': self.token,
            'title': title,
            'body': body,
            'data': data or {},
            'sound': 'default',
            'priority': 'high',
        }
        try:
            response = requests.post(self.gateway_url, json=payload, timeout=self.timeout)
            response.raise_for_status()
            return True
        except requests.RequestException as e:
            logger.error(f"Push send error: {e}")
            return False


class WebhookDispatcher(NotificationDispatcher):
    """Post alerts to a chat webhook (Slack/Teams/Discord)."""

    name = 'webhook'

    def __init__(self, url, timeout=10):
        self.url = url
        self.timeout = timeout

    def dispatch(self, title, body, data=None):
        try:
            response = requests.post(
                self.url, json={'text': f"{title}\n{body}"}, timeout=self.timeout
            )
            response.raise_for_status()
            return True
        except requests.RequestException as e:
            logger.error(f"Webhook send error: {e}")
            return False


def resolve_dispatcher(config=Config):
    """Pick the delivery channel once at startup.

    A push token wins over a webhook; with neither configured the
    ``NullDispatcher`` is returned and alerts are only recorded.
    """
    if getattr(config, 'PUSH_TOKEN', None):
        dispatcher = PushDispatcher(config.PUSH_TOKEN, config.PUSH_GATEWAY_URL, config.DISPATCH_TIMEOUT)
    elif getattr(config, 'ALERT_WEBHOOK_URL', None):
        dispatcher = WebhookDispatcher(config.ALERT_WEBHOOK_URL, config.DISPATCH_TIMEOUT)
    else:
        dispatcher = NullDispatcher()
    logger.info("Alert dispatch channel: %s", dispatcher.name)
    return dispatcher
