"""
Weather alert evaluation for AgroWeather.

Two layers:

- Fixed threshold rules (heat, freeze, frost, wind, heavy rain, humidity),
  each switched on or off by the user's notification settings. Alerts that
  fire are dispatched and recorded in the alert history.
- AlertRuleEngine: a persisted, user-editable rule list evaluated against a
  reading, merged with official provider alerts, and kept as a short-lived
  set of active alerts with expiry times.

Rules are independent and can fire together. There is no deduplication:
evaluating the same reading twice records every matching alert twice.
"""

import copy
import logging
import math
import time

from notifications import VALID_SEVERITIES, get_notification_settings, save_alert_to_history
from storage import ALERT_RULES_KEY, get_store

logger = logging.getLogger(__name__)

# Thresholds (°F, mph, %)
EXTREME_HEAT_F = 95
FREEZE_F = 32
FROST_F = 40
HIGH_WIND_MPH = 30
HEAVY_RAIN_PROBABILITY = 80
HIGH_HUMIDITY_PCT = 85
HUMID_HEAT_F = 75

# Matched as case-insensitive substrings of the reading's condition text
RAIN_CONDITIONS = ('Rain', 'Heavy Rain', 'Thunderstorms')

OFFICIAL_ALERT_TTL_MS = 24 * 60 * 60 * 1000
SMART_ALERT_TTL_MS = 6 * 60 * 60 * 1000


def _round_half_up(value):
    return int(math.floor(value + 0.5))


def _fmt_pct(value):
    return int(value) if float(value).is_integer() else value


def _now_ms():
    return int(time.time() * 1000)


def _condition_matches(condition, wanted):
    text = (condition or '').lower()
    return any(w.lower() in text for w in wanted)


def _alert(alert_type, title, message, severity, city_name):
    return {
        'type': alert_type,
        'title': title,
        'message': message,
        'severity': severity,
        'city': city_name,
    }


# ---------------------------------------------------------------------------
# Fixed threshold rules
# ---------------------------------------------------------------------------

def evaluate_conditions(reading, settings, city_name):
    """
    Return the alerts *reading* triggers under *settings*.

    Args:
        reading: WeatherReading
        settings: notification settings dict (see notifications.DEFAULT_SETTINGS)
        city_name: place name used in the alert text

    Returns:
        list of alert dicts with type, title, message, severity and city
    """
    if not settings.get('enabled'):
        return []

    temp_f = reading.temperature_f
    wind = reading.wind_speed_mph
    humidity = reading.humidity
    alerts = []

    if settings.get('extreme_heat') and temp_f > EXTREME_HEAT_F:
        alerts.append(_alert(
            'Extreme Heat', '🌡️ Extreme Heat Warning',
            f"Dangerous heat at {_round_half_up(temp_f)}°F in {city_name}", 'high', city_name,
        ))

    if settings.get('freeze_warning') and temp_f < FREEZE_F:
        alerts.append(_alert(
            'Freeze Warning', '❄️ Freeze Warning',
            f"Freezing temperature at {_round_half_up(temp_f)}°F in {city_name}", 'high', city_name,
        ))

    if settings.get('frost') and FREEZE_F <= temp_f < FROST_F:
        alerts.append(_alert(
            'Frost Advisory', '🧊 Frost Advisory',
            f"Cold temperature at {_round_half_up(temp_f)}°F in {city_name}. Frost possible.",
            'medium', city_name,
        ))

    if settings.get('high_wind') and wind > HIGH_WIND_MPH:
        alerts.append(_alert(
            'High Wind Warning', '💨 High Wind Warning',
            f"Dangerous winds at {_round_half_up(wind)} mph in {city_name}", 'high', city_name,
        ))

    if (settings.get('heavy_rain')
            and reading.precipitation_probability >= HEAVY_RAIN_PROBABILITY
            and _condition_matches(reading.condition, RAIN_CONDITIONS)):
        alerts.append(_alert(
            'Heavy Rain Alert', '🌧️ Heavy Rain Alert',
            f"Heavy rain likely ({_round_half_up(reading.precipitation_probability)}% chance) "
            f"in {city_name}. Avoid low-lying areas.",
            'medium', city_name,
        ))

    if settings.get('humidity') and humidity > HIGH_HUMIDITY_PCT and temp_f > HUMID_HEAT_F:
        alerts.append(_alert(
            'High Humidity', '💧 High Humidity Alert',
            f"Very humid at {_fmt_pct(humidity)}% in {city_name}. Disease risk for crops.",
            'medium', city_name,
        ))

    return alerts


def check_and_send_alerts(reading, city_name, dispatcher, store=None):
    """
    Evaluate *reading* with the saved settings, then deliver and record each alert.

    Delivery goes first and its result is ignored, so an unavailable or
    failing channel still leaves the alert in history.

    Returns:
        list of fired alert dicts
    """
    settings = get_notification_settings(store)
    alerts = evaluate_conditions(reading, settings, city_name)

    for alert in alerts:
        try:
            delivered = dispatcher.dispatch(alert['title'], alert['message'], alert)
        except Exception:
            logger.exception("Dispatch of %s alert failed", alert['type'])
            delivered = False
        if not delivered:
            logger.debug("Alert %s for %s not delivered", alert['type'], city_name)
        save_alert_to_history(alert, store)

    if alerts:
        logger.info("%d weather alert(s) fired for %s", len(alerts), city_name)
    return alerts


# ---------------------------------------------------------------------------
# Configurable rule engine
# ---------------------------------------------------------------------------

DEFAULT_ALERT_RULES = [
    {
        'id': 'extreme-heat',
        'name': 'Extreme Heat Warning',
        'enabled': True,
        'conditions': {'temperature': {'min': 95}},
        'severity': 'high',
        'message': 'Dangerous heat conditions. Stay hydrated and avoid outdoor activities.',
        'icon': '🌡️',
    },
    {
        'id': 'freeze-warning',
        'name': 'Freeze Warning',
        'enabled': True,
        'conditions': {'temperature': {'max': 32}},
        'severity': 'high',
        'message': 'Freezing temperatures expected. Protect sensitive plants and pipes.',
        'icon': '❄️',
    },
    {
        'id': 'high-wind',
        'name': 'High Wind Warning',
        'enabled': True,
        'conditions': {'wind': {'max': 30}},
        'severity': 'high',
        'message': 'Dangerous wind conditions. Secure loose objects and use caution outdoors.',
        'icon': '💨',
    },
    {
        'id': 'heavy-rain',
        'name': 'Heavy Rain Alert',
        'enabled': True,
        'conditions': {
            'precipitation': {'probability': 80},
            'weather_conditions': list(RAIN_CONDITIONS),
        },
        'severity': 'medium',
        'message': 'Heavy rain expected. Avoid low-lying areas and drive carefully.',
        'icon': '🌧️',
    },
    {
        'id': 'frost-advisory',
        'name': 'Frost Advisory',
        'enabled': True,
        'conditions': {'temperature': {'min': 32, 'max': 40}},
        'severity': 'medium',
        'message': 'Frost conditions possible. Cover sensitive plants.',
        'icon': '🧊',
    },
    {
        'id': 'high-humidity',
        'name': 'High Humidity Alert',
        'enabled': False,
        'conditions': {'humidity': {'min': 85}, 'temperature': {'min': 75}},
        'severity': 'low',
        'message': 'Very high humidity. Increased disease risk for crops and discomfort.',
        'icon': '💧',
    },
]

_CONDITION_KEYS = ('temperature', 'wind', 'humidity', 'precipitation', 'weather_conditions')
_RULE_FIELDS = ('name', 'enabled', 'conditions', 'severity', 'message', 'icon')

_OFFICIAL_ICONS = {
    'Heat Warning': '🌡️',
    'Cold Warning': '❄️',
    'Wind Warning': '💨',
    'Rain Warning': '🌧️',
    'Snow Warning': '🌨️',
    'Thunderstorm Warning': '⛈️',
    'Fog Warning': '🌫️',
    'Ice Warning': '🧊',
    'Flood Warning': '🌊',
    'Tornado Warning': '🌪️',
    'Hurricane Warning': '🌀',
}


class AlertRuleError(ValueError):
    """Raised for a malformed alert rule."""


def map_official_severity(level):
    """Map a provider alert level (minor/moderate/major/severe) to our severity."""
    level = (level or '').lower()
    if level == 'minor':
        return 'low'
    if level in ('major', 'severe'):
        return 'high'
    return 'medium'


def get_alert_icon(alert_type):
    return _OFFICIAL_ICONS.get(alert_type, '⚠️')


def format_alert_message(template, reading, city_name):
    """Fill ``{temperature}``, ``{wind}``, ``{humidity}`` and ``{city}`` in *template*."""
    return (template
            .replace('{temperature}', f"{_round_half_up(reading.temperature_f)}°F")
            .replace('{wind}', f"{_round_half_up(reading.wind_speed_mph)} mph")
            .replace('{humidity}', f"{_fmt_pct(reading.humidity)}%")
            .replace('{city}', city_name))


def evaluate_rule(rule, reading):
    """True when *reading* satisfies every condition present on *rule*.

    Temperature and humidity bounds are inclusive. ``wind.max`` is the
    speed at or above which the rule fires.
    """
    conditions = rule.get('conditions') or {}

    temperature = conditions.get('temperature')
    if temperature:
        if temperature.get('min') is not None and reading.temperature_f < temperature['min']:
            return False
        if temperature.get('max') is not None and reading.temperature_f > temperature['max']:
            return False

    wind = conditions.get('wind')
    if wind and reading.wind_speed_mph < wind.get('max', 0):
        return False

    humidity = conditions.get('humidity')
    if humidity:
        if humidity.get('min') is not None and reading.humidity < humidity['min']:
            return False
        if humidity.get('max') is not None and reading.humidity > humidity['max']:
            return False

    precipitation = conditions.get('precipitation')
    if precipitation and reading.precipitation_probability < precipitation.get('probability', 0):
        return False

    wanted = conditions.get('weather_conditions')
    if wanted and not _condition_matches(reading.condition, wanted):
        return False

    return True


def validate_rule(rule):
    if not isinstance(rule, dict):
        raise AlertRuleError("Rule must be an object")
    if 'name' in rule and not str(rule['name']).strip():
        raise AlertRuleError("Rule name is required")
    if 'severity' in rule and rule['severity'] not in VALID_SEVERITIES:
        raise AlertRuleError(f"Invalid severity: {rule['severity']}")
    if 'enabled' in rule and not isinstance(rule['enabled'], bool):
        raise AlertRuleError("enabled must be true or false")
    if 'conditions' in rule:
        conditions = rule['conditions']
        if not isinstance(conditions, dict) or not conditions:
            raise AlertRuleError("Rule needs at least one condition")
        unknown = set(conditions) - set(_CONDITION_KEYS)
        if unknown:
            raise AlertRuleError(f"Unknown conditions: {', '.join(sorted(unknown))}")


class AlertRuleEngine:
    """Persisted alert rules plus the current set of active alerts.

    Rules live in the key-value store under ``alertRules``; active alerts
    are held in memory and replaced on every ``process_weather_data`` call.
    """

    def __init__(self, store=None):
        self._store = store
        self._active = []

    @property
    def store(self):
        return self._store if self._store is not None else get_store()

    # -- rules -------------------------------------------------------------

    def load_rules(self):
        """Return the saved rules, seeding the defaults on first use."""
        try:
            saved = self.store.get_item(ALERT_RULES_KEY)
        except Exception:
            logger.exception("Failed to load alert rules")
            return copy.deepcopy(DEFAULT_ALERT_RULES)
        if isinstance(saved, list):
            return saved
        rules = copy.deepcopy(DEFAULT_ALERT_RULES)
        self.save_rules(rules)
        return rules

    def save_rules(self, rules):
        try:
            self.store.set_item(ALERT_RULES_KEY, rules)
            return True
        except Exception:
            logger.exception("Failed to save alert rules")
            return False

    def update_rule(self, rule_id, updates):
        """Merge *updates* into one rule. Returns the rule, or None if unknown."""
        validate_rule(updates)
        rules = self.load_rules()
        for rule in rules:
            if rule.get('id') == rule_id:
                rule.update({k: v for k, v in updates.items() if k in _RULE_FIELDS})
                self.save_rules(rules)
                return rule
        return None

    def add_custom_rule(self, rule):
        """Add a user-defined rule and return it with its new ``custom-<ms>`` id."""
        validate_rule(rule)
        for required in ('name', 'conditions', 'severity', 'message'):
            if required not in rule:
                raise AlertRuleError(f"Missing rule field: {required}")
        rules = self.load_rules()
        taken = {r.get('id') for r in rules}
        stamp = _now_ms()
        while f"custom-{stamp}" in taken:
            stamp += 1
        new_rule = {
            'id': f"custom-{stamp}",
            'name': rule['name'],
            'enabled': rule.get('enabled', True),
            'conditions': rule['conditions'],
            'severity': rule['severity'],
            'message': rule['message'],
            'icon': rule.get('icon', '⚠️'),
        }
        rules.append(new_rule)
        self.save_rules(rules)
        logger.info("Added custom alert rule %s (%s)", new_rule['id'], new_rule['name'])
        return new_rule

    def remove_rule(self, rule_id):
        rules = self.load_rules()
        remaining = [r for r in rules if r.get('id') != rule_id]
        if len(remaining) == len(rules):
            return False
        self.save_rules(remaining)
        return True

    # -- evaluation --------------------------------------------------------

    def process_weather_data(self, reading, official_alerts, location_key, city_name, now=None):
        """
        Build the active alert set from provider alerts and enabled rules.

        Official alerts expire after 24 hours, rule alerts after 6. The new
        set replaces the previous active alerts.
        """
        now = _now_ms() if now is None else now
        alerts = []

        for official in official_alerts or []:
            alert_type = official.get('Type', 'Weather Alert')
            alerts.append({
                'id': f"official-{official.get('AlertID')}",
                'type': alert_type,
                'severity': map_official_severity(official.get('Level')),
                'message': (official.get('Description') or {}).get('Localized', ''),
                'icon': get_alert_icon(alert_type),
                'timestamp': now,
                'source': 'official',
                'location_key': location_key,
                'city_name': city_name,
                'expires_at': now + OFFICIAL_ALERT_TTL_MS,
            })

        for rule in self.load_rules():
            if not rule.get('enabled') or not evaluate_rule(rule, reading):
                continue
            alerts.append({
                'id': f"smart-{rule['id']}-{now}",
                'type': rule['name'],
                'severity': rule['severity'],
                'message': format_alert_message(rule['message'], reading, city_name),
                'icon': rule.get('icon', '⚠️'),
                'timestamp': now,
                'source': 'custom' if str(rule['id']).startswith('custom-') else 'smart',
                'location_key': location_key,
                'city_name': city_name,
                'expires_at': now + SMART_ALERT_TTL_MS,
            })

        self._active = alerts
        return alerts

    def get_active_alerts(self, now=None):
        now = _now_ms() if now is None else now
        return [a for a in self._active if not a.get('expires_at') or now < a['expires_at']]

    def clear_expired_alerts(self, now=None):
        """Drop expired alerts from the active set. Returns how many were dropped."""
        before = len(self._active)
        self._active = self.get_active_alerts(now)
        return before - len(self._active)
