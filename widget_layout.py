"""
Dashboard widget layout for AgroWeather.

The weather dashboard is an ordered list of widgets persisted under one key.
Positions are a simple vertical stack (x=0, y=index*200) that the client
lays out with flexbox.

Invalid requests raise WidgetLayoutError; store failures on load are logged
and fall back to the default layout.
"""

import logging
import time

from config import Config
from storage import WIDGETS_KEY, get_store

logger = logging.getLogger(__name__)

VALID_WIDGET_TYPES = (
    'current', 'forecast', 'hourly', 'alerts', 'aqi',
    'wind', 'humidity', 'pressure', 'uv', 'visibility',
)
VALID_SIZES = ('small', 'medium', 'large', 'xlarge')
VALID_THEMES = ('auto', 'light', 'dark', 'colorful')

# Only one of each of these may exist at a time
SINGLE_INSTANCE_TYPES = ('current', 'alerts')

ROW_HEIGHT = 200

WIDGET_TITLES = {
    'current': 'Current Weather',
    'forecast': '5-Day Forecast',
    'hourly': 'Hourly Forecast',
    'alerts': 'Weather Alerts',
    'aqi': 'Air Quality',
    'wind': 'Wind Conditions',
    'humidity': 'Humidity',
    'pressure': 'Atmospheric Pressure',
    'uv': 'UV Index',
    'visibility': 'Visibility',
}

_OPTIMAL_SIZE = {
    'current': 'large',
    'forecast': 'large',
    'wind': 'small',
    'humidity': 'small',
    'pressure': 'small',
    'uv': 'small',
    'visibility': 'small',
    'alerts': 'small',
    'hourly': 'medium',
    'aqi': 'medium',
}

TYPE_PRIORITY = {
    'current': 1,
    'forecast': 2,
    'alerts': 3,
    'aqi': 4,
    'wind': 5,
    'humidity': 6,
    'pressure': 7,
    'uv': 8,
    'visibility': 9,
    'hourly': 10,
}

# Fields a client may change through update_widget
_EDITABLE_FIELDS = ('title', 'size', 'theme', 'position', 'data')


class WidgetLayoutError(ValueError):
    """Raised for an invalid widget request (unknown type, limit reached, ...)."""


def _widget(widget_id, widget_type, title, size, y):
    return {
        'id': widget_id,
        'type': widget_type,
        'title': title,
        'data': {},
        'size': size,
        'position': {'x': 0, 'y': y},
        'theme': 'auto',
    }


def default_widgets():
    return [
        _widget('current-1', 'current', 'Current Weather', 'large', 0),
        _widget('wind-1', 'wind', 'Wind', 'small', 200),
        _widget('humidity-1', 'humidity', 'Humidity', 'small', 200),
        _widget('forecast-1', 'forecast', '5-Day Forecast', 'large', 400),
    ]


def optimal_size(widget_type):
    return _OPTIMAL_SIZE.get(widget_type, 'medium')


def _store(store):
    return store if store is not None else get_store()


def save_widgets(widgets, store=None):
    """Persist the full widget list. Raises if the store write fails."""
    _store(store).set_item(WIDGETS_KEY, widgets)


def load_widgets(store=None):
    """Return the saved layout, creating and saving the defaults on first use."""
    kv = _store(store)
    try:
        saved = kv.get_item(WIDGETS_KEY)
    except Exception:
        logger.exception("Failed to load widgets")
        return default_widgets()

    if isinstance(saved, list):
        return saved

    widgets = default_widgets()
    try:
        save_widgets(widgets, kv)
    except Exception:
        logger.exception("Failed to save default widgets")
    return widgets


def add_widget(widget_type, store=None):
    """Append a new widget of *widget_type* and return it.

    Raises:
        WidgetLayoutError: unknown type, layout full, or a second instance
            of a single-instance type.
    """
    if widget_type not in VALID_WIDGET_TYPES:
        raise WidgetLayoutError(f"Unknown widget type: {widget_type}")

    kv = _store(store)
    widgets = load_widgets(kv)

    if len(widgets) >= Config.MAX_WIDGETS:
        raise WidgetLayoutError(f"Maximum of {Config.MAX_WIDGETS} widgets allowed")
    if widget_type in SINGLE_INSTANCE_TYPES and any(w.get('type') == widget_type for w in widgets):
        raise WidgetLayoutError(f"{WIDGET_TITLES[widget_type]} widget already exists")

    # Millisecond ids; bump on collision when adds land in the same tick
    taken = {w.get('id') for w in widgets}
    stamp = int(time.time() * 1000)
    while f"{widget_type}-{stamp}" in taken:
        stamp += 1

    widget = _widget(
        f"{widget_type}-{stamp}",
        widget_type,
        WIDGET_TITLES[widget_type],
        optimal_size(widget_type),
        len(widgets) * ROW_HEIGHT,
    )
    widgets.append(widget)
    save_widgets(widgets, kv)
    logger.info("Added %s widget %s", widget_type, widget['id'])
    return widget


def remove_widget(widget_id, store=None):
    """Remove *widget_id*. Returns ``True`` if something was removed."""
    kv = _store(store)
    widgets = load_widgets(kv)
    remaining = [w for w in widgets if w.get('id') != widget_id]
    if len(remaining) == len(widgets):
        return False
    save_widgets(remaining, kv)
    return True


def update_widget(widget_id, changes, store=None):
    """Apply *changes* to one widget and return the updated widget.

    Only title, size, theme, position and data may change; anything else in
    *changes* is ignored. Returns ``None`` when *widget_id* does not exist.
    """
    if 'size' in changes and changes['size'] not in VALID_SIZES:
        raise WidgetLayoutError(f"Invalid widget size: {changes['size']}")
    if 'theme' in changes and changes['theme'] not in VALID_THEMES:
        raise WidgetLayoutError(f"Invalid widget theme: {changes['theme']}")
    if 'position' in changes:
        position = changes['position']
        if not isinstance(position, dict) or not {'x', 'y'} <= set(position):
            raise WidgetLayoutError("Position must have x and y")

    kv = _store(store)
    widgets = load_widgets(kv)
    for widget in widgets:
        if widget.get('id') == widget_id:
            widget.update({k: v for k, v in changes.items() if k in _EDITABLE_FIELDS})
            save_widgets(widgets, kv)
            return widget
    return None


def reorganize_widgets(store=None):
    """Sort by type priority (unknown types last) and restack positions."""
    kv = _store(store)
    widgets = sorted(load_widgets(kv), key=lambda w: TYPE_PRIORITY.get(w.get('type'), 99))
    for index, widget in enumerate(widgets):
        widget['position'] = {'x': 0, 'y': index * ROW_HEIGHT}
    save_widgets(widgets, kv)
    return widgets


def reset_widgets(store=None):
    widgets = default_widgets()
    save_widgets(widgets, _store(store))
    logger.info("Widget layout reset to defaults")
    return widgets
