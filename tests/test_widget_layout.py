"""Tests for widget_layout.py — defaults, add/remove/update, reorganize, reset."""

import pytest

from storage import WIDGETS_KEY
import widget_layout
from widget_layout import (
    WidgetLayoutError,
    add_widget,
    load_widgets,
    optimal_size,
    remove_widget,
    reorganize_widgets,
    reset_widgets,
    update_widget,
)


class TestLoadWidgets:
    def test_defaults_created_and_saved(self, store):
        widgets = load_widgets(store)
        assert [w['id'] for w in widgets] == ['current-1', 'wind-1', 'humidity-1', 'forecast-1']
        assert store.get_item(WIDGETS_KEY) == widgets

    def test_saved_layout_returned(self, store):
        store.set_item(WIDGETS_KEY, [])
        assert load_widgets(store) == []

    def test_store_failure_gives_defaults(self, broken_store):
        assert len(load_widgets(broken_store)) == 4


class TestAddWidget:
    def test_add_positions_at_end(self, store):
        widget = add_widget('pressure', store)
        assert widget['type'] == 'pressure'
        assert widget['title'] == 'Atmospheric Pressure'
        assert widget['size'] == 'small'
        assert widget['position'] == {'x': 0, 'y': 800}
        assert widget['theme'] == 'auto'
        assert widget['id'].startswith('pressure-')
        assert load_widgets(store)[-1]['id'] == widget['id']

    @pytest.mark.parametrize("widget_type,size", [
        ('forecast', 'large'),
        ('hourly', 'medium'),
        ('aqi', 'medium'),
        ('uv', 'small'),
        ('alerts', 'small'),
    ])
    def test_optimal_size(self, widget_type, size):
        assert optimal_size(widget_type) == size

    def test_unknown_type(self, store):
        with pytest.raises(WidgetLayoutError):
            add_widget('radar', store)

    def test_single_instance(self, store):
        with pytest.raises(WidgetLayoutError, match="already exists"):
            add_widget('current', store)

    def test_alerts_single_instance(self, store):
        add_widget('alerts', store)
        with pytest.raises(WidgetLayoutError):
            add_widget('alerts', store)

    def test_multi_instance_allowed(self, store):
        add_widget('wind', store)
        assert sum(1 for w in load_widgets(store) if w['type'] == 'wind') == 2

    def test_limit(self, store):
        for _ in range(8):
            add_widget('uv', store)
        assert len(load_widgets(store)) == 12
        with pytest.raises(WidgetLayoutError, match="Maximum"):
            add_widget('uv', store)

    def test_error_is_value_error(self):
        assert issubclass(WidgetLayoutError, ValueError)


class TestEditWidgets:
    def test_remove(self, store):
        assert remove_widget('wind-1', store) is True
        assert 'wind-1' not in [w['id'] for w in load_widgets(store)]

    def test_remove_missing(self, store):
        assert remove_widget('nope', store) is False

    def test_update_size_and_theme(self, store):
        widget = update_widget('wind-1', {'size': 'large', 'theme': 'dark'}, store)
        assert widget['size'] == 'large'
        assert widget['theme'] == 'dark'
        saved = next(w for w in load_widgets(store) if w['id'] == 'wind-1')
        assert saved['size'] == 'large'

    def test_update_ignores_identity_fields(self, store):
        widget = update_widget('wind-1', {'id': 'hacked', 'type': 'uv'}, store)
        assert widget['id'] == 'wind-1'
        assert widget['type'] == 'wind'

    def test_update_invalid_size(self, store):
        with pytest.raises(WidgetLayoutError):
            update_widget('wind-1', {'size': 'huge'}, store)

    def test_update_invalid_position(self, store):
        with pytest.raises(WidgetLayoutError):
            update_widget('wind-1', {'position': {'x': 0}}, store)

    def test_update_missing(self, store):
        assert update_widget('nope', {'theme': 'light'}, store) is None


class TestReorganizeAndReset:
    def test_reorganize_by_priority(self, store):
        store.set_item(WIDGETS_KEY, [
            widget_layout._widget('h', 'hourly', 'Hourly', 'medium', 0),
            widget_layout._widget('w', 'wind', 'Wind', 'small', 0),
            widget_layout._widget('c', 'current', 'Current', 'large', 0),
            widget_layout._widget('a', 'alerts', 'Alerts', 'small', 0),
        ])
        widgets = reorganize_widgets(store)
        assert [w['type'] for w in widgets] == ['current', 'alerts', 'wind', 'hourly']
        assert [w['position']['y'] for w in widgets] == [0, 200, 400, 600]
        assert load_widgets(store) == widgets

    def test_reset(self, store):
        add_widget('uv', store)
        widgets = reset_widgets(store)
        assert len(widgets) == 4
        assert load_widgets(store) == widgets
