"""
AgroWeather API Blueprint.

Routes for the elevation crop advisor, the climate planting scheduler, alert
settings and history, alert checks and rules, and the dashboard widget layout.
"""

from datetime import datetime
import logging

from flask import Blueprint, current_app, jsonify, request

import elevation_crops
import planting_schedule
from alert_service import AlertRuleEngine, AlertRuleError, check_and_send_alerts
from notifications import (
    NotificationSettingsError,
    NullDispatcher,
    clear_alert_history,
    get_alert_history,
    get_notification_settings,
    get_unread_count,
    mark_alert_as_read,
    mark_all_alerts_read,
    save_notification_settings,
)
from weather_service import WeatherReading, get_current_reading
import widget_layout
from widget_layout import WidgetLayoutError

logger = logging.getLogger(__name__)

advisor_bp = Blueprint('advisor_bp', __name__)


# ====================================================================
# Helpers
# ====================================================================

def _float_arg(name, default=None):
    """Read a float query parameter. Raises ValueError when missing or malformed."""
    raw = request.args.get(name)
    if raw is None or raw == '':
        if default is not None:
            return default
        raise ValueError(f"Missing required parameter: {name}")
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"Invalid number for {name}: {raw!r}")


def _int_arg(name, default):
    raw = request.args.get(name)
    if raw is None or raw == '':
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"Invalid integer for {name}: {raw!r}")


def _unknown_zone(zone):
    return jsonify({'error': f"Unknown climate zone: {zone}",
                    'valid_zones': list(planting_schedule.VALID_ZONES)}), 404


def _dispatcher():
    return current_app.extensions.get('alert_dispatcher') or NullDispatcher()


def _engine():
    engine = current_app.extensions.get('alert_engine')
    if engine is None:
        engine = current_app.extensions['alert_engine'] = AlertRuleEngine()
    return engine


# ====================================================================
# Elevation API
# ====================================================================

@advisor_bp.route('/api/elevation/zones', methods=['GET'])
def elevation_zones():
    return jsonify([z.to_dict(include_crops=False) for z in elevation_crops.get_zones()])


@advisor_bp.route('/api/elevation/crops', methods=['GET'])
def elevation_crops_for():
    try:
        elevation = _float_arg('elevation')
    except ValueError as e:
        return jsonify({'error': str(e)}), 400
    result = elevation_crops.get_crop_recommendations(elevation)
    return jsonify({
        'elevation': elevation,
        'zone': result['zone'].to_dict(include_crops=False),
        'recommendations': [c.to_dict() for c in result['recommendations']],
    })


@advisor_bp.route('/api/elevation/top-crops', methods=['GET'])
def elevation_top_crops():
    try:
        elevation = _float_arg('elevation')
        count = _int_arg('count', 3)
    except ValueError as e:
        return jsonify({'error': str(e)}), 400
    crops = elevation_crops.get_top_crops(elevation, count)
    return jsonify({
        'elevation': elevation,
        'zone': elevation_crops.get_elevation_zone_name(elevation),
        'crops': [c.to_dict() for c in crops],
    })


@advisor_bp.route('/api/elevation/category', methods=['GET'])
def elevation_crops_by_category():
    category = request.args.get('category', '').strip().lower()
    try:
        elevation = _float_arg('elevation')
        if category not in elevation_crops.VALID_CATEGORIES:
            raise ValueError(f"Invalid category: {category!r}")
    except ValueError as e:
        return jsonify({'error': str(e)}), 400
    crops = elevation_crops.get_crops_by_category(elevation, category)
    return jsonify({'category': category, 'crops': [c.to_dict() for c in crops]})


@advisor_bp.route('/api/elevation/suitable', methods=['GET'])
def elevation_crop_suitable():
    crop = request.args.get('crop', '').strip()
    try:
        elevation = _float_arg('elevation')
        if not crop:
            raise ValueError("Missing required parameter: crop")
    except ValueError as e:
        return jsonify({'error': str(e)}), 400
    return jsonify({
        'crop': crop,
        'elevation': elevation,
        'suitable': elevation_crops.is_crop_suitable(crop, elevation),
        'zone': elevation_crops.get_elevation_zone_name(elevation),
    })


# ====================================================================
# Climate / planting API
# ====================================================================

@advisor_bp.route('/api/climate/zone', methods=['GET'])
def climate_zone():
    try:
        avg_temp = _float_arg('avg_temp')
    except ValueError as e:
        return jsonify({'error': str(e)}), 400
    key = planting_schedule.get_climate_zone(avg_temp)
    return jsonify({'zone': key, **planting_schedule.CLIMATE_ZONES[key]})


@advisor_bp.route('/api/planting/calendar/<zone>', methods=['GET'])
def planting_calendar(zone):
    if zone not in planting_schedule.CLIMATE_ZONES:
        return _unknown_zone(zone)
    return jsonify({
        'zone': zone,
        'calendar': planting_schedule.generate_monthly_calendar(zone),
    })


@advisor_bp.route('/api/planting/recommendations', methods=['GET'])
def planting_recommendations():
    zone = request.args.get('zone', '')
    month = (request.args.get('month') or datetime.now().strftime('%B')).strip().capitalize()
    if month not in planting_schedule.MONTHS:
        return jsonify({'error': f"Unknown month: {request.args.get('month')!r}"}), 400
    if zone not in planting_schedule.CLIMATE_ZONES:
        return _unknown_zone(zone)
    result = planting_schedule.get_current_planting_recommendations(month, zone)
    return jsonify({'month': month, 'zone': zone, **result})


@advisor_bp.route('/api/planting/schedule/<crop>/<zone>', methods=['GET'])
def planting_schedule_for(crop, zone):
    if zone not in planting_schedule.CLIMATE_ZONES:
        return _unknown_zone(zone)
    schedule = planting_schedule.get_schedule(crop, zone)
    if schedule is None:
        return jsonify({'error': f"No schedule for {crop} in {zone} zone"}), 404
    return jsonify(schedule.to_dict())


# ====================================================================
# Notification settings API
# ====================================================================

@advisor_bp.route('/api/notifications/settings', methods=['GET'])
def notification_settings():
    return jsonify(get_notification_settings())


@advisor_bp.route('/api/notifications/settings', methods=['PUT'])
def update_notification_settings():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({'error': 'Request body must be a JSON object'}), 400
    merged = get_notification_settings()
    merged.update(data)
    try:
        saved = save_notification_settings(merged)
    except NotificationSettingsError as e:
        return jsonify({'error': str(e)}), 400
    if not saved:
        return jsonify({'error': 'Failed to save settings'}), 500
    return jsonify(get_notification_settings())


# ====================================================================
# Alert history API
# ====================================================================

@advisor_bp.route('/api/alerts/history', methods=['GET'])
def alert_history():
    return jsonify(get_alert_history())


@advisor_bp.route('/api/alerts/history', methods=['DELETE'])
def delete_alert_history():
    return jsonify({'success': clear_alert_history()})


@advisor_bp.route('/api/alerts/history/<alert_id>/read', methods=['POST'])
def mark_history_alert_read(alert_id):
    if not mark_alert_as_read(alert_id):
        return jsonify({'error': 'Alert not found'}), 404
    return jsonify({'success': True})


@advisor_bp.route('/api/alerts/history/read-all', methods=['POST'])
def mark_history_all_read():
    return jsonify({'marked': mark_all_alerts_read()})


@advisor_bp.route('/api/alerts/unread-count', methods=['GET'])
def alert_unread_count():
    return jsonify({'count': get_unread_count()})


@advisor_bp.route('/api/alerts/check', methods=['POST'])
def check_alerts():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({'error': 'Request body must be a JSON object'}), 400
    reading = WeatherReading.from_dict(data)
    city = reading.city or 'your area'
    alerts = check_and_send_alerts(reading, city, _dispatcher())
    return jsonify({'alerts': alerts, 'count': len(alerts)})


# ====================================================================
# Alert rules API
# ====================================================================

@advisor_bp.route('/api/alerts/rules', methods=['GET'])
def list_alert_rules():
    return jsonify(_engine().load_rules())


@advisor_bp.route('/api/alerts/rules', methods=['POST'])
def create_alert_rule():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({'error': 'Request body must be a JSON object'}), 400
    try:
        return jsonify(_engine().add_custom_rule(data)), 201
    except AlertRuleError as e:
        return jsonify({'error': str(e)}), 400


@advisor_bp.route('/api/alerts/rules/<rule_id>', methods=['PATCH'])
def patch_alert_rule(rule_id):
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({'error': 'Request body must be a JSON object'}), 400
    try:
        rule = _engine().update_rule(rule_id, data)
    except AlertRuleError as e:
        return jsonify({'error': str(e)}), 400
    if rule is None:
        return jsonify({'error': 'Rule not found'}), 404
    return jsonify(rule)


@advisor_bp.route('/api/alerts/rules/<rule_id>', methods=['DELETE'])
def delete_alert_rule(rule_id):
    if not _engine().remove_rule(rule_id):
        return jsonify({'error': 'Rule not found'}), 404
    return jsonify({'success': True})


@advisor_bp.route('/api/alerts/process', methods=['POST'])
def process_alerts():
    """Evaluate a reading against the rule list plus any official alerts."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict) or not isinstance(data.get('reading'), dict):
        return jsonify({'error': 'Body must be an object with a "reading" object'}), 400
    official = data.get('official_alerts') or []
    if not isinstance(official, list):
        return jsonify({'error': 'official_alerts must be a list'}), 400
    reading = WeatherReading.from_dict(data['reading'])
    alerts = _engine().process_weather_data(
        reading, official, data.get('location_key', ''), reading.city or 'your area'
    )
    return jsonify({'alerts': alerts, 'count': len(alerts)})


@advisor_bp.route('/api/alerts/active', methods=['GET'])
def active_alerts():
    engine = _engine()
    engine.clear_expired_alerts()
    return jsonify(engine.get_active_alerts())


@advisor_bp.route('/api/weather/current', methods=['GET'])
def current_weather():
    """Fetch live conditions; with ``check=true`` also run the alert check."""
    city = request.args.get('city')
    try:
        lat = _float_arg('lat') if 'lat' in request.args else None
        lon = _float_arg('lon') if 'lon' in request.args else None
    except ValueError as e:
        return jsonify({'error': str(e)}), 400
    if (lat is None or lon is None) and not city:
        return jsonify({'error': 'Provide lat and lon, or city'}), 400

    reading = get_current_reading(lat=lat, lon=lon, city=city, state=request.args.get('state'))
    if reading is None:
        return jsonify({'error': 'Weather data unavailable'}), 503

    body = {'reading': reading.to_dict()}
    if request.args.get('check', 'false').lower() == 'true':
        body['alerts'] = check_and_send_alerts(reading, reading.city or city or 'your area', _dispatcher())
    return jsonify(body)


# ====================================================================
# Widgets API
# ====================================================================

@advisor_bp.route('/api/widgets', methods=['GET'])
def list_widgets():
    return jsonify(widget_layout.load_widgets())


@advisor_bp.route('/api/widgets', methods=['POST'])
def create_widget():
    data = request.get_json(silent=True) or {}
    try:
        widget = widget_layout.add_widget(data.get('type'))
        return jsonify(widget), 201
    except WidgetLayoutError as e:
        return jsonify({'error': str(e)}), 400
    except Exception as e:
        logger.error(f"Error adding widget: {e}")
        return jsonify({'error': 'Failed to add widget'}), 500


@advisor_bp.route('/api/widgets/<widget_id>', methods=['PATCH'])
def patch_widget(widget_id):
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({'error': 'Request body must be a JSON object'}), 400
    try:
        widget = widget_layout.update_widget(widget_id, data)
    except WidgetLayoutError as e:
        return jsonify({'error': str(e)}), 400
    except Exception as e:
        logger.error(f"Error updating widget {widget_id}: {e}")
        return jsonify({'error': 'Failed to update widget'}), 500
    if widget is None:
        return jsonify({'error': 'Widget not found'}), 404
    return jsonify(widget)


@advisor_bp.route('/api/widgets/<widget_id>', methods=['DELETE'])
def delete_widget(widget_id):
    try:
        removed = widget_layout.remove_widget(widget_id)
    except Exception as e:
        logger.error(f"Error removing widget {widget_id}: {e}")
        return jsonify({'error': 'Failed to remove widget'}), 500
    if not removed:
        return jsonify({'error': 'Widget not found'}), 404
    return jsonify({'success': True})


@advisor_bp.route('/api/widgets/reorganize', methods=['POST'])
def reorganize_widgets():
    try:
        return jsonify(widget_layout.reorganize_widgets())
    except Exception as e:
        logger.error(f"Error reorganizing widgets: {e}")
        return jsonify({'error': 'Failed to reorganize widgets'}), 500


@advisor_bp.route('/api/widgets/reset', methods=['POST'])
def reset_widgets():
    try:
        return jsonify(widget_layout.reset_widgets())
    except Exception as e:
        logger.error(f"Error resetting widgets: {e}")
        return jsonify({'error': 'Failed to reset widgets'}), 500
