from flask import Flask, jsonify

from alert_service import AlertRuleEngine
from config import Config
from logging_config import configure_logging
from notifications import resolve_dispatcher
from routes import advisor_bp

logger = configure_logging()

app = Flask(__name__)
app.secret_key = Config.FLASK_SECRET_KEY

app.register_blueprint(advisor_bp)

# Delivery channel is chosen once; routes read it from app.extensions
app.extensions['alert_dispatcher'] = resolve_dispatcher(Config)
app.extensions['alert_engine'] = AlertRuleEngine()


@app.route('/health')
def health():
    return jsonify({
        'status': 'ok',
        'dispatch': app.extensions['alert_dispatcher'].name,
    })


@app.errorhandler(404)
def not_found(e):
    return jsonify({'error': 'Not found'}), 404


@app.errorhandler(500)
def server_error(e):
    logger.error(f"Unhandled server error: {e}")
    return jsonify({'error': 'Internal server error'}), 500


if __name__ == '__main__':
    logger.info(f"Starting AgroWeather on port {Config.PORT}")
    app.run(debug=Config.DEBUG, port=Config.PORT)
