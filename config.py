import os
from dotenv import load_dotenv

load_dotenv()

# Initialize Sentry early, before anything else imports
_sentry_dsn = os.getenv("SENTRY_DSN")
if _sentry_dsn:
    try:
        import sentry_sdk
        sentry_sdk.init(
            dsn=_sentry_dsn,
            traces_sample_rate=0.1,
            environment=os.getenv("FLASK_ENV", "production"),
        )
    except ImportError:
        pass

class Config:
    # Flask
    FLASK_SECRET_KEY = os.getenv("FLASK_SECRET_KEY", "agroweather-secret-key-change-in-production")
    DEBUG = os.getenv("FLASK_DEBUG", "False").lower() == "true"
    PORT = int(os.getenv("FLASK_PORT", "5001"))

    # Local persistence (diskcache key-value store)
    DATA_DIR = os.getenv("DATA_DIR", "data" if os.path.exists("data") else ".")
    STORAGE_DIR = os.getenv("STORAGE_DIR", os.path.join(DATA_DIR, "store"))

    # Optional: Weather (OpenWeatherMap)
    OPENWEATHER_API_KEY = os.getenv("OPENWEATHER_API_KEY")

    # --- Alert dispatch ---
    # Expo push gateway; only used when a device token is configured
    PUSH_GATEWAY_URL = os.getenv("PUSH_GATEWAY_URL", "https://exp.host/--/api/v2/push/send")
    PUSH_TOKEN = os.getenv("PUSH_TOKEN")
    ALERT_WEBHOOK_URL = os.getenv("ALERT_WEBHOOK_URL")  # Slack/Teams/Discord
    DISPATCH_TIMEOUT = float(os.getenv("DISPATCH_TIMEOUT", "10"))  # seconds

    # --- Alert history / widgets ---
    ALERT_HISTORY_LIMIT = int(os.getenv("ALERT_HISTORY_LIMIT", "50"))
    MAX_WIDGETS = int(os.getenv("MAX_WIDGETS", "12"))

    # --- Observability ---
    SENTRY_DSN = os.getenv("SENTRY_DSN")
    LOG_FORMAT = os.getenv("LOG_FORMAT", "text")  # "text" or "json"
    LOG_DIR = os.getenv("LOG_DIR", "logs")
