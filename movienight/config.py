# movienight/config.py
import os
from dotenv import load_dotenv

# Load .env from the same folder as config.py
load_dotenv(os.path.join(os.path.dirname(__file__), ".env"))


def _env_flag(name, default):
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() not in ("0", "false", "no", "off", "")


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "fallback_key")

    # In-memory by default: state resets whenever the process restarts
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite://")
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    UNDO_WINDOW_SECONDS = int(os.getenv("UNDO_WINDOW_SECONDS", "10"))
    SEED_DEMO_DATA = _env_flag("SEED_DEMO_DATA", True)

    if UNDO_WINDOW_SECONDS <= 0:
        raise ValueError("UNDO_WINDOW_SECONDS must be a positive number of seconds")


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = "test"
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    SEED_DEMO_DATA = False
    UNDO_WINDOW_SECONDS = 10
