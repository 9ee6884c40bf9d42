"""Stokvel client settings read from the environment"""
import logging.config
from pathlib import Path

from decouple import config as env

# Backend API
API_URL = env("STOKVEL_API_URL", default="http://localhost:5000/api")
API_TIMEOUT = env("STOKVEL_API_TIMEOUT", default=15, cast=float)

# Durable session storage
SESSION_BACKEND = env("STOKVEL_SESSION_BACKEND", default="redis")
REDIS_URL = env("REDIS_URL", default="redis://localhost:6379/0")
SESSION_PREFIX = env("STOKVEL_SESSION_PREFIX", default="stokvel:session:")
SESSION_FILE = Path(
    env("STOKVEL_SESSION_FILE", default=str(Path.home() / ".stokvel" / "session.json"))
).expanduser()

# Logging configuration
LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "standard": {
            "format": "[%(asctime)s] %(levelname)s [%(name)s] %(message)s",
            "datefmt": "%Y-%m-%d %H:%M:%S",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "standard",
        },
    },
    "loggers": {
        # Application logging
        "stokvel": {
            "handlers": ["console"],
            "level": env("APP_LOG_LEVEL", default="INFO"),
            "propagate": False,
        },
        # Third party libraries
        "urllib3": {
            "handlers": ["console"],
            "level": "WARNING",
            "propagate": False,
        },
    },
}


def configure_logging(level: str = None) -> None:
    """Apply the logging dict config, optionally overriding the app level"""
    logging_config = {**LOGGING, "loggers": {k: dict(v) for k, v in LOGGING["loggers"].items()}}
    if level:
        logging_config["loggers"]["stokvel"]["level"] = level.upper()
    logging.config.dictConfig(logging_config)
