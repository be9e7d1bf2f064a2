import os

_SETTINGS_BY_ENV = {
    "dev": "config.development",
    "development": "config.development",
    "prod": "config.production",
    "production": "config.production",
    "test": "config.testing",
    "testing": "config.testing",
}


def get_settings_module() -> str:
    """Dotted settings module for APP_ENV; unknown or unset values fall back to development."""
    env = os.getenv("APP_ENV", "development").strip().lower()
    return _SETTINGS_BY_ENV.get(env, "config.development")
