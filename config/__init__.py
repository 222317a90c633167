import os

# APP_ENV value -> settings module; anything unlisted runs with development settings.
SETTINGS_MODULES = {
    "development": "config.development",
    "dev": "config.development",
    "production": "config.production",
    "prod": "config.production",
    "testing": "config.testing",
    "test": "config.testing",
}


def get_settings_module(env: str | None = None) -> str:
    name = (env if env is not None else os.getenv("APP_ENV", "")).strip().lower()
    return SETTINGS_MODULES.get(name, "config.development")
