import importlib
import os
from types import ModuleType

# APP_ENV -> settings module; mọi giá trị khác rơi về development
_ENV_MODULES = {
    "prod": "config.production",
    "production": "config.production",
    "test": "config.testing",
    "testing": "config.testing",
}


def get_settings_module() -> str:
    env = os.getenv("APP_ENV", "development").strip().lower()
    return _ENV_MODULES.get(env, "config.development")


def load_settings() -> ModuleType:
    return importlib.import_module(get_settings_module())
