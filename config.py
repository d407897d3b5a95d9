import json
import os

DEFAULT_SETTINGS_PATH = "settings.json"

class Config:
    _config = None

    @classmethod
    def path(cls):
        return os.environ.get("ROUTINES_SETTINGS", DEFAULT_SETTINGS_PATH)

    @classmethod
    def get_config(cls):
        if cls._config is None:
            cls.reload_config()
        return cls._config

    @classmethod
    def reload_config(cls):
        with open(cls.path(), "r") as f:
            cls._config = json.load(f)
