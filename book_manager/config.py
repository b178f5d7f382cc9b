import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

load_dotenv()


def _env(name: str, default: str):
    return field(default_factory=lambda: os.getenv(name, default))


@dataclass
class Settings:
    # REST API settings
    api_base_url: str = _env("BOOK_API_BASE_URL", "http://localhost:8080/")
    api_list_path: str = _env("BOOK_API_LIST_PATH", "books")

    # Client settings
    log_level: str = _env("BOOK_CLIENT_LOG_LEVEL", "WARNING")
    output_mode: str = _env("BOOK_CLIENT_OUTPUT", "plain")

    # Application settings
    app_name: str = _env("APP_NAME", "Book Manager")


def get_settings(**overrides) -> Settings:
    """Build settings from the current environment, applying explicit overrides."""
    settings = Settings()
    for key, value in overrides.items():
        if value is not None:
            setattr(settings, key, value)
    return settings
