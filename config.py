import os
from dataclasses import dataclass

from dotenv import load_dotenv

DEFAULT_API_URL = "http://localhost:8080/expensia"


def _env_number(name: str, default, cast):
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return cast(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}")


@dataclass
class Settings:
    api_url: str
    timeout: float = 10.0
    page_size: int = 10
    oauth_url: str = ""

    @staticmethod
    def load() -> "Settings":
        """Load settings from a .env file and the environment."""
        load_dotenv()

        api_url = (os.getenv("EXPENSIA_API_URL") or DEFAULT_API_URL).rstrip("/")
        oauth_url = os.getenv("EXPENSIA_OAUTH_URL") or f"{api_url}/oauth2/authorization/google"
        return Settings(
            api_url=api_url,
            timeout=_env_number("EXPENSIA_API_TIMEOUT", 10.0, float),
            page_size=_env_number("EXPENSIA_PAGE_SIZE", 10, int),
            oauth_url=oauth_url,
        )


def log_level() -> str:
    return (os.getenv("EXPENSIA_LOG_LEVEL") or "INFO").upper()
