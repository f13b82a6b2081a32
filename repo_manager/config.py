"""Settings read from environment variables."""
import os
from dataclasses import dataclass
from dotenv import load_dotenv


DEFAULT_API_URL = "https://api.github.com"
DEFAULT_CREDENTIALS_FILE = "~/.github_repo_manager"


@dataclass(frozen=True)
class Settings:
    api_url: str = DEFAULT_API_URL
    per_page: int = 100
    max_pages: int = 1000
    timeout_seconds: float = 30.0
    credentials_file: str = DEFAULT_CREDENTIALS_FILE
    log_level: str = "INFO"


def _get_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
    if value < 1:
        raise ValueError(f"{name} must be positive, got {value}")
    return value


def _get_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")
    return value


def load_settings(load_env_file: bool = True) -> Settings:
    """Build Settings from the environment.

    Args:
        load_env_file: Read .env (or env) into the environment first
    """
    if load_env_file:
        # Load environment variables from .env or env file
        load_dotenv('.env') or load_dotenv('env')

    return Settings(
        api_url=os.getenv("GITHUB_API_URL", DEFAULT_API_URL),
        per_page=_get_int("GITHUB_PER_PAGE", 100),
        max_pages=_get_int("GITHUB_MAX_PAGES", 1000),
        timeout_seconds=_get_float("GITHUB_TIMEOUT_SECONDS", 30.0),
        credentials_file=os.getenv("CREDENTIALS_FILE", DEFAULT_CREDENTIALS_FILE),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
