"""
Runtime settings are read from the environment, optionally via a .env file in
the backend root:

ANTHROPIC_API_KEY=your_real_key_here
STORE_BACKEND=sqlite

The app loads environment variables automatically using python-dotenv.
"""

from dataclasses import dataclass, field
import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(dotenv_path=Path(__file__).resolve().parent / ".env")

DEFAULT_DB_PATH = Path(__file__).parent / "metascope.db"
DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; MetaScope SEO Analyzer)"


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() not in {"0", "false", "no", "off"}


def _env_list(name: str, default: list[str]) -> list[str]:
    raw = os.getenv(name)
    if not raw:
        return list(default)
    return [item.strip() for item in raw.split(",") if item.strip()]


@dataclass(frozen=True)
class Settings:
    fetch_timeout_seconds: float = 10.0
    fetch_max_retries: int = 1
    fetch_retry_base_seconds: float = 0.5
    fetch_user_agent: str = DEFAULT_USER_AGENT
    check_robots_txt: bool = True
    robots_timeout_seconds: float = 3.0

    anthropic_api_key: str = ""
    claude_model: str = "claude-3-5-haiku-latest"
    suggestion_max_tokens: int = 300
    suggestion_temperature: float = 0.7

    store_backend: str = "memory"
    db_path: Path = DEFAULT_DB_PATH

    log_level: str = "INFO"
    cors_origins: list[str] = field(default_factory=lambda: ["*"])


def get_settings() -> Settings:
    """Build settings from the current environment."""
    return Settings(
        fetch_timeout_seconds=float(os.getenv("FETCH_TIMEOUT_SECONDS", "10")),
        fetch_max_retries=max(0, int(os.getenv("FETCH_MAX_RETRIES", "1"))),
        fetch_retry_base_seconds=float(os.getenv("FETCH_RETRY_BASE_SECONDS", "0.5")),
        fetch_user_agent=os.getenv("FETCH_USER_AGENT", "").strip() or DEFAULT_USER_AGENT,
        check_robots_txt=_env_bool("CHECK_ROBOTS_TXT", True),
        robots_timeout_seconds=float(os.getenv("ROBOTS_TIMEOUT_SECONDS", "3")),
        anthropic_api_key=os.getenv("ANTHROPIC_API_KEY", "").strip(),
        claude_model=os.getenv("CLAUDE_MODEL", "").strip() or "claude-3-5-haiku-latest",
        suggestion_max_tokens=int(os.getenv("SUGGESTION_MAX_TOKENS", "300")),
        suggestion_temperature=float(os.getenv("SUGGESTION_TEMPERATURE", "0.7")),
        store_backend=os.getenv("STORE_BACKEND", "memory").strip().lower() or "memory",
        db_path=Path(os.getenv("DB_PATH", "").strip() or DEFAULT_DB_PATH),
        log_level=os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO",
        cors_origins=_env_list("CORS_ORIGINS", ["*"]),
    )
