import os


def get_settings_module() -> str:
    """Settings module selected by APP_ENV (development by default)."""
    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "config.production"

    if env in {"test", "testing"}:
        return "config.testing"

    return "config.development"


def env_list(name: str, default) -> tuple:
    """Comma-separated environment variable as a tuple of trimmed names."""
    raw = os.getenv(name)
    if raw is None:
        return tuple(default)
    return tuple(part.strip() for part in raw.split(",") if part.strip())
