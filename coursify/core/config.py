import os
from urllib.parse import quote

from dotenv import load_dotenv

load_dotenv()


def _get_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return int(value)


def _get_list(value: str | None, default: list[str]) -> list[str]:
    if value is None:
        return default
    return [item.strip() for item in value.split(",") if item.strip()]


def _build_database_url() -> str | None:
    host = os.getenv("DB_HOST")
    name = os.getenv("DB_NAME")
    if not host or not name:
        return None

    user = quote(os.getenv("DB_USER", ""), safe="")
    password = quote(os.getenv("DB_PASSWORD", ""), safe="")
    port = os.getenv("DB_PORT", "5432")
    credentials = f"{user}:{password}@" if user else ""
    url = f"postgresql+psycopg2://{credentials}{host}:{port}/{name}"

    sslmode = os.getenv("DB_SSLMODE")
    if sslmode:
        url = f"{url}?sslmode={sslmode}"
    return url


APP_ENV = os.getenv("APP_ENV", "development")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

DATABASE_URL = os.getenv("DATABASE_URL") or _build_database_url()

JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
JWT_EXPIRES_HOURS = _get_int("JWT_EXPIRES_HOURS", 72)

PASSWORD_HASH_ROUNDS = _get_int("PASSWORD_HASH_ROUNDS", 29000)

RATE_LIMIT_CAPACITY = _get_int("RATE_LIMIT_CAPACITY", 5)
RATE_LIMIT_REFILL_SECONDS = _get_int("RATE_LIMIT_REFILL_SECONDS", 60)
RATE_LIMIT_IDLE_SECONDS = _get_int("RATE_LIMIT_IDLE_SECONDS", 600)

CORS_ALLOWED_ORIGINS = _get_list(os.getenv("CORS_ALLOWED_ORIGINS"), ["http://localhost:5173"])


def validate_runtime_config() -> None:
    missing = []
    if not DATABASE_URL:
        missing.append("DATABASE_URL (or DB_HOST and DB_NAME)")
    if not JWT_SECRET_KEY:
        missing.append("JWT_SECRET_KEY")
    if missing:
        raise RuntimeError(f"Missing required configuration: {', '.join(missing)}.")
