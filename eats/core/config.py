import os

# Load .env automatically so variables defined next to the project are
# available when running uvicorn without --env-file.
from dotenv import load_dotenv

load_dotenv()


def _as_bool(raw: str) -> bool:
    return str(raw).strip().lower() in {"1", "true", "yes", "on"}


class Settings:
    """Lightweight settings loader using environment variables.

    Values are read once at import time; tests override DATABASE_URL through
    the environment before importing the app or swap the session dependency.
    """

    SECRET_KEY: str = os.getenv("SECRET_KEY", "change-me-to-a-secure-random-string")
    ALGORITHM: str = os.getenv("ALGORITHM", "HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24 * 7)))

    # Read DATABASE_URL from env, but be resilient to an accidental repeated
    # prefix like "DATABASE_URL=DATABASE_URL=..." in a malformed .env file.
    raw_db = os.getenv("DATABASE_URL", "sqlite:///./eats.db")
    if isinstance(raw_db, str) and raw_db.startswith("DATABASE_URL="):
        raw_db = raw_db.split("=", 1)[1]
    DATABASE_URL: str = raw_db

    APP_ENV: str = os.getenv("APP_ENV", os.getenv("ENV", "development")).lower()
    _default_pool_size = 5 if APP_ENV == "development" else 10
    _default_max_overflow = 2 if APP_ENV == "development" else 20
    _default_pool_recycle = 900 if APP_ENV == "development" else 1800

    # pool tuning is ignored for sqlite urls
    DB_POOL_SIZE: int = int(os.getenv("DB_POOL_SIZE", str(_default_pool_size)))
    DB_MAX_OVERFLOW: int = int(os.getenv("DB_MAX_OVERFLOW", str(_default_max_overflow)))
    DB_POOL_RECYCLE: int = int(os.getenv("DB_POOL_RECYCLE", str(_default_pool_recycle)))  # seconds

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
    # Log request counters every N hits per route
    REQUEST_LOG_EVERY_N: int = int(os.getenv("REQUEST_LOG_EVERY_N", "100"))
    # Log pool events every N occurrences
    DB_LOG_EVERY_N: int = int(os.getenv("DB_LOG_EVERY_N", "50"))

    SMTP_HOST: str = os.getenv("SMTP_HOST", "")
    SMTP_PORT: int = int(os.getenv("SMTP_PORT", "465"))
    SMTP_USER: str = os.getenv("SMTP_USER", "")
    SMTP_PASS: str = os.getenv("SMTP_PASS", "")
    SMTP_FROM: str = os.getenv("SMTP_FROM") or os.getenv("SMTP_USER", "")
    SMTP_SSL: bool = _as_bool(os.getenv("SMTP_SSL", "true"))
    FRONTEND_URL: str = os.getenv("FRONTEND_URL", "http://localhost:3000")

    PAGE_SIZE: int = int(os.getenv("PAGE_SIZE", "25"))
    # number of days a paid promotion keeps a restaurant on top of listings
    PROMOTION_DAYS: int = int(os.getenv("PROMOTION_DAYS", "7"))
    PROMOTION_SWEEP_ENABLED: bool = _as_bool(os.getenv("PROMOTION_SWEEP_ENABLED", "1"))

    # timezone used to decide when "midnight" is for the daily promotion sweep
    APP_TIMEZONE: str = os.getenv("APP_TIMEZONE", "UTC")

    CORS_ORIGINS: str = os.getenv(
        "CORS_ORIGINS",
        "http://localhost:3000,http://127.0.0.1:3000,http://localhost:5173,http://127.0.0.1:5173",
    )


settings = Settings()
