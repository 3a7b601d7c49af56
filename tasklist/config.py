import os

from dotenv import find_dotenv, load_dotenv
from sqlalchemy.engine import URL

load_dotenv(find_dotenv())

DEFAULT_SQLITE_URL = "sqlite:///tasks.db"
DEFAULT_CORS_ORIGINS = ["http://localhost:3000"]


def get_database_url() -> str | URL:
    url = os.getenv("DATABASE_URL")
    if url:
        return url

    host = os.getenv("DB_HOST")
    if not host:
        return DEFAULT_SQLITE_URL

    return URL.create(
        "postgresql+psycopg2",
        username=os.getenv("DB_USER", "postgres"),
        password=os.getenv("DB_PASSWORD", "password"),
        host=host,
        port=int(os.getenv("DB_PORT", "5432")),
        database=os.getenv("DB_DATABASE", "tasksdb"),
    )


def get_host() -> str:
    return os.getenv("HOST", "0.0.0.0")


def get_port() -> int:
    return int(os.getenv("PORT", "3001"))


def get_cors_origins() -> list[str]:
    raw = os.getenv("CORS_ORIGINS")
    if not raw or not raw.strip():
        return list(DEFAULT_CORS_ORIGINS)
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def get_log_level() -> str:
    return os.getenv("LOG_LEVEL", "INFO").upper()
