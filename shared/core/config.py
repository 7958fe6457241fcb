import os
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

# Always load .env from root
BASE_DIR = os.path.dirname(os.path.dirname(os.path.dirname(__file__)))
load_dotenv(os.path.join(BASE_DIR, ".env"))


class Settings(BaseSettings):
    JWT_SECRET: str | None = os.getenv("JWT_SECRET")
    JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")

    DATABASE_URL: str | None = os.getenv("DATABASE_URL")
    DB_USER: str | None = os.getenv("DB_USER")
    DB_PASS: str | None = os.getenv("DB_PASS")
    DB_HOST: str | None = os.getenv("DB_HOST")
    DB_PORT: str = os.getenv("DB_PORT", "5432")
    DB_NAME: str | None = os.getenv("DB_NAME")

    # iCal feeds
    ICAL_FETCH_TIMEOUT: int = int(os.getenv("ICAL_FETCH_TIMEOUT", 15))
    ICAL_LOOKBACK_DAYS: int = int(os.getenv("ICAL_LOOKBACK_DAYS", 30))
    ICAL_FETCH_WORKERS: int = int(os.getenv("ICAL_FETCH_WORKERS", 4))
    ICAL_USER_AGENT: str = os.getenv("ICAL_USER_AGENT", "RentalCalendarSync/1.0")

    # 0 disables the background sync job
    CALENDAR_SYNC_INTERVAL_MINUTES: int = int(
        os.getenv("CALENDAR_SYNC_INTERVAL_MINUTES", 0))

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


settings = Settings()


def build_database_url(config: Settings) -> str:
    if config.DATABASE_URL:
        return config.DATABASE_URL
    if config.DB_HOST:
        return (
            f"postgresql+psycopg2://{config.DB_USER}:{config.DB_PASS}@{config.DB_HOST}:{config.DB_PORT}/{config.DB_NAME}"
        )
    return "sqlite:///./rental.db"


RENTAL_DATABASE_URL = build_database_url(settings)
