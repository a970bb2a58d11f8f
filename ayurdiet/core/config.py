# ayurdiet/core/config.py
from __future__ import annotations

from typing import List

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

# Also expose .env to plain os.environ readers (logger, firebase init)
load_dotenv()


class Settings(BaseSettings):
    # Service account JSON for the Firebase Admin SDK
    FIREBASE_CREDENTIALS: str = "ayurdiet/core/firebase_key.json"

    # Web API key, needed for the Identity Toolkit password endpoints
    FIREBASE_WEB_API_KEY: str = ""

    # Gemini (either name works)
    GEMINI_API_KEY: str = ""
    GOOGLE_API_KEY: str = ""
    GEMINI_MODEL: str = "gemini-2.5-flash"

    # Reminder dispatch thread
    REMINDER_WORKER_ENABLED: bool = False
    REMINDER_INTERVAL_SECONDS: int = 300
    # UTC hour of the daily reminder scheduling pass
    DAILY_REMINDER_HOUR: int = 6

    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:9002"]

    # Glasses per day used by water reminders
    DEFAULT_WATER_TARGET: int = 8

    # IFCT 2017 nutrient table (SQLite, read-only)
    IFCT_DB_PATH: str = "data/ifct2017.db"

    # WeatherAPI.com current conditions
    WEATHER_API_KEY: str = ""
    WEATHER_API_BASE_URL: str = "http://api.weatherapi.com/v1"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    @property
    def gemini_key(self) -> str:
        return self.GEMINI_API_KEY or self.GOOGLE_API_KEY


settings = Settings()
