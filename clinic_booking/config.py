# clinic_booking/config.py
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ===== App =====
    APP_NAME: str = "clinic_booking"
    ENV: str = "dev"
    # Local clinic TZ
    TIMEZONE: str = "Asia/Tokyo"
    # Linked from every notification email
    SYSTEM_URL: str = "http://localhost:3000"
    # Comma separated; "*" allows any origin
    CORS_ORIGINS: str = "*"

    # ===== Storage =====
    DATA_FILE: str = "db.json"

    # ===== SMTP =====
    SMTP_HOST: Optional[str] = None
    SMTP_PORT: int = 587
    SMTP_USER: Optional[str] = None
    SMTP_PASS: Optional[str] = None
    SMTP_FROM_ADDRESS: Optional[str] = None
    SMTP_FROM_NAME: str = "Clinic Booking System"

    # Simulation (True = log emails instead of sending them)
    DRY_RUN: bool = False

    # ===== Holidays =====
    HOLIDAYS_API_URL: str = "https://holidays-jp.github.io/api/v1/date.json"
    HOLIDAYS_API_TIMEOUT: float = 10.0
    HOLIDAY_SYNC_ENABLED: bool = False
    HOLIDAY_SYNC_ACTOR: str = "system"

    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


settings = Settings()
