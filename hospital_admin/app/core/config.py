from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    DATABASE_URL: str = "sqlite:///./hospital_admin.db"
    LOG_LEVEL: str = "INFO"

    # CORS origins for the dashboard frontend
    CORS_ORIGINS: list[str] = ["http://localhost:5173"]

    # Payables / dashboards
    REMINDER_WINDOW_DAYS: int = 7
    DEFAULT_CREDIT_DAYS: int = 30

    # Stock item read-through cache
    STOCK_CACHE_TTL_SECONDS: float = 300.0
    STOCK_CACHE_MAX_ENTRIES: int = 64

    # Redis / Celery
    CELERY_BROKER_URL: str = "redis://localhost:6379/0"
    CELERY_RESULT_BACKEND: str = "redis://localhost:6379/1"
    CELERY_TIMEZONE: str = "Asia/Kolkata"

    # SMTP
    SMTP_HOST: str = "localhost"
    SMTP_PORT: int = 587
    SMTP_USERNAME: str = ""
    SMTP_PASSWORD: str = ""
    NOTIFICATION_ENABLED: bool = False
    REMINDER_RECIPIENT: str = ""


settings = Settings()
