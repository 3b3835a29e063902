from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    model_config = SettingsConfigDict(case_sensitive=False, env_file=".env", extra="ignore")

    APP_TITLE: str = "uptime-checker"
    APP_VERSION: str = "1.0.0"

    # Store
    DATABASE_URL: str = "sqlite:///./uptime.db"
    STORE_BACKEND: str = "sql"  # sql | memory

    # Auth (single shared secret)
    ADMIN_PASSWORD: str = ""
    ADMIN_PASSWORD_HASH: str = ""
    SESSION_SECRET: str = "dev-secret-change-me"
    SESSION_MAX_AGE_S: int = 24 * 60 * 60
    COOKIE_SECURE: bool = True

    # Probes
    CHECK_TIMEOUT_S: float = 30.0
    USER_AGENT: str = "Uptime-Checker/1.0"
    MAX_HISTORY_ITEMS: int = 100
    UPTIME_WINDOW_S: int = 24 * 60 * 60

    # Scheduler
    CHECK_CRON: str = "*/5 * * * *"
    SCHEDULER_ENABLED: bool = True

    # Dashboard & logs
    DASHBOARD_REFRESH_S: int = 30
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False
