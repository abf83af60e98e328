# storefront/config.py

from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    APP_ENV: str = "development"        # production отключает локальный fallback при сохранении заказа

    DATABASE_URL: Optional[str] = None  # URL хостовой базы (SQLAlchemy async)
    LOCAL_STORE_PATH: str = "data/orders.dat"  # файл локального хранилища заказов

    ADMIN_PASSWORD: Optional[str] = None
    ADMIN_PASSWORD_HASH: Optional[str] = None  # альтернатива: хэш пароля (passlib)

    RESEND_API_KEY: Optional[str] = None
    ORDER_EMAIL_FROM: Optional[str] = None
    ORDER_NOTIFY_TO: Optional[str] = None

    OPENAI_API_KEY: Optional[str] = None
    OPENAI_MODEL: str = "gpt-4o-mini"

    RATE_LIMIT_MAX: int = 10
    RATE_LIMIT_WINDOW: int = 60         # секунды
    TRUST_FORWARDED_FOR: bool = True    # приложение за прокси, который пишет x-forwarded-for

    CORS_ORIGINS: str = "*"

    LOG_DIR: str = "log"
    LOG_PRINT: str = "1"

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore"
    )

    @property
    def is_production(self) -> bool:
        return self.APP_ENV.lower() in ("production", "prod")

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

settings = Settings()
