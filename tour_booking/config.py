from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    # Database
    DATABASE_URL: Optional[str] = None
    DB_AUTO_CREATE: bool = True
    DB_CONNECT_RETRIES: int = 15
    DB_CONNECT_DELAY: int = 3

    # JWT
    JWT_SECRET_KEY: str = "change-me"
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRE_MINUTES: int = 1440  # 1 day

    # Booking defaults
    DEFAULT_BOOKING_STATUS: str = "Pending"
    DEFAULT_PAYMENT_STATUS: str = "Pending"
    DEFAULT_PAGE_SIZE: int = 10

    # Currency label used in voucher messages
    CURRENCY: str = "VND"

    # CORS
    CORS_ORIGINS: list = ["*"]

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
