# staff-auth/staff_auth/core/config.py
from datetime import date
from functools import lru_cache
from typing import List

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings

load_dotenv()


class Settings(BaseSettings):
    DATABASE_URL: str
    JWT_SECRET_KEY: str
    JWT_ALGORITHM: str = "HS256"

    # Token and session lifetimes are independent of each other
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(default=60, gt=0)
    SESSION_EXPIRE_MINUTES: int = Field(default=2, gt=0)

    # argon2 time cost
    PASSWORD_HASH_ROUNDS: int = 3

    REQUIRE_ACTIVE_SESSION: bool = False
    SINGLE_SESSION_PER_USER: bool = False

    LEAVE_ACCRUAL_REFERENCE_DATE: date = date(2025, 1, 1)
    LEAVE_DAYS_PER_MONTH: int = 2

    CORS_ORIGINS: List[str] = ["*"]
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    LOG_LEVEL: str = "INFO"

    model_config = {"env_file": ".env", "case_sensitive": True}


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
