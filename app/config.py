from decimal import Decimal
from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    APP_TITLE: str = "Timesheet API"
    APP_VERSION: str = "1.0.0"

    # business rules
    DAILY_HOURS_CAP: Decimal = Decimal("12")
    # how far back an entry may be dated; 0 disables the check
    MAX_ENTRY_AGE_DAYS: int = 14

    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: List[str] = ["*"]

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
