# openstock/config.py
from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve absolute path to the .env file for reliable loading
env_path = Path(__file__).parent.parent / ".env"


def _normalize_url(url: str) -> str:
    # SQLAlchemy wants postgresql://, hosted providers still hand out postgres://
    if url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql://", 1)
    return url


class Settings(BaseSettings):
    DATA_DIR: str = ".data/hub/cache"

    # Each store lives in its own database; empty means "SQLite file in DATA_DIR"
    INVENTORY_DATABASE_URL: Optional[str] = None
    HR_DATABASE_URL: Optional[str] = None
    FINANCE_DATABASE_URL: Optional[str] = None

    ALLOW_NEGATIVE_STOCK: bool = False
    STANDARD_WORKDAY_MINUTES: int = 480
    DEFAULT_WORKING_DAYS: float = 22

    FRONTEND_URL: Optional[str] = None
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=str(env_path), extra="ignore")

    def _sqlite_url(self, filename: str) -> str:
        return f"sqlite:///{Path(self.DATA_DIR) / filename}"

    @property
    def inventory_url(self) -> str:
        return _normalize_url(self.INVENTORY_DATABASE_URL or self._sqlite_url("db.sqlite"))

    @property
    def hr_url(self) -> str:
        return _normalize_url(self.HR_DATABASE_URL or self._sqlite_url("hr.sqlite"))

    @property
    def finance_url(self) -> str:
        return _normalize_url(self.FINANCE_DATABASE_URL or self._sqlite_url("finance.sqlite"))
