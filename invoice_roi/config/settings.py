from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

# Package directory (invoice_roi/) and project root
PACKAGE_DIR = Path(__file__).resolve().parent.parent
BASE_DIR = PACKAGE_DIR.parent


class Settings(BaseSettings):
    """
    Central configuration for the ROI service.
    Values come from the environment or a local .env file.
    """
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Server
    APP_HOST: str = "0.0.0.0"
    APP_PORT: int = 3000

    # Storage
    DATA_DIR: Path = BASE_DIR / "data"
    DB_FILENAME: str = "scenarios.db"

    # Cost model assumptions (YAML)
    COST_MODEL_FILE: Path = PACKAGE_DIR / "config" / "cost_model.yaml"

    # PDF rendering
    PDF_ENABLED: bool = True
    PDF_TIMEOUT_SECONDS: float = 20.0

    # Email delivery (all of host/user/pass must be set)
    SMTP_HOST: Optional[str] = None
    SMTP_PORT: int = 587
    SMTP_USER: Optional[str] = None
    SMTP_PASS: Optional[str] = None
    SMTP_FROM: str = "no-reply@example.com"
    SMTP_TIMEOUT_SECONDS: float = 15.0

    # App Config
    LOG_LEVEL: str = "INFO"

    @property
    def db_path(self) -> Path:
        """Absolute path to the SQLite scenario database."""
        return self.DATA_DIR / self.DB_FILENAME

    @property
    def smtp_configured(self) -> bool:
        return bool(self.SMTP_HOST and self.SMTP_USER and self.SMTP_PASS)


# Global singleton
settings = Settings()
