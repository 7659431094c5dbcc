# core/config.py
from typing import List
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

FALLBACK_UPI_VPA = "buymeacoffee@upi"
FALLBACK_PAYEE_NAME = "Buy Me a Coffee"


class Settings(BaseSettings):
    # ────────────────────────────────
    # 1. APP & ENVIRONMENT
    # ────────────────────────────────
    PROJECT_NAME: str = "Buy Me a Coffee"
    ENVIRONMENT: str = Field(default="development")
    DEBUG: bool = Field(default=True)
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    CORS_ORIGINS: List[str] = Field(
        default_factory=list,
        description="Extra origins allowed to call the API (JSON list)"
    )

    # ────────────────────────────────
    # 2. PAYEE (UPI)
    # ────────────────────────────────
    UPI_VPA: str = Field(
        default=FALLBACK_UPI_VPA,
        description="Default payee address shown on the page, e.g. name@bank"
    )
    PAYEE_NAME: str = Field(
        default=FALLBACK_PAYEE_NAME,
        description="Name shown in the payer's UPI app"
    )

    # ────────────────────────────────
    # 3. PAGE
    # ────────────────────────────────
    DEFAULT_NOTE: str = "Thanks for the coffee!"
    PRESET_AMOUNTS: List[int] = Field(default_factory=lambda: [50, 100, 200, 500])

    @field_validator("UPI_VPA", mode="before")
    @classmethod
    def _vpa_or_fallback(cls, v):
        v = (v or "").strip()
        return v or FALLBACK_UPI_VPA

    @field_validator("PAYEE_NAME", mode="before")
    @classmethod
    def _name_or_fallback(cls, v):
        v = (v or "").strip()
        return v or FALLBACK_PAYEE_NAME

    @field_validator("PRESET_AMOUNTS")
    @classmethod
    def _positive_presets(cls, v):
        if any(amount <= 0 for amount in v):
            raise ValueError("preset amounts must be positive")
        return v

    class Config:
        case_sensitive = False
        env_file = ".env"
        env_file_encoding = "utf-8"


# Create singleton
settings = Settings()
