from functools import lru_cache
from typing import Any, Dict

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from retirement_sim.models import (
    DEFAULT_ANNUAL_ADMIN_FEE_RATE,
    DEFAULT_ANNUAL_GROSS_RATE,
    DEFAULT_CONSERVATIVE_FRACTION,
    DEFAULT_LIFE_EXPECTANCY,
    DEFAULT_LOADING_FEE_RATE,
)


class Settings(BaseSettings):
    PROJECT_NAME: str = "Retirement Simulator API"
    API_PREFIX: str = "/api"
    LOG_LEVEL: str = "INFO"

    CORS_ORIGIN_URLS: list[str] | str = [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ]

    @field_validator("CORS_ORIGIN_URLS", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v: str | list[str]) -> list[str] | str:
        if isinstance(v, str) and not v.startswith("["):
            return [i.strip() for i in v.split(",") if i.strip()]
        elif isinstance(v, (list, str)):
            return v
        raise ValueError(v)

    # Simulation policy
    ANNUAL_GROSS_RATE: float = DEFAULT_ANNUAL_GROSS_RATE
    CONSERVATIVE_FRACTION: float = DEFAULT_CONSERVATIVE_FRACTION
    ANNUAL_ADMIN_FEE_RATE: float = DEFAULT_ANNUAL_ADMIN_FEE_RATE
    LOADING_FEE_RATE: float = DEFAULT_LOADING_FEE_RATE
    LIFE_EXPECTANCY: int = DEFAULT_LIFE_EXPECTANCY

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    def policy_defaults(self) -> Dict[str, Any]:
        """Policy values keyed by the simulation payload field they fill in."""
        return {
            "annualGrossRate": self.ANNUAL_GROSS_RATE,
            "conservativeFraction": self.CONSERVATIVE_FRACTION,
            "annualAdminFeeRate": self.ANNUAL_ADMIN_FEE_RATE,
            "loadingFeeRate": self.LOADING_FEE_RATE,
            "lifeExpectancy": self.LIFE_EXPECTANCY,
        }


@lru_cache
def get_settings() -> Settings:
    return Settings()
