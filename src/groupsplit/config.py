"""Configuration management for GroupSplit."""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError
from .models import OverDeductionPolicy, TaxPairing


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="GROUPSPLIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Ledger document (people + expenses)
    ledger_path: Path = Path.home() / ".groupsplit" / "ledger.json"

    # Balance engine policies
    tax_pairing: TaxPairing = TaxPairing.FIRST_MATCH
    over_deduction: OverDeductionPolicy = OverDeductionPolicy.PROPAGATE
    skip_invalid_expenses: bool = False  # False = one bad expense fails the batch

    # Display
    currency_symbol: str = "$"


def load_settings(**overrides) -> Settings:
    """Load application settings from environment variables."""
    try:
        return Settings(**overrides)
    except Exception as e:
        raise ConfigurationError(
            f"Failed to load settings. Check the GROUPSPLIT_* variables in your "
            f"environment or .env file.\n"
            f"Error: {e}"
        ) from e
