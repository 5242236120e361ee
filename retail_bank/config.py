"""
Configuration Management Module

Provides centralized configuration using pydantic-settings for environment-based configuration.
"""

from pydantic_settings import BaseSettings


class BankConfig(BaseSettings):
    """Retail bank ledger configuration"""

    # Logging configuration
    log_level: str = "INFO"
    log_format: str = "json"  # json or text

    # Numeric policy
    amount_precision: int = 4  # Decimal places kept on balances and interest

    # Checking account defaults
    checking_monthly_fee: str = "5.00"
    checking_default_overdraft_limit: str = "0.00"

    # Savings account defaults
    savings_default_interest_rate: str = "0.5"  # Annual percentage
    savings_monthly_withdrawal_limit: int = 6

    # Identifier generation: uuid, timestamp or sequential
    id_strategy: str = "uuid"

    class Config:
        env_prefix = "RETAIL_BANK_"
        env_file = ".env"
        case_sensitive = False


# Global configuration instance
config = BankConfig()


def get_config() -> BankConfig:
    """Get global configuration instance"""
    return config


def reload_config() -> BankConfig:
    """Reload configuration from environment"""
    global config
    config = BankConfig()
    return config
