"""
Configuration Management Module

Provides centralized configuration using pydantic-settings for environment-based configuration.
"""

from pydantic_settings import BaseSettings
from typing import List


class BankDashboardConfig(BaseSettings):
    """Banking dashboard API configuration"""
    
    # API configuration
    api_host: str = "0.0.0.0"
    api_port: int = 3001
    api_title: str = "Banking Dashboard API"
    cors_origins: List[str] = ["*"]
    
    # Logging configuration
    log_level: str = "INFO"
    log_format: str = "json"  # json or text
    
    # Business rules configuration
    max_transaction_amount: str = "1000000"
    max_description_length: int = 255
    default_page_size: int = 10
    max_page_size: int = 100
    
    # Sample data loaded at startup
    seed_sample_data: bool = True
    
    class Config:
        env_prefix = "BANKDASH_"
        env_file = ".env"
        case_sensitive = False


# Global configuration instance
config = BankDashboardConfig()


def get_config() -> BankDashboardConfig:
    """Get global configuration instance"""
    return config


def reload_config() -> BankDashboardConfig:
    """Reload configuration from environment"""
    global config
    config = BankDashboardConfig()
    return config
