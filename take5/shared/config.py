"""
Configuration Management

Pydantic-settings based configuration for the Take5 call scheduler.
All settings can be overridden via environment variables.

Only the Lambda and tools layers read settings. The scheduling engine takes
every input as an explicit argument.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Environment variables are prefixed with TAKE5_ and are case-insensitive.
    Example: TAKE5_DYNAMODB_TABLE_NAME=MyGroups
    """

    model_config = SettingsConfigDict(
        env_prefix="TAKE5_",
        env_file=[".env.local", ".env"],  # Try .env.local first
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # DynamoDB Configuration
    dynamodb_table_name: str = Field(
        default="Take5Groups",
        description="DynamoDB table name for group snapshots",
    )
    dynamodb_gsi1_name: str = Field(
        default="GSI1",
        description="GSI1 index name for listing all groups",
    )
    dynamodb_endpoint_url: str | None = Field(
        default=None,
        description="DynamoDB endpoint URL (for local development)",
    )

    # EventBridge Configuration
    eventbridge_bus_name: str = Field(
        default="take5",
        description="EventBridge event bus name",
    )
    eventbridge_source_prefix: str = Field(
        default="take5",
        description="Prefix for EventBridge event sources",
    )
    eventbridge_endpoint_url: str | None = Field(
        default=None,
        description="EventBridge endpoint URL (use 'mock' for local)",
    )

    # AWS Configuration
    aws_region: str = Field(
        default="us-east-1",
        description="AWS region",
    )

    # Application Configuration
    environment: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Deployment environment",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging level",
    )

    # Scheduling Configuration
    default_schedule_length: int = Field(
        default=5,
        ge=1,
        description="Number of calls projected by the schedule preview",
    )
    max_schedule_length: int = Field(
        default=50,
        ge=1,
        description="Upper bound on calls projected in one preview request",
    )
    window_anchor: Literal["history_boundary", "next_day"] = Field(
        default="history_boundary",
        description="How weekly/monthly windows are re-anchored once exhausted",
    )
    random_seed: int | None = Field(
        default=None,
        description="Seed for slot selection (unset: fresh randomness per invocation)",
    )

    @property
    def dynamodb_config(self) -> dict:
        """DynamoDB client configuration."""
        config = {"region_name": self.aws_region}
        if self.dynamodb_endpoint_url and self.dynamodb_endpoint_url != "mock":
            config["endpoint_url"] = self.dynamodb_endpoint_url
        return config

    @property
    def eventbridge_config(self) -> dict:
        """EventBridge client configuration."""
        config = {"region_name": self.aws_region}
        if self.eventbridge_endpoint_url and self.eventbridge_endpoint_url != "mock":
            config["endpoint_url"] = self.eventbridge_endpoint_url
        return config


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get cached application settings.

    Uses lru_cache to ensure settings are loaded only once.
    Call get_settings.cache_clear() in tests after changing the environment.
    """
    return Settings()
