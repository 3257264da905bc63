"""
Configuration management for Waylo.

This module handles loading and managing configuration for the trip
planner, including environment variables, API keys, per-flow model
settings and the free-tier limits applied to generated content.
"""

import os
from dataclasses import dataclass, field
from enum import Enum

from dotenv import load_dotenv
from loguru import logger
from pydantic import BaseModel, Field, field_validator

# Load environment variables from .env file
load_dotenv()

DEFAULT_MODEL = "gemini-2.5-flash"
FLOW_NAMES = ("itinerary", "edit", "packing", "chat")


class LogLevel(str, Enum):
    """Log levels supported by the system."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes")


class FlowModelConfig(BaseModel):
    """Configuration for the LLM model behind a prompt flow."""

    name: str = Field(default=DEFAULT_MODEL, description="Model name to use")
    temperature: float = Field(default=0.7, description="Model temperature")
    max_tokens: int | None = Field(default=None, description="Max tokens to generate")

    @field_validator("temperature")
    @classmethod
    def validate_temperature(cls, value: float) -> float:
        """Validate temperature is within reasonable bounds."""
        if not (0.0 <= value <= 1.0):
            raise ValueError(f"Temperature must be between 0.0 and 1.0, got {value}")
        return value

    @classmethod
    def from_env(cls, prefix: str = "", temperature: str = "0.7") -> "FlowModelConfig":
        """Create a FlowModelConfig from environment variables."""
        prefix = f"{prefix}_" if prefix else ""
        return cls(
            name=os.getenv(f"{prefix}MODEL", DEFAULT_MODEL),
            temperature=float(os.getenv(f"{prefix}TEMPERATURE", temperature)),
            max_tokens=int(os.getenv(f"{prefix}MAX_TOKENS", "0")) or None,
        )


class APIConfig(BaseModel):
    """Configuration for external services."""

    gemini_api_key: str = Field(..., description="Gemini API key")
    aws_region: str = Field(default="eu-south-1", description="AWS region")
    dynamodb_table_name: str = Field(default="waylo-trips", description="DynamoDB table name")
    dynamodb_endpoint: str | None = Field(
        default=None, description="DynamoDB endpoint URL (for local dev)"
    )

    class ValidationError(Exception):
        """Exception raised for API configuration validation errors."""

        def __init__(self, missing_keys: list[str]):
            self.missing_keys = missing_keys
            super().__init__(f"Missing required API keys: {', '.join(missing_keys)}")

    @classmethod
    def from_env(cls) -> "APIConfig":
        """Create an APIConfig from environment variables."""
        return cls(
            gemini_api_key=os.getenv("GEMINI_API_KEY", ""),
            aws_region=os.getenv("AWS_REGION", "eu-south-1"),
            dynamodb_table_name=os.getenv("DYNAMODB_TABLE_NAME", "waylo-trips"),
            dynamodb_endpoint=os.getenv("DYNAMODB_ENDPOINT"),
        )

    def validate(self, raise_error: bool = False) -> bool:
        """
        Validate that required settings are present.

        Args:
            raise_error: If True, raise ValidationError instead of returning False

        Returns:
            True if all required keys are present, False otherwise

        Raises:
            ValidationError: If raise_error is True and validation fails
        """
        missing_keys = []
        if not self.gemini_api_key:
            missing_keys.append("GEMINI_API_KEY")
        if not self.dynamodb_table_name:
            missing_keys.append("DYNAMODB_TABLE_NAME")

        if missing_keys:
            logger.error(f"Missing required API keys: {', '.join(missing_keys)}")
            if raise_error:
                raise self.ValidationError(missing_keys)
            return False

        return True


class SystemConfig(BaseModel):
    """System-wide configuration."""

    log_level: LogLevel = Field(default=LogLevel.INFO, description="Logging level")
    environment: str = Field(
        default="development",
        description="Environment (development, staging, production)",
    )
    usage_limit: int = Field(
        default=3, ge=0, description="Free generations per calendar month"
    )
    free_visible_divisor: int = Field(
        default=4, gt=0, description="Free accounts see ceil(total / divisor) sections"
    )
    allow_double_encoded_output: bool = Field(
        default=False,
        description="Accept LLM JSON payloads wrapped in an extra JSON string",
    )

    @classmethod
    def from_env(cls) -> "SystemConfig":
        """Create a SystemConfig from environment variables."""
        return cls(
            log_level=LogLevel(os.getenv("LOG_LEVEL", "INFO").upper()),
            environment=os.getenv("ENVIRONMENT", "development"),
            usage_limit=int(os.getenv("USAGE_LIMIT", "3")),
            free_visible_divisor=int(os.getenv("FREE_VISIBLE_DIVISOR", "4")),
            allow_double_encoded_output=_env_flag("ALLOW_DOUBLE_ENCODED_OUTPUT"),
        )


@dataclass
class WayloConfig:
    """Main configuration class for Waylo."""

    api: APIConfig = field(default_factory=APIConfig.from_env)
    system: SystemConfig = field(default_factory=SystemConfig.from_env)
    flow_models: dict[str, FlowModelConfig] = field(default_factory=dict)

    def __post_init__(self):
        """Initialize flow models if not provided."""
        if not self.flow_models:
            self.flow_models = {
                "itinerary": FlowModelConfig.from_env("ITINERARY"),
                "edit": FlowModelConfig.from_env("EDIT", temperature="0.4"),
                "packing": FlowModelConfig.from_env("PACKING"),
                "chat": FlowModelConfig.from_env("CHAT", temperature="0.8"),
            }

    class ConfigurationError(Exception):
        """Exception raised for configuration validation errors."""

        pass

    def validate(self, raise_error: bool = False) -> bool:
        """
        Validate the entire configuration.

        Args:
            raise_error: If True, raise ConfigurationError instead of returning False

        Returns:
            True if configuration is valid, False otherwise
        """
        try:
            self.api.validate(raise_error=True)

            missing_flows = [n for n in FLOW_NAMES if n not in self.flow_models]
            if missing_flows:
                raise ValueError(f"No model settings for flows: {', '.join(missing_flows)}")

            if self.system.usage_limit < 0:
                raise ValueError("Usage limit cannot be negative")
            if self.system.free_visible_divisor <= 0:
                raise ValueError("Free visible divisor must be positive")

            return True

        except Exception as e:
            if not isinstance(e, self.api.ValidationError):
                logger.error(f"Configuration validation failed: {e!s}")

            if raise_error:
                raise self.ConfigurationError(
                    f"Configuration validation failed: {e!s}"
                ) from e

            return False

    def get_flow_model(self, flow_name: str) -> FlowModelConfig:
        """
        Get model configuration for a specific flow.

        Args:
            flow_name: One of FLOW_NAMES

        Returns:
            FlowModelConfig for the flow, or the default model settings
        """
        return self.flow_models.get(flow_name, FlowModelConfig())


def initialize_config(
    custom_config_path: str | None = None,
    validate: bool = True,
    raise_on_error: bool = False,
) -> WayloConfig:
    """
    Build and validate a configuration object.

    Args:
        custom_config_path: Path to a custom .env file to load
        validate: Whether to validate the configuration
        raise_on_error: Whether to raise an exception on validation failure

    Returns:
        A fresh WayloConfig built from the environment

    Raises:
        WayloConfig.ConfigurationError: If validation fails and raise_on_error is True
        FileNotFoundError: If custom_config_path is provided but does not exist
    """
    if custom_config_path:
        if not os.path.exists(custom_config_path):
            error_msg = f"Custom configuration file not found: {custom_config_path}"
            logger.error(error_msg)
            raise FileNotFoundError(error_msg)

        logger.info(f"Loading custom configuration from {custom_config_path}")
        load_dotenv(custom_config_path, override=True)

    config = WayloConfig()

    if validate and not config.validate(raise_error=raise_on_error):
        logger.warning(
            "Configuration validation failed. Required environment variables: "
            "GEMINI_API_KEY, DYNAMODB_TABLE_NAME. You can set these in a .env "
            "file in the project root."
        )

    return config
