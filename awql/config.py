"""Configuration management using pydantic-settings."""

import tempfile
from pathlib import Path
from typing import Any, Literal, Tuple, Type

import yaml
from pydantic import Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)


def load_yaml_config(config_path: Path | None = None) -> dict[str, Any]:
    """
    Load configuration from YAML file.

    Priority:
    1. Explicitly provided config_path
    2. ~/.awql/config.yaml (default location)
    3. Empty dict if no file exists

    Args:
        config_path: Optional path to config file

    Returns:
        Dictionary of configuration values (flattened from nested YAML)
    """
    if config_path is None:
        config_path = Path.home() / ".awql" / "config.yaml"

    if not config_path.exists():
        return {}

    try:
        with open(config_path) as f:
            yaml_data = yaml.safe_load(f) or {}

        flattened = {}

        if "api" in yaml_data:
            api = yaml_data["api"]
            if "report_download_url" in api:
                flattened["report_download_url"] = api["report_download_url"]
            if "version" in api:
                flattened["default_api_version"] = api["version"]
            if "timeout_seconds" in api:
                flattened["request_timeout_seconds"] = api["timeout_seconds"]
            if "temp_dir" in api:
                flattened["temp_dir"] = api["temp_dir"]

        if "oauth" in yaml_data:
            oauth = yaml_data["oauth"]
            if "token_url" in oauth:
                flattened["oauth_token_url"] = oauth["token_url"]
            if "token_lifetime_seconds" in oauth:
                flattened["token_lifetime_seconds"] = oauth["token_lifetime_seconds"]

        if "logging" in yaml_data:
            logging = yaml_data["logging"]
            if "level" in logging:
                flattened["log_level"] = logging["level"]
            if "format" in logging:
                flattened["log_format"] = logging["format"]

        return flattened

    except Exception as e:
        import warnings

        warnings.warn(f"Failed to load config from {config_path}: {e}")
        return {}


_config_path: Path | None = None


class YamlSettingsSource(PydanticBaseSettingsSource):
    """Settings source that loads configuration from the YAML file."""

    def get_field_value(self, field: Any, field_name: str) -> Tuple[Any, str, bool]:
        """Not used since we override __call__."""
        return None, field_name, False

    def __call__(self) -> dict[str, Any]:
        """Load configuration from YAML file."""
        return load_yaml_config(_config_path)


class Settings(BaseSettings):
    """
    awql configuration settings.

    Configuration priority (highest to lowest):
    1. Environment variables (e.g., REQUEST_TIMEOUT_SECONDS=60)
    2. YAML configuration file (~/.awql/config.yaml)
    3. Default values defined in this class
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    report_download_url: str = Field(
        default="https://adwords.google.com/api/adwords/reportdownload/",
        description="Report download endpoint, suffixed with the API version",
    )
    oauth_token_url: str = Field(
        default="https://accounts.google.com/o/oauth2/token",
        description="OAuth2 token endpoint used to refresh access tokens",
    )
    default_api_version: str = Field(
        default="v201609",
        description="API version used when the connection string has none",
    )
    request_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Report download timeout",
    )
    token_lifetime_seconds: int = Field(
        default=3300,
        ge=60,
        description="Lifetime assumed for a refreshed access token",
    )
    temp_dir: Path = Field(
        default=Path(tempfile.gettempdir()),
        description="Directory where downloaded reports are written",
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="WARNING",
        description="Logging level",
    )
    log_format: Literal["json", "text"] = Field(
        default="text", description="Log format"
    )

    @field_validator("temp_dir")
    @classmethod
    def validate_paths(cls, v: Path) -> Path:
        """Ensure paths are absolute."""
        if not v.is_absolute():
            v = v.expanduser().resolve()
        return v

    @field_validator("report_download_url")
    @classmethod
    def validate_download_url(cls, v: str) -> str:
        """The API version is appended to the URL, keep a trailing slash."""
        if not (v.startswith("https://") or v.startswith("http://")):
            raise ValueError("Report download URL must be HTTP(S)")
        if not v.endswith("/"):
            v = f"{v}/"
        return v

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: Type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> Tuple[PydanticBaseSettingsSource, ...]:
        """
        Customize settings sources priority.

        Priority order (highest to lowest):
        1. Explicit kwargs (init_settings) - for testing and programmatic config
        2. Environment variables
        3. YAML configuration file
        4. .env file
        5. Field defaults
        """
        return (
            init_settings,
            env_settings,
            YamlSettingsSource(settings_cls),
            dotenv_settings,
        )


_settings: Settings | None = None


def get_settings(config_path: Path | None = None, reload: bool = False) -> Settings:
    """
    Get global settings instance.

    Args:
        config_path: Optional path to YAML config file (defaults to ~/.awql/config.yaml)
        reload: If True, force reload settings (useful for testing)

    Returns:
        Settings instance with merged configuration
    """
    global _settings, _config_path
    if _settings is None or reload:
        _config_path = config_path

        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset settings singleton (useful for testing)."""
    global _settings
    _settings = None
