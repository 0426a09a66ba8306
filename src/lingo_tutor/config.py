"""Application configuration using pydantic-settings."""

from datetime import timedelta
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict


def _find_project_root() -> Path:
    """Find project root by locating pyproject.toml."""
    current = Path(__file__).resolve()
    for parent in [current] + list(current.parents):
        if (parent / "pyproject.toml").exists():
            return parent
    return Path(__file__).resolve().parent.parent.parent


class YamlSettingsSource(PydanticBaseSettingsSource):
    """Custom settings source that loads from settings.yaml."""

    def get_field_value(self, field_name: str) -> tuple[Any, str, bool]:
        """Not used - we implement __call__ instead."""
        return None, "", False

    def __call__(self) -> dict[str, Any]:
        """Load settings from YAML file."""
        yaml_path = _find_project_root() / "config" / "settings.yaml"
        if not yaml_path.exists():
            return {}

        with open(yaml_path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        # Flatten nested structure to match Settings field names
        flattened = {}
        if "server" in data:
            flattened["host"] = data["server"].get("host")
            flattened["port"] = data["server"].get("port")
        if "openai" in data:
            flattened["chat_model"] = data["openai"].get("chat_model")
            flattened["chat_temperature"] = data["openai"].get("chat_temperature")
            flattened["chat_max_tokens"] = data["openai"].get("chat_max_tokens")
        if "conversation" in data:
            flattened["history_window"] = data["conversation"].get("history_window")
            flattened["conversation_list_limit"] = data["conversation"].get("list_limit")
        if "auth" in data:
            flattened["token_ttl_days"] = data["auth"].get("token_ttl_days")

        return {k: v for k, v in flattened.items() if v is not None}


class Settings(BaseSettings):
    """Application settings loaded from environment and config files.

    Secrets have no defaults: the process refuses to start without them.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Secrets
    openai_api_key: str = Field(description="OpenAI API key")
    jwt_secret: str = Field(description="HMAC secret used to sign auth tokens")
    elevenlabs_api_key: str | None = Field(default=None, description="Speech provider key")
    google_application_credentials: Path | None = Field(
        default=None, description="Path to the cloud credential file"
    )

    # Storage
    database_path: Path | None = Field(default=None, description="Document store directory")

    # Model
    chat_model: str = Field(default="gpt-4")
    chat_temperature: float = Field(default=0.7)
    chat_max_tokens: int = Field(default=500)

    # Conversation
    history_window: int = Field(default=5)
    conversation_list_limit: int = Field(default=10)

    # Auth
    token_ttl_days: int = Field(default=7)

    # Server
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)
    allowed_origins: str = Field(default="http://localhost:8000,http://127.0.0.1:8000")

    # Paths
    project_root: Path = Field(default_factory=_find_project_root)

    @property
    def db_dir(self) -> Path:
        d = self.database_path or self.project_root / "data" / "db"
        d.mkdir(parents=True, exist_ok=True)
        return d

    @property
    def frontend_dir(self) -> Path:
        return self.project_root / "frontend"

    @property
    def token_ttl(self) -> timedelta:
        return timedelta(days=self.token_ttl_days)

    @property
    def origins(self) -> list[str]:
        return [o.strip() for o in self.allowed_origins.split(",") if o.strip()]

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Customise settings sources to include YAML file.

        Priority order (highest to lowest):
        1. init_settings (arguments passed to Settings())
        2. env_settings (environment variables)
        3. dotenv_settings (.env file)
        4. YamlSettingsSource (settings.yaml)
        5. file_secret_settings
        """
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlSettingsSource(settings_cls),
            file_secret_settings,
        )
