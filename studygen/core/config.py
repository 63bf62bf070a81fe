from enum import Enum
from typing import Optional

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict

from studygen.modules.generation.models import ModelConfig, parse_model_configs


DEFAULT_MODELS = (
    "gemini-2.0-flash@v1beta,"
    "gemini-2.0-flash-lite@v1beta,"
    "gemini-2.5-flash@v1beta,"
    "gemini-2.5-pro@v1beta"
)

# Lite models first; the lecture finder only returns an index.
LECTURE_FINDER_MODELS = (
    "gemini-2.0-flash-lite@v1beta,"
    "gemini-2.5-flash-lite@v1beta,"
    "gemini-2.0-flash@v1beta"
)


class Feature(str, Enum):
    FLASHCARDS = "flashcards"
    RECOMMENDATIONS = "recommendations"
    EXPLAIN_IT = "explain_it"
    LECTURE_FINDER = "lecture_finder"


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )
    name: str = Field(default="studygen", alias="APP_NAME")
    version: str = Field(default="v1", alias="API_VERSION")
    port: int = Field(default=9000, alias="APP_PORT")
    mode: str = Field(default="prod", alias="MODE")

    @computed_field
    def is_production(self) -> bool:
        return self.mode != "dev"


class GenerationSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )
    # Comma separated, cheapest first: "[provider:]name[@version]"
    models: str = Field(default=DEFAULT_MODELS, alias="GENERATION_MODELS")
    timeout_seconds: float = Field(
        default=30.0, gt=0, alias="GENERATION_TIMEOUT_SECONDS"
    )
    google_base_url: str = Field(
        default="https://generativelanguage.googleapis.com",
        alias="GOOGLE_API_BASE_URL",
    )
    openrouter_base_url: str = Field(
        default="https://openrouter.ai/api/v1", alias="OPENROUTER_BASE_URL"
    )

    # Per feature overrides; unset ones use GENERATION_MODELS
    flashcards_models: Optional[str] = Field(default=None, alias="FLASHCARDS_MODELS")
    recommendations_models: Optional[str] = Field(
        default=None, alias="RECOMMENDATIONS_MODELS"
    )
    explain_it_models: Optional[str] = Field(default=None, alias="EXPLAIN_IT_MODELS")
    lecture_finder_models: str = Field(
        default=LECTURE_FINDER_MODELS, alias="LECTURE_FINDER_MODELS"
    )

    def candidates(self, feature: Optional[Feature] = None) -> tuple[ModelConfig, ...]:
        """Ordered candidate list for ``feature``, or the shared default list."""
        override = getattr(self, f"{feature.value}_models") if feature else None
        return parse_model_configs(override or self.models)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )

    app: AppSettings = Field(default_factory=lambda: AppSettings())
    generation: GenerationSettings = Field(
        default_factory=lambda: GenerationSettings()
    )

    gemini_api_key: Optional[str] = Field(default=None, alias="GEMINI_API_KEY")
    openrouter_api_key: Optional[str] = Field(
        default=None, alias="OPENROUTER_API_KEY"
    )
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")


settings = Settings()
