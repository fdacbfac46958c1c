"""Application settings loaded from environment variables.

Defines all environment-driven configuration used by the hub: the Gemini
credentials, the model behind each agent mode and the HTTP surface.
"""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

from nexus.agents.specialists import SpecialistsConfig
from nexus.models.message_models import MissingPayloadPolicy


class Settings(BaseSettings):
    """Typed configuration model for the application."""

    # Gemini credentials
    GEMINI_API_KEY: str

    # Models behind each agent mode
    ORCHESTRATOR_MODEL: str = "gemini-2.5-flash"
    CODER_MODEL: str = "gemini-3-pro-preview"
    ARTIST_MODEL: str = "gemini-2.5-flash-image"
    SPEAKER_MODEL: str = "gemini-2.5-flash-preview-tts"
    ANALYST_MODEL: str = "gemini-2.5-flash"

    # Agent behaviour
    CODER_THINKING_BUDGET: int = 2048
    CODE_LANGUAGE: str = "typescript"
    SPEAKER_VOICE: str = "Kore"
    ENABLE_WEB_SEARCH: bool = True
    IMAGE_MISSING_POLICY: Literal["notice", "error"] = "notice"
    SPEECH_MISSING_POLICY: Literal["notice", "error"] = "error"
    HISTORY_WINDOW: int = 40
    AUDIO_SAMPLE_RATE: int = 24000

    # API parameters
    ROOT_PATH_BACKEND: str = ""
    ALLOWED_ORIGINS: list[str] = ["*"]

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    def specialists_config(self) -> SpecialistsConfig:
        """Project the settings onto the model configuration of each handler."""
        return SpecialistsConfig(
            orchestrator_model=self.ORCHESTRATOR_MODEL,
            coder_model=self.CODER_MODEL,
            artist_model=self.ARTIST_MODEL,
            speaker_model=self.SPEAKER_MODEL,
            analyst_model=self.ANALYST_MODEL,
            coder_thinking_budget=self.CODER_THINKING_BUDGET,
            code_language=self.CODE_LANGUAGE,
            speaker_voice=self.SPEAKER_VOICE,
            enable_web_search=self.ENABLE_WEB_SEARCH,
            history_window=self.HISTORY_WINDOW,
        )

    def missing_payload_policies(self) -> dict[str, MissingPayloadPolicy]:
        """Return the rendering policy for each capability that can lack a payload."""
        return {
            "image": MissingPayloadPolicy(self.IMAGE_MISSING_POLICY),
            "speech": MissingPayloadPolicy(self.SPEECH_MISSING_POLICY),
        }


@lru_cache
def get_settings() -> Settings:
    """Build the settings once per process."""
    return Settings()  # type: ignore[call-arg]
