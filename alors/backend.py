"""Model backends and their connection defaults"""

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class BackendConfig:
    """Connection defaults for a backend"""
    base_url: str
    default_model: str
    api_key_env: str | None = None


class Backend(str, Enum):
    """Supported OpenAI-compatible backends."""
    OPENROUTER = "openrouter"
    OPENAI = "openai"
    OLLAMA = "ollama"

    @classmethod
    def default(cls) -> "Backend":
        return cls.OPENROUTER

    def config(self) -> BackendConfig:
        return BACKEND_CONFIGS[self]


BACKEND_CONFIGS: dict[Backend, BackendConfig] = {
    Backend.OPENROUTER: BackendConfig(
        base_url="https://openrouter.ai/api/v1",
        default_model="openai/gpt-4.1-mini",
        api_key_env="OPENROUTER_API_KEY",
    ),
    Backend.OPENAI: BackendConfig(
        base_url="https://api.openai.com/v1",
        default_model="gpt-4.1-mini",
        api_key_env="OPENAI_API_KEY",
    ),
    # Local server, no key needed
    Backend.OLLAMA: BackendConfig(
        base_url="http://localhost:11434/v1",
        default_model="llama3.1",
    ),
}
