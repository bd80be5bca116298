"""
Static catalog of known LLM providers.
Used to populate choice lists; never persisted.
"""

from dataclasses import dataclass, field

from core.constants import ANTHROPIC, GOOGLE, OLLAMA, OPENAI


@dataclass(frozen=True)
class ProviderMetadata:
    """Descriptive entry for a provider."""
    name: str
    description: str
    models: tuple[str, ...] = field(default_factory=tuple)
    requires_api_key: bool = True

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "name": self.name,
            "description": self.description,
            "models": list(self.models),
        }


_CATALOG = (
    (
        OPENAI,
        "OpenAI",
        "GPT models from OpenAI",
        ("gpt-4.1", "gpt-4o", "o3", "o3-mini"),
        True,
    ),
    (
        ANTHROPIC,
        "Anthropic",
        "Claude models from Anthropic",
        (
            "claude-sonnet-4-20250514",
            "claude-3-opus-20240229",
            "claude-3-sonnet-20240229",
        ),
        True,
    ),
    (
        GOOGLE,
        "Google",
        "Gemini models from Google",
        ("gemini-2.5-pro", "gemini-1.5-pro", "gemini-1.5-flash"),
        True,
    ),
    (
        OLLAMA,
        "Ollama",
        "Local models via Ollama",
        ("llama2", "mistral", "codellama", "llama3"),
        False,
    ),
)

# Returned when a model matches no provider
DEFAULT_PROVIDER = OPENAI


def get_provider_metadata() -> dict[str, ProviderMetadata]:
    """
    Get the full provider catalog.

    Returns:
        Fresh mapping of provider id to metadata, in catalog order
    """
    return {
        provider_id: ProviderMetadata(
            name=name,
            description=description,
            models=models,
            requires_api_key=requires_api_key,
        )
        for provider_id, name, description, models, requires_api_key in _CATALOG
    }


def provider_for_model(model: str) -> str:
    """
    Find the provider that lists a model.

    Args:
        model: Model identifier, e.g. "gpt-4o"

    Returns:
        Provider id, or "openai" when no provider knows the model
    """
    for provider_id, metadata in get_provider_metadata().items():
        if model in metadata.models:
            return provider_id
    return DEFAULT_PROVIDER
