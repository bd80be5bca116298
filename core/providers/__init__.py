"""LLM provider catalog and connection checks."""

from core.providers.catalog import (
    ProviderMetadata,
    get_provider_metadata,
    provider_for_model,
)
from core.providers.connection import ConnectionChecker, SimulatedConnectionChecker

__all__ = [
    "ProviderMetadata",
    "get_provider_metadata",
    "provider_for_model",
    "ConnectionChecker",
    "SimulatedConnectionChecker",
]
