"""
Provider connection checks.

The simulated checker inspects a candidate configuration and sleeps to
model request latency; it never touches the network. A real HTTP-backed
checker can replace it by implementing ConnectionChecker.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

from core.constants import (
    ANTHROPIC,
    CLOUD_CHECK_LATENCY,
    GOOGLE,
    LOCAL_CHECK_LATENCY,
    OLLAMA,
    OPENAI,
)
from core.exceptions import MissingCredentialError, UnknownProviderError
from core.types import ProviderSettings

logger = logging.getLogger(__name__)


class ConnectionChecker(ABC):
    """Abstract base class for provider connection checks."""

    @abstractmethod
    async def check(self, provider_id: str, config: ProviderSettings) -> bool:
        """
        Decide whether a provider configuration is usable.

        Args:
            provider_id: Provider identifier, e.g. "openai"
            config: Candidate provider configuration

        Returns:
            True if the configuration passed, False otherwise

        Raises:
            MissingCredentialError: The required field is empty
            UnknownProviderError: No check exists for provider_id
        """
        pass

    def supports(self, provider_id: str) -> bool:
        """Check if a provider id has a connection check."""
        return True


@dataclass(frozen=True)
class _Rule:
    label: str
    field: str
    missing_message: str
    passes: Callable[[str], bool]
    local: bool = False


_RULES: dict[str, _Rule] = {
    OPENAI: _Rule(
        label="OpenAI",
        field="api_key",
        missing_message="API key is required for OpenAI",
        passes=lambda key: key.startswith("sk-"),
    ),
    ANTHROPIC: _Rule(
        label="Anthropic",
        field="api_key",
        missing_message="API key is required for Anthropic",
        passes=lambda key: key.startswith("sk-ant-"),
    ),
    GOOGLE: _Rule(
        label="Google",
        field="api_key",
        missing_message="API key is required for Google",
        passes=lambda key: len(key) > 10,
    ),
    OLLAMA: _Rule(
        label="Ollama",
        field="custom_endpoint",
        missing_message="Custom endpoint is required for Ollama",
        passes=lambda endpoint: "localhost" in endpoint or "127.0.0.1" in endpoint,
        local=True,
    ),
}


class SimulatedConnectionChecker(ConnectionChecker):
    """Connection checker that validates shape only and fakes latency."""

    def __init__(
        self,
        cloud_latency: float = CLOUD_CHECK_LATENCY,
        local_latency: float = LOCAL_CHECK_LATENCY,
        sleep: Optional[Callable[[float], Awaitable[None]]] = None,
    ):
        self._cloud_latency = cloud_latency
        self._local_latency = local_latency
        self._sleep = sleep or asyncio.sleep

    def supports(self, provider_id: str) -> bool:
        return provider_id in _RULES

    async def check(self, provider_id: str, config: ProviderSettings) -> bool:
        rule = _RULES.get(provider_id)
        if rule is None:
            raise UnknownProviderError(provider_id)

        value = getattr(config, rule.field)
        if not value:
            raise MissingCredentialError(rule.missing_message, provider_id)

        await self._sleep(self._local_latency if rule.local else self._cloud_latency)

        passed = rule.passes(value)
        logger.debug(f"{rule.label} connection check {'passed' if passed else 'failed'}")
        return passed
