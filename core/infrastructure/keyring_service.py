"""
Secure credential storage using OS keyring.

Provides cross-platform secure storage for provider API keys using the
system's credential manager (GNOME Keyring, macOS Keychain, Windows
Credential Locker).
"""

import logging
import os
from typing import Optional

from core.constants import ANTHROPIC, GOOGLE, OPENAI

logger = logging.getLogger(__name__)


class KeyringService:
    """
    Secure credential storage using OS keyring.

    Credentials are addressed by provider id and stored under
    "<provider>_api_key" in the "loki" service.
    """

    SERVICE_NAME = "loki"

    # Environment variable names for read-only fallback
    ENV_VAR_NAMES = {
        OPENAI: "OPENAI_API_KEY",
        ANTHROPIC: "ANTHROPIC_API_KEY",
        GOOGLE: "GOOGLE_API_KEY",
    }

    def __init__(self) -> None:
        """Initialize KeyringService; availability is probed lazily."""
        self._available: Optional[bool] = None
        self._keyring_module = None

    @property
    def is_available(self) -> bool:
        """
        Check if keyring backend is available.

        Returns:
            True if keyring can be used, False otherwise.
        """
        if self._available is not None:
            return self._available

        try:
            import keyring
            from keyring.backends.fail import Keyring as FailKeyring

            self._keyring_module = keyring

            # Check if we have a working backend (not FailKeyring)
            backend = keyring.get_keyring()
            if isinstance(backend, FailKeyring):
                logger.warning(
                    "No secure keyring backend available. "
                    "API keys will be kept in the settings file."
                )
                self._available = False
            else:
                logger.debug(f"Using keyring backend: {type(backend).__name__}")
                self._available = True
        except ImportError:
            logger.warning("keyring library not installed")
            self._available = False
        except Exception as e:
            logger.warning(f"Failed to initialize keyring: {e}")
            self._available = False

        return self._available

    def _get_keyring(self):
        """Get the keyring module, importing if needed."""
        if self._keyring_module is not None:
            return self._keyring_module

        if self.is_available:
            return self._keyring_module
        return None

    @staticmethod
    def _get_credential_name(provider_id: str) -> str:
        return f"{provider_id.lower()}_api_key"

    def store_credential(self, provider_id: str, value: str) -> bool:
        """
        Store a provider API key in the keyring.

        Returns:
            True if stored successfully, False otherwise
        """
        if not self.is_available:
            logger.warning("Keyring not available, cannot store credential")
            return False

        try:
            keyring = self._get_keyring()
            credential_name = self._get_credential_name(provider_id)
            keyring.set_password(self.SERVICE_NAME, credential_name, value)
            logger.debug(f"Stored credential: {credential_name}")
            return True
        except Exception as e:
            logger.error(f"Failed to store credential for {provider_id}: {e}")
            return False

    def get_credential(self, provider_id: str, use_env: bool = True) -> Optional[str]:
        """
        Retrieve a provider API key.

        Args:
            provider_id: Provider identifier, e.g. "openai"
            use_env: Fall back to the provider's environment variable

        Returns:
            The credential value, or None if not found
        """
        if self.is_available:
            try:
                keyring = self._get_keyring()
                value = keyring.get_password(
                    self.SERVICE_NAME, self._get_credential_name(provider_id)
                )
                if value:
                    return value
            except Exception as e:
                logger.warning(f"Failed to get credential from keyring: {e}")

        if use_env:
            env_var = self.ENV_VAR_NAMES.get(provider_id.lower())
            if env_var:
                value = os.environ.get(env_var)
                if value:
                    logger.debug(f"Using {env_var} from environment")
                    return value

        return None

    def delete_credential(self, provider_id: str) -> bool:
        """
        Delete a provider API key from the keyring.

        Returns:
            True if deleted successfully, False otherwise
        """
        if not self.is_available:
            return False

        try:
            keyring = self._get_keyring()
            credential_name = self._get_credential_name(provider_id)
            keyring.delete_password(self.SERVICE_NAME, credential_name)
            logger.debug(f"Deleted credential: {credential_name}")
            return True
        except Exception as e:
            # keyring raises PasswordDeleteError if not found
            logger.debug(f"Could not delete credential for {provider_id}: {e}")
            return False
