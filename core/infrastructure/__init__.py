"""Infrastructure services backed by the host operating system."""

from core.infrastructure.keyring_service import KeyringService

__all__ = ["KeyringService"]
