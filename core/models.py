"""Domain models for persisted UI state."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class ThemeMode(str, Enum):
    """Theme mode for the application."""

    LIGHT = "light"
    DARK = "dark"
    SYSTEM = "system"


@dataclass
class Setting:
    """A raw key-value row in the persistence file."""

    key: str
    value: str
    category: str
    updated_at: datetime = field(default_factory=datetime.now)

    @classmethod
    def create(cls, key: str, value: str, category: str) -> "Setting":
        """Create a new setting."""
        return cls(
            key=key,
            value=value,
            category=category,
            updated_at=datetime.now(),
        )
